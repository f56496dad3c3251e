# ============================================================================
# SIMPLE SCHEMA DOCUMENT
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core model - Hand-written schema input format
# PURPOSE: Strongly typed representation of a simple schema document
# CREATED: 19 OCT 2026
# EXPORTS: SimpleColumn, SimpleForeignKey, SimpleTable, SimpleXref,
#          SimpleSchemaDocument, parse_simple_schema
# DEPENDENCIES: pydantic, yaml
# ============================================================================
"""
Simple Schema Document

A compact, hand-written description of tables, foreign keys and
cross-references. Documents are JSON or YAML and are validated into typed
models before anything touches a schema.

Two shapes are accepted for each element. The typed shape:

    namespace: Blog.Data
    schema_name: Blog
    tables:
      - name: Post
        cols:
          - {name: Title, data_type: String, allow_null: false, max_length: 200}
        fks:
          - {column: BlogId, references: Blog}
    xrefs:
      - {left: Post, right: Tag}

and the compact legacy shape:

    {"nameSpace": "Blog.Data", "schemaName": "Blog",
     "tables": [{"name": "Post",
                 "cols": [{"Title": "String", "Null": false, "MaxLength": "200"}],
                 "fks": [{"BlogId": "Blog"}]}],
     "xrefs": [["Post", "Tag"]]}
"""

from typing import Any, List, Optional, Union

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from core.contracts import DataType
from core.errors import SimpleSchemaParseError


_LEGACY_COLUMN_OPTIONS = {"Null", "MaxLength"}


class SimpleColumn(BaseModel):
    """A column entry; nullable unless stated otherwise."""

    name: str = Field(..., min_length=1)
    data_type: DataType
    allow_null: bool = True
    max_length: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _from_legacy(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "name" in data:
            return data
        names = [key for key in data if key not in _LEGACY_COLUMN_OPTIONS]
        if len(names) != 1:
            raise ValueError(f"Column entry must name exactly one column: {data}")
        name = names[0]
        return {
            "name": name,
            "data_type": data[name],
            "allow_null": data.get("Null", True),
            "max_length": data.get("MaxLength") or None,
        }

    @field_validator("data_type", mode="before")
    @classmethod
    def _parse_data_type(cls, v):
        if isinstance(v, str):
            return DataType.parse(v)
        return v


class SimpleForeignKey(BaseModel):
    """Column of the owning table that references another table's key."""

    column: str = Field(..., min_length=1)
    references: str = Field(..., min_length=1)

    @model_validator(mode="before")
    @classmethod
    def _from_legacy(cls, data: Any) -> Any:
        if isinstance(data, dict) and "column" not in data:
            if len(data) != 1:
                raise ValueError(f"Foreign key entry must have exactly one mapping: {data}")
            column, references = next(iter(data.items()))
            return {"column": column, "references": references}
        return data


class SimpleXref(BaseModel):
    """Many-to-many pair of table names."""

    left: str = Field(..., min_length=1)
    right: str = Field(..., min_length=1)

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) != 2:
                raise ValueError(f"Xref must be a [left, right] pair: {data}")
            return {"left": data[0], "right": data[1]}
        return data


class SimpleTable(BaseModel):
    name: str = Field(..., min_length=1)
    cols: List[SimpleColumn] = Field(default_factory=list)
    fks: List[SimpleForeignKey] = Field(default_factory=list)


class SimpleSchemaDocument(BaseModel):
    """
    A whole simple schema document.

    namespace and schema_name are required; generation cannot run without
    either of them.
    """

    model_config = ConfigDict(populate_by_name=True)

    namespace: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("namespace", "nameSpace")
    )
    schema_name: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("schema_name", "schemaName")
    )
    tables: List[SimpleTable] = Field(default_factory=list)
    xrefs: List[SimpleXref] = Field(default_factory=list)


def parse_simple_schema(source: Union[str, bytes, dict]) -> SimpleSchemaDocument:
    """
    Parse a simple schema document from JSON/YAML text or a dict.

    Raises:
        SimpleSchemaParseError: text is not a mapping or fails validation
    """
    if isinstance(source, (str, bytes)):
        try:
            data = yaml.safe_load(source)
        except yaml.YAMLError as e:
            raise SimpleSchemaParseError(f"Simple schema is not valid JSON or YAML: {e}") from e
    else:
        data = source

    if not isinstance(data, dict):
        raise SimpleSchemaParseError("Simple schema document must be a mapping")

    try:
        return SimpleSchemaDocument.model_validate(data)
    except ValidationError as e:
        raise SimpleSchemaParseError(
            f"Invalid simple schema: {e.error_count()} error(s)",
            errors=e.errors(include_url=False),
        ) from e


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SimpleColumn",
    "SimpleForeignKey",
    "SimpleXref",
    "SimpleTable",
    "SimpleSchemaDocument",
    "parse_simple_schema",
]
