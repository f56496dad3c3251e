# ============================================================================
# COLUMN MODELS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core model - Table columns
# PURPOSE: Column, key column and foreign key column definitions
# CREATED: 19 OCT 2026
# EXPORTS: Column, KeyColumn, ForeignKeyColumn, AnyColumn
# DEPENDENCIES: pydantic
# ============================================================================
"""
Column Models

Three variants share one shape:
- Column            plain column
- KeyColumn         primary key; never nullable, always key
- ForeignKeyColumn  column referencing another table's key

The ``kind`` field discriminates the variants so a persisted schema
restores each column as the variant it was saved as.
"""

from typing import Annotated, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.contracts import DataType
from core.errors import InvalidForeignKeyError


class Column(BaseModel):
    """
    A named, typed column of a table.

    property_name falls back to name whenever it is unset or cleared.
    """

    model_config = ConfigDict(validate_assignment=True)

    kind: Literal["column"] = "column"

    name: str = Field(..., min_length=1)
    data_type: DataType = DataType.DEFAULT
    allow_null: bool = True
    max_length: Optional[int] = Field(default=None, ge=0)
    key: bool = False

    # Owning table, filled in when the column is added to a table
    table_name: Optional[str] = None
    table_class_name: Optional[str] = None

    property_name: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("data_type", mode="before")
    @classmethod
    def _parse_data_type(cls, v):
        if isinstance(v, str) and not isinstance(v, DataType):
            return DataType.parse(v)
        return v

    @field_validator("property_name")
    @classmethod
    def _default_property_name(cls, v, info):
        if not v:
            return info.data.get("name")
        return v

    def copy_fields(self) -> dict:
        """Fields shared by every column variant, for converting between them."""
        return {
            "name": self.name,
            "data_type": self.data_type,
            "allow_null": self.allow_null,
            "max_length": self.max_length,
            "table_name": self.table_name,
            "table_class_name": self.table_class_name,
            "property_name": self.property_name,
        }

    def to_plain_column(self) -> "Column":
        """A plain, non-key column carrying this column's fields."""
        return Column(**self.copy_fields())

    def __str__(self) -> str:
        nullable = "NULL" if self.allow_null else "NOT NULL"
        length = f"({self.max_length})" if self.max_length else ""
        return f"{self.name} {self.data_type.value}{length} {nullable}"


class KeyColumn(Column):
    """
    Primary key column.

    allow_null is always False and key always True; values passed at
    construction or assigned later are overridden.
    """

    kind: Literal["key"] = "key"

    allow_null: bool = Field(default=False, validate_default=True)
    key: bool = Field(default=True, validate_default=True)

    @field_validator("allow_null")
    @classmethod
    def _never_null(cls, v):
        return False

    @field_validator("key")
    @classmethod
    def _always_key(cls, v):
        return True

    @classmethod
    def from_column(cls, column: Column) -> "KeyColumn":
        """Promote a column to a key column, keeping its name and type."""
        return cls(**column.copy_fields())

    @classmethod
    def default(cls, name: str = "Id") -> "KeyColumn":
        """The key assumed for tables that declare none."""
        return cls(name=name, data_type=DataType.ULONG)


class ForeignKeyColumn(Column):
    """
    Column referencing the key of another table.

    Identity is (table_name, name): the table the column lives on plus its
    own name. Two records with that identity are the same foreign key.
    """

    kind: Literal["foreign_key"] = "foreign_key"

    referenced_table: str = ""
    referenced_key: str = "Id"
    referencing_class: Optional[str] = None
    referenced_class: Optional[str] = None
    reference_name: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("reference_name")
    @classmethod
    def _default_reference_name(cls, v, info):
        if v:
            return v
        data = info.data
        if not data.get("name") or not data.get("referenced_table"):
            return v
        return f"FK_{data.get('table_name') or ''}_{data['referenced_table']}_{data['name']}"

    @property
    def identity(self) -> Tuple[Optional[str], str]:
        return (self.table_name, self.name)

    def same_identity(self, other: "ForeignKeyColumn") -> bool:
        return self.identity == other.identity

    @classmethod
    def from_column(
        cls,
        column: Column,
        referenced_table: str,
        referenced_key: str = "Id",
        referenced_class: Optional[str] = None,
    ) -> "ForeignKeyColumn":
        """
        Turn a column into a foreign key.

        Raises:
            InvalidForeignKeyError: column is not an integral type
        """
        if not column.data_type.is_integral():
            raise InvalidForeignKeyError(
                "The specified column must be a number type",
                table_name=column.table_name,
                column_name=column.name,
            )
        return cls(
            **column.copy_fields(),
            referenced_table=referenced_table,
            referenced_key=referenced_key,
            referencing_class=column.table_class_name,
            referenced_class=referenced_class,
        )


AnyColumn = Annotated[
    Union[KeyColumn, ForeignKeyColumn, Column],
    Field(discriminator="kind"),
]


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "Column",
    "KeyColumn",
    "ForeignKeyColumn",
    "AnyColumn",
]
