# ============================================================================
# SCHEMA DEFINITION MODEL
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core model - Whole-schema container
# PURPOSE: Tables, foreign keys and cross-references of one schema
# CREATED: 19 OCT 2026
# EXPORTS: SchemaDefinition, XrefInfo
# DEPENDENCIES: pydantic
# ============================================================================
"""
Schema Definition Model

SchemaDefinition is the persisted unit: one JSON document per schema.

Design:
- tables and xrefs are ordered by insertion; re-adding a name replaces
  the entry and is reported as an update
- foreign_keys is the schema-wide list of foreign keys, upserted by
  identity (table_name, column name)
- after loading, foreign key records are re-linked to the column objects
  of their tables so that there is exactly one object per foreign key
"""

import threading
from typing import Any, Dict, Iterable, List, NamedTuple, Optional

from pydantic import BaseModel, Field, PrivateAttr, model_validator

from core.errors import DuplicateTableError
from core.models.column import ForeignKeyColumn
from core.models.results import SchemaManagerResult
from core.models.table import Table, XrefTable
from core.schema.naming import table_name_for


class XrefInfo(NamedTuple):
    """One side of a cross-reference, seen from table_name."""
    table_name: str
    xref_name: str
    other_table: str


class SchemaDefinition(BaseModel):
    """
    A named relational schema.

    file and last_exception are runtime state and never serialized.
    """

    name: str = "Default"
    db_type: str = "UnSpecified"
    tables: Dict[str, Table] = Field(default_factory=dict)
    foreign_keys: List[ForeignKeyColumn] = Field(default_factory=list)
    xrefs: Dict[str, XrefTable] = Field(default_factory=dict)

    file: Optional[str] = Field(default=None, exclude=True)

    _lock: Any = PrivateAttr(default_factory=threading.RLock)
    _last_exception: Optional[BaseException] = PrivateAttr(default=None)

    @model_validator(mode="after")
    def _relink_foreign_keys(self) -> "SchemaDefinition":
        relinked: List[ForeignKeyColumn] = []
        for fk in self.foreign_keys:
            table = self.tables.get(fk.table_name or "")
            column = table.foreign_keys.get(fk.name) if table else None
            relinked.append(column if column is not None else fk)
        self.foreign_keys = relinked
        for table in self.tables.values():
            table.connection_name = self.name
            target = table.name.lower()
            table.referencing_foreign_keys = [
                fk for fk in relinked if fk.referenced_table.lower() == target
            ]
        return self

    # =========================================================================
    # TABLES
    # =========================================================================

    @property
    def last_exception(self) -> Optional[BaseException]:
        return self._last_exception

    @last_exception.setter
    def last_exception(self, exc: Optional[BaseException]) -> None:
        self._last_exception = exc

    @property
    def table_list(self) -> List[Table]:
        with self._lock:
            return list(self.tables.values())

    def set_tables(self, tables: Iterable[Table]) -> None:
        """
        Replace all tables.

        Raises:
            DuplicateTableError: two tables share a name
        """
        by_name: Dict[str, Table] = {}
        for table in tables:
            if table.name in by_name:
                raise DuplicateTableError(table.name)
            by_name[table.name] = table
        with self._lock:
            self.tables = by_name
            for table in by_name.values():
                table.connection_name = self.name

    def get_table(self, table_name: str) -> Optional[Table]:
        with self._lock:
            return self.tables.get(table_name_for(table_name))

    def add_table(self, table: Table) -> SchemaManagerResult:
        """Add a table; an existing table of the same name is replaced."""
        with self._lock:
            table.connection_name = self.name
            if table.name in self.tables:
                self.tables[table.name] = table
                return SchemaManagerResult.success_result(f"Table {table.name} was updated.")
            self.tables[table.name] = table
            return SchemaManagerResult.success_result(f"Table {table.name} was added.")

    def remove_table(self, table_name: str) -> bool:
        with self._lock:
            return self.tables.pop(table_name_for(table_name), None) is not None

    # =========================================================================
    # FOREIGN KEYS
    # =========================================================================

    def add_foreign_key(self, fk: ForeignKeyColumn) -> None:
        """Add a foreign key, updating the existing record of the same identity."""
        with self._lock:
            for index, existing in enumerate(self.foreign_keys):
                if existing.same_identity(fk):
                    if existing is not fk:
                        self.foreign_keys[index] = fk
                    return
            self.foreign_keys.append(fk)

    def remove_foreign_key(self, table_name: str, column_name: str) -> bool:
        table_name = table_name_for(table_name)
        with self._lock:
            before = len(self.foreign_keys)
            self.foreign_keys = [
                fk for fk in self.foreign_keys if fk.identity != (table_name, column_name)
            ]
            return len(self.foreign_keys) != before

    def foreign_keys_for(self, table_name: str) -> List[ForeignKeyColumn]:
        """Foreign keys defined on table_name."""
        table_name = table_name_for(table_name)
        with self._lock:
            return [fk for fk in self.foreign_keys if fk.table_name == table_name]

    def referencing_foreign_keys_for(self, table_name: str) -> List[ForeignKeyColumn]:
        """Foreign keys pointing at table_name (table names compared case-insensitively)."""
        target = table_name_for(table_name).lower()
        with self._lock:
            return [fk for fk in self.foreign_keys if fk.referenced_table.lower() == target]

    # =========================================================================
    # XREFS
    # =========================================================================

    def get_xref(self, xref_name: str) -> Optional[XrefTable]:
        with self._lock:
            return self.xrefs.get(table_name_for(xref_name))

    def add_xref(self, xref: XrefTable) -> SchemaManagerResult:
        """Add a cross-reference; an existing one of the same name is replaced."""
        with self._lock:
            updated = xref.name in self.xrefs
            self.xrefs[xref.name] = xref
        verb = "updated" if updated else "added"
        return SchemaManagerResult.success_result(f"Xref {xref.name} was {verb}.")

    def remove_xref(self, xref_name: str) -> bool:
        with self._lock:
            return self.xrefs.pop(table_name_for(xref_name), None) is not None

    def left_xrefs_for(self, table_name: str) -> List[XrefInfo]:
        """Cross-references where table_name is the left side."""
        table_name = table_name_for(table_name)
        with self._lock:
            return [
                XrefInfo(table_name, xref.name, xref.right)
                for xref in self.xrefs.values()
                if xref.left == table_name
            ]

    def right_xrefs_for(self, table_name: str) -> List[XrefInfo]:
        """Cross-references where table_name is the right side."""
        table_name = table_name_for(table_name)
        with self._lock:
            return [
                XrefInfo(table_name, xref.name, xref.left)
                for xref in self.xrefs.values()
                if xref.right == table_name
            ]

    # =========================================================================
    # WHOLE-SCHEMA OPERATIONS
    # =========================================================================

    def combine_with(self, other: "SchemaDefinition") -> "SchemaDefinition":
        """Merge other's tables, foreign keys and xrefs into this schema."""
        for table in other.table_list:
            self.add_table(table)
        for fk in list(other.foreign_keys):
            self.add_foreign_key(fk)
        for xref in list(other.xrefs.values()):
            self.add_xref(xref)
        for table in self.table_list:
            table.referencing_foreign_keys = self.referencing_foreign_keys_for(table.name)
        return self

    def validate_references(self) -> List[str]:
        """
        Describe foreign keys whose source or target does not resolve.

        Returns:
            One message per problem; empty when the schema is consistent
        """
        problems = []
        with self._lock:
            for fk in self.foreign_keys:
                source = self.tables.get(fk.table_name or "")
                if source is None:
                    problems.append(f"{fk.reference_name}: source table {fk.table_name} not found")
                elif not source.has_column(fk.name):
                    problems.append(f"{fk.reference_name}: column {fk.table_name}.{fk.name} not found")
                if fk.referenced_table not in self.tables:
                    problems.append(
                        f"{fk.reference_name}: referenced table {fk.referenced_table} not found"
                    )
        return problems

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible dict of the persisted fields."""
        return self.model_dump(mode="json")

    def to_json(self, indent: Optional[int] = 2) -> str:
        return self.model_dump_json(indent=indent)

    @classmethod
    def from_json(cls, text: str) -> "SchemaDefinition":
        return cls.model_validate_json(text)

    def __str__(self) -> str:
        return "\n".join(str(table) for table in self.table_list)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SchemaDefinition",
    "XrefInfo",
]
