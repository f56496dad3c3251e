# ============================================================================
# TABLE MODELS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core model - Tables and cross-reference tables
# PURPOSE: Ordered column collections with key and foreign key bookkeeping
# CREATED: 19 OCT 2026
# EXPORTS: Table, XrefTable
# DEPENDENCIES: pydantic, threading
# ============================================================================
"""
Table Models

A Table owns an ordered set of columns. Foreign key columns are kept in
``columns`` (their position in the table) and indexed again in
``foreign_keys``; ``referencing_foreign_keys`` caches the foreign keys of
other tables that point here and is maintained by the schema.

Column mutations are serialized by a per-table re-entrant lock so that
bulk operations on different tables can run in parallel.
"""

import threading
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, PrivateAttr, field_validator, model_validator

from core.contracts import DataType
from core.errors import ColumnNotFoundError
from core.models.column import AnyColumn, Column, ForeignKeyColumn, KeyColumn
from core.schema.naming import class_name_for, table_name_for


class Table(BaseModel):
    """
    A table definition.

    Invariants:
        - name contains no whitespace
        - at most one column has key=True
        - every entry in foreign_keys is also the entry of the same name
          in columns
    """

    name: str
    class_name: Optional[str] = None
    columns: Dict[str, AnyColumn] = Field(default_factory=dict)
    foreign_keys: Dict[str, ForeignKeyColumn] = Field(default_factory=dict, exclude=True)
    referencing_foreign_keys: List[ForeignKeyColumn] = Field(default_factory=list, exclude=True)
    connection_name: Optional[str] = Field(default=None, exclude=True)

    _lock: Any = PrivateAttr(default_factory=threading.RLock)

    @field_validator("name")
    @classmethod
    def _strip_whitespace(cls, v: str) -> str:
        return table_name_for(v)

    @model_validator(mode="after")
    def _fill_derived(self) -> "Table":
        if not self.class_name:
            self.class_name = class_name_for(self.name)
        for column in self.columns.values():
            column.table_name = self.name
            column.table_class_name = self.class_name
            if isinstance(column, ForeignKeyColumn):
                self.foreign_keys[column.name] = column
        return self

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def __getitem__(self, column_name: str) -> Column:
        return self.get_column(column_name)

    def __contains__(self, column_name: str) -> bool:
        return self.has_column(column_name)

    def get_column(self, column_name: str) -> Column:
        """
        Get a column by name, searching columns then foreign keys.

        Raises:
            ValueError: blank column name
            ColumnNotFoundError: no such column
        """
        if not column_name or not column_name.strip():
            raise ValueError("Column name must not be blank")
        with self._lock:
            column = self.columns.get(column_name)
            if column is None:
                column = self.foreign_keys.get(column_name)
            if column is None:
                raise ColumnNotFoundError(self.name, column_name)
            return column

    def has_column(self, column_name: str) -> bool:
        with self._lock:
            return column_name in self.columns or column_name in self.foreign_keys

    @property
    def column_list(self) -> List[Column]:
        """Columns in insertion order."""
        with self._lock:
            return list(self.columns.values())

    @property
    def key_column(self) -> Optional[Column]:
        """The column marked as key, or None."""
        with self._lock:
            for column in self.columns.values():
                if column.key:
                    return column
        return None

    @property
    def key(self) -> Column:
        """The key column, or the default Id/ULong key when none is set."""
        return self.key_column or KeyColumn.default()

    # =========================================================================
    # MUTATION
    # =========================================================================

    def add_column(self, column: Column) -> bool:
        """
        Add a column. An existing column of the same name is left untouched.

        Returns:
            True if the column was added
        """
        with self._lock:
            if column.name in self.columns:
                return False
            column.table_name = self.name
            column.table_class_name = self.class_name
            self.columns[column.name] = column
            if isinstance(column, ForeignKeyColumn):
                self.foreign_keys[column.name] = column
            return True

    def add_column_named(
        self,
        column_name: str,
        data_type: DataType,
        allow_null: bool = True,
        max_length: Optional[int] = None,
    ) -> bool:
        return self.add_column(
            Column(name=column_name, data_type=data_type, allow_null=allow_null, max_length=max_length)
        )

    def remove_column(self, column_name: str) -> bool:
        """Remove a column; returns False if it was not there."""
        with self._lock:
            removed = self.columns.pop(column_name, None)
            removed_fk = self.foreign_keys.pop(column_name, None)
            return removed is not None or removed_fk is not None

    def replace_column(self, column: Column) -> None:
        """
        Replace the column of the same name, keeping its position.

        Raises:
            ColumnNotFoundError: no column of that name
        """
        with self._lock:
            if column.name not in self.columns:
                raise ColumnNotFoundError(self.name, column.name)
            column.table_name = self.name
            column.table_class_name = self.class_name
            self.columns[column.name] = column
            if isinstance(column, ForeignKeyColumn):
                self.foreign_keys[column.name] = column
            else:
                self.foreign_keys.pop(column.name, None)

    def set_key_column(self, column_name: str) -> KeyColumn:
        """
        Make the named column the key.

        Any other key column is demoted to a plain column that keeps its
        type and nullability.

        Raises:
            ColumnNotFoundError: no column of that name
        """
        with self._lock:
            target = self.get_column(column_name)
            for existing in list(self.columns.values()):
                if existing.key and existing.name != column_name:
                    if isinstance(existing, KeyColumn):
                        demoted = existing.to_plain_column()
                        self.replace_column(demoted)
                    else:
                        existing.key = False
            if isinstance(target, KeyColumn):
                return target
            key_column = KeyColumn.from_column(target)
            self.replace_column(key_column)
            return key_column

    def set_property_name(self, column_name: str, property_name: str) -> None:
        self.get_column(column_name).property_name = property_name

    def get_property_name(self, column_name: str) -> str:
        return self.get_column(column_name).property_name

    def set_class_name(self, class_name: str) -> None:
        """Set the class name and propagate it to every column."""
        with self._lock:
            self.class_name = class_name
            for column in self.columns.values():
                column.table_class_name = class_name
                if isinstance(column, ForeignKeyColumn):
                    column.referencing_class = class_name

    def __str__(self) -> str:
        lines = [f"{self.name} ({self.class_name})"]
        for column in self.column_list:
            marker = " [key]" if column.key else ""
            if isinstance(column, ForeignKeyColumn):
                marker = f" -> {column.referenced_table}.{column.referenced_key}"
            lines.append(f"    {column}{marker}")
        return "\n".join(lines)


class XrefTable(Table):
    """
    Many-to-many cross-reference between two tables.

    The name is always left + right.
    """

    left: str
    right: str

    @model_validator(mode="before")
    @classmethod
    def _derive_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("left") and data.get("right"):
            data = dict(data)
            data["left"] = table_name_for(data["left"])
            data["right"] = table_name_for(data["right"])
            data["name"] = f"{data['left']}{data['right']}"
        return data

    @property
    def left_column_name(self) -> str:
        return f"{self.left}Id"

    @property
    def right_column_name(self) -> str:
        return f"{self.right}Id"

    def other_side(self, table_name: str) -> Optional[str]:
        if table_name == self.left:
            return self.right
        if table_name == self.right:
            return self.left
        return None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "Table",
    "XrefTable",
]
