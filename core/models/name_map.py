# ============================================================================
# SCHEMA NAME MAP
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core model - Table/column to class/property name mapping
# PURPOSE: Persistable overrides for generated class and property names
# CREATED: 19 OCT 2026
# EXPORTS: TableNameToClassName, ColumnNameToPropertyName, SchemaNameMap
# DEPENDENCIES: pydantic
# ============================================================================
"""
Schema Name Map

Maps table names to class names and (table, column) pairs to property
names. Unmapped names fall back to the name itself.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class TableNameToClassName(BaseModel):
    table_name: str
    class_name: str


class ColumnNameToPropertyName(BaseModel):
    table_name: str
    column_name: str
    property_name: str


class SchemaNameMap(BaseModel):
    """Class and property name overrides for one schema."""

    table_names_to_class_names: List[TableNameToClassName] = Field(default_factory=list)
    column_names_to_property_names: List[ColumnNameToPropertyName] = Field(default_factory=list)

    def _find_table(self, table_name: str) -> Optional[TableNameToClassName]:
        for entry in self.table_names_to_class_names:
            if entry.table_name == table_name:
                return entry
        return None

    def _find_column(self, table_name: str, column_name: str) -> Optional[ColumnNameToPropertyName]:
        for entry in self.column_names_to_property_names:
            if entry.table_name == table_name and entry.column_name == column_name:
                return entry
        return None

    def get_class_name(self, table_name: str) -> str:
        entry = self._find_table(table_name)
        return entry.class_name if entry else table_name

    def get_property_name(self, table_name: str, column_name: str) -> str:
        entry = self._find_column(table_name, column_name)
        return entry.property_name if entry else column_name

    def set_class_name(self, table_name: str, class_name: str) -> None:
        entry = self._find_table(table_name)
        if entry:
            entry.class_name = class_name
        else:
            self.table_names_to_class_names.append(
                TableNameToClassName(table_name=table_name, class_name=class_name)
            )

    def set_property_name(self, table_name: str, column_name: str, property_name: str) -> None:
        entry = self._find_column(table_name, column_name)
        if entry:
            entry.property_name = property_name
        else:
            self.column_names_to_property_names.append(
                ColumnNameToPropertyName(
                    table_name=table_name, column_name=column_name, property_name=property_name
                )
            )

    def columns_for(self, table_name: str) -> List[ColumnNameToPropertyName]:
        return [e for e in self.column_names_to_property_names if e.table_name == table_name]


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "TableNameToClassName",
    "ColumnNameToPropertyName",
    "SchemaNameMap",
]
