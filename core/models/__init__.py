# ============================================================================
# SCHEMA MODELS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core - Pydantic models for schemas
# PURPOSE: Export schema, table, column and document models
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema models.

The relational side of the engine: columns, tables, schema definitions,
operation results, name maps and the simple schema input document.
"""

from core.models.column import Column, KeyColumn, ForeignKeyColumn, AnyColumn
from core.models.table import Table, XrefTable
from core.models.results import SchemaManagerResult, SchemaDefinitionCreateResult
from core.models.schema_definition import SchemaDefinition, XrefInfo
from core.models.name_map import (
    TableNameToClassName,
    ColumnNameToPropertyName,
    SchemaNameMap,
)
from core.models.simple_schema import (
    SimpleColumn,
    SimpleForeignKey,
    SimpleXref,
    SimpleTable,
    SimpleSchemaDocument,
    parse_simple_schema,
)

__all__ = [
    # Columns
    "Column",
    "KeyColumn",
    "ForeignKeyColumn",
    "AnyColumn",
    # Tables
    "Table",
    "XrefTable",
    # Schema
    "SchemaDefinition",
    "XrefInfo",
    # Results
    "SchemaManagerResult",
    "SchemaDefinitionCreateResult",
    # Name map
    "TableNameToClassName",
    "ColumnNameToPropertyName",
    "SchemaNameMap",
    # Simple schema
    "SimpleColumn",
    "SimpleForeignKey",
    "SimpleXref",
    "SimpleTable",
    "SimpleSchemaDocument",
    "parse_simple_schema",
]
