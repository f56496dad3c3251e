# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core module initialization
# PURPOSE: Export core contracts, models, and schema inference
# CREATED: 19 OCT 2026
# ============================================================================

from core.contracts import DataType, DefaultDataTypeBehavior, NamingCollisionStrategy
from core.models import (
    Column,
    KeyColumn,
    ForeignKeyColumn,
    Table,
    XrefTable,
    SchemaDefinition,
    SchemaManagerResult,
)
from core.schema import TypeSchemaBuilder, TypeSchema, describe

__all__ = [
    # Enums
    "DataType",
    "DefaultDataTypeBehavior",
    "NamingCollisionStrategy",
    # Models
    "Column",
    "KeyColumn",
    "ForeignKeyColumn",
    "Table",
    "XrefTable",
    "SchemaDefinition",
    "SchemaManagerResult",
    # Inference
    "TypeSchemaBuilder",
    "TypeSchema",
    "describe",
]
