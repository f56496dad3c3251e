# ============================================================================
# SCHEMA INFERENCE MODULE
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core - Type introspection and relationship inference
# PURPOSE: Export descriptors, naming strategy and inference
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema inference: from application types to relationships.
"""

from core.schema.naming import (
    class_name_for,
    property_name_for,
    resolve_collision,
    NameFormatter,
    EchoNameFormatter,
    SchemaNameMapNameFormatter,
    CollisionAwareNameFormatter,
    TypeTableNameProvider,
    EchoTypeTableNameProvider,
    FunctionTableNameProvider,
    DataNamespaces,
)
from core.schema.descriptors import (
    Key,
    ColumnType,
    FieldDescriptor,
    TypeDescriptor,
    PydanticTypeDescriptor,
    DeclaredType,
    describe,
)
from core.schema.type_schema import (
    TypeFk,
    TypeXref,
    TypeSchemaWarning,
    WarningCollector,
    TypeSchema,
)
from core.schema.inference import TypeSchemaBuilder, create_type_schema
from core.schema.inheritance import TypeInheritanceDescriptor, type_extends

__all__ = [
    # Naming
    "class_name_for",
    "property_name_for",
    "resolve_collision",
    "NameFormatter",
    "EchoNameFormatter",
    "SchemaNameMapNameFormatter",
    "CollisionAwareNameFormatter",
    "TypeTableNameProvider",
    "EchoTypeTableNameProvider",
    "FunctionTableNameProvider",
    "DataNamespaces",
    # Descriptors
    "Key",
    "ColumnType",
    "FieldDescriptor",
    "TypeDescriptor",
    "PydanticTypeDescriptor",
    "DeclaredType",
    "describe",
    # Inference
    "TypeFk",
    "TypeXref",
    "TypeSchemaWarning",
    "WarningCollector",
    "TypeSchema",
    "TypeSchemaBuilder",
    "create_type_schema",
    "TypeInheritanceDescriptor",
    "type_extends",
]
