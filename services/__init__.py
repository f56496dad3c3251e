# ============================================================================
# SERVICES MODULE
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core - Business logic layer
# PURPOSE: Schema mutation, providers, name mapping and generation
# CREATED: 19 OCT 2026
# ============================================================================
"""
Services Module

Schema-level operations built on the core models and inference.

Usage:
    from services import SchemaManager, SchemaProvider

    provider = SchemaProvider()
    result = provider.create_schema_definition([Blog])
"""

from .augmentations import (
    SchemaManagerAugmentation,
    AddIdKeyColumnAugmentation,
    AddAuditColumnsAugmentation,
    CallableAugmentation,
)
from .generation import CodeWriter, SchemaCodeGenerator
from .schema_manager import SchemaManager
from .schema_provider import SchemaProvider, TypeInheritanceSchemaProvider
from .name_mapping import MappedSchemaDefinition

__all__ = [
    "SchemaManagerAugmentation",
    "AddIdKeyColumnAugmentation",
    "AddAuditColumnsAugmentation",
    "CallableAugmentation",
    "CodeWriter",
    "SchemaCodeGenerator",
    "SchemaManager",
    "SchemaProvider",
    "TypeInheritanceSchemaProvider",
    "MappedSchemaDefinition",
]
