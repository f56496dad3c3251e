# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Infrastructure - Persistence, locking and paths
# PURPOSE: Schema documents on disk and the locks guarding them
# CREATED: 19 OCT 2026
# ============================================================================
"""
Infrastructure module for the schema engine.

Provides:
- JsonFileSchemaStore: JSON documents, one per schema
- LockService: process-wide locks keyed by resolved file path
- SchemaTempPathProvider: naming policy for generated artifact folders

Usage:
    from infrastructure import JsonFileSchemaStore, LockService

    store = JsonFileSchemaStore("/data/Schemas")
    with LockService().path_lock(store.path_for("Blog")):
        schema = store.load("Blog")
"""

from infrastructure.schema_store import (
    SchemaStore,
    JsonFileSchemaStore,
    get_schema_store,
    julian_day,
)
from infrastructure.locking import LockService
from infrastructure.paths import SchemaTempPathProvider

__all__ = [
    # Persistence
    'SchemaStore',
    'JsonFileSchemaStore',
    'get_schema_store',
    'julian_day',
    # Locking
    'LockService',
    # Paths
    'SchemaTempPathProvider',
]
