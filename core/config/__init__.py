# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the schema engine.
"""

from core.config.defaults import (
    SchemaDefaults,
    InferenceDefaults,
    MappingDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "SchemaDefaults",
    "InferenceDefaults",
    "MappingDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
