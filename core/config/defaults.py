# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for schema storage, inference and mapping
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for the schema manager and the type inference
pipeline. These can be overridden via environment variables or by passing
explicit values to the components.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from core.contracts import DefaultDataTypeBehavior, NamingCollisionStrategy


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class SchemaDefaults:
    """
    Defaults for schema persistence and the schema manager.

    schema_dir holds one ``{name}.json`` document per schema; temp_dir is
    the root handed out by the temp path provider.
    """
    schema_dir: str = os.path.join(".schema_data", "Schemas")
    temp_dir: str = ".schema_data"
    auto_save: bool = True
    backup_existing: bool = False

    # Field name treated as the key when no field is explicitly marked
    key_field_name: str = "Id"

    # Lazily loaded current schema is named "{prefix}_{julian date}"
    default_schema_prefix: str = "Default"

    # Name used by the provider when no namespace-derived name is usable
    default_schema_name: str = "SchemaDefault"

    @classmethod
    def from_env(cls) -> "SchemaDefaults":
        """Create from environment variables."""
        temp_dir = os.getenv("SCHEMA_TEMP_DIR", ".schema_data")
        return cls(
            schema_dir=os.getenv("SCHEMA_DIR", os.path.join(temp_dir, "Schemas")),
            temp_dir=temp_dir,
            auto_save=_env_bool("SCHEMA_AUTO_SAVE", True),
            backup_existing=_env_bool("SCHEMA_BACKUP_EXISTING", False),
            key_field_name=os.getenv("SCHEMA_KEY_FIELD_NAME", "Id"),
        )


@dataclass(frozen=True)
class InferenceDefaults:
    """
    Defaults for type-graph inference and schema writing.

    Controls the optional Id/audit augmentations and the fallback for
    field types with no column mapping.
    """
    add_id_field: bool = False
    add_audit_fields: bool = False
    include_created_by: bool = False
    include_modified_by: bool = False
    default_data_type_behavior: DefaultDataTypeBehavior = DefaultDataTypeBehavior.EXCLUDE
    naming_collision_strategy: NamingCollisionStrategy = NamingCollisionStrategy.TYPE_SUFFIX

    @classmethod
    def from_env(cls) -> "InferenceDefaults":
        """Create from environment variables."""
        return cls(
            add_id_field=_env_bool("SCHEMA_ADD_ID_FIELD", False),
            add_audit_fields=_env_bool("SCHEMA_ADD_AUDIT_FIELDS", False),
            include_created_by=_env_bool("SCHEMA_INCLUDE_CREATED_BY", False),
            include_modified_by=_env_bool("SCHEMA_INCLUDE_MODIFIED_BY", False),
            default_data_type_behavior=DefaultDataTypeBehavior(
                os.getenv("SCHEMA_DEFAULT_DATA_TYPE_BEHAVIOR", DefaultDataTypeBehavior.EXCLUDE.value)
            ),
            naming_collision_strategy=NamingCollisionStrategy(
                os.getenv("SCHEMA_NAMING_COLLISION_STRATEGY", NamingCollisionStrategy.TYPE_SUFFIX.value)
            ),
        )


@dataclass(frozen=True)
class MappingDefaults:
    """Defaults for bulk class/property name mapping."""
    max_workers: int = 4

    @classmethod
    def from_env(cls) -> "MappingDefaults":
        """Create from environment variables."""
        return cls(
            max_workers=int(os.getenv("SCHEMA_MAPPING_WORKERS", 4)),
        )


@dataclass(frozen=True)
class Defaults:
    """Container for all defaults."""
    schema: SchemaDefaults = field(default_factory=SchemaDefaults)
    inference: InferenceDefaults = field(default_factory=InferenceDefaults)
    mapping: MappingDefaults = field(default_factory=MappingDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment."""
        return cls(
            schema=SchemaDefaults.from_env(),
            inference=InferenceDefaults.from_env(),
            mapping=MappingDefaults.from_env(),
        )


# Global defaults instance (lazy loaded)
_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SchemaDefaults",
    "InferenceDefaults",
    "MappingDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
