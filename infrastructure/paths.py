# ============================================================================
# SCHEMA TEMP PATHS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Infrastructure - Path naming policy
# PURPOSE: Working directory names for generated schema artifacts
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema Temp Paths

Names the working directory for artifacts generated from a schema. This
is naming only; nothing here touches the filesystem.
"""

import posixpath
from typing import Any, Callable, Optional

from core.config import get_defaults


class SchemaTempPathProvider:
    """
    Path string for a schema's generated artifacts.

    Defaults to ``{root}/DaoTemp_{schema name}`` with forward slashes. A
    custom impl receives the schema and the (optional) type schema.
    """

    def __init__(
        self,
        root: Optional[str] = None,
        impl: Optional[Callable[[Any, Any], str]] = None,
    ):
        self.root = (root or get_defaults().schema.temp_dir).replace("\\", "/")
        self.impl = impl

    def get_schema_temp_path(self, schema: Any, type_schema: Any = None) -> str:
        if self.impl is not None:
            return self.impl(schema, type_schema)
        return posixpath.join(self.root, f"DaoTemp_{schema.name}")

    def __call__(self, schema: Any, type_schema: Any = None) -> str:
        return self.get_schema_temp_path(schema, type_schema)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SchemaTempPathProvider",
]
