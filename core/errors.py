# ============================================================================
# SCHEMA ERRORS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Foundation - Exception taxonomy
# PURPOSE: Typed errors for caller misuse and invalid schema mutations
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema Errors

Errors fall into three groups:
- Caller misuse (missing namespace, duplicate table list, unknown column)
  raises immediately.
- Invalid mutations (non-numeric foreign key source) raise inside the model
  layer and are converted into failure results by the SchemaManager.
- Persistence I/O errors are not wrapped and propagate as OSError.

Inference problems are never errors; they are accumulated as warnings.
"""

from typing import Any, Dict, List, Optional


class SchemaError(Exception):
    """Base class for schema engine errors."""


class ColumnNotFoundError(SchemaError, KeyError):
    """Raised when a column lookup on a table finds nothing."""

    def __init__(self, table_name: str, column_name: str):
        self.table_name = table_name
        self.column_name = column_name
        super().__init__(f"Column not found: {table_name}.{column_name}")

    def __str__(self) -> str:
        return self.args[0]


class TableNotFoundError(SchemaError, LookupError):
    """Raised when an operation names a table the schema does not contain."""

    def __init__(self, table_name: str, schema_name: Optional[str] = None):
        self.table_name = table_name
        self.schema_name = schema_name
        where = f" in schema {schema_name}" if schema_name else ""
        super().__init__(f"Table not found{where}: {table_name}")


class DuplicateTableError(SchemaError, ValueError):
    """Raised when a table list defines the same table name twice."""

    def __init__(self, table_name: str):
        self.table_name = table_name
        super().__init__(f"Table named {table_name} defined more than once")


class InvalidForeignKeyError(SchemaError, ValueError):
    """Raised when a foreign key cannot be wired (e.g. non-numeric column)."""

    def __init__(self, message: str, table_name: Optional[str] = None,
                 column_name: Optional[str] = None):
        self.table_name = table_name
        self.column_name = column_name
        super().__init__(message)


class SchemaExistsError(SchemaError):
    """Raised by set_new_schema when the named schema already exists."""

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        super().__init__(f"The schema named {schema_name} already exists")


class NamespaceNotSpecifiedError(SchemaError, ValueError):
    """Raised when code generation is asked to run without a namespace."""

    def __init__(self, message: str = "Namespace not specified"):
        super().__init__(message)


class SimpleSchemaParseError(SchemaError, ValueError):
    """
    Raised when a simple schema document is malformed.

    Attributes:
        errors: pydantic error dicts (loc/msg/type) when validation failed
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        self.errors = errors or []
        super().__init__(message)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SchemaError",
    "ColumnNotFoundError",
    "TableNotFoundError",
    "DuplicateTableError",
    "InvalidForeignKeyError",
    "SchemaExistsError",
    "NamespaceNotSpecifiedError",
    "SimpleSchemaParseError",
]
