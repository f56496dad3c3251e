# ============================================================================
# OPERATION RESULTS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core model - Result objects returned by schema operations
# PURPOSE: Success/failure reporting without raising past the manager
# CREATED: 19 OCT 2026
# EXPORTS: SchemaManagerResult, SchemaDefinitionCreateResult
# DEPENDENCIES: dataclasses, traceback
# ============================================================================
"""
Operation Results

Schema mutations report their outcome as a SchemaManagerResult. A failed
mutation carries the message and stack trace of the error that stopped it;
the schema is left unchanged.
"""

import traceback
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from core.models.schema_definition import SchemaDefinition
    from core.schema.type_schema import TypeSchema, TypeSchemaWarning


@dataclass
class SchemaManagerResult:
    """
    Result of a schema manager operation.

    Managers return this instead of raising for invalid mutations.
    """
    message: str = ""
    success: bool = True
    exception_message: Optional[str] = None
    stack_trace: Optional[str] = None

    # Set by simple schema generation
    namespace: Optional[str] = None
    schema_name: Optional[str] = None

    @classmethod
    def success_result(cls, message: str = "", **kwargs) -> "SchemaManagerResult":
        """Create a success result."""
        return cls(message=message, success=True, **kwargs)

    @classmethod
    def failure_result(cls, message: str, **kwargs) -> "SchemaManagerResult":
        """Create a failure result."""
        return cls(message=message, success=False, **kwargs)

    @classmethod
    def from_exception(cls, exc: BaseException, **kwargs) -> "SchemaManagerResult":
        """Create a failure result from an exception."""
        return cls(
            message=str(exc),
            success=False,
            exception_message=f"{type(exc).__name__}: {exc}",
            stack_trace="".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            ),
            **kwargs,
        )

    def __bool__(self) -> bool:
        return self.success

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "success": self.success,
            "exception_message": self.exception_message,
            "namespace": self.namespace,
            "schema_name": self.schema_name,
        }


@dataclass
class SchemaDefinitionCreateResult:
    """
    Result of writing a type schema into a schema definition.

    missing_key_columns and missing_foreign_key_columns list the columns
    that were synthesized because the types did not declare them.
    """
    schema_definition: "SchemaDefinition"
    type_schema: "TypeSchema"
    missing_key_columns: List[Any] = field(default_factory=list)
    missing_foreign_key_columns: List[Any] = field(default_factory=list)
    warnings: List["TypeSchemaWarning"] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SchemaManagerResult",
    "SchemaDefinitionCreateResult",
]
