# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Foundation - Core enums shared by models, inference and manager
# PURPOSE: Define the column data types and inference policy enums
# CREATED: 19 OCT 2026
# EXPORTS: DataType, DefaultDataTypeBehavior, TypeSchemaWarningKind,
#          NamingCollisionStrategy
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the schema engine.

Enum values are the persisted spellings; a schema document written by one
version must load in the next, so values never change once released.
"""

from enum import Enum


# ============================================================================
# COLUMN DATA TYPES
# ============================================================================

class DataType(str, Enum):
    """
    Abstract column data types.

    DEFAULT marks a field type the engine has no mapping for; what happens
    to such fields is decided by DefaultDataTypeBehavior.
    """
    BOOLEAN = "Boolean"
    INT = "Int"
    UINT = "UInt"
    LONG = "Long"
    ULONG = "ULong"
    DECIMAL = "Decimal"
    STRING = "String"
    BYTE_ARRAY = "ByteArray"
    DATE_TIME = "DateTime"
    DEFAULT = "Default"

    def is_integral(self) -> bool:
        """Check if the type can hold a foreign key value."""
        return self in (DataType.INT, DataType.UINT, DataType.LONG, DataType.ULONG)

    @classmethod
    def parse(cls, value: str) -> "DataType":
        """Parse a type name case-insensitively (``"string"`` -> STRING)."""
        if isinstance(value, DataType):
            return value
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        raise ValueError(f"Unknown data type: {value!r}")


# ============================================================================
# INFERENCE POLICY
# ============================================================================

class DefaultDataTypeBehavior(str, Enum):
    """How fields whose type maps to DataType.DEFAULT are handled."""
    INVALID = "Invalid"                          # Reject: raise on unmapped types
    EXCLUDE = "Exclude"                          # Skip the field
    INCLUDE_AS_STRING = "IncludeAsString"        # Store as String column
    INCLUDE_AS_BYTE_ARRAY = "IncludeAsByteArray"  # Store as ByteArray column


class TypeSchemaWarningKind(str, Enum):
    """Recoverable problems found while inferring a type schema."""
    KEY_PROPERTY_NOT_FOUND = "KeyPropertyNotFound"
    REFERENCING_PROPERTY_NOT_FOUND = "ReferencingPropertyNotFound"
    CHILD_PARENT_PROPERTY_NOT_FOUND = "ChildParentPropertyNotFound"
    DIFFERENT_NAMESPACES_FOUND = "DifferentNamespacesFound"


class NamingCollisionStrategy(str, Enum):
    """
    How a generated name that collides with a taken name is rewritten.

    Example for name ``Name`` with type label ``Table``:
        TYPE_SUFFIX         -> NameTable
        TYPE_PREFIX         -> TableName
        TRAILING_UNDERSCORE -> Name_
        LEADING_UNDERSCORE  -> _Name
        UNDERSCORE_DELIMIT  -> Table_Name
    """
    INVALID = "Invalid"
    TYPE_SUFFIX = "TypeSuffix"
    TYPE_PREFIX = "TypePrefix"
    TRAILING_UNDERSCORE = "TrailingUnderscore"
    LEADING_UNDERSCORE = "LeadingUnderscore"
    UNDERSCORE_DELIMIT = "UnderscoreDelimit"
    CUSTOM = "Custom"


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DataType",
    "DefaultDataTypeBehavior",
    "TypeSchemaWarningKind",
    "NamingCollisionStrategy",
]
