# ============================================================================
# TYPE SCHEMA
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core - Inferred relationships between application types
# PURPOSE: Immutable result of type-graph inference
# CREATED: 19 OCT 2026
# EXPORTS: TypeFk, TypeXref, TypeSchemaWarning, WarningCollector, TypeSchema
# DEPENDENCIES: hashlib
# ============================================================================
"""
Type Schema

The output of inference: which types become tables, which one-to-many and
many-to-many relationships connect them, and what was missing along the
way.

Relationship records are values. Two TypeFk records describing the same
relationship are equal no matter how they were discovered, and a TypeXref
equals its mirror image (left and right swapped).
"""

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple

from core.contracts import DefaultDataTypeBehavior, TypeSchemaWarningKind
from core.schema.descriptors import FieldDescriptor, TypeDescriptor

logger = logging.getLogger(__name__)


def _sha1(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


# ============================================================================
# RELATIONSHIPS
# ============================================================================

@dataclass(frozen=True, eq=False)
class TypeFk:
    """
    One-to-many relationship: primary_key_type has a collection of
    foreign_key_type, whose foreign_key_property references the parent key.
    """
    primary_key_type: TypeDescriptor
    primary_key_property: FieldDescriptor
    foreign_key_type: TypeDescriptor
    foreign_key_property: FieldDescriptor
    child_parent_property: FieldDescriptor
    collection_property: FieldDescriptor

    @property
    def hash(self) -> str:
        return _sha1(
            "|".join((
                self.primary_key_type.full_name,
                self.primary_key_property.name,
                self.foreign_key_type.full_name,
                self.foreign_key_property.name,
                self.child_parent_property.name,
                self.collection_property.name,
            ))
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, TypeFk):
            return NotImplemented
        return self.hash == other.hash

    def __hash__(self) -> int:
        return hash(self.hash)

    def __str__(self) -> str:
        return (
            f"{self.foreign_key_type.name}.{self.foreign_key_property.name} -> "
            f"{self.primary_key_type.name}.{self.primary_key_property.name}"
        )


@dataclass(frozen=True, eq=False)
class TypeXref:
    """Many-to-many relationship: left and right each hold a collection of the other."""
    left: TypeDescriptor
    right: TypeDescriptor
    left_collection_property: Optional[FieldDescriptor] = None
    right_collection_property: Optional[FieldDescriptor] = None

    @property
    def hash(self) -> str:
        return _sha1("|".join(sorted((self.left.full_name, self.right.full_name))))

    def __eq__(self, other) -> bool:
        if not isinstance(other, TypeXref):
            return NotImplemented
        return self.hash == other.hash

    def __hash__(self) -> int:
        return hash(self.hash)

    def __str__(self) -> str:
        return f"{self.left.name} <-> {self.right.name}"


# ============================================================================
# WARNINGS
# ============================================================================

@dataclass(frozen=True)
class TypeSchemaWarning:
    """A recoverable problem found during inference."""
    kind: TypeSchemaWarningKind
    parent_type: Optional[str] = None
    foreign_key_type: Optional[str] = None
    namespaces: Tuple[str, ...] = ()
    message: str = ""

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class WarningCollector:
    """
    Ordered, de-duplicated accumulator of inference warnings.

    Passed explicitly through every inference call. Each new warning is
    logged at WARNING level as it is added.
    """

    def __init__(self) -> None:
        self._warnings: List[TypeSchemaWarning] = []
        self._seen = set()

    def add(self, warning: TypeSchemaWarning) -> bool:
        if warning in self._seen:
            return False
        self._seen.add(warning)
        self._warnings.append(warning)
        logger.warning(f"Type schema warning - {warning}")
        return True

    def extend(self, warnings: Iterable[TypeSchemaWarning]) -> None:
        for warning in warnings:
            self.add(warning)

    def of_kind(self, kind: TypeSchemaWarningKind) -> List[TypeSchemaWarning]:
        return [w for w in self._warnings if w.kind == kind]

    def to_list(self) -> List[TypeSchemaWarning]:
        return list(self._warnings)

    def __iter__(self) -> Iterator[TypeSchemaWarning]:
        return iter(list(self._warnings))

    def __len__(self) -> int:
        return len(self._warnings)

    def __bool__(self) -> bool:
        return bool(self._warnings)


# ============================================================================
# TYPE SCHEMA
# ============================================================================

@dataclass(frozen=True)
class TypeSchema:
    """
    Immutable inference result.

    tables is in discovery order; that order drives table creation when the
    type schema is written into a schema definition.
    """
    tables: Tuple[TypeDescriptor, ...]
    foreign_keys: Tuple[TypeFk, ...] = ()
    xrefs: Tuple[TypeXref, ...] = ()
    warnings: Tuple[TypeSchemaWarning, ...] = ()
    default_data_type_behavior: DefaultDataTypeBehavior = DefaultDataTypeBehavior.EXCLUDE
    given_name: Optional[str] = field(default=None, compare=False)

    @property
    def hash(self) -> str:
        return _sha1(str(self))

    @property
    def name(self) -> str:
        return self.given_name or self.hash

    def foreign_keys_for(self, descriptor: TypeDescriptor) -> List[TypeFk]:
        """Relationships where descriptor is the child."""
        return [fk for fk in self.foreign_keys if fk.foreign_key_type == descriptor]

    def __str__(self) -> str:
        lines = ["Tables:"]
        lines.extend(f"  {t.full_name}" for t in self.tables)
        lines.append("ForeignKeys:")
        lines.extend(f"  {fk}" for fk in self.foreign_keys)
        lines.append("Xrefs:")
        lines.extend(f"  {x}" for x in self.xrefs)
        return "\n".join(lines)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "TypeFk",
    "TypeXref",
    "TypeSchemaWarning",
    "WarningCollector",
    "TypeSchema",
]
