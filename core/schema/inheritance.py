# ============================================================================
# TYPE INHERITANCE
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core - Ancestor chains of described types
# PURPOSE: Support table-per-level schemas for inheritance hierarchies
# CREATED: 19 OCT 2026
# EXPORTS: TypeInheritanceDescriptor, type_extends
# DEPENDENCIES: core.schema.descriptors
# ============================================================================
"""
Type Inheritance

A TypeInheritanceDescriptor lists a type and its ancestors, most-derived
first, stopping below the universal base (BaseModel for pydantic types).

    class Animal(BaseModel): ...
    class Dog(Animal): ...

    TypeInheritanceDescriptor(Dog).chain    # (Dog, Animal)
    TypeInheritanceDescriptor(Dog).root_type  # Animal
"""

from typing import Any, Tuple

from core.schema.descriptors import TypeDescriptor, describe


class TypeInheritanceDescriptor:
    """Ancestor chain of one type."""

    def __init__(self, type_: Any):
        self.type = describe(type_)
        chain = []
        seen = set()
        current = self.type
        while current is not None and current not in seen:
            seen.add(current)
            chain.append(current)
            current = current.supertype()
        self._chain: Tuple[TypeDescriptor, ...] = tuple(chain)

    @property
    def chain(self) -> Tuple[TypeDescriptor, ...]:
        """Most-derived first."""
        return self._chain

    @property
    def root_type(self) -> TypeDescriptor:
        return self._chain[-1]

    @property
    def is_derived(self) -> bool:
        return len(self._chain) > 1

    def extends(self, other: Any) -> bool:
        """True when other is a proper ancestor of this type."""
        return describe(other) in self._chain[1:]

    def __str__(self) -> str:
        lines = []
        for depth, level in enumerate(reversed(self._chain)):
            indent = "  " * depth
            lines.append(f"{indent}{level.name}")
            for field_descriptor in level.declared_fields():
                lines.append(f"{indent}  - {field_descriptor.name}: {field_descriptor.data_type.value}")
        return "\n".join(lines)


def type_extends(type_: Any, other: Any) -> bool:
    """True when type_ derives from other."""
    return TypeInheritanceDescriptor(type_).extends(other)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "TypeInheritanceDescriptor",
    "type_extends",
]
