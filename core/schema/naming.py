# ============================================================================
# NAMING STRATEGY
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core - Identifier derivation and collision handling
# PURPOSE: Derive class/property names from table/column names
# CREATED: 19 OCT 2026
# EXPORTS: class_name_for, property_name_for, resolve_collision,
#          NameFormatter, EchoNameFormatter, SchemaNameMapNameFormatter,
#          CollisionAwareNameFormatter, TypeTableNameProvider,
#          EchoTypeTableNameProvider, FunctionTableNameProvider, DataNamespaces
# DEPENDENCIES: re, core.contracts
# ============================================================================
"""
Naming Strategy

Table and column names come from whatever the user or the type graph
provided; class and property names must be valid identifiers in generated
code. This module owns that mapping.

Rules for class_name_for / property_name_for:
- words are split on whitespace, underscores and other non-alphanumerics
- each word gets an upper-cased first letter, the rest is kept
- non-alphanumeric characters are dropped
- a result starting with a digit gets a leading underscore
- empty input gives empty output

Usage:
    class_name_for("blog post")      # "BlogPost"
    class_name_for("2fa_tokens")     # "_2faTokens"
    resolve_collision("Name", {"Name"}, NamingCollisionStrategy.TYPE_SUFFIX)
    # "NameTable"
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Collection, Optional

from core.contracts import NamingCollisionStrategy


_WORD_SPLIT = re.compile(r"[^0-9A-Za-z]+")
_WHITESPACE = re.compile(r"\s")


def _pascal_case(name: Optional[str]) -> str:
    if not name:
        return ""
    words = [word for word in _WORD_SPLIT.split(name) if word]
    result = "".join(word[0].upper() + word[1:] for word in words)
    if result and result[0].isdigit():
        result = f"_{result}"
    return result


def table_name_for(name: Optional[str]) -> str:
    """Canonical table name: the given name with all whitespace removed."""
    return _WHITESPACE.sub("", name or "")


def class_name_for(name: Optional[str]) -> str:
    """Derive a class name from a table name."""
    return _pascal_case(name)


def property_name_for(name: Optional[str]) -> str:
    """Derive a property name from a column name."""
    return _pascal_case(name)


def resolve_collision(
    name: str,
    taken: Collection[str],
    strategy: NamingCollisionStrategy = NamingCollisionStrategy.TYPE_SUFFIX,
    type_label: str = "Table",
    custom: Optional[Callable[[str], str]] = None,
) -> str:
    """
    Rewrite name until it no longer collides with anything in taken.

    Args:
        name: Candidate name
        taken: Names already in use
        strategy: How to rewrite on collision
        type_label: Label used by the prefix/suffix/delimit strategies
        custom: Rewrite function for NamingCollisionStrategy.CUSTOM

    Raises:
        ValueError: strategy is INVALID, or CUSTOM without a callable
    """
    if name not in taken:
        return name

    if strategy == NamingCollisionStrategy.TYPE_SUFFIX:
        rewrite = lambda n: f"{n}{type_label}"
    elif strategy == NamingCollisionStrategy.TYPE_PREFIX:
        rewrite = lambda n: f"{type_label}{n}"
    elif strategy == NamingCollisionStrategy.TRAILING_UNDERSCORE:
        rewrite = lambda n: f"{n}_"
    elif strategy == NamingCollisionStrategy.LEADING_UNDERSCORE:
        rewrite = lambda n: f"_{n}"
    elif strategy == NamingCollisionStrategy.UNDERSCORE_DELIMIT:
        rewrite = lambda n: f"{type_label}_{n}"
    elif strategy == NamingCollisionStrategy.CUSTOM:
        if custom is None:
            raise ValueError("Custom collision strategy requires a rewrite function")
        rewrite = custom
    else:
        raise ValueError(f"Invalid naming collision strategy: {strategy}")

    candidate = rewrite(name)
    # Bounded so a rewrite that never changes the name cannot spin forever
    for _ in range(32):
        if candidate not in taken:
            return candidate
        candidate = rewrite(candidate)
    raise ValueError(f"Unable to resolve naming collision for {name}")


# ============================================================================
# NAME FORMATTERS
# ============================================================================

class NameFormatter(ABC):
    """Formats class names for tables and property names for columns."""

    @abstractmethod
    def format_class_name(self, table_name: str) -> str:
        ...

    @abstractmethod
    def format_property_name(self, table_name: str, column_name: str) -> str:
        ...


class EchoNameFormatter(NameFormatter):
    """Returns names unchanged."""

    def format_class_name(self, table_name: str) -> str:
        return table_name

    def format_property_name(self, table_name: str, column_name: str) -> str:
        return column_name


class SchemaNameMapNameFormatter(NameFormatter):
    """
    Formats names from a SchemaNameMap.

    Names missing from the map fall back to the unchanged table/column name.
    """

    def __init__(self, name_map: Any):
        self.name_map = name_map

    def format_class_name(self, table_name: str) -> str:
        return self.name_map.get_class_name(table_name)

    def format_property_name(self, table_name: str, column_name: str) -> str:
        return self.name_map.get_property_name(table_name, column_name)


class CollisionAwareNameFormatter(NameFormatter):
    """
    Wraps a formatter and keeps property names distinct from their class name.

    Generated code cannot have a member named like its enclosing class, so a
    property equal to its class name is rewritten with the strategy.
    """

    def __init__(
        self,
        inner: Optional[NameFormatter] = None,
        strategy: NamingCollisionStrategy = NamingCollisionStrategy.TYPE_SUFFIX,
        type_label: str = "Column",
        custom: Optional[Callable[[str], str]] = None,
    ):
        self.inner = inner or EchoNameFormatter()
        self.strategy = strategy
        self.type_label = type_label
        self.custom = custom

    def format_class_name(self, table_name: str) -> str:
        return self.inner.format_class_name(table_name)

    def format_property_name(self, table_name: str, column_name: str) -> str:
        property_name = self.inner.format_property_name(table_name, column_name)
        class_name = self.format_class_name(table_name)
        return resolve_collision(
            property_name, {class_name}, self.strategy, self.type_label, self.custom
        )


# ============================================================================
# TABLE NAME PROVIDERS
# ============================================================================

class TypeTableNameProvider(ABC):
    """Maps a type descriptor to the name of the table it becomes."""

    @abstractmethod
    def get_table_name(self, descriptor: Any) -> str:
        ...


class EchoTypeTableNameProvider(TypeTableNameProvider):
    """Table name is the type name."""

    def get_table_name(self, descriptor: Any) -> str:
        return descriptor.name


class FunctionTableNameProvider(TypeTableNameProvider):
    """Table name computed by a function of the descriptor."""

    def __init__(self, func: Callable[[Any], str]):
        self.func = func

    def get_table_name(self, descriptor: Any) -> str:
        return self.func(descriptor)


# ============================================================================
# DATA NAMESPACES
# ============================================================================

@dataclass(frozen=True)
class DataNamespaces:
    """Namespaces for generated data access and wrapper code."""
    base_namespace: str = "ApplicationDataTypes"

    @property
    def dao_namespace(self) -> str:
        return f"{self.base_namespace}.Dao"

    @property
    def wrapper_namespace(self) -> str:
        return f"{self.base_namespace}.Wrappers"

    @classmethod
    def for_type(cls, descriptor: Any) -> "DataNamespaces":
        """Namespaces rooted at the namespace of a described type."""
        namespace = getattr(descriptor, "namespace", None)
        return cls(base_namespace=namespace) if namespace else cls()


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "table_name_for",
    "class_name_for",
    "property_name_for",
    "resolve_collision",
    "NameFormatter",
    "EchoNameFormatter",
    "SchemaNameMapNameFormatter",
    "CollisionAwareNameFormatter",
    "TypeTableNameProvider",
    "EchoTypeTableNameProvider",
    "FunctionTableNameProvider",
    "DataNamespaces",
]
