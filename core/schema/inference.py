# ============================================================================
# TYPE GRAPH INFERENCE
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core - Relationship inference over type descriptors
# PURPOSE: Discover reachable types and classify one-to-many / many-to-many
# CREATED: 19 OCT 2026
# EXPORTS: TypeSchemaBuilder, create_type_schema
# DEPENDENCIES: core.schema.descriptors, core.schema.type_schema
# ============================================================================
"""
Type Graph Inference

Walks a graph of types breadth-first from a set of roots and classifies
every collection field:

- A has a collection of B and B has a collection of A: many-to-many
  (TypeXref). The mirrored pair is the same relation.
- A has a collection of B, B has none of A: one-to-many (TypeFk) with A as
  the parent. B is expected to carry ``{A}{Key}`` and a back-reference
  field named ``A``; missing fields produce warnings and are synthesized.
- A collection of A on A itself is one-to-many (an adjacency list).

Collections of scalars (strings, bytes, numbers) are not relations.

Relation functions are pure: they return tuples and report problems into
the WarningCollector they are given.

Usage:
    builder = TypeSchemaBuilder()
    type_schema = builder.create_type_schema([Blog])
    for fk in type_schema.foreign_keys:
        print(fk)
"""

from collections import deque
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from core.contracts import DataType, DefaultDataTypeBehavior, TypeSchemaWarningKind
from core.logging import get_logger, ComponentType, log_checkpoint
from core.schema.descriptors import FieldDescriptor, TypeDescriptor, describe
from core.schema.type_schema import (
    TypeFk,
    TypeSchema,
    TypeSchemaWarning,
    TypeXref,
    WarningCollector,
)

logger = get_logger(__name__, ComponentType.INFERENCE)


class TypeSchemaBuilder:
    """
    Infers a TypeSchema from root types.

    Args:
        key_field_name: Field treated as the key when none is marked
        default_data_type_behavior: Carried into the TypeSchema for writers
    """

    def __init__(
        self,
        key_field_name: str = "Id",
        default_data_type_behavior: DefaultDataTypeBehavior = DefaultDataTypeBehavior.EXCLUDE,
    ):
        self.key_field_name = key_field_name
        self.default_data_type_behavior = default_data_type_behavior

    # =========================================================================
    # FIELD RULES
    # =========================================================================

    def get_key_field(self, descriptor: TypeDescriptor) -> Optional[FieldDescriptor]:
        """Field explicitly marked as key, else the field named like the key, else None."""
        return descriptor.key_field() or descriptor.get_field(self.key_field_name)

    def synthetic_key_field(self) -> FieldDescriptor:
        return FieldDescriptor(
            name=self.key_field_name,
            data_type=DataType.ULONG,
            is_key=True,
            allow_null=False,
            synthetic=True,
        )

    @staticmethod
    def _collection_of(descriptor: TypeDescriptor, element: TypeDescriptor) -> Optional[FieldDescriptor]:
        for field_descriptor in descriptor.collection_fields():
            if field_descriptor.element_type == element:
                return field_descriptor
        return None

    def are_xrefs(self, left: TypeDescriptor, right: TypeDescriptor) -> bool:
        """True when each type holds a collection of the other."""
        if left == right:
            return False
        return (
            self._collection_of(left, right) is not None
            and self._collection_of(right, left) is not None
        )

    # =========================================================================
    # RELATIONS
    # =========================================================================

    def xref_relations_for(self, descriptor: TypeDescriptor) -> Tuple[TypeXref, ...]:
        """Many-to-many relations with descriptor on the left."""
        relations = []
        for field_descriptor in descriptor.collection_fields():
            other = field_descriptor.element_type
            if self.are_xrefs(descriptor, other):
                relations.append(TypeXref(
                    left=descriptor,
                    right=other,
                    left_collection_property=field_descriptor,
                    right_collection_property=self._collection_of(other, descriptor),
                ))
        return tuple(relations)

    def foreign_key_relations_for(
        self,
        descriptor: TypeDescriptor,
        warnings: WarningCollector,
    ) -> Tuple[TypeFk, ...]:
        """
        One-to-many relations with descriptor as the parent.

        Missing key, referencing and back-reference fields are reported to
        warnings and replaced by synthesized fields.
        """
        relations = []
        for collection in descriptor.collection_fields():
            child = collection.element_type
            if self.are_xrefs(descriptor, child):
                continue

            key = self.get_key_field(descriptor)
            if key is None:
                warnings.add(TypeSchemaWarning(
                    kind=TypeSchemaWarningKind.KEY_PROPERTY_NOT_FOUND,
                    parent_type=descriptor.full_name,
                    foreign_key_type=child.full_name,
                    message=f"{descriptor.name} has no key field; assuming {self.key_field_name}",
                ))
                key = self.synthetic_key_field()

            referencing_name = f"{descriptor.name}{key.name}"
            referencing = child.get_field(referencing_name)
            if referencing is None:
                warnings.add(TypeSchemaWarning(
                    kind=TypeSchemaWarningKind.REFERENCING_PROPERTY_NOT_FOUND,
                    parent_type=descriptor.full_name,
                    foreign_key_type=child.full_name,
                    message=f"{child.name} has no field {referencing_name}",
                ))
                referencing = FieldDescriptor(
                    name=referencing_name,
                    data_type=DataType.ULONG,
                    synthetic=True,
                )

            child_parent = child.get_field(descriptor.name)
            if child_parent is None:
                warnings.add(TypeSchemaWarning(
                    kind=TypeSchemaWarningKind.CHILD_PARENT_PROPERTY_NOT_FOUND,
                    parent_type=descriptor.full_name,
                    foreign_key_type=child.full_name,
                    message=f"{child.name} has no field {descriptor.name}",
                ))
                child_parent = FieldDescriptor(
                    name=descriptor.name,
                    reference_type=descriptor,
                    synthetic=True,
                )

            relations.append(TypeFk(
                primary_key_type=descriptor,
                primary_key_property=key,
                foreign_key_type=child,
                foreign_key_property=referencing,
                child_parent_property=child_parent,
                collection_property=collection,
            ))
        return tuple(relations)

    # =========================================================================
    # TRAVERSAL
    # =========================================================================

    def discover_types(self, roots: Sequence[TypeDescriptor]) -> Tuple[TypeDescriptor, ...]:
        """
        Breadth-first closure of the roots over collection fields.

        Each type is visited once; the result keeps discovery order.
        """
        discovered: List[TypeDescriptor] = []
        visited = set()
        queue = deque()
        for root in roots:
            if root not in visited:
                visited.add(root)
                queue.append(root)

        while queue:
            current = queue.popleft()
            discovered.append(current)
            for collection in current.collection_fields():
                element = collection.element_type
                if element not in visited:
                    visited.add(element)
                    queue.append(element)

        return tuple(discovered)

    def check_namespaces(self, roots: Sequence[TypeDescriptor], warnings: WarningCollector) -> None:
        namespaces = tuple(dict.fromkeys(root.namespace for root in roots))
        if len(namespaces) > 1:
            warnings.add(TypeSchemaWarning(
                kind=TypeSchemaWarningKind.DIFFERENT_NAMESPACES_FOUND,
                namespaces=namespaces,
                message=f"Root types span namespaces: {', '.join(namespaces)}",
            ))

    def create_type_schema(
        self,
        roots: Iterable[Any],
        name: Optional[str] = None,
        warnings: Optional[WarningCollector] = None,
    ) -> TypeSchema:
        """
        Infer the type schema reachable from roots.

        Args:
            roots: Type descriptors or pydantic model classes
            name: Optional schema name (defaults to the content hash)
            warnings: Collector to report into; a new one is used if omitted

        Returns:
            Immutable TypeSchema carrying the warnings in the collector
        """
        collector = warnings if warnings is not None else WarningCollector()
        root_descriptors = [describe(root) for root in roots]

        self.check_namespaces(root_descriptors, collector)
        tables = self.discover_types(root_descriptors)

        foreign_keys: Dict[TypeFk, None] = {}
        xrefs: Dict[TypeXref, None] = {}
        for table in tables:
            for fk in self.foreign_key_relations_for(table, collector):
                foreign_keys.setdefault(fk, None)
            for xref in self.xref_relations_for(table):
                xrefs.setdefault(xref, None)

        type_schema = TypeSchema(
            tables=tables,
            foreign_keys=tuple(foreign_keys),
            xrefs=tuple(xrefs),
            warnings=tuple(collector.to_list()),
            default_data_type_behavior=self.default_data_type_behavior,
            given_name=name,
        )
        log_checkpoint("type_schema_created", {
            "name": type_schema.name,
            "tables": len(tables),
            "foreign_keys": len(foreign_keys),
            "xrefs": len(xrefs),
            "warnings": len(collector),
        })
        logger.debug(f"Inferred type schema {type_schema.name} from {len(root_descriptors)} root(s)")
        return type_schema


def create_type_schema(roots: Iterable[Any], name: Optional[str] = None) -> TypeSchema:
    """Infer a type schema with default settings."""
    return TypeSchemaBuilder().create_type_schema(roots, name=name)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "TypeSchemaBuilder",
    "create_type_schema",
]
