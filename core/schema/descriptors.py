# ============================================================================
# TYPE DESCRIPTORS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core - Introspection capability over application types
# PURPOSE: Uniform view of fields, keys, collections and supertypes
# CREATED: 19 OCT 2026
# EXPORTS: Key, ColumnType, FieldDescriptor, TypeDescriptor,
#          PydanticTypeDescriptor, DeclaredType, describe
# DEPENDENCIES: pydantic, annotated_types
# ============================================================================
"""
Type Descriptors

Inference never inspects application classes directly. It works against
TypeDescriptor, which answers a handful of questions about a type:

- what are its writable fields, and which are declared at this level
- which field is marked as the key
- which fields are collections, and of what element type
- what is its supertype

Two implementations are provided:
- PydanticTypeDescriptor reads pydantic models (field aliases become
  column names, Annotated metadata marks keys and overrides types)
- DeclaredType is an explicit declaration with no reflection at all

Usage:
    from typing import Annotated, List
    from pydantic import BaseModel
    from core.schema.descriptors import Key, describe

    class Blog(BaseModel):
        Id: Annotated[int, Key]
        Posts: List["Post"] = []

    descriptor = describe(Blog)
    descriptor.key_field().name    # "Id"
"""

import collections.abc
import datetime
import decimal
import inspect
import types
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple, Union, get_args, get_origin

from annotated_types import MaxLen
from pydantic import BaseModel
from pydantic.fields import FieldInfo

from core.contracts import DataType


# ============================================================================
# FIELD MARKERS
# ============================================================================

class _KeyMarker:
    """Annotated marker for the key field: ``Annotated[int, Key]``."""

    def __repr__(self) -> str:
        return "Key"


Key = _KeyMarker()


@dataclass(frozen=True)
class ColumnType:
    """Annotated marker overriding the column type: ``Annotated[int, ColumnType(DataType.ULONG)]``."""
    data_type: DataType


# ============================================================================
# FIELD DESCRIPTOR
# ============================================================================

@dataclass(frozen=True, eq=False)
class FieldDescriptor:
    """
    One field of a described type.

    element_type is set for collections whose element is itself a
    describable type; reference_type for a single-valued reference to one.
    synthetic marks fields made up by inference because the type did not
    declare them.
    """
    name: str
    data_type: DataType = DataType.DEFAULT
    is_collection: bool = False
    element_type: Optional["TypeDescriptor"] = None
    reference_type: Optional["TypeDescriptor"] = None
    is_key: bool = False
    allow_null: bool = True
    max_length: Optional[int] = None
    writable: bool = True
    synthetic: bool = False

    @property
    def is_relation_collection(self) -> bool:
        return self.is_collection and self.element_type is not None

    def _identity(self) -> tuple:
        return (
            self.name,
            self.data_type,
            self.is_collection,
            self.element_type,
            self.reference_type,
            self.is_key,
            self.synthetic,
        )

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, FieldDescriptor):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())


# ============================================================================
# TYPE DESCRIPTOR
# ============================================================================

class TypeDescriptor(ABC):
    """
    Introspection capability over one application type.

    Descriptors are equal when they describe the same underlying type.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def namespace(self) -> str:
        ...

    @property
    @abstractmethod
    def identity(self) -> Any:
        """The described object; equality and hashing use it by identity."""

    @abstractmethod
    def fields(self) -> Tuple[FieldDescriptor, ...]:
        """Writable fields, including inherited ones."""

    @abstractmethod
    def declared_fields(self) -> Tuple[FieldDescriptor, ...]:
        """Writable fields declared at this level of the hierarchy only."""

    @abstractmethod
    def supertype(self) -> Optional["TypeDescriptor"]:
        """Direct supertype, or None below the universal base."""

    @property
    def full_name(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name

    def get_field(self, name: str) -> Optional[FieldDescriptor]:
        for field_descriptor in self.fields():
            if field_descriptor.name == name:
                return field_descriptor
        return None

    def key_field(self) -> Optional[FieldDescriptor]:
        """First field explicitly marked as key."""
        for field_descriptor in self.fields():
            if field_descriptor.is_key:
                return field_descriptor
        return None

    def collection_fields(self) -> List[FieldDescriptor]:
        """Collection fields whose element is a describable type."""
        return [f for f in self.fields() if f.is_relation_collection]

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, TypeDescriptor):
            return NotImplemented
        return self.identity is other.identity

    def __hash__(self) -> int:
        return hash(id(self.identity))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.full_name})"


# ============================================================================
# PYDANTIC MODELS
# ============================================================================

_COLLECTION_ORIGINS = (
    list,
    set,
    frozenset,
    tuple,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
)

# Checked in order: bool before int
_SCALAR_TYPES: Tuple[Tuple[type, DataType], ...] = (
    (bool, DataType.BOOLEAN),
    (int, DataType.INT),
    (float, DataType.DECIMAL),
    (decimal.Decimal, DataType.DECIMAL),
    (str, DataType.STRING),
    (bytes, DataType.BYTE_ARRAY),
    (bytearray, DataType.BYTE_ARRAY),
    (datetime.datetime, DataType.DATE_TIME),
    (datetime.date, DataType.DATE_TIME),
    (uuid.UUID, DataType.STRING),
)


def _is_model(candidate: Any) -> bool:
    return (
        isinstance(candidate, type)
        and issubclass(candidate, BaseModel)
        and candidate is not BaseModel
    )


def _unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        optional = len(args) != len(get_args(annotation))
        if len(args) == 1:
            return args[0], optional
        return annotation, optional
    return annotation, False


def _scalar_data_type(annotation: Any) -> DataType:
    if not isinstance(annotation, type):
        return DataType.DEFAULT
    if issubclass(annotation, Enum):
        return DataType.STRING if issubclass(annotation, str) else DataType.INT
    for python_type, data_type in _SCALAR_TYPES:
        if issubclass(annotation, python_type):
            return data_type
    return DataType.DEFAULT


class PydanticTypeDescriptor(TypeDescriptor):
    """
    Describes a pydantic model class.

    - field name is the alias when one is set
    - key: ``Annotated[..., Key]`` or ``Field(json_schema_extra={"key": True})``
    - frozen fields (or frozen models) are not writable
    - ``MaxLen`` metadata, from ``Field(max_length=...)`` or annotated-types,
      becomes max_length
    """

    def __init__(self, model: type):
        if not _is_model(model):
            raise TypeError(f"{model!r} is not a pydantic model class")
        if not getattr(model, "__pydantic_complete__", True):
            model.model_rebuild(raise_errors=False)
        self._model = model

    @property
    def model(self) -> type:
        return self._model

    @property
    def name(self) -> str:
        return self._model.__name__

    @property
    def namespace(self) -> str:
        return self._model.__module__

    @property
    def identity(self) -> Any:
        return self._model

    def fields(self) -> Tuple[FieldDescriptor, ...]:
        return tuple(
            f for f in (
                self._describe_field(name, info)
                for name, info in self._model.model_fields.items()
            )
            if f.writable
        )

    def declared_fields(self) -> Tuple[FieldDescriptor, ...]:
        own = inspect.get_annotations(self._model)
        return tuple(
            f for f in (
                self._describe_field(name, info)
                for name, info in self._model.model_fields.items()
                if name in own
            )
            if f.writable
        )

    def supertype(self) -> Optional[TypeDescriptor]:
        for base in self._model.__bases__:
            if _is_model(base):
                return PydanticTypeDescriptor(base)
        return None

    def _describe_field(self, name: str, info: FieldInfo) -> FieldDescriptor:
        annotation, optional = _unwrap_optional(info.annotation)
        metadata = list(info.metadata)

        is_collection = False
        element_type = None
        reference_type = None
        data_type = DataType.DEFAULT

        origin = get_origin(annotation)
        if origin in _COLLECTION_ORIGINS:
            is_collection = True
            args = [a for a in get_args(annotation) if a is not Ellipsis]
            if args:
                element, _ = _unwrap_optional(args[0])
                if _is_model(element):
                    element_type = PydanticTypeDescriptor(element)
        elif _is_model(annotation):
            reference_type = PydanticTypeDescriptor(annotation)
        else:
            data_type = _scalar_data_type(annotation)

        max_length = None
        is_key = False
        for item in metadata:
            if item is Key or isinstance(item, _KeyMarker):
                is_key = True
            elif isinstance(item, ColumnType):
                data_type = item.data_type
            elif isinstance(item, MaxLen):
                max_length = item.max_length

        extra = info.json_schema_extra
        if isinstance(extra, dict) and extra.get("key"):
            is_key = True

        frozen = bool(info.frozen) or bool(self._model.model_config.get("frozen"))

        return FieldDescriptor(
            name=info.alias or name,
            data_type=data_type,
            is_collection=is_collection,
            element_type=element_type,
            reference_type=reference_type,
            is_key=is_key,
            allow_null=optional,
            max_length=max_length,
            writable=not frozen,
        )


# ============================================================================
# EXPLICIT DECLARATIONS
# ============================================================================

class DeclaredType(TypeDescriptor):
    """
    A type declared explicitly, field by field.

    Fields may reference types declared later, so cyclic graphs are built
    by creating the types first and adding fields afterwards:

        blog = DeclaredType("Blog", "app")
        post = DeclaredType("Post", "app")
        blog.add_field("Id", DataType.ULONG, key=True).add_collection("Posts", post)
        post.add_field("BlogId", DataType.ULONG).add_reference("Blog", blog)
    """

    def __init__(
        self,
        name: str,
        namespace: str = "",
        fields: Optional[Iterable[FieldDescriptor]] = None,
        base: Optional["DeclaredType"] = None,
    ):
        self._name = name
        self._namespace = namespace
        self._fields: List[FieldDescriptor] = list(fields or [])
        self._base = base

    @property
    def name(self) -> str:
        return self._name

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def identity(self) -> Any:
        return self

    def fields(self) -> Tuple[FieldDescriptor, ...]:
        inherited = self._base.fields() if self._base else ()
        own_names = {f.name for f in self._fields}
        return tuple(f for f in inherited if f.name not in own_names) + self.declared_fields()

    def declared_fields(self) -> Tuple[FieldDescriptor, ...]:
        return tuple(f for f in self._fields if f.writable)

    def supertype(self) -> Optional[TypeDescriptor]:
        return self._base

    def add(self, field_descriptor: FieldDescriptor) -> "DeclaredType":
        self._fields.append(field_descriptor)
        return self

    def add_field(
        self,
        name: str,
        data_type: DataType,
        key: bool = False,
        allow_null: bool = True,
        max_length: Optional[int] = None,
    ) -> "DeclaredType":
        return self.add(FieldDescriptor(
            name=name,
            data_type=data_type,
            is_key=key,
            allow_null=allow_null,
            max_length=max_length,
        ))

    def add_collection(self, name: str, element: TypeDescriptor) -> "DeclaredType":
        return self.add(FieldDescriptor(name=name, is_collection=True, element_type=element))

    def add_reference(self, name: str, target: TypeDescriptor) -> "DeclaredType":
        return self.add(FieldDescriptor(name=name, reference_type=target))


def describe(obj: Any) -> TypeDescriptor:
    """
    Get a descriptor for a descriptor or a pydantic model class.

    Raises:
        TypeError: obj cannot be described
    """
    if isinstance(obj, TypeDescriptor):
        return obj
    if _is_model(obj):
        return PydanticTypeDescriptor(obj)
    raise TypeError(f"Cannot describe {obj!r}: expected a pydantic model or TypeDescriptor")


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "Key",
    "ColumnType",
    "FieldDescriptor",
    "TypeDescriptor",
    "PydanticTypeDescriptor",
    "DeclaredType",
    "describe",
]
