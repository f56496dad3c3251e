# ============================================================================
# TYPE DESCRIPTOR TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Tests - Introspection over pydantic models and declared types
# PURPOSE: Verify field discovery, keys, collections and supertypes
# CREATED: 19 OCT 2026
# ============================================================================
"""
Type Descriptor Tests

Run with:
    pytest tests/test_descriptors.py -v
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Optional

import pytest
from pydantic import BaseModel, Field

from core.contracts import DataType
from core.schema.descriptors import (
    ColumnType,
    DeclaredType,
    Key,
    PydanticTypeDescriptor,
    describe,
)
from core.schema.inheritance import TypeInheritanceDescriptor, type_extends


# ============================================================================
# SAMPLE MODELS
# ============================================================================

class Tag(BaseModel):
    Id: int = 0
    Label: str = ""


class Article(BaseModel):
    Code: Annotated[str, Key] = ""
    Title: str = Field(default="", max_length=120)
    Views: Annotated[int, ColumnType(DataType.ULONG)] = 0
    Price: Decimal = Decimal("0")
    Rating: float = 0.0
    Published: Optional[datetime] = None
    Draft: bool = False
    Body: bytes = b""
    Keywords: List[str] = []
    Tags: List[Tag] = []
    Primary: Optional[Tag] = None
    author_name: str = Field(default="", alias="AuthorName")
    Revision: int = Field(default=1, frozen=True)


class ExtraKeyed(BaseModel):
    Serial: int = Field(default=0, json_schema_extra={"key": True})


class Animal(BaseModel):
    Id: int = 0
    Name: str = ""


class Dog(Animal):
    Breed: str = ""


class Puppy(Dog):
    AgeWeeks: int = 0


# ============================================================================
# PYDANTIC DESCRIPTORS
# ============================================================================

class TestPydanticTypeDescriptor:

    @pytest.fixture
    def article(self):
        return describe(Article)

    def test_names(self, article):
        assert article.name == "Article"
        assert article.namespace == __name__
        assert article.full_name == f"{__name__}.Article"

    def test_scalar_type_mapping(self, article):
        expected = {
            "Title": DataType.STRING,
            "Price": DataType.DECIMAL,
            "Rating": DataType.DECIMAL,
            "Published": DataType.DATE_TIME,
            "Draft": DataType.BOOLEAN,
            "Body": DataType.BYTE_ARRAY,
        }
        for name, data_type in expected.items():
            assert article.get_field(name).data_type == data_type, name

    def test_column_type_override(self, article):
        assert article.get_field("Views").data_type == DataType.ULONG

    def test_key_marker(self, article):
        assert article.key_field().name == "Code"

    def test_json_schema_extra_key(self):
        assert describe(ExtraKeyed).key_field().name == "Serial"

    def test_max_length_from_field(self, article):
        assert article.get_field("Title").max_length == 120

    def test_optional_allows_null(self, article):
        assert article.get_field("Published").allow_null is True
        assert article.get_field("Title").allow_null is False

    def test_alias_is_field_name(self, article):
        assert article.get_field("AuthorName") is not None
        assert article.get_field("author_name") is None

    def test_frozen_field_not_writable(self, article):
        assert article.get_field("Revision") is None

    def test_relation_collection(self, article):
        tags = article.get_field("Tags")
        assert tags.is_collection
        assert tags.element_type == describe(Tag)
        assert [f.name for f in article.collection_fields()] == ["Tags"]

    def test_scalar_collection_is_not_relation(self, article):
        keywords = article.get_field("Keywords")
        assert keywords.is_collection
        assert keywords.element_type is None

    def test_single_reference(self, article):
        assert article.get_field("Primary").reference_type == describe(Tag)

    def test_equality_by_model(self):
        assert PydanticTypeDescriptor(Tag) == PydanticTypeDescriptor(Tag)
        assert hash(PydanticTypeDescriptor(Tag)) == hash(describe(Tag))
        assert PydanticTypeDescriptor(Tag) != PydanticTypeDescriptor(Article)

    def test_rejects_non_models(self):
        with pytest.raises(TypeError):
            describe(dict)


class TestHierarchy:

    def test_supertype_stops_below_base_model(self):
        assert describe(Dog).supertype() == describe(Animal)
        assert describe(Animal).supertype() is None

    def test_declared_fields_only_this_level(self):
        assert [f.name for f in describe(Dog).declared_fields()] == ["Breed"]
        assert [f.name for f in describe(Dog).fields()] == ["Id", "Name", "Breed"]

    def test_inheritance_chain(self):
        inheritance = TypeInheritanceDescriptor(Puppy)
        assert [t.name for t in inheritance.chain] == ["Puppy", "Dog", "Animal"]
        assert inheritance.root_type == describe(Animal)
        assert inheritance.is_derived

    def test_extends(self):
        assert type_extends(Puppy, Animal)
        assert not type_extends(Animal, Puppy)
        assert not type_extends(Animal, Animal)

    def test_tree_string(self):
        text = str(TypeInheritanceDescriptor(Dog))
        assert text.splitlines()[0] == "Animal"
        assert "  Dog" in text
        assert "- Breed: String" in text


# ============================================================================
# DECLARED TYPES
# ============================================================================

class TestDeclaredType:

    def test_fields_and_key(self):
        blog = DeclaredType("Blog", "app").add_field("Key", DataType.ULONG, key=True)
        assert blog.key_field().name == "Key"
        assert blog.get_field("Missing") is None

    def test_cyclic_declaration(self):
        blog = DeclaredType("Blog", "app")
        post = DeclaredType("Post", "app")
        blog.add_collection("Posts", post)
        post.add_reference("Blog", blog)
        assert blog.collection_fields()[0].element_type is post
        assert post.get_field("Blog").reference_type is blog

    def test_identity_equality(self):
        assert DeclaredType("Blog") != DeclaredType("Blog")

    def test_inherited_fields(self):
        base = DeclaredType("Base").add_field("Id", DataType.ULONG)
        derived = DeclaredType("Derived", base=base).add_field("Name", DataType.STRING)
        assert [f.name for f in derived.fields()] == ["Id", "Name"]
        assert [f.name for f in derived.declared_fields()] == ["Name"]
        assert derived.supertype() is base
