# ============================================================================
# TYPE GRAPH INFERENCE TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Tests - One-to-many and many-to-many discovery
# PURPOSE: Verify traversal, relation classification and warnings
# CREATED: 19 OCT 2026
# ============================================================================
"""
Type Graph Inference Tests

Run with:
    pytest tests/test_type_inference.py -v
"""

from typing import Annotated, List, Optional

import pytest
from pydantic import BaseModel, Field

from core.contracts import DataType, TypeSchemaWarningKind
from core.schema.descriptors import DeclaredType, Key, describe
from core.schema.inference import TypeSchemaBuilder, create_type_schema
from core.schema.type_schema import TypeSchemaWarning, TypeXref, WarningCollector


# ============================================================================
# SAMPLE MODELS
# ============================================================================

class Post(BaseModel):
    Id: int = 0
    BlogId: int = 0
    Body: str = ""
    blog: Optional["Blog"] = Field(default=None, alias="Blog")


class Blog(BaseModel):
    Id: int = 0
    Title: str = ""
    Posts: List[Post] = []


Post.model_rebuild()


class Course(BaseModel):
    Id: int = 0
    Students: List["Student"] = []


class Student(BaseModel):
    Id: int = 0
    Courses: List[Course] = []


Course.model_rebuild()


class Novel(BaseModel):
    Id: int = 0
    AuthorCode: int = 0
    author: Optional["Author"] = Field(default=None, alias="Author")


class Author(BaseModel):
    Code: Annotated[int, Key] = 0
    Books: List[Novel] = []


Novel.model_rebuild()


class Book(BaseModel):
    Title: str = ""


class Library(BaseModel):
    Name: str = ""
    Books: List[Book] = []


class Category(BaseModel):
    Id: int = 0
    CategoryId: Optional[int] = None
    Children: List["Category"] = []


Category.model_rebuild()


class Note(BaseModel):
    Id: int = 0
    Tags: List[str] = []


# ============================================================================
# ONE-TO-MANY
# ============================================================================

class TestForeignKeyInference:

    def test_blog_posts(self):
        type_schema = create_type_schema([Blog])
        assert [t.name for t in type_schema.tables] == ["Blog", "Post"]
        assert len(type_schema.foreign_keys) == 1
        assert type_schema.xrefs == ()
        assert type_schema.warnings == ()

        fk = type_schema.foreign_keys[0]
        assert fk.primary_key_type == describe(Blog)
        assert fk.primary_key_property.name == "Id"
        assert fk.foreign_key_type == describe(Post)
        assert fk.foreign_key_property.name == "BlogId"
        assert fk.child_parent_property.name == "Blog"
        assert fk.collection_property.name == "Posts"
        assert str(fk) == "Post.BlogId -> Blog.Id"

    def test_marked_key_names_referencing_field(self):
        type_schema = create_type_schema([Author])
        fk = type_schema.foreign_keys[0]
        assert fk.primary_key_property.name == "Code"
        assert fk.foreign_key_property.name == "AuthorCode"
        assert fk.foreign_key_property.synthetic is False
        assert type_schema.warnings == ()

    def test_missing_fields_are_warned_and_synthesized(self):
        type_schema = create_type_schema([Library])
        kinds = [w.kind for w in type_schema.warnings]
        assert kinds == [
            TypeSchemaWarningKind.KEY_PROPERTY_NOT_FOUND,
            TypeSchemaWarningKind.REFERENCING_PROPERTY_NOT_FOUND,
            TypeSchemaWarningKind.CHILD_PARENT_PROPERTY_NOT_FOUND,
        ]

        fk = type_schema.foreign_keys[0]
        assert fk.primary_key_property.synthetic
        assert fk.primary_key_property.data_type == DataType.ULONG
        assert fk.foreign_key_property.name == "LibraryId"
        assert fk.foreign_key_property.synthetic
        assert fk.child_parent_property.reference_type == describe(Library)

    def test_self_collection_is_one_to_many(self):
        type_schema = create_type_schema([Category])
        assert type_schema.xrefs == ()
        assert len(type_schema.foreign_keys) == 1
        fk = type_schema.foreign_keys[0]
        assert fk.primary_key_type == fk.foreign_key_type == describe(Category)
        assert fk.foreign_key_property.name == "CategoryId"

    def test_scalar_collection_is_not_a_relation(self):
        type_schema = create_type_schema([Note])
        assert [t.name for t in type_schema.tables] == ["Note"]
        assert type_schema.foreign_keys == ()

    def test_root_without_relations(self):
        type_schema = create_type_schema([Book])
        assert len(type_schema.tables) == 1
        assert type_schema.foreign_keys == ()
        assert type_schema.xrefs == ()

    def test_foreign_keys_for_child(self):
        type_schema = create_type_schema([Blog])
        assert len(type_schema.foreign_keys_for(describe(Post))) == 1
        assert type_schema.foreign_keys_for(describe(Blog)) == []


# ============================================================================
# MANY-TO-MANY
# ============================================================================

class TestXrefInference:

    def test_mutual_collections_produce_one_xref(self):
        type_schema = create_type_schema([Student])
        assert {t.name for t in type_schema.tables} == {"Student", "Course"}
        assert len(type_schema.xrefs) == 1
        assert type_schema.foreign_keys == ()

    def test_mirrored_xrefs_are_equal(self):
        student, course = describe(Student), describe(Course)
        assert TypeXref(student, course) == TypeXref(course, student)
        assert hash(TypeXref(student, course)) == hash(TypeXref(course, student))

    def test_both_roots_still_one_xref(self):
        type_schema = create_type_schema([Student, Course])
        assert len(type_schema.tables) == 2
        assert len(type_schema.xrefs) == 1

    def test_are_xrefs(self):
        builder = TypeSchemaBuilder()
        assert builder.are_xrefs(describe(Student), describe(Course))
        assert not builder.are_xrefs(describe(Blog), describe(Post))
        assert not builder.are_xrefs(describe(Category), describe(Category))


# ============================================================================
# TRAVERSAL
# ============================================================================

class TestTraversal:

    @pytest.fixture
    def cycle(self):
        a, b, c = DeclaredType("A", "app"), DeclaredType("B", "app"), DeclaredType("C", "app")
        for parent, child in ((a, b), (b, c), (c, a)):
            parent.add_field("Id", DataType.ULONG, key=True)
            parent.add_collection(f"{child.name}s", child)
        return a, b, c

    def test_cycle_visits_each_type_once(self, cycle):
        a, b, c = cycle
        type_schema = create_type_schema([a])
        assert type_schema.tables == (a, b, c)
        assert len(type_schema.foreign_keys) == 3

    def test_duplicate_roots(self, cycle):
        a, b, _ = cycle
        builder = TypeSchemaBuilder()
        assert len(builder.discover_types([a, b, a])) == 3

    def test_same_schema_same_hash(self):
        assert create_type_schema([Blog]).hash == create_type_schema([Blog]).hash
        assert create_type_schema([Blog]).hash != create_type_schema([Student]).hash

    def test_name_defaults_to_hash(self):
        type_schema = create_type_schema([Blog])
        assert type_schema.name == type_schema.hash
        assert create_type_schema([Blog], name="Blogging").name == "Blogging"


# ============================================================================
# WARNINGS
# ============================================================================

class TestWarnings:

    def test_mixed_namespaces_warn_once(self):
        type_schema = create_type_schema([DeclaredType("X", "one"), DeclaredType("Y", "two")])
        assert len(type_schema.warnings) == 1
        warning = type_schema.warnings[0]
        assert warning.kind == TypeSchemaWarningKind.DIFFERENT_NAMESPACES_FOUND
        assert warning.namespaces == ("one", "two")

    def test_single_namespace_no_warning(self):
        type_schema = create_type_schema([DeclaredType("X", "one"), DeclaredType("Y", "one")])
        assert type_schema.warnings == ()

    def test_collector_deduplicates(self):
        collector = WarningCollector()
        warning = TypeSchemaWarning(kind=TypeSchemaWarningKind.KEY_PROPERTY_NOT_FOUND, message="x")
        assert collector.add(warning) is True
        assert collector.add(warning) is False
        assert len(collector) == 1

    def test_external_collector_receives_warnings(self):
        collector = WarningCollector()
        TypeSchemaBuilder().create_type_schema([Library], warnings=collector)
        assert len(collector.of_kind(TypeSchemaWarningKind.REFERENCING_PROPERTY_NOT_FOUND)) == 1
