# ============================================================================
# NAME MAPPING TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Tests - Class and property name maps
# PURPOSE: Verify bulk mapping and mapped schema persistence
# CREATED: 19 OCT 2026
# ============================================================================
"""
Name Mapping Tests

Run with:
    pytest tests/test_name_mapping.py -v
"""

import pytest

from core.contracts import DataType
from core.models import SchemaDefinition, SchemaNameMap
from core.schema.naming import EchoNameFormatter
from infrastructure.schema_store import JsonFileSchemaStore
from services.name_mapping import MappedSchemaDefinition
from services.schema_manager import SchemaManager


@pytest.fixture
def schema(tmp_path):
    manager = SchemaManager.for_schema(
        SchemaDefinition(name="Blog"), store=JsonFileSchemaStore(tmp_path), auto_save=False
    )
    manager.add_table("Blog")
    manager.add_column_named("Blog", "Id", DataType.ULONG, allow_null=False)
    manager.set_key_column("Blog", "Id")
    manager.add_table("Post")
    manager.add_column_named("Post", "Id", DataType.ULONG, allow_null=False)
    manager.add_column_named("Post", "BlogId", DataType.ULONG)
    manager.add_column_named("Post", "Title", DataType.STRING)
    manager.set_foreign_key("Blog", "Post", "BlogId")
    return manager.current_schema


@pytest.fixture
def name_map():
    name_map = SchemaNameMap()
    name_map.set_class_name("Blog", "Weblog")
    name_map.set_property_name("Post", "BlogId", "WeblogId")
    return name_map


class TestSchemaNameMap:

    def test_fallbacks(self, name_map):
        assert name_map.get_class_name("Blog") == "Weblog"
        assert name_map.get_class_name("Post") == "Post"
        assert name_map.get_property_name("Post", "BlogId") == "WeblogId"
        assert name_map.get_property_name("Post", "Title") == "Title"

    def test_set_overwrites(self, name_map):
        name_map.set_class_name("Blog", "Journal")
        assert name_map.get_class_name("Blog") == "Journal"
        assert len(name_map.table_names_to_class_names) == 1
        assert [e.column_name for e in name_map.columns_for("Post")] == ["BlogId"]


class TestMappedSchemaDefinition:

    def test_map_names(self, schema, name_map):
        mapped = MappedSchemaDefinition(schema, name_map)
        result = mapped.map_schema_class_and_property_names(max_workers=2)
        assert result is schema

        assert schema.get_table("Blog").class_name == "Weblog"
        assert schema.get_table("Post").class_name == "Post"
        post = schema.get_table("Post")
        assert post.get_property_name("BlogId") == "WeblogId"
        assert post.get_property_name("Title") == "Title"

        fk = schema.foreign_keys[0]
        assert fk.referenced_class == "Weblog"
        assert fk.referencing_class == "Post"

    def test_property_clashing_with_class_is_rewritten(self, tmp_path):
        schema = SchemaDefinition(name="Tags")
        manager = SchemaManager.for_schema(schema, store=JsonFileSchemaStore(tmp_path), auto_save=False)
        manager.add_table("Tag")
        manager.add_column_named("Tag", "Tag", DataType.STRING)

        MappedSchemaDefinition(schema).map_schema_class_and_property_names()
        assert schema.get_table("Tag").get_property_name("Tag") == "TagColumn"

    def test_custom_formatter(self, schema, name_map):
        mapped = MappedSchemaDefinition(schema, name_map)
        mapped.map_schema_class_and_property_names(name_formatter=EchoNameFormatter())
        assert schema.get_table("Blog").class_name == "Blog"
        assert schema.get_table("Post").get_property_name("BlogId") == "BlogId"

    def test_save_and_load(self, schema, name_map, tmp_path):
        path = tmp_path / "Blog.mapped.json"
        MappedSchemaDefinition(schema, name_map).save(path)

        loaded = MappedSchemaDefinition.load(path)
        assert loaded.file == str(path)
        assert loaded.schema_name_map.get_class_name("Blog") == "Weblog"
        assert set(loaded.schema_definition.tables) == {"Blog", "Post"}

        loaded.map_schema_class_and_property_names()
        post = loaded.schema_definition.get_table("Post")
        assert post.get_property_name("BlogId") == "WeblogId"
        assert loaded.schema_definition.foreign_keys[0] is post["BlogId"]
