# ============================================================================
# SCHEMA MODEL TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Tests - Columns, tables and schema definitions
# PURPOSE: Verify model invariants, upsert rules and JSON round-trips
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema Model Tests

Tests for Column/KeyColumn/ForeignKeyColumn, Table/XrefTable and
SchemaDefinition. Pure in-memory; no persistence.

Run with:
    pytest tests/test_schema_model.py -v
"""

import pytest

from core.contracts import DataType
from core.errors import ColumnNotFoundError, DuplicateTableError, InvalidForeignKeyError
from core.models import (
    Column,
    ForeignKeyColumn,
    KeyColumn,
    SchemaDefinition,
    Table,
    XrefTable,
)


# ============================================================================
# HELPERS
# ============================================================================

def _table(name="Book", *columns):
    table = Table(name=name)
    for column in columns:
        table.add_column(column)
    return table


def _fk(table_name="Book", column="AuthorId", referenced="Author"):
    column = Column(name=column, data_type=DataType.ULONG, table_name=table_name)
    return ForeignKeyColumn.from_column(column, referenced)


# ============================================================================
# COLUMNS
# ============================================================================

class TestColumn:
    """Tests for the plain column model."""

    def test_property_name_defaults_to_name(self):
        column = Column(name="Title", data_type=DataType.STRING)
        assert column.property_name == "Title"

    def test_cleared_property_name_falls_back_to_name(self):
        column = Column(name="Title", data_type=DataType.STRING, property_name="Heading")
        column.property_name = None
        assert column.property_name == "Title"

    def test_data_type_parsed_case_insensitively(self):
        column = Column(name="Price", data_type="decimal")
        assert column.data_type == DataType.DECIMAL

    def test_unknown_data_type_rejected(self):
        with pytest.raises(ValueError):
            Column(name="Price", data_type="Money")


class TestKeyColumn:
    """KeyColumn pins allow_null=False and key=True."""

    def test_construction_overrides_flags(self):
        column = KeyColumn(name="Id", data_type=DataType.ULONG, allow_null=True, key=False)
        assert column.allow_null is False
        assert column.key is True

    def test_assignment_is_overridden(self):
        column = KeyColumn(name="Id", data_type=DataType.ULONG)
        column.allow_null = True
        column.key = False
        assert column.allow_null is False
        assert column.key is True

    def test_default_key(self):
        column = KeyColumn.default()
        assert column.name == "Id"
        assert column.data_type == DataType.ULONG


class TestForeignKeyColumn:
    """Tests for foreign key conversion and identity."""

    @pytest.mark.parametrize("data_type", [DataType.INT, DataType.UINT, DataType.LONG, DataType.ULONG])
    def test_integral_columns_accepted(self, data_type):
        column = Column(name="AuthorId", data_type=data_type, table_name="Book")
        fk = ForeignKeyColumn.from_column(column, "Author")
        assert fk.referenced_table == "Author"
        assert fk.referenced_key == "Id"
        assert fk.data_type == data_type

    @pytest.mark.parametrize("data_type", [DataType.STRING, DataType.DECIMAL, DataType.BOOLEAN])
    def test_non_integral_columns_rejected(self, data_type):
        column = Column(name="AuthorId", data_type=data_type, table_name="Book")
        with pytest.raises(InvalidForeignKeyError):
            ForeignKeyColumn.from_column(column, "Author")

    def test_reference_name(self):
        assert _fk().reference_name == "FK_Book_Author_AuthorId"

    def test_identity_is_table_and_column(self):
        assert _fk().identity == ("Book", "AuthorId")
        assert _fk().same_identity(_fk(referenced="Writer"))
        assert not _fk().same_identity(_fk(table_name="Article"))


# ============================================================================
# TABLES
# ============================================================================

class TestTable:
    """Tests for table column bookkeeping."""

    def test_name_whitespace_removed(self):
        assert Table(name=" Blog Post\t").name == "BlogPost"

    def test_class_name_derived(self):
        assert Table(name="blog_post").class_name == "BlogPost"
        assert Table(name="2fa").class_name == "_2fa"

    def test_explicit_class_name_kept(self):
        assert Table(name="blog_post", class_name="Post").class_name == "Post"

    def test_add_column_does_not_overwrite(self):
        table = _table("Book", Column(name="Title", data_type=DataType.STRING, max_length=10))
        added = table.add_column(Column(name="Title", data_type=DataType.INT))
        assert added is False
        assert table["Title"].data_type == DataType.STRING
        assert table["Title"].max_length == 10

    def test_add_column_sets_owner(self):
        table = _table("Book", Column(name="Title", data_type=DataType.STRING))
        assert table["Title"].table_name == "Book"
        assert table["Title"].table_class_name == "Book"

    def test_insertion_order_preserved(self):
        table = _table(
            "Book",
            Column(name="C", data_type=DataType.STRING),
            Column(name="A", data_type=DataType.STRING),
            Column(name="B", data_type=DataType.STRING),
        )
        assert [c.name for c in table.column_list] == ["C", "A", "B"]

    def test_remove_column_idempotent(self):
        table = _table("Book", Column(name="Title", data_type=DataType.STRING))
        assert table.remove_column("Title") is True
        assert table.remove_column("Title") is False
        assert not table.has_column("Title")

    def test_missing_column_raises(self):
        with pytest.raises(ColumnNotFoundError):
            _table()["Nope"]

    def test_blank_column_name_raises(self):
        with pytest.raises(ValueError):
            _table().get_column("  ")

    def test_default_key_when_none_set(self):
        table = _table("Book", Column(name="Title", data_type=DataType.STRING))
        assert table.key_column is None
        assert table.key.name == "Id"

    def test_set_key_column_replaces_in_place(self):
        table = _table(
            "Book",
            Column(name="Code", data_type=DataType.STRING),
            Column(name="Title", data_type=DataType.STRING),
        )
        table.set_key_column("Code")
        assert isinstance(table["Code"], KeyColumn)
        assert [c.name for c in table.column_list] == ["Code", "Title"]

    def test_set_key_column_demotes_existing_key(self):
        table = _table(
            "Book",
            Column(name="Id", data_type=DataType.ULONG, allow_null=False),
            Column(name="Isbn", data_type=DataType.LONG, allow_null=True),
        )
        table.set_key_column("Id")
        table.set_key_column("Isbn")

        keys = [c for c in table.column_list if c.key]
        assert [c.name for c in keys] == ["Isbn"]
        assert keys[0].allow_null is False
        assert not isinstance(table["Id"], KeyColumn)
        assert table["Id"].data_type == DataType.ULONG

    def test_key_invariant_after_many_calls(self):
        names = ["A", "B", "C"]
        table = _table("T", *(Column(name=n, data_type=DataType.INT) for n in names))
        for name in ["A", "C", "B", "B", "A", "C"]:
            table.set_key_column(name)
            keys = [c for c in table.column_list if c.key]
            assert len(keys) == 1
            assert keys[0].name == name
            assert keys[0].allow_null is False

    def test_replace_with_fk_indexes_foreign_keys(self):
        table = _table("Book", Column(name="AuthorId", data_type=DataType.ULONG))
        fk = ForeignKeyColumn.from_column(table["AuthorId"], "Author")
        table.replace_column(fk)
        assert table.foreign_keys["AuthorId"] is fk
        assert table["AuthorId"] is fk

    def test_set_class_name_propagates(self):
        table = _table("book", Column(name="Title", data_type=DataType.STRING))
        table.set_class_name("Volume")
        assert table["Title"].table_class_name == "Volume"


class TestXrefTable:
    """XrefTable name is always left + right."""

    def test_name_is_concatenation(self):
        xref = XrefTable(left="Order", right="Product")
        assert xref.name == "OrderProduct"
        assert xref.left_column_name == "OrderId"
        assert xref.right_column_name == "ProductId"

    def test_explicit_name_ignored(self):
        assert XrefTable(name="Other", left="Order", right="Product").name == "OrderProduct"

    def test_other_side(self):
        xref = XrefTable(left="Order", right="Product")
        assert xref.other_side("Order") == "Product"
        assert xref.other_side("Product") == "Order"
        assert xref.other_side("Customer") is None


# ============================================================================
# SCHEMA DEFINITION
# ============================================================================

class TestSchemaDefinition:
    """Tests for the schema aggregate."""

    def test_defaults(self):
        schema = SchemaDefinition()
        assert schema.name == "Default"
        assert schema.db_type == "UnSpecified"

    def test_add_table_reports_added_then_updated(self):
        schema = SchemaDefinition(name="Shop")
        assert "added" in schema.add_table(Table(name="Order")).message
        assert "updated" in schema.add_table(Table(name="Order")).message
        assert len(schema.tables) == 1

    def test_set_tables_rejects_duplicates(self):
        schema = SchemaDefinition()
        with pytest.raises(DuplicateTableError):
            schema.set_tables([Table(name="Order"), Table(name="Order")])

    def test_remove_table_idempotent(self):
        schema = SchemaDefinition()
        schema.add_table(Table(name="Order"))
        assert schema.remove_table("Order") is True
        assert schema.remove_table("Order") is False

    def test_foreign_key_upsert_by_identity(self):
        schema = SchemaDefinition()
        schema.add_foreign_key(_fk(referenced="Author"))
        schema.add_foreign_key(_fk(referenced="Writer"))
        schema.add_foreign_key(_fk(table_name="Article"))
        assert len(schema.foreign_keys) == 2
        assert schema.foreign_keys[0].referenced_table == "Writer"

    def test_referencing_foreign_keys_case_insensitive(self):
        schema = SchemaDefinition()
        schema.add_foreign_key(_fk(referenced="author"))
        assert len(schema.referencing_foreign_keys_for("Author")) == 1

    def test_xref_lookup_by_side(self):
        schema = SchemaDefinition()
        schema.add_xref(XrefTable(left="Order", right="Product"))
        left = schema.left_xrefs_for("Order")
        right = schema.right_xrefs_for("Product")
        assert left[0].xref_name == "OrderProduct"
        assert left[0].other_table == "Product"
        assert right[0].other_table == "Order"
        assert schema.left_xrefs_for("Product") == []

    def test_validate_references(self):
        schema = SchemaDefinition()
        schema.add_foreign_key(_fk())
        problems = schema.validate_references()
        assert any("source table Book" in p for p in problems)
        assert any("referenced table Author" in p for p in problems)

    def test_combine_with(self):
        first = SchemaDefinition(name="A")
        first.add_table(Table(name="Order"))
        second = SchemaDefinition(name="B")
        second.add_table(Table(name="Product"))
        second.add_xref(XrefTable(left="Order", right="Product"))

        combined = first.combine_with(second)
        assert combined is first
        assert set(first.tables) == {"Order", "Product"}
        assert "OrderProduct" in first.xrefs


class TestSchemaDefinitionSerialization:
    """JSON round-trip keeps tables, column order, variants and foreign keys."""

    @pytest.fixture
    def schema(self):
        schema = SchemaDefinition(name="Library")
        author = _table(
            "Author",
            Column(name="Id", data_type=DataType.ULONG),
            Column(name="Name", data_type=DataType.STRING, max_length=100, allow_null=False),
        )
        author.set_key_column("Id")
        book = _table(
            "Book",
            Column(name="Id", data_type=DataType.ULONG),
            Column(name="Title", data_type=DataType.STRING),
            Column(name="AuthorId", data_type=DataType.ULONG),
        )
        book.set_key_column("Id")
        fk = ForeignKeyColumn.from_column(book["AuthorId"], "Author")
        book.replace_column(fk)
        schema.add_table(author)
        schema.add_table(book)
        schema.add_foreign_key(fk)
        schema.add_xref(XrefTable(left="Book", right="Genre"))
        return schema

    def test_round_trip(self, schema):
        loaded = SchemaDefinition.from_json(schema.to_json())

        assert loaded.name == "Library"
        assert list(loaded.tables) == ["Author", "Book"]
        assert [c.name for c in loaded.tables["Book"].column_list] == ["Id", "Title", "AuthorId"]
        assert isinstance(loaded.tables["Book"]["Id"], KeyColumn)
        assert isinstance(loaded.tables["Book"]["AuthorId"], ForeignKeyColumn)
        assert loaded.tables["Author"]["Name"].max_length == 100
        assert loaded.tables["Author"]["Name"].allow_null is False
        assert list(loaded.xrefs) == ["BookGenre"]

    def test_to_dict_is_plain_data(self, schema):
        data = schema.to_dict()
        assert data["tables"]["Book"]["columns"]["Id"]["kind"] == "key"
        assert data["tables"]["Book"]["columns"]["Id"]["data_type"] == "ULong"
        assert data["foreign_keys"][0]["referenced_table"] == "Author"
        assert SchemaDefinition.model_validate(data).get_table("Book") is not None

    def test_foreign_keys_relinked_to_columns(self, schema):
        loaded = SchemaDefinition.from_json(schema.to_json())
        book = loaded.tables["Book"]
        assert loaded.foreign_keys[0] is book["AuthorId"]
        assert book.foreign_keys["AuthorId"] is book["AuthorId"]
        assert loaded.tables["Author"].referencing_foreign_keys == [book["AuthorId"]]

    def test_runtime_state_not_serialized(self, schema):
        schema.file = "/tmp/library.json"
        assert "/tmp/library.json" not in schema.to_json()
