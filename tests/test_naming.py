# ============================================================================
# NAMING STRATEGY TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Tests - Identifier derivation
# PURPOSE: Verify class/property naming, collisions, formatters, namespaces
# CREATED: 19 OCT 2026
# ============================================================================
"""
Naming Strategy Tests

Run with:
    pytest tests/test_naming.py -v
"""

import pytest

from core.contracts import NamingCollisionStrategy
from core.models import SchemaNameMap
from core.schema.naming import (
    CollisionAwareNameFormatter,
    DataNamespaces,
    EchoNameFormatter,
    EchoTypeTableNameProvider,
    FunctionTableNameProvider,
    SchemaNameMapNameFormatter,
    class_name_for,
    property_name_for,
    resolve_collision,
    table_name_for,
)
from core.schema.descriptors import DeclaredType


# ============================================================================
# CLASS / PROPERTY NAMES
# ============================================================================

class TestTableNameFor:

    @pytest.mark.parametrize("name,expected", [
        ("Order Line", "OrderLine"),
        (" Order\tLine\n", "OrderLine"),
        ("order_line", "order_line"),
        (None, ""),
    ])
    def test_whitespace_removed(self, name, expected):
        assert table_name_for(name) == expected


class TestClassNameFor:

    @pytest.mark.parametrize("name,expected", [
        ("order", "Order"),
        ("order_line", "OrderLine"),
        ("order line", "OrderLine"),
        ("order-line.item", "OrderLineItem"),
        ("OrderLine", "OrderLine"),
        ("2fa_codes", "_2faCodes"),
        ("", ""),
        (None, ""),
    ])
    def test_class_names(self, name, expected):
        assert class_name_for(name) == expected

    def test_property_names_follow_same_rules(self):
        assert property_name_for("created_by") == "CreatedBy"


# ============================================================================
# COLLISIONS
# ============================================================================

class TestResolveCollision:

    def test_no_collision_returns_name(self):
        assert resolve_collision("Name", {"Other"}) == "Name"

    @pytest.mark.parametrize("strategy,expected", [
        (NamingCollisionStrategy.TYPE_SUFFIX, "NameTable"),
        (NamingCollisionStrategy.TYPE_PREFIX, "TableName"),
        (NamingCollisionStrategy.TRAILING_UNDERSCORE, "Name_"),
        (NamingCollisionStrategy.LEADING_UNDERSCORE, "_Name"),
        (NamingCollisionStrategy.UNDERSCORE_DELIMIT, "Table_Name"),
    ])
    def test_strategies(self, strategy, expected):
        assert resolve_collision("Name", {"Name"}, strategy) == expected

    def test_repeats_until_free(self):
        taken = {"Name", "Name_"}
        assert resolve_collision("Name", taken, NamingCollisionStrategy.TRAILING_UNDERSCORE) == "Name__"

    def test_custom(self):
        result = resolve_collision(
            "Name", {"Name"}, NamingCollisionStrategy.CUSTOM, custom=lambda n: n.lower()
        )
        assert result == "name"

    def test_custom_without_function(self):
        with pytest.raises(ValueError):
            resolve_collision("Name", {"Name"}, NamingCollisionStrategy.CUSTOM)

    def test_invalid_strategy(self):
        with pytest.raises(ValueError):
            resolve_collision("Name", {"Name"}, NamingCollisionStrategy.INVALID)


# ============================================================================
# FORMATTERS
# ============================================================================

class TestNameFormatters:

    def test_echo(self):
        formatter = EchoNameFormatter()
        assert formatter.format_class_name("order") == "order"
        assert formatter.format_property_name("order", "total") == "total"

    def test_name_map_with_fallback(self):
        name_map = SchemaNameMap()
        name_map.set_class_name("tbl_order", "Order")
        name_map.set_property_name("tbl_order", "amt", "Amount")
        formatter = SchemaNameMapNameFormatter(name_map)

        assert formatter.format_class_name("tbl_order") == "Order"
        assert formatter.format_class_name("tbl_line") == "tbl_line"
        assert formatter.format_property_name("tbl_order", "amt") == "Amount"
        assert formatter.format_property_name("tbl_order", "qty") == "qty"

    def test_collision_aware_rewrites_property_matching_class(self):
        formatter = CollisionAwareNameFormatter()
        assert formatter.format_property_name("Name", "Name") == "NameColumn"
        assert formatter.format_property_name("Name", "Other") == "Other"


# ============================================================================
# TABLE NAME PROVIDERS & NAMESPACES
# ============================================================================

class TestTableNameProviders:

    def test_echo_uses_type_name(self):
        assert EchoTypeTableNameProvider().get_table_name(DeclaredType("Blog", "app")) == "Blog"

    def test_function_provider(self):
        provider = FunctionTableNameProvider(lambda d: f"tbl_{d.name.lower()}")
        assert provider.get_table_name(DeclaredType("Blog", "app")) == "tbl_blog"


class TestDataNamespaces:

    def test_defaults(self):
        namespaces = DataNamespaces()
        assert namespaces.base_namespace == "ApplicationDataTypes"
        assert namespaces.dao_namespace == "ApplicationDataTypes.Dao"
        assert namespaces.wrapper_namespace == "ApplicationDataTypes.Wrappers"

    def test_for_type(self):
        namespaces = DataNamespaces.for_type(DeclaredType("Blog", "app.blog"))
        assert namespaces.dao_namespace == "app.blog.Dao"

    def test_for_type_without_namespace(self):
        assert DataNamespaces.for_type(DeclaredType("Blog")).base_namespace == "ApplicationDataTypes"
