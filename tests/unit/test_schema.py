#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the widget schema registry."""

import pytest

from pastesafe import DEFAULT_REGISTRY, FieldSchema, SchemaRegistry, SchemaRegistryError


@pytest.mark.unit
class TestFieldSchema:
    """Test suite for FieldSchema resolution and construction."""

    def test_resolution_order(self):
        """Test exact names, then patterns in order, then plainText."""
        schema = FieldSchema.from_mapping({"link_color": "plainText", "*_color": "color", "*_link": "url"})
        assert schema.resolve("link_color") == "plainText"
        assert schema.resolve("title_color") == "color"
        assert schema.resolve("button_link") == "url"
        assert schema.resolve("unknown") == "plainText"

    def test_patterns_are_case_sensitive(self):
        """Test that glob patterns do not match case-insensitively."""
        schema = FieldSchema.from_mapping({"*_color": "color"})
        assert schema.resolve("TITLE_COLOR") == "plainText"

    def test_nested_tables(self):
        """Test that mapping values build nested field tables."""
        schema = FieldSchema.from_mapping({"tabs": {"tab_content": "html"}})
        nested = schema.resolve("tabs")
        assert isinstance(nested, FieldSchema)
        assert nested.resolve("tab_content") == "html"

    def test_merged_with(self):
        """Test that layered exact names and patterns take precedence."""
        base = FieldSchema.from_mapping({"title": "plainText", "*_x": "number"})
        top = FieldSchema.from_mapping({"title": "html", "a_*": "url"})
        merged = base.merged_with(top)
        assert merged.resolve("title") == "html"
        assert merged.resolve("a_x") == "url"
        assert merged.resolve("b_x") == "number"
        assert base.merged_with(None) is base

    @pytest.mark.parametrize(
        "data",
        [
            {"title": "markup"},
            {"title": 5},
            {"": "html"},
            {"tabs": {"content": "script"}},
        ],
    )
    def test_malformed_tables_raise(self, data):
        """Test that unknown classifications and wrong shapes raise."""
        with pytest.raises(SchemaRegistryError):
            FieldSchema.from_mapping(data)

    def test_error_reports_field_path(self):
        """Test that errors carry the dotted path of the bad entry."""
        with pytest.raises(SchemaRegistryError) as exc_info:
            SchemaRegistry.from_mapping({"widgets": {"tabs": {"tabs": {"tab_content": "bogus"}}}})
        assert exc_info.value.field_path == "widgets.tabs.tabs.tab_content"


@pytest.mark.unit
class TestSchemaRegistry:
    """Test suite for SchemaRegistry."""

    def test_widget_layered_over_common(self):
        """Test that widget tables extend the common table."""
        schema = DEFAULT_REGISTRY.resolve("text-editor")
        assert schema.resolve("editor") == "html"
        assert schema.resolve("custom_css") == "css"
        assert schema.resolve("title_color") == "color"

    def test_unknown_widget_falls_back_to_common(self):
        """Test that unregistered and non-string types use the common table."""
        assert DEFAULT_REGISTRY.resolve("no-such-widget").resolve("editor") == "plainText"
        assert DEFAULT_REGISTRY.resolve(None) is DEFAULT_REGISTRY.common
        assert DEFAULT_REGISTRY.resolve(42) is DEFAULT_REGISTRY.common

    def test_html_only_through_registry(self):
        """Test that permissive classifications need an explicit entry."""
        common = DEFAULT_REGISTRY.common
        for name in ("html", "content", "description", "title", "editor"):
            assert common.resolve(name) not in ("html", "css", "opaque")

    def test_nested_for_link_objects(self):
        """Test that url fields holding objects sanitize their url member."""
        nested = DEFAULT_REGISTRY.nested("url")
        assert nested.resolve("url") == "url"
        assert nested.resolve("is_external") == "plainText"

    def test_nested_for_tables(self):
        """Test that nested tables are layered over common."""
        tabs = DEFAULT_REGISTRY.resolve("tabs").resolve("tabs")
        nested = DEFAULT_REGISTRY.nested(tabs)
        assert nested.resolve("tab_content") == "html"
        assert nested.resolve("_id") == "plainText"
        assert nested.resolve("item_color") == "color"

    def test_nested_for_plain_classification(self):
        """Test that other classifications use the common table for objects."""
        assert DEFAULT_REGISTRY.nested("number") is DEFAULT_REGISTRY.common

    def test_from_mapping_and_merge(self):
        """Test building a registry from plain data and layering it."""
        custom = SchemaRegistry.from_mapping(
            {"common": {"*_markup": "html"}, "widgets": {"heading": {"subtitle": "html"}, "my-widget": {"x": "url"}}}
        )
        merged = DEFAULT_REGISTRY.merged_with(custom)
        heading = merged.resolve("heading")
        assert heading.resolve("subtitle") == "html"
        assert heading.resolve("title") == "plainText"
        assert heading.resolve("intro_markup") == "html"
        assert merged.resolve("my-widget").resolve("x") == "url"
        assert DEFAULT_REGISTRY.resolve("heading").resolve("subtitle") == "plainText"

    @pytest.mark.parametrize("data", [[], {"unknown": {}}, {"widgets": []}, {"common": "html"}])
    def test_malformed_registry_raises(self, data):
        """Test that malformed registry data raises SchemaRegistryError."""
        with pytest.raises(SchemaRegistryError):
            SchemaRegistry.from_mapping(data)
