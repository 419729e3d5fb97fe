#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Widget schema registry.

The registry maps a widget type (or element type) to an explicit table of
settings fields, each tagged with a semantic classification that selects the
sanitizer for its value. A table is an ordered mapping of exact field names
plus ordered glob patterns (``*_color``); an entry is either a
classification string or a nested ``FieldSchema`` describing an object or a
list of objects (repeater fields).

Field resolution order is: exact name, then patterns in order, then the
fail-closed ``plainText`` default. Permissive handling (``html``, ``css``,
``opaque``) is only ever reached through an explicit registry entry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import Any, Mapping, Union

from pastesafe._default_schema import DEFAULT_SCHEMA_DATA
from pastesafe.constants import DEFAULT_CLASSIFICATION, FIELD_CLASSIFICATIONS, FieldClassification
from pastesafe.exceptions import SchemaRegistryError

logger = logging.getLogger(__name__)

_GLOB_CHARS = frozenset("*?[")

SchemaEntry = Union[FieldClassification, "FieldSchema"]


@dataclass(frozen=True)
class FieldSchema:
    """Field table for one settings mapping.

    Parameters
    ----------
    fields : mapping of str to SchemaEntry
        Exact field names
    patterns : tuple of (str, SchemaEntry)
        Glob patterns tried in order after exact names

    """

    fields: Mapping[str, SchemaEntry] = field(default_factory=dict)
    patterns: tuple[tuple[str, SchemaEntry], ...] = ()

    def resolve(self, field_name: str) -> SchemaEntry:
        """Return the entry for ``field_name``, falling back to ``plainText``.

        Examples
        --------
        >>> schema = FieldSchema({"editor": "html"}, (("*_color", "color"),))
        >>> schema.resolve("editor")
        'html'
        >>> schema.resolve("title_color")
        'color'
        >>> schema.resolve("anything_else")
        'plainText'

        """
        entry = self.fields.get(field_name)
        if entry is not None:
            return entry
        for pattern, pattern_entry in self.patterns:
            if fnmatchcase(field_name, pattern):
                return pattern_entry
        return DEFAULT_CLASSIFICATION

    def merged_with(self, other: "FieldSchema | None") -> "FieldSchema":
        """Layer ``other`` on top of this schema.

        Exact names from ``other`` replace ours; its patterns are tried
        before ours.
        """
        if other is None:
            return self
        merged_fields = dict(self.fields)
        merged_fields.update(other.fields)
        return FieldSchema(merged_fields, tuple(other.patterns) + tuple(self.patterns))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], path: str = "") -> "FieldSchema":
        """Build a field table from a plain mapping.

        Keys containing glob characters become patterns (in insertion
        order). Values are classification strings or nested mappings.

        Raises
        ------
        SchemaRegistryError
            If a value is neither a known classification nor a mapping.

        """
        if not isinstance(data, Mapping):
            raise SchemaRegistryError(
                f"Field table must be a mapping, got {type(data).__name__}", field_path=path or None
            )

        exact: dict[str, SchemaEntry] = {}
        patterns: list[tuple[str, SchemaEntry]] = []

        for name, value in data.items():
            entry_path = f"{path}.{name}" if path else str(name)
            if not isinstance(name, str) or not name:
                raise SchemaRegistryError("Field names must be non-empty strings", field_path=entry_path)

            entry: SchemaEntry
            if isinstance(value, str):
                if value not in FIELD_CLASSIFICATIONS:
                    raise SchemaRegistryError(
                        f"Unknown classification {value!r}; expected one of {sorted(FIELD_CLASSIFICATIONS)}",
                        field_path=entry_path,
                    )
                entry = value  # type: ignore[assignment]
            elif isinstance(value, FieldSchema):
                entry = value
            elif isinstance(value, Mapping):
                entry = cls.from_mapping(value, entry_path)
            else:
                raise SchemaRegistryError(
                    f"Field entry must be a classification or a table, got {type(value).__name__}",
                    field_path=entry_path,
                )

            if _GLOB_CHARS & set(name):
                patterns.append((name, entry))
            else:
                exact[name] = entry

        return cls(exact, tuple(patterns))


@dataclass(frozen=True)
class SchemaRegistry:
    """Widget schema registry.

    Parameters
    ----------
    common : FieldSchema
        Fields shared by every element (layout, advanced tab, colours,
        links). Also used for nested objects without their own table.
    widgets : mapping of str to FieldSchema
        Per widget type (or element type) tables layered over ``common``

    """

    common: FieldSchema = field(default_factory=FieldSchema)
    widgets: Mapping[str, FieldSchema] = field(default_factory=dict)

    def resolve(self, widget_type: object) -> FieldSchema:
        """Return the merged field table for ``widget_type``.

        Unknown or missing types degrade to the common table.
        """
        if isinstance(widget_type, str):
            widget_schema = self.widgets.get(widget_type)
            if widget_schema is None:
                logger.debug("No schema registered for %r; using common fields", widget_type)
            return self.common.merged_with(widget_schema)
        return self.common

    def nested(self, entry: SchemaEntry) -> FieldSchema:
        """Return the table used for an object value described by ``entry``.

        A nested table is layered over ``common``. An object under a ``url``
        field is a link/media control whose ``url`` member is the URL.
        """
        if isinstance(entry, FieldSchema):
            return self.common.merged_with(entry)
        if entry == "url":
            return self.common.merged_with(_LINK_OBJECT_SCHEMA)
        return self.common

    def merged_with(self, other: "SchemaRegistry | None") -> "SchemaRegistry":
        """Layer ``other`` on top of this registry."""
        if other is None:
            return self
        widgets = dict(self.widgets)
        for widget_type, widget_schema in other.widgets.items():
            base = widgets.get(widget_type)
            widgets[widget_type] = base.merged_with(widget_schema) if base is not None else widget_schema
        return SchemaRegistry(self.common.merged_with(other.common), widgets)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SchemaRegistry":
        """Build a registry from ``{"common": {...}, "widgets": {type: {...}}}``.

        Raises
        ------
        SchemaRegistryError
            If the mapping is malformed.

        """
        if not isinstance(data, Mapping):
            raise SchemaRegistryError(f"Schema registry must be a mapping, got {type(data).__name__}")

        unknown = sorted(set(data) - {"common", "widgets"})
        if unknown:
            raise SchemaRegistryError(f"Unknown schema registry section(s): {', '.join(map(str, unknown))}")

        common = FieldSchema.from_mapping(data.get("common", {}), "common")

        widgets_data = data.get("widgets", {})
        if not isinstance(widgets_data, Mapping):
            raise SchemaRegistryError("'widgets' must be a mapping of widget type to field table", field_path="widgets")

        widgets = {
            str(widget_type): FieldSchema.from_mapping(table, f"widgets.{widget_type}")
            for widget_type, table in widgets_data.items()
        }
        return cls(common, widgets)


_LINK_OBJECT_SCHEMA = FieldSchema({"url": "url"})

DEFAULT_REGISTRY = SchemaRegistry.from_mapping(DEFAULT_SCHEMA_DATA)

__all__ = ["SchemaEntry", "FieldSchema", "SchemaRegistry", "DEFAULT_REGISTRY"]
