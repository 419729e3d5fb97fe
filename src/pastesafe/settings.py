#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Settings validator.

Routes every value of an element's settings mapping to the sanitizer that
matches its field classification in the widget schema registry:

==========  ==========================================================
html        ``sanitize_html``
url         ``sanitize_url`` (objects: the ``url`` member)
css         ``sanitize_css``
color       unchanged if it is a colour literal, else plain text
plainText   ``sanitize_plain_text`` (the default for unknown fields)
number      numbers unchanged, strings as plain text
boolean     booleans unchanged, strings as plain text
opaque      unchanged (registry opt-in only)
==========  ==========================================================

Booleans, finite numbers and ``None`` are harmless under every
classification and pass through. Objects and lists recurse with their
nested field table. Any other Python type cannot come from JSON and is
dropped.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from pastesafe.constants import COLOR_LITERAL_PATTERN, DEFAULT_CLASSIFICATION
from pastesafe.logging_utils import preview
from pastesafe.options import DEFAULT_POLICY, SanitizerPolicy
from pastesafe.schema import DEFAULT_REGISTRY, FieldSchema, SchemaEntry, SchemaRegistry
from pastesafe.utils.css_sanitizer import sanitize_css
from pastesafe.utils.html_sanitizer import sanitize_html, sanitize_plain_text
from pastesafe.utils.security import sanitize_url

logger = logging.getLogger(__name__)

# Marker for values removed from the output mapping
_DROP = object()


def is_color_literal(value: str) -> bool:
    """Check a value against the strict colour-literal shape.

    Examples
    --------
    >>> is_color_literal("#ff0000")
    True
    >>> is_color_literal("rgba(0, 0, 0, 0.5)")
    True
    >>> is_color_literal("var(--e-global-color-primary)")
    True
    >>> is_color_literal("red;background:url(x)")
    False

    """
    return bool(COLOR_LITERAL_PATTERN.match(value))


def _sanitize_string(value: str, classification: str, policy: SanitizerPolicy) -> str:
    if classification == "html":
        return sanitize_html(value, policy=policy)
    if classification == "url":
        return sanitize_url(value, policy=policy)
    if classification == "css":
        return sanitize_css(value, policy=policy)
    if classification == "opaque":
        return value
    if classification == "color":
        if is_color_literal(value):
            return value
        logger.debug("Value %s is not a colour literal; treating as plain text", preview(value))
    return sanitize_plain_text(value, policy=policy)


def _copy_opaque(value: Any, depth: int, policy: SanitizerPolicy) -> Any:
    """Deep-copy JSON-like data without classifying it."""
    if value is None or isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    if depth >= policy.max_settings_depth:
        return _DROP
    if isinstance(value, Mapping):
        copied = {}
        for key, item in value.items():
            item = _copy_opaque(item, depth + 1, policy)
            if isinstance(key, str) and item is not _DROP:
                copied[key] = item
        return copied
    if isinstance(value, (list, tuple)):
        return [item for item in (_copy_opaque(v, depth + 1, policy) for v in value) if item is not _DROP]
    return _DROP


def _sanitize_value(
    value: Any,
    entry: SchemaEntry,
    registry: SchemaRegistry,
    policy: SanitizerPolicy,
    depth: int,
) -> Any:
    classification = entry if isinstance(entry, str) else DEFAULT_CLASSIFICATION

    if classification == "opaque":
        return _copy_opaque(value, depth, policy)

    if value is None or isinstance(value, bool):
        return value

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            logger.debug("Replaced non-finite number with 0")
            return 0
        return value

    if isinstance(value, str):
        return _sanitize_string(value, classification, policy)

    if isinstance(value, (Mapping, list, tuple)):
        if depth >= policy.max_settings_depth:
            logger.warning("Dropped settings value nested deeper than %d levels", policy.max_settings_depth)
            return _DROP

        if isinstance(value, Mapping):
            return _validate_mapping(value, registry.nested(entry), registry, policy, depth + 1)

        items = []
        for item in value:
            sanitized = _sanitize_value(item, entry, registry, policy, depth + 1)
            if sanitized is not _DROP:
                items.append(sanitized)
        return items

    logger.debug("Dropped settings value of non-JSON type %s", type(value).__name__)
    return _DROP


def _validate_mapping(
    settings: Mapping[str, Any],
    field_schema: FieldSchema,
    registry: SchemaRegistry,
    policy: SanitizerPolicy,
    depth: int,
) -> dict[str, Any]:
    validated: dict[str, Any] = {}

    for key, value in settings.items():
        if not isinstance(key, str):
            logger.debug("Dropped settings entry with non-string key %s", preview(key))
            continue

        sanitized = _sanitize_value(value, field_schema.resolve(key), registry, policy, depth)
        if sanitized is not _DROP:
            validated[key] = sanitized

    return validated


def validate_settings(
    settings: object,
    schema: str | FieldSchema | None = None,
    *,
    registry: SchemaRegistry | None = None,
    policy: SanitizerPolicy | None = None,
) -> dict[str, Any]:
    """Sanitize an element's settings mapping field by field.

    Parameters
    ----------
    settings : object
        Settings mapping; anything else (including the ``[]`` the page
        builder writes for empty settings) yields ``{}``
    schema : str or FieldSchema, optional
        Widget/element type looked up in ``registry``, or an explicit field
        table layered over the registry's common fields. None uses the
        common fields only.
    registry : SchemaRegistry, optional
        Widget schema registry
    policy : SanitizerPolicy, optional
        Sanitizer policy

    Returns
    -------
    dict
        A new mapping; the input is never mutated. Never raises.

    Examples
    --------
    >>> validate_settings({"title": "<script>bad</script>Hello", "title_color": "#ff0000"}, "heading")
    {'title': 'Hello', 'title_color': '#ff0000'}
    >>> validate_settings({"editor": "<p onclick='x()'>Hi</p>"}, "text-editor")
    {'editor': '<p>Hi</p>'}

    """
    registry = registry if registry is not None else DEFAULT_REGISTRY
    policy = policy if policy is not None else DEFAULT_POLICY

    if not isinstance(settings, Mapping):
        if settings not in (None, []):
            logger.debug("Settings of type %s replaced with an empty mapping", type(settings).__name__)
        return {}

    if isinstance(schema, FieldSchema):
        field_schema = registry.common.merged_with(schema)
    else:
        field_schema = registry.resolve(schema)

    return _validate_mapping(settings, field_schema, registry, policy, 0)


__all__ = ["validate_settings", "is_color_literal"]
