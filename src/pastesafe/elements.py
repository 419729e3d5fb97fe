#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Element tree walker.

Validates the structure of page-builder element nodes (sections, columns,
containers and widgets) and rebuilds each node with sanitized settings and
children. A node with a malformed identity is rejected as a whole and removed
from its parent's child list; its subtree is never inspected.

Output nodes contain only the recognized members ``id``, ``elType``,
``widgetType``, ``isInner``, ``settings`` and ``elements``. Caches such as
``htmlCache`` or ``editSettings`` are dropped, so stored markup cannot
bypass the settings sanitizers.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pastesafe.constants import (
    ELEMENT_ID_PATTERN,
    ELEMENT_TYPE_PATTERN,
    KNOWN_ELEMENT_TYPES,
    MAX_IDENTIFIER_LENGTH,
    PAYLOAD_NODE_KEY,
    PAYLOAD_NODE_LIST_KEYS,
)
from pastesafe.logging_utils import preview
from pastesafe.options import DEFAULT_POLICY, SanitizerPolicy
from pastesafe.schema import DEFAULT_REGISTRY, SchemaRegistry
from pastesafe.settings import validate_settings

logger = logging.getLogger(__name__)

_KNOWN_NODE_KEYS = frozenset({"id", "elType", "widgetType", "isInner", "settings", "elements"})


class _NodeBudget:
    """Count of element nodes still allowed in one top-level call."""

    def __init__(self, limit: int):
        self.remaining = limit
        self.exhausted_logged = False

    def take(self) -> bool:
        if self.remaining <= 0:
            if not self.exhausted_logged:
                logger.warning("Element budget exhausted; dropping remaining elements")
                self.exhausted_logged = True
            return False
        self.remaining -= 1
        return True


def is_valid_element_type(value: object) -> bool:
    """Check an ``elType``/``widgetType`` value.

    Examples
    --------
    >>> is_valid_element_type("widget")
    True
    >>> is_valid_element_type("wp-widget-archives")
    True
    >>> is_valid_element_type("<img src=x>")
    False
    >>> is_valid_element_type(42)
    False

    """
    return (
        isinstance(value, str)
        and 0 < len(value) <= MAX_IDENTIFIER_LENGTH
        and ELEMENT_TYPE_PATTERN.match(value) is not None
    )


def is_valid_element_id(value: object) -> bool:
    """Check an element ``id`` (short token string or integer).

    Examples
    --------
    >>> is_valid_element_id("3f2a9c1")
    True
    >>> is_valid_element_id(17)
    True
    >>> is_valid_element_id('x" onload="alert(1)')
    False

    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return (
        isinstance(value, str)
        and 0 < len(value) <= MAX_IDENTIFIER_LENGTH
        and ELEMENT_ID_PATTERN.match(value) is not None
    )


def _sanitize_node(
    node: object,
    depth: int,
    registry: SchemaRegistry,
    policy: SanitizerPolicy,
    budget: _NodeBudget,
) -> dict[str, Any] | None:
    if not isinstance(node, Mapping):
        logger.debug("Rejected element node of type %s", type(node).__name__)
        return None

    if depth > policy.max_element_depth:
        logger.warning("Rejected element nested deeper than %d levels", policy.max_element_depth)
        return None

    el_type = node.get("elType")
    if not is_valid_element_type(el_type):
        logger.warning("Rejected element with invalid elType: %s", preview(el_type))
        return None

    widget_type = node.get("widgetType")
    if widget_type is not None and not is_valid_element_type(widget_type):
        logger.warning("Rejected element with invalid widgetType: %s", preview(widget_type))
        return None

    element_id = node.get("id")
    if element_id is not None and not is_valid_element_id(element_id):
        logger.warning("Rejected element with invalid id: %s", preview(element_id))
        return None

    if not budget.take():
        return None

    if el_type not in KNOWN_ELEMENT_TYPES:
        logger.debug("Element type %r is not a stock type", el_type)

    extra_keys = set(node) - _KNOWN_NODE_KEYS
    if extra_keys:
        logger.debug("Dropped element members: %s", ", ".join(sorted(map(str, extra_keys))))

    sanitized: dict[str, Any] = {}
    if element_id is not None:
        sanitized["id"] = element_id
    sanitized["elType"] = el_type
    if widget_type is not None:
        sanitized["widgetType"] = widget_type

    is_inner = node.get("isInner", False)
    sanitized["isInner"] = is_inner if isinstance(is_inner, bool) else bool(is_inner)

    sanitized["settings"] = validate_settings(
        node.get("settings"),
        widget_type if widget_type is not None else el_type,
        registry=registry,
        policy=policy,
    )
    sanitized["elements"] = _sanitize_node_list(node.get("elements"), depth + 1, registry, policy, budget)
    return sanitized


def _sanitize_node_list(
    nodes: object,
    depth: int,
    registry: SchemaRegistry,
    policy: SanitizerPolicy,
    budget: _NodeBudget,
) -> list[dict[str, Any]]:
    if not isinstance(nodes, (list, tuple)):
        if nodes is not None:
            logger.debug("Replaced non-list child collection of type %s", type(nodes).__name__)
        return []

    children = []
    for child in nodes:
        sanitized = _sanitize_node(child, depth, registry, policy, budget)
        if sanitized is not None:
            children.append(sanitized)
    return children


def sanitize_element_data(
    node: object,
    depth: int = 0,
    *,
    registry: SchemaRegistry | None = None,
    policy: SanitizerPolicy | None = None,
) -> dict[str, Any] | None:
    """Validate one element node and sanitize it recursively.

    Parameters
    ----------
    node : object
        Element node (normally a mapping decoded from clipboard JSON)
    depth : int, default 0
        Nesting depth of ``node``; nodes deeper than
        ``policy.max_element_depth`` are rejected. Negative values count
        as 0 and a non-integer depth rejects the node
    registry : SchemaRegistry, optional
        Widget schema registry used for every node's settings
    policy : SanitizerPolicy, optional
        Sanitizer policy

    Returns
    -------
    dict or None
        A new node sharing no mutable structure with ``node``, or None if the
        node is rejected. Rejected children are removed from ``elements``.
        Never raises.

    Examples
    --------
    >>> sanitize_element_data({"elType": "widget", "widgetType": "heading", "settings": {"title": "<b>Hi</b>"}})
    {'elType': 'widget', 'widgetType': 'heading', 'isInner': False, 'settings': {'title': 'Hi'}, 'elements': []}
    >>> sanitize_element_data({"elType": "<script>"}) is None
    True

    """
    registry = registry if registry is not None else DEFAULT_REGISTRY
    policy = policy if policy is not None else DEFAULT_POLICY
    if not isinstance(depth, int) or isinstance(depth, bool):
        logger.debug("Rejected element with non-integer depth %r", depth)
        return None
    depth = max(depth, 0)
    budget = _NodeBudget(policy.max_element_count)
    return _sanitize_node(node, depth, registry, policy, budget)


def sanitize_clipboard_payload(
    data: object,
    *,
    registry: SchemaRegistry | None = None,
    policy: SanitizerPolicy | None = None,
) -> Any:
    """Sanitize a whole clipboard payload.

    Accepted shapes:

    - a list of element nodes: rejected nodes are removed
    - a single element node (a mapping with ``elType``)
    - a wrapper mapping with an ``element`` member and/or ``elements`` /
      ``content`` node lists (as in copy/paste and template exports); its
      other members are validated as common settings

    One element budget is shared across the whole payload.

    Parameters
    ----------
    data : object
        Decoded clipboard JSON
    registry : SchemaRegistry, optional
        Widget schema registry
    policy : SanitizerPolicy, optional
        Sanitizer policy

    Returns
    -------
    list, dict or None
        Sanitized payload in the same shape, or None if the payload (or its
        single root node) is rejected. Never raises.

    """
    registry = registry if registry is not None else DEFAULT_REGISTRY
    policy = policy if policy is not None else DEFAULT_POLICY
    budget = _NodeBudget(policy.max_element_count)

    if isinstance(data, (list, tuple)):
        return _sanitize_node_list(data, 0, registry, policy, budget)

    if not isinstance(data, Mapping):
        logger.warning("Rejected clipboard payload of type %s", type(data).__name__)
        return None

    if "elType" in data:
        return _sanitize_node(data, 0, registry, policy, budget)

    node_keys = (PAYLOAD_NODE_KEY,) + PAYLOAD_NODE_LIST_KEYS
    if not any(key in data for key in node_keys):
        logger.warning("Rejected clipboard payload without element data")
        return None

    wrapper: dict[str, Any] = {}
    for key, value in data.items():
        if key == PAYLOAD_NODE_KEY:
            wrapper[key] = _sanitize_node(value, 0, registry, policy, budget)
        elif key in PAYLOAD_NODE_LIST_KEYS and isinstance(value, (list, tuple)):
            wrapper[key] = _sanitize_node_list(value, 0, registry, policy, budget)
        else:
            wrapper.update(validate_settings({key: value}, registry=registry, policy=policy))
    return wrapper


__all__ = [
    "sanitize_element_data",
    "sanitize_clipboard_payload",
    "is_valid_element_type",
    "is_valid_element_id",
]
