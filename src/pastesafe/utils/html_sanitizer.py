#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pastesafe/utils/html_sanitizer.py
"""HTML sanitization utilities for security.

This module whitelist-filters markup fragments taken from untrusted page
builder data before they reach a live editor DOM. Fragments are parsed with
BeautifulSoup (parsing never executes embedded script) and the tree is
cleaned in place:

- tags in ``policy.drop_content_tags`` (script, style, iframe, object,
  embed, link, meta, ...) are removed together with their content
- any other tag not in ``policy.allowed_tags`` is unwrapped: the tag goes,
  its children stay in its position
- comments, CDATA sections, processing instructions and doctypes are removed
- ``on*`` event-handler attributes are always removed; other attributes
  must be whitelisted for the tag
- ``href``/``src``/``cite``/``poster`` go through the URL sanitizer,
  ``srcset`` is filtered entry by entry, ``style`` goes through the CSS
  sanitizer

A fragment that needs no change is returned exactly as given. Otherwise the
cleaned tree is serialized back to markup.

It also provides the plain-text sanitizer used for settings that must never
contain markup.
"""

from __future__ import annotations

import logging
import warnings
from typing import Any

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning, Tag
from bs4.element import PreformattedString
from bs4.exceptions import FeatureNotFound, ParserRejectedMarkup

from pastesafe.constants import (
    FRAMEWORK_DATA_ATTRIBUTE_PREFIXES,
    MARKUP_LIKE_PATTERN,
    SRCSET_HTML_ATTRIBUTES,
    SUSPICIOUS_RAW_MARKUP_PATTERN,
    URL_HTML_ATTRIBUTES,
)
from pastesafe.exceptions import DependencyError
from pastesafe.logging_utils import preview
from pastesafe.options import DEFAULT_POLICY, SanitizerPolicy
from pastesafe.utils.css_sanitizer import sanitize_css
from pastesafe.utils.security import is_url_scheme_dangerous, sanitize_url

logger = logging.getLogger(__name__)


def _parse_fragment(content: str, policy: SanitizerPolicy) -> tuple[BeautifulSoup, Tag, bool]:
    """Parse ``content`` and return the soup, the tag holding the fragment and
    whether any tag repeated an attribute.

    Browsers keep the first of repeated attributes. html5lib and lxml do the
    same; html.parser is told to, so the cleaned tree matches what a browser
    would build.

    Raises
    ------
    DependencyError
        If the configured parser backend is not installed.

    """
    duplicates: list[str] = []
    builder_options: dict[str, Any] = {}
    if policy.html_parser == "html.parser":
        # Returning without assigning keeps the first value
        builder_options["on_duplicate_attribute"] = lambda attrs, key, value: duplicates.append(key)

    try:
        with warnings.catch_warnings():
            # Fragments such as "https://example.com" are legitimate input here
            warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
            soup = BeautifulSoup(content, policy.html_parser, multi_valued_attributes=None, **builder_options)
    except FeatureNotFound as e:
        raise DependencyError(
            f"HTML parser '{policy.html_parser}'",
            missing_packages=[(policy.html_parser, "")],
            original_error=e,
        ) from e

    # html5lib and lxml wrap fragments in a full document
    if policy.html_parser != "html.parser" and soup.body is not None:
        return soup, soup.body, bool(duplicates)
    return soup, soup, bool(duplicates)


def _is_event_handler_attribute(attr_name: str) -> bool:
    """Check if attribute name matches the ``on*`` event-handler pattern.

    Examples
    --------
    >>> _is_event_handler_attribute("onclick")
    True
    >>> _is_event_handler_attribute("OnMouseOver")
    True
    >>> _is_event_handler_attribute("class")
    False

    """
    return attr_name.lower().startswith("on")


def _is_attribute_allowed(attr_name: str, allowed: frozenset[str], policy: SanitizerPolicy) -> bool:
    if attr_name in allowed or attr_name.startswith("aria-"):
        return True
    if policy.allow_data_attributes and attr_name.startswith("data-") and len(attr_name) > len("data-"):
        return not attr_name.startswith(FRAMEWORK_DATA_ATTRIBUTE_PREFIXES)
    return False


def _sanitize_srcset(srcset_value: str, policy: SanitizerPolicy) -> str | None:
    """Sanitize an HTML srcset attribute value.

    The srcset format is: "url1 descriptor1, url2 descriptor2, ...". Entries
    with unsafe URLs are dropped.

    Parameters
    ----------
    srcset_value : str
        srcset attribute value to sanitize
    policy : SanitizerPolicy
        Policy forwarded to the URL sanitizer

    Returns
    -------
    str or None
        ``srcset_value`` itself if every entry is safe, the remaining safe
        entries joined by ``", "`` otherwise, or None if no entry is safe

    Examples
    --------
    >>> _sanitize_srcset("image1.jpg 1x, image2.jpg 2x", DEFAULT_POLICY)
    'image1.jpg 1x, image2.jpg 2x'
    >>> _sanitize_srcset("javascript:alert(1) 1x", DEFAULT_POLICY) is None
    True
    >>> _sanitize_srcset("safe.jpg 1x, javascript:alert(1) 2x", DEFAULT_POLICY)
    'safe.jpg 1x'

    """
    if not srcset_value or not srcset_value.strip():
        return srcset_value

    safe_entries = []
    dropped = False

    for entry in srcset_value.split(","):
        entry = entry.strip()
        if not entry:
            continue

        # Format: "url descriptor" or just "url"
        parts = entry.split(None, 1)
        if sanitize_url(parts[0], policy=policy):
            safe_entries.append(entry)
        else:
            dropped = True

    if not dropped:
        return srcset_value
    if not safe_entries:
        return None
    return ", ".join(safe_entries)


def _clean_attributes(tag: Tag, policy: SanitizerPolicy) -> bool:
    """Filter the attributes of an allowed tag in place.

    Returns
    -------
    bool
        True if any attribute was removed or rewritten

    """
    allowed = policy.attributes_for(tag.name.lower())
    modified = False

    for attr_name, attr_value in list(tag.attrs.items()):
        attr_name_lower = attr_name.lower()
        value = attr_value if isinstance(attr_value, str) else " ".join(attr_value or [])

        if _is_event_handler_attribute(attr_name_lower):
            logger.warning("Removed event handler attribute %r from <%s>", attr_name, tag.name)
            del tag.attrs[attr_name]
            modified = True
            continue

        if not _is_attribute_allowed(attr_name_lower, allowed, policy):
            logger.debug("Removed non-whitelisted attribute %r from <%s>", attr_name, tag.name)
            del tag.attrs[attr_name]
            modified = True
            continue

        if attr_name_lower in URL_HTML_ATTRIBUTES:
            if value.strip() and sanitize_url(value, policy=policy) == "":
                del tag.attrs[attr_name]
                modified = True
            continue

        if attr_name_lower in SRCSET_HTML_ATTRIBUTES:
            sanitized_srcset = _sanitize_srcset(value, policy)
            if sanitized_srcset is None:
                del tag.attrs[attr_name]
                modified = True
            elif sanitized_srcset != value:
                tag.attrs[attr_name] = sanitized_srcset
                modified = True
            continue

        if attr_name_lower == "style":
            sanitized_style = sanitize_css(value, policy=policy)
            if sanitized_style != value:
                if sanitized_style.strip():
                    tag.attrs[attr_name] = sanitized_style
                else:
                    del tag.attrs[attr_name]
                modified = True
            continue

        if attr_name_lower.startswith("data-") and is_url_scheme_dangerous(value):
            logger.warning("Removed data attribute %r carrying a dangerous URL: %s", attr_name, preview(value))
            del tag.attrs[attr_name]
            modified = True

    return modified


def _clean_tree(root: Tag, policy: SanitizerPolicy, *, keep_tags: bool = True) -> bool:
    """Clean the fragment rooted at ``root`` in place.

    The walk is iterative so deeply nested markup cannot exhaust the stack.

    Parameters
    ----------
    root : Tag
        Fragment container (the soup itself or ``<body>``)
    policy : SanitizerPolicy
        Whitelist configuration
    keep_tags : bool, default True
        When False, only dangerous containers and non-text nodes are
        removed; the remaining tags are left for text extraction

    Returns
    -------
    bool
        True if anything was removed or rewritten

    """
    modified = False
    to_unwrap: list[Tag] = []
    stack: list[Tag] = [root]

    while stack:
        node = stack.pop()
        for child in list(node.children):
            if isinstance(child, PreformattedString):
                # Comments, CDATA, processing instructions, doctypes
                child.extract()
                modified = True
                continue

            if not isinstance(child, Tag):
                continue

            tag_name = (child.name or "").lower()
            if tag_name in policy.drop_content_tags:
                logger.warning("Removed <%s> element and its content", tag_name)
                child.decompose()
                modified = True
                continue

            if keep_tags:
                if tag_name in policy.allowed_tags:
                    modified = _clean_attributes(child, policy) or modified
                else:
                    logger.debug("Unwrapping non-whitelisted <%s> element", tag_name)
                    to_unwrap.append(child)
                    modified = True

            stack.append(child)

    for tag in reversed(to_unwrap):
        tag.unwrap()

    return modified


def sanitize_html(content: object, *, policy: SanitizerPolicy = DEFAULT_POLICY) -> str:
    """Sanitize an HTML fragment by whitelist.

    Parameters
    ----------
    content : object
        HTML fragment; non-string input yields ``""``
    policy : SanitizerPolicy, optional
        Tag/attribute whitelists, URL and parser settings

    Returns
    -------
    str
        ``content`` unchanged if it needs no sanitization, otherwise the
        serialized, cleaned fragment. Never raises for any input.

    Examples
    --------
    >>> sanitize_html("<div>Hello<script>alert(1)</script>World</div>")
    '<div>HelloWorld</div>'
    >>> sanitize_html('<button onclick="bad()">Click</button>')
    'Click'
    >>> sanitize_html("<p>Hello <strong>world</strong></p>")
    '<p>Hello <strong>world</strong></p>'
    >>> sanitize_html(None)
    ''

    """
    if not isinstance(content, str):
        return ""

    # No tag can open without "<"
    if "<" not in content:
        return content

    try:
        soup, root, has_duplicates = _parse_fragment(content, policy)
        if has_duplicates:
            logger.warning("Dropped repeated attributes from HTML fragment: %s", preview(content))
        modified = _clean_tree(root, policy) or has_duplicates

        if not modified and not SUSPICIOUS_RAW_MARKUP_PATTERN.search(content):
            return content

        return root.decode_contents()
    except (ParserRejectedMarkup, RecursionError) as e:
        logger.warning("Rejected unparseable HTML fragment (%s): %s", type(e).__name__, preview(content))
        return ""


def sanitize_plain_text(value: object, *, policy: SanitizerPolicy = DEFAULT_POLICY) -> str:
    """Reduce a value to plain text with no markup.

    A string without any markup-like sequence (``<`` followed by a letter,
    ``/``, ``!`` or ``?``) is returned unchanged. Otherwise dangerous
    containers are removed with their content, the remaining text is
    extracted and any ``<``/``>`` left in it are entity-escaped.

    Parameters
    ----------
    value : object
        Text to sanitize; non-string input yields ``""``
    policy : SanitizerPolicy, optional
        Parser and dangerous-container settings

    Returns
    -------
    str
        Plain text safe to place in markup

    Examples
    --------
    >>> sanitize_plain_text("Tom & Jerry < 3")
    'Tom & Jerry < 3'
    >>> sanitize_plain_text("<script>bad</script>Hello <b>world</b>")
    'Hello world'
    >>> sanitize_plain_text("<p>&lt;img src=x&gt;</p>")
    '&lt;img src=x&gt;'

    """
    if not isinstance(value, str):
        return ""

    if not MARKUP_LIKE_PATTERN.search(value):
        return value

    try:
        soup, root, _ = _parse_fragment(value, policy)
        _clean_tree(root, policy, keep_tags=False)
        text = root.get_text()
    except (ParserRejectedMarkup, RecursionError) as e:
        logger.warning("Rejected unparseable text value (%s): %s", type(e).__name__, preview(value))
        return ""

    return text.replace("<", "&lt;").replace(">", "&gt;")


def is_html_safe(content: str, *, policy: SanitizerPolicy = DEFAULT_POLICY) -> bool:
    """Check if an HTML fragment passes sanitization unchanged.

    Examples
    --------
    >>> is_html_safe("<p>Safe content</p>")
    True
    >>> is_html_safe('<div onclick="alert()">Click</div>')
    False

    """
    if not isinstance(content, str):
        return False
    return sanitize_html(content, policy=policy) == content


__all__ = [
    "sanitize_html",
    "sanitize_plain_text",
    "is_html_safe",
]
