#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pastesafe/utils/css_sanitizer.py
"""Inline CSS sanitization.

The sanitizer is a blacklist of known script-executing constructs, not a
property whitelist: the CSS property space is too large to enumerate without
breaking legitimate styling. Text is split into declarations (and the
selector/at-rule preludes around ``{`` and ``}``); a declaration carrying a
dangerous construct is removed on its own and its siblings are kept verbatim.

Dangerous constructs:
- ``url(...)`` whose reference fails the URL sanitizer
- ``expression(...)`` (legacy script-in-CSS)
- ``behavior:`` and ``-moz-binding`` bindings
- ``@import``
- bare ``javascript:``/``vbscript:`` tokens and markup openers (``</style``)

Detection runs on a normalized copy of each declaration (comments removed,
CSS escapes decoded, whitespace dropped, lowercased) so that
``expr/**/ession(`` or ``\\65 xpression(`` are caught.
"""

from __future__ import annotations

import logging
import re

from pastesafe.constants import (
    CSS_DANGEROUS_PATTERNS,
    CSS_ESCAPE_PATTERN,
    CSS_URL_FUNCTION_PATTERN,
)
from pastesafe.logging_utils import preview
from pastesafe.options import DEFAULT_POLICY, SanitizerPolicy
from pastesafe.utils.security import sanitize_null_bytes, sanitize_url

logger = logging.getLogger(__name__)


def _decode_css_escape(match: re.Match[str]) -> str:
    hex_digits, literal = match.group(1), match.group(2)
    if hex_digits is not None:
        codepoint = int(hex_digits, 16)
        if codepoint == 0 or codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
            return "\ufffd"
        return chr(codepoint)
    return literal


def _strip_css_comments(text: str) -> str:
    """Remove comments outside quoted strings.

    ``/*`` inside a string is literal text, so a pair of strings cannot hide
    what sits between them. A newline ends an unterminated string.
    """
    kept: list[str] = []
    start = 0
    quote: str | None = None
    i = 0
    length = len(text)

    while i < length:
        char = text[i]
        if quote:
            if char == "\\":
                i += 2
                continue
            if char == quote or char == "\n":
                quote = None
        elif char == "\\":
            i += 2
            continue
        elif char in ("'", '"'):
            quote = char
        elif char == "/" and text.startswith("/*", i):
            kept.append(text[start:i])
            end = text.find("*/", i + 2)
            i = start = length if end == -1 else end + 2
            continue
        i += 1

    kept.append(text[start:])
    return "".join(kept)


def _decode_css(text: str) -> str:
    """Remove comments and decode escapes, keeping whitespace and case."""
    text = sanitize_null_bytes(text)
    text = _strip_css_comments(text)
    return CSS_ESCAPE_PATTERN.sub(_decode_css_escape, text)


def _split_declarations(css: str) -> list[tuple[str, str]]:
    """Split CSS text into ``(segment, delimiter)`` pairs.

    Segments end at ``;``, ``{`` or ``}`` outside quotes, parentheses and
    comments. Joining every ``segment + delimiter`` gives back ``css``
    exactly. The last pair has an empty delimiter.
    """
    parts: list[tuple[str, str]] = []
    start = 0
    depth = 0
    quote: str | None = None
    i = 0
    length = len(css)

    while i < length:
        char = css[i]
        if quote:
            if char == "\\":
                i += 2
                continue
            if char == quote:
                quote = None
        elif char == "/" and css.startswith("/*", i):
            end = css.find("*/", i + 2)
            i = length if end == -1 else end + 2
            continue
        elif char == "\\":
            i += 2
            continue
        elif char in ("'", '"'):
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth = max(0, depth - 1)
        elif char in ";{}" and depth == 0:
            parts.append((css[start:i], char))
            start = i + 1
        i += 1

    parts.append((css[start:], ""))
    return parts


def _find_dangerous_construct(segment: str, policy: SanitizerPolicy) -> str | None:
    """Return a short reason if ``segment`` carries a dangerous construct."""
    decoded = _decode_css(segment)

    for match in CSS_URL_FUNCTION_PATTERN.finditer(decoded.lower()):
        reference = match.group("url").strip()
        if reference and sanitize_url(reference, policy=policy) == "":
            return "url()"

    compact = "".join(decoded.split()).lower()
    for pattern in CSS_DANGEROUS_PATTERNS:
        if pattern.search(compact):
            return pattern.pattern

    # url( that never closes cannot be classified
    if "url(" in compact and not CSS_URL_FUNCTION_PATTERN.search(decoded.lower()):
        return "unterminated url("

    return None


def sanitize_css(css: object, *, policy: SanitizerPolicy = DEFAULT_POLICY) -> str:
    """Remove script-executing constructs from CSS declaration text.

    Only the offending declarations are removed. Text without any dangerous
    construct is returned unchanged, byte-for-byte (no minification, no
    whitespace trimming). This function never raises.

    Parameters
    ----------
    css : object
        CSS declaration text (an inline ``style`` value or a custom-CSS
        field); non-string input yields ``""``
    policy : SanitizerPolicy, optional
        Policy forwarded to the URL sanitizer for ``url()`` references

    Returns
    -------
    str
        Sanitized CSS text

    Examples
    --------
    >>> sanitize_css("color: red; background: url(javascript:alert(1))")
    'color: red;'
    >>> sanitize_css("width: expression(alert(1)); margin: 0")
    ' margin: 0'
    >>> sanitize_css("background: url('/img/bg.png') no-repeat")
    "background: url('/img/bg.png') no-repeat"
    >>> sanitize_css(None)
    ''

    """
    if not isinstance(css, str):
        return ""
    if not css:
        return css

    kept: list[str] = []
    modified = False

    for segment, delimiter in _split_declarations(css):
        reason = _find_dangerous_construct(segment, policy)
        if reason is None:
            kept.append(segment + delimiter)
            continue

        modified = True
        logger.warning("Removed CSS declaration (%s): %s", reason, preview(segment.strip()))
        # Block braces stay so the surrounding rule structure is intact
        if delimiter in ("{", "}"):
            kept.append(delimiter)

    if not modified:
        return css

    return "".join(kept)


def is_css_safe(css: str, *, policy: SanitizerPolicy = DEFAULT_POLICY) -> bool:
    """Check if CSS text contains no dangerous construct.

    Examples
    --------
    >>> is_css_safe("color: red; font-size: 12px;")
    True
    >>> is_css_safe("width: expression(alert(1))")
    False

    """
    if not isinstance(css, str):
        return False
    return sanitize_css(css, policy=policy) == css


__all__ = ["sanitize_css", "is_css_safe"]
