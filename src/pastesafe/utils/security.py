#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pastesafe/utils/security.py
"""URL security utilities.

This module classifies URL schemes and neutralizes the ones that execute
code when a browser follows or loads them. Classification works on a
normalized copy of the input; an accepted URL is always returned exactly as
it was given.

Functions
---------
- sanitize_null_bytes: Remove null bytes and zero-width characters
- normalize_url_for_classification: Build the lowercase, noise-free copy used for checks
- get_url_scheme: Extract the scheme of a normalized URL
- is_relative_url: Check for scheme-less references (paths, fragments, queries)
- is_url_scheme_dangerous: Check if a URL uses a script-executing scheme
- is_url_safe: Policy-aware boolean check
- sanitize_url: Return the URL unchanged if safe, otherwise ``""``
"""

from __future__ import annotations

import html
import logging
from urllib.parse import unquote, urlsplit

from pastesafe.constants import (
    DANGEROUS_NULL_LIKE_CHARS,
    DANGEROUS_SCHEMES,
    MAX_URL_LENGTH,
    SAFE_DATA_IMAGE_SUBTYPES,
    URL_SCHEME_PATTERN,
    URL_STRIPPED_CHARS,
)
from pastesafe.logging_utils import preview
from pastesafe.options import DEFAULT_POLICY, SanitizerPolicy

logger = logging.getLogger(__name__)


def sanitize_null_bytes(content: str) -> str:
    r"""Remove null bytes and zero-width characters that can bypass XSS filters.

    Parameters
    ----------
    content : str
        Content to clean

    Returns
    -------
    str
        Content with NULL, BOM, zero-width space/joiner/non-joiner and
        word joiner characters removed

    Examples
    --------
    >>> sanitize_null_bytes("java\x00script:")
    'javascript:'
    >>> sanitize_null_bytes("Normal text")
    'Normal text'

    """
    if not content:
        return content

    for char in DANGEROUS_NULL_LIKE_CHARS:
        if char in content:
            content = content.replace(char, "")

    return content


def normalize_url_for_classification(url: str) -> str:
    """Return the copy of ``url`` that scheme checks are run against.

    The normalization mirrors how browsers read a URL before parsing it:
    HTML character references are decoded, null-like characters are dropped,
    leading control characters and spaces are trimmed, tabs and newlines are
    removed everywhere, and the result is lowercased.

    Parameters
    ----------
    url : str
        Raw URL

    Returns
    -------
    str
        Normalized URL (never returned to callers of ``sanitize_url``)

    Examples
    --------
    >>> normalize_url_for_classification(" \\x01jAva\\tScript:alert(1)")
    'javascript:alert(1)'

    """
    normalized = sanitize_null_bytes(html.unescape(url))
    for char in URL_STRIPPED_CHARS:
        normalized = normalized.replace(char, "")
    # C0 controls and space are trimmed by the URL parser
    normalized = normalized.lstrip("".join(chr(c) for c in range(0x21))).rstrip()
    return normalized.lower()


def get_url_scheme(normalized_url: str) -> str | None:
    """Return the scheme of an already-normalized URL, or None if it has none.

    Examples
    --------
    >>> get_url_scheme("https://example.com")
    'https'
    >>> get_url_scheme("/path") is None
    True

    """
    match = URL_SCHEME_PATTERN.match(normalized_url)
    if match:
        return match.group(1)
    return None


def is_relative_url(url: str) -> bool:
    """Check if a URL is relative (no scheme).

    Scheme-relative (``//host``), absolute-path, dot-relative, fragment-only
    and query-only references are relative. A bare reference such as
    ``images/a.png`` is relative only when no ``:`` appears before its first
    ``/``, ``?`` or ``#``; otherwise it may be read as a scheme.

    Parameters
    ----------
    url : str
        Normalized URL to check

    Returns
    -------
    bool
        True if URL is relative, False otherwise

    Examples
    --------
    >>> is_relative_url("#section")
    True
    >>> is_relative_url("images/photo.jpg")
    True
    >>> is_relative_url("https://example.com")
    False
    >>> is_relative_url("jav ascript:alert(1)")
    False

    """
    if not url:
        return False

    if url.startswith(("#", "/", "?", "./", "../", "\\")):
        return True

    cut = len(url)
    for delimiter in ("/", "?", "#"):
        index = url.find(delimiter)
        if index != -1:
            cut = min(cut, index)
    return ":" not in url[:cut]


def _is_safe_data_image(normalized_url: str) -> bool:
    """Check a ``data:`` URL for a raster image media type."""
    media_type = normalized_url[len("data:") :].split(",", 1)[0].split(";", 1)[0].strip()
    if not media_type.startswith("image/"):
        return False
    return media_type[len("image/") :] in SAFE_DATA_IMAGE_SUBTYPES


def is_url_scheme_dangerous(url: str) -> bool:
    """Check if a URL uses a dangerous scheme.

    Dangerous schemes include ``javascript:``, ``vbscript:``, ``data:``,
    ``file:`` and others that can execute script or reach local resources.
    The check also covers percent-encoded scheme prefixes.

    Parameters
    ----------
    url : str
        URL to check

    Returns
    -------
    bool
        True if URL uses a dangerous scheme, False otherwise

    Examples
    --------
    >>> is_url_scheme_dangerous("https://example.com")
    False
    >>> is_url_scheme_dangerous("JaVaScRiPt:alert('xss')")
    True
    >>> is_url_scheme_dangerous("%6A%61vascript:alert(1)")
    True
    >>> is_url_scheme_dangerous("/relative/path")
    False

    """
    if not isinstance(url, str) or not url.strip():
        return False

    normalized = normalize_url_for_classification(url)
    for candidate in (normalized, normalize_url_for_classification(unquote(normalized))):
        scheme = get_url_scheme(candidate)
        if scheme in DANGEROUS_SCHEMES:
            return True

    return False


def is_url_safe(url: str, *, policy: SanitizerPolicy = DEFAULT_POLICY) -> bool:
    """Check if a URL may be used as-is under ``policy``.

    Parameters
    ----------
    url : str
        URL to validate
    policy : SanitizerPolicy, optional
        Scheme allowlist and data-image setting

    Returns
    -------
    bool
        True if the URL classifies unambiguously as safe

    Examples
    --------
    >>> is_url_safe("https://example.com")
    True
    >>> is_url_safe("javascript:alert('xss')")
    False
    >>> is_url_safe("ftp://example.com/file")
    False

    """
    return sanitize_url(url, policy=policy) != ""


def sanitize_url(url: object, *, policy: SanitizerPolicy = DEFAULT_POLICY) -> str:
    """Sanitize a URL by rejecting unsafe or unclassifiable schemes.

    Allowed: ``http(s)`` URLs with a host, scheme-relative (``//host``),
    path-relative, fragment-only and query-only references, plus the other
    schemes in ``policy.allowed_url_schemes`` (``mailto:`` and ``tel:`` by
    default) and, when ``policy.allow_data_images`` is set, raster
    ``data:image/*`` URIs. Everything else yields ``""``.

    This function never raises.

    Parameters
    ----------
    url : object
        URL to sanitize; non-string input yields ``""``
    policy : SanitizerPolicy, optional
        Scheme allowlist and data-image setting

    Returns
    -------
    str
        The input, byte-for-byte, if it is safe; otherwise ``""``

    Examples
    --------
    >>> sanitize_url("https://example.com")
    'https://example.com'
    >>> sanitize_url(" java\\tscript:alert('xss')")
    ''
    >>> sanitize_url("/relative/path")
    '/relative/path'
    >>> sanitize_url(None)
    ''

    """
    if not isinstance(url, str):
        return ""

    if len(url) > MAX_URL_LENGTH:
        logger.warning("Blocked URL exceeding %d characters", MAX_URL_LENGTH)
        return ""

    normalized = normalize_url_for_classification(url)
    if not normalized:
        return ""

    if is_url_scheme_dangerous(url):
        scheme = get_url_scheme(normalized)
        if scheme == "data" and policy.allow_data_images and _is_safe_data_image(normalized):
            return url
        logger.warning("Blocked dangerous URL scheme: %s", preview(url))
        return ""

    if is_relative_url(normalized):
        return url

    scheme = get_url_scheme(normalized)
    if scheme is None:
        logger.warning("Blocked unclassifiable URL: %s", preview(url))
        return ""

    if scheme not in policy.effective_url_schemes:
        logger.warning("Blocked URL with disallowed scheme %r: %s", scheme, preview(url))
        return ""

    try:
        parsed = urlsplit(normalized)
    except ValueError:
        logger.warning("Blocked malformed URL: %s", preview(url))
        return ""

    if scheme in ("http", "https") and not parsed.netloc:
        logger.warning("Blocked %s URL without a host: %s", scheme, preview(url))
        return ""

    return url


__all__ = [
    "sanitize_null_bytes",
    "normalize_url_for_classification",
    "get_url_scheme",
    "is_relative_url",
    "is_url_scheme_dangerous",
    "is_url_safe",
    "sanitize_url",
]
