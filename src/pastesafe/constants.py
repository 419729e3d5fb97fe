#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the pastesafe library.

This module centralizes the static whitelist configuration, limits and type
aliases used across the sanitizers. Nothing here is mutated at runtime.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. URL Constants - Scheme allow/deny lists
3. HTML Constants - Tag and attribute whitelists
4. CSS Constants - Dangerous declaration patterns
5. Element Tree Constants - Structural limits
"""

from __future__ import annotations

import re
from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

FieldClassification = Literal["html", "url", "css", "color", "plainText", "number", "boolean", "opaque"]
HtmlParser = Literal["html.parser", "html5lib", "lxml"]

FIELD_CLASSIFICATIONS: frozenset[str] = frozenset(
    {"html", "url", "css", "color", "plainText", "number", "boolean", "opaque"}
)
DEFAULT_CLASSIFICATION: FieldClassification = "plainText"
HTML_PARSER_CHOICES = ("html.parser", "html5lib", "lxml")
DEFAULT_HTML_PARSER: HtmlParser = "html.parser"

# =============================================================================
# URL Constants
# =============================================================================

# Schemes that are never allowed, regardless of policy
DANGEROUS_SCHEMES = frozenset({"javascript", "vbscript", "livescript", "mocha", "data", "file", "about", "blob"})
DEFAULT_ALLOWED_URL_SCHEMES = frozenset({"http", "https", "mailto", "tel"})

# Raster image MIME subtypes accepted in data: URIs when the policy allows them.
# image/svg+xml is deliberately absent: SVG documents can carry script.
SAFE_DATA_IMAGE_SUBTYPES = frozenset({"png", "jpeg", "jpg", "gif", "webp", "bmp", "avif", "x-icon"})
DEFAULT_ALLOW_DATA_IMAGES = False

# Characters browsers strip from anywhere inside a URL before parsing it
URL_STRIPPED_CHARS = ("\t", "\n", "\r")

# Dangerous null-like and zero-width characters that can bypass XSS filters
DANGEROUS_NULL_LIKE_CHARS = [
    "\x00",  # NULL
    "\ufeff",  # BOM/Zero Width No-Break Space
    "\u200b",  # Zero Width Space
    "\u200c",  # Zero Width Non-Joiner
    "\u200d",  # Zero Width Joiner
    "\u2060",  # Word Joiner
]

URL_SCHEME_PATTERN = re.compile(r"^([a-z][a-z0-9+.\-]*):")
MAX_URL_LENGTH = 8192

# =============================================================================
# HTML Constants
# =============================================================================

# Tags whose whole subtree is removed, content included
DROP_CONTENT_TAGS = frozenset(
    {
        "script",
        "style",
        "iframe",
        "object",
        "embed",
        "link",
        "meta",
        "applet",
        "base",
        "frame",
        "frameset",
        "noscript",
        "template",
        "svg",
        "math",
    }
)

# Tags kept in sanitized markup. Anything else is unwrapped (children kept).
ALLOWED_HTML_TAGS = frozenset(
    {
        "a",
        "abbr",
        "address",
        "article",
        "aside",
        "audio",
        "b",
        "bdi",
        "bdo",
        "blockquote",
        "br",
        "caption",
        "center",
        "cite",
        "code",
        "col",
        "colgroup",
        "dd",
        "del",
        "details",
        "dfn",
        "div",
        "dl",
        "dt",
        "em",
        "figcaption",
        "figure",
        "font",
        "footer",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hr",
        "i",
        "img",
        "ins",
        "kbd",
        "li",
        "mark",
        "nav",
        "ol",
        "p",
        "picture",
        "pre",
        "q",
        "s",
        "samp",
        "section",
        "small",
        "source",
        "span",
        "strike",
        "strong",
        "sub",
        "summary",
        "sup",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "time",
        "tr",
        "track",
        "u",
        "ul",
        "var",
        "video",
        "wbr",
    }
)

# Allowed attributes per tag; "*" applies to every allowed tag
ALLOWED_HTML_ATTRIBUTES: dict[str, frozenset[str]] = {
    "*": frozenset({"class", "id", "style", "title", "lang", "dir", "role"}),
    "a": frozenset({"href", "target", "rel", "name", "hreflang", "download"}),
    "img": frozenset({"src", "srcset", "sizes", "alt", "width", "height", "loading", "decoding"}),
    "video": frozenset(
        {"src", "poster", "controls", "autoplay", "loop", "muted", "playsinline", "preload", "width", "height"}
    ),
    "audio": frozenset({"src", "controls", "autoplay", "loop", "muted", "preload"}),
    "source": frozenset({"src", "srcset", "type", "media", "sizes"}),
    "track": frozenset({"src", "kind", "srclang", "label", "default"}),
    "blockquote": frozenset({"cite"}),
    "q": frozenset({"cite"}),
    "del": frozenset({"cite", "datetime"}),
    "ins": frozenset({"cite", "datetime"}),
    "time": frozenset({"datetime"}),
    "table": frozenset({"border", "cellpadding", "cellspacing", "width", "align", "summary"}),
    "td": frozenset({"colspan", "rowspan", "headers", "align", "valign", "width", "height"}),
    "th": frozenset({"colspan", "rowspan", "headers", "scope", "align", "valign", "width", "height", "abbr"}),
    "col": frozenset({"span", "width"}),
    "colgroup": frozenset({"span", "width"}),
    "ol": frozenset({"start", "reversed", "type"}),
    "ul": frozenset({"type"}),
    "li": frozenset({"value"}),
    "details": frozenset({"open"}),
    "font": frozenset({"color", "face", "size"}),
    "p": frozenset({"align"}),
    "div": frozenset({"align"}),
    "h1": frozenset({"align"}),
    "h2": frozenset({"align"}),
    "h3": frozenset({"align"}),
    "h4": frozenset({"align"}),
    "h5": frozenset({"align"}),
    "h6": frozenset({"align"}),
}

# Attributes whose values are URLs and go through the URL sanitizer
URL_HTML_ATTRIBUTES = frozenset({"href", "src", "cite", "poster"})
SRCSET_HTML_ATTRIBUTES = frozenset({"srcset"})

# data-* prefixes that bind JavaScript frameworks (Alpine.js, Vue.js, Angular, HTMX)
FRAMEWORK_DATA_ATTRIBUTE_PREFIXES = ("data-x-", "data-v-", "data-ng-", "data-hx-")
DEFAULT_ALLOW_DATA_ATTRIBUTES = True

# A string is treated as markup once it contains one of these openers
MARKUP_LIKE_PATTERN = re.compile(r"<[a-zA-Z!/?]")

# Raw-markup tokens that force canonical re-serialization even if the parsed
# tree needed no change (guards against parser differentials)
SUSPICIOUS_RAW_MARKUP_PATTERN = re.compile(
    r"<\s*/?\s*(?:script|style|iframe|object|embed|link|meta|applet|base|frame|noscript|template|svg|math)\b"
    r"|<[^<>]*[\s/'\"]on[a-z]+\s*="
    r"|(?:java|vb)script\s*:"
    r"|<!--",
    re.IGNORECASE,
)

# =============================================================================
# CSS Constants
# =============================================================================

CSS_URL_FUNCTION_PATTERN = re.compile(r"url\(\s*(?P<quote>['\"]?)(?P<url>.*?)(?P=quote)\s*\)", re.DOTALL)
CSS_DANGEROUS_PATTERNS = (
    re.compile(r"expression\("),
    re.compile(r"(?:^|[;{\s])behavior:"),
    re.compile(r"-moz-binding"),
    re.compile(r"@import"),
    re.compile(r"(?:java|vb)script:"),
    re.compile(r"<[a-z/!]"),
)
CSS_ESCAPE_PATTERN = re.compile(r"\\([0-9a-fA-F]{1,6})\s?|\\(.)", re.DOTALL)

# =============================================================================
# Settings Constants
# =============================================================================

COLOR_LITERAL_PATTERN = re.compile(
    r"^\s*(?:"
    r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})"
    r"|(?:rgb|rgba|hsl|hsla)\(\s*[-+0-9.%\s,/deg]*\)"
    r"|[a-zA-Z]+"
    r"|var\(\s*--[A-Za-z0-9_-]+\s*(?:,\s*(?:#[0-9a-fA-F]{3,8}|[a-zA-Z]+))?\s*\)"
    r")?\s*$"
)
DEFAULT_MAX_SETTINGS_DEPTH = 16
MAX_SETTINGS_DEPTH_LIMIT = 64

# =============================================================================
# Element Tree Constants
# =============================================================================

DEFAULT_MAX_ELEMENT_DEPTH = 64
MAX_ELEMENT_DEPTH_LIMIT = 200
DEFAULT_MAX_ELEMENT_COUNT = 10000
MAX_IDENTIFIER_LENGTH = 64
ELEMENT_TYPE_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_.:\-]*$")
ELEMENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+$")
KNOWN_ELEMENT_TYPES = frozenset({"section", "column", "container", "widget"})

# Payload wrapper members that hold element nodes
PAYLOAD_NODE_KEY = "element"
PAYLOAD_NODE_LIST_KEYS = ("elements", "content")

# Truncation applied to untrusted values echoed into log messages
MAX_LOGGED_VALUE_LENGTH = 80
