"""Test utilities for the pastesafe test suite.

This module provides hostile input samples and assertions that check
sanitized output for executable content.
"""

import json
import re

# Base64 encoded 1x1 pixel PNG for testing
MINIMAL_PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/w8AAn8B9FpQHLwAAAAASUVORK5CYII="
MINIMAL_PNG_DATA_URI = f"data:image/png;base64,{MINIMAL_PNG_B64}"

# URLs that must never survive sanitization under any policy
XSS_URLS = [
    "javascript:alert(1)",
    "JaVaScRiPt:alert(1)",
    " javascript:alert(1)",
    "\x01javascript:alert(1)",
    "java\tscript:alert(1)",
    "java\nscript:alert(1)",
    "java\x00script:alert(1)",
    "java\u200bscript:alert(1)",
    "&#106;avascript:alert(1)",
    "&#x6A;avascript:alert(1)",
    "javascript&colon;alert(1)",
    "%6A%61%76%61script:alert(1)",
    "vbscript:msgbox(1)",
    "livescript:alert(1)",
    "mocha:alert(1)",
    "data:text/html,<script>alert(1)</script>",
    "data:image/svg+xml;base64,PHN2Zz48L3N2Zz4=",
    "file:///etc/passwd",
    "about:blank",
    "blob:https://example.com/uuid",
]

SAFE_URLS = [
    "https://example.com",
    "http://example.com/path?q=1#frag",
    "//cdn.example.com/lib.css",
    "/relative/path",
    "./image.png",
    "../up/one",
    "images/photo.jpg",
    "#section",
    "?page=2",
    "mailto:info@example.com",
    "tel:+15551234567",
]

XSS_HTML = [
    "<script>alert(1)</script>",
    "<img src=x onerror=alert(1)>",
    "<svg onload=alert(1)>",
    '<a href="javascript:alert(1)">x</a>',
    '<iframe src="javascript:alert(1)"></iframe>',
    "<body onload=alert(1)>",
    '<div style="width: expression(alert(1))">x</div>',
    '<object data="evil.swf"></object>',
    "<scr<script>ipt>alert(1)</script>",
    "<!--<script>alert(1)</script>-->",
    '<math><mi xlink:href="javascript:alert(1)">x</mi></math>',
    '<a href="&#106;avascript:alert(1)">x</a>',
]

_EXECUTABLE_PATTERNS = [
    re.compile(r"<\s*script", re.IGNORECASE),
    re.compile(r"<\s*iframe", re.IGNORECASE),
    re.compile(r"<\s*svg", re.IGNORECASE),
    re.compile(r"<[^>]*\son[a-z]+\s*=", re.IGNORECASE),
    re.compile(r"(?:java|vb)script\s*:", re.IGNORECASE),
    re.compile(r"expression\s*\(", re.IGNORECASE),
]


def find_executable_content(value: object) -> list[str]:
    """Return the executable-content patterns found anywhere in ``value``."""
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
    return [pattern.pattern for pattern in _EXECUTABLE_PATTERNS if pattern.search(text)]


def assert_no_executable_content(value: object) -> None:
    """Assert that no string inside ``value`` carries executable content."""
    found = find_executable_content(value)
    assert not found, f"Executable content {found} in {value!r}"


def iter_nodes(node: dict):
    """Yield ``node`` and every descendant element node."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(current.get("elements", []))
