"""pastesafe - Sanitization engine for untrusted page-builder clipboard data.

pastesafe cleans the element trees that visual page builders (sections,
columns, containers and widgets with free-form settings) exchange through the
clipboard, so that content copied from an untrusted site can be pasted into a
live editor without carrying executable markup, script URLs or CSS
expressions.

Every string in the tree is routed to a sanitizer chosen by the field's
semantic classification in a widget schema registry. Values that need no
change come back byte-for-byte identical; everything else is reduced to its
safe part or removed. Sanitizers never raise for any input shape.

Key Features
------------
- URL sanitizer with normalization-resistant scheme classification
- Blacklist CSS sanitizer that keeps sibling declarations intact
- Whitelist HTML sanitizer built on BeautifulSoup
- Explicit, fail-closed widget schema registry (unknown fields are plain text)
- Structural validation of element trees with depth and size limits
- TOML/YAML/JSON configuration files and a ``pastesafe`` command-line tool

Requirements
------------
- Python 3.10+
- beautifulsoup4; optional html5lib or lxml parser backends

Examples
--------
Sanitize a pasted payload:

    >>> from pastesafe import sanitize_clipboard_payload
    >>> clean = sanitize_clipboard_payload(json.loads(clipboard_text))

Sanitize single values:

    >>> from pastesafe import sanitize_url, sanitize_css
    >>> sanitize_url("javascript:alert(1)")
    ''
    >>> sanitize_css("color: red; width: expression(alert(1))")
    'color: red;'

Use a custom policy:

    >>> from pastesafe import DEFAULT_POLICY, sanitize_element_data
    >>> policy = DEFAULT_POLICY.create_updated(allow_data_images=True)
    >>> node = sanitize_element_data(element, policy=policy)

See Also
--------
pastesafe.schema : Widget schema registry
pastesafe.config : Configuration file loading

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "pastesafe requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from pastesafe.elements import sanitize_clipboard_payload, sanitize_element_data  # noqa: E402
from pastesafe.exceptions import (  # noqa: E402
    ConfigError,
    DependencyError,
    PasteSafeError,
    SchemaRegistryError,
    ValidationError,
)
from pastesafe.options import DEFAULT_POLICY, SanitizerPolicy  # noqa: E402
from pastesafe.schema import DEFAULT_REGISTRY, FieldSchema, SchemaRegistry  # noqa: E402
from pastesafe.settings import validate_settings  # noqa: E402
from pastesafe.utils.css_sanitizer import sanitize_css  # noqa: E402
from pastesafe.utils.html_sanitizer import sanitize_html, sanitize_plain_text  # noqa: E402
from pastesafe.utils.security import sanitize_url  # noqa: E402

__all__ = [
    "__version__",
    # Sanitizers
    "sanitize_url",
    "sanitize_css",
    "sanitize_html",
    "sanitize_plain_text",
    "validate_settings",
    "sanitize_element_data",
    "sanitize_clipboard_payload",
    # Configuration
    "SanitizerPolicy",
    "DEFAULT_POLICY",
    "FieldSchema",
    "SchemaRegistry",
    "DEFAULT_REGISTRY",
    # Exceptions
    "PasteSafeError",
    "ValidationError",
    "ConfigError",
    "SchemaRegistryError",
    "DependencyError",
]
