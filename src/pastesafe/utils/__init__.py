#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pastesafe/utils/__init__.py
"""String sanitizers used by the settings validator.

This package contains the URL, CSS and HTML sanitizers. Each takes a single
untrusted string and returns it unchanged when it is already safe.
"""

from pastesafe.utils.css_sanitizer import is_css_safe, sanitize_css
from pastesafe.utils.html_sanitizer import is_html_safe, sanitize_html, sanitize_plain_text
from pastesafe.utils.security import is_url_safe, sanitize_url

__all__ = [
    "sanitize_url",
    "is_url_safe",
    "sanitize_css",
    "is_css_safe",
    "sanitize_html",
    "sanitize_plain_text",
    "is_html_safe",
]
