#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Sanitization policy options.

This module defines the frozen policy object consumed by every sanitizer. A
policy is static configuration: it is built once (from defaults or from a
configuration file) and shared between calls without being mutated.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from pastesafe.constants import (
    ALLOWED_HTML_ATTRIBUTES,
    ALLOWED_HTML_TAGS,
    DANGEROUS_SCHEMES,
    DEFAULT_ALLOW_DATA_ATTRIBUTES,
    DEFAULT_ALLOW_DATA_IMAGES,
    DEFAULT_ALLOWED_URL_SCHEMES,
    DEFAULT_HTML_PARSER,
    DEFAULT_MAX_ELEMENT_COUNT,
    DEFAULT_MAX_ELEMENT_DEPTH,
    DEFAULT_MAX_SETTINGS_DEPTH,
    DROP_CONTENT_TAGS,
    HTML_PARSER_CHOICES,
    MAX_ELEMENT_DEPTH_LIMIT,
    MAX_SETTINGS_DEPTH_LIMIT,
    HtmlParser,
)


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class SanitizerPolicy(CloneFrozenMixin):
    """Static whitelist configuration shared by all sanitizers.

    Parameters
    ----------
    allowed_url_schemes : frozenset of str
        URL schemes accepted by the URL sanitizer. Schemes in
        ``DANGEROUS_SCHEMES`` are rejected even if listed here.
    allow_data_images : bool, default False
        Accept ``data:image/<raster>`` URIs (png, jpeg, gif, webp, bmp, avif,
        x-icon). Every other ``data:`` URI is rejected.
    allowed_tags : frozenset of str
        Markup tags kept by the HTML sanitizer. Other tags are unwrapped.
    allowed_attributes : mapping of str to frozenset of str
        Allowed attributes per tag, ``"*"`` applying to every tag.
    drop_content_tags : frozenset of str
        Tags removed together with everything they contain.
    allow_data_attributes : bool, default True
        Keep ``data-*`` attributes, except JavaScript framework bindings.
    html_parser : {"html.parser", "html5lib", "lxml"}
        BeautifulSoup tree builder used to parse markup fragments.
    max_element_depth : int
        Deepest element nesting accepted by the tree walker.
    max_element_count : int
        Maximum number of element nodes processed per top-level call.
    max_settings_depth : int
        Deepest nesting of objects/lists accepted inside a settings mapping.

    """

    allowed_url_schemes: frozenset[str] = field(
        default=DEFAULT_ALLOWED_URL_SCHEMES,
        metadata={"help": "URL schemes accepted in links and media sources", "importance": "security"},
    )
    allow_data_images: bool = field(
        default=DEFAULT_ALLOW_DATA_IMAGES,
        metadata={"help": "Accept data:image/* URIs for raster image types", "importance": "security"},
    )
    allowed_tags: frozenset[str] = field(
        default=ALLOWED_HTML_TAGS,
        metadata={"help": "Markup tags kept by the HTML sanitizer", "importance": "advanced"},
    )
    allowed_attributes: Mapping[str, frozenset[str]] = field(
        default_factory=lambda: dict(ALLOWED_HTML_ATTRIBUTES),
        metadata={"help": "Allowed attributes per tag ('*' for all tags)", "importance": "advanced"},
    )
    drop_content_tags: frozenset[str] = field(
        default=DROP_CONTENT_TAGS,
        metadata={"help": "Tags removed together with their content", "importance": "security"},
    )
    allow_data_attributes: bool = field(
        default=DEFAULT_ALLOW_DATA_ATTRIBUTES,
        metadata={"help": "Keep data-* attributes (framework bindings are always removed)", "importance": "advanced"},
    )
    html_parser: HtmlParser = field(
        default=DEFAULT_HTML_PARSER,
        metadata={
            "help": "BeautifulSoup parser to use: 'html.parser' (built-in), "
            "'html5lib' (browser-compatible), 'lxml' (fast, C library)",
            "choices": list(HTML_PARSER_CHOICES),
            "importance": "advanced",
        },
    )
    max_element_depth: int = field(
        default=DEFAULT_MAX_ELEMENT_DEPTH,
        metadata={"help": "Maximum element nesting depth", "type": int, "importance": "security"},
    )
    max_element_count: int = field(
        default=DEFAULT_MAX_ELEMENT_COUNT,
        metadata={"help": "Maximum number of elements per payload", "type": int, "importance": "security"},
    )
    max_settings_depth: int = field(
        default=DEFAULT_MAX_SETTINGS_DEPTH,
        metadata={"help": "Maximum nesting depth inside element settings", "type": int, "importance": "security"},
    )

    def __post_init__(self) -> None:
        """Validate choices and numeric ranges.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.html_parser not in HTML_PARSER_CHOICES:
            raise ValueError(f"html_parser must be one of {HTML_PARSER_CHOICES}, got {self.html_parser!r}")
        for name in ("max_element_depth", "max_element_count", "max_settings_depth"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if self.max_element_depth > MAX_ELEMENT_DEPTH_LIMIT:
            raise ValueError(f"max_element_depth cannot exceed {MAX_ELEMENT_DEPTH_LIMIT}")
        if self.max_settings_depth > MAX_SETTINGS_DEPTH_LIMIT:
            raise ValueError(f"max_settings_depth cannot exceed {MAX_SETTINGS_DEPTH_LIMIT}")

        # Normalize collections so config files may pass plain lists
        object.__setattr__(self, "allowed_url_schemes", frozenset(s.lower() for s in self.allowed_url_schemes))
        object.__setattr__(self, "allowed_tags", frozenset(t.lower() for t in self.allowed_tags))
        object.__setattr__(self, "drop_content_tags", frozenset(t.lower() for t in self.drop_content_tags))
        object.__setattr__(
            self,
            "allowed_attributes",
            {tag.lower(): frozenset(a.lower() for a in attrs) for tag, attrs in self.allowed_attributes.items()},
        )

        overlap = self.allowed_tags & self.drop_content_tags
        if overlap:
            raise ValueError(f"Tags cannot be both allowed and dropped: {sorted(overlap)}")

    @property
    def effective_url_schemes(self) -> frozenset[str]:
        """Allowed schemes with the always-dangerous ones removed."""
        return self.allowed_url_schemes - DANGEROUS_SCHEMES

    def attributes_for(self, tag_name: str) -> frozenset[str]:
        """Return the attribute whitelist for ``tag_name`` (global entries included)."""
        return self.allowed_attributes.get("*", frozenset()) | self.allowed_attributes.get(tag_name, frozenset())

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SanitizerPolicy":
        """Build a policy from a plain mapping (e.g. a configuration file table).

        Unknown keys raise ``ValueError`` rather than being ignored.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown policy option(s): {', '.join(unknown)}")
        return cls(**dict(data))


DEFAULT_POLICY = SanitizerPolicy()

__all__ = ["CloneFrozenMixin", "SanitizerPolicy", "DEFAULT_POLICY"]
