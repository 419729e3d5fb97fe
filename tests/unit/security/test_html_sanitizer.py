#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for HTML sanitization utilities.

This module tests the security-critical HTML sanitization functions in
pastesafe.utils.html_sanitizer, including tag and attribute whitelisting,
URL and style attribute handling, and the plain-text sanitizer.
"""

import warnings

import pytest
from bs4 import MarkupResemblesLocatorWarning
from bs4.exceptions import FeatureNotFound
from utils import XSS_HTML, assert_no_executable_content

from pastesafe import DEFAULT_POLICY, DependencyError
from pastesafe.utils import html_sanitizer
from pastesafe.utils.html_sanitizer import is_html_safe, sanitize_html, sanitize_plain_text


@pytest.mark.unit
@pytest.mark.security
class TestSanitizeHtml:
    """Test suite for sanitize_html function."""

    @pytest.mark.parametrize(
        "content",
        [
            "Plain text without tags",
            "Tom & Jerry",
            "a < b",
            "<p>Hello <strong>world</strong></p>",
            '<a href="https://example.com" target="_blank" rel="noopener">link</a>',
            '<img src="/img/a.jpg" alt="A" width="10">',
            "<P CLASS=intro>Mixed case</P>",
            '<span aria-label="close" data-id="5">x</span>',
            "<ul>\n  <li>One</li>\n  <li>Two</li>\n</ul>",
            "",
        ],
    )
    def test_safe_html_unchanged(self, content):
        """Test that markup needing no change is returned byte-for-byte."""
        assert sanitize_html(content) == content

    def test_script_removed_with_content(self):
        """Test that script elements are removed together with their content."""
        assert sanitize_html("<div>Hello<script>alert(1)</script>World</div>") == "<div>HelloWorld</div>"

    def test_event_handlers_removed(self):
        """Test that on* attributes are removed from allowed tags."""
        assert sanitize_html("<p onclick=\"x()\" class=\"a\">Hi</p>") == '<p class="a">Hi</p>'

    def test_unknown_tags_unwrapped(self):
        """Test that non-whitelisted tags are unwrapped, children kept."""
        assert sanitize_html('<button onclick="bad()">Click</button>') == "Click"
        assert sanitize_html("<custom-tag><b>bold</b> text</custom-tag>") == "<b>bold</b> text"

    def test_nested_iframe_removed(self):
        """Test that an iframe nested inside allowed markup is removed."""
        result = sanitize_html('<div><p>Intro</p><div><iframe src="https://evil.example"></iframe>Safe</div></div>')
        assert result == "<div><p>Intro</p><div>Safe</div></div>"

    @pytest.mark.parametrize("tag", ["style", "object", "embed", "svg", "math", "template", "noscript"])
    def test_drop_content_tags(self, tag):
        """Test that dangerous containers are removed with their content."""
        assert sanitize_html(f"<p>a</p><{tag}>hidden</{tag}><p>b</p>") == "<p>a</p><p>b</p>"

    def test_comments_removed(self):
        """Test that comments are removed."""
        assert sanitize_html("<p>a<!-- <script>alert(1)</script> -->b</p>") == "<p>ab</p>"

    def test_javascript_href_removed(self):
        """Test that URL attributes failing the URL sanitizer are removed."""
        assert sanitize_html('<a href="javascript:alert(1)" title="t">x</a>') == '<a title="t">x</a>'
        assert sanitize_html('<a href="&#106;avascript:alert(1)">x</a>') == "<a>x</a>"

    def test_repeated_attribute_keeps_first_value(self):
        """Test that the first of repeated attributes is the one checked, as in browsers."""
        content = '<a href="java&#115;cript:alert(1)" href="https://ok.example">x</a>'
        result = sanitize_html(content)
        assert result != content
        assert "cript" not in result
        assert result == "<a>x</a>"

    def test_repeated_safe_attribute_reserialized(self):
        """Test that a repeated attribute is collapsed to its first value."""
        assert sanitize_html('<p class="a" class="b">x</p>') == '<p class="a">x</p>'

    def test_event_handler_text_outside_tags_unchanged(self):
        """Test that handler-like text in content does not force re-serialization."""
        content = "<p>Set onclick= in&nbsp;JS</p>"
        assert sanitize_html(content) == content

    def test_global_warning_filters_untouched(self):
        """Test that parsing does not leave warning filters behind."""
        before = list(warnings.filters)
        sanitize_html("<p>https://example.com</p>")
        assert warnings.filters == before
        assert not any(entry[2] is MarkupResemblesLocatorWarning for entry in warnings.filters)

    def test_srcset_filtered(self):
        """Test that unsafe srcset entries are dropped individually."""
        result = sanitize_html('<img src="a.jpg" srcset="a.jpg 1x, javascript:alert(1) 2x">')
        assert 'srcset="a.jpg 1x"' in result
        assert "javascript" not in result

    def test_style_attribute_sanitized(self):
        """Test that style attributes go through the CSS sanitizer."""
        assert (
            sanitize_html('<span style="color: red; width: expression(alert(1))">x</span>')
            == '<span style="color: red;">x</span>'
        )
        assert sanitize_html('<span style="behavior: url(x.htc)">x</span>') == "<span>x</span>"

    def test_non_whitelisted_attributes_removed(self):
        """Test that attributes outside the whitelist are removed."""
        assert sanitize_html('<p formaction="https://x" align="center">x</p>') == '<p align="center">x</p>'

    def test_framework_data_attributes_removed(self):
        """Test that JavaScript framework bindings are removed from data-* attributes."""
        result = sanitize_html('<div data-id="5" data-x-on="alert(1)" data-v-html="x">y</div>')
        assert result == '<div data-id="5">y</div>'

    def test_data_attribute_with_dangerous_url_removed(self):
        """Test that data-* attributes carrying script URLs are removed."""
        assert sanitize_html('<div data-link="javascript:alert(1)">y</div>') == "<div>y</div>"

    def test_data_attributes_disabled_by_policy(self):
        """Test that data-* attributes can be disabled."""
        policy = DEFAULT_POLICY.create_updated(allow_data_attributes=False)
        assert sanitize_html('<div data-id="5">y</div>', policy=policy) == "<div>y</div>"

    def test_custom_tag_whitelist(self):
        """Test that the policy tag whitelist is honoured."""
        policy = DEFAULT_POLICY.create_updated(allowed_tags=frozenset({"p"}))
        assert sanitize_html("<p><em>x</em></p>", policy=policy) == "<p>x</p>"

    @pytest.mark.parametrize("content", XSS_HTML)
    def test_xss_payloads_neutralized(self, content):
        """Test that known XSS payloads leave no executable content."""
        assert_no_executable_content(sanitize_html(content))

    @pytest.mark.parametrize("content", XSS_HTML)
    def test_idempotent(self, content):
        """Test that sanitizing twice gives the same result as once."""
        once = sanitize_html(content)
        assert sanitize_html(once) == once

    @pytest.mark.parametrize("value", [None, 1, ["<p>x</p>"], {"html": "<p>x</p>"}])
    def test_non_string_input(self, value):
        """Test that non-string input yields an empty string."""
        assert sanitize_html(value) == ""

    def test_deeply_nested_markup(self):
        """Test that deep nesting neither raises nor leaks script."""
        content = "<div>" * 2000 + "<script>alert(1)</script>" + "</div>" * 2000
        result = sanitize_html(content)
        assert isinstance(result, str)
        assert "<script" not in result

    def test_missing_parser_backend_raises_dependency_error(self, monkeypatch):
        """Test that a missing configured parser surfaces as DependencyError."""

        def _raise(*args, **kwargs):
            raise FeatureNotFound("Couldn't find a tree builder")

        monkeypatch.setattr(html_sanitizer, "BeautifulSoup", _raise)
        policy = DEFAULT_POLICY.create_updated(html_parser="lxml")
        with pytest.raises(DependencyError, match="pip install lxml"):
            sanitize_html("<p>x</p>", policy=policy)

    @pytest.mark.parametrize("parser", ["html5lib", "lxml"])
    def test_alternative_parsers(self, parser):
        """Test that the optional parser backends give the same cleaning."""
        pytest.importorskip(parser)
        policy = DEFAULT_POLICY.create_updated(html_parser=parser)
        result = sanitize_html('<p onclick="x()">Hi<script>alert(1)</script></p>', policy=policy)
        assert result == "<p>Hi</p>"

    def test_is_html_safe(self):
        """Test the boolean convenience wrapper."""
        assert is_html_safe("<p>Safe content</p>") is True
        assert is_html_safe('<div onclick="alert()">Click</div>') is False


@pytest.mark.unit
@pytest.mark.security
class TestSanitizePlainText:
    """Test suite for sanitize_plain_text function."""

    @pytest.mark.parametrize("value", ["Hello world", "Tom & Jerry < 3", "5 > 3 and 2 < 4", "", "a <3 b"])
    def test_text_without_markup_unchanged(self, value):
        """Test that text without markup-like sequences is returned unchanged."""
        assert sanitize_plain_text(value) == value

    def test_markup_stripped(self):
        """Test that tags are removed and dangerous content dropped."""
        assert sanitize_plain_text("<script>bad</script>Hello <b>world</b>") == "Hello world"

    def test_style_content_dropped(self):
        """Test that style element text does not leak into the result."""
        assert sanitize_plain_text("<style>body { display: none }</style>Text") == "Text"

    def test_comments_dropped(self):
        """Test that comments are removed."""
        assert sanitize_plain_text("Hello <!-- hidden -->world") == "Hello world"

    def test_residual_angle_brackets_escaped(self):
        """Test that decoded entities cannot reintroduce markup."""
        assert sanitize_plain_text("<p>&lt;img src=x onerror=alert(1)&gt;</p>") == "&lt;img src=x onerror=alert(1)&gt;"

    @pytest.mark.parametrize("value", XSS_HTML)
    def test_no_markup_survives(self, value):
        """Test that no tag can be rebuilt from the plain-text result."""
        result = sanitize_plain_text(value)
        assert "<" not in result
        assert sanitize_plain_text(result) == result

    @pytest.mark.parametrize("value", [None, 3, ["x"]])
    def test_non_string_input(self, value):
        """Test that non-string input yields an empty string."""
        assert sanitize_plain_text(value) == ""
