"""Pytest configuration and shared fixtures for the pastesafe test suite.

This module provides shared fixtures, test configuration, and hostile
payload samples used across the entire test suite.
"""

import copy
import os

import pytest

from pastesafe import DEFAULT_POLICY, SanitizerPolicy

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Phase, Verbosity, settings

    # Register custom Hypothesis profiles
    settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=20)
    settings.register_profile(
        "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
    )

    # Load profile from environment or use default
    profile = os.getenv("HYPOTHESIS_PROFILE", "dev")
    settings.load_profile(profile)
except ImportError:
    # Hypothesis not installed, skip configuration
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "security: Security tests - hostile input handling")
    config.addinivalue_line("markers", "fuzzing: Property-based fuzzing tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def policy() -> SanitizerPolicy:
    """Provide the default sanitizer policy."""
    return DEFAULT_POLICY


@pytest.fixture
def data_image_policy() -> SanitizerPolicy:
    """Provide a policy that accepts raster data:image URIs."""
    return DEFAULT_POLICY.create_updated(allow_data_images=True)


@pytest.fixture
def heading_widget() -> dict:
    """Provide a benign heading widget node."""
    return {
        "id": "a1b2c3d",
        "elType": "widget",
        "widgetType": "heading",
        "isInner": False,
        "settings": {
            "title": "Welcome to our site",
            "header_size": "h2",
            "title_color": "#ff0000",
            "link": {"url": "https://example.com/about", "is_external": "on", "nofollow": ""},
            "typography_font_size": {"unit": "px", "size": 32, "sizes": []},
        },
        "elements": [],
    }


@pytest.fixture
def hostile_section() -> dict:
    """Provide a section whose column holds hostile widgets and a malformed node.

    Returns
    -------
    dict
        Section -> column -> [text-editor, html, button, malformed widget]

    """
    return {
        "id": "sec001",
        "elType": "section",
        "isInner": False,
        "settings": {
            "background_color": "#FFFFFF",
            "custom_css": "selector { color: red; background: url(javascript:alert(1)); }",
        },
        "elements": [
            {
                "id": "col001",
                "elType": "column",
                "isInner": False,
                "settings": {"_column_size": 100},
                "elements": [
                    {
                        "id": "txt001",
                        "elType": "widget",
                        "widgetType": "text-editor",
                        "settings": {
                            "editor": '<p onclick="steal()">Hello <img src=x onerror=alert(1)> world</p>'
                            "<script>alert(document.cookie)</script>",
                        },
                        "elements": [],
                        "htmlCache": "<script>alert('cache')</script>",
                    },
                    {
                        "id": "html001",
                        "elType": "widget",
                        "widgetType": "html",
                        "settings": {"html": '<div><iframe src="https://evil.example"></iframe>Safe</div>'},
                        "elements": [],
                    },
                    {
                        "id": "btn001",
                        "elType": "widget",
                        "widgetType": "button",
                        "settings": {"text": "Buy", "link": {"url": "javascript:alert(1)", "is_external": ""}},
                        "elements": [],
                    },
                    {
                        "id": "bad001",
                        "elType": "<img src=x onerror=alert(1)>",
                        "settings": {},
                        "elements": [],
                    },
                ],
            }
        ],
    }


@pytest.fixture
def frozen_copy():
    """Return a helper that deep-copies a payload for later comparison."""
    return copy.deepcopy
