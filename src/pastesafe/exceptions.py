#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the pastesafe library.

Sanitizers and the element walker never raise for any input shape: callers
observe failures as ``""`` or ``None`` results. The exceptions below are
reserved for errors in the static configuration (policy values, schema
registries, configuration files, parser backends).

Exception Hierarchy
-------------------
- PasteSafeError (base exception)

  - ValidationError (parameter/option validation)
    - ConfigError (unreadable or malformed configuration files)
    - SchemaRegistryError (malformed widget schema registry)

  - DependencyError (missing optional packages)

"""

from typing import Any


class PasteSafeError(Exception):
    """Base exception class for all pastesafe-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(PasteSafeError):
    """Exception raised for invalid configuration parameters.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class ConfigError(ValidationError):
    """Exception raised when a configuration file cannot be loaded.

    Parameters
    ----------
    message : str
        Description of the problem
    config_path : str, optional
        Path of the offending configuration file
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, config_path: str | None = None, original_error: Exception | None = None):
        """Initialize the configuration error."""
        super().__init__(message, parameter_name="config", parameter_value=config_path, original_error=original_error)
        self.config_path = config_path


class SchemaRegistryError(ValidationError):
    """Exception raised for a malformed widget schema registry.

    Parameters
    ----------
    message : str
        Description of the problem
    field_path : str, optional
        Dotted path of the offending registry entry (e.g. ``widgets.tabs.tabs``)
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, field_path: str | None = None, original_error: Exception | None = None):
        """Initialize the schema registry error."""
        super().__init__(message, parameter_name=field_path, original_error=original_error)
        self.field_path = field_path


class DependencyError(PasteSafeError):
    """Exception raised when a configured optional package is not installed.

    Parameters
    ----------
    feature : str
        Name of the feature requiring the packages (e.g. ``"html5lib parser"``)
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        feature: str,
        missing_packages: list[tuple[str, str]],
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the dependency error with package details."""
        if message is None:
            pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
            install = " ".join(f"{name}{spec}" for name, spec in missing_packages)
            message = f"{feature} requires the following packages: {pkg_list}. Install with: pip install {install}"
        super().__init__(message, original_error=original_error)
        self.feature = feature
        self.missing_packages = missing_packages


__all__ = [
    "PasteSafeError",
    "ValidationError",
    "ConfigError",
    "SchemaRegistryError",
    "DependencyError",
]
