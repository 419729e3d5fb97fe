#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading for pastesafe.

A configuration file overrides the default sanitizer policy and extends the
default widget schema registry::

    # .pastesafe.toml
    [policy]
    allow_data_images = true
    allowed_url_schemes = ["http", "https", "mailto", "tel", "sms"]

    [schema.common]
    "*_markup" = "html"

    [schema.widgets.my-widget]
    body = "html"
    target = "url"

The same tables may live under ``[tool.pastesafe]`` in ``pyproject.toml``,
or in ``.pastesafe.yaml``/``.pastesafe.yml``/``.pastesafe.json``.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Optional

import yaml

from pastesafe.exceptions import ConfigError, SchemaRegistryError
from pastesafe.options import DEFAULT_POLICY, SanitizerPolicy
from pastesafe.schema import DEFAULT_REGISTRY, SchemaRegistry

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = [".pastesafe.toml", ".pastesafe.yaml", ".pastesafe.yml", ".pastesafe.json"]
CONFIG_SECTIONS = frozenset({"policy", "schema"})


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the [tool.pastesafe] section from a pyproject.toml file.

    Returns an empty dict if the section is absent.

    Raises
    ------
    ConfigError
        If pyproject.toml cannot be parsed or the section is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {pyproject_path}: {e}", str(pyproject_path), e) from e
    except OSError as e:
        raise ConfigError(f"Error reading {pyproject_path}: {e}", str(pyproject_path), e) from e

    tool = data.get("tool")
    config = tool.get("pastesafe") if isinstance(tool, dict) else None
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(
            f"[tool.pastesafe] section in {pyproject_path} must be a table, got {type(config).__name__}",
            str(pyproject_path),
        )
    return config


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file by searching parent directories.

    Walks up from ``start_dir`` to the filesystem root. In each directory the
    dedicated files are checked first (in ``CONFIG_FILENAMES`` order), then
    a ``pyproject.toml`` that has a ``[tool.pastesafe]`` section.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory for search, defaults to current working directory

    Returns
    -------
    Path or None
        Path to first config file found, or None if not found

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / "pyproject.toml"
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except ConfigError as e:
                # An unrelated broken pyproject.toml should not stop the search
                logger.debug("Skipping %s: %s", pyproject_path, e)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a TOML, YAML, JSON or pyproject.toml file.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration dictionary with optional ``policy`` and ``schema`` tables

    Raises
    ------
    ConfigError
        If the file cannot be read, parsed, or has an unsupported format

    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file does not exist: {config_path}", str(config_path))

    if not config_path.is_file():
        raise ConfigError(f"Configuration path is not a file: {config_path}", str(config_path))

    filename = config_path.name.lower()
    ext = config_path.suffix.lower()

    if filename == "pyproject.toml":
        config = _load_pyproject_section(config_path)
    elif ext == ".toml":
        config = _load_toml_config(config_path)
    elif ext in (".yaml", ".yml"):
        config = _load_yaml_config(config_path)
    elif ext == ".json":
        config = _load_json_config(config_path)
    else:
        raise ConfigError(f"Unsupported config file format: {ext}. Use .json, .toml, or .yaml", str(config_path))

    unknown = sorted(set(config) - CONFIG_SECTIONS)
    if unknown:
        raise ConfigError(
            f"Unknown section(s) in {config_path}: {', '.join(map(str, unknown))}; "
            f"expected {', '.join(sorted(CONFIG_SECTIONS))}",
            str(config_path),
        )

    return config


def _load_toml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in config file {config_path}: {e}", str(config_path), e) from e
    except OSError as e:
        raise ConfigError(f"Error reading TOML config {config_path}: {e}", str(config_path), e) from e


def _load_json_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file {config_path}: {e}", str(config_path), e) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Error reading JSON config {config_path}: {e}", str(config_path), e) from e

    if not isinstance(config, dict):
        raise ConfigError(
            f"JSON config file must contain an object, got {type(config).__name__}", str(config_path)
        )
    return config


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {config_path}: {e}", str(config_path), e) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Error reading YAML config {config_path}: {e}", str(config_path), e) from e

    # An empty YAML file loads as None
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(
            f"YAML config file must contain a mapping, got {type(config).__name__}", str(config_path)
        )
    return config


def build_from_config(
    config: Dict[str, Any], config_path: Path | str | None = None
) -> tuple[SanitizerPolicy, SchemaRegistry]:
    """Build the policy and registry described by a loaded configuration.

    Parameters
    ----------
    config : dict
        Configuration with optional ``policy`` and ``schema`` tables
    config_path : Path or str, optional
        Source file, used in error messages

    Returns
    -------
    tuple of (SanitizerPolicy, SchemaRegistry)
        ``DEFAULT_POLICY`` with the ``policy`` overrides applied, and
        ``DEFAULT_REGISTRY`` extended with the ``schema`` tables

    Raises
    ------
    ConfigError
        If either table is malformed

    """
    source = str(config_path) if config_path is not None else None

    policy_data = config.get("policy", {})
    if not isinstance(policy_data, dict):
        raise ConfigError(f"'policy' must be a table, got {type(policy_data).__name__}", source)
    try:
        policy = SanitizerPolicy.from_mapping(policy_data) if policy_data else DEFAULT_POLICY
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid policy configuration: {e}", source, e) from e

    schema_data = config.get("schema")
    registry = DEFAULT_REGISTRY
    if schema_data is not None:
        try:
            registry = DEFAULT_REGISTRY.merged_with(SchemaRegistry.from_mapping(schema_data))
        except SchemaRegistryError as e:
            location = f" at '{e.field_path}'" if e.field_path else ""
            raise ConfigError(f"Invalid schema configuration{location}: {e.message}", source, e) from e

    return policy, registry


def load_policy_and_registry(
    config_path: Path | str | None = None, *, discover: bool = True
) -> tuple[SanitizerPolicy, SchemaRegistry]:
    """Load the sanitizer policy and schema registry for a run.

    Parameters
    ----------
    config_path : Path or str, optional
        Explicit configuration file. When omitted and ``discover`` is True,
        the nearest configuration file above the working directory is used.
    discover : bool, default True
        Search parent directories when no explicit path is given

    Returns
    -------
    tuple of (SanitizerPolicy, SchemaRegistry)
        Defaults when no configuration file applies

    Raises
    ------
    ConfigError
        If the configuration file is unreadable or malformed

    """
    if config_path is None and discover:
        config_path = find_config_in_parents()

    if config_path is None:
        return DEFAULT_POLICY, DEFAULT_REGISTRY

    logger.debug("Loading configuration from %s", config_path)
    return build_from_config(load_config_file(config_path), config_path)


__all__ = [
    "CONFIG_FILENAMES",
    "find_config_in_parents",
    "load_config_file",
    "build_from_config",
    "load_policy_and_registry",
]
