"""Command-line interface for the pastesafe clipboard sanitizer.

Reads a page-builder clipboard payload (JSON) from a file or stdin, runs it
through ``sanitize_clipboard_payload`` and writes the sanitized JSON.

Examples
--------
Sanitize a copied section::

    $ pastesafe copied.json --out clean.json

Pipe from the clipboard::

    $ xclip -o | pastesafe --indent 2

Use an explicit configuration file::

    $ pastesafe copied.json --config ./.pastesafe.toml

Exit codes: 0 success, 1 payload rejected, 2 invalid JSON or arguments,
3 configuration error.
"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import argparse
import json
import logging
import os
import sys

from pastesafe import __version__
from pastesafe.cli.output import write_payload
from pastesafe.config import load_policy_and_registry
from pastesafe.constants import DEFAULT_MAX_ELEMENT_DEPTH, MAX_ELEMENT_DEPTH_LIMIT
from pastesafe.elements import sanitize_clipboard_payload
from pastesafe.exceptions import ConfigError, DependencyError
from pastesafe.logging_utils import configure_logging

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_REJECTED = 1
EXIT_INPUT_ERROR = 2
EXIT_CONFIG_ERROR = 3

CONFIG_ENV_VAR = "PASTESAFE_CONFIG"


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from e
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value!r}") from e
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value!r}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pastesafe",
        description="Sanitize untrusted page-builder clipboard JSON before it is pasted into an editor.",
        epilog="Exit codes: 0 success, 1 payload rejected, 2 invalid JSON or arguments, 3 configuration error.",
    )
    parser.add_argument("input", nargs="?", default="-", help="Clipboard JSON file ('-' or omitted for stdin)")
    parser.add_argument("--out", "-o", dest="output", help="Write sanitized JSON to this file instead of stdout")

    config_group = parser.add_argument_group("configuration")
    config_group.add_argument(
        "--config", help=f"Configuration file (TOML, YAML or JSON). Defaults to ${CONFIG_ENV_VAR} or auto-discovery"
    )
    config_group.add_argument(
        "--no-config", action="store_true", help="Ignore configuration files and use the built-in policy"
    )
    config_group.add_argument(
        "--allow-data-images", action="store_true", help="Accept data:image/* URIs for raster image types"
    )
    config_group.add_argument(
        "--max-depth",
        type=_positive_int,
        metavar="N",
        help=f"Maximum element nesting depth (default {DEFAULT_MAX_ELEMENT_DEPTH}, at most {MAX_ELEMENT_DEPTH_LIMIT})",
    )

    output_group = parser.add_argument_group("output")
    output_group.add_argument("--indent", type=_non_negative_int, metavar="N", help="Pretty-print JSON output")
    output_group.add_argument("--rich", action="store_true", help="Pretty-print JSON to the terminal with Rich")

    logging_group = parser.add_argument_group("logging")
    logging_group.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging level (default WARNING; blocked content is reported at WARNING)",
    )
    logging_group.add_argument("--log-file", help="Also write log messages to this file")
    logging_group.add_argument(
        "--trace", action="store_true", help="Debug logging with timestamps and logger names"
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Set up logging level based on command-line arguments."""
    # --trace takes precedence over --log-level
    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level)
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    with open(source, "r", encoding="utf-8") as f:
        return f.read()


def main(args: list[str] | None = None) -> int:
    """Execute main CLI entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.no_config and not parsed_args.config:
        env_config = os.environ.get(CONFIG_ENV_VAR)
        if env_config:
            parsed_args.config = env_config

    _setup_logging_level(parsed_args)

    try:
        policy, registry = load_policy_and_registry(parsed_args.config, discover=not parsed_args.no_config)
        overrides = {}
        if parsed_args.allow_data_images:
            overrides["allow_data_images"] = True
        if parsed_args.max_depth is not None:
            overrides["max_element_depth"] = parsed_args.max_depth
        if overrides:
            policy = policy.create_updated(**overrides)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except ValueError as e:
        print(f"Invalid option: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    try:
        payload = json.loads(_read_input(parsed_args.input))
    except OSError as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        print(f"Invalid JSON input: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    try:
        sanitized = sanitize_clipboard_payload(payload, registry=registry, policy=policy)
    except DependencyError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        write_payload(sanitized, parsed_args)
    except DependencyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    if sanitized is None:
        logger.warning("Clipboard payload was rejected")
        return EXIT_REJECTED
    return EXIT_SUCCESS


__all__ = ["main", "create_parser"]
