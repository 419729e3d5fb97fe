"""Utility functions for cli output."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/pastesafe/cli/output.py
import argparse
import json
import sys
from pathlib import Path
from typing import Any, TextIO

from pastesafe.exceptions import DependencyError


def check_rich_available() -> bool:
    """Check if Rich library is available.

    Returns
    -------
    bool
        True if Rich is available, False otherwise

    """
    try:
        import rich  # noqa: F401

        return True
    except ImportError:
        return False


def should_use_rich_output(args: argparse.Namespace, raise_on_missing: bool = False) -> bool:
    """Determine if Rich output should be used.

    Rich output is used when the --rich flag is set, output goes to stdout
    and the Rich library is available.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command line arguments
    raise_on_missing : bool, default False
        Raise DependencyError if rich is not installed

    Returns
    -------
    bool
        True if Rich output should be used

    """
    if not args.rich or args.output:
        return False

    if not check_rich_available():
        if raise_on_missing:
            raise DependencyError(
                "rich-output",
                missing_packages=[("rich", "")],
                message="Rich output requires the optional 'rich' dependency. Install with: pip install pastesafe[rich]",
            )
        return False

    return True


def serialize_payload(payload: Any, indent: int | None) -> str:
    """Serialize a sanitized payload to JSON text."""
    return json.dumps(payload, indent=indent, ensure_ascii=False)


def write_payload(payload: Any, args: argparse.Namespace, stream: TextIO | None = None) -> None:
    """Write a sanitized payload to ``args.output``, Rich console or stdout.

    Parameters
    ----------
    payload : Any
        Sanitized JSON-compatible payload
    args : argparse.Namespace
        Parsed command line arguments (``output``, ``indent``, ``rich``)
    stream : TextIO, optional
        Plain-text destination, defaults to sys.stdout

    """
    text = serialize_payload(payload, args.indent)

    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        return

    if should_use_rich_output(args, raise_on_missing=True):
        from rich.console import Console

        Console().print_json(text, indent=args.indent or 2)
        return

    target = stream or sys.stdout
    target.write(text + "\n")
