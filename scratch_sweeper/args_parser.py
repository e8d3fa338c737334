"""
Argument parsing for scratch_sweeper CLI.

Handles command-line argument definition, parsing, and validation. Values not
given on the command line fall back to the environment (see config.py).
"""

from __future__ import annotations

import argparse
import re
from pathlib import Path

from .config import DEFAULT_NAME_PATTERN, Settings, determine_default_base_path
from .durations import duration_argument


def add_scan_arguments(parser: argparse.ArgumentParser) -> None:
    """Add scratch root, policy and filtering arguments."""
    parser.add_argument(
        "--base-path",
        type=Path,
        help="Scratch directory to sweep (default: $HOME/tmp, else $TMPDIR/$USER).",
    )
    parser.add_argument(
        "--older-than",
        type=duration_argument,
        metavar="DURATION",
        help="Staleness threshold, e.g. 21d, 3hrs, 2months (default: 21d).",
    )
    parser.add_argument(
        "--mtime-only",
        action="store_true",
        default=None,
        help="Ignore access times; judge staleness by modification time alone.",
    )
    names = parser.add_mutually_exclusive_group()
    names.add_argument(
        "--match",
        metavar="REGEX",
        help=f"Only consider top-level entries whose name matches REGEX (default: {DEFAULT_NAME_PATTERN}).",
    )
    names.add_argument("--all", action="store_true", help="Consider every top-level entry.")
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Scan top-level entries in parallel with N threads (default: 1).",
    )


def add_action_arguments(parser: argparse.ArgumentParser) -> None:
    """Add action and confirmation arguments."""
    parser.add_argument(
        "--delete",
        action="store_true",
        help="Delete removable entries. Default is dry-run/report only.",
    )
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt.")


def add_output_arguments(parser: argparse.ArgumentParser) -> None:
    """Add output and reporting arguments."""
    parser.add_argument("--report-json", type=Path, help="Optional path to write the results as JSON.")
    parser.add_argument("--report-csv", type=Path, help="Optional path to write the results as CSV.")
    parser.add_argument("--env-file", help="Read settings from this .env file (default: ~/.env).")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scratch-sweeper",
        description="Find stale subtrees of a scratch directory and optionally delete them.",
    )
    add_scan_arguments(parser)
    add_action_arguments(parser)
    add_output_arguments(parser)
    return parser


def _validate_and_transform_args(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    """Validate and transform parsed arguments."""
    if args.workers <= 0:
        parser.error("--workers must be positive.")
    if args.all:
        args.name_pattern = None
    else:
        try:
            args.name_pattern = re.compile(args.match or DEFAULT_NAME_PATTERN)
        except re.error as exc:
            parser.error(f"--match is not a valid regular expression: {exc}")


def apply_settings(args: argparse.Namespace, settings: Settings) -> None:
    """Fill options missing from the command line with environment settings.

    Raises:
        ConfigurationError: If no scratch root is given and none can be determined.
    """
    if args.base_path is None:
        args.base_path = settings.base_path or determine_default_base_path()
    args.base_path = Path(args.base_path).expanduser()
    if args.older_than is None:
        args.older_than = settings.older_than
    if args.mtime_only is None:
        args.mtime_only = settings.mtime_only


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse and validate command-line arguments for scratch_sweeper."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _validate_and_transform_args(args, parser)
    return args
