"""
Command-line interface and main entry point for scratch_sweeper.

Handles workflow orchestration and user interaction.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from .aggregator import ScanError
from .args_parser import apply_settings, parse_args
from .config import ConfigurationError, load_settings
from .reports import format_size, print_report, summarise, write_reports
from .staleness import StalenessPolicy
from .sweeper import CandidateOutcome, delete_removable, scan_scratch_root


def confirm_action(message: str, skip_prompt: bool = False) -> bool:
    """
    Prompt user to confirm an action.

    Returns:
        bool: True if user answered y/yes or the prompt was skipped, False otherwise
    """
    if skip_prompt:
        return True
    try:
        response = input(message).strip()
    except EOFError:
        print("\nConfirmation not received.")
        return False
    return response.lower() in {"y", "yes"}


def _setup_base_path(args: argparse.Namespace) -> Path | int:
    """Resolve the scratch root. Returns the path or an error code."""
    try:
        apply_settings(args, load_settings(args.env_file))
    except ConfigurationError as exc:
        logging.error("%s", exc)
        return 1
    base_path = args.base_path
    if not base_path.is_dir():
        logging.error("Scratch directory %s does not exist.", base_path)
        return 1
    return base_path.resolve()


def _handle_deletion(args: argparse.Namespace, outcomes: list[CandidateOutcome], base_path: Path) -> int:
    """Handle deletion logic. Returns exit code."""
    removable = [outcome for outcome in outcomes if outcome.removable]
    if not args.delete:
        print("\nDry run only (use --delete --yes to remove the removable entries).")
        return 0
    if not removable:
        print("\nNothing to delete.")
        return 0

    summary = summarise(outcomes)
    prompt = (
        f"\nDelete {len(removable)} entr{'y' if len(removable) == 1 else 'ies'} "
        f"({format_size(summary['reclaimable_bytes'])})? [y/N] "
    )
    if not confirm_action(prompt, skip_prompt=args.yes):
        print("Aborted by user.")
        return 0

    errors = delete_removable(outcomes, root=base_path)
    if errors:
        print(f"Completed with {len(errors)} error(s); see log for details.")
        return 2
    print("Deletion complete.")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for scratch_sweeper CLI."""
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )

    setup_result = _setup_base_path(args)
    if isinstance(setup_result, int):
        return setup_result
    base_path = setup_result

    policy = StalenessPolicy(threshold=args.older_than, consider_access_time=not args.mtime_only)
    now = time.time()
    if not args.delete:
        print("Dry run: nothing will be deleted. Use --delete --yes to remove removable entries.\n")

    try:
        outcomes = scan_scratch_root(
            base_path,
            policy,
            name_pattern=args.name_pattern,
            workers=args.workers,
            now=now,
        )
    except ScanError as exc:
        logging.error("%s", exc)
        return 1

    print_report(outcomes, base_path, now)
    write_reports(outcomes, json_path=args.report_json, csv_path=args.report_csv)

    exit_code = _handle_deletion(args, outcomes, base_path)
    if any(outcome.status == "failed" for outcome in outcomes):
        return 2
    return exit_code
