"""
Report generation and output functions for scratch_sweeper.

Handles the per-candidate report lines, the summary and the optional JSON/CSV
reports.
"""

from __future__ import annotations

import csv
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from .durations import format_duration
from .verdicts import Blocked, Removable

if TYPE_CHECKING:
    from .sweeper import CandidateOutcome

BYTES_PER_KIB = 1024

REPORT_FIELDS = [
    "path",
    "status",
    "reclaimable_bytes",
    "reclaimable_human",
    "most_recent",
    "culprit",
    "detail",
]


def format_size(num_bytes: int | None) -> str:
    """Convert byte count to human-readable format (B, KB, MB, GB, etc)."""
    if num_bytes is None:
        return "n/a"
    suffixes = ["B", "KB", "MB", "GB", "TB", "PB"]
    value = float(num_bytes)
    for suffix in suffixes:
        if value < BYTES_PER_KIB or suffix == suffixes[-1]:
            return f"{value:.1f}{suffix}"
        value /= BYTES_PER_KIB
    return f"{value:.1f}PB"


def _iso(timestamp: float | None) -> str | None:
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


def format_activity(most_recent: float | None, now: float) -> str:
    if most_recent is None:
        return "most recent activity unknown"
    return f"most recent activity {format_duration(now - most_recent)} ago"


def format_outcome(outcome: CandidateOutcome, now: float) -> str:
    """Return the one-line report for a candidate."""
    status = outcome.status
    if status == "skipped":
        return f"{outcome.path}: skipped, {outcome.skip_reason}"
    if status == "failed":
        return f"{outcome.path}: scan failed: {outcome.error}"
    if status == "empty":
        return f"{outcome.path}: empty, removable"
    verdict = outcome.verdict
    if isinstance(verdict, Removable):
        return (
            f"{outcome.path}: removable, reclaims {verdict.reclaimable_bytes} bytes "
            f"({format_size(verdict.reclaimable_bytes)}), "
            f"{format_activity(verdict.most_recent, now)}"
        )
    return f"{outcome.path}: must keep, blocked by path {verdict.culprit}"


def summarise(outcomes: Sequence[CandidateOutcome]) -> dict[str, int]:
    """Return per-status counts plus the total reclaimable bytes."""
    summary = {
        "empty": 0,
        "removable": 0,
        "blocked": 0,
        "skipped": 0,
        "failed": 0,
        "reclaimable_bytes": 0,
    }
    for outcome in outcomes:
        summary[outcome.status] += 1
        if isinstance(outcome.verdict, Removable):
            summary["reclaimable_bytes"] += outcome.verdict.reclaimable_bytes
    return summary


def print_report(outcomes: Sequence[CandidateOutcome], base_path: Path, now: float) -> None:
    """Print one line per candidate followed by a summary."""
    print(f"Scanned {len(outcomes)} entr{'y' if len(outcomes) == 1 else 'ies'} under {base_path}:")
    for outcome in outcomes:
        print(f"- {format_outcome(outcome, now)}")

    summary = summarise(outcomes)
    print(
        f"\nSummary: {summary['removable'] + summary['empty']} removable "
        f"({summary['empty']} empty), {summary['blocked']} must keep, "
        f"{summary['skipped']} skipped, {summary['failed']} failed; "
        f"{format_size(summary['reclaimable_bytes'])} reclaimable"
    )


def _report_row(outcome: CandidateOutcome) -> dict[str, object]:
    verdict = outcome.verdict
    reclaimable = verdict.reclaimable_bytes if isinstance(verdict, Removable) else None
    if outcome.status == "empty":
        reclaimable = 0
    return {
        "path": str(outcome.path),
        "status": outcome.status,
        "reclaimable_bytes": reclaimable,
        "reclaimable_human": format_size(reclaimable),
        "most_recent": _iso(verdict.most_recent) if isinstance(verdict, Removable) else None,
        "culprit": str(verdict.culprit) if isinstance(verdict, Blocked) else None,
        "detail": str(outcome.error) if outcome.error is not None else outcome.skip_reason,
    }


def write_reports(
    outcomes: Sequence[CandidateOutcome],
    *,
    json_path: Path | None,
    csv_path: Path | None,
) -> None:
    """Write candidate outcomes to JSON and/or CSV report files."""
    rows = [_report_row(outcome) for outcome in outcomes]
    if json_path:
        json_path.parent.mkdir(parents=True, exist_ok=True)
        json_path.write_text(json.dumps(rows, indent=2))
    if csv_path:
        csv_path.parent.mkdir(parents=True, exist_ok=True)
        with csv_path.open("w", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=REPORT_FIELDS)
            writer.writeheader()
            writer.writerows(rows)
