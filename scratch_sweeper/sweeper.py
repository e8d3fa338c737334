"""
Top-level driver: list candidates under the scratch root, scan each one and
delete those whose verdict allows it.
"""

from __future__ import annotations

import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Pattern, Sequence

from .aggregator import RemovabilityScanner, ScanError
from .deletion import DeletionErrors, PathOutsideRootError, delete_tree
from .staleness import StalenessOracle, StalenessPolicy
from .verdicts import Verdict, describe


@dataclass
class CandidateOutcome:
    """Scan (and possibly deletion) result for one top-level entry."""

    path: Path
    verdict: Verdict | None = None
    error: ScanError | None = None
    skip_reason: str | None = None
    deletion_errors: DeletionErrors = field(default_factory=list)
    deleted: bool = False

    @property
    def removable(self) -> bool:
        return self.verdict is not None and self.verdict.removable

    @property
    def status(self) -> str:
        if self.skip_reason is not None:
            return "skipped"
        if self.error is not None:
            return "failed"
        return describe(self.verdict)


def list_candidates(base_path: Path) -> list[Path]:
    """Return the immediate entries of ``base_path`` sorted by name.

    Raises:
        ScanError: If the scratch root cannot be listed.
    """
    try:
        with os.scandir(base_path) as it:
            return sorted(Path(entry.path) for entry in it)
    except OSError as exc:
        raise ScanError(base_path, exc) from exc


def evaluate_candidate(
    path: Path,
    scanner: RemovabilityScanner,
    name_pattern: Pattern[str] | None = None,
) -> CandidateOutcome:
    """Scan one candidate, turning scan failures into a failed outcome."""
    if name_pattern is not None and not name_pattern.search(path.name):
        return CandidateOutcome(path, skip_reason=f"name does not match {name_pattern.pattern}")
    try:
        verdict = scanner.scan(path)
    except ScanError as exc:
        logging.error("Skipping %s: %s", path, exc)
        return CandidateOutcome(path, error=exc)
    logging.debug("%s -> %s", path, verdict)
    return CandidateOutcome(path, verdict=verdict)


def scan_scratch_root(
    base_path: Path,
    policy: StalenessPolicy,
    *,
    name_pattern: Pattern[str] | str | None = None,
    workers: int = 1,
    now: float | None = None,
) -> list[CandidateOutcome]:
    """Scan every top-level entry of ``base_path``.

    Candidates are independent, so with ``workers > 1`` they are scanned on a
    thread pool; results keep the listing order either way.
    """
    if isinstance(name_pattern, str):
        name_pattern = re.compile(name_pattern)
    scanner = RemovabilityScanner(StalenessOracle(policy, now))
    candidates = list_candidates(base_path)

    if workers > 1 and len(candidates) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(
                executor.map(lambda path: evaluate_candidate(path, scanner, name_pattern), candidates)
            )
    return [evaluate_candidate(path, scanner, name_pattern) for path in candidates]


def delete_removable(outcomes: Sequence[CandidateOutcome], *, root: Path) -> DeletionErrors:
    """Delete every removable outcome under ``root``; return all failures."""
    errors: DeletionErrors = []
    for outcome in outcomes:
        if not outcome.removable:
            continue
        try:
            outcome.deletion_errors = delete_tree(outcome.path, root=root)
        except PathOutsideRootError as exc:
            logging.error("Refusing to delete %s: %s", outcome.path, exc)
            outcome.deletion_errors = [(outcome.path, OSError(str(exc)))]
        outcome.deleted = not outcome.deletion_errors
        errors.extend(outcome.deletion_errors)
    return errors
