"""Tests for scratch_sweeper/sweeper.py candidate handling."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from scratch_sweeper.aggregator import ScanError
from scratch_sweeper.staleness import StalenessPolicy
from scratch_sweeper.sweeper import (
    CandidateOutcome,
    delete_removable,
    list_candidates,
    scan_scratch_root,
)
from scratch_sweeper.verdicts import ALWAYS_REMOVABLE, Blocked, Removable
from tests.assertions import assert_equal
from tests.scratch_tree_test_utils import DAY, NOW, write_file

_real_scandir = os.scandir


def _populate(scratch: Path) -> dict[str, Path]:
    write_file(scratch / "01" / "a.txt", 100, age_days=30)
    write_file(scratch / "01" / "sub" / "b.txt", 50, age_days=25)
    fresh = write_file(scratch / "02" / "new.txt", 5, age_days=1)
    (scratch / "03").mkdir()
    write_file(scratch / "notes" / "old.txt", 5, age_days=90)
    return {"fresh": fresh}


def _by_name(outcomes):
    return {outcome.path.name: outcome for outcome in outcomes}


def test_list_candidates_sorted(scratch):
    for name in ("b", "a", "c"):
        (scratch / name).mkdir()
    assert_equal([p.name for p in list_candidates(scratch)], ["a", "b", "c"])


def test_list_candidates_missing_root(tmp_path):
    with pytest.raises(ScanError):
        list_candidates(tmp_path / "missing")


def test_scan_scratch_root_outcomes(scratch):
    """Each candidate gets the expected status; unmatched names are skipped."""
    created = _populate(scratch)

    outcomes = _by_name(scan_scratch_root(scratch, StalenessPolicy(), name_pattern=r"^[0-9]{2}$", now=NOW))

    assert_equal(outcomes["01"].verdict, Removable(150, NOW - 25 * DAY))
    assert_equal(outcomes["01"].status, "removable")
    assert_equal(outcomes["02"].verdict, Blocked(created["fresh"]))
    assert_equal(outcomes["02"].status, "blocked")
    assert_equal(outcomes["03"].verdict, ALWAYS_REMOVABLE)
    assert_equal(outcomes["03"].status, "empty")
    assert_equal(outcomes["notes"].status, "skipped")
    assert outcomes["notes"].verdict is None
    assert "notes" not in [o.path.name for o in outcomes.values() if o.removable]


def test_no_name_pattern_considers_everything(scratch):
    _populate(scratch)
    outcomes = _by_name(scan_scratch_root(scratch, StalenessPolicy(), name_pattern=None, now=NOW))
    assert_equal(outcomes["notes"].status, "removable")


def test_parallel_scan_matches_sequential(scratch):
    """Worker threads produce the same outcomes in the same order."""
    _populate(scratch)
    for index in range(10, 20):
        write_file(scratch / str(index) / "f.txt", index, age_days=40)

    sequential = scan_scratch_root(scratch, StalenessPolicy(), now=NOW)
    parallel = scan_scratch_root(scratch, StalenessPolicy(), workers=4, now=NOW)

    assert_equal([o.path for o in parallel], [o.path for o in sequential])
    assert_equal([o.verdict for o in parallel], [o.verdict for o in sequential])


def test_scan_failure_is_isolated(scratch):
    """A candidate that cannot be listed fails alone; others are still scanned."""
    _populate(scratch)
    broken = scratch / "01" / "sub"

    def flaky_scandir(path):
        if Path(path) == broken:
            raise PermissionError(13, "Permission denied", str(path))
        return _real_scandir(path)

    with patch("scratch_sweeper.aggregator.os.scandir", side_effect=flaky_scandir):
        outcomes = _by_name(scan_scratch_root(scratch, StalenessPolicy(), now=NOW))

    assert_equal(outcomes["01"].status, "failed")
    assert not outcomes["01"].removable
    assert_equal(outcomes["01"].error.path, broken)
    assert_equal(outcomes["03"].status, "empty")


def test_delete_removable_only_touches_removable(scratch):
    """Blocked, skipped and failed candidates survive deletion."""
    _populate(scratch)
    outcomes = scan_scratch_root(scratch, StalenessPolicy(), name_pattern=r"^[0-9]{2}$", now=NOW)

    errors = delete_removable(outcomes, root=scratch)

    assert_equal(errors, [])
    assert not (scratch / "01").exists()
    assert not (scratch / "03").exists()
    assert (scratch / "02" / "new.txt").exists()
    assert (scratch / "notes" / "old.txt").exists()
    deleted = {o.path.name for o in outcomes if o.deleted}
    assert_equal(deleted, {"01", "03"})


def test_delete_removable_refuses_outside_root(scratch, tmp_path):
    """A removable outcome outside the root is reported, not deleted."""
    stray = write_file(tmp_path / "stray" / "x.txt", 1, age_days=40).parent
    outcome = CandidateOutcome(stray, verdict=Removable(1, None))

    errors = delete_removable([outcome], root=scratch)

    assert_equal(len(errors), 1)
    assert not outcome.deleted
    assert stray.exists()
