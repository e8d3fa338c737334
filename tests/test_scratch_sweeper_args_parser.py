"""Tests for scratch_sweeper/args_parser.py."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest

from scratch_sweeper.args_parser import apply_settings, parse_args
from scratch_sweeper.config import DEFAULT_NAME_PATTERN, Settings
from tests.assertions import assert_equal


def test_defaults():
    """Unset options stay None until settings are applied."""
    args = parse_args([])

    assert args.base_path is None
    assert args.older_than is None
    assert args.mtime_only is None
    assert not args.delete
    assert not args.yes
    assert_equal(args.workers, 1)
    assert_equal(args.name_pattern.pattern, DEFAULT_NAME_PATTERN)


def test_name_pattern_default_matches_two_digits():
    """The default filter accepts exactly two digits."""
    pattern = parse_args([]).name_pattern
    assert pattern.search("07")
    assert not pattern.search("7")
    assert not pattern.search("007")
    assert not pattern.search("ab")


def test_custom_match_and_all():
    """--match compiles the given regex; --all disables filtering."""
    assert_equal(parse_args(["--match", "^build-"]).name_pattern.pattern, "^build-")
    assert parse_args(["--all"]).name_pattern is None


def test_match_and_all_are_exclusive(capsys):
    with pytest.raises(SystemExit) as exc_info:
        parse_args(["--all", "--match", "x"])
    assert_equal(exc_info.value.code, 2)
    assert "not allowed with" in capsys.readouterr().err


def test_invalid_regex_rejected(capsys):
    with pytest.raises(SystemExit) as exc_info:
        parse_args(["--match", "("])
    assert_equal(exc_info.value.code, 2)
    assert "--match" in capsys.readouterr().err


def test_invalid_workers_rejected():
    with pytest.raises(SystemExit) as exc_info:
        parse_args(["--workers", "0"])
    assert_equal(exc_info.value.code, 2)


def test_invalid_duration_rejected(capsys):
    with pytest.raises(SystemExit) as exc_info:
        parse_args(["--older-than", "3 fortnights"])
    assert_equal(exc_info.value.code, 2)
    assert "Unknown duration unit" in capsys.readouterr().err


@pytest.mark.parametrize("value", ["0", "0h", "99999999999y"])
def test_unusable_threshold_rejected(value, capsys):
    """Zero and out-of-range thresholds are usage errors, not tracebacks."""
    with pytest.raises(SystemExit) as exc_info:
        parse_args(["--older-than", value])
    assert_equal(exc_info.value.code, 2)
    assert "--older-than" in capsys.readouterr().err


def test_duration_and_flags_parsed(tmp_path):
    args = parse_args(
        [
            "--base-path",
            str(tmp_path),
            "--older-than",
            "3hrs",
            "--mtime-only",
            "--delete",
            "--yes",
            "--workers",
            "4",
            "--report-json",
            str(tmp_path / "r.json"),
        ]
    )
    assert_equal(args.base_path, tmp_path)
    assert_equal(args.older_than, timedelta(hours=3))
    assert args.mtime_only is True
    assert args.delete and args.yes
    assert_equal(args.workers, 4)
    assert_equal(args.report_json, tmp_path / "r.json")


def test_apply_settings_fills_missing_values(tmp_path):
    """Environment settings are used when the command line is silent."""
    args = parse_args([])
    settings = Settings(base_path=tmp_path / "scratch", older_than=timedelta(days=2), mtime_only=True)

    apply_settings(args, settings)

    assert_equal(args.base_path, tmp_path / "scratch")
    assert_equal(args.older_than, timedelta(days=2))
    assert args.mtime_only is True


def test_command_line_overrides_settings(tmp_path):
    args = parse_args(["--base-path", str(tmp_path), "--older-than", "5d"])
    settings = Settings(base_path=Path("/elsewhere"), older_than=timedelta(days=2), mtime_only=False)

    apply_settings(args, settings)

    assert_equal(args.base_path, tmp_path)
    assert_equal(args.older_than, timedelta(days=5))
    assert args.mtime_only is False


def test_apply_settings_uses_default_root(tmp_path, monkeypatch):
    """With no root anywhere, $HOME/tmp is used when it exists."""
    (tmp_path / "tmp").mkdir()
    monkeypatch.setenv("HOME", str(tmp_path))
    args = parse_args([])

    apply_settings(args, Settings(base_path=None))

    assert_equal(args.base_path, tmp_path / "tmp")
