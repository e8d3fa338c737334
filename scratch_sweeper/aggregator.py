"""
Removability scan.

Walks a subtree depth first and folds every child verdict into its parent.
The fold stops at the first ``Blocked`` child, so nothing after a fresh file
is ever stat'ed. The scan never deletes anything.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from .staleness import Entry, StalenessOracle, StalenessPolicy
from .verdicts import ALWAYS_REMOVABLE, EMPTY_REMOVABLE, Blocked, Removable, Verdict, combine


class ScanError(RuntimeError):
    """Raised when a subtree cannot be read, so its removability is unknown."""

    def __init__(self, path: Path, error: OSError):
        super().__init__(f"Cannot scan {path}: {error}")
        self.path = path
        self.error = error


@dataclass
class _Frame:
    """A directory whose children are still being folded."""

    children: Iterator[os.DirEntry]
    verdict: Verdict = EMPTY_REMOVABLE


class RemovabilityScanner:
    """Compute verdicts for paths using a staleness oracle."""

    def __init__(self, oracle: StalenessOracle):
        self.oracle = oracle

    def scan(self, path: Path | str) -> Verdict:
        """Return the verdict for ``path``.

        Raises:
            ScanError: If ``path`` or a directory beneath it cannot be
                stat'ed or listed.
        """
        path = Path(path)
        entry = self._read_strict(path)
        if not entry.is_dir:
            return self._judge_file(entry)
        return self._scan_dir(entry, root_device=entry.device)

    def _read_strict(self, path: Path) -> Entry:
        try:
            return self.oracle.read(path, strict=True)
        except OSError as exc:
            raise ScanError(path, exc) from exc

    def _judge_file(self, entry: Entry) -> Verdict:
        if self.oracle.is_stale(entry):
            return Removable(entry.size_bytes, self.oracle.activity_time(entry))
        logging.debug("%s is recent, subtree must be kept", entry.path)
        return Blocked(entry.path)

    def _list_dir(self, path: Path) -> list[os.DirEntry]:
        try:
            with os.scandir(path) as it:
                return sorted(it, key=lambda child: child.name)
        except OSError as exc:
            raise ScanError(path, exc) from exc

    def _open_dir(self, entry: Entry, *, root_device: int | None) -> Verdict | _Frame:
        if entry.device != root_device:
            logging.warning("Not crossing filesystem boundary at %s, keeping it", entry.path)
            return Blocked(entry.path)
        children = self._list_dir(entry.path)
        if not children:
            return ALWAYS_REMOVABLE
        return _Frame(iter(children))

    def _scan_dir(self, entry: Entry, *, root_device: int | None) -> Verdict:
        opened = self._open_dir(entry, root_device=root_device)
        if not isinstance(opened, _Frame):
            return opened

        # Explicit stack so nesting depth is not bounded by the recursion limit.
        stack = [opened]
        while True:
            child = next(stack[-1].children, None)
            if child is None:
                result: Verdict | _Frame = stack.pop().verdict
                if not stack:
                    return result
            else:
                result = self._scan_child(child, root_device=root_device)
                if isinstance(result, _Frame):
                    stack.append(result)
                    continue
            parent = stack[-1]
            parent.verdict = combine(parent.verdict, result)
            if isinstance(parent.verdict, Blocked):
                # Blocked is absorbing, so every ancestor ends up with the same culprit.
                return parent.verdict

    def _scan_child(self, child: os.DirEntry, *, root_device: int | None) -> Verdict | _Frame:
        path = Path(child.path)
        try:
            is_dir = child.is_dir(follow_symlinks=False)
        except OSError as exc:
            raise ScanError(path, exc) from exc
        if is_dir:
            return self._open_dir(self._read_strict(path), root_device=root_device)
        return self._judge_file(self.oracle.read(path))


def can_be_removed(
    path: Path | str,
    policy: StalenessPolicy | None = None,
    now: float | None = None,
) -> Verdict:
    """Scan ``path`` under ``policy`` and return its verdict."""
    return RemovabilityScanner(StalenessOracle(policy, now)).scan(path)
