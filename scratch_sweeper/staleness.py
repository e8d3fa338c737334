"""
Staleness decisions for individual filesystem entries.

Metadata is read with ``os.lstat`` so a symbolic link is judged by its own
timestamps, never by its target. Unknown timestamps count as recent.
"""

from __future__ import annotations

import logging
import os
import stat
import time
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

DEFAULT_THRESHOLD = timedelta(days=21)


@dataclass(frozen=True)
class StalenessPolicy:
    """Threshold and timestamp selection used for one scan."""

    threshold: timedelta = DEFAULT_THRESHOLD
    consider_access_time: bool = True

    @property
    def threshold_seconds(self) -> float:
        return self.threshold.total_seconds()


@dataclass(frozen=True)
class Entry:
    """Metadata snapshot for one path, as seen by ``os.lstat``."""

    path: Path
    is_dir: bool = False
    is_symlink: bool = False
    size_bytes: int = 0
    modified_at: float | None = None
    accessed_at: float | None = None
    device: int | None = None

    @property
    def readable(self) -> bool:
        return self.modified_at is not None and self.accessed_at is not None

    @classmethod
    def from_stat(cls, path: Path, st: os.stat_result) -> "Entry":
        is_dir = stat.S_ISDIR(st.st_mode)
        return cls(
            path=path,
            is_dir=is_dir,
            is_symlink=stat.S_ISLNK(st.st_mode),
            size_bytes=0 if is_dir else st.st_size,
            modified_at=st.st_mtime,
            accessed_at=st.st_atime,
            device=st.st_dev,
        )


class StalenessOracle:
    """Judge entries against a policy at a fixed point in time."""

    def __init__(self, policy: StalenessPolicy | None = None, now: float | None = None):
        self.policy = policy or StalenessPolicy()
        self.now = time.time() if now is None else now

    def read(self, path: Path, *, strict: bool = False) -> Entry:
        """Return the entry for ``path``.

        When lstat fails the entry comes back without timestamps (so it is
        never stale), unless ``strict`` is set, in which case the OSError
        propagates.
        """
        try:
            st = os.lstat(path)
        except OSError as exc:
            if strict:
                raise
            logging.warning("Unable to read metadata for %s, keeping it: %s", path, exc)
            return Entry(path=Path(path))
        return Entry.from_stat(Path(path), st)

    def _is_old(self, timestamp: float | None) -> bool:
        if timestamp is None:
            return False
        return self.now - timestamp >= self.policy.threshold_seconds

    def is_stale(self, entry: Entry) -> bool:
        """Return True when every relevant timestamp is past the threshold."""
        if not self._is_old(entry.modified_at):
            return False
        if self.policy.consider_access_time:
            return self._is_old(entry.accessed_at)
        return True

    def activity_time(self, entry: Entry) -> float | None:
        """Latest timestamp that the policy looks at, used for reporting."""
        if not self.policy.consider_access_time or entry.accessed_at is None:
            return entry.modified_at
        if entry.modified_at is None:
            return entry.accessed_at
        return max(entry.modified_at, entry.accessed_at)


def is_stale(path: Path | str, now: float, policy: StalenessPolicy) -> bool:
    """Decide whether ``path`` is stale under ``policy`` as of ``now``."""
    oracle = StalenessOracle(policy, now)
    return oracle.is_stale(oracle.read(Path(path)))
