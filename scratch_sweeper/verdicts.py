"""
Removability verdicts for scanned subtrees.

A verdict is an immutable value. Parent verdicts are built by folding child
verdicts together with ``combine``; ``Blocked`` is absorbing, so a single
disqualifying descendant decides the outcome for every ancestor.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class AlwaysRemovable:
    """An empty directory: removable regardless of policy."""

    @property
    def removable(self) -> bool:
        return True


@dataclass(frozen=True)
class Removable:
    """Everything beneath the node is stale."""

    reclaimable_bytes: int = 0
    most_recent: float | None = None

    @property
    def removable(self) -> bool:
        return True


@dataclass(frozen=True)
class Blocked:
    """At least one path under the node is not stale."""

    culprit: Path

    @property
    def removable(self) -> bool:
        return False


Verdict = Union[AlwaysRemovable, Removable, Blocked]

ALWAYS_REMOVABLE = AlwaysRemovable()
EMPTY_REMOVABLE = Removable(0, None)


def _latest(first: float | None, second: float | None) -> float | None:
    if first is None:
        return second
    if second is None:
        return first
    return max(first, second)


def combine(left: Verdict, right: Verdict) -> Verdict:
    """Combine two sibling verdicts into one.

    The left-most ``Blocked`` wins, ``AlwaysRemovable`` is the identity, and
    two ``Removable`` values add their sizes and keep the latest timestamp.
    """
    if isinstance(left, Blocked):
        return left
    if isinstance(right, Blocked):
        return right
    if isinstance(left, AlwaysRemovable):
        return right
    if isinstance(right, AlwaysRemovable):
        return left
    return Removable(
        reclaimable_bytes=left.reclaimable_bytes + right.reclaimable_bytes,
        most_recent=_latest(left.most_recent, right.most_recent),
    )


def describe(verdict: Verdict) -> str:
    """Return the short status name used in reports."""
    if isinstance(verdict, AlwaysRemovable):
        return "empty"
    if isinstance(verdict, Removable):
        return "removable"
    return "blocked"
