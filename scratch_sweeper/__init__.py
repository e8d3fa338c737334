"""
Scratch directory sweeper package.

Find subtrees of a scratch directory whose files have all gone stale and
optionally delete them, keeping anything that holds a recently touched file.
"""

from . import aggregator, args_parser, cli, config, deletion, durations, reports, staleness, sweeper, verdicts
from .aggregator import RemovabilityScanner, ScanError, can_be_removed
from .deletion import delete_tree
from .staleness import Entry, StalenessOracle, StalenessPolicy, is_stale
from .verdicts import AlwaysRemovable, Blocked, Removable, Verdict, combine

__version__ = "0.1.0"

__all__ = [
    "AlwaysRemovable",
    "Blocked",
    "Entry",
    "Removable",
    "RemovabilityScanner",
    "ScanError",
    "StalenessOracle",
    "StalenessPolicy",
    "Verdict",
    "aggregator",
    "args_parser",
    "can_be_removed",
    "cli",
    "combine",
    "config",
    "delete_tree",
    "deletion",
    "durations",
    "is_stale",
    "reports",
    "staleness",
    "sweeper",
    "verdicts",
]
