#!/usr/bin/env python3
"""
Report stale subtrees of a scratch directory and optionally delete them.

A directory is only removable when every file beneath it is older than the
threshold (21 days by default, judged on both access and modification time).

This is a thin wrapper around the scratch_sweeper package.
"""

from __future__ import annotations

import sys

from scratch_sweeper.cli import main

if __name__ == "__main__":  # pragma: no cover
    try:
        raise SystemExit(main())
    except KeyboardInterrupt as exc:
        print("\n✗ Sweep interrupted by user.", file=sys.stderr)
        raise SystemExit(130) from exc
