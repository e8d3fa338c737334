"""
Duration parsing and formatting.

Durations are written as a number followed by an optional unit, e.g. ``21d``,
``3hrs``, ``5months`` or ``1.5 weeks``. A bare number means days.
"""

from __future__ import annotations

import argparse
import re
from datetime import timedelta

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR
SECONDS_PER_WEEK = 7 * SECONDS_PER_DAY
SECONDS_PER_MONTH = 30 * SECONDS_PER_DAY
SECONDS_PER_YEAR = 365 * SECONDS_PER_DAY

UNIT_SECONDS = {
    "s": 1,
    "sec": 1,
    "secs": 1,
    "second": 1,
    "seconds": 1,
    "min": SECONDS_PER_MINUTE,
    "mins": SECONDS_PER_MINUTE,
    "minute": SECONDS_PER_MINUTE,
    "minutes": SECONDS_PER_MINUTE,
    "h": SECONDS_PER_HOUR,
    "hr": SECONDS_PER_HOUR,
    "hrs": SECONDS_PER_HOUR,
    "hour": SECONDS_PER_HOUR,
    "hours": SECONDS_PER_HOUR,
    "d": SECONDS_PER_DAY,
    "day": SECONDS_PER_DAY,
    "days": SECONDS_PER_DAY,
    "w": SECONDS_PER_WEEK,
    "wk": SECONDS_PER_WEEK,
    "wks": SECONDS_PER_WEEK,
    "week": SECONDS_PER_WEEK,
    "weeks": SECONDS_PER_WEEK,
    "mo": SECONDS_PER_MONTH,
    "mon": SECONDS_PER_MONTH,
    "month": SECONDS_PER_MONTH,
    "months": SECONDS_PER_MONTH,
    "y": SECONDS_PER_YEAR,
    "yr": SECONDS_PER_YEAR,
    "yrs": SECONDS_PER_YEAR,
    "year": SECONDS_PER_YEAR,
    "years": SECONDS_PER_YEAR,
}

_DURATION_PATTERN = re.compile(r"^(?P<number>\d+(?:\.\d+)?)\s*(?P<unit>[a-z]*)$")


def parse_duration(value: str, *, for_argparse: bool = False) -> timedelta:
    """
    Parse a duration string such as ``3hrs`` or ``21d`` into a timedelta.

    Args:
        value: Number with an optional alphabetic unit suffix
        for_argparse: If True, raise argparse.ArgumentTypeError on invalid input

    Raises:
        ValueError: If the string is empty, not positive, too large or uses
            an unknown unit
        argparse.ArgumentTypeError: Same conditions, when for_argparse is set
    """
    match = _DURATION_PATTERN.match(value.strip().lower())
    error_msg = None
    duration = None
    if not match:
        error_msg = f"Invalid duration: {value!r}"
    else:
        unit = match.group("unit") or "d"
        if unit not in UNIT_SECONDS:
            error_msg = f"Unknown duration unit {unit!r} in {value!r}"
        else:
            try:
                duration = timedelta(seconds=float(match.group("number")) * UNIT_SECONDS[unit])
            except OverflowError:
                error_msg = f"Duration out of range: {value!r}"
            else:
                if duration <= timedelta(0):
                    error_msg = f"Duration must be positive: {value!r}"
    if error_msg:
        if for_argparse:
            raise argparse.ArgumentTypeError(error_msg)
        raise ValueError(error_msg)
    return duration


def duration_argument(value: str) -> timedelta:
    """argparse ``type=`` adapter for parse_duration."""
    return parse_duration(value, for_argparse=True)


def format_duration(seconds: float) -> str:
    """Format seconds to human readable duration"""
    seconds = max(seconds, 0)
    if seconds < SECONDS_PER_MINUTE:
        return f"{int(seconds)}s"
    if seconds < SECONDS_PER_HOUR:
        minutes = int(seconds / SECONDS_PER_MINUTE)
        secs = int(seconds % SECONDS_PER_MINUTE)
        return f"{minutes}m {secs}s"
    if seconds < SECONDS_PER_DAY:
        hours = int(seconds / SECONDS_PER_HOUR)
        minutes = int((seconds % SECONDS_PER_HOUR) / SECONDS_PER_MINUTE)
        return f"{hours}h {minutes}m"
    days = int(seconds / SECONDS_PER_DAY)
    hours = int((seconds % SECONDS_PER_DAY) / SECONDS_PER_HOUR)
    return f"{days}d {hours}h"
