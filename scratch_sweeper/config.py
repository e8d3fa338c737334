"""
Configuration and path resolution for scratch_sweeper.

Handles .env loading, default scratch root determination and the staleness
policy defaults.
"""

from __future__ import annotations

import getpass
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .durations import parse_duration
from .staleness import DEFAULT_THRESHOLD

ENV_FILE_VAR = "SCRATCH_SWEEPER_ENV_FILE"
ROOT_VAR = "SCRATCH_SWEEPER_ROOT"
OLDER_THAN_VAR = "SCRATCH_SWEEPER_OLDER_THAN"
MTIME_ONLY_VAR = "SCRATCH_SWEEPER_MTIME_ONLY"

DEFAULT_NAME_PATTERN = r"^[0-9]{2}$"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing or malformed."""


@dataclass(frozen=True)
class Settings:
    """Defaults gathered from the environment before CLI overrides."""

    base_path: Optional[Path]
    older_than: timedelta = DEFAULT_THRESHOLD
    mtime_only: bool = False


def _resolve_env_path(env_path: Optional[str] = None) -> str:
    """
    Determine which .env file should be loaded.

    Priority order:
      1. Explicit parameter
      2. SCRATCH_SWEEPER_ENV_FILE environment variable
      3. ~/.env
    """
    if env_path:
        return env_path
    env_file = os.environ.get(ENV_FILE_VAR)
    if env_file:
        return env_file
    return str(Path.home() / ".env")


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def _current_user() -> str:
    user = os.environ.get("USER")
    if user:
        return user
    try:
        return getpass.getuser()
    except (KeyError, OSError) as exc:
        raise ConfigurationError("Cannot determine the current user name") from exc


def determine_default_base_path() -> Path:
    """Return $HOME/tmp when it exists, otherwise $TMPDIR/$USER.

    Raises:
        ConfigurationError: If neither location can be determined.
    """
    try:
        home_tmp = Path.home() / "tmp"
    except RuntimeError:
        home_tmp = None
    if home_tmp is not None and home_tmp.is_dir():
        return home_tmp

    tmpdir = os.environ.get("TMPDIR") or tempfile.gettempdir()
    return Path(tmpdir) / _current_user()


def load_settings(env_path: Optional[str] = None) -> Settings:
    """Load the .env file (without overriding the environment) and read settings.

    Raises:
        ConfigurationError: If an environment value is malformed.
    """
    resolved_path = _resolve_env_path(env_path)
    if load_dotenv(resolved_path):
        logging.debug("Loaded settings from %s", resolved_path)

    root_value = os.environ.get(ROOT_VAR)
    base_path = Path(root_value).expanduser() if root_value else None

    older_than = DEFAULT_THRESHOLD
    older_than_value = os.environ.get(OLDER_THAN_VAR)
    if older_than_value:
        try:
            older_than = parse_duration(older_than_value)
        except ValueError as exc:
            raise ConfigurationError(f"{OLDER_THAN_VAR}: {exc}") from exc

    mtime_only = _parse_bool(MTIME_ONLY_VAR, os.environ.get(MTIME_ONLY_VAR, ""))
    return Settings(base_path=base_path, older_than=older_than, mtime_only=mtime_only)
