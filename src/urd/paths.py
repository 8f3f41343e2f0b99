"""Helpers for locating the tracker state file."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import PlatformDirs


APP_NAME = "urd"
APP_AUTHOR = "urd"

STORE_ENV_VAR = "URD_STORE"


def get_data_dir() -> Path:
    """Return the base directory for persistent data."""
    dirs = PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=True)
    path = Path(dirs.user_data_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_store_path() -> Path:
    override = os.getenv(STORE_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return get_data_dir() / "urd.json"
