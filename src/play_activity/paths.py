"""Locate the play log and the per-user data directory."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import PlatformDirs


APP_NAME = "PlayActivity"
APP_AUTHOR = "PlayActivity"
PLAY_LOG_NAME = "PlayEvent.dat"
PLAY_LOG_ENV = "PLAY_ACTIVITY_LOG"


def get_data_dir() -> Path:
    dirs = PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=True)
    path = Path(dirs.user_data_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_play_log_path() -> Path:
    """Return the log named by ``PLAY_ACTIVITY_LOG``, else the data dir copy."""
    override = os.environ.get(PLAY_LOG_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return get_data_dir() / PLAY_LOG_NAME
