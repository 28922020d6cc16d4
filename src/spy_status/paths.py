"""Helpers for locating application directories."""

from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs


APP_NAME = "SpyStatus"
APP_AUTHOR = "SpyStatus"


def get_config_dir() -> Path:
    """Return the base directory for user configuration."""
    dirs = PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=True)
    return Path(dirs.user_config_path)


def get_config_path() -> Path:
    return get_config_dir() / "spy-status.yaml"
