"""
Configuration management for mpvremote.

Resolves where the store lives (following mpv's own config directory
convention) and loads optional settings from a TOML file.
"""

from __future__ import annotations

import logging
import os
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

logger = logging.getLogger(__name__)

# Location of the store relative to the mpv config directory
DB_SUBPATH: tuple[str, ...] = ("scripts", "mpvremote", "remote.db")

# Settings file, looked up next to the database by default
SETTINGS_FILE_NAME = "settings.toml"

DEFAULT_FINISHED_PERCENT = 90.0
DEFAULT_MIN_PERCENT = 5.0


def get_mpv_home(
    *,
    platform: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """
    Get mpv's configuration directory.

    `$MPV_HOME` wins everywhere. Otherwise Windows uses `%APPDATA%\\mpv`
    and everything else `$XDG_CONFIG_HOME/mpv` (default `~/.config/mpv`).

    Args:
        platform: Value to use instead of `sys.platform` (for tests).
        environ: Mapping to use instead of `os.environ` (for tests).
    """
    platform = sys.platform if platform is None else platform
    env = os.environ if environ is None else environ

    mpv_home = env.get("MPV_HOME")
    if mpv_home:
        return Path(mpv_home)

    if platform == "win32":
        appdata = env.get("APPDATA")
        base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
        return base / "mpv"

    xdg_config_home = env.get("XDG_CONFIG_HOME")
    base = Path(xdg_config_home) if xdg_config_home else Path.home() / ".config"
    return base / "mpv"


def default_db_path(
    *,
    platform: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Path of the store database: `<mpv home>/scripts/mpvremote/remote.db`."""
    return get_mpv_home(platform=platform, environ=environ).joinpath(*DB_SUBPATH)


@dataclass(frozen=True, slots=True)
class RemoteSettings:
    """Loaded store settings."""

    db_path: Path
    # Progress at or above this percentage marks a file as finished
    finished_percent: float = DEFAULT_FINISHED_PERCENT
    # Progress at or below this percentage is not recorded at all
    min_percent: float = DEFAULT_MIN_PERCENT

    def __post_init__(self) -> None:
        if not 0 <= self.min_percent < self.finished_percent <= 100:
            raise ValueError(
                "Expected 0 <= min_percent < finished_percent <= 100, got "
                f"min_percent={self.min_percent}, finished_percent={self.finished_percent}"
            )


def default_settings_path() -> Path:
    return default_db_path().parent / SETTINGS_FILE_NAME


def load_settings(config_path: Path | None = None) -> RemoteSettings:
    """
    Load settings from a TOML file.

    Example file:

        [store]
        db_path = "/srv/mpv/remote.db"

        [progress]
        finished_percent = 95
        min_percent = 2

    A missing file yields the defaults.

    Args:
        config_path: Path to the settings file. If None, uses default location.
    """
    if config_path is None:
        config_path = default_settings_path()

    if not config_path.exists():
        logger.debug("No settings file at %s, using defaults", config_path)
        return RemoteSettings(db_path=default_db_path())

    logger.debug("Loading settings from %s", config_path)

    with config_path.open("rb") as f:
        data = tomllib.load(f)

    store = data.get("store", {})
    progress = data.get("progress", {})

    db_path = store.get("db_path")
    return RemoteSettings(
        db_path=Path(db_path).expanduser() if db_path else default_db_path(),
        finished_percent=float(progress.get("finished_percent", DEFAULT_FINISHED_PERCENT)),
        min_percent=float(progress.get("min_percent", DEFAULT_MIN_PERCENT)),
    )
