"""Locations of the config file, log file and theme directories."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from . import PROGRAM_NAME
from .logging import get_logger

logger = get_logger("sysmon.paths")

CONFIG_FILE_NAME = f"{PROGRAM_NAME}.conf"
LOG_FILE_NAME = f"{PROGRAM_NAME}.log"
SYSTEM_THEME_DIRS: Sequence[Path] = (
    Path("/usr/local/share") / PROGRAM_NAME / "themes",
    Path("/usr/share") / PROGRAM_NAME / "themes",
)


@dataclass(frozen=True)
class AppPaths:
    """Resolved locations; any of them may be unavailable (None)."""

    config_dir: Optional[Path] = None
    config_file: Optional[Path] = None
    log_file: Optional[Path] = None
    user_theme_dir: Optional[Path] = None
    theme_dir: Optional[Path] = None


def find_config_dir(env: Mapping[str, str]) -> Optional[Path]:
    """Return the per-user config directory, preferring ``$XDG_CONFIG_HOME``."""

    for name in ("XDG_CONFIG_HOME", "HOME"):
        value = env.get(name)
        if not value:
            continue
        base = Path(value)
        if not base.is_dir() or not os.access(base, os.W_OK):
            continue
        if name == "HOME":
            return base / ".config" / PROGRAM_NAME
        return base / PROGRAM_NAME
    return None


def _usable_dir(path: Path) -> bool:
    return path.is_dir() and os.access(path, os.R_OK)


def find_theme_dir(
    exe_dir: Optional[Path],
    system_dirs: Sequence[Path] = SYSTEM_THEME_DIRS,
) -> Optional[Path]:
    """Return the bundled theme directory next to the executable or system-wide."""

    candidates = []
    if exe_dir is not None:
        candidates.append(exe_dir / ".." / "share" / PROGRAM_NAME / "themes")
    candidates.extend(system_dirs)
    for candidate in candidates:
        if _usable_dir(candidate):
            return candidate.resolve()
    return None


def discover(
    env: Optional[Mapping[str, str]] = None,
    exe_dir: Optional[Path] = None,
    system_theme_dirs: Sequence[Path] = SYSTEM_THEME_DIRS,
) -> AppPaths:
    """Resolve (and create where needed) every location the program uses."""

    if env is None:
        env = os.environ
    if exe_dir is None:
        exe_dir = Path(sys.argv[0]).resolve().parent
    theme_dir = find_theme_dir(exe_dir, system_theme_dirs)

    config_dir = find_config_dir(env)
    if config_dir is None:
        logger.warning(
            "Could not get path to user HOME folder. Make sure $XDG_CONFIG_HOME or $HOME "
            "environment variables are correctly set to fix this."
        )
        return AppPaths(theme_dir=theme_dir)
    try:
        config_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.warning(
            "Could not create or access config directory. Logging and config saving disabled.",
            extra={"path": str(config_dir), "error": str(exc)},
        )
        return AppPaths(theme_dir=theme_dir)

    user_theme_dir: Optional[Path] = config_dir / "themes"
    try:
        user_theme_dir.mkdir(exist_ok=True)
    except OSError:
        logger.debug("User theme directory unavailable", extra={"path": str(user_theme_dir)})
        user_theme_dir = None

    return AppPaths(
        config_dir=config_dir,
        config_file=config_dir / CONFIG_FILE_NAME,
        log_file=config_dir / LOG_FILE_NAME,
        user_theme_dir=user_theme_dir,
        theme_dir=theme_dir,
    )
