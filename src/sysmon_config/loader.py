"""Line-oriented config file reader."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Tuple

from . import PROGRAM_NAME
from .logging import get_logger
from .validators import ConfigValueError, strip_quotes, validate_bool, validate_int

if TYPE_CHECKING:  # pragma: no cover
    from .store import ConfigStore

logger = get_logger("sysmon.loader")

COMMENT_PREFIX = "#"


class LoadState(Enum):
    NOT_STARTED = "not_started"
    HEADER_READ = "header_read"
    LINE_SCAN = "line_scan"
    DONE = "done"


@dataclass
class LoadReport:
    """Outcome of one pass over a config file."""

    path: Path
    state: LoadState = LoadState.NOT_STARTED
    file_found: bool = False
    version_matched: Optional[bool] = None
    accepted: int = 0
    rejected: int = 0


def header_line(version: str) -> str:
    """First line of a config file written by this version."""

    return f"#? Config file for {PROGRAM_NAME} v. {version}"


def parse_assignment(line: str) -> Optional[Tuple[str, str]]:
    """Split a ``key = value`` line on its first ``=``.

    Returns None for blank lines, comments and lines without ``=``.
    """

    stripped = line.strip()
    if not stripped or stripped.startswith(COMMENT_PREFIX):
        return None
    key, sep, value = stripped.partition("=")
    if not sep:
        return None
    return key.strip(), value.strip()


def load_file(store: "ConfigStore", path: Path, warnings: List[str]) -> LoadReport:
    """Load `path` into `store`, appending a warning for every rejected value.

    A missing file, an empty file, a header without the running version and
    any warning mark the store dirty. Rejected values never stop the scan;
    only errors opening or reading the file propagate.
    """

    report = LoadReport(path=path)
    if not path.exists():
        logger.info("Config file not found; defaults in use", extra={"path": str(path)})
        store.mark_dirty()
        return report
    report.file_found = True

    with path.open("r", encoding="utf-8") as handle:
        version_line = handle.readline()
        if not version_line:
            logger.info("Config file is empty", extra={"path": str(path)})
            store.mark_dirty()
            report.state = LoadState.DONE
            return report
        report.state = LoadState.HEADER_READ

        report.version_matched = store.version in version_line
        if not report.version_matched:
            logger.info("Config file version does not match %s", store.version, extra={"path": str(path)})
            store.mark_dirty()

        report.state = LoadState.LINE_SCAN
        for line in handle:
            assignment = parse_assignment(line)
            if assignment is None:
                continue
            key, value = assignment
            if not store.schema.is_known(key):
                continue
            try:
                _apply(store, key, value)
            except ConfigValueError as exc:
                report.rejected += 1
                warnings.append(str(exc))
            else:
                report.accepted += 1

    if warnings:
        store.mark_dirty()
    report.state = LoadState.DONE
    logger.debug(
        "Config file loaded",
        extra={"path": str(path), "accepted": report.accepted, "rejected": report.rejected},
    )
    return report


def _apply(store: "ConfigStore", key: str, value: str) -> None:
    kind = store.kind_of(key)
    if kind is bool:
        store.accept_loaded(key, validate_bool(key, value))
    elif kind is int:
        store.accept_loaded(key, validate_int(key, value))
    elif kind is str:
        store.accept_loaded(key, strip_quotes(value))
