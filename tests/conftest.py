import logging
from pathlib import Path
from typing import Iterator

import pytest

from sysmon_config import __version__
from sysmon_config.loader import header_line


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    sysmon = logging.getLogger("sysmon")
    for handler in list(sysmon.handlers):
        sysmon.removeHandler(handler)
        handler.close()
    sysmon.propagate = True
    sysmon.setLevel(logging.NOTSET)
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in saved_handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(saved_level)


@pytest.fixture
def write_config(tmp_path: Path):
    """Write a config file with the current version header followed by `lines`."""

    def _write(*lines: str, header: str = header_line(__version__)) -> Path:
        path = tmp_path / "sysmon.conf"
        path.write_text("\n".join([header, *lines]) + "\n", encoding="utf-8")
        return path

    return _write
