"""Entrypoint for sysmon-config."""

from __future__ import annotations

import locale
import sys
from typing import Iterable, List, Optional

from . import __version__
from .cli import RuntimeArgs, parse_cli, print_settings
from .logging import configure_logging, get_logger
from .paths import discover
from .store import ConfigStore


def _utf8_locale() -> bool:
    encoding = locale.getpreferredencoding(False) or ""
    return encoding.lower().replace("-", "") == "utf8"


def apply_cli_overrides(store: ConfigStore, args: RuntimeArgs) -> None:
    """Apply command-line switches on top of the loaded settings."""

    if args.low_color:
        store.set_bool("truecolor", False)
    if args.tty is not None:
        store.set_bool("force_tty", args.tty)
    if args.preset is not None:
        store.select_preset(min(args.preset, len(store.presets) - 1))


def run(cli_args: Optional[Iterable[str]] = None) -> int:
    """Load the config file, report problems and optionally print the settings."""

    args = parse_cli(cli_args)
    logger = get_logger("sysmon")
    if not args.utf_force and not _utf8_locale():
        logger.error(
            "No UTF-8 locale detected! Use --utf-force argument to force start if you're sure "
            "your terminal can handle it."
        )
        return 1

    paths = discover()
    config_file = args.config or paths.config_file
    store = ConfigStore(version=__version__, config_file=config_file)
    warnings: List[str] = []
    load_error: Optional[Exception] = None
    if config_file is None:
        store.mark_dirty()
    else:
        try:
            store.load(warnings)
        except (OSError, UnicodeDecodeError) as exc:
            load_error = exc

    level = "DEBUG" if args.debug else store.get_string("log_level")
    configure_logging(level, paths.log_file, args.log_format)
    if load_error is not None:
        logger.error(
            "Failed to read config file",
            extra={"path": str(config_file), "error": str(load_error)},
        )
        return 1
    for warning in warnings:
        logger.warning(warning)

    apply_cli_overrides(store, args)
    logger.info(
        "Loaded configuration",
        extra={
            "config_file": str(config_file) if config_file else None,
            "write_new": store.write_new,
            "shown_boxes": store.current_boxes,
            "theme_dir": str(paths.theme_dir) if paths.theme_dir else None,
        },
    )
    if args.show:
        print_settings(store.snapshot(), args.show, warnings=warnings)
    return 0


def main() -> None:
    """Console-script entrypoint."""

    sys.exit(run())


if __name__ == "__main__":
    main()
