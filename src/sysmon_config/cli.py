"""Command-line parsing and settings output."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, TextIO

import yaml
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from . import PROGRAM_NAME, __version__

OUTPUT_FORMATS = ("json", "yaml", "table")


class CliError(Exception):
    """Raised when the CLI encounters an expected error condition."""


@dataclass(frozen=True)
class RuntimeArgs:
    """Options given on the command line."""

    low_color: bool = False
    tty: Optional[bool] = None
    preset: Optional[int] = None
    utf_force: bool = False
    debug: bool = False
    config: Optional[Path] = None
    log_format: str = "plain"
    show: Optional[str] = None


def _preset_id(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"preset must be an integer; got {value!r}") from None
    if not 0 <= number <= 9:
        raise argparse.ArgumentTypeError(f"preset must be between 0 and 9; got {number}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=f"{PROGRAM_NAME}-config",
        prefix_chars="-+",
        description=(
            f"Load and validate the {PROGRAM_NAME} config file, log any rejected values "
            "and optionally print the effective settings."
        ),
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"{PROGRAM_NAME} version: {__version__}",
        help="Show version info and exit.",
    )
    parser.add_argument(
        "-lc",
        "--low-color",
        dest="low_color",
        action="store_true",
        help="Disable truecolor, converts 24-bit colors to 256-color.",
    )
    parser.add_argument(
        "-t",
        "--tty_on",
        dest="tty",
        action="store_const",
        const=True,
        help="Force (ON) tty mode, max 16 colors and tty friendly graph symbols.",
    )
    parser.add_argument(
        "+t",
        "--tty_off",
        dest="tty",
        action="store_const",
        const=False,
        help="Force (OFF) tty mode.",
    )
    parser.add_argument(
        "-p",
        "--preset",
        type=_preset_id,
        help="Start with preset, integer value between 0-9.",
    )
    parser.add_argument(
        "--utf-force",
        dest="utf_force",
        action="store_true",
        help="Force start even if no UTF-8 locale was detected.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Start in DEBUG mode: sets the log level to DEBUG.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help=f"Config file to read instead of the discovered {PROGRAM_NAME}.conf.",
    )
    parser.add_argument(
        "--log-format",
        dest="log_format",
        choices=["plain", "json"],
        default="plain",
        help="Structured logging format.",
    )
    parser.add_argument(
        "--show",
        choices=OUTPUT_FORMATS,
        help="Print the effective settings as json, yaml or a table.",
    )
    return parser


def parse_cli(cli_args: Optional[Iterable[str]] = None) -> RuntimeArgs:
    args = _build_parser().parse_args(args=None if cli_args is None else list(cli_args))
    return RuntimeArgs(
        low_color=args.low_color,
        tty=args.tty,
        preset=args.preset,
        utf_force=args.utf_force,
        debug=args.debug,
        config=args.config.expanduser() if args.config is not None else None,
        log_format=args.log_format,
        show=args.show,
    )


def print_settings(
    values: Mapping[str, Any],
    output: str,
    stream: Optional[TextIO] = None,
    warnings: Iterable[str] = (),
) -> None:
    """Write `values` to `stream` in the requested format."""

    stream = stream if stream is not None else sys.stdout
    if output == "yaml":
        yaml.safe_dump(dict(values), stream, sort_keys=False)
    elif output == "json":
        json.dump(dict(values), stream, indent=2)
        stream.write("\n")
    elif output == "table":
        _print_table(values, stream, list(warnings))
    else:
        raise CliError(f"Output format must be one of {list(OUTPUT_FORMATS)}; got {output}")


def _print_table(values: Mapping[str, Any], stream: TextIO, warnings: list) -> None:
    console = Console(file=stream, soft_wrap=False)
    table = Table(title="Effective settings", show_header=True, header_style="bold cyan", box=box.ROUNDED)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")
    table.add_column("Type", style="dim")
    for key, value in values.items():
        table.add_row(key, Text(_format_value(value)), type(value).__name__)
    console.print(table)
    for warning in warnings:
        console.print(Text.assemble(("warning: ", "yellow"), warning))


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)
