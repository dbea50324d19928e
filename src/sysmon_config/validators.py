"""Value validation for configuration settings.

Every validator takes the setting name and its raw text and either returns the
parsed value or raises :class:`ConfigValueError`. The error message is the
user-facing warning the loader reports for that line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from .logging import is_log_level
from .schema import TEMP_SCALES, VALID_BOXES, VALID_GRAPH_SYMBOLS, VALID_GRAPH_SYMBOLS_DEF

BOOL_LITERALS = ("true", "false", "True", "False")

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

# Inclusive bounds for integer settings that have them.
INT_BOUNDS: Dict[str, Tuple[int, int]] = {
    "update_ms": (100, 86_400_000),
}

MAX_PRESETS = 9
MAX_PRESET_BOXES = 4


class ConfigValueError(ValueError):
    """Raised when a setting value is rejected."""

    def __init__(self, key: str, message: str, reason: Optional[Enum] = None) -> None:
        super().__init__(message)
        self.key = key
        self.reason = reason


class IntReason(Enum):
    PARSE_ERROR = "parse_error"
    VALUE_TOO_LOW = "value_too_low"
    VALUE_TOO_HIGH = "value_too_high"


class PresetReason(Enum):
    TOO_MANY_PRESETS = "too_many_presets"
    TOO_MANY_BOXES = "too_many_boxes"
    MALFORMATTED = "malformatted"
    INVALID_BOX_NAME = "invalid_box_name"
    INVALID_POSITION_VALUE = "invalid_position_value"
    INVALID_GRAPH_NAME = "invalid_graph_name"


_PRESET_MESSAGES = {
    PresetReason.TOO_MANY_PRESETS: "Too many presets entered!",
    PresetReason.TOO_MANY_BOXES: "Too many boxes entered for preset!",
    PresetReason.MALFORMATTED: "Malformatted preset in config value presets!",
    PresetReason.INVALID_BOX_NAME: "Invalid box name in config value presets!",
    PresetReason.INVALID_POSITION_VALUE: "Invalid position value in config value presets!",
    PresetReason.INVALID_GRAPH_NAME: "Invalid graph name in config value presets!",
}


class PresetError(ConfigValueError):
    """A `presets` value failed to parse."""

    def __init__(self, reason: PresetReason, key: str = "presets") -> None:
        super().__init__(key, _PRESET_MESSAGES[reason], reason)


def ssplit(value: str, delim: Optional[str] = None) -> List[str]:
    """Split `value`, trimming each part and dropping empty ones."""

    return [part.strip() for part in value.split(delim) if part.strip()]


def strip_quotes(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


# -- scalars -----------------------------------------------------------------


def is_bool(value: str) -> bool:
    return value in BOOL_LITERALS


def parse_bool(value: str) -> Optional[bool]:
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def validate_bool(key: str, value: str) -> bool:
    if not is_bool(value):
        raise ConfigValueError(key, f"Got an invalid bool value for config name: {key}")
    return bool(parse_bool(value))


def parse_int32(value: str) -> Optional[int]:
    """Parse a signed 32-bit decimal integer, or return None."""

    if not _INT_PATTERN.fullmatch(value):
        return None
    sign = "-" if value.startswith("-") else ""
    digits = value.lstrip("+-").lstrip("0") or "0"
    if len(digits) > 10:
        return None
    number = int(sign + digits)
    if not INT32_MIN <= number <= INT32_MAX:
        return None
    return number


def is_int(value: str) -> bool:
    return parse_int32(value) is not None


def validate_int(key: str, value: str) -> int:
    number = parse_int32(value)
    if number is None:
        raise ConfigValueError(
            key,
            f"Got an invalid integer value for config name: {key}",
            IntReason.PARSE_ERROR,
        )
    return check_int_bounds(key, number)


def check_int_bounds(key: str, number: int) -> int:
    bounds = INT_BOUNDS.get(key)
    if bounds is None:
        return number
    minimum, maximum = bounds
    if number < minimum:
        raise ConfigValueError(
            key, f"Config value {key} set too low (<{minimum}).", IntReason.VALUE_TOO_LOW
        )
    if number > maximum:
        raise ConfigValueError(
            key, f"Config value {key} set too high (>{maximum}).", IntReason.VALUE_TOO_HIGH
        )
    return number


# -- presets -----------------------------------------------------------------


@dataclass(frozen=True)
class BoxSpec:
    """One box of a layout preset."""

    name: str
    position: int
    graph_symbol: str

    def __str__(self) -> str:
        return f"{self.name}:{self.position}:{self.graph_symbol}"


@dataclass(frozen=True)
class Preset:
    """An alternative arrangement of up to four boxes."""

    boxes: Tuple[BoxSpec, ...]

    @property
    def box_names(self) -> Tuple[str, ...]:
        return tuple(box.name for box in self.boxes)

    def __str__(self) -> str:
        return ",".join(str(box) for box in self.boxes)


def parse_box_spec(text: str) -> BoxSpec:
    fields = ssplit(text, ":")
    if len(fields) != 3:
        raise PresetError(PresetReason.MALFORMATTED)
    name, position, graph_symbol = fields
    if name not in VALID_BOXES:
        raise PresetError(PresetReason.INVALID_BOX_NAME)
    if position not in ("0", "1"):
        raise PresetError(PresetReason.INVALID_POSITION_VALUE)
    if graph_symbol not in VALID_GRAPH_SYMBOLS_DEF:
        raise PresetError(PresetReason.INVALID_GRAPH_NAME)
    return BoxSpec(name=name, position=int(position), graph_symbol=graph_symbol)


def parse_preset(text: str) -> Preset:
    """Parse a single comma-separated preset such as ``cpu:0:default,mem:1:tty``."""

    specs = ssplit(text, ",")
    if len(specs) > MAX_PRESET_BOXES:
        raise PresetError(PresetReason.TOO_MANY_BOXES)
    if not specs:
        raise PresetError(PresetReason.MALFORMATTED)
    return Preset(boxes=tuple(parse_box_spec(spec) for spec in specs))


def parse_presets(value: str) -> List[Preset]:
    """Parse the whitespace-separated `presets` value."""

    texts = ssplit(value)
    if len(texts) > MAX_PRESETS:
        raise PresetError(PresetReason.TOO_MANY_PRESETS)
    return [parse_preset(text) for text in texts]


# -- other composite values --------------------------------------------------


def parse_shown_boxes(value: str) -> List[str]:
    boxes = ssplit(value)
    if not boxes or any(box not in VALID_BOXES for box in boxes):
        raise ConfigValueError("shown_boxes", "Invalid box name(s) in shown_boxes!")
    return boxes


def parse_core_map(value: str) -> Dict[int, int]:
    mapping: Dict[int, int] = {}
    for token in ssplit(value):
        pair = ssplit(token, ":")
        core = parse_int32(pair[0]) if len(pair) == 2 else None
        target = parse_int32(pair[1]) if len(pair) == 2 else None
        if core is None or target is None:
            raise ConfigValueError("cpu_core_map", "Invalid formatting of cpu_core_map!")
        mapping[core] = target
    return mapping


def parse_io_graph_speeds(value: str) -> Dict[str, int]:
    speeds: Dict[str, int] = {}
    for token in ssplit(value):
        pair = ssplit(token, ":")
        speed = parse_int32(pair[1]) if len(pair) == 2 else None
        if speed is None or not pair[0]:
            raise ConfigValueError("io_graph_speeds", "Invalid formatting of io_graph_speeds!")
        speeds[pair[0]] = speed
    return speeds


def _check_log_level(key: str, value: str) -> None:
    if not is_log_level(value):
        raise ConfigValueError(key, f"Invalid {key}: {value}")


def _check_graph_symbol(key: str, value: str) -> None:
    if value not in VALID_GRAPH_SYMBOLS:
        raise ConfigValueError(key, f"Invalid graph symbol identifier for {key}: {value}")


def _check_box_graph_symbol(key: str, value: str) -> None:
    if value != "default" and value not in VALID_GRAPH_SYMBOLS:
        raise ConfigValueError(key, f"Invalid graph symbol identifier for {key}: {value}")


def _check_temp_scale(key: str, value: str) -> None:
    if value not in TEMP_SCALES:
        raise ConfigValueError(key, f"Invalid {key}: {value}")


_STRING_RULES: Dict[str, Callable[[str, str], object]] = {
    "log_level": _check_log_level,
    "graph_symbol": _check_graph_symbol,
    "shown_boxes": lambda _key, value: parse_shown_boxes(value),
    "presets": lambda _key, value: parse_presets(value),
    "cpu_core_map": lambda _key, value: parse_core_map(value),
    "io_graph_speeds": lambda _key, value: parse_io_graph_speeds(value),
    "temp_scale": _check_temp_scale,
}


def validate_string(key: str, value: str) -> str:
    """Check a string setting; values without a dedicated rule pass as-is."""

    rule = _STRING_RULES.get(key)
    if rule is not None:
        rule(key, value)
    elif key.startswith("graph_symbol_"):
        _check_box_graph_symbol(key, value)
    return value
