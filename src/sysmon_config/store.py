"""Thread-safe typed settings store."""

from __future__ import annotations

import contextlib
import threading
from pathlib import Path
from typing import (
    Dict,
    Generic,
    Iterator,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    TypeVar,
    Union,
    runtime_checkable,
)

from . import __version__
from .loader import LoadReport, load_file
from .logging import get_logger
from .schema import DEFAULT_PRESET, DEFAULT_SCHEMA, SchemaTable, SettingValue
from .validators import (
    Preset,
    PresetError,
    parse_preset,
    parse_presets,
    parse_shown_boxes,
    ssplit,
    validate_string,
)

T = TypeVar("T", str, bool, int)

logger = get_logger("sysmon.config")


class TypedTable(Generic[T]):
    """Values of a single type, either live only or live plus pending writes.

    While pending, writes are buffered and reads still see the live values.
    :meth:`reconcile` applies the buffered writes and returns to the live-only
    state in one step.
    """

    def __init__(self, name: str, defaults: Mapping[str, T]) -> None:
        self.name = name
        self._live: Dict[str, T] = dict(defaults)
        self._pending: Optional[Dict[str, T]] = None

    def __contains__(self, key: object) -> bool:
        return key in self._live

    @property
    def is_pending(self) -> bool:
        return self._pending is not None

    def get(self, key: str) -> T:
        return self._live[key]

    def current(self, key: str) -> T:
        """Latest written value, including one still pending."""

        if self._pending is not None and key in self._pending:
            return self._pending[key]
        return self._live[key]

    def pending(self) -> Dict[str, T]:
        return dict(self._pending or {})

    def write(self, key: str, value: T) -> None:
        if key not in self._live:
            raise KeyError(key)
        if self._pending is not None:
            self._pending[key] = value
        else:
            self._live[key] = value

    def write_live(self, key: str, value: T) -> None:
        if key not in self._live:
            raise KeyError(key)
        self._live[key] = value

    def begin_pending(self) -> None:
        if self._pending is None:
            self._pending = {}

    def reconcile(self) -> Dict[str, T]:
        applied = self._pending or {}
        self._live.update(applied)
        self._pending = None
        return applied


@runtime_checkable
class SettingsAccess(Protocol):
    """Typed accessors shared by every store implementation."""

    def get_string(self, key: str) -> str: ...

    def get_bool(self, key: str) -> bool: ...

    def get_int(self, key: str) -> int: ...

    def set_string(self, key: str, value: str) -> None: ...

    def set_bool(self, key: str, value: bool) -> None: ...

    def set_int(self, key: str, value: int) -> None: ...


class ConfigStore:
    """Process-wide settings shared by the sampler and the UI.

    A single re-entrant mutex serialises every read and write. Independently of
    it, the lock gate (:meth:`lock` / :meth:`unlock`) redirects writes into
    pending tables, and :meth:`writing` blocks writers while the config file is
    being rewritten.
    """

    def __init__(
        self,
        version: str = __version__,
        config_file: Optional[Path] = None,
        schema: SchemaTable = DEFAULT_SCHEMA,
    ) -> None:
        self.version = version
        self.config_file = config_file
        self.schema = schema

        self._mutex = threading.RLock()
        self._gate = threading.Event()
        self._write_done = threading.Event()
        self._write_done.set()

        self._strings: TypedTable[str] = TypedTable("string", schema.defaults_for(str))
        self._bools: TypedTable[bool] = TypedTable("bool", schema.defaults_for(bool))
        self._ints: TypedTable[int] = TypedTable("int", schema.defaults_for(int))

        self._write_new = False
        self._current_boxes: List[str] = parse_shown_boxes(self._strings.get("shown_boxes"))
        self._presets: List[Preset] = [parse_preset(DEFAULT_PRESET)]
        self._presets.extend(parse_presets(self._strings.get("presets")))
        self._current_preset = 0

    # -- state -------------------------------------------------------------

    @property
    def write_new(self) -> bool:
        with self._mutex:
            return self._write_new

    def mark_dirty(self) -> None:
        with self._mutex:
            self._write_new = True

    @property
    def locked(self) -> bool:
        return self._gate.is_set()

    @property
    def current_boxes(self) -> List[str]:
        with self._mutex:
            return list(self._current_boxes)

    @property
    def presets(self) -> List[Preset]:
        with self._mutex:
            return list(self._presets)

    @property
    def current_preset(self) -> int:
        with self._mutex:
            return self._current_preset

    def kind_of(self, key: str) -> Optional[type]:
        """Return the declared type of `key`, or None if no table holds it."""

        with self._mutex:
            if key in self._bools:
                return bool
            if key in self._ints:
                return int
            if key in self._strings:
                return str
        return None

    # -- getters -----------------------------------------------------------

    def get_string(self, key: str) -> str:
        return self._get(self._strings, key, "")

    def get_bool(self, key: str) -> bool:
        return self._get(self._bools, key, False)

    def get_int(self, key: str) -> int:
        return self._get(self._ints, key, 0)

    def _get(self, table: TypedTable[T], key: str, fallback: T) -> T:
        with self._mutex:
            try:
                return table.get(key)
            except KeyError:
                logger.error("Requested missing %s config value: %s", table.name, key)
                return fallback

    # -- setters -----------------------------------------------------------

    def set_string(self, key: str, value: str) -> None:
        with self._writable():
            self._put(self._strings, key, str(value))

    def set_bool(self, key: str, value: bool) -> None:
        with self._writable():
            self._put(self._bools, key, bool(value))

    def set_int(self, key: str, value: int) -> None:
        with self._writable():
            self._put(self._ints, key, int(value))

    def flip_bool(self, key: str) -> None:
        with self._writable():
            try:
                current = self._bools.current(key)
            except KeyError:
                logger.error("Cannot flip missing bool config value: %s", key)
                return
            self._put(self._bools, key, not current)

    @contextlib.contextmanager
    def _writable(self) -> Iterator[None]:
        # Hold the mutex only once no file rewrite is in progress.
        while True:
            self._write_done.wait()
            self._mutex.acquire()
            if self._write_done.is_set():
                break
            self._mutex.release()
        try:
            yield
        finally:
            self._mutex.release()

    def _put(self, table: TypedTable[T], key: str, value: T) -> None:
        if key not in table:
            logger.error("Attempted to set missing %s config value: %s", table.name, key)
            return
        if self.schema.is_known(key):
            self._write_new = True
        table.write(key, value)

    # -- lock gate ---------------------------------------------------------

    def lock(self) -> None:
        """Redirect subsequent writes into the pending tables."""

        with self._mutex:
            if self._gate.is_set():
                return
            for table in self._tables():
                table.begin_pending()
            self._gate.set()

    def unlock(self) -> None:
        """Apply pending writes to the live tables, then clear the gate."""

        with self._mutex:
            if not self._gate.is_set():
                return
            applied = 0
            for table in self._tables():
                changes = table.reconcile()
                applied += len(changes)
                if "shown_boxes" in changes:
                    self._current_boxes = ssplit(str(changes["shown_boxes"]))
            self._gate.clear()
        logger.debug("Config unlocked", extra={"applied": applied})

    @contextlib.contextmanager
    def writing(self) -> Iterator["ConfigStore"]:
        """Hold off setters while an external writer rewrites the config file."""

        with self._mutex:
            self._write_done.clear()
        try:
            yield self
        finally:
            self._write_done.set()

    # -- loading -----------------------------------------------------------

    def load(self, warnings: List[str]) -> LoadReport:
        """Read :attr:`config_file` into the store; see :func:`loader.load_file`."""

        if self.config_file is None:
            raise ValueError("config file path has not been set")
        with self._mutex:
            return load_file(self, self.config_file, warnings)

    def accept_loaded(self, key: str, value: Union[str, bool, int]) -> None:
        """Store a value read from the config file directly into the live table.

        String values are validated here; ``shown_boxes`` and ``presets`` also
        replace the active box selection and the preset list.
        """

        with self._mutex:
            if isinstance(value, bool):
                self._bools.write_live(key, value)
            elif isinstance(value, int):
                self._ints.write_live(key, value)
            elif key == "shown_boxes":
                self._current_boxes = parse_shown_boxes(value)
                self._strings.write_live(key, value)
            elif key == "presets":
                self._presets = [self._presets[0], *parse_presets(value)]
                self._strings.write_live(key, value)
            else:
                self._strings.write_live(key, validate_string(key, value))

    # -- boxes and presets -------------------------------------------------

    def toggle_box(self, box: str) -> None:
        """Show `box` if hidden, hide it if shown."""

        with self._writable():
            boxes = ssplit(self._strings.current("shown_boxes"))
            if box in boxes:
                boxes.remove(box)
            else:
                boxes.append(box)
            if boxes:
                parse_shown_boxes(" ".join(boxes))
            self._show_boxes(boxes)

    def apply_preset(self, preset: Union[str, Preset]) -> bool:
        """Switch the layout to `preset`; returns False if it does not parse."""

        if isinstance(preset, str):
            try:
                preset = parse_preset(preset)
            except PresetError as exc:
                logger.warning("Refusing invalid preset: %s", exc, extra={"preset": preset})
                return False
        with self._writable():
            for box in preset.boxes:
                alternate = box.position == 1
                if box.name == "cpu":
                    self._put(self._bools, "cpu_bottom", alternate)
                elif box.name == "mem":
                    self._put(self._bools, "mem_below_net", alternate)
                elif box.name == "proc":
                    self._put(self._bools, "proc_left", alternate)
                self._put(self._strings, f"graph_symbol_{box.name}", box.graph_symbol)
            self._show_boxes(preset.box_names)
        return True

    def _show_boxes(self, boxes: Sequence[str]) -> None:
        # While locked the active selection follows shown_boxes on unlock.
        self._put(self._strings, "shown_boxes", " ".join(boxes))
        if not self._gate.is_set():
            self._current_boxes = list(boxes)

    def select_preset(self, index: int) -> bool:
        """Apply the preset at `index` of :attr:`presets`."""

        with self._mutex:
            if not 0 <= index < len(self._presets):
                logger.warning(
                    "Preset %s does not exist", index, extra={"available": len(self._presets)}
                )
                return False
            preset = self._presets[index]
            self._current_preset = index
        return self.apply_preset(preset)

    # -- export ------------------------------------------------------------

    def snapshot(self) -> Dict[str, SettingValue]:
        """Live values of every documented setting, in schema order."""

        with self._mutex:
            values: Dict[str, SettingValue] = {}
            for entry in self.schema:
                table = self._table_for(entry.kind)
                values[entry.key] = table.get(entry.key)
            return values

    def _table_for(self, kind: type) -> TypedTable:
        if kind is bool:
            return self._bools
        if kind is int:
            return self._ints
        return self._strings

    def _tables(self) -> tuple:
        return (self._strings, self._bools, self._ints)

    def pending_values(self) -> Dict[str, SettingValue]:
        with self._mutex:
            merged: Dict[str, SettingValue] = {}
            for table in self._tables():
                merged.update(table.pending())
            return merged


__all__ = ["ConfigStore", "SettingsAccess", "TypedTable"]
