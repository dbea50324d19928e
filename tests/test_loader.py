from pathlib import Path

import pytest

from sysmon_config.loader import LoadState, header_line, load_file, parse_assignment
from sysmon_config.store import ConfigStore


def _load(path: Path):
    store = ConfigStore(version="1.0.0", config_file=path)
    warnings = []
    report = store.load(warnings)
    return store, warnings, report


def test_valid_file_loads_without_marking_dirty(write_config) -> None:
    path = write_config(
        "#* Comment describing the next line",
        "update_ms = 1500",
        "proc_tree = True",
        'color_theme = "TTY"',
        "",
        "net_download = -20",
    )

    store, warnings, report = _load(path)

    assert warnings == []
    assert store.write_new is False
    assert store.get_int("update_ms") == 1500
    assert store.get_bool("proc_tree") is True
    assert store.get_string("color_theme") == "TTY"
    assert store.get_int("net_download") == -20
    assert report.state is LoadState.DONE
    assert report.version_matched is True
    assert report.accepted == 4
    assert report.rejected == 0


def test_unknown_keys_are_ignored(write_config) -> None:
    store, warnings, report = _load(write_config("foo = bar", "update_ms = 500"))

    assert warnings == []
    assert store.kind_of("foo") is None
    assert store.get_int("update_ms") == 500
    assert report.accepted == 1


def test_invalid_bool_keeps_previous_value(write_config) -> None:
    store, warnings, report = _load(write_config("proc_tree = yes", "show_swap = False"))

    assert warnings == ["Got an invalid bool value for config name: proc_tree"]
    assert store.get_bool("proc_tree") is False
    assert store.get_bool("show_swap") is False
    assert store.write_new is True
    assert report.rejected == 1


def test_update_ms_out_of_range(write_config) -> None:
    store, warnings, _ = _load(write_config("update_ms = 99"))

    assert warnings == ["Config value update_ms set too low (<100)."]
    assert store.get_int("update_ms") == 2000


def test_every_rejected_line_is_reported(write_config) -> None:
    store, warnings, report = _load(
        write_config(
            "update_ms = 86400001",
            "net_upload = many",
            "graph_symbol = default",
            "log_level = LOUD",
            "cpu_core_map = 4:a",
            "update_ms = 300",
        )
    )

    assert len(warnings) == 5
    assert report.rejected == 5
    assert store.get_int("update_ms") == 300
    assert store.get_string("graph_symbol") == "braille"
    assert store.get_string("cpu_core_map") == ""


def test_version_mismatch_marks_dirty_but_loads(write_config) -> None:
    path = write_config("update_ms = 400", header="#? Config file for sysmon v. 0.0.1")

    store, warnings, report = _load(path)

    assert warnings == []
    assert report.version_matched is False
    assert store.write_new is True
    assert store.get_int("update_ms") == 400


def test_empty_file_keeps_defaults(tmp_path: Path) -> None:
    path = tmp_path / "sysmon.conf"
    path.write_text("", encoding="utf-8")

    store, warnings, report = _load(path)

    assert warnings == []
    assert report.file_found is True
    assert report.state is LoadState.DONE
    assert store.snapshot() == ConfigStore().snapshot()
    assert store.write_new is True


def test_missing_file_marks_dirty(tmp_path: Path) -> None:
    store, warnings, report = _load(tmp_path / "absent.conf")

    assert warnings == []
    assert report.file_found is False
    assert store.write_new is True


def test_value_is_split_on_first_equals_only(write_config) -> None:
    store, _, _ = _load(write_config("clock_format = a=b"))

    assert store.get_string("clock_format") == "a=b"


def test_lines_without_equals_are_skipped(write_config) -> None:
    store, warnings, report = _load(write_config("update_ms 500", "update_ms"))

    assert warnings == []
    assert report.accepted == 0
    assert store.get_int("update_ms") == 2000


def test_shown_boxes_and_presets_update_layout(write_config) -> None:
    store, warnings, _ = _load(
        write_config('shown_boxes = "proc cpu"', 'presets = "cpu:0:default,mem:0:tty"')
    )

    assert warnings == []
    assert store.current_boxes == ["proc", "cpu"]
    presets = store.presets
    assert len(presets) == 2
    assert str(presets[1]) == "cpu:0:default,mem:0:tty"


def test_invalid_layout_values_rejected(write_config) -> None:
    store, warnings, _ = _load(
        write_config('shown_boxes = "cpu gpu"', 'presets = "cpu:0:default,mem:0:xyz"')
    )

    assert warnings == [
        "Invalid box name(s) in shown_boxes!",
        "Invalid graph name in config value presets!",
    ]
    assert store.current_boxes == ["cpu", "mem", "net", "proc"]
    assert len(store.presets) == 4


def test_directory_path_raises(tmp_path: Path) -> None:
    store = ConfigStore(config_file=tmp_path)

    with pytest.raises(OSError):
        store.load([])


def test_undecodable_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "sysmon.conf"
    path.write_bytes(header_line("1.0.0").encode() + b"\ncolor_theme = \xff\xfe\n")

    with pytest.raises(UnicodeDecodeError):
        load_file(ConfigStore(), path, [])


@pytest.mark.parametrize(
    "line,expected",
    [
        ("update_ms = 100", ("update_ms", "100")),
        ("  key=value  ", ("key", "value")),
        ("key =", ("key", "")),
        ("a = b = c", ("a", "b = c")),
        ("# commented = out", None),
        ("   ", None),
        ("no separator", None),
    ],
)
def test_parse_assignment(line: str, expected) -> None:
    assert parse_assignment(line) == expected


def test_header_line_names_the_version() -> None:
    assert header_line("2.3.4") == "#? Config file for sysmon v. 2.3.4"


@pytest.mark.parametrize("value", ["100", "86400000"])
def test_update_ms_bounds_accepted_on_load(write_config, value: str) -> None:
    store, warnings, _ = _load(write_config(f"update_ms = {value}"))

    assert warnings == []
    assert store.get_int("update_ms") == int(value)


def test_composite_values_on_load(write_config) -> None:
    store, warnings, _ = _load(
        write_config(
            'shown_boxes = "mem cpu"',
            'shown_boxes = "cpu mem net proc"',
            'cpu_core_map = "4:0 5:1 6:3"',
            'cpu_core_map = "7:1 4:a"',
            'presets = "cpu:2:default"',
        )
    )

    assert warnings == [
        "Invalid formatting of cpu_core_map!",
        "Invalid position value in config value presets!",
    ]
    assert store.current_boxes == ["cpu", "mem", "net", "proc"]
    assert store.get_string("cpu_core_map") == "4:0 5:1 6:3"
    assert len(store.presets) == 4
