import logging
import threading

import pytest

from sysmon_config.store import ConfigStore, SettingsAccess, TypedTable
from sysmon_config.validators import ConfigValueError


def test_defaults_are_readable() -> None:
    store = ConfigStore()

    assert store.get_int("update_ms") == 2000
    assert store.get_bool("theme_background") is True
    assert store.get_string("graph_symbol") == "braille"
    assert store.current_boxes == ["cpu", "mem", "net", "proc"]
    assert store.write_new is False


def test_missing_key_returns_fallback_and_logs(caplog: pytest.LogCaptureFixture) -> None:
    store = ConfigStore()

    with caplog.at_level(logging.ERROR):
        assert store.get_bool("no_such_flag") is False
        assert store.get_int("no_such_number") == 0
        assert store.get_string("no_such_text") == ""

    messages = [record.getMessage() for record in caplog.records]
    assert any("no_such_flag" in message for message in messages)
    assert any("no_such_number" in message for message in messages)
    assert any("no_such_text" in message for message in messages)


def test_lookup_is_per_type(caplog: pytest.LogCaptureFixture) -> None:
    store = ConfigStore()

    with caplog.at_level(logging.ERROR):
        assert store.get_bool("update_ms") is False
    assert "update_ms" in caplog.text


def test_setting_marks_store_dirty() -> None:
    store = ConfigStore()

    store.set_int("update_ms", 1000)

    assert store.get_int("update_ms") == 1000
    assert store.write_new is True


def test_setting_missing_key_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    store = ConfigStore()

    with caplog.at_level(logging.ERROR):
        store.set_string("bogus", "x")

    assert store.write_new is False
    assert "bogus" in caplog.text


def test_lock_defers_writes_until_unlock() -> None:
    store = ConfigStore()

    store.lock()
    assert store.locked
    store.set_int("update_ms", 500)
    store.set_bool("proc_tree", True)

    assert store.get_int("update_ms") == 2000
    assert store.get_bool("proc_tree") is False
    assert store.pending_values() == {"update_ms": 500, "proc_tree": True}

    store.unlock()

    assert not store.locked
    assert store.get_int("update_ms") == 500
    assert store.get_bool("proc_tree") is True
    assert store.pending_values() == {}


def test_unlock_without_lock_is_a_no_op() -> None:
    store = ConfigStore()

    store.unlock()
    store.set_int("update_ms", 300)

    assert store.get_int("update_ms") == 300


def test_flip_bool_sees_pending_value() -> None:
    store = ConfigStore()

    store.lock()
    store.flip_bool("proc_tree")
    store.flip_bool("proc_tree")
    store.flip_bool("proc_tree")
    store.unlock()

    assert store.get_bool("proc_tree") is True


def test_toggle_box_hides_and_restores() -> None:
    store = ConfigStore()

    store.toggle_box("net")
    assert store.current_boxes == ["cpu", "mem", "proc"]
    assert store.get_string("shown_boxes") == "cpu mem proc"

    store.toggle_box("net")
    assert store.current_boxes == ["cpu", "mem", "proc", "net"]


def test_toggle_unknown_box_rejected() -> None:
    store = ConfigStore()

    with pytest.raises(ConfigValueError):
        store.toggle_box("gpu")
    assert store.current_boxes == ["cpu", "mem", "net", "proc"]


def test_apply_preset_updates_layout() -> None:
    store = ConfigStore()

    assert store.apply_preset("cpu:1:braille,proc:0:tty")

    assert store.current_boxes == ["cpu", "proc"]
    assert store.get_string("shown_boxes") == "cpu proc"
    assert store.get_bool("cpu_bottom") is True
    assert store.get_bool("proc_left") is False
    assert store.get_string("graph_symbol_cpu") == "braille"
    assert store.get_string("graph_symbol_proc") == "tty"


def test_apply_invalid_preset_changes_nothing(caplog: pytest.LogCaptureFixture) -> None:
    store = ConfigStore()

    with caplog.at_level(logging.WARNING):
        assert not store.apply_preset("cpu:3:braille")

    assert store.current_boxes == ["cpu", "mem", "net", "proc"]
    assert store.write_new is False
    assert "Invalid position value" in caplog.text


def test_default_preset_list() -> None:
    store = ConfigStore()

    presets = store.presets
    assert len(presets) == 4
    assert str(presets[0]) == "cpu:0:default,mem:0:default,net:0:default,proc:0:default"
    assert presets[1].box_names == ("cpu", "proc")


def test_select_preset() -> None:
    store = ConfigStore()

    assert store.select_preset(1)
    assert store.current_preset == 1
    assert store.current_boxes == ["cpu", "proc"]
    assert store.get_bool("cpu_bottom") is True

    assert store.select_preset(0)
    assert store.current_boxes == ["cpu", "mem", "net", "proc"]
    assert store.get_bool("cpu_bottom") is False

    assert not store.select_preset(42)
    assert store.current_preset == 0


def test_setters_wait_for_file_writer() -> None:
    store = ConfigStore()
    done = threading.Event()

    def writer() -> None:
        store.set_int("update_ms", 750)
        done.set()

    with store.writing():
        thread = threading.Thread(target=writer)
        thread.start()
        assert not done.wait(timeout=0.2)
        assert store.get_int("update_ms") == 2000

    thread.join(timeout=5)
    assert done.is_set()
    assert store.get_int("update_ms") == 750


def test_concurrent_access() -> None:
    store = ConfigStore()
    errors = []

    def worker(offset: int) -> None:
        try:
            for i in range(200):
                store.set_int("net_download", offset + i)
                store.get_int("net_download")
                store.flip_bool("proc_tree")
        except Exception as exc:  # pragma: no cover - reported below
            errors.append(exc)

    def gate() -> None:
        for _ in range(50):
            store.lock()
            store.unlock()

    threads = [threading.Thread(target=worker, args=(n * 1000,)) for n in range(4)]
    threads.append(threading.Thread(target=gate))
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert not errors
    store.unlock()
    assert store.get_bool("proc_tree") is False


def test_snapshot_follows_schema_order() -> None:
    store = ConfigStore()

    snapshot = store.snapshot()

    assert list(snapshot) == list(store.schema.keys())
    assert snapshot["update_ms"] == 2000


def test_load_requires_a_path() -> None:
    with pytest.raises(ValueError):
        ConfigStore().load([])


def test_typed_table_reconcile() -> None:
    table = TypedTable("int", {"a": 1, "b": 2})

    table.begin_pending()
    table.write("a", 10)
    assert table.is_pending
    assert table.get("a") == 1
    assert table.current("a") == 10

    assert table.reconcile() == {"a": 10}
    assert not table.is_pending
    assert table.get("a") == 10

    with pytest.raises(KeyError):
        table.write("c", 3)


def test_store_provides_settings_access() -> None:
    assert isinstance(ConfigStore(), SettingsAccess)


def test_preset_while_locked_leaves_layout_until_unlock() -> None:
    store = ConfigStore()

    store.lock()
    assert store.apply_preset("cpu:1:braille,proc:0:tty")

    assert store.current_boxes == ["cpu", "mem", "net", "proc"]
    assert store.get_string("shown_boxes") == "cpu mem net proc"
    assert store.get_bool("cpu_bottom") is False

    store.unlock()

    assert store.current_boxes == ["cpu", "proc"]
    assert store.get_string("shown_boxes") == "cpu proc"
    assert store.get_bool("cpu_bottom") is True
    assert store.get_string("graph_symbol_cpu") == "braille"


def test_toggle_while_locked_builds_on_pending_boxes() -> None:
    store = ConfigStore()

    store.lock()
    store.toggle_box("net")
    store.toggle_box("mem")

    assert store.current_boxes == ["cpu", "mem", "net", "proc"]

    store.unlock()

    assert store.current_boxes == ["cpu", "proc"]
    assert store.get_string("shown_boxes") == "cpu proc"
