from __future__ import annotations

from fitness_calendar.storage import JsonFileStorage, MemoryStorage


def test_missing_key_reads_none(file_storage):
    assert file_storage.get_item("fitnessTrackerLogs") is None


def test_set_then_get_returns_value(file_storage):
    file_storage.set_item("fitnessTrackerLogs", '{"a": 1}')

    assert file_storage.get_item("fitnessTrackerLogs") == '{"a": 1}'
    assert file_storage.path_for("fitnessTrackerLogs").name == "fitnessTrackerLogs.json"


def test_set_creates_data_dir_and_leaves_no_temp_files(tmp_path):
    storage = JsonFileStorage(tmp_path / "nested" / "data")

    storage.set_item("logs", "{}")
    storage.set_item("logs", '{"x": 1}')

    files = sorted(p.name for p in (tmp_path / "nested" / "data").iterdir())
    assert files == ["logs.json"]
    assert storage.get_item("logs") == '{"x": 1}'


def test_memory_storage_is_isolated_per_instance():
    first = MemoryStorage()
    second = MemoryStorage({"k": "v"})

    first.set_item("k", "other")

    assert first.get_item("k") == "other"
    assert second.get_item("k") == "v"
    assert MemoryStorage().get_item("k") is None
