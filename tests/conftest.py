from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from fitness_calendar import main
from fitness_calendar.logs import LogEntry, LogStore
from fitness_calendar.session import CalendarSession
from fitness_calendar.storage import JsonFileStorage, MemoryStorage


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(memory_storage: MemoryStorage) -> LogStore:
    log_store = LogStore(memory_storage)
    log_store.load()
    return log_store


@pytest.fixture
def file_storage(tmp_path: Path) -> JsonFileStorage:
    return JsonFileStorage(tmp_path / "data")


@pytest.fixture
def february_logs() -> dict[str, LogEntry]:
    """The two February 2024 entries used throughout the scenarios."""
    return {
        "2024-02-10": LogEntry.fixed(),
        "2024-02-11": LogEntry.credit(12),
    }


@pytest.fixture
def session(store: LogStore) -> CalendarSession:
    return CalendarSession.start(store, today=date(2024, 2, 14))


@pytest.fixture
def client(session: CalendarSession, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setattr(main, "_session", session)
    return TestClient(main.app)
