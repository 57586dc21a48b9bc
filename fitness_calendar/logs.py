import json
import logging
import re
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date
from enum import Enum
from typing import Any

from fitness_calendar.config import STORAGE_KEY
from fitness_calendar.storage import JsonFileStorage, MemoryStorage

logger = logging.getLogger(__name__)

DATE_KEY_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


class ActivityType(str, Enum):
    FIXED_CLASS = "pilates"
    CREDIT_CLASS = "classpass"

    @property
    def display_name(self) -> str:
        return "Pilates" if self is ActivityType.FIXED_CLASS else "ClassPass"


@dataclass(frozen=True)
class LogEntry:
    activity_type: ActivityType
    cost: int

    def __post_init__(self) -> None:
        if self.activity_type is ActivityType.FIXED_CLASS and self.cost != 1:
            raise ValueError("Fixed class entries always cost 1.")
        if self.activity_type is ActivityType.CREDIT_CLASS and self.cost < 0:
            raise ValueError("Credit cost cannot be negative.")

    @classmethod
    def fixed(cls) -> "LogEntry":
        return cls(ActivityType.FIXED_CLASS, 1)

    @classmethod
    def credit(cls, cost: int) -> "LogEntry":
        return cls(ActivityType.CREDIT_CLASS, cost)

    @property
    def label(self) -> str:
        if self.activity_type is ActivityType.FIXED_CLASS:
            return "Pilates"
        return f"{self.cost} Credits"

    def as_dict(self) -> dict[str, Any]:
        return {"type": self.activity_type.value, "cost": self.cost}

    @classmethod
    def from_dict(cls, raw: Any) -> "LogEntry":
        """Read one persisted entry, normalizing the cost the way the UI would.

        Raises ``ValueError`` when the entry is not an object or names an
        unknown activity type.
        """
        if not isinstance(raw, dict):
            raise ValueError("Log entry must be an object.")
        activity_type = ActivityType(raw.get("type", raw.get("activityType")))
        if activity_type is ActivityType.FIXED_CLASS:
            return cls.fixed()
        cost = raw.get("cost")
        if isinstance(cost, bool) or not isinstance(cost, int):
            cost = 0
        return cls.credit(max(0, cost))


def date_key(year: int, month: int, day: int) -> str:
    return date(year, month, day).isoformat()


def parse_date_key(text: str) -> date:
    """Parse a strict, zero-padded ``YYYY-MM-DD`` key."""
    value = str(text)
    if not DATE_KEY_RE.fullmatch(value):
        raise ValueError(f"Invalid date key {text!r}, use YYYY-MM-DD.")
    parsed = date.fromisoformat(value)
    if parsed.isoformat() != value:
        raise ValueError(f"Invalid date key {text!r}, use YYYY-MM-DD.")
    return parsed


def month_prefix(year: int, month: int) -> str:
    if not MINYEAR <= year <= MAXYEAR:
        raise ValueError(f"Year must be {MINYEAR}..{MAXYEAR}, got {year}.")
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be 1..12, got {month}.")
    return f"{year:04d}-{month:02d}"


def decode_logs(blob: str | None) -> dict[str, LogEntry]:
    if blob is None:
        return {}
    try:
        raw = json.loads(blob)
    except (json.JSONDecodeError, RecursionError) as err:
        logger.warning("Stored logs are not valid JSON, starting empty: %s", err)
        return {}
    if not isinstance(raw, dict):
        logger.warning("Stored logs are not an object, starting empty.")
        return {}

    logs: dict[str, LogEntry] = {}
    for key, value in raw.items():
        try:
            parse_date_key(key)
            logs[key] = LogEntry.from_dict(value)
        except ValueError as err:
            logger.warning("Skipping stored log %r: %s", key, err)
    return logs


def encode_logs(logs: dict[str, LogEntry]) -> str:
    return json.dumps({key: entry.as_dict() for key, entry in sorted(logs.items())})


class LogStore:
    """Date-keyed activity logs mirrored into a single storage slot.

    The in-memory mapping is authoritative between writes; ``save`` rewrites
    the whole blob. Mutators do not persist on their own.
    """

    def __init__(self, storage: JsonFileStorage | MemoryStorage, storage_key: str = STORAGE_KEY) -> None:
        self.storage = storage
        self.storage_key = storage_key
        self._logs: dict[str, LogEntry] = {}

    @property
    def logs(self) -> dict[str, LogEntry]:
        return dict(self._logs)

    def load(self) -> dict[str, LogEntry]:
        self._logs = decode_logs(self.storage.get_item(self.storage_key))
        logger.info("Loaded %d log entries from %r", len(self._logs), self.storage_key)
        return self.logs

    def save(self, logs: dict[str, LogEntry] | None = None) -> None:
        if logs is not None:
            self._logs = dict(logs)
        self.storage.set_item(self.storage_key, encode_logs(self._logs))
        logger.debug("Persisted %d log entries", len(self._logs))

    def get(self, key: str) -> LogEntry | None:
        return self._logs.get(key)

    def upsert(self, key: str, entry: LogEntry) -> None:
        parse_date_key(key)
        self._logs[key] = entry
        logger.info("Logged %s on %s", entry.label, key)

    def remove(self, key: str) -> bool:
        if self._logs.pop(key, None) is None:
            return False
        logger.info("Removed log on %s", key)
        return True

    def entries_in_month(self, year: int, month: int) -> list[tuple[str, LogEntry]]:
        return entries_in_month(self._logs, year, month)


def entries_in_month(logs: dict[str, LogEntry], year: int, month: int) -> list[tuple[str, LogEntry]]:
    prefix = month_prefix(year, month) + "-"
    return sorted((key, entry) for key, entry in logs.items() if key.startswith(prefix))
