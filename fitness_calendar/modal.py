import logging
import re
from dataclasses import dataclass, replace
from typing import Any

from fitness_calendar.logs import ActivityType, LogEntry, LogStore, parse_date_key

logger = logging.getLogger(__name__)

LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


class ModalNotOpenError(RuntimeError):
    pass


@dataclass(frozen=True)
class ModalClosed:
    is_open = False

    def as_dict(self) -> dict[str, Any]:
        return {"open": False}


@dataclass(frozen=True)
class ModalOpen:
    date_key: str
    activity_type: ActivityType = ActivityType.FIXED_CLASS
    cost_draft: str = ""
    can_delete: bool = False

    is_open = True

    @property
    def title(self) -> str:
        return f"Log for {self.date_key}"

    @property
    def shows_cost_input(self) -> bool:
        return self.activity_type is ActivityType.CREDIT_CLASS

    def as_dict(self) -> dict[str, Any]:
        return {
            "open": True,
            "title": self.title,
            "date_key": self.date_key,
            "activity_type": self.activity_type.value,
            "cost_draft": self.cost_draft,
            "can_delete": self.can_delete,
            "shows_cost_input": self.shows_cost_input,
        }


ModalState = ModalClosed | ModalOpen

CLOSED = ModalClosed()


def parse_cost(text: Any) -> int:
    """Leading-integer parse of the credit input; anything unreadable costs 0."""
    match = LEADING_INT_RE.match(str(text or ""))
    if not match:
        return 0
    return max(0, int(match.group(1)))


def _require_open(state: ModalState) -> ModalOpen:
    if not isinstance(state, ModalOpen):
        raise ModalNotOpenError("No day is open in the log editor.")
    return state


def open_modal(date_key: str, logs: dict[str, LogEntry]) -> ModalOpen:
    parse_date_key(date_key)
    entry = logs.get(date_key)
    if entry is None:
        return ModalOpen(date_key=date_key)
    draft = str(entry.cost) if entry.activity_type is ActivityType.CREDIT_CLASS else ""
    return ModalOpen(date_key=date_key, activity_type=entry.activity_type, cost_draft=draft, can_delete=True)


def select_activity_type(state: ModalState, activity_type: ActivityType) -> ModalOpen:
    return replace(_require_open(state), activity_type=ActivityType(activity_type))


def set_cost_draft(state: ModalState, text: str) -> ModalOpen:
    return replace(_require_open(state), cost_draft=str(text))


def close(state: ModalState) -> ModalClosed:
    return CLOSED


def build_entry(state: ModalOpen) -> LogEntry:
    if state.activity_type is ActivityType.FIXED_CLASS:
        return LogEntry.fixed()
    return LogEntry.credit(parse_cost(state.cost_draft))


def save(state: ModalState, store: LogStore) -> tuple[ModalClosed, LogEntry]:
    current = _require_open(state)
    entry = build_entry(current)
    store.upsert(current.date_key, entry)
    store.save()
    return CLOSED, entry


def delete(state: ModalState, store: LogStore) -> ModalClosed:
    current = _require_open(state)
    if store.remove(current.date_key):
        store.save()
    else:
        logger.debug("Nothing logged on %s, delete ignored", current.date_key)
    return CLOSED
