import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Any

from fitness_calendar import modal
from fitness_calendar.calendar_view import (
    GridModel,
    render,
    reset_confirmation_message,
    reset_month,
    shift_month,
)
from fitness_calendar.logs import ActivityType, LogEntry, LogStore, date_key, month_prefix
from fitness_calendar.modal import CLOSED, ModalOpen, ModalState
from fitness_calendar.stats import LIMITS, MonthlyLimits

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewState:
    year: int
    month: int
    modal: ModalState = CLOSED

    @property
    def selected_date_key(self) -> str | None:
        return self.modal.date_key if isinstance(self.modal, ModalOpen) else None

    @property
    def selected_activity_type(self) -> ActivityType | None:
        return self.modal.activity_type if isinstance(self.modal, ModalOpen) else None


class CalendarSession:
    """One user's calendar: the log store plus the transient view state.

    Navigation and reset return the redrawn grid; modal events return the
    new modal state. Saves and deletes persist before returning.
    """

    def __init__(self, store: LogStore, view: ViewState, limits: MonthlyLimits = LIMITS) -> None:
        month_prefix(view.year, view.month)
        self.store = store
        self.view = view
        self.limits = limits

    @classmethod
    def start(cls, store: LogStore, today: date | None = None) -> "CalendarSession":
        today = today or date.today()
        store.load()
        return cls(store, ViewState(year=today.year, month=today.month))

    def grid(self) -> GridModel:
        return render(self.view.year, self.view.month, self.store.logs, self.limits)

    def show_month(self, year: int, month: int) -> GridModel:
        grid = render(year, month, self.store.logs, self.limits)
        self.view = replace(self.view, year=year, month=month)
        logger.debug("Showing %s", month_prefix(year, month))
        return grid

    def navigate(self, delta: int) -> GridModel:
        year, month = shift_month(self.view.year, self.view.month, delta)
        return self.show_month(year, month)

    def open_date(self, key: str) -> ModalOpen:
        state = modal.open_modal(key, self.store.logs)
        self.view = replace(self.view, modal=state)
        return state

    def open_day(self, day: int) -> ModalOpen:
        return self.open_date(date_key(self.view.year, self.view.month, day))

    def select_activity_type(self, activity_type: ActivityType | str) -> ModalOpen:
        state = modal.select_activity_type(self.view.modal, ActivityType(activity_type))
        self.view = replace(self.view, modal=state)
        return state

    def set_cost_draft(self, text: str) -> ModalOpen:
        state = modal.set_cost_draft(self.view.modal, text)
        self.view = replace(self.view, modal=state)
        return state

    def save_modal(self, cost_draft: str | None = None) -> LogEntry:
        state = self.view.modal
        if cost_draft is not None:
            state = modal.set_cost_draft(state, cost_draft)
        closed, entry = modal.save(state, self.store)
        self.view = replace(self.view, modal=closed)
        return entry

    def delete_modal(self) -> None:
        self.view = replace(self.view, modal=modal.delete(self.view.modal, self.store))

    def close_modal(self) -> None:
        self.view = replace(self.view, modal=modal.close(self.view.modal))

    def reset_displayed_month(self) -> GridModel:
        self.view = replace(self.view, modal=modal.CLOSED)
        return reset_month(self.store, self.view.year, self.view.month, self.limits)

    def reset_prompt(self) -> str:
        return reset_confirmation_message(self.view.year, self.view.month)

    def snapshot(self) -> dict[str, Any]:
        return {"grid": self.grid().as_dict(), "modal": self.view.modal.as_dict()}
