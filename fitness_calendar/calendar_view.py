import calendar
import logging
from dataclasses import dataclass
from typing import Any

from fitness_calendar.logs import LogEntry, LogStore, date_key, month_prefix
from fitness_calendar.stats import LIMITS, MonthlyLimits, Remaining, compute_remaining

logger = logging.getLogger(__name__)


def days_in_month(year: int, month: int) -> int:
    month_prefix(year, month)
    return calendar.monthrange(year, month)[1]


def leading_blanks(year: int, month: int) -> int:
    """Blank cells before the 1st in a Sunday-first week."""
    month_prefix(year, month)
    monday_based = calendar.monthrange(year, month)[0]
    return (monday_based + 1) % 7


def month_title(year: int, month: int) -> str:
    month_prefix(year, month)
    return f"{calendar.month_name[month]} {year}"


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    month_prefix(year, month)
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def reset_confirmation_message(year: int, month: int) -> str:
    month_prefix(year, month)
    return f"Are you sure you want to erase all data for {calendar.month_name[month]}? This cannot be undone."


@dataclass(frozen=True)
class DayCell:
    day: int
    date_key: str
    entry: LogEntry | None = None

    @property
    def label(self) -> str | None:
        return self.entry.label if self.entry else None

    def as_dict(self) -> dict[str, Any]:
        return {
            "day": self.day,
            "date_key": self.date_key,
            "activity_type": self.entry.activity_type.value if self.entry else None,
            "cost": self.entry.cost if self.entry else None,
            "label": self.label,
        }


@dataclass(frozen=True)
class GridModel:
    year: int
    month: int
    title: str
    leading_blanks: int
    days: list[DayCell]
    remaining: Remaining

    def cell(self, day: int) -> DayCell:
        return self.days[day - 1]

    def as_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "title": self.title,
            "leading_blanks": self.leading_blanks,
            "days": [cell.as_dict() for cell in self.days],
            **self.remaining.as_dict(),
        }


def render(year: int, month: int, logs: dict[str, LogEntry], limits: MonthlyLimits = LIMITS) -> GridModel:
    days = []
    for day in range(1, days_in_month(year, month) + 1):
        key = date_key(year, month, day)
        days.append(DayCell(day=day, date_key=key, entry=logs.get(key)))
    return GridModel(
        year=year,
        month=month,
        title=month_title(year, month),
        leading_blanks=leading_blanks(year, month),
        days=days,
        remaining=compute_remaining(year, month, logs, limits),
    )


def reset_month(store: LogStore, year: int, month: int, limits: MonthlyLimits = LIMITS) -> GridModel:
    """Erase every log of the month, persist, and redraw it.

    Irreversible: only call after the user confirmed.
    """
    removed = 0
    for key, _ in store.entries_in_month(year, month):
        if store.remove(key):
            removed += 1
    store.save()
    logger.info("Reset %s: removed %d entries", month_prefix(year, month), removed)
    return render(year, month, store.logs, limits)
