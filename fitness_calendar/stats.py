from dataclasses import dataclass

from fitness_calendar.logs import ActivityType, LogEntry, entries_in_month


@dataclass(frozen=True)
class MonthlyLimits:
    fixed_class: int = 5
    credit_class: int = 50


LIMITS = MonthlyLimits()


@dataclass(frozen=True)
class Remaining:
    fixed_remaining: int
    credits_remaining: int

    def as_dict(self) -> dict[str, int]:
        return {"fixed_remaining": self.fixed_remaining, "credits_remaining": self.credits_remaining}


def compute_remaining(
    year: int,
    month: int,
    logs: dict[str, LogEntry],
    limits: MonthlyLimits = LIMITS,
) -> Remaining:
    """Quota left for one month. Over-logging yields negative numbers, never clamped."""
    fixed_used = 0
    credits_used = 0
    for _, entry in entries_in_month(logs, year, month):
        if entry.activity_type is ActivityType.FIXED_CLASS:
            fixed_used += 1
        else:
            credits_used += entry.cost
    return Remaining(
        fixed_remaining=limits.fixed_class - fixed_used,
        credits_remaining=limits.credit_class - credits_used,
    )
