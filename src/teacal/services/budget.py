"""Weekly calorie budget tracking."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..models.tea_record import TeaRecord, utcnow


def week_start(now: datetime) -> datetime:
    """Sunday 00:00 of the week containing `now`."""
    days_since_sunday = (now.weekday() + 1) % 7
    start = now - timedelta(days=days_since_sunday)
    return start.replace(hour=0, minute=0, second=0, microsecond=0)


@dataclass
class WeeklySummary:
    budget: int
    consumed: int
    remaining: int
    percentage: int
    over_budget: bool
    record_count: int
    week_start: datetime

    def to_dict(self) -> dict:
        return {
            "budget": self.budget,
            "consumed": self.consumed,
            "remaining": self.remaining,
            "percentage": self.percentage,
            "over_budget": self.over_budget,
            "record_count": self.record_count,
            "week_start": self.week_start.isoformat(),
        }


def weekly_summary(
    records: list[TeaRecord], budget: int, now: datetime | None = None
) -> WeeklySummary:
    """Sum this week's calories against the budget.

    Records outside [Sunday 00:00, next Sunday 00:00) are ignored. The
    percentage is capped at 100; remaining never goes below zero.
    """
    now = now or utcnow()
    start = week_start(now)
    end = start + timedelta(days=7)

    this_week = [r for r in records if start <= r.recorded_at < end]
    consumed = sum(r.estimated_calories or 0 for r in this_week)
    percentage = min(100, round(consumed / budget * 100)) if budget > 0 else 100

    return WeeklySummary(
        budget=budget,
        consumed=consumed,
        remaining=max(0, budget - consumed),
        percentage=percentage,
        over_budget=consumed > budget,
        record_count=len(this_week),
        week_start=start,
    )
