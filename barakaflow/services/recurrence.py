"""
Which tasks fall on a given calendar day.

A stored task is one record; a recurring task has many occurrences that are
resolved here at read time and never stored. Matching is deliberately simple:

- daily: every day from the start date on
- weekly: every 7th day from the start date
- monthly: same day-of-month as the start date (a task started on the 31st
  never matches a 30-day month; there is no clamping)
- yearly: same month and day as the start date

``interval`` and ``end_date`` on the recurrence are not consulted.
"""
from datetime import date, datetime, tzinfo
from typing import Any, Iterable, TypeVar

T = TypeVar("T")

FREQUENCIES = ("none", "daily", "weekly", "monthly", "yearly")


def local_date(ts: datetime, tz: tzinfo | None = None) -> date:
    """Calendar date of ``ts`` in ``tz`` (the process's local zone when None)."""
    if ts.tzinfo is None:
        return ts.date()
    return ts.astimezone(tz).date()


def recurrence_frequency(task: Any) -> str:
    recurrence = getattr(task, "recurrence", None)
    if recurrence is None:
        return "none"
    if isinstance(recurrence, dict):
        frequency = recurrence.get("frequency")
    else:
        frequency = getattr(recurrence, "frequency", None)
    return frequency if frequency in FREQUENCIES else "none"


def occurs_on(task: Any, target_date: date, tz: tzinfo | None = None) -> bool:
    start_time = getattr(task, "start_time", None)
    if start_time is None:
        return False

    start_date = local_date(start_time, tz)
    if start_date == target_date:
        return True

    frequency = recurrence_frequency(task)
    if frequency == "none":
        return False

    days_diff = (target_date - start_date).days
    if days_diff < 0:
        return False

    if frequency == "daily":
        return True
    if frequency == "weekly":
        return days_diff % 7 == 0
    if frequency == "monthly":
        return target_date.day == start_date.day
    if frequency == "yearly":
        return target_date.month == start_date.month and target_date.day == start_date.day
    return False


def tasks_for_date(tasks: Iterable[T], target_date: date, tz: tzinfo | None = None) -> list[T]:
    """Tasks active on ``target_date``, in input order."""
    return [task for task in tasks if occurs_on(task, target_date, tz)]
