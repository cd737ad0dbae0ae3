from datetime import date, datetime, time, tzinfo
from typing import Any, Iterable, TypeVar

from barakaflow.services.recurrence import local_date

T = TypeVar("T")

FILTERS = ("all", "completed", "pending", "not-started", "today")


def _start_key(task: Any) -> tuple[int, float]:
    start_time = getattr(task, "start_time", None)
    if start_time is None:
        return (1, 0.0)
    return (0, start_time.timestamp())


def sort_by_start_time(tasks: Iterable[T]) -> list[T]:
    """Ascending by start time, undated tasks last; ties keep input order."""
    return sorted(tasks, key=_start_key)


def _time_of_day_key(task: Any, tz: tzinfo | None) -> tuple[int, time]:
    start_time = getattr(task, "start_time", None)
    if start_time is None:
        return (1, time.min)
    if start_time.tzinfo is not None:
        start_time = start_time.astimezone(tz)
    return (0, start_time.time())


def sort_by_time_of_day(tasks: Iterable[T], tz: tzinfo | None = None) -> list[T]:
    """
    Order one day's occurrences by local clock time, undated tasks last.

    Only the time of day is compared: a recurring task's ``start_time`` still
    carries the date of its first occurrence.
    """
    return sorted(tasks, key=lambda task: _time_of_day_key(task, tz))


def partition_tasks(tasks: Iterable[T]) -> tuple[list[T], list[T]]:
    """Split into (to-do, completed) by the ``completed`` flag, each sorted by start time."""
    todo: list[T] = []
    done: list[T] = []
    for task in tasks:
        (done if getattr(task, "completed", False) else todo).append(task)
    return sort_by_start_time(todo), sort_by_start_time(done)


def matches_query(task: Any, query: str | None) -> bool:
    if not query or not query.strip():
        return True
    # Blank check only; the needle itself keeps its spaces
    needle = query.lower()
    title = (getattr(task, "title", None) or "").lower()
    description = (getattr(task, "description", None) or "").lower()
    return needle in title or needle in description


def matches_filter(task: Any, filter_name: str, today: date, tz: tzinfo | None = None) -> bool:
    completed = bool(getattr(task, "completed", False))
    if filter_name == "all":
        return True
    if filter_name == "completed":
        return completed
    if filter_name in ("pending", "not-started"):
        # completed=True with a stale non-completed status shows up in neither view
        return not completed and getattr(task, "status", None) == filter_name
    if filter_name == "today":
        start_time = getattr(task, "start_time", None)
        return start_time is not None and local_date(start_time, tz) == today
    raise ValueError(f"Unknown filter: {filter_name}")


def filter_tasks(
    tasks: Iterable[T],
    query: str | None = None,
    filter_name: str = "all",
    today: date | None = None,
    tz: tzinfo | None = None,
) -> list[T]:
    if today is None:
        today = datetime.now(tz).date()
    return [
        task for task in tasks
        if matches_query(task, query) and matches_filter(task, filter_name, today, tz)
    ]
