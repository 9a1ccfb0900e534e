"""Tracker value resolution - no I/O dependencies.

Two tiers: a manual override for (date, tracker) always wins; otherwise the
value is derived from the day's tasks where the tracker allows it.
"""

import math
from datetime import date

from .completion import completion_percentage, filter_by_category
from .models import (
    GLOBAL_COMPLETION_KEY,
    DailyLogs,
    GoalTracker,
    StatsLog,
    TrackerType,
    Value,
)

_TRUE_WORDS = {"true", "yes", "y", "1", "x"}
_FALSE_WORDS = {"false", "no", "n", "0"}


def tracker_key(tracker: GoalTracker | None) -> str:
    """Override-store key for a tracker; None is the global completion metric."""
    return tracker.id if tracker else GLOBAL_COMPLETION_KEY


def lookup_override(stats_log: StatsLog, on: date, key: str) -> Value:
    """The stored override for (date, key), or None."""
    return stats_log.get(on.isoformat(), {}).get(key)


def derive_global(on: date, daily_logs: DailyLogs) -> float | None:
    """Completion of the day's tasks, or None when no log exists."""
    log = daily_logs.get(on.isoformat())
    if log is None:
        return None
    return completion_percentage(log.tasks)


def derive_tracker(on: date, tracker: GoalTracker, daily_logs: DailyLogs) -> float | None:
    """
    Completion within the tracker's linked category.

    None for manual trackers, days without a log, and days without any task
    in the category.
    """
    if not tracker.linked_category_id:
        return None
    log = daily_logs.get(on.isoformat())
    if log is None:
        return None
    tasks = filter_by_category(log.tasks, tracker.linked_category_id)
    if not tasks:
        return None
    return completion_percentage(tasks)


def resolve_value(
    on: date,
    tracker: GoalTracker | None,
    stats_log: StatsLog,
    daily_logs: DailyLogs,
) -> Value:
    """
    Effective value of a tracker (or the global metric when tracker is None) on a date.

    Overrides are returned verbatim whatever their type.

    Pure function - no I/O.
    """
    override = lookup_override(stats_log, on, tracker_key(tracker))
    if override is not None:
        return override
    if tracker is None:
        return derive_global(on, daily_logs)
    return derive_tracker(on, tracker, daily_logs)


def global_cell_value(on: date, stats_log: StatsLog, daily_logs: DailyLogs) -> Value:
    """Global metric for a single table cell; a day with no log shows as 0."""
    value = resolve_value(on, None, stats_log, daily_logs)
    return 0 if value is None else value


def set_override(stats_log: StatsLog, on: date, key: str, value: Value) -> StatsLog:
    """
    Return a copy of the override store with (date, key) set.

    A None value clears the entry; a date left with no entries is removed.
    """
    day_key = on.isoformat()
    updated = {d: dict(entries) for d, entries in stats_log.items()}
    entries = updated.setdefault(day_key, {})
    if value is None:
        entries.pop(key, None)
    else:
        entries[key] = value
    if not entries:
        del updated[day_key]
    return updated


def parse_override(tracker_type: TrackerType, raw: str) -> Value:
    """
    Parse a manually entered value.

    Blank clears. Check trackers accept yes/no style words; the others take
    a number, and anything unparsable clears.
    """
    text = raw.strip()
    if not text:
        return None
    if tracker_type is TrackerType.CHECK:
        word = text.lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number
