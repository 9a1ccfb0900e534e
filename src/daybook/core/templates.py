"""Recurring template expansion - no I/O dependencies."""

import logging
from dataclasses import replace
from datetime import date

from .errors import InvalidReference
from .models import (
    DailyLog,
    DayType,
    RecurringTaskTemplate,
    Subtask,
    Task,
    day_of_week,
    new_id,
)

logger = logging.getLogger(__name__)


def template_matches(template: RecurringTaskTemplate, day_type: DayType, on: date) -> bool:
    """A template applies when its category is in the day type and it recurs on this weekday."""
    if template.category_id not in day_type.category_ids:
        return False
    return not template.days_of_week or day_of_week(on) in template.days_of_week


def instantiate_template(template: RecurringTaskTemplate, on: date) -> Task:
    """
    Create a fresh, incomplete task from a template for a date.

    Subtask templates with recurrence days only appear on those weekdays;
    the rest follow the parent.
    """
    weekday = day_of_week(on)
    subtasks = tuple(
        Subtask(id=new_id(), text=st.text, completed=False)
        for st in template.subtasks
        if not st.recurrence_days or weekday in st.recurrence_days
    )
    return Task(
        id=new_id(),
        text=template.text,
        category_id=template.category_id,
        is_recurring=True,
        subtasks=subtasks,
        done=False,
    )


def expand_day_type(
    day_type: DayType,
    on: date,
    templates: list[RecurringTaskTemplate],
    tasks: tuple[Task, ...] | list[Task],
) -> tuple[Task, ...]:
    """
    Rebuild a day's task list for a day type.

    Manually added tasks are kept verbatim and in order. Every recurring task
    already in the list is DISCARDED, together with its completion state, and
    replaced by fresh instances of the matching templates. Re-selecting the
    same day type therefore resets recurring progress for that date.

    Pure function - no I/O.
    """
    kept = [t for t in tasks if not t.is_recurring]
    fresh = [instantiate_template(t, on) for t in templates if template_matches(t, day_type, on)]
    logger.debug(
        f"Expanded day type {day_type.name!r} on {on}: kept {len(kept)}, generated {len(fresh)}"
    )
    return tuple(kept + fresh)


def find_day_type(day_types: list[DayType], day_type_id: str) -> DayType:
    for dt in day_types:
        if dt.id == day_type_id:
            return dt
    raise InvalidReference(f"Unknown day type: {day_type_id}")


def select_day_type(
    log: DailyLog,
    day_type_id: str,
    day_types: list[DayType],
    templates: list[RecurringTaskTemplate],
) -> DailyLog:
    """
    Assign a day type to a log and regenerate its recurring tasks.

    Raises InvalidReference for an unknown day type; the log is left as is.
    """
    day_type = find_day_type(day_types, day_type_id)
    tasks = expand_day_type(day_type, log.date, templates, log.tasks)
    return replace(log, day_type_id=day_type.id, tasks=tasks)
