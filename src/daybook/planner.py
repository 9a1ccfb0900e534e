"""Planner controller shared by the CLI.

The Planner owns the state: it applies one edit at a time through the pure
core, saves after every change, and hands back the new value.
"""

import logging
from datetime import date

from .adapters.json_store import JsonStateStore
from .config import Config
from .core import completion as tasks_core
from .core import state as st
from .core.aggregate import Scorecard, SeriesPoint, comparative_series, scorecard, trend_series
from .core.buckets import Granularity, graph_dates
from .core.errors import InvalidReference
from .core.models import UNCATEGORIZED_ID, DailyLog, DayType, GoalTracker, Task, TrackerType, Value
from .core.resolver import parse_override, set_override, tracker_key
from .core.templates import select_day_type
from .ports.state_store import StateStore

logger = logging.getLogger(__name__)


def get_planner(config: Config, today: date | None = None) -> "Planner":
    """Build a planner backed by the configured state file."""
    return Planner(JsonStateStore(config.state_path), today=today)


def _by_name_or_id(items, ref: str, kind: str):
    for item in items:
        if item.id == ref:
            return item
    lowered = ref.strip().lower()
    for item in items:
        if item.name.lower() == lowered:
            return item
    raise InvalidReference(f"Unknown {kind}: {ref}")


class Planner:
    """Single writer over the planner state."""

    def __init__(self, store: StateStore, today: date | None = None):
        self.store = store
        self.today = today or date.today()
        self.state = store.load()

    def _commit(self, state: st.PlannerState, message: str) -> None:
        self.state = state
        self.store.save(state)
        logger.info(message)

    def edit(self, operation, *args, **kwargs) -> st.PlannerState:
        """Apply a master-data edit from daybook.core.state and save it."""
        self._commit(operation(self.state, *args, **kwargs), f"Applied {operation.__name__}")
        return self.state

    # ============== Lookups ==============

    def find_day_type(self, ref: str) -> DayType:
        return _by_name_or_id(self.state.day_types, ref, "day type")

    def find_tracker(self, ref: str) -> GoalTracker:
        return _by_name_or_id(self.state.trackers, ref, "tracker")

    def find_category(self, ref: str):
        return _by_name_or_id(self.state.categories, ref, "category")

    # ============== Daily log ==============

    def get_log(self, on: date) -> DailyLog:
        """The log for a date, created and saved on first access."""
        key = on.isoformat()
        if key not in self.state.daily_logs:
            self._commit(st.put_log(self.state, DailyLog.empty(on)), f"Created log for {key}")
        return self.state.daily_logs[key]

    def _update_tasks(self, on: date, operation, *args) -> DailyLog:
        """Apply a task-list operation; nothing is saved if it raises."""
        log = st.log_for(self.state, on)
        updated = log.with_tasks(operation(log.tasks, *args))
        self._commit(st.put_log(self.state, updated), f"{operation.__name__} on {on.isoformat()}")
        return updated

    def select_day_type(self, on: date, day_type_ref: str) -> DailyLog:
        """
        Assign a day type and regenerate the date's recurring tasks.

        Recurring progress for that date is lost; manual tasks are kept.
        """
        day_type = self.find_day_type(day_type_ref)
        log = select_day_type(
            st.log_for(self.state, on), day_type.id, self.state.day_types, self.state.templates
        )
        self._commit(st.put_log(self.state, log), f"Selected {day_type.name!r} for {on.isoformat()}")
        return log

    def add_task(self, on: date, text: str, category_ref: str = UNCATEGORIZED_ID) -> Task:
        category = self.find_category(category_ref)
        return self._update_tasks(on, tasks_core.add_task, text, category.id).tasks[-1]

    def toggle_task(self, on: date, task_id: str, subtask_id: str | None = None) -> DailyLog:
        if subtask_id:
            return self._update_tasks(on, tasks_core.toggle_subtask, task_id, subtask_id)
        return self._update_tasks(on, tasks_core.toggle_task, task_id)

    def delete_task(self, on: date, task_id: str) -> DailyLog:
        return self._update_tasks(on, tasks_core.delete_task, task_id)

    def add_subtask(self, on: date, task_id: str, text: str) -> DailyLog:
        return self._update_tasks(on, tasks_core.add_subtask, task_id, text)

    def delete_subtask(self, on: date, task_id: str, subtask_id: str) -> DailyLog:
        return self._update_tasks(on, tasks_core.delete_subtask, task_id, subtask_id)

    def completion(self, on: date) -> float:
        log = self.state.daily_logs.get(on.isoformat())
        return tasks_core.completion_percentage(log.tasks) if log else 0

    # ============== Overrides ==============

    def set_value(self, on: date, tracker: GoalTracker | None, value: Value) -> None:
        """Set (or clear with None) the override for a tracker, None meaning the global metric."""
        key = tracker_key(tracker)
        stats_log = set_override(self.state.stats_log, on, key, value)
        self._commit(st.set_stats_log(self.state, stats_log), f"Set {key} on {on.isoformat()} to {value!r}")

    def enter_value(self, on: date, tracker_ref: str, raw: str) -> Value:
        """Parse and store a manually typed value; "global" addresses the global metric."""
        if tracker_ref.lower() in ("global", "global_completion"):
            tracker = None
            value = parse_override(TrackerType.PERCENT, raw)
        else:
            tracker = self.find_tracker(tracker_ref)
            value = parse_override(tracker.type, raw)
        self.set_value(on, tracker, value)
        return value

    # ============== Statistics ==============

    def scorecard(
        self,
        granularity: Granularity,
        ref: date | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> Scorecard:
        return scorecard(
            granularity,
            ref or self.today,
            list(self.state.trackers),
            self.state.stats_log,
            self.state.daily_logs,
            today=self.today,
            start=start,
            end=end,
        )

    def trend(
        self,
        granularity: Granularity,
        tracker_ref: str | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> list[SeriesPoint]:
        tracker = self.find_tracker(tracker_ref) if tracker_ref else None
        return trend_series(
            granularity,
            tracker,
            self.state.stats_log,
            self.state.daily_logs,
            today=self.today,
            start=start,
            end=end,
        )

    def comparative(
        self,
        granularity: Granularity,
        start: date | None = None,
        end: date | None = None,
    ) -> list[SeriesPoint]:
        dates = graph_dates(granularity, today=self.today, start=start, end=end)
        return comparative_series(
            dates, list(self.state.trackers), self.state.stats_log, self.state.daily_logs
        )
