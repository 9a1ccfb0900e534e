"""Functional core - pure business logic with no I/O."""

from .models import (
    ALL_CATEGORIES,
    GLOBAL_COMPLETION_KEY,
    UNCATEGORIZED_ID,
    Category,
    DailyLog,
    DayType,
    GoalTracker,
    RecurringTaskTemplate,
    Subtask,
    SubtaskTemplate,
    Task,
    TaskKind,
    TrackerType,
)
from .errors import DaybookError, DerivedCompletionError, InvalidReference, StoreError
from .templates import expand_day_type, select_day_type
from .completion import completion_percentage, round_percent
from .resolver import resolve_value, set_override
from .buckets import MIN_DATE, Bucket, Granularity, graph_dates, group_dates, table_buckets
from .aggregate import NO_DATA, aggregate, aggregate_bucket, scorecard, trend_series
from .state import PlannerState, default_state

__all__ = [
    # Models
    "ALL_CATEGORIES",
    "GLOBAL_COMPLETION_KEY",
    "UNCATEGORIZED_ID",
    "Category",
    "DailyLog",
    "DayType",
    "GoalTracker",
    "RecurringTaskTemplate",
    "Subtask",
    "SubtaskTemplate",
    "Task",
    "TaskKind",
    "TrackerType",
    # Errors
    "DaybookError",
    "DerivedCompletionError",
    "InvalidReference",
    "StoreError",
    # Templates
    "expand_day_type",
    "select_day_type",
    # Completion
    "completion_percentage",
    "round_percent",
    # Resolution
    "resolve_value",
    "set_override",
    # Buckets
    "MIN_DATE",
    "Bucket",
    "Granularity",
    "graph_dates",
    "group_dates",
    "table_buckets",
    # Aggregation
    "NO_DATA",
    "aggregate",
    "aggregate_bucket",
    "scorecard",
    "trend_series",
    # State
    "PlannerState",
    "default_state",
]
