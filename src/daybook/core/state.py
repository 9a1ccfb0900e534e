"""In-memory planner state and master-data edits - no I/O dependencies.

Every edit returns a new PlannerState; the previous one is left untouched.
"""

from dataclasses import dataclass, field, replace
from datetime import date

from .errors import InvalidReference
from .models import (
    UNCATEGORIZED_ID,
    Category,
    DailyLog,
    DailyLogs,
    DayType,
    GoalTracker,
    RecurringTaskTemplate,
    StatsLog,
    SubtaskTemplate,
    TrackerType,
    new_id,
)

# Persisted collection keys
CATEGORIES_KEY = "categories"
DAY_TYPES_KEY = "dayTypes"
TEMPLATES_KEY = "recurringTasks"
DAILY_LOGS_KEY = "dailyLogs"
TRACKERS_KEY = "goalTrackers"
STATS_LOGS_KEY = "statsLogs"

REQUIRED_KEYS = (CATEGORIES_KEY, DAY_TYPES_KEY, TEMPLATES_KEY, DAILY_LOGS_KEY)


@dataclass(frozen=True)
class PlannerState:
    """Snapshot of every collection the planner owns."""

    categories: tuple[Category, ...] = ()
    day_types: tuple[DayType, ...] = ()
    templates: tuple[RecurringTaskTemplate, ...] = ()
    daily_logs: DailyLogs = field(default_factory=dict)
    trackers: tuple[GoalTracker, ...] = ()
    stats_log: StatsLog = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "PlannerState":
        """Build from the persisted layout; missing trackers fall back to the defaults."""
        trackers = data.get(TRACKERS_KEY)
        return cls(
            categories=tuple(Category.from_dict(c) for c in data.get(CATEGORIES_KEY, [])),
            day_types=tuple(DayType.from_dict(dt) for dt in data.get(DAY_TYPES_KEY, [])),
            templates=tuple(
                RecurringTaskTemplate.from_dict(rt) for rt in data.get(TEMPLATES_KEY, [])
            ),
            daily_logs={
                key: DailyLog.from_dict(log) for key, log in data.get(DAILY_LOGS_KEY, {}).items()
            },
            trackers=(
                tuple(GoalTracker.from_dict(t) for t in trackers)
                if trackers is not None
                else default_trackers()
            ),
            stats_log={
                key: dict(entries) for key, entries in (data.get(STATS_LOGS_KEY) or {}).items()
            },
        )

    def to_dict(self) -> dict:
        return {
            CATEGORIES_KEY: [c.to_dict() for c in self.categories],
            DAY_TYPES_KEY: [dt.to_dict() for dt in self.day_types],
            TEMPLATES_KEY: [rt.to_dict() for rt in self.templates],
            DAILY_LOGS_KEY: {key: log.to_dict() for key, log in sorted(self.daily_logs.items())},
            TRACKERS_KEY: [t.to_dict() for t in self.trackers],
            STATS_LOGS_KEY: {key: dict(v) for key, v in sorted(self.stats_log.items())},
        }


def default_trackers() -> tuple[GoalTracker, ...]:
    return (
        GoalTracker(
            id="gt-1",
            name="Fitness %",
            type=TrackerType.PERCENT,
            color="#f97316",
            linked_category_id="cat-3",
        ),
    )


def default_state() -> PlannerState:
    """Seed data for a first run."""
    weekdays = frozenset({1, 2, 3, 4, 5})
    weekend = frozenset({0, 6})
    return PlannerState(
        categories=(
            Category("cat-1", "Work", "#3b82f6"),
            Category("cat-2", "Personal", "#10b981"),
            Category("cat-3", "Fitness", "#f97316"),
            Category(UNCATEGORIZED_ID, "Uncategorized", "#6b7280"),
        ),
        day_types=(
            DayType("dt-1", "Work Day", frozenset({"cat-1"})),
            DayType("dt-2", "Rest Day", frozenset({"cat-2", "cat-3"})),
        ),
        templates=(
            RecurringTaskTemplate("rt-1", "Check emails", "cat-1", weekdays),
            RecurringTaskTemplate("rt-2", "Daily Stand-up", "cat-1", weekdays),
            RecurringTaskTemplate("rt-3", "Read a book", "cat-2", weekend),
            RecurringTaskTemplate("rt-4", "Go for a walk", "cat-3", weekend),
        ),
        trackers=default_trackers(),
    )


# ============== Daily logs ==============


def log_for(state: PlannerState, on: date) -> DailyLog:
    """The stored log for a date, or a fresh empty one (not stored)."""
    return state.daily_logs.get(on.isoformat()) or DailyLog.empty(on)


def put_log(state: PlannerState, log: DailyLog) -> PlannerState:
    logs = dict(state.daily_logs)
    logs[log.date.isoformat()] = log
    return replace(state, daily_logs=logs)


def set_stats_log(state: PlannerState, stats_log: StatsLog) -> PlannerState:
    return replace(state, stats_log=stats_log)


# ============== Generic helpers ==============


def _index(items, item_id: str, kind: str) -> int:
    for i, item in enumerate(items):
        if item.id == item_id:
            return i
    raise InvalidReference(f"Unknown {kind}: {item_id}")


def _update(items, item_id: str, kind: str, **changes) -> tuple:
    i = _index(items, item_id, kind)
    return (*items[:i], replace(items[i], **changes), *items[i + 1 :])


def _remove(items, item_id: str, kind: str) -> tuple:
    i = _index(items, item_id, kind)
    return (*items[:i], *items[i + 1 :])


def find_category(state: PlannerState, category_id: str) -> Category:
    return state.categories[_index(state.categories, category_id, "category")]


def find_tracker(state: PlannerState, tracker_id: str) -> GoalTracker:
    return state.trackers[_index(state.trackers, tracker_id, "tracker")]


# ============== Categories ==============


def add_category(state: PlannerState, name: str, color: str) -> PlannerState:
    category = Category(id=new_id(), name=name, color=color)
    return replace(state, categories=(*state.categories, category))


def update_category(state: PlannerState, category_id: str, name: str, color: str) -> PlannerState:
    return replace(
        state, categories=_update(state.categories, category_id, "category", name=name, color=color)
    )


def delete_category(state: PlannerState, category_id: str) -> PlannerState:
    """
    Delete a category and everything that hangs off it.

    Its templates are deleted, day types stop referencing it, and its tasks
    on every date move to the uncategorized sentinel, which itself cannot be
    deleted.
    """
    if category_id == UNCATEGORIZED_ID:
        raise InvalidReference("The uncategorized category cannot be deleted")
    categories = _remove(state.categories, category_id, "category")
    templates = tuple(rt for rt in state.templates if rt.category_id != category_id)
    day_types = tuple(
        replace(dt, category_ids=dt.category_ids - {category_id}) for dt in state.day_types
    )
    logs = {
        key: log.with_tasks(
            replace(t, category_id=UNCATEGORIZED_ID) if t.category_id == category_id else t
            for t in log.tasks
        )
        for key, log in state.daily_logs.items()
    }
    return replace(
        state, categories=categories, templates=templates, day_types=day_types, daily_logs=logs
    )


def reorder_categories(state: PlannerState, start: int, end: int) -> PlannerState:
    """Move the category at index start to index end; out-of-range indexes change nothing."""
    count = len(state.categories)
    if not (0 <= start < count and 0 <= end < count):
        return state
    categories = list(state.categories)
    moved = categories.pop(start)
    categories.insert(end, moved)
    return replace(state, categories=tuple(categories))


# ============== Day types ==============


def add_day_type(
    state: PlannerState, name: str, category_ids: frozenset[str] = frozenset()
) -> PlannerState:
    day_type = DayType(id=new_id(), name=name, category_ids=frozenset(category_ids))
    return replace(state, day_types=(*state.day_types, day_type))


def update_day_type(
    state: PlannerState, day_type_id: str, name: str, category_ids: frozenset[str]
) -> PlannerState:
    return replace(
        state,
        day_types=_update(
            state.day_types,
            day_type_id,
            "day type",
            name=name,
            category_ids=frozenset(category_ids),
        ),
    )


def delete_day_type(state: PlannerState, day_type_id: str) -> PlannerState:
    return replace(state, day_types=_remove(state.day_types, day_type_id, "day type"))


# ============== Recurring templates ==============


def add_template(
    state: PlannerState,
    text: str,
    category_id: str,
    days_of_week: frozenset[int] = frozenset(),
) -> PlannerState:
    template = RecurringTaskTemplate(
        id=new_id(), text=text, category_id=category_id, days_of_week=frozenset(days_of_week)
    )
    return replace(state, templates=(*state.templates, template))


def update_template(state: PlannerState, template_id: str, **changes) -> PlannerState:
    """Update text, category_id or days_of_week of a template."""
    if "days_of_week" in changes:
        changes["days_of_week"] = frozenset(changes["days_of_week"])
    return replace(
        state, templates=_update(state.templates, template_id, "template", **changes)
    )


def delete_template(state: PlannerState, template_id: str) -> PlannerState:
    return replace(state, templates=_remove(state.templates, template_id, "template"))


def add_subtask_template(
    state: PlannerState,
    template_id: str,
    text: str,
    recurrence_days: frozenset[int] = frozenset(),
) -> PlannerState:
    template = state.templates[_index(state.templates, template_id, "template")]
    subtask = SubtaskTemplate(id=new_id(), text=text, recurrence_days=frozenset(recurrence_days))
    return replace(
        state,
        templates=_update(
            state.templates, template_id, "template", subtasks=(*template.subtasks, subtask)
        ),
    )


def delete_subtask_template(state: PlannerState, template_id: str, subtask_id: str) -> PlannerState:
    template = state.templates[_index(state.templates, template_id, "template")]
    subtasks = _remove(template.subtasks, subtask_id, "subtask template")
    return replace(
        state, templates=_update(state.templates, template_id, "template", subtasks=subtasks)
    )


# ============== Goal trackers ==============


def add_tracker(
    state: PlannerState,
    name: str,
    type: TrackerType,
    linked_category_id: str | None = None,
    target: float | None = None,
    color: str | None = None,
) -> PlannerState:
    tracker = GoalTracker(
        id=new_id(),
        name=name,
        type=type,
        target=target,
        color=color,
        linked_category_id=linked_category_id or None,
    )
    return replace(state, trackers=(*state.trackers, tracker))


def update_tracker(state: PlannerState, tracker_id: str, **changes) -> PlannerState:
    return replace(state, trackers=_update(state.trackers, tracker_id, "tracker", **changes))


def delete_tracker(state: PlannerState, tracker_id: str) -> PlannerState:
    return replace(state, trackers=_remove(state.trackers, tracker_id, "tracker"))
