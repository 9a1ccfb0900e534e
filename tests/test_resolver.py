"""Tests for tracker value resolution."""

from datetime import date

import pytest

from daybook.core.models import (
    GLOBAL_COMPLETION_KEY,
    DailyLog,
    GoalTracker,
    Task,
    TrackerType,
)
from daybook.core.resolver import (
    global_cell_value,
    parse_override,
    resolve_value,
    set_override,
)


@pytest.fixture
def day():
    return date(2025, 3, 10)


@pytest.fixture
def daily_logs(day):
    tasks = (
        Task(id="1", text="Emails", category_id="cat-1", done=True),
        Task(id="2", text="Run", category_id="cat-3", done=False),
        Task(id="3", text="Stretch", category_id="cat-3", done=True),
        Task(id="4", text="Read", category_id="cat-2", done=False),
    )
    return {day.isoformat(): DailyLog(date=day, tasks=tasks)}


@pytest.fixture
def fitness():
    return GoalTracker(id="gt-1", name="Fitness", type=TrackerType.PERCENT, linked_category_id="cat-3")


@pytest.fixture
def pushups():
    return GoalTracker(id="gt-2", name="Pushups", type=TrackerType.COUNT, target=250)


class TestGlobalMetric:
    def test_derived(self, day, daily_logs):
        assert resolve_value(day, None, {}, daily_logs) == 50

    def test_override_wins(self, day, daily_logs):
        stats = {"2025-03-10": {GLOBAL_COMPLETION_KEY: 77}}
        assert resolve_value(day, None, stats, daily_logs) == 77

    def test_no_log(self, daily_logs):
        assert resolve_value(date(2025, 3, 11), None, {}, daily_logs) is None

    def test_cell_defaults_to_zero(self, daily_logs):
        assert global_cell_value(date(2025, 3, 11), {}, daily_logs) == 0

    def test_null_override_ignored(self, day, daily_logs):
        stats = {"2025-03-10": {GLOBAL_COMPLETION_KEY: None}}
        assert resolve_value(day, None, stats, daily_logs) == 50


class TestLinkedTracker:
    def test_category_completion(self, day, daily_logs, fitness):
        assert resolve_value(day, fitness, {}, daily_logs) == 50

    def test_all_categories(self, day, daily_logs):
        tracker = GoalTracker(id="gt", name="All", type=TrackerType.PERCENT, linked_category_id="all")
        assert resolve_value(day, tracker, {}, daily_logs) == 50

    def test_no_log(self, fitness, daily_logs):
        assert resolve_value(date(2025, 3, 11), fitness, {}, daily_logs) is None

    def test_no_tasks_in_category(self, day, daily_logs):
        tracker = GoalTracker(id="gt", name="Music", type=TrackerType.PERCENT, linked_category_id="cat-9")
        assert resolve_value(day, tracker, {}, daily_logs) is None

    def test_override_wins(self, day, daily_logs, fitness):
        stats = {"2025-03-10": {"gt-1": 90}}
        assert resolve_value(day, fitness, stats, daily_logs) == 90


class TestManualTracker:
    def test_no_value(self, day, daily_logs, pushups):
        assert resolve_value(day, pushups, {}, daily_logs) is None

    def test_entered_value(self, day, daily_logs, pushups):
        stats = {"2025-03-10": {"gt-2": 40}}
        assert resolve_value(day, pushups, stats, daily_logs) == 40

    def test_override_without_log(self, pushups):
        stats = {"2025-06-01": {"gt-2": 12}}
        assert resolve_value(date(2025, 6, 1), pushups, stats, {}) == 12

    def test_unexpected_type_passed_through(self, day, daily_logs, pushups):
        stats = {"2025-03-10": {"gt-2": True}}
        assert resolve_value(day, pushups, stats, daily_logs) is True


class TestSetOverride:
    def test_set(self, day):
        stats = set_override({}, day, "gt-2", 5)
        assert stats == {"2025-03-10": {"gt-2": 5}}

    def test_does_not_mutate(self, day):
        original = {"2025-03-10": {"gt-1": 1}}
        set_override(original, day, "gt-2", 5)
        assert original == {"2025-03-10": {"gt-1": 1}}

    def test_clear_drops_empty_date(self, day):
        stats = set_override({"2025-03-10": {"gt-2": 5}}, day, "gt-2", None)
        assert stats == {}

    def test_clear_keeps_other_entries(self, day):
        stats = set_override({"2025-03-10": {"gt-1": 1, "gt-2": 5}}, day, "gt-2", None)
        assert stats == {"2025-03-10": {"gt-1": 1}}


class TestParseOverride:
    def test_blank_clears(self):
        assert parse_override(TrackerType.COUNT, "  ") is None

    def test_integer(self):
        value = parse_override(TrackerType.COUNT, "42")
        assert value == 42
        assert isinstance(value, int)

    def test_float(self):
        assert parse_override(TrackerType.PERCENT, "33.5") == 33.5

    def test_garbage(self):
        assert parse_override(TrackerType.COUNT, "lots") is None
        assert parse_override(TrackerType.COUNT, "nan") is None

    def test_check_words(self):
        assert parse_override(TrackerType.CHECK, "yes") is True
        assert parse_override(TrackerType.CHECK, "No") is False
        assert parse_override(TrackerType.CHECK, "maybe") is None
