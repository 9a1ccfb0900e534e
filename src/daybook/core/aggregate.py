"""Aggregation of tracker values over dates - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date

from .buckets import Bucket, Granularity, bucket_dates, graph_dates, group_dates, table_buckets
from .completion import round_percent
from .models import DailyLogs, GoalTracker, StatsLog, TrackerType, Value
from .resolver import global_cell_value, resolve_value

NO_DATA = "-"
GLOBAL_METRIC_NAME = "Global Todos"
GLOBAL_METRIC_COLOR = "#818cf8"

Aggregate = int | float | str


def _number(total: float) -> int | float:
    return int(total) if float(total).is_integer() else total


def aggregate(
    dates,
    tracker: GoalTracker | None,
    stats_log: StatsLog,
    daily_logs: DailyLogs,
) -> Aggregate:
    """
    Reduce a tracker's values over a set of dates to one summary value.

    Dates resolving to None are left out entirely.
      - global metric (tracker None): rounded average, 0 with no data
      - percent: rounded average
      - count: sum
      - check: "<true>/<resolved>"
    Trackers with no data give NO_DATA.

    Values are expected to match the tracker type; nothing is coerced.
    Pure function - no I/O.
    """
    values = [resolve_value(d, tracker, stats_log, daily_logs) for d in dates]
    values = [v for v in values if v is not None]

    if tracker is None:
        if not values:
            return 0
        return round_percent(sum(values) / len(values))

    if not values:
        return NO_DATA

    if tracker.type is TrackerType.CHECK:
        checks = [v for v in values if isinstance(v, bool)]
        if not checks:
            return NO_DATA
        return f"{sum(1 for v in checks if v is True)}/{len(checks)}"
    if tracker.type is TrackerType.COUNT:
        return _number(sum(values))
    return round_percent(sum(values) / len(values))


def aggregate_bucket(
    granularity: Granularity,
    key: str,
    tracker: GoalTracker | None,
    stats_log: StatsLog,
    daily_logs: DailyLogs,
) -> Aggregate:
    """Aggregate over exactly the member dates of one bucket."""
    return aggregate(bucket_dates(granularity, key), tracker, stats_log, daily_logs)


# ============== Table ==============


@dataclass
class ScorecardRow:
    """One metric across every table column."""

    name: str
    tracker: GoalTracker | None
    cells: list[Value | Aggregate] = field(default_factory=list)

    @property
    def key(self) -> str:
        return self.tracker.id if self.tracker else "global"


@dataclass
class Scorecard:
    """Table data: columns plus the global row and one row per tracker."""

    granularity: Granularity
    columns: list[Bucket]
    rows: list[ScorecardRow]


def scorecard(
    granularity: Granularity,
    ref: date,
    trackers: list[GoalTracker],
    stats_log: StatsLog,
    daily_logs: DailyLogs,
    today: date | None = None,
    start: date | None = None,
    end: date | None = None,
) -> Scorecard:
    """
    Assemble the performance table.

    In the daily and custom views each cell holds the resolved value for its
    single date (the global metric shows 0 for a day with no log); in the
    other views each cell aggregates its bucket.
    """
    columns = table_buckets(granularity, ref, today=today, start=start, end=end)
    per_date = granularity in (Granularity.DAILY, Granularity.CUSTOM)

    def cell(bucket: Bucket, tracker: GoalTracker | None):
        if per_date:
            if tracker is None:
                return global_cell_value(bucket.dates[0], stats_log, daily_logs)
            return resolve_value(bucket.dates[0], tracker, stats_log, daily_logs)
        return aggregate(bucket.dates, tracker, stats_log, daily_logs)

    rows = [ScorecardRow(name=GLOBAL_METRIC_NAME, tracker=None)]
    rows.extend(ScorecardRow(name=t.name, tracker=t) for t in trackers)
    for row in rows:
        row.cells = [cell(bucket, row.tracker) for bucket in columns]
    return Scorecard(granularity=granularity, columns=columns, rows=rows)


# ============== Charts ==============


@dataclass(frozen=True)
class SeriesPoint:
    """A single chart value."""

    label: str
    value: int | float
    color: str | None = None


def _plottable(value: Aggregate) -> int | float:
    return value if isinstance(value, (int, float)) and not isinstance(value, bool) else 0


def trend_metrics(trackers: list[GoalTracker]) -> list[GoalTracker | None]:
    """Metrics that can be charted over time: the global metric, then every non-check tracker."""
    return [None] + [t for t in trackers if t.type is not TrackerType.CHECK]


def trend_series(
    granularity: Granularity,
    tracker: GoalTracker | None,
    stats_log: StatsLog,
    daily_logs: DailyLogs,
    today: date | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[SeriesPoint]:
    """
    One chart point per bucket of the trailing window, oldest first.

    Buckets without data plot as 0.
    """
    dates = graph_dates(granularity, today=today, start=start, end=end)
    color = tracker.color if tracker else GLOBAL_METRIC_COLOR
    return [
        SeriesPoint(
            label=bucket.label,
            value=_plottable(aggregate(bucket.dates, tracker, stats_log, daily_logs)),
            color=color,
        )
        for bucket in group_dates(dates, granularity)
    ]


def comparative_series(
    dates,
    trackers: list[GoalTracker],
    stats_log: StatsLog,
    daily_logs: DailyLogs,
) -> list[SeriesPoint]:
    """Each non-check tracker aggregated over the whole window."""
    return [
        SeriesPoint(
            label=t.name,
            value=_plottable(aggregate(dates, t, stats_log, daily_logs)),
            color=t.color,
        )
        for t in trackers
        if t.type is not TrackerType.CHECK
    ]
