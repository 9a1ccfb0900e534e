"""Calendar bucketing - pure date arithmetic, no I/O dependencies.

Dates are plain `datetime.date` values and are never mutated; every function
builds new dates with timedelta arithmetic. Nothing before MIN_DATE is ever
produced.
"""

import calendar
import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

logger = logging.getLogger(__name__)

MIN_DATE = date(2025, 1, 1)

TABLE_WEEKS = 5
GRAPH_DAYS = 30
GRAPH_WEEKS = 12
GRAPH_MONTHS = 12
GRAPH_YEARS = 3


class Granularity(Enum):
    """Time resolution of table columns and chart points."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Bucket:
    """A named group of calendar dates (one table column or chart point)."""

    key: str
    label: str
    dates: tuple[date, ...]

    @property
    def start(self) -> date | None:
        return self.dates[0] if self.dates else None

    @property
    def end(self) -> date | None:
        return self.dates[-1] if self.dates else None


# ============== Calendar arithmetic ==============


def week_start(d: date) -> date:
    """Monday of the week containing d (Sunday belongs to the week before it)."""
    return d - timedelta(days=(d.isoweekday() - 1) % 7)


def iso_week(d: date) -> tuple[int, int]:
    """
    ISO (year, week number) of a date.

    The week belongs to the year of its Thursday; the week number counts
    7-day blocks from January 1 of that year.
    """
    thursday = d + timedelta(days=4 - d.isoweekday())
    year_start = date(thursday.year, 1, 1)
    return thursday.year, math.ceil(((thursday - year_start).days + 1) / 7)


def add_months(d: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(d.day, calendar.monthrange(year, month)[1]))


def add_years(d: date, years: int) -> date:
    """Shift by whole years; February 29 falls back to February 28."""
    return add_months(d, years * 12)


def clamp(dates) -> list[date]:
    """Drop dates before MIN_DATE, keeping order."""
    kept = [d for d in dates if d >= MIN_DATE]
    if len(kept) != len(dates):
        logger.debug(f"Dropped {len(dates) - len(kept)} dates before {MIN_DATE}")
    return kept


def dates_between(start: date, end: date) -> list[date]:
    """Every date from start to end inclusive, clamped; empty if start ends up after end."""
    start = max(start, MIN_DATE)
    if start > end:
        return []
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def month_dates(year: int, month: int) -> list[date]:
    last = calendar.monthrange(year, month)[1]
    return clamp([date(year, month, day) for day in range(1, last + 1)])


def year_dates(year: int) -> list[date]:
    return dates_between(date(year, 1, 1), date(year, 12, 31))


# ============== Bucket keys ==============


def bucket_key(granularity: Granularity, d: date) -> str:
    """Key of the bucket that contains d; a week straddling MIN_DATE is keyed by MIN_DATE."""
    if granularity is Granularity.WEEKLY:
        return max(week_start(d), MIN_DATE).isoformat()
    if granularity is Granularity.MONTHLY:
        return f"{d.year:04d}-{d.month:02d}"
    if granularity is Granularity.YEARLY:
        return f"{d.year:04d}"
    return d.isoformat()


def bucket_dates(granularity: Granularity, key: str) -> tuple[date, ...]:
    """
    Member dates of the bucket named by key, clamped to MIN_DATE.

    A key that does not parse yields no dates.
    """
    try:
        if granularity is Granularity.WEEKLY:
            monday = week_start(date.fromisoformat(key))
            dates = clamp([monday + timedelta(days=i) for i in range(7)])
        elif granularity is Granularity.MONTHLY:
            year, month = (int(part) for part in key.split("-"))
            dates = month_dates(year, month)
        elif granularity is Granularity.YEARLY:
            dates = year_dates(int(key))
        else:
            dates = clamp([date.fromisoformat(key)])
    except ValueError:
        logger.debug(f"Ignoring malformed {granularity.value} bucket key {key!r}")
        return ()
    return tuple(dates)


# ============== Labels ==============


def _short(d: date) -> str:
    return f"{d.strftime('%b')} {d.day}"


def column_label(granularity: Granularity, key: str) -> str:
    """
    Header for a table column.

    daily: "Wed 12", weekly: "Mar 10 - 16" or "Mar 31 - Apr 6", monthly: "Mar".
    """
    if granularity is Granularity.DAILY:
        d = date.fromisoformat(key)
        return f"{d.strftime('%a')} {d.day}"
    if granularity is Granularity.WEEKLY:
        start = date.fromisoformat(key)
        end = start + timedelta(days=6)
        if start.month == end.month:
            return f"{_short(start)} - {end.day}"
        return f"{_short(start)} - {_short(end)}"
    if granularity is Granularity.MONTHLY:
        month = int(key.split("-")[1])
        return date(2000, month, 1).strftime("%b")
    return key


def window_label(granularity: Granularity, ref: date) -> str:
    """Title for the whole table window around a reference date."""
    if granularity is Granularity.DAILY:
        return f"{ref.strftime('%A, %B')} {ref.day}, {ref.year}"
    if granularity is Granularity.WEEKLY:
        start = week_start(ref)
        end = start + timedelta(days=TABLE_WEEKS * 7 - 1)
        return f"{_short(start)} - {_short(end)}, {end.year}"
    if granularity is Granularity.MONTHLY:
        return str(ref.year)
    if granularity is Granularity.YEARLY:
        return "Yearly Overview"
    return "Custom Range"


def graph_label(granularity: Granularity, d: date) -> str:
    """Chart point label for the bucket containing d."""
    if granularity is Granularity.WEEKLY:
        year, week = iso_week(d)
        return f"Week {week}, {year}"
    if granularity is Granularity.MONTHLY:
        return d.strftime("%b %Y")
    if granularity is Granularity.YEARLY:
        return str(d.year)
    return d.isoformat()


# ============== Table mode ==============


def _table_bucket(granularity: Granularity, key: str) -> Bucket:
    return Bucket(key=key, label=column_label(granularity, key), dates=bucket_dates(granularity, key))


def table_buckets(
    granularity: Granularity,
    ref: date,
    today: date | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[Bucket]:
    """
    Table columns for a reference date.

    daily: the reference date. weekly: TABLE_WEEKS weeks starting with the
    reference week. monthly: the twelve months of the reference year.
    yearly: MIN_DATE's year through the year after today. custom: one
    column per date from start to end.

    Columns that would begin before MIN_DATE are dropped whole.
    Pure function - no I/O.
    """
    today = today or date.today()

    if granularity is Granularity.DAILY:
        keys = [ref.isoformat()] if ref >= MIN_DATE else []
    elif granularity is Granularity.WEEKLY:
        monday = week_start(ref)
        mondays = [monday + timedelta(weeks=i) for i in range(TABLE_WEEKS)]
        keys = [m.isoformat() for m in mondays if m >= MIN_DATE]
    elif granularity is Granularity.MONTHLY:
        keys = [
            f"{ref.year:04d}-{month:02d}"
            for month in range(1, 13)
            if date(ref.year, month, 1) >= MIN_DATE
        ]
    elif granularity is Granularity.YEARLY:
        keys = [str(year) for year in range(MIN_DATE.year, today.year + 2)]
    else:
        if start is None or end is None:
            return []
        keys = [d.isoformat() for d in dates_between(start, end)]

    return [_table_bucket(granularity, key) for key in keys]


def navigate(granularity: Granularity, ref: date, direction: int) -> date:
    """
    Move the table reference date one page back (-1) or forward (+1).

    daily moves a day, weekly a whole TABLE_WEEKS page, monthly a year.
    The yearly and custom views do not navigate.
    """
    if granularity is Granularity.DAILY:
        return ref + timedelta(days=direction)
    if granularity is Granularity.WEEKLY:
        return ref + timedelta(weeks=direction * TABLE_WEEKS)
    if granularity is Granularity.MONTHLY:
        return add_years(ref, direction)
    return ref


# ============== Graph mode ==============


def graph_dates(
    granularity: Granularity,
    today: date | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[date]:
    """
    Dates covered by a chart, oldest first.

    Trailing windows end today: 30 days, 12 weeks, 12 months from the 1st
    of the month, 3 years from January 1. custom uses start and end.
    """
    today = today or date.today()

    if granularity is Granularity.CUSTOM:
        if start is None or end is None:
            raise ValueError("A custom range needs both a start and an end date")
        return dates_between(start, end)

    if granularity is Granularity.DAILY:
        first = today - timedelta(days=GRAPH_DAYS - 1)
    elif granularity is Granularity.WEEKLY:
        first = today - timedelta(weeks=GRAPH_WEEKS)
    elif granularity is Granularity.MONTHLY:
        first = add_months(today.replace(day=1), -(GRAPH_MONTHS - 1))
    else:
        first = date(today.year - (GRAPH_YEARS - 1), 1, 1)
    return dates_between(first, today)


def group_dates(dates, granularity: Granularity) -> list[Bucket]:
    """
    Group chart dates into buckets in chronological order.

    Weekly buckets are keyed by their Monday (or MIN_DATE for the first,
    partial week) and labelled with the ISO week.
    daily and custom keep one bucket per date.
    """
    groups: dict[str, list[date]] = {}
    labels: dict[str, str] = {}
    for d in sorted(clamp(list(dates))):
        key = bucket_key(granularity, d)
        if key not in groups:
            groups[key] = []
            labels[key] = graph_label(granularity, d)
        groups[key].append(d)
    return [Bucket(key=key, label=labels[key], dates=tuple(members)) for key, members in groups.items()]
