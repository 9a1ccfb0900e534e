"""Tests for calendar bucketing."""

from datetime import date, timedelta

import pytest

from daybook.core.buckets import (
    MIN_DATE,
    Granularity,
    bucket_dates,
    column_label,
    dates_between,
    graph_dates,
    group_dates,
    iso_week,
    navigate,
    table_buckets,
    week_start,
    window_label,
)


@pytest.fixture
def wednesday():
    return date(2025, 3, 12)


class TestWeekStart:
    def test_wednesday(self, wednesday):
        assert week_start(wednesday) == date(2025, 3, 10)

    def test_monday(self):
        assert week_start(date(2025, 3, 10)) == date(2025, 3, 10)

    def test_sunday_goes_back_six(self):
        assert week_start(date(2025, 3, 16)) == date(2025, 3, 10)


class TestIsoWeek:
    def test_matches_isocalendar(self):
        d = date(2024, 12, 1)
        while d < date(2027, 2, 1):
            year, week, _ = d.isocalendar()
            assert iso_week(d) == (year, week), d
            d += timedelta(days=1)

    def test_year_boundary(self):
        assert iso_week(date(2024, 12, 30)) == (2025, 1)
        assert iso_week(date(2027, 1, 1)) == (2026, 53)


class TestDatesBetween:
    def test_inclusive(self):
        assert dates_between(date(2025, 3, 10), date(2025, 3, 12)) == [
            date(2025, 3, 10),
            date(2025, 3, 11),
            date(2025, 3, 12),
        ]

    def test_clamped_to_minimum(self):
        dates = dates_between(date(2024, 12, 30), date(2025, 1, 2))
        assert dates == [date(2025, 1, 1), date(2025, 1, 2)]

    def test_entirely_before_minimum(self):
        assert dates_between(date(2024, 1, 1), date(2024, 12, 31)) == []

    def test_start_after_end(self):
        assert dates_between(date(2025, 3, 12), date(2025, 3, 10)) == []


class TestBucketDates:
    def test_week(self):
        dates = bucket_dates(Granularity.WEEKLY, "2025-03-10")
        assert dates[0] == date(2025, 3, 10)
        assert dates[-1] == date(2025, 3, 16)
        assert len(dates) == 7

    def test_week_straddling_minimum(self):
        dates = bucket_dates(Granularity.WEEKLY, "2024-12-30")
        assert dates[0] == MIN_DATE
        assert len(dates) == 5

    def test_month(self):
        dates = bucket_dates(Granularity.MONTHLY, "2025-02")
        assert len(dates) == 28
        assert dates[-1] == date(2025, 2, 28)

    def test_leap_month(self):
        assert len(bucket_dates(Granularity.MONTHLY, "2028-02")) == 29

    def test_year(self):
        assert len(bucket_dates(Granularity.YEARLY, "2025")) == 365

    def test_year_before_minimum(self):
        assert bucket_dates(Granularity.YEARLY, "2024") == ()

    def test_malformed_key(self):
        assert bucket_dates(Granularity.MONTHLY, "March") == ()


class TestTableBuckets:
    def test_daily(self, wednesday):
        buckets = table_buckets(Granularity.DAILY, wednesday)
        assert [b.key for b in buckets] == ["2025-03-12"]
        assert buckets[0].dates == (wednesday,)

    def test_daily_before_minimum(self):
        assert table_buckets(Granularity.DAILY, date(2024, 12, 31)) == []

    def test_weekly(self, wednesday):
        buckets = table_buckets(Granularity.WEEKLY, wednesday)
        assert [b.key for b in buckets] == [
            "2025-03-10",
            "2025-03-17",
            "2025-03-24",
            "2025-03-31",
            "2025-04-07",
        ]
        assert buckets[0].dates[0] == date(2025, 3, 10)
        assert buckets[0].dates[-1] == date(2025, 3, 16)

    def test_weekly_drops_week_starting_before_minimum(self):
        buckets = table_buckets(Granularity.WEEKLY, date(2025, 1, 1))
        assert buckets[0].key == "2025-01-06"
        assert len(buckets) == 4
        assert all(d >= MIN_DATE for b in buckets for d in b.dates)

    def test_monthly(self, wednesday):
        buckets = table_buckets(Granularity.MONTHLY, wednesday)
        assert len(buckets) == 12
        assert buckets[0].key == "2025-01"
        assert buckets[-1].key == "2025-12"
        assert buckets[1].label == "Feb"

    def test_monthly_before_minimum(self):
        assert table_buckets(Granularity.MONTHLY, date(2024, 6, 1)) == []

    def test_yearly(self, wednesday):
        buckets = table_buckets(Granularity.YEARLY, wednesday, today=date(2026, 10, 17))
        assert [b.key for b in buckets] == ["2025", "2026", "2027"]

    def test_custom(self, wednesday):
        buckets = table_buckets(
            Granularity.CUSTOM, wednesday, start=date(2024, 12, 30), end=date(2025, 1, 2)
        )
        assert [b.key for b in buckets] == ["2025-01-01", "2025-01-02"]

    def test_custom_without_range(self, wednesday):
        assert table_buckets(Granularity.CUSTOM, wednesday) == []


class TestNavigate:
    def test_daily(self, wednesday):
        assert navigate(Granularity.DAILY, wednesday, 1) == date(2025, 3, 13)

    def test_weekly_moves_five_weeks(self, wednesday):
        assert navigate(Granularity.WEEKLY, wednesday, -1) == date(2025, 2, 5)

    def test_monthly_moves_a_year(self, wednesday):
        assert navigate(Granularity.MONTHLY, wednesday, 1) == date(2026, 3, 12)

    def test_monthly_leap_day(self):
        assert navigate(Granularity.MONTHLY, date(2028, 2, 29), 1) == date(2029, 2, 28)

    def test_yearly_fixed(self, wednesday):
        assert navigate(Granularity.YEARLY, wednesday, 1) == wednesday


class TestGraphDates:
    def test_daily_last_30_days(self, wednesday):
        dates = graph_dates(Granularity.DAILY, today=wednesday)
        assert len(dates) == 30
        assert dates[0] == date(2025, 2, 11)
        assert dates[-1] == wednesday

    def test_daily_clamped(self):
        dates = graph_dates(Granularity.DAILY, today=date(2025, 1, 10))
        assert dates[0] == MIN_DATE
        assert len(dates) == 10

    def test_weekly(self):
        dates = graph_dates(Granularity.WEEKLY, today=date(2025, 6, 30))
        assert dates[0] == date(2025, 4, 7)
        assert len(dates) == 85

    def test_monthly_aligned_to_first(self):
        dates = graph_dates(Granularity.MONTHLY, today=date(2026, 3, 15))
        assert dates[0] == date(2025, 4, 1)
        assert dates[-1] == date(2026, 3, 15)

    def test_yearly_aligned_and_clamped(self):
        dates = graph_dates(Granularity.YEARLY, today=date(2026, 10, 17))
        assert dates[0] == MIN_DATE

    def test_custom(self):
        dates = graph_dates(Granularity.CUSTOM, start=date(2025, 3, 10), end=date(2025, 3, 12))
        assert len(dates) == 3

    def test_custom_inverted(self):
        assert graph_dates(Granularity.CUSTOM, start=date(2025, 3, 12), end=date(2025, 3, 10)) == []

    def test_custom_before_minimum(self):
        assert graph_dates(Granularity.CUSTOM, start=date(2024, 1, 1), end=date(2024, 2, 1)) == []

    def test_custom_requires_range(self):
        with pytest.raises(ValueError):
            graph_dates(Granularity.CUSTOM, start=date(2025, 3, 10))


class TestGroupDates:
    def test_weekly(self):
        dates = dates_between(date(2025, 3, 10), date(2025, 3, 23))
        buckets = group_dates(dates, Granularity.WEEKLY)
        assert [b.key for b in buckets] == ["2025-03-10", "2025-03-17"]
        assert [b.label for b in buckets] == ["Week 11, 2025", "Week 12, 2025"]
        assert all(len(b.dates) == 7 for b in buckets)

    def test_monthly_chronological(self):
        dates = [date(2025, 4, 2), date(2025, 3, 31), date(2025, 3, 1)]
        buckets = group_dates(dates, Granularity.MONTHLY)
        assert [b.label for b in buckets] == ["Mar 2025", "Apr 2025"]
        assert buckets[0].dates == (date(2025, 3, 1), date(2025, 3, 31))

    def test_yearly(self):
        buckets = group_dates([date(2025, 12, 31), date(2026, 1, 1)], Granularity.YEARLY)
        assert [b.key for b in buckets] == ["2025", "2026"]

    def test_daily(self):
        buckets = group_dates([date(2025, 3, 10), date(2025, 3, 11)], Granularity.DAILY)
        assert [b.key for b in buckets] == ["2025-03-10", "2025-03-11"]

    def test_drops_dates_before_minimum(self):
        buckets = group_dates([date(2024, 12, 31), date(2025, 1, 1)], Granularity.DAILY)
        assert [b.key for b in buckets] == ["2025-01-01"]

    def test_weekly_first_week_keyed_from_minimum(self):
        buckets = group_dates(graph_dates(Granularity.WEEKLY, today=date(2025, 2, 1)), Granularity.WEEKLY)
        assert all(date.fromisoformat(b.key) >= MIN_DATE for b in buckets)
        first = buckets[0]
        assert first.key == "2025-01-01"
        assert first.label == "Week 1, 2025"
        assert first.dates[0] == MIN_DATE
        assert bucket_dates(Granularity.WEEKLY, first.key) == first.dates


class TestLabels:
    def test_daily_column(self):
        assert column_label(Granularity.DAILY, "2025-03-12") == "Wed 12"

    def test_weekly_column_same_month(self):
        assert column_label(Granularity.WEEKLY, "2025-03-10") == "Mar 10 - 16"

    def test_weekly_column_across_months(self):
        assert column_label(Granularity.WEEKLY, "2025-03-31") == "Mar 31 - Apr 6"

    def test_monthly_column(self):
        assert column_label(Granularity.MONTHLY, "2025-03") == "Mar"

    def test_daily_window(self, wednesday):
        assert window_label(Granularity.DAILY, wednesday) == "Wednesday, March 12, 2025"

    def test_weekly_window(self, wednesday):
        assert window_label(Granularity.WEEKLY, wednesday) == "Mar 10 - Apr 13, 2025"

    def test_yearly_window(self, wednesday):
        assert window_label(Granularity.YEARLY, wednesday) == "Yearly Overview"
