"""
Tests for time stats rollups and period comparison
"""

from datetime import date, timedelta

from analytics.stats import compare_periods, compute_time_stats, productivity_trend
from models import ProductivityTrend, TimeEntryLog
from tests.test_config import SAMPLE_USER_ID
from tests.test_fixtures import day_series, make_entry, make_log, make_work_day

MONDAY = date(2024, 3, 4)


class TestComputeTimeStats:

    def test_empty_range(self):
        stats = compute_time_stats([])

        assert stats.total_hours == 0
        assert stats.average_hours_per_day == 0
        assert stats.average_productivity == 0
        assert stats.days_tracked == 0
        assert stats.logs == []

    def test_totals_over_days(self):
        logs = [
            make_work_day(MONDAY, work_minutes=240, break_minutes=30, productivity=6),
            make_work_day(MONDAY + timedelta(days=1), work_minutes=120, productivity=8),
        ]

        stats = compute_time_stats(logs)

        assert stats.total_hours == 6.5
        assert stats.productive_hours == 6.0
        assert stats.average_hours_per_day == 3.25
        assert stats.activity_totals == {"Job Search": 360, "Break": 30}
        assert stats.days_tracked == 2

    def test_average_productivity_skips_days_without_summary(self):
        logs = [
            make_log(MONDAY, [make_entry(productivity=8)]),
            TimeEntryLog(user_id=SAMPLE_USER_ID, log_date=MONDAY + timedelta(days=1)),
            make_log(MONDAY + timedelta(days=2), [make_entry(productivity=6)]),
        ]

        stats = compute_time_stats(logs)

        assert stats.average_productivity == 7.0
        # Empty days still count towards days tracked
        assert stats.days_tracked == 3
        assert stats.average_hours_per_day == 0.67

    def test_outcomes_and_log_order(self):
        logs = [
            make_log(MONDAY + timedelta(days=1), [make_entry(outcomes=2)]),
            make_log(MONDAY, [make_entry(outcomes=1)]),
        ]

        stats = compute_time_stats(logs)

        assert stats.total_outcomes == 3
        assert [log.log_date for log in stats.logs] == [MONDAY, MONDAY + timedelta(days=1)]


class TestComparePeriods:

    def test_changes_between_periods(self):
        first = compute_time_stats(day_series(MONDAY, 5, work_minutes=240, productivity=5))
        second = compute_time_stats(day_series(MONDAY + timedelta(days=7), 5, work_minutes=300, productivity=7))

        comparison = compare_periods(
            MONDAY, MONDAY + timedelta(days=4), first,
            MONDAY + timedelta(days=7), MONDAY + timedelta(days=11), second,
        )

        assert comparison.period1.dates.start_date == MONDAY
        assert comparison.period2.stats.total_hours == 25
        assert comparison.changes.hours_change == 5
        assert comparison.changes.hours_change_percentage == 25.0
        assert comparison.changes.productivity_change == 2.0
        assert comparison.changes.outcomes_change == 0
        assert comparison.changes.outcomes_change_percentage == 0
        assert comparison.changes.trend == ProductivityTrend.IMPROVING.value

    def test_empty_baseline_has_zero_percentages(self):
        empty = compute_time_stats([])
        second = compute_time_stats([make_log(MONDAY, [make_entry(outcomes=2)])])

        comparison = compare_periods(MONDAY, MONDAY, empty, MONDAY, MONDAY, second)

        assert comparison.changes.hours_change == 1
        assert comparison.changes.hours_change_percentage == 0
        assert comparison.changes.outcomes_change == 2
        assert comparison.changes.outcomes_change_percentage == 0

    def test_trend(self):
        assert productivity_trend(6.0, 7.0) == ProductivityTrend.IMPROVING
        assert productivity_trend(7.0, 6.0) == ProductivityTrend.DECLINING
        assert productivity_trend(6.0, 6.0) == ProductivityTrend.STABLE
