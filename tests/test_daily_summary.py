"""
Tests for the daily summary aggregator
"""

from datetime import datetime

from analytics.daily_summary import summarize_day
from models import ActivityType, EnergyLevel, FocusQuality
from tests.test_fixtures import make_entry


class TestSummarizeDay:

    def test_job_search_and_break(self):
        """90 minutes of job search with one outcome, then a 15 minute break"""
        entries = [
            make_entry(ActivityType.JOB_SEARCH, start=datetime(2024, 3, 4, 9, 0), minutes=90,
                       productivity=7, outcomes=1),
            make_entry(ActivityType.BREAK, start=datetime(2024, 3, 4, 10, 30), minutes=15),
        ]

        summary = summarize_day(entries)

        assert summary.total_hours == 1.75
        assert summary.productive_hours == 1.5
        assert summary.break_hours == 0.25
        assert summary.total_outcomes == 1
        assert summary.activity_breakdown == {"Job Search": 90, "Break": 15}
        # (7 + default 5) / 2
        assert summary.average_productivity == 6.0

    def test_no_completed_entries_leaves_summary_unset(self):
        assert summarize_day([]) is None
        assert summarize_day([make_entry(minutes=None)]) is None

    def test_open_entries_are_ignored(self):
        entries = [
            make_entry(ActivityType.NETWORKING, minutes=30),
            make_entry(ActivityType.RESUME_WRITING, start=datetime(2024, 3, 4, 10, 0), minutes=None),
        ]

        summary = summarize_day(entries)

        assert summary.total_hours == 0.5
        assert summary.activity_breakdown == {"Networking": 30}

    def test_custom_activity_replaces_other_as_key(self):
        entries = [
            make_entry(ActivityType.OTHER, custom_activity="Hackathon", minutes=45),
            make_entry(ActivityType.OTHER, minutes=15),
        ]

        summary = summarize_day(entries)

        assert summary.activity_breakdown == {"Hackathon": 45, "Other": 15}

    def test_custom_activity_ignored_for_named_activity(self):
        summary = summarize_day([make_entry(ActivityType.NETWORKING, custom_activity="Coffee chat", minutes=20)])
        assert summary.activity_breakdown == {"Networking": 20}

    def test_ordinal_averages_map_back_to_labels(self):
        entries = [
            make_entry(minutes=30, energy_level=EnergyLevel.LOW, focus_quality=FocusQuality.POOR),
            make_entry(minutes=30, energy_level=EnergyLevel.PEAK, focus_quality=FocusQuality.EXCELLENT),
        ]

        summary = summarize_day(entries)

        # Mean ordinal 2.5 rounds half up to 3
        assert summary.average_energy == EnergyLevel.HIGH.value
        assert summary.average_focus == FocusQuality.GOOD.value

    def test_hours_add_up_and_breakdown_matches_minutes(self):
        entries = [
            make_entry(ActivityType.COMPANY_RESEARCH, minutes=37),
            make_entry(ActivityType.BREAK, minutes=11),
            make_entry(ActivityType.MOCK_INTERVIEWS, minutes=52),
        ]

        summary = summarize_day(entries)

        assert abs(summary.total_hours - (summary.productive_hours + summary.break_hours)) < 0.02
        assert sum(summary.activity_breakdown.values()) == 100

    def test_average_productivity_rounds_to_one_decimal(self):
        entries = [
            make_entry(minutes=10, productivity=7),
            make_entry(minutes=10, productivity=8),
            make_entry(minutes=10, productivity=8),
        ]

        assert summarize_day(entries).average_productivity == 7.7
