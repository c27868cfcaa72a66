"""
Tests for the period analysis engine
"""

from datetime import date, datetime, timedelta

import pytest

from analytics.period_analysis import HOUR_LABELS, analyze_period, efficiency_rating
from errors import DataError
from models import (
    ActivityType,
    EfficiencyRating,
    EnergyLevel,
    FocusQuality,
    Outcome,
    OutcomeType,
    PeriodType,
    RiskLevel,
    TimeEntryLog,
    WorkLifeBalance,
)
from tests.test_config import SAMPLE_USER_ID
from tests.test_fixtures import day_series, make_entry, make_log

MONDAY = date(2024, 3, 4)


def _analyze(logs, period_type=PeriodType.WEEKLY):
    ordered = sorted(log.log_date for log in logs) or [MONDAY]
    return analyze_period(logs, SAMPLE_USER_ID, ordered[0], ordered[-1], period_type)


def _at(hour: int, minute: int = 0, day: date = MONDAY) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute)


class TestAnalyzePeriod:

    def test_no_logs_raises_data_error(self):
        with pytest.raises(DataError):
            analyze_period([], SAMPLE_USER_ID, MONDAY, MONDAY + timedelta(days=6), PeriodType.WEEKLY)

    def test_period_is_recorded(self):
        analysis = _analyze([make_log(MONDAY, [make_entry()])], PeriodType.DAILY)

        assert analysis.user_id == SAMPLE_USER_ID
        assert analysis.period.start_date == MONDAY
        assert analysis.period.period_type == "Daily"
        assert analysis.recommendations == []


class TestTimeInvestment:

    def test_totals_and_top_activities(self):
        log = make_log(MONDAY, [
            make_entry(ActivityType.JOB_SEARCH, start=_at(9), minutes=90),
            make_entry(ActivityType.BREAK, start=_at(10, 30), minutes=15),
            make_entry(ActivityType.NETWORKING, start=_at(11), minutes=45),
        ])

        section = _analyze([log]).time_investment

        assert section.total_hours == 2.5
        assert section.productive_hours == 2.25
        assert section.break_hours == 0.25
        assert section.activity_distribution == {"Job Search": 90, "Break": 15, "Networking": 45}
        assert [(a.activity, a.hours, a.percentage) for a in section.top_activities] == [
            ("Job Search", 1.5, 60.0),
            ("Networking", 0.75, 30.0),
            ("Break", 0.25, 10.0),
        ]

    def test_breakdowns_merge_across_days(self):
        logs = [
            make_log(MONDAY, [make_entry(ActivityType.JOB_SEARCH, start=_at(9), minutes=60)]),
            make_log(MONDAY + timedelta(days=1), [
                make_entry(ActivityType.JOB_SEARCH, start=_at(9, day=MONDAY + timedelta(days=1)), minutes=30),
            ]),
        ]

        section = _analyze(logs).time_investment

        assert section.activity_distribution == {"Job Search": 90}
        assert section.total_hours == 1.5

    def test_only_top_five_activities_reported(self):
        activities = [
            ActivityType.JOB_SEARCH, ActivityType.NETWORKING, ActivityType.RESUME_WRITING,
            ActivityType.COMPANY_RESEARCH, ActivityType.MOCK_INTERVIEWS, ActivityType.FOLLOW_UPS,
        ]
        entries = [
            make_entry(activity, start=_at(8 + i), minutes=60 - i * 5)
            for i, activity in enumerate(activities)
        ]

        section = _analyze([make_log(MONDAY, entries)]).time_investment

        assert len(section.top_activities) == 5
        assert "Follow-ups" not in [a.activity for a in section.top_activities]


class TestProductivityMetrics:

    def test_peak_hour_and_working_window(self):
        log = make_log(MONDAY, [
            make_entry(start=_at(9), minutes=30, productivity=6),
            make_entry(start=_at(10), minutes=30, productivity=9),
            make_entry(start=_at(10, 40), minutes=10, productivity=7),
            make_entry(start=_at(14), minutes=30, productivity=7),
        ])

        metrics = _analyze([log]).productivity_metrics

        assert metrics.peak_productivity_time.hour == 10
        assert metrics.peak_productivity_time.label == "10 AM"
        assert metrics.optimal_working_hours.start == 8
        assert metrics.optimal_working_hours.end == 16
        assert metrics.average_productivity == 7.3

    def test_peak_tie_goes_to_earliest_hour(self):
        log = make_log(MONDAY, [
            make_entry(start=_at(15), minutes=30, productivity=8),
            make_entry(start=_at(11), minutes=30, productivity=8),
        ])

        assert _analyze([log]).productivity_metrics.peak_productivity_time.hour == 11

    def test_working_window_is_clamped(self):
        early = make_log(MONDAY, [make_entry(start=_at(7), minutes=30, productivity=9)])
        late = make_log(MONDAY, [make_entry(start=_at(20), minutes=30, productivity=9)])

        early_window = _analyze([early]).productivity_metrics.optimal_working_hours
        late_window = _analyze([late]).productivity_metrics.optimal_working_hours

        assert (early_window.start, early_window.end) == (6, 13)
        assert (late_window.start, late_window.end) == (18, 22)

    def test_defaults_without_completed_entries(self):
        empty = TimeEntryLog(user_id=SAMPLE_USER_ID, log_date=MONDAY)

        analysis = _analyze([empty])
        metrics = analysis.productivity_metrics

        assert metrics.average_productivity == 5
        assert metrics.peak_productivity_time is None
        assert (metrics.optimal_working_hours.start, metrics.optimal_working_hours.end) == (9, 17)
        assert metrics.focus_score == 50
        assert metrics.consistency_score == 0
        assert metrics.efficiency_rating == EfficiencyRating.AVERAGE.value
        assert analysis.outcome_analysis.outcomes_per_hour == 0
        assert analysis.efficiency_metrics.task_completion_rate == 0
        assert analysis.efficiency_score == 0

    def test_missing_productivity_defaults_to_five(self):
        log = make_log(MONDAY, [make_entry(minutes=30), make_entry(start=_at(10), minutes=30, productivity=8)])

        assert _analyze([log]).productivity_metrics.average_productivity == 6.5

    def test_consistency_counts_days_with_hours(self):
        logs = [
            make_log(MONDAY, [make_entry(minutes=60)]),
            TimeEntryLog(user_id=SAMPLE_USER_ID, log_date=MONDAY + timedelta(days=1)),
            make_log(MONDAY + timedelta(days=2), [make_entry(start=_at(9, day=MONDAY + timedelta(days=2)), minutes=60)]),
        ]

        assert _analyze(logs).productivity_metrics.consistency_score == 67

    def test_focus_score(self):
        log = make_log(MONDAY, [
            make_entry(start=_at(9), minutes=30, focus_quality=FocusQuality.EXCELLENT),
            make_entry(start=_at(10), minutes=30, focus_quality=FocusQuality.FAIR),
        ])

        # (4 + 2) / (2 * 4) = 75%
        assert _analyze([log]).productivity_metrics.focus_score == 75

    @pytest.mark.parametrize("average,expected", [
        (9.5, EfficiencyRating.VERY_HIGH),
        (8, EfficiencyRating.VERY_HIGH),
        (7.9, EfficiencyRating.HIGH),
        (6.5, EfficiencyRating.HIGH),
        (6.4, EfficiencyRating.AVERAGE),
        (5, EfficiencyRating.AVERAGE),
        (4.9, EfficiencyRating.LOW),
        (3.5, EfficiencyRating.LOW),
        (3.4, EfficiencyRating.VERY_LOW),
        (1, EfficiencyRating.VERY_LOW),
    ])
    def test_efficiency_rating_bands(self, average, expected):
        assert efficiency_rating(average) == expected

    def test_hour_labels(self):
        assert HOUR_LABELS[0] == "Midnight"
        assert HOUR_LABELS[9] == "9 AM"
        assert HOUR_LABELS[12] == "Noon"
        assert HOUR_LABELS[13] == "1 PM"
        assert HOUR_LABELS[23] == "11 PM"


class TestPerformancePatterns:

    def test_distributions_and_groupings(self):
        tuesday = MONDAY + timedelta(days=1)
        logs = [
            make_log(MONDAY, [
                make_entry(ActivityType.NETWORKING, start=_at(9), minutes=30, productivity=8,
                           energy_level=EnergyLevel.HIGH, outcomes=2),
                make_entry(ActivityType.JOB_SEARCH, start=_at(9, 30), minutes=30, productivity=4,
                           energy_level=EnergyLevel.LOW),
            ]),
            make_log(tuesday, [
                make_entry(ActivityType.JOB_SEARCH, start=_at(14, day=tuesday), minutes=30, productivity=6),
            ]),
        ]

        patterns = _analyze(logs).performance_patterns

        assert patterns.energy_level_distribution == {"High": 1, "Low": 1, "Medium": 1}
        assert patterns.focus_quality_distribution == {"Good": 3}
        assert patterns.productivity_by_day_of_week == {"Monday": 6.0, "Tuesday": 6.0}
        assert [(h.hour, h.average_productivity, h.entry_count) for h in patterns.productivity_by_time_of_day] == [
            (9, 6.0, 2),
            (14, 6.0, 1),
        ]
        assert [(a.activity, a.average_productivity, a.total_outcomes)
                for a in patterns.best_performing_activities] == [
            ("Networking", 8.0, 2),
            ("Job Search", 5.0, 0),
        ]

    def test_correlations_are_fixed(self):
        correlations = _analyze([make_log(MONDAY, [make_entry()])]).performance_patterns.correlations

        assert correlations.energy_productivity == 0.85
        assert correlations.focus_productivity == 0.90
        assert correlations.time_of_day_productivity == "Strong positive correlation with morning hours"


class TestOutcomesAndEfficiency:

    def test_outcome_analysis(self):
        entries = [
            make_entry(ActivityType.APPLICATION_SUBMISSION, start=_at(9), minutes=60, outcomes=2),
            make_entry(ActivityType.NETWORKING, start=_at(10), minutes=60, outcomes=0),
        ]
        entries[1].outcomes.append(Outcome(type=OutcomeType.NETWORKING_CONNECTION))
        log = make_log(MONDAY, entries)

        outcomes = _analyze([log]).outcome_analysis

        assert outcomes.total_outcomes == 3
        assert outcomes.outcome_types == {"Application Submitted": 2, "Networking Connection": 1}
        assert outcomes.outcomes_per_hour == 1.5
        assert outcomes.outcomes_by_activity == {"Application Submission": 2, "Networking": 1}
        assert outcomes.success_rate == 150

    def test_efficiency_metrics(self):
        log = make_log(MONDAY, [
            make_entry(start=_at(9), minutes=40, distractions=2),
            make_entry(start=_at(10), minutes=20, distractions=1),
            make_entry(start=_at(11), minutes=None, distractions=9),
        ])

        efficiency = _analyze([log]).efficiency_metrics

        assert efficiency.task_completion_rate == 100
        assert efficiency.average_task_duration == 30.0
        assert efficiency.distraction_rate == 150.0
        assert efficiency.improvement_trend == "Stable"


class TestBurnoutIntegration:

    def test_overworked_week(self):
        # 627 minutes of work + 33 minutes of break = 11 hours, 5% breaks
        logs = day_series(MONDAY, 7, work_minutes=627, break_minutes=33)

        analysis = _analyze(logs)
        burnout = analysis.burnout_indicators

        assert burnout.average_daily_hours == 11
        assert burnout.consecutive_days_worked == 7
        assert burnout.risk_level == RiskLevel.CRITICAL.value
        warning_types = [w.warning_type for w in burnout.warnings]
        assert "Overwork" in warning_types
        assert "Insufficient Breaks" in warning_types
        assert analysis.work_life_balance == WorkLifeBalance.POOR

    def test_twenty_day_streak_at_healthy_hours_is_high(self):
        logs = day_series(MONDAY, 20, work_minutes=270, break_minutes=30)

        burnout = _analyze(logs, PeriodType.MONTHLY).burnout_indicators

        assert burnout.average_daily_hours == 5
        assert burnout.consecutive_days_worked == 20
        assert burnout.risk_level == RiskLevel.HIGH.value
        assert [w.warning_type for w in burnout.warnings] == ["No Rest Days"]

    def test_empty_final_day_resets_streak_and_lowers_average(self):
        logs = day_series(MONDAY, 3, work_minutes=240)
        logs.append(TimeEntryLog(user_id=SAMPLE_USER_ID, log_date=MONDAY + timedelta(days=3)))

        burnout = _analyze(logs).burnout_indicators

        assert burnout.consecutive_days_worked == 0
        assert burnout.average_daily_hours == 3

    def test_logs_are_processed_in_date_order(self):
        logs = day_series(MONDAY, 3, work_minutes=240)
        logs.insert(0, TimeEntryLog(user_id=SAMPLE_USER_ID, log_date=MONDAY - timedelta(days=1)))

        burnout = _analyze(list(reversed(logs))).burnout_indicators

        assert burnout.consecutive_days_worked == 3

    def test_low_energy_share(self):
        logs = day_series(MONDAY, 2, work_minutes=120, break_minutes=30, energy=EnergyLevel.LOW)

        burnout = _analyze(logs).burnout_indicators

        assert burnout.energy_trend == "Critical"
        assert "Low Energy Levels" in [w.warning_type for w in burnout.warnings]


class TestDerivedViews:

    def test_efficiency_score(self):
        log = make_log(MONDAY, [
            make_entry(start=_at(9), minutes=60, productivity=5, outcomes=1,
                       focus_quality=FocusQuality.GOOD),
        ])

        analysis = _analyze([log])

        # 0.4 * 50 + 0.3 * 75 + 0.3 * 100
        assert analysis.efficiency_score == 73
        assert analysis.work_life_balance == WorkLifeBalance.EXCELLENT
        dumped = analysis.model_dump(mode="json")
        assert dumped["efficiency_score"] == 73
        assert dumped["work_life_balance"] == "Excellent"
