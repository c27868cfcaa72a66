"""
Period Analysis Engine

Folds a date-ordered run of TimeEntryLogs into a ProductivityAnalysis.
Per-day figures come from each log's DailySummary; per-entry figures
(productivity, energy, focus, outcomes, distractions) come from the
completed entries inside the logs.
"""

import logging
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from analytics.burnout import BurnoutInputs, assess_burnout, low_energy_percentage, trailing_active_streak
from analytics.daily_summary import entry_productivity
from analytics.numeric import round_half_up, round_int, safe_divide
from errors import DataError
from models import (
    ActivityPerformance,
    AnalysisPeriod,
    EfficiencyMetrics,
    EfficiencyRating,
    EnergyLevel,
    FocusQuality,
    HourlyProductivity,
    ImprovementTrend,
    OutcomeAnalysis,
    PeakProductivityTime,
    PerformancePatterns,
    PeriodType,
    ProductivityAnalysis,
    ProductivityMetrics,
    TimeEntry,
    TimeEntryLog,
    TimeInvestment,
    TopActivity,
    WorkingHours,
)

logger = logging.getLogger(__name__)

TOP_ACTIVITY_LIMIT = 5
BEST_ACTIVITY_LIMIT = 5
FOCUS_SCALE_MAX = len(FocusQuality)
DEFAULT_AVERAGE_PRODUCTIVITY = 5
DEFAULT_FOCUS_SCORE = 50

EARLIEST_WORK_HOUR = 6
LATEST_WORK_HOUR = 22

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def hour_label(hour: int) -> str:
    """0 -> 'Midnight', 12 -> 'Noon', 13 -> '1 PM'"""
    if hour == 0:
        return "Midnight"
    if hour == 12:
        return "Noon"
    if hour < 12:
        return f"{hour} AM"
    return f"{hour - 12} PM"


HOUR_LABELS = {hour: hour_label(hour) for hour in range(24)}


def efficiency_rating(average_productivity: float) -> EfficiencyRating:
    if average_productivity >= 8:
        return EfficiencyRating.VERY_HIGH
    if average_productivity >= 6.5:
        return EfficiencyRating.HIGH
    if average_productivity >= 5:
        return EfficiencyRating.AVERAGE
    if average_productivity >= 3.5:
        return EfficiencyRating.LOW
    return EfficiencyRating.VERY_LOW


def _mean(values: Sequence[float]) -> float:
    return safe_divide(sum(values), len(values))


class _PeriodAccumulator:
    """Single pass over logs and their completed entries"""

    def __init__(self):
        self.log_count = 0
        self.active_log_count = 0
        self.daily_hours: List[float] = []

        self.total_hours = 0.0
        self.productive_hours = 0.0
        self.break_hours = 0.0
        self.total_outcomes = 0
        self.activity_minutes: Dict[str, int] = {}

        self.entry_count = 0
        self.total_minutes = 0
        self.productivity_values: List[int] = []
        self.focus_total = 0
        self.distraction_total = 0
        self.low_energy_count = 0
        self.energy_tagged_count = 0

        self.energy_distribution: Dict[str, int] = {}
        self.focus_distribution: Dict[str, int] = {}
        self.by_weekday: Dict[str, List[int]] = defaultdict(list)
        self.by_hour: Dict[int, List[int]] = defaultdict(list)
        self.by_activity: Dict[str, List[int]] = defaultdict(list)
        self.outcome_types: Dict[str, int] = {}
        self.outcomes_by_activity: Dict[str, int] = {}

    def add_log(self, log: TimeEntryLog) -> None:
        self.log_count += 1
        summary = log.daily_summary
        hours = summary.total_hours if summary else 0
        self.daily_hours.append(hours)
        if hours > 0:
            self.active_log_count += 1

        if summary:
            self.total_hours += summary.total_hours
            self.productive_hours += summary.productive_hours
            self.break_hours += summary.break_hours
            self.total_outcomes += summary.total_outcomes
            for key, minutes in summary.activity_breakdown.items():
                self.activity_minutes[key] = self.activity_minutes.get(key, 0) + minutes

        for entry in log.completed_entries:
            self.add_entry(entry)

    def add_entry(self, entry: TimeEntry) -> None:
        self.entry_count += 1
        self.total_minutes += entry.duration or 0

        productivity = entry_productivity(entry)
        self.productivity_values.append(productivity)

        energy = EnergyLevel(entry.energy_level)
        focus = FocusQuality(entry.focus_quality)
        self.energy_distribution[energy.value] = self.energy_distribution.get(energy.value, 0) + 1
        self.focus_distribution[focus.value] = self.focus_distribution.get(focus.value, 0) + 1
        self.energy_tagged_count += 1
        if energy == EnergyLevel.LOW:
            self.low_energy_count += 1
        self.focus_total += focus.ordinal
        self.distraction_total += entry.distractions

        self.by_weekday[WEEKDAY_NAMES[entry.start_time.weekday()]].append(productivity)
        self.by_hour[entry.start_time.hour].append(productivity)

        key = entry.activity_key
        self.by_activity[key].append(productivity)
        for outcome in entry.outcomes:
            self.outcome_types[outcome.type] = self.outcome_types.get(outcome.type, 0) + 1
            self.outcomes_by_activity[key] = self.outcomes_by_activity.get(key, 0) + 1

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def time_investment(self) -> TimeInvestment:
        total_minutes = self.total_hours * 60
        ranked = sorted(self.activity_minutes.items(), key=lambda item: item[1], reverse=True)
        top = [
            TopActivity(
                activity=key,
                hours=round_half_up(minutes / 60, 2),
                percentage=round_half_up(safe_divide(minutes * 100, total_minutes), 1),
            )
            for key, minutes in ranked[:TOP_ACTIVITY_LIMIT]
        ]
        return TimeInvestment(
            total_hours=round_half_up(self.total_hours, 2),
            productive_hours=round_half_up(self.productive_hours, 2),
            break_hours=round_half_up(self.break_hours, 2),
            activity_distribution=dict(self.activity_minutes),
            top_activities=top,
        )

    def peak_hour(self) -> Optional[int]:
        best_hour = None
        best_mean = None
        for hour in sorted(self.by_hour):
            mean = _mean(self.by_hour[hour])
            if best_mean is None or mean > best_mean:
                best_hour, best_mean = hour, mean
        return best_hour

    def productivity_metrics(self) -> ProductivityMetrics:
        if self.productivity_values:
            average = round_half_up(_mean(self.productivity_values), 1)
        else:
            average = DEFAULT_AVERAGE_PRODUCTIVITY

        peak = self.peak_hour()
        if peak is None:
            peak_time = None
            working_hours = WorkingHours()
        else:
            peak_time = PeakProductivityTime(hour=peak, label=HOUR_LABELS[peak])
            working_hours = WorkingHours(
                start=max(EARLIEST_WORK_HOUR, peak - 2),
                end=min(LATEST_WORK_HOUR, peak + 6),
            )

        if self.entry_count:
            focus_score = round_int(self.focus_total * 100 / (self.entry_count * FOCUS_SCALE_MAX))
        else:
            focus_score = DEFAULT_FOCUS_SCORE

        return ProductivityMetrics(
            average_productivity=average,
            peak_productivity_time=peak_time,
            optimal_working_hours=working_hours,
            consistency_score=round_int(safe_divide(self.active_log_count * 100, self.log_count)),
            focus_score=focus_score,
            efficiency_rating=efficiency_rating(average),
        )

    def performance_patterns(self) -> PerformancePatterns:
        by_time_of_day = [
            HourlyProductivity(
                hour=hour,
                average_productivity=round_half_up(_mean(values), 1),
                entry_count=len(values),
            )
            for hour, values in sorted(self.by_hour.items())
        ]

        activity_means = [
            (key, round_half_up(_mean(values), 1)) for key, values in self.by_activity.items()
        ]
        activity_means.sort(key=lambda item: item[1], reverse=True)
        best = [
            ActivityPerformance(
                activity=key,
                average_productivity=mean,
                total_outcomes=self.outcomes_by_activity.get(key, 0),
            )
            for key, mean in activity_means[:BEST_ACTIVITY_LIMIT]
        ]

        return PerformancePatterns(
            energy_level_distribution=dict(self.energy_distribution),
            focus_quality_distribution=dict(self.focus_distribution),
            productivity_by_day_of_week={
                day: round_half_up(_mean(values), 1) for day, values in self.by_weekday.items()
            },
            productivity_by_time_of_day=by_time_of_day,
            best_performing_activities=best,
        )

    def outcome_analysis(self) -> OutcomeAnalysis:
        entry_outcomes = sum(self.outcomes_by_activity.values())
        return OutcomeAnalysis(
            total_outcomes=self.total_outcomes,
            outcome_types=dict(self.outcome_types),
            outcomes_per_hour=round_half_up(safe_divide(self.total_outcomes, self.total_hours), 2),
            outcomes_by_activity=dict(self.outcomes_by_activity),
            success_rate=round_int(safe_divide(entry_outcomes * 100, self.entry_count)),
        )

    def efficiency_metrics(self) -> EfficiencyMetrics:
        # Only completed entries are accumulated, so completion is 100 whenever any exist
        return EfficiencyMetrics(
            task_completion_rate=round_int(safe_divide(self.entry_count * 100, self.entry_count)),
            average_task_duration=round_half_up(safe_divide(self.total_hours * 60, self.entry_count), 1),
            distraction_rate=round_half_up(safe_divide(self.distraction_total * 100, self.entry_count), 1),
            improvement_trend=ImprovementTrend.STABLE,
        )

    def burnout_inputs(self) -> BurnoutInputs:
        return BurnoutInputs(
            average_daily_hours=_mean(self.daily_hours),
            total_hours=self.total_hours,
            break_hours=self.break_hours,
            low_energy_percentage=low_energy_percentage(self.low_energy_count, self.energy_tagged_count),
            consecutive_days=trailing_active_streak(self.daily_hours),
        )


def analyze_period(
    logs: Iterable[TimeEntryLog],
    user_id: str,
    start_date: date,
    end_date: date,
    period_type: PeriodType = PeriodType.CUSTOM,
) -> ProductivityAnalysis:
    """
    Build a ProductivityAnalysis over the given logs.

    Logs are processed in date order regardless of input order.
    Raises DataError if there are no logs.
    """
    ordered = sorted(logs, key=lambda log: log.log_date)
    if not ordered:
        raise DataError(
            f"No time tracking data between {start_date} and {end_date}. "
            "Log some time entries before generating an analysis."
        )

    acc = _PeriodAccumulator()
    for log in ordered:
        acc.add_log(log)

    analysis = ProductivityAnalysis(
        user_id=user_id,
        period=AnalysisPeriod(start_date=start_date, end_date=end_date, period_type=period_type),
        time_investment=acc.time_investment(),
        productivity_metrics=acc.productivity_metrics(),
        performance_patterns=acc.performance_patterns(),
        outcome_analysis=acc.outcome_analysis(),
        efficiency_metrics=acc.efficiency_metrics(),
        burnout_indicators=assess_burnout(acc.burnout_inputs()),
    )
    logger.info(
        f"Analyzed {acc.log_count} logs / {acc.entry_count} entries for {user_id} "
        f"({start_date} to {end_date}): risk={analysis.burnout_indicators.risk_level}"
    )
    return analysis
