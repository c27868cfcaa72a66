"""Lightweight rollups for dashboards and period comparison"""

from datetime import date
from typing import Iterable

from analytics.numeric import round_half_up, safe_divide
from models import (
    ComparisonChanges,
    DateRange,
    PeriodComparison,
    PeriodStats,
    ProductivityTrend,
    TimeEntryLog,
    TimeStats,
)


def compute_time_stats(logs: Iterable[TimeEntryLog]) -> TimeStats:
    """Sum the daily summaries of the given logs"""
    logs = sorted(logs, key=lambda log: log.log_date)

    total_hours = 0.0
    productive_hours = 0.0
    total_outcomes = 0
    productivity_values = []
    activity_totals = {}

    for log in logs:
        summary = log.daily_summary
        if summary is None:
            continue
        total_hours += summary.total_hours
        productive_hours += summary.productive_hours
        total_outcomes += summary.total_outcomes
        productivity_values.append(summary.average_productivity)
        for key, minutes in summary.activity_breakdown.items():
            activity_totals[key] = activity_totals.get(key, 0) + minutes

    days_tracked = len(logs)
    return TimeStats(
        total_hours=round_half_up(total_hours, 2),
        productive_hours=round_half_up(productive_hours, 2),
        average_hours_per_day=round_half_up(safe_divide(total_hours, days_tracked), 2),
        average_productivity=round_half_up(safe_divide(sum(productivity_values), len(productivity_values)), 1),
        total_outcomes=total_outcomes,
        activity_totals=activity_totals,
        days_tracked=days_tracked,
        logs=logs,
    )


def _percent_change(before: float, after: float) -> float:
    if not before:
        return 0
    return round_half_up((after - before) / before * 100, 1)


def productivity_trend(before: float, after: float) -> ProductivityTrend:
    if after > before:
        return ProductivityTrend.IMPROVING
    if after < before:
        return ProductivityTrend.DECLINING
    return ProductivityTrend.STABLE


def compare_periods(
    period1_start: date,
    period1_end: date,
    period1: TimeStats,
    period2_start: date,
    period2_end: date,
    period2: TimeStats,
) -> PeriodComparison:
    """Describe how period2 changed relative to period1"""
    changes = ComparisonChanges(
        hours_change=round_half_up(period2.total_hours - period1.total_hours, 2),
        hours_change_percentage=_percent_change(period1.total_hours, period2.total_hours),
        productivity_change=round_half_up(period2.average_productivity - period1.average_productivity, 2),
        outcomes_change=period2.total_outcomes - period1.total_outcomes,
        outcomes_change_percentage=_percent_change(period1.total_outcomes, period2.total_outcomes),
        trend=productivity_trend(period1.average_productivity, period2.average_productivity),
    )
    return PeriodComparison(
        period1=PeriodStats(dates=DateRange(start_date=period1_start, end_date=period1_end), stats=period1),
        period2=PeriodStats(dates=DateRange(start_date=period2_start, end_date=period2_end), stats=period2),
        changes=changes,
    )
