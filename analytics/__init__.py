"""
Productivity analytics engine

Pure functions over models; no I/O. Services load logs, call into here,
and persist the results.
"""

from analytics.daily_summary import summarize_day
from analytics.entry_log import add_entry, update_entry, delete_entry, refresh_summary
from analytics.period_analysis import analyze_period, efficiency_rating, hour_label
from analytics.burnout import BurnoutInputs, assess_burnout
from analytics.stats import compute_time_stats, compare_periods

__all__ = [
    "summarize_day",
    "add_entry",
    "update_entry",
    "delete_entry",
    "refresh_summary",
    "analyze_period",
    "efficiency_rating",
    "hour_label",
    "BurnoutInputs",
    "assess_burnout",
    "compute_time_stats",
    "compare_periods",
]
