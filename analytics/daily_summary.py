"""
Daily Summary aggregation

Folds one day's completed entries into a DailySummary. Called after every
entry mutation; the summary is always rebuilt from scratch.
"""

from typing import Dict, Iterable, Optional

from models import ActivityType, DailySummary, EnergyLevel, FocusQuality, TimeEntry
from analytics.numeric import round_half_up, round_int

DEFAULT_PRODUCTIVITY = 5


def entry_productivity(entry: TimeEntry) -> int:
    return entry.productivity if entry.productivity is not None else DEFAULT_PRODUCTIVITY


def summarize_day(entries: Iterable[TimeEntry]) -> Optional[DailySummary]:
    """
    Build the DailySummary for a day.

    Only completed entries (end_time set) count. Returns None when the day
    has no completed entries.
    """
    completed = [entry for entry in entries if entry.is_completed]
    if not completed:
        return None

    total_minutes = 0
    productive_minutes = 0
    break_minutes = 0
    energy_total = 0
    focus_total = 0
    productivity_total = 0
    total_outcomes = 0
    activity_breakdown: Dict[str, int] = {}

    for entry in completed:
        minutes = entry.duration or 0
        total_minutes += minutes
        if ActivityType(entry.activity) == ActivityType.BREAK:
            break_minutes += minutes
        else:
            productive_minutes += minutes

        energy_total += EnergyLevel(entry.energy_level).ordinal
        focus_total += FocusQuality(entry.focus_quality).ordinal
        productivity_total += entry_productivity(entry)
        total_outcomes += len(entry.outcomes)

        key = entry.activity_key
        activity_breakdown[key] = activity_breakdown.get(key, 0) + minutes

    count = len(completed)
    return DailySummary(
        total_hours=round_half_up(total_minutes / 60, 2),
        productive_hours=round_half_up(productive_minutes / 60, 2),
        break_hours=round_half_up(break_minutes / 60, 2),
        average_energy=EnergyLevel.from_ordinal(round_int(energy_total / count)),
        average_focus=FocusQuality.from_ordinal(round_int(focus_total / count)),
        average_productivity=round_half_up(productivity_total / count, 1),
        total_outcomes=total_outcomes,
        activity_breakdown=activity_breakdown,
    )
