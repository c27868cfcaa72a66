"""
Burnout risk detection

Rules are evaluated in a fixed order and each may overwrite the risk level
assigned by the rules before it. The final "No Rest Days" rule sets the
level to High unconditionally, so it can lower an earlier Critical.
"""

from dataclasses import dataclass
from typing import List, Sequence

from analytics.numeric import round_half_up, safe_divide
from models import (
    BreakFrequency,
    BurnoutIndicators,
    BurnoutWarning,
    EnergyTrend,
    RiskLevel,
    WarningSeverity,
    WorkloadBalance,
)

OVERWORK_HOURS = 10
HIGH_WORKLOAD_HOURS = 8
BALANCED_HOURS = 6
MIN_BREAK_RATIO = 0.1
LOW_ENERGY_WARNING_PERCENT = 40
LOW_ENERGY_STABLE_PERCENT = 20
LOW_ENERGY_DECLINING_PERCENT = 35
MAX_CONSECUTIVE_DAYS = 14

ADEQUATE_BREAKS_MESSAGE = "Current break frequency is healthy"
INADEQUATE_BREAKS_MESSAGE = "Take a 10-15 minute break every 90 minutes of focused work"


@dataclass(frozen=True)
class BurnoutInputs:
    average_daily_hours: float
    total_hours: float
    break_hours: float
    low_energy_percentage: float
    consecutive_days: int

    @property
    def break_ratio(self) -> float:
        return safe_divide(self.break_hours, self.total_hours)


def trailing_active_streak(daily_hours: Sequence[float]) -> int:
    """Length of the run of days with hours > 0 ending at the last day"""
    streak = 0
    for hours in daily_hours:
        streak = streak + 1 if hours > 0 else 0
    return streak


def low_energy_percentage(low_count: int, tagged_count: int) -> float:
    return safe_divide(low_count * 100, tagged_count)


def workload_balance(average_daily_hours: float) -> WorkloadBalance:
    if average_daily_hours <= BALANCED_HOURS:
        return WorkloadBalance.BALANCED
    if average_daily_hours <= HIGH_WORKLOAD_HOURS:
        return WorkloadBalance.SLIGHTLY_HIGH
    if average_daily_hours <= OVERWORK_HOURS:
        return WorkloadBalance.HIGH
    return WorkloadBalance.OVERWORKED


def energy_trend(low_energy_percent: float) -> EnergyTrend:
    if low_energy_percent < LOW_ENERGY_STABLE_PERCENT:
        return EnergyTrend.STABLE
    if low_energy_percent < LOW_ENERGY_DECLINING_PERCENT:
        return EnergyTrend.DECLINING
    return EnergyTrend.CRITICAL


def _raise_to_moderate(level: RiskLevel) -> RiskLevel:
    return RiskLevel.MODERATE if level == RiskLevel.LOW else level


def assess_burnout(inputs: BurnoutInputs) -> BurnoutIndicators:
    risk = RiskLevel.LOW
    warnings: List[BurnoutWarning] = []

    if inputs.average_daily_hours > OVERWORK_HOURS:
        risk = RiskLevel.CRITICAL
        warnings.append(BurnoutWarning(
            warning_type="Overwork",
            severity=WarningSeverity.CRITICAL,
            message="Average daily hours exceed healthy limits. Risk of burnout is high.",
        ))
    elif inputs.average_daily_hours > HIGH_WORKLOAD_HOURS:
        risk = _raise_to_moderate(risk)
        warnings.append(BurnoutWarning(
            warning_type="High Workload",
            severity=WarningSeverity.WARNING,
            message="Consider reducing daily work hours to maintain sustainable productivity.",
        ))

    if inputs.break_ratio < MIN_BREAK_RATIO and inputs.total_hours > 0:
        risk = _raise_to_moderate(risk)
        warnings.append(BurnoutWarning(
            warning_type="Insufficient Breaks",
            severity=WarningSeverity.WARNING,
            message="Taking regular breaks is essential for sustained productivity.",
        ))

    if inputs.low_energy_percentage > LOW_ENERGY_WARNING_PERCENT:
        risk = _raise_to_moderate(risk)
        warnings.append(BurnoutWarning(
            warning_type="Low Energy Levels",
            severity=WarningSeverity.WARNING,
            message="Frequent low energy levels detected. Consider adjusting schedule or taking more rest.",
        ))

    if inputs.consecutive_days > MAX_CONSECUTIVE_DAYS:
        risk = RiskLevel.HIGH
        warnings.append(BurnoutWarning(
            warning_type="No Rest Days",
            severity=WarningSeverity.CRITICAL,
            message="Take at least one full rest day to prevent burnout.",
        ))

    adequate = inputs.break_ratio >= MIN_BREAK_RATIO
    return BurnoutIndicators(
        risk_level=risk,
        workload_balance=workload_balance(inputs.average_daily_hours),
        energy_trend=energy_trend(inputs.low_energy_percentage),
        break_frequency=BreakFrequency(
            adequate=adequate,
            recommendation=ADEQUATE_BREAKS_MESSAGE if adequate else INADEQUATE_BREAKS_MESSAGE,
        ),
        consecutive_days_worked=inputs.consecutive_days,
        average_daily_hours=round_half_up(inputs.average_daily_hours, 2),
        warnings=warnings,
    )
