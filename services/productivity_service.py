"""
Productivity Service

Orchestrates the analytics engine over the repositories: loads a day's
log, mutates it, saves it back as one unit, and runs period analysis over
stored logs. All inputs are validated before anything is written.
"""

import asyncio
import calendar
import logging
from contextlib import asynccontextmanager
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple, Union
from uuid import UUID

from analytics import entry_log
from analytics.period_analysis import analyze_period
from analytics.stats import compare_periods, compute_time_stats
from errors import DataError, NotFoundError, ValidationError
from models import (
    OptimalSchedule,
    PeriodComparison,
    PeriodType,
    ProductivityAnalysis,
    ProductivityDashboard,
    ProductivityInsight,
    QuickStats,
    TimeEntryLog,
    TimeStats,
)
from repositories import ProductivityAnalysisRepository, TimeEntryLogRepository
from services.goals import GoalProvider, StaticGoalProvider
from services.recommendation_service import RecommendationService

logger = logging.getLogger(__name__)

DateInput = Union[date, datetime, str, None]

DASHBOARD_RECENT_ANALYSES = 3
DASHBOARD_GOAL_LIMIT = 5
WEEK_DAYS = 7
SCHEDULE_HISTORY_DAYS = 30
DEFAULT_LIST_LIMIT = 10

NOT_ENOUGH_SCHEDULE_DATA = "Not enough data to generate optimal schedule. Track your time for at least a week."


def parse_date(value: DateInput, field_name: str) -> date:
    """Accept a date, datetime or ISO 'YYYY-MM-DD' string; anything else is a ValidationError"""
    if value is None or value == "":
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError as e:
        raise ValidationError(f"{field_name} must be an ISO date (YYYY-MM-DD), got {value!r}") from e


def parse_date_range(start: DateInput, end: DateInput, prefix: str = "") -> Tuple[date, date]:
    start_date = parse_date(start, f"{prefix}start_date")
    end_date = parse_date(end, f"{prefix}end_date")
    if end_date < start_date:
        raise ValidationError(f"{prefix}end_date ({end_date}) is before {prefix}start_date ({start_date})")
    return start_date, end_date


def parse_period_type(value: Union[PeriodType, str, None]) -> PeriodType:
    if value is None or value == "":
        return PeriodType.CUSTOM
    try:
        return PeriodType(value)
    except ValueError as e:
        valid = ", ".join(p.value for p in PeriodType)
        raise ValidationError(f"Invalid period_type {value!r}. Valid values: {valid}") from e


def parse_limit(value: Union[int, str, None], default: int = DEFAULT_LIST_LIMIT) -> int:
    """None means the default; anything that is not a whole number >= 1 is a ValidationError"""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ValidationError(f"limit must be a whole number, got {value!r}")
    try:
        limit = int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"limit must be a whole number, got {value!r}") from e
    if limit != value and not isinstance(value, str):
        raise ValidationError(f"limit must be a whole number, got {value!r}")
    if limit < 1:
        raise ValidationError("limit must be at least 1")
    return limit


def one_month_before(day: date) -> date:
    """Same day of the previous month, clamped to that month's last day"""
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


class DayLockRegistry:
    """
    One asyncio.Lock per (user, day) so a load-mutate-save never interleaves in-process.

    A lock is dropped once nobody holds or waits for it.
    """

    def __init__(self):
        self._locks: Dict[Tuple[str, date], asyncio.Lock] = {}
        self._users: Dict[Tuple[str, date], int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, user_id: str, log_date: date):
        key = (user_id, log_date)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]


class ProductivityService:
    """Time tracking and productivity analysis operations"""

    def __init__(
        self,
        time_logs: TimeEntryLogRepository,
        analyses: ProductivityAnalysisRepository,
        recommendations: Optional[RecommendationService] = None,
        goals: Optional[GoalProvider] = None,
    ):
        self.time_logs = time_logs
        self.analyses = analyses
        self.recommendations = recommendations or RecommendationService()
        self.goals = goals or StaticGoalProvider()
        self.locks = DayLockRegistry()

    # ------------------------------------------------------------------
    # Day logs
    # ------------------------------------------------------------------

    async def upsert_day_log(self, user_id: str, log_date: DateInput) -> TimeEntryLog:
        """Fetch the day's log, creating it if this is the first access"""
        day = parse_date(log_date, "date")
        return await self.time_logs.get_or_create(user_id, day)

    async def get_day_log(self, user_id: str, log_date: DateInput) -> Optional[TimeEntryLog]:
        day = parse_date(log_date, "date")
        return await self.time_logs.get_by_date(user_id, day)

    async def get_logs_in_range(self, user_id: str, start_date: DateInput, end_date: DateInput) -> List[TimeEntryLog]:
        start, end = parse_date_range(start_date, end_date)
        return await self.time_logs.list_by_date_range(user_id, start, end)

    async def add_entry(self, user_id: str, log_date: DateInput, data: Dict[str, Any]) -> TimeEntryLog:
        """Validate, then append the entry to the day's log (created lazily)"""
        day = parse_date(log_date, "date")
        entry = entry_log.parse_entry_create(data)

        async with self.locks.hold(user_id, day):
            log = await self.time_logs.get_or_create(user_id, day)
            entry_log.add_entry(log, entry)
            saved = await self.time_logs.save(log)

        logger.info(f"Added {entry.activity} entry {entry.id} for {user_id} on {day}")
        return saved

    async def update_entry(
        self,
        user_id: str,
        log_date: DateInput,
        entry_id: Union[str, UUID],
        patch: Dict[str, Any],
    ) -> TimeEntryLog:
        day = parse_date(log_date, "date")
        target_id = entry_log.parse_entry_id(entry_id)
        update = entry_log.parse_entry_update(patch)

        async with self.locks.hold(user_id, day):
            log = await self._require_log(user_id, day)
            entry_log.update_entry(log, target_id, update)
            saved = await self.time_logs.save(log)

        logger.info(f"Updated entry {target_id} for {user_id} on {day}")
        return saved

    async def delete_entry(self, user_id: str, log_date: DateInput, entry_id: Union[str, UUID]) -> TimeEntryLog:
        day = parse_date(log_date, "date")
        target_id = entry_log.parse_entry_id(entry_id)

        async with self.locks.hold(user_id, day):
            log = await self._require_log(user_id, day)
            entry_log.delete_entry(log, target_id)
            saved = await self.time_logs.save(log)

        logger.info(f"Deleted entry {target_id} for {user_id} on {day}")
        return saved

    async def _require_log(self, user_id: str, day: date) -> TimeEntryLog:
        log = await self.time_logs.get_by_date(user_id, day)
        if log is None:
            raise NotFoundError(f"No time entry log for {user_id} on {day}")
        return log

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    async def get_stats(self, user_id: str, start_date: DateInput, end_date: DateInput) -> TimeStats:
        logs = await self.get_logs_in_range(user_id, start_date, end_date)
        return compute_time_stats(logs)

    async def compare_periods(
        self,
        user_id: str,
        period1_start: DateInput,
        period1_end: DateInput,
        period2_start: DateInput,
        period2_end: DateInput,
    ) -> PeriodComparison:
        p1_start, p1_end = parse_date_range(period1_start, period1_end, "period1_")
        p2_start, p2_end = parse_date_range(period2_start, period2_end, "period2_")

        period1 = compute_time_stats(await self.time_logs.list_by_date_range(user_id, p1_start, p1_end))
        period2 = compute_time_stats(await self.time_logs.list_by_date_range(user_id, p2_start, p2_end))
        return compare_periods(p1_start, p1_end, period1, p2_start, p2_end, period2)

    # ------------------------------------------------------------------
    # Analyses
    # ------------------------------------------------------------------

    async def generate_analysis(
        self,
        user_id: str,
        start_date: DateInput,
        end_date: DateInput,
        period_type: Union[PeriodType, str, None] = None,
    ) -> ProductivityAnalysis:
        """
        Run the period analysis, persist the report, then attach recommendations.

        Raises DataError (nothing persisted) when the range holds no logs.
        Recommendation failures leave the report without recommendations.
        """
        start, end = parse_date_range(start_date, end_date)
        kind = parse_period_type(period_type)

        logs = await self.time_logs.list_by_date_range(user_id, start, end)
        analysis = analyze_period(logs, user_id, start, end, kind)
        stored = await self.analyses.create(analysis)
        logger.info(f"Generated {kind.value} analysis {stored.id} for {user_id} ({start} to {end})")

        try:
            goals = await self.goals.list_active_goals(user_id)
            recommendations = await self.recommendations.generate(stored, goals)
            if not recommendations:
                logger.warning(f"No recommendations available for analysis {stored.id}")
                return stored
            updated = await self.analyses.set_recommendations(stored.id, recommendations)
        except Exception as e:
            logger.warning(f"Recommendations not attached to analysis {stored.id}: {e}", exc_info=True)
            return stored
        return updated if updated is not None else stored

    async def get_analysis(self, analysis_id: Union[str, UUID], user_id: Optional[str] = None) -> ProductivityAnalysis:
        try:
            target_id = analysis_id if isinstance(analysis_id, UUID) else UUID(str(analysis_id))
        except ValueError as e:
            raise ValidationError(f"Invalid analysis id: {analysis_id!r}") from e

        analysis = await self.analyses.get_by_id(target_id, user_id)
        if analysis is None:
            raise NotFoundError(f"Productivity analysis {target_id} not found")
        return analysis

    async def list_analyses(
        self,
        user_id: str,
        period_type: Union[PeriodType, str, None] = None,
        limit: Union[int, str, None] = None,
    ) -> List[ProductivityAnalysis]:
        kind = parse_period_type(period_type) if period_type else None
        return await self.analyses.list_for_user(user_id, kind, parse_limit(limit))

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    async def get_dashboard(self, user_id: str, today: DateInput = None) -> ProductivityDashboard:
        day = parse_date(today, "today") if today else date.today()
        week_start = day - timedelta(days=WEEK_DAYS)
        month_start = one_month_before(day)

        today_log = await self.time_logs.get_by_date(user_id, day)
        week_stats = compute_time_stats(await self.time_logs.list_by_date_range(user_id, week_start, day))
        month_stats = compute_time_stats(await self.time_logs.list_by_date_range(user_id, month_start, day))
        recent = await self.analyses.list_for_user(user_id, None, DASHBOARD_RECENT_ANALYSES)
        goals = await self.goals.list_active_goals(user_id)

        current_entry = today_log.active_entry if today_log else None
        return ProductivityDashboard(
            today_log=today_log,
            current_entry=current_entry,
            has_active_entry=current_entry is not None,
            week_stats=week_stats,
            month_stats=month_stats,
            recent_analyses=recent,
            active_goals=goals[:DASHBOARD_GOAL_LIMIT],
            quick_stats=QuickStats(
                today_hours=today_log.total_hours if today_log else 0,
                week_hours=week_stats.total_hours,
                month_hours=month_stats.total_hours,
                week_productivity=week_stats.average_productivity,
                month_productivity=month_stats.average_productivity,
            ),
        )

    # ------------------------------------------------------------------
    # Coaching
    # ------------------------------------------------------------------

    async def get_insights(self, user_id: str, start_date: DateInput, end_date: DateInput) -> List[ProductivityInsight]:
        """LLM insights over the range's stats; [] when the LLM is unavailable"""
        stats = await self.get_stats(user_id, start_date, end_date)
        return await self.recommendations.generate_insights(stats)

    async def get_optimal_schedule(self, user_id: str, today: DateInput = None) -> Optional[OptimalSchedule]:
        """
        Suggest a daily schedule from the last 30 days of tracking.

        Raises DataError when nothing was tracked in that window.
        Returns None when the LLM is unavailable or its reply is unusable.
        """
        day = parse_date(today, "today") if today else date.today()
        start = day - timedelta(days=SCHEDULE_HISTORY_DAYS)
        stats = compute_time_stats(await self.time_logs.list_by_date_range(user_id, start, day))
        if stats.days_tracked == 0:
            raise DataError(NOT_ENOUGH_SCHEDULE_DATA)

        goals = await self.goals.list_active_goals(user_id)
        return await self.recommendations.generate_schedule(stats, goals)
