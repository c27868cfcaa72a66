"""
Repository layer for database operations
Loads and saves time entry logs and productivity analysis snapshots
"""

import logging
from typing import List, Optional, Union
from uuid import UUID
from datetime import date

from database import DatabaseConnection
from models import (
    AnalysisPeriod,
    PeriodType,
    ProductivityAnalysis,
    Recommendation,
    TimeEntryLog,
)

logger = logging.getLogger(__name__)

ANALYSIS_SECTIONS = (
    "time_investment",
    "productivity_metrics",
    "performance_patterns",
    "outcome_analysis",
    "efficiency_metrics",
    "burnout_indicators",
)


class BaseRepository:
    """Base repository with common operations"""

    def __init__(self, db: DatabaseConnection):
        self.db = db


class TimeEntryLogRepository(BaseRepository):
    """Repository for per-day time entry logs"""

    @staticmethod
    def _row_to_log(row) -> Optional[TimeEntryLog]:
        if row is None:
            return None
        return TimeEntryLog.model_validate(dict(row))

    async def get_by_date(self, user_id: str, log_date: date) -> Optional[TimeEntryLog]:
        """Get the log for one user and day"""
        query = """
            SELECT * FROM time_entry_logs
            WHERE user_id = $1 AND log_date = $2
        """
        row = await self.db.fetchrow(query, user_id, log_date)
        return self._row_to_log(row)

    async def get_or_create(self, user_id: str, log_date: date) -> TimeEntryLog:
        """Fetch the day's log, creating an empty one on first access"""
        insert_query = """
            INSERT INTO time_entry_logs (user_id, log_date)
            VALUES ($1, $2)
            ON CONFLICT (user_id, log_date) DO NOTHING
        """
        status = await self.db.execute(insert_query, user_id, log_date)
        if status.endswith(" 1"):
            logger.info(f"Created time entry log for {user_id} on {log_date}")
        log = await self.get_by_date(user_id, log_date)
        if log is None:
            raise RuntimeError(f"Time entry log for {user_id} on {log_date} vanished after insert")
        return log

    async def save(self, log: TimeEntryLog) -> TimeEntryLog:
        """
        Write the whole log (entries and summary) as one unit.

        Upserts on (user_id, log_date); a concurrent writer on the same day
        is overwritten.
        """
        query = """
            INSERT INTO time_entry_logs (id, user_id, log_date, entries, daily_summary)
            VALUES ($1, $2, $3, $4, $5)
            ON CONFLICT (user_id, log_date) DO UPDATE SET
                entries = EXCLUDED.entries,
                daily_summary = EXCLUDED.daily_summary,
                updated_at = NOW()
            RETURNING *
        """
        entries = [entry.model_dump(mode="json") for entry in log.entries]
        summary = log.daily_summary.model_dump(mode="json") if log.daily_summary else None
        row = await self.db.fetchrow(query, log.id, log.user_id, log.log_date, entries, summary)
        return self._row_to_log(row)

    async def list_by_date_range(self, user_id: str, start_date: date, end_date: date) -> List[TimeEntryLog]:
        """Logs with log_date in [start_date, end_date], oldest first"""
        query = """
            SELECT * FROM time_entry_logs
            WHERE user_id = $1 AND log_date BETWEEN $2 AND $3
            ORDER BY log_date ASC
        """
        rows = await self.db.fetch(query, user_id, start_date, end_date)
        return [self._row_to_log(row) for row in rows]


class ProductivityAnalysisRepository(BaseRepository):
    """Repository for generated productivity analysis snapshots"""

    @staticmethod
    def _row_to_analysis(row) -> Optional[ProductivityAnalysis]:
        if row is None:
            return None
        data = dict(row)
        data["period"] = AnalysisPeriod(
            start_date=data.pop("start_date"),
            end_date=data.pop("end_date"),
            period_type=data.pop("period_type"),
        )
        return ProductivityAnalysis.model_validate(data)

    async def create(self, analysis: ProductivityAnalysis) -> ProductivityAnalysis:
        """Persist a freshly generated report"""
        payload = analysis.model_dump(mode="json")
        query = """
            INSERT INTO productivity_analyses (
                id, user_id, period_type, start_date, end_date,
                time_investment, productivity_metrics, performance_patterns,
                outcome_analysis, efficiency_metrics, burnout_indicators,
                recommendations
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12)
            RETURNING *
        """
        row = await self.db.fetchrow(
            query,
            analysis.id,
            analysis.user_id,
            analysis.period.period_type,
            analysis.period.start_date,
            analysis.period.end_date,
            *[payload[section] for section in ANALYSIS_SECTIONS],
            payload["recommendations"],
        )
        logger.info(f"Stored productivity analysis {analysis.id} for {analysis.user_id}")
        return self._row_to_analysis(row)

    async def get_by_id(self, analysis_id: UUID, user_id: Optional[str] = None) -> Optional[ProductivityAnalysis]:
        """Get a report by ID, optionally scoped to its owner"""
        if user_id is None:
            row = await self.db.fetchrow("SELECT * FROM productivity_analyses WHERE id = $1", analysis_id)
        else:
            row = await self.db.fetchrow(
                "SELECT * FROM productivity_analyses WHERE id = $1 AND user_id = $2",
                analysis_id, user_id,
            )
        return self._row_to_analysis(row)

    async def list_for_user(
        self,
        user_id: str,
        period_type: Optional[Union[PeriodType, str]] = None,
        limit: int = 10,
    ) -> List[ProductivityAnalysis]:
        """Most recent reports first"""
        if period_type is None:
            query = """
                SELECT * FROM productivity_analyses
                WHERE user_id = $1
                ORDER BY created_at DESC
                LIMIT $2
            """
            rows = await self.db.fetch(query, user_id, limit)
        else:
            query = """
                SELECT * FROM productivity_analyses
                WHERE user_id = $1 AND period_type = $2
                ORDER BY created_at DESC
                LIMIT $3
            """
            rows = await self.db.fetch(query, user_id, PeriodType(period_type).value, limit)
        return [self._row_to_analysis(row) for row in rows]

    async def set_recommendations(
        self,
        analysis_id: UUID,
        recommendations: List[Recommendation],
    ) -> Optional[ProductivityAnalysis]:
        """The one mutation a stored report accepts"""
        query = """
            UPDATE productivity_analyses
            SET recommendations = $2, updated_at = NOW()
            WHERE id = $1
            RETURNING *
        """
        payload = [rec.model_dump(mode="json") for rec in recommendations]
        row = await self.db.fetchrow(query, analysis_id, payload)
        return self._row_to_analysis(row)
