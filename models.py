"""
Data models for the job-search productivity tracker
Using Pydantic for validation and serialization

ARCHITECTURE:
- A TimeEntryLog is the aggregate root: one per user per calendar day
- The log owns its ordered TimeEntry list and a derived DailySummary
- ProductivityAnalysis is an immutable report over a range of logs
"""

from datetime import datetime, date
from typing import Annotated, Any, Optional, List, Dict
from uuid import UUID, uuid4
from enum import Enum
from pydantic import BaseModel, Field, field_validator, model_validator, computed_field, ConfigDict


# ============================================================================
# Enums
# ============================================================================

class ActivityType(str, Enum):
    """Job-search activities a block of time can be logged against"""
    JOB_SEARCH = "Job Search"
    RESUME_WRITING = "Resume Writing"
    COVER_LETTER_WRITING = "Cover Letter Writing"
    APPLICATION_SUBMISSION = "Application Submission"
    NETWORKING = "Networking"
    SKILL_DEVELOPMENT = "Skill Development"
    INTERVIEW_PREPARATION = "Interview Preparation"
    MOCK_INTERVIEWS = "Mock Interviews"
    COMPANY_RESEARCH = "Company Research"
    PORTFOLIO_WORK = "Portfolio Work"
    LINKEDIN_ACTIVITY = "LinkedIn Activity"
    FOLLOW_UPS = "Follow-ups"
    CAREER_PLANNING = "Career Planning"
    BREAK = "Break"
    OTHER = "Other"


class OrdinalScale(str, Enum):
    """Ranked label set; ordinals run 1..len(members) in declaration order"""

    @property
    def ordinal(self) -> int:
        return list(type(self)).index(self) + 1

    @classmethod
    def from_ordinal(cls, value: int):
        members = list(cls)
        index = min(max(int(value), 1), len(members)) - 1
        return members[index]


class EnergyLevel(OrdinalScale):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    PEAK = "Peak"


class FocusQuality(OrdinalScale):
    POOR = "Poor"
    FAIR = "Fair"
    GOOD = "Good"
    EXCELLENT = "Excellent"


class OutcomeType(str, Enum):
    """Concrete results an entry can produce"""
    APPLICATION_SUBMITTED = "Application Submitted"
    INTERVIEW_SCHEDULED = "Interview Scheduled"
    NETWORKING_CONNECTION = "Networking Connection"
    REFERRAL_OBTAINED = "Referral Obtained"
    RESPONSE_RECEIVED = "Response Received"
    OFFER_RECEIVED = "Offer Received"
    SKILL_ACQUIRED = "Skill Acquired"
    DOCUMENT_COMPLETED = "Document Completed"
    OTHER = "Other"


class PeriodType(str, Enum):
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    CUSTOM = "Custom"


class EfficiencyRating(str, Enum):
    VERY_LOW = "Very Low"
    LOW = "Low"
    AVERAGE = "Average"
    HIGH = "High"
    VERY_HIGH = "Very High"


class ImprovementTrend(str, Enum):
    DECLINING = "Declining"
    STABLE = "Stable"
    IMPROVING = "Improving"
    SIGNIFICANTLY_IMPROVING = "Significantly Improving"


class RiskLevel(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    CRITICAL = "Critical"


class WorkloadBalance(str, Enum):
    BALANCED = "Balanced"
    SLIGHTLY_HIGH = "Slightly High"
    HIGH = "High"
    OVERWORKED = "Overworked"


class EnergyTrend(str, Enum):
    INCREASING = "Increasing"
    STABLE = "Stable"
    DECLINING = "Declining"
    CRITICAL = "Critical"


class WarningSeverity(str, Enum):
    INFO = "Info"
    WARNING = "Warning"
    CRITICAL = "Critical"


class WorkLifeBalance(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    CRITICAL = "Critical"


class RecommendationCategory(str, Enum):
    TIME_ALLOCATION = "Time Allocation"
    SCHEDULE_OPTIMIZATION = "Schedule Optimization"
    ENERGY_MANAGEMENT = "Energy Management"
    EFFICIENCY = "Efficiency"
    BURNOUT_PREVENTION = "Burnout Prevention"
    WORK_LIFE_BALANCE = "Work-Life Balance"
    ACTIVITY_BALANCE = "Activity Balance"


class RecommendationPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class ImpactLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ProductivityTrend(str, Enum):
    IMPROVING = "Improving"
    STABLE = "Stable"
    DECLINING = "Declining"


class InsightType(str, Enum):
    PATTERN = "Pattern"
    ACHIEVEMENT = "Achievement"
    OPPORTUNITY = "Opportunity"
    WARNING = "Warning"
    TREND = "Trend"


# ============================================================================
# Base Models
# ============================================================================

class BaseEntity(BaseModel):
    """Base model for persisted rows"""
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class ValueModel(BaseModel):
    """Base for embedded (JSONB) documents"""
    model_config = ConfigDict(use_enum_values=True)


# ============================================================================
# Time Entry Models
# ============================================================================

class Outcome(ValueModel):
    type: OutcomeType
    description: Optional[str] = Field(None, max_length=500)


class LinkedEntities(ValueModel):
    """Weak lookup-only references; never required for aggregation"""
    job_id: Optional[str] = None
    application_id: Optional[str] = None
    goal_id: Optional[str] = None


def _check_time_order(start_time: Optional[datetime], end_time: Optional[datetime]) -> None:
    if start_time is None or end_time is None:
        return
    if (start_time.tzinfo is None) != (end_time.tzinfo is None):
        raise ValueError("start_time and end_time must both be timezone-aware or both naive")
    if end_time < start_time:
        raise ValueError("end_time must not be before start_time")


class TimeEntry(ValueModel):
    """One tracked activity block. Open while end_time is unset."""
    id: UUID = Field(default_factory=uuid4)
    activity: ActivityType
    custom_activity: Optional[str] = Field(None, max_length=100)

    start_time: datetime
    end_time: Optional[datetime] = None
    duration: Optional[int] = Field(None, ge=0)  # minutes, derived from start/end

    energy_level: EnergyLevel = EnergyLevel.MEDIUM
    focus_quality: FocusQuality = FocusQuality.GOOD
    distractions: int = Field(0, ge=0)
    productivity: Optional[int] = Field(None, ge=1, le=10)

    outcomes: List[Outcome] = Field(default_factory=list)
    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    linked_entities: LinkedEntities = Field(default_factory=LinkedEntities)

    created_at: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="after")
    def derive_duration(self):
        _check_time_order(self.start_time, self.end_time)
        if self.end_time is not None:
            seconds = (self.end_time - self.start_time).total_seconds()
            self.duration = int(seconds / 60 + 0.5)
        else:
            self.duration = None
        return self

    @property
    def is_completed(self) -> bool:
        return self.end_time is not None

    @property
    def activity_key(self) -> str:
        """Aggregation key: custom label for 'Other' entries, else the activity"""
        activity = ActivityType(self.activity)
        if activity == ActivityType.OTHER and self.custom_activity:
            return self.custom_activity
        return activity.value


class TimeEntryCreate(BaseModel):
    """Add-entry request. Duration is never accepted from the caller."""
    model_config = ConfigDict(extra="ignore")

    activity: ActivityType
    custom_activity: Optional[str] = Field(None, max_length=100)
    start_time: datetime
    end_time: Optional[datetime] = None
    energy_level: EnergyLevel = EnergyLevel.MEDIUM
    focus_quality: FocusQuality = FocusQuality.GOOD
    distractions: int = Field(0, ge=0)
    productivity: Optional[int] = Field(None, ge=1, le=10)
    outcomes: List[Outcome] = Field(default_factory=list)
    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    linked_entities: LinkedEntities = Field(default_factory=LinkedEntities)

    @field_validator('tags', mode='before')
    @classmethod
    def clean_tags(cls, v):
        if v is None:
            return []
        return [tag.strip() for tag in v if isinstance(tag, str) and tag.strip()]


class TimeEntryUpdate(BaseModel):
    """Partial update; only fields explicitly provided are merged"""
    model_config = ConfigDict(extra="ignore")

    activity: Optional[ActivityType] = None
    custom_activity: Optional[str] = Field(None, max_length=100)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    energy_level: Optional[EnergyLevel] = None
    focus_quality: Optional[FocusQuality] = None
    distractions: Optional[int] = Field(None, ge=0)
    productivity: Optional[int] = Field(None, ge=1, le=10)
    outcomes: Optional[List[Outcome]] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    linked_entities: Optional[LinkedEntities] = None


class DailySummary(ValueModel):
    """Derived aggregate of one day's completed entries; never authored directly"""
    total_hours: float = 0
    productive_hours: float = 0
    break_hours: float = 0
    average_energy: Optional[EnergyLevel] = None
    average_focus: Optional[FocusQuality] = None
    average_productivity: float = 0
    total_outcomes: int = 0
    activity_breakdown: Dict[str, int] = Field(default_factory=dict)  # activity key -> minutes


class TimeEntryLog(BaseEntity):
    """All entries a user logged on one calendar day"""
    user_id: str = Field(..., min_length=1)
    log_date: date
    entries: List[TimeEntry] = Field(default_factory=list)
    daily_summary: Optional[DailySummary] = None

    @field_validator('entries', mode='before')
    @classmethod
    def ensure_entries_is_list(cls, v):
        """Ensure entries is always a list, even if None from database"""
        if v is None:
            return []
        return v

    @property
    def completed_entries(self) -> List[TimeEntry]:
        return [entry for entry in self.entries if entry.is_completed]

    @property
    def active_entry(self) -> Optional[TimeEntry]:
        """The entry still being tracked, if any"""
        return next((entry for entry in self.entries if not entry.is_completed), None)

    @property
    def total_hours(self) -> float:
        return self.daily_summary.total_hours if self.daily_summary else 0

    def find_entry(self, entry_id: UUID) -> Optional[TimeEntry]:
        return next((entry for entry in self.entries if entry.id == entry_id), None)


# ============================================================================
# Productivity Analysis Models
# ============================================================================

class AnalysisPeriod(ValueModel):
    start_date: date
    end_date: date
    period_type: PeriodType = PeriodType.CUSTOM


class TopActivity(ValueModel):
    activity: str
    hours: float
    percentage: float


class TimeInvestment(ValueModel):
    total_hours: float = 0
    productive_hours: float = 0
    break_hours: float = 0
    activity_distribution: Dict[str, int] = Field(default_factory=dict)
    top_activities: List[TopActivity] = Field(default_factory=list)


class PeakProductivityTime(ValueModel):
    hour: int = Field(..., ge=0, le=23)
    label: str


class WorkingHours(ValueModel):
    start: int = 9
    end: int = 17


class ProductivityMetrics(ValueModel):
    average_productivity: float = 5
    peak_productivity_time: Optional[PeakProductivityTime] = None
    optimal_working_hours: WorkingHours = Field(default_factory=WorkingHours)
    consistency_score: int = Field(0, ge=0, le=100)
    focus_score: int = Field(50, ge=0, le=100)
    efficiency_rating: EfficiencyRating = EfficiencyRating.AVERAGE


class HourlyProductivity(ValueModel):
    hour: int = Field(..., ge=0, le=23)
    average_productivity: float
    entry_count: int


class ActivityPerformance(ValueModel):
    activity: str
    average_productivity: float
    total_outcomes: int


class Correlations(ValueModel):
    """Fixed descriptive values, not computed from the data"""
    energy_productivity: float = 0.85
    focus_productivity: float = 0.90
    time_of_day_productivity: str = "Strong positive correlation with morning hours"


class PerformancePatterns(ValueModel):
    energy_level_distribution: Dict[str, int] = Field(default_factory=dict)
    focus_quality_distribution: Dict[str, int] = Field(default_factory=dict)
    productivity_by_day_of_week: Dict[str, float] = Field(default_factory=dict)
    productivity_by_time_of_day: List[HourlyProductivity] = Field(default_factory=list)
    best_performing_activities: List[ActivityPerformance] = Field(default_factory=list)
    correlations: Correlations = Field(default_factory=Correlations)


class OutcomeAnalysis(ValueModel):
    total_outcomes: int = 0
    outcome_types: Dict[str, int] = Field(default_factory=dict)
    outcomes_per_hour: float = 0
    outcomes_by_activity: Dict[str, int] = Field(default_factory=dict)
    # Outcomes per completed entry as a percentage; exceeds 100 when entries log several outcomes
    success_rate: int = Field(0, ge=0)


class EfficiencyMetrics(ValueModel):
    task_completion_rate: int = Field(0, ge=0, le=100)
    average_task_duration: float = 0  # minutes
    distraction_rate: float = Field(0, ge=0)
    improvement_trend: ImprovementTrend = ImprovementTrend.STABLE


class BreakFrequency(ValueModel):
    adequate: bool
    recommendation: str


class BurnoutWarning(ValueModel):
    warning_type: str
    severity: WarningSeverity
    message: str


class BurnoutIndicators(ValueModel):
    risk_level: RiskLevel = RiskLevel.LOW
    workload_balance: WorkloadBalance = WorkloadBalance.BALANCED
    energy_trend: EnergyTrend = EnergyTrend.STABLE
    break_frequency: BreakFrequency
    consecutive_days_worked: int = Field(0, ge=0)
    average_daily_hours: float = 0
    warnings: List[BurnoutWarning] = Field(default_factory=list)


class Recommendation(ValueModel):
    """AI-sourced advice appended to a report after generation"""
    category: RecommendationCategory
    priority: RecommendationPriority
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    expected_impact: Optional[ImpactLevel] = None
    action_items: List[Annotated[str, Field(max_length=200)]] = Field(default_factory=list)


class ProductivityAnalysis(BaseEntity):
    """Immutable report snapshot; only recommendations may be appended later"""
    user_id: str
    period: AnalysisPeriod
    time_investment: TimeInvestment = Field(default_factory=TimeInvestment)
    productivity_metrics: ProductivityMetrics = Field(default_factory=ProductivityMetrics)
    performance_patterns: PerformancePatterns = Field(default_factory=PerformancePatterns)
    outcome_analysis: OutcomeAnalysis = Field(default_factory=OutcomeAnalysis)
    efficiency_metrics: EfficiencyMetrics = Field(default_factory=EfficiencyMetrics)
    burnout_indicators: BurnoutIndicators
    recommendations: List[Recommendation] = Field(default_factory=list)

    @field_validator('recommendations', mode='before')
    @classmethod
    def ensure_recommendations_is_list(cls, v):
        if v is None:
            return []
        return v

    @computed_field
    @property
    def efficiency_score(self) -> int:
        """Weighted blend of productivity (40%), focus (30%) and outcomes (30%)"""
        if not self.time_investment.total_hours:
            return 0
        normalized_productivity = (self.productivity_metrics.average_productivity or 5) / 10 * 100
        focus_score = self.productivity_metrics.focus_score or 50
        outcome_score = self.outcome_analysis.success_rate or 50
        score = normalized_productivity * 0.4 + focus_score * 0.3 + outcome_score * 0.3
        return int(score + 0.5)

    @computed_field
    @property
    def work_life_balance(self) -> WorkLifeBalance:
        hours = self.burnout_indicators.average_daily_hours or 0
        if hours <= 6:
            return WorkLifeBalance.EXCELLENT
        if hours <= 8:
            return WorkLifeBalance.GOOD
        if hours <= 10:
            return WorkLifeBalance.FAIR
        if hours <= 12:
            return WorkLifeBalance.POOR
        return WorkLifeBalance.CRITICAL


# ============================================================================
# Coaching Models (AI-sourced, never persisted)
# ============================================================================

class ProductivityInsight(ValueModel):
    type: InsightType
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('data', mode='before')
    @classmethod
    def ensure_data_is_dict(cls, v):
        return v if isinstance(v, dict) else {}


class ScheduleTimeBlock(ValueModel):
    start_time: str = Field(..., pattern=r"^\d{1,2}:\d{2}$")
    end_time: str = Field(..., pattern=r"^\d{1,2}:\d{2}$")
    activity: str = Field(..., min_length=1)
    duration: Optional[int] = Field(None, ge=0)  # minutes
    rationale: Optional[str] = None


class BreakSchedule(ValueModel):
    frequency: Optional[str] = None
    duration: Optional[int] = Field(None, ge=0)  # minutes
    recommendations: List[str] = Field(default_factory=list)


class WeeklyPattern(ValueModel):
    work_days: Optional[int] = Field(None, ge=0, le=7)
    rest_days: Optional[int] = Field(None, ge=0, le=7)
    intensive_days: List[str] = Field(default_factory=list)
    light_days: List[str] = Field(default_factory=list)


class OptimalSchedule(ValueModel):
    """Suggested daily plan built from the last month of tracked time"""
    recommended_daily_hours: Optional[float] = Field(None, ge=0, le=24)
    time_blocks: List[ScheduleTimeBlock] = Field(default_factory=list)
    break_schedule: Optional[BreakSchedule] = None
    weekly_pattern: Optional[WeeklyPattern] = None
    tips: List[str] = Field(default_factory=list)


# ============================================================================
# Collaborator Models
# ============================================================================

class GoalSummary(ValueModel):
    """Read-only view of an active goal supplied by the goal store"""
    id: Optional[str] = None
    title: str
    category: Optional[str] = None
    progress_percentage: Optional[float] = None
    days_remaining: Optional[int] = None


# ============================================================================
# Stats / Dashboard Models
# ============================================================================

class TimeStats(ValueModel):
    """Lightweight rollup over a date range, used for dashboards"""
    total_hours: float = 0
    productive_hours: float = 0
    average_hours_per_day: float = 0
    average_productivity: float = 0
    total_outcomes: int = 0
    activity_totals: Dict[str, int] = Field(default_factory=dict)
    days_tracked: int = 0
    logs: List[TimeEntryLog] = Field(default_factory=list)


class DateRange(ValueModel):
    start_date: date
    end_date: date


class PeriodStats(ValueModel):
    dates: DateRange
    stats: TimeStats


class ComparisonChanges(ValueModel):
    hours_change: float
    hours_change_percentage: float
    productivity_change: float
    outcomes_change: int
    outcomes_change_percentage: float
    trend: ProductivityTrend


class PeriodComparison(ValueModel):
    period1: PeriodStats
    period2: PeriodStats
    changes: ComparisonChanges


class QuickStats(ValueModel):
    today_hours: float = 0
    week_hours: float = 0
    month_hours: float = 0
    week_productivity: float = 0
    month_productivity: float = 0


class ProductivityDashboard(ValueModel):
    today_log: Optional[TimeEntryLog] = None
    current_entry: Optional[TimeEntry] = None
    has_active_entry: bool = False
    week_stats: TimeStats
    month_stats: TimeStats
    recent_analyses: List[ProductivityAnalysis] = Field(default_factory=list)
    active_goals: List[GoalSummary] = Field(default_factory=list)
    quick_stats: QuickStats = Field(default_factory=QuickStats)
