"""
Recommendation Service

Asks an LLM for coaching on tracked time: recommendations for a finished
analysis, insights over a stats window, and an optimal daily schedule.
Any failure (no client, network error, unparseable reply) yields an
empty result; none of these calls ever fails the operation that asked.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from config import RecommendationConfig
from llm_clients import BaseLLMClient, Message
from models import (
    GoalSummary,
    InsightType,
    OptimalSchedule,
    ProductivityAnalysis,
    ProductivityInsight,
    Recommendation,
    RecommendationCategory,
    TimeStats,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert productivity coach specializing in job search optimization. "
    "You answer with valid JSON only."
)

JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")
CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake_case(key: str) -> str:
    """expectedImpact -> expected_impact; snake_case keys pass through"""
    return CAMEL_BOUNDARY.sub("_", key).lower()


def _snake_keys(value: Any) -> Any:
    """Rename camelCase keys at every level of a reply document"""
    if isinstance(value, dict):
        return {to_snake_case(key): _snake_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_snake_keys(item) for item in value]
    return value


def extract_json_object(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """The outermost {...} span of an LLM reply, decoded; None if there is none"""
    match = JSON_OBJECT_PATTERN.search(text or "")
    if not match:
        logger.warning("LLM reply contained no JSON object")
        return None
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.warning(f"LLM reply was not valid JSON: {e}")
        return None
    return data if isinstance(data, dict) else None


def _activity_hours(stats: TimeStats) -> str:
    return "\n".join(
        f"- {activity}: {minutes / 60:.1f} hours" for activity, minutes in stats.activity_totals.items()
    ) or "None"


def _format_goal(goal: GoalSummary) -> str:
    category = goal.category or "General"
    progress = f"{goal.progress_percentage:g}%" if goal.progress_percentage is not None else "unknown"
    remaining = f"{goal.days_remaining} days remaining" if goal.days_remaining is not None else "no deadline"
    return f"- {goal.title} ({category}): {progress} complete, {remaining}"


def build_recommendation_prompt(analysis: ProductivityAnalysis, goals: Sequence[GoalSummary] = ()) -> str:
    """Summarise the analysis and active goals into the coaching prompt"""
    time_investment = analysis.time_investment
    metrics = analysis.productivity_metrics
    burnout = analysis.burnout_indicators
    peak_label = metrics.peak_productivity_time.label if metrics.peak_productivity_time else "Not available"

    top_activities = "\n".join(
        f"- {a.activity}: {a.hours} hours ({a.percentage}%)" for a in time_investment.top_activities
    ) or "None"
    goal_lines = "\n".join(_format_goal(goal) for goal in goals) or "None"
    warning_lines = "\n".join(f"- [{w.severity}] {w.message}" for w in burnout.warnings) or "None"
    categories = "|".join(c.value for c in RecommendationCategory)

    return f"""Analyze the following productivity data and provide actionable recommendations.

**PRODUCTIVITY ANALYSIS:**
- Total Hours: {time_investment.total_hours}
- Productive Hours: {time_investment.productive_hours}
- Average Productivity: {metrics.average_productivity}/10
- Peak Productivity Time: {peak_label}
- Efficiency Rating: {metrics.efficiency_rating}
- Burnout Risk: {burnout.risk_level}
- Average Daily Hours: {burnout.average_daily_hours}
- Consecutive Days Worked: {burnout.consecutive_days_worked}

**TOP ACTIVITIES:**
{top_activities}

**ACTIVE GOALS:**
{goal_lines}

**WARNINGS:**
{warning_lines}

Generate 5-8 specific, actionable recommendations to optimize productivity, prevent burnout, and improve job search outcomes. Focus on:
1. Time allocation optimization
2. Schedule adjustments based on peak performance times
3. Burnout prevention strategies
4. Activity balance recommendations
5. Goal alignment suggestions
6. Work-life balance improvements

Return ONLY valid JSON with this structure:
{{
  "recommendations": [
    {{
      "category": "{categories}",
      "priority": "Low|Medium|High|Critical",
      "title": "Brief recommendation title",
      "description": "Detailed explanation of the recommendation",
      "expectedImpact": "Low|Medium|High",
      "actionItems": ["Specific action 1", "Specific action 2"]
    }}
  ]
}}"""


def build_insights_prompt(stats: TimeStats) -> str:
    """Stats rollup into the insights prompt"""
    insight_types = "|".join(t.value for t in InsightType)
    return f"""You are an expert productivity analyst. Analyze the following time tracking data and provide key insights.

**TIME STATISTICS:**
- Total Hours: {stats.total_hours}
- Productive Hours: {stats.productive_hours}
- Average Hours Per Day: {stats.average_hours_per_day}
- Average Productivity: {stats.average_productivity}/10
- Total Outcomes: {stats.total_outcomes}
- Days Tracked: {stats.days_tracked}

**ACTIVITY BREAKDOWN:**
{_activity_hours(stats)}

Generate 4-6 key insights about productivity patterns, strengths, and areas for improvement.

Return ONLY valid JSON with this structure:
{{
  "insights": [
    {{
      "type": "{insight_types}",
      "title": "Brief insight title",
      "description": "Detailed explanation of the insight",
      "data": {{}}
    }}
  ]
}}"""


def build_schedule_prompt(stats: TimeStats, goals: Sequence[GoalSummary] = ()) -> str:
    """Recent history and active goals into the schedule prompt"""
    goal_lines = "\n".join(f"- {goal.title} ({goal.category or 'General'})" for goal in goals) or "None"
    return f"""You are an expert productivity coach. Based on the historical performance data, create an optimal daily schedule for job search activities.

**HISTORICAL DATA:**
- Total Hours: {stats.total_hours}
- Average Hours Per Day: {stats.average_hours_per_day}
- Average Productivity: {stats.average_productivity}/10

**ACTIVITY HISTORY:**
{_activity_hours(stats)}

**ACTIVE GOALS:**
{goal_lines}

Create an optimal daily schedule that:
1. Aligns with peak productivity times
2. Balances different job search activities
3. Includes appropriate breaks
4. Supports active goals
5. Prevents burnout

Return ONLY valid JSON with this structure:
{{
  "schedule": {{
    "recommendedDailyHours": 6,
    "timeBlocks": [
      {{
        "startTime": "09:00",
        "endTime": "10:30",
        "activity": "Resume Writing",
        "duration": 90,
        "rationale": "Why this time is optimal"
      }}
    ],
    "breakSchedule": {{
      "frequency": "Every 90 minutes",
      "duration": 15,
      "recommendations": ["Take a walk", "Stretch"]
    }},
    "weeklyPattern": {{
      "workDays": 5,
      "restDays": 2,
      "intensiveDays": ["Monday", "Wednesday"],
      "lightDays": ["Friday"]
    }},
    "tips": ["Tip 1", "Tip 2"]
  }}
}}"""


def _validate_records(records: Any, model, label: str, snake_nested: bool = True) -> list:
    """Validate each record of a reply list, dropping the malformed ones"""
    if not isinstance(records, list):
        logger.warning(f"LLM reply had no '{label}' list")
        return []

    valid = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning(f"Dropping {label} #{index}: not an object")
            continue
        if snake_nested:
            record = _snake_keys(record)
        else:
            record = {to_snake_case(key): value for key, value in record.items()}
        try:
            valid.append(model.model_validate(record))
        except PydanticValidationError as e:
            logger.warning(f"Dropping {label} #{index}: {e.error_count()} validation error(s)")
    return valid


def parse_recommendations(text: str) -> List[Recommendation]:
    """
    Extract recommendations from an LLM reply.

    Takes the outermost {...} span, reads its "recommendations" list and
    keeps the records that validate. Malformed records are dropped.
    """
    data = extract_json_object(text)
    if data is None:
        return []
    return _validate_records(data.get("recommendations"), Recommendation, "recommendations")


def parse_insights(text: str) -> List[ProductivityInsight]:
    """Same extraction as parse_recommendations; each insight's free-form data is left as sent"""
    data = extract_json_object(text)
    if data is None:
        return []
    return _validate_records(data.get("insights"), ProductivityInsight, "insights", snake_nested=False)


def parse_schedule(text: str) -> Optional[OptimalSchedule]:
    """The reply's "schedule" object, or None when it is missing or malformed"""
    data = extract_json_object(text)
    schedule = data.get("schedule") if data else None
    if not isinstance(schedule, dict):
        logger.warning("LLM reply had no 'schedule' object")
        return None
    try:
        return OptimalSchedule.model_validate(_snake_keys(schedule))
    except PydanticValidationError as e:
        logger.warning(f"Dropping schedule: {e.error_count()} validation error(s)")
        return None


class RecommendationService:
    """Generates recommendations, insights and schedules through an injected LLM client"""

    def __init__(self, client: Optional[BaseLLMClient] = None, config: Optional[RecommendationConfig] = None):
        self.client = client
        self.config = config

    @property
    def enabled(self) -> bool:
        if self.client is None:
            return False
        return self.config is None or self.config.enabled

    async def _ask(self, prompt: str, purpose: str) -> Optional[str]:
        """Reply text, or None when disabled or the request fails"""
        if not self.enabled:
            logger.debug(f"LLM disabled; skipping {purpose}")
            return None
        try:
            response = await self.client.chat([Message(role="user", content=prompt)], system_prompt=SYSTEM_PROMPT)
        except Exception as e:
            logger.warning(f"{purpose.capitalize()} request failed: {e}")
            return None
        return response.content

    async def generate(
        self,
        analysis: ProductivityAnalysis,
        goals: Sequence[GoalSummary] = (),
    ) -> List[Recommendation]:
        reply = await self._ask(build_recommendation_prompt(analysis, goals), "recommendations")
        if reply is None:
            return []
        recommendations = parse_recommendations(reply)
        logger.info(f"Received {len(recommendations)} recommendations for analysis {analysis.id}")
        return recommendations

    async def generate_insights(self, stats: TimeStats) -> List[ProductivityInsight]:
        reply = await self._ask(build_insights_prompt(stats), "insights")
        if reply is None:
            return []
        insights = parse_insights(reply)
        logger.info(f"Received {len(insights)} productivity insights")
        return insights

    async def generate_schedule(
        self,
        stats: TimeStats,
        goals: Sequence[GoalSummary] = (),
    ) -> Optional[OptimalSchedule]:
        reply = await self._ask(build_schedule_prompt(stats, goals), "schedule")
        if reply is None:
            return None
        return parse_schedule(reply)
