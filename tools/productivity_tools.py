from typing import List
from mcp import types

from models import ActivityType, EnergyLevel, FocusQuality, OutcomeType, PeriodType


USER_ID_PROPERTY = {
    "type": "string",
    "description": "ID of the user whose time is being tracked"
}

DATE_PROPERTY = {
    "type": "string",
    "description": "Calendar day of the log (YYYY-MM-DD)"
}


def _entry_properties() -> dict:
    """JSON schema for the writable fields of a time entry"""
    return {
        "activity": {
            "type": "string",
            "enum": [a.value for a in ActivityType],
            "description": "Job-search activity this block of time was spent on"
        },
        "custom_activity": {
            "type": "string",
            "description": "Label used instead of 'Other' when activity is 'Other'"
        },
        "start_time": {
            "type": "string",
            "description": "Start timestamp (ISO 8601)"
        },
        "end_time": {
            "type": "string",
            "description": "End timestamp (ISO 8601). Omit while the activity is still in progress."
        },
        "energy_level": {
            "type": "string",
            "enum": [e.value for e in EnergyLevel],
            "default": EnergyLevel.MEDIUM.value
        },
        "focus_quality": {
            "type": "string",
            "enum": [f.value for f in FocusQuality],
            "default": FocusQuality.GOOD.value
        },
        "distractions": {
            "type": "integer",
            "minimum": 0,
            "description": "Number of interruptions during the block"
        },
        "productivity": {
            "type": "integer",
            "minimum": 1,
            "maximum": 10,
            "description": "Self-rated productivity (1-10). Treated as 5 when omitted."
        },
        "outcomes": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "type": {"type": "string", "enum": [o.value for o in OutcomeType]},
                    "description": {"type": "string"}
                },
                "required": ["type"]
            },
            "description": "Concrete results produced during the block"
        },
        "notes": {"type": "string"},
        "tags": {
            "type": "array",
            "items": {"type": "string"}
        },
        "linked_entities": {
            "type": "object",
            "properties": {
                "job_id": {"type": "string"},
                "application_id": {"type": "string"},
                "goal_id": {"type": "string"}
            },
            "description": "Optional references to a job, application or goal"
        }
    }


def get_time_tracking_tools() -> List[types.Tool]:
    """Tools for day logs, time entries and lightweight stats"""
    return [
        types.Tool(
            name="upsert_day_log",
            description="Get the time entry log for a day, creating an empty one if none exists. Includes the day's entries, daily summary and active entry.",
            inputSchema={
                "type": "object",
                "properties": {
                    "user_id": USER_ID_PROPERTY,
                    "date": DATE_PROPERTY
                },
                "required": ["user_id", "date"]
            }
        ),
        types.Tool(
            name="get_logs_in_range",
            description="List a user's time entry logs between two dates (inclusive), oldest first.",
            inputSchema={
                "type": "object",
                "properties": {
                    "user_id": USER_ID_PROPERTY,
                    "start_date": {"type": "string", "description": "First day (YYYY-MM-DD)"},
                    "end_date": {"type": "string", "description": "Last day (YYYY-MM-DD)"}
                },
                "required": ["user_id", "start_date", "end_date"]
            }
        ),
        types.Tool(
            name="add_time_entry",
            description="Log a block of time against a job-search activity. Duration is derived from start/end time; the day's summary is recomputed.",
            inputSchema={
                "type": "object",
                "properties": {
                    "user_id": USER_ID_PROPERTY,
                    "date": DATE_PROPERTY,
                    **_entry_properties()
                },
                "required": ["user_id", "date", "activity", "start_time"]
            }
        ),
        types.Tool(
            name="update_time_entry",
            description="Update fields of an existing time entry. Only the fields provided are changed; the day's summary is recomputed.",
            inputSchema={
                "type": "object",
                "properties": {
                    "user_id": USER_ID_PROPERTY,
                    "date": DATE_PROPERTY,
                    "entry_id": {"type": "string", "description": "UUID of the entry to update"},
                    **_entry_properties()
                },
                "required": ["user_id", "date", "entry_id"]
            }
        ),
        types.Tool(
            name="delete_time_entry",
            description="Remove a time entry from a day's log and recompute the summary.",
            inputSchema={
                "type": "object",
                "properties": {
                    "user_id": USER_ID_PROPERTY,
                    "date": DATE_PROPERTY,
                    "entry_id": {"type": "string", "description": "UUID of the entry to delete"}
                },
                "required": ["user_id", "date", "entry_id"]
            }
        ),
        types.Tool(
            name="get_time_stats",
            description="Totals over a date range: hours, productive hours, average hours per tracked day, average productivity, outcomes and minutes per activity.",
            inputSchema={
                "type": "object",
                "properties": {
                    "user_id": USER_ID_PROPERTY,
                    "start_date": {"type": "string", "description": "First day (YYYY-MM-DD)"},
                    "end_date": {"type": "string", "description": "Last day (YYYY-MM-DD)"},
                    "include_logs": {
                        "type": "boolean",
                        "description": "Include the underlying logs in the response",
                        "default": False
                    }
                },
                "required": ["user_id", "start_date", "end_date"]
            }
        ),
        types.Tool(
            name="compare_productivity",
            description="Compare hours, productivity and outcomes between two periods.",
            inputSchema={
                "type": "object",
                "properties": {
                    "user_id": USER_ID_PROPERTY,
                    "period1_start": {"type": "string", "description": "Baseline period start (YYYY-MM-DD)"},
                    "period1_end": {"type": "string", "description": "Baseline period end (YYYY-MM-DD)"},
                    "period2_start": {"type": "string", "description": "Compared period start (YYYY-MM-DD)"},
                    "period2_end": {"type": "string", "description": "Compared period end (YYYY-MM-DD)"}
                },
                "required": ["user_id", "period1_start", "period1_end", "period2_start", "period2_end"]
            }
        ),
        types.Tool(
            name="get_productivity_dashboard",
            description="Today's log and active entry, last-7-days and last-month stats, recent analyses and active goals.",
            inputSchema={
                "type": "object",
                "properties": {
                    "user_id": USER_ID_PROPERTY,
                    "today": {"type": "string", "description": "Override today's date (YYYY-MM-DD)"}
                },
                "required": ["user_id"]
            }
        ),
    ]


def get_analysis_tools() -> List[types.Tool]:
    """Tools for generating and reading productivity analysis reports"""
    period_types = [p.value for p in PeriodType]
    return [
        types.Tool(
            name="generate_productivity_analysis",
            description="Analyze all time logs in a date range: time investment, productivity metrics, performance patterns, outcomes, efficiency and burnout risk. The report is stored and returned. Fails when the range has no logs.",
            inputSchema={
                "type": "object",
                "properties": {
                    "user_id": USER_ID_PROPERTY,
                    "start_date": {"type": "string", "description": "First day (YYYY-MM-DD)"},
                    "end_date": {"type": "string", "description": "Last day (YYYY-MM-DD)"},
                    "period_type": {
                        "type": "string",
                        "enum": period_types,
                        "default": PeriodType.CUSTOM.value
                    }
                },
                "required": ["user_id", "start_date", "end_date"]
            }
        ),
        types.Tool(
            name="get_productivity_analysis",
            description="Fetch a stored productivity analysis by ID.",
            inputSchema={
                "type": "object",
                "properties": {
                    "analysis_id": {"type": "string", "description": "UUID of the analysis"},
                    "user_id": {"type": "string", "description": "Optional: only return the analysis if it belongs to this user"}
                },
                "required": ["analysis_id"]
            }
        ),
        types.Tool(
            name="list_productivity_analyses",
            description="List a user's stored analyses, most recent first.",
            inputSchema={
                "type": "object",
                "properties": {
                    "user_id": USER_ID_PROPERTY,
                    "period_type": {"type": "string", "enum": period_types},
                    "limit": {"type": "integer", "minimum": 1, "default": 10}
                },
                "required": ["user_id"]
            }
        ),
    ]


def get_coaching_tools() -> List[types.Tool]:
    """AI coaching tools; they return empty results when no LLM is configured"""
    return [
        types.Tool(
            name="get_productivity_insights",
            description="4-6 AI insights (Pattern, Achievement, Opportunity, Warning, Trend) drawn from the time stats of a date range. Returns an empty list when the LLM is unavailable.",
            inputSchema={
                "type": "object",
                "properties": {
                    "user_id": USER_ID_PROPERTY,
                    "start_date": {"type": "string", "description": "First day (YYYY-MM-DD)"},
                    "end_date": {"type": "string", "description": "Last day (YYYY-MM-DD)"}
                },
                "required": ["user_id", "start_date", "end_date"]
            }
        ),
        types.Tool(
            name="get_optimal_schedule",
            description="AI-suggested daily schedule (time blocks, breaks, weekly pattern, tips) based on the last 30 days of tracking and active goals. Fails when nothing was tracked; schedule is null when the LLM is unavailable.",
            inputSchema={
                "type": "object",
                "properties": {
                    "user_id": USER_ID_PROPERTY,
                    "today": {"type": "string", "description": "Override today's date (YYYY-MM-DD)"}
                },
                "required": ["user_id"]
            }
        ),
    ]
