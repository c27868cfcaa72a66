"""
Productivity Handlers

Handles: upsert_day_log, get_logs_in_range, add_time_entry, update_time_entry,
delete_time_entry, get_time_stats, compare_productivity,
get_productivity_dashboard, generate_productivity_analysis,
get_productivity_analysis, list_productivity_analyses,
get_productivity_insights, get_optimal_schedule

All handlers take (arguments, repos) and return a JSON document.
Expected failures (ProductivityError) become {"error", "message"} payloads;
anything else propagates to the server.
"""

import json
import logging
from typing import Any

from mcp import types
from pydantic import BaseModel

from container import RepositoryContainer
from errors import ProductivityError, ValidationError

logger = logging.getLogger(__name__)

# Keys that address the log/entry rather than describe the entry itself
ROUTING_KEYS = {"user_id", "date", "entry_id"}


def _json_response(payload: Any) -> list[types.TextContent]:
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json")
    return [types.TextContent(type="text", text=json.dumps(payload, default=str))]


def _error_response(error: ProductivityError) -> list[types.TextContent]:
    logger.info(f"Tool call rejected ({error.kind}): {error.message}")
    return [types.TextContent(type="text", text=json.dumps(error.to_dict()))]


def _require(arguments: dict, key: str) -> Any:
    value = arguments.get(key)
    if value is None or value == "":
        raise ValidationError(f"{key} is required")
    return value


def _entry_fields(arguments: dict) -> dict:
    return {key: value for key, value in arguments.items() if key not in ROUTING_KEYS}


async def handle_upsert_day_log(arguments: dict[str, Any], repos: RepositoryContainer) -> list[types.TextContent]:
    """Fetch or create the log for one day."""
    try:
        log = await repos.productivity.upsert_day_log(_require(arguments, "user_id"), arguments.get("date"))
        payload = log.model_dump(mode="json")
        active = log.active_entry
        payload["active_entry"] = active.model_dump(mode="json") if active else None
        return _json_response(payload)
    except ProductivityError as e:
        return _error_response(e)


async def handle_get_logs_in_range(arguments: dict[str, Any], repos: RepositoryContainer) -> list[types.TextContent]:
    try:
        logs = await repos.productivity.get_logs_in_range(
            _require(arguments, "user_id"),
            arguments.get("start_date"),
            arguments.get("end_date"),
        )
        return _json_response({"count": len(logs), "logs": [log.model_dump(mode="json") for log in logs]})
    except ProductivityError as e:
        return _error_response(e)


async def handle_add_time_entry(arguments: dict[str, Any], repos: RepositoryContainer) -> list[types.TextContent]:
    """Add an entry; the response carries the saved log with its recomputed summary."""
    try:
        log = await repos.productivity.add_entry(
            _require(arguments, "user_id"),
            arguments.get("date"),
            _entry_fields(arguments),
        )
        return _json_response(log)
    except ProductivityError as e:
        return _error_response(e)


async def handle_update_time_entry(arguments: dict[str, Any], repos: RepositoryContainer) -> list[types.TextContent]:
    try:
        log = await repos.productivity.update_entry(
            _require(arguments, "user_id"),
            arguments.get("date"),
            _require(arguments, "entry_id"),
            _entry_fields(arguments),
        )
        return _json_response(log)
    except ProductivityError as e:
        return _error_response(e)


async def handle_delete_time_entry(arguments: dict[str, Any], repos: RepositoryContainer) -> list[types.TextContent]:
    try:
        log = await repos.productivity.delete_entry(
            _require(arguments, "user_id"),
            arguments.get("date"),
            _require(arguments, "entry_id"),
        )
        return _json_response(log)
    except ProductivityError as e:
        return _error_response(e)


async def handle_get_time_stats(arguments: dict[str, Any], repos: RepositoryContainer) -> list[types.TextContent]:
    """Lightweight rollup; logs are left out unless include_logs is set."""
    try:
        stats = await repos.productivity.get_stats(
            _require(arguments, "user_id"),
            arguments.get("start_date"),
            arguments.get("end_date"),
        )
        exclude = None if arguments.get("include_logs") else {"logs"}
        return _json_response(stats.model_dump(mode="json", exclude=exclude))
    except ProductivityError as e:
        return _error_response(e)


async def handle_compare_productivity(arguments: dict[str, Any], repos: RepositoryContainer) -> list[types.TextContent]:
    try:
        comparison = await repos.productivity.compare_periods(
            _require(arguments, "user_id"),
            arguments.get("period1_start"),
            arguments.get("period1_end"),
            arguments.get("period2_start"),
            arguments.get("period2_end"),
        )
        payload = comparison.model_dump(
            mode="json",
            exclude={"period1": {"stats": {"logs"}}, "period2": {"stats": {"logs"}}},
        )
        return _json_response(payload)
    except ProductivityError as e:
        return _error_response(e)


async def handle_get_productivity_dashboard(arguments: dict[str, Any], repos: RepositoryContainer) -> list[types.TextContent]:
    try:
        dashboard = await repos.productivity.get_dashboard(
            _require(arguments, "user_id"),
            arguments.get("today"),
        )
        payload = dashboard.model_dump(
            mode="json",
            exclude={"week_stats": {"logs"}, "month_stats": {"logs"}},
        )
        return _json_response(payload)
    except ProductivityError as e:
        return _error_response(e)


async def handle_generate_productivity_analysis(arguments: dict[str, Any], repos: RepositoryContainer) -> list[types.TextContent]:
    """Generate, store and return a full report."""
    try:
        analysis = await repos.productivity.generate_analysis(
            _require(arguments, "user_id"),
            arguments.get("start_date"),
            arguments.get("end_date"),
            arguments.get("period_type"),
        )
        return _json_response(analysis)
    except ProductivityError as e:
        return _error_response(e)


async def handle_get_productivity_analysis(arguments: dict[str, Any], repos: RepositoryContainer) -> list[types.TextContent]:
    try:
        analysis = await repos.productivity.get_analysis(
            _require(arguments, "analysis_id"),
            arguments.get("user_id"),
        )
        return _json_response(analysis)
    except ProductivityError as e:
        return _error_response(e)


async def handle_list_productivity_analyses(arguments: dict[str, Any], repos: RepositoryContainer) -> list[types.TextContent]:
    try:
        analyses = await repos.productivity.list_analyses(
            _require(arguments, "user_id"),
            arguments.get("period_type"),
            arguments.get("limit"),
        )
        return _json_response({"count": len(analyses), "analyses": [a.model_dump(mode="json") for a in analyses]})
    except ProductivityError as e:
        return _error_response(e)


async def handle_get_productivity_insights(arguments: dict[str, Any], repos: RepositoryContainer) -> list[types.TextContent]:
    """AI insights over a date range; an empty list when the LLM is unavailable."""
    try:
        insights = await repos.productivity.get_insights(
            _require(arguments, "user_id"),
            arguments.get("start_date"),
            arguments.get("end_date"),
        )
        return _json_response({"count": len(insights), "insights": [i.model_dump(mode="json") for i in insights]})
    except ProductivityError as e:
        return _error_response(e)


async def handle_get_optimal_schedule(arguments: dict[str, Any], repos: RepositoryContainer) -> list[types.TextContent]:
    try:
        schedule = await repos.productivity.get_optimal_schedule(
            _require(arguments, "user_id"),
            arguments.get("today"),
        )
        return _json_response({"schedule": schedule.model_dump(mode="json") if schedule else None})
    except ProductivityError as e:
        return _error_response(e)
