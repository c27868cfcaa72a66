"""
Handler Registry - Maps tool names to handler functions

Every handler has the signature handle_<tool_name>(arguments, repos) and
returns a list of TextContent.

Usage:
    from handlers import get_handler

    handler = get_handler(tool_name)
    if handler:
        result = await handler(arguments, repos)
"""

from typing import Callable, Optional

from . import productivity_handlers


HANDLER_REGISTRY = {
    # Time tracking
    "upsert_day_log": productivity_handlers.handle_upsert_day_log,
    "get_logs_in_range": productivity_handlers.handle_get_logs_in_range,
    "add_time_entry": productivity_handlers.handle_add_time_entry,
    "update_time_entry": productivity_handlers.handle_update_time_entry,
    "delete_time_entry": productivity_handlers.handle_delete_time_entry,
    "get_time_stats": productivity_handlers.handle_get_time_stats,
    "compare_productivity": productivity_handlers.handle_compare_productivity,
    "get_productivity_dashboard": productivity_handlers.handle_get_productivity_dashboard,

    # Analysis reports
    "generate_productivity_analysis": productivity_handlers.handle_generate_productivity_analysis,
    "get_productivity_analysis": productivity_handlers.handle_get_productivity_analysis,
    "list_productivity_analyses": productivity_handlers.handle_list_productivity_analyses,

    # AI coaching
    "get_productivity_insights": productivity_handlers.handle_get_productivity_insights,
    "get_optimal_schedule": productivity_handlers.handle_get_optimal_schedule,
}


def get_handler(tool_name: str) -> Optional[Callable]:
    """Get the handler function for a tool, or None if the tool is unknown."""
    return HANDLER_REGISTRY.get(tool_name)


def list_all_handlers() -> list[str]:
    """List all registered tool names."""
    return list(HANDLER_REGISTRY.keys())


__all__ = [
    'get_handler',
    'list_all_handlers',
    'HANDLER_REGISTRY'
]
