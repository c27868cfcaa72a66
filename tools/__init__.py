"""
MCP Tools Package

- Time tracking tools: day logs, entries, stats, comparison, dashboard
- Analysis tools: generate, fetch and list productivity reports
- Coaching tools: AI insights and an optimal daily schedule
"""

from .productivity_tools import get_time_tracking_tools, get_analysis_tools, get_coaching_tools


def get_core_tool_catalog():
    """All MCP tools exposed by the server"""
    return [
        *get_time_tracking_tools(),
        *get_analysis_tools(),
        *get_coaching_tools(),
    ]
