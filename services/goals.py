"""
Goal lookups

Goals live in another store. The productivity service only needs a
read-only list of the user's active goals to feed the recommendation
prompt and the dashboard.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from models import GoalSummary


class GoalProvider(ABC):
    """Read-only source of a user's active goals"""

    @abstractmethod
    async def list_active_goals(self, user_id: str) -> List[GoalSummary]:
        pass


class StaticGoalProvider(GoalProvider):
    """Returns the same goals for every user. Empty by default."""

    def __init__(self, goals: Optional[Iterable[GoalSummary]] = None):
        self._goals = list(goals or [])

    async def list_active_goals(self, user_id: str) -> List[GoalSummary]:
        return list(self._goals)
