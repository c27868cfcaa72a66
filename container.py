"""
Repository Container - Centralized dependency injection container

Single place where repositories and services are wired together, so the
server and the tests build the same object graph.
"""

from config import RecommendationConfig
from repositories import TimeEntryLogRepository, ProductivityAnalysisRepository
from services.goals import StaticGoalProvider
from services.productivity_service import ProductivityService
from services.recommendation_service import RecommendationService


class RepositoryContainer:
    """
    Container for repository and service instances with attribute access.

    The LLM client and goal provider are passed in explicitly; without a
    client, analyses are generated with no recommendations.
    """
    def __init__(self, db, llm_client=None, goal_provider=None, recommendation_config: RecommendationConfig = None):
        self.time_logs = TimeEntryLogRepository(db)
        self.analyses = ProductivityAnalysisRepository(db)

        self.recommendations = RecommendationService(llm_client, recommendation_config)
        self.goals = goal_provider or StaticGoalProvider()

        self.productivity = ProductivityService(
            self.time_logs,
            self.analyses,
            recommendations=self.recommendations,
            goals=self.goals,
        )
