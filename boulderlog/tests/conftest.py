"""
Pytest configuration for the BoulderLog test suite.

Provides shared fixtures for the grade codec, vote aggregation, snapshots
and insights, plus small builders for sessions and route attempts.
"""

from datetime import datetime, timedelta
from typing import List, Optional

import pytest

from boulderlog.models.enums import AttemptStatus, GradingSystem
from boulderlog.schemas.sessions import ClimbingSession, RouteAttempt
from boulderlog.services.insights.config import InsightsConfig
from boulderlog.services.insights.insights_engine import InsightsEngine
from boulderlog.services.sessions.snapshot_service import SnapshotService
from boulderlog.services.utils.grade_service import GradeService
from boulderlog.services.votes.vote_aggregator import VoteAggregator

SESSION_START = datetime(2025, 3, 1, 18, 0)


@pytest.fixture
def grade_service():
    """Provide a GradeService with a cold parse cache."""
    service = GradeService()
    service.clear_cache()
    return service


@pytest.fixture
def vote_aggregator(grade_service):
    return VoteAggregator(grade_service=grade_service)


@pytest.fixture
def snapshot_service(vote_aggregator):
    return SnapshotService(vote_aggregator=vote_aggregator)


@pytest.fixture
def insights_config():
    return InsightsConfig()


@pytest.fixture
def insights_engine(insights_config, grade_service):
    return InsightsEngine(config=insights_config, grade_service=grade_service)


@pytest.fixture
def make_attempt():
    """Return a builder for route attempts."""
    def _make_attempt(
        grade: str = "V4",
        success: bool = True,
        attempts: int = 1,
        grade_system: GradingSystem = GradingSystem.V_SCALE,
        voter_grade: Optional[str] = None,
        descriptors: Optional[List[str]] = None,
        climb_id: Optional[str] = "climb-1",
    ) -> RouteAttempt:
        return RouteAttempt(
            climb_id=climb_id,
            status=AttemptStatus.SUCCESS if success else AttemptStatus.FAILURE,
            attempts=attempts,
            proposed_grade=grade,
            grade_system=grade_system,
            voter_grade=voter_grade,
            descriptors=descriptors or [],
        )
    return _make_attempt


@pytest.fixture
def make_sessions():
    """Return a builder that spreads attempts over ``count`` completed sessions.

    All attempts go into the first session; the rest are empty but completed.
    """
    def _make_sessions(
        count: int,
        attempts: Optional[List[RouteAttempt]] = None,
        completed: bool = True,
    ) -> List[ClimbingSession]:
        sessions = []
        for index in range(count):
            start = SESSION_START + timedelta(days=index)
            sessions.append(
                ClimbingSession(
                    id=f"session-{index}",
                    user_id="climber-1",
                    start_time=start,
                    end_time=start + timedelta(hours=2) if completed else None,
                    routes=list(attempts or []) if index == 0 else [],
                )
            )
        return sessions
    return _make_sessions


# Custom pytest markers
def pytest_configure(config):
    """
    Configure pytest with custom markers.
    """
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "api: marks tests that go through an HTTP app")


def pytest_collection_modifyitems(items):
    """Apply markers based on path."""
    for item in items:
        if "unit" in item.nodeid:
            item.add_marker(pytest.mark.unit)
