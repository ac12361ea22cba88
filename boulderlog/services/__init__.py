from .utils.grade_service import GradeService
from .votes.vote_aggregator import VoteAggregator
from .sessions.snapshot_service import SnapshotService
from .insights.config import InsightsConfig
from .insights.insights_engine import InsightsEngine

__all__ = ['GradeService', 'VoteAggregator', 'SnapshotService', 'InsightsConfig', 'InsightsEngine']
