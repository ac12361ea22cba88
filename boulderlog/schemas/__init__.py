from boulderlog.schemas.insights import (
    DescriptorStats,
    GradeProfile,
    GradeStats,
    InsightsReport,
    RadarAxis,
    StyleAnalysis,
)
from boulderlog.schemas.sessions import (
    UNKNOWN_GRADE,
    Climb,
    ClimbingSession,
    RouteAttempt,
    SessionStatistics,
)
from boulderlog.schemas.votes import (
    Consensus,
    GradeHeightCounts,
    HeightBreakdown,
    Vote,
    VoteStatistics,
)

__all__ = [
    "UNKNOWN_GRADE",
    "Climb",
    "ClimbingSession",
    "Consensus",
    "DescriptorStats",
    "GradeHeightCounts",
    "GradeProfile",
    "GradeStats",
    "HeightBreakdown",
    "InsightsReport",
    "RadarAxis",
    "RouteAttempt",
    "SessionStatistics",
    "StyleAnalysis",
    "Vote",
    "VoteStatistics",
]
