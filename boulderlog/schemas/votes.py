"""
Vote schemas.

This module defines Pydantic models for:
- Individual grade votes on a climb
- Consensus (grade + descriptors) derived from a vote list
- Vote statistics for climb detail views
"""

from typing import Dict, List, Optional
from pydantic import Field, field_validator

from boulderlog.schemas.base import CamelModel


class Vote(CamelModel):
    """One user's opinion of a climb's grade, height and style."""
    climb_id: Optional[str] = Field(
        None,
        description="Climb the vote belongs to"
    )
    user_id: Optional[str] = Field(
        None,
        description="Voting user"
    )
    grade: Optional[str] = Field(
        None,
        description="Exact grade text in the climb's grading system"
    )
    height: Optional[float] = Field(
        None,
        description="Voter height in centimetres; zero or less counts as unknown"
    )
    descriptors: List[str] = Field(
        default_factory=list,
        description="Free-form style tags"
    )

    @field_validator("descriptors", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return [] if v is None else v

    @property
    def has_height(self) -> bool:
        return self.height is not None and self.height > 0


class Consensus(CamelModel):
    """Community consensus for one climb."""
    grade: Optional[str] = Field(
        None,
        description="Averaged grade, None when no vote grade parses"
    )
    descriptors: List[str] = Field(
        default_factory=list,
        description="Normalized union of all vote descriptors, first-seen order"
    )


class HeightBreakdown(CamelModel):
    with_height: int = 0
    without_height: int = 0
    by_range: Dict[str, int] = Field(
        default_factory=lambda: {"short": 0, "average": 0, "tall": 0}
    )


class GradeHeightCounts(CamelModel):
    """Per-grade vote counts split by voter height band."""
    short: int = 0
    average: int = 0
    tall: int = 0
    no_height: int = 0


class VoteStatistics(CamelModel):
    """Schema for climb vote statistics."""
    total_votes: int = Field(0, ge=0)
    average_grade: Optional[str] = None
    grade_distribution: Dict[str, int] = Field(default_factory=dict)
    height_breakdown: HeightBreakdown = Field(default_factory=HeightBreakdown)
    grade_by_height: Dict[str, GradeHeightCounts] = Field(default_factory=dict)
