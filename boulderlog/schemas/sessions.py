"""
Session and route attempt schemas.

Route attempts carry frozen snapshots of the climb's proposed grade and the
voter consensus taken at logging time. Insights are computed from these
snapshots only, never from live votes.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import Field, field_validator, model_validator

from boulderlog.models.enums import AttemptStatus, GradingSystem
from boulderlog.schemas.base import CamelModel

UNKNOWN_GRADE = "Unknown"


class Climb(CamelModel):
    """The slice of a climb the snapshot logic needs."""
    id: str
    grade: str = Field(..., description="Setter proposed grade")
    grade_system: GradingSystem

    @field_validator("grade_system", mode="before")
    @classmethod
    def parse_grade_system(cls, v):
        return GradingSystem.parse(v)


class RouteAttempt(CamelModel):
    """One logged entry of a session."""
    id: Optional[str] = None
    climb_id: Optional[str] = Field(
        None,
        description="Referenced climb; None once detached"
    )
    status: AttemptStatus
    attempts: int = Field(1, ge=1)
    proposed_grade: str = UNKNOWN_GRADE
    grade_system: GradingSystem = GradingSystem.V_SCALE
    voter_grade: Optional[str] = None
    descriptors: List[str] = Field(default_factory=list)

    @field_validator("grade_system", mode="before")
    @classmethod
    def parse_grade_system(cls, v):
        return GradingSystem.parse(v)

    @field_validator("descriptors", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return [] if v is None else v

    @property
    def is_success(self) -> bool:
        return self.status == AttemptStatus.SUCCESS

    @property
    def is_detached(self) -> bool:
        return self.climb_id is None

    @property
    def representative_grade(self) -> Optional[str]:
        """Voter consensus when present, otherwise the proposed grade."""
        grade = self.voter_grade or self.proposed_grade
        if not grade or grade == UNKNOWN_GRADE:
            return None
        return grade


class ClimbingSession(CamelModel):
    """Ordered container of route attempts for one user."""
    id: Optional[str] = None
    user_id: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=1000)
    routes: List[RouteAttempt] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_times(self) -> "ClimbingSession":
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError("Session cannot end before it starts")
        return self

    @property
    def is_completed(self) -> bool:
        return self.end_time is not None


class SessionStatistics(CamelModel):
    total_routes: int = 0
    successful_routes: int = 0
    failed_routes: int = 0
    total_attempts: int = 0
    average_proposed_grade: Optional[str] = None
    average_voter_grade: Optional[str] = None
