"""
Insights schemas.

This module defines Pydantic models for:
- Per-grade performance and the grade profile zones
- Per-descriptor performance and style analysis
- The insights report returned to callers
"""

from typing import Dict, List, Literal, Optional
from pydantic import Field

from boulderlog.models.enums import GradingSystem
from boulderlog.schemas.base import CamelModel


class GradeStats(CamelModel):
    """Aggregated route outcomes at a single grade."""
    grade: str
    numeric_grade: int
    total_routes: int = Field(..., ge=0)
    successful_routes: int = Field(..., ge=0)
    total_attempts: int = Field(..., ge=0)
    successful_attempts: int = Field(..., ge=0)
    success_rate_routes: float = Field(..., ge=0, le=100)
    success_rate_attempts: float = Field(..., ge=0, le=100)


class GradeProfile(CamelModel):
    primary_system: Optional[GradingSystem] = None
    grades: List[GradeStats] = Field(default_factory=list)
    comfort_zone: List[GradeStats] = Field(default_factory=list)
    challenging_zone: List[GradeStats] = Field(default_factory=list)
    project_zone: List[GradeStats] = Field(default_factory=list)
    too_hard: List[GradeStats] = Field(default_factory=list)
    ideal_progression_grade: Optional[str] = None


class DescriptorStats(CamelModel):
    """Aggregated route outcomes for one style descriptor."""
    descriptor: str
    total_routes: int = Field(..., ge=0)
    successful_routes: int = Field(..., ge=0)
    failed_routes: int = Field(..., ge=0)
    total_attempts: int = Field(..., ge=0)
    success_rate: float = Field(..., ge=0, le=100)


class RadarAxis(CamelModel):
    descriptor: str
    type: Literal["strength", "weakness", "preference"]
    raw_value: float
    normalized_value: float = Field(..., ge=0, le=1)


class StyleAnalysis(CamelModel):
    strengths: List[DescriptorStats] = Field(default_factory=list)
    weaknesses: List[DescriptorStats] = Field(default_factory=list)
    preferences: List[DescriptorStats] = Field(default_factory=list)
    bucket_scores: Dict[str, Optional[float]] = Field(default_factory=dict)
    radar_axes: List[RadarAxis] = Field(default_factory=list)


class InsightsReport(CamelModel):
    """Result of an insights request.

    With too little data only the gate fields are populated and the analysis
    fields stay None; that is a normal response, not an error.
    """
    has_enough_data: bool
    session_count: int = Field(..., ge=0)
    min_sessions_required: int = Field(..., ge=1)
    total_routes: Optional[int] = None
    grade_profile: Optional[GradeProfile] = None
    style_analysis: Optional[StyleAnalysis] = None
