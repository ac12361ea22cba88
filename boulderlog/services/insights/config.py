"""Thresholds and vocabularies for the insights engine.

Passed into InsightsEngine explicitly; nothing here is read from module
globals at computation time.
"""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from boulderlog.core.config import DEFAULT_DESCRIPTOR_BUCKETS, Settings
from boulderlog.models.enums import StyleBucket


class InsightsConfig(BaseModel):
    """Gate, zone thresholds (percent) and descriptor buckets."""

    model_config = ConfigDict(frozen=True)

    min_sessions: int = Field(5, ge=1)
    comfort_threshold: float = Field(70.0, ge=0, le=100)
    challenging_threshold: float = Field(50.0, ge=0, le=100)
    project_threshold: float = Field(30.0, ge=0, le=100)
    too_hard_threshold: float = Field(20.0, ge=0, le=100)
    strength_threshold: float = Field(60.0, ge=0, le=100)
    weakness_threshold: float = Field(40.0, ge=0, le=100)
    weakness_min_routes: int = Field(2, ge=1)
    radar_axes_limit: int = Field(5, ge=1)
    descriptor_buckets: Dict[str, List[StyleBucket]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_DESCRIPTOR_BUCKETS.items()}
    )

    @field_validator("descriptor_buckets", mode="before")
    @classmethod
    def normalize_bucket_keys(cls, v):
        if v is None:
            return {k: list(b) for k, b in DEFAULT_DESCRIPTOR_BUCKETS.items()}
        return {str(k).strip().lower(): b for k, b in v.items()}

    @model_validator(mode="after")
    def validate_threshold_order(self) -> "InsightsConfig":
        if not (
            self.too_hard_threshold
            <= self.project_threshold
            < self.challenging_threshold
            <= self.comfort_threshold
        ):
            raise ValueError(
                "Zone thresholds must satisfy too_hard <= project < challenging <= comfort"
            )
        if self.weakness_threshold >= self.strength_threshold:
            raise ValueError("weakness_threshold must be below strength_threshold")
        return self

    @classmethod
    def from_settings(cls, settings: Settings) -> "InsightsConfig":
        return cls(
            min_sessions=settings.INSIGHTS_MIN_SESSIONS,
            comfort_threshold=settings.COMFORT_ZONE_THRESHOLD,
            challenging_threshold=settings.CHALLENGING_ZONE_THRESHOLD,
            project_threshold=settings.PROJECT_ZONE_THRESHOLD,
            too_hard_threshold=settings.TOO_HARD_THRESHOLD,
            strength_threshold=settings.STRENGTH_THRESHOLD,
            weakness_threshold=settings.WEAKNESS_THRESHOLD,
            weakness_min_routes=settings.WEAKNESS_MIN_ROUTES,
            descriptor_buckets=settings.DESCRIPTOR_BUCKETS,
        )
