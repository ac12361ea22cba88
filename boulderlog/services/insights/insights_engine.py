"""
Climber insights engine.

This module provides functionality for:
- Gating insights on a minimum number of completed sessions
- Building a grade profile (comfort, challenging, project and too-hard zones)
- Analysing style descriptors into strengths, weaknesses and preferences
- Suggesting the next grade to try

Everything is computed from route attempt snapshots; the engine never
re-reads votes. Sparse data yields empty or gated results, never errors.
"""

from typing import Any, Iterable, List, Mapping, Optional, Union

import pandas as pd

from boulderlog.core.config import settings
from boulderlog.core.logging import logger
from boulderlog.schemas.insights import (
    DescriptorStats,
    GradeProfile,
    GradeStats,
    InsightsReport,
    StyleAnalysis,
)
from boulderlog.schemas.sessions import ClimbingSession, RouteAttempt
from boulderlog.services.insights.config import InsightsConfig
from boulderlog.services.insights.style_buckets import build_radar_axes, compute_bucket_scores
from boulderlog.services.utils.grade_service import GradeService
from boulderlog.services.votes.vote_aggregator import normalize_descriptors

SessionLike = Union[ClimbingSession, Mapping[str, Any]]

insights_logger = logger.bind(component="insights")


class InsightsEngine:
    """Turns a climber's completed sessions into an insights report."""

    def __init__(
        self,
        config: Optional[InsightsConfig] = None,
        grade_service: Optional[GradeService] = None
    ) -> None:
        self.config = config or InsightsConfig.from_settings(settings)
        self.grade_service = grade_service or GradeService()

    def generate_insights(
        self,
        sessions: Iterable[SessionLike],
        min_sessions: Optional[int] = None
    ) -> InsightsReport:
        """Build the insights report for one climber.

        Args:
            sessions: All of the climber's sessions; only completed ones count
            min_sessions: Requested gate. Never lower than the configured floor.

        Returns:
            InsightsReport, with only the gate fields set when there are too
            few completed sessions or no route attempts at all
        """
        required = max(min_sessions or 0, self.config.min_sessions)
        completed = [
            s for s in (
                s if isinstance(s, ClimbingSession) else ClimbingSession.model_validate(s)
                for s in sessions or []
            )
            if s.is_completed
        ]
        attempts = [route for session in completed for route in session.routes]

        if len(completed) < required or not attempts:
            insights_logger.info(
                "Not enough data for insights",
                extra={"session_count": len(completed), "min_sessions": required, "routes": len(attempts)}
            )
            return InsightsReport(
                has_enough_data=False,
                session_count=len(completed),
                min_sessions_required=required,
            )

        grade_profile = self.build_grade_profile(attempts)
        style_analysis = self.analyze_styles(attempts)

        insights_logger.info(
            "Insights computed",
            extra={
                "session_count": len(completed),
                "routes": len(attempts),
                "grades": len(grade_profile.grades),
                "ideal_progression_grade": grade_profile.ideal_progression_grade,
            }
        )
        return InsightsReport(
            has_enough_data=True,
            session_count=len(completed),
            min_sessions_required=required,
            total_routes=len(attempts),
            grade_profile=grade_profile,
            style_analysis=style_analysis,
        )

    def build_grade_profile(self, attempts: Iterable[RouteAttempt]) -> GradeProfile:
        """Group attempts by representative grade and classify into zones.

        The representative grade is the voter consensus when present, else
        the proposed grade; "Unknown" grades are skipped. The first grouped
        attempt's grading system is taken as the profile's system.
        """
        graded = [attempt for attempt in attempts if attempt.representative_grade is not None]
        if not graded:
            return GradeProfile()

        primary_system = graded[0].grade_system
        df = pd.DataFrame(
            [
                {
                    "grade": attempt.representative_grade,
                    "success": attempt.is_success,
                    "attempts": attempt.attempts,
                }
                for attempt in graded
            ]
        )
        df["successful_attempts"] = df["attempts"].where(df["success"], 0)

        grouped = (
            df.groupby("grade", sort=False)
            .agg(
                total_routes=("success", "size"),
                successful_routes=("success", "sum"),
                total_attempts=("attempts", "sum"),
                successful_attempts=("successful_attempts", "sum"),
            )
            .reset_index()
        )
        grouped["numeric_grade"] = grouped["grade"].map(
            lambda grade: self.grade_service.to_numeric(grade, primary_system)
        )
        dropped = grouped["numeric_grade"].isna()
        if dropped.any():
            logger.warning(
                "Skipping grades that no longer parse",
                extra={"grades": grouped.loc[dropped, "grade"].tolist(), "grading_system": primary_system.value}
            )
        grouped = grouped[~dropped].copy()
        if grouped.empty:
            return GradeProfile(primary_system=primary_system)

        grouped["success_rate_routes"] = grouped["successful_routes"] / grouped["total_routes"] * 100
        grouped["success_rate_attempts"] = grouped["successful_attempts"] / grouped["total_attempts"] * 100
        grouped = grouped.sort_values("numeric_grade", kind="stable")

        rate = grouped["success_rate_routes"]
        cfg = self.config
        comfort = grouped[rate >= cfg.comfort_threshold]
        challenging = grouped[(rate >= cfg.challenging_threshold) & (rate < cfg.comfort_threshold)]
        project = grouped[(rate >= cfg.project_threshold) & (rate < cfg.challenging_threshold)]
        too_hard = grouped[rate < cfg.too_hard_threshold]

        ideal_progression_grade = None
        if not comfort.empty:
            ideal_progression_grade = self.grade_service.from_numeric(
                comfort["numeric_grade"].max() + 1, primary_system
            )

        return GradeProfile(
            primary_system=primary_system,
            grades=self._to_grade_stats(grouped),
            comfort_zone=self._to_grade_stats(comfort),
            challenging_zone=self._to_grade_stats(challenging),
            project_zone=self._to_grade_stats(project),
            too_hard=self._to_grade_stats(too_hard),
            ideal_progression_grade=ideal_progression_grade,
        )

    def analyze_styles(self, attempts: Iterable[RouteAttempt]) -> StyleAnalysis:
        """Classify descriptors into strengths, weaknesses and preferences.

        Ties keep the order descriptors were first seen in.
        """
        rows = [
            {"descriptor": descriptor, "success": attempt.is_success, "attempts": attempt.attempts}
            for attempt in attempts
            for descriptor in normalize_descriptors(attempt.descriptors)
        ]
        cfg = self.config
        if not rows:
            return StyleAnalysis(bucket_scores=compute_bucket_scores([], cfg.descriptor_buckets))

        df = pd.DataFrame(rows)
        stats = (
            df.groupby("descriptor", sort=False)
            .agg(
                total_routes=("success", "size"),
                successful_routes=("success", "sum"),
                total_attempts=("attempts", "sum"),
            )
            .reset_index()
        )
        stats["failed_routes"] = stats["total_routes"] - stats["successful_routes"]
        stats["success_rate"] = stats["successful_routes"] / stats["total_routes"] * 100

        rate = stats["success_rate"]
        strengths = self._to_descriptor_stats(
            stats[rate >= cfg.strength_threshold].sort_values("success_rate", ascending=False, kind="stable")
        )
        weaknesses = self._to_descriptor_stats(
            stats[(rate < cfg.weakness_threshold) & (stats["total_routes"] >= cfg.weakness_min_routes)]
            .sort_values("success_rate", kind="stable")
        )
        preferences = self._to_descriptor_stats(
            stats.sort_values("total_routes", ascending=False, kind="stable")
        )

        return StyleAnalysis(
            strengths=strengths,
            weaknesses=weaknesses,
            preferences=preferences,
            bucket_scores=compute_bucket_scores(preferences, cfg.descriptor_buckets),
            radar_axes=build_radar_axes(strengths, weaknesses, preferences, limit=cfg.radar_axes_limit),
        )

    @staticmethod
    def _to_grade_stats(frame: pd.DataFrame) -> List[GradeStats]:
        return [
            GradeStats(
                grade=row["grade"],
                numeric_grade=int(row["numeric_grade"]),
                total_routes=int(row["total_routes"]),
                successful_routes=int(row["successful_routes"]),
                total_attempts=int(row["total_attempts"]),
                successful_attempts=int(row["successful_attempts"]),
                success_rate_routes=round(float(row["success_rate_routes"]), 2),
                success_rate_attempts=round(float(row["success_rate_attempts"]), 2),
            )
            for row in frame.to_dict("records")
        ]

    @staticmethod
    def _to_descriptor_stats(frame: pd.DataFrame) -> List[DescriptorStats]:
        return [
            DescriptorStats(
                descriptor=row["descriptor"],
                total_routes=int(row["total_routes"]),
                successful_routes=int(row["successful_routes"]),
                failed_routes=int(row["failed_routes"]),
                total_attempts=int(row["total_attempts"]),
                success_rate=round(float(row["success_rate"]), 2),
            )
            for row in frame.to_dict("records")
        ]
