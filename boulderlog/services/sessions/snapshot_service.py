"""
Route attempt snapshot service.

A route attempt freezes the climb's proposed grade and the community
consensus at logging time. Snapshots change only through an explicit
refresh or when the referenced climb is deleted, so insights can always be
recomputed from stored history without re-reading votes.
"""

from typing import Iterable, List, Optional

from boulderlog.core.exceptions import ResourceNotFound, ValidationError
from boulderlog.core.logging import logger
from boulderlog.models.enums import AttemptStatus, GradingSystem
from boulderlog.schemas.sessions import (
    UNKNOWN_GRADE,
    Climb,
    ClimbingSession,
    RouteAttempt,
    SessionStatistics,
)
from boulderlog.services.votes.vote_aggregator import VoteAggregator, VoteLike


class SnapshotService:
    """Creates and maintains route attempt snapshots."""

    def __init__(self, vote_aggregator: Optional[VoteAggregator] = None) -> None:
        self.vote_aggregator = vote_aggregator or VoteAggregator()
        self.grade_service = self.vote_aggregator.grade_service

    def _snapshot_fields(self, climb: Climb, votes: Optional[Iterable[VoteLike]]) -> dict:
        consensus = self.vote_aggregator.aggregate(votes, climb.grade_system)
        return {
            "proposed_grade": climb.grade,
            "grade_system": climb.grade_system,
            "voter_grade": consensus.grade,
            "descriptors": consensus.descriptors,
        }

    def build_attempt(
        self,
        is_success: bool,
        attempts: int,
        climb: Optional[Climb] = None,
        votes: Optional[Iterable[VoteLike]] = None,
        session: Optional[ClimbingSession] = None,
        attempt_id: Optional[str] = None
    ) -> RouteAttempt:
        """Log a route attempt with a fresh snapshot.

        Without a climb the attempt gets the "Unknown" proposed grade under
        V-Scale and no consensus. A climb may be logged once per session.

        Raises:
            ValidationError: the climb is already logged in ``session``
        """
        if climb is not None and session is not None:
            if any(route.climb_id == climb.id for route in session.routes):
                raise ValidationError(
                    detail="Route already logged in this session",
                    context={"climb_id": climb.id, "session_id": session.id}
                )

        fields = {
            "proposed_grade": UNKNOWN_GRADE,
            "grade_system": GradingSystem.V_SCALE,
            "voter_grade": None,
            "descriptors": [],
        }
        if climb is not None:
            fields = self._snapshot_fields(climb, votes)

        return RouteAttempt(
            id=attempt_id,
            climb_id=climb.id if climb is not None else None,
            status=AttemptStatus.SUCCESS if is_success else AttemptStatus.FAILURE,
            attempts=attempts,
            **fields
        )

    def refresh_snapshot(
        self,
        attempt: RouteAttempt,
        climb: Optional[Climb],
        current_votes: Optional[Iterable[VoteLike]]
    ) -> RouteAttempt:
        """Recompute an attempt's snapshot from the climb and its current votes.

        Raises:
            ResourceNotFound: the attempt is detached or the climb is gone
            ValidationError: ``climb`` is not the attempt's climb
        """
        if attempt.is_detached:
            raise ResourceNotFound(
                detail="Route not found or climb no longer exists",
                context={"route_id": attempt.id}
            )
        if climb is None:
            raise ResourceNotFound(
                detail="Climb no longer exists",
                context={"route_id": attempt.id, "climb_id": attempt.climb_id}
            )
        if climb.id != attempt.climb_id:
            raise ValidationError(
                detail="Climb does not match the logged route",
                context={"route_id": attempt.id, "climb_id": climb.id}
            )

        refreshed = attempt.model_copy(update=self._snapshot_fields(climb, current_votes))
        logger.debug(
            "Refreshed route snapshot",
            extra={"route_id": attempt.id, "voter_grade": refreshed.voter_grade}
        )
        return refreshed

    def detach_on_climb_deletion(
        self,
        attempts: Iterable[RouteAttempt],
        climb: Climb,
        votes: Optional[Iterable[VoteLike]] = None
    ) -> List[RouteAttempt]:
        """Freeze a final snapshot on every attempt pointing at ``climb`` and
        drop the reference. Other attempts are returned unchanged."""
        votes = list(votes or [])
        frozen = None
        result: List[RouteAttempt] = []
        detached = 0
        for attempt in attempts:
            if attempt.climb_id != climb.id:
                result.append(attempt)
                continue
            if frozen is None:
                frozen = self._snapshot_fields(climb, votes)
            result.append(attempt.model_copy(update={**frozen, "climb_id": None}))
            detached += 1

        logger.info(
            "Detached route attempts from deleted climb",
            extra={"climb_id": climb.id, "detached": detached}
        )
        return result

    def session_statistics(self, attempts: Optional[Iterable[RouteAttempt]]) -> SessionStatistics:
        """Totals and average grades for one session's attempts.

        The first attempt's grading system is used for both averages.
        """
        attempts = list(attempts or [])
        if not attempts:
            return SessionStatistics()

        grade_system = attempts[0].grade_system
        proposed = [a.proposed_grade for a in attempts if a.proposed_grade]
        voter = [a.voter_grade for a in attempts if a.voter_grade]
        successful = sum(1 for a in attempts if a.is_success)

        return SessionStatistics(
            total_routes=len(attempts),
            successful_routes=successful,
            failed_routes=len(attempts) - successful,
            total_attempts=sum(a.attempts for a in attempts),
            average_proposed_grade=self.grade_service.average(proposed, grade_system) if proposed else None,
            average_voter_grade=self.grade_service.average(voter, grade_system) if voter else None,
        )
