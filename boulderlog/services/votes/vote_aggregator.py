"""
Vote aggregation service.

Reduces the community votes on one climb into a consensus grade and a
descriptor set, and produces the vote statistics shown on climb details.
All operations are pure reductions over the votes they are given; storage
and upsert persistence belong to the caller.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from boulderlog.core.config import settings
from boulderlog.core.exceptions import InvalidDescriptorError, ValidationError
from boulderlog.core.logging import logger
from boulderlog.models.enums import HeightBand
from boulderlog.schemas.votes import (
    Consensus,
    GradeHeightCounts,
    HeightBreakdown,
    Vote,
    VoteStatistics,
)
from boulderlog.services.utils.grade_service import GradeService, GradingSystemLike

VoteLike = Union[Vote, Mapping[str, Any]]


def normalize_descriptors(descriptors: Optional[Iterable[Optional[str]]]) -> List[str]:
    """Lower-case and trim descriptors, dropping blanks and duplicates.

    First-seen order is kept so results are stable for a given input.
    """
    seen: Dict[str, None] = {}
    for descriptor in descriptors or []:
        if not descriptor or not isinstance(descriptor, str):
            continue
        cleaned = descriptor.strip().lower()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


def _coerce_votes(votes: Optional[Iterable[VoteLike]]) -> List[Vote]:
    return [v if isinstance(v, Vote) else Vote.model_validate(v) for v in votes or []]


class VoteAggregator:
    """Combines per-user votes for one climb into a consensus."""

    def __init__(
        self,
        grade_service: Optional[GradeService] = None,
        descriptors: Optional[Sequence[str]] = None,
        max_descriptors: Optional[int] = None
    ) -> None:
        self.grade_service = grade_service or GradeService()
        vocabulary = descriptors if descriptors is not None else settings.DESCRIPTORS
        self.descriptors = frozenset(normalize_descriptors(vocabulary))
        self.max_descriptors = (
            max_descriptors if max_descriptors is not None else settings.MAX_DESCRIPTORS_PER_VOTE
        )

    def validate_vote(self, vote: VoteLike, grading_system: GradingSystemLike) -> Vote:
        """Validate a submitted vote and return a normalized copy.

        The grade must be an exact grade (ranges are never votes) and every
        descriptor must belong to the configured vocabulary.

        Raises:
            InvalidGradeFormat, InvalidGradeRange: bad grade text
            InvalidDescriptorError: unknown or too many descriptors
            ValidationError: height given but not positive
            UnknownGradingSystem: unsupported grading system
        """
        vote = _coerce_votes([vote])[0]
        self.grade_service.validate_grade(vote.grade, grading_system, allow_ranges=False)
        if vote.height is not None and vote.height <= 0:
            raise ValidationError(
                detail="height must be a positive number of centimetres",
                errors={"height": vote.height}
            )

        descriptors = normalize_descriptors(vote.descriptors)
        if len(descriptors) > self.max_descriptors:
            raise InvalidDescriptorError(
                detail=f"A vote may carry at most {self.max_descriptors} descriptors",
                descriptors=descriptors
            )
        unknown = [d for d in descriptors if d not in self.descriptors]
        if unknown:
            raise InvalidDescriptorError(
                detail=f"Unknown descriptors: {', '.join(unknown)}",
                descriptors=unknown
            )

        return vote.model_copy(update={"grade": vote.grade.strip(), "descriptors": descriptors})

    @staticmethod
    def upsert_vote(votes: Iterable[VoteLike], vote: VoteLike) -> List[Vote]:
        """Return the vote list with ``vote`` replacing any prior vote by the
        same user on the same climb, or appended if there was none."""
        vote = _coerce_votes([vote])[0]
        result: List[Vote] = []
        replaced = False
        for existing in _coerce_votes(votes):
            if existing.climb_id == vote.climb_id and existing.user_id == vote.user_id:
                if not replaced:
                    result.append(vote)
                    replaced = True
                continue
            result.append(existing)
        if not replaced:
            result.append(vote)
        return result

    def aggregate(self, votes: Optional[Iterable[VoteLike]], grading_system: GradingSystemLike) -> Consensus:
        """Reduce votes to a consensus grade and descriptor union.

        Every descriptor present in any vote qualifies; there is no weighting
        or frequency threshold.
        """
        votes = _coerce_votes(votes)
        if not votes:
            return Consensus()

        grade = self.grade_service.average([v.grade for v in votes if v.grade], grading_system)
        descriptors = normalize_descriptors(d for v in votes for d in v.descriptors)

        logger.debug(
            "Aggregated votes",
            extra={"vote_count": len(votes), "consensus_grade": grade, "descriptor_count": len(descriptors)}
        )
        return Consensus(grade=grade, descriptors=descriptors)

    def statistics(self, votes: Optional[Iterable[VoteLike]], grading_system: GradingSystemLike) -> VoteStatistics:
        """Vote statistics for a climb.

        Grade distribution counts raw grade text; votes without a grade are
        left out of it and of the average. Votes with a height are
        split into short (<165), average (165-180) and tall (>180) bands;
        votes without one are only counted in ``without_height``.
        """
        votes = _coerce_votes(votes)
        if not votes:
            return VoteStatistics()

        grade_distribution: Dict[str, int] = {}
        grade_by_height: Dict[str, GradeHeightCounts] = {}
        breakdown = HeightBreakdown()

        for vote in votes:
            # Rows without a grade still count towards totals and heights
            per_grade = None
            if vote.grade:
                grade_distribution[vote.grade] = grade_distribution.get(vote.grade, 0) + 1
                per_grade = grade_by_height.setdefault(vote.grade, GradeHeightCounts())

            if vote.has_height:
                band = HeightBand.for_height(vote.height)
                breakdown.with_height += 1
                breakdown.by_range[band.value] += 1
                if per_grade is not None:
                    setattr(per_grade, band.value, getattr(per_grade, band.value) + 1)
            else:
                breakdown.without_height += 1
                if per_grade is not None:
                    per_grade.no_height += 1

        return VoteStatistics(
            total_votes=len(votes),
            average_grade=self.grade_service.average([v.grade for v in votes if v.grade], grading_system),
            grade_distribution=grade_distribution,
            height_breakdown=breakdown,
            grade_by_height=grade_by_height,
        )
