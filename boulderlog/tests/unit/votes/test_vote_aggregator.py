"""
Unit tests for VoteAggregator.

These tests cover consensus computation, descriptor normalization, vote
validation and upsert, and the vote statistics breakdowns.
"""

import pytest

from boulderlog.core.exceptions import (
    InvalidDescriptorError,
    InvalidGradeFormat,
    InvalidGradeRange,
    ValidationError,
)
from boulderlog.models.enums import GradingSystem
from boulderlog.schemas.votes import Vote
from boulderlog.services.votes.vote_aggregator import VoteAggregator, normalize_descriptors


@pytest.fixture
def sample_votes():
    return [
        Vote(climb_id="c1", user_id="u1", grade="V4", height=160, descriptors=["Crimpy", " dyno "]),
        Vote(climb_id="c1", user_id="u2", grade="V5", height=175, descriptors=["crimpy"]),
        Vote(climb_id="c1", user_id="u3", grade="V4", height=190, descriptors=[]),
        Vote(climb_id="c1", user_id="u4", grade="V6"),
    ]


def test_normalize_descriptors():
    assert normalize_descriptors(["  Crimpy", "crimpy", "", "   ", None, "DYNO"]) == ["crimpy", "dyno"]
    assert normalize_descriptors(None) == []


def test_aggregate_consensus(vote_aggregator, sample_votes):
    """Consensus grade is the rounded mean; descriptors are the normalized union."""
    consensus = vote_aggregator.aggregate(sample_votes, GradingSystem.V_SCALE)

    # (4 + 5 + 4 + 6) / 4 = 4.75
    assert consensus.grade == "V5"
    assert consensus.descriptors == ["crimpy", "dyno"]


def test_aggregate_empty(vote_aggregator):
    consensus = vote_aggregator.aggregate([], GradingSystem.FRENCH)
    assert consensus.grade is None
    assert consensus.descriptors == []


def test_aggregate_accepts_plain_mappings(vote_aggregator):
    """Votes can arrive as dicts straight from the persistence layer."""
    consensus = vote_aggregator.aggregate(
        [{"grade": "6a"}, {"grade": "6b", "descriptors": ["Slab"]}, {"grade": "6b", "descriptors": None}],
        "French",
    )
    # (30 + 32 + 32) / 3 = 31.33
    assert consensus.grade == "6a+"
    assert consensus.descriptors == ["slab"]


def test_aggregate_ignores_unparsable_grades(vote_aggregator):
    """Historical grades that no longer parse are dropped from the average."""
    consensus = vote_aggregator.aggregate(
        [Vote(grade="V3"), Vote(grade="V3+"), Vote(grade="5.10a", descriptors=["technical"])],
        GradingSystem.V_SCALE,
    )
    assert consensus.grade == "V3"
    assert consensus.descriptors == ["technical"]


def test_aggregate_does_not_mutate_input(vote_aggregator, sample_votes):
    before = [v.model_copy(deep=True) for v in sample_votes]
    vote_aggregator.aggregate(sample_votes, GradingSystem.V_SCALE)
    assert sample_votes == before


def test_statistics_zero_votes(vote_aggregator):
    """Zero votes produce a zero-valued result rather than an error."""
    stats = vote_aggregator.statistics([], GradingSystem.V_SCALE)

    assert stats.to_response() == {
        "totalVotes": 0,
        "averageGrade": None,
        "gradeDistribution": {},
        "heightBreakdown": {
            "withHeight": 0,
            "withoutHeight": 0,
            "byRange": {"short": 0, "average": 0, "tall": 0},
        },
        "gradeByHeight": {},
    }


def test_statistics_breakdown(vote_aggregator, sample_votes):
    stats = vote_aggregator.statistics(sample_votes, GradingSystem.V_SCALE)

    assert stats.total_votes == 4
    assert stats.average_grade == "V5"
    assert stats.grade_distribution == {"V4": 2, "V5": 1, "V6": 1}
    assert stats.height_breakdown.with_height == 3
    assert stats.height_breakdown.without_height == 1
    assert stats.height_breakdown.by_range == {"short": 1, "average": 1, "tall": 1}
    assert stats.grade_by_height["V4"].short == 1
    assert stats.grade_by_height["V4"].tall == 1
    assert stats.grade_by_height["V6"].no_height == 1


@pytest.mark.parametrize("height,band", [
    (164.9, "short"),
    (165, "average"),
    (180, "average"),
    (180.5, "tall"),
])
def test_statistics_height_band_edges(vote_aggregator, height, band):
    stats = vote_aggregator.statistics([Vote(grade="V2", height=height)], GradingSystem.V_SCALE)
    assert stats.height_breakdown.by_range[band] == 1
    assert sum(stats.height_breakdown.by_range.values()) == 1


def test_statistics_distribution_is_verbatim(vote_aggregator):
    """Distribution keys are raw text, not numeric buckets."""
    stats = vote_aggregator.statistics(
        [Vote(grade="V3-V5"), Vote(grade="V3")], GradingSystem.V_SCALE_RANGE
    )
    assert stats.grade_distribution == {"V3-V5": 1, "V3": 1}
    assert stats.average_grade == "V3"


def test_validate_vote_normalizes(vote_aggregator):
    vote = vote_aggregator.validate_vote(
        {"grade": " V4 ", "descriptors": ["Crimpy", "crimpy ", "DYNO"]},
        GradingSystem.V_SCALE_RANGE,
    )
    assert vote.grade == "V4"
    assert vote.descriptors == ["crimpy", "dyno"]


def test_validate_vote_rejects_ranges(vote_aggregator):
    """Votes are always exact grades, even on range climbs."""
    with pytest.raises(InvalidGradeFormat):
        vote_aggregator.validate_vote(Vote(grade="V3-V5"), GradingSystem.V_SCALE_RANGE)


def test_validate_vote_rejects_out_of_range(vote_aggregator):
    with pytest.raises(InvalidGradeRange):
        vote_aggregator.validate_vote(Vote(grade="V19"), GradingSystem.V_SCALE)


def test_validate_vote_rejects_unknown_descriptor(vote_aggregator):
    with pytest.raises(InvalidDescriptorError) as excinfo:
        vote_aggregator.validate_vote(Vote(grade="V4", descriptors=["crimpy", "sketchy"]), GradingSystem.V_SCALE)
    assert excinfo.value.context["descriptors"] == ["sketchy"]


def test_validate_vote_rejects_too_many_descriptors(grade_service):
    aggregator = VoteAggregator(grade_service=grade_service, max_descriptors=2)
    with pytest.raises(InvalidDescriptorError):
        aggregator.validate_vote(
            Vote(grade="V4", descriptors=["crimpy", "dyno", "slab"]), GradingSystem.V_SCALE
        )


def test_custom_vocabulary(grade_service):
    aggregator = VoteAggregator(grade_service=grade_service, descriptors=["Sketchy"])
    vote = aggregator.validate_vote(Vote(grade="6a", descriptors=["sketchy"]), GradingSystem.FRENCH)
    assert vote.descriptors == ["sketchy"]


def test_upsert_vote_replaces_existing(sample_votes):
    """Resubmitting replaces the previous vote for the same (climb, user)."""
    updated = VoteAggregator.upsert_vote(
        sample_votes, Vote(climb_id="c1", user_id="u2", grade="V7")
    )
    assert len(updated) == len(sample_votes)
    assert [v.grade for v in updated if v.user_id == "u2"] == ["V7"]
    assert sample_votes[1].grade == "V5"


def test_upsert_vote_appends_new(sample_votes):
    updated = VoteAggregator.upsert_vote(sample_votes, Vote(climb_id="c1", user_id="u9", grade="V3"))
    assert len(updated) == len(sample_votes) + 1
    assert updated[-1].user_id == "u9"


def test_upsert_vote_collapses_duplicates():
    votes = [
        Vote(climb_id="c1", user_id="u1", grade="V1"),
        Vote(climb_id="c1", user_id="u1", grade="V2"),
    ]
    updated = VoteAggregator.upsert_vote(votes, Vote(climb_id="c1", user_id="u1", grade="V3"))
    assert [v.grade for v in updated] == ["V3"]


def test_stored_vote_without_grade_is_skipped(vote_aggregator):
    """A stored row with no grade must not break the consensus."""
    consensus = vote_aggregator.aggregate(
        [{"grade": "V4"}, {"grade": None, "descriptors": ["crimpy"]}],
        GradingSystem.V_SCALE,
    )
    assert consensus.grade == "V4"
    assert consensus.descriptors == ["crimpy"]


def test_statistics_skip_votes_without_grade(vote_aggregator):
    stats = vote_aggregator.statistics(
        [{"grade": "V4", "height": 170}, {"grade": None, "height": 190}, {"grade": ""}],
        GradingSystem.V_SCALE,
    )

    assert stats.total_votes == 3
    assert stats.average_grade == "V4"
    assert stats.grade_distribution == {"V4": 1}
    assert list(stats.grade_by_height) == ["V4"]
    assert stats.height_breakdown.by_range == {"short": 0, "average": 1, "tall": 1}
    assert stats.height_breakdown.without_height == 1


@pytest.mark.parametrize("height", [0, -5])
def test_statistics_non_positive_height_counts_as_missing(vote_aggregator, height):
    stats = vote_aggregator.statistics([{"grade": "V4", "height": height}], GradingSystem.V_SCALE)

    assert stats.height_breakdown.with_height == 0
    assert stats.height_breakdown.without_height == 1
    assert stats.grade_by_height["V4"].no_height == 1


def test_validate_vote_requires_grade(vote_aggregator):
    with pytest.raises(InvalidGradeFormat):
        vote_aggregator.validate_vote({"descriptors": ["crimpy"]}, GradingSystem.V_SCALE)


@pytest.mark.parametrize("height", [0, -170])
def test_validate_vote_rejects_non_positive_height(vote_aggregator, height):
    with pytest.raises(ValidationError) as excinfo:
        vote_aggregator.validate_vote(Vote(grade="V4", height=height), GradingSystem.V_SCALE)
    assert excinfo.value.status_code == 422
    assert excinfo.value.context["validation_errors"] == {"height": height}


def test_explicit_zero_max_descriptors(grade_service):
    """An explicit limit of zero is honoured rather than replaced by the default."""
    aggregator = VoteAggregator(grade_service=grade_service, max_descriptors=0)

    assert aggregator.max_descriptors == 0
    assert aggregator.validate_vote(Vote(grade="V4"), GradingSystem.V_SCALE).descriptors == []
    with pytest.raises(InvalidDescriptorError):
        aggregator.validate_vote(Vote(grade="V4", descriptors=["crimpy"]), GradingSystem.V_SCALE)
