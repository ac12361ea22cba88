from boulderlog.services.votes.vote_aggregator import VoteAggregator, normalize_descriptors

__all__ = ["VoteAggregator", "normalize_descriptors"]
