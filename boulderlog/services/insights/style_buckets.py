"""
Style bucket scoring and radar axes.

Descriptors roll up into four visualized buckets (power, grip strength,
technique, coordination) plus an "other" bucket that is never scored.
"""

from typing import Dict, List, Mapping, Optional, Sequence

from boulderlog.models.enums import StyleBucket
from boulderlog.schemas.insights import DescriptorStats, RadarAxis


def compute_bucket_scores(
    descriptor_stats: Sequence[DescriptorStats],
    descriptor_buckets: Mapping[str, Sequence[StyleBucket]]
) -> Dict[str, Optional[float]]:
    """Route-weighted success rate per radar bucket.

    A bucket with no routes scores None. Descriptors missing from the mapping
    are ignored.
    """
    totals = {bucket: [0, 0] for bucket in StyleBucket.radar_buckets()}
    for stats in descriptor_stats:
        for bucket in descriptor_buckets.get(stats.descriptor, []):
            bucket = StyleBucket(bucket)
            if bucket not in totals:
                continue
            totals[bucket][0] += stats.successful_routes
            totals[bucket][1] += stats.total_routes

    return {
        bucket.value: round(successful / total * 100, 2) if total else None
        for bucket, (successful, total) in totals.items()
    }


def build_radar_axes(
    strengths: Sequence[DescriptorStats],
    weaknesses: Sequence[DescriptorStats],
    preferences: Sequence[DescriptorStats],
    limit: int = 5
) -> List[RadarAxis]:
    """Pick the strongest signals for the style radar.

    Strengths score their success rate, weaknesses the inverse, preferences
    ten points per route capped at 100. The top ``limit`` are normalized
    against the largest value.
    """
    candidates = (
        [(s.descriptor, "strength", s.success_rate) for s in strengths]
        + [(w.descriptor, "weakness", 100 - w.success_rate) for w in weaknesses]
        + [(p.descriptor, "preference", float(min(p.total_routes * 10, 100))) for p in preferences]
    )
    if not candidates:
        return []

    top = sorted(candidates, key=lambda c: c[2], reverse=True)[:limit]
    max_value = max(c[2] for c in top) or 1

    return [
        RadarAxis(
            descriptor=descriptor,
            type=kind,
            raw_value=raw,
            normalized_value=raw / max_value,
        )
        for descriptor, kind, raw in top
    ]
