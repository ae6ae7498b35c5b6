"""
Weighted trigger impact ranking.

Scores every tag by how often it coincides with high-intensity skin days,
how severe the logged symptoms were, and the average intensity::

    impact = high_intensity_rate * 70 + avg_symptom_severity * 10 + avg_intensity * 4
"""
from typing import Dict, List, Optional, Sequence

from tsw_tracker.models.pattern import TriggerImpact
from tsw_tracker.services.aggregation import TagStats, aggregate_tags
from tsw_tracker.services.constants import (
    MIN_IMPACT_OCCURRENCES,
    HIGH_INTENSITY_RATE_WEIGHT,
    SYMPTOM_SEVERITY_WEIGHT,
    INTENSITY_WEIGHT
)
from tsw_tracker.services.ingestion import NormalizedCheckIn
from tsw_tracker.services.tags import tag_label
from tsw_tracker.services.utils import round_half_up

def impact_score(stats: TagStats) -> float:
    """Weighted impact score of one tag."""
    return (
        stats.high_intensity_rate * HIGH_INTENSITY_RATE_WEIGHT
        + stats.mean_symptom_severity * SYMPTOM_SEVERITY_WEIGHT
        + stats.mean_intensity * INTENSITY_WEIGHT
    )

def rank_trigger_impact(
    check_ins: Sequence[NormalizedCheckIn],
    min_occurrences: int = MIN_IMPACT_OCCURRENCES,
    limit: Optional[int] = None,
    stats: Optional[Dict[str, TagStats]] = None
) -> List[TriggerImpact]:
    """
    Rank tags by weighted impact score.

    Args:
        check_ins: Normalized check-ins
        min_occurrences: Minimum number of check-ins logging a tag
        limit: Optional maximum number of entries to return
        stats: Pre-computed aggregation of ``check_ins``, to avoid regrouping

    Returns:
        TriggerImpact entries sorted by descending impact score
    """
    if stats is None:
        stats = aggregate_tags(check_ins)

    ranked = [
        TriggerImpact(
            tag=tag,
            label=tag_label(tag),
            count=data.count,
            high_intensity_rate=round_half_up(data.high_intensity_rate * 100),
            avg_intensity=round_half_up(data.mean_intensity, 1),
            impact_score=round_half_up(impact_score(data))
        )
        for tag, data in stats.items()
        if data.count >= min_occurrences
    ]
    ranked.sort(key=lambda t: (-t.impact_score, -t.count, t.tag))

    return ranked[:limit] if limit is not None else ranked
