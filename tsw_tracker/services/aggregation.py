"""
Per-tag aggregation of check-in outcomes.

This module groups normalized check-ins by trigger tag and accumulates the
counts and totals every downstream analysis derives its statistics from.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Sequence, Set

from tsw_tracker.services.constants import HIGH_INTENSITY_THRESHOLD
from tsw_tracker.services.ingestion import NormalizedCheckIn

@dataclass
class TagStats:
    """Accumulated outcomes of the check-ins that logged one tag."""
    count: int = 0
    days: Set[date] = field(default_factory=set)
    total_intensity: float = 0.0
    total_symptom_severity: int = 0
    total_symptoms: int = 0
    high_intensity_count: int = 0

    @property
    def unique_days(self) -> int:
        return len(self.days)

    @property
    def mean_intensity(self) -> float:
        return self.total_intensity / self.count if self.count else 0.0

    @property
    def mean_symptom_severity(self) -> float:
        return self.total_symptom_severity / self.total_symptoms if self.total_symptoms else 0.0

    @property
    def high_intensity_rate(self) -> float:
        return self.high_intensity_count / self.count if self.count else 0.0

    def add(self, check_in: NormalizedCheckIn) -> None:
        """Fold one check-in into the totals."""
        self.count += 1
        self.days.add(check_in.day)
        self.total_intensity += check_in.intensity
        self.total_symptom_severity += check_in.symptom_severity
        self.total_symptoms += check_in.symptom_count
        if check_in.intensity >= HIGH_INTENSITY_THRESHOLD:
            self.high_intensity_count += 1

def aggregate_tags(check_ins: Sequence[NormalizedCheckIn]) -> Dict[str, TagStats]:
    """
    Group check-ins by tag.

    Args:
        check_ins: Normalized check-ins, in any order

    Returns:
        Mapping of normalized tag to its accumulated statistics. Check-ins
        without tags contribute nothing.

    Example:
        >>> stats = aggregate_tags(check_ins)
        >>> stats["stress"].unique_days
        3
    """
    stats: Dict[str, TagStats] = {}
    for check_in in check_ins:
        for tag in check_in.tags:
            stats.setdefault(tag, TagStats()).add(check_in)
    return stats
