"""
Baseline skin intensity calculations.

A baseline is the mean skin intensity over a reference subset of check-ins:
the whole selected window, the recent period, or the historical period
preceding it. Effect sizes are always measured against a baseline.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from statistics import mean
from typing import List, Optional, Sequence, Tuple

from tsw_tracker.models.report import BaselineConfidence
from tsw_tracker.services.constants import (
    NEUTRAL_INTENSITY,
    BASELINE_FLOOR,
    EARLY_BASELINE_MAX_DAYS,
    PROVISIONAL_BASELINE_MAX_DAYS
)
from tsw_tracker.services.ingestion import NormalizedCheckIn

@dataclass
class Baselines:
    """Baselines for the whole log and its recent/historical split."""
    overall: float
    recent: float
    historical: float

def calculate_baseline(
    check_ins: Sequence[NormalizedCheckIn],
    fallback: Optional[float] = None
) -> float:
    """
    Mean skin intensity of a subset of check-ins.

    Args:
        check_ins: Reference subset
        fallback: Value returned for an empty subset, normally the overall
            baseline. Defaults to the neutral intensity.

    Returns:
        Mean intensity as a float
    """
    if not check_ins:
        return fallback if fallback is not None else NEUTRAL_INTENSITY
    return mean(c.intensity for c in check_ins)

def baseline_denominator(baseline: float) -> float:
    """Baseline used as a divisor, floored so percentages stay bounded."""
    return max(baseline, BASELINE_FLOOR)

def split_recent(
    check_ins: Sequence[NormalizedCheckIn],
    recent_days: int,
    today: date
) -> Tuple[List[NormalizedCheckIn], List[NormalizedCheckIn]]:
    """
    Split check-ins into the recent period and its historical complement.

    Args:
        check_ins: Normalized check-ins
        recent_days: Length of the recent period, today included
        today: Reference day

    Returns:
        Tuple of (recent, historical) check-ins
    """
    cutoff = today - timedelta(days=recent_days - 1)
    recent = [c for c in check_ins if c.day >= cutoff]
    historical = [c for c in check_ins if c.day < cutoff]
    return recent, historical

def period_baselines(
    check_ins: Sequence[NormalizedCheckIn],
    recent: Sequence[NormalizedCheckIn],
    historical: Sequence[NormalizedCheckIn]
) -> Baselines:
    """Baselines of the log and of its two periods, empty periods falling back to the log."""
    overall = calculate_baseline(check_ins)
    return Baselines(
        overall=overall,
        recent=calculate_baseline(recent, fallback=overall),
        historical=calculate_baseline(historical, fallback=overall)
    )

def baseline_confidence(check_ins: Sequence[NormalizedCheckIn]) -> BaselineConfidence:
    """
    How mature the personal baseline is, by number of distinct logged days.
    """
    logged_days = len({c.day for c in check_ins})
    if logged_days < EARLY_BASELINE_MAX_DAYS:
        return BaselineConfidence.EARLY
    if logged_days < PROVISIONAL_BASELINE_MAX_DAYS:
        return BaselineConfidence.PROVISIONAL
    return BaselineConfidence.MATURE
