"""
Delayed-reaction analysis for foods and topical products.

Same-day correlation misses reactions that show up a day or more after an
exposure. For every food (or product) this module looks at the skin
intensity over the three days following each exposure and compares it with
a local baseline of nearby days on which the item was not logged. Each
exposure is classified as worse, better or neutral, and the outcomes are
rolled up into a pattern and a confidence tier.

Typical usage:
    check_ins = normalize_check_ins(rows)
    for food in analyze_food_reactions(check_ins, period_days=30):
        print(f"{food.label}: {get_pattern_label(food.pattern)} "
              f"({get_confidence_label(food.confidence)})")
"""
import math
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Set

from tsw_tracker.models.reaction import (
    ExposureOutcome,
    ReactionAnalysis,
    ReactionConfidence,
    ReactionPattern
)
from tsw_tracker.services.constants import (
    BETTER_THRESHOLD,
    COMPARISON_PRECISION,
    CONFIDENCE_LABELS,
    CONSISTENCY_THRESHOLD,
    DOMINANT_OUTCOME_RATIO,
    LOCAL_BASELINE_WINDOW,
    LOW_CONFIDENCE_MAX_LOGS,
    MEDIUM_CONFIDENCE_MAX_LOGS,
    MINIMUM_LOGS_THRESHOLD,
    MIXED_OUTCOME_RATIO,
    PATTERN_LABELS,
    PATTERN_WEIGHTS,
    REACTION_DAYS,
    WORSE_THRESHOLD
)
from tsw_tracker.services.ingestion import NormalizedCheckIn
from tsw_tracker.services.tags import TagKind, tag_kind, tag_name, title_case
from tsw_tracker.services.windows import filter_recent_days
from tsw_tracker.utils.logging import logger

def build_daily_intensity(check_ins: Sequence[NormalizedCheckIn]) -> Dict[date, float]:
    """Average skin intensity of every logged day."""
    totals: Dict[date, List[float]] = {}
    for check_in in check_ins:
        totals.setdefault(check_in.day, []).append(check_in.intensity)
    return {day: sum(values) / len(values) for day, values in totals.items()}

def build_daily_items(
    check_ins: Sequence[NormalizedCheckIn],
    kind: TagKind
) -> Dict[date, Set[str]]:
    """Names of the foods or products logged on every day."""
    items: Dict[date, Set[str]] = {}
    for check_in in check_ins:
        for tag in check_in.tags:
            if tag_kind(tag) is kind:
                items.setdefault(check_in.day, set()).add(tag_name(tag))
    return items

def local_baseline(
    intensity_by_day: Dict[date, float],
    items_by_day: Dict[date, Set[str]],
    exposure_day: date,
    name: str,
    window_days: int = LOCAL_BASELINE_WINDOW
) -> Optional[float]:
    """
    Average intensity of the days around an exposure that did not log the item.

    Args:
        intensity_by_day: Daily average intensity
        items_by_day: Items logged per day
        exposure_day: Day the item was logged
        name: Item name
        window_days: Days on either side of the exposure to consider

    Returns:
        Local baseline, or None if no nearby day qualifies
    """
    values = []
    for offset in range(-window_days, window_days + 1):
        if offset == 0:
            continue
        day = exposure_day + timedelta(days=offset)
        intensity = intensity_by_day.get(day)
        if intensity is None or name in items_by_day.get(day, ()):
            continue
        values.append(intensity)

    if not values:
        return None
    return sum(values) / len(values)

def post_exposure_intensity(
    intensity_by_day: Dict[date, float],
    exposure_day: date,
    reaction_days: Sequence[int] = REACTION_DAYS
) -> Optional[float]:
    """Average intensity over the logged days of the reaction window (D+1..D+3)."""
    values = [
        intensity_by_day[day]
        for day in (exposure_day + timedelta(days=offset) for offset in reaction_days)
        if day in intensity_by_day
    ]
    if not values:
        return None
    return sum(values) / len(values)

def classify_exposure(post_intensity: float, baseline: float) -> ExposureOutcome:
    """Classify one exposure by how far the aftermath strayed from the local baseline."""
    delta = round(post_intensity - baseline, COMPARISON_PRECISION)
    if delta >= WORSE_THRESHOLD:
        return ExposureOutcome.WORSE
    if delta <= BETTER_THRESHOLD:
        return ExposureOutcome.BETTER
    return ExposureOutcome.NEUTRAL

def calculate_pattern(worse: int, better: int, neutral: int, total: int) -> ReactionPattern:
    """
    Roll exposure outcomes up into a pattern.

    A dominant outcome needs at least 60% of exposures. Otherwise, if worse and
    better together make up half of them the item is mixed.
    """
    if total == 0:
        return ReactionPattern.INSUFFICIENT_DATA

    worse_ratio = worse / total
    better_ratio = better / total

    if worse_ratio >= DOMINANT_OUTCOME_RATIO:
        return ReactionPattern.OFTEN_WORSE
    if better_ratio >= DOMINANT_OUTCOME_RATIO:
        return ReactionPattern.OFTEN_BETTER
    if worse_ratio + better_ratio >= MIXED_OUTCOME_RATIO:
        return ReactionPattern.MIXED
    return ReactionPattern.NO_PATTERN

def calculate_consistency(worse: int, better: int, neutral: int, total: int) -> float:
    """
    Share of the most common outcome, from 0 to 1.

    5 worse out of 5 gives 1.0; 2 worse, 2 better and 1 neutral gives 0.4.
    """
    if total == 0:
        return 0.0
    return max(worse, better, neutral) / total

def calculate_confidence(count: int, consistency: float) -> ReactionConfidence:
    """
    Confidence tier from the number of logs and the outcome consistency.

    Fewer than 3 logs is not enough data, up to 4 is low, 5-7 is medium and
    8 or more is high. Inconsistent outcomes drop the tier by one step.
    """
    if count < MINIMUM_LOGS_THRESHOLD:
        return ReactionConfidence.INSUFFICIENT_DATA
    if count <= LOW_CONFIDENCE_MAX_LOGS:
        return ReactionConfidence.LOW
    if count <= MEDIUM_CONFIDENCE_MAX_LOGS:
        return ReactionConfidence.MEDIUM if consistency >= CONSISTENCY_THRESHOLD else ReactionConfidence.LOW
    return ReactionConfidence.HIGH if consistency >= CONSISTENCY_THRESHOLD else ReactionConfidence.MEDIUM

def _ranking_key(result: ReactionAnalysis):
    score = PATTERN_WEIGHTS[result.pattern] * result.consistency * math.log(result.count + 1)
    return (result.pattern == ReactionPattern.INSUFFICIENT_DATA, -score, result.name)

def _analyze_item(
    name: str,
    kind: TagKind,
    log_days: Set[date],
    intensity_by_day: Dict[date, float],
    items_by_day: Dict[date, Set[str]]
) -> ReactionAnalysis:
    count = len(log_days)
    if count < MINIMUM_LOGS_THRESHOLD:
        return ReactionAnalysis(
            name=name,
            label=title_case(name),
            kind=kind.value,
            count=count,
            pattern=ReactionPattern.INSUFFICIENT_DATA,
            confidence=calculate_confidence(count, 0.0)
        )

    outcomes = {outcome: 0 for outcome in ExposureOutcome}
    folded: Set[date] = set()

    for exposure_day in sorted(log_days):
        # Logs inside an earlier exposure's reaction window belong to that exposure
        if exposure_day in folded:
            continue
        for offset in REACTION_DAYS:
            follow_up = exposure_day + timedelta(days=offset)
            if follow_up in log_days:
                folded.add(follow_up)

        post_intensity = post_exposure_intensity(intensity_by_day, exposure_day)
        if post_intensity is None:
            continue
        baseline = local_baseline(intensity_by_day, items_by_day, exposure_day, name)
        if baseline is None:
            continue

        outcomes[classify_exposure(post_intensity, baseline)] += 1

    worse = outcomes[ExposureOutcome.WORSE]
    better = outcomes[ExposureOutcome.BETTER]
    neutral = outcomes[ExposureOutcome.NEUTRAL]
    analyzable = worse + better + neutral

    if analyzable >= MINIMUM_LOGS_THRESHOLD:
        pattern = calculate_pattern(worse, better, neutral, analyzable)
    else:
        pattern = ReactionPattern.INSUFFICIENT_DATA
    consistency = calculate_consistency(worse, better, neutral, analyzable)

    return ReactionAnalysis(
        name=name,
        label=title_case(name),
        kind=kind.value,
        count=count,
        days_worse_after=worse,
        days_better_after=better,
        days_neutral_after=neutral,
        analyzable_exposures=analyzable,
        pattern=pattern,
        consistency=round(consistency, 4),
        confidence=calculate_confidence(count, consistency)
    )

def analyze_delayed_reactions(
    check_ins: Sequence[NormalizedCheckIn],
    kind: TagKind,
    period_days: Optional[int] = None,
    today: Optional[date] = None
) -> List[ReactionAnalysis]:
    """
    Analyze delayed reactions to every food or product in the log.

    Args:
        check_ins: Normalized check-ins
        kind: TagKind.FOOD or TagKind.PRODUCT
        period_days: Lookback in days, None for the whole log
        today: Reference day, defaults to the current date

    Returns:
        One ReactionAnalysis per item, strongest worsening patterns first and
        items without enough data last

    Raises:
        ValueError: If kind is TagKind.TRIGGER
    """
    kind = TagKind(kind)
    if kind is TagKind.TRIGGER:
        raise ValueError("Delayed reactions are analyzed for foods and products only")

    filtered = filter_recent_days(check_ins, period_days, today)
    if not filtered:
        return []

    intensity_by_day = build_daily_intensity(filtered)
    items_by_day = build_daily_items(filtered, kind)

    log_days_by_item: Dict[str, Set[date]] = {}
    for day, names in items_by_day.items():
        for name in names:
            log_days_by_item.setdefault(name, set()).add(day)

    results = [
        _analyze_item(name, kind, log_days, intensity_by_day, items_by_day)
        for name, log_days in log_days_by_item.items()
    ]
    results.sort(key=_ranking_key)

    logger.debug(f"Analyzed delayed reactions for {len(results)} items", extra={
        "kind": kind.value,
        "period_days": period_days,
        "check_ins": len(filtered)
    })
    return results

def analyze_food_reactions(
    check_ins: Sequence[NormalizedCheckIn],
    period_days: Optional[int] = None,
    today: Optional[date] = None
) -> List[ReactionAnalysis]:
    """Delayed-reaction analysis of logged foods."""
    return analyze_delayed_reactions(check_ins, TagKind.FOOD, period_days, today)

def analyze_product_reactions(
    check_ins: Sequence[NormalizedCheckIn],
    period_days: Optional[int] = None,
    today: Optional[date] = None
) -> List[ReactionAnalysis]:
    """Delayed-reaction analysis of logged topical products."""
    return analyze_delayed_reactions(check_ins, TagKind.PRODUCT, period_days, today)

def get_pattern_label(pattern: ReactionPattern) -> str:
    """Display label for a reaction pattern."""
    return PATTERN_LABELS[ReactionPattern(pattern)]

def get_confidence_label(confidence: ReactionConfidence) -> str:
    """Display label for a confidence tier."""
    return CONFIDENCE_LABELS[ReactionConfidence(confidence)]
