"""
Trigger pattern classification.

This module decides which trigger tags correlate with worse same-day skin
intensity within a selected window, which tags used to but no longer do,
and in which direction each active pattern is heading.

Typical usage:
    check_ins = normalize_check_ins(rows)
    report = analyze_trigger_patterns(check_ins, TimeWindow.MONTH)
    for pattern in report.active_patterns:
        print(f"{pattern.label}: {pattern.percent_change}% worse ({pattern.trend.value})")
"""
from datetime import date
from typing import Dict, List, Optional, Sequence, Union

from tsw_tracker.models.pattern import (
    Pattern,
    PatternConfidence,
    PatternReport,
    ReportStatus,
    ResolvedTrigger,
    Trend
)
from tsw_tracker.models.window import TimeWindow
from tsw_tracker.services.aggregation import TagStats, aggregate_tags
from tsw_tracker.services.baseline import (
    Baselines,
    baseline_denominator,
    calculate_baseline,
    period_baselines,
    split_recent
)
from tsw_tracker.services.constants import (
    COMPARISON_PRECISION,
    EFFECT_SCORE_MULTIPLIER,
    HIGH_CONFIDENCE_MIN_DAYS,
    HIGH_CONFIDENCE_MIN_IMPACT,
    IMPACT_THRESHOLD,
    MIN_TREND_DAYS,
    MIN_UNIQUE_DAYS,
    RECENT_PERIOD_DAYS,
    RESOLVED_MIN_UNIQUE_DAYS,
    TREND_THRESHOLD
)
from tsw_tracker.services.ingestion import NormalizedCheckIn
from tsw_tracker.services.tags import tag_kind, tag_label
from tsw_tracker.services.trigger_impact import rank_trigger_impact
from tsw_tracker.services.utils import round_half_up
from tsw_tracker.services.windows import filter_by_window, resolve_window
from tsw_tracker.utils.logging import logger

def compute_impact(stats: TagStats, baseline: float) -> float:
    """
    Mean intensity on the tag's check-ins minus the baseline.

    Rounded to a fixed precision so threshold comparisons are not decided
    by floating point noise.
    """
    return round(stats.mean_intensity - baseline, COMPARISON_PRECISION)

def classify_trend(
    recent_impact: float,
    historical_impact: float,
    threshold: float = TREND_THRESHOLD
) -> Trend:
    """
    Classify the change in impact between the historical and recent periods.

    Args:
        recent_impact: Impact delta in the recent period
        historical_impact: Impact delta in the historical period
        threshold: Minimum change to leave the stable band

    Returns:
        IMPROVING if impact dropped by more than the threshold, WORSENING if it
        rose by more than the threshold, STABLE otherwise
    """
    change = round(recent_impact - historical_impact, COMPARISON_PRECISION)
    if change < -threshold:
        return Trend.IMPROVING
    if change > threshold:
        return Trend.WORSENING
    return Trend.STABLE

def is_high_confidence(unique_days: int, impact_delta: float) -> bool:
    """High confidence needs both enough distinct days and a large effect."""
    return unique_days >= HIGH_CONFIDENCE_MIN_DAYS and impact_delta > HIGH_CONFIDENCE_MIN_IMPACT

def percent_change(impact_delta: float, baseline: float) -> int:
    """Impact relative to the baseline, as a whole percentage."""
    return round_half_up(impact_delta / baseline_denominator(baseline) * 100)

def effect_score(impact_delta: float) -> float:
    """Sort score of an active pattern."""
    return round_half_up(impact_delta * EFFECT_SCORE_MULTIPLIER, 1)

def _period_trend(
    tag: str,
    recent_stats: Dict[str, TagStats],
    historical_stats: Dict[str, TagStats],
    baselines: Baselines
):
    """Return (trend, recent_impact, historical_impact) for one tag."""
    recent = recent_stats.get(tag)
    historical = historical_stats.get(tag)
    recent_impact = compute_impact(recent, baselines.recent) if recent else None
    historical_impact = compute_impact(historical, baselines.historical) if historical else None

    if (
        recent is None or historical is None
        or recent.unique_days < MIN_TREND_DAYS
        or historical.unique_days < MIN_TREND_DAYS
    ):
        return Trend.STABLE, recent_impact, historical_impact

    return classify_trend(recent_impact, historical_impact), recent_impact, historical_impact

def find_active_patterns(
    stats: Dict[str, TagStats],
    baseline: float,
    recent_stats: Dict[str, TagStats],
    historical_stats: Dict[str, TagStats],
    baselines: Baselines,
    min_unique_days: int = MIN_UNIQUE_DAYS
) -> List[Pattern]:
    """
    Select tags whose same-day impact clears the evidence and effect thresholds.

    Args:
        stats: Aggregation of the windowed check-ins
        baseline: Baseline of the windowed check-ins
        recent_stats: Aggregation of the recent period
        historical_stats: Aggregation of the historical period
        baselines: Period baselines for trend classification
        min_unique_days: Minimum number of distinct days a tag must be logged on

    Returns:
        Active patterns sorted by descending effect score
    """
    patterns = []
    for tag, data in stats.items():
        impact = compute_impact(data, baseline)
        if data.unique_days < min_unique_days or impact <= IMPACT_THRESHOLD:
            continue

        trend, recent_impact, historical_impact = _period_trend(
            tag, recent_stats, historical_stats, baselines
        )
        high_confidence = is_high_confidence(data.unique_days, impact)

        patterns.append(Pattern(
            tag=tag,
            label=tag_label(tag),
            kind=tag_kind(tag).value,
            count=data.count,
            unique_days=data.unique_days,
            mean_intensity=round_half_up(data.mean_intensity, 2),
            baseline=round_half_up(baseline, 2),
            impact_delta=impact,
            percent_change=percent_change(impact, baseline),
            effect_score=effect_score(impact),
            is_high_confidence=high_confidence,
            confidence=PatternConfidence.HIGH if high_confidence else PatternConfidence.EARLY,
            trend=trend,
            recent_impact=recent_impact,
            historical_impact=historical_impact
        ))

    patterns.sort(key=lambda p: (-p.effect_score, -p.unique_days, p.tag))
    return patterns

def find_resolved_triggers(
    recent_stats: Dict[str, TagStats],
    historical_stats: Dict[str, TagStats],
    baselines: Baselines,
    active_tags: set
) -> List[ResolvedTrigger]:
    """
    Select tags that were a problem historically but no longer are.

    A tag is resolved when it had a qualifying impact in the historical
    period, is not an active pattern, and was still logged recently with an
    impact at or below the recent baseline. Tags not logged at all in the
    recent period are left out: there is no evidence either way.
    """
    resolved = []
    for tag, historical in historical_stats.items():
        if tag in active_tags or historical.unique_days < RESOLVED_MIN_UNIQUE_DAYS:
            continue

        historical_impact = compute_impact(historical, baselines.historical)
        if historical_impact <= IMPACT_THRESHOLD:
            continue

        recent = recent_stats.get(tag)
        if recent is None:
            continue

        recent_impact = compute_impact(recent, baselines.recent)
        if recent_impact > 0:
            continue

        resolved.append(ResolvedTrigger(
            tag=tag,
            label=tag_label(tag),
            kind=tag_kind(tag).value,
            historical_impact=historical_impact,
            recent_impact=recent_impact,
            historical_unique_days=historical.unique_days,
            recent_unique_days=recent.unique_days
        ))

    resolved.sort(key=lambda r: (-(r.historical_impact - r.recent_impact), r.tag))
    return resolved

def analyze_trigger_patterns(
    check_ins: Sequence[NormalizedCheckIn],
    window: Union[TimeWindow, str] = TimeWindow.ALL,
    today: Optional[date] = None,
    min_unique_days: int = MIN_UNIQUE_DAYS,
    recent_days: int = RECENT_PERIOD_DAYS
) -> PatternReport:
    """
    Run the same-day trigger correlation analysis.

    Active patterns are computed over the selected window. Trends and
    resolved triggers compare the last ``recent_days`` days of the full log
    with everything before them, so a short window still sees its history.

    Args:
        check_ins: Normalized check-ins (full log)
        window: Selected time window
        today: Reference day, defaults to the current date
        min_unique_days: Evidence threshold for active patterns
        recent_days: Length of the recent period

    Returns:
        PatternReport whose status distinguishes "no trigger data at all",
        "not enough data yet", "nothing qualifies" and "patterns found"
    """
    window = resolve_window(window)
    today = today or date.today()

    windowed = filter_by_window(check_ins, window, today)
    tagged = [c for c in windowed if c.tags]
    tagged_days = {c.day for c in tagged}

    report_fields = {
        "window": window,
        "check_in_count": len(windowed),
        "tagged_check_in_count": len(tagged),
        "tagged_day_count": len(tagged_days),
        "min_unique_days": min_unique_days
    }

    if not tagged:
        logger.info("No trigger data in window", extra={"window": window.value})
        return PatternReport(status=ReportStatus.NO_DATA, **report_fields)

    if len(tagged_days) < min_unique_days:
        logger.info("Not enough tagged days for trigger patterns", extra={
            "window": window.value,
            "tagged_days": len(tagged_days),
            "required": min_unique_days
        })
        # The impact ranking has its own, lower occurrence threshold
        return PatternReport(
            status=ReportStatus.INSUFFICIENT_DATA,
            breakdown=rank_trigger_impact(windowed),
            **report_fields
        )

    baseline = calculate_baseline(windowed)
    stats = aggregate_tags(windowed)

    recent, historical = split_recent(check_ins, recent_days, today)
    baselines = period_baselines(check_ins, recent, historical)
    recent_stats = aggregate_tags(recent)
    historical_stats = aggregate_tags(historical)

    active = find_active_patterns(
        stats, baseline, recent_stats, historical_stats, baselines, min_unique_days
    )
    resolved = find_resolved_triggers(
        recent_stats, historical_stats, baselines, {p.tag for p in active}
    )

    logger.info(f"Found {len(active)} active trigger patterns", extra={
        "window": window.value,
        "tags_analyzed": len(stats),
        "resolved": len(resolved),
        "baseline": round(baseline, 2)
    })

    return PatternReport(
        status=ReportStatus.PATTERNS_FOUND if active else ReportStatus.NO_PATTERNS,
        baseline=round_half_up(baseline, 2),
        active_patterns=active,
        resolved_triggers=resolved,
        breakdown=rank_trigger_impact(windowed, stats=stats),
        **report_fields
    )
