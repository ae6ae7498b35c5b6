"""
Improvement correlation ("what helped") analysis.

The log is grouped into Sunday-to-Saturday weeks. A week counts as an
improvement when its average skin intensity dropped by at least 0.5, or its
average symptom severity by at least 0.3, compared with the logged week two
before it. Both weeks of such a pair are improvement weeks, and every other
logged week is a baseline week. The analysis then looks for:

- treatments used in noticeably more improvement weeks than baseline weeks
- triggers that were regularly logged in baseline weeks but mostly absent
  while the skin improved
- sleep scores that were higher during improvement weeks

Typical usage:
    check_ins = normalize_check_ins(rows)
    report = analyze_improvement_correlations(check_ins)
    if report.unlocked:
        for factor in report.helpful_factors:
            print(f"{factor.label}: {factor.correlation_ratio}x")
"""
from dataclasses import dataclass, field
from datetime import date
from statistics import mean
from typing import Callable, Dict, List, Optional, Sequence, Set

from tsw_tracker.models.improvement import (
    CorrelationConfidence,
    CorrelationType,
    ImprovementCorrelation,
    ImprovementPeriod,
    ImprovementReport
)
from tsw_tracker.services.constants import (
    ABSENCE_SMOOTHING,
    COMPARISON_PRECISION,
    HIGH_CORRELATION_MIN_WEEKS,
    IMPROVEMENT_WEEK_GAP,
    INSIGHTS_UNLOCK_DAYS,
    MEDIUM_CORRELATION_MIN_WEEKS,
    MIN_CORRELATION_WEEKS,
    MIN_IMPROVEMENT_USAGE,
    MIN_TRIGGER_BASELINE_PRESENCE,
    SKIN_IMPROVEMENT_THRESHOLD,
    SLEEP_IMPROVEMENT_THRESHOLD,
    SYMPTOM_IMPROVEMENT_THRESHOLD,
    TREATMENT_LABELS,
    TREATMENT_RATIO_THRESHOLD,
    TRIGGER_ABSENCE_RATIO
)
from tsw_tracker.services.ingestion import NormalizedCheckIn
from tsw_tracker.services.tags import TagKind, tag_kind, tag_label
from tsw_tracker.services.utils import round_half_up, week_start
from tsw_tracker.utils.logging import logger

@dataclass
class WeekSummary:
    """Averages and logged factors of one calendar week."""
    week_start: date
    avg_intensity: float
    avg_symptom_severity: float
    avg_sleep: Optional[float] = None
    treatments: Set[str] = field(default_factory=set)
    tags: Set[str] = field(default_factory=set)
    check_in_count: int = 0

def summarize_weeks(check_ins: Sequence[NormalizedCheckIn]) -> List[WeekSummary]:
    """
    Group check-ins into calendar weeks.

    Args:
        check_ins: Normalized check-ins

    Returns:
        One summary per week with at least one check-in, oldest first
    """
    by_week: Dict[date, List[NormalizedCheckIn]] = {}
    for check_in in check_ins:
        by_week.setdefault(week_start(check_in.day), []).append(check_in)

    summaries = []
    for start in sorted(by_week):
        week = by_week[start]
        symptom_count = sum(c.symptom_count for c in week)
        sleep_scores = [c.sleep_score for c in week if c.sleep_score is not None]

        summaries.append(WeekSummary(
            week_start=start,
            avg_intensity=mean(c.intensity for c in week),
            avg_symptom_severity=(
                sum(c.symptom_severity for c in week) / symptom_count if symptom_count else 0.0
            ),
            avg_sleep=mean(sleep_scores) if sleep_scores else None,
            treatments={t for c in week for t in c.treatments},
            tags={t for c in week for t in c.tags},
            check_in_count=len(week)
        ))
    return summaries

def find_improvement_periods(weeks: Sequence[WeekSummary]) -> List[ImprovementPeriod]:
    """Pairs of logged weeks, two apart, across which skin or symptoms improved."""
    periods = []
    for i in range(IMPROVEMENT_WEEK_GAP, len(weeks)):
        previous, current = weeks[i - IMPROVEMENT_WEEK_GAP], weeks[i]
        skin = round(previous.avg_intensity - current.avg_intensity, COMPARISON_PRECISION)
        symptoms = round(
            previous.avg_symptom_severity - current.avg_symptom_severity, COMPARISON_PRECISION
        )
        if skin >= SKIN_IMPROVEMENT_THRESHOLD or symptoms >= SYMPTOM_IMPROVEMENT_THRESHOLD:
            periods.append(ImprovementPeriod(
                start_week=previous.week_start,
                end_week=current.week_start,
                skin_improvement=skin,
                symptom_improvement=symptoms
            ))
    return periods

def _share(weeks: Sequence[WeekSummary], logged: Callable[[WeekSummary], bool]) -> float:
    return sum(1 for w in weeks if logged(w)) / len(weeks)

def _weeks_confidence(week_count: int) -> CorrelationConfidence:
    if week_count >= HIGH_CORRELATION_MIN_WEEKS:
        return CorrelationConfidence.HIGH
    if week_count >= MEDIUM_CORRELATION_MIN_WEEKS:
        return CorrelationConfidence.MEDIUM
    return CorrelationConfidence.LOW

def _trigger_label(tag: str) -> str:
    kind = tag_kind(tag)
    if kind is TagKind.TRIGGER:
        return tag_label(tag)
    return f"{kind.value.capitalize()}: {tag_label(tag)}"

def _correlation(factor_id, label, correlation_type, ratio, improvement_usage, baseline_usage, confidence):
    return ImprovementCorrelation(
        id=factor_id,
        label=label,
        type=correlation_type,
        correlation_ratio=round_half_up(ratio, 2),
        improvement_usage=round_half_up(improvement_usage, 2),
        baseline_usage=round_half_up(baseline_usage, 2),
        confidence=confidence
    )

def correlate_improvements(
    weeks: Sequence[WeekSummary],
    periods: Sequence[ImprovementPeriod]
) -> List[ImprovementCorrelation]:
    """
    Compare improvement weeks with baseline weeks.

    Args:
        weeks: Weekly summaries, oldest first
        periods: Improvement periods found in ``weeks``

    Returns:
        Correlations sorted by descending ratio. Empty when there is no
        improvement, fewer than four logged weeks, or no baseline week left.
    """
    if not periods or len(weeks) < MIN_CORRELATION_WEEKS:
        return []

    improvement_weeks = {p.start_week for p in periods} | {p.end_week for p in periods}
    improving = [w for w in weeks if w.week_start in improvement_weeks]
    baseline = [w for w in weeks if w.week_start not in improvement_weeks]
    if not baseline:
        return []

    results = []

    for treatment in sorted({t for w in weeks for t in w.treatments}):
        improvement_usage = _share(improving, lambda w: treatment in w.treatments)
        baseline_usage = _share(baseline, lambda w: treatment in w.treatments)
        if baseline_usage <= 0 or improvement_usage <= MIN_IMPROVEMENT_USAGE:
            continue
        ratio = improvement_usage / baseline_usage
        if ratio > TREATMENT_RATIO_THRESHOLD:
            results.append(_correlation(
                treatment,
                TREATMENT_LABELS.get(treatment, treatment),
                CorrelationType.TREATMENT,
                ratio,
                improvement_usage,
                baseline_usage,
                _weeks_confidence(len(improving))
            ))

    for tag in sorted({t for w in weeks for t in w.tags}):
        improvement_presence = _share(improving, lambda w: tag in w.tags)
        baseline_presence = _share(baseline, lambda w: tag in w.tags)
        if (
            baseline_presence > MIN_TRIGGER_BASELINE_PRESENCE
            and improvement_presence < baseline_presence * TRIGGER_ABSENCE_RATIO
        ):
            results.append(_correlation(
                tag,
                _trigger_label(tag),
                CorrelationType.TRIGGER_ABSENT,
                baseline_presence / (improvement_presence + ABSENCE_SMOOTHING),
                improvement_presence,
                baseline_presence,
                # Absence is judged against the baseline weeks
                CorrelationConfidence.HIGH
                if len(baseline) >= HIGH_CORRELATION_MIN_WEEKS
                else CorrelationConfidence.MEDIUM
            ))

    improvement_sleep = [w.avg_sleep for w in improving if w.avg_sleep is not None]
    baseline_sleep = [w.avg_sleep for w in baseline if w.avg_sleep is not None]
    if improvement_sleep and baseline_sleep:
        improved, usual = mean(improvement_sleep), mean(baseline_sleep)
        if improved > usual + SLEEP_IMPROVEMENT_THRESHOLD:
            results.append(_correlation(
                "sleep",
                "Better Sleep",
                CorrelationType.SLEEP,
                improved / usual,
                improved,
                usual,
                CorrelationConfidence.MEDIUM
            ))

    results.sort(key=lambda c: (-c.correlation_ratio, c.id))
    return results

def analyze_improvement_correlations(check_ins: Sequence[NormalizedCheckIn]) -> ImprovementReport:
    """
    Find what was going on while the skin improved.

    The analysis always runs over the full log; ``unlocked`` tells callers
    whether enough distinct days (30) were logged to show the results.

    Args:
        check_ins: Normalized check-ins (full log)

    Returns:
        ImprovementReport with the improvement periods and correlations
    """
    logged_days = len({c.day for c in check_ins})
    weeks = summarize_weeks(check_ins)
    periods = find_improvement_periods(weeks)
    correlations = correlate_improvements(weeks, periods)

    logger.info(f"Found {len(correlations)} improvement correlations", extra={
        "weeks": len(weeks),
        "improvement_periods": len(periods),
        "logged_days": logged_days
    })

    return ImprovementReport(
        logged_days=logged_days,
        unlocked=logged_days >= INSIGHTS_UNLOCK_DAYS,
        weeks_analyzed=len(weeks),
        periods=periods,
        correlations=correlations
    )
