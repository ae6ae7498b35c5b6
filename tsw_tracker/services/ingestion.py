"""
Check-in ingestion and normalization.

Raw check-ins are validated and reduced once, up front, to a canonical
record carrying a single skin intensity value. Every analysis works on
these normalized records, so the legacy ``skin_feeling`` fallback lives
in exactly one place.

Typical usage:
    check_ins = normalize_check_ins(raw_rows)
    report = analyze_trigger_patterns(check_ins, TimeWindow.MONTH)
"""
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from tsw_tracker.models.checkin import CheckIn
from tsw_tracker.services.constants import NEUTRAL_INTENSITY, LEGACY_FEELING_OFFSET
from tsw_tracker.services.tags import normalize_tag
from tsw_tracker.utils.logging import logger

@dataclass(frozen=True)
class NormalizedCheckIn:
    """Check-in reduced to the fields the analyses use."""
    timestamp: datetime
    day: date
    intensity: float
    tags: Tuple[str, ...] = ()
    treatments: Tuple[str, ...] = ()
    symptom_severity: int = 0
    symptom_count: int = 0
    pain_score: Optional[int] = None
    sleep_score: Optional[int] = None
    mood: Optional[int] = None
    id: Optional[str] = None

def resolve_intensity(check_in: CheckIn) -> float:
    """
    Resolve the canonical 0-4 skin intensity of a check-in.

    Args:
        check_in: Validated check-in

    Returns:
        ``skin_intensity`` when logged, otherwise ``5 - skin_feeling``,
        otherwise the neutral default
    """
    if check_in.skin_intensity is not None:
        return float(check_in.skin_intensity)
    if check_in.skin_feeling is not None:
        return float(LEGACY_FEELING_OFFSET - check_in.skin_feeling)
    return NEUTRAL_INTENSITY

def _as_naive_utc(timestamp: datetime) -> datetime:
    if timestamp.tzinfo is None:
        return timestamp
    return timestamp.astimezone(timezone.utc).replace(tzinfo=None)

def normalize_check_in(check_in: CheckIn) -> NormalizedCheckIn:
    """Build the normalized record for one validated check-in."""
    timestamp = _as_naive_utc(check_in.timestamp)

    tags = []
    for raw in check_in.triggers:
        tag = normalize_tag(raw)
        if tag is not None:
            tags.append(tag)

    treatments = [t.strip() for t in check_in.treatments if t.strip()]

    return NormalizedCheckIn(
        timestamp=timestamp,
        day=timestamp.date(),
        intensity=resolve_intensity(check_in),
        tags=tuple(dict.fromkeys(tags)),
        treatments=tuple(dict.fromkeys(treatments)),
        symptom_severity=sum(s.severity for s in check_in.symptoms_experienced),
        symptom_count=len(check_in.symptoms_experienced),
        pain_score=check_in.pain_score,
        sleep_score=check_in.sleep_score,
        mood=check_in.mood,
        id=check_in.id
    )

def normalize_check_ins(
    records: Iterable[Union[CheckIn, Mapping[str, Any]]]
) -> List[NormalizedCheckIn]:
    """
    Validate and normalize a batch of check-ins.

    Records that fail validation (malformed timestamp, out-of-range score)
    are skipped and logged rather than raised.

    Args:
        records: CheckIn models or raw mappings as returned by the data store

    Returns:
        Normalized check-ins sorted by timestamp
    """
    normalized = []
    skipped = 0

    for record in records:
        if isinstance(record, CheckIn):
            check_in = record
        else:
            try:
                check_in = CheckIn.model_validate(record)
            except ValidationError as e:
                skipped += 1
                logger.warning("Skipping malformed check-in", extra={
                    "check_in_id": record.get("id") if isinstance(record, Mapping) else None,
                    "error_count": e.error_count(),
                    "fields": [".".join(str(p) for p in err["loc"]) for err in e.errors()]
                })
                continue
        normalized.append(normalize_check_in(check_in))

    if skipped:
        logger.info(f"Skipped {skipped} malformed check-ins", extra={
            "skipped": skipped,
            "accepted": len(normalized)
        })

    return sorted(normalized, key=lambda c: c.timestamp)
