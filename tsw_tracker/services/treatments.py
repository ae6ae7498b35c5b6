"""
Treatment effectiveness ("what helped") statistics.
"""
from typing import Dict, List, Sequence

from tsw_tracker.models.report import TreatmentEffectiveness
from tsw_tracker.services.constants import GOOD_DAY_MAX_INTENSITY, TREATMENT_LABELS
from tsw_tracker.services.ingestion import NormalizedCheckIn
from tsw_tracker.services.utils import round_half_up

def analyze_treatments(check_ins: Sequence[NormalizedCheckIn]) -> List[TreatmentEffectiveness]:
    """
    Share of good skin check-ins among those that logged each treatment.

    A good check-in has an intensity of 1 or less, the equivalent of a legacy
    skin feeling of 4 or 5.

    Args:
        check_ins: Normalized check-ins

    Returns:
        Treatments sorted by effectiveness, then by how often they were used
    """
    counts: Dict[str, List[int]] = {}
    for check_in in check_ins:
        is_good_day = check_in.intensity <= GOOD_DAY_MAX_INTENSITY
        for treatment in check_in.treatments:
            entry = counts.setdefault(treatment, [0, 0])
            entry[0] += 1
            if is_good_day:
                entry[1] += 1

    results = [
        TreatmentEffectiveness(
            treatment=treatment,
            label=TREATMENT_LABELS.get(treatment, treatment),
            count=count,
            good_days=good_days,
            effectiveness=round_half_up(good_days / count * 100)
        )
        for treatment, (count, good_days) in counts.items()
    ]
    results.sort(key=lambda t: (-t.effectiveness, -t.count, t.treatment))
    return results
