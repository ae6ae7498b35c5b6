"""
Combined insights report returned by the insights engine.
"""
from datetime import date
from enum import Enum
from typing import Tuple
from pydantic import BaseModel, ConfigDict

from tsw_tracker.models.window import TimeWindow
from tsw_tracker.models.improvement import ImprovementReport
from tsw_tracker.models.pattern import PatternReport
from tsw_tracker.models.reaction import ReactionAnalysis

class BaselineConfidence(str, Enum):
    """
    Maturity of the user's personal baseline, by number of logged days.
    """
    EARLY = "early"
    PROVISIONAL = "provisional"
    MATURE = "mature"

class TreatmentEffectiveness(BaseModel):
    """
    Share of good skin days among check-ins that logged a treatment.
    """
    model_config = ConfigDict(frozen=True)

    treatment: str
    label: str
    count: int
    good_days: int
    effectiveness: int  # percent

class InsightsReport(BaseModel):
    """
    Everything the insights screens need for one window.

    Reports are immutable: the engine hands the same cached instance to
    every caller.
    """
    model_config = ConfigDict(frozen=True)

    window: TimeWindow
    reference_date: date
    baseline_confidence: BaselineConfidence
    check_in_count: int
    skipped_count: int = 0
    triggers: PatternReport
    foods: Tuple[ReactionAnalysis, ...] = ()
    products: Tuple[ReactionAnalysis, ...] = ()
    treatments: Tuple[TreatmentEffectiveness, ...] = ()
    improvements: ImprovementReport = ImprovementReport()
