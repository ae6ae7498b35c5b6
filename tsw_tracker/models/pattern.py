"""
Trigger pattern models produced by the same-day correlation analysis.
"""
from enum import Enum
from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict

from tsw_tracker.models.window import TimeWindow

class Trend(str, Enum):
    """
    Direction of a trigger's impact between the historical and recent periods.
    """
    IMPROVING = "improving"
    WORSENING = "worsening"
    STABLE = "stable"

class PatternConfidence(str, Enum):
    """
    Two-tier confidence used for trigger patterns.
    """
    HIGH = "high"
    EARLY = "early_pattern"

class ReportStatus(str, Enum):
    """
    Outcome of a trigger analysis, used by callers to pick an empty state.
    """
    NO_DATA = "no_data"                  # no check-in carries a trigger tag
    INSUFFICIENT_DATA = "insufficient_data"
    NO_PATTERNS = "no_patterns"
    PATTERNS_FOUND = "patterns_found"

class Pattern(BaseModel):
    """
    A trigger, food or product tag correlated with above-baseline skin intensity.
    """
    model_config = ConfigDict(frozen=True)

    tag: str
    label: str
    kind: str
    count: int
    unique_days: int
    mean_intensity: float
    baseline: float
    impact_delta: float
    percent_change: int
    effect_score: float
    is_high_confidence: bool
    confidence: PatternConfidence
    trend: Trend = Trend.STABLE
    recent_impact: Optional[float] = None
    historical_impact: Optional[float] = None

class ResolvedTrigger(BaseModel):
    """
    A tag that used to correlate with worse skin but no longer does.
    """
    model_config = ConfigDict(frozen=True)

    tag: str
    label: str
    kind: str
    historical_impact: float
    recent_impact: float
    historical_unique_days: int
    recent_unique_days: int

class TriggerImpact(BaseModel):
    """
    Weighted impact score of a tag, combining high-intensity rate, symptom
    severity and average intensity on the days it was logged.
    """
    model_config = ConfigDict(frozen=True)

    tag: str
    label: str
    count: int
    high_intensity_rate: int  # percent
    avg_intensity: float
    impact_score: int

class PatternReport(BaseModel):
    """
    Result of a trigger pattern analysis over one time window.
    """
    model_config = ConfigDict(frozen=True)

    status: ReportStatus
    window: TimeWindow
    baseline: Optional[float] = None
    check_in_count: int = 0
    tagged_check_in_count: int = 0
    tagged_day_count: int = 0
    min_unique_days: int
    active_patterns: Tuple[Pattern, ...] = ()
    resolved_triggers: Tuple[ResolvedTrigger, ...] = ()
    breakdown: Tuple[TriggerImpact, ...] = ()

    @property
    def has_trigger_data(self) -> bool:
        """Whether any check-in in the window carried a trigger tag."""
        return self.status != ReportStatus.NO_DATA
