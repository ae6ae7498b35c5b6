"""
Models for the "what helped" improvement correlation analysis.
"""
from datetime import date
from enum import Enum
from typing import Tuple
from pydantic import BaseModel, ConfigDict

class CorrelationType(str, Enum):
    """
    What kind of factor was correlated with improvement.
    """
    TREATMENT = "treatment"
    TRIGGER_ABSENT = "trigger_absent"
    SLEEP = "sleep"

class CorrelationConfidence(str, Enum):
    """
    Evidence tier of one improvement correlation, by number of weeks.
    """
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

class ImprovementPeriod(BaseModel):
    """
    A week whose skin or symptoms improved on the logged week two before it.
    """
    model_config = ConfigDict(frozen=True)

    start_week: date
    end_week: date
    skin_improvement: float     # drop in average intensity
    symptom_improvement: float  # drop in average symptom severity

class ImprovementCorrelation(BaseModel):
    """
    A treatment used more, a trigger logged less, or sleep that was better
    during improvement weeks than during the other weeks.

    For treatments and triggers the usage fields are the share of weeks the
    factor was logged; for sleep they are the average sleep scores.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    type: CorrelationType
    correlation_ratio: float
    improvement_usage: float
    baseline_usage: float
    confidence: CorrelationConfidence

class ImprovementReport(BaseModel):
    """
    Result of the improvement correlation analysis over the whole log.
    """
    model_config = ConfigDict(frozen=True)

    logged_days: int = 0
    unlocked: bool = False
    weeks_analyzed: int = 0
    periods: Tuple[ImprovementPeriod, ...] = ()
    correlations: Tuple[ImprovementCorrelation, ...] = ()

    @property
    def helpful_factors(self) -> Tuple[ImprovementCorrelation, ...]:
        """Treatments and sleep associated with improvement."""
        return tuple(c for c in self.correlations if c.type != CorrelationType.TRIGGER_ABSENT)

    @property
    def triggers_to_avoid(self) -> Tuple[ImprovementCorrelation, ...]:
        """Triggers that were mostly absent while the skin improved."""
        return tuple(c for c in self.correlations if c.type == CorrelationType.TRIGGER_ABSENT)
