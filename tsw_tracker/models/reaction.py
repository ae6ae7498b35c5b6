"""
Delayed-reaction models for food and topical product analysis.
"""
from enum import Enum
from pydantic import BaseModel, ConfigDict

class ExposureOutcome(str, Enum):
    """
    How the skin fared in the days following one exposure.
    """
    WORSE = "worse"
    BETTER = "better"
    NEUTRAL = "neutral"

class ReactionPattern(str, Enum):
    """
    Roll-up of exposure outcomes for one food or product.
    """
    OFTEN_WORSE = "often_worse"
    OFTEN_BETTER = "often_better"
    MIXED = "mixed"
    NO_PATTERN = "no_pattern"
    INSUFFICIENT_DATA = "insufficient_data"

class ReactionConfidence(str, Enum):
    """
    Evidence tier backing a reaction pattern.
    """
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INSUFFICIENT_DATA = "insufficient_data"

class ReactionAnalysis(BaseModel):
    """
    Delayed-reaction summary for one food or product name.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    kind: str
    count: int
    days_worse_after: int = 0
    days_better_after: int = 0
    days_neutral_after: int = 0
    analyzable_exposures: int = 0
    pattern: ReactionPattern
    consistency: float = 0.0
    confidence: ReactionConfidence
