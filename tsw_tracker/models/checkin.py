"""
Check-in model definition for daily skin tracking entries.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

class SymptomEntry(BaseModel):
    """
    A single symptom reported in a check-in.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    symptom: str
    severity: int = Field(0, ge=0)

class CheckIn(BaseModel):
    """
    Represents one user-submitted check-in with skin, pain, sleep and trigger data.

    Field names are accepted both in snake_case and in the camelCase used by
    the mobile client (``skinFeeling``, ``symptomsExperienced``, ...).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: Optional[str] = None
    timestamp: datetime
    time_of_day: Optional[str] = Field(None, pattern="^(morning|evening)$")
    skin_feeling: Optional[int] = Field(None, ge=1, le=5)  # legacy scale, 5 is best
    skin_intensity: Optional[int] = Field(None, ge=0, le=4)  # 4 is worst
    pain_score: Optional[int] = Field(None, ge=0, le=10)
    sleep_score: Optional[int] = Field(None, ge=1, le=5)
    mood: Optional[int] = Field(None, ge=1, le=5)
    triggers: List[str] = Field(default_factory=list)
    symptoms_experienced: List[SymptomEntry] = Field(default_factory=list)
    treatments: List[str] = Field(default_factory=list)
    notes: Optional[str] = None

    @field_validator("triggers", "symptoms_experienced", "treatments", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value
