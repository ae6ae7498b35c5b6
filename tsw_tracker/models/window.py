"""
Time window selection for insight calculations.
"""
from enum import Enum
from typing import Optional

class TimeWindow(str, Enum):
    """
    Lookback windows offered by the insights screens.
    """
    WEEK = "week"
    MONTH = "month"
    ALL = "all"

    @property
    def days(self) -> Optional[int]:
        """Number of calendar days covered, or None for the whole log."""
        if self is TimeWindow.WEEK:
            return 7
        if self is TimeWindow.MONTH:
            return 30
        return None
