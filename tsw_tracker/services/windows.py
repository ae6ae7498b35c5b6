"""
Time window resolution and filtering.
"""
from datetime import date, timedelta
from typing import List, Optional, Sequence, Union

from tsw_tracker.models.window import TimeWindow
from tsw_tracker.services.exceptions import InvalidTimeWindowError
from tsw_tracker.services.ingestion import NormalizedCheckIn

# Day-count values sent by older clients
WINDOW_ALIASES = {
    "7": TimeWindow.WEEK,
    "30": TimeWindow.MONTH,
}

def resolve_window(value: Union[TimeWindow, str]) -> TimeWindow:
    """
    Resolve a user-selected window.

    Args:
        value: TimeWindow member, its value, or a "7"/"30" alias

    Returns:
        Matching TimeWindow

    Raises:
        InvalidTimeWindowError: If the value is not a known window
    """
    if isinstance(value, TimeWindow):
        return value
    key = str(value).strip().lower()
    if key in WINDOW_ALIASES:
        return WINDOW_ALIASES[key]
    try:
        return TimeWindow(key)
    except ValueError:
        raise InvalidTimeWindowError(
            f"Unknown time window '{value}', expected one of week, month, all"
        )

def filter_recent_days(
    check_ins: Sequence[NormalizedCheckIn],
    days: Optional[int],
    today: Optional[date] = None
) -> List[NormalizedCheckIn]:
    """
    Keep check-ins from the last ``days`` calendar days, today included.

    Args:
        check_ins: Normalized check-ins
        days: Number of days to keep, None to keep everything
        today: Reference day, defaults to the current date

    Returns:
        Filtered check-ins in their original order
    """
    if days is None:
        return list(check_ins)
    today = today or date.today()
    cutoff = today - timedelta(days=days - 1)
    return [c for c in check_ins if c.day >= cutoff]

def filter_by_window(
    check_ins: Sequence[NormalizedCheckIn],
    window: Union[TimeWindow, str],
    today: Optional[date] = None
) -> List[NormalizedCheckIn]:
    """Keep the check-ins inside a user-selected window."""
    return filter_recent_days(check_ins, resolve_window(window).days, today)
