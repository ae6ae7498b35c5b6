"""
Shared utility functions for the insight services.

These helpers cover the display rounding and calendar arithmetic used by
more than one analysis module.
"""
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

def round_half_up(value: float, digits: int = 0) -> Union[int, float]:
    """
    Round a display figure with halves rounded up.

    The built-in ``round`` sends exact halves to the even neighbour, so a
    12.5% effectiveness would be shown as 12 instead of 13.

    Args:
        value: Number to round
        digits: Decimal places to keep

    Returns:
        An int when ``digits`` is 0, otherwise a float

    Example:
        >>> round_half_up(12.5)
        13
        >>> round_half_up(0.25, 1)
        0.3
    """
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)

def week_start(day: date) -> date:
    """Sunday that starts the calendar week containing ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)
