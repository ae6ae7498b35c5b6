"""
Pytest configuration and shared fixtures.
"""
import pytest
from datetime import date, datetime, timedelta
from typing import List

from tsw_tracker.models.checkin import CheckIn

REFERENCE_DAY = date(2025, 3, 31)

def build_check_in(day: date, intensity=None, triggers=None, **fields) -> CheckIn:
    """Create a morning check-in on the given day."""
    return CheckIn(
        timestamp=datetime(day.year, day.month, day.day, 9, 0),
        skin_intensity=intensity,
        triggers=triggers or [],
        **fields
    )

@pytest.fixture
def today() -> date:
    """Fixed reference day for window calculations."""
    return REFERENCE_DAY

@pytest.fixture
def make_check_in():
    """Factory for check-ins on a given day."""
    return build_check_in

@pytest.fixture
def threshold_log() -> List[CheckIn]:
    """
    Six untagged days at intensity 1 followed by two stress days at intensity 4.
    """
    filler = [build_check_in(date(2025, 3, d), 1) for d in range(1, 7)]
    stress = [build_check_in(date(2025, 3, d), 4, ["stress"]) for d in (10, 11)]
    return filler + stress

@pytest.fixture
def resolved_log() -> List[CheckIn]:
    """
    Stress was a problem in early March but not in the last two weeks.

    Historical period: stress days at 3 against a baseline of 2.5 (impact 0.5).
    Recent period: one stress day at 3 against a baseline of 3.1 (impact -0.1).
    """
    historical = (
        [build_check_in(date(2025, 3, d), 3, ["stress"]) for d in (1, 2, 3)]
        + [build_check_in(date(2025, 3, d), 2) for d in (4, 5, 6)]
    )
    recent = (
        [build_check_in(date(2025, 3, 25), 3, ["stress"])]
        + [build_check_in(date(2025, 3, d), 3) for d in range(19, 27)]
        + [build_check_in(date(2025, 3, 27), 4)]
    )
    return historical + recent

@pytest.fixture
def banana_log() -> List[CheckIn]:
    """
    Banana logged five times, a week apart. Skin spikes to 4 for three days
    after the first four exposures and stays at 1 after the last one.
    """
    start = date(2025, 3, 1)
    exposures = [start + timedelta(days=7 * i) for i in range(5)]
    spike_days = {
        exposure + timedelta(days=offset)
        for exposure in exposures[:4]
        for offset in (1, 2, 3)
    }

    check_ins = []
    day = start
    while day <= date(2025, 4, 1):
        check_ins.append(build_check_in(
            day,
            4 if day in spike_days else 1,
            ["food:banana"] if day in exposures else []
        ))
        day += timedelta(days=1)
    return check_ins

@pytest.fixture
def improvement_log() -> List[CheckIn]:
    """
    Five weeks of daily check-ins starting on Sunday 2 March 2025.

    The third week is clearer (intensity 1) than the first (intensity 3), so
    weeks one and three are improvement weeks. NMT and better sleep come with
    them, and stress is only logged in the other weeks.
    """
    first_sunday = date(2025, 3, 2)
    weeks = [
        # intensity, treatments, triggers, sleep
        (3, ["moisturizer", "nmt"], [], 4),
        (3, ["moisturizer"], ["stress"], 2),
        (1, ["moisturizer", "nmt"], [], 4),
        (3, ["moisturizer", "nmt"], ["stress"], 2),
        (3, ["moisturizer"], ["stress"], 2),
    ]

    check_ins = []
    for index, (intensity, treatments, triggers, sleep) in enumerate(weeks):
        for offset in range(7):
            day = first_sunday + timedelta(days=7 * index + offset)
            check_ins.append(build_check_in(
                day, intensity, triggers, treatments=treatments, sleep_score=sleep
            ))
    return check_ins
