"""Tests for time window resolution and filtering."""
from datetime import date, timedelta
import pytest

from tsw_tracker.models.window import TimeWindow
from tsw_tracker.services.exceptions import InvalidTimeWindowError
from tsw_tracker.services.windows import filter_by_window, filter_recent_days, resolve_window
from tsw_tracker.services.ingestion import normalize_check_ins

def test_resolve_window_values_and_aliases():
    """Test every accepted spelling of a window."""
    assert resolve_window(TimeWindow.MONTH) is TimeWindow.MONTH
    assert resolve_window("week") is TimeWindow.WEEK
    assert resolve_window(" ALL ") is TimeWindow.ALL
    assert resolve_window("7") is TimeWindow.WEEK
    assert resolve_window("30") is TimeWindow.MONTH

def test_resolve_window_rejects_unknown():
    """Test that an unknown window is a caller error."""
    with pytest.raises(InvalidTimeWindowError) as exc:
        resolve_window("year")
    assert "Unknown time window" in str(exc.value)

def test_window_days():
    """Test the number of days covered by each window."""
    assert TimeWindow.WEEK.days == 7
    assert TimeWindow.MONTH.days == 30
    assert TimeWindow.ALL.days is None

def test_week_window_keeps_last_seven_days(make_check_in, today):
    """Test that the week window includes today and the six days before it."""
    check_ins = normalize_check_ins([
        make_check_in(today - timedelta(days=offset), 1) for offset in range(10)
    ])

    result = filter_by_window(check_ins, TimeWindow.WEEK, today)

    assert len(result) == 7
    assert min(c.day for c in result) == today - timedelta(days=6)

def test_all_window_keeps_everything(make_check_in, today):
    """Test that the all window does not filter."""
    check_ins = normalize_check_ins([make_check_in(date(2020, 1, 1), 1), make_check_in(today, 2)])
    assert filter_by_window(check_ins, "all", today) == check_ins

def test_filter_recent_days_none_returns_copy(make_check_in, today):
    """Test that no lookback returns a new list with the same records."""
    check_ins = normalize_check_ins([make_check_in(today, 2)])
    result = filter_recent_days(check_ins, None, today)
    assert result == check_ins
    assert result is not check_ins
