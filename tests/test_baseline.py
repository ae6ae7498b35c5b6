"""Tests for baseline calculations."""
from datetime import date, timedelta

from tsw_tracker.models.report import BaselineConfidence
from tsw_tracker.services.baseline import (
    baseline_confidence,
    baseline_denominator,
    calculate_baseline,
    period_baselines,
    split_recent
)
from tsw_tracker.services.ingestion import normalize_check_ins

def test_calculate_baseline_mean(make_check_in):
    """Test the mean intensity of a subset."""
    check_ins = normalize_check_ins([make_check_in(date(2025, 3, d), i) for d, i in ((1, 1), (2, 2), (3, 4))])
    assert calculate_baseline(check_ins) == 7 / 3

def test_empty_subset_falls_back():
    """Test that an empty subset never divides by zero."""
    assert calculate_baseline([]) == 2.0
    assert calculate_baseline([], fallback=1.25) == 1.25

def test_baseline_denominator_floor():
    """Test the floor applied when the baseline is used as a divisor."""
    assert baseline_denominator(0.0) == 0.5
    assert baseline_denominator(0.2) == 0.5
    assert baseline_denominator(2.0) == 2.0

def test_split_recent(make_check_in, today):
    """Test the recent period boundary and its historical complement."""
    check_ins = normalize_check_ins([make_check_in(today - timedelta(days=offset), 1) for offset in range(20)])

    recent, historical = split_recent(check_ins, 14, today)

    assert len(recent) == 14
    assert len(historical) == 6
    assert min(c.day for c in recent) == today - timedelta(days=13)
    assert max(c.day for c in historical) == today - timedelta(days=14)

def test_period_baselines_fall_back_to_overall(make_check_in, today):
    """Test that an empty period uses the overall baseline."""
    check_ins = normalize_check_ins([make_check_in(today, 3), make_check_in(today - timedelta(days=1), 1)])
    recent, historical = split_recent(check_ins, 14, today)

    baselines = period_baselines(check_ins, recent, historical)

    assert baselines.overall == 2.0
    assert baselines.recent == 2.0
    assert baselines.historical == 2.0

def test_baseline_confidence_by_logged_days(make_check_in, today):
    """Test the early, provisional and mature thresholds."""
    def log(days):
        return normalize_check_ins([make_check_in(today - timedelta(days=d), 1) for d in range(days)])

    assert baseline_confidence([]) is BaselineConfidence.EARLY
    assert baseline_confidence(log(6)) is BaselineConfidence.EARLY
    assert baseline_confidence(log(7)) is BaselineConfidence.PROVISIONAL
    assert baseline_confidence(log(19)) is BaselineConfidence.PROVISIONAL
    assert baseline_confidence(log(20)) is BaselineConfidence.MATURE
