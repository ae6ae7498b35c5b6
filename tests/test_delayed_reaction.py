"""Tests for delayed-reaction analysis of foods and products."""
from datetime import date, timedelta
import pytest

from tsw_tracker.models.reaction import ExposureOutcome, ReactionConfidence, ReactionPattern
from tsw_tracker.services.delayed_reaction import (
    analyze_delayed_reactions,
    analyze_food_reactions,
    analyze_product_reactions,
    build_daily_intensity,
    calculate_confidence,
    calculate_consistency,
    calculate_pattern,
    classify_exposure,
    get_confidence_label,
    get_pattern_label,
    local_baseline,
    post_exposure_intensity
)
from tsw_tracker.services.ingestion import normalize_check_ins
from tsw_tracker.services.tags import TagKind

def test_food_with_next_day_spikes_is_often_worse(banana_log):
    """Test a food followed by a flare on four of five occasions."""
    check_ins = normalize_check_ins(banana_log)

    [banana] = analyze_food_reactions(check_ins, today=date(2025, 4, 5))

    assert banana.name == "banana"
    assert banana.label == "Banana"
    assert banana.kind == "food"
    assert banana.count == 5
    assert banana.analyzable_exposures == 5
    assert banana.days_worse_after == 4
    assert banana.days_better_after == 1
    assert banana.days_neutral_after == 0
    assert banana.pattern == ReactionPattern.OFTEN_WORSE
    assert banana.consistency == 0.8
    assert banana.confidence == ReactionConfidence.MEDIUM

def test_food_logged_twice_is_insufficient(make_check_in):
    """Test that fewer than three logs are not analyzed."""
    check_ins = normalize_check_ins([
        make_check_in(date(2025, 3, 1), 1, ["food:eggs"]),
        make_check_in(date(2025, 3, 2), 4),
        make_check_in(date(2025, 3, 8), 1, ["food:eggs"]),
        make_check_in(date(2025, 3, 9), 4),
    ])

    [eggs] = analyze_food_reactions(check_ins)

    assert eggs.count == 2
    assert eggs.pattern == ReactionPattern.INSUFFICIENT_DATA
    assert eggs.confidence == ReactionConfidence.INSUFFICIENT_DATA
    assert eggs.analyzable_exposures == 0

def test_consecutive_logs_fold_into_one_exposure(make_check_in):
    """Test that logging a food on back-to-back days counts as one exposure."""
    check_ins = normalize_check_ins(
        [make_check_in(date(2025, 3, d), 3, ["food:wheat"]) for d in (10, 11, 12)]
        + [make_check_in(date(2025, 3, d), 1) for d in range(3, 10)]
        + [make_check_in(date(2025, 3, 13), 3)]
    )

    [wheat] = analyze_food_reactions(check_ins)

    assert wheat.count == 3
    assert wheat.analyzable_exposures == 1
    assert wheat.days_worse_after == 1
    assert wheat.pattern == ReactionPattern.INSUFFICIENT_DATA
    assert wheat.confidence == ReactionConfidence.LOW

def test_products_use_both_prefixes(make_check_in):
    """Test that new_product and product tags are analyzed together."""
    check_ins = normalize_check_ins([
        make_check_in(date(2025, 3, 1), 1, ["new_product:Shea Balm"]),
        make_check_in(date(2025, 3, 5), 1, ["product:shea balm"]),
        make_check_in(date(2025, 3, 9), 1, ["product:Shea balm", "food:rice"]),
    ])

    [balm] = analyze_product_reactions(check_ins)

    assert balm.name == "shea balm"
    assert balm.label == "Shea Balm"
    assert balm.kind == "product"
    assert balm.count == 3
    assert [f.name for f in analyze_food_reactions(check_ins)] == ["rice"]

def test_insufficient_items_sorted_last(banana_log, make_check_in):
    """Test that items without enough data come after analyzed ones."""
    log = banana_log + [make_check_in(date(2025, 3, 2), 4, ["food:apple"])]

    results = analyze_food_reactions(normalize_check_ins(log), today=date(2025, 4, 5))

    assert [r.name for r in results] == ["banana", "apple"]

def test_period_days_limits_lookback(banana_log):
    """Test that only exposures inside the lookback are counted."""
    check_ins = normalize_check_ins(banana_log)

    [banana] = analyze_food_reactions(check_ins, period_days=14, today=date(2025, 4, 1))

    assert banana.count == 2
    assert banana.pattern == ReactionPattern.INSUFFICIENT_DATA

def test_empty_log_returns_nothing():
    """Test that an empty log yields an empty list."""
    assert analyze_food_reactions([]) == []
    assert analyze_product_reactions([]) == []

def test_triggers_are_not_a_delayed_kind(banana_log):
    """Test that plain triggers cannot be analyzed for delayed reactions."""
    with pytest.raises(ValueError):
        analyze_delayed_reactions(normalize_check_ins(banana_log), TagKind.TRIGGER)

def test_reaction_window_and_local_baseline(make_check_in):
    """Test the D+1..D+3 average and the baseline of surrounding days."""
    day = date(2025, 3, 10)
    check_ins = normalize_check_ins([
        make_check_in(day - timedelta(days=2), 1),
        make_check_in(day - timedelta(days=1), 2, ["food:corn"]),
        make_check_in(day, 0, ["food:corn"]),
        make_check_in(day + timedelta(days=1), 4),
        make_check_in(day + timedelta(days=3), 2),
        make_check_in(day + timedelta(days=8), 0),
    ])
    intensity_by_day = build_daily_intensity(check_ins)
    items_by_day = {day - timedelta(days=1): {"corn"}, day: {"corn"}}

    assert post_exposure_intensity(intensity_by_day, day) == 3.0
    assert local_baseline(intensity_by_day, items_by_day, day, "corn") == 7 / 3
    assert post_exposure_intensity(intensity_by_day, day + timedelta(days=20)) is None
    assert local_baseline({}, {}, day, "corn") is None

def test_classify_exposure_thresholds():
    """Test the worse, better and neutral bands."""
    assert classify_exposure(2.5, 2.0) == ExposureOutcome.WORSE
    assert classify_exposure(1.5, 2.0) == ExposureOutcome.BETTER
    assert classify_exposure(2.4, 2.0) == ExposureOutcome.NEUTRAL
    assert classify_exposure(1.6, 2.0) == ExposureOutcome.NEUTRAL

def test_calculate_pattern():
    """Test the roll-up rules."""
    assert calculate_pattern(3, 1, 1, 5) == ReactionPattern.OFTEN_WORSE
    assert calculate_pattern(0, 3, 2, 5) == ReactionPattern.OFTEN_BETTER
    assert calculate_pattern(2, 1, 2, 5) == ReactionPattern.MIXED
    assert calculate_pattern(1, 0, 4, 5) == ReactionPattern.NO_PATTERN
    assert calculate_pattern(0, 0, 0, 0) == ReactionPattern.INSUFFICIENT_DATA

def test_calculate_consistency():
    """Test consistency as the share of the most common outcome."""
    assert calculate_consistency(5, 0, 0, 5) == 1.0
    assert calculate_consistency(2, 2, 1, 5) == 0.4
    assert calculate_consistency(0, 0, 0, 0) == 0.0

@pytest.mark.parametrize("count,consistency,expected", [
    (2, 1.0, ReactionConfidence.INSUFFICIENT_DATA),
    (3, 1.0, ReactionConfidence.LOW),
    (4, 1.0, ReactionConfidence.LOW),
    (5, 0.6, ReactionConfidence.MEDIUM),
    (7, 0.5, ReactionConfidence.LOW),
    (8, 0.6, ReactionConfidence.HIGH),
    (12, 0.4, ReactionConfidence.MEDIUM),
])
def test_calculate_confidence(count, consistency, expected):
    """Test confidence tiers by log count and consistency."""
    assert calculate_confidence(count, consistency) == expected

def test_labels():
    """Test display labels for patterns and confidence tiers."""
    assert get_pattern_label(ReactionPattern.OFTEN_WORSE) == "often followed by worse symptoms"
    assert get_pattern_label("insufficient_data") == "not enough data yet"
    assert get_confidence_label(ReactionConfidence.LOW) == "Preliminary"
    assert get_confidence_label("high") == "High confidence"

def test_next_day_only_spike_is_averaged_out(make_check_in):
    """Test that a one-day flare after each exposure is diluted by the three-day window."""
    exposures = [date(2025, 3, 1) + timedelta(days=7 * i) for i in range(5)]
    spikes = {day + timedelta(days=1) for day in exposures[:4]}
    log = []
    day = date(2025, 3, 1)
    while day <= date(2025, 4, 5):
        log.append(make_check_in(day, 4 if day in spikes else 2, ["food:peanut"] if day in exposures else []))
        day += timedelta(days=1)

    [peanut] = analyze_food_reactions(normalize_check_ins(log), today=date(2025, 4, 5))

    assert peanut.analyzable_exposures == 5
    assert peanut.days_worse_after == 0
    assert peanut.days_neutral_after == 5
    assert peanut.pattern == ReactionPattern.NO_PATTERN
    assert peanut.confidence == ReactionConfidence.MEDIUM
