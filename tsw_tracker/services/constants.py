"""
Thresholds and shared lookup data for the insight services.
"""
from typing import Dict
from tsw_tracker.models.reaction import ReactionPattern, ReactionConfidence

# Skin intensity scale (0 = clear, 4 = high intensity)
NEUTRAL_INTENSITY = 2.0
LEGACY_FEELING_OFFSET = 5  # intensity = 5 - skin_feeling
HIGH_INTENSITY_THRESHOLD = 3
GOOD_DAY_MAX_INTENSITY = 1

# Same-day trigger correlation
BASELINE_FLOOR = 0.5
IMPACT_THRESHOLD = 0.3
TREND_THRESHOLD = 0.3
MIN_UNIQUE_DAYS = 3
MIN_TREND_DAYS = 2
RESOLVED_MIN_UNIQUE_DAYS = 3
HIGH_CONFIDENCE_MIN_DAYS = 7
HIGH_CONFIDENCE_MIN_IMPACT = 0.5
EFFECT_SCORE_MULTIPLIER = 25
RECENT_PERIOD_DAYS = 14
COMPARISON_PRECISION = 4

# Legacy weighted impact ranking
MIN_IMPACT_OCCURRENCES = 2
HIGH_INTENSITY_RATE_WEIGHT = 70
SYMPTOM_SEVERITY_WEIGHT = 10
INTENSITY_WEIGHT = 4

# Delayed reaction analysis
MINIMUM_LOGS_THRESHOLD = 3
WORSE_THRESHOLD = 0.5
BETTER_THRESHOLD = -0.5
REACTION_DAYS = (1, 2, 3)
LOCAL_BASELINE_WINDOW = 7
DOMINANT_OUTCOME_RATIO = 0.6
MIXED_OUTCOME_RATIO = 0.5
CONSISTENCY_THRESHOLD = 0.6
LOW_CONFIDENCE_MAX_LOGS = 4
MEDIUM_CONFIDENCE_MAX_LOGS = 7

# Improvement correlations ("what helped"), computed on calendar weeks
INSIGHTS_UNLOCK_DAYS = 30
IMPROVEMENT_WEEK_GAP = 2  # each week is compared with the logged week two before it
SKIN_IMPROVEMENT_THRESHOLD = 0.5
SYMPTOM_IMPROVEMENT_THRESHOLD = 0.3
MIN_CORRELATION_WEEKS = 4
MIN_IMPROVEMENT_USAGE = 0.3
TREATMENT_RATIO_THRESHOLD = 1.3
MIN_TRIGGER_BASELINE_PRESENCE = 0.3
TRIGGER_ABSENCE_RATIO = 0.5
ABSENCE_SMOOTHING = 0.01
SLEEP_IMPROVEMENT_THRESHOLD = 0.5
HIGH_CORRELATION_MIN_WEEKS = 4
MEDIUM_CORRELATION_MIN_WEEKS = 2

# Baseline maturity, by number of logged days
EARLY_BASELINE_MAX_DAYS = 7
PROVISIONAL_BASELINE_MAX_DAYS = 20

TRIGGER_LABELS: Dict[str, str] = {
    # Environmental
    "heat_sweat": "Heat / sweat",
    "cold_air": "Cold air",
    "weather_change": "Weather change",
    "shower_hard_water": "Shower / hard water",
    "dust_pollen": "Dust / pollen",
    "detergent": "Detergent",
    "fragrance": "Fragrance",
    "new_product": "New product",
    "pets": "Pets",
    # Internal
    "stress": "Stress",
    "poor_sleep": "Poor sleep",
    "hormonal_changes": "Hormonal changes (period / cycle)",
    "illness_infection": "Illness / infection",
    # Activity & consumption
    "exercise": "Exercise",
    "alcohol": "Alcohol",
    "spicy_food": "Spicy food",
    "food": "Food",
    "friction_scratching": "Friction / scratching",
}

TREATMENT_LABELS: Dict[str, str] = {
    "nmt": "NMT",
    "moisturizer": "Moisturizer",
    "rlt": "Red Light",
    "salt_bath": "Salt Bath",
    "cold_compress": "Cold Compress",
    "antihistamine": "Antihistamine",
    "exercise": "Exercise",
    "meditation": "Meditation",
}

# Ranking weight of each reaction pattern ("often worse" items first)
PATTERN_WEIGHTS: Dict[ReactionPattern, float] = {
    ReactionPattern.OFTEN_WORSE: 1.0,
    ReactionPattern.MIXED: 0.5,
    ReactionPattern.OFTEN_BETTER: 0.3,
    ReactionPattern.NO_PATTERN: 0.2,
    ReactionPattern.INSUFFICIENT_DATA: 0.0,
}

PATTERN_LABELS: Dict[ReactionPattern, str] = {
    ReactionPattern.OFTEN_WORSE: "often followed by worse symptoms",
    ReactionPattern.OFTEN_BETTER: "often followed by improvement",
    ReactionPattern.MIXED: "mixed reactions observed",
    ReactionPattern.NO_PATTERN: "no clear pattern detected",
    ReactionPattern.INSUFFICIENT_DATA: "not enough data yet",
}

CONFIDENCE_LABELS: Dict[ReactionConfidence, str] = {
    ReactionConfidence.HIGH: "High confidence",
    ReactionConfidence.MEDIUM: "Moderate confidence",
    ReactionConfidence.LOW: "Preliminary",
    ReactionConfidence.INSUFFICIENT_DATA: "Not enough data",
}
