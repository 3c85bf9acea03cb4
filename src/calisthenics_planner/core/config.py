"""
Configuration constants for the program generator.

All empirically chosen parameters are centralized here so they can be
tuned in one place.  None of these values are derived; they encode the
coaching heuristics the generator is built around.
"""

from typing import Final

# =============================================================================
# LEVELS AND GOALS
# =============================================================================

LEVELS: Final[tuple[str, ...]] = ("beginner", "intermediate", "advanced")

VALID_GOALS: Final[tuple[str, ...]] = (
    "lose_weight",
    "improve_endurance",
    "build_muscle",
    "learn_skills",
)

GOAL_LABELS: Final[dict[str, str]] = {
    "lose_weight": "Lose Weight",
    "improve_endurance": "Improve Endurance",
    "build_muscle": "Build Muscle",
    "learn_skills": "Learn New Skills",
}

MAX_GOALS: Final[int] = 3

# Priority split by number of selected goals (primary, secondary, third)
GOAL_WEIGHT_SPLITS: Final[dict[int, tuple[float, ...]]] = {
    1: (1.0,),
    2: (0.6, 0.4),
    3: (0.6, 0.3, 0.1),
}

# The only antagonistic pair: deficit training vs. overload
CONFLICTING_GOALS: Final[frozenset[str]] = frozenset({"lose_weight", "build_muscle"})

# =============================================================================
# SAFETY CAPS (Layer 1)
# =============================================================================

PER_SET_CAP_FRACTION: Final[float] = 0.50  # Any single working set ≤ 50% of max
INTERVAL_CAP_FRACTION: Final[float] = 0.35  # EMOM reps ≤ 35% of max
MAX_HIGH_FATIGUE_PER_SESSION: Final[int] = 1

# Beginner regression bands (inclusive upper bounds)
REGRESSION_LOW_MAX: Final[int] = 3
REGRESSION_MID_MAX: Final[int] = 8

# =============================================================================
# REP / INTENSITY CALCULATION
# =============================================================================

# (threshold, factor): factor applies when max reps exceed threshold
DIMINISHING_RETURNS: Final[tuple[tuple[int, float], ...]] = (
    (60, 0.80),
    (40, 0.85),
    (20, 0.90),
)

ENDURANCE_WEEK_MULTIPLIERS: Final[tuple[float, ...]] = (0.50, 0.55, 0.58, 0.62, 0.55, 0.50)
ENDURANCE_LEVEL_MULTIPLIERS: Final[dict[str, float]] = {
    "beginner": 0.90,
    "intermediate": 1.00,
    "advanced": 1.08,
}
ENDURANCE_MIN_REPS: Final[int] = 3

# General volume multiplier per level (used by day builders)
LEVEL_VOLUME_MULTIPLIERS: Final[dict[str, float]] = {
    "beginner": 0.85,
    "intermediate": 1.00,
    "advanced": 1.15,
}

# Share of the pull-up max used as the working percentage on pull days
PULL_PERCENTAGE: Final[dict[str, float]] = {
    "beginner": 0.60,
    "intermediate": 0.75,
    "advanced": 0.75,
}

# Australian pull-up scaling relative to pull-up reps
ASSISTED_MIN_REPS: Final[int] = 8
ASSISTED_LOW_PRIMARY: Final[int] = 5  # Below this, use 8 + 2 × week
ASSISTED_EARLY_RATIO: Final[float] = 1.8  # Weeks 1-2
ASSISTED_LATE_RATIO: Final[float] = 2.2  # Week 3 onwards

# Max-rounds (AMRAP) time domains by week: progressive then taper
MAX_ROUNDS_MINUTES: Final[tuple[int, ...]] = (5, 6, 8, 10, 8, 6)
MAX_ROUNDS_MINUTES_CAP: Final[int] = 12

# =============================================================================
# REST PRESCRIPTIONS
# =============================================================================

REST_HEAVY_SKILL: Final[str] = "2–4 min between sets"
REST_HEAVY_LONGER: Final[str] = "3–4 min between sets"
REST_UNTIL_CLEAN: Final[str] = "Rest until you can perform the next set with clean reps."
REST_NONE: Final[str] = "No rest needed"

# =============================================================================
# GOAL THRESHOLDS
# =============================================================================

REP_RANGE_DEFAULT: Final[tuple[float, float]] = (0.40, 0.65)
REP_RANGE_BUILD_MUSCLE: Final[tuple[float, float]] = (0.55, 0.80)
REP_RANGE_ENDURANCE: Final[tuple[float, float]] = (0.40, 0.60)
REP_RANGE_LOSE_WEIGHT: Final[tuple[float, float]] = (0.40, 0.55)
SKILL_VOLUME_CAP: Final[float] = 0.85

# Skill work only on low-fatigue slots
SKILL_DAY_NUMBERS: Final[tuple[int, ...]] = (1, 5)
SKILL_MIN_WEIGHT: Final[float] = 0.2

# =============================================================================
# PERIODIZATION CURVES
# =============================================================================

BLOCK_WEEKS: Final[int] = 6
SUPPORTED_PROGRAM_WEEKS: Final[tuple[int, ...]] = (4, 6, 12)
DEFAULT_PROGRAM_WEEKS: Final[int] = 6
SECOND_BLOCK_SEED_OFFSET: Final[int] = 9999

WEEK_INTENSITY_TAGS: Final[dict[int, str]] = {
    1: "friendly",
    2: "progressive",
    3: "progressive",
    4: "intense",
    5: "controlled_peak",
    6: "deload",
}

# =============================================================================
# WEEKLY CALENDAR
# =============================================================================

CALENDAR_DAYS: Final[tuple[str, ...]] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

# Training-day number placed on each calendar day (None = rest)
CALENDAR_5_SESSIONS: Final[tuple[int | None, ...]] = (1, 2, None, 3, 4, None, 5)
CALENDAR_4_SESSIONS: Final[tuple[int | None, ...]] = (1, 2, None, 3, 4, None, None)

WEEK_DESCRIPTION_5: Final[str] = (
    "Each week: 2 training days, 1 rest day, 2 training days, 1 rest day, "
    "1 training day (rest after every 2 workouts)."
)
WEEK_DESCRIPTION_4: Final[str] = (
    "Each week: 2 training days, 1 rest day, 2 training days, then 2 rest days."
)

# =============================================================================
# NUTRITION
# =============================================================================

NUTRITION_REFERENCE_AGE: Final[int] = 30
ACTIVITY_FACTOR: Final[float] = 1.55
MIN_HEIGHT_CM: Final[float] = 100.0
MAX_HEIGHT_CM: Final[float] = 250.0
MIN_WEIGHT_KG: Final[float] = 30.0
MAX_WEIGHT_KG: Final[float] = 300.0

# (energy multiplier, protein g/kg) by goal, checked in this order
GOAL_NUTRITION_ADJUSTMENTS: Final[tuple[tuple[str, float, float], ...]] = (
    ("lose_weight", 0.90, 2.0),
    ("build_muscle", 1.08, 2.2),
    ("improve_endurance", 1.02, 1.8),
)
DEFAULT_PROTEIN_PER_KG: Final[float] = 1.8

MEAL_REFERENCE_KCAL: Final[float] = 2500.0
MEAL_REFERENCE_PROTEIN_G: Final[float] = 135.0
MEAL_ENERGY_SCALE_RANGE: Final[tuple[float, float]] = (0.7, 1.4)
MEAL_PROTEIN_SCALE_RANGE: Final[tuple[float, float]] = (0.8, 1.3)
MEAL_MIN_KCAL: Final[int] = 1200

# =============================================================================
# REVIEW PIPELINE
# =============================================================================

REVIEW_WEEKS_PER_BATCH: Final[int] = 2
REVIEW_BATCH_DELAY_SECONDS: Final[float] = 1.5
REVIEW_DIGEST_NAMES: Final[int] = 3
COACH_REVIEW_MAX_TOKENS: Final[int] = 500
GOAL_REVIEW_MAX_TOKENS: Final[int] = 400
