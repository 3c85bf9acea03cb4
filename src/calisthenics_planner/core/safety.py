"""
Safety layer: numeric guards every prescription passes through.

Rules:
- Never output negative or fractional reps.
- Any single working set ≤ 50% of the athlete's max.
- Fixed-interval (EMOM) reps ≤ 35% of max.
- At most one high-fatigue method per session.
- Beginners with 0–8 reps on a movement get a regression.
"""

import math
from typing import Iterable

from .config import (
    INTERVAL_CAP_FRACTION,
    MAX_HIGH_FATIGUE_PER_SESSION,
    PER_SET_CAP_FRACTION,
    REGRESSION_LOW_MAX,
    REGRESSION_MID_MAX,
)
from .methods.base import Method
from .models import Exercise
from .movements.base import Regression
from .movements.registry import MOVEMENT_REGISTRY, get_movement


def round_half_up(x: float) -> int:
    """Round to the nearest integer, .5 always rounding up."""
    return int(math.floor(x + 0.5))


def sanitize(n: float, allow_zero: bool = False) -> int:
    """
    Round a rep count and floor it at 1 (or 0 when allow_zero is set).

    Args:
        n: Raw, possibly fractional or negative, quantity
        allow_zero: Permit 0 (used for optional add-ons); working sets need ≥ 1

    Returns:
        Non-negative integer rep count
    """
    v = round_half_up(float(n))
    return max(0, v) if allow_zero else max(1, v)


def _cap(reps: float, max_reps: int, fraction: float) -> int:
    if not max_reps or max_reps < 1:
        return sanitize(reps)
    ceiling = max(1, math.floor(max_reps * fraction))
    return min(sanitize(reps), ceiling)


def cap_per_set(reps: float, max_reps: int) -> int:
    """Cap reps for any single working set at 50% of the athlete's max."""
    return _cap(reps, max_reps, PER_SET_CAP_FRACTION)


def cap_interval_reps(reps: float, max_reps: int) -> int:
    """Cap reps repeated every interval (EMOM) at 35% of max for sustainable pacing."""
    return _cap(reps, max_reps, INTERVAL_CAP_FRACTION)


def per_set_ceiling(max_reps: int) -> int:
    """The largest single-set prescription allowed for this max."""
    return max(1, math.floor(max_reps * PER_SET_CAP_FRACTION))


def interval_ceiling(max_reps: int) -> int:
    """The largest per-interval prescription allowed for this max."""
    return max(1, math.floor(max_reps * INTERVAL_CAP_FRACTION))


def regression_for(movement: str, capability: int | None, level: str) -> Regression | None:
    """
    Return the easier substitute for a beginner, or None for no regression.

    Capability 0–3 maps to the hardest regression band, 4–8 to the
    moderate band.  Non-beginners never get a regression.

    Args:
        movement: Capability field name (e.g. "pull_ups")
        capability: Athlete's max reps for that movement
        level: Athlete level

    Returns:
        Regression or None
    """
    if level != "beginner":
        return None
    if movement not in MOVEMENT_REGISTRY:
        return None
    bands = get_movement(movement).regressions
    m = 0 if capability is None else int(capability)
    if m <= REGRESSION_LOW_MAX:
        return bands.get("low")
    if m <= REGRESSION_MID_MAX:
        return bands.get("mid")
    return None


def is_high_fatigue(method: Method | None) -> bool:
    """True for methods that stack fatigue (EMOM, AMRAP, for time, chipper, unbroken, holds)."""
    return method is not None and method.high_fatigue


def count_high_fatigue(exercises: Iterable[Exercise]) -> int:
    """Number of high-fatigue method blocks in a session."""
    return sum(1 for ex in exercises if is_high_fatigue(ex.method))


def fatigue_budget_left(exercises: Iterable[Exercise]) -> int:
    """How many more high-fatigue blocks the session may take."""
    return max(0, MAX_HIGH_FATIGUE_PER_SESSION - count_high_fatigue(exercises))


# Equipment checklist shown with every program
MATERIALS_LIST: tuple[tuple[str, str], ...] = (
    ("Jump rope", "Cardio, warm-up, conditioning, light skipping"),
    ("Pull-up bar", "Pull-ups, chin-ups, leg raises, dead hangs, negative pull-ups"),
    ("Parallel bars", "Dips, L-sit, support holds, assisted dips"),
    ("Parallettes", "Push-ups, incline push-ups, L-sit, handstand, planche progressions"),
    ("Resistance bands", "Assisted pull-ups/dips, band dislocates, activation"),
    ("Dips belt / Weight vest", "Weighted pull-ups, weighted dips (0–20 kg)"),
    ("Weights (0–20 kg)", "Weighted calisthenics, goblet squats"),
    ("Floor / Mat", "Push-ups, knee push-ups, planks, core work, step-back burpees"),
)


def materials_list() -> list[dict[str, str]]:
    """Return the equipment checklist as name/use records."""
    return [{"name": name, "use": use} for name, use in MATERIALS_LIST]
