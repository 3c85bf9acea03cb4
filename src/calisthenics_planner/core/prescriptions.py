"""
Rep/intensity calculator.

Converts (capability, week setting, goal bias) into concrete rep counts and
rest prescriptions.  Every number returned here has already been passed
through the safety caps in ``safety``.
"""

import math

from .config import (
    ASSISTED_EARLY_RATIO,
    ASSISTED_LATE_RATIO,
    ASSISTED_LOW_PRIMARY,
    ASSISTED_MIN_REPS,
    BLOCK_WEEKS,
    DIMINISHING_RETURNS,
    ENDURANCE_LEVEL_MULTIPLIERS,
    ENDURANCE_MIN_REPS,
    ENDURANCE_WEEK_MULTIPLIERS,
    INTERVAL_CAP_FRACTION,
    LEVEL_VOLUME_MULTIPLIERS,
    MAX_ROUNDS_MINUTES,
    MAX_ROUNDS_MINUTES_CAP,
    PULL_PERCENTAGE,
    REST_HEAVY_LONGER,
    REST_HEAVY_SKILL,
)
from .safety import cap_interval_reps, cap_per_set, round_half_up


def block_week(week: int) -> int:
    """Position of a week inside its 6-week block (1..6)."""
    if week < 1:
        raise ValueError(f"week must be ≥ 1, got {week}")
    return (week - 1) % BLOCK_WEEKS + 1


def level_multiplier(level: str) -> float:
    """General volume multiplier: 0.85 / 1.00 / 1.15."""
    return LEVEL_VOLUME_MULTIPLIERS[level]


def pull_percentage(level: str) -> float:
    """Working share of the pull-up max on pull days."""
    return PULL_PERCENTAGE[level]


def diminishing_factor(max_reps: int) -> float:
    """
    Scale-down for high-capability athletes.

    1.0 up to 20 reps, then 0.90 / 0.85 / 0.80 above 20 / 40 / 60.
    """
    for threshold, factor in DIMINISHING_RETURNS:
        if max_reps > threshold:
            return factor
    return 1.0


def smart_reps(max_reps: int, intensity: float) -> int:
    """
    Working-set reps at a given fraction of max.

    Applies the diminishing-returns factor, truncates, then caps the
    result at 50% of max.

    Args:
        max_reps: Athlete's max for the movement
        intensity: Fraction of max (e.g. 0.6)

    Returns:
        Per-set rep count (≥ 1)
    """
    target = math.floor((max_reps or 0) * intensity * diminishing_factor(max_reps or 0))
    return cap_per_set(target, max_reps)


def endurance_reps(max_reps: int, week: int, level: str) -> int:
    """
    Sustained-work reps: week curve 0.50→0.62→0.50 times a level multiplier.

    Floored at 3, then capped per set.  Weeks past the table reuse their
    position inside the 6-week block.
    """
    week_mult = ENDURANCE_WEEK_MULTIPLIERS[block_week(week) - 1]
    raw = max(ENDURANCE_MIN_REPS, round_half_up(smart_reps(max_reps, week_mult * ENDURANCE_LEVEL_MULTIPLIERS[level])))
    return cap_per_set(raw, max_reps)


def interval_reps(max_reps: int) -> int:
    """Reps per interval in a fixed-interval block: 35% of max, capped."""
    return cap_interval_reps((max_reps or 0) * INTERVAL_CAP_FRACTION, max_reps)


def assisted_reps(primary_reps: int, week: int) -> int:
    """
    Australian pull-up reps paired with a pull-up prescription.

    Primaries under 5 reps get 8 + 2·week; otherwise 1.8× (weeks 1–2) or
    2.2× (later weeks) the primary, never fewer than 8.
    """
    w = block_week(week)
    if primary_reps < ASSISTED_LOW_PRIMARY:
        return ASSISTED_MIN_REPS + w * 2
    ratio = ASSISTED_EARLY_RATIO if w <= 2 else ASSISTED_LATE_RATIO
    return max(ASSISTED_MIN_REPS, round_half_up(primary_reps * ratio))


def assisted_ladder(primary_reps: list[int], week: int) -> list[int]:
    """
    Australian pull-up reps for each round of a descending ladder.

    ``assisted_reps`` jumps up when a primary drops below 5, so each round
    is held to at most the previous round's reps.
    """
    ladder: list[int] = []
    for reps in primary_reps:
        aus = assisted_reps(reps, week)
        ladder.append(min(aus, ladder[-1]) if ladder else aus)
    return ladder


def descending_sequence(start: int, step: int, rounds: int) -> list[int]:
    """
    Round-by-round reps of a descending ladder.

    Starts at ``start`` and drops by ``step`` each round, stopping before
    any value would reach zero.
    """
    if step < 1:
        raise ValueError("step must be ≥ 1")
    values = []
    for i in range(rounds):
        reps = start - i * step
        if reps <= 0:
            break
        values.append(reps)
    return values


def max_rounds_minutes(week: int, endurance_bias: bool = False) -> int:
    """AMRAP time domain: 5→6→8→10→8→6 min, +2 (max 12) for cardio goals."""
    base = MAX_ROUNDS_MINUTES[block_week(week) - 1]
    return min(MAX_ROUNDS_MINUTES_CAP, base + 2) if endurance_bias else base


def dynamic_rest(week: int, kind: str) -> str:
    """Progressive rest by week; strength work always gets 2–4 min."""
    if kind == "strength":
        return REST_HEAVY_SKILL
    w = block_week(week)
    if w == 1:
        return "90s (allow movement quality)"
    if w == 2:
        return "75s"
    if w == 3:
        return "60s"
    if w == 4:
        return "45s. Rest longer if reps break down."
    return "90s"


def rest_for(week: int, kind: str, rest_bias: str = "default") -> str:
    """
    Goal-aware rest prescription.

    Args:
        week: Program week
        kind: "strength" or "endurance"
        rest_bias: "longer", "shorter" or "default" (see goals.rest_bias)

    Returns:
        Human-readable rest description
    """
    if kind == "strength":
        return REST_HEAVY_LONGER if rest_bias == "longer" else REST_HEAVY_SKILL
    if kind == "endurance" and rest_bias == "shorter":
        w = block_week(week)
        if w == 1:
            return "75s"
        if w <= 3:
            return "45–60s"
        return "45s. Rest longer if reps break down."
    return dynamic_rest(week, kind)
