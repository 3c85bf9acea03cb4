"""
Goal resolver.

Maps the ordered goal selection to a priority-weighted influence vector
and derives every goal-dependent knob from it.  The base week structure is
the same for all goals; goals only change emphasis (volume, rest, cardio
density, skills).
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

from .config import (
    CONFLICTING_GOALS,
    GOAL_WEIGHT_SPLITS,
    REP_RANGE_BUILD_MUSCLE,
    REP_RANGE_DEFAULT,
    REP_RANGE_ENDURANCE,
    REP_RANGE_LOSE_WEIGHT,
    SKILL_DAY_NUMBERS,
    SKILL_MIN_WEIGHT,
    SKILL_VOLUME_CAP,
    VALID_GOALS,
    WEEK_INTENSITY_TAGS,
)
from .models import CapabilityVector

GoalWeights = dict[str, float]


@dataclass(frozen=True)
class RepRange:
    """Prescription window as fractions of max; ``volume_cap`` scales total volume."""

    low: float
    high: float
    volume_cap: float | None = None

    @property
    def midpoint(self) -> float:
        return (self.low + self.high) / 2


@dataclass(frozen=True)
class CardioDensity:
    add_element: bool
    favor_jump_rope: bool
    extra_minutes: int


@dataclass(frozen=True)
class GoalLimits:
    cap_cardio_volume: bool
    cap_interval_intensity: bool
    limit_weighted_work: bool
    forbid_conditioning_on_skill_days: bool
    forbid_skill_fatigue_stacking: bool


@dataclass(frozen=True)
class SkillDaySettings:
    include_skill_work: bool
    unlocked_skills: tuple[str, ...] = ()
    place_at_start: bool = True
    long_rest: bool = True
    avoid_conditioning: bool = False


def normalize_goals(goals: Iterable[str] | None) -> tuple[str, ...]:
    """Keep valid tags in order, dropping duplicates."""
    seen: list[str] = []
    for g in goals or ():
        if g in VALID_GOALS and g not in seen:
            seen.append(g)
    return tuple(seen)


def goal_weights(goals: Iterable[str] | None) -> GoalWeights:
    """
    Priority weighting: one goal 1.0; two 0.6/0.4; three 0.6/0.3/0.1.

    Every tag is present in the result; unselected tags weigh 0.
    """
    selected = normalize_goals(goals)
    weights = {g: 0.0 for g in VALID_GOALS}
    if not selected:
        return weights
    split = GOAL_WEIGHT_SPLITS[min(len(selected), max(GOAL_WEIGHT_SPLITS))]
    for goal, w in zip(selected, split):
        weights[goal] = w
    return weights


def rep_range_bias(weights: GoalWeights) -> RepRange:
    """Shift the default prescription window toward the dominant goal."""
    low, high = REP_RANGE_DEFAULT
    if weights["build_muscle"] > 0.3:
        low, high = REP_RANGE_BUILD_MUSCLE
    elif weights["improve_endurance"] > 0.3:
        low, high = REP_RANGE_ENDURANCE
    elif weights["lose_weight"] > 0.3:
        low, high = REP_RANGE_LOSE_WEIGHT
    volume_cap = SKILL_VOLUME_CAP if weights["learn_skills"] > 0.3 else None
    return RepRange(low=low, high=high, volume_cap=volume_cap)


def rest_bias(weights: GoalWeights) -> str:
    """Build Muscle → "longer"; Lose Weight → "shorter"; otherwise "default"."""
    if weights["build_muscle"] > 0.4:
        return "longer"
    if weights["lose_weight"] > 0.4:
        return "shorter"
    return "default"


def cardio_density(weights: GoalWeights) -> CardioDensity:
    """Lose Weight adds a conditioning element; either cardio goal favors jump rope."""
    return CardioDensity(
        add_element=weights["lose_weight"] > 0.3,
        favor_jump_rope=weights["lose_weight"] > 0.2 or weights["improve_endurance"] > 0.2,
        extra_minutes=5 if weights["lose_weight"] + weights["improve_endurance"] > 0.5 else 0,
    )


def goal_limits(weights: GoalWeights) -> GoalLimits:
    return GoalLimits(
        cap_cardio_volume=weights["build_muscle"] > 0.5,
        cap_interval_intensity=weights["lose_weight"] > 0.4,
        limit_weighted_work=weights["improve_endurance"] > 0.5,
        forbid_conditioning_on_skill_days=weights["learn_skills"] > 0.3,
        forbid_skill_fatigue_stacking=weights["learn_skills"] > 0.3,
    )


def has_conflict(goals: Sequence[str] | None) -> bool:
    """True only when both Lose Weight and Build Muscle are selected."""
    return CONFLICTING_GOALS <= set(goals or ())


def dominant_goal_for_day(goals: Sequence[str] | None, day_number: int) -> str | None:
    """
    Which goal governs a training day when goals conflict.

    Day 3 (cardio) favors Lose Weight / Endurance, day 4 (integration)
    favors Endurance, day 5 (strength) favors Build Muscle / Skills.  Other
    days, or days whose preferred goal is not selected, take the
    highest-weighted goal.  Returns None when there is no conflict.
    """
    if not has_conflict(goals):
        return None
    weights = goal_weights(goals)
    by_weight = sorted(
        (g for g in normalize_goals(goals) if weights[g] > 0),
        key=lambda g: -weights[g],
    )
    preferred: dict[int, tuple[str, ...]] = {
        3: ("lose_weight", "improve_endurance"),
        4: ("improve_endurance",),
        5: ("build_muscle", "learn_skills"),
    }
    for g in by_weight:
        if g in preferred.get(day_number, ()):
            return g
    return by_weight[0]


def day_weights(goals: Sequence[str] | None, day_number: int) -> GoalWeights:
    """
    Weights governing one day.

    On conflicting selections the day is driven by its dominant goal alone,
    so the same session is never asked to deficit-train and overload.
    """
    dominant = dominant_goal_for_day(goals, day_number)
    if dominant is None:
        return goal_weights(goals)
    return goal_weights([dominant])


# =============================================================================
# SKILL GATING
# =============================================================================

SKILL_GATES: dict[str, dict[str, int]] = {
    "l_sit": {"pull_ups": 15, "leg_raises": 15},
    "handstand": {"push_ups": 10},
    "muscle_up": {"pull_ups": 10, "dips": 10},
    "front_lever": {"pull_ups": 15},
    "back_lever": {"pull_ups": 12},
    "planche": {"push_ups": 25, "dips": 15},
}


def can_unlock_skill(skill: str, capability: CapabilityVector) -> bool:
    gate = SKILL_GATES.get(skill)
    if gate is None:
        return False
    return all(capability.get(movement) >= minimum for movement, minimum in gate.items())


def unlocked_skills(capability: CapabilityVector) -> tuple[str, ...]:
    """Skills whose prerequisites the athlete meets, in table order."""
    return tuple(s for s in SKILL_GATES if can_unlock_skill(s, capability))


def skill_day_settings(
    goals: Sequence[str] | None,
    capability: CapabilityVector,
    day_number: int,
) -> SkillDaySettings:
    """Skill work: only on low-fatigue days, at session start, with long rest."""
    weights = goal_weights(goals)
    if weights["learn_skills"] < SKILL_MIN_WEIGHT:
        return SkillDaySettings(include_skill_work=False)
    skills = unlocked_skills(capability)
    return SkillDaySettings(
        include_skill_work=bool(skills) and day_number in SKILL_DAY_NUMBERS,
        unlocked_skills=skills,
        place_at_start=True,
        long_rest=True,
        avoid_conditioning=weights["learn_skills"] > 0.4,
    )


def week_intensity_tag(week_in_block: int) -> str:
    """friendly / progressive / intense / controlled_peak / deload."""
    return WEEK_INTENSITY_TAGS.get(week_in_block, "progressive")
