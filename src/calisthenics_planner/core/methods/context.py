"""
Per-day generation context shared by all method generators.

A DayContext is built once per training day by the scheduler; it carries
the athlete snapshot, the week setting and the goal weights governing that
day so generators never read ambient state.
"""

from dataclasses import dataclass

from ..goals import (
    CardioDensity,
    GoalLimits,
    GoalWeights,
    RepRange,
    cardio_density,
    goal_limits,
    rep_range_bias,
    rest_bias,
)
from ..models import CapabilityVector, RepPrescription, WeekSetting
from ..movements.registry import get_movement
from ..prescriptions import block_week, level_multiplier, pull_percentage
from ..safety import regression_for


@dataclass(frozen=True)
class DayContext:
    week: int
    day_number: int
    level: str
    capability: CapabilityVector
    setting: WeekSetting
    goals: tuple[str, ...]
    weights: GoalWeights
    seed: int = 0
    final_week: bool = False  # Last week of a program that ends with the retest day

    @property
    def block_week(self) -> int:
        return block_week(self.week)

    @property
    def is_beginner(self) -> bool:
        return self.level == "beginner"

    @property
    def volume(self) -> float:
        """Week volume fraction scaled by level."""
        return self.setting.volume * level_multiplier(self.level)

    @property
    def pull_percentage(self) -> float:
        return pull_percentage(self.level)

    @property
    def rest_bias(self) -> str:
        return rest_bias(self.weights)

    @property
    def limits(self) -> GoalLimits:
        return goal_limits(self.weights)

    @property
    def cardio(self) -> CardioDensity:
        return cardio_density(self.weights)

    @property
    def rep_range(self) -> RepRange:
        return rep_range_bias(self.weights)

    @property
    def muscle_ups(self) -> int:
        """Muscle-up max, always 0 for beginners."""
        return 0 if self.is_beginner else self.capability.muscle_ups

    @property
    def cardio_bias(self) -> bool:
        """True when Lose Weight or Improve Endurance shape this day."""
        return self.weights["lose_weight"] > 0 or self.weights["improve_endurance"] > 0

    def max(self, movement: str) -> int:
        return self.capability.get(movement)

    def movement_label(self, movement: str) -> tuple[str, str | None]:
        """
        Display name and prescription tag for a movement.

        Beginners in a regression band get the regression's name and a
        ``None`` tag; everyone else gets the movement's own name.  A
        regression that is the movement's paired variant is already
        delivered by the pairing, so the movement keeps its own name.
        """
        definition = get_movement(movement)
        regression = regression_for(movement, self.max(movement), self.level)
        if regression is not None and regression.name != definition.paired_regression:
            return regression.name, None
        return definition.display_name, movement

    @property
    def pairs_assisted(self) -> bool:
        """Beginners pair every vertical pull with Australian pull-ups."""
        return self.is_beginner


def per_set(movement: str | None, reps: int) -> RepPrescription:
    return RepPrescription(movement, reps, "set")


def per_interval(movement: str | None, reps: int) -> RepPrescription:
    return RepPrescription(movement, reps, "interval")


def total(movement: str | None, reps: int) -> RepPrescription:
    return RepPrescription(movement, reps, "total")


def hold(seconds: int) -> RepPrescription:
    return RepPrescription(None, seconds, "hold")
