"""
Data models for calisthenics-planner.

All core dataclasses representing athlete input, generated programs and
their annotations.  Generated entities are frozen and use tuples for
ordered collections: nothing is mutated after construction.
"""

from dataclasses import dataclass, field, replace
from typing import ClassVar, Literal

from .config import (
    DEFAULT_PROGRAM_WEEKS,
    LEVELS,
    SUPPORTED_PROGRAM_WEEKS,
    VALID_GOALS,
)
from .methods.base import Method

Level = Literal["beginner", "intermediate", "advanced"]
Goal = Literal["lose_weight", "improve_endurance", "build_muscle", "learn_skills"]
ExerciseKind = Literal["warmup", "cooldown", "skill", "main", "finisher"]
PrescriptionKind = Literal["set", "interval", "total", "hold"]


@dataclass(frozen=True)
class CapabilityVector:
    """
    Best-known max reps per movement category.

    ``muscle_ups`` is the advanced-only skill movement; it is zeroed for
    beginners by ``for_level``.
    """

    pull_ups: int
    dips: int
    push_ups: int
    squats: int
    leg_raises: int
    burpees: int
    muscle_ups: int = 0

    FIELDS: ClassVar[tuple[str, ...]] = (
        "pull_ups",
        "dips",
        "push_ups",
        "squats",
        "leg_raises",
        "burpees",
        "muscle_ups",
    )

    def __post_init__(self) -> None:
        """Validate capability values."""
        for name in self.FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"{name} must be non-negative")

    def get(self, movement: str) -> int:
        """Return the max reps for a capability field name."""
        if movement not in self.FIELDS:
            raise ValueError(f"Unknown capability field: {movement!r}")
        return getattr(self, movement)

    def for_level(self, level: str) -> "CapabilityVector":
        """Return a snapshot with the advanced-only field forced to 0 for beginners."""
        if level == "beginner" and self.muscle_ups != 0:
            return replace(self, muscle_ups=0)
        return self

    def as_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in self.FIELDS}


@dataclass(frozen=True)
class WeekSetting:
    """One row of a periodization curve."""

    volume: float
    intensity: float
    style: str
    color: str
    label: str


@dataclass(frozen=True)
class RepPrescription:
    """
    A single numeric prescription embedded in an exercise.

    ``movement`` is a capability field name when the number is governed by
    that capability, or None for regressions, holds and accessory work.
    """

    movement: str | None
    reps: int
    kind: PrescriptionKind = "set"

    def __post_init__(self) -> None:
        if self.reps < 0:
            raise ValueError("reps must be non-negative")


@dataclass(frozen=True)
class Exercise:
    """A prescribed exercise block within a training day."""

    name: str
    sets: str
    rest: str
    note: str = ""
    method: Method | None = None
    kind: ExerciseKind | None = None
    duration: str | None = None
    movements: tuple[str, ...] = ()
    prescriptions: tuple[RepPrescription, ...] = ()


@dataclass(frozen=True)
class Day:
    """One training session."""

    day_number: int
    focus: str
    exercises: tuple[Exercise, ...]
    methods: tuple[str, ...] = ()
    coaching_note: str = ""


@dataclass(frozen=True)
class ScheduleSlot:
    """A calendar day in the weekly schedule; ``day_number`` None means rest."""

    day_label: str
    focus: str
    day_number: int | None = None

    @property
    def is_rest(self) -> bool:
        return self.day_number is None


@dataclass(frozen=True)
class Week:
    """One week of the program."""

    week_number: int
    days: tuple[Day, ...]
    schedule: tuple[ScheduleSlot, ...]
    setting: WeekSetting

    @property
    def intensity_label(self) -> str:
        return self.setting.label

    @property
    def intensity_color(self) -> str:
        return self.setting.color


@dataclass(frozen=True)
class FoodItem:
    name: str
    qty: str


@dataclass(frozen=True)
class Meal:
    time: str
    name: str
    foods: tuple[FoodItem, ...]
    kcal: int
    protein: int


@dataclass(frozen=True)
class NutritionPlan:
    """
    Energy and protein targets.

    All numeric fields are None when height/weight were missing or out of
    range ("insufficient data").
    """

    bmr: int | None
    total_energy: int | None
    protein_grams: int | None
    goals: tuple[str, ...] = ()
    note: str = ""
    sample_meals: tuple[Meal, ...] | None = None

    @property
    def is_insufficient(self) -> bool:
        return self.total_energy is None


@dataclass(frozen=True)
class ProgramRequest:
    """Validated input for one generation call."""

    level: Level
    capability: CapabilityVector
    goals: tuple[str, ...] = ()
    weeks: int = DEFAULT_PROGRAM_WEEKS
    height_cm: float | None = None
    weight_kg: float | None = None
    sport: str | None = None
    seed: int = 0

    def __post_init__(self) -> None:
        """Validate request data."""
        if self.level not in LEVELS:
            raise ValueError(f"Invalid level: {self.level!r}")
        if self.weeks not in SUPPORTED_PROGRAM_WEEKS:
            raise ValueError(
                f"weeks must be one of {SUPPORTED_PROGRAM_WEEKS}, got {self.weeks}"
            )
        for goal in self.goals:
            if goal not in VALID_GOALS:
                raise ValueError(f"Invalid goal: {goal!r}")
        if len(set(self.goals)) != len(self.goals):
            raise ValueError("goals must be distinct")


@dataclass(frozen=True)
class Program:
    """
    A complete generated program.

    ``coach_review`` is the only field the review pipeline ever sets; it maps
    week number to plain-text commentary.
    """

    level: Level
    capability: CapabilityVector
    weeks: tuple[Week, ...]
    nutrition: NutritionPlan
    goals: tuple[str, ...] = ()
    week_description: str = ""
    sport: str | None = None
    coach_review: dict[int, str] | None = field(default=None, compare=True)

    def week(self, week_number: int) -> Week:
        """Return the week with the given 1-based number."""
        for w in self.weeks:
            if w.week_number == week_number:
                return w
        raise ValueError(f"Program has no week {week_number}")
