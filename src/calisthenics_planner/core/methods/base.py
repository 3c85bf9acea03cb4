"""
Method and day-archetype identifiers.

``Method`` is the closed set of training methods the scheduler can place
in a session.  Each member carries its display label and whether it counts
toward the per-session high-fatigue budget.
"""

from enum import Enum


class Method(str, Enum):
    """A named pattern for structuring a block of prescribed movements."""

    SPLIT_VOLUME = "split_volume"
    INTERVAL_BLOCK = "interval_block"
    DESCENDING_LADDER = "descending_ladder"
    PYRAMID = "pyramid"
    SUPERSET = "superset"
    CLUSTER_SETS = "cluster_sets"
    TIMED_CHALLENGE = "timed_challenge"
    ISOMETRIC_LADDER = "isometric_ladder"
    CHIPPER = "chipper"
    DENSITY_CIRCUIT = "density_circuit"
    NO_STOP_SETS = "no_stop_sets"
    INTERVAL_SKILL_COMBO = "interval_skill_combo"
    TIMED_ROUNDS = "timed_rounds"
    MAX_ROUNDS = "max_rounds"
    STRENGTH_SETS = "strength_sets"
    MAX_TEST = "max_test"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def high_fatigue(self) -> bool:
        return self in _HIGH_FATIGUE


_LABELS: dict[Method, str] = {
    Method.SPLIT_VOLUME: "Separated volume",
    Method.INTERVAL_BLOCK: "EMOM",
    Method.DESCENDING_LADDER: "Degressive",
    Method.PYRAMID: "Pyramid",
    Method.SUPERSET: "Superset",
    Method.CLUSTER_SETS: "Cluster sets",
    Method.TIMED_CHALLENGE: "For time",
    Method.ISOMETRIC_LADDER: "Isometric",
    Method.CHIPPER: "Chipper",
    Method.DENSITY_CIRCUIT: "Density circuit",
    Method.NO_STOP_SETS: "Unbroken",
    Method.INTERVAL_SKILL_COMBO: "EMOM skill combo",
    Method.TIMED_ROUNDS: "Timed rounds",
    Method.MAX_ROUNDS: "AMRAP",
    Method.STRENGTH_SETS: "Strength sets",
    Method.MAX_TEST: "Max test",
}

_HIGH_FATIGUE: frozenset[Method] = frozenset(
    {
        Method.INTERVAL_BLOCK,
        Method.INTERVAL_SKILL_COMBO,
        Method.MAX_ROUNDS,
        Method.TIMED_CHALLENGE,
        Method.CHIPPER,
        Method.NO_STOP_SETS,
        Method.TIMED_ROUNDS,
        Method.ISOMETRIC_LADDER,
    }
)


class DayArchetype(str, Enum):
    """Fixed role of a training day within the week."""

    PULL = "pull"
    PUSH = "push"
    LEGS_CORE_CARDIO = "legs_core_cardio"
    ENDURANCE = "endurance"
    STRENGTH = "strength"


# Day number within the week → archetype
DAY_ARCHETYPES: dict[int, DayArchetype] = {
    1: DayArchetype.PULL,
    2: DayArchetype.PUSH,
    3: DayArchetype.LEGS_CORE_CARDIO,
    4: DayArchetype.ENDURANCE,
    5: DayArchetype.STRENGTH,
}
