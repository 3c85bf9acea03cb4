"""
Base types for movement definitions.

MovementDefinition describes one capability category the generator
prescribes against: its validation ceiling and the easier substitutes
offered to beginners who cannot yet perform it.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Regression:
    """An easier substitute movement and the equipment it needs."""

    name: str
    materials: str


@dataclass(frozen=True)
class MovementDefinition:
    """
    Full configuration for one movement category.

    ``movement_id`` matches the CapabilityVector field name.
    """

    movement_id: str          # e.g. "pull_ups"
    display_name: str         # e.g. "Pull-ups"
    ceiling: int              # Realistic upper limit accepted as input
    advanced_only: bool = False

    # Beginner regressions by band: "low" (hardest regression) and "mid"
    regressions: dict[str, Regression] = field(default_factory=dict)

    # Horizontal-pull style pairing used when the movement is regressed
    paired_regression: str | None = None
