"""
Movement definitions for calisthenics-planner.

Each capability category is described by a MovementDefinition loaded from
the bundled YAML data.
"""

from .base import MovementDefinition, Regression
from .registry import MOVEMENT_REGISTRY, get_movement

__all__ = [
    "MovementDefinition",
    "Regression",
    "MOVEMENT_REGISTRY",
    "get_movement",
]
