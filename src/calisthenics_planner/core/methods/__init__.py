"""
Training methods for calisthenics-planner.

Method identifiers live in ``base``; the per-archetype generator functions
are registered in ``registry``.
"""

from .base import DAY_ARCHETYPES, DayArchetype, Method

__all__ = [
    "DAY_ARCHETYPES",
    "DayArchetype",
    "Method",
]
