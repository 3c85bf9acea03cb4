"""
Method generator registry.

Generators are registered per (DayArchetype, Method) pair with the
``generator`` decorator.  Each one takes a DayContext and returns the
ordered exercises of its block (usually one).
"""

from typing import Callable

from ..models import Exercise
from .base import DayArchetype, Method
from .context import DayContext

Generator = Callable[[DayContext], tuple[Exercise, ...]]

GENERATORS: dict[tuple[DayArchetype, Method], Generator] = {}


def generator(archetype: DayArchetype, method: Method) -> Callable[[Generator], Generator]:
    """Register a function as the generator for one (archetype, method) pair."""

    def register(fn: Generator) -> Generator:
        key = (archetype, method)
        if key in GENERATORS:
            raise RuntimeError(f"Duplicate generator for {archetype.value}/{method.value}")
        GENERATORS[key] = fn
        return fn

    return register


def get_generator(archetype: DayArchetype, method: Method) -> Generator:
    """
    Return the generator for a pair.

    Raises:
        ValueError: If no generator handles the pair
    """
    try:
        return GENERATORS[(archetype, method)]
    except KeyError:
        raise ValueError(
            f"No generator for method '{method.value}' on a {archetype.value} day"
        ) from None


def generate(ctx: DayContext, archetype: DayArchetype, method: Method) -> tuple[Exercise, ...]:
    return get_generator(archetype, method)(ctx)
