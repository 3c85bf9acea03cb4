"""
Movement registry.

Every CapabilityVector field must have a definition here.  Definitions
are loaded from the bundled YAML files at import time; if any capability
field is left without one a RuntimeError is raised, since validation and
regressions cannot work without them.
"""

from ..models import CapabilityVector
from .base import MovementDefinition


def _build_registry() -> dict[str, MovementDefinition]:
    from .loader import load_movements_from_yaml

    loaded = load_movements_from_yaml()
    missing = [f for f in CapabilityVector.FIELDS if f not in loaded]
    if missing:
        raise RuntimeError(
            "calisthenics-planner: missing movement definitions for "
            f"{', '.join(missing)}. Check that src/calisthenics_planner/movements/*.yaml "
            "files are present and valid."
        )
    return loaded


MOVEMENT_REGISTRY: dict[str, MovementDefinition] = _build_registry()


def get_movement(movement_id: str) -> MovementDefinition:
    """
    Return the MovementDefinition for the given capability field.

    Raises:
        ValueError: If movement_id is not in the registry
    """
    if movement_id not in MOVEMENT_REGISTRY:
        valid = ", ".join(MOVEMENT_REGISTRY)
        raise ValueError(f"Unknown movement '{movement_id}'. Valid IDs: {valid}")
    return MOVEMENT_REGISTRY[movement_id]
