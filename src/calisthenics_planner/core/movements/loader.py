"""
YAML → MovementDefinition loader.

Loads movement definitions from individual YAML files in the bundled
``src/calisthenics_planner/movements/`` directory.  Each file (e.g.
pull_ups.yaml) holds a flat definition matching the MovementDefinition
schema.

User overrides: place matching files in ``~/.calisthenics-planner/movements/``.
A user file is deep-merged over the bundled definition, so only changed
keys need to be listed.  A user file whose movement_id does not match any
bundled file is ignored: the capability fields are fixed.
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path

from ..engine.config_loader import _deep_merge, _load_yaml_file
from .base import MovementDefinition, Regression

_REQUIRED_FIELDS: frozenset[str] = frozenset(
    {
        "movement_id",
        "display_name",
        "ceiling",
    }
)

_REGRESSION_BANDS: tuple[str, ...] = ("low", "mid")


def _regression_from_dict(band: str, d: dict) -> Regression:
    """Convert a raw regression dict, raising ValueError on missing fields."""
    if not isinstance(d, dict) or "name" not in d:
        raise ValueError(f"regression band {band!r} needs a name")
    return Regression(name=str(d["name"]), materials=str(d.get("materials", "")))


def movement_from_dict(d: dict) -> MovementDefinition:
    """Convert a raw dict (from YAML) to a MovementDefinition.

    Raises ValueError if any required field is absent.
    """
    missing = _REQUIRED_FIELDS - set(d)
    if missing:
        raise ValueError(f"MovementDefinition missing fields: {sorted(missing)}")

    raw_regressions = d.get("regressions") or {}
    regressions = {
        band: _regression_from_dict(band, raw_regressions[band])
        for band in _REGRESSION_BANDS
        if band in raw_regressions
    }

    ceiling = int(d["ceiling"])
    if ceiling <= 0:
        raise ValueError(f"ceiling must be positive, got {ceiling}")

    paired = d.get("paired_regression")
    return MovementDefinition(
        movement_id=str(d["movement_id"]),
        display_name=str(d["display_name"]),
        ceiling=ceiling,
        advanced_only=bool(d.get("advanced_only", False)),
        regressions=regressions,
        paired_regression=str(paired) if paired else None,
    )


def _get_bundled_movements_dir() -> Path | None:
    """Return path to the bundled movements/ data directory, or None if not found."""
    # loader.py lives at src/calisthenics_planner/core/movements/loader.py
    candidate = Path(__file__).parent.parent.parent / "movements"
    return candidate if candidate.is_dir() else None


def _get_user_movements_dir() -> Path | None:
    """Return ~/.calisthenics-planner/movements/ if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".calisthenics-planner" / "movements"
    return p if p.is_dir() else None


def load_movements_from_yaml() -> dict[str, MovementDefinition]:
    """Return {movement_id: MovementDefinition} loaded from per-movement YAML files.

    Invalid files are skipped with a warning; the registry decides whether
    what remains is enough to run.
    """
    bundled_dir = _get_bundled_movements_dir()
    if bundled_dir is None:
        return {}
    user_dir = _get_user_movements_dir()

    result: dict[str, MovementDefinition] = {}
    for path in sorted(bundled_dir.glob("*.yaml")):
        raw = _load_yaml_file(path)
        if not raw:
            continue
        if user_dir is not None:
            user_path = user_dir / path.name
            if user_path.exists():
                user_raw = _load_yaml_file(user_path)
                if user_raw:
                    raw = _deep_merge(raw, user_raw)
        try:
            movement = movement_from_dict(raw)
        except (ValueError, TypeError) as exc:
            warnings.warn(
                f"calisthenics-planner: skipping movement '{path.stem}': {exc}",
                stacklevel=2,
            )
            continue
        result[movement.movement_id] = movement

    return result
