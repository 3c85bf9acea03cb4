"""
Request validation and JSON serialization for programs.

Handles conversion between dataclasses and JSON-compatible dicts.  Every
program field round-trips losslessly: numbers are stored as numbers and
tuples are rebuilt on load.
"""

import json
from typing import Any

from ..core.config import (
    DEFAULT_PROGRAM_WEEKS,
    LEVELS,
    MAX_GOALS,
    MAX_HEIGHT_CM,
    MAX_WEIGHT_KG,
    MIN_HEIGHT_CM,
    MIN_WEIGHT_KG,
    SUPPORTED_PROGRAM_WEEKS,
    VALID_GOALS,
)
from ..core.methods.base import Method
from ..core.models import (
    CapabilityVector,
    Day,
    Exercise,
    FoodItem,
    Meal,
    NutritionPlan,
    Program,
    ProgramRequest,
    RepPrescription,
    ScheduleSlot,
    Week,
    WeekSetting,
)
from ..core.movements.registry import MOVEMENT_REGISTRY


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


# =============================================================================
# REQUEST VALIDATION
# =============================================================================


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_capability(raw: Any) -> tuple[CapabilityVector | None, list[str]]:
    """
    Check every capability field: required, non-negative integer, ≤ ceiling.

    Returns:
        (CapabilityVector or None, list of problems)
    """
    if not isinstance(raw, dict):
        return None, ["capability must be an object with max reps per movement"]
    problems = []
    values: dict[str, int] = {}
    for name in CapabilityVector.FIELDS:
        if name not in raw or raw[name] is None:
            problems.append(f"capability.{name} is required")
            continue
        value = raw[name]
        if not _is_int(value):
            problems.append(f"capability.{name} must be an integer, got {value!r}")
            continue
        ceiling = MOVEMENT_REGISTRY[name].ceiling
        if value < 0:
            problems.append(f"capability.{name} must be non-negative, got {value}")
        elif value > ceiling:
            problems.append(f"capability.{name} must be at most {ceiling}, got {value}")
        else:
            values[name] = value
    if problems:
        return None, problems
    return CapabilityVector(**values), []


def validate_goals(raw: Any) -> tuple[tuple[str, ...], list[str]]:
    if raw is None:
        return (), []
    if not isinstance(raw, (list, tuple)):
        return (), ["goals must be a list"]
    problems = []
    if len(raw) > MAX_GOALS:
        problems.append(f"at most {MAX_GOALS} goals may be selected, got {len(raw)}")
    for g in raw:
        if not isinstance(g, str) or g not in VALID_GOALS:
            problems.append(f"invalid goal {g!r}; valid goals: {', '.join(VALID_GOALS)}")
    names = [g for g in raw if isinstance(g, str)]
    if len(set(names)) != len(names):
        problems.append("goals must be distinct")
    return tuple(raw), problems


def _validate_range(raw: dict, key: str, low: float, high: float, unit: str) -> tuple[float | None, list[str]]:
    value = raw.get(key)
    if value is None:
        return None, []
    if not _is_number(value):
        return None, [f"{key} must be a number, got {value!r}"]
    if not low <= value <= high:
        return None, [f"{key} must be between {low:g} and {high:g} {unit}, got {value}"]
    return value, []


def parse_generation_request(data: dict[str, Any]) -> ProgramRequest:
    """
    Validate a generation request before any generation runs.

    Expected keys: ``level`` (required), ``capability`` (required, all
    seven movements), ``goals``, ``weeks``, ``height_cm``, ``weight_kg``,
    ``sport``, ``seed``.

    Args:
        data: Raw request dict (e.g. decoded JSON)

    Returns:
        ProgramRequest

    Raises:
        ValidationError: One error listing every problem found
    """
    if not isinstance(data, dict):
        raise ValidationError("request must be a JSON object")
    problems: list[str] = []

    level = data.get("level")
    if level not in LEVELS:
        problems.append(f"level is required and must be one of {', '.join(LEVELS)}")

    capability, cap_problems = validate_capability(data.get("capability"))
    problems += cap_problems

    goals, goal_problems = validate_goals(data.get("goals"))
    problems += goal_problems

    weeks = data.get("weeks", DEFAULT_PROGRAM_WEEKS)
    if weeks not in SUPPORTED_PROGRAM_WEEKS or not _is_int(weeks):
        problems.append(f"weeks must be one of {', '.join(map(str, SUPPORTED_PROGRAM_WEEKS))}")

    height, p = _validate_range(data, "height_cm", MIN_HEIGHT_CM, MAX_HEIGHT_CM, "cm")
    problems += p
    weight, p = _validate_range(data, "weight_kg", MIN_WEIGHT_KG, MAX_WEIGHT_KG, "kg")
    problems += p

    sport = data.get("sport")
    if sport is not None and not isinstance(sport, str):
        problems.append("sport must be a string")
    seed = data.get("seed", 0)
    if not _is_int(seed):
        problems.append(f"seed must be an integer, got {seed!r}")

    if problems:
        raise ValidationError("; ".join(problems))

    if sport is not None:
        sport = sport.strip() or None
    return ProgramRequest(
        level=level,
        capability=capability.for_level(level),
        goals=goals,
        weeks=weeks,
        height_cm=height,
        weight_kg=weight,
        sport=sport,
        seed=seed,
    )


# =============================================================================
# PROGRAM → DICT
# =============================================================================


def exercise_to_dict(ex: Exercise) -> dict[str, Any]:
    return {
        "name": ex.name,
        "sets": ex.sets,
        "rest": ex.rest,
        "note": ex.note,
        "method": ex.method.value if ex.method is not None else None,
        "kind": ex.kind,
        "duration": ex.duration,
        "movements": list(ex.movements),
        "prescriptions": [
            {"movement": p.movement, "reps": p.reps, "kind": p.kind} for p in ex.prescriptions
        ],
    }


def day_to_dict(day: Day) -> dict[str, Any]:
    return {
        "day_number": day.day_number,
        "focus": day.focus,
        "methods": list(day.methods),
        "coaching_note": day.coaching_note,
        "exercises": [exercise_to_dict(ex) for ex in day.exercises],
    }


def week_to_dict(week: Week) -> dict[str, Any]:
    s = week.setting
    return {
        "week_number": week.week_number,
        "setting": {
            "volume": s.volume,
            "intensity": s.intensity,
            "style": s.style,
            "color": s.color,
            "label": s.label,
        },
        "schedule": [
            {"day_label": slot.day_label, "focus": slot.focus, "day_number": slot.day_number}
            for slot in week.schedule
        ],
        "days": [day_to_dict(d) for d in week.days],
    }


def nutrition_to_dict(plan: NutritionPlan) -> dict[str, Any]:
    meals = None
    if plan.sample_meals is not None:
        meals = [
            {
                "time": m.time,
                "name": m.name,
                "foods": [{"name": f.name, "qty": f.qty} for f in m.foods],
                "kcal": m.kcal,
                "protein": m.protein,
            }
            for m in plan.sample_meals
        ]
    return {
        "bmr": plan.bmr,
        "total_energy": plan.total_energy,
        "protein_grams": plan.protein_grams,
        "goals": list(plan.goals),
        "note": plan.note,
        "sample_meals": meals,
    }


def program_to_dict(program: Program) -> dict[str, Any]:
    """
    Convert a Program to a JSON-compatible dict.

    Coach-review keys become strings (JSON object keys).
    """
    review = None
    if program.coach_review is not None:
        review = {str(k): v for k, v in sorted(program.coach_review.items())}
    return {
        "level": program.level,
        "capability": program.capability.as_dict(),
        "goals": list(program.goals),
        "sport": program.sport,
        "week_description": program.week_description,
        "weeks": [week_to_dict(w) for w in program.weeks],
        "nutrition": nutrition_to_dict(program.nutrition),
        "coach_review": review,
    }


# =============================================================================
# DICT → PROGRAM
# =============================================================================


def dict_to_exercise(data: dict[str, Any]) -> Exercise:
    method = data.get("method")
    return Exercise(
        name=data["name"],
        sets=data["sets"],
        rest=data["rest"],
        note=data.get("note", ""),
        method=Method(method) if method else None,
        kind=data.get("kind"),
        duration=data.get("duration"),
        movements=tuple(data.get("movements", ())),
        prescriptions=tuple(
            RepPrescription(p.get("movement"), int(p["reps"]), p.get("kind", "set"))
            for p in data.get("prescriptions", ())
        ),
    )


def dict_to_day(data: dict[str, Any]) -> Day:
    return Day(
        day_number=int(data["day_number"]),
        focus=data["focus"],
        exercises=tuple(dict_to_exercise(e) for e in data.get("exercises", ())),
        methods=tuple(data.get("methods", ())),
        coaching_note=data.get("coaching_note", ""),
    )


def dict_to_week(data: dict[str, Any]) -> Week:
    s = data["setting"]
    return Week(
        week_number=int(data["week_number"]),
        days=tuple(dict_to_day(d) for d in data.get("days", ())),
        schedule=tuple(
            ScheduleSlot(
                day_label=slot["day_label"],
                focus=slot["focus"],
                day_number=slot.get("day_number"),
            )
            for slot in data.get("schedule", ())
        ),
        setting=WeekSetting(
            volume=s["volume"],
            intensity=s["intensity"],
            style=s["style"],
            color=s["color"],
            label=s["label"],
        ),
    )


def dict_to_nutrition(data: dict[str, Any]) -> NutritionPlan:
    meals = data.get("sample_meals")
    return NutritionPlan(
        bmr=data.get("bmr"),
        total_energy=data.get("total_energy"),
        protein_grams=data.get("protein_grams"),
        goals=tuple(data.get("goals", ())),
        note=data.get("note", ""),
        sample_meals=None
        if meals is None
        else tuple(
            Meal(
                time=m["time"],
                name=m["name"],
                foods=tuple(FoodItem(f["name"], f["qty"]) for f in m["foods"]),
                kcal=m["kcal"],
                protein=m["protein"],
            )
            for m in meals
        ),
    )


def program_from_dict(data: dict[str, Any]) -> Program:
    """
    Rebuild a Program from ``program_to_dict`` output.

    Raises:
        ValidationError: If required keys are missing or malformed
    """
    try:
        review = data.get("coach_review")
        return Program(
            level=data["level"],
            capability=CapabilityVector(**data["capability"]),
            weeks=tuple(dict_to_week(w) for w in data["weeks"]),
            nutrition=dict_to_nutrition(data["nutrition"]),
            goals=tuple(data.get("goals", ())),
            week_description=data.get("week_description", ""),
            sport=data.get("sport"),
            coach_review=None if review is None else {int(k): v for k, v in review.items()},
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid program data: {e}") from e


def dumps_program(program: Program, indent: int | None = 2) -> str:
    """Serialize a Program to a JSON string."""
    return json.dumps(program_to_dict(program), indent=indent, ensure_ascii=False)


def loads_program(text: str) -> Program:
    """
    Parse a Program from a JSON string.

    Raises:
        ValidationError: If the text is not valid program JSON
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("Program JSON must be an object")
    return program_from_dict(data)
