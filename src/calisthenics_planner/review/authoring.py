"""
AI-authored program mode.

Asks the completion endpoint to write the whole program as JSON instead of
building it from the schedule tables.  The reply is parsed leniently
(optional fields defaulted) but structurally checked; on any failure the
deterministic generator's program is returned instead, so this mode always
yields a usable Program.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from ..core.config import BLOCK_WEEKS, GOAL_LABELS, WEEK_DESCRIPTION_4, WEEK_DESCRIPTION_5
from ..core.models import Day, Exercise, Program, ProgramRequest, Week
from ..core.nutrition import calculate_nutrition
from ..core.planner import generate_program, intensity_curve
from ..core.scheduler import DAYS_PER_WEEK, build_schedule
from ..io.serializers import ValidationError
from .client import CompletionClient, ReviewError
from .pipeline import athlete_line

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?```$", re.DOTALL)

AUTHORING_PROMPT = """You are a senior calisthenics coach writing a complete training program.

Rules: Week 1 is friendly. Any single working set stays at or below half of the athlete's max; EMOM reps stay at or below 35% of max. At most one high-fatigue method (EMOM, AMRAP, For time, Chipper, Unbroken) per session. Beginners get regressions (Australian pull-ups, knee push-ups, bench dips) and never muscle-ups. Never exceed the athlete's max reps.

Output ONLY valid JSON, no commentary:
{"weeks":[{"week":1,"days":[{"day":1,"focus":"...","coaching_note":"...","exercises":[{"name":"...","sets":"...","rest":"...","note":"..."}]}]}]}"""


def authoring_prompt(request: ProgramRequest) -> str:
    goals = ", ".join(GOAL_LABELS.get(g, g) for g in request.goals) or "General fitness"
    sessions = 4 if request.weeks == 4 else 5
    return (
        f"{AUTHORING_PROMPT}\n\n"
        f"ATHLETE: Level {request.level}. {athlete_line(request.capability.for_level(request.level))}\n"
        f"Goals: {goals}.\n"
        f"Main sport: {request.sport or 'Calisthenics'}.\n"
        f"Program: {request.weeks} weeks, {sessions} training days per week."
    )


# =============================================================================
# PARSING
# =============================================================================


def strip_code_fence(text: str) -> str:
    """Remove a surrounding Markdown code fence, if any."""
    text = text.strip()
    m = _FENCE.match(text)
    return m.group(1).strip() if m else text


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value).strip()


def _parse_exercise(raw: Any) -> Exercise:
    if not isinstance(raw, dict) or not _text(raw.get("name")):
        raise ValidationError("every exercise needs a name")
    return Exercise(
        name=_text(raw["name"]),
        sets=_text(raw.get("sets")),
        rest=_text(raw.get("rest")),
        note=_text(raw.get("note")),
    )


def _parse_day(raw: Any, index: int) -> Day:
    if not isinstance(raw, dict):
        raise ValidationError(f"day {index} must be an object")
    exercises = raw.get("exercises")
    if not isinstance(exercises, list) or not exercises:
        raise ValidationError(f"day {index} has no exercises")
    number = raw.get("day", raw.get("day_number", index))
    if not isinstance(number, int) or isinstance(number, bool):
        raise ValidationError(f"day {index} has an invalid number: {number!r}")
    return Day(
        day_number=number,
        focus=_text(raw.get("focus"), "Training") or "Training",
        exercises=tuple(_parse_exercise(e) for e in exercises),
        coaching_note=_text(raw.get("coaching_note")),
    )


def parse_authored_program(text: str, request: ProgramRequest) -> Program:
    """
    Turn an authored JSON reply into a Program.

    The reply must be a JSON object whose ``weeks`` list has one entry per
    program week, each with one ``days`` entry per training day of the
    calendar (five, or four for a 4-week program).  Week settings,
    calendar and nutrition come from the request, not the reply.

    Raises:
        ValidationError: If the reply is not usable
    """
    try:
        data = json.loads(strip_code_fence(text))
    except json.JSONDecodeError as e:
        raise ValidationError(f"authored program is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("authored program must be a JSON object")
    raw_weeks = data.get("weeks")
    if not isinstance(raw_weeks, list):
        raise ValidationError("authored program needs a 'weeks' list")
    if len(raw_weeks) != request.weeks:
        raise ValidationError(f"expected {request.weeks} weeks, got {len(raw_weeks)}")

    curve = intensity_curve(request.weeks)
    block_length = 4 if request.weeks == 4 else BLOCK_WEEKS
    training_days = DAYS_PER_WEEK[block_length]
    weeks = []
    for i, (raw, setting) in enumerate(zip(raw_weeks, curve), start=1):
        if not isinstance(raw, dict) or not isinstance(raw.get("days"), list) or not raw["days"]:
            raise ValidationError(f"week {i} needs a non-empty 'days' list")
        if len(raw["days"]) != training_days:
            raise ValidationError(f"week {i} needs {training_days} days, got {len(raw['days'])}")
        days = tuple(_parse_day(d, j) for j, d in enumerate(raw["days"], start=1))
        weeks.append(
            Week(
                week_number=i,
                days=days,
                schedule=build_schedule(days, block_length),
                setting=setting,
            )
        )

    return Program(
        level=request.level,
        capability=request.capability.for_level(request.level),
        weeks=tuple(weeks),
        nutrition=calculate_nutrition(
            request.height_cm, request.weight_kg, request.goals, training_days=training_days
        ),
        goals=request.goals,
        week_description=WEEK_DESCRIPTION_4 if request.weeks == 4 else WEEK_DESCRIPTION_5,
        sport=request.sport,
    )


# =============================================================================
# AUTHORING
# =============================================================================


async def author_program(request: ProgramRequest, client: CompletionClient) -> Program:
    """
    Ask the endpoint for a complete program.

    Falls back to ``generate_program(request)`` on any transport, timeout,
    empty-content or parse failure.
    """
    settings = client.settings
    try:
        text = await client.complete(
            [{"role": "user", "content": authoring_prompt(request)}],
            max_tokens=settings.authoring_max_tokens,
            timeout=settings.authoring_timeout_seconds,
        )
        program = parse_authored_program(text, request)
    except (ReviewError, ValidationError) as e:
        logger.warning("Authored program unavailable (%s); using generated program", e)
        return generate_program(request)
    logger.info("Using authored %d-week program", len(program.weeks))
    return program
