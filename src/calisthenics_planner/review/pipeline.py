"""
Per-week coach review.

Each week is condensed into a short digest (one line per training day) and
sent with a read-only coaching prompt.  When goals are selected a second
goal-alignment prompt runs concurrently with the first.  Reviews are plain
text: they annotate the program and never change a prescription.

Weeks are processed in batches to stay under the endpoint's rate limit; a
week whose review fails gets a fixed placeholder instead.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import replace

from ..core.config import GOAL_LABELS, REVIEW_DIGEST_NAMES
from ..core.goals import week_intensity_tag
from ..core.models import CapabilityVector, Program, Week
from ..core.prescriptions import block_week
from .client import CompletionClient, ReviewError, Sleep

logger = logging.getLogger(__name__)

DEFAULT_SPORT = "Calisthenics"
DEFAULT_INTENSITY = "Moderate"

_EXERCISE_PREFIX = re.compile(r"^Exercise \d+:", re.IGNORECASE)

# =============================================================================
# PROMPTS
# =============================================================================

COACH_REVIEW_PROMPT = """You are a professional calisthenics coach reviewing ONE WEEK of an algorithm-generated program. You are NOT the generator. You DO NOT change athlete max reps. You DO NOT return JSON. You DO NOT invent exercises. Output PLAIN TEXT ONLY.

Your job: Detect overload, poor method stacking, unrealistic EMOMs, insufficient rest. Protect recovery. Preserve long-term progression. Always reduce, never increase.

Output format (plain text):
Coach Review – Week X
Overall assessment: (Too hard / Appropriate / Slightly aggressive / Unsafe)
Detected issues: (bullet list)
Recommended adjustments: (bullet list – always reduce)
Rest & recovery notes: (where rest must increase)
Coach trust notes: (1–2 lines)

Keep under 500 tokens."""

GOAL_ALIGNMENT_REVIEW_PROMPT = """You are a professional calisthenics coach and program reviewer. Review ONE WEEK only. Output PLAIN TEXT only (no JSON).

Your job: Verify that the program matches the selected goals. Check exercise choices, secondary work, skills (prerequisites), fatigue and recovery. Flag goal conflicts if present.

Goal validation rules:
- Lose Weight → sufficient cardio density, movement density, shorter rest (not after near-max).
- Improve Endurance → repeatable sets, controlled reps (40–60% max), EMOM/AMRAP controlled.
- Build Muscle → enough volume and rest, progressive overload, limited cardio/conditioning.
- Learn New Skills → low fatigue, quality focus, skills only if prerequisites met; no EMOM+skills stacking.

If goals conflict (e.g. Lose Weight + Build Muscle): recommend which should dominate this week. You never add volume. You never increase intensity. You only rebalance and protect.

Output format (strict):
Goal Alignment Review – Week X
Selected goals: (list)
Goal match assessment: (Good / Partial / Needs adjustment)
Detected mismatches: (bullet points or None)
Suggested refinements: (bullet points – reduce or rebalance only)
Fatigue & recovery check: (short paragraph)
Coach trust note: (1–2 lines on why this structure supports the goals safely)

Keep under 400 tokens."""


def fallback_text(week_number: int) -> str:
    return (
        f"Week {week_number}: Focus on movement quality and recovery. "
        "Follow the structure and rest as indicated."
    )


# =============================================================================
# DIGEST AND PROMPT BUILDING
# =============================================================================


def build_week_digest(week: Week) -> str:
    """
    One line per training day: ``Day N Focus: methods — first names``.

    Warm-up and cool-down blocks are left out; the "Exercise N:" prefix is
    stripped from names.
    """
    lines = []
    for day in week.days:
        working = [ex for ex in day.exercises if ex.kind not in ("warmup", "cooldown")]
        names = [_EXERCISE_PREFIX.sub("", ex.name).strip() for ex in working]
        names = [n for n in names if n][:REVIEW_DIGEST_NAMES]
        methods = ", ".join(day.methods) or "Volume"
        lines.append(
            f"Day {day.day_number} {day.focus or 'Training'}: {methods} — "
            f"{', '.join(names) or 'main exercises'}"
        )
    return "\n".join(lines)


def athlete_line(capability: CapabilityVector) -> str:
    line = (
        f"Max: Pull {capability.pull_ups}, Dips {capability.dips}, "
        f"Push {capability.push_ups}, Squats {capability.squats}, "
        f"Leg raises {capability.leg_raises}, Burpees {capability.burpees}"
    )
    if capability.muscle_ups:
        line += f", MU {capability.muscle_ups}"
    return line + "."


def coach_prompt(program: Program, week: Week, digest: str) -> str:
    return (
        f"{COACH_REVIEW_PROMPT}\n\n"
        f"ATHLETE: Level {program.level}. {athlete_line(program.capability)}\n"
        f"Main sport: {program.sport or DEFAULT_SPORT}.\n"
        f"Week {week.week_number} intensity: {week.intensity_label or DEFAULT_INTENSITY} "
        f"({week_intensity_tag(block_week(week.week_number))}).\n\n"
        f"Weekly structure & session summaries:\n{digest}"
    )


def goal_prompt(program: Program, week: Week, digest: str) -> str:
    goals = ", ".join(GOAL_LABELS.get(g, g) for g in program.goals) or "General fitness"
    n = week.week_number
    return (
        f"{GOAL_ALIGNMENT_REVIEW_PROMPT}\n\n"
        f"Week {n}. Level: {program.level}. "
        f"Intensity: {week.intensity_label or DEFAULT_INTENSITY}.\n"
        f"Selected goals: {goals}\n"
        f"{athlete_line(program.capability)}\n\n"
        f"Weekly structure & session summaries:\n{digest}\n\n"
        f'Review goal alignment. Output "Goal Alignment Review – Week {n}" '
        "then the sections as specified."
    )


# =============================================================================
# REVIEW RUNNERS
# =============================================================================


async def _ask(client: CompletionClient, prompt: str, max_tokens: int) -> str:
    return await client.complete([{"role": "user", "content": prompt}], max_tokens=max_tokens)


async def _ask_or_empty(client: CompletionClient, prompt: str, max_tokens: int, label: str) -> str:
    try:
        return await _ask(client, prompt, max_tokens)
    except ReviewError as e:
        logger.warning("%s failed: %s", label, e)
        return ""


async def review_week(program: Program, week: Week, client: CompletionClient) -> str:
    """
    Review one week; never raises ``ReviewError``.

    Without goals only the coach review runs.  With goals the coach and
    goal-alignment reviews run concurrently, each failing independently.
    """
    settings = client.settings
    n = week.week_number
    digest = build_week_digest(week)

    if program.goals:
        coach_text, goal_text = await asyncio.gather(
            _ask_or_empty(
                client,
                coach_prompt(program, week, digest),
                settings.coach_max_tokens,
                f"Coach review week {n}",
            ),
            _ask_or_empty(
                client,
                goal_prompt(program, week, digest),
                settings.goal_max_tokens,
                f"Goal alignment review week {n}",
            ),
        )
        text = "\n\n".join(t for t in (coach_text, goal_text) if t)
    else:
        text = await _ask_or_empty(
            client, coach_prompt(program, week, digest), settings.coach_max_tokens, f"Coach review week {n}"
        )

    text = text.strip()
    if not text:
        logger.info("Using fallback review for week %d", n)
        return fallback_text(n)
    return text


async def review_program(
    program: Program,
    client: CompletionClient,
    sleep: Sleep = asyncio.sleep,
) -> dict[int, str]:
    """
    Review every week of a program.

    Weeks run in batches (two by default) with a pause between batches.
    The program is never modified.

    Returns:
        {week_number: review text}, one entry per week
    """
    settings = client.settings
    batch_size = max(1, settings.weeks_per_batch)
    reviews: dict[int, str] = {}
    weeks = list(program.weeks)

    for start in range(0, len(weeks), batch_size):
        if start > 0:
            await sleep(settings.batch_delay_seconds)
        batch = weeks[start : start + batch_size]
        texts = await asyncio.gather(*(review_week(program, w, client) for w in batch))
        for week, text in zip(batch, texts):
            reviews[week.week_number] = text
        logger.debug("Reviewed weeks %s", [w.week_number for w in batch])

    return reviews


async def attach_reviews(
    program: Program,
    client: CompletionClient,
    sleep: Sleep = asyncio.sleep,
) -> Program:
    """Return a copy of ``program`` carrying the per-week review map."""
    reviews = await review_program(program, client, sleep=sleep)
    return replace(program, coach_review=reviews or None)
