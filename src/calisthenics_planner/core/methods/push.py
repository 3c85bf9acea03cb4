"""
Push-day method generators.

Dips and push-ups share the day; the muscle-up combination is only
offered to non-beginners who can already perform a muscle-up.
"""

import math

from ..config import REST_UNTIL_CLEAN
from ..models import Exercise
from ..prescriptions import endurance_reps, interval_reps, rest_for, smart_reps
from ..safety import cap_interval_reps, cap_per_set, round_half_up
from .base import DayArchetype, Method
from .context import DayContext, hold, per_interval, per_set, total
from .registry import generator

PUSH = DayArchetype.PUSH


def _capped_fraction(max_reps: int, intensity: float, ceiling_fraction: float) -> int:
    return cap_per_set(min(smart_reps(max_reps, intensity), math.floor(max_reps * ceiling_fraction)), max_reps)


def warmup(ctx: DayContext) -> Exercise:
    return Exercise(
        name="Warm-up (5-7 min)",
        sets="Tempo push-ups x15-20\nShoulder circles and stretches\nArm swings\nTempo dips x10-15",
        rest="No rest needed",
        kind="warmup",
    )


@generator(PUSH, Method.SPLIT_VOLUME)
def split_volume(ctx: DayContext) -> tuple[Exercise, ...]:
    dips_max, push_max = ctx.max("dips"), ctx.max("push_ups")
    dip_label, dip_tag = ctx.movement_label("dips")
    push_label, push_tag = ctx.movement_label("push_ups")
    dips = _capped_fraction(dips_max, 0.75, 0.55)
    push = _capped_fraction(push_max, 0.75, 0.55)
    bar_dips = _capped_fraction(dips_max, 0.70, 0.50)
    return (
        Exercise(
            name="Separated Volume",
            sets=(
                f"5 sets × {dips} {dip_label.lower()}\n"
                f"5 sets × {push} {push_label.lower()}\n"
                f"5 sets × {bar_dips} bar dips"
            ),
            rest=rest_for(ctx.week, "strength", ctx.rest_bias),
            note="Complete all sets for each exercise before moving to next.",
            method=Method.SPLIT_VOLUME,
            kind="main",
            duration="15 sets total",
            movements=("dip", "push-up", "bar-dip"),
            prescriptions=(per_set(dip_tag, dips), per_set(push_tag, push), per_set(dip_tag, bar_dips)),
        ),
    )


@generator(PUSH, Method.INTERVAL_BLOCK)
def interval_block(ctx: DayContext) -> tuple[Exercise, ...]:
    bw = ctx.block_week
    durations = (6, 6) if bw <= 2 else (8, 8) if bw <= 4 else (6, 6)
    dips_max, push_max = ctx.max("dips"), ctx.max("push_ups")
    dip_label, dip_tag = ctx.movement_label("dips")
    push_label, push_tag = ctx.movement_label("push_ups")

    dip1 = min(endurance_reps(dips_max, ctx.week, ctx.level), interval_reps(dips_max))
    push1 = min(endurance_reps(push_max, ctx.week, ctx.level), interval_reps(push_max))
    if ctx.limits.cap_interval_intensity:
        dip1 = cap_interval_reps(dip1 * 0.85, dips_max)
        push1 = cap_interval_reps(push1 * 0.85, push_max)
    dip2 = cap_interval_reps(max(2, dip1 - 1), dips_max)
    push2 = cap_interval_reps(max(3, push1 - 2), push_max)

    return (
        Exercise(
            name="EMOM Blocks",
            sets=(
                f"EMOM {durations[0]} min: {dip1} {dip_label.lower()}\n"
                f"EMOM {durations[1]} min: {dip2} {dip_label.lower()}\n"
                f"EMOM {durations[0]} min: {push1} {push_label.lower()}\n"
                f"EMOM {durations[1]} min: {push2} {push_label.lower()}"
            ),
            rest=rest_for(ctx.week, "endurance", ctx.rest_bias),
            note="Complete reps at start of each minute.",
            method=Method.INTERVAL_BLOCK,
            kind="main",
            duration=f"{sum(durations)} min total",
            movements=("dip", "push-up"),
            prescriptions=(
                per_interval(dip_tag, dip1),
                per_interval(dip_tag, dip2),
                per_interval(push_tag, push1),
                per_interval(push_tag, push2),
            ),
        ),
    )


@generator(PUSH, Method.DENSITY_CIRCUIT)
def density_circuit(ctx: DayContext) -> tuple[Exercise, ...]:
    dips_max, push_max = ctx.max("dips"), ctx.max("push_ups")
    dip_label, dip_tag = ctx.movement_label("dips")
    push_label, push_tag = ctx.movement_label("push_ups")
    dips = min(smart_reps(dips_max, 0.35), interval_reps(dips_max))
    push = min(smart_reps(push_max, 0.35), interval_reps(push_max))
    bar_dips = cap_per_set(dips * 0.8, dips_max)
    return (
        Exercise(
            name="Density Circuit",
            sets=(
                f"{dips} {dip_label.lower()}\n{push} {push_label.lower()}\n"
                f"{bar_dips} bar dips\n× 5 rounds"
            ),
            rest=REST_UNTIL_CLEAN,
            note="Complete each round without stopping.",
            method=Method.DENSITY_CIRCUIT,
            kind="main",
            duration="5 rounds",
            movements=("dip", "push-up", "bar-dip"),
            prescriptions=(per_set(dip_tag, dips), per_set(push_tag, push), per_set(dip_tag, bar_dips)),
        ),
    )


@generator(PUSH, Method.PYRAMID)
def pyramid(ctx: DayContext) -> tuple[Exercise, ...]:
    dips_max, push_max = ctx.max("dips"), ctx.max("push_ups")
    dip_label, dip_tag = ctx.movement_label("dips")
    push_label, push_tag = ctx.movement_label("push_ups")
    top_dips = smart_reps(dips_max, 0.70)
    top_push = smart_reps(push_max, 0.70)
    return (
        Exercise(
            name="Pyramids",
            sets=(
                f"{dip_label}: 1 → {top_dips} → 1 (increase by 3 per step)\n"
                f"{push_label}: 1 → {top_push} → 1 (increase by 3 per step)"
            ),
            rest="30s between sets",
            note="Work up to top, come back down to 1.",
            method=Method.PYRAMID,
            kind="main",
            duration="Variable",
            movements=("dip", "push-up"),
            prescriptions=(per_set(dip_tag, top_dips), per_set(push_tag, top_push)),
        ),
    )


@generator(PUSH, Method.CLUSTER_SETS)
def cluster_sets(ctx: DayContext) -> tuple[Exercise, ...]:
    dips_max, push_max = ctx.max("dips"), ctx.max("push_ups")
    dip_label, dip_tag = ctx.movement_label("dips")
    push_label, push_tag = ctx.movement_label("push_ups")
    mini_dips = cap_per_set(min(interval_reps(dips_max) + 1, round_half_up(dips_max * 0.30)), dips_max)
    mini_push = cap_per_set(min(interval_reps(push_max) + 2, round_half_up(push_max * 0.30)), push_max)
    total_dips = max(mini_dips * 4, dips_max)
    total_push = max(mini_push * 4, push_max)
    return (
        Exercise(
            name="Cluster Sets Push",
            sets=(
                f"{dip_label}: {total_dips} total in mini-sets of {mini_dips} (10-15s rest)\n"
                f"{push_label}: {total_push} total in mini-sets of {mini_push} (10-15s rest)"
            ),
            rest="10-15s between mini-sets. Allow movement quality.",
            note="Build volume without lactic failure.",
            method=Method.CLUSTER_SETS,
            kind="main",
            duration="Multiple mini-sets",
            movements=("dip", "push-up"),
            prescriptions=(
                total(dip_tag, total_dips),
                per_set(dip_tag, mini_dips),
                total(push_tag, total_push),
                per_set(push_tag, mini_push),
            ),
        ),
    )


@generator(PUSH, Method.NO_STOP_SETS)
def no_stop_sets(ctx: DayContext) -> tuple[Exercise, ...]:
    dips_max, push_max = ctx.max("dips"), ctx.max("push_ups")
    dip_label, dip_tag = ctx.movement_label("dips")
    push_label, push_tag = ctx.movement_label("push_ups")
    dips = cap_per_set(min(smart_reps(dips_max, 0.40), interval_reps(dips_max) + 2), dips_max)
    push = cap_per_set(min(smart_reps(push_max, 0.40), interval_reps(push_max) + 3), push_max)
    return (
        Exercise(
            name="No-Stop Sets",
            sets=f"{dips} {dip_label.lower()} + {push} {push_label.lower()} (no rest between)\n× 4 rounds",
            rest=REST_UNTIL_CLEAN,
            note="Dips then push-ups without stopping.",
            method=Method.NO_STOP_SETS,
            kind="main",
            duration="4 rounds",
            movements=("dip", "push-up"),
            prescriptions=(per_set(dip_tag, dips), per_set(push_tag, push)),
        ),
    )


@generator(PUSH, Method.INTERVAL_SKILL_COMBO)
def interval_skill_combo(ctx: DayContext) -> tuple[Exercise, ...]:
    if ctx.muscle_ups < 1:
        # Scheduler swaps this for a plain interval block; never emit muscle-ups here
        return interval_block(ctx)
    dips_max = ctx.max("dips")
    bar_dips = min(interval_reps(dips_max), 8)
    return (
        Exercise(
            name="EMOM Muscle-Up Combo",
            sets=f"EMOM 8 min:\n1 muscle-up (skill – performed first each min)\n{bar_dips} bar dips",
            rest="Rest for remainder of each minute. 2–4 min between blocks.",
            note="1 muscle-up + bar dips at start of each minute.",
            method=Method.INTERVAL_SKILL_COMBO,
            kind="main",
            duration="8 min",
            movements=("muscle-up", "bar-dip"),
            prescriptions=(per_interval("muscle_ups", 1), per_interval("dips", bar_dips)),
        ),
    )


def finisher(ctx: DayContext, allow_high_fatigue: bool) -> Exercise:
    """Isometric push finisher; a plain hold when no high-fatigue budget is left."""
    push_max = ctx.max("push_ups")
    push_label, push_tag = ctx.movement_label("push_ups")
    if not allow_high_fatigue:
        return Exercise(
            name="Finisher: Push-Up Hold",
            sets="3 sets × 20s hold at 90°",
            rest="60s between sets",
            note="Low fatigue. Body straight, elbows tucked.",
            kind="finisher",
            movements=("isometric-hold",),
            prescriptions=(hold(20),),
        )
    reps = cap_interval_reps(smart_reps(push_max, 0.10), push_max)
    return Exercise(
        name="Finisher: Isometric Push Hold",
        sets=f"EMOM 10 min:\n10s 90° push-up hold\n{reps} {push_label.lower()}",
        rest="Rest for remainder of each minute",
        note="Hold at 90° then push-ups. Repeat every minute.",
        method=Method.INTERVAL_BLOCK,
        kind="finisher",
        movements=("isometric-hold", "push-up"),
        prescriptions=(hold(10), per_interval(push_tag, reps)),
    )
