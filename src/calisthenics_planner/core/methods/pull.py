"""
Pull-day method generators.

Muscle-ups, when present, are always the first line of a block.
Beginners never see muscle-ups; their vertical pulls are paired with
Australian pull-ups scaled by ``assisted_reps``.
"""

import math

from ..config import REST_UNTIL_CLEAN
from ..models import Exercise
from ..prescriptions import (
    assisted_ladder,
    assisted_reps,
    descending_sequence,
    endurance_reps,
    interval_reps,
    rest_for,
    smart_reps,
)
from ..safety import cap_interval_reps, cap_per_set, round_half_up
from .base import DayArchetype, Method
from .context import DayContext, hold, per_interval, per_set, total
from .registry import generator

PULL = DayArchetype.PULL
AUSTRALIAN = "Australian pull-ups"


def _capped_fraction(max_reps: int, intensity: float, ceiling_fraction: float) -> int:
    """smart_reps bounded by a fraction of max, then re-capped per set."""
    return cap_per_set(min(smart_reps(max_reps, intensity), math.floor(max_reps * ceiling_fraction)), max_reps)


def _movements(ctx: DayContext) -> tuple[str, ...]:
    names = []
    if ctx.muscle_ups > 0:
        names.append("muscle-up")
    names.append("pull-up")
    if ctx.pairs_assisted:
        names.append("australian-pull-up")
    return tuple(names)


def warmup(ctx: DayContext) -> Exercise:
    last = "Australian pull-up practice" if ctx.is_beginner else "Muscle-up practice (if applicable)"
    return Exercise(
        name="Warm-up (5-7 min)",
        sets=f"Tempo pull-ups x10-15\nArm circles, shoulder mobility\nHang holds: 3x15s\n{last}",
        rest="No rest needed",
        kind="warmup",
    )


@generator(PULL, Method.SPLIT_VOLUME)
def split_volume(ctx: DayContext) -> tuple[Exercise, ...]:
    pull_max = ctx.max("pull_ups")
    pct = ctx.pull_percentage
    label, tag = ctx.movement_label("pull_ups")

    top = _capped_fraction(pull_max, 0.75 * pct, 0.55)
    mid = cap_per_set(min(smart_reps(pull_max, 0.60 * pct), top - 1), pull_max)
    low = cap_per_set(min(smart_reps(pull_max, 0.50 * pct), mid - 1), pull_max)

    blocks = []
    prescriptions = []
    if ctx.muscle_ups > 0:
        mu = min(3, interval_reps(ctx.muscle_ups))
        blocks.append(f"Muscle-ups (first – skill protected):\n4 sets × {mu}")
        prescriptions.append(per_set("muscle_ups", mu))
    blocks.append(f"{label}:\n4 sets × {top}\n5 sets × {mid}\n6 sets × {low}")
    prescriptions += [per_set(tag, top), per_set(tag, mid), per_set(tag, low)]
    if ctx.pairs_assisted:
        aus = [assisted_reps(r, ctx.week) for r in (top, mid, low)]
        blocks.append(f"{AUSTRALIAN}:\n4 sets × {aus[0]}\n5 sets × {aus[1]}\n6 sets × {aus[2]}")
        prescriptions += [per_set(None, r) for r in aus]

    return (
        Exercise(
            name="Separated Volume",
            sets="\n\n".join(blocks),
            rest=rest_for(ctx.week, "strength", ctx.rest_bias),
            note="Complete all sets before moving to next.",
            method=Method.SPLIT_VOLUME,
            kind="main",
            duration="15 sets total",
            movements=_movements(ctx),
            prescriptions=tuple(prescriptions),
        ),
    )


def _interval_pull_reps(ctx: DayContext) -> tuple[int, int]:
    pull_max = ctx.max("pull_ups")
    first = min(endurance_reps(pull_max, ctx.week, ctx.level), interval_reps(pull_max))
    if ctx.limits.cap_interval_intensity:
        first = cap_interval_reps(first * 0.85, pull_max)
    second = cap_interval_reps(max(2, first - 1), pull_max)
    return first, second


@generator(PULL, Method.INTERVAL_BLOCK)
def interval_block(ctx: DayContext) -> tuple[Exercise, ...]:
    bw = ctx.block_week
    durations = (5, 6) if bw <= 2 else (8, 10) if bw <= 4 else (8, 8)
    label, tag = ctx.movement_label("pull_ups")
    first, second = _interval_pull_reps(ctx)
    prescriptions = []

    mu = min(2, interval_reps(ctx.muscle_ups)) if ctx.muscle_ups > 0 and bw >= 3 else 0
    if mu:
        lines = [f"EMOM {durations[0]} min: {mu} muscle-up, then {first} {label.lower()}"]
        prescriptions.append(per_interval("muscle_ups", mu))
    else:
        lines = [f"EMOM {durations[0]} min: {first} {label.lower()}"]
    lines.append(f"EMOM {durations[1]} min: {second} {label.lower()}")
    prescriptions += [per_interval(tag, first), per_interval(tag, second)]
    if ctx.pairs_assisted:
        aus = min(assisted_reps(first, ctx.week), 12)
        lines.append(f"{AUSTRALIAN}: {aus} reps per min (same time)")
        prescriptions.append(per_interval(None, aus))

    note = "Endurance pacing: reps at start of each minute. Rest remainder."
    if mu:
        note += " Muscle-up first block only – skill protected."
    return (
        Exercise(
            name="EMOM Block",
            sets="\n".join(lines),
            rest=rest_for(ctx.week, "endurance", ctx.rest_bias),
            note=note,
            method=Method.INTERVAL_BLOCK,
            kind="main",
            duration=f"{sum(durations)} min total",
            movements=_movements(ctx) if mu or ctx.is_beginner else ("pull-up",),
            prescriptions=tuple(prescriptions),
        ),
    )


@generator(PULL, Method.DESCENDING_LADDER)
def descending_ladder(ctx: DayContext) -> tuple[Exercise, ...]:
    pull_max = ctx.max("pull_ups")
    label, tag = ctx.movement_label("pull_ups")
    lines = []
    prescriptions = []

    if ctx.pairs_assisted:
        start = smart_reps(pull_max, ctx.pull_percentage)
        rounds = max(1, min(8, math.ceil(start / 2)))
        sequence = descending_sequence(start, 2, rounds)
        for reps, aus in zip(sequence, assisted_ladder(sequence, ctx.week)):
            lines.append(f"{reps} {label.lower()}\n{aus} {AUSTRALIAN}")
            prescriptions += [per_set(tag, reps), per_set(None, aus)]
        name = "Degressive Pull + Australian Pull-Ups"
        note = "Australian pull-ups at 1.8x–2.2x pull-up reps by week."
    else:
        start = cap_per_set(
            max(4, min(smart_reps(pull_max, 0.65), math.floor(pull_max * 0.5))), pull_max
        )
        rounds = min(6, max(4, math.ceil(start / 2)))
        for i, reps in enumerate(descending_sequence(start, 2, rounds)):
            if ctx.muscle_ups > 0 and i < 2:
                lines.append(f"1 muscle-up + {reps} pull-ups")
                prescriptions.append(per_set("muscle_ups", 1))
            else:
                lines.append(f"{reps} pull-ups")
            prescriptions.append(per_set(tag, reps))
        name = "Degressive Pull + Muscle-Up" if ctx.muscle_ups > 0 else "Degressive Pull"
        note = "Decrease pull-ups by 2 each round."
        if ctx.muscle_ups > 0:
            note += " Muscle-up first in the opening two rounds."

    return (
        Exercise(
            name=name,
            sets="\n".join(lines),
            rest=REST_UNTIL_CLEAN,
            note=note,
            method=Method.DESCENDING_LADDER,
            kind="main",
            duration=f"{len(lines)} rounds",
            movements=_movements(ctx),
            prescriptions=tuple(prescriptions),
        ),
    )


@generator(PULL, Method.PYRAMID)
def pyramid(ctx: DayContext) -> tuple[Exercise, ...]:
    pull_max = ctx.max("pull_ups")
    label, tag = ctx.movement_label("pull_ups")
    top = _capped_fraction(pull_max, 0.65 * ctx.pull_percentage, 0.55)
    blocks = []
    prescriptions = []
    if ctx.muscle_ups > 0:
        top_mu = min(3, interval_reps(ctx.muscle_ups))
        blocks.append(f"Muscle-ups: 1 → {top_mu} → 1 (skill – low volume)")
        prescriptions.append(per_set("muscle_ups", top_mu))
    blocks.append(f"{label}: 1 → {top} → 1\nIncrease by 2-3 reps per step")
    prescriptions.append(per_set(tag, top))
    if ctx.pairs_assisted:
        aus = assisted_reps(top, ctx.week)
        blocks.append(f"{AUSTRALIAN}: 1 → {aus} → 1")
        prescriptions.append(per_set(None, aus))
    return (
        Exercise(
            name="Pyramids",
            sets="\n\n".join(blocks),
            rest=rest_for(ctx.week, "strength", ctx.rest_bias),
            note="Start at 1, work up to top, come back down to 1.",
            method=Method.PYRAMID,
            kind="main",
            duration="Variable",
            movements=_movements(ctx),
            prescriptions=tuple(prescriptions),
        ),
    )


@generator(PULL, Method.SUPERSET)
def superset(ctx: DayContext) -> tuple[Exercise, ...]:
    pull_max = ctx.max("pull_ups")
    label, tag = ctx.movement_label("pull_ups")
    pull = cap_per_set(max(8, smart_reps(pull_max, 0.5)), pull_max)
    chin = cap_per_set(max(8, smart_reps(pull_max, 0.6)), pull_max)
    if ctx.pairs_assisted:
        aus = assisted_reps(pull, ctx.week)
    else:
        aus = max(15, smart_reps(pull_max, 1.2))
    lines = []
    prescriptions = []
    if ctx.muscle_ups > 0:
        mu = min(3, interval_reps(ctx.muscle_ups))
        lines.append(f"{mu} muscle-ups (first – skill protected)")
        prescriptions.append(per_set("muscle_ups", mu))
    lines += [f"{pull} {label.lower()}", f"{chin} chin-ups", f"{aus} {AUSTRALIAN}", "× 4 rounds"]
    prescriptions += [per_set(tag, pull), per_set(tag, chin), per_set(None, aus)]
    return (
        Exercise(
            name="Superset Pull",
            sets="\n".join(lines),
            rest=rest_for(ctx.week, "strength", ctx.rest_bias),
            note="Complete all exercises in order without stopping.",
            method=Method.SUPERSET,
            kind="main",
            duration="4 rounds",
            movements=(("muscle-up",) if ctx.muscle_ups > 0 else ()) + ("pull-up", "chin-up", "australian-pull-up"),
            prescriptions=tuple(prescriptions),
        ),
    )


@generator(PULL, Method.CLUSTER_SETS)
def cluster_sets(ctx: DayContext) -> tuple[Exercise, ...]:
    # No muscle-ups: clusters are too fatiguing for skill work
    pull_max = ctx.max("pull_ups")
    label, tag = ctx.movement_label("pull_ups")
    volume = max(1, pull_max)
    mini = cap_per_set(min(round_half_up(pull_max * 0.30), interval_reps(pull_max) + 2), pull_max)
    lines = [
        f"Total {volume} {label.lower()} in mini-sets of {mini} reps",
        "10-15s rest between mini-sets",
    ]
    prescriptions = [total(tag, volume), per_set(tag, mini)]
    if ctx.pairs_assisted:
        aus_total = max(1, round_half_up(volume * 1.2))
        aus_mini = max(1, min(8, round_half_up(mini * 1.2)))
        lines.append(f"{AUSTRALIAN}: {aus_total} total in mini-sets of {aus_mini}")
        prescriptions += [total(None, aus_total), per_set(None, aus_mini)]
    return (
        Exercise(
            name="Cluster Sets",
            sets="\n".join(lines),
            rest="10-15s between mini-sets. Allow movement quality.",
            note="Build volume without lactic failure. Muscle-ups excluded – clusters are too fatiguing for skill work.",
            method=Method.CLUSTER_SETS,
            kind="main",
            duration=f"{math.ceil(volume / mini)} mini-sets",
            movements=("pull-up", "australian-pull-up") if ctx.pairs_assisted else ("pull-up",),
            prescriptions=tuple(prescriptions),
        ),
    )


@generator(PULL, Method.TIMED_CHALLENGE)
def timed_challenge(ctx: DayContext) -> tuple[Exercise, ...]:
    pull_max = ctx.max("pull_ups")
    label, tag = ctx.movement_label("pull_ups")
    target = max(1, min(80, round_half_up(pull_max * 1.2)))
    lines = [f"{target} {label.lower()}"]
    prescriptions = [total(tag, target)]
    if ctx.pairs_assisted:
        aus = assisted_reps(target, ctx.week)
        lines.append(f"{aus} {AUSTRALIAN}")
        prescriptions.append(total(None, aus))
    lines.append("For time (partition as needed)")
    return (
        Exercise(
            name="Timed Challenge",
            sets="\n".join(lines),
            rest=REST_UNTIL_CLEAN,
            note="Complete all reps as quickly as possible with good form.",
            method=Method.TIMED_CHALLENGE,
            kind="main",
            duration="For time",
            movements=("pull-up", "australian-pull-up") if ctx.pairs_assisted else ("pull-up",),
            prescriptions=tuple(prescriptions),
        ),
    )


ISOMETRIC_HOLDS = {
    "beginner": (5, 7, 10),
    "intermediate": (7, 10, 12),
    "advanced": (10, 12, 15),
}


@generator(PULL, Method.ISOMETRIC_LADDER)
def isometric_ladder(ctx: DayContext) -> tuple[Exercise, ...]:
    pull_max = ctx.max("pull_ups")
    label, tag = ctx.movement_label("pull_ups")
    top, middle, hang = ISOMETRIC_HOLDS[ctx.level]
    reps = cap_per_set(max(4, min(smart_reps(pull_max, 0.30), interval_reps(pull_max))), pull_max)
    return (
        Exercise(
            name="Isometric Ladder",
            sets=(
                f"Hold at top {top}s → Hold in middle {middle}s → Dead hang {hang}s → "
                f"{reps} {label.lower()}\n× 3 rounds"
            ),
            rest=REST_UNTIL_CLEAN,
            note="Do not let go of the bar until all reps are complete.",
            method=Method.ISOMETRIC_LADDER,
            kind="main",
            duration="3 rounds",
            movements=("isometric-hold", "pull-up"),
            prescriptions=(hold(top), hold(middle), hold(hang), per_set(tag, reps)),
        ),
    )


def finisher(ctx: DayContext, allow_high_fatigue: bool) -> Exercise:
    """
    Closing block of the pull day.

    Beginners get high-rep Australian pull-ups.  Others get the isometric
    hold + pull-up finisher, or scapular work when the session has no
    high-fatigue budget left.
    """
    pull_max = ctx.max("pull_ups")
    if ctx.is_beginner:
        base = max(12, min(25, smart_reps(pull_max, 0.8 * ctx.pull_percentage)))
        aus = assisted_reps(base, ctx.week)
        return Exercise(
            name="Finisher: Australian Pull-Up",
            sets=f"10 sets × {aus} reps",
            rest="30s between sets",
            note="Horizontal pull-ups. Keep body straight.",
            kind="finisher",
            movements=("australian-pull-up",),
            prescriptions=(per_set(None, aus),),
        )
    if not allow_high_fatigue:
        return Exercise(
            name="Finisher: Scapular Pulls + Dead Hang",
            sets="3 sets × 8 scapular pulls\nDead hang 20s after each set",
            rest="60s between sets",
            note="Low fatigue. Shoulder health and grip.",
            kind="finisher",
            movements=("scapular-pull", "dead-hang"),
            prescriptions=(per_set(None, 8), hold(20)),
        )
    reps = cap_per_set(smart_reps(pull_max, 0.30), pull_max)
    return Exercise(
        name="Finisher: Isometric Hold + Pull-Ups",
        sets=f"Hold at top 10s → Hold in middle 10s → Dead hang 10s → {reps} pull-ups\n× 3 rounds",
        rest=REST_UNTIL_CLEAN,
        note="Do not let go until the pull-ups are complete.",
        method=Method.ISOMETRIC_LADDER,
        kind="finisher",
        movements=("isometric-hold", "pull-up"),
        prescriptions=(hold(10), hold(10), hold(10), per_set("pull_ups", reps)),
    )
