"""
Legs/core/cardio and endurance-integration generators.

The legs day carries fixed accessory work (cardio, squats, core) built by
``legs_accessories``; its scheduled method is the closing conditioning
block.  The endurance day has a single main set followed by a cool-down.
"""

from ..config import REST_UNTIL_CLEAN
from ..models import Exercise
from ..prescriptions import (
    assisted_ladder,
    assisted_reps,
    endurance_reps,
    interval_reps,
    max_rounds_minutes,
    smart_reps,
)
from ..safety import cap_interval_reps, cap_per_set, round_half_up
from .base import DayArchetype, Method
from .context import DayContext, hold, per_interval, per_set, total
from .registry import generator

LEGS = DayArchetype.LEGS_CORE_CARDIO
ENDURANCE = DayArchetype.ENDURANCE
AUSTRALIAN = "Australian pull-ups"

BEGINNER_CARDIO_MINUTES = (10, 12, 15, 18, 15, 10)
CHIPPER_MULTIPLIERS = (2.0, 2.2, 2.4, 2.6, 2.2, 1.8)

COOLDOWNS = (
    "3–5 min easy movement (walk, light stretch).",
    "3–5 min easy walk, then hip and shoulder stretches.",
    "3–5 min light mobility: cat-cow, hip circles, dead hang.",
)


# =============================================================================
# LEGS + CORE + CARDIO
# =============================================================================


def legs_warmup(ctx: DayContext) -> Exercise:
    return Exercise(
        name="Warm-up (5-7 min)",
        sets="Jump rope or easy jogging 3-5 min\nLeg swings\nTempo squats x15-20\nHip circles",
        rest="No rest needed",
        kind="warmup",
    )


def _cardio_minutes(ctx: DayContext) -> int:
    bw = ctx.block_week
    if ctx.is_beginner:
        base = BEGINNER_CARDIO_MINUTES[bw - 1]
    else:
        base = 15 if bw <= 2 else 25 if bw <= 4 else 18
    if ctx.limits.cap_cardio_volume:
        return min(18, base)
    if ctx.cardio_bias or ctx.cardio.add_element:
        return min(30, base + 5 + ctx.cardio.extra_minutes)
    return base


def legs_accessories(ctx: DayContext) -> list[Exercise]:
    """Cardio, squats, plyometrics, burpees and core work for day 3."""
    bw = ctx.block_week
    shorter = ctx.weights["lose_weight"] > 0
    rest_short = "45s between sets" if shorter else "60s between sets"
    exercises = []

    minutes = _cardio_minutes(ctx)
    jump_rope = ctx.cardio.favor_jump_rope or ctx.cardio_bias or bw % 2 == 1
    exercises.append(
        Exercise(
            name="Cardio: Jump Rope" if jump_rope else "Cardio: Running",
            sets=f"Jump rope {minutes} minutes" if jump_rope else f"Run {minutes} minutes steady",
            rest="1-2 min" if shorter else "2-3 min",
            note="Steady pace.",
            kind="main",
            duration=f"{minutes} min",
            movements=("jump-rope" if jump_rope else "running",),
        )
    )
    if ctx.cardio.add_element and not ctx.limits.cap_cardio_volume:
        exercises.append(
            Exercise(
                name="Step-ups or Low-impact circuit",
                sets="2–3 min continuous step-ups or light circuit (squats, step-ups, march in place)",
                rest="1 min",
                note="Movement density. Low impact if needed.",
                kind="main",
                movements=("step-up",),
            )
        )

    squats_max = ctx.max("squats")
    squat_label, squat_tag = ctx.movement_label("squats")
    squat_reps = smart_reps(squats_max, ctx.volume * 1.25)
    exercises.append(
        Exercise(
            name=squat_label,
            sets=f"{squat_reps} reps × 4 sets",
            rest=rest_short,
            note="Full range. Control speed.",
            kind="main",
            movements=("squat",),
            prescriptions=(per_set(squat_tag, squat_reps),),
        )
    )

    jump_reps = cap_per_set(max(10, smart_reps(squats_max, 0.4)), squats_max)
    exercises.append(
        Exercise(
            name="Jump Squats",
            sets=f"{jump_reps} reps × {3 if bw <= 2 else 4} sets",
            rest=rest_short,
            note="Explosive. Land softly.",
            kind="main",
            movements=("jump-squat",),
            prescriptions=(per_set("squats", jump_reps),),
        )
    )

    burpees_max = ctx.max("burpees")
    burpee_label, burpee_tag = ctx.movement_label("burpees")
    burpee_reps = cap_per_set(max(8, smart_reps(burpees_max, ctx.volume * 0.9)), burpees_max)
    burpee_sets = 4 if bw in (1, 5, 6) else 5
    exercises.append(
        Exercise(
            name=burpee_label,
            sets=f"{burpee_reps} reps × {burpee_sets} sets",
            rest="45-60s between sets" if shorter else "60-90s between sets",
            note="Full burpee.",
            kind="main",
            movements=("burpee",),
            prescriptions=(per_set(burpee_tag, burpee_reps),),
        )
    )

    legs_max = ctx.max("leg_raises")
    leg_label, leg_tag = ctx.movement_label("leg_raises")
    leg_reps = cap_per_set(max(5, smart_reps(legs_max, ctx.volume * 1.1)), legs_max)
    exercises.append(
        Exercise(
            name=leg_label,
            sets=f"{leg_reps} reps × {4 if bw <= 2 else 5} sets",
            rest=rest_short,
            note="Control descent.",
            kind="main",
            movements=("leg-raise",),
            prescriptions=(per_set(leg_tag, leg_reps),),
        )
    )

    seconds = 60 if bw <= 2 else 90 if bw <= 4 else 60
    exercises.append(
        Exercise(
            name="Plank Hold",
            sets=f"{seconds} seconds × {3 if bw <= 2 else 4} sets",
            rest=rest_short,
            note="Body straight. Hold position without movement.",
            kind="main",
            movements=("plank",),
            prescriptions=(hold(seconds),),
        )
    )
    return exercises


def _legs_round(ctx: DayContext, extra: tuple[int, int, int]) -> list[tuple[str, str | None, int]]:
    """(label, tag, reps) for squats, burpees and leg raises in one conditioning round."""
    rows = []
    for movement, bonus in zip(("squats", "burpees", "leg_raises"), extra):
        max_reps = ctx.max(movement)
        label, tag = ctx.movement_label(movement)
        reps = cap_per_set(
            min(endurance_reps(max_reps, ctx.week, ctx.level), interval_reps(max_reps) + bonus),
            max_reps,
        )
        rows.append((label, tag, reps))
    return rows


@generator(LEGS, Method.MAX_ROUNDS)
def max_rounds(ctx: DayContext) -> tuple[Exercise, ...]:
    minutes = max_rounds_minutes(ctx.week, ctx.cardio_bias)
    rows = _legs_round(ctx, (3, 2, 2))
    lines = [f"AMRAP {minutes} min:"]
    lines += [f"{reps} {label.lower()}" for label, _, reps in rows]
    lines.append("× as many rounds as possible")
    return (
        Exercise(
            name="Finisher: AMRAP",
            sets="\n".join(lines),
            rest="Rest between rounds to maintain movement quality.",
            note="Prioritize clean reps over speed. Each round unbroken.",
            method=Method.MAX_ROUNDS,
            kind="finisher",
            duration=f"{minutes} min",
            movements=("squat", "burpee", "leg-raise"),
            prescriptions=tuple(per_set(tag, reps) for _, tag, reps in rows),
        ),
    )


@generator(LEGS, Method.INTERVAL_BLOCK)
def legs_interval_block(ctx: DayContext) -> tuple[Exercise, ...]:
    minutes = 8 if ctx.block_week <= 2 else 10
    squats_max, burpees_max = ctx.max("squats"), ctx.max("burpees")
    squat_label, squat_tag = ctx.movement_label("squats")
    burpee_label, burpee_tag = ctx.movement_label("burpees")
    squats = interval_reps(squats_max)
    burpees = interval_reps(burpees_max)
    if ctx.limits.cap_interval_intensity:
        squats = cap_interval_reps(squats * 0.85, squats_max)
        burpees = cap_interval_reps(burpees * 0.85, burpees_max)
    return (
        Exercise(
            name="Finisher: EMOM Legs",
            sets=(
                f"EMOM {minutes} min, alternating:\n"
                f"Odd minutes: {squats} {squat_label.lower()}\n"
                f"Even minutes: {burpees} {burpee_label.lower()}"
            ),
            rest="Rest for remainder of each minute",
            note="Same pace every minute. Stop the block if form breaks.",
            method=Method.INTERVAL_BLOCK,
            kind="finisher",
            duration=f"{minutes} min",
            movements=("squat", "burpee"),
            prescriptions=(per_interval(squat_tag, squats), per_interval(burpee_tag, burpees)),
        ),
    )


# =============================================================================
# ENDURANCE INTEGRATION
# =============================================================================


def endurance_warmup(ctx: DayContext) -> Exercise:
    sets = "Tempo pull-ups x10\nTempo dips x10\nArm circles\nShoulder warm-up"
    if ctx.muscle_ups > 0:
        sets += "\nMuscle-up practice"
    return Exercise(name="Warm-up (5-7 min)", sets=sets, rest="No rest needed", kind="warmup")


def cooldown(ctx: DayContext) -> Exercise:
    return Exercise(
        name="Cool-down",
        sets=COOLDOWNS[(ctx.seed + ctx.week) % len(COOLDOWNS)],
        rest="None",
        note="Allow recovery. No additional fatigue.",
        kind="cooldown",
    )


@generator(ENDURANCE, Method.CHIPPER)
def chipper(ctx: DayContext) -> tuple[Exercise, ...]:
    mult = CHIPPER_MULTIPLIERS[ctx.block_week - 1]
    if ctx.weights["improve_endurance"] > 0:
        mult *= 1.1
    pull_label, pull_tag = ctx.movement_label("pull_ups")
    dip_label, dip_tag = ctx.movement_label("dips")
    push_label, push_tag = ctx.movement_label("push_ups")
    squat_label, squat_tag = ctx.movement_label("squats")

    pull_total = max(20, round_half_up(ctx.max("pull_ups") * mult))
    dip_total = max(20, round_half_up(ctx.max("dips") * mult))
    push_total = max(30, round_half_up(ctx.max("push_ups") * mult))
    squat_total = max(40, round_half_up(ctx.max("squats") * mult * 1.2))

    rows = [(pull_total, pull_label, pull_tag)]
    if ctx.pairs_assisted:
        rows.append((assisted_reps(round_half_up(pull_total / 2), ctx.week) * 2, AUSTRALIAN, None))
    rows += [
        (dip_total, dip_label, dip_tag),
        (push_total, push_label, push_tag),
        (squat_total, squat_label, squat_tag),
    ]
    lines = ["For Time: Complete all reps in any order/partitioning."]
    lines += [f"{reps} {label.lower()}" for reps, label, _ in rows]
    return (
        Exercise(
            name="Main Set: The Chipper",
            sets="\n".join(lines),
            rest=REST_UNTIL_CLEAN + " Partition as needed.",
            note="Complete all reps. Rest between movements if form breaks down.",
            method=Method.CHIPPER,
            kind="main",
            duration="For time",
            movements=("pull-up", "dip", "push-up", "squat"),
            prescriptions=tuple(total(tag, reps) for reps, _, tag in rows),
        ),
    )


@generator(ENDURANCE, Method.TIMED_ROUNDS)
def timed_rounds(ctx: DayContext) -> tuple[Exercise, ...]:
    bw = ctx.block_week
    rounds = 3 if bw <= 2 else 4 if bw <= 4 else 3
    rows = []
    for movement in ("pull_ups", "push_ups", "squats"):
        label, tag = ctx.movement_label(movement)
        reps = endurance_reps(ctx.max(movement), ctx.week, ctx.level)
        rows.append((reps, label, tag))
        if movement == "pull_ups" and ctx.pairs_assisted:
            rows.append((assisted_reps(reps, ctx.week), AUSTRALIAN, None))
    lines = [f"{reps} {label.lower()}" for reps, label, _ in rows]
    lines.append(f"× {rounds} rounds (for time)")
    movements = ("pull-up", "australian-pull-up", "push-up", "squat") if ctx.pairs_assisted else ("pull-up", "push-up", "squat")
    return (
        Exercise(
            name="Main Set: Timed Rounds",
            sets="\n".join(lines),
            rest=REST_UNTIL_CLEAN,
            note="Each round unbroken. Rest between rounds until you can perform clean reps.",
            method=Method.TIMED_ROUNDS,
            kind="main",
            duration=f"{rounds} rounds",
            movements=movements,
            prescriptions=tuple(per_set(tag, reps) for reps, _, tag in rows),
        ),
    )


def _ladder_rounds(first: int, floor: int, max_reps: int) -> tuple[int, int, int]:
    second = cap_per_set(max(floor, round_half_up(first * 0.85)), max_reps)
    third = cap_per_set(max(floor, round_half_up(first * 0.70)), max_reps)
    return first, min(first, second), min(first, second, third)


@generator(ENDURANCE, Method.DESCENDING_LADDER)
def endurance_ladder(ctx: DayContext) -> tuple[Exercise, ...]:
    ladders = []
    for movement, floor in (("pull_ups", 2), ("dips", 2), ("push_ups", 3)):
        max_reps = ctx.max(movement)
        label, tag = ctx.movement_label(movement)
        first = endurance_reps(max_reps, ctx.week, ctx.level)
        ladders.append((label, tag, _ladder_rounds(first, floor, max_reps)))

    aus_column = assisted_ladder(list(ladders[0][2]), ctx.week)
    lines = []
    prescriptions = []
    for i in range(3):
        parts = []
        for j, (label, tag, reps) in enumerate(ladders):
            parts.append(f"{reps[i]} {label.lower()}")
            prescriptions.append(per_set(tag, reps[i]))
            if j == 0 and ctx.pairs_assisted:
                parts.append(f"{aus_column[i]} Australian")
                prescriptions.append(per_set(None, aus_column[i]))
        lines.append(f"Round {i + 1}: " + ", ".join(parts))
    return (
        Exercise(
            name="Main Set: Degressive Ladder",
            sets="\n".join(lines),
            rest=REST_UNTIL_CLEAN,
            note="Decreasing reps each round. Unbroken within each round.",
            method=Method.DESCENDING_LADDER,
            kind="main",
            duration="3 rounds",
            movements=("pull-up", "dip", "push-up"),
            prescriptions=tuple(prescriptions),
        ),
    )
