"""
Strength-day generators, the max-capability retest and skill work.
"""

from ..goals import SkillDaySettings
from ..models import Exercise
from ..prescriptions import rest_for, smart_reps
from .base import DayArchetype, Method
from .context import DayContext, per_set
from .registry import generator

STRENGTH = DayArchetype.STRENGTH

# Added load for weighted weeks (block weeks 2-5), kg
WEIGHTED_LOAD_KG = {2: 5, 3: 8, 4: 12, 5: 12}
RETEST_REST = "5 min before next exercise"


def strength_warmup(ctx: DayContext) -> Exercise:
    return Exercise(
        name="Warm-up (5-7 min)",
        sets="General warm-up\nMobility\nLight sets of first exercise",
        rest="No rest needed",
        kind="warmup",
    )


def retest_warmup(ctx: DayContext) -> Exercise:
    return Exercise(
        name="Warm-up (5-7 min)",
        sets="Light movement\nPractice each exercise with 2-3 reps",
        rest="No rest needed",
        kind="warmup",
    )


def skill_block(settings: SkillDaySettings) -> Exercise:
    """Short, fresh skill attempts placed right after the warm-up."""
    labels = ", ".join(s.replace("_", " ") for s in settings.unlocked_skills)
    return Exercise(
        name="Skill work (quality focus)",
        sets=f"Short attempts: {labels}.\n3–4 attempts per skill, long rest (2–3 min). Focus on technique.",
        rest="2–3 min between attempts" if settings.long_rest else "90s between attempts",
        note="Low fatigue. Stop when form drops. Placed at session start.",
        kind="skill",
        movements=tuple(settings.unlocked_skills),
    )


def weighted_load(ctx: DayContext) -> int:
    """Added kg for this week, 0 when the day stays bodyweight."""
    if ctx.weights["build_muscle"] <= 0 or ctx.limits.limit_weighted_work:
        return 0
    return WEIGHTED_LOAD_KG.get(ctx.block_week, 0)


@generator(STRENGTH, Method.STRENGTH_SETS)
def strength_sets(ctx: DayContext) -> tuple[Exercise, ...]:
    rep_range = ctx.rep_range
    pull_fraction = rep_range.midpoint + 0.05
    push_fraction = rep_range.midpoint
    sets = 3 if rep_range.volume_cap is not None else 4
    kg = weighted_load(ctx)
    rest = rest_for(ctx.week, "strength", ctx.rest_bias)

    rows = (
        ("pull_ups", pull_fraction, f"Weighted Pull-ups ({kg} kg)", "Pull-ups (strength focus)", "Controlled, full ROM.", "pull-up"),
        ("dips", pull_fraction, f"Weighted Dips ({kg} kg)", "Dips (strength focus)", "Full depth.", "dip"),
        ("push_ups", push_fraction, None, "Push-ups (decline or weighted)", "Strict form.", "push-up"),
        ("squats", push_fraction, f"Goblet Squats ({kg} kg)", "Pistol progressions or Jump Squats", "Controlled.", "squat"),
    )
    exercises = []
    for movement, fraction, weighted_name, name, note, display in rows:
        label, tag = ctx.movement_label(movement)
        reps = smart_reps(ctx.max(movement), fraction * ctx.volume)
        weighted = kg > 0 and weighted_name is not None
        if tag is None:
            # Regressed beginners train the regression, never loaded
            weighted, name = False, label
        exercises.append(
            Exercise(
                name=weighted_name if weighted else name,
                sets=f"{sets} sets × {reps} reps",
                rest=rest,
                note=("Kettlebell or dumbbell." if movement == "squats" else "Use weight vest or dip belt.")
                if weighted
                else note,
                method=Method.STRENGTH_SETS,
                kind="main",
                movements=(display,),
                prescriptions=(per_set(tag, reps),),
            )
        )
    return tuple(exercises)


@generator(STRENGTH, Method.MAX_TEST)
def max_test(ctx: DayContext) -> tuple[Exercise, ...]:
    rows = [
        ("Pull-ups", "Strict form. Record your result.", "pull-up"),
        ("Dips", "Full range. Record your result.", "dip"),
        ("Push-ups", "Chest to deck. Record your result.", "push-up"),
        ("Squats", "Full depth. Record your result.", "squat"),
    ]
    if ctx.muscle_ups > 0:
        rows.append(("Muscle-ups", "Record your result.", "muscle-up"))
    exercises = []
    for i, (name, note, display) in enumerate(rows):
        exercises.append(
            Exercise(
                name=f"Max Test: {name}",
                sets="1 set – max reps (record number)",
                rest=RETEST_REST if i < len(rows) - 1 else "—",
                note=note,
                method=Method.MAX_TEST,
                kind="main",
                movements=(display,),
            )
        )
    return tuple(exercises)
