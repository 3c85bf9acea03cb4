"""
Method scheduler: fixed weekly schedule tables and day builders.

Each day archetype owns a table of methods indexed by week-in-block, so
variety across a program is guaranteed by construction.  Day builders
wrap the scheduled method with warm-up, skill work, accessories and a
finisher while keeping at most one high-fatigue block per session.
"""

from dataclasses import replace

from .config import (
    CALENDAR_4_SESSIONS,
    CALENDAR_5_SESSIONS,
    CALENDAR_DAYS,
    GOAL_LABELS,
    MAX_HIGH_FATIGUE_PER_SESSION,
)
from .goals import day_weights, dominant_goal_for_day, skill_day_settings
from .methods import conditioning, pull, push, strength
from .methods.base import DAY_ARCHETYPES, DayArchetype, Method
from .methods.context import DayContext
from .methods.registry import GENERATORS, generate
from .models import CapabilityVector, Day, Exercise, ScheduleSlot, Week, WeekSetting
from .safety import count_high_fatigue, is_high_fatigue

PULL = DayArchetype.PULL
PUSH = DayArchetype.PUSH
LEGS = DayArchetype.LEGS_CORE_CARDIO
ENDURANCE = DayArchetype.ENDURANCE
STRENGTH = DayArchetype.STRENGTH

# =============================================================================
# SCHEDULE TABLES: (archetype, block length) → method per week-in-block
# =============================================================================

SCHEDULE_TABLES: dict[tuple[DayArchetype, int], tuple[Method, ...]] = {
    (PULL, 6): (
        Method.SPLIT_VOLUME,
        Method.INTERVAL_BLOCK,
        Method.DESCENDING_LADDER,
        Method.INTERVAL_BLOCK,
        Method.PYRAMID,
        Method.SPLIT_VOLUME,
    ),
    (PUSH, 6): (
        Method.SPLIT_VOLUME,
        Method.INTERVAL_BLOCK,
        Method.DENSITY_CIRCUIT,
        Method.INTERVAL_BLOCK,
        Method.SPLIT_VOLUME,
        Method.INTERVAL_BLOCK,
    ),
    (LEGS, 6): (Method.MAX_ROUNDS,) * 6,
    (ENDURANCE, 6): (
        Method.CHIPPER,
        Method.DESCENDING_LADDER,
        Method.TIMED_ROUNDS,
    ) * 2,
    (STRENGTH, 6): (Method.STRENGTH_SETS,) * 6,
    (PULL, 4): (
        Method.SUPERSET,
        Method.CLUSTER_SETS,
        Method.ISOMETRIC_LADDER,
        Method.TIMED_CHALLENGE,
    ),
    (PUSH, 4): (
        Method.PYRAMID,
        Method.CLUSTER_SETS,
        Method.NO_STOP_SETS,
        Method.INTERVAL_SKILL_COMBO,
    ),
    (LEGS, 4): (
        Method.MAX_ROUNDS,
        Method.INTERVAL_BLOCK,
        Method.MAX_ROUNDS,
        Method.INTERVAL_BLOCK,
    ),
    (ENDURANCE, 4): (
        Method.DESCENDING_LADDER,
        Method.CHIPPER,
        Method.TIMED_ROUNDS,
        Method.CHIPPER,
    ),
}

# Methods that may replace a table entry at runtime
SUBSTITUTIONS: dict[tuple[DayArchetype, Method], Method] = {
    (PUSH, Method.INTERVAL_SKILL_COMBO): Method.INTERVAL_BLOCK,
    (STRENGTH, Method.STRENGTH_SETS): Method.MAX_TEST,
}

DAYS_PER_WEEK: dict[int, int] = {6: 5, 4: 4}


def _check_tables() -> None:
    reachable = {(a, m) for (a, _), row in SCHEDULE_TABLES.items() for m in row}
    reachable |= {(a, m) for (a, _), m in SUBSTITUTIONS.items()}
    missing = sorted(f"{a.value}/{m.value}" for a, m in reachable if (a, m) not in GENERATORS)
    if missing:
        raise RuntimeError(f"Schedule tables reference methods without generators: {', '.join(missing)}")
    for (archetype, length), row in SCHEDULE_TABLES.items():
        if len(row) != length:
            raise RuntimeError(f"Schedule table {archetype.value}/{length} has {len(row)} entries")


_check_tables()


def scheduled_method(archetype: DayArchetype, block_length: int, week_in_block: int) -> Method:
    """Table lookup without runtime substitutions."""
    try:
        row = SCHEDULE_TABLES[(archetype, block_length)]
    except KeyError:
        raise ValueError(f"No {block_length}-week schedule for {archetype.value} days") from None
    return row[week_in_block - 1]


def select_method(archetype: DayArchetype, block_length: int, ctx: DayContext) -> Method:
    """
    Method for one day after substitutions.

    The muscle-up combination falls back to a plain interval block for
    athletes without muscle-ups; the strength slot of the program's final
    week becomes the max-capability retest.
    """
    method = scheduled_method(archetype, block_length, ctx.block_week)
    if method is Method.INTERVAL_SKILL_COMBO and ctx.muscle_ups < 1:
        return Method.INTERVAL_BLOCK
    if archetype is STRENGTH and ctx.final_week:
        return Method.MAX_TEST
    return method


# =============================================================================
# DAY BUILDERS
# =============================================================================

FOCUS_LABELS: dict[DayArchetype, str] = {
    PULL: "Pull Day",
    PUSH: "Push Day",
    LEGS: "Legs + Core + Cardio",
    ENDURANCE: "Endurance Integration Day",
    STRENGTH: "Strength Day",
}

DEFAULT_NOTE = "Movement quality first. Rest 2–4 min after heavy sets."


def _number_exercises(exercises: list[Exercise]) -> tuple[Exercise, ...]:
    """Prefix working blocks with "Exercise N:"; warm-ups, cool-downs and finishers keep their names."""
    numbered = []
    n = 1
    for ex in exercises:
        if ex.kind in ("warmup", "cooldown", "finisher"):
            numbered.append(ex)
            continue
        numbered.append(replace(ex, name=f"Exercise {n}: {ex.name}"))
        n += 1
    return tuple(numbered)


def _method_labels(exercises: list[Exercise]) -> tuple[str, ...]:
    labels: list[str] = []
    for ex in exercises:
        if ex.method is not None and ex.method.label not in labels:
            labels.append(ex.method.label)
    return tuple(labels)


def _build_pull(ctx: DayContext, main: tuple[Exercise, ...], method: Method) -> list[Exercise]:
    exercises = [pull.warmup(ctx)]
    skills = skill_day_settings(ctx.goals, ctx.capability, ctx.day_number)
    with_skills = skills.include_skill_work and not method.high_fatigue
    if with_skills:
        exercises.append(strength.skill_block(skills))
    exercises.extend(main)
    allow = not method.high_fatigue and not (with_skills and skills.avoid_conditioning)
    exercises.append(pull.finisher(ctx, allow_high_fatigue=allow))
    return exercises


def _build_push(ctx: DayContext, main: tuple[Exercise, ...], method: Method) -> list[Exercise]:
    exercises = [push.warmup(ctx), *main]
    exercises.append(push.finisher(ctx, allow_high_fatigue=not method.high_fatigue))
    return exercises


def _build_legs(ctx: DayContext, main: tuple[Exercise, ...], method: Method) -> list[Exercise]:
    return [conditioning.legs_warmup(ctx), *conditioning.legs_accessories(ctx), *main]


def _build_endurance(ctx: DayContext, main: tuple[Exercise, ...], method: Method) -> list[Exercise]:
    return [conditioning.endurance_warmup(ctx), *main, conditioning.cooldown(ctx)]


def _build_strength(ctx: DayContext, main: tuple[Exercise, ...], method: Method) -> list[Exercise]:
    if method is Method.MAX_TEST:
        return [strength.retest_warmup(ctx), *main]
    exercises = [strength.strength_warmup(ctx)]
    skills = skill_day_settings(ctx.goals, ctx.capability, ctx.day_number)
    if skills.include_skill_work:
        exercises.append(strength.skill_block(skills))
    exercises.extend(main)
    return exercises


DAY_BUILDERS = {
    PULL: _build_pull,
    PUSH: _build_push,
    LEGS: _build_legs,
    ENDURANCE: _build_endurance,
    STRENGTH: _build_strength,
}


def _focus_and_note(
    ctx: DayContext,
    archetype: DayArchetype,
    method: Method,
    sport: str | None,
) -> tuple[str, str]:
    focus = FOCUS_LABELS[archetype]
    note = DEFAULT_NOTE
    if archetype is PULL and ctx.final_week:
        note = "Light day before test."
    elif archetype is LEGS:
        note = "Cardio day. Rest as needed to maintain movement quality."
    elif archetype is ENDURANCE:
        note = "Endurance day. Prioritize movement quality over speed."
        if sport:
            note += f" Work capacity here carries over to {sport}."
    elif archetype is STRENGTH:
        if method is Method.MAX_TEST:
            return "Max Reps Test Day", "Last day of the program. Record all numbers and compare to week 1."
        note = "Sets in sequence. Progressive volume week-over-week. Quality over quantity."
        if ctx.weights["learn_skills"] > 0:
            note = "Skill-focused day. Low fatigue, controlled tempo. Quality over quantity."
        if strength.weighted_load(ctx) > 0:
            focus = "Strength + Weights"
            note = "Weighted calisthenics (0–20 kg). Controlled tempo. Full ROM."

    dominant = dominant_goal_for_day(ctx.goals, ctx.day_number)
    if dominant is not None:
        note += f" Today's emphasis: {GOAL_LABELS[dominant]}."
    return focus, note


def build_day(
    ctx: DayContext,
    block_length: int,
    sport: str | None = None,
) -> Day:
    """
    Build one training day.

    Args:
        ctx: Day context (week, athlete, weights)
        block_length: 6 for 6/12-week programs, 4 for 4-week programs
        sport: Optional sport tag for flavor text

    Returns:
        Day with numbered exercises
    """
    archetype = DAY_ARCHETYPES[ctx.day_number]
    method = select_method(archetype, block_length, ctx)
    main = generate(ctx, archetype, method)
    exercises = DAY_BUILDERS[archetype](ctx, main, method)

    if count_high_fatigue(exercises) > MAX_HIGH_FATIGUE_PER_SESSION:
        stacked = [ex.method.value for ex in exercises if is_high_fatigue(ex.method)]
        raise RuntimeError(f"Day {ctx.day_number} stacks high-fatigue methods: {stacked}")

    focus, note = _focus_and_note(ctx, archetype, method, sport)
    return Day(
        day_number=ctx.day_number,
        focus=focus,
        exercises=_number_exercises(exercises),
        methods=_method_labels(exercises),
        coaching_note=note,
    )


# =============================================================================
# WEEK BUILDER
# =============================================================================


def build_schedule(days: tuple[Day, ...], block_length: int) -> tuple[ScheduleSlot, ...]:
    """Mon–Sun calendar: 2 sessions, rest, 2 sessions, rest, then 1 session (or rest)."""
    calendar = CALENDAR_5_SESSIONS if DAYS_PER_WEEK[block_length] == 5 else CALENDAR_4_SESSIONS
    by_number = {d.day_number: d for d in days}
    slots = []
    for label, number in zip(CALENDAR_DAYS, calendar):
        if number is None or number not in by_number:
            slots.append(ScheduleSlot(day_label=label, focus="Rest"))
        else:
            slots.append(ScheduleSlot(day_label=label, focus=by_number[number].focus, day_number=number))
    return tuple(slots)


def build_week(
    week_number: int,
    block_length: int,
    setting: WeekSetting,
    level: str,
    capability: CapabilityVector,
    goals: tuple[str, ...],
    seed: int = 0,
    final_week: bool = False,
    sport: str | None = None,
) -> Week:
    """Build all training days of one week plus its calendar."""
    if block_length not in DAYS_PER_WEEK:
        raise ValueError(f"Unsupported block length: {block_length}")
    days = []
    for day_number in range(1, DAYS_PER_WEEK[block_length] + 1):
        ctx = DayContext(
            week=week_number,
            day_number=day_number,
            level=level,
            capability=capability,
            setting=setting,
            goals=goals,
            weights=day_weights(goals, day_number),
            seed=seed,
            final_week=final_week,
        )
        days.append(build_day(ctx, block_length, sport))
    days_t = tuple(days)
    return Week(
        week_number=week_number,
        days=days_t,
        schedule=build_schedule(days_t, block_length),
        setting=setting,
    )
