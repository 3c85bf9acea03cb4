"""
Integration tests for the program generator.

Each test runs the full pipeline: ProgramRequest → generate_program, then
checks properties every generated program must satisfy.

Athlete matrix exercised across tests:
  levels : beginner, intermediate, advanced
  goals  : none, single goals, the conflicting pair, three goals
  weeks  : 4, 6, 12
"""

from collections import defaultdict
from dataclasses import replace

import pytest

from calisthenics_planner.core.config import MAX_HIGH_FATIGUE_PER_SESSION
from calisthenics_planner.core.methods.base import DayArchetype, Method
from calisthenics_planner.core.models import CapabilityVector, ProgramRequest
from calisthenics_planner.core.planner import (
    CURVE_4_WEEKS,
    CURVE_6_WEEKS,
    generate_program,
    intensity_curve,
    program_weeks_supported,
)
from calisthenics_planner.core.safety import count_high_fatigue, interval_ceiling, per_set_ceiling
from calisthenics_planner.core.scheduler import SCHEDULE_TABLES, scheduled_method
from calisthenics_planner.io.serializers import dumps_program, loads_program


# ===========================================================================
# Helpers
# ===========================================================================

ATHLETES = {
    "beginner": CapabilityVector(
        pull_ups=2, dips=3, push_ups=8, squats=15, leg_raises=4, burpees=10, muscle_ups=0
    ),
    "intermediate": CapabilityVector(
        pull_ups=12, dips=15, push_ups=30, squats=40, leg_raises=12, burpees=20, muscle_ups=0
    ),
    "advanced": CapabilityVector(
        pull_ups=22, dips=28, push_ups=50, squats=70, leg_raises=18, burpees=35, muscle_ups=5
    ),
}

GOAL_SETS = [
    (),
    ("lose_weight",),
    ("build_muscle",),
    ("improve_endurance",),
    ("learn_skills",),
    ("lose_weight", "build_muscle"),
    ("improve_endurance", "learn_skills", "build_muscle"),
]


def _program(level: str = "intermediate", goals: tuple = (), weeks: int = 6, **kwargs):
    return generate_program(
        ProgramRequest(
            level=level,
            capability=ATHLETES[level],
            goals=goals,
            weeks=weeks,
            **kwargs,
        )
    )


def _all_exercises(program):
    for week in program.weeks:
        for day in week.days:
            for ex in day.exercises:
                yield week, day, ex


# ===========================================================================
# Structure
# ===========================================================================


class TestProgramStructure:
    @pytest.mark.parametrize("weeks,days", [(4, 4), (6, 5), (12, 5)])
    def test_week_and_day_counts(self, weeks, days):
        program = _program(weeks=weeks)
        assert [w.week_number for w in program.weeks] == list(range(1, weeks + 1))
        assert all(len(w.days) == days for w in program.weeks)
        assert all([d.day_number for d in w.days] == list(range(1, days + 1)) for w in program.weeks)

    def test_five_session_calendar(self):
        week = _program(weeks=6).weeks[0]
        labels = [(s.day_label, s.day_number) for s in week.schedule]
        assert labels == [
            ("Monday", 1),
            ("Tuesday", 2),
            ("Wednesday", None),
            ("Thursday", 3),
            ("Friday", 4),
            ("Saturday", None),
            ("Sunday", 5),
        ]

    def test_four_session_calendar_rests_weekend(self):
        week = _program(weeks=4).weeks[0]
        rest_days = [s.day_label for s in week.schedule if s.is_rest]
        assert rest_days == ["Wednesday", "Saturday", "Sunday"]

    def test_week_descriptions(self):
        assert "1 training day" in _program(weeks=6).week_description
        assert "2 rest days" in _program(weeks=4).week_description

    def test_week_one_is_lowest_intensity(self):
        for curve in (CURVE_6_WEEKS, CURVE_4_WEEKS):
            assert curve[0].volume == min(s.volume for s in curve)
            assert curve[0].intensity == min(s.intensity for s in curve)

    def test_labels_match_colour_legend(self):
        legend = {"green": "Low", "yellow": "Moderate", "red": "High"}
        for curve in (CURVE_6_WEEKS, CURVE_4_WEEKS):
            for setting in curve:
                assert setting.label.split(" – ")[0] == legend[setting.color], setting

    def test_twelve_weeks_repeat_the_block_curve(self):
        assert intensity_curve(12) == CURVE_6_WEEKS * 2
        with pytest.raises(ValueError):
            intensity_curve(8)

    def test_supported_lengths(self):
        assert program_weeks_supported() == (4, 6, 12)

    def test_exercises_numbered(self):
        day = _program().weeks[0].days[0]
        working = [ex for ex in day.exercises if ex.kind not in ("warmup", "cooldown", "finisher")]
        assert working[0].name.startswith("Exercise 1: ")
        assert day.exercises[0].kind == "warmup"


# ===========================================================================
# Safety properties
# ===========================================================================


class TestSafetyProperties:
    @pytest.mark.parametrize("level", list(ATHLETES))
    @pytest.mark.parametrize("goals", GOAL_SETS)
    def test_prescriptions_within_caps(self, level, goals):
        program = _program(level=level, goals=goals)
        cap = program.capability
        for week, day, ex in _all_exercises(program):
            for p in ex.prescriptions:
                assert p.reps >= 0
                if p.movement is None:
                    continue
                max_reps = cap.get(p.movement)
                if p.kind == "set":
                    assert p.reps <= per_set_ceiling(max_reps), (week.week_number, day.focus, ex.name, p)
                elif p.kind == "interval":
                    assert p.reps <= interval_ceiling(max_reps), (week.week_number, day.focus, ex.name, p)

    @pytest.mark.parametrize("weeks", [4, 6, 12])
    @pytest.mark.parametrize("level", list(ATHLETES))
    def test_at_most_one_high_fatigue_block_per_day(self, weeks, level):
        program = _program(level=level, goals=("lose_weight", "learn_skills"), weeks=weeks)
        for week in program.weeks:
            for day in week.days:
                assert count_high_fatigue(day.exercises) <= MAX_HIGH_FATIGUE_PER_SESSION

    @pytest.mark.parametrize("weeks", [4, 6, 12])
    def test_beginner_never_gets_muscle_ups(self, weeks):
        program = _program(
            level="beginner",
            goals=("learn_skills",),
            weeks=weeks,
        )
        assert program.capability.muscle_ups == 0
        for _, _, ex in _all_exercises(program):
            assert "muscle-up" not in ex.movements
            assert "muscle-up" not in ex.sets.lower()
            assert all(p.movement != "muscle_ups" for p in ex.prescriptions)

    def test_beginner_muscle_up_input_ignored(self):
        request = ProgramRequest(
            level="beginner",
            capability=CapabilityVector(2, 3, 8, 15, 4, 10, muscle_ups=3),
        )
        assert generate_program(request).capability.muscle_ups == 0

    def test_descending_ladders_never_increase(self):
        for level in ATHLETES:
            program = _program(level=level, weeks=6)
            ladders = [ex for _, _, ex in _all_exercises(program) if ex.method is Method.DESCENDING_LADDER]
            assert ladders
            for ex in ladders:
                by_movement = defaultdict(list)
                for p in ex.prescriptions:
                    if p.movement is not None and p.kind == "set":
                        by_movement[p.movement].append(p.reps)
                for reps in by_movement.values():
                    assert reps == sorted(reps, reverse=True), (level, ex.name, reps)

    @pytest.mark.parametrize("pull_ups", [0, 1, 2, 5, 8, 12])
    def test_beginner_ladder_columns_never_increase(self, pull_ups):
        capability = replace(ATHLETES["beginner"], pull_ups=pull_ups)
        program = generate_program(ProgramRequest(level="beginner", capability=capability, weeks=6))
        ladders = [ex for _, _, ex in _all_exercises(program) if ex.method is Method.DESCENDING_LADDER]
        assert ladders
        for ex in ladders:
            assert "Australian" in ex.sets
            columns = defaultdict(list)
            for line in ex.sets.splitlines():
                for part in line.split(": ", 1)[-1].split(", "):
                    reps, movement = part.split(" ", 1)
                    columns[movement.lower()].append(int(reps))
            for movement, reps in columns.items():
                assert all(r >= 1 for r in reps), (ex.name, movement, reps)
                assert reps == sorted(reps, reverse=True), (ex.name, movement, reps)


# ===========================================================================
# Scheduling
# ===========================================================================


class TestScheduling:
    def test_method_follows_table(self):
        program = _program(weeks=6)
        table = SCHEDULE_TABLES[(DayArchetype.PULL, 6)]
        for week in program.weeks[:5]:
            main = [ex for ex in week.days[0].exercises if ex.kind == "main"]
            assert main[0].method is table[week.week_number - 1]

    def test_scheduled_method_lookup(self):
        assert scheduled_method(DayArchetype.PULL, 6, 1) is Method.SPLIT_VOLUME
        assert scheduled_method(DayArchetype.PUSH, 4, 4) is Method.INTERVAL_SKILL_COMBO
        with pytest.raises(ValueError):
            scheduled_method(DayArchetype.PULL, 5, 1)

    def test_skill_combo_falls_back_without_muscle_ups(self):
        program = _program(level="intermediate", weeks=4)
        push_day = program.weeks[3].days[1]
        methods = {ex.method for ex in push_day.exercises if ex.kind == "main"}
        assert methods == {Method.INTERVAL_BLOCK}

    def test_skill_combo_used_with_muscle_ups(self):
        program = _program(level="advanced", weeks=4)
        push_day = program.weeks[3].days[1]
        assert any(ex.method is Method.INTERVAL_SKILL_COMBO for ex in push_day.exercises)

    def test_retest_only_on_final_week(self):
        program = _program(weeks=6)
        focuses = [w.days[4].focus for w in program.weeks]
        assert focuses[-1] == "Max Reps Test Day"
        assert "Max Reps Test Day" not in focuses[:-1]
        assert program.weeks[-1].days[0].coaching_note == "Light day before test."

    def test_twelve_weeks_retest_once(self):
        program = _program(weeks=12)
        retests = [w.week_number for w in program.weeks if w.days[4].focus == "Max Reps Test Day"]
        assert retests == [12]

    def test_four_weeks_has_no_retest(self):
        program = _program(weeks=4)
        assert all(ex.method is not Method.MAX_TEST for _, _, ex in _all_exercises(program))

    def test_advanced_retest_includes_muscle_ups(self):
        day = _program(level="advanced").weeks[-1].days[4]
        names = [ex.name for ex in day.exercises]
        assert any("Max Test: Muscle-ups" in n for n in names)
        assert day.exercises[-1].rest == "—"


# ===========================================================================
# Goals
# ===========================================================================


class TestGoalEffects:
    def test_skill_block_placed_after_warmup(self):
        program = _program(level="intermediate", goals=("learn_skills",))
        day1 = program.weeks[0].days[0]
        assert day1.exercises[0].kind == "warmup"
        assert day1.exercises[1].kind == "skill"
        assert any(ex.kind == "skill" for ex in program.weeks[0].days[4].exercises)

    def test_no_skill_block_on_high_fatigue_pull_day(self):
        program = _program(level="intermediate", goals=("learn_skills",))
        # Week 2 pull day is an interval block
        assert all(ex.kind != "skill" for ex in program.weeks[1].days[0].exercises)

    def test_skill_day_finisher_is_low_fatigue(self):
        day1 = _program(level="intermediate", goals=("learn_skills",)).weeks[0].days[0]
        assert day1.exercises[-1].name == "Finisher: Scapular Pulls + Dead Hang"
        assert day1.exercises[-1].method is None

    def test_no_skill_work_without_goal(self):
        program = _program(level="intermediate")
        assert all(ex.kind != "skill" for _, _, ex in _all_exercises(program))

    def test_conflicting_goals_get_daily_emphasis(self):
        program = _program(goals=("lose_weight", "build_muscle"))
        days = program.weeks[0].days
        assert days[2].coaching_note.endswith("Today's emphasis: Lose Weight.")
        assert days[4].coaching_note.endswith("Today's emphasis: Build Muscle.")

    def test_build_muscle_loads_strength_day(self):
        program = _program(goals=("build_muscle",))
        # Week 2 carries the first added load
        assert program.weeks[1].days[4].focus == "Strength + Weights"
        assert program.weeks[0].days[4].focus == "Strength Day"

    def test_sport_flavors_endurance_note(self):
        program = _program(sport="Boxing")
        assert "Boxing" in program.weeks[0].days[3].coaching_note

    def test_nutrition_attached(self):
        program = _program(goals=("build_muscle",), height_cm=175, weight_kg=70)
        assert program.nutrition.total_energy == 2760
        assert program.nutrition.protein_grams == 154

    @pytest.mark.parametrize("weeks, days", [(4, 4), (6, 5), (12, 5)])
    def test_nutrition_note_matches_calendar(self, weeks, days):
        program = _program(weeks=weeks, height_cm=175, weight_kg=70)
        assert f"({days} training days)" in program.nutrition.note
        assert len(program.weeks[0].days) == days


# ===========================================================================
# Scenarios
# ===========================================================================


class TestScenarios:
    def test_beginner_pull_day_uses_regression(self):
        # pull_ups = 2 falls in the lowest regression band
        program = _program(level="beginner")
        pull_day = program.weeks[0].days[0]
        text = "\n".join(ex.sets for ex in pull_day.exercises)
        assert "Assisted pull-ups or negative pull-ups" in text
        assert "Australian pull-ups" in text
        assert "muscle-up" not in text.lower()

    def test_regressed_lines_are_untagged(self):
        program = _program(level="beginner")
        main = [ex for ex in program.weeks[0].days[0].exercises if ex.kind == "main"][0]
        assert all(p.movement is None for p in main.prescriptions)

    def test_deterministic(self):
        a = _program(level="advanced", goals=("improve_endurance",), weeks=12, seed=7)
        b = _program(level="advanced", goals=("improve_endurance",), weeks=12, seed=7)
        assert a == b

    def test_seed_changes_only_cosmetics(self):
        a = _program(seed=0)
        b = _program(seed=1)
        for wa, wb in zip(a.weeks, b.weeks):
            for da, db in zip(wa.days, wb.days):
                assert da.methods == db.methods
                assert [ex.prescriptions for ex in da.exercises] == [ex.prescriptions for ex in db.exercises]


# ===========================================================================
# Serialization
# ===========================================================================


class TestRoundTrip:
    @pytest.mark.parametrize("weeks", [4, 6, 12])
    def test_json_round_trip(self, weeks):
        program = _program(level="advanced", goals=("lose_weight", "build_muscle"), weeks=weeks,
                           height_cm=180, weight_kg=80, sport="Climbing")
        assert loads_program(dumps_program(program)) == program

    def test_round_trip_with_reviews(self):
        from dataclasses import replace

        program = replace(_program(weeks=4), coach_review={1: "ok", 2: "fine", 3: "x", 4: "y"})
        restored = loads_program(dumps_program(program))
        assert restored.coach_review == {1: "ok", 2: "fine", 3: "x", 4: "y"}
        assert restored == program

    def test_round_trip_without_nutrition_data(self):
        program = _program(weeks=4)
        assert program.nutrition.is_insufficient
        assert loads_program(dumps_program(program)) == program
