"""
Unit tests for the pure formulas behind program generation.

Covers the safety caps, goal weighting, rep/rest calculators, nutrition
and the configuration/validation layers.  Expected values are computed by
hand in the comments.
"""

import pytest

from calisthenics_planner.core.engine.config_loader import (
    API_KEY_ENV,
    ReviewSettings,
    _deep_merge,
    load_review_settings,
)
from calisthenics_planner.core.goals import (
    can_unlock_skill,
    day_weights,
    dominant_goal_for_day,
    goal_limits,
    goal_weights,
    has_conflict,
    normalize_goals,
    rep_range_bias,
    rest_bias,
    skill_day_settings,
    unlocked_skills,
    week_intensity_tag,
)
from calisthenics_planner.core.methods.base import Method
from calisthenics_planner.core.models import CapabilityVector, Exercise
from calisthenics_planner.core.nutrition import (
    INSUFFICIENT_DATA_NOTE,
    calculate_nutrition,
    sample_meals,
)
from calisthenics_planner.core.prescriptions import (
    assisted_ladder,
    assisted_reps,
    block_week,
    descending_sequence,
    diminishing_factor,
    endurance_reps,
    interval_reps,
    max_rounds_minutes,
    rest_for,
    smart_reps,
)
from calisthenics_planner.core.safety import (
    cap_interval_reps,
    cap_per_set,
    count_high_fatigue,
    fatigue_budget_left,
    interval_ceiling,
    materials_list,
    per_set_ceiling,
    regression_for,
    round_half_up,
    sanitize,
)
from calisthenics_planner.io.serializers import ValidationError, parse_generation_request


def _capability(**overrides) -> CapabilityVector:
    values = dict(pull_ups=12, dips=15, push_ups=30, squats=40, leg_raises=12, burpees=20, muscle_ups=0)
    values.update(overrides)
    return CapabilityVector(**values)


# =============================================================================
# Safety layer
# =============================================================================


class TestSanitize:
    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2

    def test_negative_floors_at_one(self):
        assert sanitize(-3) == 1

    def test_zero_allowed_when_requested(self):
        assert sanitize(0, allow_zero=True) == 0
        assert sanitize(-2, allow_zero=True) == 0

    def test_fraction_rounds(self):
        assert sanitize(2.4) == 2


class TestCaps:
    def test_per_set_cap_is_half_of_max(self):
        # ceiling = floor(20 × 0.5) = 10
        assert cap_per_set(30, 20) == 10
        assert cap_per_set(3, 20) == 3

    def test_per_set_cap_never_below_one(self):
        assert cap_per_set(5, 1) == 1

    def test_unknown_max_only_sanitizes(self):
        assert cap_per_set(5, 0) == 5

    def test_interval_cap_is_35_percent(self):
        # ceiling = floor(20 × 0.35) = 7
        assert cap_interval_reps(10, 20) == 7
        # ceiling = floor(10 × 0.35) = 3
        assert cap_interval_reps(10, 10) == 3

    def test_ceilings(self):
        assert per_set_ceiling(9) == 4
        assert interval_ceiling(10) == 3
        assert interval_ceiling(1) == 1


class TestRegressions:
    def test_low_band(self):
        r = regression_for("pull_ups", 2, "beginner")
        assert r is not None
        assert r.name == "Assisted pull-ups or negative pull-ups"

    def test_mid_band(self):
        assert regression_for("pull_ups", 5, "beginner").name == "Australian pull-ups"
        assert regression_for("push_ups", 8, "beginner").name == "Incline push-ups"

    def test_above_band_none(self):
        assert regression_for("pull_ups", 9, "beginner") is None

    def test_non_beginner_never_regressed(self):
        assert regression_for("pull_ups", 0, "intermediate") is None
        assert regression_for("pull_ups", 0, "advanced") is None


class TestFatigueBudget:
    def test_counts_only_high_fatigue_methods(self):
        exercises = [
            Exercise("a", "", "", method=Method.SPLIT_VOLUME),
            Exercise("b", "", "", method=Method.INTERVAL_BLOCK),
            Exercise("c", "", ""),
        ]
        assert count_high_fatigue(exercises) == 1
        assert fatigue_budget_left(exercises) == 0

    def test_empty_session_has_budget(self):
        assert fatigue_budget_left([]) == 1


class TestMaterials:
    def test_checklist_entries(self):
        items = materials_list()
        assert len(items) == 8
        assert all(set(item) == {"name", "use"} for item in items)
        assert items[0]["name"] == "Jump rope"


# =============================================================================
# Goal resolver
# =============================================================================


class TestGoalWeights:
    def test_no_goals_all_zero(self):
        assert all(w == 0 for w in goal_weights([]).values())

    def test_single_goal(self):
        w = goal_weights(["build_muscle"])
        assert w["build_muscle"] == 1.0
        assert w["lose_weight"] == 0.0

    def test_two_goals(self):
        w = goal_weights(["improve_endurance", "learn_skills"])
        assert w["improve_endurance"] == 0.6
        assert w["learn_skills"] == 0.4

    def test_three_goals_in_priority_order(self):
        w = goal_weights(["lose_weight", "build_muscle", "learn_skills"])
        assert (w["lose_weight"], w["build_muscle"], w["learn_skills"]) == (0.6, 0.3, 0.1)
        assert sum(w.values()) == pytest.approx(1.0)

    def test_normalize_drops_duplicates_and_unknown(self):
        assert normalize_goals(["build_muscle", "bogus", "build_muscle"]) == ("build_muscle",)


class TestGoalBiases:
    def test_build_muscle_rep_range(self):
        r = rep_range_bias(goal_weights(["build_muscle"]))
        assert (r.low, r.high) == (0.55, 0.80)
        assert r.volume_cap is None

    def test_skills_cap_volume(self):
        r = rep_range_bias(goal_weights(["learn_skills"]))
        assert (r.low, r.high) == (0.40, 0.65)
        assert r.volume_cap == 0.85

    def test_rest_bias(self):
        assert rest_bias(goal_weights(["build_muscle"])) == "longer"
        assert rest_bias(goal_weights(["lose_weight"])) == "shorter"
        assert rest_bias(goal_weights(["improve_endurance"])) == "default"

    def test_limits(self):
        limits = goal_limits(goal_weights(["lose_weight"]))
        assert limits.cap_interval_intensity is True
        assert limits.cap_cardio_volume is False
        assert goal_limits(goal_weights(["build_muscle"])).cap_cardio_volume is True


class TestGoalConflict:
    def test_only_lose_weight_and_build_muscle_conflict(self):
        assert has_conflict(["lose_weight", "build_muscle"])
        assert not has_conflict(["lose_weight", "improve_endurance"])
        assert not has_conflict([])

    def test_dominant_goal_per_day(self):
        goals = ["lose_weight", "build_muscle"]
        assert dominant_goal_for_day(goals, 3) == "lose_weight"
        assert dominant_goal_for_day(goals, 5) == "build_muscle"
        # Day 1 has no preference: highest weight wins
        assert dominant_goal_for_day(goals, 1) == "lose_weight"
        assert dominant_goal_for_day(["build_muscle", "lose_weight"], 1) == "build_muscle"

    def test_no_dominance_without_conflict(self):
        assert dominant_goal_for_day(["build_muscle"], 5) is None

    def test_day_weights_follow_dominant_goal(self):
        assert day_weights(["lose_weight", "build_muscle"], 5) == goal_weights(["build_muscle"])
        assert day_weights(["build_muscle"], 5) == goal_weights(["build_muscle"])

    def test_week_intensity_tags(self):
        assert [week_intensity_tag(w) for w in range(1, 7)] == [
            "friendly",
            "progressive",
            "progressive",
            "intense",
            "controlled_peak",
            "deload",
        ]


class TestSkillGating:
    def test_unlocked_skills(self):
        cap = _capability(pull_ups=15, dips=10, push_ups=10, leg_raises=15)
        assert unlocked_skills(cap) == ("l_sit", "handstand", "muscle_up", "front_lever", "back_lever")

    def test_planche_locked(self):
        assert not can_unlock_skill("planche", _capability(push_ups=24, dips=20))
        assert can_unlock_skill("planche", _capability(push_ups=25, dips=15))

    def test_unknown_skill_locked(self):
        assert not can_unlock_skill("flag", _capability())

    def test_skill_work_only_on_low_fatigue_days(self):
        cap = _capability(pull_ups=15, dips=12)
        assert skill_day_settings(["learn_skills"], cap, 1).include_skill_work
        assert skill_day_settings(["learn_skills"], cap, 5).include_skill_work
        assert not skill_day_settings(["learn_skills"], cap, 2).include_skill_work

    def test_no_skill_work_without_goal_or_unlocks(self):
        assert not skill_day_settings([], _capability(), 1).include_skill_work
        zero = CapabilityVector(0, 0, 0, 0, 0, 0)
        assert not skill_day_settings(["learn_skills"], zero, 1).include_skill_work


# =============================================================================
# Rep / intensity calculator
# =============================================================================


class TestSmartReps:
    def test_diminishing_factor_thresholds(self):
        assert diminishing_factor(20) == 1.0
        assert diminishing_factor(21) == 0.90
        assert diminishing_factor(41) == 0.85
        assert diminishing_factor(61) == 0.80

    def test_capped_at_half(self):
        # floor(10 × 0.6) = 6 → capped to 5
        assert smart_reps(10, 0.6) == 5

    def test_high_capability_scaled_down(self):
        # floor(30 × 0.4 × 0.9) = 10
        assert smart_reps(30, 0.4) == 10
        # floor(100 × 0.6 × 0.8) = 48
        assert smart_reps(100, 0.6) == 48


class TestEnduranceAndIntervals:
    def test_endurance_week_one(self):
        # smart_reps(20, 0.50) = 10
        assert endurance_reps(20, 1, "intermediate") == 10

    def test_endurance_cap_beats_floor(self):
        # floor of 3 reps, but max 2 caps a set at 1
        assert endurance_reps(2, 1, "beginner") == 1

    def test_interval_reps(self):
        assert interval_reps(20) == 7
        assert interval_reps(10) == 3

    def test_assisted_reps(self):
        assert assisted_reps(3, 1) == 10  # 8 + 2 × 1
        assert assisted_reps(5, 1) == 9  # 5 × 1.8
        assert assisted_reps(5, 3) == 11  # 5 × 2.2
        assert assisted_reps(10, 7) == 18  # week 7 is block week 1


class TestLaddersAndRest:
    def test_block_week(self):
        assert block_week(7) == 1
        assert block_week(12) == 6
        with pytest.raises(ValueError):
            block_week(0)

    def test_descending_sequence_stops_before_zero(self):
        assert descending_sequence(7, 2, 5) == [7, 5, 3, 1]
        assert descending_sequence(6, 2, 2) == [6, 4]

    def test_descending_sequence_needs_positive_step(self):
        with pytest.raises(ValueError):
            descending_sequence(5, 0, 3)

    def test_descending_sequence_low_starts(self):
        assert descending_sequence(2, 2, 5) == [2]
        assert descending_sequence(1, 2, 3) == [1]
        assert descending_sequence(0, 2, 3) == []
        for start in range(16):
            seq = descending_sequence(start, 2, 8)
            assert all(a > b for a, b in zip(seq, seq[1:]))
            assert all(reps >= 1 for reps in seq)

    def test_assisted_ladder_never_rises(self):
        # assisted_reps(4, 3) = 14 jumps above assisted_reps(5, 3) = 11
        assert assisted_reps(4, 3) > assisted_reps(5, 3)
        assert assisted_ladder([6, 5, 4], 3) == [13, 11, 11]
        assert assisted_ladder([3, 1], 1) == [10, 10]
        assert assisted_ladder([], 2) == []
        for week in range(1, 7):
            for start in range(1, 16):
                ladder = assisted_ladder(descending_sequence(start, 2, 8), week)
                assert all(a >= b for a, b in zip(ladder, ladder[1:]))

    def test_max_rounds_minutes(self):
        assert max_rounds_minutes(1) == 5
        assert max_rounds_minutes(4) == 10
        assert max_rounds_minutes(4, endurance_bias=True) == 12
        assert max_rounds_minutes(3, endurance_bias=True) == 10

    def test_rest_for(self):
        assert rest_for(1, "strength", "longer") == "3–4 min between sets"
        assert rest_for(1, "strength") == "2–4 min between sets"
        assert rest_for(2, "endurance", "shorter") == "45–60s"
        assert rest_for(3, "endurance") == "60s"


# =============================================================================
# Nutrition
# =============================================================================


class TestNutrition:
    def test_build_muscle_targets(self):
        # BMR = 700 + 1093.75 − 150 + 5 = 1648.75; × 1.55 = 2555.56 → 2556
        # × 1.08 = 2760.48 → 2760; protein 70 × 2.2 = 154
        plan = calculate_nutrition(175, 70, ["build_muscle"])
        assert plan.bmr == 1649
        assert plan.total_energy == 2760
        assert plan.protein_grams == 154

    def test_no_goal_maintenance(self):
        plan = calculate_nutrition(175, 70)
        assert plan.total_energy == 2556
        assert plan.protein_grams == 126
        assert plan.note == "~2556 kcal/day (5 training days), ~126g protein. Adjust based on goals."

    def test_note_quotes_training_days(self):
        plan = calculate_nutrition(175, 70, training_days=4)
        assert plan.note == "~2556 kcal/day (4 training days), ~126g protein. Adjust based on goals."
        assert plan.total_energy == calculate_nutrition(175, 70).total_energy

    def test_first_matching_goal_wins(self):
        plan = calculate_nutrition(175, 70, ["lose_weight", "build_muscle"])
        assert plan.total_energy == 2300
        assert plan.protein_grams == 140

    def test_missing_data_is_sentinel(self):
        for height, weight in ((None, 70), (175, None), (90, 70), (175, 20)):
            plan = calculate_nutrition(height, weight)
            assert plan.is_insufficient
            assert plan.bmr is None and plan.protein_grams is None
            assert plan.note == INSUFFICIENT_DATA_NOTE
            assert plan.sample_meals is None

    def test_sample_meals(self):
        plan = calculate_nutrition(175, 70)
        assert plan.sample_meals is not None
        assert [m.name for m in plan.sample_meals] == [
            "Breakfast",
            "Snack",
            "Lunch",
            "Pre/Post-workout",
            "Dinner",
        ]
        assert sample_meals(1000, 100) is None

    def test_pure(self):
        assert calculate_nutrition(180, 80, ["improve_endurance"]) == calculate_nutrition(
            180, 80, ["improve_endurance"]
        )


# =============================================================================
# Configuration
# =============================================================================


class TestReviewSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv(API_KEY_ENV, raising=False)
        settings = load_review_settings({})
        assert settings == ReviewSettings()
        assert not settings.has_api_key

    def test_section_values_coerced(self, monkeypatch):
        monkeypatch.delenv(API_KEY_ENV, raising=False)
        settings = load_review_settings({"review": {"model": "x/y", "timeout_seconds": "10"}})
        assert settings.model == "x/y"
        assert settings.timeout_seconds == 10.0

    def test_invalid_value_warns_and_keeps_default(self, monkeypatch):
        monkeypatch.delenv(API_KEY_ENV, raising=False)
        with pytest.warns(UserWarning):
            settings = load_review_settings({"review": {"rate_limit_retries": "many"}})
        assert settings.rate_limit_retries == 3

    def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV, "sk-test")
        settings = load_review_settings({})
        assert settings.api_key == "sk-test"
        assert settings.has_api_key

    def test_deep_merge(self):
        base = {"review": {"model": "a", "temperature": 0.3}}
        merged = _deep_merge(base, {"review": {"model": "b"}})
        assert merged == {"review": {"model": "b", "temperature": 0.3}}
        assert base["review"]["model"] == "a"


# =============================================================================
# Request validation
# =============================================================================


def _raw_request(**overrides) -> dict:
    data = {
        "level": "intermediate",
        "capability": {
            "pull_ups": 12,
            "dips": 15,
            "push_ups": 30,
            "squats": 40,
            "leg_raises": 12,
            "burpees": 20,
            "muscle_ups": 0,
        },
    }
    data.update(overrides)
    return data


class TestRequestValidation:
    def test_valid_request_defaults(self):
        req = parse_generation_request(_raw_request())
        assert req.weeks == 6
        assert req.goals == ()
        assert req.capability.pull_ups == 12

    def test_beginner_muscle_ups_zeroed(self):
        raw = _raw_request(level="beginner")
        raw["capability"]["muscle_ups"] = 4
        assert parse_generation_request(raw).capability.muscle_ups == 0

    def test_missing_capability_field(self):
        raw = _raw_request()
        del raw["capability"]["dips"]
        with pytest.raises(ValidationError, match="capability.dips is required"):
            parse_generation_request(raw)

    def test_out_of_range_values(self):
        raw = _raw_request()
        raw["capability"]["pull_ups"] = 61
        raw["capability"]["squats"] = -1
        with pytest.raises(ValidationError) as exc:
            parse_generation_request(raw)
        assert "pull_ups must be at most 60" in str(exc.value)
        assert "squats must be non-negative" in str(exc.value)

    def test_booleans_rejected(self):
        raw = _raw_request()
        raw["capability"]["burpees"] = True
        with pytest.raises(ValidationError, match="burpees must be an integer"):
            parse_generation_request(raw)

    def test_goal_rules(self):
        with pytest.raises(ValidationError, match="at most 3 goals"):
            parse_generation_request(
                _raw_request(goals=["lose_weight", "improve_endurance", "build_muscle", "learn_skills"])
            )
        with pytest.raises(ValidationError, match="invalid goal"):
            parse_generation_request(_raw_request(goals=["get_big"]))
        with pytest.raises(ValidationError, match="distinct"):
            parse_generation_request(_raw_request(goals=["build_muscle", "build_muscle"]))

    def test_unhashable_goal_is_invalid_not_a_crash(self):
        with pytest.raises(ValidationError, match="invalid goal") as exc:
            parse_generation_request(_raw_request(goals=[["build_muscle"]]))
        assert "distinct" not in str(exc.value)
        with pytest.raises(ValidationError, match="invalid goal"):
            parse_generation_request(_raw_request(goals=[{"goal": "lose_weight"}, "lose_weight"]))

    def test_every_problem_in_one_error(self):
        with pytest.raises(ValidationError) as exc:
            parse_generation_request({"level": "pro", "weeks": 5, "height_cm": 90})
        message = str(exc.value)
        assert "level is required" in message
        assert "capability must be an object" in message
        assert "weeks must be one of 4, 6, 12" in message
        assert "height_cm must be between" in message

    def test_sport_stripped(self):
        assert parse_generation_request(_raw_request(sport="  Boxing ")).sport == "Boxing"
        assert parse_generation_request(_raw_request(sport="   ")).sport is None
