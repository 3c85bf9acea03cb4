"""
Nutrition calculator.

Pure function of height, weight and goals: Mifflin-St Jeor basal rate at a
fixed reference age, an activity factor for four to five training days, then
a goal adjustment.  Sample meals scale five fixed templates to the targets.
"""

from typing import Sequence

from .config import (
    ACTIVITY_FACTOR,
    DEFAULT_PROTEIN_PER_KG,
    GOAL_NUTRITION_ADJUSTMENTS,
    MAX_HEIGHT_CM,
    MAX_WEIGHT_KG,
    MEAL_ENERGY_SCALE_RANGE,
    MEAL_MIN_KCAL,
    MEAL_PROTEIN_SCALE_RANGE,
    MEAL_REFERENCE_KCAL,
    MEAL_REFERENCE_PROTEIN_G,
    MIN_HEIGHT_CM,
    MIN_WEIGHT_KG,
    NUTRITION_REFERENCE_AGE,
)
from .models import FoodItem, Meal, NutritionPlan
from .safety import round_half_up

INSUFFICIENT_DATA_NOTE = "Add height and weight for estimates."


def basal_rate(height_cm: float, weight_kg: float) -> float:
    """Mifflin-St Jeor, reference age 30, +5 constant."""
    return 10 * weight_kg + 6.25 * height_cm - 5 * NUTRITION_REFERENCE_AGE + 5


def _plausible(height_cm: float | None, weight_kg: float | None) -> bool:
    if not height_cm or not weight_kg:
        return False
    return MIN_HEIGHT_CM <= height_cm <= MAX_HEIGHT_CM and MIN_WEIGHT_KG <= weight_kg <= MAX_WEIGHT_KG


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return min(high, max(low, value))


def sample_meals(total_energy: int | None, protein_grams: int | None) -> tuple[Meal, ...] | None:
    """
    Five budget-friendly meal templates scaled to the targets.

    Returns None below 1200 kcal or without targets.
    """
    if not total_energy or total_energy < MEAL_MIN_KCAL or not protein_grams:
        return None
    scale = _clamp(total_energy / MEAL_REFERENCE_KCAL, MEAL_ENERGY_SCALE_RANGE)
    p_scale = _clamp(protein_grams / MEAL_REFERENCE_PROTEIN_G, MEAL_PROTEIN_SCALE_RANGE)

    def r(x: float) -> int:
        return round_half_up(x)

    return (
        Meal(
            time="7:00",
            name="Breakfast",
            foods=(
                FoodItem("Oats with milk", f"{r(60 * scale)}g oats"),
                FoodItem("Banana", "1"),
                FoodItem("Peanut butter", "1 tbsp"),
                FoodItem("Boiled eggs", "3-4"),
            ),
            kcal=r(500 * scale),
            protein=r(30 * p_scale),
        ),
        Meal(
            time="10:00",
            name="Snack",
            foods=(
                FoodItem("Greek yogurt", f"{r(150 * scale)}g"),
                FoodItem("Oats or seeds", "small handful"),
            ),
            kcal=r(250 * scale),
            protein=r(18 * p_scale),
        ),
        Meal(
            time="13:00",
            name="Lunch",
            foods=(
                FoodItem("Brown rice + lentils", f"{r(120 * scale)}g cooked"),
                FoodItem("Sautéed vegetables", "1 serving"),
                FoodItem("Chicken thighs or canned tuna", f"{r(120 * p_scale)}g"),
            ),
            kcal=r(600 * scale),
            protein=r(42 * p_scale),
        ),
        Meal(
            time="16:00",
            name="Pre/Post-workout",
            foods=(
                FoodItem("Banana", "1"),
                FoodItem("Milk", "1 glass"),
                FoodItem("Or: Rice + beans + chicken", "small portion"),
            ),
            kcal=r(250 * scale),
            protein=r(18 * p_scale),
        ),
        Meal(
            time="19:00",
            name="Dinner",
            foods=(
                FoodItem("Sweet potato", f"{r(150 * scale)}g"),
                FoodItem("Baked chicken or fish", f"{r(100 * p_scale)}g"),
                FoodItem("Mixed vegetables", "1 bowl"),
            ),
            kcal=r(550 * scale),
            protein=r(35 * p_scale),
        ),
    )


def calculate_nutrition(
    height_cm: float | None,
    weight_kg: float | None,
    goals: Sequence[str] | None = None,
    training_days: int = 5,
) -> NutritionPlan:
    """
    Energy and protein targets.

    The first matching goal adjusts the targets: Lose Weight (×0.9,
    2.0 g/kg), else Build Muscle (×1.08, 2.2 g/kg), else Improve Endurance
    (×1.02).  Without a matching goal protein is 1.8 g/kg.

    Args:
        height_cm: Height in cm (100–250)
        weight_kg: Body weight in kg (30–300)
        goals: Selected goal tags
        training_days: Sessions per week, quoted in the note; the activity
            factor is the same for four and five days

    Returns:
        NutritionPlan; all numbers None when height/weight are missing or
        implausible
    """
    selected = tuple(goals or ())
    if not _plausible(height_cm, weight_kg):
        return NutritionPlan(
            bmr=None,
            total_energy=None,
            protein_grams=None,
            goals=selected,
            note=INSUFFICIENT_DATA_NOTE,
        )

    bmr = basal_rate(height_cm, weight_kg)
    total_energy = round_half_up(bmr * ACTIVITY_FACTOR)
    protein_per_kg = DEFAULT_PROTEIN_PER_KG
    for goal, energy_mult, protein_mult in GOAL_NUTRITION_ADJUSTMENTS:
        if goal in selected:
            total_energy = round_half_up(total_energy * energy_mult)
            protein_per_kg = protein_mult
            break

    protein = round_half_up(weight_kg * protein_per_kg)
    return NutritionPlan(
        bmr=round_half_up(bmr),
        total_energy=total_energy,
        protein_grams=protein,
        goals=selected,
        note=f"~{total_energy} kcal/day ({training_days} training days), ~{protein}g protein. Adjust based on goals.",
        sample_meals=sample_meals(total_energy, protein),
    )
