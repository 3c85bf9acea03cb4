"""Reference commands: nutrition, skills, materials."""

import json
from typing import Annotated, Optional

import typer

from ...core.goals import SKILL_GATES, can_unlock_skill
from ...core.models import CapabilityVector
from ...core.nutrition import calculate_nutrition
from ...core.safety import materials_list
from ...io.serializers import nutrition_to_dict, validate_capability, validate_goals
from .. import views
from ..app import (
    BurpeesOption,
    DipsOption,
    GoalOption,
    JsonOption,
    LegRaisesOption,
    MuscleUpsOption,
    PullUpsOption,
    PushUpsOption,
    SquatsOption,
    app,
    capability_overrides,
)


@app.command()
def nutrition(
    height_cm: Annotated[Optional[float], typer.Option("--height-cm", help="Height in cm")] = None,
    weight_kg: Annotated[Optional[float], typer.Option("--weight-kg", help="Body weight in kg")] = None,
    goals: GoalOption = None,
    training_days: Annotated[
        int, typer.Option("--training-days", min=4, max=5, help="Sessions per week (4 or 5)")
    ] = 5,
    json_out: JsonOption = False,
) -> None:
    """Daily energy and protein targets with sample meals."""
    selected, problems = validate_goals(goals or [])
    if problems:
        views.print_error("; ".join(problems))
        raise typer.Exit(1)

    plan = calculate_nutrition(height_cm, weight_kg, selected, training_days=training_days)

    if json_out:
        print(json.dumps(nutrition_to_dict(plan), indent=2, ensure_ascii=False))
        return

    views.print_nutrition(plan)


@app.command()
def skills(
    pull_ups: PullUpsOption = None,
    dips: DipsOption = None,
    push_ups: PushUpsOption = None,
    squats: SquatsOption = None,
    leg_raises: LegRaisesOption = None,
    burpees: BurpeesOption = None,
    muscle_ups: MuscleUpsOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show which skills the athlete's maxes unlock.

    Movements not given count as 0.
    """
    raw = {name: 0 for name in CapabilityVector.FIELDS}
    raw.update(capability_overrides(pull_ups, dips, push_ups, squats, leg_raises, burpees, muscle_ups))
    capability, problems = validate_capability(raw)
    if capability is None:
        views.print_error("; ".join(problems))
        raise typer.Exit(1)

    rows = [
        {
            "skill": skill,
            "requires": dict(gate),
            "unlocked": can_unlock_skill(skill, capability),
        }
        for skill, gate in SKILL_GATES.items()
    ]

    if json_out:
        print(json.dumps(rows, indent=2))
        return

    views.print_skills(rows, capability)


@app.command()
def materials(json_out: JsonOption = False) -> None:
    """Equipment checklist for the program."""
    items = materials_list()

    if json_out:
        print(json.dumps(items, indent=2, ensure_ascii=False))
        return

    views.print_materials(items)
