"""Shared Typer app object, shared option types, and request loading."""

import json
from pathlib import Path
from typing import Annotated, Any, Optional

import typer

from ..core.models import CapabilityVector, ProgramRequest
from ..io.serializers import ValidationError, parse_generation_request

app = typer.Typer(
    name="calisthenics-planner",
    help="Periodized calisthenics program generator with optional AI coach review.",
    no_args_is_help=True,
)

# Shared option types used across commands
RequestOption = Annotated[
    Optional[Path],
    typer.Option("--request", "-r", help="JSON request file (options below override its values)"),
]
LevelOption = Annotated[
    Optional[str],
    typer.Option("--level", "-l", help="beginner, intermediate or advanced"),
]
GoalOption = Annotated[
    Optional[list[str]],
    typer.Option(
        "--goal",
        "-g",
        help="Goal tag (repeatable, max 3): lose_weight, improve_endurance, build_muscle, learn_skills",
    ),
]
PullUpsOption = Annotated[Optional[int], typer.Option("--pull-ups", help="Max strict pull-ups")]
DipsOption = Annotated[Optional[int], typer.Option("--dips", help="Max dips")]
PushUpsOption = Annotated[Optional[int], typer.Option("--push-ups", help="Max push-ups")]
SquatsOption = Annotated[Optional[int], typer.Option("--squats", help="Max bodyweight squats")]
LegRaisesOption = Annotated[Optional[int], typer.Option("--leg-raises", help="Max hanging leg raises")]
BurpeesOption = Annotated[Optional[int], typer.Option("--burpees", help="Max burpees")]
MuscleUpsOption = Annotated[
    Optional[int], typer.Option("--muscle-ups", help="Max muscle-ups (ignored for beginners)")
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]
OutputOption = Annotated[
    Optional[Path],
    typer.Option("--output", "-o", help="Write the result as JSON to this file"),
]


def read_json_file(path: Path) -> Any:
    """
    Read a JSON document from disk.

    Raises:
        FileNotFoundError: If the file does not exist
        ValidationError: If the file is not valid JSON
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(f"{path} is not valid JSON: {e}") from e


def capability_overrides(
    pull_ups: int | None,
    dips: int | None,
    push_ups: int | None,
    squats: int | None,
    leg_raises: int | None,
    burpees: int | None,
    muscle_ups: int | None,
) -> dict[str, int]:
    """Capability fields given on the command line, keyed by field name."""
    given = dict(
        zip(
            CapabilityVector.FIELDS,
            (pull_ups, dips, push_ups, squats, leg_raises, burpees, muscle_ups),
        )
    )
    return {k: v for k, v in given.items() if v is not None}


def load_request(
    request_path: Path | None,
    overrides: dict[str, Any],
    capability: dict[str, int],
) -> ProgramRequest:
    """
    Build a validated ProgramRequest from an optional file plus CLI values.

    ``muscle_ups`` defaults to 0 when neither source gives it.

    Raises:
        FileNotFoundError: If ``request_path`` does not exist
        ValidationError: If the merged request is invalid
    """
    data: dict[str, Any] = {}
    if request_path is not None:
        loaded = read_json_file(request_path)
        if not isinstance(loaded, dict):
            raise ValidationError("request file must contain a JSON object")
        data.update(loaded)

    data.update({k: v for k, v in overrides.items() if v is not None})

    cap = data.get("capability")
    cap = dict(cap) if isinstance(cap, dict) else {}
    cap.update(capability)
    cap.setdefault("muscle_ups", 0)
    data["capability"] = cap

    return parse_generation_request(data)
