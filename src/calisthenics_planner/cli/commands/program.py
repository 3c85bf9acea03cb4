"""Program commands: generate and review."""

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.engine.config_loader import API_KEY_ENV, ReviewSettings, load_review_settings
from ...core.models import Program, ProgramRequest
from ...core.planner import generate_program, program_weeks_supported
from ...io.serializers import ValidationError, dumps_program, loads_program
from ...review import CompletionClient, attach_reviews, author_program
from .. import views
from ..app import (
    BurpeesOption,
    DipsOption,
    GoalOption,
    JsonOption,
    LegRaisesOption,
    LevelOption,
    MuscleUpsOption,
    OutputOption,
    PullUpsOption,
    PushUpsOption,
    RequestOption,
    SquatsOption,
    app,
    capability_overrides,
    load_request,
)


async def _enhance(
    request: ProgramRequest | None,
    program: Program,
    settings: ReviewSettings,
    review: bool,
    author: bool,
) -> Program:
    """Run the network-backed steps against one shared client."""
    async with CompletionClient(settings) as client:
        if author and request is not None:
            program = await author_program(request, client)
        if review:
            program = await attach_reviews(program, client)
    return program


def _write_output(program: Program, output: Path | None, quiet: bool) -> None:
    if output is None:
        return
    output.write_text(dumps_program(program), encoding="utf-8")
    if not quiet:
        views.print_success(f"Program saved to {output}")


@app.command()
def generate(
    request_path: RequestOption = None,
    level: LevelOption = None,
    pull_ups: PullUpsOption = None,
    dips: DipsOption = None,
    push_ups: PushUpsOption = None,
    squats: SquatsOption = None,
    leg_raises: LegRaisesOption = None,
    burpees: BurpeesOption = None,
    muscle_ups: MuscleUpsOption = None,
    goals: GoalOption = None,
    weeks: Annotated[
        Optional[int],
        typer.Option(
            "--weeks",
            "-w",
            help=f"Program length in weeks, one of {program_weeks_supported()} (default 6)",
        ),
    ] = None,
    height_cm: Annotated[Optional[float], typer.Option("--height-cm", help="Height in cm")] = None,
    weight_kg: Annotated[Optional[float], typer.Option("--weight-kg", help="Body weight in kg")] = None,
    sport: Annotated[
        Optional[str], typer.Option("--sport", help="Main sport, if not calisthenics")
    ] = None,
    seed: Annotated[Optional[int], typer.Option("--seed", help="Variation seed")] = None,
    review: Annotated[
        bool,
        typer.Option("--review", help=f"Attach AI coach reviews (needs {API_KEY_ENV})"),
    ] = False,
    ai: Annotated[
        bool,
        typer.Option("--ai", help=f"Let the AI author the program (needs {API_KEY_ENV})"),
    ] = False,
    json_out: JsonOption = False,
    output: OutputOption = None,
) -> None:
    """
    Generate a periodized program.

    Give the athlete's max reps per movement as options or in a JSON
    request file.  The same request always produces the same program.
    """
    try:
        request = load_request(
            request_path,
            {
                "level": level,
                "goals": goals or None,
                "weeks": weeks,
                "height_cm": height_cm,
                "weight_kg": weight_kg,
                "sport": sport,
                "seed": seed,
            },
            capability_overrides(pull_ups, dips, push_ups, squats, leg_raises, burpees, muscle_ups),
        )
    except FileNotFoundError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    except ValidationError as e:
        views.print_error(f"Invalid request: {e}")
        raise typer.Exit(1)

    program = generate_program(request)

    if review or ai:
        settings = load_review_settings()
        if settings.has_api_key:
            program = asyncio.run(_enhance(request, program, settings, review=review, author=ai))
        elif not json_out:
            views.print_warning(f"{API_KEY_ENV} is not set; skipping AI features.")

    _write_output(program, output, quiet=json_out)

    if json_out:
        print(dumps_program(program))
        return

    views.print_program(program)


@app.command("review")
def review_cmd(
    program_path: Annotated[Path, typer.Argument(help="Program JSON written by 'generate --output'")],
    json_out: JsonOption = False,
    output: OutputOption = None,
) -> None:
    """
    Attach AI coach reviews to a saved program.

    Reviews are read-only commentary: no prescription is changed.
    """
    try:
        if not program_path.exists():
            raise FileNotFoundError(f"File not found: {program_path}")
        program = loads_program(program_path.read_text(encoding="utf-8"))
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    settings = load_review_settings()
    if not settings.has_api_key:
        views.print_error(f"{API_KEY_ENV} is not set.")
        raise typer.Exit(1)

    if not json_out:
        views.print_info(f"Reviewing {len(program.weeks)} weeks with {settings.model}...")
    program = asyncio.run(_enhance(None, program, settings, review=True, author=False))
    _write_output(program, output, quiet=json_out)

    if json_out:
        print(dumps_program(program))
        return

    views.print_reviews(program)
