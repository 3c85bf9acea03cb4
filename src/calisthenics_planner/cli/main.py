"""
CLI entry point using Typer.

Provides commands for program generation and reference data:
- generate: Build a program (optionally AI-reviewed or AI-authored)
- review: Attach coach reviews to a saved program
- nutrition: Energy and protein targets
- skills: Which skills the athlete's maxes unlock
- materials: Equipment checklist
"""

import logging
from typing import Annotated

import typer

from .app import app
from .commands import program, reference  # noqa: F401  (registers commands)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging (retries, fallbacks)"),
    ] = False,
) -> None:
    """Periodized calisthenics program generator."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


if __name__ == "__main__":
    app()
