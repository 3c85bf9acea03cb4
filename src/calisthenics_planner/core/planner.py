"""
Program assembly for calisthenics-planner.

Composes weeks from the scheduler using a fixed intensity curve per
program length, attaches the weekly calendar and nutrition block, and
stitches two 6-week blocks together for 12-week programs.  Generation is
pure: identical requests produce identical programs.
"""

from .config import (
    BLOCK_WEEKS,
    SECOND_BLOCK_SEED_OFFSET,
    SUPPORTED_PROGRAM_WEEKS,
    WEEK_DESCRIPTION_4,
    WEEK_DESCRIPTION_5,
)
from .models import Program, ProgramRequest, Week, WeekSetting
from .nutrition import calculate_nutrition
from .scheduler import DAYS_PER_WEEK, build_week

# =============================================================================
# INTENSITY CURVES
# =============================================================================

# Week 1 friendly, weeks 2-3 build, week 4 peak, weeks 5-6 deload/taper
CURVE_6_WEEKS: tuple[WeekSetting, ...] = (
    WeekSetting(0.50, 0.50, "intro", "green", "Low – Introduction"),
    WeekSetting(0.60, 0.60, "build", "yellow", "Moderate – Build"),
    WeekSetting(0.72, 0.72, "build", "yellow", "Moderate – Build"),
    WeekSetting(0.82, 0.82, "peak", "red", "High – Peak"),
    WeekSetting(0.60, 0.60, "deload", "green", "Low – Deload"),
    WeekSetting(0.50, 0.50, "taper", "green", "Low – Taper"),
)

# Volume, density, unbroken, competition.  Colours and labels follow the
# 6-week legend: green is Low, yellow Moderate, red High.
CURVE_4_WEEKS: tuple[WeekSetting, ...] = (
    WeekSetting(0.62, 0.60, "volume", "yellow", "Moderate – Volume"),
    WeekSetting(0.70, 0.72, "density", "yellow", "Moderate – Density"),
    WeekSetting(0.82, 0.85, "unbroken", "red", "High – Unbroken"),
    WeekSetting(0.95, 0.93, "competition", "red", "High – Competition"),
)


def program_weeks_supported() -> tuple[int, ...]:
    """Program lengths the assembler can build."""
    return SUPPORTED_PROGRAM_WEEKS


def intensity_curve(weeks: int) -> tuple[WeekSetting, ...]:
    """
    Week settings for a program length.

    12 weeks repeats the 6-week curve twice.
    """
    if weeks == 4:
        return CURVE_4_WEEKS
    if weeks == 6:
        return CURVE_6_WEEKS
    if weeks == 12:
        return CURVE_6_WEEKS * 2
    raise ValueError(f"Unsupported program length: {weeks} weeks")


def _build_block(
    request: ProgramRequest,
    curve: tuple[WeekSetting, ...],
    seed: int,
    week_offset: int,
    retest: bool,
) -> list[Week]:
    capability = request.capability.for_level(request.level)
    block_length = len(curve)
    weeks = []
    for i, setting in enumerate(curve, start=1):
        weeks.append(
            build_week(
                week_number=week_offset + i,
                block_length=block_length,
                setting=setting,
                level=request.level,
                capability=capability,
                goals=request.goals,
                seed=seed,
                final_week=retest and i == block_length,
                sport=request.sport,
            )
        )
    return weeks


def generate_program(request: ProgramRequest) -> Program:
    """
    Generate a complete program.

    Args:
        request: Validated generation input

    Returns:
        Program with weeks, calendar and nutrition block.  The capability
        snapshot has muscle-ups zeroed for beginners.
    """
    capability = request.capability.for_level(request.level)

    if request.weeks == 4:
        weeks = _build_block(request, CURVE_4_WEEKS, request.seed, 0, retest=False)
        description = WEEK_DESCRIPTION_4
    else:
        weeks = []
        blocks = request.weeks // BLOCK_WEEKS
        for b in range(blocks):
            weeks += _build_block(
                request,
                CURVE_6_WEEKS,
                seed=request.seed + b * SECOND_BLOCK_SEED_OFFSET,
                week_offset=b * BLOCK_WEEKS,
                retest=b == blocks - 1,
            )
        description = WEEK_DESCRIPTION_5

    return Program(
        level=request.level,
        capability=capability,
        weeks=tuple(weeks),
        nutrition=calculate_nutrition(
            request.height_cm,
            request.weight_kg,
            request.goals,
            training_days=DAYS_PER_WEEK[4 if request.weeks == 4 else BLOCK_WEEKS],
        ),
        goals=request.goals,
        week_description=description,
        sport=request.sport,
    )
