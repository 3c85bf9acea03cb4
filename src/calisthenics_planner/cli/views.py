"""
Rich console views for the CLI.

Formats programs, nutrition plans and reference tables for terminal
display.  All output goes through the shared ``console``.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.config import GOAL_LABELS
from ..core.models import CapabilityVector, Day, NutritionPlan, Program, Week

console = Console()


def format_day_table(day: Day) -> Table:
    """
    Create a Rich table for one training day.

    Args:
        day: Day to display

    Returns:
        Rich Table object
    """
    title = f"Day {day.day_number}: {escape(day.focus)}"
    if day.methods:
        title += f"  [dim]({', '.join(day.methods)})[/dim]"
    table = Table(title=title, title_justify="left", show_lines=True)

    table.add_column("Exercise", style="cyan", max_width=34)
    table.add_column("Sets / reps", max_width=48)
    table.add_column("Rest", style="magenta", max_width=26)
    table.add_column("Note", style="dim", max_width=40)

    for ex in day.exercises:
        name = escape(ex.name)
        if ex.duration:
            name += f"\n[dim]{ex.duration}[/dim]"
        table.add_row(name, escape(ex.sets), escape(ex.rest), escape(ex.note))

    return table


def format_schedule(week: Week) -> str:
    """One-line Mon–Sun calendar: training slots by day number, rest dimmed."""
    cells = []
    for slot in week.schedule:
        short = slot.day_label[:3]
        if slot.is_rest:
            cells.append(f"[dim]{short}: Rest[/dim]")
        else:
            cells.append(f"{short}: D{slot.day_number}")
    return "  ".join(cells)


def print_week(week: Week, review: str | None = None) -> None:
    color = week.intensity_color
    console.print()
    console.print(
        f"[bold]Week {week.week_number}[/bold]  [{color}]{week.intensity_label}[/{color}]"
    )
    console.print(format_schedule(week))
    for day in week.days:
        console.print(format_day_table(day))
        if day.coaching_note:
            console.print(f"[italic]{escape(day.coaching_note)}[/italic]")
    if review:
        console.print(f"\n[bold]Coach review[/bold]\n{escape(review)}")


def print_program(program: Program) -> None:
    """
    Print a full program: header, every week, then nutrition.

    Args:
        program: Program to display
    """
    goals = ", ".join(GOAL_LABELS.get(g, g) for g in program.goals) or "General fitness"
    console.print(
        f"[bold]{len(program.weeks)}-week program[/bold]  "
        f"level: [cyan]{program.level}[/cyan]  goals: [cyan]{goals}[/cyan]"
    )
    if program.sport:
        console.print(f"Main sport: {escape(program.sport)}")
    console.print(program.week_description)

    reviews = program.coach_review or {}
    for week in program.weeks:
        print_week(week, reviews.get(week.week_number))

    console.print()
    print_nutrition(program.nutrition)


def print_reviews(program: Program) -> None:
    """Print only the per-week coach reviews."""
    if not program.coach_review:
        console.print("[yellow]No coach reviews attached.[/yellow]")
        return
    for week_number in sorted(program.coach_review):
        console.print(f"\n[bold]Week {week_number}[/bold]")
        console.print(escape(program.coach_review[week_number]))


def print_nutrition(plan: NutritionPlan) -> None:
    """
    Print nutrition targets and sample meals.

    Args:
        plan: NutritionPlan to display
    """
    console.print("[bold]Nutrition[/bold]")
    if plan.is_insufficient:
        console.print(f"[yellow]{plan.note}[/yellow]")
        return

    console.print(f"- Basal rate: {plan.bmr} kcal")
    console.print(f"- Daily energy: {plan.total_energy} kcal")
    console.print(f"- Protein: {plan.protein_grams} g")
    console.print(plan.note)

    if not plan.sample_meals:
        return

    table = Table(title="Sample day", title_justify="left")
    table.add_column("Time", style="cyan")
    table.add_column("Meal", style="magenta")
    table.add_column("Foods")
    table.add_column("kcal", justify="right")
    table.add_column("Protein (g)", justify="right", style="bold")

    for meal in plan.sample_meals:
        foods = "\n".join(f"{f.name} ({f.qty})" for f in meal.foods)
        table.add_row(meal.time, meal.name, foods, str(meal.kcal), str(meal.protein))

    console.print(table)


def print_skills(rows: list[dict], capability: CapabilityVector) -> None:
    table = Table(title="Skill gates")
    table.add_column("Skill", style="cyan")
    table.add_column("Requires")
    table.add_column("Unlocked", justify="center")

    for row in rows:
        requires = ", ".join(
            f"{movement.replace('_', ' ')} {minimum} (you: {capability.get(movement)})"
            for movement, minimum in row["requires"].items()
        )
        mark = "[green]yes[/green]" if row["unlocked"] else "[red]no[/red]"
        table.add_row(row["skill"].replace("_", " "), requires, mark)

    console.print(table)


def print_materials(items: list[dict[str, str]]) -> None:
    table = Table(title="Materials")
    table.add_column("Equipment", style="cyan")
    table.add_column("Used for")
    for item in items:
        table.add_row(item["name"], item["use"])
    console.print(table)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")
