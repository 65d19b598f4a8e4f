# ABOUTME: CLI that analyzes a student CSV and prints personas, statistics, and insights.
# ABOUTME: Optionally scores through the prediction service and writes a JSON report.

import logging
from pathlib import Path

import pandas as pd
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from src.persona_engine.config import load_prediction_config
from src.persona_engine.personas import PERSONA_RULES, PERSONAS, DEFAULT_PERSONA
from src.persona_engine.pipeline import build_client, run_analysis
from src.persona_engine.schemas import records_from_frame
from src.persona_engine.scoring import round_tenth_half_up

console = Console()
app = typer.Typer(help="Classify students into learning personas and summarize cohort performance.")

PERSONA_COLORS = {
    "High Achiever": "green",
    "Steady Learner": "blue",
    "Inconsistent Performer": "yellow",
    "Needs Support": "red",
}


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command()
def analyze(
    input_path: Path = typer.Option(..., "--input", help="CSV of student records (current or legacy columns)."),
    config: Path = typer.Option(None, "--config", help="YAML with a prediction_service section."),
    remote: bool = typer.Option(True, "--remote/--local", help="Use the prediction service when configured."),
    output: Path = typer.Option(None, "--output", help="Optional path for the JSON report."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Python logging level."),
) -> None:
    """
    Score, classify, and summarize every student in the CSV.
    """
    _configure_logging(log_level)

    if not input_path.exists():
        console.print(f"[red]Missing input CSV at {input_path}[/red]")
        raise typer.Exit(code=1)

    df = pd.read_csv(input_path, dtype={"name": str, "student_id": str})
    try:
        records = records_from_frame(df)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    try:
        prediction_config = load_prediction_config(config)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    client = build_client(prediction_config) if remote else None
    result = run_analysis(records, client=client)

    console.rule("[bold blue]Student Persona Report[/bold blue]")
    stats = result.statistics
    console.print(f"[bold]Students:[/] {stats.total_students}")
    console.print(
        f"[bold]Averages:[/] comprehension {round_tenth_half_up(stats.average_comprehension):.1f}, "
        f"focus {round_tenth_half_up(stats.average_focus):.1f}, "
        f"retention {round_tenth_half_up(stats.average_retention):.1f}, "
        f"attention {round_tenth_half_up(stats.average_attention):.1f}, "
        f"assessment {round_tenth_half_up(stats.average_assessment_score):.1f}"
    )
    if stats.top_performer is not None:
        console.print(f"[bold]Top performer:[/] {stats.top_performer.name}")
        console.print(f"[bold]Lowest performer:[/] {stats.lowest_performer.name}")

    console.print()
    student_table = Table(show_header=True, header_style="bold magenta")
    student_table.add_column("Name")
    student_table.add_column("Score")
    student_table.add_column("Persona")
    for student in result.students:
        persona = student.persona.type.value
        color = PERSONA_COLORS.get(persona, "white")
        student_table.add_row(student.name, f"{student.assessment_score:g}", f"[{color}]{persona}[/{color}]")
    console.print(student_table)

    if result.persona_breakdown:
        console.print()
        console.print("[bold green]Persona Distribution[/bold green]")
        breakdown_table = Table(show_header=True, header_style="bold magenta")
        breakdown_table.add_column("Persona")
        breakdown_table.add_column("Students")
        breakdown_table.add_column("Share")
        breakdown_table.add_column("Avg Score")
        for row in result.persona_breakdown:
            avg = "-" if row["average_score"] is None else str(row["average_score"])
            breakdown_table.add_row(row["persona"], str(row["count"]), f"{row['percentage']}%", avg)
        console.print(breakdown_table)

    insights = result.insights
    console.print()
    console.print("[bold yellow]Trends[/bold yellow]")
    for trend in insights.trends:
        console.print(f"  • {trend}")
    console.print("[bold yellow]Outliers[/bold yellow]")
    for student in insights.outliers:
        console.print(f"  • {student.name} ({student.assessment_score:g})")
    console.print("[bold yellow]Recommendations[/bold yellow]")
    for rec in insights.recommendations:
        console.print(f"  → {rec}")

    console.print()
    corr_table = Table(show_header=True, header_style="bold magenta")
    corr_table.add_column("Pair")
    corr_table.add_column("Pearson r")
    for pair, value in insights.correlations.to_dict().items():
        corr_table.add_row(pair.replace("_", " / "), f"{value:.3f}")
    console.print(corr_table)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.to_json())
        console.print(f"[bold]Report saved to {output}[/bold]")


@app.command()
def personas() -> None:
    """
    List personas in the order their rules are evaluated.
    """
    order = [persona_type for _, persona_type in PERSONA_RULES] + [DEFAULT_PERSONA]
    for rank, persona_type in enumerate(order, 1):
        persona = PERSONAS[persona_type]
        color = PERSONA_COLORS.get(persona_type.value, "white")
        console.print(f"{rank}. [{color}]{persona_type.value}[/{color}]: {persona.description}")
        for rec in persona.recommendations:
            console.print(f"     → {rec}")


if __name__ == "__main__":
    app()
