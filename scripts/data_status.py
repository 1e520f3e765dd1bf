#!/usr/bin/env python3
"""
Achievement Data Status CLI

Reports on and maintains the stored achievement dataset.

Commands:
    stats    - Statistics over active achievements
    status   - Data status, quality grade and recommended actions
    top      - Top achievements by stored priority score
    validate - Backfill missing priority scores and active flags
    clean    - Normalize names and issuers, repair invalid dates
    export   - Export achievements to CSV

Examples:\n

    data_status.py status                      # Quality grade and actions

    data_status.py top --limit 5               # Five highest-priority achievements

    data_status.py export -o achievements.csv  # Write CSV export
"""

from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from snas.contexts.intake.loader import AchievementLoader
from snas.contexts.intake.logger import setup_intake_logger
from snas.contexts.targeting.portfolio import (
    analyze_data_status,
    generate_badge_statistics,
    get_top_achievements,
    summarize_achievements,
)
from snas.utils.achievement_store import open_store
from snas.utils.config import load_settings

app = typer.Typer(
    help="Report on and maintain stored achievement data",
    add_completion=False,
    invoke_without_command=True,
)

DbOption = Annotated[Optional[Path], typer.Option("--db", help="SQLite database path")]


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _echo_counts(title: str, counts: dict) -> None:
    typer.echo(f"\n{title}:")
    for key, count in sorted(counts.items(), key=lambda item: (-item[1], item[0])):
        typer.echo(f"  {key}: {count}")


@app.command("stats")
def stats_command(db: DbOption = None):
    """Statistics over active achievements."""
    settings = load_settings()
    store = open_store(db or settings.store.path)
    try:
        stats = generate_badge_statistics(store)
    finally:
        store.close()

    typer.echo("=== Achievement Statistics ===")
    for key in (
        "total_badges",
        "certifications",
        "achievements",
        "badges",
        "servicenow_badges",
        "recent_badges",
        "veteran_aligned",
    ):
        typer.echo(f"  {key}: {stats[key]}")
    _echo_counts("Categories", stats["categories"])
    _echo_counts("Issuers", stats["issuers"])


@app.command("status")
def status_command(db: DbOption = None):
    """Data status, quality grade and recommended actions."""
    settings = load_settings()
    store = open_store(db or settings.store.path)
    try:
        status = analyze_data_status(store)
    finally:
        store.close()

    quality = status["data_quality"]
    color = typer.colors.GREEN if quality["score"] == "HIGH" else typer.colors.YELLOW
    if quality["score"] == "CRITICAL":
        color = typer.colors.RED

    typer.echo("=== Data Status ===")
    typer.echo(f"  Total achievements: {status['total_achievements']}")
    typer.echo(f"  Recent (180 days): {status['recent_achievements']}")
    typer.echo(f"  High priority (>= 80): {status['high_priority_achievements']}")
    typer.secho(f"  Quality: {quality['score']} - {quality['message']}", fg=color)
    _echo_counts("Types", status["type_breakdown"])

    typer.echo("\nRecommended actions:")
    for action in status["recommended_actions"]:
        typer.echo(f"  [{action['priority']}] {action['action']}: {action['description']}")


@app.command("top")
def top_command(
    limit: Annotated[int, typer.Option("--limit", "-n", min=1)] = 10,
    db: DbOption = None,
):
    """Top achievements by stored (import-time) priority score."""
    settings = load_settings()
    store = open_store(db or settings.store.path)
    try:
        top = get_top_achievements(store, limit)
    finally:
        store.close()

    for rank, achievement in enumerate(top, start=1):
        typer.echo(f"{rank:>3}. [{achievement.priority_score}] {achievement.name} ({achievement.issuer})")

    summary = summarize_achievements(top)
    typer.echo(
        f"\n{summary['certifications']} certifications, {summary['achievements']} achievements, "
        f"{summary['badges']} badges; {summary['servicenow_focus']} ServiceNow, "
        f"{summary['veteran_heritage']} military heritage"
    )


@app.command("validate")
def validate_command(db: DbOption = None):
    """Backfill missing priority scores and active flags."""
    settings = load_settings()
    setup_intake_logger(None, source="validate")
    store = open_store(db or settings.store.path)
    try:
        result = AchievementLoader(store, settings).validate_and_update_existing_data()
    finally:
        store.close()

    typer.echo(f"Updated records: {result['updated_records']}")
    for error in result["errors"]:
        typer.echo(f"  ! {error}", err=True)
    if not result["success"]:
        raise typer.Exit(1)


@app.command("clean")
def clean_command(db: DbOption = None):
    """Normalize names and issuers and repair invalid dates."""
    settings = load_settings()
    setup_intake_logger(None, source="clean")
    store = open_store(db or settings.store.path)
    try:
        result = AchievementLoader(store, settings).clean_achievement_data()
    finally:
        store.close()

    typer.echo(f"Processed: {result['processed']}, cleaned: {result['cleaned']}")
    for error in result["errors"]:
        typer.echo(f"  ! {error}", err=True)
    if result["errors"]:
        raise typer.Exit(1)


@app.command("export")
def export_command(
    output: Annotated[
        Optional[Path], typer.Option("--output", "-o", help="Output file (default: stdout)")
    ] = None,
    achievement_type: Annotated[
        Optional[str], typer.Option("--type", help="Only this achievement type")
    ] = None,
    issuer: Annotated[Optional[str], typer.Option("--issuer", help="Issuer substring filter")] = None,
    db: DbOption = None,
):
    """Export achievements to CSV ordered by date earned."""
    settings = load_settings()
    store = open_store(db or settings.store.path)
    try:
        csv_text = AchievementLoader(store, settings).export_achievements_to_csv(
            type=achievement_type, issuer=issuer
        )
    finally:
        store.close()

    if output is None:
        typer.echo(csv_text, nl=False)
        return

    output.write_text(csv_text, encoding="utf-8")
    typer.secho(f"Exported to {output}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
