#!/usr/bin/env python3
"""
Achievement Import CLI

Imports achievement records into the SNAS store.

Commands:
    csv      - Import (or validate) achievements from a CSV file
    defaults - Replace stored achievements with the default portfolio dataset
    upsert   - Create or update a single achievement

Examples:\n

    import_achievements.py csv data/achievements.csv                  # Import CSV

    import_achievements.py csv data/achievements.csv --validate-only  # Dry run

    import_achievements.py csv data/achievements.csv --clear -b 25    # Replace all, batches of 25

    import_achievements.py defaults --db outs/demo.db                 # Load default dataset
"""

from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from snas.contexts.intake.loader import AchievementLoader, ImportResult
from snas.contexts.intake.logger import setup_intake_logger
from snas.utils.achievement_store import open_store
from snas.utils.config import load_settings

app = typer.Typer(
    help="Import achievement records into the SNAS store",
    add_completion=False,
    invoke_without_command=True,
)

DbOption = Annotated[
    Optional[Path],
    typer.Option("--db", help="SQLite database path (default: SNAS_DB_PATH or outs/snas.db)"),
]
LogDirOption = Annotated[
    Optional[Path],
    typer.Option("--log-dir", help="Also write a DEBUG log file to this directory"),
]


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _report(result: ImportResult) -> None:
    typer.echo("\n=== Import Summary ===")
    typer.echo(f"  Total records: {result.total_records}")
    if result.validation_only:
        typer.echo(f"  Valid records: {len(result.processed_records)}")
    else:
        typer.echo(f"  Imported: {result.successful_imports}")
        typer.echo(f"  Duplicates skipped: {result.duplicates_skipped}")
    typer.echo(f"  Failed: {result.failed_imports}")
    typer.echo(f"  Time: {result.processing_time_ms} ms")

    if result.errors:
        typer.echo(f"\n=== Errors ({len(result.errors)}) ===")
        for error in result.errors:
            typer.echo(f"  ! {error}")

    if not result.success:
        typer.secho(f"\n{result.message}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    typer.secho(f"\n{result.message}", fg=typer.colors.GREEN)


@app.command("csv")
def csv_command(
    csv_file: Annotated[Path, typer.Argument(help="CSV file with a header row")],
    validate_only: Annotated[
        bool, typer.Option("--validate-only", help="Validate and transform without writing")
    ] = False,
    clear: Annotated[
        bool, typer.Option("--clear", help="Delete all stored achievements before importing")
    ] = False,
    batch_size: Annotated[
        Optional[int],
        typer.Option("--batch-size", "-b", min=1, help="Records per batch (default: importing.batch_size)"),
    ] = None,
    db: DbOption = None,
    log_dir: LogDirOption = None,
):
    """
    Import achievements from a CSV file.

    Required columns: name, type, issuer, description, category, date_earned.
    Records that fail validation or already exist (same name and issuer) are skipped.
    """
    settings = load_settings()
    setup_intake_logger(log_dir, source=str(csv_file))

    store = open_store(db or settings.store.path)
    try:
        loader = AchievementLoader(store, settings)
        result = loader.populate_achievement_data(
            csv_file,
            clear_existing=clear,
            validate_only=validate_only,
            batch_size=batch_size,
        )
    finally:
        store.close()

    _report(result)


@app.command("defaults")
def defaults_command(db: DbOption = None, log_dir: LogDirOption = None):
    """Replace all stored achievements with the default portfolio dataset."""
    settings = load_settings()
    setup_intake_logger(log_dir, source="default_achievements.yaml")

    store = open_store(db or settings.store.path)
    try:
        result = AchievementLoader(store, settings).import_default_achievements()
    finally:
        store.close()

    _report(result)


@app.command("upsert")
def upsert_command(
    name: Annotated[str, typer.Option("--name", help="Achievement name")],
    achievement_type: Annotated[str, typer.Option("--type", help="certification, badge or achievement")],
    issuer: Annotated[str, typer.Option("--issuer", help="Issuing organization")],
    description: Annotated[str, typer.Option("--description")] = "",
    category: Annotated[str, typer.Option("--category")] = "",
    date_earned: Annotated[Optional[str], typer.Option("--date-earned", help="YYYY-MM-DD")] = None,
    db: DbOption = None,
):
    """Create an achievement, or update the one with the same name and issuer."""
    settings = load_settings()
    setup_intake_logger(None, source="upsert")

    store = open_store(db or settings.store.path)
    try:
        response = AchievementLoader(store, settings).upsert_achievement(
            {
                "name": name,
                "type": achievement_type,
                "issuer": issuer,
                "description": description,
                "category": category,
                "date_earned": date_earned,
            }
        )
    finally:
        store.close()

    if not response["success"]:
        typer.secho(f"ERROR: {response['error']}", fg=typer.colors.RED, err=True)
        for detail in response.get("details", []):
            typer.echo(f"  ! {detail}", err=True)
        raise typer.Exit(1)

    achievement = response["achievement"]
    typer.secho(
        f"{response['action'].capitalize()}: {achievement['name']} "
        f"(id {response['achievement_id']}, priority {achievement['priority_score']})",
        fg=typer.colors.GREEN,
    )


if __name__ == "__main__":
    app()
