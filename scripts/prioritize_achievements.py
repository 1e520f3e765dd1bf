#!/usr/bin/env python3
"""
Prioritize stored achievements for a target audience.

Usage:
    python scripts/prioritize_achievements.py --audience it_recruiters
    python scripts/prioritize_achievements.py -a veteran_community --limit 5 --reasoning
"""

import json
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from snas.contexts.targeting.audience import Audience
from snas.contexts.targeting.logger import setup_targeting_logger
from snas.contexts.targeting.prioritizer import AchievementPrioritizer
from snas.utils.achievement_store import open_store
from snas.utils.config import load_settings

app = typer.Typer(help="Rank stored achievements for a target audience.", add_completion=False)


@app.command()
def main(
    audience: Annotated[
        Optional[Audience], typer.Option("--audience", "-a", help="Target audience")
    ] = None,
    limit: Annotated[int, typer.Option("--limit", "-n", min=1, help="Number of achievements shown")] = 10,
    reasoning: Annotated[bool, typer.Option("--reasoning", help="Show scoring reasoning")] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the full JSON response")] = False,
    db: Annotated[Optional[Path], typer.Option("--db", help="SQLite database path")] = None,
):
    """Score active achievements with the live formula and print the ranking."""
    settings = load_settings()
    setup_targeting_logger(None, audience=audience.value if audience else "default")

    store = open_store(db or settings.store.path)
    try:
        achievements = store.query(active=True)
    finally:
        store.close()

    if not achievements:
        typer.echo("No active achievements found. Import some with import_achievements.py first.", err=True)
        raise typer.Exit(1)

    context = {"target_audience": audience.value} if audience else {}
    response = AchievementPrioritizer(settings).prioritize_badges({"source": "cli"}, achievements, context)

    if not response["success"]:
        typer.secho(f"ERROR: {response['error']}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(response, indent=2, default=str))
        return

    typer.echo(f"\n=== Top {min(limit, len(response['badges']))} of {len(response['badges'])} ===")
    for rank, badge in enumerate(response["badges"][:limit], start=1):
        data = badge["badge_data"]
        typer.echo(
            f"{rank:>3}. [{badge['priority_score']:>3}] {data['name']} "
            f"({data['issuer']}, {badge['display_weight']})"
        )
        if reasoning:
            for line in badge.get("reasoning", []):
                typer.echo(f"         - {line}")

    status = "within SLA" if response["metadata"]["sla_compliant"] else "SLA exceeded"
    typer.echo(f"\nProcessed in {response['processing_time_ms']} ms ({status})")


if __name__ == "__main__":
    app()
