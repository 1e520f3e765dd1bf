#!/usr/bin/env python3
"""
Generate content suggestions for a stored achievement.

Uses the AI backend when SNAS_AI_API_KEY is set, otherwise the fallback templates.

Usage:
    python scripts/generate_content.py <achievement_id>
    python scripts/generate_content.py <achievement_id> --type badge_description -a veteran_community
"""

from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from snas.contexts.content.generator import ContentGenerator
from snas.contexts.content.logger import setup_content_logger
from snas.contexts.targeting.audience import Audience, ContentType
from snas.utils.achievement_store import open_store
from snas.utils.cache import SQLiteCache
from snas.utils.config import load_settings

app = typer.Typer(help="Generate content suggestions for an achievement.", add_completion=False)


@app.command()
def main(
    achievement_id: Annotated[str, typer.Argument(help="Stored achievement id")],
    content_type: Annotated[
        ContentType, typer.Option("--type", "-t", help="Content type")
    ] = ContentType.LINKEDIN_POST,
    audience: Annotated[
        Optional[Audience], typer.Option("--audience", "-a", help="Target audience")
    ] = None,
    variants: Annotated[int, typer.Option("--variants", "-n", min=1, max=3)] = 3,
    db: Annotated[Optional[Path], typer.Option("--db", help="SQLite database path")] = None,
):
    """Print content suggestions with their confidence scores."""
    settings = load_settings()
    setup_content_logger(None, ai_enabled=settings.ai_enabled)

    store = open_store(db or settings.store.path)
    cache = SQLiteCache(Path(settings.cache.path)) if settings.cache.path else None
    try:
        generator = ContentGenerator(settings, cache=cache, store=store)
        context = {"target_audience": audience.value} if audience else {}
        response = generator.generate_for_id(achievement_id, content_type, context, max_variants=variants)
    finally:
        store.close()
        if cache is not None:
            cache.close()

    if not response["success"]:
        typer.secho(
            f"ERROR ({response['status_code']}): {response['error']}", fg=typer.colors.RED, err=True
        )
        raise typer.Exit(1)

    for index, suggestion in enumerate(response["suggestions"], start=1):
        typer.echo(f"\n=== Suggestion {index}: {suggestion['style']} (confidence {suggestion['confidence']:.2f}) ===")
        typer.echo(suggestion["content"])

    metadata = response["performance_metadata"]
    typer.echo(
        f"\nSource: {metadata['api_source']}, cache hit: {metadata['cache_hit']}, "
        f"{response['processing_time_ms']} ms"
    )


if __name__ == "__main__":
    app()
