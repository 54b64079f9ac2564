"""
DreamLog CLI - Main Entry Point

Command-line interface for the dream journal.

Usage:
    dreamlog add "I was flying over the sea" --title "Flight"   # Log a dream
    dreamlog edit <id> --tag water --tag flying                 # Edit a dream
    dreamlog import exports/*.html                              # Batch import
    dreamlog view                                               # Window unlock state
    dreamlog analyze --window past_week                         # Pattern analysis
    dreamlog search ocean                                       # Search dreams
"""

import asyncio
import dataclasses
import json
import sys
from datetime import date, datetime
from functools import wraps
from pathlib import Path
from typing import Callable, Optional

import click

from loguru import logger

from dreamlog.core.config import DreamLogConfig, PathsConfig, load_config
from dreamlog.core.exceptions import DreamLogError, DreamNotFoundError
from dreamlog.core.journal import DreamJournal
from dreamlog.core.models import Dream
from dreamlog.core.search import build_tag_cloud, search_dreams

from .formatters import (
    Colors,
    format_dream_detail,
    format_dream_table,
    format_import_result,
    format_tag_cloud,
    format_window_analyses,
    format_windows,
)

WINDOW_KEYS = ("last_night", "past_week", "past_month", "past_year")


# ============================================================================
# Journal Decorator
# ============================================================================

def with_journal(func: Callable) -> Callable:
    """
    Decorator that loads the journal from the configured stores and passes
    it to the wrapped command as ``journal``.

    Usage:
        @cli.command()
        @click.pass_context
        @with_journal
        def my_command(ctx, journal, ...other_args...):
            click.echo(len(journal))
    """
    @wraps(func)
    def wrapper(ctx, *args, **kwargs):
        journal = DreamJournal.from_config(ctx.obj["config"])
        return func(ctx, journal, *args, **kwargs)

    return wrapper


def _resolve_config(config_path: Optional[str], data_dir: Optional[str]) -> DreamLogConfig:
    config = load_config(Path(config_path) if config_path else None)
    if data_dir:
        root = Path(data_dir)
        config = dataclasses.replace(
            config,
            paths=PathsConfig(
                data_dir=str(root),
                dreams_file=str(root / "dreams.json"),
                hidden_tags_file=str(root / "hidden_tags.json"),
            ),
        )
    return config


def _as_of(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now()


def _fail(ctx, error: DreamLogError, output_json: bool, message: Optional[str] = None):
    """Report a domain error as JSON on stdout or as a click error."""
    if output_json:
        click.echo(json.dumps(error.to_dict(), indent=2))
        ctx.exit(1)
    raise click.ClickException(message or error.message)


# ============================================================================
# CLI Group and Main Entry
# ============================================================================

@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Path to config.yaml file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--data-dir",
    "-d",
    type=click.Path(),
    default=None,
    help="Data directory path (overrides paths from config)",
)
@click.pass_context
def cli(ctx, config: Optional[str], verbose: bool, data_dir: Optional[str]):
    """
    DreamLog - dream journal with AI enrichment

    Log dreams by hand or import exported HTML entries, then unlock pattern
    analyses for last night, the past week, month and year.
    """
    ctx.ensure_object(dict)

    try:
        settings = _resolve_config(config, data_dir)
    except DreamLogError as e:
        raise click.ClickException(e.message)

    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = settings

    # Configure logging
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else settings.observability.log_level)


# ============================================================================
# Collection Commands
# ============================================================================

@cli.command()
@click.argument("description", required=True)
@click.option("--title", "-t", default="", help="Dream title")
@click.option(
    "--date",
    "dream_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Dream date (YYYY-MM-DD, default today)",
)
@click.option("--tag", "tags", multiple=True, help="Tag to attach (can use multiple times)")
@click.option("--person", "people", multiple=True, help="Person in the dream (can use multiple times)")
@click.option(
    "--enrich",
    is_flag=True,
    help="Ask the enrichment provider for title, tags and people",
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
@with_journal
def add(ctx, journal: DreamJournal, description: str, title: str, dream_date: Optional[datetime],
        tags: tuple, people: tuple, enrich: bool, output_json: bool):
    """
    Log a new dream.

    Example:
        dreamlog add "I was back at school and the stairs kept moving" --tag school
    """
    from dreamlog.llm import DreamEnricher, LLMConfig

    when = dream_date.date() if dream_date else date.today()

    if enrich:
        enricher = DreamEnricher.from_config(LLMConfig.from_settings(ctx.obj["config"].enrichment))
        try:
            enrichment = asyncio.run(enricher.enrich_text(description))
        except DreamLogError as e:
            click.echo(f"Enrichment failed, saving without it: {e.message}", err=True)
        else:
            title = title or enrichment.title or ""
            tags = tuple(tags) + enrichment.tags
            people = tuple(people) + enrichment.people

    try:
        dream = Dream.create(description, when, title=title, tags=tags, people=people)
    except DreamLogError as e:
        _fail(ctx, e, output_json)

    journal.add(dream)

    if output_json:
        click.echo(json.dumps(dream.to_dict(), indent=2))
    else:
        click.echo(f"Saved dream: {dream.id}")
        click.echo(f"Title: {dream.title}")


@cli.command(name="list")
@click.option("--limit", "-n", type=int, default=None, help="Show at most N dreams")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
@with_journal
def list_dreams(ctx, journal: DreamJournal, limit: Optional[int], output_json: bool):
    """
    List dreams, newest first.
    """
    dreams = list(journal.dreams)
    if limit is not None:
        dreams = dreams[:limit]

    if output_json:
        click.echo(json.dumps([d.to_dict() for d in dreams], indent=2))
    else:
        click.echo(format_dream_table(dreams))


@cli.command()
@click.argument("dream_id", required=True)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
@with_journal
def show(ctx, journal: DreamJournal, dream_id: str, output_json: bool):
    """
    Show one dream by ID.
    """
    try:
        dream = journal.get(dream_id)
    except DreamNotFoundError as e:
        _fail(ctx, e, output_json, f"Dream not found: {dream_id}")

    if output_json:
        click.echo(json.dumps(dream.to_dict(), indent=2))
    else:
        click.echo(format_dream_detail(dream))


@cli.command()
@click.argument("dream_id", required=True)
@click.option("--description", default=None, help="Replace the description")
@click.option("--title", "-t", default=None, help="Replace the title")
@click.option(
    "--date",
    "dream_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Replace the dream date (YYYY-MM-DD)",
)
@click.option("--tag", "tags", multiple=True, help="Replace the tags (can use multiple times)")
@click.option("--person", "people", multiple=True, help="Replace the people (can use multiple times)")
@click.option("--clear-tags", is_flag=True, help="Remove all tags")
@click.option("--clear-people", is_flag=True, help="Remove all people")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
@with_journal
def edit(ctx, journal: DreamJournal, dream_id: str, description: Optional[str], title: Optional[str],
         dream_date: Optional[datetime], tags: tuple, people: tuple, clear_tags: bool,
         clear_people: bool, output_json: bool):
    """
    Edit a dream. Fields that are not given keep their current value.

    Example:
        dreamlog edit 3f2a9c4e-... --title "The Moving Stairs" --tag school --tag stairs
    """
    changes = {}
    if description is not None:
        changes["description"] = description
    if title is not None:
        changes["title"] = title
    if dream_date is not None:
        changes["date"] = dream_date.date()
    if tags or clear_tags:
        changes["tags"] = tags
    if people or clear_people:
        changes["people"] = people

    try:
        dream = journal.get(dream_id).edited(**changes)
    except DreamNotFoundError as e:
        _fail(ctx, e, output_json, f"Dream not found: {dream_id}")
    except DreamLogError as e:
        _fail(ctx, e, output_json)

    journal.update(dream)

    if output_json:
        click.echo(json.dumps(dream.to_dict(), indent=2))
    else:
        click.echo(f"Updated dream: {dream.id}")
        click.echo(f"Title: {dream.title}")


@cli.command()
@click.argument("dream_id", required=True)
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Force deletion without confirmation",
)
@click.pass_context
@with_journal
def delete(ctx, journal: DreamJournal, dream_id: str, force: bool):
    """
    Delete a dream by ID.

    Example:
        dreamlog delete 3f2a9c4e-... --force
    """
    try:
        dream = journal.get(dream_id)
    except DreamNotFoundError:
        raise click.ClickException(f"Dream not found: {dream_id}")

    if not force:
        click.echo(f"Dream to delete: {dream.title} ({dream.date.isoformat()})")
        click.confirm("Do you want to delete this dream?", abort=True)

    journal.delete(dream_id)
    click.echo(f"Deleted dream: {dream_id}")


@cli.command(name="import")
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
@with_journal
def import_cmd(ctx, journal: DreamJournal, paths: tuple, output_json: bool):
    """
    Import exported journal entries (HTML files).

    Example:
        dreamlog import exports/2024-03-01.html exports/2024-03-02.html
    """
    from dreamlog.ingest import import_files
    from dreamlog.llm import DreamEnricher, LLMConfig

    settings: DreamLogConfig = ctx.obj["config"]
    enricher = DreamEnricher.from_config(LLMConfig.from_settings(settings.enrichment))

    result = asyncio.run(import_files(journal, enricher, paths, config=settings.importer))

    if output_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        click.echo(format_import_result(result))

    if not result.success:
        ctx.exit(1)


@cli.command()
@click.argument("term", required=False, default="")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
@with_journal
def search(ctx, journal: DreamJournal, term: str, output_json: bool):
    """
    Search titles, descriptions, tags and people.

    Example:
        dreamlog search ocean
    """
    matches = search_dreams(journal.dreams, term)

    if output_json:
        click.echo(json.dumps([d.to_dict() for d in matches], indent=2))
    else:
        click.echo(format_dream_table(matches))


# ============================================================================
# Tag Commands
# ============================================================================

@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
@with_journal
def tags(ctx, journal: DreamJournal, output_json: bool):
    """
    Show the people and tags across all dreams.
    """
    cloud = build_tag_cloud(journal.dreams, journal.hidden_tags)

    if output_json:
        click.echo(json.dumps({
            "people": list(cloud.people),
            "tags": list(cloud.tags),
            "hidden": list(journal.hidden_tags),
        }, indent=2))
    else:
        click.echo(format_tag_cloud(cloud, journal.hidden_tags))


@cli.command()
@click.argument("tag", required=True)
@click.pass_context
@with_journal
def hide(ctx, journal: DreamJournal, tag: str):
    """
    Hide a tag or person from the tag cloud.
    """
    if journal.hide_tag(tag):
        click.echo(f"Hidden: {tag}")
    else:
        click.echo(f"Already hidden: {tag}")


@cli.command()
@click.argument("tag", required=True)
@click.pass_context
@with_journal
def unhide(ctx, journal: DreamJournal, tag: str):
    """
    Show a previously hidden tag again.
    """
    if journal.unhide_tag(tag):
        click.echo(f"Unhidden: {tag}")
    else:
        click.echo(f"Not hidden: {tag}")


# ============================================================================
# Insight Commands
# ============================================================================

@cli.command()
@click.option(
    "--now",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Evaluate windows as of this date (default today)",
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
@with_journal
def view(ctx, journal: DreamJournal, now: Optional[datetime], output_json: bool):
    """
    Show the time windows and which analyses are unlocked.
    """
    from dreamlog.insight import TemporalWindowEngine

    engine = TemporalWindowEngine.from_config(ctx.obj["config"].unlock)
    windows = engine.compute_windows(journal.dreams, _as_of(now))

    if output_json:
        click.echo(json.dumps(windows.to_dict(), indent=2))
    else:
        click.echo(format_windows(windows))


@cli.command()
@click.option(
    "--window",
    "-w",
    "window_key",
    type=click.Choice(WINDOW_KEYS + ("all",)),
    default="all",
    help="Window to analyze",
)
@click.option(
    "--now",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Evaluate windows as of this date (default today)",
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
@with_journal
def analyze(ctx, journal: DreamJournal, window_key: str, now: Optional[datetime], output_json: bool):
    """
    Run pattern analysis over the unlocked windows.

    Example:
        dreamlog analyze --window past_week
    """
    from dreamlog.insight import TemporalWindowEngine, analyze_windows
    from dreamlog.llm import LLMConfig, PatternAnalyzer

    settings: DreamLogConfig = ctx.obj["config"]
    engine = TemporalWindowEngine.from_config(settings.unlock)
    windows = engine.compute_windows(journal.dreams, _as_of(now))
    analyzer = PatternAnalyzer(config=LLMConfig.from_settings(settings.enrichment))

    selected = list(windows) if window_key == "all" else [windows.get(window_key)]
    analyses = asyncio.run(analyze_windows(selected, analyzer))

    if output_json:
        click.echo(json.dumps([a.to_dict() for a in analyses], indent=2))
    else:
        if not analyzer.available:
            click.echo(Colors.yellow("No enrichment provider configured; analyses will be empty."))
        click.echo(format_window_analyses(analyses))


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
