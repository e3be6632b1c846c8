"""CLI commands for the daily feed."""

import asyncio
import json
import logging
import sys
import uuid
import zoneinfo
from pathlib import Path

import click
import structlog

from daily_feed import __version__
from daily_feed.config.models import PipelineConfig
from daily_feed.feed import (
    FeedService,
    FeedStats,
    InvalidDateError,
    RefreshIncompleteError,
)
from daily_feed.ingest import IngestMetrics, IngestResult, create_orchestrator
from daily_feed.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
)
from daily_feed.settings import get_settings
from daily_feed.store import FeedStore, StateStoreError


logger = structlog.get_logger()

COMPONENT_CLI = "cli"


def _setup_logging(
    command: str, json_logs: bool = True, verbose: bool = False
) -> str:
    """Configure logging and bind a fresh run id.

    Returns:
        The run id.
    """
    run_id = str(uuid.uuid4())
    configure_logging(
        level=logging.DEBUG if verbose else logging.INFO, json_format=json_logs
    )
    bind_run_context(run_id)
    logger.debug("cli_command_started", component=COMPONENT_CLI, command=command)
    return run_id


def _validate_timezone(timezone: str) -> None:
    """Validate a timezone name, exit on failure."""
    try:
        zoneinfo.ZoneInfo(timezone)
    except (ValueError, zoneinfo.ZoneInfoNotFoundError):
        logger.warning("invalid_timezone", component=COMPONENT_CLI, timezone=timezone)
        click.echo(f"Error: Invalid timezone '{timezone}'", err=True)
        sys.exit(1)


def _resolve_config(
    state_path: Path | None, timezone: str | None
) -> tuple[Path, PipelineConfig]:
    """Merge command options over environment settings.

    Returns:
        Database path and pipeline configuration.
    """
    settings = get_settings()
    config = settings.to_pipeline_config(timezone=timezone)
    _validate_timezone(config.timezone)
    return state_path or Path(settings.db_path), config


def _echo_json(data: object) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Daily Hacker News feed with LLM summaries."""


@cli.command()
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=None,
    help="Number of top stories to consider (default: HN_LIMIT).",
)
@click.option(
    "--force",
    is_flag=True,
    help="Reprocess items whose record is already complete.",
)
@click.option(
    "--state",
    "state_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to SQLite state database (default: FEED_DB_PATH).",
)
@click.option(
    "--tz",
    "timezone",
    type=str,
    default=None,
    help="Timezone deciding the feed date (default: FEED_TIMEZONE).",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=True,
    help="Use JSON format for logs (default: true).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def ingest(  # noqa: PLR0913
    limit: int | None,
    force: bool,
    state_path: Path | None,
    timezone: str | None,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Fetch, summarize and score today's top stories.

    Items whose record is already complete are skipped unless --force is
    given. Exits with status 1 when the story list cannot be fetched.
    """
    run_id = _setup_logging("ingest", json_logs=json_logs, verbose=verbose)
    db_path, config = _resolve_config(state_path, timezone)

    async def _run() -> IngestResult:
        with FeedStore(db_path, run_id=run_id) as store:
            async with create_orchestrator(config, store) as orchestrator:
                return await orchestrator.run(limit=limit, force=force)

    try:
        result = asyncio.run(_run())
    except StateStoreError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    finally:
        logger.info(
            "ingest_metrics",
            component=COMPONENT_CLI,
            **IngestMetrics.get_instance().to_dict(),
        )
        clear_run_context()

    _echo_json(
        {
            "ok": result.failed == 0 and not result.aborted,
            "date": result.date,
            "ingested": result.ingested,
            "failed": result.failed,
            "skipped": result.skipped,
            "recalibrated": result.recalibrated,
            "errors": result.errors,
        }
    )
    if result.aborted:
        sys.exit(1)


@cli.command()
@click.option(
    "--date",
    "feed_date",
    type=str,
    default=None,
    help="Feed date YYYY-MM-DD (default: today).",
)
@click.option(
    "--state",
    "state_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to SQLite state database (default: FEED_DB_PATH).",
)
@click.option(
    "--tz",
    "timezone",
    type=str,
    default=None,
    help="Timezone deciding today's date (default: FEED_TIMEZONE).",
)
def feed(feed_date: str | None, state_path: Path | None, timezone: str | None) -> None:
    """Print one day's feed as JSON, highest score first."""
    _setup_logging("feed", json_logs=False)
    db_path, config = _resolve_config(state_path, timezone)

    async def _run() -> str:
        with FeedStore(db_path) as store:
            service = FeedService(store, config)
            response = await (
                service.get_feed(feed_date) if feed_date else service.get_today()
            )
            return response.model_dump_json(indent=2)

    try:
        click.echo(asyncio.run(_run()))
    except InvalidDateError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


@cli.command("refresh-until-complete")
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=None,
    help="Number of top stories per refresh (default: HN_LIMIT).",
)
@click.option(
    "--max-attempts",
    type=click.IntRange(min=1),
    default=20,
    help="Maximum refresh attempts (default: 20).",
)
@click.option(
    "--sleep-seconds",
    type=click.FloatRange(min=0),
    default=15.0,
    help="Seconds to wait between attempts (default: 15).",
)
@click.option(
    "--force",
    is_flag=True,
    help="Reprocess complete items on every refresh.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Only print the current status, do not refresh.",
)
@click.option(
    "--date",
    "feed_date",
    type=str,
    default=None,
    help="Feed date YYYY-MM-DD to check (default: today).",
)
@click.option(
    "--state",
    "state_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to SQLite state database (default: FEED_DB_PATH).",
)
@click.option(
    "--tz",
    "timezone",
    type=str,
    default=None,
    help="Timezone deciding today's date (default: FEED_TIMEZONE).",
)
def refresh_until_complete(  # noqa: PLR0913
    limit: int | None,
    max_attempts: int,
    sleep_seconds: float,
    force: bool,
    dry_run: bool,
    feed_date: str | None,
    state_path: Path | None,
    timezone: str | None,
) -> None:
    """Refresh today's feed until every item is complete."""
    run_id = _setup_logging("refresh-until-complete", json_logs=False)
    db_path, config = _resolve_config(state_path, timezone)

    def _report(attempt: int, stats: FeedStats) -> None:
        click.echo(
            f"[status] attempt={attempt}/{max_attempts} total={stats.total} "
            f"ok={stats.ok} complete={stats.complete} errors={stats.errors}"
        )

    async def _run() -> None:
        with FeedStore(db_path, run_id=run_id) as store:
            service = FeedService(store, config)
            outcome = await service.refresh_until_complete(
                max_attempts=max_attempts,
                sleep_seconds=sleep_seconds,
                limit=limit,
                force=force,
                dry_run=dry_run,
                date=feed_date,
                on_status=_report,
            )
        if outcome.complete:
            click.echo("[done] all items complete")
        else:
            click.echo("[dry-run] stop without calling refresh")

    try:
        asyncio.run(_run())
    except (InvalidDateError, RefreshIncompleteError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    finally:
        clear_run_context()


@cli.command("db-stats")
@click.option(
    "--state",
    "state_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to SQLite state database (default: FEED_DB_PATH).",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output as JSON.",
)
def db_stats(state_path: Path | None, json_output: bool) -> None:
    """Display state database statistics."""
    configure_logging(json_format=False)
    db_path = state_path or Path(get_settings().db_path)
    if not db_path.exists():
        click.echo(f"Error: database not found: {db_path}", err=True)
        sys.exit(1)

    with FeedStore(db_path) as store:
        stats = store.get_stats()
        schema_version = store.get_schema_version()

    if json_output:
        _echo_json({"schema_version": schema_version, **stats})
        return

    click.echo("State Database Statistics")
    click.echo("=" * 40)
    click.echo(f"  Schema Version: {schema_version}")
    click.echo(f"  Dates: {stats['dates']}")
    click.echo(f"  Items: {stats['items']}")
    click.echo(f"    ok: {stats['ok']}")
    click.echo(f"    error: {stats['error']}")


if __name__ == "__main__":
    cli()
