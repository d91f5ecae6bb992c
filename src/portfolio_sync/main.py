# ABOUTME: Main CLI application entry point using asyncclick for native async support
# ABOUTME: Provides commands to sync Notion content, inspect the cache, and show logging status

from pathlib import Path

import asyncclick as click
from rich.console import Console

from portfolio_sync.config import get_config
from portfolio_sync.core.pipeline import SyncError, SyncPipeline
from portfolio_sync.persistence import ContentStore
from portfolio_sync.utils.logging import (
    LoggingMode,
    configure_logging,
    create_smart_progress,
    get_logging_status,
    with_pipeline_context,
)
from portfolio_sync.utils.rich_tables import (
    create_content_status_table,
    create_logging_status_table,
    create_sync_summary_table,
    print_rich_table,
)

console = Console()


@click.command()
@click.option("--cache-dir", type=click.Path(path_type=Path), help="Override the JSON output directory")
@click.option("--assets-dir", type=click.Path(path_type=Path), help="Override the downloaded assets directory")
@click.pass_context
async def sync(ctx, cache_dir: Path | None, assets_dir: Path | None):
    """
    🔄 Fetch every Notion collection and rewrite the content cache.

    Without Notion credentials, writes empty placeholder documents instead.
    """
    json_output = ctx.obj["json_output"]
    config = get_config()
    overrides = {key: value for key, value in {"cache_dir": cache_dir, "assets_dir": assets_dir}.items() if value}
    if overrides:
        config = config.model_copy(update=overrides)

    with with_pipeline_context("notion_sync", cache_dir=str(config.cache_dir)) as logger:
        logger.info("Starting sync")
        try:
            if json_output:
                result = await SyncPipeline(config=config).run()
            else:
                progress, _, tracker = create_smart_progress(console)
                with progress:
                    result = await SyncPipeline(config=config, on_stage=tracker.update).run()
        except SyncError as e:
            logger.error("Sync failed", error=str(e))
            if not json_output:
                console.print(f"[red]❌ {e}[/red]")
            ctx.exit(1)

        logger.info("Sync finished", placeholder=result.placeholder, **result.counts)

        if not json_output:
            if result.placeholder:
                console.print("[yellow]Notion credentials not configured, wrote placeholder cache files.[/yellow]")
            print_rich_table(console, create_sync_summary_table(result))


@click.command()
@click.option("--cache-dir", type=click.Path(path_type=Path), help="Cache directory to inspect")
async def status(cache_dir: Path | None):
    """
    📦 Show what the current content cache contains.
    """
    store = ContentStore.load(cache_dir or get_config().cache_dir)
    if store.meta is None:
        console.print("[yellow]No content cache found. Run `portfolio-sync sync` first.[/yellow]")
        return

    console.print(f"🕒 Built {store.meta.build_time} (schema {store.meta.schema_version})")
    if store.meta.placeholder:
        console.print("[yellow]Cache holds placeholder data.[/yellow]")
    print_rich_table(console, create_content_status_table(store))


@click.command(name="logging-status")
def logging_status():
    """
    📊 Show current logging configuration and status.
    """
    status = get_logging_status()
    logging_table = create_logging_status_table(status)
    print_rich_table(console, logging_table)


def _initialize_logging(json_output: bool, log_level: str | None = None, log_file: str | None = None) -> None:
    """Initialize logging configuration."""
    config = get_config()
    mode = LoggingMode.PRODUCTION if json_output else LoggingMode.INTERACTIVE

    # Use config defaults when CLI parameters are not provided
    final_log_level = log_level or config.log_level
    final_log_file = log_file or (str(config.log_file) if config.log_file else None)

    configure_logging(mode=mode, log_level=final_log_level, log_file=final_log_file)


@click.group(invoke_without_command=True)
@click.option("--json", is_flag=True, help="Output structured JSON logs instead of rich interface")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--log-file", help="Custom log file path")
@click.pass_context
def app(ctx, json: bool, log_level: str | None, log_file: str | None):
    """
    📚 Portfolio Sync - Notion content for the portfolio site

    Normalize organizations, involvements, projects and skills from Notion
    into the JSON documents the site build reads.
    """
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json

    # Initialize logging once here instead of in each command
    _initialize_logging(json, log_level, log_file)

    # Show help if no command provided
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


app.add_command(sync)
app.add_command(status)
app.add_command(logging_status)


if __name__ == "__main__":
    app()
