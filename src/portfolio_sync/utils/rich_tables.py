# ABOUTME: Rich table utilities for the sync CLI
# ABOUTME: Provides pre-configured table generators for sync summaries and cache status

from typing import Any

from rich.box import ROUNDED, SIMPLE
from rich.console import Console
from rich.table import Table


def create_key_value_table(
    title: str,
    data: dict[str, str],
    title_style: str = "bold cyan",
    key_style: str = "bold blue",
    value_style: str = "green",
    box_style=ROUNDED,
) -> Table:
    """Create a two-column key-value table.

    Args:
        title: Table title with emoji/styling
        data: Dictionary of key-value pairs to display
        title_style: Style for the table title
        key_style: Style for the key column
        value_style: Style for the value column
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style="bold magenta",
        border_style="cyan",
        title_justify="left",
        expand=False,
    )

    table.add_column("Field", style=key_style, width=None, no_wrap=False)
    table.add_column("Value", style=value_style, width=None, no_wrap=False)

    for key, value in data.items():
        table.add_row(key, str(value))

    return table


def create_multi_column_table(
    title: str,
    columns: list[tuple[str, str]],
    rows: list[list[str]],
    title_style: str = "bold cyan",
    header_style: str = "bold magenta",
    alternate_row_styles: list[str] | None = None,
    box_style=ROUNDED,
) -> Table:
    """Create a multi-column table with zebra striping.

    Args:
        title: Table title with emoji/styling
        columns: List of (column_name, column_style) tuples
        rows: List of row data
        title_style: Style for the table title
        header_style: Style for column headers
        alternate_row_styles: Alternating row styles for zebra striping
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style=header_style,
        border_style="cyan",
        title_justify="left",
        row_styles=alternate_row_styles or ["", "dim"],
        expand=True,
    )

    for name, style in columns:
        table.add_column(name, style=style)

    for row in rows:
        table.add_row(*row)

    return table


def create_sync_summary_table(result: Any) -> Table:
    """Summarize a finished sync run.

    Args:
        result: SyncResult returned by the pipeline

    Returns:
        Summary table with per-collection counts
    """
    summary_data = {f"📚 {name.title()}": str(count) for name, count in result.counts.items()}
    summary_data["🕒 Build Time"] = result.meta.build_time
    summary_data["🏷️ Schema"] = result.meta.schema_version

    if result.placeholder:
        summary_data["⚠️ Mode"] = "Placeholder (no Notion credentials)"
    else:
        summary_data["🌐 Notion Requests"] = str(result.requests_made)
        summary_data["🖼️ Assets Downloaded"] = str(result.assets_downloaded)
        if result.asset_failures:
            summary_data["🚨 Asset Failures"] = str(result.asset_failures)

    return create_key_value_table(
        title="🔄 Sync Summary",
        data=summary_data,
        title_style="bold green",
        key_style="cyan",
        value_style="white",
        box_style=SIMPLE,
    )


def create_content_status_table(store: Any) -> Table:
    """List every cached entity with its share path.

    Args:
        store: ContentStore loaded from the cache directory

    Returns:
        Multi-column table of cached entities
    """
    rows = []
    for collection in (store.organizations, store.involvements, store.projects, store.skills):
        for entity in collection.all:
            title = getattr(entity, "name", None) or getattr(entity, "title", "")
            rows.append([type(entity).__name__, title, entity.share_path])

    return create_multi_column_table(
        title="📦 Cached Content",
        columns=[("Kind", "bold blue"), ("Title", "white"), ("Share Path", "green")],
        rows=rows,
    )


def create_logging_status_table(status: dict[str, Any]) -> Table:
    """Create a logging configuration status table.

    Args:
        status: Logging status dictionary

    Returns:
        Styled logging configuration table
    """
    logging_data = {
        "🔧 Mode": status["mode"].title(),
        "📁 Log Directory": status["log_directory"] or "N/A (production mode)",
        "🔇 Suppressed Libraries": ", ".join(status["third_party_suppressed"]),
    }

    if status["log_files"]["main"]:
        logging_data["📝 Main Log"] = status["log_files"]["main"]
    if status["log_files"]["json"]:
        logging_data["📊 JSON Log"] = status["log_files"]["json"]
    if status["log_files"]["errors"]:
        logging_data["🚨 Error Log"] = status["log_files"]["errors"]

    return create_key_value_table(
        title="🔍 Logging Configuration",
        data=logging_data,
        title_style="bold green",
        key_style="blue",
        value_style="white",
    )


def print_rich_table(console: Console, table: Table) -> None:
    """Print a rich table with consistent spacing and style.

    Args:
        console: Rich console instance
        table: Configured table to print
    """
    console.print()  # Add spacing before
    console.print(table)
    console.print()  # Add spacing after
