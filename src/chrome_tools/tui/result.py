"""
RESULT block display for tool outcomes.
"""

from typing import Any, Optional

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .console import ToolConsole, get_console


def print_result(
    content: str,
    *,
    success: bool = True,
    title: Optional[str] = None,
    console: Optional[ToolConsole] = None,
) -> None:
    """
    Print a RESULT block displaying a tool outcome.

    Args:
        content: The result content to display
        success: Whether the tool succeeded
        title: Custom title (overrides default "[RESULT]")
        console: Console to use (defaults to global console)
    """
    console = console or get_console()

    text = Text()
    text.append("✓ " if success else "✗ ", style="bold green" if success else "bold red")
    text.append(content)

    console.print_block(text, "result", title)


def print_error(
    error_message: str,
    *,
    error_type: Optional[str] = None,
    suggestion: Optional[str] = None,
    console: Optional[ToolConsole] = None,
) -> None:
    """
    Print an error result block.

    Args:
        error_message: The error message
        error_type: Type/category of error
        suggestion: Suggestion for resolution
        console: Console to use (defaults to global console)
    """
    console = console or get_console()

    content = Text()
    content.append("Error", style="bold red")
    if error_type:
        content.append(f" ({error_type})", style="dim red")
    content.append("\n\n")
    content.append(error_message)

    if suggestion:
        content.append("\n\n")
        content.append(suggestion, style="italic")

    panel = Panel(
        content,
        title=console.title("[RESULT]"),
        title_align="left",
        border_style="red",
        padding=(0, 1),
    )
    console.console.print(panel)


def print_data_result(
    data: dict[str, Any],
    *,
    title: Optional[str] = None,
    truncate: int = 100,
    console: Optional[ToolConsole] = None,
) -> None:
    """
    Print a result containing structured data as a field/value table.

    Args:
        data: Dictionary of data to display
        title: Custom title
        truncate: Max characters per value (0 for no truncation)
        console: Console to use (defaults to global console)
    """
    console = console or get_console()

    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Field", style="dim")
    table.add_column("Value")

    for key, value in data.items():
        str_value = str(value)
        if truncate > 0 and len(str_value) > truncate:
            str_value = str_value[: truncate - 3] + "..."
        table.add_row(key, str_value)

    console.print_block(table, "result", title)


def print_search_results(
    rows: list[dict[str, Any]],
    columns: list[str],
    *,
    title: Optional[str] = None,
    console: Optional[ToolConsole] = None,
) -> None:
    """
    Print search or news results as a table, one row per result.

    Args:
        rows: Result records
        columns: Record keys to show, in order
        title: Custom title
        console: Console to use (defaults to global console)
    """
    console = console or get_console()

    table = Table(show_header=True, header_style="bold", box=None)
    for column in columns:
        table.add_column(column.capitalize(), overflow="fold")

    for row in rows:
        table.add_row(*(str(row.get(column, "")) for column in columns))

    if not rows:
        console.print_block(Text("No results", style="dim"), "result", title)
        return

    console.print_block(table, "result", title)


def print_extracted_text(
    text: str,
    *,
    source: Optional[str] = None,
    truncate: int = 2000,
    console: Optional[ToolConsole] = None,
) -> None:
    """
    Print extracted text content from a page.

    Args:
        text: The extracted text
        source: Source description (e.g., matched selector)
        truncate: Max characters to display (0 for no truncation)
        console: Console to use (defaults to global console)
    """
    console = console or get_console()

    content = Text()
    content.append("Extracted Text", style="bold")
    if source:
        content.append(f" from {source}", style="dim")
    content.append("\n\n")

    display_text = text
    if truncate > 0 and len(text) > truncate:
        display_text = text[:truncate] + f"... ({len(text) - truncate} more chars)"
    content.append(display_text)

    console.print_block(content, "result")
