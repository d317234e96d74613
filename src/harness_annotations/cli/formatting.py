"""Rich formatting helpers for the annotations CLI.

Human-facing output goes through Rich, which auto-detects TTY and
degrades gracefully when piped. Machine-facing JSON is written with
click.echo by the commands themselves.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from harness_annotations.models.annotations import AnnotationRecord, StoreEnvelope

WARNING_PREFIX = "[ANN_CLI] warning: "

_STYLE_COLORS = {
    "info": "blue",
    "success": "green",
    "warning": "yellow",
    "error": "red",
}


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def get_error_console() -> Console:
    """Console bound to stderr, for diagnostics."""
    return Console(stderr=True)


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False, soft_wrap=True)


def format_warning(message: str, console: Console) -> None:
    """Display a non-fatal warning with the pipeline-log prefix."""
    console.print(
        Text.assemble((WARNING_PREFIX, "yellow"), message),
        highlight=False,
        soft_wrap=True,
    )


def _first_line(text: str) -> str:
    return text.splitlines()[0] if text else ""


def format_annotations_table(envelope: StoreEnvelope, console: Console) -> None:
    """Display all annotations in a compact table."""
    if not envelope.annotations:
        console.print("[dim]No annotations.[/dim]")
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Context", style="cyan")
    table.add_column("Mode", style="dim")
    table.add_column("Style")
    table.add_column("Priority", justify="right", style="green")
    table.add_column("Updated", style="dim")
    table.add_column("Summary")

    for record in envelope.annotations:
        color = _STYLE_COLORS.get(record.style)
        style_cell = Text(record.style, style=color) if color else Text(record.style)
        table.add_row(
            Text(record.context_name),
            record.mode,
            style_cell,
            str(record.priority),
            record.timestamp,
            Text(_first_line(record.summary)),
        )

    if envelope.plan_execution_id:
        table.caption = f"execution {escape(envelope.plan_execution_id)}"
    console.print(table)


def format_annotation_detail(record: AnnotationRecord, console: Console) -> None:
    """Display one annotation with its full summary."""
    console.print(f"[cyan]context {escape(record.context_name)}[/cyan]")
    console.print(f"  Mode:      {escape(record.mode)}")
    console.print(f"  Style:     {escape(record.style)}")
    console.print(f"  Priority:  [green]{record.priority}[/green]")
    console.print(f"  Updated:   {escape(record.timestamp)}")
    if record.summary_source_path:
        console.print(f"  Source:    {escape(record.summary_source_path)}")
    if record.summary:
        console.print()
        console.print(Text(record.summary), soft_wrap=True)
