"""
Rendering functions for gitplumb output.

This module handles all pretty-printing and table formatting.
Core functions return data, this module makes it human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box
from rich.markup import escape
from typing import List, Dict, Any, Optional

console = Console()


def render_table(headers: List[str], rows: List[List[Any]], title: Optional[str] = None) -> None:
    """
    Render a generic table with the given headers and rows.

    Args:
        headers: List of column headers
        rows: List of rows, where each row is a list of values
        title: Optional table title
    """
    if not rows:
        console.print("[yellow]No data to display.[/yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    for header in headers:
        table.add_column(header)

    for row in rows:
        table.add_row(*[str(val) for val in row])

    console.print(table)


def render_objects_table(objects: List[Dict[str, Any]]) -> None:
    """
    Render loose objects as a table.

    Args:
        objects: Dictionaries from TypedObject.to_dict(), or hash and error
            entries for objects that could not be read
    """
    if not objects:
        console.print("[yellow]No objects found.[/yellow]")
        return

    rows = []
    for obj in objects:
        if 'error' in obj:
            rows.append([obj['hash'], "[red]corrupt[/red]", escape(obj['error'])])
        else:
            rows.append([obj['hash'], obj['kind'], obj['size']])
    render_table(["Hash", "Kind", "Size"], rows, title=f"{len(objects)} loose objects")


def render_settings(settings: Dict[str, Any]) -> None:
    """Render a settings dictionary as a key/value table."""
    rows = []
    for section, values in settings.items():
        for key, value in values.items():
            rows.append([f"{section}.{key}", value])
    render_table(["Option", "Value"], rows, title="Settings")
