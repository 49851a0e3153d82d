"""
clitree table printer for handlers that report structured output.

Layout (plain)
    NAME   STATUS
    -------------
    api    running
    db     stopped

- Each column is as wide as its longest header or cell plus a fixed padding.
- The separator fills every column's full width with dashes.
- Cells are rendered with str() and left-aligned. Tabs are expanded before
  measuring, so widths match what the terminal shows. Rows are not checked against
  the header: short rows just stop early, long rows get extra columns sized from
  their own cells.

Layout (fancy)
- The same headers and rows drawn as a rich Table with a rounded box.
"""
from rich.box import ROUNDED
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .utils import *


PADDING = 2


def format_table(headers, rows, /, *, padding=PADDING):
    """
    Return the plain table as a list of lines (header, separator, rows).
    """
    if not isinstance(padding, int) or padding < 0:
        raise ValueError("format_table() 'padding' must be a non-negative integer")

    headers = [str(header).expandtabs() for header in headers]
    rows = [[str(cell).expandtabs() for cell in row] for row in rows]

    widths = [len(header) for header in headers]
    for row in rows:
        for index, cell in enumerate(row):
            if index < len(widths):
                widths[index] = max(widths[index], len(cell))
            else:
                widths.append(len(cell))
    widths = [width + padding for width in widths]

    lines = ["".join(header.ljust(width) for header, width in zip(headers, widths))]
    lines.append("".join("-" * width for width in widths))
    for row in rows:
        lines.append("".join(cell.ljust(width) for cell, width in zip(row, widths)))
    return lines


def print_table(headers, rows, /, *, padding=PADDING, fancy=False, console=Unset):
    """
    Print headers and rows as an aligned table on standard output.

    Parameters
    - headers: Iterable of column titles.
    - rows: Iterable of rows, each an Iterable of values.
    - padding: spaces added after the widest entry of every column.
    - fancy: draw a rich Table instead of the plain layout.
    - console: rich Console to print to; a fresh stdout console by default.
    """
    console = Console() if console is Unset else console

    if fancy:
        # cells are literal text, never markup
        table = Table(box=ROUNDED)
        for header in headers:
            table.add_column(Text(str(header)))
        for row in rows:
            table.add_row(*(Text(str(cell)) for cell in row))
        console.print(table)
        return

    for line in format_table(headers, rows, padding=padding):
        console.print(Text(line), soft_wrap=True)


__all__ = (
    "PADDING",
    "format_table",
    "print_table",
)
