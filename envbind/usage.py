"""Plain-text listing of a schema's environment variables."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from envbind.schema import Slot

# Width of the left (name) column.
COLUMN_WIDTH = 25


def format_option(name: str, help_text: str | None = None, default: str | None = None) -> str:
    """Format one two-column line.

    Names too long for the left column push the help text onto its own
    line, indented to the column.

    Examples
    --------
    >>> format_option("workers", "number of workers", "10")
    '  workers                number of workers [default: 10]\\n'
    >>> format_option("label", default="cat")
    '  label [default: cat]\\n'
    """
    line = "  " + name

    if help_text:
        if len(line) + 2 < COLUMN_WIDTH:
            line += " " * (COLUMN_WIDTH - len(line))
        else:
            line += "\n" + " " * COLUMN_WIDTH
        line += help_text

    if default:
        line += f" [default: {default}]"

    return line + "\n"


def format_help(slots: Iterable[Slot], description: str | None = None) -> str:
    """Render the description line followed by one line per slot.

    Parameters
    ----------
    slots : Iterable[Slot]
        Slots in schema order.
    description : str | None
        Optional text printed on its own line first.

    Returns
    -------
    str
        The complete listing.
    """
    parts: list[str] = []
    if description:
        parts.append(description + "\n")

    options = list(slots)
    if options:
        parts.append("Environments:\n")
        parts.extend(format_option(slot.name, slot.help, slot.default) for slot in options)

    return "".join(parts)
