"""One-shot entry points combining schema construction and binding."""

from __future__ import annotations

import sys

from rich.console import Console
from rich.markup import escape

from envbind.errors import EnvBindError
from envbind.schema import Schema
from envbind.sources import EnvironmentSource

error_console = Console(stderr=True)


def new_schema(*destinations: object) -> Schema:
    """Build a schema over ``destinations`` without binding it."""
    return Schema(*destinations)


def parse(*destinations: object, source: EnvironmentSource | None = None) -> None:
    """Bind the environment into ``destinations``.

    Parameters
    ----------
    *destinations : object
        Pydantic model or dataclass instances to populate.
    source : EnvironmentSource | None
        Source to read; the process environment when None.

    Raises
    ------
    EnvBindError
        If the schema cannot be built or binding fails.

    Examples
    --------
    >>> from dataclasses import dataclass
    >>> from envbind.sources import MappingSource
    >>> @dataclass
    ... class Args:
    ...     iter: int = 0
    ...     debug: bool = False
    >>> args = Args()
    >>> parse(args, source=MappingSource({"iter": "1", "debug": "true"}))
    >>> args
    Args(iter=1, debug=True)
    """
    Schema(*destinations).bind(source)


def must_parse(*destinations: object, source: EnvironmentSource | None = None) -> Schema:
    """Bind the environment into ``destinations`` or exit the process.

    On failure the error is printed to stderr and the process exits with
    status 1.

    Returns
    -------
    Schema
        The bound schema, reusable for :meth:`Schema.help`.
    """
    try:
        schema = Schema(*destinations)
        schema.bind(source)
    except EnvBindError as e:
        error_console.print(f"[red]✗ Error:[/red] {escape(str(e))}", highlight=False)
        sys.exit(1)
    return schema
