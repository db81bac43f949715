"""Command-line tool for inspecting and checking environment schemas.

``TARGET`` arguments name a record as ``package.module:Attribute``. A class
is instantiated with no arguments; an instance is used as is.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path
from typing import Any

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from envbind import __version__
from envbind.config import configure_logging, load_logging_config
from envbind.convert import format_value
from envbind.errors import EnvBindError
from envbind.schema import Schema
from envbind.sources import EnvironmentSource, ProcessEnvironment, load_yaml_source

console = Console()


def print_error(message: str, exit_code: int = 1) -> None:
    """Print error message and exit.

    Parameters
    ----------
    message : str
        Error message to display.
    exit_code : int
        Exit code (default: 1). Pass 0 to not exit.
    """
    console.print(f"[red]✗ Error:[/red] {escape(message)}")
    if exit_code != 0:
        sys.exit(exit_code)


def print_success(message: str) -> None:
    """Print success message."""
    console.print(f"[green]✓ {escape(message)}[/green]")


def load_target(target: str) -> object:
    """Import ``module:attribute`` and return a destination instance.

    Parameters
    ----------
    target : str
        Import path such as ``myapp.settings:Settings``.

    Returns
    -------
    object
        The named instance, or a fresh instance of the named class.

    Raises
    ------
    click.BadParameter
        If the target cannot be imported or instantiated.
    """
    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise click.BadParameter(f"expected MODULE:ATTRIBUTE, got {target!r}")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name}: {e}") from e

    for part in attribute.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise click.BadParameter(f"{module_name} has no attribute {attribute}") from e

    if isinstance(obj, type):
        try:
            obj = obj()
        except Exception as e:
            raise click.BadParameter(f"cannot instantiate {attribute}: {e}") from e
    return obj


def _build_schema(target: str) -> Schema:
    destination = load_target(target)
    try:
        return Schema(destination)
    except EnvBindError as e:
        print_error(str(e))
        raise  # For type checking


@click.group()
@click.version_option(version=__version__, prog_name="envbind")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging",
)
def cli(verbose: bool) -> None:
    r"""Inspect and check environment-bound configuration records.

    \b
    Examples:
        $ envbind describe myapp.settings:Settings
        $ envbind table myapp.settings:Settings
        $ envbind check myapp.settings:Settings --values staging.yaml
    """
    try:
        config = load_logging_config()
    except EnvBindError as e:
        print_error(f"Invalid logging configuration: {e}")
        raise  # For type checking

    if verbose:
        config.level = "DEBUG"
    configure_logging(config)


@cli.command()
@click.argument("target")
def describe(target: str) -> None:
    r"""Print the environment listing of TARGET.

    \b
    Examples:
        $ envbind describe myapp.settings:Settings
    """
    schema = _build_schema(target)
    click.echo(schema.help(), nl=False)


@cli.command()
@click.argument("target")
def table(target: str) -> None:
    r"""Print a table of TARGET's environment variables.

    \b
    Examples:
        $ envbind table myapp.settings:Settings
    """
    schema = _build_schema(target)

    out = Table(title=schema.description, show_header=True, header_style="bold cyan")
    out.add_column("Name", style="yellow", no_wrap=True)
    out.add_column("Kind")
    out.add_column("Type")
    out.add_column("Required")
    out.add_column("Default")
    out.add_column("Help", style="white")

    for slot in schema.slots:
        out.add_row(
            escape(slot.name),
            str(slot.kind),
            escape(slot.type_label),
            "yes" if slot.required else "",
            escape(slot.default or ""),
            escape(slot.help or ""),
        )

    console.print(out)


@cli.command()
@click.argument("target")
@click.option(
    "--values",
    "values_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML mapping to read instead of the process environment",
)
def check(target: str, values_file: Path | None) -> None:
    r"""Bind TARGET and show the resulting values.

    Exits with status 1 if any variable is missing or invalid.

    \b
    Examples:
        $ envbind check myapp.settings:Settings
        $ envbind check myapp.settings:Settings --values staging.yaml
    """
    schema = _build_schema(target)

    source: EnvironmentSource = ProcessEnvironment()
    if values_file is not None:
        try:
            source = load_yaml_source(values_file)
        except (OSError, ValueError, yaml.YAMLError) as e:
            print_error(f"Failed to load values: {e}")

    try:
        schema.bind(source)
    except EnvBindError as e:
        print_error(str(e))

    out = Table(show_header=True, header_style="bold cyan")
    out.add_column("Name", style="yellow", no_wrap=True)
    out.add_column("Value", style="white")
    for name, value in schema.current_values().items():
        out.add_row(escape(name), "" if value is None else escape(format_value(value)))
    console.print(out)

    print_success(f"Bound {len(schema.slots)} variables")


def main() -> None:
    """Console script entry point."""
    cli()
