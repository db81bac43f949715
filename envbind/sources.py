"""Key/value sources the binding engine reads from.

The engine never touches ``os.environ`` directly; it asks an
:class:`EnvironmentSource` for each key, so tests and tools can substitute
an in-memory mapping or a YAML file for the live process environment.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

import yaml

from envbind.convert import format_value


class EnvironmentSource(Protocol):
    """Case-sensitive lookup of textual values."""

    def lookup(self, key: str) -> str | None:
        """Return the value for ``key``, or None if it is not set."""
        ...


class ProcessEnvironment:
    """The live process environment.

    Examples
    --------
    >>> ProcessEnvironment().lookup("ENVBIND_SURELY_UNSET_VARIABLE") is None
    True
    """

    def lookup(self, key: str) -> str | None:
        return os.environ.get(key)

    def __repr__(self) -> str:
        return "ProcessEnvironment()"


class MappingSource:
    """An in-memory mapping of keys to textual values.

    Parameters
    ----------
    values : Mapping[str, str]
        Values to serve; copied on construction.

    Examples
    --------
    >>> source = MappingSource({"foo": "bar"})
    >>> source.lookup("foo"), source.lookup("FOO")
    ('bar', None)
    """

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values = dict(values or {})

    def lookup(self, key: str) -> str | None:
        return self._values.get(key)

    def __repr__(self) -> str:
        return f"MappingSource({sorted(self._values)!r})"


def load_yaml_source(path: Path | str) -> MappingSource:
    """Load a flat YAML mapping as an environment source.

    Scalars are rendered the way preset defaults are (booleans as
    ``true``/``false``); lists become CSV records for multi-value fields.
    Keys with null values are treated as unset.

    Parameters
    ----------
    path : Path | str
        Path to the YAML file.

    Returns
    -------
    MappingSource
        Source serving the file's values.

    Raises
    ------
    FileNotFoundError
        If the file doesn't exist.
    yaml.YAMLError
        If the YAML is malformed.
    ValueError
        If the document is not a mapping.
    """
    path = Path(path) if isinstance(path, str) else path

    if not path.exists():
        raise FileNotFoundError(f"Values file not found: {path}")

    try:
        with open(path) as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e

    if content is None:
        return MappingSource()
    if not isinstance(content, dict):
        raise ValueError(f"Values file {path} must contain a mapping")

    return MappingSource(
        {str(key): format_value(value) for key, value in content.items() if value is not None}
    )
