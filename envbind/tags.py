"""Field annotations understood by the schema builder.

Fields opt into custom behaviour with ``typing.Annotated`` markers:

>>> from typing import Annotated
>>> from pydantic import BaseModel
>>> class Args(BaseModel):
...     workers: Annotated[int, Env("name:WORKERS", help="workers", default="10")] = 0
...     ignored: Annotated[object, Env("-")] = None

The ``tag`` string is a comma-separated list of keys, each optionally
``key:value``. Recognised keys are ``name`` (requires a value) and
``required`` (takes no value). A tag of exactly ``-`` excludes the field.
"""

from __future__ import annotations

from dataclasses import dataclass

from envbind.errors import UnrecognizedTagError

EXCLUDE = "-"


@dataclass(frozen=True, slots=True)
class Env:
    """Binding options for one field.

    Parameters
    ----------
    tag : str
        Comma-separated option keys (``name:KEY``, ``required``) or ``-``.
    help : str | None
        Help text shown by the schema reporter.
    default : str | None
        Textual default applied when the key is absent from the environment.

    Examples
    --------
    >>> Env("name:PORT,required").tag
    'name:PORT,required'
    >>> Env("-").excluded
    True
    """

    tag: str = ""
    help: str | None = None
    default: str | None = None

    @property
    def excluded(self) -> bool:
        return self.tag == EXCLUDE


@dataclass(frozen=True, slots=True)
class Embed:
    """Marks a record-typed field whose fields are hoisted into the parent.

    Examples
    --------
    >>> from typing import Annotated
    >>> from dataclasses import dataclass, field
    >>> @dataclass
    ... class Common:
    ...     verbose: bool = False
    >>> @dataclass
    ... class Args:
    ...     common: Annotated[Common, Embed()] = field(default_factory=Common)
    """


@dataclass(slots=True)
class TagOptions:
    """Options decoded from a tag string."""

    name: str | None = None
    required: bool = False


def parse_tag(tag: str) -> TagOptions:
    """Decode a tag string into options.

    Parameters
    ----------
    tag : str
        Raw tag, e.g. ``"name:abc,required"``.

    Returns
    -------
    TagOptions
        Decoded options.

    Raises
    ------
    UnrecognizedTagError
        If a key is not ``name`` (with a value) or ``required``.

    Examples
    --------
    >>> parse_tag("name:abc, required")
    TagOptions(name='abc', required=True)
    >>> parse_tag("")
    TagOptions(name=None, required=False)
    """
    options = TagOptions()
    for token in tag.split(","):
        if token == "":
            continue

        key = token.lstrip(" ")
        value = ""
        if ":" in key:
            key, value = key.split(":", 1)

        if key == "name" and value != "":
            options.name = value
        elif key == "required":
            options.required = True
        else:
            raise UnrecognizedTagError(key)

    return options
