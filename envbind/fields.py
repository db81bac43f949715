"""Field discovery for destination records.

A record is an instance of a pydantic ``BaseModel`` subclass or of a
``@dataclass``. Fields are reported in declaration order; fields marked with
:class:`~envbind.tags.Embed` whose type is itself a record are expanded in
place, so their own fields appear at the parent's level.
"""

from __future__ import annotations

import dataclasses
import logging
import typing
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Annotated, Any

from annotated_types import BaseMetadata
from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo

from envbind.errors import FieldNotWritableError
from envbind.tags import Embed, Env

logger = logging.getLogger(__name__)

type FieldPath = tuple[str, ...]


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """One field reachable from a root record type.

    Attributes
    ----------
    path : FieldPath
        Attribute names leading from the root instance to the field.
    owner : type
        Record type that declares the field.
    declared_type : Any
        Field type with any top-level ``Annotated`` wrapper removed.
    metadata : tuple[Any, ...]
        ``Annotated`` extras attached to the field, in declaration order.
    description : str | None
        Field description declared through pydantic, if any.
    """

    path: FieldPath
    owner: type
    declared_type: Any
    metadata: tuple[Any, ...] = ()
    description: str | None = None

    @property
    def attribute(self) -> str:
        return self.path[-1]

    @property
    def env(self) -> Env | None:
        for item in self.metadata:
            if isinstance(item, Env):
                return item
        return None

    @property
    def embedded(self) -> bool:
        return any(isinstance(item, Embed) for item in self.metadata)

    @property
    def constraints(self) -> tuple[Any, ...]:
        return validation_metadata(self.metadata)

    @property
    def annotation(self) -> Any:
        """Declared type re-wrapped with its validation constraints."""
        if not self.constraints:
            return self.declared_type
        return Annotated[(self.declared_type, *self.constraints)]  # type: ignore[return-value]


def is_record_type(tp: Any) -> bool:
    """Return whether ``tp`` is a pydantic model class or a dataclass.

    Examples
    --------
    >>> is_record_type(int)
    False
    """
    if not isinstance(tp, type):
        return False
    return issubclass(tp, BaseModel) or dataclasses.is_dataclass(tp)


def split_annotated(hint: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split ``Annotated[T, *extras]`` into ``(T, extras)``.

    Examples
    --------
    >>> split_annotated(Annotated[int, "x"])
    (<class 'int'>, ('x',))
    >>> split_annotated(str)
    (<class 'str'>, ())
    """
    if typing.get_origin(hint) is Annotated:
        return hint.__origin__, tuple(hint.__metadata__)
    return hint, ()


def validation_metadata(extras: tuple[Any, ...]) -> tuple[Any, ...]:
    """Keep only the value constraints among ``Annotated`` extras.

    ``Field(...)`` objects contribute the constraints they carry; markers
    and plain descriptions are dropped.
    """
    found: list[Any] = []
    for item in extras:
        if isinstance(item, FieldInfo):
            found.extend(item.metadata)
        elif isinstance(item, BaseMetadata):
            found.append(item)
    return tuple(found)


def _declared_fields(record_type: type) -> Iterator[tuple[str, Any, tuple[Any, ...], str | None]]:
    if issubclass(record_type, BaseModel):
        for name, info in record_type.model_fields.items():
            base, extras = split_annotated(info.annotation)
            yield name, base, tuple(info.metadata) + extras, info.description
        return

    hints = typing.get_type_hints(record_type, include_extras=True)
    for f in dataclasses.fields(record_type):
        base, extras = split_annotated(hints.get(f.name, f.type))
        yield f.name, base, extras, None


def walk_fields(record_type: type, prefix: FieldPath = ()) -> Iterator[FieldDescriptor]:
    """Yield every bindable field of ``record_type`` in declaration order.

    Fields whose options are ``Env("-")`` are skipped along with anything
    beneath them. Embedded record fields are expanded recursively; embedded
    fields whose type is optional are reported as ordinary fields, leaving
    the schema builder to reject them.

    Parameters
    ----------
    record_type : type
        Pydantic model class or dataclass.
    prefix : FieldPath
        Path of the embedding field, used during recursion.

    Yields
    ------
    FieldDescriptor
        One descriptor per leaf field.
    """
    for name, base, metadata, description in _declared_fields(record_type):
        field = FieldDescriptor(
            path=(*prefix, name),
            owner=record_type,
            declared_type=base,
            metadata=metadata,
            description=description,
        )
        env = field.env
        if env is not None and env.excluded:
            logger.debug("Skipping excluded field %s.%s", record_type.__name__, name)
            continue

        if field.embedded and is_record_type(base):
            yield from walk_fields(base, field.path)
            continue

        yield field


def resolve(root: object, path: FieldPath) -> Any:
    """Return the current value at ``path``, or None if a parent is unset."""
    value: Any = root
    for name in path:
        if value is None:
            return None
        value = getattr(value, name)
    return value


def assign(root: object, path: FieldPath, value: Any) -> None:
    """Store ``value`` at ``path`` inside ``root``.

    Raises
    ------
    FieldNotWritableError
        If an embedded parent is unset or the owning record is frozen.
    """
    parent = resolve(root, path[:-1])
    if parent is None:
        raise FieldNotWritableError(format_path(path))

    try:
        setattr(parent, path[-1], value)
    except (dataclasses.FrozenInstanceError, ValidationError, AttributeError) as e:
        raise FieldNotWritableError(format_path(path)) from e


def format_path(path: FieldPath) -> str:
    """Render a path the way errors refer to it.

    Examples
    --------
    >>> format_path(("common", "verbose"))
    'args.common.verbose'
    """
    return ".".join(("args", *path))
