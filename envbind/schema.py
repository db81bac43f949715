"""Schema construction and the binding engine.

A :class:`Schema` is built once from one or more destination records. Each
bindable field becomes a :class:`Slot` holding its environment key, its
location inside the destination, and the conversion strategy chosen for its
type. :meth:`Schema.bind` then reads every key from an environment source
and writes converted values into the destinations.

Examples
--------
>>> from pydantic import BaseModel
>>> from envbind.sources import MappingSource
>>> class Args(BaseModel):
...     foo: str = ""
...     count: int = 3
>>> args = Args()
>>> schema = Schema(args)
>>> schema.bind(MappingSource({"foo": "bar"}))
>>> args.foo, args.count
('bar', 3)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from envbind.convert import Binding, SlotKind, classify, format_value, is_zero, split_csv, type_name
from envbind.errors import (
    ConversionError,
    DefaultEncodingError,
    FieldRequiredError,
    NotInstanceError,
    NotRecordError,
    RequiredWithDefaultError,
    SliceDefaultError,
    TagError,
    UnsupportedFieldError,
)
from envbind.fields import (
    FieldDescriptor,
    FieldPath,
    assign,
    format_path,
    is_record_type,
    resolve,
    walk_fields,
)
from envbind.sources import EnvironmentSource, ProcessEnvironment
from envbind.tags import Env, parse_tag
from envbind.usage import format_help

logger = logging.getLogger(__name__)


@dataclass(slots=True, eq=False)
class Slot:
    """One environment key bound to one destination field.

    Attributes
    ----------
    name : str
        Environment key, case-sensitive.
    root : int
        Index of the destination record the field lives in.
    path : FieldPath
        Attribute path from that record to the field.
    declared_type : Any
        The field's declared type.
    binding : Binding
        Conversion strategy resolved for the type.
    required : bool
        Whether the key must be present.
    default : str | None
        Textual default, explicit or taken from a preset value.
    help : str | None
        Help text for reporting.
    """

    name: str
    root: int
    path: FieldPath
    declared_type: Any
    binding: Binding
    required: bool = False
    default: str | None = None
    help: str | None = None

    @property
    def kind(self) -> SlotKind:
        return self.binding.kind

    @property
    def multiple(self) -> bool:
        return self.binding.kind is SlotKind.MULTIPLE

    @property
    def type_label(self) -> str:
        return type_name(self.declared_type)

    def convert(self, text: str) -> Any:
        """Convert ``text`` into a value for this slot's field.

        Multi-value slots split ``text`` as a CSV record first.

        Raises
        ------
        ValueError
            If ``text`` does not convert.
        """
        if self.multiple:
            return self.binding.convert_parts(split_csv(text))
        return self.binding.convert(text)


def _make_slot(field: FieldDescriptor, root: int) -> Slot:
    env = field.env or Env()
    qualified = f"{field.owner.__name__}.{field.attribute}"

    try:
        options = parse_tag(env.tag)
    except TagError as e:
        e.with_field(qualified)
        raise

    if options.required and env.default is not None:
        raise RequiredWithDefaultError().with_field(qualified)

    binding = classify(field.annotation)
    if binding is None:
        raise UnsupportedFieldError(qualified, type_name(field.declared_type))

    if binding.kind is SlotKind.MULTIPLE and env.default is not None:
        raise SliceDefaultError().with_field(qualified)

    return Slot(
        name=options.name or field.attribute.lower(),
        root=root,
        path=field.path,
        declared_type=field.declared_type,
        binding=binding,
        required=options.required,
        default=env.default,
        help=env.help if env.help is not None else field.description,
    )


def build_slots(destination: object, root: int = 0) -> list[Slot]:
    """Build the slots of one destination record.

    Preset non-zero values in ``destination`` become the defaults of slots
    that declare neither a default nor ``required``.

    Parameters
    ----------
    destination : object
        Pydantic model or dataclass instance.
    root : int
        Index of ``destination`` among the schema's records.

    Returns
    -------
    list[Slot]
        Slots in field declaration order.

    Raises
    ------
    NotInstanceError
        If ``destination`` is a class rather than an instance.
    NotRecordError
        If ``destination`` is not a model or dataclass instance.
    TagError
        If a field's options are malformed or contradictory.
    UnsupportedFieldError
        If a field's type cannot be converted from text.
    DefaultEncodingError
        If a preset value cannot be rendered as text.
    """
    where = format_path(())
    if isinstance(destination, type):
        raise NotInstanceError(where, "type")
    if not is_record_type(type(destination)):
        raise NotRecordError(where, type(destination).__name__)

    slots = [_make_slot(field, root) for field in walk_fields(type(destination))]

    for slot in slots:
        if slot.default is not None or slot.required:
            continue
        value = resolve(destination, slot.path)
        if is_zero(value):
            continue
        try:
            slot.default = format_value(value)
        except Exception as e:
            raise DefaultEncodingError(format_path(slot.path), e) from e

    logger.debug(
        "Built %d slots for %s", len(slots), type(destination).__name__
    )
    return slots


class Schema:
    """The slots of one or more destination records, ready to bind.

    Parameters
    ----------
    *destinations : object
        Pydantic model or dataclass instances, mutated in place by
        :meth:`bind`.
    source : EnvironmentSource | None
        Source used when :meth:`bind` is called without one. Defaults to the
        process environment.

    Attributes
    ----------
    description : str | None
        Text returned by a destination's ``description()`` method, if any.

    Raises
    ------
    EnvBindError
        Any error from :func:`build_slots`.
    """

    def __init__(self, *destinations: object, source: EnvironmentSource | None = None) -> None:
        self._roots = list(destinations)
        self._slots: list[Slot] = []
        self._source = source
        self.description: str | None = None

        for index, destination in enumerate(destinations):
            self._slots.extend(build_slots(destination, index))

            describe = getattr(destination, "description", None)
            if callable(describe):
                self.description = describe()

    @property
    def slots(self) -> tuple[Slot, ...]:
        return tuple(self._slots)

    def help(self) -> str:
        """Return the listing of every environment key in schema order."""
        return format_help(self._slots, self.description)

    def current_values(self) -> dict[str, Any]:
        """Return the value each slot's field currently holds, keyed by slot name."""
        return {slot.name: resolve(self._roots[slot.root], slot.path) for slot in self._slots}

    def bind(self, source: EnvironmentSource | None = None) -> None:
        """Read every slot's key and write converted values into the destinations.

        Present keys are converted and assigned first. Then, for each slot
        whose key was absent, a required slot fails the pass and a slot with
        a default gets the converted default. Other fields are left as they
        are. The first error stops the pass; earlier writes are kept.

        Parameters
        ----------
        source : EnvironmentSource | None
            Source to read from; falls back to the one given at construction
            and then to the process environment.

        Raises
        ------
        ConversionError
            If a present value or a default does not convert.
        FieldRequiredError
            If a required key is absent.
        FieldNotWritableError
            If a destination refuses assignment.
        """
        if source is None:
            source = self._source if self._source is not None else ProcessEnvironment()

        present = [False] * len(self._slots)
        for index, slot in enumerate(self._slots):
            text = source.lookup(slot.name)
            if text is None:
                continue
            self._assign(slot, self._convert_present(slot, text))
            present[index] = True
            logger.debug("Bound %s from environment", slot.name)

        for index, slot in enumerate(self._slots):
            if present[index]:
                continue

            if slot.required:
                raise FieldRequiredError(slot.name)

            if slot.default:
                try:
                    value = slot.convert(slot.default)
                except ValueError as e:
                    raise ConversionError(
                        f"error processing default value for {slot.name}: {e}", key=slot.name
                    ) from e
                self._assign(slot, value)
                logger.debug("Applied default for %s", slot.name)

    def _convert_present(self, slot: Slot, text: str) -> Any:
        if not slot.multiple:
            try:
                return slot.binding.convert(text)
            except ValueError as e:
                raise ConversionError(
                    f"error processing environment variable {slot.name}: {e}", key=slot.name
                ) from e

        try:
            parts = split_csv(text)
        except ValueError as e:
            raise ConversionError(
                f"error reading a CSV string from environment variable {slot.name} "
                f"with multiple values: {e}",
                key=slot.name,
            ) from e

        try:
            return slot.binding.convert_parts(parts)
        except ValueError as e:
            raise ConversionError(
                f"error processing environment variable {slot.name} with multiple values: {e}",
                key=slot.name,
            ) from e

    def _assign(self, slot: Slot, value: Any) -> None:
        assign(self._roots[slot.root], slot.path, value)

    def __repr__(self) -> str:
        names = ", ".join(slot.name for slot in self._slots)
        return f"Schema([{names}])"
