"""Conversion of textual environment values into typed field values.

Converters are resolved once per field type by :func:`classify` and stored in
the schema, so binding never re-inspects types. Resolution order is:

1. classes exposing ``from_text`` (always opaque scalars),
2. ``list[E]`` / ``tuple[E, ...]`` (multi-value, element-wise),
3. enums, literals and unions of supported types,
4. the registry of well-known scalar types and their subclasses.

``T | None`` resolves to the converter of ``T``.
"""

from __future__ import annotations

import csv
import io
import logging
import math
import re
import types
import typing
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum, StrEnum
from ipaddress import (
    IPv4Address,
    IPv4Interface,
    IPv4Network,
    IPv6Address,
    IPv6Interface,
    IPv6Network,
)
from pathlib import Path
from typing import Annotated, Any, Literal
from uuid import UUID

from annotated_types import Ge, Gt
from pydantic import PydanticUserError, TypeAdapter, ValidationError

from envbind.durations import format_duration, parse_duration
from envbind.errors import ConversionError
from envbind.fields import split_annotated, validation_metadata
from envbind.types import TextEncoder, has_text_decoder

logger = logging.getLogger(__name__)

_TRUE = frozenset({"1", "t", "true", "y", "yes", "on"})
_FALSE = frozenset({"0", "f", "false", "n", "no", "off"})
_INTEGER = re.compile(r"[+-]?[0-9]+", re.ASCII)
_UNSIGNED = re.compile(r"[0-9]+", re.ASCII)


class SlotKind(StrEnum):
    """How a field is bound from its environment value."""

    SCALAR = "scalar"
    BOOLEAN = "boolean"
    MULTIPLE = "multiple"


@dataclass(frozen=True, slots=True)
class Converter:
    """A parser producing values of one element type.

    Attributes
    ----------
    target : Any
        Type the converter produces.
    parse : Callable[[str], Any]
        Function from text to value; raises ``ValueError`` on bad input.
    boolean : bool
        Whether the target is a boolean scalar.
    """

    target: Any
    parse: Callable[[str], Any]
    boolean: bool = False

    def __call__(self, text: str) -> Any:
        return self.parse(text)


@dataclass(frozen=True, slots=True)
class Binding:
    """Conversion strategy of one field, fixed at schema construction."""

    kind: SlotKind
    element: Converter
    container: type | None = None
    validate: Callable[[Any], Any] | None = None

    def convert(self, text: str) -> Any:
        """Convert a single textual value for scalar and boolean fields."""
        value = self.element(text)
        return self.validate(value) if self.validate is not None else value

    def convert_parts(self, parts: Sequence[str]) -> Any:
        """Convert every part of a multi-value field, building a fresh container."""
        if self.container is None:
            raise TypeError(f"{self.kind} bindings take a single value")
        value = self.container(self.element(part) for part in parts)
        return self.validate(value) if self.validate is not None else value


def parse_int(text: str) -> int:
    """Parse a base-10 integer with an optional sign.

    Examples
    --------
    >>> parse_int("-100")
    -100
    """
    if _INTEGER.fullmatch(text) is None:
        raise ValueError(f"parsing {text!r}: invalid syntax")
    return int(text, 10)


def parse_uint(text: str) -> int:
    """Parse a base-10 integer without a sign.

    Examples
    --------
    >>> parse_uint("42")
    42
    """
    if _UNSIGNED.fullmatch(text) is None:
        raise ValueError(f"parsing {text!r}: invalid syntax")
    return int(text, 10)


def parse_float(text: str) -> float:
    """Parse a decimal or exponent floating point literal."""
    if text != text.strip() or "_" in text:
        raise ValueError(f"parsing {text!r}: invalid syntax")
    try:
        value = float(text)
    except ValueError as e:
        raise ValueError(f"parsing {text!r}: invalid syntax") from e
    # Only the literal spellings of infinity may produce one.
    if math.isinf(value) and "inf" not in text.lower():
        raise ValueError(f"parsing {text!r}: value out of range")
    return value


def parse_bool(text: str) -> bool:
    """Parse a boolean token.

    Examples
    --------
    >>> parse_bool("TRUE"), parse_bool("off")
    (True, False)
    """
    folded = text.lower()
    if folded in _TRUE:
        return True
    if folded in _FALSE:
        return False
    raise ValueError(f"parsing {text!r}: invalid boolean")


def _parse_decimal(text: str) -> Decimal:
    try:
        return Decimal(text)
    except InvalidOperation as e:
        raise ValueError(f"parsing {text!r}: invalid decimal") from e


def _parse_str(text: str) -> str:
    return text


# Order matters: bool is checked before its int base class.
_SCALARS: tuple[tuple[type, Callable[[str], Any]], ...] = (
    (bool, parse_bool),
    (str, _parse_str),
    (int, parse_int),
    (float, parse_float),
    (bytes, str.encode),
    (Decimal, _parse_decimal),
    (Path, Path),
    (timedelta, parse_duration),
    (datetime, datetime.fromisoformat),
    (date, date.fromisoformat),
    (IPv4Address, IPv4Address),
    (IPv6Address, IPv6Address),
    (IPv4Network, IPv4Network),
    (IPv6Network, IPv6Network),
    (IPv4Interface, IPv4Interface),
    (IPv6Interface, IPv6Interface),
    (UUID, UUID),
)


def _is_union(tp: Any) -> bool:
    return typing.get_origin(tp) in (typing.Union, types.UnionType)


def unwrap_optional(tp: Any) -> Any:
    """Return ``T`` for ``T | None``, otherwise ``tp`` unchanged.

    Examples
    --------
    >>> unwrap_optional(int | None)
    <class 'int'>
    """
    if not _is_union(tp):
        return tp
    members = [arg for arg in typing.get_args(tp) if arg is not type(None)]
    if len(members) == len(typing.get_args(tp)):
        return tp
    if len(members) == 1:
        return members[0]
    return typing.Union[tuple(members)]


def _enum_converter(tp: type[Enum]) -> Converter:
    def parse(text: str) -> Enum:
        if text in tp.__members__:
            return tp.__members__[text]
        for member in tp:
            if str(member.value) == text:
                return member
        choices = ", ".join(tp.__members__)
        raise ValueError(f"{text!r} is not one of {choices}")

    return Converter(tp, parse)


def _literal_converter(tp: Any) -> Converter | None:
    choices = typing.get_args(tp)
    converters = [resolve_converter(type(choice)) for choice in choices]
    if any(c is None for c in converters):
        return None

    def parse(text: str) -> Any:
        for choice, converter in zip(choices, converters, strict=True):
            try:
                if converter(text) == choice:  # type: ignore[misc]
                    return choice
            except ValueError:
                continue
        raise ValueError(f"{text!r} is not one of {', '.join(map(str, choices))}")

    return Converter(tp, parse)


def _union_converter(tp: Any) -> Converter | None:
    converters = [resolve_converter(arg) for arg in typing.get_args(tp)]
    if any(c is None for c in converters):
        return None

    def parse(text: str) -> Any:
        errors: list[str] = []
        for converter in converters:
            try:
                return converter(text)  # type: ignore[misc]
            except ValueError as e:
                errors.append(str(e))
        raise ValueError("; ".join(errors))

    return Converter(tp, parse, boolean=all(c.boolean for c in converters))  # type: ignore[union-attr]


def _constrained(converter: Converter, annotation: Any) -> Converter | None:
    validate = _validator(annotation)
    if validate is None:
        return None
    return Converter(converter.target, lambda text: validate(converter(text)), converter.boolean)


def _validator(annotation: Any) -> Callable[[Any], Any] | None:
    try:
        adapter: TypeAdapter[Any] = TypeAdapter(annotation)
    except (PydanticUserError, TypeError, ValueError):
        logger.debug("No validator available for %r", annotation)
        return None

    def validate(value: Any) -> Any:
        try:
            return adapter.validate_python(value)
        except ValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise ValueError(messages) from e

    return validate


def resolve_converter(tp: Any) -> Converter | None:
    """Resolve the converter for a single (non-sequence) value type.

    Parameters
    ----------
    tp : Any
        Element type, possibly ``Annotated`` or optional.

    Returns
    -------
    Converter | None
        Converter for ``tp``, or None if the type is not supported.

    Examples
    --------
    >>> resolve_converter(int)("42")
    42
    >>> resolve_converter(object) is None
    True
    """
    base, extras = split_annotated(tp)
    constraints = validation_metadata(extras)
    if base is not tp:
        inner = resolve_converter(base)
        if inner is None or not constraints:
            return inner
        inner = _unsigned(inner, constraints)
        return _constrained(inner, Annotated[(unwrap_optional(base), *constraints)])

    tp = unwrap_optional(tp)

    if has_text_decoder(tp):
        return Converter(tp, _decoder(tp))
    if typing.get_origin(tp) is Literal:
        return _literal_converter(tp)
    if _is_union(tp):
        return _union_converter(tp)
    if not isinstance(tp, type):
        return None
    if issubclass(tp, Enum):
        return _enum_converter(tp)

    for scalar, parse in _SCALARS:
        if tp is scalar:
            return Converter(tp, parse, boolean=scalar is bool)
        if issubclass(tp, scalar):
            return Converter(tp, _subclass_parser(tp, parse))
    return None


def _decoder(tp: Any) -> Callable[[str], Any]:
    def parse(text: str) -> Any:
        try:
            return tp.from_text(text)
        except ValueError:
            raise
        except Exception as e:
            raise ValueError(f"{type(e).__name__}: {e}") from e

    return parse


def _unsigned(converter: Converter, constraints: tuple[Any, ...]) -> Converter:
    """Swap in the sign-free parser for integers constrained to be non-negative."""
    if converter.parse is not parse_int:
        return converter
    for item in constraints:
        if (isinstance(item, Ge) and item.ge >= 0) or (isinstance(item, Gt) and item.gt >= 0):
            return Converter(converter.target, parse_uint)
    return converter


def _subclass_parser(tp: type, parse: Callable[[str], Any]) -> Callable[[str], Any]:
    return lambda text: tp(parse(text))


def _sequence_element(tp: Any) -> tuple[type, Any] | None:
    origin = typing.get_origin(tp)
    args = typing.get_args(tp)
    if origin is list and len(args) == 1:
        return list, args[0]
    if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
        return tuple, args[0]
    return None


def classify(annotation: Any) -> Binding | None:
    """Decide how a field of type ``annotation`` is bound.

    A type exposing ``from_text`` is a scalar whatever its structure. A
    ``list[E]`` or ``tuple[E, ...]`` is multi-value when ``E`` (or ``E | None``)
    is convertible. Everything else must resolve to a scalar converter.

    Parameters
    ----------
    annotation : Any
        Declared field type, possibly ``Annotated`` with constraints.

    Returns
    -------
    Binding | None
        The binding strategy, or None if the type is unsupported.

    Examples
    --------
    >>> classify(list[int]).kind
    <SlotKind.MULTIPLE: 'multiple'>
    >>> classify(bool | None).kind
    <SlotKind.BOOLEAN: 'boolean'>
    """
    base, extras = split_annotated(annotation)
    constraints = validation_metadata(extras)
    inner = unwrap_optional(base)

    validate = None
    if constraints:
        validate = _validator(Annotated[(inner, *constraints)])
        if validate is None:
            return None

    sequence = None if has_text_decoder(inner) else _sequence_element(inner)
    if sequence is not None:
        container, element_type = sequence
        element = resolve_converter(element_type)
        if element is None:
            return None
        return Binding(SlotKind.MULTIPLE, element, container, validate)

    converter = resolve_converter(inner)
    if converter is None:
        return None
    converter = _unsigned(converter, constraints)
    kind = SlotKind.BOOLEAN if converter.boolean else SlotKind.SCALAR
    return Binding(kind, converter, None, validate)


def convert(text: str, annotation: Any) -> Any:
    """Convert ``text`` into a value of ``annotation``.

    Raises
    ------
    ConversionError
        If the type is unsupported or the text is invalid for it.

    Examples
    --------
    >>> convert("1.5s", timedelta)
    datetime.timedelta(seconds=1, microseconds=500000)
    >>> convert("1,2,3", list[int])
    [1, 2, 3]
    """
    binding = classify(annotation)
    if binding is None:
        raise ConversionError(f"unsupported type {type_name(annotation)}")
    try:
        if binding.kind is SlotKind.MULTIPLE:
            return binding.convert_parts(split_csv(text))
        return binding.convert(text)
    except ValueError as e:
        raise ConversionError(str(e)) from e


def split_csv(text: str) -> list[str]:
    """Split one CSV record, honouring standard double-quote escaping.

    Raises
    ------
    ValueError
        If the text is not a single well-formed record.

    Examples
    --------
    >>> split_csv('a,"b,c",d')
    ['a', 'b,c', 'd']
    """
    reader = csv.reader(io.StringIO(text), strict=True)
    try:
        records = list(reader)
    except csv.Error as e:
        raise ValueError(str(e)) from e
    if len(records) > 1:
        raise ValueError("expected a single CSV record")
    return records[0] if records else []


def join_csv(values: Sequence[str]) -> str:
    """Inverse of :func:`split_csv`.

    Examples
    --------
    >>> join_csv(["a", "b,c"])
    'a,"b,c"'
    """
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="").writerow(values)
    return buffer.getvalue()


def is_zero(value: Any) -> bool:
    """Return whether ``value`` is unset (None, empty, zero or false)."""
    if value is None:
        return True
    try:
        return not value
    except (TypeError, ValueError):
        return False


def format_value(value: Any) -> str:
    """Render a value in the textual form its converter accepts.

    Raises
    ------
    Exception
        Whatever a ``to_text`` implementation raises.

    Examples
    --------
    >>> format_value(True)
    'true'
    >>> format_value([3.14, 42.0])
    '3.14,42.0'
    """
    if isinstance(value, TextEncoder):
        return value.to_text()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.decode()
    if isinstance(value, list | tuple):
        return join_csv([format_value(item) for item in value])
    return str(value)


def type_name(tp: Any) -> str:
    """Printable name of a type for error messages.

    Examples
    --------
    >>> type_name(int)
    'int'
    >>> type_name(list[int])
    'list[int]'
    """
    if isinstance(tp, type) and not typing.get_args(tp):
        return tp.__qualname__
    return str(tp).replace("typing.", "")
