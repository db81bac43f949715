"""Duration literals such as ``300ms``, ``-1.5h`` or ``2h45m``.

A duration is a possibly signed sequence of decimal numbers, each with an
optional fraction and a mandatory unit suffix. Valid units are ``ns``,
``us`` (or ``µs``), ``ms``, ``s``, ``m`` and ``h``. The bare literal ``0``
is accepted without a unit. ``timedelta`` stores microseconds, so
sub-microsecond parts are rounded.
"""

from __future__ import annotations

import re
from datetime import timedelta
from decimal import Decimal, InvalidOperation

# Units expressed in microseconds.
_UNITS: dict[str, Decimal] = {
    "ns": Decimal("0.001"),
    "us": Decimal(1),
    "µs": Decimal(1),  # U+00B5 micro sign
    "μs": Decimal(1),  # U+03BC greek mu
    "ms": Decimal(1_000),
    "s": Decimal(1_000_000),
    "m": Decimal(60_000_000),
    "h": Decimal(3_600_000_000),
}

_COMPONENT = re.compile(r"(\d*(?:\.\d*)?)(ns|us|µs|μs|ms|s|m|h)")

_MICROS_PER_MILLI = 1_000
_MICROS_PER_SECOND = 1_000_000
_MICROS_PER_MINUTE = 60 * _MICROS_PER_SECOND
_MICROS_PER_HOUR = 60 * _MICROS_PER_MINUTE


def parse_duration(text: str) -> timedelta:
    """Parse a duration literal.

    Parameters
    ----------
    text : str
        Literal such as ``"1h30m"``.

    Returns
    -------
    timedelta
        Parsed duration.

    Raises
    ------
    ValueError
        If ``text`` is not a valid duration.

    Examples
    --------
    >>> parse_duration("1h30m")
    datetime.timedelta(seconds=5400)
    >>> parse_duration("-1.5s")
    datetime.timedelta(days=-1, seconds=86398, microseconds=500000)
    """
    rest = text
    negative = False
    if rest[:1] in ("-", "+"):
        negative = rest[0] == "-"
        rest = rest[1:]

    if rest == "0":
        return timedelta(0)
    if rest == "":
        raise ValueError(f"time: invalid duration {text!r}")

    total = Decimal(0)
    pos = 0
    while pos < len(rest):
        match = _COMPONENT.match(rest, pos)
        if match is None:
            unit_hint = "missing unit in" if rest[pos:].rstrip("0123456789.") == "" else "invalid"
            raise ValueError(f"time: {unit_hint} duration {text!r}")
        number, unit = match.groups()
        if number in ("", "."):
            raise ValueError(f"time: invalid duration {text!r}")
        try:
            total += Decimal(number) * _UNITS[unit]
        except InvalidOperation as e:
            raise ValueError(f"time: invalid duration {text!r}") from e
        pos = match.end()

    if negative:
        total = -total
    try:
        return timedelta(microseconds=float(total))
    except OverflowError as e:
        raise ValueError(f"time: invalid duration {text!r}") from e


def format_duration(value: timedelta) -> str:
    """Render a duration in the literal form accepted by :func:`parse_duration`.

    Examples
    --------
    >>> format_duration(timedelta(hours=2))
    '2h0m0s'
    >>> format_duration(timedelta(milliseconds=1500))
    '1.5s'
    >>> format_duration(timedelta(microseconds=300))
    '300µs'
    """
    micros = (value.days * 86_400 + value.seconds) * _MICROS_PER_SECOND + value.microseconds
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < _MICROS_PER_MILLI:
        return f"{sign}{micros}µs"
    if micros < _MICROS_PER_SECOND:
        return f"{sign}{_fraction(micros, _MICROS_PER_MILLI)}ms"

    hours, micros = divmod(micros, _MICROS_PER_HOUR)
    minutes, micros = divmod(micros, _MICROS_PER_MINUTE)
    out = sign
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    return f"{out}{_fraction(micros, _MICROS_PER_SECOND)}s"


def _fraction(amount: int, unit: int) -> str:
    whole, frac = divmod(amount, unit)
    if not frac:
        return str(whole)
    digits = str(frac).rjust(len(str(unit)) - 1, "0").rstrip("0")
    return f"{whole}.{digits}"
