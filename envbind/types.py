"""Well-known field types and the textual decode/encode capabilities.

Any class can take part in binding by exposing a ``from_text`` classmethod;
such classes are treated as opaque scalars even when they subclass ``list``,
``int`` or ``bool``-like builtins. Instances exposing ``to_text`` are rendered
with it when a preset value becomes a default.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from email.utils import formataddr, parseaddr
from typing import Annotated, Any, Protocol, Self, runtime_checkable

from pydantic import Field

# Fixed-width integer families; conversion rejects values outside the range.
Int8 = Annotated[int, Field(ge=-(2**7), le=2**7 - 1)]
Int16 = Annotated[int, Field(ge=-(2**15), le=2**15 - 1)]
Int32 = Annotated[int, Field(ge=-(2**31), le=2**31 - 1)]
Int64 = Annotated[int, Field(ge=-(2**63), le=2**63 - 1)]
Uint8 = Annotated[int, Field(ge=0, le=2**8 - 1)]
Uint16 = Annotated[int, Field(ge=0, le=2**16 - 1)]
Uint32 = Annotated[int, Field(ge=0, le=2**32 - 1)]
Uint64 = Annotated[int, Field(ge=0, le=2**64 - 1)]
Uint = Uint64


class TextDecoder(Protocol):
    """Types constructible from their textual form."""

    @classmethod
    def from_text(cls, text: str) -> Self: ...


@runtime_checkable
class TextEncoder(Protocol):
    """Values renderable to the textual form their type decodes."""

    def to_text(self) -> str: ...


def has_text_decoder(tp: Any) -> bool:
    """Return whether ``tp`` is a class exposing ``from_text``.

    Examples
    --------
    >>> has_text_decoder(HardwareAddr)
    True
    >>> has_text_decoder(int)
    False
    """
    return isinstance(tp, type) and callable(getattr(tp, "from_text", None))


_MAC_LENGTHS = (6, 8, 20)


class HardwareAddr(bytes):
    """A link-layer (MAC) address.

    Accepts colon or hyphen separated octets (``01:23:45:67:89:ab``) and dotted
    groups of four hex digits (``0123.4567.89ab``), for EUI-48, EUI-64 and
    20-octet InfiniBand addresses.

    Examples
    --------
    >>> str(HardwareAddr.from_text("0123.4567.89ab"))
    '01:23:45:67:89:ab'
    """

    @classmethod
    def from_text(cls, text: str) -> Self:
        octets: list[str] = []
        if len(text) >= 14 and text[2] in ":-" and (len(text) + 1) % 3 == 0:
            octets = text.split(text[2])
        elif len(text) >= 14 and text[4] == "." and (len(text) + 1) % 5 == 0:
            for group in text.split("."):
                if len(group) != 4:
                    raise ValueError(f"address {text}: invalid MAC address")
                octets.extend((group[:2], group[2:]))

        if len(octets) not in _MAC_LENGTHS or not all(_is_hex_octet(o) for o in octets):
            raise ValueError(f"address {text}: invalid MAC address")
        return cls(int(o, 16) for o in octets)

    def to_text(self) -> str:
        return ":".join(f"{b:02x}" for b in self)

    def __str__(self) -> str:
        return self.to_text()


def _is_hex_octet(text: str) -> bool:
    return len(text) == 2 and all(c in string.hexdigits for c in text)


@dataclass(frozen=True, slots=True)
class MailAddress:
    """A single RFC 5322 mailbox, optionally with a display name.

    Examples
    --------
    >>> str(MailAddress.from_text("foo@example.com"))
    '<foo@example.com>'
    >>> MailAddress.from_text("Foo <foo@example.com>").name
    'Foo'
    """

    address: str
    name: str = ""

    @classmethod
    def from_text(cls, text: str) -> Self:
        name, address = parseaddr(text)
        local, _, domain = address.partition("@")
        if not local or not domain or "@" in domain:
            raise ValueError(f"mail: missing '@' or angle-addr in {text!r}")
        return cls(address=address, name=name)

    def to_text(self) -> str:
        return str(self)

    def __str__(self) -> str:
        if self.name:
            return formataddr((self.name, self.address))
        return f"<{self.address}>"

    def __bool__(self) -> bool:
        return bool(self.address)
