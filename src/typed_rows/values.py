"""Typed value model: the storable values of a single column cell."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union

from typed_rows.errors import DecodingError, NarrowingError


class ColumnType(Enum):
    """Declared column types (SQLite affinities plus ``Any``)."""

    INTEGER = "Integer"
    REAL = "Real"
    TEXT = "Text"
    BLOB = "Blob"
    ANY = "Any"


# Mapping from type name strings to ColumnType enum values
COLUMN_TYPE_NAMES: dict[str, ColumnType] = {ct.value: ct for ct in ColumnType}


class ValueKind(Enum):
    """Discriminant of the TypedValue variants."""

    NULL = "Null"
    INTEGER = "Integer"
    REAL = "Real"
    TEXT = "Text"
    BLOB = "Blob"


class Absent:
    """Sentinel type for an omitted field slot.

    Absent means "leave this column out of the operation". It is not Null.
    """

    _instance: ClassVar[Absent | None] = None

    def __new__(cls) -> Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> Absent:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Absent:
        return self

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT = Absent()


class TypedValue:
    """Base class for all typed values."""

    kind: ClassVar[ValueKind]

    @property
    def payload(self) -> Any:
        """Return the raw payload carried by this value."""
        raise NotImplementedError

    def as_integer(self) -> int:
        return narrow(self, Integer)

    def as_real(self) -> float:
        return narrow(self, Real)

    def as_text(self) -> str:
        return narrow(self, Text)

    def as_blob(self) -> str:
        return narrow(self, Blob)


@dataclass(frozen=True)
class Null(TypedValue):
    """Explicit SQL NULL, i.e. actively clear the cell."""

    kind: ClassVar[ValueKind] = ValueKind.NULL

    @property
    def payload(self) -> None:
        return None


@dataclass(frozen=True)
class Integer(TypedValue):
    """Arbitrary precision signed integer."""

    value: int
    kind: ClassVar[ValueKind] = ValueKind.INTEGER

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Integer requires an int, got {type(self.value).__name__}")

    @property
    def payload(self) -> int:
        return self.value


@dataclass(frozen=True)
class Real(TypedValue):
    """64-bit floating point value."""

    value: float
    kind: ClassVar[ValueKind] = ValueKind.REAL

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(f"Real requires a float, got {type(self.value).__name__}")
        # Frozen dataclass, so widen ints through object.__setattr__.
        object.__setattr__(self, "value", float(self.value))

    @property
    def payload(self) -> float:
        return self.value


@dataclass(frozen=True)
class Text(TypedValue):
    """Text value."""

    value: str
    kind: ClassVar[ValueKind] = ValueKind.TEXT

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"Text requires a str, got {type(self.value).__name__}")

    @property
    def payload(self) -> str:
        return self.value


_BASE64_URL_SAFE = re.compile(r"[A-Za-z0-9_-]*={0,2}")


@dataclass(frozen=True)
class Blob(TypedValue):
    """Binary value carried as URL-safe base64 text.

    The encoded string is stored as given and only validated when the bytes
    are requested via :meth:`to_bytes`.
    """

    base64_url_safe: str
    kind: ClassVar[ValueKind] = ValueKind.BLOB

    def __post_init__(self) -> None:
        if not isinstance(self.base64_url_safe, str):
            raise DecodingError(
                f"Blob requires URL-safe base64 text, got {type(self.base64_url_safe).__name__}"
            )

    @classmethod
    def from_bytes(cls, data: bytes) -> Blob:
        """Encode raw bytes as a Blob."""
        return cls(base64.urlsafe_b64encode(bytes(data)).decode("ascii"))

    @property
    def payload(self) -> str:
        return self.base64_url_safe

    def to_bytes(self) -> bytes:
        """Decode the payload.

        Raises:
            DecodingError: If the payload is not valid URL-safe base64.
        """
        return decode_base64_url_safe(self.base64_url_safe)


def decode_base64_url_safe(encoded: str) -> bytes:
    """Strictly decode URL-safe base64, padded or unpadded."""
    if not _BASE64_URL_SAFE.fullmatch(encoded):
        raise DecodingError(f"Not valid url-safe base64: {encoded!r}")

    unpadded = encoded.rstrip("=")
    if "=" in encoded and len(encoded) % 4 != 0:
        raise DecodingError(f"Not valid url-safe base64: {encoded!r}")
    if len(unpadded) % 4 == 1:
        raise DecodingError(f"Not valid url-safe base64: {encoded!r}")

    padded = unpadded + "=" * (-len(unpadded) % 4)
    try:
        return base64.b64decode(padded, altchars=b"-_", validate=True)
    except binascii.Error as e:
        raise DecodingError(f"Not valid url-safe base64: {encoded!r}") from e


SqlValue = Union[Null, Integer, Real, Text, Blob]

VARIANTS: tuple[type[TypedValue], ...] = (Null, Integer, Real, Text, Blob)

# A row keyed by column name; ABSENT slots are left out of submissions.
Record = dict[str, Union[TypedValue, Absent]]


def variant_name(slot: Any) -> str:
    """Return the tag name of a field slot, ``Absent`` included."""
    if slot is ABSENT:
        return "Absent"
    if isinstance(slot, TypedValue):
        return slot.kind.value
    return type(slot).__name__


def narrow(value: Any, variant: type[TypedValue]) -> Any:
    """Return the payload of ``value`` if it is a ``variant``.

    Raises:
        NarrowingError: If ``value`` is another variant or absent.
    """
    if isinstance(value, variant):
        return value.payload
    raise NarrowingError(variant.kind.value, variant_name(value))


def value_to_string(value: TypedValue, null_text: str = "NULL") -> str:
    """Render a value for display."""
    if isinstance(value, Null):
        return null_text
    elif isinstance(value, Integer):
        return str(value.value)
    elif isinstance(value, Real):
        return repr(value.value)
    elif isinstance(value, Text):
        return value.value
    elif isinstance(value, Blob):
        return value.base64_url_safe
    raise TypeError(f"Unhandled value variant: {variant_name(value)}")
