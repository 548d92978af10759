"""Per-field edit state and parsing of user input by column affinity."""

from __future__ import annotations

from dataclasses import dataclass, replace

from typed_rows.literals import parse_integer, parse_real
from typed_rows.values import (
    ABSENT,
    Absent,
    Blob,
    ColumnType,
    Integer,
    Null,
    Real,
    Text,
    TypedValue,
    decode_base64_url_safe,
)


@dataclass(frozen=True)
class FieldState:
    """Edit state of a single field.

    A nullable field is either editable, holding a value, or disabled,
    which submits an explicit Null. ``last_known`` remembers the value to
    restore when the field is re-enabled. Transitions return new states.
    """

    editable: bool
    last_known: TypedValue | Absent = ABSENT
    nullable: bool = True

    @classmethod
    def initial(cls, value: TypedValue | Absent, nullable: bool) -> FieldState:
        """State for a field whose form starts out holding ``value``."""
        has_value = value is not ABSENT and not isinstance(value, Null)
        return cls(
            editable=has_value or not nullable,
            last_known=value if has_value else ABSENT,
            nullable=nullable,
        )

    @property
    def current(self) -> TypedValue | Absent:
        """The slot to submit for this field."""
        if not self.editable:
            return Null()
        return self.last_known

    def enable(self) -> FieldState:
        """Make the field editable again, restoring the last known value."""
        if self.editable:
            return self
        restored = self.last_known if self.last_known is not ABSENT else Null()
        return replace(self, editable=True, last_known=restored)

    def disable(self) -> FieldState:
        """Disable the field, which actively sets the column to NULL."""
        if not self.nullable:
            raise ValueError("Cannot disable a non-nullable field")
        return replace(self, editable=False)

    def set(self, value: TypedValue | Absent) -> FieldState:
        """Record a new value typed into the field."""
        if not self.editable:
            raise ValueError("Cannot set the value of a disabled field")
        return replace(self, last_known=value)


def parse_input(column_type: ColumnType, text: str) -> TypedValue | Absent:
    """Interpret text typed into a field according to the column's affinity.

    Unparseable numbers yield ABSENT, leaving the field unchanged.

    Raises:
        DecodingError: If a Blob field receives invalid URL-safe base64.
    """
    if column_type is ColumnType.INTEGER:
        number = parse_integer(text)
        return Integer(number) if number is not None else ABSENT
    elif column_type is ColumnType.REAL:
        real = parse_real(text)
        return Real(real) if real is not None else ABSENT
    elif column_type is ColumnType.TEXT:
        return Text(text)
    elif column_type is ColumnType.BLOB:
        decode_base64_url_safe(text)
        return Blob(text)
    elif column_type is ColumnType.ANY:
        number = parse_integer(text)
        if number is not None:
            return Integer(number)
        real = parse_real(text)
        if real is not None:
            return Real(real)
        return Text(text)
    raise TypeError(f"Unhandled column type: {column_type!r}")
