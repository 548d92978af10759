"""Exception hierarchy for typed_rows.

Every exception also derives from the built-in type callers would naturally
catch (``SyntaxError``, ``ValueError``, ``TypeError``).
"""

from __future__ import annotations

from typing import Any


class TypedRowsError(Exception):
    """Base exception for all typed_rows errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class FilterSyntaxError(TypedRowsError, SyntaxError):
    """A filter expression could not be parsed."""

    def __init__(self, message: str, position: int | None = None) -> None:
        self.message = message
        self.position = position
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)

    def __str__(self) -> str:
        # SyntaxError.__str__ appends file/line details we never set.
        return self.args[0]

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FILTER_SYNTAX_ERROR",
            "message": self.message,
            "position": self.position,
        }


class DecodingError(TypedRowsError, ValueError):
    """A blob payload is not in the single supported representation."""


class NarrowingError(TypedRowsError, TypeError):
    """A value was accessed as the wrong variant."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected}, got {actual}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNEXPECTED_VARIANT",
            "expected": self.expected,
            "actual": self.actual,
        }


class SubmissionError(TypedRowsError, ValueError):
    """A record cannot be turned into an insert or update payload."""
