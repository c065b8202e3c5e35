"""
Exception hierarchy for key parsing, line parsing and database construction.

All exceptions derive from Gv100adError so callers can catch the whole family.
"""

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gv100ad.model.keys import Key
    from gv100ad.model.kinds import Kind


class Gv100adError(Exception):
    """Base class for all gv100ad errors."""


class KeyErrorReason(str, Enum):
    """Why a key text was rejected."""

    INVALID_LENGTH = "invalid_length"
    INVALID_DIGITS = "invalid_digits"
    OUT_OF_RANGE = "out_of_range"


class KeyFormatError(Gv100adError, ValueError):
    """Key text has the wrong length, non-digit characters or an out-of-range group."""

    def __init__(
        self,
        text: str,
        kind: "Kind",
        reason: KeyErrorReason,
        detail: str,
    ) -> None:
        self.text = text
        self.kind = kind
        self.reason = reason
        self.detail = detail
        super().__init__(f"Invalid {kind.value} key {text!r}: {detail}")


class LineParseError(Gv100adError, ValueError):
    """A data line does not match the fixed-width layout of its record type."""

    def __init__(
        self,
        line_number: int,
        field: str,
        reason: str,
        line: str | None = None,
    ) -> None:
        self.line_number = line_number
        self.field = field
        self.reason = reason
        self.line = line
        super().__init__(f"Line {line_number}, field '{field}': {reason}")


class DuplicateKeyError(Gv100adError):
    """The same key appeared twice for one kind."""

    def __init__(
        self,
        kind: "Kind",
        key: "Key",
        line_number: int,
        first_line_number: int,
    ) -> None:
        self.kind = kind
        self.key = key
        self.line_number = line_number
        self.first_line_number = first_line_number
        super().__init__(
            f"Line {line_number}: duplicate {kind.value} key {key} "
            f"(first defined on line {first_line_number})"
        )


class ConstructionError(Gv100adError):
    """
    Database construction failed.

    Wraps the first error, or every error when the parser was configured to
    collect all of them. No partially built database is ever returned.
    """

    def __init__(self, errors: list[Gv100adError]) -> None:
        self.errors = list(errors)
        if len(self.errors) == 1:
            message = f"Failed to build database: {self.errors[0]}"
        else:
            lines = "\n".join(f"  {error}" for error in self.errors)
            message = f"Failed to build database ({len(self.errors)} errors):\n{lines}"
        super().__init__(message)

    @property
    def first(self) -> Gv100adError:
        """The first error encountered."""
        return self.errors[0]


class RecordNotFoundError(Gv100adError, LookupError):
    """No record exists for a well-formed key."""

    def __init__(self, kind: "Kind", key: "Key") -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"No {kind.value} with key {key}")
