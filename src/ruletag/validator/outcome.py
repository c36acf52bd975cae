"""Validation outcome types.

A ``Validator`` is any callable ``(value) -> ValidationFailure | None``.
``None`` means the value passed; a ``ValidationFailure`` explains why it
did not.  Failures are produced by the built-in validators with an
empty ``field_name`` which is filled in later by
``ruletag.validator.compose.with_field``.

Failure codes use the ``RT`` prefix followed by a three-digit number:

    RT100  Type mismatch (value is not an integer / not a string)
    RT101  Value out of range
    RT102  Value not in the allowed set
    RT103  Empty string
    RT104  Invalid string length
    RT105  String does not match pattern
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

TYPE_MISMATCH = "RT100"
OUT_OF_RANGE = "RT101"
INVALID_VALUE = "RT102"
EMPTY_STRING = "RT103"
INVALID_LENGTH = "RT104"
PATTERN_MISMATCH = "RT105"


@dataclass(frozen=True)
class ValidationFailure:
    """A single reason why a value failed validation.

    Parameters
    ----------
    reason:
        Human-readable description of the problem.
    code:
        Short machine-readable identifier, e.g. ``"RT101"``.
    field_name:
        Name of the field that failed; empty until the validator is
        tagged with a field.
    path:
        Field names from the outermost record down to the failing value,
        e.g. ``("address", "zip_code")`` for a nested record.
    """

    reason: str
    code: str = field(default="")
    field_name: str = field(default="")
    path: tuple[str, ...] = field(default=())

    def __str__(self) -> str:
        prefix = f"[{self.code}] " if self.code else ""
        if not self.field_name:
            return f"{prefix}validation failed: {self.reason}"
        where = ".".join(self.path) if self.path else self.field_name
        return f"{prefix}validation failed for field {where}: {self.reason}"

    def for_field(self, name: str) -> "ValidationFailure":
        """Return a copy attributed to ``name``, one level further out."""
        return dataclasses.replace(self, field_name=name, path=(name, *self.path))


Validator = Callable[[Any], Optional[ValidationFailure]]


def always_valid(_value: Any) -> None:
    """A validator that accepts every value."""
    return None


def type_mismatch(expected: str, value: Any) -> ValidationFailure:
    return ValidationFailure(
        reason=f"not {expected}: got {type(value).__name__}",
        code=TYPE_MISMATCH,
    )
