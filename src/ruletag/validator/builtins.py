"""Built-in validator factories.

Each factory accepts a ``ValidatorArgs`` and returns a ``Validator``.
Problems with the arguments themselves (missing bound, bad pattern,
wrong field type) raise ``InvalidValidatorArgumentError`` while the
factory runs; problems with the validated value are returned as
``ValidationFailure`` when the validator runs.

Built-in rules:

    max(N)         integer value <= N
    min(N)         integer value >= N
    irange(A, B..) integer value is one of A, B, ...
    srange('a'..)  string value is one of 'a', ...
    not_empty()    string is non-empty after trimming whitespace
    len(N)         string has exactly N characters (field must be str)
    regex('p')     string contains a match for p (field must be str)
    strct()        value passes its own registered record validator
"""
from __future__ import annotations

import re
from typing import Any

from ruletag.errors import InvalidValidatorArgumentError
from ruletag.grammar.tokens import UINT64_MASK
from ruletag.validator.args import ValidatorArgs, ValidatorFactory
from ruletag.validator.outcome import (
    EMPTY_STRING,
    INVALID_LENGTH,
    INVALID_VALUE,
    OUT_OF_RANGE,
    PATTERN_MISMATCH,
    ValidationFailure,
    Validator,
    type_mismatch,
)

_DECIMAL = re.compile(r"[0-9]+")


def to_uint64(value: Any) -> int | None:
    """Normalise an integer-like value to an unsigned 64-bit integer.

    Accepts ``int`` (negative values wrap modulo 2**64) and strings of
    decimal digits that fit in 64 bits.  ``bool`` and every other type
    are rejected.

    Returns
    -------
    int | None
        The normalised integer, or ``None`` if ``value`` is not accepted.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value & UINT64_MASK
    if isinstance(value, str) and _DECIMAL.fullmatch(value):
        parsed = int(value)
        if parsed <= UINT64_MASK:
            return parsed
    return None


def _first_int(args: ValidatorArgs) -> int:
    if not args.integers:
        raise InvalidValidatorArgumentError(args.name, "requires one integer argument")
    return args.integers[0]


def _first_str(args: ValidatorArgs) -> str:
    if not args.strings:
        raise InvalidValidatorArgumentError(args.name, "requires one string argument")
    return args.strings[0]


def _require_str_field(args: ValidatorArgs) -> None:
    typ = args.field_type
    if not (isinstance(typ, type) and issubclass(typ, str)):
        name = getattr(typ, "__name__", repr(typ))
        raise InvalidValidatorArgumentError(
            args.name, f"field must be declared as str, not {name}"
        )


# ---------------------------------------------------------------------------
# Integer bounds
# ---------------------------------------------------------------------------


def max_validator(args: ValidatorArgs) -> Validator:
    """max(N): the value, as an unsigned integer, must not exceed N."""
    bound = _first_int(args)

    def check(value: Any) -> ValidationFailure | None:
        number = to_uint64(value)
        if number is None:
            return type_mismatch("an integer", value)
        if number > bound:
            return ValidationFailure(f"out of range: {number} > {bound}", code=OUT_OF_RANGE)
        return None

    return check


def min_validator(args: ValidatorArgs) -> Validator:
    """min(N): the value, as an unsigned integer, must be at least N."""
    bound = _first_int(args)

    def check(value: Any) -> ValidationFailure | None:
        number = to_uint64(value)
        if number is None:
            return type_mismatch("an integer", value)
        if number < bound:
            return ValidationFailure(f"out of range: {number} < {bound}", code=OUT_OF_RANGE)
        return None

    return check


# ---------------------------------------------------------------------------
# Set membership
# ---------------------------------------------------------------------------


def int_range_validator(args: ValidatorArgs) -> Validator:
    """irange(A, B, ...): the value must be one of the listed integers."""
    allowed = frozenset(args.integers)

    def check(value: Any) -> ValidationFailure | None:
        number = to_uint64(value)
        if number is None:
            return type_mismatch("an integer", value)
        if number not in allowed:
            return ValidationFailure(f"invalid value: {number}", code=INVALID_VALUE)
        return None

    return check


def string_range_validator(args: ValidatorArgs) -> Validator:
    """srange('a', 'b', ...): the value must be one of the listed strings."""
    allowed = frozenset(args.strings)

    def check(value: Any) -> ValidationFailure | None:
        if not isinstance(value, str):
            return type_mismatch("a string", value)
        if value not in allowed:
            return ValidationFailure(f"invalid value: {value!r}", code=INVALID_VALUE)
        return None

    return check


# ---------------------------------------------------------------------------
# Strings
# ---------------------------------------------------------------------------


def not_empty_validator(args: ValidatorArgs) -> Validator:
    """not_empty(): the string must contain a non-whitespace character."""

    def check(value: Any) -> ValidationFailure | None:
        if not isinstance(value, str):
            return type_mismatch("a string", value)
        if not value.strip():
            return ValidationFailure("empty string", code=EMPTY_STRING)
        return None

    return check


def len_validator(args: ValidatorArgs) -> Validator:
    """len(N): the string must be exactly N characters long."""
    _require_str_field(args)
    length = _first_int(args)

    def check(value: Any) -> ValidationFailure | None:
        if not isinstance(value, str):
            return type_mismatch("a string", value)
        if len(value) != length:
            return ValidationFailure(
                f"invalid string length: {len(value)} != {length}",
                code=INVALID_LENGTH,
            )
        return None

    return check


def regex_validator(args: ValidatorArgs) -> Validator:
    """regex('pattern'): the string must contain a match for the pattern."""
    _require_str_field(args)
    source = _first_str(args)
    try:
        pattern = re.compile(source)
    except re.error as exc:
        raise InvalidValidatorArgumentError(
            args.name, f"invalid regex pattern {source!r}: {exc}"
        ) from exc

    def check(value: Any) -> ValidationFailure | None:
        if not isinstance(value, str):
            return type_mismatch("a string", value)
        if pattern.search(value) is None:
            return ValidationFailure(
                f"string does not match pattern {source!r}",
                code=PATTERN_MISMATCH,
            )
        return None

    return check


# ---------------------------------------------------------------------------
# Nested records
# ---------------------------------------------------------------------------


def record_validator(args: ValidatorArgs) -> Validator:
    """strct(): delegate to the record validator registered for the field type."""
    typ = args.field_type
    found = None
    if args.records is not None and isinstance(typ, type):
        found = args.records.get(typ)
    elif args.records is not None and isinstance(typ, str):
        # Unresolved annotation: match registered records by name.
        matches = args.records.find(typ)
        if len(matches) > 1:
            raise InvalidValidatorArgumentError(
                args.name, f"record type name {typ!r} matches {len(matches)} registered records"
            )
        found = matches[0] if matches else None
    if found is None:
        name = getattr(typ, "__qualname__", repr(typ))
        raise InvalidValidatorArgumentError(
            args.name, f"record type {name} is not registered"
        )
    return found


BUILTIN_VALIDATORS: dict[str, ValidatorFactory] = {
    "max": max_validator,
    "min": min_validator,
    "irange": int_range_validator,
    "srange": string_range_validator,
    "not_empty": not_empty_validator,
    "len": len_validator,
    "regex": regex_validator,
    "strct": record_validator,
}
