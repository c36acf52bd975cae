"""Validator combinators.

The combinators build a new validator and leave their inputs untouched,
so a validator may safely be shared between several compositions.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ruletag.validator.outcome import ValidationFailure, Validator, always_valid


def and_then(first: Validator | None, second: Validator | None) -> Validator:
    """Return a validator running ``first`` then, if it passed, ``second``.

    The first failure is returned as-is and ``second`` is never invoked.
    A missing operand is treated as the identity; two missing operands
    yield ``always_valid``.
    """
    if first is None and second is None:
        return always_valid
    if first is None:
        return second  # type: ignore[return-value]
    if second is None:
        return first

    def both(value: Any) -> ValidationFailure | None:
        failure = first(value)
        if failure is not None:
            return failure
        return second(value)

    return both


def chain(validators: Iterable[Validator | None]) -> Validator:
    """Fold ``validators`` left to right with ``and_then``."""
    combined: Validator | None = None
    for v in validators:
        combined = and_then(combined, v)
    return combined if combined is not None else always_valid


def with_field(validator: Validator | None, name: str) -> Validator:
    """Return a validator that attributes any failure to field ``name``.

    The failure's reason and code are preserved; ``field_name`` is set,
    overwriting a name given by an inner record, and ``name`` is
    prepended to the failure path.
    """
    if validator is None:
        return always_valid

    def tagged(value: Any) -> ValidationFailure | None:
        failure = validator(value)
        if failure is None:
            return None
        return failure.for_field(name)

    return tagged


def allow_none(validator: Validator) -> Validator:
    """Return a validator that accepts ``None`` and checks anything else."""

    def optional(value: Any) -> ValidationFailure | None:
        if value is None:
            return None
        return validator(value)

    return optional
