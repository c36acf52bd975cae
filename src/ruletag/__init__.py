"""ruletag — declarative field validation rules compiled into validators.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    from dataclasses import dataclass
    import ruletag
    from ruletag import rules

    @dataclass
    class Account:
        name: str = rules("not_empty(), regex('^[a-z_]+$')")
        tier: int = rules("irange(1, 2, 3)")
        quota: int = rules("max(MAX_QUOTA)")

    ruletag.register_constant_int("MAX_QUOTA", 1000)
    ruletag.register_record(Account)

    failure = ruletag.validate_record(Account(name="ops", tier=4, quota=10))
    str(failure)
    # '[RT102] validation failed for field tier: invalid value: 4'

The module-level functions operate on a process-wide default engine;
see ``ValidatorEngine`` and ``use_engine`` for isolated instances.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ruletag.engine import ValidatorEngine, default_engine, set_default_engine, use_engine
from ruletag.errors import (
    ArgumentSyntaxError,
    ConfigurationError,
    InvalidNameError,
    InvalidRecordError,
    InvalidRecordTypeError,
    InvalidValidatorArgumentError,
    RecordNotRegisteredError,
    RecordValidationError,
    RuleTagError,
    UnknownConstantError,
    UnknownValidatorError,
    ValidationError,
)
from ruletag.lexer.lexer import ArgumentBundle, parse_arguments
from ruletag.parser.parser import ParsedRule, parse_rules
from ruletag.record.descriptor import FieldDescriptor, RecordDescriptor, describe, rules
from ruletag.validator.args import ValidatorArgs
from ruletag.validator.outcome import ValidationFailure

if TYPE_CHECKING:
    from ruletag.validator.args import ValidatorFactory
    from ruletag.validator.builder import RecordValidator

__version__: str = "0.1.0"


def register_validator(name: str, factory: "ValidatorFactory") -> None:
    """Register a validator factory on the default engine.

    Parameters
    ----------
    name:
        Rule name; must match ``[A-Za-z][A-Za-z0-9_]*``.
    factory:
        Callable ``(ValidatorArgs) -> Validator``.

    Raises
    ------
    InvalidNameError
        If ``name`` is not a valid identifier.
    """
    default_engine().register_validator(name, factory)


def validator(name: str) -> Callable[["ValidatorFactory"], "ValidatorFactory"]:
    """Decorator registering a validator factory on the default engine."""
    return default_engine().validator(name)


def register_constant_int(name: str, value: int) -> None:
    """Register an unsigned 64-bit integer constant on the default engine."""
    default_engine().register_constant_int(name, value)


def register_constant_str(name: str, value: str) -> None:
    """Register a string constant on the default engine."""
    default_engine().register_constant_str(name, value)


def register_record(record: Any, localns: dict[str, Any] | None = None) -> "RecordValidator":
    """Compile and cache the validator for a record type.

    Parameters
    ----------
    record:
        A dataclass type or instance, or a ``RecordDescriptor``.
    localns:
        Names for resolving string annotations, e.g. ``locals()`` of the
        function defining the record.

    Returns
    -------
    RecordValidator
        The cached validator.  Registering the same type again is a
        no-op that returns the same object.

    Raises
    ------
    ConfigurationError
        If the record's rules cannot be compiled.
    """
    return default_engine().register_record(record, localns)


def validate_record(record: Any) -> ValidationFailure | None:
    """Validate a record instance whose type has been registered.

    Returns
    -------
    ValidationFailure | None
        The first failing field's failure, or ``None`` when valid.

    Raises
    ------
    RecordNotRegisteredError
        If the record's type was never registered.
    """
    return default_engine().validate_record(record)


def check_record(record: Any) -> None:
    """Validate a record, raising ``RecordValidationError`` on failure."""
    default_engine().check_record(record)


__all__ = [
    "__version__",
    # Operations
    "register_validator",
    "validator",
    "register_constant_int",
    "register_constant_str",
    "register_record",
    "validate_record",
    "check_record",
    "parse_arguments",
    "parse_rules",
    "describe",
    "rules",
    # Engine
    "ValidatorEngine",
    "default_engine",
    "set_default_engine",
    "use_engine",
    # Types
    "ArgumentBundle",
    "ParsedRule",
    "FieldDescriptor",
    "RecordDescriptor",
    "ValidatorArgs",
    "ValidationFailure",
    # Errors
    "RuleTagError",
    "ConfigurationError",
    "InvalidNameError",
    "UnknownValidatorError",
    "UnknownConstantError",
    "ArgumentSyntaxError",
    "InvalidValidatorArgumentError",
    "InvalidRecordTypeError",
    "ValidationError",
    "RecordNotRegisteredError",
    "InvalidRecordError",
    "RecordValidationError",
]
