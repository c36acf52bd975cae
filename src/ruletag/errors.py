"""Exception types for ruletag.

Two families are kept apart:

``ConfigurationError``
    Raised while registering validators or constants, or while a record
    type's validator is built for the first time.  These point at a
    mistake in the rule declarations themselves and are not retried.

``ValidationError`` family
    Raised by the record-level API for caller-side problems
    (``RecordNotRegisteredError``, ``InvalidRecordError``) or, through
    ``check_record``, to wrap an ordinary ``ValidationFailure``.

Ordinary validation failures (bound, membership, pattern, type mismatch)
are *returned* as ``ValidationFailure`` values, never raised by
validators.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ruletag.validator.outcome import ValidationFailure


class RuleTagError(Exception):
    """Base class for every exception raised by ruletag."""


# ---------------------------------------------------------------------------
# Configuration-time errors
# ---------------------------------------------------------------------------


class ConfigurationError(RuleTagError):
    """A rule declaration, registration or factory call is invalid."""


class InvalidNameError(ConfigurationError, ValueError):
    """Raised when a validator or constant name breaks the identifier grammar."""

    def __init__(self, name: str, kind: str) -> None:
        self.name = name
        self.kind = kind
        super().__init__(
            f"Invalid {kind} name {name!r}: names must start with a letter "
            "and contain only letters, digits and underscores."
        )


class UnknownValidatorError(ConfigurationError, KeyError):
    """Raised when rule text references a validator that is not registered."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = available or []
        hint = f" Available validators: {', '.join(self.available)}." if self.available else ""
        super().__init__(f"Unknown validator {name!r}.{hint}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class UnknownConstantError(ConfigurationError, KeyError):
    """Raised when a symbolic constant has not been registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Unknown constant {name!r}; register it with "
            "register_constant_int() or register_constant_str() first."
        )

    def __str__(self) -> str:
        return str(self.args[0])


class ArgumentSyntaxError(ConfigurationError):
    """Raised when rule or argument text is not well-formed.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    text:
        The complete text being scanned.
    offset:
        0-based offset in ``text`` where the problem was detected.
    """

    def __init__(self, message: str, text: str, offset: int) -> None:
        super().__init__(f"Syntax error at offset {offset} in {text!r}: {message}")
        self.syntax_message = message
        self.text = text
        self.offset = offset


class InvalidValidatorArgumentError(ConfigurationError):
    """Raised by a validator factory that cannot be built from its arguments.

    Parameters
    ----------
    validator:
        Name of the rule whose factory rejected its arguments.
    reason:
        What was wrong (arity, field type, pattern, nested type...).
    """

    def __init__(self, validator: str, reason: str) -> None:
        super().__init__(f"Cannot build validator {validator!r}: {reason}")
        self.validator = validator
        self.reason = reason


class InvalidRecordTypeError(ConfigurationError, TypeError):
    """Raised when a type cannot be described as a validatable record."""

    def __init__(self, record_type: Any, reason: str) -> None:
        self.record_type = record_type
        name = getattr(record_type, "__qualname__", repr(record_type))
        super().__init__(f"Cannot register {name}: {reason}")


# ---------------------------------------------------------------------------
# Validation-time errors
# ---------------------------------------------------------------------------


class ValidationError(RuleTagError):
    """Base class for errors raised by the record validation API."""


class RecordNotRegisteredError(ValidationError, LookupError):
    """Raised when a record is validated before its type was registered."""

    def __init__(self, record_type: type) -> None:
        self.record_type = record_type
        super().__init__(
            f"Record type {record_type.__qualname__} is not registered; "
            "call register_record() before validating it."
        )


class InvalidRecordError(ValidationError, TypeError):
    """Raised when ``None`` is passed where a record instance is expected."""

    def __init__(self) -> None:
        super().__init__("Invalid record: None cannot be validated.")


class RecordValidationError(ValidationError, ValueError):
    """Raised by ``check_record`` when a record fails validation."""

    def __init__(self, failure: ValidationFailure) -> None:
        self.failure = failure
        super().__init__(str(failure))
