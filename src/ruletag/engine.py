"""The validation engine: one set of registries and the operations on them.

A ``ValidatorEngine`` owns a ``ValidatorRegistry``, a ``ConstantTable``
and a ``RecordValidatorCache``.  The module-level functions in
``ruletag`` delegate to a process-wide default engine; tests and
embedding applications can create isolated engines or temporarily
install one as the default with ``use_engine``.

Expected lifecycle: register validators and constants at startup,
register record types (eagerly or on first use), then validate.

Usage
-----
::

    from ruletag import ValidatorEngine, rules
    from dataclasses import dataclass

    @dataclass
    class Order:
        quantity: int = rules("min(1), max(MAX_QTY)")

    engine = ValidatorEngine()
    engine.register_constant_int("MAX_QTY", 500)
    engine.register_record(Order)
    failure = engine.validate_record(Order(quantity=900))
    failure.field_name   # 'quantity'
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from ruletag.errors import InvalidRecordError, RecordNotRegisteredError, RecordValidationError
from ruletag.record.descriptor import FieldDescriptor, RecordDescriptor, describe, unwrap_optional
from ruletag.registry.registry import ConstantTable, RecordValidatorCache, ValidatorRegistry
from ruletag.validator.args import ValidatorFactory
from ruletag.validator.builder import RecordValidator, RecordValidatorBuilder
from ruletag.validator.builtins import BUILTIN_VALIDATORS
from ruletag.validator.outcome import ValidationFailure, Validator

logger = logging.getLogger(__name__)


class ValidatorEngine:
    """Registries plus the register/validate operations over them.

    Parameters
    ----------
    builtins:
        When ``True`` (the default), the built-in validators ``max``,
        ``min``, ``irange``, ``srange``, ``not_empty``, ``len``,
        ``regex`` and ``strct`` are registered up front.
    """

    def __init__(self, builtins: bool = True) -> None:
        self.validators = ValidatorRegistry()
        self.constants = ConstantTable()
        self.records = RecordValidatorCache()
        self._builder = RecordValidatorBuilder(self.validators, self.constants, self.records)
        if builtins:
            for name, factory in BUILTIN_VALIDATORS.items():
                self.validators.register_factory(name, factory)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_validator(self, name: str, factory: ValidatorFactory) -> None:
        """Register a validator factory under ``name``."""
        self.validators.register_factory(name, factory)

    def validator(self, name: str) -> Callable[[ValidatorFactory], ValidatorFactory]:
        """Decorator form of ``register_validator``."""
        return self.validators.register(name)

    def register_constant_int(self, name: str, value: int) -> None:
        """Register an unsigned 64-bit integer constant."""
        self.constants.register_int(name, value)

    def register_constant_str(self, name: str, value: str) -> None:
        """Register a string constant."""
        self.constants.register_str(name, value)

    def register_record(self, record: Any, localns: dict[str, Any] | None = None) -> RecordValidator:
        """Compile and cache the validator for a record type.

        Parameters
        ----------
        record:
            A dataclass type, a dataclass instance, or a prebuilt
            ``RecordDescriptor``.
        localns:
            Names for resolving string annotations of a dataclass, e.g.
            ``locals()`` where the record is defined.  See ``describe``.

        Returns
        -------
        RecordValidator
            The cached validator.  Registering a type again returns the
            validator built the first time.

        Raises
        ------
        ConfigurationError
            If any field's rules cannot be compiled; nothing is cached.
        """
        if isinstance(record, RecordDescriptor):
            descriptor = record
            return self.records.get_or_build(
                descriptor.record_type, lambda: self._builder.build(descriptor)
            )
        record_type = record if isinstance(record, type) else type(record)
        return self.records.get_or_build(
            record_type, lambda: self._builder.build(describe(record_type, localns))
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup_validator(self, name: str) -> ValidatorFactory | None:
        return self.validators.lookup(name)

    def lookup_constant(self, name: str) -> int | str | None:
        return self.constants.lookup(name)

    def is_registered(self, record_type: type) -> bool:
        return record_type in self.records

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_record(self, record: Any) -> ValidationFailure | None:
        """Validate ``record`` with its registered validator.

        Returns
        -------
        ValidationFailure | None
            The first failing field's failure, or ``None`` if valid.

        Raises
        ------
        InvalidRecordError
            If ``record`` is ``None``.
        RecordNotRegisteredError
            If the record's type was never registered.
        """
        if record is None:
            raise InvalidRecordError()
        validator = self.records.get(type(record))
        if validator is None:
            raise RecordNotRegisteredError(type(record))
        return validator(record)

    def check_record(self, record: Any) -> None:
        """Like ``validate_record`` but raise ``RecordValidationError`` on failure."""
        failure = self.validate_record(record)
        if failure is not None:
            raise RecordValidationError(failure)

    def compile_rules(self, rules: str, field_type: Any = None, name: str = "value") -> Validator:
        """Compile standalone rule text into a validator tagged ``name``.

        ``Optional[...]`` field types are unwrapped before the factories
        see them.
        """
        declared, optional = unwrap_optional(field_type)
        return self._builder.build_field(
            FieldDescriptor(name=name, field_type=declared, rules=rules, optional=optional)
        )

    def __repr__(self) -> str:
        return (
            f"ValidatorEngine(validators={len(self.validators)}, "
            f"constants={len(self.constants)}, records={len(self.records)})"
        )


# ---------------------------------------------------------------------------
# Process-wide default engine
# ---------------------------------------------------------------------------

_default_engine: ValidatorEngine | None = None
_default_lock = threading.Lock()


def default_engine() -> ValidatorEngine:
    """Return the process-wide engine, creating it on first use."""
    global _default_engine
    with _default_lock:
        if _default_engine is None:
            _default_engine = ValidatorEngine()
            logger.debug("Created default validator engine")
        return _default_engine


def set_default_engine(engine: ValidatorEngine | None) -> ValidatorEngine | None:
    """Install ``engine`` as the default and return the previous one.

    Passing ``None`` drops the default so the next ``default_engine()``
    call creates a fresh one.
    """
    global _default_engine
    with _default_lock:
        previous, _default_engine = _default_engine, engine
    return previous


@contextmanager
def use_engine(engine: ValidatorEngine | None = None) -> Iterator[ValidatorEngine]:
    """Temporarily make ``engine`` (or a fresh one) the default engine.

    Example
    -------
    ::

        with use_engine() as engine:
            ruletag.register_record(Order)   # lands in ``engine``
    """
    active = engine if engine is not None else ValidatorEngine()
    previous = set_default_engine(active)
    try:
        yield active
    finally:
        set_default_engine(previous)
