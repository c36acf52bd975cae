"""Registries backing rule compilation.

Three registries are kept, each guarded by its own re-entrant lock so
that registration may overlap with validation traffic:

``ValidatorRegistry``
    Rule name -> ``ValidatorFactory``.  Re-registering a name replaces
    the factory and logs a warning.

``ConstantTable``
    Constant name -> unsigned 64-bit integer, and constant name ->
    string.  Re-registering a name replaces the value ("whoever
    registers last wins") and logs a warning.  Integer constants are
    consulted before string constants.

``RecordValidatorCache``
    Record type -> compiled record validator.  A type is compiled at
    most once; re-registering it is a no-op.

Example
-------
::

    from ruletag.registry import ValidatorRegistry
    from ruletag.validator.outcome import ValidationFailure

    registry = ValidatorRegistry()

    @registry.register("even")
    def even(args):
        def check(value):
            if value % 2:
                return ValidationFailure("odd value")
            return None
        return check

    factory = registry.get("even")
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

from ruletag.errors import InvalidNameError, UnknownValidatorError
from ruletag.grammar.tokens import IDENTIFIER_PATTERN, UINT64_MASK

if TYPE_CHECKING:
    from ruletag.validator.args import ValidatorFactory
    from ruletag.validator.builder import RecordValidator

logger = logging.getLogger(__name__)


def check_name(name: str, kind: str) -> None:
    """Raise ``InvalidNameError`` unless ``name`` matches the identifier grammar."""
    if not isinstance(name, str) or IDENTIFIER_PATTERN.fullmatch(name) is None:
        raise InvalidNameError(str(name), kind)


class ValidatorRegistry:
    """Registry of validator factories keyed by rule name."""

    def __init__(self) -> None:
        self._factories: dict[str, ValidatorFactory] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, name: str) -> Callable[[ValidatorFactory], ValidatorFactory]:
        """Return a decorator that registers the decorated factory under ``name``.

        Raises
        ------
        InvalidNameError
            If ``name`` does not match ``[A-Za-z][A-Za-z0-9_]*``.

        Example
        -------
        ::

            @registry.register("positive")
            def positive(args: ValidatorArgs) -> Validator:
                ...
        """
        check_name(name, "validator")

        def decorator(factory: ValidatorFactory) -> ValidatorFactory:
            self.register_factory(name, factory)
            return factory

        return decorator

    def register_factory(self, name: str, factory: ValidatorFactory) -> None:
        """Register ``factory`` under ``name``, replacing any previous one.

        Raises
        ------
        InvalidNameError
            If ``name`` does not match ``[A-Za-z][A-Za-z0-9_]*``.
        TypeError
            If ``factory`` is not callable.
        """
        check_name(name, "validator")
        if not callable(factory):
            raise TypeError(f"Cannot register {factory!r} under {name!r}: factory must be callable.")
        with self._lock:
            if name in self._factories:
                logger.warning("Validator %r is already registered; overwriting.", name)
            self._factories[name] = factory
        logger.debug(
            "Registered validator %r -> %s",
            name,
            getattr(factory, "__qualname__", repr(factory)),
        )

    def deregister(self, name: str) -> None:
        """Remove the factory registered under ``name``.

        Raises
        ------
        UnknownValidatorError
            If ``name`` is not registered.
        """
        with self._lock:
            if name not in self._factories:
                raise UnknownValidatorError(name, sorted(self._factories))
            del self._factories[name]
        logger.debug("Deregistered validator %r", name)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(self, name: str) -> ValidatorFactory | None:
        """Return the factory registered under ``name``, or ``None``."""
        with self._lock:
            return self._factories.get(name)

    def get(self, name: str) -> ValidatorFactory:
        """Return the factory registered under ``name``.

        Raises
        ------
        UnknownValidatorError
            If no factory is registered under ``name``.
        """
        with self._lock:
            try:
                return self._factories[name]
            except KeyError:
                raise UnknownValidatorError(name, sorted(self._factories)) from None

    def names(self) -> list[str]:
        """Return all registered rule names in alphabetical order."""
        with self._lock:
            return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._factories

    def __len__(self) -> int:
        with self._lock:
            return len(self._factories)

    def __repr__(self) -> str:
        return f"ValidatorRegistry(validators={self.names()})"


class ConstantTable:
    """Named integer and string constants substituted into rule arguments."""

    def __init__(self) -> None:
        self._integers: dict[str, int] = {}
        self._strings: dict[str, str] = {}
        self._lock = threading.RLock()

    def register_int(self, name: str, value: int) -> None:
        """Register an unsigned 64-bit integer constant.

        Raises
        ------
        InvalidNameError
            If ``name`` does not match ``[A-Za-z][A-Za-z0-9_]*``.
        TypeError
            If ``value`` is not an ``int``.
        ValueError
            If ``value`` does not fit in an unsigned 64-bit integer.
        """
        check_name(name, "constant")
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Integer constant {name!r} must be an int, got {type(value).__name__}")
        if not 0 <= value <= UINT64_MASK:
            raise ValueError(f"Integer constant {name!r}={value} is outside the unsigned 64-bit range")
        with self._lock:
            if name in self._integers:
                logger.warning("Integer constant %r is already registered; overwriting.", name)
            self._integers[name] = value
        logger.debug("Registered integer constant %r = %d", name, value)

    def register_str(self, name: str, value: str) -> None:
        """Register a string constant.

        Raises
        ------
        InvalidNameError
            If ``name`` does not match ``[A-Za-z][A-Za-z0-9_]*``.
        TypeError
            If ``value`` is not a ``str``.
        """
        check_name(name, "constant")
        if not isinstance(value, str):
            raise TypeError(f"String constant {name!r} must be a str, got {type(value).__name__}")
        with self._lock:
            if name in self._strings:
                logger.warning("String constant %r is already registered; overwriting.", name)
            self._strings[name] = value
        logger.debug("Registered string constant %r = %r", name, value)

    def lookup(self, name: str) -> int | str | None:
        """Return the constant named ``name``; integers shadow strings."""
        with self._lock:
            if name in self._integers:
                return self._integers[name]
            return self._strings.get(name)

    def integers(self) -> dict[str, int]:
        with self._lock:
            return dict(self._integers)

    def strings(self) -> dict[str, str]:
        with self._lock:
            return dict(self._strings)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._integers or name in self._strings

    def __len__(self) -> int:
        with self._lock:
            return len(self._integers.keys() | self._strings.keys())

    def __repr__(self) -> str:
        return f"ConstantTable(integers={sorted(self._integers)}, strings={sorted(self._strings)})"


class RecordValidatorCache:
    """Compiled record validators keyed by record type.

    ``get_or_build`` holds the lock across the check, the build and the
    insert, so concurrent first registrations of a type compile it once.
    The lock is re-entrant because building one record may look up the
    validators of the records it nests.
    """

    def __init__(self) -> None:
        self._validators: dict[type, RecordValidator] = {}
        self._lock = threading.RLock()

    def get(self, record_type: type) -> RecordValidator | None:
        """Return the compiled validator for ``record_type``, or ``None``."""
        with self._lock:
            return self._validators.get(record_type)

    def find(self, name: str) -> list[RecordValidator]:
        """Return validators whose record type is called ``name``.

        ``name`` is compared with both ``__qualname__`` and ``__name__``,
        so records defined inside a function can be found by their short
        name.
        """
        with self._lock:
            return [
                v
                for t, v in self._validators.items()
                if name in (t.__qualname__, t.__name__)
            ]

    def get_or_build(
        self,
        record_type: type,
        build: Callable[[], RecordValidator],
    ) -> RecordValidator:
        """Return the cached validator for ``record_type``, building it if absent.

        A ``build`` that raises leaves no entry behind.
        """
        with self._lock:
            cached = self._validators.get(record_type)
            if cached is not None:
                logger.debug("Record %s already registered; reusing.", record_type.__qualname__)
                return cached
            built = build()
            self._validators[record_type] = built
        logger.debug("Registered record %s", record_type.__qualname__)
        return built

    def __contains__(self, record_type: object) -> bool:
        with self._lock:
            return record_type in self._validators

    def __len__(self) -> int:
        with self._lock:
            return len(self._validators)

    def __repr__(self) -> str:
        with self._lock:
            names = sorted(t.__qualname__ for t in self._validators)
        return f"RecordValidatorCache(records={names})"
