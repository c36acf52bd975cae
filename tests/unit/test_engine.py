"""Unit tests for ruletag.engine and the module-level API in ruletag."""
from __future__ import annotations

from dataclasses import dataclass

import pytest

import ruletag
from ruletag.engine import ValidatorEngine, default_engine, set_default_engine, use_engine
from ruletag.errors import (
    InvalidNameError,
    InvalidRecordError,
    InvalidRecordTypeError,
    RecordNotRegisteredError,
    RecordValidationError,
    UnknownConstantError,
    UnknownValidatorError,
)
from ruletag.record import rules
from ruletag.validator.args import ValidatorArgs
from ruletag.validator.outcome import ValidationFailure, Validator


@dataclass
class Account:
    name: str = rules("not_empty(), regex('^[a-z_]+$')")
    tier: int = rules("irange(1, 2, 3)")
    quota: int = rules("max(MAX_QUOTA)")


@dataclass
class Unregistered:
    x: int = rules("max(1)")


class NotADataclass:
    pass


# ---------------------------------------------------------------------------
# ValidatorEngine
# ---------------------------------------------------------------------------


class TestValidatorEngine:
    def test_builtins_registered_by_default(self, engine: ValidatorEngine) -> None:
        for name in ("max", "min", "irange", "srange", "not_empty", "len", "regex", "strct"):
            assert engine.lookup_validator(name) is not None

    def test_engine_without_builtins(self) -> None:
        bare = ValidatorEngine(builtins=False)
        assert len(bare.validators) == 0
        with pytest.raises(UnknownValidatorError):
            bare.compile_rules("max(1)")

    def test_engines_are_isolated(self) -> None:
        first, second = ValidatorEngine(), ValidatorEngine()
        first.register_constant_int("ONLY_FIRST", 1)
        assert first.lookup_constant("ONLY_FIRST") == 1
        assert second.lookup_constant("ONLY_FIRST") is None

    def test_register_validator_and_use_it(self, engine: ValidatorEngine) -> None:
        def even(args: ValidatorArgs) -> Validator:
            def check(value: int) -> ValidationFailure | None:
                return ValidationFailure("odd", code="APP001") if value % 2 else None

            return check

        engine.register_validator("even", even)
        v = engine.compile_rules("even()", int, name="count")
        assert v(2) is None
        failure = v(3)
        assert failure is not None
        assert failure.code == "APP001"
        assert failure.field_name == "count"

    def test_register_validator_rejects_bad_name(self, engine: ValidatorEngine) -> None:
        with pytest.raises(InvalidNameError):
            engine.register_validator("no good", lambda args: lambda v: None)

    def test_validate_record(self, engine: ValidatorEngine) -> None:
        engine.register_constant_int("MAX_QUOTA", 1000)
        engine.register_record(Account)
        assert engine.validate_record(Account(name="ops", tier=2, quota=10)) is None
        failure = engine.validate_record(Account(name="ops", tier=4, quota=10))
        assert failure is not None
        assert str(failure) == "[RT102] validation failed for field tier: invalid value: 4"

    def test_check_record_raises_on_failure(self, engine: ValidatorEngine) -> None:
        engine.register_constant_int("MAX_QUOTA", 1000)
        engine.register_record(Account)
        engine.check_record(Account(name="ops", tier=1, quota=1))
        with pytest.raises(RecordValidationError) as info:
            engine.check_record(Account(name="  ", tier=1, quota=1))
        assert info.value.failure.field_name == "name"

    def test_unregistered_record(self, engine: ValidatorEngine) -> None:
        with pytest.raises(RecordNotRegisteredError) as info:
            engine.validate_record(Unregistered(x=0))
        assert info.value.record_type is Unregistered

    def test_none_record(self, engine: ValidatorEngine) -> None:
        with pytest.raises(InvalidRecordError):
            engine.validate_record(None)

    def test_non_dataclass_cannot_be_registered(self, engine: ValidatorEngine) -> None:
        with pytest.raises(InvalidRecordTypeError):
            engine.register_record(NotADataclass)

    def test_failed_registration_can_be_retried(self, engine: ValidatorEngine) -> None:
        with pytest.raises(UnknownConstantError):
            engine.register_record(Account)
        engine.register_constant_int("MAX_QUOTA", 5)
        assert engine.register_record(Account) is not None
        assert engine.is_registered(Account)

    def test_compile_rules_unwraps_optional(self, engine: ValidatorEngine) -> None:
        from typing import Optional

        v = engine.compile_rules("len(2)", Optional[str])
        assert v("ab") is None

    def test_compile_rules_optional_accepts_none(self, engine: ValidatorEngine) -> None:
        from typing import Optional

        v = engine.compile_rules("min(1)", Optional[int])
        assert v(None) is None
        assert v(2) is None
        failure = v(0)
        assert failure is not None and failure.field_name == "value"

    def test_compile_rules_plain_type_rejects_none(self, engine: ValidatorEngine) -> None:
        failure = engine.compile_rules("min(1)", int)(None)
        assert failure is not None and failure.code == "RT100"

    def test_repr(self, engine: ValidatorEngine) -> None:
        assert "validators=8" in repr(engine)


# ---------------------------------------------------------------------------
# Default engine
# ---------------------------------------------------------------------------


class TestDefaultEngine:
    def test_default_engine_is_shared(self) -> None:
        assert default_engine() is default_engine()

    def test_use_engine_swaps_and_restores(self) -> None:
        before = default_engine()
        with use_engine() as active:
            assert default_engine() is active
            assert active is not before
        assert default_engine() is before

    def test_use_engine_with_explicit_engine(self, engine: ValidatorEngine) -> None:
        with use_engine(engine) as active:
            assert active is engine

    def test_set_default_engine_returns_previous(self) -> None:
        fresh = ValidatorEngine()
        previous = set_default_engine(fresh)
        try:
            assert default_engine() is fresh
        finally:
            set_default_engine(previous)


class TestModuleLevelApi:
    def test_full_flow_on_default_engine(self, isolated_default: ValidatorEngine) -> None:
        ruletag.register_constant_int("MAX_QUOTA", 100)
        ruletag.register_constant_str("UNUSED", "x")
        ruletag.register_record(Account)
        assert isolated_default.is_registered(Account)
        assert ruletag.validate_record(Account(name="a", tier=1, quota=100)) is None
        failure = ruletag.validate_record(Account(name="a", tier=1, quota=101))
        assert failure is not None and failure.field_name == "quota"
        with pytest.raises(RecordValidationError):
            ruletag.check_record(Account(name="a", tier=1, quota=101))

    def test_validator_decorator(self, isolated_default: ValidatorEngine) -> None:
        @ruletag.validator("always_fail")
        def always_fail(args: ValidatorArgs) -> Validator:
            return lambda value: ValidationFailure("nope")

        assert isolated_default.lookup_validator("always_fail") is always_fail

    def test_register_validator(self, isolated_default: ValidatorEngine) -> None:
        factory = lambda args: lambda value: None  # noqa: E731
        ruletag.register_validator("noop", factory)
        assert isolated_default.lookup_validator("noop") is factory

    def test_unregistered_on_default_engine(self, isolated_default: ValidatorEngine) -> None:
        with pytest.raises(RecordNotRegisteredError):
            ruletag.validate_record(Unregistered(x=1))
