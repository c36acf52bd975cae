"""Record validator builder.

Turns a ``RecordDescriptor`` into a ``RecordValidator``.  For every
field with rule text the builder:

1. splits the text into ``name(args)`` invocations and lexes each
   argument list;
2. looks the rule name up in the ``ValidatorRegistry``;
3. resolves symbolic constants against the ``ConstantTable``, integer
   constants first, appending each value to the integer or string
   arguments;
4. calls the factory with the declared field type;
5. ANDs the field's validators together and tags them with the field
   name.

All errors raised here are ``ConfigurationError`` subclasses and happen
once, when the record type is registered.
"""
from __future__ import annotations

import logging
from typing import Any

from ruletag.errors import ConfigurationError, UnknownConstantError
from ruletag.parser.parser import ParsedRule, parse_rules
from ruletag.record.descriptor import FieldDescriptor, RecordDescriptor
from ruletag.registry.registry import ConstantTable, RecordValidatorCache, ValidatorRegistry
from ruletag.validator.args import ValidatorArgs
from ruletag.validator.compose import allow_none, chain, with_field
from ruletag.validator.outcome import ValidationFailure, Validator, type_mismatch

logger = logging.getLogger(__name__)


class RecordValidator:
    """Compiled validator for one record type.

    Calling it with a record returns the first failing field's
    ``ValidationFailure`` (fields are checked in declaration order), or
    ``None`` if every field passes.

    Parameters
    ----------
    record_type:
        The type this validator was built for.
    fields:
        ``(field, validator)`` pairs for every field that has rules.
    """

    __slots__ = ("_record_type", "_fields")

    def __init__(
        self,
        record_type: type,
        fields: list[tuple[FieldDescriptor, Validator]],
    ) -> None:
        self._record_type = record_type
        self._fields = tuple(fields)

    @property
    def record_type(self) -> type:
        return self._record_type

    @property
    def field_names(self) -> list[str]:
        """Names of the validated fields, in the order they are checked."""
        return [f.name for f, _ in self._fields]

    def __call__(self, record: Any) -> ValidationFailure | None:
        if not isinstance(record, self._record_type):
            return type_mismatch(f"a {self._record_type.__qualname__}", record)
        for descriptor, validator in self._fields:
            failure = validator(getattr(record, descriptor.name))
            if failure is not None:
                return failure
        return None

    def __repr__(self) -> str:
        return f"RecordValidator({self._record_type.__qualname__}, fields={self.field_names})"


class RecordValidatorBuilder:
    """Builds field and record validators from rule text.

    Parameters
    ----------
    validators:
        Registry the rule names are looked up in.
    constants:
        Table symbolic constants are resolved against.
    records:
        Cache of compiled record validators, passed on to factories so
        that nested-record rules can find their target.
    """

    def __init__(
        self,
        validators: ValidatorRegistry,
        constants: ConstantTable,
        records: RecordValidatorCache,
    ) -> None:
        self._validators = validators
        self._constants = constants
        self._records = records

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, descriptor: RecordDescriptor) -> RecordValidator:
        """Compile every field of ``descriptor`` into one ``RecordValidator``."""
        compiled: list[tuple[FieldDescriptor, Validator]] = []
        for field in descriptor.validated_fields:
            try:
                validator = self.build_field(field)
            except ConfigurationError:
                logger.debug("Failed to build validator for %s.%s", descriptor.name, field.name)
                raise
            compiled.append((field, validator))
        logger.debug(
            "Built validator for %s covering %d field(s)",
            descriptor.name,
            len(compiled),
        )
        return RecordValidator(descriptor.record_type, compiled)

    def build_field(self, field: FieldDescriptor) -> Validator:
        """Compile one field's rule text into a tagged validator.

        Fields declared ``Optional[...]`` accept ``None`` without running
        their rules.
        """
        parsed = parse_rules(field.rules or "")
        validators = [self.build_rule(rule, field.field_type) for rule in parsed]
        validator = with_field(chain(validators), field.name)
        return allow_none(validator) if field.optional else validator

    def build_rule(self, rule: ParsedRule, field_type: Any = None) -> Validator:
        """Resolve one parsed rule and invoke its factory."""
        factory = self._validators.get(rule.name)
        return factory(self.resolve(rule, field_type))

    def resolve(self, rule: ParsedRule, field_type: Any = None) -> ValidatorArgs:
        """Substitute symbolic constants and build the factory arguments.

        Raises
        ------
        UnknownConstantError
            If a symbol names neither an integer nor a string constant.
        """
        strings = list(rule.arguments.strings)
        integers = list(rule.arguments.integers)
        for symbol in rule.arguments.symbols:
            value = self._constants.lookup(symbol)
            if value is None:
                raise UnknownConstantError(symbol)
            if isinstance(value, int):
                integers.append(value)
            else:
                strings.append(value)
        return ValidatorArgs(
            name=rule.name,
            strings=tuple(strings),
            integers=tuple(integers),
            field_type=field_type,
            records=self._records,
        )
