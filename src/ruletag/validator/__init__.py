"""ruletag validator module.

Exports the outcome types, the combinators, the built-in factories and
the record validator builder.
"""
from __future__ import annotations

from ruletag.validator.outcome import ValidationFailure, Validator, always_valid
from ruletag.validator.compose import allow_none, and_then, chain, with_field
from ruletag.validator.args import ValidatorArgs, ValidatorFactory
from ruletag.validator.builtins import BUILTIN_VALIDATORS, to_uint64
from ruletag.validator.builder import RecordValidator, RecordValidatorBuilder

__all__ = [
    "ValidationFailure",
    "Validator",
    "always_valid",
    "allow_none",
    "and_then",
    "chain",
    "with_field",
    "ValidatorArgs",
    "ValidatorFactory",
    "BUILTIN_VALIDATORS",
    "to_uint64",
    "RecordValidator",
    "RecordValidatorBuilder",
]
