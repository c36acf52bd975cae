#!/usr/bin/env python3
"""Example: custom validators and isolated engines

Registers a custom rule on a private ``ValidatorEngine`` and loads
string constants from an inline mapping.

Usage:
    python examples/02_custom_validators.py
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ruletag import ValidatorArgs, ValidatorEngine, ValidationFailure, rules
from ruletag.config import split_constants
from ruletag.errors import InvalidValidatorArgumentError, RecordValidationError
from ruletag.validator.outcome import INVALID_VALUE, type_mismatch


def suffix_validator(args: ValidatorArgs):
    """Value must end with one of the given suffixes."""
    if not args.strings:
        raise InvalidValidatorArgumentError(args.name, "requires at least one string argument")
    suffixes = tuple(args.strings)

    def check(value: Any) -> ValidationFailure | None:
        if not isinstance(value, str):
            return type_mismatch("a string", value)
        if value.endswith(suffixes):
            return None
        return ValidationFailure(f"{value!r} does not end with {' or '.join(suffixes)}", INVALID_VALUE)

    return check


@dataclass
class Mailbox:
    address: str = rules("not_empty(), suffix(COMPANY_DOMAIN, '.org')")


def main() -> None:
    engine = ValidatorEngine()
    engine.register_validator("suffix", suffix_validator)

    _, strings = split_constants({"COMPANY_DOMAIN": "@example.com"})
    for name, value in strings.items():
        engine.register_constant_str(name, value)

    engine.register_record(Mailbox)
    for address in ("ops@example.com", "team@python.org", "me@elsewhere.net"):
        try:
            engine.check_record(Mailbox(address))
            print(f"  {address:20} ok")
        except RecordValidationError as error:
            print(f"  {address:20} {error}")


if __name__ == "__main__":
    main()
