#!/usr/bin/env python3
"""Example: ruletag quickstart

Declares rules on dataclass fields, registers the record and validates
a few instances, including a nested record.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install ruletag
"""
from __future__ import annotations

from dataclasses import dataclass

import ruletag
from ruletag import rules


@dataclass
class Address:
    country: str = rules("len(2), srange('NL', 'BE', 'DE')")
    postcode: str = rules("regex('^[0-9]{4} ?[A-Z]{2}$')")


@dataclass
class Customer:
    name: str = rules("not_empty()")
    age: int = rules("min(MIN_AGE), max(150)")
    address: Address = rules("strct()", default_factory=lambda: Address("NL", "1234 AB"))


def main() -> None:
    print(f"ruletag version: {ruletag.__version__}")

    ruletag.register_constant_int("MIN_AGE", 18)
    ruletag.register_record(Address)
    ruletag.register_record(Customer)

    samples = [
        Customer(name="Ada", age=36),
        Customer(name="", age=36),
        Customer(name="Bob", age=12),
        Customer(name="Eve", age=40, address=Address("FR", "1234 AB")),
        Customer(name="Max", age=40, address=Address("NL", "12")),
    ]
    for customer in samples:
        failure = ruletag.validate_record(customer)
        print(f"  {customer.name or '<empty>':8} -> {failure or 'ok'}")


if __name__ == "__main__":
    main()
