"""Registries for validator factories, constants and compiled records."""
from __future__ import annotations

from ruletag.registry.registry import (
    ConstantTable,
    RecordValidatorCache,
    ValidatorRegistry,
    check_name,
)

__all__ = ["ValidatorRegistry", "ConstantTable", "RecordValidatorCache", "check_name"]
