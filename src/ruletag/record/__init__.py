"""Record descriptors and dataclass introspection."""
from __future__ import annotations

from ruletag.record.descriptor import (
    RULES_METADATA_KEY,
    FieldDescriptor,
    RecordDescriptor,
    describe,
    rules,
    unwrap_optional,
)

__all__ = [
    "FieldDescriptor",
    "RecordDescriptor",
    "RULES_METADATA_KEY",
    "describe",
    "rules",
    "unwrap_optional",
]
