"""Record descriptors: the field list a record validator is built from.

A ``RecordDescriptor`` names a record type and lists its fields, each
with a declared type and optional rule text.  Descriptors can be built
by hand or derived from a dataclass with ``describe``.
"""
from __future__ import annotations

import dataclasses
import logging
import sys
import types
import typing
from dataclasses import dataclass
from typing import Any, Union

from ruletag.errors import InvalidRecordTypeError

logger = logging.getLogger(__name__)

RULES_METADATA_KEY = "rules"


@dataclass(frozen=True)
class FieldDescriptor:
    """One field of a record.

    Parameters
    ----------
    name:
        Attribute name used to read the field's value.
    field_type:
        Declared type, already unwrapped from ``Optional[...]``.
    rules:
        Raw rule text, or ``None`` if the field is not validated.
    optional:
        True if the field was declared ``Optional[...]``; a ``None``
        value is then accepted without running the rules.
    """

    name: str
    field_type: Any = None
    rules: str | None = None
    optional: bool = False


@dataclass(frozen=True)
class RecordDescriptor:
    """A record type and its fields in declaration order."""

    record_type: type
    fields: tuple[FieldDescriptor, ...] = ()

    @property
    def name(self) -> str:
        return self.record_type.__qualname__

    @property
    def validated_fields(self) -> tuple[FieldDescriptor, ...]:
        """Return the fields that carry rule text."""
        return tuple(f for f in self.fields if f.rules is not None)


def unwrap_optional(tp: Any) -> tuple[Any, bool]:
    """Return ``(inner, True)`` for ``Optional[inner]``, else ``(tp, False)``.

    ``Annotated[...]`` wrappers are stripped as well.
    """
    if typing.get_origin(tp) is typing.Annotated:
        tp = typing.get_args(tp)[0]
    origin = typing.get_origin(tp)
    if origin is Union or origin is types.UnionType:
        members = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(members) == 1:
            return members[0], True
    return tp, False


def rules(text: str, **kwargs: Any) -> Any:
    """Declare a dataclass field carrying rule text.

    Extra keyword arguments are passed to ``dataclasses.field``.

    Example
    -------
    ::

        @dataclass
        class User:
            name: str = rules("not_empty(), regex('^[a-z]+$')", default="")
            age: int = rules("min(18), max(130)", default=18)
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[RULES_METADATA_KEY] = text
    return dataclasses.field(metadata=metadata, **kwargs)


def describe(record_type: Any, localns: dict[str, Any] | None = None) -> RecordDescriptor:
    """Build a ``RecordDescriptor`` from a dataclass type or instance.

    Parameters
    ----------
    record_type:
        A dataclass type or instance.
    localns:
        Extra names for resolving string annotations, typically
        ``locals()`` of the function that defines the record and the
        records it nests.

    Annotations that still cannot be resolved are kept as strings; a
    string naming a record type is matched against registered records
    by ``strct()``.

    Raises
    ------
    InvalidRecordTypeError
        If ``record_type`` is not a dataclass.
    """
    cls = record_type if isinstance(record_type, type) else type(record_type)
    if not dataclasses.is_dataclass(cls):
        raise InvalidRecordTypeError(cls, "only dataclasses can be described automatically")

    try:
        hints = typing.get_type_hints(cls, localns=localns, include_extras=True)
    except NameError as exc:
        logger.debug("Resolving annotations of %s field by field: %s", cls.__qualname__, exc)
        hints = _resolve_fields(cls, localns)

    described: list[FieldDescriptor] = []
    for f in dataclasses.fields(cls):
        declared, optional = unwrap_optional(hints.get(f.name, f.type))
        described.append(
            FieldDescriptor(
                name=f.name,
                field_type=declared,
                rules=f.metadata.get(RULES_METADATA_KEY),
                optional=optional,
            )
        )
    return RecordDescriptor(record_type=cls, fields=tuple(described))


def _resolve_fields(cls: type, localns: dict[str, Any] | None) -> dict[str, Any]:
    """Evaluate each string annotation on its own; failures stay strings."""
    module = sys.modules.get(cls.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    names = dict(localns or {})
    hints: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        hint: Any = f.type
        try:
            # A quoted annotation under postponed evaluation is a string twice over.
            for _ in range(2):
                if isinstance(hint, str):
                    hint = eval(hint, globalns, names)
        except NameError:
            logger.debug("Leaving annotation %r of %s.%s unresolved", hint, cls.__qualname__, f.name)
        hints[f.name] = hint
    return hints
