"""Arguments handed to a validator factory."""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ruletag.validator.outcome import Validator

if TYPE_CHECKING:
    from ruletag.registry.registry import RecordValidatorCache


@dataclass(frozen=True)
class ValidatorArgs:
    """Resolved arguments of one rule invocation.

    Parameters
    ----------
    name:
        The rule name the factory was invoked under, for error messages.
    strings:
        String literals followed by resolved string constants.
    integers:
        Integer literals followed by resolved integer constants.
    field_type:
        Declared type of the field, with ``Optional[...]`` unwrapped.
        ``None`` when the type is unknown.
    records:
        Cache of compiled record validators, used by nested-record rules.
    """

    name: str = ""
    strings: tuple[str, ...] = ()
    integers: tuple[int, ...] = ()
    field_type: Any = None
    records: RecordValidatorCache | None = field(default=None, repr=False, compare=False)


ValidatorFactory = Callable[[ValidatorArgs], Validator]
