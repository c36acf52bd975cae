"""Token-level vocabulary for the ruletag rule mini-language.

Defines the lexer states used by the argument scanner, the character
classes that drive its transitions, and the ``RuleInvocation`` record
produced when a field's rule text is split into ``name(args)`` calls.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Final


class LexState(Enum):
    """States of the argument-scanning finite automaton."""

    INIT = auto()
    INTEGER = auto()
    SYMBOL = auto()
    QUOTED_STRING = auto()
    ESCAPE = auto()


# ---------------------------------------------------------------------------
# Character classes
# ---------------------------------------------------------------------------

QUOTE: Final[str] = "'"
ESCAPE_CHAR: Final[str] = "\\"
SEPARATOR: Final[str] = ","
SYMBOL_JOINER: Final[str] = "_"

UINT64_MASK: Final[int] = (1 << 64) - 1


def is_digit(ch: str) -> bool:
    """Return True for an ASCII decimal digit."""
    return "0" <= ch <= "9"


def is_upper(ch: str) -> bool:
    """Return True for an ASCII uppercase letter."""
    return "A" <= ch <= "Z"


def is_separator(ch: str) -> bool:
    """Return True for a comma or any whitespace character."""
    return ch == SEPARATOR or ch.isspace()


def is_printable(ch: str) -> bool:
    """Return True if ``ch`` may appear inside a quoted string."""
    return ch.isprintable()


# ---------------------------------------------------------------------------
# Rule invocation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuleInvocation:
    """One ``name(args)`` occurrence inside a field's rule text.

    Parameters
    ----------
    name:
        The rule name, e.g. ``"max"``.
    arguments:
        The raw, whitespace-trimmed text between the parentheses.
    offset:
        0-based offset of the invocation within the rule text.
    """

    name: str
    arguments: str
    offset: int = 0

    def __str__(self) -> str:
        return f"{self.name}({self.arguments})"


IDENTIFIER_PATTERN: Final[re.Pattern[str]] = re.compile(r"[A-Za-z][A-Za-z0-9_]*")
SYMBOL_PATTERN: Final[re.Pattern[str]] = re.compile(r"[A-Z][A-Z0-9_]*")
