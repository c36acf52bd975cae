"""ruletag grammar module.

Exports lexer states, character classes and grammar constants.
"""
from __future__ import annotations

from ruletag.grammar.grammar import (
    FULL_GRAMMAR,
    GRAMMAR_ARGUMENTS,
    GRAMMAR_RULES,
    INVOCATION_PATTERN,
)
from ruletag.grammar.tokens import (
    IDENTIFIER_PATTERN,
    SYMBOL_PATTERN,
    UINT64_MASK,
    LexState,
    RuleInvocation,
)

__all__ = [
    "LexState",
    "RuleInvocation",
    "IDENTIFIER_PATTERN",
    "SYMBOL_PATTERN",
    "UINT64_MASK",
    "FULL_GRAMMAR",
    "GRAMMAR_RULES",
    "GRAMMAR_ARGUMENTS",
    "INVOCATION_PATTERN",
]
