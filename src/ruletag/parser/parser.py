"""Rule-text parser.

Splits a field's complete rule text, e.g.::

    irange(1, 99, 100), max(LIMIT), regex('^[a-z]+$')

into an ordered list of ``RuleInvocation`` objects and lexes the
argument text of each one into an ``ArgumentBundle``.

Invocations are separated by an optional comma.  Every rule must carry
parentheses, even when it takes no arguments (``not_empty()``).  Text
that is not part of an invocation, such as a bare ``max`` or a trailing
``)``, is a syntax error rather than being silently skipped.
"""
from __future__ import annotations

from dataclasses import dataclass

from ruletag.errors import ArgumentSyntaxError
from ruletag.grammar.grammar import INVOCATION_PATTERN
from ruletag.grammar.tokens import SEPARATOR, RuleInvocation
from ruletag.lexer.lexer import ArgumentBundle, parse_arguments


@dataclass(frozen=True)
class ParsedRule:
    """A rule invocation together with its lexed arguments."""

    invocation: RuleInvocation
    arguments: ArgumentBundle

    @property
    def name(self) -> str:
        return self.invocation.name


class RuleTextParser:
    """Parser for one field's rule text.

    Parameters
    ----------
    text:
        The raw rule text attached to a field.
    """

    def __init__(self, text: str) -> None:
        self._text: str = text
        self._pos: int = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def invocations(self) -> list[RuleInvocation]:
        """Return every ``name(args)`` invocation, left to right.

        Raises
        ------
        ArgumentSyntaxError
            If the text holds anything besides invocations and separators.
        """
        found: list[RuleInvocation] = []
        self._pos = 0
        self._skip_blank()
        while self._pos < len(self._text):
            match = INVOCATION_PATTERN.match(self._text, self._pos)
            if match is None:
                raise ArgumentSyntaxError(
                    "Expected a rule invocation of the form name(args)",
                    self._text,
                    self._pos,
                )
            found.append(
                RuleInvocation(
                    name=match.group(1),
                    arguments=match.group(2).strip(),
                    offset=match.start(1),
                )
            )
            self._pos = match.end()
            if self._pos < len(self._text) and self._text[self._pos] == SEPARATOR:
                self._pos += 1
                self._skip_blank()
                if self._pos == len(self._text):
                    raise ArgumentSyntaxError(
                        "Trailing separator after last rule",
                        self._text,
                        self._pos - 1,
                    )
        return found

    def parse(self) -> list[ParsedRule]:
        """Return every invocation paired with its lexed arguments."""
        return [
            ParsedRule(invocation=inv, arguments=parse_arguments(inv.arguments))
            for inv in self.invocations()
        ]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _skip_blank(self) -> None:
        while self._pos < len(self._text) and self._text[self._pos].isspace():
            self._pos += 1


# ---------------------------------------------------------------------------
# Module-level convenience function
# ---------------------------------------------------------------------------


def parse_rules(text: str) -> list[ParsedRule]:
    """Parse a field's rule text into ``ParsedRule`` objects.

    Parameters
    ----------
    text:
        Rule text such as ``"irange(1, 2, 3), max(LIMIT)"``.

    Returns
    -------
    list[ParsedRule]
        One entry per invocation, in declaration order.  Blank text
        yields an empty list.

    Raises
    ------
    ArgumentSyntaxError
        If the rule text or any argument text is malformed.
    """
    return RuleTextParser(text).parse()
