"""Argument lexer: converts one rule's argument text into an ``ArgumentBundle``.

The lexer is a single-pass, character-class driven finite automaton with
five states (see ``LexState``).  It reads the text between the
parentheses of a rule invocation, e.g. ``1, 99, MAX_ID, 'a\\'b'``, and
sorts every token into one of three ordered lists:

    - ``integers``: unsigned decimal literals (``[0-9]+``)
    - ``strings``:  single-quoted literals, backslash escapes the next char
    - ``symbols``:  uppercase constant names (``[A-Z][A-Z0-9_]*``)

Tokens are separated by commas and/or whitespace.  Integer literals
wrap modulo 2**64 rather than raising on overflow.  Any character that
has no transition from the current state aborts the scan with an
``ArgumentSyntaxError``; no partial bundle is returned.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from ruletag.errors import ArgumentSyntaxError
from ruletag.grammar.tokens import (
    ESCAPE_CHAR,
    QUOTE,
    SYMBOL_JOINER,
    UINT64_MASK,
    LexState,
    is_digit,
    is_printable,
    is_separator,
    is_upper,
)


@dataclass
class ArgumentBundle:
    """Typed arguments of one rule invocation, in source order.

    Parameters
    ----------
    strings:
        Quoted string literals with escapes removed.
    integers:
        Unsigned 64-bit integer literals.
    symbols:
        Names of symbolic constants, resolved later against a
        ``ConstantTable``.
    """

    strings: list[str] = field(default_factory=list)
    integers: list[int] = field(default_factory=list)
    symbols: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Return True if the argument text held no tokens at all."""
        return not (self.strings or self.integers or self.symbols)

    def __len__(self) -> int:
        return len(self.strings) + len(self.integers) + len(self.symbols)


class ArgumentLexer:
    """Finite-state scanner for rule argument text.

    Parameters
    ----------
    text:
        The raw argument text, without the surrounding parentheses.
    """

    __slots__ = ("_text", "_state", "_integer", "_buffer", "_bundle", "_start")

    def __init__(self, text: str) -> None:
        self._text: str = text
        self._state: LexState = LexState.INIT
        self._integer: int = 0
        self._buffer: list[str] = []
        self._bundle: ArgumentBundle = ArgumentBundle()
        self._start: int = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def scan(self) -> ArgumentBundle:
        """Scan the whole text and return the resulting bundle.

        Raises
        ------
        ArgumentSyntaxError
            On the first character with no valid transition, or if the
            text ends inside a quoted string.
        """
        handlers = {
            LexState.INIT: self._on_init,
            LexState.INTEGER: self._on_integer,
            LexState.SYMBOL: self._on_symbol,
            LexState.QUOTED_STRING: self._on_string,
            LexState.ESCAPE: self._on_escape,
        }
        for offset, ch in enumerate(self._text):
            handlers[self._state](ch, offset)
        self._finish()
        return self._bundle

    # ------------------------------------------------------------------
    # State handlers
    # ------------------------------------------------------------------

    def _on_init(self, ch: str, offset: int) -> None:
        if is_digit(ch):
            self._integer = int(ch)
            self._enter(LexState.INTEGER, offset)
        elif is_upper(ch):
            self._buffer.append(ch)
            self._enter(LexState.SYMBOL, offset)
        elif ch == QUOTE:
            self._enter(LexState.QUOTED_STRING, offset)
        elif is_separator(ch):
            return
        else:
            self._fail("Unexpected character", ch, offset)

    def _on_integer(self, ch: str, offset: int) -> None:
        if is_separator(ch):
            self._bundle.integers.append(self._integer)
            self._state = LexState.INIT
        elif is_digit(ch):
            self._integer = (self._integer * 10 + int(ch)) & UINT64_MASK
        else:
            self._fail("Invalid character in integer literal", ch, offset)

    def _on_symbol(self, ch: str, offset: int) -> None:
        if is_separator(ch):
            self._bundle.symbols.append(self._take_buffer())
            self._state = LexState.INIT
        elif is_upper(ch) or is_digit(ch) or ch == SYMBOL_JOINER:
            self._buffer.append(ch)
        else:
            self._fail("Invalid character in constant name", ch, offset)

    def _on_string(self, ch: str, offset: int) -> None:
        if ch == QUOTE:
            self._bundle.strings.append(self._take_buffer())
            self._state = LexState.INIT
        elif ch == ESCAPE_CHAR:
            self._state = LexState.ESCAPE
        elif is_printable(ch):
            self._buffer.append(ch)
        else:
            self._fail("Non-printable character in string literal", ch, offset)

    def _on_escape(self, ch: str, offset: int) -> None:
        if not is_printable(ch):
            self._fail("Non-printable character after escape", ch, offset)
        self._buffer.append(ch)
        self._state = LexState.QUOTED_STRING

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _enter(self, state: LexState, offset: int) -> None:
        self._state = state
        self._start = offset

    def _take_buffer(self) -> str:
        value = "".join(self._buffer)
        self._buffer.clear()
        return value

    def _finish(self) -> None:
        """Flush the token pending at end of input."""
        if self._state is LexState.INTEGER:
            self._bundle.integers.append(self._integer)
        elif self._state is LexState.SYMBOL:
            self._bundle.symbols.append(self._take_buffer())
        elif self._state in (LexState.QUOTED_STRING, LexState.ESCAPE):
            raise ArgumentSyntaxError(
                "Unterminated string literal",
                self._text,
                self._start,
            )
        self._state = LexState.INIT

    def _fail(self, message: str, ch: str, offset: int) -> None:
        raise ArgumentSyntaxError(f"{message} {ch!r}", self._text, offset)


# ---------------------------------------------------------------------------
# Module-level convenience function
# ---------------------------------------------------------------------------


def parse_arguments(text: str) -> ArgumentBundle:
    """Lex a rule's argument text and return its ``ArgumentBundle``.

    Parameters
    ----------
    text:
        Argument text such as ``"1, 99, 'abc', MAX_ID"``.

    Returns
    -------
    ArgumentBundle
        Integers, strings and symbol names in source order.

    Raises
    ------
    ArgumentSyntaxError
        If the text is not well-formed.

    Example
    -------
    ::

        from ruletag.lexer import parse_arguments
        bundle = parse_arguments("1, 2, LIMIT")
        bundle.integers   # [1, 2]
        bundle.symbols    # ['LIMIT']
    """
    return ArgumentLexer(text).scan()
