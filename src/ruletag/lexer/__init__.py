"""ruletag lexer module.

Exports the ``ArgumentLexer`` class, the ``ArgumentBundle`` result type
and the ``parse_arguments`` convenience function.
"""
from __future__ import annotations

from ruletag.errors import ArgumentSyntaxError
from ruletag.lexer.lexer import ArgumentBundle, ArgumentLexer, parse_arguments

__all__ = ["ArgumentLexer", "ArgumentBundle", "parse_arguments", "ArgumentSyntaxError"]
