"""Formal grammar of the ruletag rule mini-language.

The grammar is documented here as EBNF strings so that error messages,
the CLI and the docs can all refer to one authoritative description.
The compiled ``INVOCATION_PATTERN`` is the regular expression the
rule-text parser uses to locate ``name(args)`` calls.
"""
from __future__ import annotations

import re
from typing import Final

GRAMMAR_RULES: Final[str] = """\
rules       = invocation { [ "," ] invocation } ;
invocation  = identifier "(" [ arguments ] ")" ;
identifier  = letter { letter | digit | "_" } ;
"""

GRAMMAR_ARGUMENTS: Final[str] = """\
arguments   = argument { separator argument } ;
separator   = "," | whitespace ;
argument    = integer | string | symbol ;
integer     = digit { digit } ;
string      = "'" { printable | "\\" printable } "'" ;
symbol      = upper { upper | digit | "_" } ;
"""

FULL_GRAMMAR: Final[str] = GRAMMAR_RULES + GRAMMAR_ARGUMENTS

# Quoted strings are matched as a unit so that a ")" inside a string
# does not end the invocation early.
INVOCATION_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\s*([A-Za-z][A-Za-z0-9_]*)\s*\(((?:'(?:\\.|[^'\\])*'|[^)'])*)\)\s*"
)

