"""ruletag parser module.

Exports the ``RuleTextParser`` class, the ``parse_rules`` convenience
function and the ``ParsedRule`` result type.
"""
from __future__ import annotations

from ruletag.parser.parser import ParsedRule, RuleTextParser, parse_rules

__all__ = ["RuleTextParser", "ParsedRule", "parse_rules"]
