"""Unit tests for ruletag.parser — splitting rule text into invocations."""
from __future__ import annotations

import pytest

from ruletag.errors import ArgumentSyntaxError
from ruletag.grammar.tokens import RuleInvocation
from ruletag.parser.parser import ParsedRule, RuleTextParser, parse_rules


def names_of(text: str) -> list[str]:
    return [rule.name for rule in parse_rules(text)]


# ---------------------------------------------------------------------------
# Invocation extraction
# ---------------------------------------------------------------------------


class TestInvocations:
    def test_single_invocation(self) -> None:
        invocations = RuleTextParser("max(100)").invocations()
        assert invocations == [RuleInvocation(name="max", arguments="100", offset=0)]

    def test_multiple_invocations_in_order(self) -> None:
        assert names_of("irange(1, 99, 100), max(99)") == ["irange", "max"]

    def test_invocations_without_comma(self) -> None:
        assert names_of("min(1) max(2)") == ["min", "max"]

    def test_empty_argument_list(self) -> None:
        rules = parse_rules("not_empty()")
        assert rules[0].name == "not_empty"
        assert rules[0].arguments.is_empty

    def test_arguments_are_trimmed(self) -> None:
        invocations = RuleTextParser("irange(  1, 2  )").invocations()
        assert invocations[0].arguments == "1, 2"

    def test_whitespace_around_names(self) -> None:
        assert names_of("  min (1) ,  max(2)  ") == ["min", "max"]

    def test_offsets_point_at_rule_names(self) -> None:
        invocations = RuleTextParser("min(1), max(2)").invocations()
        assert [inv.offset for inv in invocations] == [0, 8]

    def test_names_with_digits_and_underscores(self) -> None:
        assert names_of("check_2(1)") == ["check_2"]

    def test_blank_text_has_no_invocations(self) -> None:
        assert parse_rules("") == []
        assert parse_rules("   ") == []

    def test_str_of_invocation(self) -> None:
        assert str(RuleInvocation(name="len", arguments="3")) == "len(3)"


# ---------------------------------------------------------------------------
# Quoted arguments
# ---------------------------------------------------------------------------


class TestQuotedArguments:
    def test_paren_inside_string_does_not_close_invocation(self) -> None:
        rules = parse_rules("regex('^(a|b)+$'), len(4)")
        assert [r.name for r in rules] == ["regex", "len"]
        assert rules[0].arguments.strings == ["^(a|b)+$"]

    def test_escaped_quote_inside_string(self) -> None:
        rules = parse_rules(r"srange('it\'s', 'ok')")
        assert rules[0].arguments.strings == ["it's", "ok"]

    def test_comma_inside_string(self) -> None:
        rules = parse_rules("srange('a,b')")
        assert rules[0].arguments.strings == ["a,b"]


# ---------------------------------------------------------------------------
# Malformed rule text
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("text", [
    "max",
    "max(1",
    "max(1))",
    "max(1),",
    "max(1),,min(2)",
    "1max(1)",
    "_max(1)",
    "max(1) garbage",
    "regex('unclosed)",
])
def test_malformed_rule_text_is_rejected(text: str) -> None:
    with pytest.raises(ArgumentSyntaxError):
        parse_rules(text)


def test_malformed_arguments_are_rejected() -> None:
    with pytest.raises(ArgumentSyntaxError):
        parse_rules("max(lower)")


# ---------------------------------------------------------------------------
# ParsedRule
# ---------------------------------------------------------------------------


class TestParsedRule:
    def test_parsed_rule_carries_bundle(self) -> None:
        rule = parse_rules("irange(1, 2, LIMIT, 'x')")[0]
        assert isinstance(rule, ParsedRule)
        assert rule.arguments.integers == [1, 2]
        assert rule.arguments.symbols == ["LIMIT"]
        assert rule.arguments.strings == ["x"]
        assert rule.invocation.arguments == "1, 2, LIMIT, 'x'"

    def test_parser_can_be_reused(self) -> None:
        parser = RuleTextParser("min(1)")
        assert parser.invocations() == parser.invocations()
