"""Unit tests for ruletag.lexer — scanning rule argument text."""
from __future__ import annotations

import random
import string
from itertools import zip_longest

import pytest

from ruletag.errors import ArgumentSyntaxError, ConfigurationError
from ruletag.grammar.tokens import UINT64_MASK
from ruletag.lexer.lexer import ArgumentBundle, ArgumentLexer, parse_arguments


# ---------------------------------------------------------------------------
# Empty and whitespace-only inputs
# ---------------------------------------------------------------------------


class TestEmptyInputs:
    def test_empty_string_produces_empty_bundle(self) -> None:
        bundle = parse_arguments("")
        assert bundle.is_empty
        assert len(bundle) == 0

    @pytest.mark.parametrize("text", ["   ", "\t", ",", " , ,, "])
    def test_separators_only_produce_empty_bundle(self, text: str) -> None:
        assert parse_arguments(text) == ArgumentBundle()


# ---------------------------------------------------------------------------
# Integers
# ---------------------------------------------------------------------------


class TestIntegers:
    def test_comma_separated_integers(self) -> None:
        bundle = parse_arguments("123, 456, 789")
        assert bundle.integers == [123, 456, 789]
        assert bundle.strings == []
        assert bundle.symbols == []

    def test_surrounding_whitespace(self) -> None:
        assert parse_arguments(" 123 ").integers == [123]

    def test_space_separated_integers(self) -> None:
        assert parse_arguments("1 2\t3").integers == [1, 2, 3]

    def test_zero(self) -> None:
        assert parse_arguments("0").integers == [0]

    def test_max_uint64(self) -> None:
        assert parse_arguments(str(UINT64_MASK)).integers == [UINT64_MASK]

    def test_overflow_wraps_around(self) -> None:
        assert parse_arguments(str(UINT64_MASK + 1)).integers == [0]
        assert parse_arguments(str(UINT64_MASK + 6)).integers == [5]

    def test_underscore_in_number_is_error(self) -> None:
        with pytest.raises(ArgumentSyntaxError):
            parse_arguments("10_23")

    def test_letter_after_digit_is_error(self) -> None:
        with pytest.raises(ArgumentSyntaxError):
            parse_arguments("12a")

    def test_negative_number_is_error(self) -> None:
        with pytest.raises(ArgumentSyntaxError):
            parse_arguments("-1")


# ---------------------------------------------------------------------------
# Symbols
# ---------------------------------------------------------------------------


class TestSymbols:
    def test_symbols_with_digits_and_underscores(self) -> None:
        bundle = parse_arguments("I9, I_1, I____10")
        assert bundle.symbols == ["I9", "I_1", "I____10"]
        assert bundle.integers == []
        assert bundle.strings == []

    def test_single_letter_symbol(self) -> None:
        assert parse_arguments("X").symbols == ["X"]

    def test_lowercase_in_symbol_is_error(self) -> None:
        with pytest.raises(ArgumentSyntaxError):
            parse_arguments("CONST_not_capital")

    def test_lowercase_start_is_error(self) -> None:
        with pytest.raises(ArgumentSyntaxError):
            parse_arguments("max_value")

    def test_underscore_start_is_error(self) -> None:
        with pytest.raises(ArgumentSyntaxError):
            parse_arguments("_MAX")


# ---------------------------------------------------------------------------
# Quoted strings
# ---------------------------------------------------------------------------


class TestStrings:
    def test_strings_preserve_inner_spacing(self) -> None:
        bundle = parse_arguments("'hello', 'xvalidator', 'are  ', 's0 ', 'c007 !!!'")
        assert bundle.strings == ["hello", "xvalidator", "are  ", "s0 ", "c007 !!!"]

    def test_trailing_separator_is_allowed(self) -> None:
        assert parse_arguments(" 'test', ").strings == ["test"]

    def test_escaped_quotes(self) -> None:
        assert parse_arguments(r" '\'test\'' ").strings == ["'test'"]

    def test_escaped_backslash(self) -> None:
        assert parse_arguments(r"'a\\b'").strings == ["a\\b"]

    def test_escape_takes_next_char_literally(self) -> None:
        assert parse_arguments(r"'\n'").strings == ["n"]

    def test_empty_string(self) -> None:
        assert parse_arguments("''").strings == [""]

    def test_separators_inside_string_are_kept(self) -> None:
        assert parse_arguments("'a, b'").strings == ["a, b"]

    def test_regex_metacharacters_are_kept(self) -> None:
        assert parse_arguments("'^[a-z]+(x|y)$'").strings == ["^[a-z]+(x|y)$"]

    def test_unicode_printable_characters(self) -> None:
        assert parse_arguments("'héllo wörld'").strings == ["héllo wörld"]

    def test_unclosed_quote_is_error(self) -> None:
        with pytest.raises(ArgumentSyntaxError, match="Unterminated"):
            parse_arguments("'hello")

    def test_dangling_escape_is_error(self) -> None:
        with pytest.raises(ArgumentSyntaxError, match="Unterminated"):
            parse_arguments("'hello\\")

    def test_tab_inside_string_is_error(self) -> None:
        with pytest.raises(ArgumentSyntaxError):
            parse_arguments("'a\tb'")

    def test_escaped_control_character_is_error(self) -> None:
        with pytest.raises(ArgumentSyntaxError):
            parse_arguments("'a\\\x01'")


# ---------------------------------------------------------------------------
# Mixed and invalid input
# ---------------------------------------------------------------------------


class TestMixed:
    def test_mixed_kinds_keep_order_within_kind(self) -> None:
        bundle = parse_arguments("INT_MAX, 123, 'hello', 7, 'x', B")
        assert bundle.integers == [123, 7]
        assert bundle.strings == ["hello", "x"]
        assert bundle.symbols == ["INT_MAX", "B"]
        assert len(bundle) == 6

    def test_tokens_without_separator_after_string(self) -> None:
        bundle = parse_arguments("'a'1")
        assert bundle.strings == ["a"]
        assert bundle.integers == [1]


# ---------------------------------------------------------------------------
# Joined tokens lex back to the same lists
# ---------------------------------------------------------------------------


def join_tokens(integers: list[int], strings: list[str], symbols: list[str], separator: str) -> str:
    columns = zip_longest(
        [str(i) for i in integers],
        [f"'{s}'" for s in strings],
        symbols,
    )
    return separator.join(token for row in columns for token in row if token is not None)


@pytest.mark.parametrize("separator", [",", " ", ", ", "\t", " ,\n"])
@pytest.mark.parametrize(("integers", "strings", "symbols"), [
    ([], [], []),
    ([0], [""], ["A"]),
    ([1, 22, 333], ["hello world", "a,b", "  padded  "], ["MAX", "MIN_1", "B__C9"]),
    ([UINT64_MASK, 7], ["123", "UPPER", "héllo (x|y)"], []),
    ([], ["only", "strings"], ["AND", "SYMBOLS"]),
])
def test_joined_tokens_lex_back(
    integers: list[int], strings: list[str], symbols: list[str], separator: str
) -> None:
    bundle = parse_arguments(join_tokens(integers, strings, symbols, separator))
    assert bundle.integers == integers
    assert bundle.strings == strings
    assert bundle.symbols == symbols


def test_generated_token_lists_lex_back() -> None:
    rng = random.Random(20240611)
    string_alphabet = string.ascii_letters + string.digits + " ,()[]{}|.-_*"
    symbol_tail = string.ascii_uppercase + string.digits + "_"
    for _ in range(200):
        integers = [rng.randrange(UINT64_MASK + 1) for _ in range(rng.randrange(4))]
        strings = [
            "".join(rng.choice(string_alphabet) for _ in range(rng.randrange(8)))
            for _ in range(rng.randrange(4))
        ]
        symbols = [
            rng.choice(string.ascii_uppercase)
            + "".join(rng.choice(symbol_tail) for _ in range(rng.randrange(5)))
            for _ in range(rng.randrange(4))
        ]
        separator = rng.choice([",", " ", ", ", "\t"])
        bundle = parse_arguments(join_tokens(integers, strings, symbols, separator))
        assert (bundle.integers, bundle.strings, bundle.symbols) == (integers, strings, symbols)


@pytest.mark.parametrize("text", [
    "\x00",
    "'hello",
    "CONST_not_capital",
    "10_23",
    "|..",
    "max",
    "1.5",
    "\"double\"",
])
def test_invalid_argument_text_is_rejected(text: str) -> None:
    with pytest.raises(ArgumentSyntaxError):
        parse_arguments(text)


class TestArgumentSyntaxError:
    def test_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            parse_arguments("|")

    def test_records_offset_and_text(self) -> None:
        with pytest.raises(ArgumentSyntaxError) as info:
            parse_arguments("1, 2, |")
        assert info.value.offset == 6
        assert info.value.text == "1, 2, |"
        assert "'|'" in str(info.value)

    def test_unterminated_error_points_at_opening_quote(self) -> None:
        with pytest.raises(ArgumentSyntaxError) as info:
            parse_arguments("1, 'abc")
        assert info.value.offset == 3


class TestArgumentLexer:
    def test_scan_returns_fresh_bundle(self) -> None:
        first = ArgumentLexer("1").scan()
        second = ArgumentLexer("1").scan()
        assert first == second
        assert first is not second
