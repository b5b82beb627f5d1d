"""Tests for the parser: grammar, left associativity, bracket collapse and syntax errors."""

from decimal import Decimal

import pytest

from unitscalc import error as E
from unitscalc.Expression import Addition, Brackets, Measurement, Subtraction
from unitscalc.Parser import collapse_brackets, parse
from unitscalc.Tokenizer import (
    CLOSE_BRACKET,
    MINUS,
    OPEN_BRACKET,
    PLUS,
    number_token,
    tokenize,
    units_token,
)
from unitscalc.Units import Units


def m(amount, units):
    return Measurement(Decimal(amount), units)


def parse_text(data):
    return parse(tokenize(data))


class TestParser:

    def test_single_measurement(self):
        assert parse_text("1.5cm") == m("1.5", Units.CM)

    def test_left_associative_chain(self):
        assert parse_text("1cm + 2mm - 3in") == Subtraction(
            Addition(m("1", Units.CM), m("2", Units.MM)),
            m("3", Units.IN),
        )

    def test_negative_right_operand(self):
        assert parse_text("1cm+-2cm") == Addition(m("1", Units.CM), m("-2", Units.CM))

    def test_brackets_around_measurement_collapse(self):
        assert parse_text("(1cm)") == m("1", Units.CM)
        assert parse_text("1mm - (((2mm)))") == Subtraction(m("1", Units.MM), m("2", Units.MM))

    def test_brackets_around_compound_are_kept(self):
        assert parse_text("1cm - (2cm + 3cm)") == Subtraction(
            m("1", Units.CM),
            Brackets(Addition(m("2", Units.CM), m("3", Units.CM))),
        )

    def test_nested_brackets_collapse_to_one(self):
        assert parse_text("((1cm + 2cm))") == Brackets(Addition(m("1", Units.CM), m("2", Units.CM)))

    def test_brackets_on_the_left(self):
        assert parse_text("(1cm - 2cm) + 3cm") == Addition(
            Brackets(Subtraction(m("1", Units.CM), m("2", Units.CM))),
            m("3", Units.CM),
        )

    def test_collapse_brackets(self):
        leaf = m("1", Units.PX)
        compound = Addition(leaf, leaf)
        assert collapse_brackets(Brackets(leaf)) == leaf
        assert collapse_brackets(Brackets(Brackets(compound))) == Brackets(compound)
        assert collapse_brackets(Brackets(compound)) == Brackets(compound)


class TestParserErrors:

    def _code(self, tokens):
        with pytest.raises(E.SyntaxError) as exc_info:
            parse(tokens)
        return exc_info.value.code

    def test_no_tokens(self):
        assert self._code([]) == "2000"

    def test_bare_number_tokenizes_but_does_not_parse(self):
        tokens = tokenize("123")
        assert self._code(tokens) == "2004"

    def test_number_followed_by_operator(self):
        assert self._code([number_token("1"), PLUS, number_token("2"), units_token(Units.MM)]) == "2004"

    def test_units_without_number(self):
        assert self._code([units_token(Units.MM)]) == "2001"

    def test_operator_without_left_operand(self):
        assert self._code([PLUS, number_token("1"), units_token(Units.MM)]) == "2001"

    def test_two_measurements_without_operator(self):
        tokens = [number_token("1"), units_token(Units.MM), number_token("2"), units_token(Units.MM)]
        assert self._code(tokens) == "2001"

    def test_double_operator(self):
        tokens = [number_token("1"), units_token(Units.MM), PLUS, MINUS, number_token("2"), units_token(Units.MM)]
        assert self._code(tokens) == "2001"

    def test_dangling_operator(self):
        assert self._code([number_token("1"), units_token(Units.MM), PLUS]) == "2005"

    def test_empty_brackets(self):
        assert self._code([OPEN_BRACKET, CLOSE_BRACKET]) == "2001"

    def test_unclosed_bracket(self):
        assert self._code(tokenize("(1cm + 2cm")) == "2002"

    def test_unmatched_closing_bracket(self):
        assert self._code(tokenize("1cm + 2cm)")) == "2003"
        assert self._code(tokenize("(1cm)) - 2cm")) == "2003"

    def test_closing_bracket_after_operator(self):
        tokens = [OPEN_BRACKET, number_token("1"), units_token(Units.MM), PLUS, CLOSE_BRACKET]
        assert self._code(tokens) == "2001"
