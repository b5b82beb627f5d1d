"""Tests for evaluation, conversion and the analyze / calculate / pretty_print entry points."""

from decimal import Decimal

import pytest

from unitscalc import Calculator as engine
from unitscalc import error as E
from unitscalc.Calculator import Calculator, analyze, calculate, convert, pretty_print, values
from unitscalc.Expression import Addition, Brackets, Measurement, Subtraction
from unitscalc.Formatter import ExpressionFormatter, FormatterConfig
from unitscalc.Units import Units

COMPLICATED = "  -123.457mm+ .1cm+ -.1cm - (( ( 4cm --1cm)) -(0.457mm ) )  "


def m(amount, units):
    return Measurement(Decimal(amount), units)


class TestValues:

    def test_measurement(self):
        assert values(m("2.5", Units.PT)) == {Units.PT: Decimal("2.5")}

    def test_units_stay_in_separate_buckets(self):
        assert values(analyze("1in + 2cm - 3in")) == {Units.IN: Decimal("-2"), Units.CM: Decimal("2")}

    def test_brackets_pass_through(self):
        inner = Addition(m("1", Units.MM), m("2", Units.CM))
        assert values(Brackets(inner)) == values(inner)

    @pytest.mark.parametrize("left, right", [
        ("1cm + 2mm", "3mm - 1in"),
        ("-1px", "(2px - 3pt) - 4cm"),
        ("0.5in", "0.5in"),
    ])
    def test_additive_and_subtractive_identities(self, left, right):
        x = analyze(left)
        y = analyze(right)
        added = values(Addition(x, y))
        subtracted = values(Subtraction(x, y))
        for units in set(values(x)) | set(values(y)):
            expected_sum = values(x).get(units, Decimal(0)) + values(y).get(units, Decimal(0))
            expected_difference = values(x).get(units, Decimal(0)) - values(y).get(units, Decimal(0))
            assert added[units] == expected_sum
            assert subtracted[units] == expected_difference

    def test_unsupported_node(self):
        with pytest.raises(TypeError):
            values("1cm")


class TestConvert:

    def test_sums_all_buckets(self):
        result = convert({Units.IN: Decimal(1), Units.CM: Decimal(1)}, Units.MM)
        assert result == m("35.4", Units.MM)

    def test_empty_buckets_give_zero(self):
        assert convert({}, Units.PX) == m("0", Units.PX)


class TestScenarios:

    def test_same_units(self):
        expression = analyze("1cm+-2cm-3cm+3.5cm")
        result = calculate(expression, "cm")
        assert result == Measurement(Decimal("-0.5"), Units.CM)
        assert pretty_print(result) == "-0.5cm"

    def test_centimeters_to_millimeters(self):
        result = calculate(analyze("1cm+-2cm-3cm+3.5cm"), "mm")
        assert pretty_print(result) == "-5mm"

    def test_mixed_units(self):
        assert pretty_print(calculate(analyze("1in+1cm"), "mm")) == "35.4mm"

    def test_complicated_expression(self):
        expression = analyze(COMPLICATED)
        assert pretty_print(calculate(expression, "mm")) == "-173mm"
        assert pretty_print(calculate(expression, "in")) == "-6.811in"

    def test_pretty_print_input(self):
        assert pretty_print(analyze(COMPLICATED)) == "-123.457mm + 0.1cm + (-0.1cm) - ((4cm - (-1cm)) - 0.457mm)"

    def test_target_units_case_insensitive_and_enum(self):
        expression = analyze("1in + 1in")
        assert calculate(expression, "IN") == m("2", Units.IN)
        assert calculate(expression, Units.IN) == m("2", Units.IN)
        assert pretty_print(calculate(analyze("72pt"), "In")) == "1in"

    def test_pixels_to_points(self):
        assert pretty_print(calculate(analyze("300px - 1in + 1px"), "pt")) == "0.24pt"


class TestRoundTrip:

    @pytest.mark.parametrize("data", [
        COMPLICATED,
        "1cm",
        "-1cm",
        "(1cm)",
        "1cm - (2cm - (3cm - (4cm - -5cm)))",
        "((1in + 2px)) - ((3pt))",
        "(1mm - 2mm) + (-3mm)",
        "0.12345in + -.98765px",
        "1000000mm-(.1cm+(2in))",
    ])
    def test_format_parse_format_is_stable(self, data):
        first = pretty_print(analyze(data))
        second = pretty_print(analyze(first))
        assert second == first


class TestCalculatorErrors:

    def test_empty_input_is_lex_error(self):
        with pytest.raises(E.LexError):
            analyze("")

    def test_analyze_attaches_input_text(self):
        with pytest.raises(E.SyntaxError) as exc_info:
            analyze("123")
        assert exc_info.value.expression == "123"

    def test_lex_error_keeps_input_text(self):
        with pytest.raises(E.LexError) as exc_info:
            analyze("1cm ? 2cm")
        assert exc_info.value.expression == "1cm ? 2cm"
        assert exc_info.value.position == 4

    def test_unknown_target_units(self):
        with pytest.raises(E.ConversionError) as exc_info:
            calculate(analyze("1cm"), "yd")
        assert exc_info.value.code == "3000"

    def test_describe(self):
        with pytest.raises(E.CalcError) as exc_info:
            calculate(analyze("1cm"), "yd")
        assert E.describe(exc_info.value) == "Conversion Error 3000: Unknown target unit: "


class TestCalculatorInstance:

    def test_uses_its_formatter(self):
        calculator = Calculator(ExpressionFormatter(FormatterConfig(max_fraction_digits=1)))
        result = calculator.calculate(calculator.analyze("1in"), "cm")
        assert calculator.pretty_print(result) == "2.5cm"

    def test_default_formatter(self):
        assert Calculator().pretty_print(m("1.23456", Units.MM)) == "1.235mm"

    def test_interactive_prompt(self, monkeypatch, capsys):
        answers = iter(["1in + 1cm", "mm"])
        monkeypatch.setattr("builtins.input", lambda: next(answers))
        engine.test_main()
        assert capsys.readouterr().out.splitlines()[-1] == "1in + 1cm = 35.4mm"

    def test_interactive_prompt_reports_errors(self, monkeypatch, capsys):
        answers = iter(["1in +", "mm"])
        monkeypatch.setattr("builtins.input", lambda: next(answers))
        engine.test_main()
        assert capsys.readouterr().out.splitlines()[-1].startswith("LexError: Unexpected end of input")


class TestLongNumbers:

    @pytest.mark.parametrize("data, units, expected", [
        ("123456789012345678901234567890mm + 1mm", Units.MM, "123456789012345678901234567891"),
        ("1" * 130 + "mm + 1mm", Units.MM, "1" * 129 + "2"),
        ("1" + "0" * 60 + "px - 1px", Units.PX, "9" * 60),
        ("0." + "1" * 80 + "cm - 0." + "0" * 79 + "1cm", Units.CM, "0." + "1" * 79),
        ("-0." + "5" * 70 + "pt + (1pt - -0." + "5" * 70 + "pt)", Units.PT, "1"),
    ])
    def test_values_are_exact(self, data, units, expected):
        assert values(analyze(data)) == {units: Decimal(expected)}

    def test_same_units_conversion_is_exact(self):
        result = calculate(analyze("1" * 60 + "mm + 1mm"), "mm")
        assert result.amount == Decimal("1" * 59 + "2")

    def test_conversion_through_ratio_is_exact(self):
        assert calculate(analyze("1" * 60 + "cm"), "mm").amount == Decimal("1" * 60 + "0")
        assert calculate(analyze("1" * 40 + "in"), "mm").amount == Decimal("28" + "2" * 37 + "19.4")

    @pytest.mark.parametrize("data, expected", [
        ("1" * 130 + "mm", "1" * 130 + "mm"),
        ("-" + "9" * 200 + ".5in", "-" + "9" * 200 + ".5in"),
        ("0." + "9" * 100 + "in", "1in"),
        ("0." + "0" * 100 + "1px", "0px"),
    ])
    def test_pretty_print_long_literals(self, data, expected):
        expression = analyze(data)
        assert pretty_print(expression) == expected
        units = expression.units.value
        assert pretty_print(calculate(expression, units)) == expected

    def test_round_trip_long_literals(self):
        first = pretty_print(analyze("1" * 130 + "mm - 0." + "7" * 50 + "mm"))
        assert first == "1" * 130 + "mm - 0.778mm"
        assert pretty_print(analyze(first)) == first
