# Formatter.py
"""""
Formatter: renders expression trees back to text.

Output is valid input again. Numbers are rounded to a fixed number of fractional digits,
trailing zeros are dropped, and a negative measurement used as the right operand of
'+' or '-' is wrapped in parentheses so the result never reads like "a + -b".
"""""

from dataclasses import dataclass
from decimal import Decimal, localcontext, ROUND_HALF_EVEN

from .Expression import Measurement, Addition, Subtraction, Brackets, is_factor


@dataclass(frozen=True)
class FormatterConfig:
    """Number rendering options; the defaults give "1234.568" style output."""
    max_fraction_digits: int = 3
    grouping: bool = False

    def __post_init__(self):
        if self.max_fraction_digits < 0:
            raise ValueError(f"max_fraction_digits must be >= 0, got {self.max_fraction_digits}")


DEFAULT_CONFIG = FormatterConfig()


class ExpressionFormatter:

    def __init__(self, config=DEFAULT_CONFIG):
        self.config = config

    def format_amount(self, value):
        """Round a Decimal to max_fraction_digits and render it without exponent or trailing zeros."""
        quantum = Decimal(1).scaleb(-self.config.max_fraction_digits)
        with localcontext() as ctx:
            # Room for every integer digit, the kept fraction digits and a rounding carry
            ctx.prec = max(value.adjusted() + 1, 1) + self.config.max_fraction_digits + 2
            rounded = value.quantize(quantum, rounding=ROUND_HALF_EVEN)
            if rounded.is_zero():
                rounded = Decimal(0)  # no "-0"
            rounded = rounded.normalize()
        pattern = ",f" if self.config.grouping else "f"
        return format(rounded, pattern)

    def format_measurement(self, value):
        return f"{self.format_amount(value.amount)}{value.units.value}"

    def format_operand(self, node):
        """Render the right operand of '+'/'-', parenthesized when it would otherwise be ambiguous."""
        text = self.format(node)
        if isinstance(node, Measurement) and text.startswith("-"):
            return f"({text})"
        if not is_factor(node):
            # Only hand-built trees get here; the parser never nests a sum on the right
            return f"({text})"
        return text

    def format_addition(self, value):
        return f"{self.format(value.left)} + {self.format_operand(value.right)}"

    def format_subtraction(self, value):
        return f"{self.format(value.left)} - {self.format_operand(value.right)}"

    def format_brackets(self, value):
        return f"({self.format(value.inner)})"

    def format(self, value):
        if isinstance(value, Measurement):
            return self.format_measurement(value)
        elif isinstance(value, Addition):
            return self.format_addition(value)
        elif isinstance(value, Subtraction):
            return self.format_subtraction(value)
        elif isinstance(value, Brackets):
            return self.format_brackets(value)
        else:
            return f"Unsupported Expression '{value!r}'"
