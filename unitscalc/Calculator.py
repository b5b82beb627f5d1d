# Calculator.py
"""""
Core calculation engine for the Units Calculator.

Pipeline
--------
1) Tokenizer: converts a raw input string into a flat list of tokens.
2) Parser: builds an immutable expression tree (recursive descent, bracket aware).
3) Evaluator:
   - values():  collapse the tree into one signed Decimal per unit, no conversion yet
   - convert(): multiply every bucket by its ratio to the target unit and sum them up
4) Formatter: renders trees and results back to text.

The UI talks to this module only through Calculator.analyze / calculate / pretty_print.
"""""

from decimal import Decimal, Inexact, localcontext
import logging

from . import error as E
from .Expression import Measurement, Addition, Subtraction, Brackets
from .Formatter import ExpressionFormatter
from .Parser import parse
from .Tokenizer import tokenize
from .Units import RATIOS, Units, parse_units

logger = logging.getLogger(__name__)

# -----------------------------
# Evaluator
# -----------------------------

def _add(a, b):
    """Exact a + b, however many digits the operands carry."""
    with localcontext() as ctx:
        # Every digit between the highest possible carry and the smallest exponent
        ctx.prec = max(max(a.adjusted(), b.adjusted()) + 2 - min(a.as_tuple().exponent, b.as_tuple().exponent), 1)
        ctx.traps[Inexact] = True
        return a + b


def _multiply(a, b):
    """Exact a * b."""
    with localcontext() as ctx:
        ctx.prec = len(a.as_tuple().digits) + len(b.as_tuple().digits)
        ctx.traps[Inexact] = True
        return a * b


def _merge(left, right, sign):
    """Return a new bucket dict: left + sign * right, unit by unit."""
    merged = dict(left)
    for units, amount in right.items():
        if sign < 0:
            amount = amount.copy_negate()
        merged[units] = _add(merged.get(units, Decimal(0)), amount)
    return merged


def values(expression):
    """Reduce an expression tree to {Units: signed amount}. Units are kept apart; nothing is converted."""
    if isinstance(expression, Measurement):
        return {expression.units: expression.amount}
    elif isinstance(expression, Addition):
        return _merge(values(expression.left), values(expression.right), 1)
    elif isinstance(expression, Subtraction):
        return _merge(values(expression.left), values(expression.right), -1)
    elif isinstance(expression, Brackets):
        return values(expression.inner)
    else:
        raise TypeError(f"Unsupported expression: {expression!r}")


def convert(buckets, target_units, ratios=RATIOS):
    """Convert per-unit amounts into one Measurement in target_units."""
    total = Decimal(0)
    for units, amount in buckets.items():
        total = _add(total, _multiply(amount, ratios.ratio(units, target_units)))
    logger.debug("Converted %s to %s %s", buckets, total, target_units.value)
    return Measurement(total, target_units)


# -----------------------------
# Public entry points
# -----------------------------

class Calculator:
    """The three operations the UI needs: analyze text, calculate a result and pretty print a tree."""

    def __init__(self, formatter=None):
        self.formatter = formatter or ExpressionFormatter()

    def analyze(self, text):
        """Tokenize and parse text into an expression tree. Raises LexError or SyntaxError."""
        try:
            return parse(tokenize(text))
        # Re-raise our domain errors after attaching the source text
        except E.CalcError as e:
            e.expression = text
            raise

    def calculate(self, expression, units):
        """Evaluate expression and convert it to units (a Units member or a case-insensitive code)."""
        target_units = parse_units(units)
        buckets = values(expression)
        logger.debug("Buckets: %s", buckets)
        return convert(buckets, target_units)

    def pretty_print(self, expression):
        return self.formatter.format(expression)


_default_calculator = Calculator()


def analyze(text):
    return _default_calculator.analyze(text)


def calculate(expression, units):
    return _default_calculator.calculate(expression, units)


def pretty_print(expression):
    return _default_calculator.pretty_print(expression)


def test_main():
    """Simple REPL-like runner for manual testing of the engine."""
    print("Enter the expression: ")
    problem = input()
    print("Enter the target units (" + ", ".join(Units.codes()) + "): ")
    units = input()
    try:
        expression = analyze(problem)
        result = calculate(expression, units)
    except E.CalcError as e:
        print(e)
        return
    print(f"{pretty_print(expression)} = {pretty_print(result)}")


if __name__ == "__main__":
    # Allow running this module directly for quick CLI tests:
    #   python -m unitscalc.Calculator
    logging.basicConfig(level=logging.DEBUG)
    test_main()
