# Units.py
"""""
Supported length units and the conversion table between them.

The set of units is closed: millimeter, centimeter, inch, pixel and point.
Every ratio is derived from four base constants and rounded once to
RATIO_PRECISION significant digits, so each table entry is a plain Decimal
that can be multiplied without further rounding surprises.
"""""

from decimal import Decimal, Context, ROUND_HALF_UP
from enum import Enum
import fractions
import logging

from . import error as E

logger = logging.getLogger(__name__)


# -----------------------------
# Base constants
# -----------------------------

IN_MM = Decimal("25.4")   # millimeters per inch
CM_MM = Decimal("10")     # millimeters per centimeter
IN_PT = Decimal("72")     # points per inch
IN_PX = Decimal("300")    # pixels per inch

RATIO_PRECISION = 6
_ratio_context = Context(prec=RATIO_PRECISION, rounding=ROUND_HALF_UP)


class Units(Enum):
    """Closed enumeration of length units; the value is the lowercase code used in expressions."""
    MM = "mm"
    CM = "cm"
    IN = "in"
    PX = "px"
    PT = "pt"

    @classmethod
    def from_code(cls, code):
        """Case-insensitive lookup by unit code; returns None for unknown codes."""
        try:
            return cls(code.strip().lower())
        except (ValueError, AttributeError):
            return None

    @classmethod
    def codes(cls):
        return [u.value for u in cls]


def parse_units(code):
    """Resolve a target-unit selector string or raise ConversionError."""
    if isinstance(code, Units):
        return code
    units = Units.from_code(code)
    if units is None:
        raise E.ConversionError(f"Unknown units '{code}', expected one of: {', '.join(Units.codes())}",
                                code="3000")
    return units


# -----------------------------
# Ratio table
# -----------------------------

def _millimeters_per_unit():
    """Exact size of one unit in millimeters, kept as Fraction so no rounding happens before the final ratio."""
    inch = fractions.Fraction(IN_MM)
    return {
        Units.MM: fractions.Fraction(1),
        Units.CM: fractions.Fraction(CM_MM),
        Units.IN: inch,
        Units.PT: inch / fractions.Fraction(IN_PT),
        Units.PX: inch / fractions.Fraction(IN_PX),
    }


def build_ratio_table():
    """Return {(source, target): multiplier} for all 25 ordered unit pairs."""
    sizes = _millimeters_per_unit()
    table = {}
    for source in Units:
        for target in Units:
            if source is target:
                table[(source, target)] = Decimal(1)
                continue
            exact = sizes[source] / sizes[target]
            table[(source, target)] = _ratio_context.divide(Decimal(exact.numerator), Decimal(exact.denominator))
    logger.debug("Ratio table built with %d entries", len(table))
    return table


class RatioTable:
    """Read-only view over the precomputed conversion multipliers."""

    def __init__(self):
        self._ratios = build_ratio_table()

    def ratio(self, source, target):
        return self._ratios[(source, target)]

    def __getitem__(self, pair):
        return self._ratios[pair]

    def __len__(self):
        return len(self._ratios)

    def __iter__(self):
        return iter(self._ratios)


RATIOS = RatioTable()
