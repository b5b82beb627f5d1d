# Expression.py
"""""
Expression tree nodes.

The tree is a closed set of four immutable node types:

    Measurement(amount, units)   leaf, e.g. 1.5cm
    Addition(left, right)        left + right
    Subtraction(left, right)     left - right
    Brackets(inner)              explicit grouping, only kept around compound nodes

Every node owns its children; nothing is shared and nothing is mutated after construction.
"""""

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from .Units import Units


@dataclass(frozen=True)
class Measurement:
    """Leaf node: an exact decimal amount in one unit."""
    amount: Decimal
    units: Units

    def __post_init__(self):
        # Normalize input to Decimal via string to avoid float artifacts
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))


@dataclass(frozen=True)
class Addition:
    left: "Expression"
    right: "Expression"


@dataclass(frozen=True)
class Subtraction:
    left: "Expression"
    right: "Expression"


@dataclass(frozen=True)
class Brackets:
    inner: "Expression"


Expression = Union[Measurement, Addition, Subtraction, Brackets]

# Nodes that may stand as a right operand without extra parentheses
FACTORS = (Measurement, Brackets)


def is_factor(node):
    return isinstance(node, FACTORS)
