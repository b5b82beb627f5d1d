# Tokenizer.py
"""""
Tokenizer: converts a raw input string into a flat list of tokens.

Tokens are open/close brackets, plus, minus, numbers (Decimal) and unit identifiers.
The tokenizer is an explicit state machine. Every character is first classified,
then handled by the current state. A '-' read at the start of an operand is the
sign of the following number; a '-' read after a unit is the subtraction operator.
"""""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto
import logging

from . import error as E
from .Units import Units

logger = logging.getLogger(__name__)


# -----------------------------
# Token types
# -----------------------------

class TokenKind(Enum):
    OPEN_BRACKET = auto()
    CLOSE_BRACKET = auto()
    PLUS = auto()
    MINUS = auto()
    NUMBER = auto()
    UNITS = auto()


@dataclass(frozen=True)
class Token:
    """A single token; only NUMBER (Decimal) and UNITS (Units) tokens carry a value."""
    kind: TokenKind
    value: object = None

    def __repr__(self):
        if self.value is None:
            return f"Token({self.kind.name})"
        return f"Token({self.kind.name}, {self.value})"


OPEN_BRACKET = Token(TokenKind.OPEN_BRACKET)
CLOSE_BRACKET = Token(TokenKind.CLOSE_BRACKET)
PLUS = Token(TokenKind.PLUS)
MINUS = Token(TokenKind.MINUS)


def number_token(value):
    return Token(TokenKind.NUMBER, Decimal(value))


def units_token(units):
    return Token(TokenKind.UNITS, units)


# -----------------------------
# Character classes and states
# -----------------------------

class CharClass(Enum):
    SPACE = auto()
    DIGIT = auto()
    LETTER = auto()
    OPEN_BRACKET = auto()
    CLOSE_BRACKET = auto()
    MINUS = auto()
    PLUS = auto()
    POINT = auto()


class State(Enum):
    START = auto()
    AFTER_MINUS_BEFORE_DIGIT = auto()
    IN_INTEGER_PART = auto()
    IN_FRACTION_FIRST_DIGIT = auto()
    IN_FRACTION = auto()
    AFTER_NUMBER = auto()
    IN_UNIT_LETTERS = auto()
    AFTER_UNIT = auto()


DIGITS = "0123456789"

_SINGLE_CHARS = {
    "(": CharClass.OPEN_BRACKET,
    ")": CharClass.CLOSE_BRACKET,
    "-": CharClass.MINUS,
    "+": CharClass.PLUS,
    ".": CharClass.POINT,
}

# What each state would have accepted, used in error messages
EXPECTED = {
    State.START: "Expected space, digit, '(', '-' or '.'",
    State.AFTER_MINUS_BEFORE_DIGIT: "Expected digit or '.'",
    State.IN_INTEGER_PART: "Expected space, digit, letter or '.'",
    State.IN_FRACTION_FIRST_DIGIT: "Expected digit",
    State.IN_FRACTION: "Expected space, digit or letter",
    State.AFTER_NUMBER: "Expected space or letter",
    State.IN_UNIT_LETTERS: "Expected space, letter, ')', '-' or '+'",
    State.AFTER_UNIT: "Expected space, ')', '-' or '+'",
}

# States in which the input may legally end
FINAL_STATES = (State.IN_INTEGER_PART, State.IN_FRACTION, State.AFTER_NUMBER,
                State.IN_UNIT_LETTERS, State.AFTER_UNIT)


def classify(char, pos, data):
    """Return the CharClass of a character or raise LexError for characters outside the grammar."""
    if char.isspace():
        return CharClass.SPACE
    if char in DIGITS:
        return CharClass.DIGIT
    if char.isalpha():
        return CharClass.LETTER
    if char in _SINGLE_CHARS:
        return _SINGLE_CHARS[char]
    raise E.LexError("Expected space, digit, letter, '(', ')', '-', '+' or '.'", pos, data, code="1000")


# -----------------------------
# State machine
# -----------------------------

class _TokenizeProcess:
    """One tokenizer run over one input string."""

    def __init__(self, data):
        self.data = data
        self.tokens = []
        self.state = State.START
        self.buffer = ""
        self.buffer_start = 0

    def process(self):
        for pos, char in enumerate(self.data):
            char_class = classify(char, pos, self.data)
            self.state = self.step(char_class, char, pos)

        if self.state == State.IN_UNIT_LETTERS:
            self.finish_units_token()
        elif self.state in (State.IN_INTEGER_PART, State.IN_FRACTION):
            self.finish_number_token()
        elif self.state not in FINAL_STATES:
            # Also covers empty and whitespace-only input, which never leave START
            raise E.LexError("Unexpected end of input", len(self.data), self.data, code="1003")

        return self.tokens

    def step(self, char_class, char, pos):
        """Consume one classified character in the current state and return the next state."""
        state = self.state

        if state == State.START:
            if char_class == CharClass.SPACE:
                return State.START
            if char_class == CharClass.OPEN_BRACKET:
                self.tokens.append(OPEN_BRACKET)
                return State.START
            if char_class == CharClass.MINUS:
                self.buffer_char(char, pos)
                return State.AFTER_MINUS_BEFORE_DIGIT
            if char_class == CharClass.DIGIT:
                self.buffer_char(char, pos)
                return State.IN_INTEGER_PART
            if char_class == CharClass.POINT:
                self.buffer_char(char, pos)
                return State.IN_FRACTION_FIRST_DIGIT

        elif state == State.AFTER_MINUS_BEFORE_DIGIT:
            if char_class == CharClass.DIGIT:
                self.buffer_char(char, pos)
                return State.IN_INTEGER_PART
            if char_class == CharClass.POINT:
                self.buffer_char(char, pos)
                return State.IN_FRACTION_FIRST_DIGIT

        elif state == State.IN_INTEGER_PART:
            if char_class == CharClass.DIGIT:
                self.buffer_char(char, pos)
                return State.IN_INTEGER_PART
            if char_class == CharClass.POINT:
                self.buffer_char(char, pos)
                return State.IN_FRACTION_FIRST_DIGIT
            if char_class == CharClass.SPACE:
                self.finish_number_token()
                return State.AFTER_NUMBER
            if char_class == CharClass.LETTER:
                self.finish_number_token()
                self.buffer_char(char, pos)
                return State.IN_UNIT_LETTERS

        elif state == State.IN_FRACTION_FIRST_DIGIT:
            if char_class == CharClass.DIGIT:
                self.buffer_char(char, pos)
                return State.IN_FRACTION

        elif state == State.IN_FRACTION:
            if char_class == CharClass.DIGIT:
                self.buffer_char(char, pos)
                return State.IN_FRACTION
            if char_class == CharClass.SPACE:
                self.finish_number_token()
                return State.AFTER_NUMBER
            if char_class == CharClass.LETTER:
                self.finish_number_token()
                self.buffer_char(char, pos)
                return State.IN_UNIT_LETTERS

        elif state == State.AFTER_NUMBER:
            if char_class == CharClass.SPACE:
                return State.AFTER_NUMBER
            if char_class == CharClass.LETTER:
                self.buffer_char(char, pos)
                return State.IN_UNIT_LETTERS

        elif state == State.IN_UNIT_LETTERS:
            if char_class == CharClass.LETTER:
                self.buffer_char(char, pos)
                return State.IN_UNIT_LETTERS
            if char_class == CharClass.SPACE:
                self.finish_units_token()
                return State.AFTER_UNIT
            if char_class in (CharClass.PLUS, CharClass.MINUS, CharClass.CLOSE_BRACKET):
                self.finish_units_token()
                return self.operator_after_unit(char_class)

        elif state == State.AFTER_UNIT:
            if char_class == CharClass.SPACE:
                return State.AFTER_UNIT
            if char_class in (CharClass.PLUS, CharClass.MINUS, CharClass.CLOSE_BRACKET):
                return self.operator_after_unit(char_class)

        raise E.LexError(EXPECTED[state], pos, self.data, code="1001")

    def operator_after_unit(self, char_class):
        """'+' and '-' start a new operand, ')' closes one; all three follow a complete measurement."""
        if char_class == CharClass.PLUS:
            self.tokens.append(PLUS)
            return State.START
        if char_class == CharClass.MINUS:
            self.tokens.append(MINUS)
            return State.START
        self.tokens.append(CLOSE_BRACKET)
        return State.AFTER_UNIT

    def buffer_char(self, char, pos):
        if not self.buffer:
            self.buffer_start = pos
        self.buffer += char

    def finish_number_token(self):
        self.tokens.append(number_token(self.buffer))
        self.buffer = ""

    def finish_units_token(self):
        units = Units.from_code(self.buffer)
        if units is None:
            raise E.LexError(f"Unknown units '{self.buffer}', expected one of: {', '.join(Units.codes())}",
                             self.buffer_start, self.data, code="1002")
        self.tokens.append(units_token(units))
        self.buffer = ""


def tokenize(data):
    """Split an expression string into tokens. Raises LexError on the first invalid character."""
    tokens = _TokenizeProcess(data).process()
    logger.debug("Tokens for %r: %s", data, tokens)
    return tokens
