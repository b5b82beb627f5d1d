# Parser.py
"""""
Parser: builds an expression tree from the token list produced by Tokenizer.

Grammar (left-associative, only '+' and '-', grouping by brackets):

    expression  := term (('+' | '-') term)*
    term        := measurement | '(' expression ')'
    measurement := number unit

The parser walks the token list once. Inside one expression it tracks where it is in the
grammar with a small state machine; an opening bracket recurses into a nested expression,
which hands control back as soon as it meets the matching closing bracket.
"""""

from enum import Enum, auto
import logging

from . import error as E
from .Expression import Measurement, Addition, Subtraction, Brackets
from .Tokenizer import TokenKind

logger = logging.getLogger(__name__)


class ParserState(Enum):
    START = auto()          # expecting the first term
    AFTER_TERM = auto()     # expecting '+', '-', ')' or the end
    AFTER_PLUS = auto()     # expecting a term to add
    AFTER_MINUS = auto()    # expecting a term to subtract


# States that are waiting for a term, and how they combine it with what was parsed so far
_COMBINE = {
    ParserState.START: lambda parsed, term: term,
    ParserState.AFTER_PLUS: Addition,
    ParserState.AFTER_MINUS: Subtraction,
}


def collapse_brackets(brackets):
    """Drop a grouping that changes nothing: around a single measurement or around another grouping."""
    if isinstance(brackets.inner, (Measurement, Brackets)):
        return brackets.inner
    return brackets


class _ParserProcess:
    """One parser run over one token list."""

    def __init__(self, tokens):
        self.tokens = list(tokens)
        self.pos = 0

    # --- token cursor ---

    def has_next(self):
        return self.pos < len(self.tokens)

    def next(self):
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def previous(self):
        self.pos -= 1

    # --- grammar ---

    def process(self):
        result = self.combine_expression()
        if self.has_next():
            # Only an unmatched ')' can stop an expression early
            raise E.SyntaxError("Too many tokens, bracket mismatch maybe", code="2003")
        return result

    def combine_expression(self):
        parsed = None
        state = ParserState.START

        while self.has_next():
            token = self.next()

            if token.kind in (TokenKind.NUMBER, TokenKind.OPEN_BRACKET):
                if state not in _COMBINE:
                    raise E.SyntaxError(f"{token} in wrong place", code="2001")
                if token.kind == TokenKind.NUMBER:
                    term = self.combine_measurement(token.value)
                else:
                    term = self.combine_brackets()
                parsed = _COMBINE[state](parsed, term)
                state = ParserState.AFTER_TERM

            elif token.kind == TokenKind.PLUS and state == ParserState.AFTER_TERM:
                state = ParserState.AFTER_PLUS

            elif token.kind == TokenKind.MINUS and state == ParserState.AFTER_TERM:
                state = ParserState.AFTER_MINUS

            elif token.kind == TokenKind.CLOSE_BRACKET and state == ParserState.AFTER_TERM:
                # Leave the bracket for whoever opened it
                self.previous()
                return parsed

            else:
                raise E.SyntaxError(f"{token} in wrong place", code="2001")

        if parsed is None:
            raise E.SyntaxError("Expected a measurement or '(' but the input ended", code="2000")
        if state != ParserState.AFTER_TERM:
            raise E.SyntaxError("Expected a measurement or '(' after the last operator", code="2005")
        return parsed

    def combine_brackets(self):
        inner = self.combine_expression()
        if not self.has_next():
            raise E.SyntaxError("No closing bracket", code="2002")
        closing = self.next()
        if closing.kind != TokenKind.CLOSE_BRACKET:
            raise E.SyntaxError(f"{closing} instead of closing bracket", code="2002")
        return collapse_brackets(Brackets(inner))

    def combine_measurement(self, amount):
        if not self.has_next():
            raise E.SyntaxError(f"Number {amount} is not followed by units", code="2004")
        units_token = self.next()
        if units_token.kind != TokenKind.UNITS:
            raise E.SyntaxError(f"Number {amount} is followed by {units_token} instead of units", code="2004")
        return Measurement(amount, units_token.value)


def parse(tokens):
    """Parse a token list into an expression tree. Raises error.SyntaxError for any grammar violation."""
    tree = _ParserProcess(tokens).process()
    logger.debug("Final tree: %r", tree)
    return tree
