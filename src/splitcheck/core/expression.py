#!/usr/bin/env python3
"""
Arithmetic Expression Evaluator

Parses money input such as "2*25000" or "(120,000 + 35,000) / 3" and evaluates it
with a small tokenizer and recursive-descent parser.

Grammar:
    expression := term (("+" | "-") term)*
    term       := factor (("*" | "/") factor)*
    factor     := ("+" | "-") factor | primary
    primary    := NUMBER | "(" expression ")"

Only numeric literals, the four binary operators, unary sign and parentheses are
accepted. There are no identifiers, calls or attribute access, so nothing other
than arithmetic can ever run.

Malformed input never raises to the caller: it evaluates to 0 and a warning is
logged, so one bad keystroke cannot block a whole settlement.
"""

import logging
import math
import re
from dataclasses import dataclass

from .rounding import Rounder

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[,\s]")
_DISALLOWED = re.compile(r"[^\d+\-*/().]")
_ALLOWED = re.compile(r"^[\d+\-*/().]+$")
_TOKEN = re.compile(r"\d+\.?\d*|\.\d+|[+\-*/()]")

# Combined depth of parentheses and unary signs
MAX_NESTING = 100


class ExpressionError(ValueError):
    """Raised internally when an expression cannot be evaluated."""

    pass


@dataclass(frozen=True)
class Token:
    """Lexical token: either a number or a single-character operator."""

    kind: str  # "number" or "op"
    text: str
    position: int


def clean_expression(text: str) -> str:
    """
    Strip separators and every character outside the arithmetic alphabet.

    Examples:
        clean_expression("25,000 VND") -> "25000"
        clean_expression(" 2 * 3 ") -> "2*3"
    """
    return _DISALLOWED.sub("", _SEPARATORS.sub("", text))


def is_valid_expression(expression: str) -> bool:
    """Check the character set and that parentheses are balanced."""
    if not _ALLOWED.match(expression):
        return False

    depth = 0
    for char in expression:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def tokenize(expression: str) -> list[Token]:
    """Split a cleaned expression into tokens."""
    tokens: list[Token] = []
    position = 0
    while position < len(expression):
        match = _TOKEN.match(expression, position)
        if match is None:
            raise ExpressionError(f"Unexpected character {expression[position]!r} at {position}")
        text = match.group()
        kind = "op" if text in "+-*/()" else "number"
        # "1.2.3" would otherwise lex as "1.2" followed by ".3"
        if kind == "number" and tokens and tokens[-1].kind == "number":
            raise ExpressionError(f"Malformed number at {position}")
        tokens.append(Token(kind=kind, text=text, position=position))
        position = match.end()
    return tokens


class _Parser:
    """Recursive-descent evaluator over a token list."""

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.index = 0
        self.depth = 0

    def parse(self) -> float:
        if not self.tokens:
            raise ExpressionError("Empty expression")
        value = self._expression()
        if self.index != len(self.tokens):
            token = self.tokens[self.index]
            raise ExpressionError(f"Unexpected {token.text!r} at {token.position}")
        return value

    def _peek(self) -> Token | None:
        return self.tokens[self.index] if self.index < len(self.tokens) else None

    def _take(self) -> Token:
        token = self._peek()
        if token is None:
            raise ExpressionError("Unexpected end of expression")
        self.index += 1
        return token

    def _expression(self) -> float:
        value = self._term()
        while (token := self._peek()) is not None and token.kind == "op" and token.text in "+-":
            self._take()
            right = self._term()
            value = value + right if token.text == "+" else value - right
        return value

    def _term(self) -> float:
        value = self._factor()
        while (token := self._peek()) is not None and token.kind == "op" and token.text in "*/":
            self._take()
            right = self._factor()
            if token.text == "*":
                value = value * right
            else:
                if right == 0:
                    raise ExpressionError("Division by zero")
                value = value / right
        return value

    def _factor(self) -> float:
        self.depth += 1
        if self.depth > MAX_NESTING:
            raise ExpressionError(f"Expression nested deeper than {MAX_NESTING} levels")
        try:
            token = self._peek()
            if token is not None and token.kind == "op" and token.text in "+-":
                self._take()
                operand = self._factor()
                return -operand if token.text == "-" else operand
            return self._primary()
        finally:
            self.depth -= 1

    def _primary(self) -> float:
        token = self._take()
        if token.kind == "number":
            return float(token.text)
        if token.text == "(":
            value = self._expression()
            closing = self._take()
            if closing.text != ")":
                raise ExpressionError(f"Expected ')' at {closing.position}")
            return value
        raise ExpressionError(f"Unexpected {token.text!r} at {token.position}")


def evaluate_strict(expression: str) -> float:
    """
    Evaluate a cleaned expression, raising ExpressionError on any failure.

    Args:
        expression: Text already passed through clean_expression()

    Returns:
        Finite float result

    Raises:
        ExpressionError: For disallowed characters, unbalanced parentheses,
            syntax errors or a non-finite result
    """
    if not is_valid_expression(expression):
        raise ExpressionError(f"Invalid expression: {expression!r}")

    result = _Parser(tokenize(expression)).parse()

    if not math.isfinite(result):
        raise ExpressionError(f"Non-finite result for {expression!r}")
    return result


class ExpressionEvaluator:
    """
    Evaluates money input text and applies the rounding policy.

    Examples:
        >>> evaluator = ExpressionEvaluator()
        >>> evaluator.evaluate("2*25000")
        50000.0
        >>> evaluator.evaluate("(2+3")
        0.0
    """

    def __init__(self, rounder: Rounder | None = None):
        self.rounder = rounder or Rounder()

    def evaluate(self, value: "str | int | float | None") -> float:
        """Evaluate text or a number; returns 0 on empty or malformed input."""
        if value is None or isinstance(value, bool):
            return 0.0

        if isinstance(value, (int, float)):
            if not math.isfinite(value):
                logger.warning("Ignoring non-finite amount: %r", value)
                return 0.0
            return self.rounder(float(value))

        text = str(value)
        if not text.strip():
            return 0.0

        expression = clean_expression(text)
        if not expression:
            return 0.0

        try:
            result = evaluate_strict(expression)
        except ExpressionError as e:
            logger.warning("Failed to parse expression %r: %s", text, e)
            return 0.0

        return self.rounder(result)


def evaluate_expression(value: "str | int | float | None", rounder: Rounder | None = None) -> float:
    """Evaluate money input with the given (or default) rounding policy."""
    return ExpressionEvaluator(rounder).evaluate(value)
