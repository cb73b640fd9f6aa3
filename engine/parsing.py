# engine/parsing.py
from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Union

from engine.errors import EngineError, IllegalOperation, ParseError
from engine.expression import Binary, Leaf, Node, Operator
from engine.rational import Rational

logger = logging.getLogger(__name__)

_DISPLAY_TO_TOKEN = str.maketrans({"×": "*", "÷": "/"})
_STANDALONE_LITERAL = re.compile(r"^(\d+'\d+/\d+|\d+/\d+)$")
_TOKEN_RE = re.compile(r"\d+'\d+/\d+|\d+/\d+|\d+|[-+*/()]")
_OPERATOR_CHARS = "+-*/"

Item = Union[Rational, str]


# --- Text helpers -----------------------------------------------------------------


def normalize_operators(text: str) -> str:
    return text.translate(_DISPLAY_TO_TOKEN)


def is_balanced(text: str) -> bool:
    depth = 0
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def strip_outer_parentheses(text: str) -> str:
    s = text.strip()
    while s.startswith("(") and s.endswith(")") and is_balanced(s[1:-1]):
        s = s[1:-1].strip()
    return s


def _is_fraction_slash(text: str, index: int) -> bool:
    # "3/4" and "1'3/4" are literals; a dividing slash is written with spaces.
    if text[index] != "/" or index == 0 or index == len(text) - 1:
        return False
    before, after = text[index - 1], text[index + 1]
    return (before.isdigit() or before == "'") and after.isdigit()


def find_split_index(text: str) -> int:
    """
    Position of the operator that becomes the root: the lowest precedence
    outside parentheses, the rightmost one among equals (so chains associate
    to the left). -1 when there is none.
    """
    best_index = -1
    best_precedence: Optional[int] = None
    depth = 0
    for i, ch in enumerate(text):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif depth == 0 and ch in _OPERATOR_CHARS:
            if _is_fraction_slash(text, i):
                continue
            precedence = Operator.from_symbol(ch).precedence
            if best_precedence is None or precedence <= best_precedence:
                best_precedence = precedence
                best_index = i
    return best_index


# --- Tree parser ------------------------------------------------------------------


def _build(text: str) -> Node:
    s = strip_outer_parentheses(text)
    if not s:
        raise ParseError("Missing operand.")

    if _STANDALONE_LITERAL.match(s):
        Rational.from_string(s)
        return Leaf(s)

    index = find_split_index(s)
    if index == -1:
        Rational.from_string(s)
        return Leaf(s)

    op = Operator.from_symbol(s[index])
    return Binary(op, _build(s[:index]), _build(s[index + 1 :]))


def parse_expression(text: str) -> Optional[Node]:
    """
    Rebuild an expression tree from rendered text such as "(1/2 + 3) × 2'1/3".
    Returns None when the text cannot be parsed.
    """
    if text is None or not text.strip():
        return None
    s = normalize_operators(text)
    if not is_balanced(s):
        logger.debug("Unbalanced parentheses: %r", text)
        return None
    try:
        return _build(s)
    except ParseError as e:
        logger.debug("Cannot parse %r: %s", text, e)
        return None


# --- Token evaluator --------------------------------------------------------------


def tokenize(text: str) -> List[str]:
    s = normalize_operators(text)
    tokens: List[str] = []
    pos = 0
    while pos < len(s):
        if s[pos].isspace():
            pos += 1
            continue
        m = _TOKEN_RE.match(s, pos)
        if m is None:
            raise ParseError(f"Unexpected character {s[pos]!r} at {pos}.")
        tokens.append(m.group(0))
        pos = m.end()
    return tokens


def _apply(symbol: str, left: Rational, right: Rational) -> Rational:
    op = Operator.from_symbol(symbol)
    if op is Operator.SUB and left < right:
        raise IllegalOperation("Subtraction would give a negative result.")
    result = op.apply(left, right)
    if op is Operator.DIV and result.numerator < 0:
        raise IllegalOperation("Division gave a negative result.")
    return result


def _apply_pass(items: Sequence[Item], symbols: str) -> List[Item]:
    out: List[Item] = []
    i = 0
    while i < len(items):
        item = items[i]
        if isinstance(item, str) and item in symbols:
            if not out or i + 1 >= len(items):
                raise ParseError(f"Operator {item!r} is missing an operand.")
            left, right = out[-1], items[i + 1]
            if isinstance(left, str) or isinstance(right, str):
                raise ParseError(f"Operator {item!r} is missing an operand.")
            out[-1] = _apply(item, left, right)
            i += 2
        else:
            out.append(item)
            i += 1
    return out


def _evaluate_flat(items: Sequence[Item]) -> Rational:
    reduced = _apply_pass(_apply_pass(items, "*/"), "+-")
    if len(reduced) != 1 or not isinstance(reduced[0], Rational):
        raise ParseError("Expression does not reduce to a single value.")
    return reduced[0]


def _resolve_parentheses(tokens: Sequence[str]) -> List[Item]:
    stack: List[List[Item]] = [[]]
    for token in tokens:
        if token == "(":
            stack.append([])
        elif token == ")":
            if len(stack) == 1:
                raise ParseError("Unbalanced parentheses.")
            inner = stack.pop()
            stack[-1].append(_evaluate_flat(inner))
        elif token in _OPERATOR_CHARS:
            stack[-1].append(token)
        else:
            stack[-1].append(Rational.from_string(token))
    if len(stack) != 1:
        raise ParseError("Unbalanced parentheses.")
    return stack[0]


def evaluate_tokens(text: str) -> Optional[Rational]:
    """
    Evaluate without building a tree: parenthesized groups first, then
    × ÷ left to right, then + - left to right.
    """
    if text is None or not text.strip():
        return None
    try:
        return _evaluate_flat(_resolve_parentheses(tokenize(text)))
    except EngineError as e:
        logger.debug("Token evaluation failed for %r: %s", text, e)
        return None


# --- Public entry points ----------------------------------------------------------


def evaluate_value(text: str) -> Optional[Rational]:
    tree = parse_expression(text)
    if tree is not None:
        value = tree.evaluate()
        if value is not None:
            return value
    return evaluate_tokens(text)


def evaluate_expression(text: str) -> Optional[str]:
    value = evaluate_value(text)
    return None if value is None else value.to_display_string()
