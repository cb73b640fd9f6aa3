# engine/expression.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Union

from engine.errors import IllegalOperation, ParseError
from engine.rational import Rational

logger = logging.getLogger(__name__)


class Operator(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    @property
    def precedence(self) -> int:
        return 1 if self in (Operator.ADD, Operator.SUB) else 2

    @property
    def commutative(self) -> bool:
        return self in (Operator.ADD, Operator.MUL)

    @property
    def display(self) -> str:
        return _DISPLAY_SYMBOLS[self]

    def apply(self, left: Rational, right: Rational) -> Rational:
        if self is Operator.ADD:
            return left.add(right)
        if self is Operator.SUB:
            return left.subtract(right)
        if self is Operator.MUL:
            return left.multiply(right)
        return left.divide(right)

    @classmethod
    def from_symbol(cls, symbol: str) -> Operator:
        """Accept either the internal token or the display symbol (× ÷)."""
        op = _BY_SYMBOL.get(symbol)
        if op is None:
            raise ParseError(f"Unknown operator: {symbol!r}")
        return op


_DISPLAY_SYMBOLS = {
    Operator.ADD: "+",
    Operator.SUB: "-",
    Operator.MUL: "×",
    Operator.DIV: "÷",
}
_BY_SYMBOL = {op.value: op for op in Operator}
_BY_SYMBOL.update({sym: op for op, sym in _DISPLAY_SYMBOLS.items()})


# --- Nodes ------------------------------------------------------------------------


@dataclass(frozen=True)
class Leaf:
    """A number literal exactly as written: "7", "3/5" or "2'3/5"."""

    token: str

    def evaluate(self) -> Optional[Rational]:
        try:
            return Rational.from_string(self.token)
        except ParseError as e:
            logger.debug("Unreadable leaf %r: %s", self.token, e)
            return None

    def render(self) -> str:
        return self.token

    def normalized(self) -> Leaf:
        return self

    def canonical_form(self) -> str:
        return self.token

    def operator_count(self) -> int:
        return 0

    def contains_fraction(self) -> bool:
        return "/" in self.token or "'" in self.token

    def leaves(self) -> Iterator[Leaf]:
        yield self


@dataclass(frozen=True)
class Binary:
    op: Operator
    left: Node
    right: Node

    def evaluate(self) -> Optional[Rational]:
        """
        Exact value of the subtree, or None when a leaf is malformed or an
        operation is illegal (division by zero). Never raises.
        """
        lv = self.left.evaluate()
        if lv is None:
            return None
        rv = self.right.evaluate()
        if rv is None:
            return None
        try:
            return self.op.apply(lv, rv)
        except IllegalOperation:
            return None

    def render(self) -> str:
        left = self.left.render()
        right = self.right.render()
        if _needs_parentheses(self.left, self.op, is_right=False):
            left = f"({left})"
        if _needs_parentheses(self.right, self.op, is_right=True):
            right = f"({right})"
        return f"{left} {self.op.display} {right}"

    def normalized(self) -> Binary:
        left = self.left.normalized()
        right = self.right.normalized()
        if self.op.commutative and left.canonical_form() > right.canonical_form():
            left, right = right, left
        return Binary(self.op, left, right)

    def canonical_form(self) -> str:
        # Chains of one commutative operator are flattened and sorted, so both
        # operand order and grouping disappear from the key.
        if self.op.commutative:
            keys = sorted(node.canonical_form() for node in self._chain_operands(self.op))
            return "(" + f" {self.op.value} ".join(keys) + ")"
        return f"({self.left.canonical_form()} {self.op.value} {self.right.canonical_form()})"

    def operator_count(self) -> int:
        return 1 + self.left.operator_count() + self.right.operator_count()

    def contains_fraction(self) -> bool:
        return self.left.contains_fraction() or self.right.contains_fraction()

    def leaves(self) -> Iterator[Leaf]:
        yield from self.left.leaves()
        yield from self.right.leaves()

    def _chain_operands(self, op: Operator) -> List[Node]:
        operands: List[Node] = []
        for child in (self.left, self.right):
            if isinstance(child, Binary) and child.op is op:
                operands.extend(child._chain_operands(op))
            else:
                operands.append(child)
        return operands


Node = Union[Leaf, Binary]


def _needs_parentheses(child: Node, parent_op: Operator, is_right: bool) -> bool:
    if not isinstance(child, Binary):
        return False
    if child.op.precedence < parent_op.precedence:
        return True
    # a - (b + c), a × (b ÷ c), a + (b - c); but a + b + c and a - b - c stay bare
    if child.op.precedence != parent_op.precedence or not is_right:
        return False
    return not (parent_op.commutative and child.op.commutative)


def binary_nodes(node: Node) -> Iterator[Binary]:
    """Every operator node of the tree, parents before children."""
    if isinstance(node, Binary):
        yield node
        yield from binary_nodes(node.left)
        yield from binary_nodes(node.right)
