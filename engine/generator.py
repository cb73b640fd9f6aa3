# engine/generator.py
from __future__ import annotations

import random
from typing import Optional

from engine.errors import IllegalOperation
from engine.expression import Binary, Leaf, Node, Operator
from engine.rational import Rational

# --- Tuning -----------------------------------------------------------------------
# Share of leaves that are fractions rather than natural numbers.
FRACTION_PROBABILITY = 0.5
# Share of (large enough) fractions upgraded to mixed numbers.
MIXED_PROBABILITY = 0.3
# Candidates tried per operator node before giving up on this attempt.
NODE_RETRIES = 50

_OPERATORS = tuple(Operator)


def generate_number(range_: int, rng: random.Random) -> str:
    """
    Random leaf literal below ``range_``: a natural number, a proper fraction
    "N/D" or a mixed number "I'N/D".
    """
    if range_ >= 3 and rng.random() < FRACTION_PROBABILITY:
        denominator = rng.randint(2, range_ - 1)
        numerator = rng.randint(1, denominator - 1)
        if rng.random() < MIXED_PROBABILITY and numerator * 2 > denominator:
            whole = rng.randint(1, max(1, range_ // 3))
            return f"{whole}'{numerator}/{denominator}"
        return f"{numerator}/{denominator}"
    return str(rng.randint(1, max(1, range_ - 1)))


def enforce_operation_rules(op: Operator, left: Rational, right: Rational) -> None:
    if op is Operator.SUB and left < right:
        raise IllegalOperation("Subtraction would give a negative result.")
    if op is Operator.DIV:
        quotient = left.divide(right)
        if not quotient.is_proper_fraction():
            raise IllegalOperation("Division must give a proper fraction.")


def check_operation(op: Operator, left: Node, right: Node) -> bool:
    lv = left.evaluate()
    rv = right.evaluate()
    if lv is None or rv is None:
        return False
    try:
        enforce_operation_rules(op, lv, rv)
    except IllegalOperation:
        return False
    return True


def generate_tree(
    max_operators: int,
    range_: int,
    rng: random.Random,
    retries: int = NODE_RETRIES,
) -> Optional[Node]:
    """
    Build a random tree with exactly ``max_operators`` operator nodes whose
    every step obeys the exercise rules. Returns None when no legal candidate
    was found within ``retries`` tries.
    """
    if max_operators <= 0:
        return Leaf(generate_number(range_, rng))

    for _ in range(retries):
        node = _candidate(max_operators, range_, rng, retries)
        if node is not None:
            return node
    return None


def _candidate(max_operators: int, range_: int, rng: random.Random, retries: int) -> Optional[Node]:
    op = rng.choice(_OPERATORS)

    if max_operators == 1:
        left_ops = right_ops = 0
    else:
        left_ops = rng.randrange(max_operators)
        right_ops = max_operators - 1 - left_ops

    left = generate_tree(left_ops, range_, rng, retries)
    right = generate_tree(right_ops, range_, rng, retries)
    if left is None or right is None:
        return None

    if not check_operation(op, left, right):
        return None

    node = Binary(op, left, right)

    # Re-check the built node itself: a difference must never be negative.
    if op is Operator.SUB:
        lv, rv = node.left.evaluate(), node.right.evaluate()
        if lv is None or rv is None or lv < rv:
            return None

    return node
