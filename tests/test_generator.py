import random
import re

from engine.expression import Binary, Leaf, Operator, binary_nodes
from engine.generator import check_operation, generate_number, generate_tree
from engine.rational import Rational

_MIXED = re.compile(r"^(\d+)'(\d+)/(\d+)$")
_FRACTION = re.compile(r"^(\d+)/(\d+)$")


def test_generate_number_stays_in_range():
    rng = random.Random(3)
    for _ in range(2000):
        token = generate_number(10, rng)
        m = _MIXED.match(token)
        if m:
            whole, num, den = map(int, m.groups())
            assert 1 <= whole <= max(1, 10 // 3)
            assert 2 <= den <= 9 and 1 <= num < den
            assert num * 2 > den
            continue
        m = _FRACTION.match(token)
        if m:
            num, den = map(int, m.groups())
            assert 2 <= den <= 9 and 1 <= num < den
            continue
        assert 1 <= int(token) <= 9


def test_generate_number_mixes_kinds():
    rng = random.Random(11)
    tokens = [generate_number(20, rng) for _ in range(500)]
    assert any("'" in t for t in tokens)
    assert any("/" in t and "'" not in t for t in tokens)
    assert any(t.isdigit() for t in tokens)


def test_generate_number_tiny_ranges():
    rng = random.Random(0)
    assert {generate_number(2, rng) for _ in range(50)} == {"1"}
    assert {generate_number(1, rng) for _ in range(50)} == {"1"}


def test_zero_budget_is_a_leaf():
    assert isinstance(generate_tree(0, 10, random.Random(1)), Leaf)


def test_generated_trees_obey_rules():
    rng = random.Random(2024)
    for _ in range(300):
        budget = rng.randint(1, 3)
        tree = generate_tree(budget, 10, rng)
        if tree is None:
            continue
        assert tree.operator_count() == budget
        assert tree.evaluate() is not None
        for node in binary_nodes(tree):
            lv, rv = node.left.evaluate(), node.right.evaluate()
            if node.op is Operator.SUB:
                assert lv >= rv
            if node.op is Operator.DIV:
                q = lv / rv
                assert 0 < q.numerator < q.denominator


def test_same_seed_same_tree():
    a = generate_tree(3, 20, random.Random(99))
    b = generate_tree(3, 20, random.Random(99))
    assert a is not None and a == b


def test_check_operation():
    one, two = Leaf("1"), Leaf("2")
    assert not check_operation(Operator.SUB, one, two)
    assert check_operation(Operator.SUB, two, one)
    assert check_operation(Operator.DIV, one, two)
    assert not check_operation(Operator.DIV, two, one)
    assert not check_operation(Operator.DIV, one, one)
    assert not check_operation(Operator.DIV, one, Binary(Operator.SUB, one, one))
    assert check_operation(Operator.ADD, Leaf("1/2"), Leaf("2'1/3"))
    assert not check_operation(Operator.ADD, Leaf("oops"), one)


def test_division_result_must_be_proper():
    node = Binary(Operator.DIV, Leaf("1/2"), Leaf("3/4"))
    assert check_operation(node.op, node.left, node.right)
    assert node.evaluate() == Rational(2, 3)
