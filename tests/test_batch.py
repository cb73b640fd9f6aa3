import random
import re

import pytest

from engine.batch import (
    MAX_OPERATORS,
    format_answer_line,
    format_exercise_line,
    generate_batch,
)
from engine.errors import ExhaustionWarning
from engine.expression import Operator, binary_nodes
from engine.parsing import evaluate_expression, parse_expression


def test_batch_size_and_rules():
    batch = generate_batch(100, 20, rng=random.Random(1))
    assert len(batch.problems) == 100
    assert not batch.exhausted
    assert batch.shortfall == 0

    for p in batch.problems:
        tree = parse_expression(p.expression)
        assert tree is not None, p.expression
        assert tree.operator_count() <= MAX_OPERATORS
        assert evaluate_expression(p.expression) == p.answer
        assert not p.answer.startswith("-")
        for node in binary_nodes(tree):
            if node.op is Operator.DIV:
                q = node.left.evaluate() / node.right.evaluate()
                assert 0 < q.numerator < q.denominator


def test_batch_has_no_duplicates():
    batch = generate_batch(300, 10, rng=random.Random(5))
    canon = [p.canonical for p in batch.problems]
    assert len(canon) == len(set(canon))
    reparsed = [parse_expression(p.expression).canonical_form() for p in batch.problems]
    assert len(reparsed) == len(set(reparsed))


def test_indices_are_sequential():
    batch = generate_batch(10, 10, rng=random.Random(2))
    assert [p.index for p in batch.problems] == list(range(1, 11))


def test_same_seed_same_batch():
    a = generate_batch(20, 15, rng=random.Random(42))
    b = generate_batch(20, 15, rng=random.Random(42))
    assert [p.expression for p in a.problems] == [p.expression for p in b.problems]


def test_fractions_are_well_represented():
    batch = generate_batch(200, 10, rng=random.Random(8))
    with_fraction = sum(1 for p in batch.problems if p.has_fraction)
    assert with_fraction >= len(batch.problems) // 2


def test_line_formats():
    batch = generate_batch(10, 10, rng=random.Random(3))
    ex_pat = re.compile(r"^Exercise\d+: .+ =$")
    ans_pat = re.compile(r"^Answer\d+: .+$")
    for i, (ex, ans) in enumerate(zip(batch.exercise_lines(), batch.answer_lines()), 1):
        assert ex_pat.match(ex) and ex.startswith(f"Exercise{i}:")
        assert ans_pat.match(ans) and ans.startswith(f"Answer{i}:")

    assert format_exercise_line(3, "1 + 2") == "Exercise3: 1 + 2 ="
    assert format_answer_line(3, "3", label="A") == "A3: 3"


def test_exhaustion_returns_partial_batch():
    # Only "1 + 1", "1 × 1" and "1 - 1" exist with one operator below 2.
    with pytest.warns(ExhaustionWarning):
        batch = generate_batch(5, 2, rng=random.Random(0), max_operators=1)
    assert batch.exhausted
    assert len(batch.problems) == 3
    assert batch.shortfall == 2
    assert batch.attempts == 5 * 100


@pytest.mark.parametrize("count,range_", [(0, 10), (10001, 10), (5, 0), (-1, 5)])
def test_invalid_request(count, range_):
    with pytest.raises(ValueError):
        generate_batch(count, range_)


@pytest.mark.parametrize("seed", range(8))
def test_displayed_divisions_stay_proper(seed):
    batch = generate_batch(200, 10, rng=random.Random(seed))
    for p in batch.problems:
        tree = parse_expression(p.expression)
        for node in binary_nodes(tree):
            if node.op is Operator.DIV:
                q = node.left.evaluate() / node.right.evaluate()
                assert 0 < q.numerator < q.denominator, p.expression


def test_fraction_share_with_odd_count():
    batch = generate_batch(151, 10, rng=random.Random(4))
    with_fraction = sum(1 for p in batch.problems if p.has_fraction)
    assert with_fraction * 2 >= len(batch.problems)


def test_operator_budget_varies_per_attempt():
    batch = generate_batch(60, 10, rng=random.Random(11))
    counts = {parse_expression(p.expression).operator_count() for p in batch.problems}
    assert 1 in counts
    assert max(counts) > 1
