# engine/batch.py
from __future__ import annotations

import logging
import random
import warnings
from dataclasses import dataclass, field
from typing import List, Optional, Set

from engine.errors import ExhaustionWarning
from engine.generator import generate_tree
from engine.parsing import parse_expression

logger = logging.getLogger(__name__)

MAX_OPERATORS = 3
MAX_COUNT = 10000
# Attempts allowed per requested problem before the run gives up.
ATTEMPT_FACTOR = 100

DEFAULT_EXERCISE_LABEL = "Exercise"
DEFAULT_ANSWER_LABEL = "Answer"


@dataclass(frozen=True)
class Problem:
    index: int
    expression: str
    answer: str
    canonical: str
    has_fraction: bool


@dataclass
class Batch:
    requested: int
    range_: int
    problems: List[Problem] = field(default_factory=list)
    attempts: int = 0
    exhausted: bool = False

    @property
    def shortfall(self) -> int:
        return self.requested - len(self.problems)

    def exercise_lines(self, label: str = DEFAULT_EXERCISE_LABEL) -> List[str]:
        return [format_exercise_line(p.index, p.expression, label) for p in self.problems]

    def answer_lines(self, label: str = DEFAULT_ANSWER_LABEL) -> List[str]:
        return [format_answer_line(p.index, p.answer, label) for p in self.problems]


def format_exercise_line(index: int, expression: str, label: str = DEFAULT_EXERCISE_LABEL) -> str:
    return f"{label}{index}: {expression} ="


def format_answer_line(index: int, answer: str, label: str = DEFAULT_ANSWER_LABEL) -> str:
    return f"{label}{index}: {answer}"


def _validate_request(count: int, range_: int) -> None:
    if not isinstance(count, int) or count < 1 or count > MAX_COUNT:
        raise ValueError(f"Problem count must be between 1 and {MAX_COUNT}.")
    if not isinstance(range_, int) or range_ < 1:
        raise ValueError("Range must be a positive integer.")


def generate_batch(
    count: int,
    range_: int,
    rng: Optional[random.Random] = None,
    max_operators: int = MAX_OPERATORS,
) -> Batch:
    """
    Generate up to ``count`` distinct problems with numbers below ``range_``.

    Every attempt draws an operator budget in [1, max_operators] and builds one
    candidate tree. Candidates are dropped when they cannot be evaluated, have
    too many operators, or duplicate an accepted problem up to commutative
    reordering. Once half of the batch is in, fraction-free candidates are
    skipped while fewer than half of the accepted problems contain a fraction.

    Stops after ``count * ATTEMPT_FACTOR`` attempts; the partial batch is then
    returned with ``exhausted`` set and an ExhaustionWarning issued.
    """
    _validate_request(count, range_)
    rng = rng or random.Random()

    batch = Batch(requested=count, range_=range_)
    seen: Set[str] = set()
    fraction_count = 0
    # Below 3 no fraction literal can be drawn, so there is nothing to nudge.
    nudge_fractions = range_ >= 3
    max_attempts = count * ATTEMPT_FACTOR

    while len(batch.problems) < count and batch.attempts < max_attempts:
        batch.attempts += 1

        tree = generate_tree(rng.randint(1, max_operators), range_, rng)
        if tree is None or tree.operator_count() > max_operators:
            continue

        value = tree.evaluate()
        if value is None:
            continue

        generated = len(batch.problems)
        has_fraction = tree.contains_fraction()
        if (
            nudge_fractions
            and not has_fraction
            and generated > count // 2
            # fewer than half, counted exactly: 2 of 5 is already too few
            and fraction_count * 2 < generated
        ):
            continue

        expression = tree.render()
        # Key on the tree as printed: a + (b + c) and (a + b) + c print alike.
        shown = parse_expression(expression) or tree
        canonical = shown.canonical_form()
        if canonical in seen:
            continue

        seen.add(canonical)
        if has_fraction:
            fraction_count += 1
        batch.problems.append(
            Problem(
                index=generated + 1,
                expression=expression,
                answer=value.to_display_string(),
                canonical=canonical,
                has_fraction=has_fraction,
            )
        )

        if len(batch.problems) % 100 == 0:
            logger.debug("Generated %d/%d problems", len(batch.problems), count)

    if len(batch.problems) < count:
        batch.exhausted = True
        msg = (
            f"Only {len(batch.problems)} of {count} problems generated "
            f"after {batch.attempts} attempts (range {range_})."
        )
        logger.warning(msg)
        warnings.warn(msg, ExhaustionWarning, stacklevel=2)
    else:
        logger.info(
            "Generated %d problems in %d attempts (range %d)", count, batch.attempts, range_
        )

    return batch
