# engine/grading.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from engine.parsing import evaluate_expression

# "Exercise12:" / "Answer3:" style prefixes; any label text followed by an index.
_LABEL_RE = re.compile(r"^[^:]*?\d+\s*:\s*")

_COUNT_MISMATCH_MSG = "Number of exercises does not match number of answers."


def _strip_label(line: str) -> str:
    s = line.strip()
    m = _LABEL_RE.match(s)
    if m:
        return s[m.end() :]
    return s


def extract_expression(line: str) -> str:
    """Turn "Exercise1: 3 + 5 =" (or a bare "3 + 5 =") into "3 + 5"."""
    s = _strip_label(line)
    if s.endswith("="):
        s = s[:-1]
    return s.strip()


def extract_answer(line: str) -> str:
    return _strip_label(line).strip()


def expected_answer(expression: str) -> Optional[str]:
    return evaluate_expression(extract_expression(expression))


def grade_one(expression: str, submitted: str) -> bool:
    """
    True iff the submitted answer is exactly the display form of the
    expression's value. Anything that cannot be evaluated is graded wrong.
    """
    expected = expected_answer(expression)
    if expected is None or submitted is None:
        return False
    return expected == extract_answer(submitted)


@dataclass(frozen=True)
class GradedLine:
    index: int
    expression: str
    answer: str
    expected: Optional[str]
    correct: bool


@dataclass
class GradeReport:
    correct: List[int] = field(default_factory=list)
    wrong: List[int] = field(default_factory=list)
    lines: List[GradedLine] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.correct) + len(self.wrong)

    def to_lines(self) -> List[str]:
        return [
            f"Correct: {len(self.correct)} ({_format_numbers(self.correct)})",
            f"Wrong: {len(self.wrong)} ({_format_numbers(self.wrong)})",
        ]


def _format_numbers(numbers: Iterable[int]) -> str:
    return ", ".join(str(n) for n in numbers)


def _non_blank(lines: Iterable[str]) -> List[str]:
    return [line.strip() for line in lines if line and line.strip()]


def grade_lines(exercises: Iterable[str], answers: Iterable[str]) -> GradeReport:
    ex = _non_blank(exercises)
    ans = _non_blank(answers)
    if len(ex) != len(ans):
        raise ValueError(_COUNT_MISMATCH_MSG)

    report = GradeReport()
    for i, (exercise, answer) in enumerate(zip(ex, ans), 1):
        expression = extract_expression(exercise)
        submitted = extract_answer(answer)
        expected = evaluate_expression(expression)
        ok = expected is not None and expected == submitted
        (report.correct if ok else report.wrong).append(i)
        report.lines.append(GradedLine(i, expression, submitted, expected, ok))
    return report
