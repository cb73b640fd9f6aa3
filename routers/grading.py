from __future__ import annotations

import logging
import re
import time
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter
from sympy import Rational as SymRational
from sympy import nsimplify
from sympy.parsing.sympy_parser import parse_expr, standard_transformations

from engine.grading import extract_answer, extract_expression, grade_lines, grade_one
from engine.parsing import evaluate_value
from engine.rational import Rational
from schemas.grading import (
    EvaluateRequest,
    EvaluateResponse,
    GradeBatchRequest,
    GradeBatchResponse,
    GradeRequest,
    GradeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["grading"])

# --- Parsing / validation helpers ------------------------------------------------
LEN_LIMIT = 200
_INVALID_EXPR_MSG = (
    "Only expressions using digits, spaces, + - * / × ÷ ' and parentheses are allowed."
)
_INVALID_ANSWER_MSG = "Answers may only use digits, spaces, - / ' and a decimal point."
_CANNOT_EVALUATE_MSG = "Expression cannot be evaluated."
_SIMPLEST_FORM_MSG = "Right value, but write it in simplest form: {expected}."
_EXPR_RE = re.compile(r"^[0-9+\-*/×÷'()\s]+$")
_ANSWER_RE = re.compile(r"^[0-9\-/'.\s]+$")
_MIXED_RE = re.compile(r"(\d+)'(\d+)/(\d+)")


def _validate_expr(s: str) -> Optional[str]:
    if s is None or not isinstance(s, str) or not s.strip():
        return "Expression required."
    if len(s) > LEN_LIMIT:
        return f"Expression too long (> {LEN_LIMIT})."
    if _EXPR_RE.fullmatch(s) is None:
        return _INVALID_EXPR_MSG
    return None


def _validate_answer_text(s: str) -> Optional[str]:
    if s is None or not isinstance(s, str) or not s.strip():
        return "Answer required."
    if len(s) > LEN_LIMIT:
        return f"Answer too long (> {LEN_LIMIT})."
    if _ANSWER_RE.fullmatch(s) is None:
        return _INVALID_ANSWER_MSG
    return None


def _same_value(answer: str, expected: Rational) -> bool:
    """
    Numeric equality via SymPy, so "3/2", "1.5" and "6/4" all match 1'1/2.
    Only used for feedback; grading itself is an exact text comparison.
    """
    text = _MIXED_RE.sub(r"(\1+\2/\3)", answer.strip())
    try:
        sym = nsimplify(parse_expr(text, transformations=standard_transformations, evaluate=True))
    except Exception:
        return False
    return bool(sym == SymRational(expected.numerator, expected.denominator))


# --- Endpoints --------------------------------------------------------------------


@router.post("/evaluate", response_model=EvaluateResponse)
def evaluate(req: EvaluateRequest):
    expr = extract_expression(req.expr or "")
    err = _validate_expr(expr)
    if err:
        return {"ok": False, "value": None, "feedback": err}
    value = evaluate_value(expr)
    if value is None:
        return {"ok": False, "value": None, "feedback": _CANNOT_EVALUATE_MSG}
    return {"ok": True, "value": value.to_display_string()}


@router.post("/grade", response_model=GradeResponse)
def grade(req: GradeRequest):
    expr = extract_expression(req.expression or "")
    err = _validate_expr(expr)
    if err:
        return {"ok": False, "correct": False, "feedback": err}

    expected = evaluate_value(expr)
    if expected is None:
        return {"ok": False, "correct": False, "feedback": _CANNOT_EVALUATE_MSG}
    exp_str = expected.to_display_string()

    answer = extract_answer(req.answer or "")
    msg = _validate_answer_text(answer)
    if msg:
        return {"ok": False, "correct": False, "feedback": msg, "expected": exp_str}

    correct = grade_one(expr, answer)
    feedback = ""
    if not correct and _same_value(answer, expected):
        feedback = _SIMPLEST_FORM_MSG.format(expected=exp_str)

    return {"ok": True, "correct": correct, "feedback": feedback, "expected": exp_str}


@router.post("/grade-batch", response_model=GradeBatchResponse)
def grade_batch(req: GradeBatchRequest):
    t0 = time.perf_counter()

    try:
        report = grade_lines(req.exercises, req.answers)
    except ValueError as e:
        return {"ok": False, "feedback": str(e)}

    measured_ms = int(round((time.perf_counter() - t0) * 1000))
    duration_ms = req.duration_ms if req.duration_ms is not None else measured_ms
    items = [asdict(line) for line in report.lines]

    attempt_id: Optional[int] = None
    try:
        from db import SessionLocal
        from models import Attempt

        with SessionLocal() as db:
            attempt = Attempt(
                total=report.total,
                correct=len(report.correct),
                items=items,
                duration_ms=duration_ms,
            )
            db.add(attempt)
            db.commit()
            db.refresh(attempt)
            attempt_id = attempt.id
    except Exception as e:
        logger.warning("Could not store grading attempt: %s", e)
        attempt_id = None

    return {
        "ok": True,
        "total": report.total,
        "correct": len(report.correct),
        "wrong": len(report.wrong),
        "correct_ids": report.correct,
        "wrong_ids": report.wrong,
        "report": report.to_lines(),
        "attempt_id": attempt_id,
        "duration_ms": duration_ms,
    }
