from __future__ import annotations

import logging
import random as _rnd
import warnings
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from deps.auth import require_admin
from engine.batch import generate_batch
from engine.errors import ExhaustionWarning
from schemas.problems import GenerateRequest, GenerateResponse, ProblemSetOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/problems", tags=["problems"])

_SHORTFALL_MSG = "Only {generated} of {requested} distinct problems fit range {range}."


@router.post("/generate", response_model=GenerateResponse)
def generate_problems(req: GenerateRequest):
    # one RNG per request; a seed makes the batch reproducible
    rng = _rnd.Random(req.seed)

    try:
        with warnings.catch_warnings():
            # the shortfall is reported in the response instead
            warnings.simplefilter("ignore", ExhaustionWarning)
            batch = generate_batch(req.count, req.range, rng=rng)
    except ValueError as e:
        return {
            "ok": False,
            "requested": req.count,
            "generated": 0,
            "attempts": 0,
            "exhausted": False,
            "problems": [],
            "exercises": [],
            "answers": [],
            "feedback": str(e),
        }

    problems = [
        {"index": p.index, "expression": p.expression, "answer": p.answer}
        for p in batch.problems
    ]

    set_id: Optional[int] = None
    try:
        from db import SessionLocal
        from models import ProblemSet

        with SessionLocal() as db:
            row = ProblemSet(count=len(problems), range=req.range, seed=req.seed, items=problems)
            db.add(row)
            db.commit()
            db.refresh(row)
            set_id = row.id
    except Exception as e:
        logger.warning("Could not store problem set: %s", e)
        set_id = None

    feedback = ""
    if batch.exhausted:
        feedback = _SHORTFALL_MSG.format(
            generated=len(problems), requested=req.count, range=req.range
        )

    return {
        "ok": True,
        "set_id": set_id,
        "requested": req.count,
        "generated": len(problems),
        "attempts": batch.attempts,
        "exhausted": batch.exhausted,
        "problems": problems,
        "exercises": batch.exercise_lines(req.exercise_label),
        "answers": batch.answer_lines(req.answer_label),
        "feedback": feedback,
    }


@router.get("/sets/{set_id}", response_model=ProblemSetOut)
def get_problem_set(set_id: int):
    from db import SessionLocal
    from models import ProblemSet

    with SessionLocal() as db:
        row = db.get(ProblemSet, set_id)
        if not row:
            raise HTTPException(status_code=404, detail="Problem set not found")
        return ProblemSetOut.model_validate(row)


@router.delete("/sets/{set_id}", dependencies=[Depends(require_admin)])
def delete_problem_set(set_id: int):
    from db import SessionLocal
    from models import ProblemSet

    with SessionLocal() as db:
        row = db.get(ProblemSet, set_id)
        if not row:
            raise HTTPException(status_code=404, detail="Problem set not found")
        db.delete(row)
        db.commit()
    return {"ok": True, "deleted": set_id}
