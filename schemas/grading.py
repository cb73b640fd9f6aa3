# schemas/grading.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

# ---------- Evaluate ----------


class EvaluateRequest(BaseModel):
    expr: str


class EvaluateResponse(BaseModel):
    ok: bool
    value: Optional[str] = None
    feedback: Optional[str] = None


# ---------- Grade single ----------


class GradeRequest(BaseModel):
    # "3 + 5 =" or a full line such as "Exercise1: 3 + 5 ="
    expression: str
    answer: str


class GradeResponse(BaseModel):
    ok: bool
    correct: bool
    feedback: str = ""
    expected: Optional[str] = None


# ---------- Grade batch ----------


class GradeBatchRequest(BaseModel):
    exercises: List[str]
    answers: List[str]
    # Client may send it, but server computes its own duration anyway.
    duration_ms: Optional[int] = None


class GradeBatchResponse(BaseModel):
    ok: bool
    total: int = 0
    correct: int = 0
    wrong: int = 0
    correct_ids: List[int] = []
    wrong_ids: List[int] = []
    report: List[str] = []
    attempt_id: Optional[int] = None
    duration_ms: Optional[int] = None
    feedback: str = ""


# ---------- Stored attempts ----------


class AttemptLine(BaseModel):
    index: int
    expression: str
    answer: str
    expected: Optional[str] = None
    correct: bool


class AttemptOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    created_at: Optional[datetime] = None
    total: int
    correct: int
    duration_ms: Optional[int] = None
    # excluded in list views
    items: Optional[List[AttemptLine]] = None
