# schemas/problems.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from engine.batch import DEFAULT_ANSWER_LABEL, DEFAULT_EXERCISE_LABEL, MAX_COUNT

# ---------- Generate ----------


class GenerateRequest(BaseModel):
    count: int = Field(default=10, ge=1, le=MAX_COUNT)
    range: int = Field(ge=1)
    # Same seed, same problems.
    seed: Optional[int] = None
    exercise_label: str = Field(default=DEFAULT_EXERCISE_LABEL, max_length=32)
    answer_label: str = Field(default=DEFAULT_ANSWER_LABEL, max_length=32)


class ProblemOut(BaseModel):
    index: int
    expression: str
    answer: str


class GenerateResponse(BaseModel):
    ok: bool
    set_id: Optional[int] = None
    requested: int
    generated: int
    attempts: int
    exhausted: bool
    problems: List[ProblemOut]
    exercises: List[str]
    answers: List[str]
    feedback: str = ""


# ---------- Stored sets ----------


class ProblemSetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    created_at: datetime | None
    count: int
    range: int
    seed: int | None = None
    items: List[ProblemOut]
