from __future__ import annotations

from datetime import UTC, datetime

import sqlalchemy as sa
from sqlalchemy import JSON, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from db import Base


class Attempt(Base):
    __tablename__ = "attempts"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), index=True
    )
    total: Mapped[int] = mapped_column(Integer)
    correct: Mapped[int] = mapped_column(Integer)
    items: Mapped[dict] = mapped_column(JSON)  # per-line grading results
    duration_ms: Mapped[int] = mapped_column(sa.Integer, nullable=True)


class ProblemSet(Base):
    __tablename__ = "problem_sets"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), index=True
    )
    count: Mapped[int] = mapped_column(Integer)  # problems actually generated
    range: Mapped[int] = mapped_column(Integer)
    seed: Mapped[int] = mapped_column(sa.BigInteger, nullable=True)
    items: Mapped[dict] = mapped_column(JSON)  # [{index, expression, answer}]
