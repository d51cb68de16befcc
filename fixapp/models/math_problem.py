# File: fixapp\models\math_problem.py
# Project: fixapp-backend
# Auto-added for reference

from __future__ import annotations
import uuid
from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import String, Text, Enum, DateTime, LargeBinary
from sqlalchemy.orm import Mapped, mapped_column
from fixapp.db.base import Base
from fixapp.models.issue import enum_values, utcnow


class Difficulty(PyEnum):
    easy = "Easy"
    medium = "Medium"
    hard = "Hard"


class Subject(PyEnum):
    algebra = "Algebra"
    geometry = "Geometry"
    calculus = "Calculus"
    trigonometry = "Trigonometry"
    statistics = "Statistics"


class MathProblemRecord(Base):
    __tablename__ = "math_problems"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    problem_text: Mapped[str] = mapped_column(Text, nullable=False)
    solution: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True, deferred=True)
    image_content_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    difficulty: Mapped[Difficulty] = mapped_column(
        Enum(Difficulty, values_callable=enum_values, name="difficulty"), default=Difficulty.medium
    )
    subject: Mapped[Subject] = mapped_column(
        Enum(Subject, values_callable=enum_values, name="subject"), index=True
    )
