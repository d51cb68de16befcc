# File: fixapp/services/problem_store.py
import logging
import threading
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from fixapp.core.errors import NotFoundError, ValidationError
from fixapp.models.issue import utcnow
from fixapp.models.math_problem import Difficulty, MathProblemRecord, Subject
from fixapp.services.issue_store import coerce_enum

logger = logging.getLogger(__name__)


class ProblemStore:
    """Saved solver results. Records are only ever created or deleted."""

    _write_lock = threading.Lock()

    def __init__(self, db: Session):
        self.db = db

    def save_problem(
        self,
        problem_text: str,
        solution: str,
        subject: Union[Subject, str],
        difficulty: Union[Difficulty, str] = Difficulty.medium,
        image: Optional[bytes] = None,
        image_content_type: Optional[str] = None,
    ) -> MathProblemRecord:
        if not problem_text or not problem_text.strip():
            raise ValidationError("Problem text is required")
        if not solution or not solution.strip():
            raise ValidationError("Solution is required")
        subject = coerce_enum(Subject, subject, "subject")
        difficulty = coerce_enum(Difficulty, difficulty, "difficulty")

        with self._write_lock:
            obj = MathProblemRecord(
                problem_text=problem_text.strip(),
                solution=solution.strip(),
                subject=subject,
                difficulty=difficulty,
                image=image or None,
                image_content_type=(image_content_type or "image/jpeg") if image else None,
                timestamp=utcnow(),
            )
            self.db.add(obj)
            try:
                self.db.commit()
            except Exception:
                logger.error("Commit failed, rolling back", exc_info=True)
                self.db.rollback()
                raise
            self.db.refresh(obj)
        logger.info("Saved problem %s (%s/%s)", obj.id, subject.value, difficulty.value)
        return obj

    def list_problems(self, subject: Optional[Union[Subject, str]] = None) -> List[MathProblemRecord]:
        q = self.db.query(MathProblemRecord)
        if subject:
            q = q.filter(MathProblemRecord.subject == coerce_enum(Subject, subject, "subject"))
        return q.order_by(MathProblemRecord.timestamp.desc()).all()

    def get_problem(self, problem_id: str) -> MathProblemRecord:
        obj = self.db.get(MathProblemRecord, problem_id)
        if not obj:
            raise NotFoundError("Problem", problem_id)
        return obj

    def delete_problem(self, problem_id: str) -> None:
        with self._write_lock:
            obj = self.get_problem(problem_id)
            self.db.delete(obj)
            try:
                self.db.commit()
            except Exception:
                logger.error("Commit failed, rolling back", exc_info=True)
                self.db.rollback()
                raise
        logger.info("Deleted problem %s", problem_id)
