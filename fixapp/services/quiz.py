# fixapp/services/quiz.py
"""Practice quiz: a fixed problem bank, random selection and answer scoring."""
import logging
import math
import random
import re
import threading
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Union

from fixapp.core.config import settings
from fixapp.core.errors import ConflictError, NotFoundError
from fixapp.models.math_problem import Difficulty, Subject

logger = logging.getLogger(__name__)

TOLERANCE = 0.01
SCORE_BY_DIFFICULTY = {
    Difficulty.easy: 1,
    Difficulty.medium: 2,
    Difficulty.hard: 3,
}


@dataclass(frozen=True)
class PracticeProblem:
    question: str
    answer: str
    solution: str
    subject: Subject
    difficulty: Difficulty


@dataclass(frozen=True)
class AnswerResult:
    is_correct: bool
    score_delta: int


PROBLEM_BANK: List[PracticeProblem] = [
    PracticeProblem(
        question="Solve for x: 2x + 5 = 13",
        answer="4",
        solution="1. Subtract 5 from both sides: 2x = 8\n2. Divide both sides by 2: x = 4",
        subject=Subject.algebra,
        difficulty=Difficulty.easy,
    ),
    PracticeProblem(
        question="Solve for x: 3(x - 2) = 2x + 7",
        answer="13",
        solution="1. Expand: 3x - 6 = 2x + 7\n2. Subtract 2x from both sides: x - 6 = 7\n3. Add 6: x = 13",
        subject=Subject.algebra,
        difficulty=Difficulty.medium,
    ),
    PracticeProblem(
        question="Find the positive root of x² - 5x - 14 = 0",
        answer="7",
        solution="Factor: (x - 7)(x + 2) = 0\nRoots are x = 7 and x = -2, so the positive root is 7",
        subject=Subject.algebra,
        difficulty=Difficulty.hard,
    ),
    PracticeProblem(
        question="Find the area of a circle with radius 5",
        answer="78.54",
        solution="Area = πr² = π(5)² = 25π ≈ 78.54",
        subject=Subject.geometry,
        difficulty=Difficulty.medium,
    ),
    PracticeProblem(
        question="Find the area of a rectangle 4 by 6",
        answer="24",
        solution="Area = width × height = 4 × 6 = 24",
        subject=Subject.geometry,
        difficulty=Difficulty.easy,
    ),
    PracticeProblem(
        question="What is the derivative of x²?",
        answer="2x",
        solution="Using the power rule: d/dx(xⁿ) = nxⁿ⁻¹\nSo d/dx(x²) = 2x²⁻¹ = 2x",
        subject=Subject.calculus,
        difficulty=Difficulty.medium,
    ),
    PracticeProblem(
        question="Evaluate the integral of 2x from 0 to 3",
        answer="9",
        solution="∫2x dx = x²\nx² from 0 to 3 = 9 - 0 = 9",
        subject=Subject.calculus,
        difficulty=Difficulty.hard,
    ),
    PracticeProblem(
        question="Find sin(30°)",
        answer="0.5",
        solution="sin(30°) = 1/2 = 0.5\nThis is a standard trigonometric value.",
        subject=Subject.trigonometry,
        difficulty=Difficulty.easy,
    ),
    PracticeProblem(
        question="Find cos(60°) + sin(90°)",
        answer="1.5",
        solution="cos(60°) = 0.5 and sin(90°) = 1\n0.5 + 1 = 1.5",
        subject=Subject.trigonometry,
        difficulty=Difficulty.medium,
    ),
    PracticeProblem(
        question="Calculate the mean of: 2, 4, 6, 8, 10",
        answer="6",
        solution="Mean = (2+4+6+8+10)/5 = 30/5 = 6",
        subject=Subject.statistics,
        difficulty=Difficulty.easy,
    ),
    PracticeProblem(
        question="Find the median of: 7, 1, 9, 3, 5, 11",
        answer="6",
        solution="Sorted: 1, 3, 5, 7, 9, 11\nMedian = (5 + 7) / 2 = 6",
        subject=Subject.statistics,
        difficulty=Difficulty.medium,
    ),
]


_NUMBER = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_number(text) -> float:
    """Plain decimal parse; anything else (padding, ``1_000``, words) counts as 0."""
    text = "" if text is None else str(text)
    if not _NUMBER.fullmatch(text):
        return 0.0
    value = float(text)
    if not math.isfinite(value):
        return 0.0
    return value


def score_for(difficulty: Union[Difficulty, str, None]) -> int:
    if not isinstance(difficulty, Difficulty):
        try:
            difficulty = Difficulty(difficulty)
        except ValueError:
            return 1
    return SCORE_BY_DIFFICULTY.get(difficulty, 1)


def check_answer(problem: PracticeProblem, user_answer: str,
                 difficulty: Union[Difficulty, str, None] = None) -> AnswerResult:
    """Compare numerically within TOLERANCE.

    ``difficulty`` is the level the user picked; it defaults to the problem's
    own level.
    """
    correct = abs(parse_number(user_answer) - parse_number(problem.answer)) < TOLERANCE
    if difficulty is None:
        difficulty = problem.difficulty
    return AnswerResult(is_correct=correct, score_delta=score_for(difficulty) if correct else 0)


class QuizEngine:
    def __init__(self, bank: Sequence[PracticeProblem] = PROBLEM_BANK, rng: Optional[random.Random] = None):
        if not bank:
            raise ValueError("problem bank is empty")
        self.bank = list(bank)
        self.rng = rng or random.Random()

    def candidates(self, subject: Optional[Subject] = None,
                   difficulty: Optional[Difficulty] = None) -> List[PracticeProblem]:
        exact = [p for p in self.bank
                 if (subject is None or p.subject == subject)
                 and (difficulty is None or p.difficulty == difficulty)]
        if exact:
            return exact
        by_subject = [p for p in self.bank if subject is None or p.subject == subject]
        return by_subject or self.bank

    def generate_problem(self, subject: Optional[Subject] = None,
                         difficulty: Optional[Difficulty] = None) -> PracticeProblem:
        return self.rng.choice(self.candidates(subject, difficulty))


@dataclass
class QuizSession:
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    score: int = 0
    total_attempts: int = 0
    current_problem: Optional[PracticeProblem] = None
    difficulty: Optional[Difficulty] = None
    answered: bool = False
    last_used: float = 0.0
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def next_problem(self, engine: QuizEngine, subject: Optional[Subject],
                     difficulty: Optional[Difficulty]) -> PracticeProblem:
        with self.lock:
            self.current_problem = engine.generate_problem(subject, difficulty)
            self.difficulty = difficulty
            self.answered = False
            return self.current_problem

    def submit(self, user_answer: str) -> AnswerResult:
        """Score one answer to the current problem. Each problem takes one attempt."""
        with self.lock:
            if self.current_problem is None or self.answered:
                raise ConflictError("Request a problem before answering")
            result = check_answer(self.current_problem, user_answer, self.difficulty)
            self.answered = True
            self.score += result.score_delta
            self.total_attempts += 1
            return result


class QuizSessionRegistry:
    """In-memory session table. Sessions vanish with the process.

    Sessions idle longer than ``max_age`` seconds are dropped, and once
    ``max_sessions`` are live the least recently used one makes room.
    """

    def __init__(self, max_age: Optional[float] = None, max_sessions: Optional[int] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.max_age = max_age or settings.quiz_session_max_age
        self.max_sessions = max_sessions or settings.quiz_max_sessions
        self._clock = clock
        self._sessions: "OrderedDict[str, QuizSession]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def _expire(self, now: float) -> None:
        # oldest first, so stop at the first live one
        while self._sessions:
            sid, s = next(iter(self._sessions.items()))
            if now - s.last_used <= self.max_age:
                break
            del self._sessions[sid]
            logger.info("Quiz session %s expired", sid)

    def create(self) -> QuizSession:
        with self._lock:
            now = self._clock()
            self._expire(now)
            while len(self._sessions) >= self.max_sessions:
                sid, _ = self._sessions.popitem(last=False)
                logger.info("Quiz session %s evicted", sid)
            s = QuizSession(last_used=now)
            self._sessions[s.id] = s
        return s

    def get(self, session_id: str) -> QuizSession:
        with self._lock:
            now = self._clock()
            self._expire(now)
            s = self._sessions.get(session_id)
            if s is None:
                raise NotFoundError("Quiz session", session_id)
            s.last_used = now
            self._sessions.move_to_end(session_id)
        return s

    def discard(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise NotFoundError("Quiz session", session_id)


quiz_engine = QuizEngine()
quiz_sessions = QuizSessionRegistry()
