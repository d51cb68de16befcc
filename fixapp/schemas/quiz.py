from pydantic import BaseModel
from typing import Optional
from fixapp.models.math_problem import Difficulty, Subject


class ProblemRequest(BaseModel):
    subject: Optional[Subject] = None
    difficulty: Optional[Difficulty] = None


class PracticeProblemOut(BaseModel):
    """The answer and worked solution stay hidden until an answer is submitted."""
    question: str
    subject: Subject
    difficulty: Difficulty


class AnswerIn(BaseModel):
    answer: str


class AnswerOut(BaseModel):
    is_correct: bool
    score_delta: int
    correct_answer: str
    solution: str
    score: int
    total_attempts: int


class SessionOut(BaseModel):
    id: str
    score: int
    total_attempts: int
    current_problem: Optional[PracticeProblemOut] = None
