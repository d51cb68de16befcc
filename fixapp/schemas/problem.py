from pydantic import BaseModel
from datetime import datetime
from fixapp.models.math_problem import Difficulty, Subject


class ProblemOut(BaseModel):
    id: str
    problem_text: str
    solution: str
    subject: Subject
    difficulty: Difficulty
    timestamp: datetime
    has_image: bool = False

    class Config:
        from_attributes = True


class SolveOut(BaseModel):
    solution: str


def problem_out(obj) -> ProblemOut:
    out = ProblemOut.model_validate(obj)
    out.has_image = obj.image_content_type is not None
    return out
