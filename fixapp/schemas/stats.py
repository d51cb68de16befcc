from pydantic import BaseModel
from typing import List
from fixapp.services.stats import TimeWindow


class BreakdownOut(BaseModel):
    name: str
    count: int
    percentage: int


class StatusSummaryOut(BaseModel):
    total: int
    logged: int
    in_progress: int
    resolved: int


class WindowOut(BaseModel):
    window: TimeWindow
    count: int
    average_per_day: str


class ProgressOut(BaseModel):
    window: TimeWindow
    total_solved: int
    solved_in_window: int
    average_per_day: str
    best_subject: str
    best_subject_count: int
    weakest_subject: str
    subjects: List[BreakdownOut]


def breakdown_out(rows) -> List[BreakdownOut]:
    return [BreakdownOut(name=r.subject.value, count=r.count, percentage=r.percentage) for r in rows]
