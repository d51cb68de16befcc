# fixapp/services/stats.py
"""Dashboard aggregates. Pure functions, recomputed on every call."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Type

from fixapp.models.issue import IssueCategory, IssueStatus, utcnow
from fixapp.models.math_problem import Subject


class TimeWindow(str, Enum):
    week = "week"
    month = "month"
    year = "year"

    @property
    def days(self) -> int:
        return WINDOW_DAYS[self]


WINDOW_DAYS = {
    TimeWindow.week: 7,
    TimeWindow.month: 30,
    TimeWindow.year: 365,
}

BEST_FALLBACK = Subject.algebra
WEAKEST_FALLBACK = Subject.statistics


@dataclass(frozen=True)
class Breakdown:
    subject: Any
    count: int
    percentage: int


def same_period(ts: datetime, now: datetime, window: TimeWindow) -> bool:
    if window == TimeWindow.week:
        return ts.isocalendar()[:2] == now.isocalendar()[:2]
    if window == TimeWindow.month:
        return (ts.year, ts.month) == (now.year, now.month)
    return ts.year == now.year


def count_in_window(records: Iterable, window, now: Optional[datetime] = None,
                    attr: str = "timestamp") -> int:
    """Count records in the same calendar week/month/year as ``now``.

    Calendar periods, not rolling windows: on a Monday the week count starts
    again from zero.
    """
    window = TimeWindow(window)
    now = now or utcnow()
    n = 0
    for r in records:
        ts = getattr(r, attr, None)
        if ts is not None and same_period(ts, now, window):
            n += 1
    return n


def _key(value):
    return value.value if isinstance(value, Enum) else value


def subject_breakdown(records: Sequence, subjects: Type[Enum] = Subject,
                      attr: str = "subject") -> List[Breakdown]:
    records = list(records)
    total = len(records)
    counts = {}
    for r in records:
        k = _key(getattr(r, attr, None))
        counts[k] = counts.get(k, 0) + 1

    out = []
    for s in subjects:
        c = counts.get(s.value, 0)
        out.append(Breakdown(subject=s, count=c, percentage=(c * 100) // total if total else 0))
    return out


def category_breakdown(issues: Sequence) -> List[Breakdown]:
    return subject_breakdown(issues, IssueCategory, attr="category")


def best_subject(breakdown: Sequence[Breakdown], fallback=BEST_FALLBACK):
    best = None
    for b in breakdown:
        if best is None or b.count > best.count:
            best = b
    return best.subject if best else fallback


def weakest_subject(breakdown: Sequence[Breakdown], fallback=WEAKEST_FALLBACK):
    weakest = None
    for b in breakdown:
        if weakest is None or b.count < weakest.count:
            weakest = b
    return weakest.subject if weakest else fallback


def average_rate(count: int, window_days: int) -> str:
    if window_days <= 0:
        raise ValueError("window_days must be positive")
    return "%.1f" % (count / window_days)


def status_summary(issues: Iterable) -> dict:
    out = {"total": 0, "logged": 0, "in_progress": 0, "resolved": 0}
    for i in issues:
        out["total"] += 1
        status = i.status if isinstance(i.status, IssueStatus) else IssueStatus(i.status)
        out[status.name] += 1
    return out
