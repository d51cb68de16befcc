# fixapp/routers/issues_stats.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from fixapp.db.session import get_db
from fixapp.models.issue import Issue, IssueCategory, IssueStatus
from fixapp.schemas.stats import BreakdownOut, StatusSummaryOut, WindowOut, breakdown_out
from fixapp.services import stats

router = APIRouter(prefix="/issues/stats", tags=["issues:stats"])


def _issues(db: Session, status: Optional[IssueStatus] = None, category: Optional[IssueCategory] = None):
    q = db.query(Issue)
    if status:
        q = q.filter(Issue.status == status)
    if category:
        q = q.filter(Issue.category == category)
    return q.all()

@router.get("/summary", response_model=StatusSummaryOut)
def summary(category: Optional[IssueCategory] = Query(None), db: Session = Depends(get_db)):
    return stats.status_summary(_issues(db, category=category))

@router.get("/by-category", response_model=List[BreakdownOut])
def by_category(status: Optional[IssueStatus] = Query(None), db: Session = Depends(get_db)):
    return breakdown_out(stats.category_breakdown(_issues(db, status=status)))

@router.get("/window", response_model=WindowOut)
def in_window(window: stats.TimeWindow = Query(stats.TimeWindow.week), db: Session = Depends(get_db)):
    count = stats.count_in_window(_issues(db), window, attr="created_at")
    return WindowOut(window=window, count=count, average_per_day=stats.average_rate(count, window.days))
