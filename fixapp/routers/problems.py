# File: fixapp/routers/problems.py
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, Response, UploadFile
from sqlalchemy.orm import Session
from typing import List, Optional
from fixapp.core.ratelimit import limiter
from fixapp.db.session import get_db
from fixapp.models.math_problem import Difficulty, Subject
from fixapp.routers.issues import ALLOWED, MAX_BYTES
from fixapp.schemas.problem import ProblemOut, problem_out
from fixapp.schemas.stats import ProgressOut, breakdown_out
from fixapp.services import stats
from fixapp.services.problem_store import ProblemStore

router = APIRouter(tags=["problems"])


def get_store(db: Session = Depends(get_db)) -> ProblemStore:
    return ProblemStore(db)


@router.post("/problems", response_model=ProblemOut, status_code=201)
@limiter.limit("30/minute")
def save_problem(
    request: Request,
    problem_text: str = Form(..., min_length=1, max_length=4000),
    solution: str = Form(..., min_length=1, max_length=20000),
    subject: Subject = Form(...),
    difficulty: Difficulty = Form(Difficulty.medium),
    image: UploadFile | None = File(default=None),
    store: ProblemStore = Depends(get_store),
):
    data = None
    content_type = None
    if image is not None and image.filename:
        if image.content_type not in ALLOWED:
            raise HTTPException(status_code=400, detail="Unsupported image type")
        data = image.file.read()
        if len(data) > MAX_BYTES:
            raise HTTPException(status_code=400, detail="Image exceeds 5MB")
        content_type = image.content_type

    obj = store.save_problem(problem_text, solution, subject, difficulty,
                             image=data, image_content_type=content_type)
    return problem_out(obj)


@router.get("/problems", response_model=List[ProblemOut])
def list_problems(subject: Optional[Subject] = Query(None), store: ProblemStore = Depends(get_store)):
    return [problem_out(p) for p in store.list_problems(subject)]


@router.get("/problems/{problem_id}", response_model=ProblemOut)
def get_problem(problem_id: str, store: ProblemStore = Depends(get_store)):
    return problem_out(store.get_problem(problem_id))


@router.get("/problems/{problem_id}/image")
def get_problem_image(problem_id: str, store: ProblemStore = Depends(get_store)):
    obj = store.get_problem(problem_id)
    if not obj.image:
        raise HTTPException(status_code=404, detail="Problem has no image")
    return Response(content=obj.image, media_type=obj.image_content_type or "image/jpeg")


@router.delete("/problems/{problem_id}", status_code=204)
def delete_problem(problem_id: str, store: ProblemStore = Depends(get_store)):
    store.delete_problem(problem_id)
    return Response(status_code=204)


@router.get("/progress", response_model=ProgressOut)
def progress(window: stats.TimeWindow = Query(stats.TimeWindow.week), store: ProblemStore = Depends(get_store)):
    problems = store.list_problems()
    in_window = stats.count_in_window(problems, window)
    rows = stats.subject_breakdown(problems)
    best = stats.best_subject(rows)
    best_count = next((r.count for r in rows if r.subject == best), 0)
    return ProgressOut(
        window=window,
        total_solved=len(problems),
        solved_in_window=in_window,
        average_per_day=stats.average_rate(in_window, window.days),
        best_subject=best.value,
        best_subject_count=best_count,
        weakest_subject=stats.weakest_subject(rows).value,
        subjects=breakdown_out(rows),
    )
