# File: fixapp/routers/solve.py
from functools import lru_cache
from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fixapp.core.ratelimit import limiter
from fixapp.schemas.problem import SolveOut
from fixapp.services.solve_client import SolveClient

router = APIRouter(tags=["solve"])

MAX_BYTES = 5 * 1024 * 1024


@lru_cache
def get_solve_client() -> SolveClient:
    return SolveClient.from_settings()


@router.post("/solve", response_model=SolveOut)
@limiter.limit("5/minute")
def solve(
    request: Request,
    image: UploadFile = File(...),
    client: SolveClient = Depends(get_solve_client),
):
    data = image.file.read()
    if len(data) > MAX_BYTES:
        raise HTTPException(status_code=400, detail="Image exceeds 5MB")
    return SolveOut(solution=client.solve(data))
