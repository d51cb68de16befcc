# File: fixapp\main.py
# Project: fixapp-backend
# Auto-added for reference

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi import _rate_limit_exceeded_handler

from fixapp.core.config import cors_origins_list, settings
from fixapp.core.errors import ConflictError, LocationError, NotFoundError, SolveError, ValidationError
from fixapp.core.ratelimit import limiter
from fixapp.db.session import close_db, init_db
from fixapp.routers import issues, issues_stats, problems, quiz, solve

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("fixapp")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database ready")
    yield
    close_db()


app = FastAPI(title="FixApp API", lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins_list(),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
def validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": exc.message})

@app.exception_handler(NotFoundError)
def not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})

@app.exception_handler(LocationError)
def location_error(request: Request, exc: LocationError):
    return JSONResponse(status_code=422, content={"detail": exc.message})

@app.exception_handler(ConflictError)
def conflict_error(request: Request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": exc.message})

@app.exception_handler(SolveError)
def solve_error(request: Request, exc: SolveError):
    code = 503 if exc.kind in (SolveError.BUSY, SolveError.NOT_CONFIGURED) else 502
    if exc.kind == SolveError.IMAGE_PROCESSING:
        code = 400
    return JSONResponse(status_code=code, content={"detail": exc.message, "kind": exc.kind})


@app.get("/health")
def health():
    return {"ok": True}

app.include_router(issues_stats.router)
app.include_router(issues.router)
app.include_router(problems.router)
app.include_router(quiz.router)
app.include_router(solve.router)
