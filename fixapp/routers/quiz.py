# File: fixapp/routers/quiz.py
from fastapi import APIRouter, Request, Response
from fixapp.core.ratelimit import limiter
from fixapp.schemas.quiz import AnswerIn, AnswerOut, PracticeProblemOut, ProblemRequest, SessionOut
from fixapp.services.quiz import quiz_engine, quiz_sessions

router = APIRouter(prefix="/quiz", tags=["quiz"])


def _problem_out(p) -> PracticeProblemOut:
    return PracticeProblemOut(question=p.question, subject=p.subject, difficulty=p.difficulty)


def _session_out(s) -> SessionOut:
    return SessionOut(
        id=s.id,
        score=s.score,
        total_attempts=s.total_attempts,
        current_problem=_problem_out(s.current_problem) if s.current_problem else None,
    )


@router.post("/sessions", response_model=SessionOut, status_code=201)
@limiter.limit("10/minute")
def start_session(request: Request):
    return _session_out(quiz_sessions.create())


@router.get("/sessions/{session_id}", response_model=SessionOut)
def get_session(session_id: str):
    return _session_out(quiz_sessions.get(session_id))


@router.delete("/sessions/{session_id}", status_code=204)
def end_session(session_id: str):
    quiz_sessions.discard(session_id)
    return Response(status_code=204)


@router.post("/sessions/{session_id}/problem", response_model=PracticeProblemOut)
def next_problem(session_id: str, body: ProblemRequest):
    s = quiz_sessions.get(session_id)
    return _problem_out(s.next_problem(quiz_engine, body.subject, body.difficulty))


@router.post("/sessions/{session_id}/answer", response_model=AnswerOut)
def submit_answer(session_id: str, body: AnswerIn):
    s = quiz_sessions.get(session_id)
    with s.lock:
        result = s.submit(body.answer)
        return AnswerOut(
            is_correct=result.is_correct,
            score_delta=result.score_delta,
            correct_answer=s.current_problem.answer,
            solution=s.current_problem.solution,
            score=s.score,
            total_attempts=s.total_attempts,
        )
