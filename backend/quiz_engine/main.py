"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints used by students taking quizzes.
Controllers are intentionally thin: they accept requests, delegate to
services, and return JSON responses. Domain errors are translated into
HTTP errors using the status code each error carries.

Endpoints implemented:
- GET /health
- GET /quizzes
- GET /quizzes/{quiz_id}/attempts
- POST /quizzes/{quiz_id}/attempts
- GET /attempts/{attempt_id}
- PUT /attempts/{attempt_id}/answers/{question_id}
- POST /attempts/{attempt_id}/submit
- GET /attempts/{attempt_id}/result
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, HTTPException, Request
from fastapi.responses import Response
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session
import json
import logging
import time
import uuid
from typing import List
from .database import engine, create_db_and_tables, get_session
from . import services, models
from .auth import get_current_student
from .config import settings
from .errors import QuizEngineError
from .schemas import AnswerIn, AttemptOut, AttemptStartOut, AvailableQuizOut, SessionStateOut, SubmitIn
from .utils.sessions import CountdownTicker, QuizSession, SessionRegistry

logger = logging.getLogger("quiz_engine.api")
if not logging.getLogger().handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)


def _auto_submit(session: QuizSession) -> None:
    """Countdown expiry handler: finalize through the normal submission path."""
    with Session(engine) as db:
        services.SubmissionService(db, registry).expire(session.attempt_id)


def _sweep_stale() -> int:
    with Session(engine) as db:
        return services.AttemptService(db, registry).expire_stale_attempts()


registry = SessionRegistry(on_expire=_auto_submit)
ticker = CountdownTicker(
    registry,
    interval=settings.COUNTDOWN_TICK_SECONDS,
    sweep=_sweep_stale,
    sweep_interval=settings.STALE_SWEEP_INTERVAL_SECONDS,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    ticker.start()
    logger.info("ticker_started %s", json.dumps({'interval': settings.COUNTDOWN_TICK_SECONDS}))
    try:
        yield
    finally:
        ticker.stop()


app = FastAPI(title="Quiz Assessment API", lifespan=lifespan)

# Wide-open CORS keeps local frontends working without extra config in dev.
if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    fields = {
        "request_id": req_id,
        "path": request.url.path,
        "method": request.method,
        "client": request.client.host if request.client else "unknown",
    }
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        fields["duration_ms"] = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception("request_failed %s", json.dumps(fields, ensure_ascii=True))
        raise
    response.headers["X-Request-ID"] = req_id
    fields["status_code"] = response.status_code
    fields["duration_ms"] = round((time.perf_counter() - started) * 1000.0, 2)
    logger.info("request_done %s", json.dumps(fields, ensure_ascii=True))
    return response


def _http_error(e: QuizEngineError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=str(e))


@app.get('/health')
def health():
    return {'status': 'ok', 'ticker_running': ticker.running, 'open_sessions': len(registry)}


@app.get('/quizzes', response_model=List[AvailableQuizOut])
def list_quizzes(db: Session = Depends(get_session), user: models.User = Depends(get_current_student)):
    """List published quizzes in the student's courses with attempt quota state."""
    return services.QuizCatalogService(db).available_quizzes(user.id)


@app.get('/quizzes/{quiz_id}/attempts', response_model=List[AttemptOut])
def list_attempts(quiz_id: int, db: Session = Depends(get_session), user: models.User = Depends(get_current_student)):
    """Return the student's attempts at a quiz, newest first."""
    try:
        return services.AttemptService(db, registry).list_attempts(user.id, quiz_id)
    except QuizEngineError as e:
        raise _http_error(e)


@app.post('/quizzes/{quiz_id}/attempts', status_code=201, response_model=AttemptStartOut)
def start_attempt(quiz_id: int, db: Session = Depends(get_session), user: models.User = Depends(get_current_student)):
    """Start a new attempt and return its questions and timer.

    Responds 409 when the attempt quota is used up and 503 when the
    questions could not be loaded; in both cases nothing is stored.
    """
    try:
        return services.AttemptService(db, registry).start_attempt(user.id, quiz_id)
    except QuizEngineError as e:
        raise _http_error(e)


@app.get('/attempts/{attempt_id}', response_model=SessionStateOut)
def attempt_state(attempt_id: int, db: Session = Depends(get_session), user: models.User = Depends(get_current_student)):
    try:
        return services.SubmissionService(db, registry).get_state(user.id, attempt_id)
    except QuizEngineError as e:
        raise _http_error(e)


@app.put('/attempts/{attempt_id}/answers/{question_id}')
def set_answer(attempt_id: int, question_id: int, payload: AnswerIn, db: Session = Depends(get_session),
               user: models.User = Depends(get_current_student)):
    """Buffer one answer; nothing is written to the database until submit."""
    try:
        return services.SubmissionService(db, registry).set_answer(user.id, attempt_id, question_id, payload.value)
    except QuizEngineError as e:
        raise _http_error(e)


@app.post('/attempts/{attempt_id}/submit')
def submit_attempt(attempt_id: int, payload: SubmitIn = None, db: Session = Depends(get_session),
                   user: models.User = Depends(get_current_student)):
    """Submit an attempt and return its score.

    The body may carry the client's answer buffer. A 503 means the
    submission was not stored and can be retried.
    """
    answers = payload.answers if payload is not None else None
    try:
        return services.SubmissionService(db, registry).submit(user.id, attempt_id, answers)
    except QuizEngineError as e:
        raise _http_error(e)


@app.get('/attempts/{attempt_id}/result')
def attempt_result(attempt_id: int, db: Session = Depends(get_session), user: models.User = Depends(get_current_student)):
    try:
        return services.SubmissionService(db, registry).get_result(user.id, attempt_id)
    except QuizEngineError as e:
        raise _http_error(e)
