"""In-memory state for attempts that are being taken right now.

Each open attempt gets a `QuizSession`: the frozen question set, an
`AnswerCollector` buffering responses until submission, and a
`QuizTimer`. Sessions live in a `SessionRegistry`; a single
`CountdownTicker` thread ticks every open timer by the wall-clock
seconds that pass.
Nothing here touches the database.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from .countdown import QuizTimer, EXPIRED

logger = logging.getLogger("quiz_engine.sessions")


class AnswerCollector:
    """Buffer of answers keyed by question id.

    No shape checks happen here; the scoring engine treats malformed
    payloads as incorrect and missing keys as unanswered.
    """

    def __init__(self, initial: Optional[Mapping[int, Any]] = None):
        self._answers: Dict[int, Any] = {}
        if initial:
            self.merge(initial)

    def set_answer(self, question_id: int, value: Any) -> None:
        if value is None:
            self._answers.pop(question_id, None)
        else:
            self._answers[question_id] = value

    def merge(self, answers: Mapping[int, Any]) -> None:
        for question_id, value in answers.items():
            self.set_answer(question_id, value)

    def get(self, question_id: int, default: Any = None) -> Any:
        return self._answers.get(question_id, default)

    def snapshot(self) -> Dict[int, Any]:
        return dict(self._answers)

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    def clear(self) -> None:
        self._answers.clear()

    def __len__(self) -> int:
        return len(self._answers)

    def __contains__(self, question_id) -> bool:
        return question_id in self._answers


class QuizSession:
    """Everything the engine holds for one in-progress attempt."""

    def __init__(self, attempt_id: int, student_id: int, quiz_id: int, questions: Tuple, time_limit: Optional[int] = None,
                 on_expire: Optional[Callable[["QuizSession"], None]] = None, elapsed_seconds: int = 0):
        self.attempt_id = attempt_id
        self.student_id = student_id
        self.quiz_id = quiz_id
        self.questions = tuple(questions)
        self.question_ids = frozenset(q.id for q in self.questions)
        self.answers = AnswerCollector()
        self.lock = threading.RLock()
        self.closed = False
        self.timer = QuizTimer(time_limit, on_expire=(lambda: on_expire(self)) if on_expire else None,
                               elapsed_seconds=elapsed_seconds)

    @property
    def expired(self) -> bool:
        return self.timer.state == EXPIRED

    def state(self) -> dict:
        return {
            'attempt_id': self.attempt_id,
            'quiz_id': self.quiz_id,
            'timer': self.timer.snapshot(),
            'answered_count': self.answers.answered_count,
            'question_count': len(self.questions),
            'answers': {str(k): v for k, v in self.answers.snapshot().items()},
        }


class SessionRegistry:
    """Thread-safe map of attempt id to `QuizSession`.

    `on_expire` is called with the session when its countdown hits zero;
    the application wires it to the same submission path a manual
    submit uses.
    """

    def __init__(self, on_expire: Optional[Callable[[QuizSession], None]] = None):
        self.on_expire = on_expire
        self._sessions: Dict[int, QuizSession] = {}
        self._lock = threading.Lock()

    def open(self, attempt_id: int, student_id: int, quiz_id: int, questions: Iterable, time_limit: Optional[int] = None,
             elapsed_seconds: int = 0) -> QuizSession:
        session = QuizSession(attempt_id, student_id, quiz_id, tuple(questions), time_limit,
                              on_expire=self._handle_expire, elapsed_seconds=elapsed_seconds)
        with self._lock:
            self._sessions[attempt_id] = session
        logger.info("session_opened %s", json.dumps({
            'attempt_id': attempt_id, 'quiz_id': quiz_id, 'timer_state': session.timer.state,
        }))
        return session

    def get(self, attempt_id: int) -> Optional[QuizSession]:
        with self._lock:
            return self._sessions.get(attempt_id)

    def close(self, attempt_id: int) -> Optional[QuizSession]:
        with self._lock:
            session = self._sessions.pop(attempt_id, None)
        if session is not None:
            session.closed = True
        return session

    def open_sessions(self) -> list:
        with self._lock:
            return list(self._sessions.values())

    def tick_all(self, seconds: int = 1) -> None:
        for session in self.open_sessions():
            session.timer.tick(seconds)

    def _handle_expire(self, session: QuizSession) -> None:
        logger.info("session_expired %s", json.dumps({'attempt_id': session.attempt_id, 'quiz_id': session.quiz_id}))
        if self.on_expire is None:
            return
        try:
            self.on_expire(session)
        except Exception:
            # the ticker must keep running; the stale sweep retries later
            logger.exception("auto_submit_failed attempt_id=%s", session.attempt_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


class CountdownTicker:
    """One background thread ticking every open session.

    Each wake-up ticks the whole seconds that really passed since the
    previous one, so the wake-up interval and slow expiry handlers never
    change a quiz's time budget. Also runs `sweep` every `sweep_interval`
    seconds when provided.
    """

    def __init__(self, registry: SessionRegistry, interval: float = 1.0,
                 sweep: Optional[Callable[[], Any]] = None, sweep_interval: float = 300.0,
                 timer: Callable[[], float] = time.monotonic):
        self.registry = registry
        self.interval = interval
        self.sweep = sweep
        self.sweep_interval = sweep_interval
        self._timer = timer
        self._last: Optional[float] = None
        self._carry = 0.0
        self._since_sweep = 0.0
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._last = self._timer()
        self._carry = 0.0
        self._thread = threading.Thread(target=self._run, name="quiz-countdown", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll(self) -> int:
        """Tick open sessions by the whole seconds elapsed since the last poll."""
        now = self._timer()
        if self._last is None:
            self._last = now
        elapsed = max(0.0, now - self._last)
        self._last = now
        self._carry += elapsed
        whole = int(self._carry)
        self._carry -= whole
        if whole:
            self.registry.tick_all(whole)
        if self.sweep is not None:
            self._since_sweep += elapsed
            if self._since_sweep >= self.sweep_interval:
                self._since_sweep = 0.0
                try:
                    self.sweep()
                except Exception:
                    logger.exception("stale_sweep_failed")
        return whole

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.poll()
