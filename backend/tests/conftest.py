from datetime import datetime, timedelta, timezone
from pathlib import Path
import os
import tempfile
import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

# The app module creates its tables at import; point it at a throwaway file first.
_db_path = Path(tempfile.gettempdir()) / "quiz_engine_test.db"
if _db_path.exists():
    _db_path.unlink()
os.environ["DATABASE_URL"] = f"sqlite:///{_db_path}"

from quiz_engine import models  # noqa: E402
from quiz_engine.database import create_db_and_tables  # noqa: E402
from quiz_engine.utils.sessions import SessionRegistry  # noqa: E402


class FakeClock:
    """Callable clock the services read instead of the wall clock."""

    def __init__(self, start: datetime = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class RecordingNotifier:
    def __init__(self, fail: bool = False):
        self.sent = []
        self.fail = fail

    def send(self, payload):
        if self.fail:
            raise RuntimeError("notification backend down")
        self.sent.append(payload)
        return payload


@pytest.fixture
def engine():
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_db_and_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def registry():
    return SessionRegistry()


@pytest.fixture
def student(session):
    user = models.User(username="student1", role="student")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def course(session, student):
    c = models.Course(title="Intro to Databases")
    session.add(c)
    session.commit()
    session.refresh(c)
    session.add(models.Enrollment(course_id=c.id, student_id=student.id))
    session.commit()
    return c


def add_quiz(session, course_id, questions=None, **fields):
    """Create a published quiz.

    `questions` is a list of dicts with `type`, `points` and `options`
    given as `(text, is_correct)` pairs. The default set is one multiple
    choice question (2 pts, correct A and C), one true/false (1 pt, True)
    and one short answer (1 pt).
    """
    if questions is None:
        questions = [
            {'type': 'multiple_choice', 'points': 2, 'options': [('A', True), ('B', False), ('C', True)]},
            {'type': 'true_false', 'points': 1, 'options': [('True', True), ('False', False)]},
            {'type': 'short_answer', 'points': 1},
        ]
    fields.setdefault('title', 'Normalization')
    fields.setdefault('is_published', True)
    quiz = models.Quiz(course_id=course_id, **fields)
    session.add(quiz)
    session.flush()
    for i, item in enumerate(questions):
        q = models.Question(
            quiz_id=quiz.id,
            question_text=item.get('text', f'Question {i + 1}'),
            question_type=item['type'],
            points=item.get('points', 1),
            order_index=i,
            explanation=item.get('explanation'),
        )
        session.add(q)
        session.flush()
        for j, (text, correct) in enumerate(item.get('options', [])):
            session.add(models.QuestionOption(question_id=q.id, option_text=text, is_correct=correct, order_index=j))
    session.commit()
    session.refresh(quiz)
    return quiz


def option_ids(session, question_id, correct=None):
    """Option ids of a question in display order, optionally filtered by correctness."""
    from quiz_engine.repositories import QuestionRepository
    opts = QuestionRepository(session).options_for_questions([question_id])
    return [o.id for o in opts if correct is None or o.is_correct == correct]
