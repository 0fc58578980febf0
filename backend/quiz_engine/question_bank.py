"""Read-only access to a quiz's question set.

Questions are copied into frozen snapshots when an attempt starts. The
snapshot outlives the database session, fixes the navigation order for
the whole attempt and is what the scoring engine grades against.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from . import repositories
from .errors import QuestionLoadFailure


@dataclass(frozen=True)
class OptionSnapshot:
    id: int
    option_text: str
    is_correct: bool
    order_index: int = 0


@dataclass(frozen=True)
class QuestionSnapshot:
    id: int
    question_text: str
    question_type: str
    points: float
    order_index: int = 0
    explanation: Optional[str] = None
    options: Tuple[OptionSnapshot, ...] = ()

    def correct_option_ids(self) -> frozenset:
        return frozenset(o.id for o in self.options if o.is_correct)

    def public(self) -> dict:
        """Shape sent to students: no correctness flags, no explanation."""
        return {
            'id': self.id,
            'question_text': self.question_text,
            'question_type': self.question_type,
            'points': self.points,
            'order_index': self.order_index,
            'options': [{'id': o.id, 'option_text': o.option_text} for o in self.options],
        }


class QuestionBankReader:
    """Load a quiz's questions with their options in display order."""
    def __init__(self, session: Session):
        self.session = session
        self.q_repo = repositories.QuestionRepository(session)

    def load_questions(self, quiz_id: int) -> Tuple[QuestionSnapshot, ...]:
        """Return the quiz's questions sorted by `order_index`.

        Options keep their own stored order. Database errors surface as
        `QuestionLoadFailure` so callers can abort an attempt start
        before anything is written.
        """
        try:
            questions = self.q_repo.list_for_quiz(quiz_id)
            options = self.q_repo.options_for_questions([q.id for q in questions])
        except SQLAlchemyError as e:
            raise QuestionLoadFailure(f"could not load questions for quiz {quiz_id}") from e
        by_question = {}
        for o in options:
            by_question.setdefault(o.question_id, []).append(
                OptionSnapshot(id=o.id, option_text=o.option_text, is_correct=bool(o.is_correct), order_index=o.order_index)
            )
        return tuple(
            QuestionSnapshot(
                id=q.id,
                question_text=q.question_text,
                question_type=q.question_type,
                points=q.points,
                order_index=q.order_index,
                explanation=q.explanation,
                options=tuple(by_question.get(q.id, [])),
            )
            for q in questions
        )
