"""Repository classes encapsulating database operations.

Each repository is small and focused on a single aggregate (users,
quizzes, questions, attempts, notifications). Read helpers return
SQLModel objects. Writes that belong to a larger unit of work (attempt
finalization) only flush; the calling service owns the commit.
"""

from typing import Iterable, List, Optional
from sqlmodel import Session, select
from sqlalchemy import func, update
from . import models


class UserRepository:
    """CRUD operations for `User` objects."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, user: models.User) -> models.User:
        """Persist a new user and return the managed instance."""
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def get(self, user_id: int) -> Optional[models.User]:
        """Get a `User` by primary key."""
        return self.session.get(models.User, user_id)

    def get_by_username(self, username: str) -> Optional[models.User]:
        stmt = select(models.User).where(models.User.username == username)
        return self.session.exec(stmt).first()


class QuizRepository:
    """Quiz lookups, visibility checks and quiz creation for imports."""
    def __init__(self, session: Session):
        self.session = session

    def get(self, quiz_id: int) -> Optional[models.Quiz]:
        return self.session.get(models.Quiz, quiz_id)

    def is_enrolled(self, student_id: int, course_id: int) -> bool:
        stmt = select(models.Enrollment.id).where(
            models.Enrollment.student_id == student_id,
            models.Enrollment.course_id == course_id,
        )
        return self.session.exec(stmt).first() is not None

    def list_visible_for_student(self, student_id: int) -> List[tuple]:
        """Return `(Quiz, course_title)` pairs for published quizzes in enrolled courses.

        Newest quizzes come first.
        """
        stmt = (
            select(models.Quiz, models.Course.title)
            .join(models.Course, models.Course.id == models.Quiz.course_id)
            .join(models.Enrollment, models.Enrollment.course_id == models.Quiz.course_id)
            .where(models.Enrollment.student_id == student_id, models.Quiz.is_published == True)  # noqa: E712
            .order_by(models.Quiz.created_at.desc(), models.Quiz.id.desc())
        )
        return self.session.exec(stmt).all()

    def count_questions(self, quiz_id: int) -> int:
        stmt = select(func.count(models.Question.id)).where(models.Question.quiz_id == quiz_id)
        return self.session.exec(stmt).one()

    def create(self, quiz: models.Quiz, questions: List[tuple]) -> models.Quiz:
        """Create a quiz from `(Question, [QuestionOption])` pairs.

        The quiz is flushed first to obtain an id, then each question,
        then its options, all committed together.
        """
        self.session.add(quiz)
        self.session.flush()
        for question, options in questions:
            question.quiz_id = quiz.id
            self.session.add(question)
            self.session.flush()
            for o in options:
                o.question_id = question.id
                self.session.add(o)
        self.session.commit()
        self.session.refresh(quiz)
        return quiz

    def exists_in_course(self, course_id: int, title: str) -> bool:
        """Return True if a quiz with the same title already exists in the course."""
        stmt = select(models.Quiz.id).where(models.Quiz.course_id == course_id, models.Quiz.title == title)
        return self.session.exec(stmt).first() is not None


class QuestionRepository:
    """Read-only queries over questions and their options."""
    def __init__(self, session: Session):
        self.session = session

    def list_for_quiz(self, quiz_id: int) -> List[models.Question]:
        """Return the quiz's questions in display order."""
        stmt = (
            select(models.Question)
            .where(models.Question.quiz_id == quiz_id)
            .order_by(models.Question.order_index, models.Question.id)
        )
        return self.session.exec(stmt).all()

    def options_for_questions(self, question_ids: Iterable[int]) -> List[models.QuestionOption]:
        """Return options for all `question_ids`, grouped by question in display order."""
        ids = list(question_ids)
        if not ids:
            return []
        stmt = (
            select(models.QuestionOption)
            .where(models.QuestionOption.question_id.in_(ids))
            .order_by(models.QuestionOption.question_id, models.QuestionOption.order_index, models.QuestionOption.id)
        )
        return self.session.exec(stmt).all()


class AttemptRepository:
    """Attempt and answer persistence."""
    def __init__(self, session: Session):
        self.session = session

    def get(self, attempt_id: int) -> Optional[models.QuizAttempt]:
        return self.session.get(models.QuizAttempt, attempt_id)

    def list_for_student_quiz(self, student_id: int, quiz_id: int) -> List[models.QuizAttempt]:
        """Return prior attempts ordered by attempt number, newest first."""
        stmt = (
            select(models.QuizAttempt)
            .where(models.QuizAttempt.student_id == student_id, models.QuizAttempt.quiz_id == quiz_id)
            .order_by(models.QuizAttempt.attempt_number.desc())
        )
        return self.session.exec(stmt).all()

    def list_in_progress(self) -> List[models.QuizAttempt]:
        stmt = select(models.QuizAttempt).where(models.QuizAttempt.status == models.AttemptStatus.IN_PROGRESS)
        return self.session.exec(stmt).all()

    def create(self, attempt: models.QuizAttempt) -> models.QuizAttempt:
        """Insert an attempt; raises `IntegrityError` on a duplicate number."""
        self.session.add(attempt)
        self.session.commit()
        self.session.refresh(attempt)
        return attempt

    def mark_submitted(self, attempt_id: int, **values) -> bool:
        """Close an in-progress attempt; returns False if it was already closed.

        The status check is part of the UPDATE so two concurrent
        finalizations cannot both succeed.
        """
        stmt = (
            update(models.QuizAttempt)
            .where(models.QuizAttempt.id == attempt_id, models.QuizAttempt.status == models.AttemptStatus.IN_PROGRESS)
            .values(status=models.AttemptStatus.SUBMITTED, **values)
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1

    def add_answers(self, answers: List[models.QuizAnswer]) -> None:
        for a in answers:
            self.session.add(a)
        self.session.flush()

    def answers_for_attempt(self, attempt_id: int) -> List[models.QuizAnswer]:
        stmt = select(models.QuizAnswer).where(models.QuizAnswer.attempt_id == attempt_id)
        return self.session.exec(stmt).all()


class NotificationRepository:
    """Store notifications and read per-user preferences."""
    def __init__(self, session: Session):
        self.session = session

    def get_settings(self, user_id: int) -> Optional[models.NotificationSettings]:
        return self.session.get(models.NotificationSettings, user_id)

    def create(self, notification: models.Notification) -> models.Notification:
        self.session.add(notification)
        self.session.commit()
        self.session.refresh(notification)
        return notification

    def list_for_user(self, user_id: int) -> List[models.Notification]:
        stmt = (
            select(models.Notification)
            .where(models.Notification.user_id == user_id)
            .order_by(models.Notification.created_at.desc(), models.Notification.id.desc())
        )
        return self.session.exec(stmt).all()
