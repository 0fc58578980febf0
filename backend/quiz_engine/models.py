"""SQLModel data models.

This module defines the quiz engine's database tables using SQLModel.
Quizzes, questions and options are authored elsewhere and are read-only
to the engine; attempts and answers are written by it.

Timestamps are timezone-aware UTC. Some SQLite setups hand back naive
values; `as_utc` normalizes those before any arithmetic.
"""

from typing import List, Optional
from datetime import datetime, timezone
from sqlalchemy import JSON, UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat a naive timestamp read from the database as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class QuestionType:
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    SHORT_ANSWER = "short_answer"
    ESSAY = "essay"

    ALL = (MULTIPLE_CHOICE, TRUE_FALSE, SHORT_ANSWER, ESSAY)
    WITH_OPTIONS = (MULTIPLE_CHOICE, TRUE_FALSE)
    FREE_TEXT = (SHORT_ANSWER, ESSAY)


class AttemptStatus:
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    # reserved for externally graded rows; the engine finalizes as `submitted`
    GRADED = "graded"


class SubmitReason:
    MANUAL = "manual"
    TIMEOUT = "timeout"
    ABANDONED = "abandoned"
    STALE = "stale"


class User(SQLModel, table=True):
    """A platform user resolved from the bearer token.

    Identity is issued by the platform; this table only backs lookups.
    """
    __tablename__ = "users"
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, nullable=False, unique=True)
    role: str = Field(default="student")
    created_at: datetime = Field(default_factory=utcnow)


class Course(SQLModel, table=True):
    __tablename__ = "courses"
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str


class Enrollment(SQLModel, table=True):
    """A student's enrollment in a course; gates quiz visibility."""
    __tablename__ = "enrollments"
    __table_args__ = (UniqueConstraint("course_id", "student_id", name="uq_enrollment"),)
    id: Optional[int] = Field(default=None, primary_key=True)
    course_id: int = Field(foreign_key="courses.id", index=True)
    student_id: int = Field(foreign_key="users.id", index=True)


class Quiz(SQLModel, table=True):
    """A named assessment belonging to one course.

    Fields:
    - `time_limit`: minutes; `None` or `0` means untimed
    - `max_attempts`: attempt quota per student
    - `passing_score`: minimum percentage for a pass (inclusive)
    """
    __tablename__ = "quizzes"
    id: Optional[int] = Field(default=None, primary_key=True)
    course_id: int = Field(foreign_key="courses.id", index=True)
    title: str
    description: Optional[str] = None
    time_limit: Optional[int] = None
    max_attempts: int = 1
    passing_score: int = 70
    is_published: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    questions: List["Question"] = Relationship(back_populates="quiz")


class Question(SQLModel, table=True):
    """A question belonging to a quiz, shown in `order_index` order."""
    __tablename__ = "quiz_questions"
    id: Optional[int] = Field(default=None, primary_key=True)
    quiz_id: int = Field(foreign_key="quizzes.id", index=True)
    question_text: str
    question_type: str = QuestionType.MULTIPLE_CHOICE
    points: float = 1
    order_index: int = 0
    explanation: Optional[str] = None
    quiz: Optional[Quiz] = Relationship(back_populates="questions")
    options: List["QuestionOption"] = Relationship(back_populates="question")


class QuestionOption(SQLModel, table=True):
    """Possible answer for a `Question`.

    `is_correct` marks whether this option is part of the correct answer.
    """
    __tablename__ = "quiz_question_options"
    id: Optional[int] = Field(default=None, primary_key=True)
    question_id: int = Field(foreign_key="quiz_questions.id", index=True)
    option_text: str
    is_correct: bool = False
    order_index: int = 0
    question: Optional[Question] = Relationship(back_populates="options")


class QuizAttempt(SQLModel, table=True):
    """One student's try at one quiz.

    `attempt_number` is unique per (student, quiz) so concurrent starts
    cannot allocate the same number twice.
    """
    __tablename__ = "quiz_attempts"
    __table_args__ = (
        UniqueConstraint("student_id", "quiz_id", "attempt_number", name="uq_attempt_number"),
    )
    id: Optional[int] = Field(default=None, primary_key=True)
    quiz_id: int = Field(foreign_key="quizzes.id", index=True)
    student_id: int = Field(foreign_key="users.id", index=True)
    attempt_number: int
    status: str = Field(default=AttemptStatus.IN_PROGRESS, index=True)
    started_at: datetime = Field(default_factory=utcnow)
    deadline_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    time_spent: int = 0
    score: Optional[int] = None
    points_earned: Optional[float] = None
    total_points: Optional[float] = None
    is_passed: bool = False
    submit_reason: Optional[str] = None
    answers: List["QuizAnswer"] = Relationship(back_populates="attempt")


class QuizAnswer(SQLModel, table=True):
    """A graded response to one question inside a `QuizAttempt`.

    Written once at submission and never updated.
    """
    __tablename__ = "quiz_answers"
    __table_args__ = (UniqueConstraint("attempt_id", "question_id", name="uq_answer_per_question"),)
    id: Optional[int] = Field(default=None, primary_key=True)
    attempt_id: int = Field(foreign_key="quiz_attempts.id", index=True)
    question_id: int = Field(foreign_key="quiz_questions.id")
    answer_text: Optional[str] = None
    selected_options: Optional[List[int]] = Field(default=None, sa_type=JSON)
    is_correct: bool = False
    points_earned: float = 0
    created_at: datetime = Field(default_factory=utcnow)
    attempt: Optional[QuizAttempt] = Relationship(back_populates="answers")


class Notification(SQLModel, table=True):
    """An in-app notification addressed to one user."""
    __tablename__ = "notifications"
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    type: str
    title: str
    message: str
    link: Optional[str] = None
    related_id: Optional[int] = None
    related_type: Optional[str] = None
    is_read: bool = False
    created_at: datetime = Field(default_factory=utcnow)


class NotificationSettings(SQLModel, table=True):
    """Per-user notification preferences; a missing row means notify."""
    __tablename__ = "notification_settings"
    user_id: int = Field(foreign_key="users.id", primary_key=True)
    achievement_alerts: bool = True
    email_notifications: bool = True
