"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable and provide validation for
controller handlers and tests. Answer values are passed through as-is;
the scoring engine decides what a well-formed answer is.
"""

from datetime import datetime
from pydantic import BaseModel, StrictBool, StrictInt, StrictStr
from typing import Dict, List, Optional, Union

# option ids for multiple choice, one option id for true/false, text otherwise.
# Strict types keep booleans and numeric strings from being coerced into option ids.
AnswerValue = Union[List[StrictInt], StrictBool, StrictInt, StrictStr, None]


class AnswerIn(BaseModel):
    """Body of `PUT /attempts/{id}/answers/{question_id}`; `null` clears the answer."""
    value: AnswerValue = None


class SubmitIn(BaseModel):
    """Optional client-side answer buffer sent with a manual submit."""
    answers: Optional[Dict[int, AnswerValue]] = None


class AttemptOut(BaseModel):
    id: int
    quiz_id: int
    attempt_number: int
    status: str
    started_at: datetime
    deadline_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    time_spent: int = 0
    score: Optional[int] = None
    is_passed: bool = False
    submit_reason: Optional[str] = None


class OptionOut(BaseModel):
    id: int
    option_text: str


class QuestionOut(BaseModel):
    """A question as shown while taking a quiz (no correctness flags)."""
    id: int
    question_text: str
    question_type: str
    points: float
    order_index: int
    options: List[OptionOut] = []


class TimerOut(BaseModel):
    state: str
    remaining_seconds: Optional[int] = None
    time_spent: int = 0


class AttemptStartOut(BaseModel):
    attempt: AttemptOut
    questions: List[QuestionOut]
    timer: TimerOut
    attempts_remaining: int


class SessionStateOut(BaseModel):
    """Live state of an attempt; session fields are absent once it is closed."""
    attempt: AttemptOut
    attempt_id: Optional[int] = None
    quiz_id: Optional[int] = None
    timer: Optional[TimerOut] = None
    answered_count: Optional[int] = None
    question_count: Optional[int] = None
    answers: Optional[Dict[str, AnswerValue]] = None
    questions: Optional[List[QuestionOut]] = None


class AvailableQuizOut(BaseModel):
    id: int
    course_id: int
    course_title: str
    title: str
    description: Optional[str] = None
    time_limit: Optional[int] = None
    max_attempts: int
    passing_score: int
    questions_count: int
    attempts_used: int
    attempts_remaining: int
    best_score: Optional[int] = None
    has_passed: bool
    in_progress_attempt_id: Optional[int] = None
    can_start: bool
