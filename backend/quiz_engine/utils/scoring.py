"""Deterministic scoring of a quiz attempt.

`score` is a pure function of the question set, the buffered answers and
the quiz's passing score. Correctness rules by question type:

- `multiple_choice`: the selected option id set equals the correct set
- `true_false`: the selected option id is the correct option's id
- `short_answer` / `essay`: any non-blank text earns full credit

The free-text rule is participation credit, not a content check. It is
kept on purpose until instructors have a manual grading flow.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Tuple

from ..models import QuestionType

_COLLECTIONS = (list, tuple, set, frozenset)


@dataclass(frozen=True)
class QuestionOutcome:
    question_id: int
    answered: bool
    answer: Any
    is_correct: bool
    points_earned: float
    points_possible: float


@dataclass(frozen=True)
class ScoreResult:
    score_percent: int
    points_earned: float
    total_points: float
    passed: bool
    per_question: Tuple[QuestionOutcome, ...]

    @property
    def correct_count(self) -> int:
        return sum(1 for o in self.per_question if o.is_correct)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _correct_ids(question) -> frozenset:
    return frozenset(o.id for o in question.options if o.is_correct)


def is_answer_correct(question, answer: Any) -> bool:
    """Apply the correctness rule for `question.question_type`."""
    qtype = question.question_type
    if qtype == QuestionType.MULTIPLE_CHOICE:
        if not isinstance(answer, _COLLECTIONS):
            return False
        # duplicates in the payload do not make a different selection
        try:
            chosen = frozenset(answer)
        except TypeError:
            return False
        return len(chosen) > 0 and chosen == _correct_ids(question)
    if qtype == QuestionType.TRUE_FALSE:
        correct = next((o.id for o in question.options if o.is_correct), None)
        if correct is None or isinstance(answer, (bool, *_COLLECTIONS)):
            return False
        return answer == correct
    if qtype in QuestionType.FREE_TEXT:
        return isinstance(answer, str) and len(answer.strip()) > 0
    return False


def score(questions: Iterable, answers: Mapping[int, Any], passing_score: Optional[float] = 0) -> ScoreResult:
    """Grade `answers` (question id -> payload) against `questions`.

    A missing key or a `None` value counts as unanswered: zero points and
    incorrect. The percentage is rounded half up to an integer and the
    pass check is inclusive.
    """
    total = 0.0
    earned = 0.0
    outcomes = []
    for q in questions:
        points = float(q.points)
        total += points
        answer = answers.get(q.id)
        answered = answer is not None
        correct = answered and is_answer_correct(q, answer)
        gained = points if correct else 0.0
        earned += gained
        outcomes.append(QuestionOutcome(
            question_id=q.id,
            answered=answered,
            answer=answer,
            is_correct=correct,
            points_earned=gained,
            points_possible=points,
        ))
    percent = round_half_up(earned / total * 100) if total > 0 else 0
    threshold = passing_score if passing_score is not None else 0
    return ScoreResult(
        score_percent=percent,
        points_earned=earned,
        total_points=total,
        passed=percent >= threshold,
        per_question=tuple(outcomes),
    )
