"""Business logic services used by HTTP controllers.

This module holds small service classes that coordinate repositories,
the in-memory session registry and the scoring engine. Services are
intentionally thin: they perform validation, execute domain logic and
persist aggregates via repositories.

Attempt lifecycle in one place:

1. `AttemptService.start_attempt` checks the quota, closes any earlier
   open attempt and opens a session with a fresh answer buffer.
2. `SubmissionService.set_answer` buffers answers in memory.
3. `SubmissionService.submit` (manual) or `SubmissionService.expire`
   (countdown) both end in `SubmissionService.finalize`, which scores,
   writes the attempt and its answers in one transaction and then sends
   a best-effort notification.
"""

import json
import logging
from contextlib import nullcontext
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session
from . import models, repositories
from .config import settings
from .errors import (
    AttemptAlreadySubmitted,
    AttemptConflict,
    AttemptInProgress,
    AttemptNotFound,
    AttemptQuotaExceeded,
    NotificationFailure,
    QuizImportError,
    QuizNotAvailable,
    SubmissionFailure,
    UnknownQuestion,
)
from .question_bank import QuestionBankReader
from .utils.quiz_loader import load_raw_quizzes, normalize_quiz, validate_quiz
from .utils.scoring import ScoreResult, score
from .utils.sessions import QuizSession, SessionRegistry

logger = logging.getLogger("quiz_engine.attempts")
notify_logger = logging.getLogger("quiz_engine.notify")

Clock = Callable[[], datetime]
NOTIFIED_REASONS = (models.SubmitReason.MANUAL, models.SubmitReason.TIMEOUT)


def _event(log: logging.Logger, name: str, **fields) -> None:
    log.info("%s %s", name, json.dumps(fields, ensure_ascii=True, default=str))


def attempt_to_dict(attempt: models.QuizAttempt) -> dict:
    return {
        'id': attempt.id,
        'quiz_id': attempt.quiz_id,
        'attempt_number': attempt.attempt_number,
        'status': attempt.status,
        'started_at': models.as_utc(attempt.started_at),
        'deadline_at': models.as_utc(attempt.deadline_at),
        'submitted_at': models.as_utc(attempt.submitted_at),
        'time_spent': attempt.time_spent,
        'score': attempt.score,
        'is_passed': attempt.is_passed,
        'submit_reason': attempt.submit_reason,
    }


def _elapsed_seconds(attempt: models.QuizAttempt, now: datetime) -> int:
    return max(0, int((models.as_utc(now) - models.as_utc(attempt.started_at)).total_seconds()))


def _past_deadline(attempt: models.QuizAttempt, now: datetime, grace_seconds: int) -> bool:
    if attempt.deadline_at is None:
        return False
    return models.as_utc(now) > models.as_utc(attempt.deadline_at) + timedelta(seconds=grace_seconds)


def _owned_attempt(repo: repositories.AttemptRepository, student_id: int, attempt_id: int) -> models.QuizAttempt:
    attempt = repo.get(attempt_id)
    if not attempt or attempt.student_id != student_id:
        raise AttemptNotFound(f"attempt not found: {attempt_id}")
    return attempt


class Notifier(Protocol):
    def send(self, payload: Dict[str, Any]) -> Any: ...


class NotificationService:
    """Store in-app notifications, honoring per-user preferences.

    Accepts the platform's notification payload
    (`userId`, `type`, `title`, `message`, `link`, `relatedId`,
    `relatedType`). Storage errors are raised as `NotificationFailure`.
    """
    # notification type -> preference flag that gates it
    PREFERENCE_FOR_TYPE = {
        'quiz_graded': 'achievement_alerts',
        'assignment_feedback': 'achievement_alerts',
    }

    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.NotificationRepository(session)

    def should_notify(self, user_id: int, notification_type: str) -> bool:
        prefs = self.repo.get_settings(user_id)
        if prefs is None:
            return True
        flag = self.PREFERENCE_FOR_TYPE.get(notification_type)
        if flag and getattr(prefs, flag) is False:
            return False
        return prefs.email_notifications is not False

    def send(self, payload: Dict[str, Any]) -> Optional[models.Notification]:
        """Create the notification, or return None if the user opted out."""
        user_id = payload.get('userId')
        if not user_id or not payload.get('type') or not payload.get('title') or not payload.get('message'):
            raise NotificationFailure("missing required fields: userId, type, title, message")
        try:
            if not self.should_notify(user_id, payload['type']):
                _event(notify_logger, "notification_skipped", user_id=user_id, type=payload['type'])
                return None
            n = models.Notification(
                user_id=user_id,
                type=payload['type'],
                title=payload['title'],
                message=payload['message'],
                link=payload.get('link'),
                related_id=payload.get('relatedId'),
                related_type=payload.get('relatedType'),
            )
            return self.repo.create(n)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise NotificationFailure(f"could not store notification for user {user_id}") from e


def quiz_graded_payload(student_id: int, quiz: models.Quiz, result: ScoreResult) -> Dict[str, Any]:
    outcome = ' - Passed!' if result.passed else ' - Not passed'
    return {
        'userId': student_id,
        'type': 'quiz_graded',
        'title': 'Quiz Graded!',
        'message': f'Your quiz "{quiz.title}" has been graded. You scored {result.score_percent}%{outcome}.',
        'link': '/student/quizzes',
        'relatedId': quiz.id,
        'relatedType': 'quiz',
    }


class SubmissionService:
    """Buffer answers, then score and persist an attempt exactly once."""
    def __init__(self, session: Session, registry: SessionRegistry, notifier: Optional[Notifier] = None,
                 clock: Clock = models.utcnow):
        self.session = session
        self.registry = registry
        self.notifier = notifier if notifier is not None else NotificationService(session)
        self.clock = clock
        self.attempt_repo = repositories.AttemptRepository(session)
        self.quiz_repo = repositories.QuizRepository(session)

    def session_for(self, attempt: models.QuizAttempt) -> Optional[QuizSession]:
        """Return the live session for an open attempt.

        After a restart the registry is empty; the session is rebuilt
        from stored questions with the elapsed time restored, so the
        answer buffer starts empty but the countdown continues.
        """
        qs = self.registry.get(attempt.id)
        if qs is not None or attempt.status != models.AttemptStatus.IN_PROGRESS:
            return qs
        quiz = self.quiz_repo.get(attempt.quiz_id)
        questions = QuestionBankReader(self.session).load_questions(attempt.quiz_id)
        elapsed = _elapsed_seconds(attempt, self.clock())
        _event(logger, "session_rehydrated", attempt_id=attempt.id, elapsed=elapsed)
        return self.registry.open(attempt.id, attempt.student_id, attempt.quiz_id, questions,
                                  time_limit=quiz.time_limit if quiz else None, elapsed_seconds=elapsed)

    def get_state(self, student_id: int, attempt_id: int) -> dict:
        attempt = _owned_attempt(self.attempt_repo, student_id, attempt_id)
        out = {'attempt': attempt_to_dict(attempt)}
        qs = self.session_for(attempt)
        if qs is not None:
            out.update(qs.state())
            out['questions'] = [q.public() for q in qs.questions]
        return out

    def set_answer(self, student_id: int, attempt_id: int, question_id: int, value: Any) -> dict:
        """Upsert one buffered answer; nothing is persisted."""
        attempt = _owned_attempt(self.attempt_repo, student_id, attempt_id)
        if attempt.status != models.AttemptStatus.IN_PROGRESS:
            raise AttemptAlreadySubmitted(f"attempt {attempt_id} is already submitted")
        qs = self.session_for(attempt)
        with qs.lock:
            if qs.closed or qs.expired or _past_deadline(attempt, self.clock(), settings.SUBMISSION_GRACE_SECONDS):
                raise AttemptAlreadySubmitted(f"time is up for attempt {attempt_id}")
            if question_id not in qs.question_ids:
                raise UnknownQuestion(f"question {question_id} is not part of attempt {attempt_id}")
            qs.answers.set_answer(question_id, value)
            return qs.state()

    def submit(self, student_id: int, attempt_id: int, answers: Optional[Mapping[int, Any]] = None) -> dict:
        """Manual submission.

        `answers` is the client-side buffer and is merged over anything
        already buffered here. Past the countdown or the server deadline
        the payload is ignored and the attempt is finalized as a timeout.
        """
        attempt = _owned_attempt(self.attempt_repo, student_id, attempt_id)
        if attempt.status != models.AttemptStatus.IN_PROGRESS:
            raise AttemptAlreadySubmitted(f"attempt {attempt_id} is already submitted")
        qs = self.session_for(attempt)
        with qs.lock:
            if qs.closed:
                raise AttemptAlreadySubmitted(f"attempt {attempt_id} is already submitted")
            late = _past_deadline(attempt, self.clock(), settings.SUBMISSION_GRACE_SECONDS)
            if not late:
                unknown = set(answers or ()) - qs.question_ids
                if unknown:
                    raise UnknownQuestion(f"questions not part of attempt {attempt_id}: {sorted(unknown)}")
                # stop() loses to a countdown that already hit zero
                qs.timer.stop()
                late = qs.expired
            if not late and answers:
                qs.answers.merge(answers)
            reason = models.SubmitReason.TIMEOUT if late else models.SubmitReason.MANUAL
            return self.finalize(attempt, qs, reason)

    def expire(self, attempt_id: int) -> Optional[dict]:
        """Auto-submit an attempt whose countdown reached zero.

        Returns None when a manual submission got there first.
        """
        attempt = self.attempt_repo.get(attempt_id)
        if attempt is None:
            return None
        try:
            return self.finalize(attempt, self.registry.get(attempt_id), models.SubmitReason.TIMEOUT)
        except AttemptAlreadySubmitted:
            _event(logger, "auto_submit_skipped", attempt_id=attempt_id)
            return None

    def finalize(self, attempt: models.QuizAttempt, qs: Optional[QuizSession], reason: str) -> dict:
        """Score the buffered answers and persist the attempt once.

        The attempt update and answer inserts commit together. The update
        only matches an `in_progress` row, so a second finalization of the
        same attempt raises `AttemptAlreadySubmitted` without writing.
        A database error rolls back and raises `SubmissionFailure`; the
        session and its buffer stay open for a retry.
        """
        with (qs.lock if qs is not None else nullcontext()):
            quiz = self.quiz_repo.get(attempt.quiz_id)
            if qs is not None:
                questions = qs.questions
                answers = qs.answers.snapshot()
            else:
                questions = QuestionBankReader(self.session).load_questions(attempt.quiz_id)
                answers = {}
            result = score(questions, answers, quiz.passing_score)
            now = self.clock()
            time_spent = self._time_spent(attempt, quiz, qs, reason, now)
            try:
                updated = self.attempt_repo.mark_submitted(
                    attempt.id,
                    submitted_at=now,
                    time_spent=time_spent,
                    score=result.score_percent,
                    points_earned=result.points_earned,
                    total_points=result.total_points,
                    is_passed=result.passed,
                    submit_reason=reason,
                )
                if not updated:
                    self.session.rollback()
                    self.registry.close(attempt.id)
                    raise AttemptAlreadySubmitted(f"attempt {attempt.id} is already submitted")
                questions_by_id = {q.id: q for q in questions}
                self.attempt_repo.add_answers([
                    self._answer_row(attempt.id, questions_by_id[o.question_id], o)
                    for o in result.per_question if o.answered
                ])
                self.session.commit()
            except SQLAlchemyError as e:
                self.session.rollback()
                logger.exception("submission_failed attempt_id=%s", attempt.id)
                raise SubmissionFailure(f"could not save attempt {attempt.id}; please retry") from e
            self.session.refresh(attempt)
            self.registry.close(attempt.id)
        _event(logger, "attempt_finalized", attempt_id=attempt.id, quiz_id=quiz.id, reason=reason,
               score=result.score_percent, passed=result.passed, time_spent=time_spent)
        if reason in NOTIFIED_REASONS:
            self._notify(attempt.student_id, quiz, result)
        return self._result_payload(attempt, quiz, result)

    def get_result(self, student_id: int, attempt_id: int) -> dict:
        """Rebuild the results view of a finalized attempt from stored rows."""
        attempt = _owned_attempt(self.attempt_repo, student_id, attempt_id)
        if attempt.status == models.AttemptStatus.IN_PROGRESS:
            raise AttemptInProgress(f"attempt {attempt_id} has not been submitted")
        quiz = self.quiz_repo.get(attempt.quiz_id)
        questions = QuestionBankReader(self.session).load_questions(attempt.quiz_id)
        stored = {a.question_id: a for a in self.attempt_repo.answers_for_attempt(attempt.id)}
        items = []
        for q in questions:
            row = stored.get(q.id)
            items.append({
                'question_id': q.id,
                'question_text': q.question_text,
                'question_type': q.question_type,
                'answered': row is not None,
                'answer_text': row.answer_text if row else None,
                'selected_options': row.selected_options if row else None,
                'is_correct': bool(row and row.is_correct),
                'points_earned': row.points_earned if row else 0,
                'points_possible': q.points,
                'correct_option_ids': sorted(q.correct_option_ids()),
                'explanation': q.explanation,
            })
        used = len(self.attempt_repo.list_for_student_quiz(attempt.student_id, attempt.quiz_id))
        return {
            **attempt_to_dict(attempt),
            'quiz_title': quiz.title,
            'passing_score': quiz.passing_score,
            'points_earned': attempt.points_earned,
            'total_points': attempt.total_points,
            'total_questions': len(questions),
            'correct_answers': sum(1 for i in items if i['is_correct']),
            'attempts_used': used,
            'attempts_remaining': max(0, quiz.max_attempts - used),
            'items': items,
        }

    def _time_spent(self, attempt, quiz, qs, reason, now) -> int:
        """Seconds used: countdown budget minus remaining when timed, wall clock otherwise."""
        if not quiz.time_limit:
            return _elapsed_seconds(attempt, now)
        budget = quiz.time_limit * 60
        if reason in (models.SubmitReason.TIMEOUT, models.SubmitReason.STALE) and _past_deadline(attempt, now, 0):
            return budget
        if qs is not None:
            return qs.timer.time_spent
        return min(budget, _elapsed_seconds(attempt, now))

    @staticmethod
    def _answer_row(attempt_id: int, question, outcome) -> models.QuizAnswer:
        value = outcome.answer
        if isinstance(value, str):
            answer_text = value
        else:
            answer_text = json.dumps(sorted(value) if isinstance(value, (set, frozenset)) else value, default=str)
        selected = None
        if question.question_type in models.QuestionType.WITH_OPTIONS:
            ids = list(value) if isinstance(value, (list, tuple, set, frozenset)) else [value]
            # anything but option ids stays in answer_text only
            if all(isinstance(i, int) and not isinstance(i, bool) for i in ids):
                selected = ids
        return models.QuizAnswer(
            attempt_id=attempt_id,
            question_id=question.id,
            answer_text=answer_text,
            selected_options=selected,
            is_correct=outcome.is_correct,
            points_earned=outcome.points_earned,
        )

    def _notify(self, student_id: int, quiz: models.Quiz, result: ScoreResult) -> None:
        """Fire-and-forget; a failure is logged and never undoes grading."""
        if not settings.NOTIFICATIONS_ENABLED:
            return
        try:
            self.notifier.send(quiz_graded_payload(student_id, quiz, result))
        except Exception:
            notify_logger.exception("notification_failed user_id=%s quiz_id=%s", student_id, quiz.id)

    def _result_payload(self, attempt: models.QuizAttempt, quiz: models.Quiz, result: ScoreResult) -> dict:
        used = len(self.attempt_repo.list_for_student_quiz(attempt.student_id, attempt.quiz_id))
        return {
            **attempt_to_dict(attempt),
            'quiz_title': quiz.title,
            'passing_score': quiz.passing_score,
            'points_earned': result.points_earned,
            'total_points': result.total_points,
            'total_questions': len(result.per_question),
            'correct_answers': result.correct_count,
            'attempts_used': used,
            'attempts_remaining': max(0, quiz.max_attempts - used),
            'items': [
                {
                    'question_id': o.question_id,
                    'answered': o.answered,
                    'is_correct': o.is_correct,
                    'points_earned': o.points_earned,
                    'points_possible': o.points_possible,
                }
                for o in result.per_question
            ],
        }


class AttemptService:
    """Create, number and sweep quiz attempts."""
    def __init__(self, session: Session, registry: SessionRegistry, notifier: Optional[Notifier] = None,
                 clock: Clock = models.utcnow):
        self.session = session
        self.registry = registry
        self.clock = clock
        self.attempt_repo = repositories.AttemptRepository(session)
        self.quiz_repo = repositories.QuizRepository(session)
        self.submissions = SubmissionService(session, registry, notifier=notifier, clock=clock)

    def visible_quiz(self, student_id: int, quiz_id: int) -> models.Quiz:
        """Return the quiz if it is published and the student is enrolled."""
        quiz = self.quiz_repo.get(quiz_id)
        if not quiz or not quiz.is_published or not self.quiz_repo.is_enrolled(student_id, quiz.course_id):
            raise QuizNotAvailable(f"quiz not found or not available: {quiz_id}")
        return quiz

    def start_attempt(self, student_id: int, quiz_id: int) -> dict:
        """Start a fresh attempt with an empty answer buffer.

        Questions are loaded before anything is written, so a load
        failure leaves no orphaned attempt. Earlier open attempts are
        closed first; they keep their numbers and count toward the quota.
        """
        quiz = self.visible_quiz(student_id, quiz_id)
        questions = QuestionBankReader(self.session).load_questions(quiz_id)
        attempt = None
        for retry in range(settings.ATTEMPT_NUMBER_RETRIES):
            prior = self.attempt_repo.list_for_student_quiz(student_id, quiz_id)
            next_number = prior[0].attempt_number + 1 if prior else 1
            if next_number > quiz.max_attempts:
                _event(logger, "attempt_quota_exceeded", student_id=student_id, quiz_id=quiz_id,
                       max_attempts=quiz.max_attempts)
                raise AttemptQuotaExceeded(quiz_id, quiz.max_attempts)
            self._close_open_attempts(prior)
            now = self.clock()
            candidate = models.QuizAttempt(
                quiz_id=quiz_id,
                student_id=student_id,
                attempt_number=next_number,
                status=models.AttemptStatus.IN_PROGRESS,
                started_at=now,
                deadline_at=now + timedelta(minutes=quiz.time_limit) if quiz.time_limit else None,
            )
            try:
                attempt = self.attempt_repo.create(candidate)
                break
            except IntegrityError:
                self.session.rollback()
                _event(logger, "attempt_number_conflict", student_id=student_id, quiz_id=quiz_id,
                       attempt_number=next_number, retry=retry)
        if attempt is None:
            raise AttemptConflict(f"could not allocate an attempt number for quiz {quiz_id}")
        qs = self.registry.open(attempt.id, student_id, quiz_id, questions, time_limit=quiz.time_limit)
        _event(logger, "attempt_started", attempt_id=attempt.id, student_id=student_id, quiz_id=quiz_id,
               attempt_number=attempt.attempt_number, questions=len(questions))
        return {
            'attempt': attempt_to_dict(attempt),
            'questions': [q.public() for q in questions],
            'timer': qs.timer.snapshot(),
            'attempts_remaining': quiz.max_attempts - attempt.attempt_number,
        }

    def list_attempts(self, student_id: int, quiz_id: int) -> List[dict]:
        self.visible_quiz(student_id, quiz_id)
        return [attempt_to_dict(a) for a in self.attempt_repo.list_for_student_quiz(student_id, quiz_id)]

    def expire_stale_attempts(self, now: Optional[datetime] = None) -> int:
        """Finalize open attempts nobody will come back to.

        Timed attempts past their deadline (plus grace) and untimed
        attempts older than `STALE_UNTIMED_MAX_AGE_MINUTES` are closed
        with reason `stale`, grading whatever was buffered.
        """
        now = models.as_utc(now or self.clock())
        max_age = timedelta(minutes=settings.STALE_UNTIMED_MAX_AGE_MINUTES)
        closed = 0
        for attempt in self.attempt_repo.list_in_progress():
            if attempt.deadline_at is not None:
                stale = _past_deadline(attempt, now, settings.SUBMISSION_GRACE_SECONDS)
            else:
                stale = _elapsed_seconds(attempt, now) > max_age.total_seconds()
            if not stale:
                continue
            if self._finalize_quietly(attempt, models.SubmitReason.STALE):
                closed += 1
        if closed:
            _event(logger, "stale_attempts_closed", count=closed)
        return closed

    def _close_open_attempts(self, prior: List[models.QuizAttempt]) -> None:
        now = self.clock()
        for attempt in prior:
            if attempt.status != models.AttemptStatus.IN_PROGRESS:
                continue
            if _past_deadline(attempt, now, settings.SUBMISSION_GRACE_SECONDS):
                reason = models.SubmitReason.TIMEOUT
            else:
                reason = models.SubmitReason.ABANDONED
            self._finalize_quietly(attempt, reason)

    def _finalize_quietly(self, attempt: models.QuizAttempt, reason: str) -> bool:
        try:
            self.submissions.finalize(attempt, self.registry.get(attempt.id), reason)
            return True
        except AttemptAlreadySubmitted:
            return False


class QuizCatalogService:
    """Quizzes a student can see, with their attempt quota state."""
    def __init__(self, session: Session):
        self.session = session
        self.quiz_repo = repositories.QuizRepository(session)
        self.attempt_repo = repositories.AttemptRepository(session)

    def available_quizzes(self, student_id: int) -> List[dict]:
        out = []
        for quiz, course_title in self.quiz_repo.list_visible_for_student(student_id):
            attempts = self.attempt_repo.list_for_student_quiz(student_id, quiz.id)
            scores = [a.score for a in attempts if a.score is not None]
            in_progress = next((a.id for a in attempts if a.status == models.AttemptStatus.IN_PROGRESS), None)
            out.append({
                'id': quiz.id,
                'course_id': quiz.course_id,
                'course_title': course_title,
                'title': quiz.title,
                'description': quiz.description,
                'time_limit': quiz.time_limit,
                'max_attempts': quiz.max_attempts,
                'passing_score': quiz.passing_score,
                'questions_count': self.quiz_repo.count_questions(quiz.id),
                'attempts_used': len(attempts),
                'attempts_remaining': max(0, quiz.max_attempts - len(attempts)),
                'best_score': max(scores) if scores else None,
                'has_passed': any(a.is_passed for a in attempts),
                'in_progress_attempt_id': in_progress,
                'can_start': len(attempts) < quiz.max_attempts,
            })
        return out


class ImportService:
    """Import quiz definitions from files and persist them to the DB."""
    def __init__(self, session: Session):
        self.session = session
        self.quiz_repo = repositories.QuizRepository(session)

    def import_file(self, file_bytes: bytes, filename: str, course_id: int, deduplicate: bool = True, dry_run: bool = False):
        """Parse `filename` contents and create `Quiz` rows with questions and options.

        Returns a dictionary with the number of created quizzes, skipped
        duplicates (same title in the same course) and any validation
        `errors` encountered per item.
        """
        if self.session.get(models.Course, course_id) is None:
            raise QuizImportError(f"course not found: {course_id}")
        raw_items = load_raw_quizzes(file_bytes, filename)
        created = []
        errors = []
        skipped = 0
        for idx, raw in enumerate(raw_items):
            try:
                item = normalize_quiz(raw)
                validate_quiz(item)
            except QuizImportError as e:
                title = raw.get('title') if isinstance(raw, dict) else None
                errors.append({'index': idx, 'error': str(e), 'title': title})
                continue
            if deduplicate and self.quiz_repo.exists_in_course(course_id, item['title']):
                skipped += 1
                continue
            if not dry_run:
                created.append(self.create_quiz(item, course_id))
        return {'created': len(created), 'skipped': skipped, 'errors': errors, 'quiz_ids': [q.id for q in created]}

    def create_quiz(self, item: dict, course_id: int) -> models.Quiz:
        """Persist one validated quiz dictionary."""
        quiz = models.Quiz(
            course_id=course_id,
            title=item['title'],
            description=item.get('description'),
            time_limit=item.get('time_limit'),
            max_attempts=item.get('max_attempts', 1),
            passing_score=item.get('passing_score', 70),
            is_published=item.get('is_published', True),
        )
        questions = []
        for order, q in enumerate(item['questions']):
            question = models.Question(
                question_text=q['question_text'],
                question_type=q['question_type'],
                points=q['points'],
                order_index=order,
                explanation=q.get('explanation'),
            )
            options = [
                models.QuestionOption(option_text=o['option_text'], is_correct=o['is_correct'], order_index=i)
                for i, o in enumerate(q.get('options') or [])
            ]
            questions.append((question, options))
        return self.quiz_repo.create(quiz, questions)
