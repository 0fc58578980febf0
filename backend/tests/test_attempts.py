import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from conftest import add_quiz
from quiz_engine import models
from quiz_engine.errors import (
    AttemptConflict,
    AttemptQuotaExceeded,
    QuestionLoadFailure,
    QuizNotAvailable,
)
from quiz_engine.repositories import AttemptRepository, QuestionRepository
from quiz_engine.services import AttemptService, QuizCatalogService


def make_service(session, registry, notifier, clock):
    return AttemptService(session, registry, notifier=notifier, clock=clock)


def test_exactly_max_attempts_can_be_started(session, registry, notifier, clock, student, course):
    quiz = add_quiz(session, course.id, max_attempts=3)
    svc = make_service(session, registry, notifier, clock)
    numbers = []
    for _ in range(3):
        out = svc.start_attempt(student.id, quiz.id)
        numbers.append(out['attempt']['attempt_number'])
        clock.advance(30)
    assert numbers == [1, 2, 3]
    with pytest.raises(AttemptQuotaExceeded) as exc:
        svc.start_attempt(student.id, quiz.id)
    assert exc.value.max_attempts == 3
    assert len(AttemptRepository(session).list_for_student_quiz(student.id, quiz.id)) == 3


def test_starting_again_abandons_the_open_attempt(session, registry, notifier, clock, student, course):
    quiz = add_quiz(session, course.id, max_attempts=5)
    svc = make_service(session, registry, notifier, clock)
    first = svc.start_attempt(student.id, quiz.id)['attempt']
    svc.start_attempt(student.id, quiz.id)
    svc.start_attempt(student.id, quiz.id)
    attempts = AttemptRepository(session).list_for_student_quiz(student.id, quiz.id)
    assert [a.attempt_number for a in attempts] == [3, 2, 1]
    assert [a.status for a in attempts] == ['in_progress', 'submitted', 'submitted']
    assert {a.submit_reason for a in attempts[1:]} == {'abandoned'}
    assert registry.get(first['id']) is None
    # abandoned attempts do not notify
    assert notifier.sent == []


def test_start_returns_questions_without_answers(session, registry, notifier, clock, student, course):
    quiz = add_quiz(session, course.id, time_limit=10)
    out = make_service(session, registry, notifier, clock).start_attempt(student.id, quiz.id)
    assert [q['question_type'] for q in out['questions']] == ['multiple_choice', 'true_false', 'short_answer']
    assert all('is_correct' not in o for q in out['questions'] for o in q['options'])
    assert out['timer'] == {'state': 'running', 'remaining_seconds': 600, 'time_spent': 0}
    assert (out['attempt']['deadline_at'] - out['attempt']['started_at']).total_seconds() == 600
    assert out['attempts_remaining'] == 0


def test_question_order_is_fixed_at_start(session, registry, notifier, clock, student, course):
    quiz = add_quiz(session, course.id)
    out = make_service(session, registry, notifier, clock).start_attempt(student.id, quiz.id)
    ids = [q['id'] for q in out['questions']]
    for q in QuestionRepository(session).list_for_quiz(quiz.id):
        q.order_index = 10 - q.order_index
        session.add(q)
    session.commit()
    live = registry.get(out['attempt']['id'])
    assert [q.id for q in live.questions] == ids


@pytest.mark.parametrize('published,enrolled', [(False, True), (True, False)])
def test_hidden_quizzes_cannot_be_started(session, registry, notifier, clock, student, course, published, enrolled):
    target_course = course
    if not enrolled:
        target_course = models.Course(title='Other course')
        session.add(target_course)
        session.commit()
        session.refresh(target_course)
    quiz = add_quiz(session, target_course.id, is_published=published)
    with pytest.raises(QuizNotAvailable):
        make_service(session, registry, notifier, clock).start_attempt(student.id, quiz.id)


def test_question_load_failure_writes_nothing(session, registry, notifier, clock, student, course, monkeypatch):
    quiz = add_quiz(session, course.id)

    def broken(self, quiz_id):
        raise OperationalError('SELECT', {}, Exception('disk I/O error'))
    monkeypatch.setattr(QuestionRepository, 'list_for_quiz', broken)
    with pytest.raises(QuestionLoadFailure):
        make_service(session, registry, notifier, clock).start_attempt(student.id, quiz.id)
    assert AttemptRepository(session).list_for_student_quiz(student.id, quiz.id) == []
    assert len(registry) == 0


def test_attempt_number_conflict_is_retried(session, registry, notifier, clock, student, course, monkeypatch):
    quiz = add_quiz(session, course.id, max_attempts=3)
    real_create = AttemptRepository.create
    calls = []

    def racing_create(self, attempt):
        calls.append(attempt.attempt_number)
        if len(calls) == 1:
            # another request took number 1 between our read and our insert
            rival = models.QuizAttempt(quiz_id=quiz.id, student_id=student.id, attempt_number=1,
                                       status='submitted', started_at=clock.now, submit_reason='manual')
            self.session.add(rival)
            self.session.commit()
            raise IntegrityError('INSERT', {}, Exception('UNIQUE constraint failed'))
        return real_create(self, attempt)
    monkeypatch.setattr(AttemptRepository, 'create', racing_create)
    out = make_service(session, registry, notifier, clock).start_attempt(student.id, quiz.id)
    assert calls == [1, 2]
    assert out['attempt']['attempt_number'] == 2


def test_attempt_number_conflict_gives_up(session, registry, notifier, clock, student, course, monkeypatch):
    quiz = add_quiz(session, course.id, max_attempts=3)

    def always_conflict(self, attempt):
        raise IntegrityError('INSERT', {}, Exception('UNIQUE constraint failed'))
    monkeypatch.setattr(AttemptRepository, 'create', always_conflict)
    with pytest.raises(AttemptConflict):
        make_service(session, registry, notifier, clock).start_attempt(student.id, quiz.id)


def test_catalog_reports_quota_state(session, registry, notifier, clock, student, course):
    quiz = add_quiz(session, course.id, max_attempts=2)
    add_quiz(session, course.id, title='Draft', is_published=False)
    started = make_service(session, registry, notifier, clock).start_attempt(student.id, quiz.id)
    listing = QuizCatalogService(session).available_quizzes(student.id)
    assert [q['title'] for q in listing] == ['Normalization']
    item = listing[0]
    assert item['questions_count'] == 3
    assert item['attempts_used'] == 1
    assert item['attempts_remaining'] == 1
    assert item['in_progress_attempt_id'] == started['attempt']['id']
    assert item['can_start'] is True
    assert item['course_title'] == 'Intro to Databases'
