import json
import pytest
from quiz_engine.errors import QuizImportError
from quiz_engine.repositories import QuestionRepository
from quiz_engine.services import ImportService
from quiz_engine.utils.quiz_loader import parse_file_to_quizzes, validate_quiz


QUIZ_JSON = json.dumps({
    'title': 'Joins',
    'time_limit': 15,
    'max_attempts': 2,
    'questions': [
        {'question_text': 'Which joins keep unmatched rows?', 'type': 'multiple_choice', 'points': 2,
         'options': [{'option_text': 'LEFT', 'is_correct': True}, {'option_text': 'INNER'},
                     {'option_text': 'FULL', 'is_correct': True}]},
        {'question': 'A primary key can be NULL', 'type': 'true_false', 'answer': False},
        {'question_text': 'Define a foreign key', 'question_type': 'essay', 'points': 3},
    ],
}).encode()


def test_parse_json_single_object():
    res = parse_file_to_quizzes(QUIZ_JSON, 'joins.json')
    assert len(res) == 1
    quiz = res[0]
    assert quiz['max_attempts'] == 2
    assert quiz['passing_score'] == 70
    tf = quiz['questions'][1]
    assert [o['option_text'] for o in tf['options']] == ['True', 'False']
    assert [o['is_correct'] for o in tf['options']] == [False, True]
    validate_quiz(quiz)


def test_parse_csv_uses_file_stem_as_title():
    data = b'question,type,points,options,correct\nPick primes,multiple_choice,2,2|3|4,2|3\nWhy?,short_answer,1,,\n'
    quiz = parse_file_to_quizzes(data, 'primes.csv')[0]
    assert quiz['title'] == 'primes'
    assert [o['is_correct'] for o in quiz['questions'][0]['options']] == [True, True, False]
    assert quiz['questions'][1]['options'] == []
    validate_quiz(quiz)


def test_unsupported_and_invalid_files():
    with pytest.raises(QuizImportError):
        parse_file_to_quizzes(b'x', 'quiz.pdf')
    with pytest.raises(QuizImportError):
        parse_file_to_quizzes(b'{not json', 'quiz.json')


@pytest.mark.parametrize('question,message', [
    ({'question_text': 'No correct', 'type': 'multiple_choice', 'options': ['a', 'b']}, 'at least one correct'),
    ({'question_text': 'Two true', 'type': 'true_false',
      'options': [{'option_text': 'T', 'is_correct': True}, {'option_text': 'F', 'is_correct': True}]}, 'exactly one'),
    ({'question_text': 'Essay with options', 'type': 'essay', 'options': ['a']}, 'no options'),
    ({'question_text': 'Odd', 'type': 'matching'}, 'unknown question_type'),
    ({'question_text': 'Free', 'type': 'short_answer', 'points': 0}, 'points must be positive'),
])
def test_validate_rejects_broken_questions(question, message):
    quiz = parse_file_to_quizzes(json.dumps({'title': 'T', 'questions': [question]}).encode(), 't.json')[0]
    with pytest.raises(QuizImportError) as exc:
        validate_quiz(quiz)
    assert message in str(exc.value)


def test_import_service_creates_dedupes_and_reports(session, course):
    svc = ImportService(session)
    res = svc.import_file(QUIZ_JSON, 'joins.json', course.id)
    assert res['created'] == 1
    quiz_id = res['quiz_ids'][0]
    questions = QuestionRepository(session).list_for_quiz(quiz_id)
    assert [q.order_index for q in questions] == [0, 1, 2]
    assert questions[2].question_type == 'essay'

    again = svc.import_file(QUIZ_JSON, 'joins.json', course.id)
    assert again == {'created': 0, 'skipped': 1, 'errors': [], 'quiz_ids': []}

    bad = json.dumps([{'title': '', 'questions': []}, {'title': 'Ok', 'questions': []}]).encode()
    dry = svc.import_file(bad, 'many.json', course.id, dry_run=True)
    assert dry['created'] == 0
    assert dry['errors'][0]['index'] == 0


def test_import_into_missing_course(session):
    with pytest.raises(QuizImportError):
        ImportService(session).import_file(QUIZ_JSON, 'joins.json', 999)


@pytest.mark.parametrize('quiz,message', [
    ({'title': 'T', 'max_attempts': 'two', 'questions': []}, 'invalid max_attempts'),
    ({'title': 'T', 'time_limit': 'abc', 'questions': []}, 'invalid time_limit'),
    ({'title': 'T', 'passing_score': [70], 'questions': []}, 'invalid passing_score'),
    ({'title': 'T', 'questions': [{'question_text': 'Q', 'type': 5}]}, 'invalid question_type'),
    ({'title': 'T', 'questions': [{'question_text': 'Q', 'options': 3}]}, 'options must be a list'),
])
def test_malformed_fields_raise_import_error(quiz, message):
    with pytest.raises(QuizImportError) as exc:
        parse_file_to_quizzes(json.dumps(quiz).encode(), 't.json')
    assert message in str(exc.value)


def test_blank_numbers_fall_back_to_defaults():
    quiz = parse_file_to_quizzes(json.dumps({'title': 'T', 'time_limit': '', 'max_attempts': None}).encode(), 't.json')[0]
    assert quiz['time_limit'] is None
    assert quiz['max_attempts'] == 1
    assert quiz['passing_score'] == 70


def test_import_keeps_going_past_a_malformed_quiz(session, course):
    data = json.dumps([
        {'title': 'Keys', 'questions': [{'question_text': 'Define a key', 'type': 'short_answer'}]},
        {'title': 'Broken', 'max_attempts': 'two', 'questions': []},
        'not a quiz',
    ]).encode()
    res = ImportService(session).import_file(data, 'mixed.json', course.id)
    assert res['created'] == 1
    assert [e['index'] for e in res['errors']] == [1, 2]
    assert res['errors'][0]['title'] == 'Broken'
    assert 'invalid max_attempts' in res['errors'][0]['error']
    assert res['errors'][1]['title'] is None
