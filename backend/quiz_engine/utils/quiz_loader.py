"""File parsing utilities that convert quiz definition files into a
normalized quiz list.

Supported input types: JSON and CSV. Parsers return a list of quiz
dictionaries with keys `title`, `description`, `time_limit`,
`max_attempts`, `passing_score`, `is_published` and `questions`; each
question has `question_text`, `question_type`, `points`, `explanation`
and `options` (`option_text`, `is_correct`).
"""

import csv
import io
import json
from pathlib import PurePath
from typing import Dict, List

from ..errors import QuizImportError
from ..models import QuestionType

TRUE_FALSE_OPTIONS = ('True', 'False')


def parse_file_to_quizzes(file_bytes: bytes, filename: str) -> List[Dict]:
    """Dispatch to the appropriate parser based on file extension."""
    return [normalize_quiz(item) for item in load_raw_quizzes(file_bytes, filename)]


def load_raw_quizzes(file_bytes: bytes, filename: str) -> List[Dict]:
    """Read quiz items from a file without normalizing them.

    Lets callers normalize item by item and keep going past a bad one.
    """
    name = filename.lower()
    if name.endswith('.json'):
        return read_json(file_bytes)
    if name.endswith('.csv'):
        return [read_csv(file_bytes, title=PurePath(filename).stem)]
    raise QuizImportError('Unsupported file type')


def parse_json(b: bytes) -> List[Dict]:
    """Parse a JSON quiz object or array of quiz objects."""
    return [normalize_quiz(item) for item in read_json(b)]


def read_json(b: bytes) -> List:
    try:
        data = json.loads(b.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise QuizImportError(f'invalid JSON: {e}') from e
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise QuizImportError('expected a quiz object or a list of quizzes')
    return data


def parse_csv(b: bytes, title: str) -> Dict:
    return normalize_quiz(read_csv(b, title))


def read_csv(b: bytes, title: str) -> Dict:
    """Read a CSV with one question per row.

    Columns: `question`, `type`, `points`, `options`, `correct`,
    `explanation`. `options` and `correct` are `|`-separated option
    texts; `type` defaults to multiple_choice.
    """
    text = b.decode('utf-8-sig')
    reader = csv.DictReader(io.StringIO(text))
    questions = []
    for row in reader:
        row = {(k or '').strip().lower(): (v or '').strip() for k, v in row.items()}
        if not row.get('question'):
            continue
        options = [o.strip() for o in row.get('options', '').split('|') if o.strip()]
        correct = {c.strip() for c in row.get('correct', '').split('|') if c.strip()}
        questions.append({
            'question_text': row['question'],
            'question_type': row.get('type') or QuestionType.MULTIPLE_CHOICE,
            'points': row.get('points') or 1,
            'explanation': row.get('explanation') or None,
            'options': [{'option_text': o, 'is_correct': o in correct} for o in options],
        })
    return {'title': title, 'questions': questions}


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'y')
    return bool(value)


def _as_int(item: Dict, key: str, default):
    value = item.get(key)
    if value is None or value == '':
        return default
    if isinstance(value, bool):
        raise QuizImportError(f'invalid {key} value: {value!r}')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise QuizImportError(f'invalid {key} value: {value!r}')


def normalize_question(item: Dict) -> Dict:
    """Normalize question keys and fill defaults.

    A true/false question given without options gets `True`/`False`
    options, with `answer` naming the correct one.
    """
    if not isinstance(item, dict):
        raise QuizImportError('question item must be an object')
    qtype = item.get('question_type') or item.get('type') or QuestionType.MULTIPLE_CHOICE
    if not isinstance(qtype, str):
        raise QuizImportError(f'invalid question_type: {qtype!r}')
    qtype = qtype.strip().lower()
    options = item.get('options') or item.get('possible_answers') or []
    if not isinstance(options, list):
        raise QuizImportError('options must be a list')
    normalized_options = []
    for o in options:
        if isinstance(o, str):
            o = {'option_text': o}
        if not isinstance(o, dict):
            raise QuizImportError('each option must be an object or a string')
        normalized_options.append({
            'option_text': o.get('option_text') or o.get('answer_text') or o.get('text'),
            'is_correct': _as_bool(o.get('is_correct', False)),
        })
    if qtype == QuestionType.TRUE_FALSE and not normalized_options and 'answer' in item:
        answer = _as_bool(item.get('answer'))
        normalized_options = [
            {'option_text': TRUE_FALSE_OPTIONS[0], 'is_correct': answer},
            {'option_text': TRUE_FALSE_OPTIONS[1], 'is_correct': not answer},
        ]
    try:
        points = float(item.get('points', 1))
    except (TypeError, ValueError):
        raise QuizImportError(f"invalid points value: {item.get('points')!r}")
    return {
        'question_text': item.get('question_text') or item.get('question'),
        'question_type': qtype,
        'points': points,
        'explanation': item.get('explanation'),
        'options': normalized_options,
    }


def normalize_quiz(item: Dict) -> Dict:
    if not isinstance(item, dict):
        raise QuizImportError('quiz item must be an object')
    questions = item.get('questions') or []
    if not isinstance(questions, list):
        raise QuizImportError('questions must be a list')
    return {
        'title': item.get('title'),
        'description': item.get('description'),
        'time_limit': _as_int(item, 'time_limit', None),
        'max_attempts': _as_int(item, 'max_attempts', 1),
        'passing_score': _as_int(item, 'passing_score', 70),
        'is_published': _as_bool(item.get('is_published', True)),
        'questions': [normalize_question(q) for q in questions],
    }


def validate_question(q: Dict) -> None:
    """Raise `QuizImportError` if the question breaks an option invariant."""
    text = q.get('question_text')
    if not text or not isinstance(text, str) or not text.strip():
        raise QuizImportError('missing or empty question_text')
    qtype = q.get('question_type')
    if qtype not in QuestionType.ALL:
        raise QuizImportError(f'unknown question_type: {qtype}')
    if q.get('points') is None or q['points'] <= 0:
        raise QuizImportError('points must be positive')
    options = q.get('options') or []
    if qtype in QuestionType.FREE_TEXT:
        if options:
            raise QuizImportError(f'{qtype} questions take no options')
        return
    for o in options:
        if not o.get('option_text'):
            raise QuizImportError('option missing option_text')
    correct = sum(1 for o in options if o['is_correct'])
    if correct < 1:
        raise QuizImportError(f'{qtype} question needs at least one correct option: {text!r}')
    if qtype == QuestionType.TRUE_FALSE and correct != 1:
        raise QuizImportError(f'true_false question must have exactly one correct option: {text!r}')


def validate_quiz(quiz: Dict) -> None:
    """Raise `QuizImportError` describing the first problem found."""
    title = quiz.get('title')
    if not title or not isinstance(title, str) or not title.strip():
        raise QuizImportError('missing or empty title')
    if quiz['max_attempts'] < 1:
        raise QuizImportError('max_attempts must be a positive integer')
    if not 0 <= quiz['passing_score'] <= 100:
        raise QuizImportError('passing_score must be between 0 and 100')
    if quiz['time_limit'] is not None and quiz['time_limit'] < 0:
        raise QuizImportError('time_limit must be >= 0')
    for idx, q in enumerate(quiz['questions']):
        try:
            validate_question(q)
        except QuizImportError as e:
            raise QuizImportError(f'question {idx}: {e}') from e
