from quiz_engine.question_bank import OptionSnapshot, QuestionSnapshot
from quiz_engine.utils.scoring import is_answer_correct, round_half_up, score


def mc(qid=1, points=2):
    # correct options are 11 and 13
    return QuestionSnapshot(id=qid, question_text='Pick A and C', question_type='multiple_choice', points=points,
                            options=(OptionSnapshot(11, 'A', True), OptionSnapshot(12, 'B', False),
                                     OptionSnapshot(13, 'C', True)))


def tf(qid=2, points=1):
    return QuestionSnapshot(id=qid, question_text='Sky is blue', question_type='true_false', points=points,
                            options=(OptionSnapshot(21, 'True', True), OptionSnapshot(22, 'False', False)))


def short(qid=3, points=1, qtype='short_answer'):
    return QuestionSnapshot(id=qid, question_text='Explain', question_type=qtype, points=points)


def test_all_correct_scores_100_and_passes():
    qs = [mc(1, 10), tf(2, 10)]
    res = score(qs, {1: [11, 13], 2: 21}, passing_score=100)
    assert res.score_percent == 100
    assert res.passed is True
    assert res.points_earned == 20
    assert res.total_points == 20


def test_no_answers_scores_zero_and_fails():
    res = score([mc(), tf(), short()], {}, passing_score=1)
    assert res.score_percent == 0
    assert res.passed is False
    assert all(not o.answered and not o.is_correct for o in res.per_question)


def test_scoring_is_idempotent():
    qs = [mc(), tf(), short()]
    answers = {1: [13, 11], 2: 22, 3: 'normal forms'}
    assert score(qs, answers, 70) == score(qs, answers, 70)


def test_multiple_choice_requires_exact_set():
    q = mc()
    assert is_answer_correct(q, [11, 13])
    assert is_answer_correct(q, (13, 11, 13))
    assert not is_answer_correct(q, [11])
    assert not is_answer_correct(q, [11, 12, 13])
    assert not is_answer_correct(q, [])
    assert not is_answer_correct(q, 11)
    assert not is_answer_correct(q, '11,13')
    assert not is_answer_correct(q, [[11], [13]])


def test_true_false_matches_correct_option_id():
    q = tf()
    assert is_answer_correct(q, 21)
    assert not is_answer_correct(q, 22)
    assert not is_answer_correct(q, [21])
    assert not is_answer_correct(q, True)


def test_free_text_participation_credit():
    for qtype in ('short_answer', 'essay'):
        q = short(qtype=qtype)
        assert not is_answer_correct(q, '')
        assert not is_answer_correct(q, '   \n\t')
        assert is_answer_correct(q, ' x ')
        assert not is_answer_correct(q, 5)


def test_none_value_counts_as_unanswered():
    res = score([short()], {3: None})
    assert res.per_question[0].answered is False
    assert res.score_percent == 0


def test_percent_rounds_half_up_and_pass_is_inclusive():
    assert round_half_up(12.5) == 13
    assert round_half_up(0.49) == 0
    # 1 of 8 points -> 12.5% -> 13
    qs = [mc(1, 1), tf(2, 7)]
    res = score(qs, {1: [11, 13]}, passing_score=13)
    assert res.score_percent == 13
    assert res.passed is True


def test_unknown_question_type_is_never_correct():
    q = QuestionSnapshot(id=9, question_text='?', question_type='matching', points=1)
    assert score([q], {9: 'anything'}).score_percent == 0


def test_empty_question_set_scores_zero():
    res = score([], {}, passing_score=70)
    assert res.score_percent == 0
    assert res.total_points == 0
    assert res.passed is False
