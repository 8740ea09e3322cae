"""
Tests for the pure grading functions.
"""

import itertools

from online_quiz.models.attempt_model import SubmittedAnswer
from online_quiz.models.question_model import Question
from online_quiz.models import test_model
from online_quiz.services.exam_service import (
    calculate_score, grade_answers, is_passed, resolve_total_marks, sum_question_marks
)


def _q(qid, correct, marks=None, n_options=3):
    return Question(
        id=qid,
        text=f"question {qid}",
        options=[f"opt{i}" for i in range(n_options)],
        correct_option=correct,
        marks=marks,
    )


def _a(qid, selected, claimed=None):
    return SubmittedAnswer(question_id=qid, selected_option=selected, is_correct=claimed)


class TestGradeAnswers:
    def test_correctness_recomputed_from_answer_key(self):
        questions = [_q("a", 0), _q("b", 1)]
        graded = grade_answers(questions, [_a("a", 0, claimed=False), _a("b", 2, claimed=True)])

        assert [g.is_correct for g in graded] == [True, False]

    def test_unresolvable_question_is_skipped(self):
        questions = [_q("a", 0), _q("b", 1)]
        graded = grade_answers(questions, [_a("ghost", 0), _a("a", 0), _a("b", 1)])

        assert [g.question_id for g in graded] == ["a", "b"]
        assert calculate_score(questions, graded) == 2

    def test_duplicate_answers_grade_first_only(self):
        questions = [_q("a", 0, marks=5)]
        graded = grade_answers(questions, [_a("a", 0), _a("a", 0), _a("a", 1)])

        assert len(graded) == 1
        assert calculate_score(questions, graded) == 5

    def test_skipped_answer_is_kept_and_incorrect(self):
        graded = grade_answers([_q("a", 0)], [_a("a", None)])

        assert len(graded) == 1
        assert graded[0].selected_option is None
        assert graded[0].is_correct is False

    def test_out_of_range_option_is_incorrect(self):
        graded = grade_answers([_q("a", 1)], [_a("a", 7)])
        assert graded[0].is_correct is False

    def test_order_preserved(self):
        questions = [_q(c, 0) for c in "abc"]
        graded = grade_answers(questions, [_a("c", 0), _a("a", 0), _a("b", 0)])
        assert [g.question_id for g in graded] == ["c", "a", "b"]


class TestCalculateScore:
    def test_sum_of_marks_for_correct_answers(self):
        questions = [_q("a", 0, marks=2), _q("b", 0, marks=3), _q("c", 0, marks=5)]
        graded = grade_answers(questions, [_a("a", 0), _a("b", 1), _a("c", 0)])

        assert calculate_score(questions, graded) == 7

    def test_missing_or_zero_marks_count_as_one(self):
        questions = [_q("a", 0, marks=None), _q("b", 0, marks=0)]
        graded = grade_answers(questions, [_a("a", 0), _a("b", 0)])

        assert calculate_score(questions, graded) == 2

    def test_score_independent_of_answer_order(self):
        questions = [_q("a", 0, marks=2), _q("b", 1, marks=3), _q("c", 2, marks=4)]
        answers = [_a("a", 0), _a("b", 0), _a("c", 2)]

        scores = {
            calculate_score(questions, grade_answers(questions, list(perm)))
            for perm in itertools.permutations(answers)
        }
        assert scores == {6}


class TestIsPassed:
    def test_threshold_inclusive(self):
        assert is_passed(5, 5) is True
        assert is_passed(4, 5) is False
        assert is_passed(6, 5) is True

    def test_zero_or_missing_threshold_always_passes(self):
        assert is_passed(0, 0) is True
        assert is_passed(0, None) is True
        assert is_passed(0) is True


class TestTotalMarks:
    def test_explicit_total_marks(self):
        test = test_model.Test(id="t", title="t", duration=1, total_marks=10)
        assert resolve_total_marks(test, 3) == 10

    def test_total_marks_falls_back_to_submitted_answer_count(self):
        """
        만점 미설정 시 제출 답안 수로 대체된다.
        시험 전체 배점 합계(sum_question_marks)와 다를 수 있음에 유의.
        """
        test = test_model.Test(id="t", title="t", duration=1)
        questions = [_q("a", 0, marks=2), _q("b", 0, marks=2), _q("c", 0, marks=2)]

        assert resolve_total_marks(test, 2) == 2
        assert sum_question_marks(questions) == 6
