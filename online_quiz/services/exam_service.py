"""
services/exam_service.py

응시 답안 채점 비즈니스 로직.
순수 Python 함수로 구성 — 저장소, HTTP, 전역 상태 변경 없음.
"""

import logging
from typing import Dict, Iterable, List, Optional

from online_quiz.models.attempt_model import GradedAnswer, SubmittedAnswer
from online_quiz.models.question_model import Question
from online_quiz.models.test_model import Test

logger = logging.getLogger(__name__)


def grade_answers(
    questions: Iterable[Question],
    answers: List[SubmittedAnswer],
) -> List[GradedAnswer]:
    """
    제출 답안을 정답표와 대조하여 채점한다.

    정답 판정 기준: answer.selected_option == question.correct_option
    클라이언트가 보낸 is_correct 는 사용하지 않는다.

    Args:
        questions: 해당 시험의 문항 (정답 포함).
        answers:   클라이언트 제출 답안. 순서 유지.

    Returns:
        채점된 답안 리스트 (제출 순서 유지).
        - 시험에 없는 question_id 는 건너뛴다 (요청 전체를 실패시키지 않음).
        - 같은 문항에 대한 두 번째 이후 답안은 건너뛴다.
        - selected_option 이 None(미응답)이거나 범위 밖이면 오답.
    """
    by_id: Dict[str, Question] = {q.id: q for q in questions}
    graded: List[GradedAnswer] = []
    seen: set[str] = set()

    for answer in answers:
        question = by_id.get(answer.question_id)
        if question is None:
            logger.warning(f"문항을 찾을 수 없어 건너뜀: {answer.question_id}")
            continue
        if answer.question_id in seen:
            logger.warning(f"중복 답안 건너뜀: {answer.question_id}")
            continue
        seen.add(answer.question_id)

        is_correct = (
            answer.selected_option is not None
            and answer.selected_option == question.correct_option
        )
        if answer.is_correct is not None and answer.is_correct != is_correct:
            logger.info(
                f"클라이언트 정오 판정 불일치 무시: question={question.id} "
                f"claimed={answer.is_correct} actual={is_correct}"
            )

        graded.append(
            GradedAnswer(
                question_id=question.id,
                selected_option=answer.selected_option,
                is_correct=is_correct,
            )
        )

    return graded


def calculate_score(
    questions: Iterable[Question],
    graded: List[GradedAnswer],
) -> int:
    """
    정답 처리된 답안의 배점 합계를 반환한다 (답안 순서와 무관).
    배점이 없거나 0인 문항은 1점으로 계산.
    """
    marks_by_id = {q.id: q.effective_marks for q in questions}
    return sum(marks_by_id.get(a.question_id, 1) for a in graded if a.is_correct)


def is_passed(score: int, passing_marks: Optional[int] = None) -> bool:
    """
    합격 여부를 반환한다.

    Args:
        score:         calculate_score()가 반환한 점수.
        passing_marks: 합격 기준 점수. None 이면 0 (항상 합격).

    Returns:
        score >= passing_marks 이면 True, 아니면 False.
    """
    return score >= (passing_marks or 0)


def resolve_total_marks(test: Test, submitted_count: int) -> int:
    """
    응답에 실을 만점 값.

    시험에 total_marks 가 설정되어 있지 않으면 제출된 답안 수로 대체한다.
    이 값은 시험의 속성이 아니라 제출마다 달라진다 (기존 클라이언트 호환).
    """
    return test.total_marks or submitted_count


def sum_question_marks(questions: Iterable[Question]) -> int:
    """시험 전체 문항 배점 합계."""
    return sum(q.effective_marks for q in questions)
