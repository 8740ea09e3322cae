"""
services/review_service.py

응시 결과 리뷰 (읽기 전용).
저장된 응시 기록을 카탈로그와 조인할 뿐, 점수를 다시 계산하지 않는다.
"""

import logging
from typing import Dict, List, Optional

from online_quiz.errors import AttemptNotFound
from online_quiz.models.attempt_model import (
    AttemptRecord, AttemptReview, AttemptSummary, ReviewAnswer, ReviewTest
)
from online_quiz.models.question_model import ReviewQuestion
from online_quiz.models.test_model import CategoryOut
from online_quiz.services.attempt_store import AttemptStore
from online_quiz.services.catalog import Catalog

logger = logging.getLogger(__name__)


def _review_test(catalog: Catalog, test_id: str) -> Optional[ReviewTest]:
    test = catalog.get_test(test_id)
    if test is None:
        return None
    category = catalog.get_category(test.category_id) if test.category_id else None
    return ReviewTest(
        id=test.id,
        title=test.title,
        description=test.description,
        total_marks=test.total_marks,
        passing_marks=test.passing_marks,
        category=CategoryOut(id=category.id, name=category.name) if category else None,
    )


def build_review(catalog: Catalog, store: AttemptStore, user_id: str, test_id: str) -> AttemptReview:
    """
    (사용자, 시험)의 가장 최근 응시 기록을 리뷰 형태로 반환한다.

    각 답안에는 정답을 포함한 문항 전체가 붙는다.
    카탈로그에서 사라진 문항의 답안은 리뷰에서 빠진다.

    Raises:
        AttemptNotFound: 응시 기록이 없거나 시험이 카탈로그에 없음.
    """
    record = store.find_latest(user_id, test_id)
    if record is None:
        raise AttemptNotFound()

    test = _review_test(catalog, record.test_id)
    if test is None:
        raise AttemptNotFound("Test for this attempt no longer exists")

    questions: Dict[str, ReviewQuestion] = {
        q.id: ReviewQuestion.from_question(q) for q in catalog.get_questions(record.test_id)
    }
    answers: List[ReviewAnswer] = []
    for a in record.answers:
        question = questions.get(a.question_id)
        if question is None:
            logger.warning(f"리뷰 대상 문항 없음: attempt={record.id} question={a.question_id}")
            continue
        answers.append(
            ReviewAnswer(
                question_id=a.question_id,
                selected_option=a.selected_option,
                is_correct=a.is_correct,
                question=question,
            )
        )

    return AttemptReview(
        id=record.id,
        user_id=record.user_id,
        test=test,
        score=record.score,
        passed=record.passed,
        time_taken=record.time_taken,
        completed_at=record.completed_at,
        answers=answers,
    )


def list_attempts(catalog: Catalog, store: AttemptStore, user_id: str) -> List[AttemptSummary]:
    """사용자의 응시 이력 (최신순), 시험 제목/만점/카테고리 포함."""
    tests: Dict[str, Optional[ReviewTest]] = {}
    summaries: List[AttemptSummary] = []
    for record in store.find_by_user(user_id):
        if record.test_id not in tests:
            tests[record.test_id] = _review_test(catalog, record.test_id)
        summaries.append(_summary(record, tests[record.test_id]))
    return summaries


def _summary(record: AttemptRecord, test: Optional[ReviewTest]) -> AttemptSummary:
    return AttemptSummary(
        id=record.id,
        user_id=record.user_id,
        test=test,
        score=record.score,
        passed=record.passed,
        time_taken=record.time_taken,
        completed_at=record.completed_at,
    )
