"""
services/scoring_engine.py

서버 측 채점 엔진: 제출 답안 + 정답표 → 응시 기록 생성/저장 → 결과 반환.
"""

import logging
from typing import List, Optional

from online_quiz.errors import TestNotFound
from online_quiz.models.attempt_model import AttemptRecord, SubmissionResult, SubmittedAnswer
from online_quiz.services.attempt_store import AttemptStore
from online_quiz.services.attempt_window import AttemptWindowRegistry
from online_quiz.services.catalog import Catalog
from online_quiz.services.exam_service import (
    calculate_score, grade_answers, is_passed, resolve_total_marks
)

logger = logging.getLogger(__name__)


class ScoringEngine:
    def __init__(
        self,
        catalog: Catalog,
        store: AttemptStore,
        windows: Optional[AttemptWindowRegistry] = None,
    ):
        self.catalog = catalog
        self.store = store
        self.windows = windows

    def submit(
        self,
        user_id: str,
        test_id: str,
        answers: List[SubmittedAnswer],
        time_taken: Optional[int] = None,
    ) -> SubmissionResult:
        """
        제출 1건을 채점하고 응시 기록을 정확히 하나 저장한다 (멱등 아님).

        Args:
            user_id:    인증된 호출자 ID.
            test_id:    시험 ID.
            answers:    제출 답안 (순서 유지).
            time_taken: 소요 시간 (초). 없으면 제한 시간 전체로 간주.

        Raises:
            TestNotFound:     시험이 없음.
            AttemptExpired:   서버 측 제한 시간 초과.
            StoreUnavailable: 저장 실패 (기록은 남지 않음).
        """
        test = self.catalog.get_test(test_id)
        if test is None:
            raise TestNotFound(test_id)

        if self.windows is not None:
            self.windows.check(user_id, test.id, test.duration_seconds)

        questions = self.catalog.get_questions(test.id)
        graded = grade_answers(questions, answers)
        score = calculate_score(questions, graded)
        passed = is_passed(score, test.passing_marks)

        record = AttemptRecord(
            user_id=user_id,
            test_id=test.id,
            score=score,
            passed=passed,
            time_taken=time_taken if time_taken is not None else test.duration_seconds,
            answers=graded,
        )
        attempt_id = self.store.insert(record)
        logger.info(
            f"응시 기록 저장: attempt={attempt_id} user={user_id} test={test.id} "
            f"score={score} passed={passed} graded={len(graded)}/{len(answers)}"
        )

        return SubmissionResult(
            score=score,
            total_marks=resolve_total_marks(test, len(answers)),
            passed=passed,
            attempt_id=attempt_id,
        )
