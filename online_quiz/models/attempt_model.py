"""
models/attempt_model.py

제출 답안, 채점 결과, 응시 기록(Attempt Record) 모델.
응시 기록은 생성 후 변경되지 않는다 (frozen).
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ConfigDict, Field

from online_quiz.models.question_model import CamelModel, ReviewQuestion
from online_quiz.models.test_model import CategoryOut


def _new_attempt_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubmittedAnswer(CamelModel):
    """
    클라이언트가 보낸 답안 1건.
    is_correct 는 호환성을 위해 받기만 하고 채점에는 쓰지 않는다.
    """
    question_id: str
    selected_option: Optional[int] = None
    is_correct: Optional[bool] = None


class SubmitRequest(CamelModel):
    """POST /tests/{id}/submit 요청 본문. user 필드는 무시된다."""
    answers: List[SubmittedAnswer] = Field(default_factory=list)
    time_taken: Optional[int] = Field(None, ge=0)
    user: Optional[str] = None


class GradedAnswer(CamelModel):
    model_config = ConfigDict(frozen=True)

    question_id: str
    selected_option: Optional[int] = None
    is_correct: bool


class AttemptRecord(CamelModel):
    """한 번의 제출로 정확히 한 번 생성되는 응시 기록."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_attempt_id)
    user_id: str
    test_id: str
    score: int = Field(..., ge=0)
    passed: bool
    time_taken: int = Field(..., ge=0, description="소요 시간 (초)")
    completed_at: datetime = Field(default_factory=_utcnow)
    answers: List[GradedAnswer] = Field(default_factory=list)


class SubmissionResult(CamelModel):
    """제출 응답: {score, totalMarks, passed, attemptId}"""
    score: int
    total_marks: int
    passed: bool
    attempt_id: str


# ── 리뷰 응답 ────────────────────────────────────────────────────────────────

class ReviewTest(CamelModel):
    id: str
    title: str
    description: str = ""
    total_marks: Optional[int] = None
    passing_marks: Optional[int] = None
    category: Optional[CategoryOut] = None


class ReviewAnswer(CamelModel):
    question_id: str
    selected_option: Optional[int] = None
    is_correct: bool
    question: ReviewQuestion


class AttemptReview(CamelModel):
    """GET /tests/{id}/results 응답. 저장된 값을 그대로 돌려준다."""
    id: str
    user_id: str
    test: ReviewTest
    score: int
    passed: bool
    time_taken: int
    completed_at: datetime
    answers: List[ReviewAnswer]


class AttemptSummary(CamelModel):
    """응시 이력 목록의 한 항목."""
    id: str
    user_id: str
    test: Optional[ReviewTest] = None
    score: int
    passed: bool
    time_taken: int
    completed_at: datetime
