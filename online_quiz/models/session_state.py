"""
models/session_state.py

클라이언트 측 응시 세션 상태를 담는 OMR 카드 모델.
Pydantic BaseModel 기반 — 상태 전이 로직은 client/attempt_session.py 에 있다.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from online_quiz.models.attempt_model import SubmissionResult, SubmittedAnswer


class AttemptPhase(str, Enum):
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    ERROR = "error"
    ABANDONED = "abandoned"


TERMINAL_PHASES = frozenset({AttemptPhase.SUBMITTED, AttemptPhase.ABANDONED})


class ExamState(BaseModel):
    """
    사용자의 응시 세션 전체 상태를 표현하는 모델.

    Attributes:
        phase:               현재 단계.
        current_quest_index: 화면에 표시 중인 문항 인덱스 (0-based).
        user_answers:        답안판. {question.id: 선택한 보기 인덱스}
        started_at:          카운트다운 시작 시각 (monotonic). 문항 수신 시점에 설정.
        snapshot:            제출 중이거나 실패한 제출의 답안 스냅샷. 재시도 시 재사용.
        time_taken:          스냅샷과 함께 고정된 소요 시간 (초).
        result:              제출 성공 시 서버 응답.
        error:               마지막 오류 메시지.
    """

    phase: AttemptPhase = Field(
        default=AttemptPhase.LOADING,
        description="세션 단계"
    )
    current_quest_index: int = Field(
        default=0,
        ge=0,
        description="현재 표시 중인 문항 인덱스 (0-based)"
    )
    user_answers: Dict[str, int] = Field(
        default_factory=dict,
        description="답안판. key: question.id, value: 선택한 보기 인덱스"
    )
    started_at: Optional[float] = Field(
        default=None,
        description="카운트다운 시작 시각 (time.monotonic() 기준)"
    )
    snapshot: Optional[List[SubmittedAnswer]] = None
    time_taken: Optional[int] = None
    result: Optional[SubmissionResult] = None
    error: Optional[str] = None
