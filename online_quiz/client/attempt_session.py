"""
client/attempt_session.py — 응시 세션 상태 머신 (클라이언트)

단계:
  LOADING → IN_PROGRESS → SUBMITTING → SUBMITTED
                              ↘ ERROR (스냅샷 유지, submit() 으로 재시도)
  LOADING / IN_PROGRESS / ERROR → ABANDONED (abandon())

상태 관리:
  - self.state (ExamState) 에 단계, 답안판, 표시 중인 문항 인덱스를 보관
  - 답안판 변경과 문항 이동은 IN_PROGRESS 에서만 허용
  - 수동 제출과 타이머 만료는 같은 request_submit() 을 거치며,
    제출 작업은 세션당 동시에 하나만 존재한다
"""

import asyncio
import logging
import time
from typing import Callable, List, Optional

from online_quiz.client.timer import SessionTimer
from online_quiz.errors import InvalidTransition, QuizApiError
from online_quiz.models.attempt_model import SubmissionResult, SubmittedAnswer
from online_quiz.models.question_model import PublicQuestion
from online_quiz.models.session_state import TERMINAL_PHASES, AttemptPhase, ExamState
from online_quiz.models.test_model import TestWithQuestions

logger = logging.getLogger(__name__)


class AttemptSession:
    def __init__(
        self,
        client,
        test_id: str,
        tick: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.test_id = test_id
        self.state = ExamState()
        self.test: Optional[TestWithQuestions] = None
        self.timer: Optional[SessionTimer] = None
        self._tick = tick
        self._clock = clock
        self._submit_task: Optional[asyncio.Task] = None

    # ── 조회 ─────────────────────────────────────────────────────────────────

    @property
    def phase(self) -> AttemptPhase:
        return self.state.phase

    @property
    def finished(self) -> bool:
        return self.state.phase in TERMINAL_PHASES

    @property
    def questions(self) -> List[PublicQuestion]:
        return self.test.questions if self.test else []

    @property
    def current_question(self) -> Optional[PublicQuestion]:
        if not self.questions:
            return None
        return self.questions[self.state.current_quest_index]

    @property
    def remaining_seconds(self) -> int:
        return self.timer.remaining if self.timer else 0

    @property
    def answered_count(self) -> int:
        return len(self.state.user_answers)

    @property
    def unanswered_count(self) -> int:
        return len(self.questions) - self.answered_count

    def confirmation_message(self) -> Optional[str]:
        """미응답 문항이 있으면 제출 확인 문구, 없으면 None."""
        n = self.unanswered_count
        if n <= 0:
            return None
        noun = "question" if n == 1 else "questions"
        return f"You have {n} unanswered {noun}. Are you sure you want to submit?"

    # ── 로딩 ─────────────────────────────────────────────────────────────────

    async def load(self) -> TestWithQuestions:
        """
        문항을 받아 IN_PROGRESS 로 전환하고 카운트다운을 시작한다.
        카운트다운은 문항 수신 시점부터 duration * 60 초.

        Raises:
            InvalidTransition: LOADING 이 아닌 상태에서 호출.
            QuizApiError:      문항 조회 실패.
            그 외 예외도 상태를 ERROR 로 남긴 뒤 그대로 전파한다.
        """
        if self.state.phase != AttemptPhase.LOADING:
            raise InvalidTransition(f"load 불가: {self.state.phase.value}")
        try:
            test = await self.client.get_questions(self.test_id)
        except Exception as e:
            self.state.phase = AttemptPhase.ERROR
            self.state.error = str(e)
            logger.warning(f"문항 조회 실패: {e}")
            raise

        if self.state.phase != AttemptPhase.LOADING:
            # 로딩 중 abandon() 됨
            return test

        self.test = test
        self.state.phase = AttemptPhase.IN_PROGRESS
        self.state.started_at = self._clock()
        self.timer = SessionTimer(test.duration * 60, self._on_timeout, tick=self._tick)
        self.timer.start()
        logger.info(f"응시 시작: test={test.id} questions={len(test.questions)} duration={test.duration}분")
        return test

    # ── 답안판 / 이동 ────────────────────────────────────────────────────────

    def _require_in_progress(self, action: str) -> None:
        if self.state.phase != AttemptPhase.IN_PROGRESS:
            raise InvalidTransition(f"{action} 불가: {self.state.phase.value}")

    def select(self, question_id: str, option: int) -> None:
        """문항의 선택 보기를 기록 (마지막 선택이 유효)."""
        self._require_in_progress("select")
        question = next((q for q in self.questions if q.id == question_id), None)
        if question is None:
            raise ValueError(f"시험에 없는 문항입니다: {question_id}")
        if not 0 <= option < len(question.options):
            raise ValueError(f"보기 인덱스 범위 초과: {option}")
        self.state.user_answers[question_id] = option

    def jump(self, index: int) -> int:
        """표시 문항 이동. 범위를 벗어나면 양 끝으로 보정 (순환 없음)."""
        self._require_in_progress("navigate")
        last = max(0, len(self.questions) - 1)
        self.state.current_quest_index = max(0, min(index, last))
        return self.state.current_quest_index

    def next(self) -> int:
        return self.jump(self.state.current_quest_index + 1)

    def previous(self) -> int:
        return self.jump(self.state.current_quest_index - 1)

    # ── 제출 ─────────────────────────────────────────────────────────────────

    def _take_snapshot(self) -> List[SubmittedAnswer]:
        return [
            SubmittedAnswer(question_id=q.id, selected_option=self.state.user_answers[q.id])
            for q in self.questions
            if q.id in self.state.user_answers
        ]

    def _elapsed_seconds(self) -> int:
        now = self._clock()
        started = self.state.started_at if self.state.started_at is not None else now
        elapsed = int(round(now - started))
        return max(0, min(elapsed, self.test.duration * 60))

    def request_submit(self) -> Optional[asyncio.Task]:
        """
        제출 작업을 시작하거나 진행 중인 작업을 반환한다 (single-flight).

        - IN_PROGRESS: 타이머 중지, 답안 스냅샷 고정 후 제출 시작
        - ERROR (스냅샷 있음): 같은 스냅샷으로 재시도
        - SUBMITTING: 새 작업 없이 진행 중인 작업 반환
        - 그 외: 무시하고 None
        """
        phase = self.state.phase
        if phase == AttemptPhase.SUBMITTING:
            logger.info("이미 제출 중: 중복 제출 요청 무시")
            return self._submit_task

        if phase == AttemptPhase.IN_PROGRESS:
            if self.timer is not None:
                self.timer.stop()
            self.state.snapshot = self._take_snapshot()
            self.state.time_taken = self._elapsed_seconds()
        elif phase == AttemptPhase.ERROR and self.state.snapshot is not None:
            logger.info("이전 스냅샷으로 제출 재시도")
        else:
            logger.info(f"제출 요청 무시: {phase.value}")
            return None

        self.state.phase = AttemptPhase.SUBMITTING
        self.state.error = None
        self._submit_task = asyncio.get_running_loop().create_task(self._send())
        return self._submit_task

    async def submit(self) -> Optional[SubmissionResult]:
        """
        제출하고 결과를 기다린다.
        실패하면 None 을 반환하고 상태는 ERROR (self.state.error 에 사유).
        """
        task = self.request_submit()
        if task is None:
            return self.state.result
        return await task

    def _on_timeout(self) -> None:
        self.request_submit()

    async def _send(self) -> Optional[SubmissionResult]:
        try:
            result = await self.client.submit(
                self.test_id, self.state.snapshot, self.state.time_taken
            )
        except QuizApiError as e:
            self.state.phase = AttemptPhase.ERROR
            self.state.error = str(e)
            logger.warning(f"제출 실패 (재시도 가능): {e}")
            return None
        except Exception as e:
            # 어떤 실패든 ERROR 로 전환, 스냅샷은 유지
            self.state.phase = AttemptPhase.ERROR
            self.state.error = str(e) or type(e).__name__
            logger.error(f"제출 중 예기치 않은 오류 (재시도 가능): {e}", exc_info=e)
            return None

        self.state.phase = AttemptPhase.SUBMITTED
        self.state.result = result
        self.state.user_answers = {}
        self.state.snapshot = None
        logger.info(f"제출 완료: attempt={result.attempt_id} score={result.score}/{result.total_marks}")
        return result

    # ── 중단 ─────────────────────────────────────────────────────────────────

    def abandon(self) -> None:
        """응시 중단. 서버에는 아무것도 남기지 않는다."""
        if self.state.phase in (AttemptPhase.SUBMITTING, AttemptPhase.SUBMITTED):
            return
        if self.timer is not None:
            self.timer.stop()
        self.state.phase = AttemptPhase.ABANDONED
        self.state.user_answers = {}
        self.state.snapshot = None
        logger.info(f"응시 중단: test={self.test_id}")
