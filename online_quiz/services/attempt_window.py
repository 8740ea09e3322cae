"""
services/attempt_window.py — 서버 측 응시 시작 시각 기록 (인메모리)

문항을 내려보내는 시점에 (사용자, 시험) 별 시작 시각을 찍고,
제출 시 start + duration + grace 를 넘겼으면 거부한다.
같은 시험의 문항을 다시 받으면 새 응시로 보고 시작 시각을 갱신한다.
"""

import logging
import threading
import time
from typing import Callable, Optional

from online_quiz.errors import AttemptExpired

logger = logging.getLogger(__name__)


class AttemptWindowRegistry:
    def __init__(
        self,
        grace_seconds: int = 30,
        enforce: bool = True,
        retention_seconds: int = 86400,
        clock: Callable[[], float] = time.time,
    ):
        self.grace_seconds = grace_seconds
        self.enforce = enforce
        self.retention_seconds = retention_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._started: dict[tuple[str, str], tuple[float, int]] = {}

    def open(self, user_id: str, test_id: str, duration_seconds: int) -> float:
        """시작 시각을 기록하고 반환."""
        now = self._clock()
        with self._lock:
            self._started[(user_id, test_id)] = (now, duration_seconds)
        return now

    def started_at(self, user_id: str, test_id: str) -> Optional[float]:
        with self._lock:
            entry = self._started.get((user_id, test_id))
        return entry[0] if entry else None

    def check(self, user_id: str, test_id: str, duration_seconds: int) -> None:
        """
        제출 가능 여부 확인.

        Raises:
            AttemptExpired: 제한 시간 + 유예를 초과한 경우 (enforce=True 일 때만).
        """
        started = self.started_at(user_id, test_id)
        if started is None:
            logger.warning(f"시작 기록 없는 제출 허용: user={user_id} test={test_id}")
            return

        overdue = self._clock() - (started + duration_seconds + self.grace_seconds)
        if overdue <= 0:
            return

        logger.warning(
            f"제한 시간 초과 제출: user={user_id} test={test_id} overdue={overdue:.1f}s"
        )
        if self.enforce:
            raise AttemptExpired(overdue)

    def cleanup_expired(self) -> int:
        """마감 후 보존 기간(retention_seconds)까지 지난 기록 정리. 제거된 수 반환."""
        now = self._clock()
        with self._lock:
            expired = [
                key for key, (started, duration) in self._started.items()
                if now > started + duration + self.grace_seconds + self.retention_seconds
            ]
            for key in expired:
                del self._started[key]
        return len(expired)
