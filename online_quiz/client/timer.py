"""
client/timer.py

응시 카운트다운 타이머 (asyncio).
1초(tick)마다 남은 시간을 1 줄이고, 0에 도달하면 on_expire 를 한 번 호출한다.
"""

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


def format_time(seconds: int) -> str:
    """남은 시간 표시용 MM:SS."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def format_duration(seconds: int) -> str:
    """결과 화면 소요 시간 표시: 'M min S sec'."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60} min {seconds % 60} sec"


class SessionTimer:
    def __init__(self, seconds: int, on_expire: Callable[[], None], tick: float = 1.0):
        self.remaining = max(0, int(seconds))
        self.expired = False
        self._on_expire = on_expire
        self._tick = tick
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def display(self) -> str:
        return format_time(self.remaining)

    def start(self) -> None:
        """실행 중인 이벤트 루프 안에서 호출해야 한다."""
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        if self._task is None or self._task.done():
            return
        # 만료 콜백 안에서 자기 자신을 취소하지 않는다
        if self._task is not asyncio.current_task():
            self._task.cancel()

    async def wait(self) -> None:
        """타이머 종료(만료 또는 중지)까지 대기."""
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            if not self._task.cancelled():
                raise

    async def _run(self) -> None:
        while self.remaining > 0:
            await asyncio.sleep(self._tick)
            self.remaining -= 1
        self.expired = True
        logger.info("응시 시간 종료, 자동 제출")
        self._on_expire()
