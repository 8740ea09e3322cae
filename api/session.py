"""
api/session.py — 인메모리 인증 세션 (토큰 → 사용자 ID)

로그인/회원 관리는 이 서비스 밖에서 이루어지고, 여기서는 발급된 토큰을
사용자 ID로 해석하는 기능만 제공한다.
TTL(기본 1시간) 경과 시 자동 만료, 접근 시 갱신.
"""

import threading
import time
import uuid
from typing import Optional

from config import SESSION_TTL

_lock = threading.Lock()
_sessions: dict[str, str] = {}
_timestamps: dict[str, float] = {}


def create_session(user_id: str) -> str:
    """사용자 ID에 대한 새 세션을 생성하고 세션 토큰을 반환."""
    sid = uuid.uuid4().hex
    with _lock:
        _sessions[sid] = user_id
        _timestamps[sid] = time.time()
    return sid


def get_user_id(sid: Optional[str]) -> Optional[str]:
    """세션 토큰으로 사용자 ID를 가져옴. 만료되었거나 없으면 None."""
    if not sid:
        return None
    with _lock:
        if sid not in _sessions:
            return None
        if time.time() - _timestamps[sid] > SESSION_TTL:
            del _sessions[sid]
            del _timestamps[sid]
            return None
        _timestamps[sid] = time.time()  # 접근 시 갱신
        return _sessions[sid]


def revoke(sid: str) -> None:
    """세션 폐기."""
    with _lock:
        _sessions.pop(sid, None)
        _timestamps.pop(sid, None)


def cleanup_expired() -> int:
    """만료된 세션을 정리. 제거된 수 반환."""
    now = time.time()
    removed = 0
    with _lock:
        expired = [sid for sid, ts in _timestamps.items() if now - ts > SESSION_TTL]
        for sid in expired:
            del _sessions[sid]
            del _timestamps[sid]
            removed += 1
    return removed
