"""
main.py — 온라인 퀴즈 API 서버 진입점
"""

import logging
import sys

from config import LOG_FILE, DEFAULT_HOST, DEFAULT_PORT, SEED_SAMPLE_DATA, STORE_BACKEND

# ── 로깅 설정 ────────────────────────────────────────────────────────────────
try:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s',
        handlers=[
            logging.FileHandler(LOG_FILE, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )
except PermissionError:
    # 로그 파일 점유 시 콘솔 출력만 사용
    logging.basicConfig(level=logging.INFO)

logger = logging.getLogger(__name__)


def _issue_demo_session() -> None:
    """데모 데이터 사용 시 로컬 확인용 세션 토큰을 발급해 로그에 남긴다."""
    import api.session as session
    token = session.create_session("demo-user")
    logger.info(f"데모 세션 토큰 (Authorization: Bearer ...): {token}")


def main() -> None:
    import uvicorn
    from api.app import create_app

    logger.info("=== Online Quiz API Started ===")
    app = create_app()
    if STORE_BACKEND == "memory" and SEED_SAMPLE_DATA:
        _issue_demo_session()

    logger.info(f"Uvicorn 서버 시작 - {DEFAULT_HOST}:{DEFAULT_PORT}")
    uvicorn.run(app, host=DEFAULT_HOST, port=DEFAULT_PORT, log_level="info")


if __name__ == "__main__":
    main()
