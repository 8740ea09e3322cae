"""
api/app.py — FastAPI 앱 인스턴스 + 인증 세션 미들웨어 + 저장소 연결
"""

import logging
import threading
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo import MongoClient

import config
from api.routes import router
from api.sample_data import seed
import api.session as session
from online_quiz.errors import QuizError
from online_quiz.services.attempt_store import InMemoryAttemptStore, MongoAttemptStore
from online_quiz.services.attempt_window import AttemptWindowRegistry
from online_quiz.services.catalog import InMemoryCatalog, MongoCatalog
from online_quiz.services.scoring_engine import ScoringEngine

SESSION_COOKIE = "quiz_session"

logger = logging.getLogger(__name__)


def _session_token(request: Request) -> str | None:
    """Authorization: Bearer <token> 우선, 없으면 쿠키."""
    auth = request.headers.get("authorization", "")
    if auth.lower().startswith("bearer "):
        return auth[7:].strip()
    return request.cookies.get(SESSION_COOKIE)


def _default_backends():
    if config.STORE_BACKEND == "mongo":
        client = MongoClient(config.MONGO_URI, tz_aware=True)
        db = client[config.DB_NAME]
        logger.info(f"MongoDB 저장소 사용: {config.DB_NAME}")
        return MongoCatalog(db), MongoAttemptStore(db)

    catalog = InMemoryCatalog()
    if config.SEED_SAMPLE_DATA:
        seed(catalog)
    logger.info("인메모리 저장소 사용")
    return catalog, InMemoryAttemptStore()


def create_app(catalog=None, store=None, windows=None, cleanup: bool = True) -> FastAPI:
    app = FastAPI(title="Online Quiz")

    if catalog is None or store is None:
        default_catalog, default_store = _default_backends()
        catalog = catalog or default_catalog
        store = store or default_store
    if windows is None:
        windows = AttemptWindowRegistry(
            grace_seconds=config.SUBMIT_GRACE_SECONDS,
            enforce=config.ENFORCE_TIME_LIMIT,
        )

    app.state.catalog = catalog
    app.state.store = store
    app.state.windows = windows
    app.state.engine = ScoringEngine(catalog, store, windows)

    # CORS (모바일 브라우저 등 다양한 출처 허용)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 세션 미들웨어: 토큰을 사용자 ID로 해석 (없으면 익명)
    @app.middleware("http")
    async def session_middleware(request: Request, call_next):
        token = _session_token(request)
        request.state.session_token = token
        request.state.user_id = session.get_user_id(token)
        return await call_next(request)

    @app.exception_handler(QuizError)
    async def quiz_error_handler(request: Request, exc: QuizError):
        logger.error(f"요청 처리 실패 {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"detail": "Server error", "error": str(exc)})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(f"예상치 못한 오류 {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Server error", "error": str(exc)})

    app.include_router(router)

    @app.get("/")
    async def root():
        return {"msg": "Backend is running"}

    # 만료 세션/응시 시작 기록 주기적 정리 (5분마다)
    def _cleanup_loop():
        while True:
            time.sleep(300)
            removed = session.cleanup_expired()
            closed = windows.cleanup_expired()
            if removed or closed:
                logger.info(f"만료 세션 {removed}개, 응시 시작 기록 {closed}개 정리")

    if cleanup:
        t = threading.Thread(target=_cleanup_loop, daemon=True)
        t.start()

    return app
