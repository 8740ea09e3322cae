"""
api/routes.py — FastAPI 엔드포인트
"""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

import api.session as session
from online_quiz.errors import AttemptExpired, NotFound
from online_quiz.models.attempt_model import (
    AttemptReview, AttemptSummary, SubmissionResult, SubmitRequest
)
from online_quiz.models.question_model import PublicQuestion
from online_quiz.models.test_model import TestSummary, TestWithQuestions
from online_quiz.services.review_service import build_review, list_attempts

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# ── 의존성 ───────────────────────────────────────────────────────────────────

def current_user(request: Request) -> str:
    """세션 미들웨어가 해석한 사용자 ID. 없으면 401."""
    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user_id


def _load_summary(request: Request, test_id: str):
    catalog = request.app.state.catalog
    test = catalog.get_test(test_id)
    if test is None:
        return None, None
    category = catalog.get_category(test.category_id) if test.category_id else None
    return test, TestSummary.build(test, category)


# ── 엔드포인트 ───────────────────────────────────────────────────────────────

@router.get("/tests/{test_id}", response_model=TestSummary)
async def get_test(test_id: str, request: Request):
    _, summary = await asyncio.to_thread(_load_summary, request, test_id)
    if summary is None:
        raise HTTPException(status_code=404, detail="Test not found")
    return summary


@router.get("/tests/{test_id}/questions", response_model=TestWithQuestions)
async def get_test_questions(test_id: str, request: Request, user_id: str = Depends(current_user)):
    test, summary = await asyncio.to_thread(_load_summary, request, test_id)
    if test is None:
        raise HTTPException(status_code=404, detail="Test not found")

    questions = await asyncio.to_thread(request.app.state.catalog.get_questions, test.id)
    request.app.state.windows.open(user_id, test.id, test.duration_seconds)
    logger.info(f"응시 시작: user={user_id} test={test.id} questions={len(questions)}")

    return TestWithQuestions(
        **summary.model_dump(),
        questions=[PublicQuestion.from_question(q) for q in questions],
    )


@router.post("/tests/{test_id}/submit", response_model=SubmissionResult)
async def submit_test(
    test_id: str,
    body: SubmitRequest,
    request: Request,
    user_id: str = Depends(current_user),
):
    if body.user and body.user != user_id:
        logger.warning(f"요청 본문의 user 필드 무시: body={body.user} session={user_id}")

    try:
        return await asyncio.to_thread(
            request.app.state.engine.submit, user_id, test_id, body.answers, body.time_taken
        )
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AttemptExpired as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/tests/{test_id}/results", response_model=AttemptReview)
async def get_results(test_id: str, request: Request, user_id: str = Depends(current_user)):
    try:
        return await asyncio.to_thread(
            build_review, request.app.state.catalog, request.app.state.store, user_id, test_id
        )
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/attempts", response_model=List[AttemptSummary])
async def get_my_attempts(request: Request, user_id: str = Depends(current_user)):
    return await asyncio.to_thread(
        list_attempts, request.app.state.catalog, request.app.state.store, user_id
    )


@router.get("/attempts/{user_id}", response_model=List[AttemptSummary])
async def get_user_attempts(user_id: str, request: Request, _caller: str = Depends(current_user)):
    return await asyncio.to_thread(
        list_attempts, request.app.state.catalog, request.app.state.store, user_id
    )


@router.post("/session/logout")
async def logout(request: Request, user_id: str = Depends(current_user)):
    session.revoke(request.state.session_token)
    logger.info(f"세션 종료: user={user_id}")
    return {"ok": True}
