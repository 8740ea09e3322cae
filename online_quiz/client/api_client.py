"""
client/api_client.py — 퀴즈 API HTTP 클라이언트

requests 세션을 작업 스레드에서 호출하여 이벤트 루프를 막지 않는다.
http 인자로 requests.Session 호환 객체(예: FastAPI TestClient)를 주입할 수 있다.
"""

import asyncio
import logging
from typing import List, Optional

import requests
from pydantic import ValidationError

from config import API_BASE_URL, DEFAULT_TIMEOUT
from online_quiz.errors import QuizApiError
from online_quiz.models.attempt_model import (
    AttemptReview, AttemptSummary, SubmissionResult, SubmittedAnswer, SubmitRequest
)
from online_quiz.models.test_model import TestSummary, TestWithQuestions

logger = logging.getLogger(__name__)


def _error_message(resp) -> str:
    try:
        body = resp.json()
    except ValueError:
        return f"HTTP {resp.status_code}"
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return f"HTTP {resp.status_code}"


class QuizApiClient:
    def __init__(
        self,
        base_url: str = API_BASE_URL,
        token: Optional[str] = None,
        http=None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._http = http if http is not None else requests.Session()

    def _request(self, method: str, path: str, payload: Optional[dict] = None):
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        url = f"{self.base_url}/api{path}"
        try:
            resp = self._http.request(
                method, url, json=payload, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"API 호출 실패 {method} {url}: {e}")
            raise QuizApiError(f"Network error: {e}") from e

        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.warning(f"API 오류 {method} {url}: {resp.status_code} {message}")
            raise QuizApiError(message, status_code=resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            logger.warning(f"API 응답 해석 실패 {method} {url}: {e}")
            raise QuizApiError(f"Malformed response: {e}", status_code=resp.status_code) from e

    async def _call(self, method: str, path: str, payload: Optional[dict] = None):
        return await asyncio.to_thread(self._request, method, path, payload)

    @staticmethod
    def _parse(model, data):
        """응답 본문을 모델로 변환. 형식이 맞지 않으면 QuizApiError."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning(f"API 응답 형식 오류 ({model.__name__}): {e}")
            raise QuizApiError(f"Unexpected response: {e.error_count()} invalid field(s)") from e

    # ── 엔드포인트 ───────────────────────────────────────────────────────────

    async def get_test(self, test_id: str) -> TestSummary:
        return self._parse(TestSummary, await self._call("GET", f"/tests/{test_id}"))

    async def get_questions(self, test_id: str) -> TestWithQuestions:
        return self._parse(
            TestWithQuestions,
            await self._call("GET", f"/tests/{test_id}/questions")
        )

    async def submit(
        self,
        test_id: str,
        answers: List[SubmittedAnswer],
        time_taken: Optional[int] = None,
    ) -> SubmissionResult:
        body = SubmitRequest(answers=answers, time_taken=time_taken)
        payload = body.model_dump(by_alias=True, exclude_none=True, mode="json")
        return self._parse(
            SubmissionResult,
            await self._call("POST", f"/tests/{test_id}/submit", payload)
        )

    async def get_results(self, test_id: str) -> AttemptReview:
        return self._parse(AttemptReview, await self._call("GET", f"/tests/{test_id}/results"))

    async def list_attempts(self, user_id: Optional[str] = None) -> List[AttemptSummary]:
        path = f"/attempts/{user_id}" if user_id else "/attempts"
        data = await self._call("GET", path)
        if not isinstance(data, list):
            raise QuizApiError("Unexpected response: expected a list of attempts")
        return [self._parse(AttemptSummary, a) for a in data]
