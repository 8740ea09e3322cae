"""
End-to-end: AttemptSession + QuizApiClient against the FastAPI app.
"""

import asyncio
import json

import pytest

from online_quiz.client.api_client import QuizApiClient
from online_quiz.client.attempt_session import AttemptSession
from online_quiz.errors import QuizApiError
from online_quiz.models.session_state import AttemptPhase


@pytest.fixture
def api(client, user_token):
    return QuizApiClient(base_url="", token=user_token, http=client)


def test_full_attempt_then_review(api):
    async def scenario():
        session = AttemptSession(api, "T1")
        await session.load()
        session.select("q1", 0)
        session.next()
        session.select("q2", 1)
        result = await session.submit()
        review = await api.get_results("T1")
        history = await api.list_attempts()
        return session, result, review, history

    session, result, review, history = asyncio.run(scenario())

    assert session.phase == AttemptPhase.SUBMITTED
    assert (result.score, result.total_marks, result.passed) == (1, 2, True)
    assert review.id == result.attempt_id
    assert review.score == result.score
    assert review.passed == result.passed
    assert [a.question.correct_option for a in review.answers] == [0, 2]
    assert [h.id for h in history] == [result.attempt_id]


def test_get_test_summary(api):
    summary = asyncio.run(api.get_test("T1"))

    assert summary.title == "Basics Test"
    assert summary.category.name == "Basics"


def test_not_found_surfaces_status(api):
    with pytest.raises(QuizApiError) as exc:
        asyncio.run(api.get_results("T1"))

    assert exc.value.status_code == 404
    assert str(exc.value) == "No attempt found for this test"


def test_unauthenticated_client_rejected(client):
    anonymous = QuizApiClient(base_url="", http=client)

    with pytest.raises(QuizApiError) as exc:
        asyncio.run(anonymous.get_questions("T1"))
    assert exc.value.status_code == 401


class StubResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body

    def json(self):
        return json.loads(self._body)


class StubHttp:
    def __init__(self, response):
        self.response = response

    def request(self, method, url, **kwargs):
        return self.response


def test_non_json_success_body_raises_api_error():
    api = QuizApiClient(base_url="", token="t", http=StubHttp(StubResponse(200, "<html>oops</html>")))

    with pytest.raises(QuizApiError) as exc:
        asyncio.run(api.submit("T1", []))
    assert exc.value.status_code == 200


def test_unexpected_reply_shape_raises_api_error():
    api = QuizApiClient(base_url="", token="t", http=StubHttp(StubResponse(200, '{"score": "lots"}')))

    with pytest.raises(QuizApiError):
        asyncio.run(api.submit("T1", []))


def test_session_recovers_after_malformed_reply(client, user_token):
    async def scenario():
        stub = StubHttp(StubResponse(200, "<html>oops</html>"))
        api = QuizApiClient(base_url="", token=user_token, http=client)
        session = AttemptSession(api, "T1")
        await session.load()
        session.select("q1", 0)

        api._http = stub
        failed = await session.submit()
        phase_after_failure = session.phase

        api._http = client
        retried = await session.submit()
        return session, failed, phase_after_failure, retried

    session, failed, phase_after_failure, retried = asyncio.run(scenario())
    assert failed is None
    assert phase_after_failure == AttemptPhase.ERROR
    assert retried.score == 1
    assert session.phase == AttemptPhase.SUBMITTED
