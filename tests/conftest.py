from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

import api.session as session
from api.app import create_app
from online_quiz.models.question_model import Question
from online_quiz.models.test_model import Category, Test
from online_quiz.services.attempt_store import InMemoryAttemptStore
from online_quiz.services.attempt_window import AttemptWindowRegistry
from online_quiz.services.catalog import InMemoryCatalog


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def questions():
    return [
        Question(
            id="q1",
            text="2 + 2 = ?",
            options=["4", "5"],
            correct_option=0,
            marks=1,
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        ),
        Question(
            id="q2",
            text="Capital of France?",
            options=["Berlin", "Madrid", "Paris"],
            correct_option=2,
            marks=1,
            created_at=datetime(2024, 1, 2, tzinfo=timezone.utc),
        ),
    ]


@pytest.fixture
def catalog(questions):
    catalog = InMemoryCatalog()
    catalog.add_category(Category(id="cat-1", name="Basics"))
    for q in questions:
        catalog.add_question(q)
    catalog.add_test(
        Test(
            id="T1",
            title="Basics Test",
            description="Two quick questions",
            duration=10,
            total_marks=2,
            passing_marks=1,
            # 생성 순서와 반대로 등록 → 응답은 생성 순서
            question_ids=["q2", "q1"],
            category_id="cat-1",
        )
    )
    return catalog


@pytest.fixture
def store():
    return InMemoryAttemptStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def windows(clock):
    return AttemptWindowRegistry(grace_seconds=30, clock=clock)


@pytest.fixture
def app(catalog, store, windows):
    return create_app(catalog=catalog, store=store, windows=windows, cleanup=False)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def user_token():
    token = session.create_session("user-1")
    yield token
    session.revoke(token)


@pytest.fixture
def auth_headers(user_token):
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
def scenario_answers():
    """q1 정답, q2 오답."""
    return [
        {"questionId": "q1", "selectedOption": 0, "isCorrect": True},
        {"questionId": "q2", "selectedOption": 1, "isCorrect": False},
    ]
