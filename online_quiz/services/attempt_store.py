"""
services/attempt_store.py

응시 기록 저장소. 추가(insert)와 조회만 있으며 수정/삭제는 없다.

구현:
  - InMemoryAttemptStore : 프로세스 메모리 (락으로 동시 추가 보호)
  - MongoAttemptStore    : MongoDB attempts 컬렉션.
                           user / testId 는 ObjectId 형식이면 ObjectId 로 저장, 조회한다.
"""

import logging
import threading
from typing import List, Optional, Protocol

from pymongo import DESCENDING
from pymongo.database import Database
from pymongo.errors import PyMongoError

from online_quiz.errors import StoreUnavailable
from online_quiz.models.attempt_model import AttemptRecord, GradedAnswer
from online_quiz.services.catalog import _oid

logger = logging.getLogger(__name__)


class AttemptStore(Protocol):
    def insert(self, record: AttemptRecord) -> str: ...

    def find_by_user(self, user_id: str) -> List[AttemptRecord]:
        """사용자의 모든 응시 기록, 최신순."""
        ...

    def find_latest(self, user_id: str, test_id: str) -> Optional[AttemptRecord]:
        """(사용자, 시험) 쌍의 가장 최근 응시 기록."""
        ...


class InMemoryAttemptStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: List[AttemptRecord] = []

    def insert(self, record: AttemptRecord) -> str:
        with self._lock:
            self._records.append(record)
        return record.id

    def find_by_user(self, user_id: str) -> List[AttemptRecord]:
        with self._lock:
            mine = [r for r in self._records if r.user_id == user_id]
        # completed_at 동률이면 나중에 추가된 기록이 앞
        return [r for _, r in sorted(
            enumerate(mine), key=lambda p: (p[1].completed_at, p[0]), reverse=True
        )]

    def find_latest(self, user_id: str, test_id: str) -> Optional[AttemptRecord]:
        return next((r for r in self.find_by_user(user_id) if r.test_id == test_id), None)


# ── MongoDB ──────────────────────────────────────────────────────────────────

def _record_to_doc(record: AttemptRecord) -> dict:
    return {
        "_id": record.id,
        "user": _oid(record.user_id),
        "testId": _oid(record.test_id),
        "score": record.score,
        "passed": record.passed,
        "timeTaken": record.time_taken,
        "completedAt": record.completed_at,
        "answers": [
            {
                "questionId": _oid(a.question_id),
                "selectedOption": a.selected_option,
                "isCorrect": a.is_correct,
            }
            for a in record.answers
        ],
    }


def _record_from_doc(doc: dict) -> AttemptRecord:
    return AttemptRecord(
        id=str(doc["_id"]),
        user_id=str(doc["user"]),
        test_id=str(doc["testId"]),
        score=doc["score"],
        passed=doc["passed"],
        time_taken=doc["timeTaken"],
        completed_at=doc["completedAt"],
        answers=[
            GradedAnswer(
                question_id=str(a["questionId"]),
                selected_option=a.get("selectedOption"),
                is_correct=bool(a.get("isCorrect")),
            )
            for a in doc.get("answers", [])
        ],
    )


class MongoAttemptStore:
    def __init__(self, db: Database):
        self._attempts = db["attempts"]

    def insert(self, record: AttemptRecord) -> str:
        try:
            self._attempts.insert_one(_record_to_doc(record))
        except PyMongoError as e:
            logger.error(f"응시 기록 저장 실패: {e}")
            raise StoreUnavailable(str(e)) from e
        return record.id

    def find_by_user(self, user_id: str) -> List[AttemptRecord]:
        try:
            cursor = self._attempts.find({"user": _oid(user_id)}).sort("completedAt", DESCENDING)
            return [_record_from_doc(doc) for doc in cursor]
        except PyMongoError as e:
            logger.error(f"응시 이력 조회 실패 ({user_id}): {e}")
            raise StoreUnavailable(str(e)) from e

    def find_latest(self, user_id: str, test_id: str) -> Optional[AttemptRecord]:
        try:
            doc = self._attempts.find_one(
                {"user": _oid(user_id), "testId": _oid(test_id)},
                sort=[("completedAt", DESCENDING)],
            )
        except PyMongoError as e:
            logger.error(f"최근 응시 조회 실패 ({user_id}, {test_id}): {e}")
            raise StoreUnavailable(str(e)) from e
        return _record_from_doc(doc) if doc else None
