"""
services/catalog.py

카탈로그 서비스 (읽기 전용): 시험 메타데이터, 카테고리, 문항 조회.

구현:
  - InMemoryCatalog : 테스트 및 데모용. add_* 로 데이터를 채운다.
  - MongoCatalog    : MongoDB 컬렉션(tests, questions, categories) 조회.
"""

import logging
from typing import Dict, List, Optional, Protocol, Sequence

from bson import ObjectId
from pymongo.database import Database
from pymongo.errors import PyMongoError

from online_quiz.errors import StoreUnavailable
from online_quiz.models.question_model import Question
from online_quiz.models.test_model import Category, Test

logger = logging.getLogger(__name__)


class Catalog(Protocol):
    def get_test(self, test_id: str) -> Optional[Test]: ...

    def get_category(self, category_id: str) -> Optional[Category]: ...

    def get_questions(self, test_id: str) -> List[Question]:
        """시험에 속한 문항을 생성 순서대로 반환 (정답 포함)."""
        ...


class InMemoryCatalog:
    def __init__(self) -> None:
        self._tests: Dict[str, Test] = {}
        self._questions: Dict[str, Question] = {}
        self._categories: Dict[str, Category] = {}

    # ── 적재 ─────────────────────────────────────────────────────────────────

    def add_category(self, category: Category) -> Category:
        self._categories[category.id] = category
        return category

    def add_question(self, question: Question) -> Question:
        self._questions[question.id] = question
        return question

    def add_test(self, test: Test, questions: Sequence[Question] = ()) -> Test:
        """시험을 등록한다. questions 를 주면 문항도 함께 등록하고 참조를 채운다."""
        for q in questions:
            self.add_question(q)
        if questions and not test.question_ids:
            test = test.model_copy(update={"question_ids": [q.id for q in questions]})
        self._tests[test.id] = test
        return test

    # ── 조회 ─────────────────────────────────────────────────────────────────

    def get_test(self, test_id: str) -> Optional[Test]:
        return self._tests.get(test_id)

    def get_category(self, category_id: str) -> Optional[Category]:
        return self._categories.get(category_id)

    def get_questions(self, test_id: str) -> List[Question]:
        test = self._tests.get(test_id)
        if test is None:
            return []
        found = [self._questions[qid] for qid in test.question_ids if qid in self._questions]
        return sorted(found, key=lambda q: q.created_at)


# ── MongoDB ──────────────────────────────────────────────────────────────────

def _oid(value: str):
    """ObjectId 형식이면 변환, 아니면 문자열 그대로 사용."""
    return ObjectId(value) if ObjectId.is_valid(value) else value


def _test_from_doc(doc: dict) -> Test:
    category = doc.get("category")
    return Test(
        id=str(doc["_id"]),
        title=doc.get("title", ""),
        description=doc.get("description", ""),
        duration=doc["duration"],
        total_marks=doc.get("totalMarks"),
        passing_marks=doc.get("passingMarks"),
        question_ids=[str(q) for q in doc.get("questions", [])],
        category_id=str(category) if category is not None else None,
    )


def _question_from_doc(doc: dict) -> Question:
    fields = {
        "id": str(doc["_id"]),
        "text": doc["text"],
        "options": doc["options"],
        "correct_option": doc["correctOption"],
        "marks": doc.get("marks"),
    }
    if doc.get("createdAt") is not None:
        fields["created_at"] = doc["createdAt"]
    return Question(**fields)


class MongoCatalog:
    def __init__(self, db: Database):
        self._tests = db["tests"]
        self._questions = db["questions"]
        self._categories = db["categories"]

    def get_test(self, test_id: str) -> Optional[Test]:
        try:
            doc = self._tests.find_one({"_id": _oid(test_id)})
        except PyMongoError as e:
            logger.error(f"시험 조회 실패 ({test_id}): {e}")
            raise StoreUnavailable(str(e)) from e
        return _test_from_doc(doc) if doc else None

    def get_category(self, category_id: str) -> Optional[Category]:
        try:
            doc = self._categories.find_one({"_id": _oid(category_id)}, {"name": 1})
        except PyMongoError as e:
            logger.error(f"카테고리 조회 실패 ({category_id}): {e}")
            raise StoreUnavailable(str(e)) from e
        return Category(id=str(doc["_id"]), name=doc.get("name", "")) if doc else None

    def get_questions(self, test_id: str) -> List[Question]:
        test = self.get_test(test_id)
        if test is None or not test.question_ids:
            return []
        try:
            cursor = self._questions.find(
                {"_id": {"$in": [_oid(qid) for qid in test.question_ids]}}
            ).sort("createdAt", 1)
            return [_question_from_doc(doc) for doc in cursor]
        except PyMongoError as e:
            logger.error(f"문항 조회 실패 ({test_id}): {e}")
            raise StoreUnavailable(str(e)) from e
