from datetime import datetime, timezone

from bson import ObjectId

from online_quiz.models.question_model import Question
from online_quiz.models import test_model
from online_quiz.services.catalog import InMemoryCatalog, _question_from_doc, _test_from_doc


def test_questions_in_creation_order(catalog):
    assert [q.id for q in catalog.get_questions("T1")] == ["q1", "q2"]


def test_unknown_test(catalog):
    assert catalog.get_test("nope") is None
    assert catalog.get_questions("nope") == []


def test_add_test_fills_question_refs():
    catalog = InMemoryCatalog()
    q = Question(id="x", text="x?", options=["a", "b"], correct_option=1)

    test = catalog.add_test(test_model.Test(id="t", title="t", duration=3), [q])

    assert test.question_ids == ["x"]
    assert catalog.get_questions("t") == [q]


def test_mongo_documents_mapped():
    qid, cid = ObjectId(), ObjectId()
    test = _test_from_doc({
        "_id": ObjectId(),
        "title": "Algebra",
        "duration": 15,
        "passingMarks": 3,
        "questions": [qid],
        "category": cid,
    })
    question = _question_from_doc({
        "_id": qid,
        "text": "x + 1 = 2",
        "options": ["0", "1"],
        "correctOption": 1,
        "createdAt": datetime(2024, 1, 1, tzinfo=timezone.utc),
    })

    assert test.question_ids == [str(qid)]
    assert test.category_id == str(cid)
    assert test.total_marks is None
    assert test.pass_threshold == 3
    assert question.id == str(qid)
    assert question.effective_marks == 1
