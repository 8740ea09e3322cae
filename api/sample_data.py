"""
api/sample_data.py — 데모용 카탈로그 데이터
"""

from online_quiz.models.question_model import Question
from online_quiz.models.test_model import Category, Test
from online_quiz.services.catalog import InMemoryCatalog
from online_quiz.services.exam_service import sum_question_marks

SAMPLE_CATEGORY = Category(id="general", name="General Knowledge")

SAMPLE_QUESTIONS = [
    Question(
        id="sample-q1",
        text="Which planet is known as the Red Planet?",
        options=["Venus", "Mars", "Jupiter", "Saturn"],
        correct_option=1,
    ),
    Question(
        id="sample-q2",
        text="What is the boiling point of water at sea level in Celsius?",
        options=["90", "100", "110", "120"],
        correct_option=1,
    ),
    Question(
        id="sample-q3",
        text="Which data structure works on a first-in, first-out basis?",
        options=["Stack", "Queue", "Tree", "Graph"],
        correct_option=1,
        marks=2,
    ),
]

SAMPLE_TEST = Test(
    id="sample-test",
    title="Sample Quiz",
    description="A short warm-up quiz.",
    duration=5,
    total_marks=sum_question_marks(SAMPLE_QUESTIONS),
    passing_marks=2,
    category_id=SAMPLE_CATEGORY.id,
)


def seed(catalog: InMemoryCatalog) -> None:
    catalog.add_category(SAMPLE_CATEGORY)
    catalog.add_test(SAMPLE_TEST, SAMPLE_QUESTIONS)
