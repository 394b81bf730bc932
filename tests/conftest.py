"""Shared fixtures for Quizent tests."""

from __future__ import annotations

import random

import pytest
import yaml

from quizent.bank.catalog import Catalog, Question, Quiz
from quizent.bank.registry import InMemoryQuestionBank
from quizent.config.settings import Settings
from quizent.engine.adaptive import Difficulty


def make_question(qid: str, difficulty: str, quiz_id: str = "test-quiz", correct: int = 0) -> Question:
    return Question(
        id=qid,
        quiz_id=quiz_id,
        difficulty=Difficulty(difficulty),
        text=f"Question {qid}?",
        options=("a", "b", "c", "d"),
        correct_answer_index=correct,
        explanation=f"Because {qid}.",
    )


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def pool():
    """Two questions per tier."""
    return [
        make_question("e1", "easy"),
        make_question("e2", "easy"),
        make_question("m1", "medium"),
        make_question("m2", "medium"),
        make_question("h1", "hard"),
        make_question("h2", "hard"),
    ]


@pytest.fixture
def quiz():
    return Quiz(id="test-quiz", title="Test Quiz", topic_name="Arrays", language="Java", question_count=6)


@pytest.fixture
def bank(quiz, pool):
    return InMemoryQuestionBank([Catalog(quiz=quiz, questions=pool)])


@pytest.fixture
def sample_catalog_dir(tmp_path):
    """Create a catalog directory holding one small quiz."""
    catalog_dir = tmp_path / "catalogs"
    catalog_dir.mkdir()

    catalog = {
        "quiz": {
            "id": "sample",
            "title": "Sample Quiz",
            "topic": "Lists",
            "language": "Python",
        },
        "questions": [
            {
                "difficulty": "easy",
                "text": "Which method adds an element to the end of a list?",
                "options": ["add()", "append()", "insert()", "push()"],
                "correct_answer": 1,
                "explanation": "append() adds one element at the end.",
            },
            {
                "difficulty": "medium",
                "text": "What is [1, 2, 3][1:3]?",
                "options": ["[1, 2]", "[2, 3]", "[1, 2, 3]", "[2]"],
                "correct_answer": 1,
            },
            {
                "id": "sample-hard",
                "difficulty": "hard",
                "text": "Which algorithm does list.sort() use?",
                "options": ["QuickSort", "MergeSort", "TimSort", "HeapSort"],
                "correct_answer": 2,
            },
        ],
    }
    with open(catalog_dir / "sample.yaml", "w") as f:
        yaml.dump(catalog, f)

    return catalog_dir


@pytest.fixture
def settings(tmp_path, sample_catalog_dir):
    return Settings(data_dir=tmp_path / "data", catalog_dir=sample_catalog_dir)
