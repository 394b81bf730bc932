"""Tests for the YAML catalog loader and question bank providers."""

import pytest
import yaml

from quizent.bank.catalog import Catalog, Question, Quiz, load_catalog
from quizent.bank.registry import CatalogQuestionBank, InMemoryQuestionBank
from quizent.engine.adaptive import Difficulty


def _write(path, questions, quiz=None):
    data = {
        "quiz": quiz or {"id": path.stem, "title": "Broken", "topic": "T", "language": "L"},
        "questions": questions,
    }
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


def _question(**overrides):
    q = {"difficulty": "easy", "text": "?", "options": ["a", "b", "c", "d"], "correct_answer": 0}
    q.update(overrides)
    return q


class TestLoadCatalog:
    def test_load(self, sample_catalog_dir):
        catalog = load_catalog(sample_catalog_dir / "sample.yaml")
        assert catalog.quiz.id == "sample"
        assert catalog.quiz.topic_name == "Lists"
        assert catalog.quiz.language == "Python"
        assert catalog.quiz.question_count == 3
        assert [q.difficulty for q in catalog.questions] == [
            Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD,
        ]

    def test_generated_and_explicit_ids(self, sample_catalog_dir):
        catalog = load_catalog(sample_catalog_dir / "sample.yaml")
        assert [q.id for q in catalog.questions] == ["sample_q_0", "sample_q_1", "sample-hard"]
        assert all(q.quiz_id == "sample" for q in catalog.questions)

    def test_wrong_option_count(self, tmp_path):
        path = _write(tmp_path / "bad.yaml", [_question(options=["a", "b"])])
        with pytest.raises(ValueError, match="4 options"):
            load_catalog(path)

    def test_correct_answer_out_of_range(self, tmp_path):
        path = _write(tmp_path / "bad.yaml", [_question(correct_answer=4)])
        with pytest.raises(ValueError, match="correct_answer"):
            load_catalog(path)

    def test_unknown_difficulty(self, tmp_path):
        path = _write(tmp_path / "bad.yaml", [_question(difficulty="expert")])
        with pytest.raises(ValueError, match="unknown difficulty"):
            load_catalog(path)

    def test_duplicate_ids(self, tmp_path):
        path = _write(tmp_path / "bad.yaml", [_question(id="x"), _question(id="x")])
        with pytest.raises(ValueError, match="Duplicate"):
            load_catalog(path)


class TestQuestion:
    def test_is_correct(self, pool):
        assert pool[0].is_correct(0)
        assert not pool[0].is_correct(1)

    def test_hides_answer(self, pool):
        d = pool[0].to_dict(include_answer=False)
        assert "correctAnswerIndex" not in d
        assert "explanation" not in d

    def test_round_trip(self, pool):
        for q in pool:
            assert Question.from_dict(q.to_dict()) == q


class TestCatalogQuestionBank:
    def test_discovers_catalogs(self, sample_catalog_dir):
        bank = CatalogQuestionBank(sample_catalog_dir)
        assert [q.id for q in bank.get_quizzes()] == ["sample"]
        assert len(bank.get_questions("sample")) == 3

    def test_skips_broken_catalog(self, sample_catalog_dir, caplog):
        _write(sample_catalog_dir / "broken.yaml", [_question(options=[])])
        bank = CatalogQuestionBank(sample_catalog_dir)
        assert [q.id for q in bank.get_quizzes()] == ["sample"]
        assert "broken.yaml" in caplog.text

    def test_unknown_quiz(self, sample_catalog_dir):
        bank = CatalogQuestionBank(sample_catalog_dir)
        with pytest.raises(ValueError, match="Unknown quiz"):
            bank.get_questions("nope")

    def test_bundled_catalogs(self):
        bank = CatalogQuestionBank()
        quizzes = {q.id: q for q in bank.get_quizzes()}
        assert set(quizzes) == {
            "java-arrays", "java-linked-lists", "python-lists", "javascript-promises",
        }
        for quiz_id, quiz in quizzes.items():
            questions = bank.get_questions(quiz_id)
            assert quiz.question_count == len(questions) == 9
            for difficulty in Difficulty:
                assert sum(q.difficulty == difficulty for q in questions) == 3


class TestInMemoryQuestionBank:
    def test_returns_copy(self, bank):
        questions = bank.get_questions("test-quiz")
        questions.clear()
        assert len(bank.get_questions("test-quiz")) == 6

    def test_duplicate_quiz(self, bank, quiz, pool):
        with pytest.raises(ValueError, match="Duplicate quiz"):
            bank.add(Catalog(quiz=quiz, questions=pool))

    def test_empty(self):
        assert InMemoryQuestionBank().get_quizzes() == []

    def test_get_quiz(self, bank, quiz):
        assert bank.get_quiz("test-quiz") == quiz
        assert bank.get_quiz("nope") is None

    def test_filter_by_language(self, bank, quiz):
        py_quiz = Quiz(id="py", title="Py", topic_name="Lists", language="Python", question_count=0)
        bank.add(Catalog(quiz=py_quiz, questions=[]))
        assert bank.get_languages() == ["Java", "Python"]
        assert bank.get_quizzes("Python") == [py_quiz]
        assert bank.get_quizzes("Java") == [quiz]
        assert bank.get_quizzes("java") == []
        assert len(bank.get_quizzes()) == 2

    def test_bundled_languages(self):
        bank = CatalogQuestionBank()
        assert bank.get_languages() == ["Java", "JavaScript", "Python"]
        assert {q.id for q in bank.get_quizzes("Java")} == {"java-arrays", "java-linked-lists"}
