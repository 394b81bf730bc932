"""Tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner

from quizent.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def obj(settings):
    return {"settings": settings}


def test_quizzes(runner, obj):
    result = runner.invoke(main, ["quizzes"], obj=obj)
    assert result.exit_code == 0
    assert "sample: Sample Quiz [Python] (3 questions)" in result.output


def test_quizzes_by_language(runner, obj):
    result = runner.invoke(main, ["quizzes", "--language", "Python"], obj=obj)
    assert result.exit_code == 0
    assert "sample: Sample Quiz" in result.output


def test_quizzes_unknown_language(runner, obj):
    result = runner.invoke(main, ["quizzes", "--language", "Rust"], obj=obj)
    assert result.exit_code != 0
    assert "available: Python" in result.output


def test_play_to_exhaustion(runner, obj):
    # Option 2 is right for the easy and medium questions, wrong for the hard one.
    result = runner.invoke(main, ["play", "sample", "--seed", "1"], input="2\n2\n2\n", obj=obj)
    assert result.exit_code == 0, result.output
    assert "Q1 [Medium]" in result.output
    assert "Score: 2/3" in result.output
    assert "Difficulty path: medium -> hard -> medium -> hard" in result.output


def test_play_unknown_quiz(runner, obj):
    result = runner.invoke(main, ["play", "nope"], obj=obj)
    assert result.exit_code != 0
    assert "Unknown quiz" in result.output


def test_insights(runner, obj, tmp_path, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    attempts = [
        {
            "id": "a1", "quizId": "q", "topicName": "Arrays", "language": "Java",
            "score": 8, "totalQuestions": 9, "accuracy": 85,
            "completedAt": "2024-01-10T10:00:00",
        },
        {
            "id": "a2", "quizId": "q", "topicName": "Linked Lists", "language": "Java",
            "score": 3, "totalQuestions": 9, "accuracy": 30,
            "completedAt": "2024-01-09T10:00:00",
        },
    ]
    path = tmp_path / "attempts.json"
    path.write_text(json.dumps(attempts))

    result = runner.invoke(main, ["insights", str(path), "--today", "2024-01-10"], obj=obj)
    assert result.exit_code == 0, result.output
    assert "Arrays (Java): 85% - strong (1 attempts)" in result.output
    assert "Streak: 2 days" in result.output
    assert "Start by reviewing the fundamentals of Linked Lists" in result.output


def test_insights_invalid_json(runner, obj, tmp_path):
    path = tmp_path / "attempts.json"
    path.write_text("not json")
    result = runner.invoke(main, ["insights", str(path)], obj=obj)
    assert result.exit_code != 0
    assert "not valid JSON" in result.output
