"""YAML quiz catalog parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from quizent.engine.adaptive import Difficulty

OPTION_COUNT = 4


@dataclass(frozen=True)
class Quiz:
    id: str
    title: str
    topic_name: str
    language: str
    question_count: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "topicName": self.topic_name,
            "language": self.language,
            "questionCount": self.question_count,
        }


@dataclass(frozen=True)
class Question:
    id: str
    quiz_id: str
    difficulty: Difficulty
    text: str
    options: tuple[str, ...]
    correct_answer_index: int
    explanation: Optional[str] = None

    def is_correct(self, selected_index: int) -> bool:
        return selected_index == self.correct_answer_index

    def to_dict(self, include_answer: bool = True) -> dict:
        d = {
            "id": self.id,
            "quizId": self.quiz_id,
            "difficulty": self.difficulty.value,
            "text": self.text,
            "options": list(self.options),
        }
        if include_answer:
            d["correctAnswerIndex"] = self.correct_answer_index
            d["explanation"] = self.explanation
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Question:
        return cls(
            id=data["id"],
            quiz_id=data["quizId"],
            difficulty=Difficulty(data["difficulty"]),
            text=data["text"],
            options=tuple(data["options"]),
            correct_answer_index=data["correctAnswerIndex"],
            explanation=data.get("explanation"),
        )


@dataclass
class Catalog:
    quiz: Quiz
    questions: list[Question] = field(default_factory=list)


def _parse_question(raw: dict, quiz_id: str, index: int) -> Question:
    question_id = raw.get("id") or f"{quiz_id}_q_{index}"
    options = raw.get("options") or []
    if len(options) != OPTION_COUNT:
        raise ValueError(
            f"Question {question_id} must have {OPTION_COUNT} options, got {len(options)}"
        )
    correct = raw.get("correct_answer")
    if not isinstance(correct, int) or not 0 <= correct < OPTION_COUNT:
        raise ValueError(f"Question {question_id} has invalid correct_answer: {correct!r}")
    try:
        difficulty = Difficulty(raw.get("difficulty"))
    except ValueError:
        raise ValueError(
            f"Question {question_id} has unknown difficulty: {raw.get('difficulty')!r}"
        ) from None

    return Question(
        id=question_id,
        quiz_id=quiz_id,
        difficulty=difficulty,
        text=raw.get("text", ""),
        options=tuple(str(o) for o in options),
        correct_answer_index=correct,
        explanation=raw.get("explanation"),
    )


def load_catalog(catalog_file: Path) -> Catalog:
    """Load one quiz and its question pool from a YAML file."""
    with open(catalog_file) as f:
        data = yaml.safe_load(f)

    q = data["quiz"]
    quiz_id = q.get("id", catalog_file.stem)
    questions = [
        _parse_question(raw, quiz_id, i)
        for i, raw in enumerate(data.get("questions") or [])
    ]
    seen: set[str] = set()
    for question in questions:
        if question.id in seen:
            raise ValueError(f"Duplicate question id in {catalog_file.name}: {question.id}")
        seen.add(question.id)

    quiz = Quiz(
        id=quiz_id,
        title=q["title"],
        topic_name=q["topic"],
        language=q["language"],
        question_count=len(questions),
    )
    return Catalog(quiz=quiz, questions=questions)
