"""Answer records and performance aggregation.

Everything here is a pure reduction over immutable records, so it can be
recomputed from stored history at any time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Iterable, Optional, Sequence, Union

from quizent.engine.adaptive import DIFFICULTY_ORDER, Difficulty
from quizent.engine.competency import Competency, classify_competency


@dataclass(frozen=True)
class Answer:
    id: str
    question_id: str
    selected_option_index: int
    is_correct: bool
    difficulty: Difficulty  # copied from the question when answered
    time_spent: int
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "questionId": self.question_id,
            "selectedOptionIndex": self.selected_option_index,
            "isCorrect": self.is_correct,
            "difficulty": self.difficulty.value,
            "timeSpent": self.time_spent,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Answer:
        return cls(
            id=data["id"],
            question_id=data["questionId"],
            selected_option_index=data["selectedOptionIndex"],
            is_correct=data["isCorrect"],
            difficulty=Difficulty(data["difficulty"]),
            time_spent=data["timeSpent"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


@dataclass
class TierStats:
    correct: int = 0
    total: int = 0


DifficultyBreakdown = dict[Difficulty, TierStats]


def breakdown_to_dict(breakdown: DifficultyBreakdown) -> dict:
    return {
        d.value: {"correct": s.correct, "total": s.total} for d, s in breakdown.items()
    }


def breakdown_from_dict(data: dict) -> DifficultyBreakdown:
    breakdown = {d: TierStats() for d in DIFFICULTY_ORDER}
    for key, stats in (data or {}).items():
        breakdown[Difficulty(key)] = TierStats(stats.get("correct", 0), stats.get("total", 0))
    return breakdown


def aggregate(answers: Iterable[Answer]) -> DifficultyBreakdown:
    """Count correct/total answers per recorded difficulty tier."""
    breakdown = {d: TierStats() for d in DIFFICULTY_ORDER}
    for a in answers:
        stats = breakdown[a.difficulty]
        stats.total += 1
        if a.is_correct:
            stats.correct += 1
    return breakdown


def accuracy_of(answers: Sequence[Answer]) -> float:
    if not answers:
        return 0.0
    return sum(1 for a in answers if a.is_correct) / len(answers) * 100


@dataclass
class Attempt:
    """A completed quiz session, reduced to what history needs."""
    id: str
    quiz_id: str
    topic_name: str
    language: str
    score: int
    total_questions: int
    accuracy: float
    completed_at: datetime
    quiz_title: str = ""
    time_taken: int = 0
    difficulty_breakdown: DifficultyBreakdown = field(
        default_factory=lambda: {d: TierStats() for d in DIFFICULTY_ORDER}
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "quizId": self.quiz_id,
            "quizTitle": self.quiz_title,
            "topicName": self.topic_name,
            "language": self.language,
            "score": self.score,
            "totalQuestions": self.total_questions,
            "accuracy": self.accuracy,
            "timeTaken": self.time_taken,
            "completedAt": self.completed_at.isoformat(),
            "difficultyBreakdown": breakdown_to_dict(self.difficulty_breakdown),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Attempt:
        return cls(
            id=data["id"],
            quiz_id=data["quizId"],
            quiz_title=data.get("quizTitle", ""),
            topic_name=data["topicName"],
            language=data["language"],
            score=data["score"],
            total_questions=data["totalQuestions"],
            accuracy=float(data["accuracy"]),
            time_taken=data.get("timeTaken", 0),
            completed_at=datetime.fromisoformat(data["completedAt"]),
            difficulty_breakdown=breakdown_from_dict(data.get("difficultyBreakdown")),
        )


@dataclass
class QuizResult:
    answers: list[Answer]
    score: int
    accuracy: float
    difficulty_breakdown: DifficultyBreakdown
    competency: Competency

    def to_dict(self) -> dict:
        return {
            "answers": [a.to_dict() for a in self.answers],
            "score": self.score,
            "totalQuestions": len(self.answers),
            "accuracy": self.accuracy,
            "difficultyBreakdown": breakdown_to_dict(self.difficulty_breakdown),
            "topicCompetency": self.competency.value,
        }


def calculate_results(answers: Sequence[Answer]) -> QuizResult:
    accuracy = accuracy_of(answers)
    return QuizResult(
        answers=list(answers),
        score=sum(1 for a in answers if a.is_correct),
        accuracy=accuracy,
        difficulty_breakdown=aggregate(answers),
        competency=classify_competency(accuracy),
    )


# --- Topic aggregation ---


def _canonical(text: str) -> str:
    return re.sub(r"\s+", " ", text.strip()).casefold()


@dataclass(frozen=True)
class TopicId:
    """Topic identity: (name, language) after trim, whitespace collapse and casefold."""
    name: str
    language: str

    @classmethod
    def of(cls, topic_name: str, language: str) -> TopicId:
        return cls(_canonical(topic_name), _canonical(language))

    def __str__(self) -> str:
        return f"{self.name} ({self.language})"


@dataclass
class TopicAggregate:
    topic_name: str  # first spelling seen
    language: str
    average_accuracy: float
    attempt_count: int


def aggregate_by_topic(attempts: Iterable[Attempt]) -> dict[TopicId, TopicAggregate]:
    """Unweighted mean of attempt accuracy per topic.

    Each attempt counts once, however many questions it had.
    """
    totals: dict[TopicId, list[float]] = {}
    names: dict[TopicId, tuple[str, str]] = {}
    for attempt in attempts:
        topic = TopicId.of(attempt.topic_name, attempt.language)
        totals.setdefault(topic, []).append(attempt.accuracy)
        names.setdefault(topic, (attempt.topic_name.strip(), attempt.language.strip()))

    return {
        topic: TopicAggregate(
            topic_name=names[topic][0],
            language=names[topic][1],
            average_accuracy=sum(accuracies) / len(accuracies),
            attempt_count=len(accuracies),
        )
        for topic, accuracies in totals.items()
    }


@dataclass
class TopicPerformance:
    topic_id: TopicId
    topic_name: str
    language: str
    accuracy: float
    competency: Competency
    attempts_count: int

    def to_dict(self) -> dict:
        return {
            "topicId": str(self.topic_id),
            "topicName": self.topic_name,
            "language": self.language,
            "accuracy": self.accuracy,
            "competency": self.competency.value,
            "attemptsCount": self.attempts_count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> TopicPerformance:
        accuracy = float(data["accuracy"])
        return cls(
            topic_id=TopicId.of(data["topicName"], data["language"]),
            topic_name=data["topicName"],
            language=data["language"],
            accuracy=accuracy,
            competency=Competency(data.get("competency") or classify_competency(accuracy)),
            attempts_count=data.get("attemptsCount", 1),
        )


def topic_performances(attempts: Iterable[Attempt]) -> list[TopicPerformance]:
    """Per-topic performance in first-seen order."""
    return [
        TopicPerformance(
            topic_id=topic,
            topic_name=agg.topic_name,
            language=agg.language,
            accuracy=agg.average_accuracy,
            competency=classify_competency(agg.average_accuracy),
            attempts_count=agg.attempt_count,
        )
        for topic, agg in aggregate_by_topic(attempts).items()
    ]


# --- Streaks ---

DateLike = Union[date, datetime, str]


def _to_date(value: DateLike, tz: Optional[tzinfo] = None) -> date:
    if isinstance(value, str):
        if len(value) == 10:
            return date.fromisoformat(value)
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        # Aware timestamps are read on the same calendar as "today".
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


def calc_streak(
    dates: Iterable[DateLike],
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> int:
    """Count consecutive active calendar days ending today or yesterday.

    Several attempts on one day count as a single day, and days after
    today count as today. Walking back from today, any gap of more than
    one day ends the streak. Aware timestamps and the default "today" are
    both taken in ``tz`` (local time when omitted).
    """
    cursor = today or datetime.now(tz).date()
    unique = sorted({min(_to_date(d, tz), cursor) for d in dates}, reverse=True)
    streak = 0
    for day in unique:
        if (cursor - day).days > 1:
            break
        streak += 1
        cursor = day
    return streak
