"""Deterministic, network-free study recommendations."""

from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field

from quizent.engine.competency import Competency
from quizent.engine.performance import TopicPerformance

MAX_RECOMMENDATIONS = 4

GENERAL_TIPS = [
    "Practice with adaptive quizzes daily to build consistency",
    "Review incorrect answers to understand the concepts behind them",
]
CLOSING_TIP = "Focus on understanding concepts rather than memorizing answers"

# Suggested next topic once a learner has worked through one.
NEXT_TOPIC = [
    ("arrays", "Linked Lists"),
    ("linked lists", "Stacks"),
    ("stacks", "Queues"),
    ("promises", "Async/Await"),
]


class Recommendation(BaseModel):
    """Structured study advice, as returned by the generative service."""

    model_config = ConfigDict(populate_by_name=True)

    summary: str
    strengths: list[str]
    weaknesses: list[str]
    recommendations: list[str] = Field(min_length=3, max_length=MAX_RECOMMENDATIONS)
    study_plan: str = Field(alias="studyPlan")

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


def _by_competency(
    performances: Sequence[TopicPerformance], competency: Competency
) -> list[TopicPerformance]:
    return [p for p in performances if p.competency == competency]


def _summary(performances, strong, weak) -> str:
    if strong:
        outlook = "strong proficiency in " + ", ".join(p.topic_name for p in strong)
    else:
        outlook = "room for improvement"
    if weak:
        focus = "Focus on strengthening " + ", ".join(p.topic_name for p in weak) + "."
    else:
        focus = "Keep up the great work!"
    return (
        f"Based on your performance across {len(performances)} topics, "
        f"you show {outlook}. {focus}"
    )


def _study_plan(strong, medium, weak) -> str:
    parts = ["This week, dedicate time each day to focused practice."]
    if weak:
        parts.append(
            f"Start with {weak[0].topic_name} for the first two days, "
            "focusing on easy and medium difficulty questions."
        )
    if medium:
        parts.append(
            f"Then move to {medium[0].topic_name} to solidify your intermediate knowledge."
        )
    if strong:
        parts.append(
            f"End the week by challenging yourself with hard questions in {strong[0].topic_name}."
        )
    parts.append("Review any mistakes at the end of each session.")
    return " ".join(parts)


def fallback_recommendation(performances: Sequence[TopicPerformance]) -> Recommendation:
    """Build recommendations locally from competency tiers."""
    strong = _by_competency(performances, Competency.STRONG)
    medium = _by_competency(performances, Competency.MEDIUM)
    weak = _by_competency(performances, Competency.WEAK)

    if strong:
        strengths = [
            f"Strong understanding of {p.topic_name} with {p.accuracy:.0f}% accuracy"
            for p in strong
        ]
    else:
        strengths = ["You are making progress! Keep practicing to build stronger foundations."]

    if weak:
        weaknesses = [f"{p.topic_name} needs improvement ({p.accuracy:.0f}% accuracy)" for p in weak]
    elif medium:
        weaknesses = [f"{p.topic_name} could be stronger ({p.accuracy:.0f}% accuracy)" for p in medium]
    else:
        weaknesses = ["No significant weaknesses detected. Challenge yourself with harder topics!"]

    recommendations = []
    if weak:
        recommendations.append(f"Start by reviewing the fundamentals of {weak[0].topic_name}")
    recommendations.extend(GENERAL_TIPS)
    if strong:
        recommendations.append(
            f"Try harder difficulty levels in {strong[0].topic_name} to push your limits"
        )
    recommendations.append(CLOSING_TIP)

    return Recommendation(
        summary=_summary(performances, strong, weak),
        strengths=strengths,
        weaknesses=weaknesses,
        recommendations=recommendations[:MAX_RECOMMENDATIONS],
        study_plan=_study_plan(strong, medium, weak),
    )


def attempt_insight(accuracy: float, topic: str = "") -> dict:
    """Quick strength/weakness/recommendation text for a single attempt."""
    topic = topic or "Programming"

    if accuracy >= 80:
        strength = f"You demonstrate strong understanding of {topic}."
        weakness = "Minor mistakes may occur in advanced questions."
        recommendation = "You can now move to harder topics or attempt advanced quizzes."
    elif accuracy >= 50:
        strength = f"You have a basic understanding of {topic}."
        weakness = "Some core concepts still need reinforcement."
        recommendation = f"Review fundamental concepts and attempt another quiz on {topic}."
    else:
        strength = f"You attempted {topic}, which is a good start."
        weakness = "Your accuracy indicates gaps in core understanding."
        recommendation = (
            "Start by reviewing beginner tutorials and practice simple problems "
            "before retaking the quiz."
        )

    lowered = topic.lower()
    for keyword, next_topic in NEXT_TOPIC:
        if keyword in lowered:
            recommendation += f" Practice {next_topic} next."
            break

    return {"strength": strength, "weakness": weakness, "recommendation": recommendation}
