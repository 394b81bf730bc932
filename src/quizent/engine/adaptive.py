"""Adaptive difficulty engine.

Difficulty moves one tier per answer: up after a correct answer, down after
a wrong one. The selector then draws an unanswered question at the target
tier, falling back to neighbouring tiers when the target is exhausted.
"""

from __future__ import annotations

import random
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

if TYPE_CHECKING:
    from quizent.bank.catalog import Question


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def rank(self) -> int:
        return DIFFICULTY_ORDER.index(self)

    @property
    def label(self) -> str:
        return self.value.capitalize()


DIFFICULTY_ORDER: list[Difficulty] = [Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD]

# Tiers tried, in order, once the target tier has no unanswered questions left.
FALLBACK_ORDER: dict[Difficulty, list[Difficulty]] = {
    Difficulty.HARD: [Difficulty.MEDIUM, Difficulty.EASY],
    Difficulty.EASY: [Difficulty.MEDIUM, Difficulty.HARD],
    Difficulty.MEDIUM: [Difficulty.EASY, Difficulty.HARD],
}


def next_difficulty(current: Difficulty, was_correct: bool) -> Difficulty:
    """Step one tier up on a correct answer, one down otherwise, clamped."""
    idx = DIFFICULTY_ORDER.index(Difficulty(current))
    if was_correct:
        return DIFFICULTY_ORDER[min(idx + 1, len(DIFFICULTY_ORDER) - 1)]
    return DIFFICULTY_ORDER[max(idx - 1, 0)]


def _unanswered(
    pool: Iterable[Question], difficulty: Difficulty, answered_ids: set[str]
) -> list[Question]:
    return [q for q in pool if q.difficulty == difficulty and q.id not in answered_ids]


def select_next(
    pool: Sequence[Question],
    target: Difficulty,
    answered_ids: set[str],
    rng: Optional[random.Random] = None,
) -> Optional[Question]:
    """Pick an unanswered question, preferring the target difficulty.

    Returns None once every tier is exhausted; the caller must end the
    session at that point.
    """
    rng = rng or random
    target = Difficulty(target)
    for difficulty in [target, *FALLBACK_ORDER[target]]:
        candidates = _unanswered(pool, difficulty, answered_ids)
        if candidates:
            return rng.choice(candidates)
    return None
