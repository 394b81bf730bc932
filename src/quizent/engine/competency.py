"""Competency tiers derived from accuracy."""

from __future__ import annotations

from enum import Enum

STRONG_THRESHOLD = 70.0
MEDIUM_THRESHOLD = 40.0


class Competency(str, Enum):
    STRONG = "strong"
    MEDIUM = "medium"
    WEAK = "weak"


def classify_competency(accuracy: float) -> Competency:
    """Map an accuracy percentage (0-100) to a competency tier.

    Each band includes its lower bound: 70 is strong, 40 is medium.
    """
    if accuracy >= STRONG_THRESHOLD:
        return Competency.STRONG
    if accuracy >= MEDIUM_THRESHOLD:
        return Competency.MEDIUM
    return Competency.WEAK
