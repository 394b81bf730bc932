"""Tests for competency classification."""

import pytest

from quizent.engine.competency import Competency, classify_competency


@pytest.mark.parametrize(
    "accuracy,expected",
    [
        (100, Competency.STRONG),
        (70, Competency.STRONG),
        (69.999, Competency.MEDIUM),
        (40, Competency.MEDIUM),
        (39.999, Competency.WEAK),
        (0, Competency.WEAK),
    ],
)
def test_boundaries(accuracy, expected):
    assert classify_competency(accuracy) == expected


def test_competency_values():
    assert [c.value for c in Competency] == ["strong", "medium", "weak"]
