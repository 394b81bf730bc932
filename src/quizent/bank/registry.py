"""Question bank providers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Protocol

import yaml

from quizent.bank.catalog import Catalog, Question, Quiz, load_catalog

logger = logging.getLogger(__name__)

BUNDLED_CATALOG_DIR = Path(__file__).parent / "catalogs"


class QuestionBank(Protocol):
    """Read-only source of quizzes and their complete question pools."""

    def get_quizzes(self, language: Optional[str] = None) -> list[Quiz]: ...

    def get_quiz(self, quiz_id: str) -> Optional[Quiz]: ...

    def get_languages(self) -> list[str]: ...

    def get_questions(self, quiz_id: str) -> list[Question]: ...


class InMemoryQuestionBank:
    """Question bank over catalogs already held in memory."""

    def __init__(self, catalogs: Iterable[Catalog] = ()):
        self._catalogs: dict[str, Catalog] = {}
        for catalog in catalogs:
            self.add(catalog)

    def add(self, catalog: Catalog) -> None:
        if catalog.quiz.id in self._catalogs:
            raise ValueError(f"Duplicate quiz id: {catalog.quiz.id}")
        self._catalogs[catalog.quiz.id] = catalog

    def get_quizzes(self, language: Optional[str] = None) -> list[Quiz]:
        quizzes = [c.quiz for c in self._catalogs.values()]
        if language is not None:
            quizzes = [q for q in quizzes if q.language == language]
        return quizzes

    def get_quiz(self, quiz_id: str) -> Optional[Quiz]:
        catalog = self._catalogs.get(quiz_id)
        return catalog.quiz if catalog else None

    def get_languages(self) -> list[str]:
        return sorted({c.quiz.language for c in self._catalogs.values()})

    def get_questions(self, quiz_id: str) -> list[Question]:
        catalog = self._catalogs.get(quiz_id)
        if catalog is None:
            raise ValueError(f"Unknown quiz: {quiz_id}")
        return list(catalog.questions)


class CatalogQuestionBank(InMemoryQuestionBank):
    """Discovers and loads *.yaml quiz catalogs from a directory."""

    def __init__(self, catalog_dir: Path | None = None):
        self.catalog_dir = catalog_dir or BUNDLED_CATALOG_DIR
        super().__init__(self._discover())

    def _discover(self) -> list[Catalog]:
        catalogs = []
        for path in sorted(self.catalog_dir.glob("*.yaml")):
            try:
                catalogs.append(load_catalog(path))
            except (KeyError, TypeError, ValueError, yaml.YAMLError) as e:
                logger.warning("Skipping catalog %s: %s", path.name, e)
        return catalogs
