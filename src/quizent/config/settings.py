"""Configuration model for Quizent."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from quizent.engine.adaptive import Difficulty


class QuizConfig(BaseModel):
    max_questions: int = Field(default=9, ge=1)
    starting_difficulty: Difficulty = Difficulty.MEDIUM


class GeminiConfig(BaseModel):
    api_key: Optional[str] = Field(default=None)
    model: str = "gemini-2.0-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    temperature: float = 0.7
    max_output_tokens: int = 1024
    timeout_seconds: float = 15.0

    def get_api_key(self) -> Optional[str]:
        return self.api_key or os.environ.get("GEMINI_API_KEY")

    def get_model(self) -> str:
        return os.environ.get("QUIZENT_GEMINI_MODEL") or self.model

    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.get_model()}:generateContent"


class Settings(BaseModel):
    quiz: QuizConfig = Field(default_factory=QuizConfig)
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    catalog_dir: Optional[Path] = None
    data_dir: Path = Path.home() / ".quizent"

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        config_path = config_path or Path.home() / ".quizent" / "config.yaml"
        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        return cls()

    def save(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        config_path = self.data_dir / "config.yaml"
        with open(config_path, "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False)
