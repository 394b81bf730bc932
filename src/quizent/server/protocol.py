"""JSON-lines protocol messages exchanged with a quiz front end.

Each request names a method; its params are validated against the model
registered for that method before the handler sees them.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from quizent.bank.catalog import OPTION_COUNT

RequestId = Union[int, str]


class Params(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ListQuizzesParams(Params):
    language: Optional[str] = None


class StartQuizParams(Params):
    quiz_id: str = Field(alias="quizId", min_length=1)
    max_questions: Optional[int] = Field(default=None, alias="maxQuestions", ge=1)


class SubmitAnswerParams(Params):
    selected_option: int = Field(alias="selectedOption", ge=0, lt=OPTION_COUNT)
    time_spent: Optional[int] = Field(default=None, alias="timeSpent", ge=0)


class HistoryParams(Params):
    """Attempt history supplied by the client; the server's own otherwise."""

    attempts: Optional[list[dict[str, Any]]] = None
    today: Optional[date] = None


METHOD_PARAMS: dict[str, type[Params]] = {
    "listQuizzes": ListQuizzesParams,
    "startQuiz": StartQuizParams,
    "getQuestion": Params,
    "submitAnswer": SubmitAnswerParams,
    "nextQuestion": Params,
    "getResults": Params,
    "getPerformance": HistoryParams,
    "getRecommendations": HistoryParams,
}


class Request(BaseModel):
    id: RequestId = 0
    method: str
    params: Params

    @classmethod
    def parse(cls, msg: Any) -> Request:
        """Validate a decoded message; raises ValueError for bad input."""
        if not isinstance(msg, dict):
            raise ValueError("Request must be a JSON object")
        method = msg.get("method")
        model = METHOD_PARAMS.get(method)
        if model is None:
            raise ValueError(f"Unknown method: {method}")
        return cls(
            id=msg.get("id", 0),
            method=method,
            params=model.model_validate(msg.get("params") or {}),
        )


class Response(BaseModel):
    """Reply line: ``result`` on success, ``error`` otherwise."""

    id: RequestId = 0
    result: Optional[dict[str, Any]] = None
    error: Optional[str] = None

    def to_json_line(self) -> str:
        omit = {"result"} if self.error is not None else {"error"}
        return self.model_dump_json(exclude=omit) + "\n"
