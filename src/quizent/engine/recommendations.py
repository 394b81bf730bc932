"""AI study recommendations via the Gemini API, with a local fallback."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional, Sequence

import httpx
from pydantic import ValidationError

from quizent.config.settings import Settings
from quizent.engine.insights import Recommendation, fallback_recommendation
from quizent.engine.performance import TopicPerformance

logger = logging.getLogger(__name__)

RATE_LIMIT_STATUSES = (429, 503)

PROMPT_TEMPLATE = """You are an expert programming tutor. Based on the following student performance data, provide personalized learning recommendations.

Student Performance Summary:
{summary}

Respond in the following JSON format ONLY (no markdown, no code blocks, just raw JSON):
{{
  "summary": "A 2-3 sentence overall assessment of the student's performance",
  "strengths": ["strength 1", "strength 2"],
  "weaknesses": ["weakness 1", "weakness 2"],
  "recommendations": ["specific actionable recommendation 1", "specific actionable recommendation 2", "specific actionable recommendation 3"],
  "studyPlan": "A paragraph describing a recommended study plan for the next week"
}}"""

_FENCE = re.compile(r"```(?:json)?\n?")


class RecommendationError(Exception):
    """The generative service failed or answered with an unusable payload."""


def build_prompt(performances: Sequence[TopicPerformance]) -> str:
    summary = "\n".join(
        f"{p.topic_name} ({p.language}): {p.accuracy:.0f}% accuracy - {p.competency.value}"
        for p in performances
    )
    return PROMPT_TEMPLATE.format(summary=summary)


def strip_code_fences(text: str) -> str:
    return _FENCE.sub("", text).strip()


def parse_recommendation(text: str) -> Recommendation:
    """Parse generated text into a Recommendation or raise RecommendationError."""
    try:
        data = json.loads(strip_code_fences(text))
        return Recommendation.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise RecommendationError(f"Malformed recommendation payload: {e}") from e


class RecommendationService:
    """Asks the generative service for advice; never raises to the caller.

    Without an API key, or on any failure (network, timeout, non-2xx,
    malformed JSON), the deterministic fallback is returned instead. No
    retries are made.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or Settings.load()
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.gemini.timeout_seconds)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def recommend(self, performances: Sequence[TopicPerformance]) -> Recommendation:
        api_key = self.settings.gemini.get_api_key()
        if not api_key:
            logger.debug("No Gemini API key configured, using local recommendations")
            return fallback_recommendation(performances)

        try:
            text = await self._generate(build_prompt(performances), api_key)
            return parse_recommendation(text)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status in RATE_LIMIT_STATUSES:
                logger.warning(
                    "Gemini API limit reached (%s), falling back to local recommendations",
                    status,
                )
            else:
                logger.error("Gemini API error: %s", status)
        except (httpx.HTTPError, RecommendationError) as e:
            logger.error("Gemini request failed: %s", e)
        except Exception:
            logger.exception("Unexpected failure while generating recommendations")
        return fallback_recommendation(performances)

    async def _generate(self, prompt: str, api_key: str) -> str:
        gemini = self.settings.gemini
        payload: Dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": gemini.temperature,
                "maxOutputTokens": gemini.max_output_tokens,
            },
        }
        r = await self._get_client().post(
            gemini.endpoint(),
            params={"key": api_key},
            json=payload,
            timeout=gemini.timeout_seconds,
        )
        r.raise_for_status()
        try:
            data = r.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise RecommendationError(f"Unexpected Gemini response: {r.text[:200]}") from e
        if not isinstance(text, str):
            raise RecommendationError(f"Gemini returned no text: {r.text[:200]}")
        return text
