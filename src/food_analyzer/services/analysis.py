"""Nutrition analysis of meal photos using a vision LLM."""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from food_analyzer.domain.analysis import AnalysisRequest, AnalysisResult
from food_analyzer.domain.errors import ReplyParseError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert dietitian. Analyze the meal photos you are \
given and reply with exactly one JSON object in this format:
{
  "food_name": "overall name of the meal, in Turkish",
  "portion_size": "small" | "medium" | "large",
  "weight_grams": estimated total weight in grams,
  "calories": total kcal,
  "protein": total protein in grams,
  "carbs": total carbohydrates in grams,
  "fat": total fat in grams,
  "items": [
    {"name": "component name", "calories": 200, "protein": 30, "carbs": 0, \
"fat": 5, "weight_grams": 150}
  ],
  "confidence_score": confidence from 0 to 100
}
Return only the JSON object, with no other text."""

USER_PROMPT = (
    "What is the nutritional content of this meal? The photos show one single "
    "portion from different angles, not separate meals. Combine them into one "
    "estimate for that portion."
)

EMPTY_REPLY_MESSAGE = "AI yanıtı boş."
INVALID_REPLY_MESSAGE = "AI yanıtı anlaşılamadı."

MOCK_RESULT = AnalysisResult(
    food_name="Izgara Tavuk & Salata (Demo)",
    portion_size="medium",
    weight_grams=350,
    calories=450,
    protein=45,
    carbs=12,
    fat=22,
    confidence_score=85,
    is_mock=True,
)

_LEADING_FENCE = re.compile(r"^```(?:json)?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"```$")


class AnalysisClient(Protocol):
    """Interface for chat-completion calls to a vision model."""

    async def complete(
        self,
        *,
        model: str,
        messages: list[dict[str, object]],
        max_tokens: int,
    ) -> str:
        """Return the raw text of the model reply."""


@dataclass
class AnalysisService:
    """Builds prompts, calls the model and validates its reply.

    Without a client the service serves a fixed demo result so the UI can be
    exercised without a model credential.
    """

    client: AnalysisClient | None
    model: str
    max_output_tokens: int = 500
    mock_delay_seconds: float = 2.0

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """Estimate nutrition for the photographed portion."""
        if self.client is None:
            return await self.mock_result()
        messages = build_prompt(request.images)
        logger.info("Requesting analysis of %s image(s)", len(request.images))
        raw = await self.client.complete(
            model=self.model,
            messages=messages,
            max_tokens=self.max_output_tokens,
        )
        return parse_result(raw)

    async def mock_result(self) -> AnalysisResult:
        """Return the demo result after an artificial delay."""
        logger.info("No model credential configured; serving demo result")
        await asyncio.sleep(self.mock_delay_seconds)
        return MOCK_RESULT.model_copy(deep=True)


def build_prompt(images: list[str]) -> list[dict[str, object]]:
    """Build chat messages for a set of photos of one portion."""
    content: list[dict[str, object]] = [{"type": "text", "text": USER_PROMPT}]
    content.extend({"type": "image_url", "image_url": {"url": image}} for image in images)
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": content},
    ]


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding Markdown code fence, optionally tagged json."""
    text = raw.strip()
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def parse_result(raw: str | None) -> AnalysisResult:
    """Parse a model reply into an AnalysisResult."""
    text = strip_code_fences(raw or "")
    if not text:
        logger.error("Model returned an empty reply")
        raise ReplyParseError(EMPTY_REPLY_MESSAGE)
    try:
        return AnalysisResult.model_validate_json(text)
    except ValidationError as exc:
        logger.error("Model reply failed validation: %s", exc)
        raise ReplyParseError(INVALID_REPLY_MESSAGE) from exc
