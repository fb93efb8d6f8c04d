"""OpenAI Chat Completions client for meal photo analysis."""

import logging
from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from food_analyzer.domain.errors import ExternalModelError
from food_analyzer.services.analysis import AnalysisClient

logger = logging.getLogger(__name__)

MODEL_FAILURE_MESSAGE = "Analiz sırasında bir hata oluştu."


@dataclass
class OpenAIChatClient(AnalysisClient):
    """Analysis client backed by OpenAI chat completions in JSON mode."""

    client: AsyncOpenAI
    json_mode: bool = True

    @classmethod
    def create(cls, api_key: str, timeout_seconds: float) -> "OpenAIChatClient":
        """Create a client that fails fast instead of retrying."""
        return cls(
            client=AsyncOpenAI(
                api_key=api_key, timeout=timeout_seconds, max_retries=0
            )
        )

    async def complete(
        self,
        *,
        model: str,
        messages: list[dict[str, object]],
        max_tokens: int,
    ) -> str:
        """Send one chat completion request and return the reply text."""
        request_payload: dict[str, object] = {
            "model": model,
            "messages": messages,
            "max_tokens": max_tokens,
        }
        if self.json_mode:
            request_payload["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(**request_payload)
        except OpenAIError as exc:
            logger.exception("OpenAI chat completion failed")
            raise ExternalModelError(MODEL_FAILURE_MESSAGE) from exc
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
