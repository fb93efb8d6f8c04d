"""Shared test fixtures."""

import base64
import json
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

import pytest

from food_analyzer.config import Settings
from food_analyzer.containers import AppContainer
from food_analyzer.domain.food_log import FoodLogEntry
from food_analyzer.services.analysis import AnalysisClient, AnalysisService
from food_analyzer.services.food_log import FoodLogRepository, FoodLogService
from food_analyzer.services.identity import IdentityProvider
from food_analyzer.services.quota import DeviceQuota
from food_analyzer.services.rate_limit import InMemoryRateLimitStore, RateLimiter

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"fake-png-body"
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"fake-jpeg-body"
PNG_DATA_URL = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()
JPEG_DATA_URL = "data:image/jpeg;base64," + base64.b64encode(JPEG_BYTES).decode()

USER_TOKEN = "valid-access-token"

MODEL_REPLY: dict[str, object] = {
    "food_name": "Mercimek Çorbası",
    "portion_size": "medium",
    "weight_grams": 300,
    "calories": 270,
    "protein": 14,
    "carbs": 38,
    "fat": 7,
    "items": [
        {
            "name": "Mercimek",
            "calories": 230,
            "protein": 13,
            "carbs": 35,
            "fat": 3,
            "weight_grams": 250,
        },
        {
            "name": "Tereyağı",
            "calories": 40,
            "protein": 1,
            "carbs": 3,
            "fat": 4,
            "weight_grams": 50,
        },
    ],
    "confidence_score": 78,
}


@dataclass
class FakeAnalysisClient(AnalysisClient):
    """Fake model client returning a fixed reply and recording calls."""

    reply: str = field(default_factory=lambda: json.dumps(MODEL_REPLY))
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(
        self,
        *,
        model: str,
        messages: list[dict[str, object]],
        max_tokens: int,
    ) -> str:
        self.calls.append(
            {"model": model, "messages": messages, "max_tokens": max_tokens}
        )
        if self.error is not None:
            raise self.error
        return self.reply


@dataclass
class InMemoryFoodLogRepository(FoodLogRepository):
    """In-memory food log repository for tests."""

    entries: dict[UUID, FoodLogEntry] = field(default_factory=dict)

    def create_log(self, entry: FoodLogEntry) -> UUID:
        log_id = uuid4()
        self.entries[log_id] = entry
        return log_id

    def count_logs(self, user_id: UUID, start: datetime, end: datetime) -> int:
        return sum(
            1
            for entry in self.entries.values()
            if entry.user_id == user_id and start <= entry.logged_at < end
        )


@dataclass
class FakeIdentityProvider(IdentityProvider):
    """Identity provider accepting a fixed set of tokens."""

    users: dict[str, UUID] = field(default_factory=dict)

    def resolve_user(self, access_token: str) -> UUID | None:
        return self.users.get(access_token)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="openai-key",
        supabase_url=None,
        supabase_service_key=None,
        mock_delay_seconds=0,
        environment="test",
    )


@pytest.fixture
def analysis_client() -> FakeAnalysisClient:
    return FakeAnalysisClient()


@pytest.fixture
def food_log_repository() -> InMemoryFoodLogRepository:
    return InMemoryFoodLogRepository()


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def identity_provider(user_id: UUID) -> FakeIdentityProvider:
    return FakeIdentityProvider(users={USER_TOKEN: user_id})


@pytest.fixture
def container(
    settings: Settings,
    analysis_client: FakeAnalysisClient,
    food_log_repository: InMemoryFoodLogRepository,
    identity_provider: FakeIdentityProvider,
) -> AppContainer:
    analysis_service = AnalysisService(
        client=analysis_client,
        model=settings.openai_model,
        max_output_tokens=settings.openai_max_output_tokens,
        mock_delay_seconds=settings.mock_delay_seconds,
    )
    rate_limiter = RateLimiter(
        store=InMemoryRateLimitStore(),
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        analysis_service=analysis_service,
        rate_limiter=rate_limiter,
        device_quota=DeviceQuota(daily_limit=settings.daily_analysis_limit),
        food_log_service=FoodLogService(food_log_repository),
        identity_provider=identity_provider,
        close_resources=close_resources,
    )
