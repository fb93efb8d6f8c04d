"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from food_analyzer.adapters.openai_chat_client import OpenAIChatClient
from food_analyzer.adapters.supabase_food_log_repository import (
    SupabaseFoodLogRepository,
)
from food_analyzer.adapters.supabase_identity_provider import (
    SupabaseIdentityProvider,
)
from food_analyzer.config import Settings
from food_analyzer.services.analysis import AnalysisService
from food_analyzer.services.food_log import FoodLogService
from food_analyzer.services.identity import IdentityProvider
from food_analyzer.services.quota import DeviceQuota
from food_analyzer.services.rate_limit import InMemoryRateLimitStore, RateLimiter


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    analysis_service: AnalysisService
    rate_limiter: RateLimiter
    device_quota: DeviceQuota
    food_log_service: FoodLogService | None
    identity_provider: IdentityProvider | None
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()

    model_client: OpenAIChatClient | None = None
    if resolved_settings.model_configured:
        model_client = OpenAIChatClient.create(
            api_key=resolved_settings.openai_api_key,
            timeout_seconds=resolved_settings.openai_timeout_seconds,
        )
    analysis_service = AnalysisService(
        client=model_client,
        model=resolved_settings.openai_model,
        max_output_tokens=resolved_settings.openai_max_output_tokens,
        mock_delay_seconds=resolved_settings.mock_delay_seconds,
    )
    rate_limiter = RateLimiter(
        store=InMemoryRateLimitStore(),
        max_requests=resolved_settings.rate_limit_max_requests,
        window_seconds=resolved_settings.rate_limit_window_seconds,
    )
    device_quota = DeviceQuota(daily_limit=resolved_settings.daily_analysis_limit)

    food_log_service: FoodLogService | None = None
    identity_provider: IdentityProvider | None = None
    if resolved_settings.database_configured:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        food_log_service = FoodLogService(SupabaseFoodLogRepository(supabase_client))
        identity_provider = SupabaseIdentityProvider(supabase_client)

    async def close_resources() -> None:
        if model_client is not None:
            await model_client.close()

    return AppContainer(
        settings=resolved_settings,
        analysis_service=analysis_service,
        rate_limiter=rate_limiter,
        device_quota=device_quota,
        food_log_service=food_log_service,
        identity_provider=identity_provider,
        close_resources=close_resources,
    )
