"""Tests for logging, configuration and container wiring."""

import asyncio
import importlib
import logging

from food_analyzer.app_logging import configure_logging
from food_analyzer.config import Settings
from food_analyzer.containers import build_container


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("food_analyzer")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1


def test_settings_flags() -> None:
    settings = Settings(
        openai_api_key="  ",
        supabase_url="https://example.supabase.co",
        supabase_service_key=None,
        environment="production",
    )

    assert settings.model_configured is False
    assert settings.database_configured is False
    assert settings.is_production is True
    assert settings.openai_max_output_tokens == 500
    assert settings.daily_analysis_limit == 2


def test_build_container_without_credentials_serves_demo() -> None:
    settings = Settings(
        openai_api_key=None, supabase_url=None, supabase_service_key=None
    )

    container = build_container(settings)

    assert container.analysis_service.client is None
    assert container.food_log_service is None
    assert container.identity_provider is None
    asyncio.run(container.close_resources())


def test_build_container_with_credentials(settings: Settings) -> None:
    settings.supabase_url = "https://example.supabase.co"
    settings.supabase_service_key = "header.payload.signature"

    container = build_container(settings)

    assert container.analysis_service.client is not None
    assert container.analysis_service.max_output_tokens == 500
    assert container.rate_limiter.max_requests == 60
    assert container.device_quota.daily_limit == 2
    assert container.food_log_service is not None
    assert container.identity_provider is not None
    asyncio.run(container.close_resources())


def test_asgi_app_exposes_routes(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "")
    monkeypatch.setenv("SUPABASE_URL", "")
    module = importlib.import_module("food_analyzer.api.asgi")

    paths = set(module.app.openapi()["paths"])

    assert {"/analyze", "/health", "/food-logs", "/food-logs/daily-count"} <= paths
