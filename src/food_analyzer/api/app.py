"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from food_analyzer.api.food_logs import router as food_logs_router
from food_analyzer.app_logging import configure_logging
from food_analyzer.containers import AppContainer
from food_analyzer.domain.analysis import AnalysisRequest
from food_analyzer.domain.errors import (
    AnalysisError,
    InvalidRequestError,
    RateLimitedError,
)
from food_analyzer.services.quota import utc_today
from food_analyzer.services.rate_limit import network_identifier

INVALID_REQUEST_MESSAGE = "Geçersiz veri formatı"
UNEXPECTED_ERROR_MESSAGE = "Analiz sırasında bir hata oluştu."


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(food_logs_router)

    @app.exception_handler(AnalysisError)
    async def analysis_error_handler(
        request: Request, exc: AnalysisError
    ) -> JSONResponse:
        """Render domain errors as `{"error": ...}` bodies."""
        content: dict[str, object] = {"error": exc.message}
        headers: dict[str, str] | None = None
        if isinstance(exc, InvalidRequestError):
            content["details"] = exc.details
        if isinstance(exc, RateLimitedError):
            headers = {"Retry-After": str(exc.retry_after_seconds)}
        return JSONResponse(content, status_code=exc.status_code, headers=headers)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Log unhandled failures and render a generic `{"error": ...}` body."""
        logger.error(
            "Unhandled error on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            {"error": UNEXPECTED_ERROR_MESSAGE},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/analyze")
    async def analyze(request: Request) -> JSONResponse:
        """Estimate nutrition for uploaded meal photos."""
        state_container: AppContainer = request.app.state.container
        settings = state_container.settings

        analysis_request = _parse_analysis_request(await request.body())

        identifier = network_identifier(request.headers.get("x-forwarded-for"))
        state_container.rate_limiter.check(identifier)

        today = utc_today()
        used = state_container.device_quota.check(
            request.cookies.get(settings.usage_cookie_name), today
        )

        result = await state_container.analysis_service.analyze(analysis_request)

        response = JSONResponse(result.model_dump(exclude_none=True))
        response.set_cookie(
            key=settings.usage_cookie_name,
            value=state_container.device_quota.issue_token(today, used + 1),
            max_age=settings.usage_cookie_max_age_seconds,
            httponly=True,
            secure=settings.is_production,
            samesite="strict",
        )
        return response

    return app


def _parse_analysis_request(body: bytes) -> AnalysisRequest:
    try:
        return AnalysisRequest.model_validate_json(body)
    except ValidationError as exc:
        raise InvalidRequestError(
            INVALID_REQUEST_MESSAGE,
            details=exc.errors(
                include_url=False, include_context=False, include_input=False
            ),
        ) from exc
