"""Food log endpoints authenticated with hosted-provider access tokens."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from food_analyzer.api.models import FoodLogRequest, ScaleRequest
from food_analyzer.services.food_log import FoodLogService, scale_to_weight
from food_analyzer.services.identity import bearer_token

if TYPE_CHECKING:
    from food_analyzer.containers import AppContainer

router = APIRouter(prefix="/food-logs", tags=["food-logs"])


def get_food_log_service(request: Request) -> FoodLogService:
    """Return the food log service or fail when no database is configured."""
    container: AppContainer = request.app.state.container
    if container.food_log_service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Food log is not configured",
        )
    return container.food_log_service


async def require_user(
    request: Request, authorization: str | None = Header(default=None)
) -> UUID:
    """Ensure requests carry a valid access token and return its user id."""
    container: AppContainer = request.app.state.container
    token = bearer_token(authorization)
    if token is None or container.identity_provider is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    user_id = container.identity_provider.resolve_user(token)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return user_id


@router.post("", status_code=status.HTTP_201_CREATED)
async def log_food(
    payload: FoodLogRequest,
    service: FoodLogService = Depends(get_food_log_service),
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Store a finalized analysis result in the user's log."""
    record = service.log_food(
        user_id=user_id,
        result=payload.result,
        original=payload.original,
        image_url=payload.image_url,
    )
    return {
        "id": str(record.id),
        "corrected_by_user": record.entry.corrected_by_user,
    }


@router.get("/daily-count")
async def daily_count(
    request: Request,
    service: FoodLogService = Depends(get_food_log_service),
    user_id: UUID = Depends(require_user),
) -> dict[str, int]:
    """Return how many meals the user logged today and the daily limit."""
    container: AppContainer = request.app.state.container
    return {
        "count": service.daily_analysis_count(user_id),
        "limit": container.settings.daily_analysis_limit,
    }


@router.post("/scale")
async def scale(payload: ScaleRequest) -> dict[str, object]:
    """Rescale a result's calories and macros to a new weight."""
    scaled = scale_to_weight(payload.result, payload.weight_grams)
    return scaled.model_dump(exclude_none=True)
