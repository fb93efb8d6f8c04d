"""Food log persistence and result editing helpers."""

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from food_analyzer.domain.analysis import AnalysisResult
from food_analyzer.domain.food_log import FoodLogEntry, FoodLogRecord

logger = logging.getLogger(__name__)


class FoodLogRepository(Protocol):
    """Persistence interface for food log entries."""

    def create_log(self, entry: FoodLogEntry) -> UUID:
        """Store an entry and return its id."""

    def count_logs(self, user_id: UUID, start: datetime, end: datetime) -> int:
        """Count a user's entries logged within a time range."""


@dataclass
class FoodLogService:
    """Service that stores finalized analysis results."""

    repository: FoodLogRepository

    def log_food(
        self,
        user_id: UUID,
        result: AnalysisResult,
        original: AnalysisResult | None = None,
        image_url: str | None = None,
    ) -> FoodLogRecord:
        """Persist a result, flagging it when the user edited the AI estimate."""
        corrected = original is not None and original != result
        entry = FoodLogEntry(
            user_id=user_id,
            logged_at=datetime.now(tz=UTC),
            food_name=result.food_name,
            portion_size=result.portion_size,
            weight_grams=result.weight_grams,
            calories=result.calories,
            protein=result.protein,
            carbs=result.carbs,
            fat=result.fat,
            corrected_by_user=corrected,
            image_url=image_url,
        )
        log_id = self.repository.create_log(entry)
        logger.info("Logged food %s for user %s", log_id, user_id)
        return FoodLogRecord(id=log_id, entry=entry)

    def daily_analysis_count(self, user_id: UUID) -> int:
        """Return how many entries the user logged on the current UTC day."""
        now = datetime.now(tz=UTC)
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=1)
        return self.repository.count_logs(user_id, start, end)


def scale_to_weight(result: AnalysisResult, weight_grams: float) -> AnalysisResult:
    """Rescale calories and macros to a new total weight.

    Per-gram ratios come from the given result. Values are rounded half up to
    whole numbers. A zero-weight result has no ratios and keeps its macros.
    """
    if result.weight_grams <= 0:
        return result.model_copy(update={"weight_grams": weight_grams})
    factor = weight_grams / result.weight_grams
    return result.model_copy(
        update={
            "weight_grams": weight_grams,
            "calories": _round_half_up(result.calories * factor),
            "protein": _round_half_up(result.protein * factor),
            "carbs": _round_half_up(result.carbs * factor),
            "fat": _round_half_up(result.fat * factor),
        }
    )


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))
