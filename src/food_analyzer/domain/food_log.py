"""Domain models for the food log."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class FoodLogEntry:
    """A finalized analysis result to be stored in a user's log."""

    user_id: UUID
    logged_at: datetime
    food_name: str
    portion_size: str
    weight_grams: float
    calories: float
    protein: float
    carbs: float
    fat: float
    corrected_by_user: bool
    image_url: str | None = None


@dataclass(frozen=True)
class FoodLogRecord:
    """Stored food log row with its identifier."""

    id: UUID
    entry: FoodLogEntry
