"""Supabase repository for food log entries."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from food_analyzer.domain.food_log import FoodLogEntry
from food_analyzer.services.food_log import FoodLogRepository


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation for the food log."""

    client: Client

    def create_log(self, entry: FoodLogEntry) -> UUID:
        """Insert a food log row and return its id."""
        response = (
            self.client.table("food_logs")
            .insert(
                {
                    "user_id": str(entry.user_id),
                    "logged_at": entry.logged_at.isoformat(),
                    "image_url": entry.image_url,
                    "food_name": entry.food_name,
                    "portion_size": entry.portion_size,
                    "weight_grams": entry.weight_grams,
                    "calories": entry.calories,
                    "protein": entry.protein,
                    "carbs": entry.carbs,
                    "fat": entry.fat,
                    "corrected_by_user": entry.corrected_by_user,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food log")
        return UUID(response.data[0]["id"])

    def count_logs(self, user_id: UUID, start: datetime, end: datetime) -> int:
        """Count a user's rows logged within the time range."""
        response = (
            self.client.table("food_logs")
            .select("id", count="exact")
            .eq("user_id", str(user_id))
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .execute()
        )
        if response.count is not None:
            return response.count
        return len(response.data or [])
