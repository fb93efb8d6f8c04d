"""Domain models for device usage tracking."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class UsageRecord:
    """Number of analyses a device performed on a given UTC day."""

    day: date
    count: int

    def to_token(self) -> str:
        """Serialize the record as a `YYYY-MM-DD:count` token."""
        return f"{self.day.isoformat()}:{self.count}"
