"""Daily per-device analysis quota carried in a client-held token.

The token is a plain `YYYY-MM-DD:count` string stored in an HTTP-only cookie.
A device owner can reset or forge it by editing their own cookie store; the
quota only limits well-behaved clients.
"""

import logging
import re
from dataclasses import dataclass
from datetime import UTC, date, datetime

from food_analyzer.domain.errors import QuotaExceededError
from food_analyzer.domain.usage import UsageRecord

logger = logging.getLogger(__name__)

QUOTA_EXCEEDED_MESSAGE = (
    "Günlük ücretsiz analiz hakkınızı doldurdunuz. Yarın tekrar deneyebilirsiniz."
)

_TOKEN = re.compile(r"(?P<day>\d{4}-\d{2}-\d{2}):(?P<count>\d+)", re.ASCII)


def utc_today() -> date:
    """Return the current UTC calendar date."""
    return datetime.now(tz=UTC).date()


def parse_usage_token(token: str | None, today: date) -> UsageRecord:
    """Read a usage token, resetting to zero when missing, invalid or stale."""
    empty = UsageRecord(day=today, count=0)
    if not token:
        return empty
    match = _TOKEN.fullmatch(token)
    if match is None:
        return empty
    try:
        day = date.fromisoformat(match["day"])
    except ValueError:
        return empty
    count = int(match["count"])
    if day != today:
        return empty
    return UsageRecord(day=day, count=count)


@dataclass
class DeviceQuota:
    """Enforces a daily analysis limit per device."""

    daily_limit: int

    def check(self, token: str | None, today: date) -> int:
        """Return the pre-increment count or raise QuotaExceededError."""
        usage = parse_usage_token(token, today)
        if usage.count >= self.daily_limit:
            logger.info("Device quota exhausted (%s/%s)", usage.count, self.daily_limit)
            raise QuotaExceededError(QUOTA_EXCEEDED_MESSAGE)
        return usage.count

    def issue_token(self, today: date, new_count: int) -> str:
        """Build the token to return to the device."""
        return UsageRecord(day=today, count=new_count).to_token()
