"""Per-network-identifier request rate limiting."""

import logging
import math
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

from food_analyzer.domain.errors import RateLimitedError

logger = logging.getLogger(__name__)

UNKNOWN_IDENTIFIER = "unknown"
MAX_TRACKED_KEYS = 10_000
SECONDS_PER_MINUTE = 60


@dataclass(frozen=True)
class RateWindow:
    """Request count observed in the current window for one identifier."""

    started_at: datetime
    count: int


class RateLimitStore(Protocol):
    """Counter store keyed by network identifier."""

    def hit(self, key: str, window_seconds: int, now: datetime) -> RateWindow:
        """Record one request for the key and return its current window."""


@dataclass
class InMemoryRateLimitStore(RateLimitStore):
    """Process-local fixed-window counter store.

    Windows are kept in the order they were opened. Once more than `max_keys`
    identifiers are tracked, the oldest windows are dropped first.
    """

    _windows: dict[str, RateWindow]
    max_keys: int

    def __init__(self, max_keys: int = MAX_TRACKED_KEYS) -> None:
        self._windows = {}
        self._lock = threading.Lock()
        self.max_keys = max_keys

    def hit(self, key: str, window_seconds: int, now: datetime) -> RateWindow:
        """Increment the key's counter, opening a new window if expired."""
        length = timedelta(seconds=window_seconds)
        with self._lock:
            window = self._windows.get(key)
            if window is None or now >= window.started_at + length:
                # Reinsert so dict order follows window start time.
                self._windows.pop(key, None)
                window = RateWindow(started_at=now, count=1)
            else:
                window = RateWindow(started_at=window.started_at, count=window.count + 1)
            self._windows[key] = window
            while len(self._windows) > self.max_keys:
                del self._windows[next(iter(self._windows))]
            return window


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class RateLimiter:
    """Allows a fixed number of requests per identifier per window."""

    store: RateLimitStore
    max_requests: int
    window_seconds: int
    clock: Callable[[], datetime] = _utc_now

    def check(self, identifier: str) -> None:
        """Count a request and raise RateLimitedError once over the limit."""
        now = self.clock()
        window = self.store.hit(identifier, self.window_seconds, now)
        if window.count <= self.max_requests:
            return
        window_end = window.started_at + timedelta(seconds=self.window_seconds)
        retry_after = max(1, math.ceil((window_end - now).total_seconds()))
        logger.warning(
            "Rate limit exceeded for %s (%s requests)", identifier, window.count
        )
        raise RateLimitedError(
            _wait_message(retry_after), retry_after_seconds=retry_after
        )


def network_identifier(forwarded_for: str | None) -> str:
    """Return the client address from an X-Forwarded-For header value."""
    if not forwarded_for:
        return UNKNOWN_IDENTIFIER
    first = forwarded_for.split(",")[0].strip()
    return first or UNKNOWN_IDENTIFIER


def _wait_message(retry_after_seconds: int) -> str:
    if retry_after_seconds >= SECONDS_PER_MINUTE:
        minutes = math.ceil(retry_after_seconds / SECONDS_PER_MINUTE)
        return f"Çok fazla istek gönderdiniz. Lütfen {minutes} dakika bekleyin."
    return (
        "Çok fazla istek gönderdiniz. "
        f"Lütfen {retry_after_seconds} saniye bekleyin."
    )
