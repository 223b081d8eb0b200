"""Fixed-window rate limiter keyed by operation and caller."""

import asyncio
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class RateLimitRecord:
    """Request count for one key within its current window."""

    count: int
    reset_at: float  # clock() value after which the window has elapsed


@dataclass(frozen=True)
class Quota:
    """Admission budget for one operation class."""

    operation: str
    max_requests: int
    window_ms: int

    def key(self, caller: str) -> str:
        return f"{self.operation}:{caller}"


LOGIN_QUOTA = Quota("login", max_requests=10, window_ms=60_000)
REGISTER_QUOTA = Quota("register", max_requests=5, window_ms=60_000)
CHAT_QUOTA = Quota("chat", max_requests=20, window_ms=60_000)


class RateLimiter:
    """In-memory fixed-window counter shared by the whole process.

    Keys combine an operation class and a caller identity, e.g.
    "login:203.0.113.7" or "chat:<user id>". Bursts of up to twice the quota
    around a window boundary are possible; that is the accepted cost of a
    fixed window.

    Designed for single-process deployments. A multi-process deployment needs
    a shared counter store behind the same admit() contract.
    """

    _instance: Optional["RateLimiter"] = None
    _instance_lock: threading.Lock = threading.Lock()

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._records: dict[str, RateLimitRecord] = {}
        # admit() can run on the threadpool as well as the event loop thread
        self._lock = threading.Lock()
        self._clock = clock

    @classmethod
    def get_instance(cls) -> "RateLimiter":
        """Get the singleton instance (thread-safe)."""
        if cls._instance is None:
            with cls._instance_lock:
                # Double-check locking pattern
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def admit(self, key: str, max_requests: int, window_ms: int) -> bool:
        """Count one request against key and report whether it is allowed.

        A missing or elapsed record restarts the window at count 1. A record
        already at max_requests rejects without being modified.
        """
        with self._lock:
            now = self._clock()
            record = self._records.get(key)

            if record is None or now > record.reset_at:
                self._records[key] = RateLimitRecord(count=1, reset_at=now + window_ms / 1000)
                return True

            if record.count >= max_requests:
                return False

            record.count += 1
            return True

    def get_stats(self) -> dict[str, dict[str, float]]:
        """Get current rate limit statistics."""
        with self._lock:
            now = self._clock()
            return {
                key: {
                    "count": record.count,
                    "resets_in": round(max(0.0, record.reset_at - now), 3),
                }
                for key, record in self._records.items()
            }

    def reset(self, key: str | None = None) -> None:
        """Drop one key's record, or all records."""
        with self._lock:
            if key is None:
                self._records.clear()
            else:
                self._records.pop(key, None)

    def purge_expired(self) -> int:
        """Remove records whose window has elapsed.

        An elapsed record would be replaced on its next admit() anyway, so
        purging never changes an admission decision.

        Returns:
            Number of records removed
        """
        with self._lock:
            now = self._clock()
            expired = [key for key, record in self._records.items() if now > record.reset_at]
            for key in expired:
                del self._records[key]

        if expired:
            logger.info(f"Purged {len(expired)} expired rate limit records")
        return len(expired)


def get_rate_limiter() -> RateLimiter:
    """Get the rate limiter singleton."""
    return RateLimiter.get_instance()


async def rate_limit_cleanup_loop(interval_seconds: float = 3600) -> None:
    """Periodically purge expired records to bound memory use."""
    rate_limiter = get_rate_limiter()
    while True:
        try:
            await asyncio.sleep(interval_seconds)
            rate_limiter.purge_expired()
        except asyncio.CancelledError:
            break
        except Exception as e:
            logger.warning(f"Rate limiter cleanup error: {e}")
