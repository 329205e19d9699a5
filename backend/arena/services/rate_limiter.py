"""Rate limiter — token bucket per client for application submissions."""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

from arena.config import get_settings


@dataclass
class _Bucket:
    tokens: float
    updated_at: float


class TokenBucketRateLimiter:
    """In-memory token bucket rate limiter with a bounded client table.

    Tokens refill continuously at ``max_tokens / refill_seconds`` per second.
    A bucket that has refilled completely carries no state and is dropped, so
    the table only holds clients that are currently below their full budget.
    When more than ``max_clients`` such clients exist, the least recently
    seen one is forgotten.

    For production with multiple instances, swap to Redis-backed implementation.
    """

    def __init__(
        self,
        max_tokens: Optional[int] = None,
        refill_seconds: Optional[int] = None,
        max_clients: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        settings = get_settings()
        self.max_tokens = max_tokens or settings.RATE_LIMIT_MAX_SUBMISSIONS
        self.refill_seconds = refill_seconds or settings.RATE_LIMIT_WINDOW_SECONDS
        self.max_clients = max_clients or settings.RATE_LIMIT_MAX_CLIENTS
        self._clock = clock
        self._buckets: OrderedDict[str, _Bucket] = OrderedDict()

    def _current(self, key: str, now: float) -> Optional[_Bucket]:
        """The client's bucket brought up to date, or None when it is full."""
        bucket = self._buckets.get(key)
        if bucket is None:
            return None
        refilled = (now - bucket.updated_at) * self.max_tokens / self.refill_seconds
        bucket.tokens = min(self.max_tokens, bucket.tokens + refilled)
        bucket.updated_at = now
        if bucket.tokens >= self.max_tokens:
            del self._buckets[key]
            return None
        return bucket

    def _prune(self, now: float) -> None:
        # Oldest entries have had the longest to refill
        while self._buckets:
            oldest = next(iter(self._buckets))
            if self._current(oldest, now) is not None:
                break
        while len(self._buckets) > self.max_clients:
            self._buckets.popitem(last=False)

    def allow_request(self, key: str = "global") -> bool:
        """Check if a request is allowed and consume a token.

        Args:
            key: Rate limit key (client IP, or "global")

        Returns:
            True if request is allowed, False if rate limited
        """
        now = self._clock()
        bucket = self._current(key, now)
        if bucket is None:
            bucket = _Bucket(tokens=float(self.max_tokens), updated_at=now)
            self._buckets[key] = bucket
        self._buckets.move_to_end(key)

        allowed = bucket.tokens >= 1
        if allowed:
            bucket.tokens -= 1

        self._prune(now)
        return allowed

    def remaining_tokens(self, key: str = "global") -> int:
        """Get remaining whole tokens for a key without consuming."""
        bucket = self._current(key, self._clock())
        if bucket is None:
            return self.max_tokens
        return int(bucket.tokens)

    def reset_time(self, key: str = "global") -> float:
        """Seconds until the next whole token is available."""
        bucket = self._current(key, self._clock())
        if bucket is None or bucket.tokens >= 1:
            return 0
        return (1 - bucket.tokens) * self.refill_seconds / self.max_tokens

    def reset(self, key: Optional[str] = None) -> None:
        """Forget one client's bucket, or all of them."""
        if key is None:
            self._buckets.clear()
        else:
            self._buckets.pop(key, None)

    def __len__(self) -> int:
        return len(self._buckets)
