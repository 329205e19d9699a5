"""Submission store — persistence seam for accepted applications.

Redis-backed in production; an in-memory store with TTL and eviction is used
when Redis is disabled or unreachable, and in tests.
"""

import json
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Callable, Optional

import structlog
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = structlog.get_logger()

RECENT_LIMIT = 100


class StoreUnavailableError(Exception):
    """The store could not be reached, even after retries."""


class SubmissionStore(ABC):
    """Stores accepted application records keyed by id."""

    @abstractmethod
    async def save(self, record: dict) -> None:
        """Persist a record. ``record["id"]`` is the key."""

    @abstractmethod
    async def get(self, submission_id: str) -> Optional[dict]:
        """Return a stored record, or None if unknown or expired."""

    @abstractmethod
    async def list_recent(self, limit: int = 20) -> list[str]:
        """Most recently stored ids, newest first."""

    @abstractmethod
    async def ping(self) -> bool:
        """True when the backing store is reachable."""

    async def close(self) -> None:
        return None


class RedisSubmissionStore(SubmissionStore):
    """Application records in Redis, as JSON with a TTL."""

    def __init__(
        self,
        redis_client,
        ttl_seconds: int = 30 * 86400,
        max_retries: int = 3,
        backoff_min: float = 0.5,
        backoff_max: float = 5.0,
    ):
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds
        self.max_retries = max_retries
        self.backoff_min = backoff_min
        self.backoff_max = backoff_max
        self._prefix = "arena:submission:"

    def _key(self, submission_id: str) -> str:
        return f"{self._prefix}{submission_id}"

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=self.backoff_min, max=self.backoff_max),
            retry=retry_if_exception_type((RedisConnectionError, RedisTimeoutError)),
            before_sleep=lambda retry_state: logger.warning(
                "store_retry",
                attempt=retry_state.attempt_number,
                wait=retry_state.next_action.sleep,
            ),
        )

    async def save(self, record: dict) -> None:
        submission_id = record["id"]
        payload = json.dumps(record, default=str)
        try:
            async for attempt in self._retrying():
                with attempt:
                    # MULTI/EXEC: a retried write never leaves a half-applied record
                    async with self.redis.pipeline(transaction=True) as pipe:
                        pipe.setex(self._key(submission_id), self.ttl_seconds, payload)
                        pipe.lpush(f"{self._prefix}recent", submission_id)
                        pipe.ltrim(f"{self._prefix}recent", 0, RECENT_LIMIT - 1)
                        await pipe.execute()
        except RetryError as e:
            logger.error("store_write_failed", submission_id=submission_id, attempts=self.max_retries)
            raise StoreUnavailableError(str(e.last_attempt.exception())) from e

        logger.info(
            "submission_stored",
            submission_id=submission_id,
            application_type=record.get("applicationType"),
        )

    async def get(self, submission_id: str) -> Optional[dict]:
        try:
            data = await self.redis.get(self._key(submission_id))
        except (RedisConnectionError, RedisTimeoutError) as e:
            raise StoreUnavailableError(str(e)) from e
        if data is None:
            return None
        return json.loads(data)

    async def list_recent(self, limit: int = 20) -> list[str]:
        try:
            return await self.redis.lrange(f"{self._prefix}recent", 0, limit - 1)
        except (RedisConnectionError, RedisTimeoutError) as e:
            raise StoreUnavailableError(str(e)) from e

    async def ping(self) -> bool:
        return bool(await self.redis.ping())

    async def close(self) -> None:
        await self.redis.close()


class InMemorySubmissionStore(SubmissionStore):
    """Process-local store with per-entry expiry and oldest-first eviction."""

    def __init__(
        self,
        ttl_seconds: int = 30 * 86400,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, dict]] = OrderedDict()

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]

    async def save(self, record: dict) -> None:
        self._purge_expired()
        submission_id = record["id"]
        self._entries.pop(submission_id, None)
        while len(self._entries) >= self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("submission_evicted", submission_id=evicted)

        # Round-trip through JSON so callers never share state with the store
        stored = json.loads(json.dumps(record, default=str))
        self._entries[submission_id] = (self._clock() + self.ttl_seconds, stored)
        logger.info(
            "submission_stored",
            submission_id=submission_id,
            application_type=record.get("applicationType"),
        )

    async def get(self, submission_id: str) -> Optional[dict]:
        self._purge_expired()
        entry = self._entries.get(submission_id)
        if entry is None:
            return None
        return json.loads(json.dumps(entry[1]))

    async def list_recent(self, limit: int = 20) -> list[str]:
        self._purge_expired()
        return list(reversed(self._entries.keys()))[:limit]

    async def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        self._purge_expired()
        return len(self._entries)
