"""Back-off gate in front of the reverse-geocoding provider."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

from core.exceptions import ResolverUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProviderUnavailable(ResolverUnavailableError):
    """The provider is cooling down after repeated failures."""


class ProviderBreaker:
    """
    Stop calling a provider after ``max_failures`` consecutive failures.

    While open, calls fail fast with :class:`ProviderUnavailable`. Once
    ``cooldown_seconds`` have passed, calls are let through again as trials:
    a success closes the breaker, a failure restarts the cooldown.
    """

    def __init__(
        self,
        provider: str,
        *,
        max_failures: int = 5,
        cooldown_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.provider = provider
        self.max_failures = max_failures
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self.consecutive_failures = 0
        self._opened_at: float | None = None

    def remaining_cooldown(self) -> float:
        if self._opened_at is None:
            return 0.0
        return max(0.0, self.cooldown_seconds - (self._clock() - self._opened_at))

    @property
    def is_open(self) -> bool:
        return self.remaining_cooldown() > 0

    def record_success(self) -> None:
        if self._opened_at is not None:
            logger.info("%s is answering again; resuming calls", self.provider)
        self.consecutive_failures = 0
        self._opened_at = None

    def record_failure(self) -> None:
        self.consecutive_failures += 1
        if self.consecutive_failures < self.max_failures:
            return
        if self._opened_at is None:
            logger.warning(
                "%s failed %d times in a row; pausing calls for %.0fs",
                self.provider,
                self.consecutive_failures,
                self.cooldown_seconds,
            )
        self._opened_at = self._clock()

    async def call(self, fn: Callable[..., Awaitable[T]], *args, **kwargs) -> T:
        remaining = self.remaining_cooldown()
        if remaining > 0:
            msg = f"{self.provider} paused after repeated failures"
            raise ProviderUnavailable(msg, {"retry_in_seconds": round(remaining, 1)})
        try:
            result = await fn(*args, **kwargs)
        except Exception:
            self.record_failure()
            raise
        self.record_success()
        return result
