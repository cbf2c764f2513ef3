"""Rate limiting and daily quotas backed by cache counters."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from rolegate.application.ports import CacheStore
from rolegate.domain.exceptions import CacheUnavailable
from rolegate.domain.value_objects import CacheUnavailablePolicy
from rolegate.domain.value_objects.conditions import RateLimitCondition

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def rate_limit_key(user_id: int, action_key: str) -> str:
    return f"ratelimit:{user_id}:{action_key}"


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of one rate-limited action."""

    allowed: bool
    remaining: int | None = None
    reset_at: datetime | None = None


@dataclass(frozen=True)
class DailyLimitResult:
    """Outcome of a daily upload quota check."""

    allowed: bool
    limit: int | None = None
    remaining: int | None = None


class RateLimiter:
    """Fixed-window counters: the first hit of a window starts its TTL.

    A denied request reports ``reset_at`` as now + period, an upper bound on
    when the running window ends.
    """

    def __init__(
        self,
        cache: CacheStore | None,
        unavailable_policy: CacheUnavailablePolicy = CacheUnavailablePolicy.FAIL_OPEN,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._cache = cache
        self._unavailable_policy = unavailable_policy
        self._clock = clock

    async def hit(
        self, user_id: int, action_key: str, limit: RateLimitCondition
    ) -> RateLimitResult:
        """Count one action of user and decide whether it is within the limit."""
        if self._cache is None:
            return self._unavailable(user_id, action_key)

        period = limit.period.seconds
        try:
            count = await self._cache.increment(rate_limit_key(user_id, action_key), period)
        except CacheUnavailable:
            return self._unavailable(user_id, action_key)

        if count > limit.count:
            logger.info(
                "Rate limit %s/%s hit by user %s on %s",
                limit.count,
                limit.period.value,
                user_id,
                action_key,
            )
            return RateLimitResult(
                allowed=False,
                remaining=0,
                reset_at=self._clock() + timedelta(seconds=period),
            )
        return RateLimitResult(allowed=True, remaining=limit.count - count)

    def _unavailable(self, user_id: int, action_key: str) -> RateLimitResult:
        allowed = self._unavailable_policy is CacheUnavailablePolicy.FAIL_OPEN
        logger.warning(
            "No rate limit counters for user %s on %s; %s",
            user_id,
            action_key,
            "allowing" if allowed else "denying",
        )
        return RateLimitResult(allowed=allowed)

    @staticmethod
    def daily_limit(limit: int | None, current_day_count: int) -> DailyLimitResult:
        """Stateless quota: ``current_day_count`` is what the user already used today."""
        if limit is None:
            return DailyLimitResult(allowed=True)
        return DailyLimitResult(
            allowed=current_day_count < limit,
            limit=limit,
            remaining=max(limit - current_day_count, 0),
        )
