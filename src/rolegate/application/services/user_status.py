"""Mute and ban state of users."""

import logging
from collections.abc import Callable
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import Any

from rolegate.application.ports import CacheStore
from rolegate.domain.entities import UserStatus
from rolegate.domain.entities.user_status import ACTIVE, BANNED, MUTED

logger = logging.getLogger(__name__)

STATUS_CACHE_TTL = 300


def _utcnow() -> datetime:
    return datetime.now(UTC)


def status_cache_key(user_id: int) -> str:
    return f"user:{user_id}:status"


@dataclass(frozen=True)
class MuteStatus:
    is_muted: bool
    reason: str | None = None
    until: datetime | None = None


def _dump(status: UserStatus) -> dict[str, Any]:
    data = asdict(status)
    for field in ("muted_until", "banned_until"):
        if data[field] is not None:
            data[field] = data[field].isoformat()
    return data


def _load(data: dict[str, Any]) -> UserStatus:
    data = dict(data)
    for field in ("muted_until", "banned_until"):
        if data[field] is not None:
            data[field] = datetime.fromisoformat(data[field])
    return UserStatus(**data)


class UserStatusService:
    """Reads and changes the moderation status of users."""

    def __init__(
        self,
        unit_of_work_factory: type,
        cache: CacheStore | None = None,
        cache_ttl: int = STATUS_CACHE_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = cache
        self._cache_ttl = cache_ttl
        self._clock = clock

    async def get_user_status(self, user_id: int) -> UserStatus:
        """Stored status of user; users without a row are active."""
        if self._cache is None:
            return await self._fetch(user_id)

        async def compute() -> dict[str, Any]:
            return _dump(await self._fetch(user_id))

        data = await self._cache.remember(status_cache_key(user_id), self._cache_ttl, compute)
        return _load(data)

    async def _fetch(self, user_id: int) -> UserStatus:
        async with self._uow_factory() as uow:
            status = await uow.user_statuses.get(user_id)
        return status or UserStatus(user_id=user_id)

    async def _save(self, status: UserStatus) -> UserStatus:
        async with self._uow_factory() as uow:
            await uow.user_statuses.upsert(status)
        await self.clear_user_status_cache(status.user_id)
        return status

    async def mute_user(
        self,
        user_id: int,
        until: datetime | None = None,
        reason: str | None = None,
        muted_by: int | None = None,
    ) -> UserStatus:
        """Mute user until ``until`` (None: until unmuted). A ban stays in force."""
        status = await self._fetch(user_id)
        status.muted_until = until
        status.muted_reason = reason
        status.muted_by = muted_by
        if not status.is_banned(self._clock()):
            status.status = MUTED
        logger.info("User %s muted by %s until %s", user_id, muted_by, until)
        return await self._save(status)

    async def unmute_user(self, user_id: int) -> UserStatus:
        status = await self._fetch(user_id)
        status.muted_until = None
        status.muted_reason = None
        status.muted_by = None
        if status.status == MUTED:
            status.status = ACTIVE
        logger.info("User %s unmuted", user_id)
        return await self._save(status)

    async def ban_user(
        self,
        user_id: int,
        until: datetime | None = None,
        reason: str | None = None,
        banned_by: int | None = None,
    ) -> UserStatus:
        status = await self._fetch(user_id)
        status.status = BANNED
        status.banned_until = until
        status.banned_reason = reason
        status.banned_by = banned_by
        logger.info("User %s banned by %s until %s", user_id, banned_by, until)
        return await self._save(status)

    async def unban_user(self, user_id: int) -> UserStatus:
        """Lift the ban; a timed mute that has not expired yet becomes the status again."""
        status = await self._fetch(user_id)
        status.banned_until = None
        status.banned_reason = None
        status.banned_by = None
        # only a timed mute can be told apart from a cleared one
        if status.muted_until is not None and status.muted_until > self._clock():
            status.status = MUTED
        else:
            status.status = ACTIVE
        logger.info("User %s unbanned", user_id)
        return await self._save(status)

    async def check_mute_status(self, user_id: int) -> MuteStatus:
        status = await self.get_user_status(user_id)
        if not status.is_muted(self._clock()):
            return MuteStatus(is_muted=False)
        return MuteStatus(is_muted=True, reason=status.muted_reason, until=status.muted_until)

    async def clear_user_status_cache(self, user_id: int) -> None:
        if self._cache is not None:
            await self._cache.invalidate([status_cache_key(user_id)])
