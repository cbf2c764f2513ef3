"""User status repository port."""

from typing import Protocol

from rolegate.domain.entities import UserStatus


class UserStatusRepository(Protocol):
    """Port for mute/ban state."""

    async def get(self, user_id: int) -> UserStatus | None: ...

    async def upsert(self, status: UserStatus) -> None: ...
