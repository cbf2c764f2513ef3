"""User role repository port."""

from typing import Protocol

from rolegate.domain.entities import UserRole


class UserRoleRepository(Protocol):
    """Port for user role assignments."""

    async def get(self, user_id: int, role_id: int) -> UserRole | None: ...

    async def list_for_user(self, user_id: int) -> list[UserRole]: ...

    async def upsert(self, assignment: UserRole) -> None:
        """Insert, or refresh expiry/assigner of the existing (user, role) row."""
        ...

    async def delete(self, user_id: int, role_id: int) -> None: ...

    async def list_user_ids_for_roles(self, role_ids: list[int]) -> list[int]: ...
