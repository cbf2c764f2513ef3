"""Permission repository port."""

from typing import Protocol

from rolegate.domain.entities import Permission


class PermissionRepository(Protocol):
    """Port for permission persistence."""

    async def get_by_id(self, permission_id: int) -> Permission | None: ...

    async def get_by_slug(self, slug: str) -> Permission | None: ...

    async def list_all(self) -> list[Permission]: ...

    async def list_by_ids(self, permission_ids: list[int]) -> list[Permission]: ...

    async def create(self, permission: Permission) -> Permission:
        """Insert permission; ``permission.id`` is ignored and the stored id returned."""
        ...

    async def update(self, permission: Permission) -> None: ...

    async def delete(self, permission_id: int) -> None: ...
