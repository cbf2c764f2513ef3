"""Role permission repository port."""

from typing import Protocol

from rolegate.domain.entities import RolePermission


class RolePermissionRepository(Protocol):
    """Port for role-to-permission grants."""

    async def list_for_roles(self, role_ids: list[int]) -> list[RolePermission]: ...

    async def list_for_role(self, role_id: int) -> list[RolePermission]: ...

    async def list_role_ids_for_permission(self, permission_id: int) -> list[int]: ...

    async def upsert(self, grant: RolePermission) -> None: ...

    async def replace_for_role(self, role_id: int, grants: list[RolePermission]) -> None:
        """Drop every grant of role and insert ``grants``."""
        ...
