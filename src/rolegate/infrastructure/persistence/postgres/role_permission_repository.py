"""PostgreSQL role permission repository implementation."""

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from rolegate.domain.entities import RolePermission


def _conditions_param(conditions: dict | str | None) -> Jsonb | str | None:
    if conditions is None or isinstance(conditions, str):
        return conditions
    return Jsonb(conditions)


class PostgresRolePermissionRepository:
    """Grants of permissions to roles; ``conditions`` is a jsonb column."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_for_roles(self, role_ids: list[int]) -> list[RolePermission]:
        if not role_ids:
            return []
        cur = await self._conn.execute(
            "SELECT role_id, permission_id, conditions FROM role_permission "
            "WHERE role_id = ANY(%s) ORDER BY role_id, permission_id",
            (list(role_ids),),
        )
        return [RolePermission(role_id=r[0], permission_id=r[1], conditions=r[2]) for r in await cur.fetchall()]

    async def list_for_role(self, role_id: int) -> list[RolePermission]:
        return await self.list_for_roles([role_id])

    async def list_role_ids_for_permission(self, permission_id: int) -> list[int]:
        cur = await self._conn.execute(
            "SELECT role_id FROM role_permission WHERE permission_id = %s ORDER BY role_id",
            (permission_id,),
        )
        return [r[0] for r in await cur.fetchall()]

    async def upsert(self, grant: RolePermission) -> None:
        await self._conn.execute(
            "INSERT INTO role_permission (role_id, permission_id, conditions) "
            "VALUES (%s, %s, %s) "
            "ON CONFLICT (role_id, permission_id) DO UPDATE SET conditions = EXCLUDED.conditions",
            (grant.role_id, grant.permission_id, _conditions_param(grant.conditions)),
        )

    async def replace_for_role(self, role_id: int, grants: list[RolePermission]) -> None:
        await self._conn.execute("DELETE FROM role_permission WHERE role_id = %s", (role_id,))
        for grant in grants:
            await self.upsert(grant)
