"""PostgreSQL user role repository implementation."""

from psycopg import AsyncConnection

from rolegate.domain.entities import UserRole

_COLUMNS = "user_id, role_id, assigned_at, expires_at, assigned_by"


def _row_to_assignment(r: tuple) -> UserRole:
    return UserRole(
        user_id=r[0],
        role_id=r[1],
        assigned_at=r[2],
        expires_at=r[3],
        assigned_by=r[4],
    )


class PostgresUserRoleRepository:
    """User role assignments; at most one row per (user, role)."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get(self, user_id: int, role_id: int) -> UserRole | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM user_role WHERE user_id = %s AND role_id = %s",
            (user_id, role_id),
        )
        r = await cur.fetchone()
        return _row_to_assignment(r) if r else None

    async def list_for_user(self, user_id: int) -> list[UserRole]:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM user_role WHERE user_id = %s ORDER BY role_id",
            (user_id,),
        )
        return [_row_to_assignment(r) for r in await cur.fetchall()]

    async def upsert(self, assignment: UserRole) -> None:
        """Insert assignment or renew the existing one."""
        await self._conn.execute(
            "INSERT INTO user_role (user_id, role_id, assigned_at, expires_at, assigned_by) "
            "VALUES (%s, %s, %s, %s, %s) "
            "ON CONFLICT (user_id, role_id) DO UPDATE SET "
            "expires_at = EXCLUDED.expires_at, assigned_by = EXCLUDED.assigned_by, "
            "assigned_at = EXCLUDED.assigned_at",
            (
                assignment.user_id,
                assignment.role_id,
                assignment.assigned_at,
                assignment.expires_at,
                assignment.assigned_by,
            ),
        )

    async def delete(self, user_id: int, role_id: int) -> None:
        await self._conn.execute(
            "DELETE FROM user_role WHERE user_id = %s AND role_id = %s",
            (user_id, role_id),
        )

    async def list_user_ids_for_roles(self, role_ids: list[int]) -> list[int]:
        """Users holding any of the roles, expired assignments included."""
        if not role_ids:
            return []
        cur = await self._conn.execute(
            "SELECT DISTINCT user_id FROM user_role WHERE role_id = ANY(%s) ORDER BY user_id",
            (list(role_ids),),
        )
        return [r[0] for r in await cur.fetchall()]
