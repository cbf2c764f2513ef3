"""PostgreSQL permission repository implementation."""

from psycopg import AsyncConnection

from rolegate.domain.entities import Permission

_COLUMNS = "id, slug, name, module, action, description, is_system"


def _row_to_permission(r: tuple) -> Permission:
    return Permission(
        id=r[0],
        slug=r[1],
        name=r[2],
        module=r[3],
        action=r[4],
        description=r[5],
        is_system=r[6],
    )


class PostgresPermissionRepository:
    """Permission repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, permission_id: int) -> Permission | None:
        """Get permission by id."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission WHERE id = %s",
            (permission_id,),
        )
        r = await cur.fetchone()
        return _row_to_permission(r) if r else None

    async def get_by_slug(self, slug: str) -> Permission | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission WHERE slug = %s",
            (slug,),
        )
        r = await cur.fetchone()
        return _row_to_permission(r) if r else None

    async def list_all(self) -> list[Permission]:
        cur = await self._conn.execute(f"SELECT {_COLUMNS} FROM permission ORDER BY module, slug")
        return [_row_to_permission(r) for r in await cur.fetchall()]

    async def list_by_ids(self, permission_ids: list[int]) -> list[Permission]:
        if not permission_ids:
            return []
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission WHERE id = ANY(%s) ORDER BY id",
            (list(permission_ids),),
        )
        return [_row_to_permission(r) for r in await cur.fetchall()]

    async def create(self, permission: Permission) -> Permission:
        """Create permission."""
        cur = await self._conn.execute(
            "INSERT INTO permission (slug, name, module, action, description, is_system) "
            "VALUES (%s, %s, %s, %s, %s, %s) RETURNING id",
            (
                permission.slug,
                permission.name,
                permission.module,
                permission.action,
                permission.description,
                permission.is_system,
            ),
        )
        row = await cur.fetchone()
        permission.id = row[0]
        return permission

    async def update(self, permission: Permission) -> None:
        """Update permission."""
        await self._conn.execute(
            "UPDATE permission SET slug=%s, name=%s, module=%s, action=%s, description=%s, "
            "is_system=%s WHERE id=%s",
            (
                permission.slug,
                permission.name,
                permission.module,
                permission.action,
                permission.description,
                permission.is_system,
                permission.id,
            ),
        )

    async def delete(self, permission_id: int) -> None:
        """Delete permission."""
        await self._conn.execute(
            "DELETE FROM permission WHERE id = %s",
            (permission_id,),
        )
