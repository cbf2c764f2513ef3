"""PostgreSQL role repository implementation."""

from datetime import datetime

from psycopg import AsyncConnection

from rolegate.domain.entities import Role

_COLUMNS = (
    "id, slug, name, priority, parent_id, description, color, icon, "
    "is_displayed, is_system, is_default"
)


def _row_to_role(r: tuple) -> Role:
    return Role(
        id=r[0],
        slug=r[1],
        name=r[2],
        priority=r[3],
        parent_id=r[4],
        description=r[5],
        color=r[6],
        icon=r[7],
        is_displayed=r[8],
        is_system=r[9],
        is_default=r[10],
    )


class PostgresRoleRepository:
    """Role repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, role_id: int) -> Role | None:
        """Get role by id."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM role WHERE id = %s",
            (role_id,),
        )
        r = await cur.fetchone()
        return _row_to_role(r) if r else None

    async def get_by_slug(self, slug: str) -> Role | None:
        """Get role by slug."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM role WHERE slug = %s",
            (slug,),
        )
        r = await cur.fetchone()
        return _row_to_role(r) if r else None

    async def list_all(self) -> list[Role]:
        """List all roles."""
        cur = await self._conn.execute(f"SELECT {_COLUMNS} FROM role ORDER BY id")
        return [_row_to_role(r) for r in await cur.fetchall()]

    async def list_by_ids(self, role_ids: list[int]) -> list[Role]:
        if not role_ids:
            return []
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM role WHERE id = ANY(%s) ORDER BY id",
            (list(role_ids),),
        )
        return [_row_to_role(r) for r in await cur.fetchall()]

    async def list_active_for_user(self, user_id: int, now: datetime) -> list[Role]:
        """Roles of user whose assignment has not expired."""
        cur = await self._conn.execute(
            "SELECT r.id, r.slug, r.name, r.priority, r.parent_id, r.description, r.color, "
            "r.icon, r.is_displayed, r.is_system, r.is_default "
            "FROM role r JOIN user_role ur ON ur.role_id = r.id "
            "WHERE ur.user_id = %s AND (ur.expires_at IS NULL OR ur.expires_at > %s) "
            "ORDER BY r.id",
            (user_id, now),
        )
        return [_row_to_role(r) for r in await cur.fetchall()]

    async def create(self, role: Role) -> Role:
        """Insert role and return it with its new id."""
        cur = await self._conn.execute(
            "INSERT INTO role (slug, name, priority, parent_id, description, color, icon, "
            "is_displayed, is_system, is_default) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s) RETURNING id",
            (
                role.slug,
                role.name,
                role.priority,
                role.parent_id,
                role.description,
                role.color,
                role.icon,
                role.is_displayed,
                role.is_system,
                role.is_default,
            ),
        )
        row = await cur.fetchone()
        role.id = row[0]
        return role

    async def update(self, role: Role) -> None:
        await self._conn.execute(
            "UPDATE role SET slug=%s, name=%s, priority=%s, parent_id=%s, description=%s, "
            "color=%s, icon=%s, is_displayed=%s, is_system=%s, is_default=%s, "
            "updated_at=now() WHERE id=%s",
            (
                role.slug,
                role.name,
                role.priority,
                role.parent_id,
                role.description,
                role.color,
                role.icon,
                role.is_displayed,
                role.is_system,
                role.is_default,
                role.id,
            ),
        )

    async def delete(self, role_id: int) -> None:
        """Delete role; grants and assignments cascade, children lose their parent."""
        await self._conn.execute("DELETE FROM role WHERE id = %s", (role_id,))
