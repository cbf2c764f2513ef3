"""PostgreSQL category permission repository implementation."""

from psycopg import AsyncConnection

from rolegate.domain.entities import CategoryPermission

_COLUMNS = "role_id, category_id, can_view, can_create, can_reply, can_moderate"


def _row_to_entry(r: tuple) -> CategoryPermission:
    return CategoryPermission(
        role_id=r[0],
        category_id=r[1],
        can_view=r[2],
        can_create=r[3],
        can_reply=r[4],
        can_moderate=r[5],
    )


class PostgresCategoryPermissionRepository:
    """Per-category role flags."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get(self, category_id: int, role_id: int) -> CategoryPermission | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM category_permission WHERE category_id = %s AND role_id = %s",
            (category_id, role_id),
        )
        r = await cur.fetchone()
        return _row_to_entry(r) if r else None

    async def list_for_category(self, category_id: int) -> list[CategoryPermission]:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM category_permission WHERE category_id = %s ORDER BY role_id",
            (category_id,),
        )
        return [_row_to_entry(r) for r in await cur.fetchall()]

    async def list_for_roles(
        self, category_id: int, role_ids: list[int]
    ) -> list[CategoryPermission]:
        if not role_ids:
            return []
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM category_permission "
            "WHERE category_id = %s AND role_id = ANY(%s) ORDER BY role_id",
            (category_id, list(role_ids)),
        )
        return [_row_to_entry(r) for r in await cur.fetchall()]

    async def upsert(self, row: CategoryPermission) -> None:
        await self._conn.execute(
            f"INSERT INTO category_permission ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s) "
            "ON CONFLICT (category_id, role_id) DO UPDATE SET "
            "can_view = EXCLUDED.can_view, can_create = EXCLUDED.can_create, "
            "can_reply = EXCLUDED.can_reply, can_moderate = EXCLUDED.can_moderate",
            (
                row.role_id,
                row.category_id,
                row.can_view,
                row.can_create,
                row.can_reply,
                row.can_moderate,
            ),
        )

    async def replace_for_category(
        self, category_id: int, rows: list[CategoryPermission]
    ) -> None:
        await self._conn.execute(
            "DELETE FROM category_permission WHERE category_id = %s", (category_id,)
        )
        for row in rows:
            await self.upsert(row)
