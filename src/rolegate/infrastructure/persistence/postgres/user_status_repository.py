"""PostgreSQL user status repository implementation."""

from psycopg import AsyncConnection

from rolegate.domain.entities import UserStatus


class PostgresUserStatusRepository:
    """Mute/ban state, one row per user that was ever moderated."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get(self, user_id: int) -> UserStatus | None:
        cur = await self._conn.execute(
            "SELECT user_id, status, muted_until, muted_reason, muted_by, "
            "banned_until, banned_reason, banned_by FROM user_status WHERE user_id = %s",
            (user_id,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return UserStatus(
            user_id=r[0],
            status=r[1],
            muted_until=r[2],
            muted_reason=r[3],
            muted_by=r[4],
            banned_until=r[5],
            banned_reason=r[6],
            banned_by=r[7],
        )

    async def upsert(self, status: UserStatus) -> None:
        await self._conn.execute(
            "INSERT INTO user_status (user_id, status, muted_until, muted_reason, muted_by, "
            "banned_until, banned_reason, banned_by) VALUES (%s, %s, %s, %s, %s, %s, %s, %s) "
            "ON CONFLICT (user_id) DO UPDATE SET status = EXCLUDED.status, "
            "muted_until = EXCLUDED.muted_until, muted_reason = EXCLUDED.muted_reason, "
            "muted_by = EXCLUDED.muted_by, banned_until = EXCLUDED.banned_until, "
            "banned_reason = EXCLUDED.banned_reason, banned_by = EXCLUDED.banned_by, "
            "updated_at = now()",
            (
                status.user_id,
                status.status,
                status.muted_until,
                status.muted_reason,
                status.muted_by,
                status.banned_until,
                status.banned_reason,
                status.banned_by,
            ),
        )
