"""Role repository port."""

from datetime import datetime
from typing import Protocol

from rolegate.domain.entities import Role


class RoleRepository(Protocol):
    """Port for role persistence."""

    async def get_by_id(self, role_id: int) -> Role | None: ...

    async def get_by_slug(self, slug: str) -> Role | None: ...

    async def list_all(self) -> list[Role]: ...

    async def list_by_ids(self, role_ids: list[int]) -> list[Role]: ...

    async def list_active_for_user(self, user_id: int, now: datetime) -> list[Role]:
        """Roles of user whose assignment has not expired at ``now``."""
        ...

    async def create(self, role: Role) -> Role:
        """Insert role; ``role.id`` is ignored and the stored id returned."""
        ...

    async def update(self, role: Role) -> None: ...

    async def delete(self, role_id: int) -> None: ...
