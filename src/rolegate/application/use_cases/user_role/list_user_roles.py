"""List user roles use case."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from rolegate.domain.entities import Role, UserRole


@dataclass
class UserRoleView:
    role: Role
    assignment: UserRole


class ListUserRolesUseCase:
    """Active role assignments of a user, most authoritative role first."""

    def __init__(
        self,
        unit_of_work_factory: type,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def execute(self, user_id: int) -> list[UserRoleView]:
        now = self._clock()
        async with self._uow_factory() as uow:
            assignments = [a for a in await uow.user_roles.list_for_user(user_id) if a.is_active(now)]
            roles = {r.id: r for r in await uow.roles.list_by_ids([a.role_id for a in assignments])}
        views = [UserRoleView(role=roles[a.role_id], assignment=a) for a in assignments if a.role_id in roles]
        return sorted(views, key=lambda v: (-v.role.priority, v.role.id))
