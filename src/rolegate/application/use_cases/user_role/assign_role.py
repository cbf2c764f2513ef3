"""Assign role use case."""

from datetime import datetime

from rolegate.application.services.authorization_service import AuthorizationService
from rolegate.domain.entities import UserRole
from rolegate.domain.exceptions import NotFound


class AssignRoleUseCase:
    """Assign role to user, optionally until ``expires_at``."""

    def __init__(
        self,
        unit_of_work_factory: type,
        authorization: AuthorizationService,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._authorization = authorization

    async def execute(
        self,
        user_id: int,
        role_id: int,
        expires_at: datetime | None = None,
        assigned_by: int | None = None,
    ) -> UserRole:
        """Assign role; re-assigning an existing role renews its expiry."""
        async with self._uow_factory() as uow:
            if not await uow.roles.get_by_id(role_id):
                raise NotFound("Role", role_id)
        return await self._authorization.assign_role_to_user(
            user_id, role_id, expires_at=expires_at, assigned_by=assigned_by
        )
