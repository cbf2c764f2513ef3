"""Revoke role use case."""

from rolegate.application.services.authorization_service import AuthorizationService
from rolegate.domain.exceptions import NotFound


class RevokeRoleUseCase:
    """Remove role from user."""

    def __init__(
        self,
        unit_of_work_factory: type,
        authorization: AuthorizationService,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._authorization = authorization

    async def execute(self, user_id: int, role_id: int) -> None:
        async with self._uow_factory() as uow:
            if not await uow.user_roles.get(user_id, role_id):
                raise NotFound("User role", f"{user_id}/{role_id}")
        await self._authorization.remove_role_from_user(user_id, role_id)
