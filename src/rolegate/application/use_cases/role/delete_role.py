"""Delete role use case."""

import logging

from rolegate.application.services.authorization_service import AuthorizationService
from rolegate.domain.exceptions import NotFound, ValidationError

logger = logging.getLogger(__name__)


class DeleteRoleUseCase:
    """Delete a custom role. System roles cannot be deleted."""

    def __init__(
        self,
        unit_of_work_factory: type,
        authorization: AuthorizationService,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._authorization = authorization

    async def execute(self, role_id: int) -> None:
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id)
            if not role:
                raise NotFound("Role", role_id)
            if role.is_system:
                raise ValidationError(f"System role cannot be deleted: {role.slug}")

        # resolve affected users while the role and its assignments still exist
        affected = await self._authorization.invalidate_role(role_id)

        async with self._uow_factory() as uow:
            await uow.roles.delete(role_id)

        for user_id in affected:
            await self._authorization.clear_user_permission_cache(user_id)
        logger.info("Role %s (%s) deleted", role_id, role.slug)
