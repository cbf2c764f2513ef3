"""Delete permission use case."""

import logging

from rolegate.application.services.authorization_service import AuthorizationService
from rolegate.domain.exceptions import NotFound, ValidationError

logger = logging.getLogger(__name__)


class DeletePermissionUseCase:
    """Delete a custom permission together with its grants."""

    def __init__(
        self,
        unit_of_work_factory: type,
        authorization: AuthorizationService,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._authorization = authorization

    async def execute(self, permission_id: int) -> None:
        async with self._uow_factory() as uow:
            permission = await uow.permissions.get_by_id(permission_id)
            if not permission:
                raise NotFound("Permission", permission_id)
            if permission.is_system:
                raise ValidationError(f"System permission cannot be deleted: {permission.slug}")

            role_ids = await uow.role_permissions.list_role_ids_for_permission(permission_id)
            await uow.permissions.delete(permission_id)

        for role_id in role_ids:
            await self._authorization.invalidate_role(role_id)
        logger.info("Permission %s deleted", permission.slug)


class ListPermissionsUseCase:
    """List permissions grouped by module."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self) -> dict[str, list]:
        async with self._uow_factory() as uow:
            permissions = await uow.permissions.list_all()
        grouped: dict[str, list] = {}
        for permission in sorted(permissions, key=lambda p: (p.module, p.slug)):
            grouped.setdefault(permission.module, []).append(permission)
        return grouped
