"""Update permission use case."""

from dataclasses import replace
from typing import Any

from rolegate.application.services.authorization_service import AuthorizationService
from rolegate.domain.entities import Permission
from rolegate.domain.exceptions import Conflict, NotFound, ValidationError

UPDATABLE_FIELDS = frozenset({"slug", "name", "module", "action", "description"})
# identity of a system permission is fixed
SYSTEM_FIXED_FIELDS = ("slug", "module", "action")


class UpdatePermissionUseCase:
    """Rename or re-describe a permission."""

    def __init__(
        self,
        unit_of_work_factory: type,
        authorization: AuthorizationService,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._authorization = authorization

    async def execute(self, permission_id: int, changes: dict[str, Any]) -> Permission:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown permission fields: {', '.join(sorted(unknown))}")

        async with self._uow_factory() as uow:
            permission = await uow.permissions.get_by_id(permission_id)
            if not permission:
                raise NotFound("Permission", permission_id)

            changes = dict(changes)
            if permission.is_system:
                for field in SYSTEM_FIXED_FIELDS:
                    changes.pop(field, None)

            new_slug = changes.get("slug")
            slug_changed = new_slug is not None and new_slug != permission.slug
            if slug_changed and await uow.permissions.get_by_slug(new_slug):
                raise Conflict(f"Permission slug already exists: {new_slug}")

            updated = replace(permission, **changes)
            await uow.permissions.update(updated)

            role_ids = []
            if slug_changed:
                role_ids = await uow.role_permissions.list_role_ids_for_permission(permission_id)

        # resolved sets are keyed by slug
        for role_id in role_ids:
            await self._authorization.invalidate_role(role_id)
        return updated
