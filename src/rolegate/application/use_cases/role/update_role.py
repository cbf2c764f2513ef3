"""Update role use case."""

import logging
from dataclasses import replace
from typing import Any

from rolegate.application.services.authorization_service import AuthorizationService
from rolegate.application.services.role_inheritance import RoleInheritanceResolver
from rolegate.domain.entities import Role
from rolegate.domain.exceptions import (
    CircularInheritance,
    Conflict,
    NotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {
        "slug",
        "name",
        "description",
        "color",
        "icon",
        "parent_id",
        "priority",
        "is_default",
        "is_displayed",
    }
)


class UpdateRoleUseCase:
    """Change role attributes, guarding the hierarchy against cycles."""

    def __init__(
        self,
        unit_of_work_factory: type,
        authorization: AuthorizationService,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._authorization = authorization

    async def execute(self, role_id: int, changes: dict[str, Any]) -> Role:
        """Apply ``changes`` to role.

        The slug of a system role cannot change and is ignored. Users holding
        the role or a role below it lose their cached permissions when the
        parent or priority changes.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown role fields: {', '.join(sorted(unknown))}")

        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id)
            if not role:
                raise NotFound("Role", role_id)

            changes = dict(changes)
            if role.is_system:
                changes.pop("slug", None)

            new_slug = changes.get("slug")
            if new_slug is not None and new_slug != role.slug:
                if await uow.roles.get_by_slug(new_slug):
                    raise Conflict(f"Role slug already exists: {new_slug}")

            parent_changed = "parent_id" in changes and changes["parent_id"] != role.parent_id
            if parent_changed and changes["parent_id"] is not None:
                parent_id = changes["parent_id"]
                resolver = RoleInheritanceResolver(uow.roles)
                if await resolver.detect_circular_inheritance(role_id, parent_id):
                    raise CircularInheritance(role_id, parent_id)
                if not await uow.roles.get_by_id(parent_id):
                    raise ValidationError(f"Parent role does not exist: {parent_id}")

            priority_changed = "priority" in changes and changes["priority"] != role.priority
            updated = replace(role, **changes)
            await uow.roles.update(updated)

        if parent_changed or priority_changed:
            await self._authorization.invalidate_role(role_id)
        logger.info("Role %s updated: %s", role_id, ", ".join(sorted(changes)))
        return updated
