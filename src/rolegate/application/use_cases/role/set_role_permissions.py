"""Set role permissions use case."""

import logging
from typing import Any

from rolegate.application.services.authorization_service import AuthorizationService
from rolegate.domain.entities import RolePermission
from rolegate.domain.exceptions import NotFound

logger = logging.getLogger(__name__)


class SetRolePermissionsUseCase:
    """Replace the permission set a role grants directly."""

    def __init__(
        self,
        unit_of_work_factory: type,
        authorization: AuthorizationService,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._authorization = authorization

    async def execute(self, role_id: int, grants: list[dict[str, Any]]) -> list[RolePermission]:
        """Each grant is ``{"permission_id": int, "conditions": dict | None}``.

        Raises InvalidConditions for a malformed condition payload; nothing is
        written in that case.
        """
        async with self._uow_factory() as uow:
            if not await uow.roles.get_by_id(role_id):
                raise NotFound("Role", role_id)
            permission_ids = sorted({int(g["permission_id"]) for g in grants})
            known = {p.id for p in await uow.permissions.list_by_ids(permission_ids)}
            missing = [pid for pid in permission_ids if pid not in known]
            if missing:
                raise NotFound("Permission", ", ".join(str(pid) for pid in missing))

        rows = [
            RolePermission(
                role_id=role_id,
                permission_id=int(g["permission_id"]),
                conditions=g.get("conditions"),
            )
            for g in grants
        ]
        await self._authorization.set_role_permissions(role_id, rows)
        logger.info("Role %s now grants %d permissions", role_id, len(rows))

        async with self._uow_factory() as uow:
            return await uow.role_permissions.list_for_role(role_id)
