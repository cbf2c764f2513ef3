"""Get role use cases."""

from dataclasses import dataclass

from rolegate.domain.entities import Permission, Role, RolePermission
from rolegate.domain.exceptions import NotFound


@dataclass
class RoleGrant:
    """A permission granted by a role, with its stored conditions."""

    permission: Permission
    conditions: dict | str | None


@dataclass
class RoleDetails:
    role: Role
    grants: list[RoleGrant]


class GetRoleUseCase:
    """Get role with the permissions it grants directly."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, role_id: int) -> RoleDetails:
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id)
            if not role:
                raise NotFound("Role", role_id)
            grants: list[RolePermission] = await uow.role_permissions.list_for_role(role_id)
            permissions = {
                p.id: p
                for p in await uow.permissions.list_by_ids([g.permission_id for g in grants])
            }
        return RoleDetails(
            role=role,
            grants=[
                RoleGrant(permission=permissions[g.permission_id], conditions=g.conditions)
                for g in grants
                if g.permission_id in permissions
            ],
        )


class ListRolesUseCase:
    """List roles, most authoritative first."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self) -> list[Role]:
        async with self._uow_factory() as uow:
            roles = await uow.roles.list_all()
        return sorted(roles, key=lambda r: (-r.priority, r.id))
