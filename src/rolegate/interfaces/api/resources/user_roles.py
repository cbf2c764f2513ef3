"""User role assignment endpoints."""

import falcon
import falcon.asgi

from rolegate.application.use_cases.user_role.assign_role import AssignRoleUseCase
from rolegate.application.use_cases.user_role.list_user_roles import ListUserRolesUseCase
from rolegate.application.use_cases.user_role.revoke_role import RevokeRoleUseCase
from rolegate.interfaces.api.guards import require_permission
from rolegate.interfaces.api.resources.serializers import (
    assignment_to_dict,
    parse_datetime,
    role_to_dict,
)


class UserRolesResource:
    """GET/POST /v1/users/{user_id}/roles - active roles, assign a role."""

    def __init__(self, list_user_roles: ListUserRolesUseCase, assign_role: AssignRoleUseCase) -> None:
        self._list = list_user_roles
        self._assign = assign_role

    @falcon.before(require_permission("user.read"))
    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: int
    ) -> None:
        views = await self._list.execute(user_id)
        resp.media = {
            "items": [
                {**role_to_dict(v.role), "assignment": assignment_to_dict(v.assignment)}
                for v in views
            ]
        }
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission("user.role.assign"))
    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: int
    ) -> None:
        """Body: ``{"role_id": 3, "expires_at": "2026-01-01T00:00:00Z"}``."""
        try:
            body = await req.get_media()
            role_id = int(body["role_id"])
            expires_at = parse_datetime(body.get("expires_at"))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Invalid request: {e}"}
            return

        assignment = await self._assign.execute(
            user_id, role_id, expires_at=expires_at, assigned_by=req.context.user.user_id
        )
        resp.media = assignment_to_dict(assignment)
        resp.status = falcon.HTTP_201


class UserRoleResource:
    """DELETE /v1/users/{user_id}/roles/{role_id} - revoke a role."""

    def __init__(self, revoke_role: RevokeRoleUseCase) -> None:
        self._revoke = revoke_role

    @falcon.before(require_permission("user.role.assign"))
    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        user_id: int,
        role_id: int,
    ) -> None:
        await self._revoke.execute(user_id, role_id)
        resp.status = falcon.HTTP_204
