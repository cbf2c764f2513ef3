"""Role administration endpoints."""

import falcon
import falcon.asgi

from rolegate.application.use_cases.role.create_role import CreateRoleUseCase
from rolegate.application.use_cases.role.delete_role import DeleteRoleUseCase
from rolegate.application.use_cases.role.get_role import GetRoleUseCase, ListRolesUseCase
from rolegate.application.use_cases.role.set_role_permissions import SetRolePermissionsUseCase
from rolegate.application.use_cases.role.update_role import UPDATABLE_FIELDS, UpdateRoleUseCase
from rolegate.interfaces.api.guards import require_permission
from rolegate.interfaces.api.resources.serializers import permission_to_dict, role_to_dict


class RolesResource:
    """GET/POST /v1/roles - list and create roles."""

    def __init__(self, list_roles: ListRolesUseCase, create_role: CreateRoleUseCase) -> None:
        self._list_roles = list_roles
        self._create_role = create_role

    @falcon.before(require_permission("system.settings"))
    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        roles = await self._list_roles.execute()
        resp.media = {"items": [role_to_dict(r) for r in roles]}
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission("system.settings"))
    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        try:
            body = await req.get_media()
            slug = body["slug"].strip()
            name = body["name"].strip()
            parent_id = int(body["parent_id"]) if body.get("parent_id") is not None else None
            priority = int(body.get("priority", 0))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Invalid request: {e}"}
            return
        if not slug or not name:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "slug and name are required"}
            return

        role = await self._create_role.execute(
            slug=slug,
            name=name,
            description=body.get("description"),
            color=body.get("color"),
            icon=body.get("icon"),
            parent_id=parent_id,
            priority=priority,
            is_default=bool(body.get("is_default", False)),
            is_displayed=bool(body.get("is_displayed", True)),
        )
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_201


class RoleResource:
    """GET/PATCH/DELETE /v1/roles/{role_id}."""

    def __init__(
        self,
        get_role: GetRoleUseCase,
        update_role: UpdateRoleUseCase,
        delete_role: DeleteRoleUseCase,
    ) -> None:
        self._get_role = get_role
        self._update_role = update_role
        self._delete_role = delete_role

    @falcon.before(require_permission("system.settings"))
    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: int
    ) -> None:
        details = await self._get_role.execute(role_id)
        resp.media = {
            **role_to_dict(details.role),
            "permissions": [
                {**permission_to_dict(g.permission), "conditions": g.conditions}
                for g in details.grants
            ],
        }
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission("system.settings"))
    async def on_patch(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: int
    ) -> None:
        body = await req.get_media()
        if not isinstance(body, dict):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Expected a JSON object"}
            return
        changes = {k: v for k, v in body.items() if k in UPDATABLE_FIELDS}
        try:
            if changes.get("parent_id") is not None:
                changes["parent_id"] = int(changes["parent_id"])
            if "priority" in changes:
                changes["priority"] = int(changes["priority"])
        except (TypeError, ValueError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Invalid request: {e}"}
            return

        role = await self._update_role.execute(role_id, changes)
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission("system.settings"))
    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: int
    ) -> None:
        await self._delete_role.execute(role_id)
        resp.status = falcon.HTTP_204


class RolePermissionsResource:
    """GET/PUT /v1/roles/{role_id}/permissions - grants of a role."""

    def __init__(self, get_role: GetRoleUseCase, set_permissions: SetRolePermissionsUseCase) -> None:
        self._get_role = get_role
        self._set_permissions = set_permissions

    @falcon.before(require_permission("system.settings"))
    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: int
    ) -> None:
        details = await self._get_role.execute(role_id)
        resp.media = {
            "role_id": role_id,
            "items": [
                {
                    "permission_id": g.permission.id,
                    "slug": g.permission.slug,
                    "conditions": g.conditions,
                }
                for g in details.grants
            ],
        }
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission("system.settings"))
    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: int
    ) -> None:
        """Body: ``{"permissions": [{"permission_id": 1, "conditions": {...}}]}``."""
        try:
            body = await req.get_media()
            grants = [
                {"permission_id": int(g["permission_id"]), "conditions": g.get("conditions")}
                for g in body["permissions"]
            ]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Invalid request: {e}"}
            return

        stored = await self._set_permissions.execute(role_id, grants)
        resp.media = {
            "role_id": role_id,
            "items": [
                {"permission_id": g.permission_id, "conditions": g.conditions} for g in stored
            ],
        }
        resp.status = falcon.HTTP_200
