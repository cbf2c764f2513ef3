"""Permission administration endpoints."""

import falcon
import falcon.asgi

from rolegate.application.use_cases.permission.create_permission import CreatePermissionUseCase
from rolegate.application.use_cases.permission.delete_permission import (
    DeletePermissionUseCase,
    ListPermissionsUseCase,
)
from rolegate.application.use_cases.permission.update_permission import (
    UPDATABLE_FIELDS,
    UpdatePermissionUseCase,
)
from rolegate.interfaces.api.guards import require_permission
from rolegate.interfaces.api.resources.serializers import permission_to_dict


class PermissionsResource:
    """GET/POST /v1/permissions - list (grouped by module) and create permissions."""

    def __init__(
        self,
        list_permissions: ListPermissionsUseCase,
        create_permission: CreatePermissionUseCase,
    ) -> None:
        self._list_permissions = list_permissions
        self._create_permission = create_permission

    @falcon.before(require_permission("system.settings"))
    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        grouped = await self._list_permissions.execute()
        resp.media = {
            "items": [
                {"module": module, "permissions": [permission_to_dict(p) for p in perms]}
                for module, perms in grouped.items()
            ]
        }
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission("system.settings"))
    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        try:
            body = await req.get_media()
            slug = body["slug"].strip()
            name = body["name"]
            module = body["module"]
            action = body["action"]
        except (AttributeError, KeyError, TypeError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return

        permission = await self._create_permission.execute(
            slug=slug,
            name=name,
            module=module,
            action=action,
            description=body.get("description"),
        )
        resp.media = permission_to_dict(permission)
        resp.status = falcon.HTTP_201


class PermissionResource:
    """PATCH/DELETE /v1/permissions/{permission_id}."""

    def __init__(
        self,
        update_permission: UpdatePermissionUseCase,
        delete_permission: DeletePermissionUseCase,
    ) -> None:
        self._update = update_permission
        self._delete = delete_permission

    @falcon.before(require_permission("system.settings"))
    async def on_patch(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, permission_id: int
    ) -> None:
        body = await req.get_media()
        if not isinstance(body, dict):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Expected a JSON object"}
            return
        changes = {k: v for k, v in body.items() if k in UPDATABLE_FIELDS}
        permission = await self._update.execute(permission_id, changes)
        resp.media = permission_to_dict(permission)
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission("system.settings"))
    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, permission_id: int
    ) -> None:
        await self._delete.execute(permission_id)
        resp.status = falcon.HTTP_204
