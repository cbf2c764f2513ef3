"""Category permission matrix endpoints."""

import falcon
import falcon.asgi

from rolegate.application.use_cases.category.category_permissions import (
    AddCategoryModeratorUseCase,
    GetCategoryPermissionsUseCase,
    RemoveCategoryModeratorUseCase,
    SetCategoryPermissionsUseCase,
)
from rolegate.interfaces.api.guards import require_permission
from rolegate.interfaces.api.resources.serializers import (
    category_access_to_dict,
    category_row_to_dict,
)


class CategoryPermissionsResource:
    """GET/PUT /v1/categories/{category_id}/permissions.

    GET lists the override rows; with ``?effective=true`` it returns the
    merged flags of the current user instead.
    """

    def __init__(
        self,
        get_matrix: GetCategoryPermissionsUseCase,
        set_matrix: SetCategoryPermissionsUseCase,
    ) -> None:
        self._get_matrix = get_matrix
        self._set_matrix = set_matrix

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, category_id: int
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        authorization = req.context.authorization
        if req.get_param_as_bool("effective", default=False):
            access = await authorization.get_category_permissions(user.user_id, category_id)
            resp.media = {"category_id": category_id, **category_access_to_dict(access)}
            resp.status = falcon.HTTP_200
            return

        if not await authorization.has_permission(user.user_id, "system.settings"):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return
        rows = await self._get_matrix.execute(category_id)
        resp.media = {"category_id": category_id, "items": [category_row_to_dict(r) for r in rows]}
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission("system.settings"))
    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, category_id: int
    ) -> None:
        """Body: ``{"permissions": [{"role_id": 2, "can_view": true, ...}]}``."""
        try:
            body = await req.get_media()
            rows = body["permissions"]
            if not isinstance(rows, list):
                raise TypeError("permissions must be a list")
        except (KeyError, TypeError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Invalid request: {e}"}
            return

        entries = await self._set_matrix.execute(category_id, rows)
        resp.media = {
            "category_id": category_id,
            "items": [category_row_to_dict(r) for r in entries],
        }
        resp.status = falcon.HTTP_200


class CategoryModeratorsResource:
    """POST /v1/categories/{category_id}/moderators - body ``{"role_id": 2}``."""

    def __init__(self, add_moderator: AddCategoryModeratorUseCase) -> None:
        self._add = add_moderator

    @falcon.before(require_permission("system.settings"))
    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, category_id: int
    ) -> None:
        try:
            body = await req.get_media()
            role_id = int(body["role_id"])
        except (KeyError, TypeError, ValueError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Invalid request: {e}"}
            return
        row = await self._add.execute(category_id, role_id)
        resp.media = category_row_to_dict(row)
        resp.status = falcon.HTTP_200


class CategoryModeratorResource:
    """DELETE /v1/categories/{category_id}/moderators/{role_id}."""

    def __init__(self, remove_moderator: RemoveCategoryModeratorUseCase) -> None:
        self._remove = remove_moderator

    @falcon.before(require_permission("system.settings"))
    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        category_id: int,
        role_id: int,
    ) -> None:
        row = await self._remove.execute(category_id, role_id)
        resp.media = category_row_to_dict(row)
        resp.status = falcon.HTTP_200
