"""Request guards - falcon ``before`` hooks that enforce authorization.

Usage::

    class BanResource:
        @falcon.before(require_permission("user.ban"))
        async def on_post(self, req, resp, user_id): ...

A request without an authenticated user fails with 401, an authenticated
user without the permission with 403.
"""

import logging

import falcon
import falcon.asgi

from rolegate.domain.value_objects import CategoryAction

logger = logging.getLogger(__name__)


def _current_user_id(req: falcon.asgi.Request) -> int:
    user = getattr(req.context, "user", None)
    if user is None:
        raise falcon.HTTPUnauthorized(title="Unauthorized", description="Authentication required")
    return user.user_id


def require_permission(*slugs: str, any_of: bool = False):
    """All of ``slugs`` (or one of them with ``any_of``) must be granted."""

    async def hook(req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, params) -> None:
        user_id = _current_user_id(req)
        authorization = req.context.authorization
        if any_of:
            granted = await authorization.has_any_permission(user_id, list(slugs))
        else:
            granted = await authorization.has_all_permissions(user_id, list(slugs))
        if not granted:
            logger.info("User %s denied %s on %s", user_id, ", ".join(slugs), req.path)
            raise falcon.HTTPForbidden(
                title="Forbidden", description=f"Missing permission: {', '.join(slugs)}"
            )

    return hook


def require_role(*slugs: str):
    """User must hold at least one of the roles."""

    async def hook(req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, params) -> None:
        user_id = _current_user_id(req)
        authorization = req.context.authorization
        for slug in slugs:
            if await authorization.has_role(user_id, slug):
                return
        raise falcon.HTTPForbidden(
            title="Forbidden", description=f"Requires role: {', '.join(slugs)}"
        )

    return hook


def require_category_permission(
    action: CategoryAction | None = None,
    category_param: str = "category_id",
    action_param: str = "action",
):
    """User's roles must allow ``action`` in the category of the request.

    The category id comes from the route field or query parameter
    ``category_param``; without a fixed ``action`` it is read from the query
    parameter ``action_param``.
    """

    async def hook(req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, params) -> None:
        user_id = _current_user_id(req)
        raw_category = params.get(category_param) or req.get_param(category_param)
        try:
            category_id = int(raw_category)
        except (TypeError, ValueError):
            raise falcon.HTTPBadRequest(
                title="Bad Request", description=f"Invalid or missing {category_param}"
            ) from None
        try:
            requested = action or CategoryAction(req.get_param(action_param) or "")
        except ValueError:
            raise falcon.HTTPBadRequest(
                title="Bad Request", description=f"Invalid or missing {action_param}"
            ) from None

        authorization = req.context.authorization
        if not await authorization.has_category_permission(user_id, category_id, requested):
            raise falcon.HTTPForbidden(
                title="Forbidden",
                description=f"Cannot {requested.value} in category {category_id}",
            )

    return hook
