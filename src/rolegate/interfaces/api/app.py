"""Falcon ASGI application."""

import logging
from dataclasses import dataclass

import falcon
import falcon.asgi
from falcon.asgi import App

from rolegate.domain.exceptions import Conflict, NotFound, PermissionDenied, ValidationError
from rolegate.interfaces.api.resources.category_permissions import (
    CategoryModeratorResource,
    CategoryModeratorsResource,
    CategoryPermissionsResource,
)
from rolegate.interfaces.api.resources.health import HealthResource
from rolegate.interfaces.api.resources.me import MePermissionsResource
from rolegate.interfaces.api.resources.permissions import PermissionResource, PermissionsResource
from rolegate.interfaces.api.resources.rbac import RbacCheckResource, RbacConfigResource
from rolegate.interfaces.api.resources.roles import (
    RolePermissionsResource,
    RoleResource,
    RolesResource,
)
from rolegate.interfaces.api.resources.user_roles import UserRoleResource, UserRolesResource
from rolegate.interfaces.api.resources.user_status import (
    UserBanResource,
    UserMuteResource,
    UserStatusResource,
)

logger = logging.getLogger(__name__)


@dataclass
class Resources:
    """Every resource the API routes to."""

    health: HealthResource
    rbac_config: RbacConfigResource
    rbac_check: RbacCheckResource
    me: MePermissionsResource
    roles: RolesResource
    role: RoleResource
    role_permissions: RolePermissionsResource
    permissions: PermissionsResource
    permission: PermissionResource
    user_roles: UserRolesResource
    user_role: UserRoleResource
    user_status: UserStatusResource
    user_mute: UserMuteResource
    user_ban: UserBanResource
    category_permissions: CategoryPermissionsResource
    category_moderators: CategoryModeratorsResource
    category_moderator: CategoryModeratorResource


def _status_handler(status: str):
    async def handle(req: falcon.asgi.Request, resp: falcon.asgi.Response, ex, params) -> None:
        resp.status = status
        resp.media = {"error": str(ex)}

    return handle


async def _log_exception(req: falcon.asgi.Request, resp: falcon.asgi.Response, ex, params) -> None:
    logger.exception("Unhandled error on %s %s", req.method, req.path, exc_info=ex)
    resp.status = falcon.HTTP_500
    resp.media = {"title": "500 Internal Server Error"}


def add_error_handlers(app: App) -> None:
    """Map domain exceptions raised by use cases to HTTP statuses."""
    app.add_error_handler(Exception, _log_exception)
    app.add_error_handler(NotFound, _status_handler(falcon.HTTP_404))
    app.add_error_handler(ValidationError, _status_handler(falcon.HTTP_400))
    app.add_error_handler(Conflict, _status_handler(falcon.HTTP_409))
    app.add_error_handler(PermissionDenied, _status_handler(falcon.HTTP_403))


def add_routes(app: App, resources: Resources) -> None:
    """Register the /v1 routes."""
    app.add_route("/v1/health", resources.health)
    app.add_route("/v1/rbac/config", resources.rbac_config)
    app.add_route("/v1/rbac/check", resources.rbac_check)
    app.add_route("/v1/me/permissions", resources.me)
    app.add_route("/v1/roles", resources.roles)
    app.add_route("/v1/roles/{role_id:int}", resources.role)
    app.add_route("/v1/roles/{role_id:int}/permissions", resources.role_permissions)
    app.add_route("/v1/permissions", resources.permissions)
    app.add_route("/v1/permissions/{permission_id:int}", resources.permission)
    app.add_route("/v1/users/{user_id:int}/roles", resources.user_roles)
    app.add_route("/v1/users/{user_id:int}/roles/{role_id:int}", resources.user_role)
    app.add_route("/v1/users/{user_id:int}/status", resources.user_status)
    app.add_route("/v1/users/{user_id:int}/mute", resources.user_mute)
    app.add_route("/v1/users/{user_id:int}/ban", resources.user_ban)
    app.add_route("/v1/categories/{category_id:int}/permissions", resources.category_permissions)
    app.add_route("/v1/categories/{category_id:int}/moderators", resources.category_moderators)
    app.add_route(
        "/v1/categories/{category_id:int}/moderators/{role_id:int}",
        resources.category_moderator,
    )


def create_app(resources: Resources, middleware: list | None = None) -> App:
    """Create Falcon ASGI app with routes and error mapping."""
    app = falcon.asgi.App(middleware=middleware or [])
    add_error_handlers(app)
    add_routes(app, resources)
    return app
