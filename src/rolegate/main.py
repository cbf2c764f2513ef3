"""Application entry point and composition root."""

import logging
from zoneinfo import ZoneInfo

import falcon.asgi

from rolegate import __version__
from rolegate.application.services.authorization_service import AuthorizationService
from rolegate.application.services.condition_evaluator import ConditionEvaluator
from rolegate.application.services.rate_limiter import RateLimiter
from rolegate.application.services.user_status import UserStatusService
from rolegate.application.use_cases.category.category_permissions import (
    AddCategoryModeratorUseCase,
    GetCategoryPermissionsUseCase,
    RemoveCategoryModeratorUseCase,
    SetCategoryPermissionsUseCase,
)
from rolegate.application.use_cases.permission.create_permission import CreatePermissionUseCase
from rolegate.application.use_cases.permission.delete_permission import (
    DeletePermissionUseCase,
    ListPermissionsUseCase,
)
from rolegate.application.use_cases.permission.update_permission import UpdatePermissionUseCase
from rolegate.application.use_cases.rbac.rbac_config import GetRbacConfigUseCase
from rolegate.application.use_cases.role.create_role import CreateRoleUseCase
from rolegate.application.use_cases.role.delete_role import DeleteRoleUseCase
from rolegate.application.use_cases.role.get_role import GetRoleUseCase, ListRolesUseCase
from rolegate.application.use_cases.role.set_role_permissions import SetRolePermissionsUseCase
from rolegate.application.use_cases.role.update_role import UpdateRoleUseCase
from rolegate.application.use_cases.user_role.assign_role import AssignRoleUseCase
from rolegate.application.use_cases.user_role.list_user_roles import ListUserRolesUseCase
from rolegate.application.use_cases.user_role.revoke_role import RevokeRoleUseCase
from rolegate.config import Settings, get_settings
from rolegate.infrastructure.auth.keycloak_provider import KeycloakProvider
from rolegate.infrastructure.cache.aiocache_store import create_cache
from rolegate.infrastructure.persistence.postgres.connection import create_pool
from rolegate.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from rolegate.interfaces.api.app import Resources, create_app
from rolegate.interfaces.api.middleware.auth import AuthMiddleware
from rolegate.interfaces.api.middleware.authorization import AuthorizationMiddleware
from rolegate.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
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
from rolegate.logging_config import configure_logging

logger = logging.getLogger(__name__)


def build_authorization_service(
    settings: Settings, uow_factory, cache
) -> AuthorizationService:
    """Authorization service configured from settings."""
    timezone = ZoneInfo(settings.timezone) if settings.timezone else None
    return AuthorizationService(
        unit_of_work_factory=uow_factory,
        cache=cache,
        evaluator=ConditionEvaluator(
            missing_context_policy=settings.missing_context_policy,
            timezone=timezone,
        ),
        rate_limiter=RateLimiter(cache, unavailable_policy=settings.cache_unavailable_policy),
        cache_ttl=settings.permission_cache_ttl,
        admin_role_slug=settings.admin_role_slug,
        moderator_role_slugs=settings.moderator_roles,
    )


def build_resources(uow_factory, authorization: AuthorizationService, user_status: UserStatusService) -> Resources:
    get_role = GetRoleUseCase(uow_factory)
    return Resources(
        health=HealthResource(),
        rbac_config=RbacConfigResource(GetRbacConfigUseCase(uow_factory)),
        rbac_check=RbacCheckResource(),
        me=MePermissionsResource(user_status),
        roles=RolesResource(ListRolesUseCase(uow_factory), CreateRoleUseCase(uow_factory)),
        role=RoleResource(
            get_role,
            UpdateRoleUseCase(uow_factory, authorization),
            DeleteRoleUseCase(uow_factory, authorization),
        ),
        role_permissions=RolePermissionsResource(
            get_role, SetRolePermissionsUseCase(uow_factory, authorization)
        ),
        permissions=PermissionsResource(
            ListPermissionsUseCase(uow_factory), CreatePermissionUseCase(uow_factory)
        ),
        permission=PermissionResource(
            UpdatePermissionUseCase(uow_factory, authorization),
            DeletePermissionUseCase(uow_factory, authorization),
        ),
        user_roles=UserRolesResource(
            ListUserRolesUseCase(uow_factory), AssignRoleUseCase(uow_factory, authorization)
        ),
        user_role=UserRoleResource(RevokeRoleUseCase(uow_factory, authorization)),
        user_status=UserStatusResource(user_status),
        user_mute=UserMuteResource(user_status),
        user_ban=UserBanResource(user_status),
        category_permissions=CategoryPermissionsResource(
            GetCategoryPermissionsUseCase(uow_factory), SetCategoryPermissionsUseCase(uow_factory)
        ),
        category_moderators=CategoryModeratorsResource(AddCategoryModeratorUseCase(uow_factory)),
        category_moderator=CategoryModeratorResource(RemoveCategoryModeratorUseCase(uow_factory)),
    )


def create_rolegate_app() -> falcon.asgi.App:
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(settings.log_level)

    pool = create_pool(settings.database_url)
    uow_factory = create_uow_factory(pool)
    cache = create_cache(
        settings.cache_backend,
        redis_host=settings.redis_host,
        redis_port=settings.redis_port,
        redis_password=settings.redis_password,
        redis_db=settings.redis_db,
    )

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
            user_id_claim=settings.keycloak_user_id_claim,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("KEYCLOAK_CLIENT_SECRET is not set; every request is anonymous")

    authorization = build_authorization_service(settings, uow_factory, cache)
    user_status = UserStatusService(uow_factory, cache=cache, cache_ttl=settings.permission_cache_ttl)

    app = create_app(
        build_resources(uow_factory, authorization, user_status),
        middleware=[
            PoolLifespanMiddleware(pool, cache),
            AuthMiddleware(keycloak),
            AuthorizationMiddleware(authorization),
        ],
    )
    logger.info("RoleGate v%s ready (cache backend: %s)", __version__, settings.cache_backend)
    return app


def main() -> None:
    """Run uvicorn server."""
    import uvicorn

    uvicorn.run(create_rolegate_app(), host="0.0.0.0", port=8000)
