"""Authorization service - entry point for permission checks and RBAC administration."""

import logging
from collections.abc import Callable
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import Any

from rolegate.application.ports import CacheStore
from rolegate.application.services.condition_evaluator import ConditionEvaluator
from rolegate.application.services.permission_aggregator import PermissionAggregator
from rolegate.application.services.rate_limiter import (
    DailyLimitResult,
    RateLimiter,
    RateLimitResult,
)
from rolegate.application.services.role_inheritance import RoleInheritanceResolver
from rolegate.domain.entities import (
    AuthorizationProfile,
    CategoryAccess,
    ResolvedPermission,
    Role,
    RolePermission,
    UserRole,
)
from rolegate.domain.value_objects import (
    AccessContext,
    CategoryAction,
    parse_conditions,
)

logger = logging.getLogger(__name__)

PERMISSION_CACHE_TTL = 300


def _utcnow() -> datetime:
    return datetime.now(UTC)


def roles_cache_key(user_id: int) -> str:
    return f"user:{user_id}:roles"


def permissions_cache_key(user_id: int) -> str:
    return f"user:{user_id}:permissions"


@dataclass(frozen=True)
class AccessDecision:
    """Result of ``can``; ``reason`` says which rule decided."""

    granted: bool
    reason: str


def _dump_permission(entry: ResolvedPermission) -> dict[str, Any]:
    return {
        "slug": entry.slug,
        "permission_id": entry.permission_id,
        "source_role_id": entry.source_role_id,
        "conditions": entry.conditions.to_payload() if entry.conditions is not None else None,
        "malformed": entry.malformed,
    }


def _load_permission(data: dict[str, Any]) -> ResolvedPermission:
    return ResolvedPermission(
        slug=data["slug"],
        permission_id=data["permission_id"],
        source_role_id=data["source_role_id"],
        conditions=parse_conditions(data["conditions"]),
        malformed=data["malformed"],
    )


class AuthorizationService:
    """Decides whether a user may perform an action.

    Holders of the admin role pass every permission check, conditions
    included. Everyone else is checked against their resolved permission set,
    which is cached per user and must be invalidated whenever the underlying
    role data changes (the administration methods here do it).
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        cache: CacheStore | None = None,
        evaluator: ConditionEvaluator | None = None,
        rate_limiter: RateLimiter | None = None,
        aggregator: PermissionAggregator | None = None,
        cache_ttl: int = PERMISSION_CACHE_TTL,
        admin_role_slug: str = "admin",
        moderator_role_slugs: tuple[str, ...] = ("admin", "moderator"),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = cache
        self._evaluator = evaluator or ConditionEvaluator(clock=clock)
        self._rate_limiter = rate_limiter or RateLimiter(cache, clock=clock)
        self._aggregator = aggregator or PermissionAggregator()
        self._cache_ttl = cache_ttl
        self._admin_role_slug = admin_role_slug
        self._moderator_role_slugs = moderator_role_slugs
        self._clock = clock

    # ---- roles and permissions of a user ----

    async def get_user_roles(self, user_id: int) -> list[Role]:
        """Active (non-expired) roles assigned to user, ancestors not included."""
        if self._cache is None:
            return await self._fetch_user_roles(user_id)

        async def compute() -> list[dict[str, Any]]:
            return [asdict(role) for role in await self._fetch_user_roles(user_id)]

        data = await self._cache.remember(roles_cache_key(user_id), self._cache_ttl, compute)
        return [Role(**item) for item in data]

    async def _fetch_user_roles(self, user_id: int) -> list[Role]:
        async with self._uow_factory() as uow:
            return await uow.roles.list_active_for_user(user_id, self._clock())

    async def get_user_permissions(self, user_id: int) -> dict[str, ResolvedPermission]:
        """Resolved permission set of user, keyed by permission slug."""
        if self._cache is None:
            return await self._fetch_user_permissions(user_id)

        async def compute() -> list[dict[str, Any]]:
            resolved = await self._fetch_user_permissions(user_id)
            return [_dump_permission(entry) for entry in resolved.values()]

        data = await self._cache.remember(
            permissions_cache_key(user_id), self._cache_ttl, compute
        )
        entries = [_load_permission(item) for item in data]
        return {entry.slug: entry for entry in entries}

    async def _fetch_user_permissions(self, user_id: int) -> dict[str, ResolvedPermission]:
        roles = await self.get_user_roles(user_id)
        if not roles:
            return {}
        async with self._uow_factory() as uow:
            return await self._aggregator.resolve(uow, user_id, roles)

    async def clear_user_permission_cache(self, user_id: int) -> None:
        """Drop cached roles and permissions of user."""
        if self._cache is not None:
            await self._cache.invalidate(
                [roles_cache_key(user_id), permissions_cache_key(user_id)]
            )

    async def invalidate_role(self, role_id: int) -> list[int]:
        """Clear the caches of every user holding role or a role inheriting from it."""
        if self._cache is None:
            return []
        async with self._uow_factory() as uow:
            resolver = RoleInheritanceResolver(uow.roles)
            role_ids = [role_id, *await resolver.descendants_of(role_id)]
            user_ids = await uow.user_roles.list_user_ids_for_roles(role_ids)
        for user_id in user_ids:
            await self.clear_user_permission_cache(user_id)
        logger.info("Invalidated permission cache of %d users after change to role %s", len(user_ids), role_id)
        return user_ids

    # ---- checks ----

    async def has_role(self, user_id: int, slug: str) -> bool:
        roles = await self.get_user_roles(user_id)
        return any(role.slug == slug for role in roles)

    async def _is_admin(self, user_id: int) -> bool:
        return await self.has_role(user_id, self._admin_role_slug)

    def _decide(
        self, user_id: int, entry: ResolvedPermission | None, context: AccessContext | None
    ) -> AccessDecision:
        if entry is None:
            return AccessDecision(False, "not_granted")
        if entry.malformed:
            logger.warning(
                "Denying %s to user %s: conditions of role %s cannot be verified",
                entry.slug,
                user_id,
                entry.source_role_id,
            )
            return AccessDecision(False, "unverifiable_conditions")
        if entry.conditions is None:
            return AccessDecision(True, "granted")
        if self._evaluator.satisfies(entry.conditions, context, user_id):
            return AccessDecision(True, "conditions_met")
        return AccessDecision(False, "conditions_failed")

    async def can(
        self, user_id: int, slug: str, context: AccessContext | None = None
    ) -> AccessDecision:
        """Decide one permission check and report why."""
        if await self._is_admin(user_id):
            return AccessDecision(True, "admin")
        permissions = await self.get_user_permissions(user_id)
        return self._decide(user_id, permissions.get(slug), context)

    async def has_permission(
        self, user_id: int, slug: str, context: AccessContext | None = None
    ) -> bool:
        return (await self.can(user_id, slug, context)).granted

    async def has_any_permission(
        self, user_id: int, slugs: list[str], context: AccessContext | None = None
    ) -> bool:
        if await self._is_admin(user_id):
            return True
        permissions = await self.get_user_permissions(user_id)
        return any(self._decide(user_id, permissions.get(s), context).granted for s in slugs)

    async def has_all_permissions(
        self, user_id: int, slugs: list[str], context: AccessContext | None = None
    ) -> bool:
        if await self._is_admin(user_id):
            return True
        permissions = await self.get_user_permissions(user_id)
        return all(self._decide(user_id, permissions.get(s), context).granted for s in slugs)

    async def check_rate_limit(
        self, user_id: int, slug: str, action_key: str
    ) -> RateLimitResult:
        """Count one ``action_key`` action against the rateLimit condition of ``slug``."""
        entry = (await self.get_user_permissions(user_id)).get(slug)
        limit = entry.conditions.rate_limit if entry and entry.conditions else None
        if limit is None:
            return RateLimitResult(allowed=True)
        return await self._rate_limiter.hit(user_id, action_key, limit)

    async def check_daily_upload_limit(
        self, user_id: int, slug: str, current_day_count: int
    ) -> DailyLimitResult:
        entry = (await self.get_user_permissions(user_id)).get(slug)
        limit = entry.conditions.max_files_per_day if entry and entry.conditions else None
        return RateLimiter.daily_limit(limit, current_day_count)

    async def get_category_permissions(self, user_id: int, category_id: int) -> CategoryAccess:
        """Merged category flags of user's roles; defaults when no role has an override."""
        if await self._is_admin(user_id):
            return CategoryAccess.everything()
        roles = await self.get_user_roles(user_id)
        if not roles:
            return CategoryAccess.none()
        async with self._uow_factory() as uow:
            rows = await uow.category_permissions.list_for_roles(
                category_id, [role.id for role in roles]
            )
        if not rows:
            return CategoryAccess.defaults()
        return CategoryAccess.merge(rows)

    async def has_category_permission(
        self, user_id: int, category_id: int, action: CategoryAction
    ) -> bool:
        access = await self.get_category_permissions(user_id, category_id)
        return access.allows(action)

    async def describe_user(self, user_id: int) -> AuthorizationProfile:
        """Roles, effective permission slugs and display role of user."""
        roles = await self.get_user_roles(user_id)
        permissions = await self.get_user_permissions(user_id)
        displayed = [role for role in roles if role.is_displayed]
        display_role = max(displayed, key=lambda r: r.priority) if displayed else None
        slugs = {role.slug for role in roles}
        return AuthorizationProfile(
            user_id=user_id,
            roles=roles,
            permissions=list(permissions),
            display_role=display_role,
            is_admin=self._admin_role_slug in slugs,
            is_moderator=bool(slugs.intersection(self._moderator_role_slugs)),
        )

    # ---- hierarchy ----

    async def ancestors_of(self, role_id: int) -> list[int]:
        async with self._uow_factory() as uow:
            return await RoleInheritanceResolver(uow.roles).ancestors_of(role_id)

    async def detect_circular_inheritance(self, role_id: int, parent_id: int | None) -> bool:
        async with self._uow_factory() as uow:
            return await RoleInheritanceResolver(uow.roles).detect_circular_inheritance(
                role_id, parent_id
            )

    # ---- administration ----

    async def assign_role_to_user(
        self,
        user_id: int,
        role_id: int,
        expires_at: datetime | None = None,
        assigned_by: int | None = None,
    ) -> UserRole:
        """Grant role to user, or renew the existing assignment."""
        assignment = UserRole(
            user_id=user_id,
            role_id=role_id,
            assigned_at=self._clock(),
            expires_at=expires_at,
            assigned_by=assigned_by,
        )
        async with self._uow_factory() as uow:
            await uow.user_roles.upsert(assignment)
        await self.clear_user_permission_cache(user_id)
        logger.info("Role %s assigned to user %s (expires %s)", role_id, user_id, expires_at)
        return assignment

    async def remove_role_from_user(self, user_id: int, role_id: int) -> None:
        async with self._uow_factory() as uow:
            await uow.user_roles.delete(user_id, role_id)
        await self.clear_user_permission_cache(user_id)
        logger.info("Role %s removed from user %s", role_id, user_id)

    async def set_role_permissions(self, role_id: int, grants: list[RolePermission]) -> None:
        """Replace the grants of role. Condition payloads are validated before writing."""
        normalized = []
        for grant in grants:
            conditions = parse_conditions(grant.conditions)
            payload = conditions.to_payload() if conditions is not None else None
            normalized.append(
                RolePermission(
                    role_id=role_id,
                    permission_id=grant.permission_id,
                    conditions=payload or None,
                )
            )
        async with self._uow_factory() as uow:
            await uow.role_permissions.replace_for_role(role_id, normalized)
        await self.invalidate_role(role_id)
