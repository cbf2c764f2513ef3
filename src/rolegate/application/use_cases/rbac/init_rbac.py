"""Seed the built-in roles, permissions and default grants."""

import logging
from dataclasses import dataclass, field

from rolegate.domain import catalog
from rolegate.domain.entities import Permission, Role, RolePermission

logger = logging.getLogger(__name__)


@dataclass
class SeedCounts:
    added: int = 0
    updated: int = 0
    skipped: int = 0


@dataclass
class InitRbacResult:
    roles: SeedCounts = field(default_factory=SeedCounts)
    permissions: SeedCounts = field(default_factory=SeedCounts)
    grants: SeedCounts = field(default_factory=SeedCounts)


class InitRbacUseCase:
    """Create missing system roles and permissions and grant the defaults.

    Existing rows are left as they are unless ``reset`` is set, in which case
    they are rewritten from the catalog. Default grants are always upserted.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, reset: bool = False) -> InitRbacResult:
        result = InitRbacResult()
        async with self._uow_factory() as uow:
            role_ids = await self._seed_roles(uow, reset, result.roles)
            permission_ids = await self._seed_permissions(uow, reset, result.permissions)

            for role_slug, permission_slugs in catalog.ROLE_PERMISSION_MAP.items():
                conditions = catalog.DEFAULT_GRANT_CONDITIONS.get(role_slug, {})
                for slug in permission_slugs:
                    await uow.role_permissions.upsert(
                        RolePermission(
                            role_id=role_ids[role_slug],
                            permission_id=permission_ids[slug],
                            conditions=conditions.get(slug),
                        )
                    )
                    result.grants.added += 1

        logger.info(
            "RBAC initialized: roles %s, permissions %s, grants %s",
            result.roles,
            result.permissions,
            result.grants,
        )
        return result

    async def _seed_roles(self, uow, reset: bool, counts: SeedCounts) -> dict[str, int]:
        role_ids: dict[str, int] = {}
        for seed in catalog.SYSTEM_ROLES:
            existing = await uow.roles.get_by_slug(seed.slug)
            role = Role(
                id=existing.id if existing else 0,
                slug=seed.slug,
                name=seed.name,
                priority=seed.priority,
                parent_id=existing.parent_id if existing else None,
                description=seed.description,
                color=seed.color,
                icon=seed.icon,
                is_displayed=seed.is_displayed,
                is_system=True,
                is_default=seed.is_default,
            )
            if existing is None:
                role = await uow.roles.create(role)
                counts.added += 1
            elif reset:
                await uow.roles.update(role)
                counts.updated += 1
            else:
                role = existing
                counts.skipped += 1
            role_ids[seed.slug] = role.id

        # parents are linked once every system role has an id
        for seed in catalog.SYSTEM_ROLES:
            if seed.parent_slug is None:
                continue
            role = await uow.roles.get_by_id(role_ids[seed.slug])
            parent_id = role_ids[seed.parent_slug]
            if role.parent_id != parent_id:
                role.parent_id = parent_id
                await uow.roles.update(role)
        return role_ids

    async def _seed_permissions(self, uow, reset: bool, counts: SeedCounts) -> dict[str, int]:
        permission_ids: dict[str, int] = {}
        for seed in catalog.SYSTEM_PERMISSIONS:
            existing = await uow.permissions.get_by_slug(seed.slug)
            if existing is None:
                permission = await uow.permissions.create(
                    Permission(
                        id=0,
                        slug=seed.slug,
                        name=seed.name,
                        module=seed.module,
                        action=seed.action,
                        is_system=True,
                    )
                )
                counts.added += 1
            elif reset:
                existing.name = seed.name
                existing.module = seed.module
                existing.action = seed.action
                existing.is_system = True
                await uow.permissions.update(existing)
                permission = existing
                counts.updated += 1
            else:
                permission = existing
                counts.skipped += 1
            permission_ids[seed.slug] = permission.id
        return permission_ids
