"""Permission aggregator - merges the grants of all roles of a user."""

import logging

from rolegate.application.ports import UnitOfWork
from rolegate.application.services.role_inheritance import RoleInheritanceResolver
from rolegate.domain.entities import ResolvedPermission, Role, RolePermission
from rolegate.domain.exceptions import InvalidConditions
from rolegate.domain.value_objects import parse_conditions

logger = logging.getLogger(__name__)


class PermissionAggregator:
    """Builds the resolved permission set of a user.

    The user's active roles are expanded with their ancestors, then every
    grant is merged per permission slug:

    * an unconditional grant replaces a conditional one, whatever the priority;
    * a conditional grant replaces the current one only when its role has a
      strictly higher priority;
    * otherwise the current entry stays.

    Grants are visited in ascending role id order, so among roles of equal
    priority the lowest role id wins.
    """

    async def resolve(
        self, uow: UnitOfWork, user_id: int, roles: list[Role]
    ) -> dict[str, ResolvedPermission]:
        if not roles:
            return {}

        resolver = RoleInheritanceResolver(uow.roles)
        role_ids = {role.id for role in roles}
        for role in roles:
            if role.parent_id is not None:
                role_ids.update(await resolver.ancestors_of(role.id))
        expanded = sorted(role_ids)

        grants = await uow.role_permissions.list_for_roles(expanded)
        if not grants:
            return {}

        permission_ids = sorted({g.permission_id for g in grants})
        slugs = {p.id: p.slug for p in await uow.permissions.list_by_ids(permission_ids)}
        priorities = {r.id: r.priority for r in await uow.roles.list_by_ids(expanded)}

        resolved: dict[str, ResolvedPermission] = {}
        for grant in sorted(grants, key=lambda g: (g.role_id, g.permission_id)):
            slug = slugs.get(grant.permission_id)
            if slug is None:
                continue
            candidate = self._decode(slug, grant)
            existing = resolved.get(slug)
            if existing is None:
                resolved[slug] = candidate
                continue

            if not candidate.is_conditional:
                if existing.is_conditional:
                    resolved[slug] = candidate
                continue

            if not existing.is_conditional:
                continue
            candidate_priority = priorities.get(candidate.source_role_id, 0)
            existing_priority = priorities.get(existing.source_role_id, 0)
            if candidate_priority > existing_priority:
                resolved[slug] = candidate
            elif (
                candidate_priority == existing_priority
                and (candidate.conditions, candidate.malformed)
                != (existing.conditions, existing.malformed)
            ):
                logger.warning(
                    "Roles %s and %s share priority %s but grant %s with different "
                    "conditions (user %s); keeping role %s",
                    existing.source_role_id,
                    candidate.source_role_id,
                    existing_priority,
                    slug,
                    user_id,
                    existing.source_role_id,
                )
        return resolved

    def _decode(self, slug: str, grant: RolePermission) -> ResolvedPermission:
        try:
            conditions = parse_conditions(grant.conditions)
        except InvalidConditions as e:
            logger.warning(
                "Malformed conditions on role %s for %s, grant cannot be verified: %s",
                grant.role_id,
                slug,
                e,
            )
            return ResolvedPermission(
                slug=slug,
                permission_id=grant.permission_id,
                source_role_id=grant.role_id,
                malformed=True,
            )
        return ResolvedPermission(
            slug=slug,
            permission_id=grant.permission_id,
            source_role_id=grant.role_id,
            conditions=conditions,
        )
