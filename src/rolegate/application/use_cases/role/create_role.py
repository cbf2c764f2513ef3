"""Create role use case."""

import logging

from rolegate.domain.entities import Role
from rolegate.domain.exceptions import Conflict, ValidationError

logger = logging.getLogger(__name__)


class CreateRoleUseCase:
    """Create a custom (non-system) role."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        slug: str,
        name: str,
        description: str | None = None,
        color: str | None = None,
        icon: str | None = None,
        parent_id: int | None = None,
        priority: int = 0,
        is_default: bool = False,
        is_displayed: bool = True,
    ) -> Role:
        """Create role. Slug must be unique and the parent must exist."""
        async with self._uow_factory() as uow:
            if await uow.roles.get_by_slug(slug):
                raise Conflict(f"Role slug already exists: {slug}")
            if parent_id is not None and not await uow.roles.get_by_id(parent_id):
                raise ValidationError(f"Parent role does not exist: {parent_id}")

            role = await uow.roles.create(
                Role(
                    id=0,
                    slug=slug,
                    name=name,
                    priority=priority,
                    parent_id=parent_id,
                    description=description,
                    color=color,
                    icon=icon,
                    is_displayed=is_displayed,
                    is_system=False,
                    is_default=is_default,
                )
            )
        logger.info("Role %s created with id %s", slug, role.id)
        return role
