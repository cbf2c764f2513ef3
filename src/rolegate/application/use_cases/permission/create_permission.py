"""Create permission use case."""

import logging

from rolegate.domain.entities import Permission
from rolegate.domain.exceptions import Conflict, ValidationError

logger = logging.getLogger(__name__)


class CreatePermissionUseCase:
    """Register a custom permission slug (``module.action``)."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        slug: str,
        name: str,
        module: str,
        action: str,
        description: str | None = None,
    ) -> Permission:
        if not slug.strip():
            raise ValidationError("Permission slug is required")
        async with self._uow_factory() as uow:
            if await uow.permissions.get_by_slug(slug):
                raise Conflict(f"Permission slug already exists: {slug}")
            permission = await uow.permissions.create(
                Permission(
                    id=0,
                    slug=slug,
                    name=name,
                    module=module,
                    action=action,
                    description=description,
                    is_system=False,
                )
            )
        logger.info("Permission %s created with id %s", slug, permission.id)
        return permission
