"""Category permission matrix use cases."""

import logging
from typing import Any

from rolegate.domain.entities import CategoryPermission
from rolegate.domain.exceptions import NotFound, ValidationError

logger = logging.getLogger(__name__)

FLAGS = ("can_view", "can_create", "can_reply", "can_moderate")


class GetCategoryPermissionsUseCase:
    """Override rows of a category, one per role that has one."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, category_id: int) -> list[CategoryPermission]:
        async with self._uow_factory() as uow:
            rows = await uow.category_permissions.list_for_category(category_id)
        return sorted(rows, key=lambda r: r.role_id)


class SetCategoryPermissionsUseCase:
    """Replace the override matrix of a category."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, category_id: int, rows: list[dict[str, Any]]
    ) -> list[CategoryPermission]:
        """Each row is ``{"role_id": int, "can_view": bool, ...}``; missing flags take defaults."""
        entries = []
        seen: set[int] = set()
        for row in rows:
            try:
                role_id = int(row["role_id"])
            except (KeyError, TypeError, ValueError) as e:
                raise ValidationError(f"Invalid role_id in category permissions: {e}") from e
            if role_id in seen:
                raise ValidationError(f"Duplicate role in category permissions: {role_id}")
            seen.add(role_id)
            flags = {flag: row[flag] for flag in FLAGS if flag in row}
            for flag, value in flags.items():
                if not isinstance(value, bool):
                    raise ValidationError(
                        f"{flag} of role {role_id} must be a boolean, got {value!r}"
                    )
            entries.append(CategoryPermission(role_id=role_id, category_id=category_id, **flags))

        async with self._uow_factory() as uow:
            known = {r.id for r in await uow.roles.list_by_ids(sorted(seen))}
            missing = sorted(seen - known)
            if missing:
                raise NotFound("Role", ", ".join(str(r) for r in missing))
            await uow.category_permissions.replace_for_category(category_id, entries)
        logger.info("Category %s permission matrix replaced (%d roles)", category_id, len(entries))
        return entries


class AddCategoryModeratorUseCase:
    """Let a role moderate a category."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, category_id: int, role_id: int) -> CategoryPermission:
        async with self._uow_factory() as uow:
            if not await uow.roles.get_by_id(role_id):
                raise NotFound("Role", role_id)
            row = await uow.category_permissions.get(category_id, role_id)
            if row is None:
                row = CategoryPermission(role_id=role_id, category_id=category_id)
            row.can_moderate = True
            await uow.category_permissions.upsert(row)
        return row


class RemoveCategoryModeratorUseCase:
    """Take moderation of a category away from a role; the other flags stay."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, category_id: int, role_id: int) -> CategoryPermission:
        async with self._uow_factory() as uow:
            row = await uow.category_permissions.get(category_id, role_id)
            if row is None:
                raise NotFound("Category permission", f"{category_id}/{role_id}")
            row.can_moderate = False
            await uow.category_permissions.upsert(row)
        return row
