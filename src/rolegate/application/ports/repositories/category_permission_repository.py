"""Category permission repository port."""

from typing import Protocol

from rolegate.domain.entities import CategoryPermission


class CategoryPermissionRepository(Protocol):
    """Port for the per-category permission matrix."""

    async def get(self, category_id: int, role_id: int) -> CategoryPermission | None: ...

    async def list_for_category(self, category_id: int) -> list[CategoryPermission]: ...

    async def list_for_roles(
        self, category_id: int, role_ids: list[int]
    ) -> list[CategoryPermission]: ...

    async def upsert(self, row: CategoryPermission) -> None: ...

    async def replace_for_category(
        self, category_id: int, rows: list[CategoryPermission]
    ) -> None: ...
