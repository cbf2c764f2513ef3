"""Permission checker port - what request guards need from the authorization service."""

from typing import Protocol

from rolegate.domain.entities import CategoryAccess
from rolegate.domain.value_objects import AccessContext, CategoryAction


class PermissionChecker(Protocol):
    """Port for checking user permissions and roles."""

    async def has_permission(
        self, user_id: int, slug: str, context: AccessContext | None = None
    ) -> bool: ...

    async def has_any_permission(
        self, user_id: int, slugs: list[str], context: AccessContext | None = None
    ) -> bool: ...

    async def has_all_permissions(
        self, user_id: int, slugs: list[str], context: AccessContext | None = None
    ) -> bool: ...

    async def has_role(self, user_id: int, slug: str) -> bool: ...

    async def has_category_permission(
        self, user_id: int, category_id: int, action: CategoryAction
    ) -> bool: ...

    async def get_category_permissions(self, user_id: int, category_id: int) -> CategoryAccess: ...
