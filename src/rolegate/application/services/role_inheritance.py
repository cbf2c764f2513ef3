"""Role inheritance - ancestor and descendant walks over ``parent_id`` links."""

import logging
from collections import defaultdict

from rolegate.application.ports.repositories import RoleRepository

logger = logging.getLogger(__name__)


class RoleInheritanceResolver:
    """Walks the role hierarchy. Stored cycles truncate the walk instead of looping."""

    def __init__(self, roles: RoleRepository) -> None:
        self._roles = roles

    async def _parent_of(self, role_id: int) -> int | None:
        role = await self._roles.get_by_id(role_id)
        return role.parent_id if role else None

    async def ancestors_of(self, role_id: int) -> list[int]:
        """Ancestor role ids of role, nearest first."""
        visited = {role_id}
        chain: list[int] = []
        parent_id = await self._parent_of(role_id)
        while parent_id is not None:
            if parent_id in visited:
                logger.warning(
                    "Role hierarchy cycle reached role %s while walking from role %s; chain truncated",
                    parent_id,
                    role_id,
                )
                break
            visited.add(parent_id)
            chain.append(parent_id)
            parent_id = await self._parent_of(parent_id)
        return chain

    async def detect_circular_inheritance(self, role_id: int, parent_id: int | None) -> bool:
        """True if making ``parent_id`` the parent of ``role_id`` would close a cycle."""
        if parent_id is None:
            return False
        if parent_id == role_id:
            return True

        visited = {parent_id}
        current = await self._parent_of(parent_id)
        while current is not None:
            if current == role_id:
                return True
            if current in visited:
                logger.warning(
                    "Existing role hierarchy cycle above role %s at role %s", parent_id, current
                )
                return False
            visited.add(current)
            current = await self._parent_of(current)
        return False

    async def descendants_of(self, role_id: int) -> list[int]:
        """Ids of every role that inherits from role, directly or transitively."""
        children: dict[int, list[int]] = defaultdict(list)
        for role in await self._roles.list_all():
            if role.parent_id is not None:
                children[role.parent_id].append(role.id)

        found: list[int] = []
        visited = {role_id}
        stack = [role_id]
        while stack:
            for child in children.get(stack.pop(), []):
                if child not in visited:
                    visited.add(child)
                    found.append(child)
                    stack.append(child)
        return found
