"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from rolegate.application.ports.repositories import (
    CategoryPermissionRepository,
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    UserRoleRepository,
    UserStatusRepository,
)


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def roles(self) -> RoleRepository: ...

    @property
    def permissions(self) -> PermissionRepository: ...

    @property
    def role_permissions(self) -> RolePermissionRepository: ...

    @property
    def user_roles(self) -> UserRoleRepository: ...

    @property
    def category_permissions(self) -> CategoryPermissionRepository: ...

    @property
    def user_statuses(self) -> UserStatusRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
