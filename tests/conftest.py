"""Pytest fixtures for RoleGate tests."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from aiocache import Cache

from rolegate.domain.entities import (
    CategoryPermission,
    Permission,
    Role,
    RolePermission,
    UserRole,
    UserStatus,
)
from rolegate.infrastructure.cache.aiocache_store import AiocacheStore

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


# --- Fake repositories ---


class FakeRoleRepository:
    """In-memory role repository; deletes cascade like the database schema."""

    def __init__(self, uow: FakeUnitOfWork) -> None:
        self._uow = uow
        self._by_id: dict[int, Role] = {}
        self._next_id = 1

    def add_role(self, role: Role) -> Role:
        self._by_id[role.id] = role
        self._next_id = max(self._next_id, role.id + 1)
        return role

    async def get_by_id(self, role_id: int) -> Role | None:
        return self._by_id.get(role_id)

    async def get_by_slug(self, slug: str) -> Role | None:
        return next((r for r in self._by_id.values() if r.slug == slug), None)

    async def list_all(self) -> list[Role]:
        return sorted(self._by_id.values(), key=lambda r: r.id)

    async def list_by_ids(self, role_ids: list[int]) -> list[Role]:
        return [self._by_id[i] for i in sorted(set(role_ids)) if i in self._by_id]

    async def list_active_for_user(self, user_id: int, now: datetime) -> list[Role]:
        assignments = await self._uow.user_roles.list_for_user(user_id)
        return [
            self._by_id[a.role_id]
            for a in assignments
            if a.is_active(now) and a.role_id in self._by_id
        ]

    async def create(self, role: Role) -> Role:
        stored = replace(role, id=self._next_id)
        self._next_id += 1
        self._by_id[stored.id] = stored
        return stored

    async def update(self, role: Role) -> None:
        self._by_id[role.id] = role

    async def delete(self, role_id: int) -> None:
        self._by_id.pop(role_id, None)
        for role in self._by_id.values():
            if role.parent_id == role_id:
                role.parent_id = None
        self._uow.user_roles.drop_role(role_id)
        self._uow.role_permissions.drop_role(role_id)
        self._uow.category_permissions.drop_role(role_id)


class FakePermissionRepository:
    """In-memory permission repository."""

    def __init__(self, uow: FakeUnitOfWork) -> None:
        self._uow = uow
        self._by_id: dict[int, Permission] = {}
        self._next_id = 1

    def add_permission(self, permission: Permission) -> Permission:
        self._by_id[permission.id] = permission
        self._next_id = max(self._next_id, permission.id + 1)
        return permission

    async def get_by_id(self, permission_id: int) -> Permission | None:
        return self._by_id.get(permission_id)

    async def get_by_slug(self, slug: str) -> Permission | None:
        return next((p for p in self._by_id.values() if p.slug == slug), None)

    async def list_all(self) -> list[Permission]:
        return sorted(self._by_id.values(), key=lambda p: p.id)

    async def list_by_ids(self, permission_ids: list[int]) -> list[Permission]:
        return [self._by_id[i] for i in sorted(set(permission_ids)) if i in self._by_id]

    async def create(self, permission: Permission) -> Permission:
        stored = replace(permission, id=self._next_id)
        self._next_id += 1
        self._by_id[stored.id] = stored
        return stored

    async def update(self, permission: Permission) -> None:
        self._by_id[permission.id] = permission

    async def delete(self, permission_id: int) -> None:
        self._by_id.pop(permission_id, None)
        self._uow.role_permissions.drop_permission(permission_id)


class FakeRolePermissionRepository:
    """In-memory grants keyed by (role_id, permission_id)."""

    def __init__(self) -> None:
        self._grants: dict[tuple[int, int], RolePermission] = {}

    def add_grant(self, grant: RolePermission) -> None:
        self._grants[(grant.role_id, grant.permission_id)] = grant

    def drop_role(self, role_id: int) -> None:
        self._grants = {k: g for k, g in self._grants.items() if k[0] != role_id}

    def drop_permission(self, permission_id: int) -> None:
        self._grants = {k: g for k, g in self._grants.items() if k[1] != permission_id}

    async def list_for_roles(self, role_ids: list[int]) -> list[RolePermission]:
        wanted = set(role_ids)
        return [g for k, g in sorted(self._grants.items()) if k[0] in wanted]

    async def list_for_role(self, role_id: int) -> list[RolePermission]:
        return await self.list_for_roles([role_id])

    async def list_role_ids_for_permission(self, permission_id: int) -> list[int]:
        return sorted(k[0] for k in self._grants if k[1] == permission_id)

    async def upsert(self, grant: RolePermission) -> None:
        self.add_grant(grant)

    async def replace_for_role(self, role_id: int, grants: list[RolePermission]) -> None:
        self.drop_role(role_id)
        for grant in grants:
            self.add_grant(grant)


class FakeUserRoleRepository:
    """In-memory assignments keyed by (user_id, role_id)."""

    def __init__(self) -> None:
        self._assignments: dict[tuple[int, int], UserRole] = {}

    def drop_role(self, role_id: int) -> None:
        self._assignments = {k: a for k, a in self._assignments.items() if k[1] != role_id}

    async def get(self, user_id: int, role_id: int) -> UserRole | None:
        return self._assignments.get((user_id, role_id))

    async def list_for_user(self, user_id: int) -> list[UserRole]:
        return [a for k, a in sorted(self._assignments.items()) if k[0] == user_id]

    async def upsert(self, assignment: UserRole) -> None:
        self._assignments[(assignment.user_id, assignment.role_id)] = assignment

    async def delete(self, user_id: int, role_id: int) -> None:
        self._assignments.pop((user_id, role_id), None)

    async def list_user_ids_for_roles(self, role_ids: list[int]) -> list[int]:
        wanted = set(role_ids)
        return sorted({k[0] for k in self._assignments if k[1] in wanted})


class FakeCategoryPermissionRepository:
    """In-memory category matrix keyed by (category_id, role_id)."""

    def __init__(self) -> None:
        self._rows: dict[tuple[int, int], CategoryPermission] = {}

    def drop_role(self, role_id: int) -> None:
        self._rows = {k: r for k, r in self._rows.items() if k[1] != role_id}

    async def get(self, category_id: int, role_id: int) -> CategoryPermission | None:
        return self._rows.get((category_id, role_id))

    async def list_for_category(self, category_id: int) -> list[CategoryPermission]:
        return [r for k, r in sorted(self._rows.items()) if k[0] == category_id]

    async def list_for_roles(
        self, category_id: int, role_ids: list[int]
    ) -> list[CategoryPermission]:
        wanted = set(role_ids)
        return [r for k, r in sorted(self._rows.items()) if k[0] == category_id and k[1] in wanted]

    async def upsert(self, row: CategoryPermission) -> None:
        self._rows[(row.category_id, row.role_id)] = row

    async def replace_for_category(
        self, category_id: int, rows: list[CategoryPermission]
    ) -> None:
        self._rows = {k: r for k, r in self._rows.items() if k[0] != category_id}
        for row in rows:
            await self.upsert(row)


class FakeUserStatusRepository:
    """In-memory user status repository."""

    def __init__(self) -> None:
        self._by_user: dict[int, UserStatus] = {}

    async def get(self, user_id: int) -> UserStatus | None:
        status = self._by_user.get(user_id)
        return replace(status) if status else None

    async def upsert(self, status: UserStatus) -> None:
        self._by_user[status.user_id] = replace(status)


class FakeUnitOfWork:
    """In-memory Unit of Work with fake repositories."""

    def __init__(self) -> None:
        self.user_roles = FakeUserRoleRepository()
        self.role_permissions = FakeRolePermissionRepository()
        self.category_permissions = FakeCategoryPermissionRepository()
        self.user_statuses = FakeUserStatusRepository()
        self.roles = FakeRoleRepository(self)
        self.permissions = FakePermissionRepository(self)
        self.commits = 0
        self.rollbacks = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


def make_uow_factory(uow: FakeUnitOfWork):
    """UoW factory that yields the same in-memory UoW every time."""

    @asynccontextmanager
    async def factory():
        try:
            yield uow
            await uow.commit()
        except BaseException:
            await uow.rollback()
            raise

    return factory


class FakeClock:
    """Settable clock for services that take ``clock``."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FailingBackend:
    """aiocache stand-in whose every call fails like an unreachable Redis."""

    async def _fail(self, *args, **kwargs):
        raise ConnectionError("backend unreachable")

    get = set = add = delete = increment = _fail

    async def close(self) -> None:
        return None


# --- Seed helpers ---


def seed_forum(uow: FakeUnitOfWork) -> dict[str, Role]:
    """Roles admin(4) -> moderator(3) -> vip(2) -> user(1) and a few permissions."""
    roles = {
        "user": Role(id=1, slug="user", name="Member", priority=10, is_system=True, is_default=True),
        "vip": Role(id=2, slug="vip", name="VIP", priority=50, parent_id=1, is_system=True),
        "moderator": Role(id=3, slug="moderator", name="Moderator", priority=80, parent_id=2, is_system=True),
        "admin": Role(id=4, slug="admin", name="Administrator", priority=100, parent_id=3, is_system=True),
    }
    for role in roles.values():
        uow.roles.add_role(role)
    for pid, slug in enumerate(
        ["topic.create", "topic.update", "topic.delete", "topic.pin", "upload.file", "user.ban"],
        start=1,
    ):
        module, action = slug.split(".", 1)
        uow.permissions.add_permission(
            Permission(id=pid, slug=slug, name=slug, module=module, action=action, is_system=True)
        )
    return roles


def grant(uow: FakeUnitOfWork, role_id: int, slug: str, conditions=None) -> None:
    permission = next(p for p in uow.permissions._by_id.values() if p.slug == slug)
    uow.role_permissions.add_grant(
        RolePermission(role_id=role_id, permission_id=permission.id, conditions=conditions)
    )


def assign(
    uow: FakeUnitOfWork, user_id: int, role_id: int, expires_at: datetime | None = None
) -> None:
    uow.user_roles._assignments[(user_id, role_id)] = UserRole(
        user_id=user_id, role_id=role_id, assigned_at=NOW, expires_at=expires_at
    )


# --- Fixtures ---


@pytest.fixture
def uow() -> FakeUnitOfWork:
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(uow: FakeUnitOfWork):
    return make_uow_factory(uow)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_cache() -> AiocacheStore:
    """aiocache memory store; a fresh namespace isolates tests sharing the backend."""
    return AiocacheStore(Cache(Cache.MEMORY, namespace=f"test-{uuid4().hex}"))
