"""Unit tests for use cases."""

from datetime import timedelta

import pytest

from rolegate.application.services.authorization_service import (
    AuthorizationService,
    permissions_cache_key,
)
from rolegate.application.use_cases.category.category_permissions import (
    AddCategoryModeratorUseCase,
    GetCategoryPermissionsUseCase,
    RemoveCategoryModeratorUseCase,
    SetCategoryPermissionsUseCase,
)
from rolegate.application.use_cases.permission.create_permission import CreatePermissionUseCase
from rolegate.application.use_cases.permission.delete_permission import (
    DeletePermissionUseCase,
    ListPermissionsUseCase,
)
from rolegate.application.use_cases.permission.update_permission import UpdatePermissionUseCase
from rolegate.application.use_cases.role.create_role import CreateRoleUseCase
from rolegate.application.use_cases.role.delete_role import DeleteRoleUseCase
from rolegate.application.use_cases.role.get_role import GetRoleUseCase, ListRolesUseCase
from rolegate.application.use_cases.role.set_role_permissions import SetRolePermissionsUseCase
from rolegate.application.use_cases.role.update_role import UpdateRoleUseCase
from rolegate.application.use_cases.user_role.assign_role import AssignRoleUseCase
from rolegate.application.use_cases.user_role.list_user_roles import ListUserRolesUseCase
from rolegate.application.use_cases.user_role.revoke_role import RevokeRoleUseCase
from rolegate.domain.entities import CategoryPermission, Permission, Role
from rolegate.domain.exceptions import (
    CircularInheritance,
    Conflict,
    InvalidConditions,
    NotFound,
    ValidationError,
)
from rolegate.infrastructure.cache.aiocache_store import AiocacheStore

from tests.conftest import NOW, FakeClock, FakeUnitOfWork, assign, grant, seed_forum


@pytest.fixture
def authorization(uow: FakeUnitOfWork, uow_factory, memory_cache: AiocacheStore, clock: FakeClock):
    seed_forum(uow)
    return AuthorizationService(uow_factory, cache=memory_cache, clock=clock)


# --- roles ---


@pytest.mark.asyncio
async def test_create_role(uow: FakeUnitOfWork, uow_factory, authorization) -> None:
    role = await CreateRoleUseCase(uow_factory).execute(
        slug="editor", name="Editor", parent_id=1, priority=30, color="#00ff00"
    )
    assert role.id == 5
    assert not role.is_system
    assert (await uow.roles.get_by_slug("editor")).parent_id == 1
    assert uow.commits >= 1


@pytest.mark.asyncio
async def test_create_role_duplicate_slug(uow_factory, authorization) -> None:
    with pytest.raises(Conflict):
        await CreateRoleUseCase(uow_factory).execute(slug="vip", name="VIP 2")


@pytest.mark.asyncio
async def test_create_role_unknown_parent(uow: FakeUnitOfWork, uow_factory, authorization) -> None:
    with pytest.raises(ValidationError):
        await CreateRoleUseCase(uow_factory).execute(slug="editor", name="Editor", parent_id=99)
    assert uow.rollbacks == 1


@pytest.mark.asyncio
async def test_update_role_rejects_cycle(uow: FakeUnitOfWork, uow_factory, authorization) -> None:
    use_case = UpdateRoleUseCase(uow_factory, authorization)
    with pytest.raises(CircularInheritance):
        await use_case.execute(1, {"parent_id": 4})
    with pytest.raises(CircularInheritance):
        await use_case.execute(2, {"parent_id": 2})
    assert (await uow.roles.get_by_id(1)).parent_id is None


@pytest.mark.asyncio
async def test_update_role_unknown_parent(uow_factory, authorization) -> None:
    with pytest.raises(ValidationError):
        await UpdateRoleUseCase(uow_factory, authorization).execute(1, {"parent_id": 99})


@pytest.mark.asyncio
async def test_update_role_fields(uow: FakeUnitOfWork, uow_factory, authorization) -> None:
    uow.roles.add_role(Role(id=10, slug="editor", name="Editor", priority=20))
    updated = await UpdateRoleUseCase(uow_factory, authorization).execute(
        10, {"slug": "writer", "name": "Writer", "color": "#123456"}
    )
    assert (updated.slug, updated.name, updated.color) == ("writer", "Writer", "#123456")
    assert (await uow.roles.get_by_id(10)).slug == "writer"


@pytest.mark.asyncio
async def test_update_role_system_slug_is_kept(uow: FakeUnitOfWork, uow_factory, authorization) -> None:
    updated = await UpdateRoleUseCase(uow_factory, authorization).execute(
        2, {"slug": "gold", "name": "Gold"}
    )
    assert updated.slug == "vip"
    assert updated.name == "Gold"


@pytest.mark.asyncio
async def test_update_role_errors(uow: FakeUnitOfWork, uow_factory, authorization) -> None:
    uow.roles.add_role(Role(id=10, slug="editor", name="Editor"))
    use_case = UpdateRoleUseCase(uow_factory, authorization)
    with pytest.raises(ValidationError):
        await use_case.execute(10, {"is_system": True})
    with pytest.raises(NotFound):
        await use_case.execute(99, {"name": "x"})
    with pytest.raises(Conflict):
        await use_case.execute(10, {"slug": "vip"})


@pytest.mark.asyncio
async def test_update_role_priority_invalidates_holders(
    uow: FakeUnitOfWork, uow_factory, authorization, memory_cache: AiocacheStore
) -> None:
    assign(uow, 10, 3)
    await authorization.get_user_permissions(10)
    await UpdateRoleUseCase(uow_factory, authorization).execute(2, {"priority": 60})
    assert await memory_cache.get(permissions_cache_key(10)) is None


@pytest.mark.asyncio
async def test_delete_role(uow: FakeUnitOfWork, uow_factory, authorization, memory_cache) -> None:
    child = uow.roles.add_role(Role(id=10, slug="editor", name="Editor", parent_id=1))
    uow.roles.add_role(Role(id=11, slug="junior", name="Junior", parent_id=10))
    grant(uow, 10, "topic.pin")
    assign(uow, 20, 11)
    assert await authorization.has_permission(20, "topic.pin")

    await DeleteRoleUseCase(uow_factory, authorization).execute(child.id)

    assert await uow.roles.get_by_id(10) is None
    assert (await uow.roles.get_by_id(11)).parent_id is None
    assert await uow.role_permissions.list_for_role(10) == []
    assert await memory_cache.get(permissions_cache_key(20)) is None
    assert not await authorization.has_permission(20, "topic.pin")


@pytest.mark.asyncio
async def test_delete_role_refuses_system_and_missing(uow_factory, authorization) -> None:
    use_case = DeleteRoleUseCase(uow_factory, authorization)
    with pytest.raises(ValidationError):
        await use_case.execute(1)
    with pytest.raises(NotFound):
        await use_case.execute(99)


@pytest.mark.asyncio
async def test_get_and_list_roles(uow: FakeUnitOfWork, uow_factory, authorization) -> None:
    grant(uow, 2, "upload.file", {"maxFileSize": 2048})
    details = await GetRoleUseCase(uow_factory).execute(2)
    assert details.role.slug == "vip"
    assert [(g.permission.slug, g.conditions) for g in details.grants] == [
        ("upload.file", {"maxFileSize": 2048})
    ]
    roles = await ListRolesUseCase(uow_factory).execute()
    assert [r.slug for r in roles] == ["admin", "moderator", "vip", "user"]
    with pytest.raises(NotFound):
        await GetRoleUseCase(uow_factory).execute(99)


@pytest.mark.asyncio
async def test_set_role_permissions(uow: FakeUnitOfWork, uow_factory, authorization) -> None:
    assign(uow, 10, 1)
    grant(uow, 1, "topic.pin")
    use_case = SetRolePermissionsUseCase(uow_factory, authorization)
    rows = await use_case.execute(
        1,
        [
            {"permission_id": 1, "conditions": {"categories": [3]}},
            {"permission_id": 2, "conditions": None},
        ],
    )
    assert [(r.permission_id, r.conditions) for r in rows] == [(1, {"categories": [3]}), (2, None)]
    permissions = await authorization.get_user_permissions(10)
    assert set(permissions) == {"topic.create", "topic.update"}


@pytest.mark.asyncio
async def test_set_role_permissions_validation(uow_factory, authorization) -> None:
    use_case = SetRolePermissionsUseCase(uow_factory, authorization)
    with pytest.raises(NotFound):
        await use_case.execute(99, [])
    with pytest.raises(NotFound):
        await use_case.execute(1, [{"permission_id": 404}])
    with pytest.raises(InvalidConditions):
        await use_case.execute(1, [{"permission_id": 1, "conditions": {"own": "maybe"}}])


# --- permissions ---


@pytest.mark.asyncio
async def test_create_permission(uow: FakeUnitOfWork, uow_factory, authorization) -> None:
    permission = await CreatePermissionUseCase(uow_factory).execute(
        slug="wiki.edit", name="Edit wiki", module="wiki", action="edit"
    )
    assert permission.id == 7
    assert not permission.is_system
    with pytest.raises(Conflict):
        await CreatePermissionUseCase(uow_factory).execute(
            slug="wiki.edit", name="Again", module="wiki", action="edit"
        )
    with pytest.raises(ValidationError):
        await CreatePermissionUseCase(uow_factory).execute(
            slug=" ", name="Blank", module="wiki", action="edit"
        )


@pytest.mark.asyncio
async def test_update_permission(uow: FakeUnitOfWork, uow_factory, authorization, memory_cache) -> None:
    custom = uow.permissions.add_permission(
        Permission(id=20, slug="wiki.edit", name="Edit wiki", module="wiki", action="edit")
    )
    grant(uow, 1, "wiki.edit")
    assign(uow, 10, 1)
    assert "wiki.edit" in await authorization.get_user_permissions(10)

    use_case = UpdatePermissionUseCase(uow_factory, authorization)
    updated = await use_case.execute(custom.id, {"slug": "wiki.write", "name": "Write wiki"})

    assert updated.slug == "wiki.write"
    assert await memory_cache.get(permissions_cache_key(10)) is None
    assert "wiki.write" in await authorization.get_user_permissions(10)


@pytest.mark.asyncio
async def test_update_system_permission_keeps_identity(
    uow: FakeUnitOfWork, uow_factory, authorization
) -> None:
    use_case = UpdatePermissionUseCase(uow_factory, authorization)
    updated = await use_case.execute(1, {"slug": "topic.make", "module": "x", "name": "New topic"})
    assert (updated.slug, updated.module, updated.name) == ("topic.create", "topic", "New topic")
    with pytest.raises(ValidationError):
        await use_case.execute(1, {"is_system": False})

    uow.permissions.add_permission(
        Permission(id=20, slug="wiki.edit", name="Edit wiki", module="wiki", action="edit")
    )
    with pytest.raises(Conflict):
        await use_case.execute(20, {"slug": "topic.pin"})


@pytest.mark.asyncio
async def test_delete_permission(uow: FakeUnitOfWork, uow_factory, authorization) -> None:
    custom = uow.permissions.add_permission(
        Permission(id=20, slug="wiki.edit", name="Edit wiki", module="wiki", action="edit")
    )
    grant(uow, 1, "wiki.edit")
    assign(uow, 10, 1)
    assert await authorization.has_permission(10, "wiki.edit")

    use_case = DeletePermissionUseCase(uow_factory, authorization)
    await use_case.execute(custom.id)

    assert await uow.permissions.get_by_id(20) is None
    assert not await authorization.has_permission(10, "wiki.edit")
    with pytest.raises(ValidationError):
        await use_case.execute(1)
    with pytest.raises(NotFound):
        await use_case.execute(20)


@pytest.mark.asyncio
async def test_list_permissions_grouped(uow_factory, authorization) -> None:
    grouped = await ListPermissionsUseCase(uow_factory).execute()
    assert list(grouped) == ["topic", "upload", "user"]
    assert [p.slug for p in grouped["topic"]] == [
        "topic.create",
        "topic.delete",
        "topic.pin",
        "topic.update",
    ]


# --- user roles ---


@pytest.mark.asyncio
async def test_assign_and_revoke_role(uow: FakeUnitOfWork, uow_factory, authorization) -> None:
    grant(uow, 2, "upload.file")
    assigned = await AssignRoleUseCase(uow_factory, authorization).execute(
        10, 2, expires_at=NOW + timedelta(days=30), assigned_by=1
    )
    assert assigned.assigned_by == 1
    assert await authorization.has_permission(10, "upload.file")

    await RevokeRoleUseCase(uow_factory, authorization).execute(10, 2)
    assert not await authorization.has_permission(10, "upload.file")
    with pytest.raises(NotFound):
        await RevokeRoleUseCase(uow_factory, authorization).execute(10, 2)
    with pytest.raises(NotFound):
        await AssignRoleUseCase(uow_factory, authorization).execute(10, 99)


@pytest.mark.asyncio
async def test_list_user_roles(uow: FakeUnitOfWork, uow_factory, authorization, clock) -> None:
    assign(uow, 10, 1)
    assign(uow, 10, 3)
    assign(uow, 10, 2, expires_at=NOW - timedelta(days=1))
    views = await ListUserRolesUseCase(uow_factory, clock=clock).execute(10)
    assert [v.role.slug for v in views] == ["moderator", "user"]
    assert views[0].assignment.user_id == 10


# --- category matrix ---


@pytest.mark.asyncio
async def test_set_and_get_category_permissions(uow: FakeUnitOfWork, uow_factory, authorization) -> None:
    await uow.category_permissions.upsert(CategoryPermission(role_id=3, category_id=8))
    rows = await SetCategoryPermissionsUseCase(uow_factory).execute(
        8, [{"role_id": 2, "can_create": False}, {"role_id": 1, "can_view": True, "can_reply": False}]
    )
    assert len(rows) == 2

    stored = await GetCategoryPermissionsUseCase(uow_factory).execute(8)
    assert [(r.role_id, r.can_create, r.can_reply) for r in stored] == [(1, True, False), (2, False, True)]


@pytest.mark.asyncio
async def test_set_category_permissions_validation(uow_factory, authorization) -> None:
    use_case = SetCategoryPermissionsUseCase(uow_factory)
    with pytest.raises(ValidationError):
        await use_case.execute(8, [{"can_view": False}])
    with pytest.raises(ValidationError):
        await use_case.execute(8, [{"role_id": 1}, {"role_id": 1}])
    with pytest.raises(NotFound):
        await use_case.execute(8, [{"role_id": 99}])


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["false", 0, None])
async def test_category_flags_must_be_booleans(uow: FakeUnitOfWork, uow_factory, value) -> None:
    with pytest.raises(ValidationError):
        await SetCategoryPermissionsUseCase(uow_factory).execute(
            8, [{"role_id": 1, "can_view": value}]
        )
    assert await uow.category_permissions.list_for_category(8) == []


@pytest.mark.asyncio
async def test_category_moderators(uow: FakeUnitOfWork, uow_factory, authorization) -> None:
    await uow.category_permissions.upsert(
        CategoryPermission(role_id=2, category_id=8, can_create=False)
    )
    row = await AddCategoryModeratorUseCase(uow_factory).execute(8, 2)
    assert row.can_moderate
    assert not row.can_create

    fresh = await AddCategoryModeratorUseCase(uow_factory).execute(9, 1)
    assert (fresh.can_view, fresh.can_moderate) == (True, True)

    removed = await RemoveCategoryModeratorUseCase(uow_factory).execute(8, 2)
    assert not removed.can_moderate
    assert not (await uow.category_permissions.get(8, 2)).can_moderate

    with pytest.raises(NotFound):
        await RemoveCategoryModeratorUseCase(uow_factory).execute(8, 3)
    with pytest.raises(NotFound):
        await AddCategoryModeratorUseCase(uow_factory).execute(8, 99)
