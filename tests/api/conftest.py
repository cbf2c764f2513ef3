"""Fixtures for API tests."""

from uuid import uuid4

import pytest
from aiocache import Cache
from falcon.testing import TestClient

from rolegate.application.services.authorization_service import AuthorizationService
from rolegate.application.services.user_status import UserStatusService
from rolegate.domain.entities import Permission
from rolegate.infrastructure.cache.aiocache_store import AiocacheStore
from rolegate.interfaces.api.app import create_app
from rolegate.interfaces.api.middleware.auth import RequestUser
from rolegate.interfaces.api.middleware.authorization import AuthorizationMiddleware
from rolegate.main import build_resources

from tests.conftest import FakeUnitOfWork, assign, grant, make_uow_factory, seed_forum

ADMIN = 1
MEMBER = 2
MODERATOR = 3


class AuthBypassMiddleware:
    """Middleware that takes the user id from ``X-User-Id`` for testing."""

    async def process_request(self, req, resp):
        raw = req.get_header("X-User-Id")
        req.context.user = RequestUser(user_id=int(raw)) if raw else None


def as_user(user_id: int) -> dict[str, str]:
    return {"X-User-Id": str(user_id)}


@pytest.fixture
def api_uow() -> FakeUnitOfWork:
    """Forum roles with an admin, a member and a moderator."""
    uow = FakeUnitOfWork()
    seed_forum(uow)
    for pid, slug in enumerate(["user.read", "user.mute", "system.settings"], start=7):
        module, action = slug.split(".", 1)
        uow.permissions.add_permission(
            Permission(id=pid, slug=slug, name=slug, module=module, action=action, is_system=True)
        )
    grant(uow, 1, "topic.update", {"own": True})
    grant(uow, 1, "topic.create", {"rateLimit": {"count": 2, "period": "minute"}})
    grant(uow, 3, "user.read")
    grant(uow, 3, "user.ban")
    grant(uow, 3, "user.mute")
    assign(uow, ADMIN, 4)
    assign(uow, MEMBER, 1)
    assign(uow, MODERATOR, 3)
    return uow


@pytest.fixture
def authorization(api_uow: FakeUnitOfWork) -> AuthorizationService:
    cache = AiocacheStore(Cache(Cache.MEMORY, namespace=f"api-{uuid4().hex}"))
    return AuthorizationService(make_uow_factory(api_uow), cache=cache)


@pytest.fixture
def app(api_uow: FakeUnitOfWork, authorization: AuthorizationService):
    """Falcon ASGI app with every API resource for testing."""
    uow_factory = make_uow_factory(api_uow)
    resources = build_resources(uow_factory, authorization, UserStatusService(uow_factory))
    return create_app(
        resources,
        middleware=[AuthBypassMiddleware(), AuthorizationMiddleware(authorization)],
    )


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app)
