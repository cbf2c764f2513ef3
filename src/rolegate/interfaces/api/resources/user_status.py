"""Mute and ban endpoints."""

from collections.abc import Callable
from datetime import UTC, datetime

import falcon
import falcon.asgi

from rolegate.application.services.user_status import UserStatusService
from rolegate.interfaces.api.guards import require_permission
from rolegate.interfaces.api.resources.serializers import parse_datetime, status_to_dict


def _now() -> datetime:
    return datetime.now(UTC)


async def _read_sanction(req: falcon.asgi.Request) -> tuple[datetime | None, str | None]:
    """``until`` and ``reason`` of a mute/ban request; an empty body means permanent."""
    body = await req.get_media(default_when_empty={})
    if not isinstance(body, dict):
        raise ValueError("Expected a JSON object")
    return parse_datetime(body.get("until")), body.get("reason")


class UserStatusResource:
    """GET /v1/users/{user_id}/status."""

    def __init__(self, user_status: UserStatusService, clock: Callable[[], datetime] = _now) -> None:
        self._user_status = user_status
        self._clock = clock

    @falcon.before(require_permission("user.read"))
    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: int
    ) -> None:
        status = await self._user_status.get_user_status(user_id)
        resp.media = status_to_dict(status, self._clock())
        resp.status = falcon.HTTP_200


class UserMuteResource:
    """POST/DELETE /v1/users/{user_id}/mute."""

    def __init__(self, user_status: UserStatusService, clock: Callable[[], datetime] = _now) -> None:
        self._user_status = user_status
        self._clock = clock

    @falcon.before(require_permission("user.mute"))
    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: int
    ) -> None:
        try:
            until, reason = await _read_sanction(req)
        except (TypeError, ValueError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Invalid request: {e}"}
            return
        status = await self._user_status.mute_user(
            user_id, until=until, reason=reason, muted_by=req.context.user.user_id
        )
        resp.media = status_to_dict(status, self._clock())
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission("user.mute"))
    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: int
    ) -> None:
        status = await self._user_status.unmute_user(user_id)
        resp.media = status_to_dict(status, self._clock())
        resp.status = falcon.HTTP_200


class UserBanResource:
    """POST/DELETE /v1/users/{user_id}/ban."""

    def __init__(self, user_status: UserStatusService, clock: Callable[[], datetime] = _now) -> None:
        self._user_status = user_status
        self._clock = clock

    @falcon.before(require_permission("user.ban"))
    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: int
    ) -> None:
        try:
            until, reason = await _read_sanction(req)
        except (TypeError, ValueError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Invalid request: {e}"}
            return
        status = await self._user_status.ban_user(
            user_id, until=until, reason=reason, banned_by=req.context.user.user_id
        )
        resp.media = status_to_dict(status, self._clock())
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission("user.ban"))
    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: int
    ) -> None:
        status = await self._user_status.unban_user(user_id)
        resp.media = status_to_dict(status, self._clock())
        resp.status = falcon.HTTP_200
