"""Current user's authorization profile."""

from collections.abc import Callable
from datetime import UTC, datetime

import falcon
import falcon.asgi

from rolegate.application.services.user_status import UserStatusService
from rolegate.interfaces.api.resources.serializers import role_to_dict, status_to_dict


class MePermissionsResource:
    """GET /v1/me/permissions - roles, permission slugs and moderation status."""

    def __init__(
        self,
        user_status: UserStatusService,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._user_status = user_status
        self._clock = clock

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        profile = await req.context.authorization.describe_user(user.user_id)
        status = await self._user_status.get_user_status(user.user_id)
        resp.media = {
            "user_id": profile.user_id,
            "roles": [role_to_dict(r) for r in profile.roles],
            "permissions": sorted(profile.permissions),
            "display_role": role_to_dict(profile.display_role) if profile.display_role else None,
            "is_admin": profile.is_admin,
            "is_moderator": profile.is_moderator,
            "status": status_to_dict(status, self._clock()),
        }
        resp.status = falcon.HTTP_200
