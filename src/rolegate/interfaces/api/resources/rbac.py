"""RBAC catalog and permission check endpoints."""

from dataclasses import asdict

import falcon
import falcon.asgi

from rolegate.application.use_cases.rbac.rbac_config import GetRbacConfigUseCase
from rolegate.domain.value_objects import AccessContext
from rolegate.interfaces.api.guards import require_permission


class RbacConfigResource:
    """GET /v1/rbac/config - modules, actions and condition types."""

    def __init__(self, get_config: GetRbacConfigUseCase) -> None:
        self._get_config = get_config

    @falcon.before(require_permission("system.settings"))
    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        config = await self._get_config.execute()
        resp.media = asdict(config)
        resp.status = falcon.HTTP_200


class RbacCheckResource:
    """POST /v1/rbac/check - decide a permission for the current user.

    Body: ``{"permission": "topic.update", "context": {"ownerId": 7}}``.
    With ``"action_key"`` the request also counts against the rate limit of
    the permission.
    """

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        try:
            body = await req.get_media()
            slug = body["permission"]
            context = AccessContext.from_mapping(body.get("context"))
            action_key = body.get("action_key")
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Invalid request: {e}"}
            return

        authorization = req.context.authorization
        decision = await authorization.can(user.user_id, slug, context)
        media = {"permission": slug, "granted": decision.granted, "reason": decision.reason}
        if decision.granted and action_key:
            limit = await authorization.check_rate_limit(user.user_id, slug, action_key)
            media["granted"] = limit.allowed
            media["rate_limit"] = {
                "allowed": limit.allowed,
                "remaining": limit.remaining,
                "reset_at": limit.reset_at.isoformat() if limit.reset_at else None,
            }
            if not limit.allowed:
                media["reason"] = "rate_limited"
        resp.media = media
        resp.status = falcon.HTTP_200
