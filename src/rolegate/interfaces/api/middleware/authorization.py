"""Authorization middleware - exposes the authorization service to handlers."""

import falcon.asgi

from rolegate.application.ports import PermissionChecker


class AuthorizationMiddleware:
    """Sets ``req.context.authorization`` for guards and resources."""

    def __init__(self, authorization: PermissionChecker) -> None:
        self._authorization = authorization

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        req.context.authorization = self._authorization
