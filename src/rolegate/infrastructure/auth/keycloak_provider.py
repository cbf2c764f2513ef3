"""Keycloak OIDC provider for access token validation."""

import logging
from dataclasses import dataclass

from keycloak import KeycloakOpenID
from keycloak.exceptions import KeycloakError

logger = logging.getLogger(__name__)


@dataclass
class OIDCUser:
    """Authenticated forum user from an OIDC token."""

    user_id: int
    email: str | None
    username: str | None


class KeycloakProvider:
    """Introspects access tokens and maps them to forum user ids.

    The forum user id is read from ``user_id_claim``, a custom claim holding
    the integer id of the user in the forum database.
    """

    def __init__(
        self,
        server_url: str,
        realm: str,
        client_id: str,
        client_secret: str = "",
        user_id_claim: str = "forum_user_id",
    ) -> None:
        self._keycloak = KeycloakOpenID(
            server_url=server_url,
            realm_name=realm,
            client_id=client_id,
            client_secret_key=client_secret,
        )
        self._user_id_claim = user_id_claim

    def decode_token(self, token: str) -> OIDCUser | None:
        """Validate token, return user info or None when inactive or unusable."""
        try:
            token_info = self._keycloak.introspect(token)
        except KeycloakError as e:
            logger.warning("Token introspection failed: %s", e)
            return None
        if not token_info.get("active"):
            return None
        raw_id = token_info.get(self._user_id_claim)
        try:
            user_id = int(raw_id)
        except (TypeError, ValueError):
            logger.warning("Token of %s has no usable %s claim", token_info.get("sub"), self._user_id_claim)
            return None
        return OIDCUser(
            user_id=user_id,
            email=token_info.get("email"),
            username=token_info.get("preferred_username"),
        )
