"""Authorization profile - RBAC view of a user for clients."""

from dataclasses import dataclass

from rolegate.domain.entities.role import Role


@dataclass
class AuthorizationProfile:
    """Roles, effective permission slugs and display role of a user."""

    user_id: int
    roles: list[Role]
    permissions: list[str]
    display_role: Role | None
    is_admin: bool
    is_moderator: bool
