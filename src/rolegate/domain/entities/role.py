"""Role entity for RBAC."""

from dataclasses import dataclass


@dataclass
class Role:
    """Role - prioritized, hierarchical group of permissions (admin, moderator, vip, user)."""

    id: int
    slug: str
    name: str
    priority: int = 0
    parent_id: int | None = None
    description: str | None = None
    color: str | None = None
    icon: str | None = None
    is_displayed: bool = True
    is_system: bool = False
    is_default: bool = False
