"""Domain entities."""

from rolegate.domain.entities.authorization_profile import AuthorizationProfile
from rolegate.domain.entities.category_permission import CategoryAccess, CategoryPermission
from rolegate.domain.entities.permission import Permission
from rolegate.domain.entities.resolved_permission import ResolvedPermission
from rolegate.domain.entities.role import Role
from rolegate.domain.entities.role_permission import RolePermission
from rolegate.domain.entities.user_role import UserRole
from rolegate.domain.entities.user_status import UserStatus

__all__ = [
    "AuthorizationProfile",
    "CategoryAccess",
    "CategoryPermission",
    "Permission",
    "ResolvedPermission",
    "Role",
    "RolePermission",
    "UserRole",
    "UserStatus",
]
