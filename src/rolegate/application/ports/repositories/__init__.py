"""Repository ports."""

from rolegate.application.ports.repositories.category_permission_repository import (
    CategoryPermissionRepository,
)
from rolegate.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from rolegate.application.ports.repositories.role_permission_repository import (
    RolePermissionRepository,
)
from rolegate.application.ports.repositories.role_repository import RoleRepository
from rolegate.application.ports.repositories.user_role_repository import (
    UserRoleRepository,
)
from rolegate.application.ports.repositories.user_status_repository import (
    UserStatusRepository,
)

__all__ = [
    "CategoryPermissionRepository",
    "PermissionRepository",
    "RolePermissionRepository",
    "RoleRepository",
    "UserRoleRepository",
    "UserStatusRepository",
]
