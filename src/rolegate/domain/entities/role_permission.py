"""Role permission - grant of a permission to a role, optionally conditional."""

from dataclasses import dataclass
from typing import Any


@dataclass
class RolePermission:
    """Join row; ``conditions`` holds the raw stored payload (None = unconditional)."""

    role_id: int
    permission_id: int
    conditions: dict[str, Any] | str | None = None
