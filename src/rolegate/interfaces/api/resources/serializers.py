"""JSON shapes of API responses and request field parsing."""

from datetime import UTC, datetime
from typing import Any

from rolegate.domain.entities import (
    CategoryAccess,
    CategoryPermission,
    Permission,
    Role,
    UserRole,
    UserStatus,
)


def parse_datetime(value: Any) -> datetime | None:
    """ISO 8601 string to aware datetime; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"Expected ISO 8601 datetime, got {value!r}")
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def role_to_dict(role: Role) -> dict[str, Any]:
    return {
        "id": role.id,
        "slug": role.slug,
        "name": role.name,
        "description": role.description,
        "color": role.color,
        "icon": role.icon,
        "priority": role.priority,
        "parent_id": role.parent_id,
        "is_displayed": role.is_displayed,
        "is_system": role.is_system,
        "is_default": role.is_default,
    }


def permission_to_dict(permission: Permission) -> dict[str, Any]:
    return {
        "id": permission.id,
        "slug": permission.slug,
        "name": permission.name,
        "module": permission.module,
        "action": permission.action,
        "description": permission.description,
        "is_system": permission.is_system,
    }


def assignment_to_dict(assignment: UserRole) -> dict[str, Any]:
    return {
        "user_id": assignment.user_id,
        "role_id": assignment.role_id,
        "assigned_at": _iso(assignment.assigned_at),
        "expires_at": _iso(assignment.expires_at),
        "assigned_by": assignment.assigned_by,
    }


def category_row_to_dict(row: CategoryPermission) -> dict[str, Any]:
    return {
        "role_id": row.role_id,
        "category_id": row.category_id,
        "can_view": row.can_view,
        "can_create": row.can_create,
        "can_reply": row.can_reply,
        "can_moderate": row.can_moderate,
    }


def category_access_to_dict(access: CategoryAccess) -> dict[str, bool]:
    return {
        "can_view": access.can_view,
        "can_create": access.can_create,
        "can_reply": access.can_reply,
        "can_moderate": access.can_moderate,
    }


def status_to_dict(status: UserStatus, now: datetime) -> dict[str, Any]:
    return {
        "user_id": status.user_id,
        "status": status.effective_status(now),
        "muted_until": _iso(status.muted_until),
        "muted_reason": status.muted_reason,
        "muted_by": status.muted_by,
        "banned_until": _iso(status.banned_until),
        "banned_reason": status.banned_reason,
        "banned_by": status.banned_by,
    }
