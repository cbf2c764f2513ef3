"""Built-in RBAC catalog: system roles, permissions, default grants, condition types.

Inheritance of the system roles: admin -> moderator -> vip -> user.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SystemRole:
    slug: str
    name: str
    description: str
    color: str
    icon: str
    priority: int
    parent_slug: str | None
    is_default: bool = False
    is_displayed: bool = True


@dataclass(frozen=True)
class SystemPermission:
    slug: str
    name: str

    @property
    def module(self) -> str:
        return self.slug.split(".", 1)[0]

    @property
    def action(self) -> str:
        return self.slug.split(".", 1)[1]


SYSTEM_ROLES: tuple[SystemRole, ...] = (
    SystemRole("admin", "Administrator", "Full access to everything", "#e74c3c", "Shield", 100, "moderator"),
    SystemRole("moderator", "Moderator", "Manages content and users", "#3498db", "UserCheck", 80, "vip"),
    SystemRole("vip", "VIP", "Member with extra privileges", "#f39c12", "Crown", 50, "user"),
    SystemRole(
        "user", "Member", "Registered member", "#95a5a6", "User", 10, None,
        is_default=True, is_displayed=False,
    ),
)

SYSTEM_PERMISSIONS: tuple[SystemPermission, ...] = (
    SystemPermission("topic.create", "Create topic"),
    SystemPermission("topic.read", "View topic"),
    SystemPermission("topic.update", "Edit topic"),
    SystemPermission("topic.delete", "Delete topic"),
    SystemPermission("topic.pin", "Pin topic"),
    SystemPermission("topic.close", "Close topic"),
    SystemPermission("topic.approve", "Approve topic"),
    SystemPermission("topic.move", "Move topic"),
    SystemPermission("post.create", "Reply"),
    SystemPermission("post.read", "View reply"),
    SystemPermission("post.update", "Edit reply"),
    SystemPermission("post.delete", "Delete reply"),
    SystemPermission("post.approve", "Approve reply"),
    SystemPermission("user.read", "View user"),
    SystemPermission("user.update", "Edit user"),
    SystemPermission("user.delete", "Delete user"),
    SystemPermission("user.ban", "Ban user"),
    SystemPermission("user.mute", "Mute user"),
    SystemPermission("user.role.assign", "Assign roles"),
    SystemPermission("category.create", "Create category"),
    SystemPermission("category.update", "Edit category"),
    SystemPermission("category.delete", "Delete category"),
    SystemPermission("system.settings", "System settings"),
    SystemPermission("system.dashboard", "Admin dashboard"),
    SystemPermission("system.logs", "System logs"),
    SystemPermission("upload.image", "Upload images"),
    SystemPermission("upload.file", "Upload files"),
    SystemPermission("invitation.create", "Create invitation"),
    SystemPermission("invitation.manage", "Manage invitations"),
    SystemPermission("moderation.reports", "Handle reports"),
    SystemPermission("moderation.content", "Review content"),
)

_MEMBER = (
    "topic.create", "topic.read", "topic.update", "topic.delete",
    "post.create", "post.read", "post.update", "post.delete",
    "user.read", "upload.image",
)
_VIP = _MEMBER + ("upload.file", "invitation.create")
_MODERATOR = _VIP + (
    "topic.pin", "topic.close", "topic.approve", "topic.move",
    "post.approve", "user.ban", "user.mute",
    "moderation.reports", "moderation.content",
)

ROLE_PERMISSION_MAP: dict[str, tuple[str, ...]] = {
    "admin": tuple(p.slug for p in SYSTEM_PERMISSIONS),
    "moderator": _MODERATOR,
    "vip": _VIP,
    "user": _MEMBER,
}

_OWN_CONTENT = {
    "topic.update": {"own": True},
    "topic.delete": {"own": True},
    "post.update": {"own": True},
    "post.delete": {"own": True},
}

DEFAULT_GRANT_CONDITIONS: dict[str, dict[str, dict]] = {
    "user": _OWN_CONTENT,
    "vip": _OWN_CONTENT,
}

MODULES = ("topic", "post", "user", "category", "system", "upload", "invitation", "moderation")

COMMON_ACTIONS = ("create", "read", "update", "delete", "manage")

MODULE_SPECIAL_ACTIONS: dict[str, tuple[str, ...]] = {
    "topic": ("pin", "close", "move", "approve"),
    "post": ("approve",),
    "user": ("ban", "mute", "role.assign"),
    "category": (),
    "system": ("settings", "dashboard", "logs"),
    "upload": ("image", "file"),
    "invitation": (),
    "moderation": ("reports", "content", "approve"),
}

CONDITION_TYPES: dict[str, dict[str, object]] = {
    "own": {"type": "boolean", "label": "Own resources only"},
    "categories": {"type": "array", "label": "Limited to categories"},
    "level": {"type": "number", "label": "Minimum user level"},
    "minCredits": {"type": "number", "label": "Minimum credits"},
    "minPosts": {"type": "number", "label": "Minimum post count"},
    "accountAge": {"type": "number", "label": "Account age (days)"},
    "rateLimit": {
        "type": "rateLimit",
        "label": "Rate limit",
        "schema": {"count": "number", "period": "minute|hour|day"},
    },
    "maxFileSize": {"type": "number", "label": "Max file size (KB)"},
    "maxFilesPerDay": {"type": "number", "label": "Uploads per day"},
    "allowedFileTypes": {"type": "array", "label": "Allowed file extensions"},
    "timeRange": {
        "type": "timeRange",
        "label": "Active time window",
        "schema": {"start": "HH:MM", "end": "HH:MM"},
    },
}

PERMISSION_CONDITIONS: dict[str, tuple[str, ...]] = {
    "topic.create": ("categories", "rateLimit", "level", "minCredits", "minPosts", "accountAge", "timeRange"),
    "topic.read": ("categories",),
    "topic.update": ("own", "categories"),
    "topic.delete": ("own", "categories"),
    "topic.pin": ("categories",),
    "topic.close": ("categories",),
    "topic.move": ("categories",),
    "topic.approve": ("categories",),
    "post.create": ("categories", "rateLimit", "level", "minCredits", "accountAge", "timeRange"),
    "post.read": ("categories",),
    "post.update": ("own",),
    "post.delete": ("own", "categories"),
    "post.approve": ("categories",),
    "user.update": ("own",),
    "upload.image": ("maxFileSize", "maxFilesPerDay", "rateLimit"),
    "upload.file": ("maxFileSize", "maxFilesPerDay", "allowedFileTypes", "rateLimit"),
    "invitation.create": ("rateLimit", "level", "minCredits"),
    "moderation.content": ("categories",),
}

# custom permissions not listed above
DEFAULT_CONDITION_KEYS = ("own", "categories", "level")


def condition_keys_for(slug: str) -> tuple[str, ...]:
    """Condition keys the admin UI offers for a permission slug."""
    if slug in PERMISSION_CONDITIONS:
        return PERMISSION_CONDITIONS[slug]
    if any(p.slug == slug for p in SYSTEM_PERMISSIONS):
        return ()
    return DEFAULT_CONDITION_KEYS
