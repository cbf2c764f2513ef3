"""Per-category permission matrix."""

from dataclasses import dataclass

from rolegate.domain.value_objects.category_action import CategoryAction


@dataclass
class CategoryPermission:
    """Role flags for one category; defaults apply when no row exists."""

    role_id: int
    category_id: int
    can_view: bool = True
    can_create: bool = True
    can_reply: bool = True
    can_moderate: bool = False


@dataclass(frozen=True)
class CategoryAccess:
    """Effective category flags of a user after merging their roles."""

    can_view: bool
    can_create: bool
    can_reply: bool
    can_moderate: bool

    @classmethod
    def defaults(cls) -> "CategoryAccess":
        return cls(can_view=True, can_create=True, can_reply=True, can_moderate=False)

    @classmethod
    def none(cls) -> "CategoryAccess":
        return cls(can_view=False, can_create=False, can_reply=False, can_moderate=False)

    @classmethod
    def everything(cls) -> "CategoryAccess":
        return cls(can_view=True, can_create=True, can_reply=True, can_moderate=True)

    @classmethod
    def merge(cls, rows: list[CategoryPermission]) -> "CategoryAccess":
        """Any role granting a flag grants it."""
        return cls(
            can_view=any(r.can_view for r in rows),
            can_create=any(r.can_create for r in rows),
            can_reply=any(r.can_reply for r in rows),
            can_moderate=any(r.can_moderate for r in rows),
        )

    def allows(self, action: CategoryAction) -> bool:
        return getattr(self, action.flag)
