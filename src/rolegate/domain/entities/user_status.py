"""User moderation status - mute and ban."""

from dataclasses import dataclass
from datetime import datetime

ACTIVE = "active"
MUTED = "muted"
BANNED = "banned"


@dataclass
class UserStatus:
    """Mute/ban state; a None ``*_until`` means until lifted."""

    user_id: int
    status: str = ACTIVE
    muted_until: datetime | None = None
    muted_reason: str | None = None
    muted_by: int | None = None
    banned_until: datetime | None = None
    banned_reason: str | None = None
    banned_by: int | None = None

    def is_muted(self, now: datetime) -> bool:
        return self.status == MUTED and (self.muted_until is None or self.muted_until > now)

    def is_banned(self, now: datetime) -> bool:
        return self.status == BANNED and (self.banned_until is None or self.banned_until > now)

    def effective_status(self, now: datetime) -> str:
        if self.is_banned(now):
            return BANNED
        if self.is_muted(now):
            return MUTED
        return ACTIVE
