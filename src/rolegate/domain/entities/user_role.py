"""User role assignment."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class UserRole:
    """User holds role until ``expires_at`` (None = no expiry)."""

    user_id: int
    role_id: int
    assigned_at: datetime
    expires_at: datetime | None = None
    assigned_by: int | None = None

    def is_active(self, now: datetime) -> bool:
        """Expired assignments stay stored but no longer count."""
        return self.expires_at is None or self.expires_at > now
