"""Runtime context a caller supplies with a permission check."""

from collections.abc import Mapping
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any

_ALIASES = {
    "ownerId": "owner_id",
    "categoryId": "category_id",
    "userPostCount": "user_post_count",
    "userCreatedAt": "user_created_at",
    "userLevel": "user_level",
    "userCredits": "user_credits",
    "fileSize": "file_size",
    "fileType": "file_type",
}


@dataclass(frozen=True)
class AccessContext:
    """Facts about the resource and the acting user.

    Every field is optional: a condition is only enforced when the field it
    needs is present (see MissingContextPolicy).
    """

    owner_id: int | None = None
    category_id: int | None = None
    user_post_count: int | None = None
    user_created_at: datetime | None = None
    user_level: int | None = None
    user_credits: int | None = None
    file_size: int | None = None
    file_type: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "AccessContext":
        """Build context from a request body, accepting camelCase or snake_case keys."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name in known and value is not None:
                values[name] = value
        created = values.get("user_created_at")
        if isinstance(created, str):
            values["user_created_at"] = datetime.fromisoformat(created)
        return cls(**values)
