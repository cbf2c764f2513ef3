"""Actions of the per-category permission matrix."""

from enum import StrEnum


class CategoryAction(StrEnum):
    """Category actions, each backed by one flag of the matrix."""

    VIEW = "view"
    CREATE = "create"
    REPLY = "reply"
    MODERATE = "moderate"

    @property
    def flag(self) -> str:
        """Name of the CategoryPermission attribute carrying this action."""
        return f"can_{self.value}"
