"""Resolved permission - effective grant of one permission to one user."""

from dataclasses import dataclass

from rolegate.domain.value_objects.conditions import Conditions


@dataclass
class ResolvedPermission:
    """Outcome of merging every role grant of a permission slug.

    ``malformed`` marks a stored condition payload that could not be decoded;
    such a grant can never be verified and is denied.
    """

    slug: str
    permission_id: int
    source_role_id: int
    conditions: Conditions | None = None
    malformed: bool = False

    @property
    def is_conditional(self) -> bool:
        return self.conditions is not None or self.malformed
