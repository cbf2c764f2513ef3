"""Domain exceptions."""


class RoleGateError(Exception):
    """Base exception for RoleGate."""

    pass


class PermissionDenied(RoleGateError):
    """User does not have permission for the requested action."""

    pass


class NotFound(RoleGateError):
    """Requested resource was not found."""

    def __init__(self, entity: str, key: object) -> None:
        super().__init__(f"{entity} not found: {key}")
        self.entity = entity
        self.key = key


class ValidationError(RoleGateError):
    """Validation failed for input data."""

    pass


class Conflict(RoleGateError):
    """Entity with the same unique key already exists."""

    pass


class CircularInheritance(ValidationError):
    """Setting the requested parent would create a cycle in the role hierarchy."""

    def __init__(self, role_id: int, parent_id: int) -> None:
        super().__init__(f"Role {parent_id} cannot be the parent of role {role_id}: circular inheritance")
        self.role_id = role_id
        self.parent_id = parent_id


class InvalidConditions(ValidationError):
    """Condition payload could not be decoded."""

    pass


class CacheUnavailable(RoleGateError):
    """Cache backend is not configured or not reachable."""

    pass
