"""Application ports - interfaces for external adapters."""

from rolegate.application.ports.cache import CacheStore
from rolegate.application.ports.permission_checker import PermissionChecker
from rolegate.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "CacheStore",
    "PermissionChecker",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
