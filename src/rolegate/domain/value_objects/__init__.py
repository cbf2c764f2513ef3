"""Domain value objects."""

from rolegate.domain.value_objects.access_context import AccessContext
from rolegate.domain.value_objects.category_action import CategoryAction
from rolegate.domain.value_objects.conditions import (
    Conditions,
    RateLimitPeriod,
    parse_conditions,
)
from rolegate.domain.value_objects.policies import (
    CacheUnavailablePolicy,
    MissingContextPolicy,
)

__all__ = [
    "AccessContext",
    "CacheUnavailablePolicy",
    "CategoryAction",
    "Conditions",
    "MissingContextPolicy",
    "RateLimitPeriod",
    "parse_conditions",
]
