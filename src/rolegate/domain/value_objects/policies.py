"""Fail-open / fail-closed policies of the authorization engine."""

from enum import StrEnum


class MissingContextPolicy(StrEnum):
    """What a condition does when the caller did not supply the context it needs."""

    PASS = "pass"
    DENY = "deny"


class CacheUnavailablePolicy(StrEnum):
    """What rate limiting does when no counter backend is reachable."""

    FAIL_OPEN = "fail_open"
    FAIL_CLOSED = "fail_closed"
