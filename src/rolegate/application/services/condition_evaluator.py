"""Condition evaluator - decides whether a conditional grant applies in a context."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, tzinfo

from rolegate.domain.value_objects import AccessContext, Conditions, MissingContextPolicy

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ConditionEvaluator:
    """Evaluates every condition variant of a grant (logical AND).

    ``timezone`` is the wall clock used by time windows; None means the
    server's local time.
    """

    def __init__(
        self,
        missing_context_policy: MissingContextPolicy = MissingContextPolicy.PASS,
        timezone: tzinfo | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._missing_context_policy = missing_context_policy
        self._timezone = timezone
        self._clock = clock

    def satisfies(
        self, conditions: Conditions, context: AccessContext | None, user_id: int
    ) -> bool:
        context = context or AccessContext()
        now = self._clock().astimezone(self._timezone)
        for condition in conditions.variants:
            outcome = condition.check(context, user_id, now)
            if outcome is None:
                if self._missing_context_policy is MissingContextPolicy.DENY:
                    logger.debug(
                        "Condition %s has no context for user %s; denied by policy",
                        condition.key,
                        user_id,
                    )
                    return False
                continue
            if not outcome:
                logger.debug("Condition %s not met for user %s", condition.key, user_id)
                return False
        return True
