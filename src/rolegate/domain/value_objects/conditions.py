"""Permission conditions - typed predicates that narrow when a grant applies.

A stored condition payload is a JSON object such as
``{"own": true, "categories": [1, 2]}``. It is decoded once into a
``Conditions`` value holding one variant per key; every variant must hold for
the grant to apply.
"""

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from rolegate.domain.exceptions import InvalidConditions
from rolegate.domain.value_objects.access_context import AccessContext

_HH_MM = r"^([01]\d|2[0-3]):[0-5]\d$"


class RateLimitPeriod(StrEnum):
    """Window length of a rate limit."""

    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"

    @property
    def seconds(self) -> int:
        return {"minute": 60, "hour": 3600, "day": 86400}[self.value]


def normalize_file_type(value: str) -> str:
    """Lower-case extension of a filename or bare extension, without the dot."""
    value = value.strip().lower()
    if "." in value:
        value = value.rsplit(".", 1)[1]
    return value


class Condition:
    """Base of condition variants.

    ``check`` returns None when the context lacks the field the predicate
    needs; the evaluator decides what that means.
    """

    key: ClassVar[str]

    def check(self, context: AccessContext, user_id: int, now: datetime) -> bool | None:
        raise NotImplementedError

    def payload(self) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class OwnCondition(Condition):
    key: ClassVar[str] = "own"

    def check(self, context: AccessContext, user_id: int, now: datetime) -> bool | None:
        if context.owner_id is None:
            return None
        return context.owner_id == user_id

    def payload(self) -> Any:
        return True


@dataclass(frozen=True)
class CategoriesCondition(Condition):
    key: ClassVar[str] = "categories"
    category_ids: tuple[int, ...]

    def check(self, context: AccessContext, user_id: int, now: datetime) -> bool | None:
        if context.category_id is None:
            return None
        return context.category_id in self.category_ids

    def payload(self) -> Any:
        return list(self.category_ids)


@dataclass(frozen=True)
class MinPostsCondition(Condition):
    key: ClassVar[str] = "minPosts"
    min_posts: int

    def check(self, context: AccessContext, user_id: int, now: datetime) -> bool | None:
        if context.user_post_count is None:
            return None
        return context.user_post_count >= self.min_posts

    def payload(self) -> Any:
        return self.min_posts


@dataclass(frozen=True)
class AccountAgeCondition(Condition):
    key: ClassVar[str] = "accountAge"
    days: int

    def check(self, context: AccessContext, user_id: int, now: datetime) -> bool | None:
        created = context.user_created_at
        if created is None:
            return None
        if created.tzinfo is None:
            created = created.replace(tzinfo=UTC)
        return (now - created).days >= self.days

    def payload(self) -> Any:
        return self.days


@dataclass(frozen=True)
class TimeRangeCondition(Condition):
    """Same-day window compared as ``HH:MM`` strings, both ends inclusive."""

    key: ClassVar[str] = "timeRange"
    start: str
    end: str

    def check(self, context: AccessContext, user_id: int, now: datetime) -> bool | None:
        current = now.strftime("%H:%M")
        return self.start <= current <= self.end

    def payload(self) -> Any:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True)
class MaxFileSizeCondition(Condition):
    key: ClassVar[str] = "maxFileSize"
    max_kb: float

    def check(self, context: AccessContext, user_id: int, now: datetime) -> bool | None:
        if context.file_size is None:
            return None
        return context.file_size / 1024 <= self.max_kb

    def payload(self) -> Any:
        return self.max_kb


@dataclass(frozen=True)
class AllowedFileTypesCondition(Condition):
    key: ClassVar[str] = "allowedFileTypes"
    extensions: tuple[str, ...]

    def check(self, context: AccessContext, user_id: int, now: datetime) -> bool | None:
        if not context.file_type:
            return None
        return normalize_file_type(context.file_type) in self.extensions

    def payload(self) -> Any:
        return list(self.extensions)


@dataclass(frozen=True)
class LevelCondition(Condition):
    key: ClassVar[str] = "level"
    min_level: int

    def check(self, context: AccessContext, user_id: int, now: datetime) -> bool | None:
        if context.user_level is None:
            return None
        return context.user_level >= self.min_level

    def payload(self) -> Any:
        return self.min_level


@dataclass(frozen=True)
class MinCreditsCondition(Condition):
    key: ClassVar[str] = "minCredits"
    min_credits: int

    def check(self, context: AccessContext, user_id: int, now: datetime) -> bool | None:
        if context.user_credits is None:
            return None
        return context.user_credits >= self.min_credits

    def payload(self) -> Any:
        return self.min_credits


@dataclass(frozen=True)
class RateLimitCondition(Condition):
    """Enforced by the rate limiter against counters, not by static context."""

    key: ClassVar[str] = "rateLimit"
    count: int
    period: RateLimitPeriod

    def check(self, context: AccessContext, user_id: int, now: datetime) -> bool | None:
        return True

    def payload(self) -> Any:
        return {"count": self.count, "period": self.period.value}


@dataclass(frozen=True)
class MaxFilesPerDayCondition(Condition):
    """Enforced by the daily upload quota check."""

    key: ClassVar[str] = "maxFilesPerDay"
    limit: int

    def check(self, context: AccessContext, user_id: int, now: datetime) -> bool | None:
        return True

    def payload(self) -> Any:
        return self.limit


C = TypeVar("C", bound=Condition)


@dataclass(frozen=True)
class Conditions:
    """Decoded condition payload of one grant (logical AND of its variants)."""

    variants: tuple[Condition, ...]

    def find(self, kind: type[C]) -> C | None:
        for variant in self.variants:
            if isinstance(variant, kind):
                return variant
        return None

    @property
    def rate_limit(self) -> RateLimitCondition | None:
        return self.find(RateLimitCondition)

    @property
    def max_files_per_day(self) -> int | None:
        variant = self.find(MaxFilesPerDayCondition)
        return variant.limit if variant else None

    def to_payload(self) -> dict[str, Any]:
        return {v.key: v.payload() for v in self.variants}


class _TimeRangePayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    start: str = Field(pattern=_HH_MM)
    end: str = Field(pattern=_HH_MM)


class _RateLimitPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    count: int = Field(ge=1)
    period: RateLimitPeriod


class _ConditionsPayload(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    own: bool | None = None
    categories: list[int] | None = None
    min_posts: int | None = Field(default=None, alias="minPosts", ge=0)
    account_age: int | None = Field(default=None, alias="accountAge", ge=0)
    time_range: _TimeRangePayload | None = Field(default=None, alias="timeRange")
    max_file_size: float | None = Field(default=None, alias="maxFileSize", ge=0)
    allowed_file_types: list[str] | None = Field(default=None, alias="allowedFileTypes")
    rate_limit: _RateLimitPayload | None = Field(default=None, alias="rateLimit")
    max_files_per_day: int | None = Field(default=None, alias="maxFilesPerDay", ge=0)
    level: int | None = Field(default=None, ge=0)
    min_credits: int | None = Field(default=None, alias="minCredits", ge=0)

    @field_validator("categories", "allowed_file_types", mode="before")
    @classmethod
    def _split_comma_list(cls, value: Any) -> Any:
        # admin UI submits these as "a,b,c"
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    def to_variants(self) -> tuple[Condition, ...]:
        variants: list[Condition] = []
        if self.own:
            variants.append(OwnCondition())
        if self.categories is not None:
            variants.append(CategoriesCondition(tuple(self.categories)))
        if self.min_posts is not None:
            variants.append(MinPostsCondition(self.min_posts))
        if self.account_age is not None:
            variants.append(AccountAgeCondition(self.account_age))
        if self.time_range is not None:
            variants.append(TimeRangeCondition(self.time_range.start, self.time_range.end))
        if self.max_file_size is not None:
            variants.append(MaxFileSizeCondition(self.max_file_size))
        if self.allowed_file_types is not None:
            variants.append(
                AllowedFileTypesCondition(
                    tuple(normalize_file_type(t) for t in self.allowed_file_types)
                )
            )
        if self.level is not None:
            variants.append(LevelCondition(self.level))
        if self.min_credits is not None:
            variants.append(MinCreditsCondition(self.min_credits))
        if self.rate_limit is not None:
            variants.append(RateLimitCondition(self.rate_limit.count, self.rate_limit.period))
        if self.max_files_per_day is not None:
            variants.append(MaxFilesPerDayCondition(self.max_files_per_day))
        return tuple(variants)


def parse_conditions(raw: str | dict[str, Any] | None) -> Conditions | None:
    """Decode a stored or submitted condition payload.

    Empty payloads, and payloads whose every key is switched off, mean an
    unconditional grant and decode to None.
    Raises InvalidConditions for anything that is not a well-formed payload.
    """
    if raw is None or raw == "" or raw == {}:
        return None
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidConditions(f"Conditions are not valid JSON: {e}") from e
        if raw is None or raw == {}:
            return None
    if not isinstance(raw, dict):
        raise InvalidConditions("Conditions must be a JSON object")
    try:
        model = _ConditionsPayload.model_validate(raw)
    except PydanticValidationError as e:
        raise InvalidConditions(str(e)) from e
    variants = model.to_variants()
    # e.g. {"own": false}, which restricts nothing
    return Conditions(variants) if variants else None
