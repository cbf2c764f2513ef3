"""Unit tests for condition payload decoding and access context."""

from datetime import UTC, datetime

import pytest

from rolegate.domain.exceptions import InvalidConditions
from rolegate.domain.value_objects import AccessContext, RateLimitPeriod, parse_conditions
from rolegate.domain.value_objects.conditions import (
    AllowedFileTypesCondition,
    CategoriesCondition,
    OwnCondition,
    RateLimitCondition,
    TimeRangeCondition,
    normalize_file_type,
)


@pytest.mark.parametrize("raw", [None, "", {}, "{}", "null"])
def test_empty_payload_is_unconditional(raw) -> None:
    assert parse_conditions(raw) is None


def test_parse_dict_payload() -> None:
    conditions = parse_conditions({"own": True, "categories": [1, 2]})
    assert conditions.find(OwnCondition) == OwnCondition()
    assert conditions.find(CategoriesCondition).category_ids == (1, 2)


def test_parse_json_string_payload() -> None:
    conditions = parse_conditions('{"rateLimit": {"count": 5, "period": "hour"}}')
    limit = conditions.rate_limit
    assert limit == RateLimitCondition(5, RateLimitPeriod.HOUR)
    assert limit.period.seconds == 3600


@pytest.mark.parametrize("raw", [{"own": False}, '{"own": false}'])
def test_switched_off_payload_is_unconditional(raw) -> None:
    assert parse_conditions(raw) is None


def test_comma_separated_lists_are_split() -> None:
    """The admin UI submits list conditions as comma separated strings."""
    conditions = parse_conditions({"categories": "3, 4", "allowedFileTypes": "PDF,.zip"})
    assert conditions.find(CategoriesCondition).category_ids == (3, 4)
    assert conditions.find(AllowedFileTypesCondition).extensions == ("pdf", "zip")


def test_max_files_per_day() -> None:
    assert parse_conditions({"maxFilesPerDay": 10}).max_files_per_day == 10
    assert parse_conditions({"own": True}).max_files_per_day is None


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        "[1, 2]",
        {"unknownKey": 1},
        {"minPosts": -1},
        {"timeRange": {"start": "25:00", "end": "10:00"}},
        {"timeRange": {"start": "09:00"}},
        {"rateLimit": {"count": 0, "period": "minute"}},
        {"rateLimit": {"count": 3, "period": "week"}},
        {"categories": ["a"]},
    ],
)
def test_malformed_payload_raises(raw) -> None:
    with pytest.raises(InvalidConditions):
        parse_conditions(raw)


def test_to_payload_uses_stored_keys() -> None:
    raw = {
        "own": True,
        "minPosts": 10,
        "timeRange": {"start": "09:00", "end": "18:00"},
        "rateLimit": {"count": 3, "period": "minute"},
    }
    assert parse_conditions(raw).to_payload() == raw


def test_time_range_is_inclusive() -> None:
    window = TimeRangeCondition("09:00", "17:00")
    ctx = AccessContext()
    assert window.check(ctx, 1, datetime(2026, 1, 1, 9, 0, tzinfo=UTC)) is True
    assert window.check(ctx, 1, datetime(2026, 1, 1, 17, 0, tzinfo=UTC)) is True
    assert window.check(ctx, 1, datetime(2026, 1, 1, 17, 1, tzinfo=UTC)) is False


@pytest.mark.parametrize(
    ("value", "expected"),
    [("photo.JPG", "jpg"), (".png", "png"), ("pdf", "pdf"), ("archive.tar.gz", "gz")],
)
def test_normalize_file_type(value, expected) -> None:
    assert normalize_file_type(value) == expected


def test_access_context_from_mapping_accepts_camel_case() -> None:
    ctx = AccessContext.from_mapping(
        {
            "ownerId": 7,
            "category_id": 3,
            "userCreatedAt": "2026-01-01T00:00:00+00:00",
            "fileType": "png",
            "ignored": "x",
            "userLevel": None,
        }
    )
    assert ctx.owner_id == 7
    assert ctx.category_id == 3
    assert ctx.user_created_at == datetime(2026, 1, 1, tzinfo=UTC)
    assert ctx.file_type == "png"
    assert ctx.user_level is None


def test_access_context_from_empty_mapping() -> None:
    assert AccessContext.from_mapping(None) == AccessContext()
