"""Tests for datetime-keyed record resolution, replacement and merging."""

from __future__ import annotations

from typing import Any

import pytest

from visualcrossing_weather.addressing import (
    ByIndex,
    ByKey,
    extract_subobject,
    merge_item,
    replace_item,
    resolve_item,
    to_identifier,
)
from visualcrossing_weather.exceptions import (
    InvalidIdentifierTypeError,
    InvalidParameterTypeError,
)


def _days() -> list[dict[str, Any]]:
    return [
        {"datetime": "2025-03-07", "temp": 15, "hours": [{"datetime": "00:00:00", "temp": 14}]},
        {"datetime": "2025-03-08", "temp": 0, "conditions": "Rain"},
        {"datetime": "2025-03-07", "temp": 99},
    ]


def test_to_identifier_dispatch() -> None:
    assert to_identifier("2025-03-07") == ByKey("2025-03-07")
    assert to_identifier(2) == ByIndex(2)
    assert to_identifier(2.0) == ByIndex(2)
    assert to_identifier(2.5) == ByIndex(None)
    assert to_identifier(ByKey("x")) == ByKey("x")


@pytest.mark.parametrize("value", [None, True, False, ["2025-03-07"], {"datetime": "x"}, object()])
def test_to_identifier_rejects_other_types(value: Any) -> None:
    with pytest.raises(InvalidIdentifierTypeError) as excinfo:
        to_identifier(value)
    assert excinfo.value.value is value


def test_resolve_by_key_returns_first_match() -> None:
    days = _days()
    assert resolve_item(days, "2025-03-07") is days[0]
    assert resolve_item(days, "2025-03-08") is days[1]
    assert resolve_item(days, "1970-01-01") is None


def test_resolve_by_index_and_bounds() -> None:
    days = _days()
    assert resolve_item(days, 0) is days[0]
    assert resolve_item(days, ByIndex(2)) is days[2]
    assert resolve_item(days, 3) is None
    assert resolve_item(days, -1) is None
    assert resolve_item(days, 0.5) is None
    assert resolve_item([], 0) is None
    assert resolve_item(None, "2025-03-07") is None


def test_resolve_rejects_bad_identifier_even_on_empty_sequence() -> None:
    with pytest.raises(InvalidIdentifierTypeError):
        resolve_item([], False)
    with pytest.raises(InvalidIdentifierTypeError):
        resolve_item(None, None)


def test_hour_resolution_uses_the_same_rule() -> None:
    hours = _days()[0]["hours"]
    assert resolve_item(hours, "00:00:00") == {"datetime": "00:00:00", "temp": 14}
    assert resolve_item(hours, 0) is hours[0]
    assert resolve_item(hours, "01:00:00") is None


@pytest.mark.parametrize("identifier", ["2025-03-08", 1])
def test_replace_item_forces_original_datetime(identifier: Any) -> None:
    days = _days()
    replacement = {"datetime": "1999-12-31", "temp": 3}

    assert replace_item(days, identifier, replacement) is True
    assert days[1] == {"datetime": "2025-03-08", "temp": 3}
    # The caller's record is not aliased or modified.
    assert replacement == {"datetime": "1999-12-31", "temp": 3}
    assert days[1] is not replacement


@pytest.mark.parametrize("identifier", ["1970-01-01", 10, -1])
def test_replace_item_miss_is_noop(identifier: Any) -> None:
    days = _days()
    assert replace_item(days, identifier, {"temp": 1}) is False
    assert days == _days()


def test_replace_item_rejects_bad_inputs() -> None:
    days = _days()
    with pytest.raises(InvalidIdentifierTypeError):
        replace_item(days, None, {"temp": 1})
    with pytest.raises(InvalidParameterTypeError):
        replace_item(days, 0, ["temp", 1])
    assert days == _days()


def test_merge_item_preserves_unrelated_fields_and_datetime() -> None:
    days = _days()
    assert merge_item(days, 1, {"datetime": "1999-12-31", "temp": 7, "icon": "rain"}) is True
    assert days[1] == {
        "datetime": "2025-03-08",
        "temp": 7,
        "conditions": "Rain",
        "icon": "rain",
    }


def test_merge_item_miss_is_noop() -> None:
    days = _days()
    assert merge_item(days, "1970-01-01", {"temp": 1}) is False
    assert merge_item(days, 99, {"temp": 1}) is False
    assert days == _days()


def test_extract_subobject_keeps_only_present_keys() -> None:
    record = {"datetime": "2025-03-07", "temp": 0, "icon": None}
    assert extract_subobject(record, ["temp", "icon", "missing"]) == {"temp": 0, "icon": None}
    assert extract_subobject(record, []) == {}
