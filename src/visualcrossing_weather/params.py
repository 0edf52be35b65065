"""Validation and normalization of Timeline API request parameters.

Every function here is pure: it returns the value in the form the request
builder expects or raises before any network call is attempted.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from .exceptions import InvalidFormatError, InvalidParameterTypeError, InvalidValueError

# Dynamic periods resolved server-side relative to the requested location.
DYNAMIC_PERIODS: frozenset[str] = frozenset(
    {
        "today",
        "tomorrow",
        "yesterday",
        "yeartodate",
        "monthtodate",
        "lastyear",
        "last24hours",
        "nextweekend",
        "lastweekend",
    }
)
WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)
UNIT_GROUPS: frozenset[str] = frozenset({"us", "uk", "metric", "base"})
INCLUDE_SECTIONS: frozenset[str] = frozenset(
    {
        "days",
        "hours",
        "minutes",
        "alerts",
        "current",
        "events",
        "obs",
        "remote",
        "fcst",
        "stats",
        "statsfcst",
    }
)
ELEMENTS: frozenset[str] = frozenset(
    {
        "datetime",
        "datetimeEpoch",
        "tempmax",
        "tempmin",
        "temp",
        "feelslikemax",
        "feelslikemin",
        "feelslike",
        "dew",
        "humidity",
        "precip",
        "precipprob",
        "precipcover",
        "preciptype",
        "snow",
        "snowdepth",
        "windgust",
        "windspeed",
        "winddir",
        "pressure",
        "cloudcover",
        "visibility",
        "solarradiation",
        "solarenergy",
        "uvindex",
        "severerisk",
        "sunrise",
        "sunriseEpoch",
        "sunset",
        "sunsetEpoch",
        "moonphase",
        "conditions",
        "description",
        "icon",
        "stations",
        "source",
    }
)

_RELATIVE_DAYS_RE = re.compile(r"(?:next|last)[0-9]+days")
_RELATIVE_WEEKDAY_RE = re.compile(rf"(?:next|last)(?:{'|'.join(WEEKDAYS)})")
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_DATETIME_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_date(value: Any) -> str | int | float:
    """Validate a date expression for the request path.

    Numbers are epoch seconds and pass through unchanged. Strings must be a
    dynamic period, ``next<N>days``/``last<N>days``, ``next<weekday>``/
    ``last<weekday>``, ``YYYY-MM-DD`` or ``YYYY-MM-DDTHH:MM:SS``.
    """
    if _is_number(value):
        return value
    if not isinstance(value, str):
        raise InvalidParameterTypeError(f"Invalid date type '{type(value).__name__}'.")
    if (
        value in DYNAMIC_PERIODS
        or _RELATIVE_DAYS_RE.fullmatch(value)
        or _RELATIVE_WEEKDAY_RE.fullmatch(value)
        or _DATE_RE.fullmatch(value)
        or _DATETIME_RE.fullmatch(value)
    ):
        return value
    raise InvalidFormatError(f"Invalid date '{value}'.")


def validate_unit_group(value: Any) -> str:
    """Validate the unit system used for the returned data."""
    if not isinstance(value, str):
        raise InvalidParameterTypeError(f"Invalid unitGroup type '{type(value).__name__}'.")
    if value not in UNIT_GROUPS:
        raise InvalidValueError(
            f"Invalid unitGroup value '{value}'; expected one of {sorted(UNIT_GROUPS)}."
        )
    return value


def _validate_members(values: Iterable[Any], vocabulary: frozenset[str], label: str) -> str:
    checked: list[str] = []
    for value in values:
        if not isinstance(value, str):
            raise InvalidParameterTypeError(
                f"Invalid {label} parameter type '{type(value).__name__}'."
            )
        if value not in vocabulary:
            raise InvalidValueError(f"Invalid {label} parameter '{value}'.")
        checked.append(value)
    return ",".join(checked)


def validate_include(*values: Any) -> str:
    """Validate response sections and return them as a comma-separated list."""
    return _validate_members(values, INCLUDE_SECTIONS, "include")


def validate_elements(*values: Any) -> str:
    """Validate weather element names and return them as a comma-separated list."""
    return _validate_members(values, ELEMENTS, "elements")


def split_csv(value: str | Iterable[str] | None) -> list[Any]:
    """Normalize a comma-separated string or a sequence into a list of members."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return list(value)
