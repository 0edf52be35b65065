"""Typed models for the Timeline API request and response shapes.

The store keeps the response as a plain JSON document; these models only
check that a fetched payload is usable before it replaces the current one,
and carry a request whose parameters already passed ``params`` validation.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from .params import (
    split_csv,
    validate_date,
    validate_elements,
    validate_include,
    validate_unit_group,
)


class HourRecord(BaseModel):
    """One sub-day slot inside a day's ``hours``."""

    model_config = ConfigDict(extra="allow")

    datetime: str


class DayRecord(BaseModel):
    """One calendar day inside the document's ``days``."""

    model_config = ConfigDict(extra="allow")

    datetime: str
    hours: list[HourRecord] = Field(default_factory=list)


class WeatherDocument(BaseModel):
    """Top-level Timeline response; unknown keys are allowed and ignored."""

    model_config = ConfigDict(extra="allow")

    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    resolved_address: str | None = Field(default=None, alias="resolvedAddress")
    address: str | None = None
    timezone: str | None = None
    tzoffset: float | None = None
    query_cost: float | None = Field(default=None, alias="queryCost")
    days: list[DayRecord] = Field(default_factory=list)


class WeatherQuery(BaseModel):
    """A validated Timeline request."""

    location: str = Field(min_length=1)
    from_date: str | int | float | None = None
    to_date: str | int | float | None = None
    unit_group: str = "metric"
    include: str = ""
    elements: str = ""

    @classmethod
    def build(
        cls,
        location: str,
        from_date: Any = "",
        to_date: Any = "",
        unit_group: Any = "metric",
        include: Any = "",
        elements: Any = "",
    ) -> WeatherQuery:
        """Validate raw parameters and return the query; validation errors propagate."""
        start = validate_date(from_date) if from_date not in ("", None) else None
        end = validate_date(to_date) if to_date not in ("", None) else None
        return cls(
            location=location,
            from_date=start,
            to_date=end if start is not None else None,
            unit_group=validate_unit_group(unit_group),
            include=validate_include(*split_csv(include)),
            elements=validate_elements(*split_csv(elements)),
        )

    def path(self) -> str:
        """Path below the base URL: ``location[/from[/to]]``."""
        segments = [quote(self.location, safe=",")]
        for value in (self.from_date, self.to_date):
            if value is None:
                break
            segments.append(_format_date(value))
        return "/".join(segments)

    def params(self, api_key: str) -> dict[str, str]:
        """Query string parameters, in the order the API documents them."""
        return {
            "key": api_key,
            "lang": "en",
            "contentType": "json",
            "unitGroup": self.unit_group,
            "include": self.include,
            "elements": self.elements,
        }


def _format_date(value: str | int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
