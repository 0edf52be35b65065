"""In-memory Timeline weather document with day/hour addressed accessors."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
from pydantic import ValidationError

from .addressing import (
    extract_subobject,
    merge_item,
    replace_item,
    resolve_item,
    to_identifier,
)
from .config import DEFAULT_BASE_URL, Settings
from .exceptions import (
    ConfigError,
    InvalidParameterTypeError,
    InvalidValueError,
    WeatherFetchError,
    WeatherRequestError,
)
from .fields import DocumentField, with_field_accessors
from .models import WeatherDocument, WeatherQuery
from .params import split_csv
from .redaction import sanitize_params, sanitize_text

Record = dict[str, Any]


def _element_keys(elements: str | Iterable[str] | None) -> list[str] | None:
    keys = split_csv(elements)
    return keys or None


def _project(record: Mapping[str, Any], elements: str | Iterable[str] | None) -> Record:
    keys = _element_keys(elements)
    if keys:
        return copy.deepcopy(extract_subobject(record, keys))
    return copy.deepcopy(dict(record))


def _parse_timestamp(value: str, tz: timezone | None) -> datetime:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise InvalidValueError(f"Invalid record datetime '{value}'.") from exc
    return parsed.replace(tzinfo=tz)


def _require_field_name(field: Any) -> str:
    if not isinstance(field, str):
        raise InvalidParameterTypeError(
            f"Field name must be a string, got {type(field).__name__}."
        )
    return field


def _require_record(value: Any) -> None:
    if not isinstance(value, Mapping):
        raise InvalidParameterTypeError(
            f"Record must be a mapping, got {type(value).__name__}."
        )


def _require_record_list(value: Any, label: str) -> list[Any]:
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
        raise InvalidParameterTypeError(
            f"{label} must be a list of records, got {type(value).__name__}."
        )
    return copy.deepcopy(list(value))


@with_field_accessors
class WeatherStore:
    """Holds one Timeline response and exposes addressed reads and writes.

    Days are addressed by ``YYYY-MM-DD`` or by position in ``days``; hours by
    ``HH:MM:SS`` or by position in the day's ``hours``. Reads of a missing day,
    hour or field return ``None``; writes against a missing target do nothing;
    identifiers that are neither strings nor numbers raise
    ``InvalidIdentifierTypeError``.

    Per-field accessors (``get_temp_on_day``, ``set_icon_at_datetime``,
    ``get_latitude`` ...) are generated from ``fields.WEATHER_FIELDS`` and
    ``fields.DOCUMENT_FIELDS``.

    An instance is meant for a single owner; nothing here is synchronized.
    """

    user_agent = "visualcrossing-weather/0.1"

    def __init__(
        self,
        api_key: str = "",
        base_url: str = DEFAULT_BASE_URL,
        *,
        logger: logging.Logger | None = None,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.logger = logger or logging.getLogger("visualcrossing_weather.store")
        self._timeout = timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._weather_data: Record = {}

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        logger: logging.Logger | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> WeatherStore:
        return cls(
            api_key=settings.visualcrossing_api_key or "",
            base_url=settings.visualcrossing_base_url,
            logger=logger,
            timeout_seconds=settings.weather_timeout_seconds,
            transport=transport,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r}, days={len(self._days() or ())})"

    async def __aenter__(self) -> WeatherStore:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client, if one was opened."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                headers={"Accept": "application/json", "User-Agent": self.user_agent},
            )
        return self._client

    # -- fetch ---------------------------------------------------------------

    async def fetch_weather_data(
        self,
        location: str,
        from_date: str | int | float = "",
        to_date: str | int | float = "",
        unit_group: str = "metric",
        include: str | Sequence[str] = "",
        elements: str | Sequence[str] = "",
    ) -> Record:
        """Fetch a Timeline document for ``location`` and make it the current one.

        ``include`` and ``elements`` accept a comma-separated string or a
        sequence of names. Parameters are validated before the request; the
        stored document is only replaced once the response is verified.
        """
        if not self.api_key:
            raise ConfigError("No API key configured; set VISUALCROSSING_API_KEY.")
        if location is None or location == "":
            raise WeatherRequestError("Bad API request: a location must be specified.")
        if not isinstance(location, str):
            raise InvalidParameterTypeError(
                f"Invalid location type '{type(location).__name__}'."
            )

        query = WeatherQuery.build(
            location,
            from_date=from_date,
            to_date=to_date,
            unit_group=unit_group,
            include=include,
            elements=elements,
        )
        url = f"{self.base_url}/{query.path()}"
        payload = await self._request_json(url, query.params(self.api_key))
        self._verify_document(payload, url)

        self._weather_data = payload
        day_count = len(self._days() or ())
        self.logger.debug(
            "Weather document replaced for %s (%d days)",
            location,
            day_count,
            extra={"location": location, "days": day_count},
        )
        return copy.deepcopy(payload)

    async def _request_json(self, url: str, params: dict[str, str]) -> Any:
        self.logger.info(
            "Requesting weather data from %s",
            url,
            extra={"url": url, "params": sanitize_params(params)},
        )
        try:
            response = await self._get_client().get(url, params=params)
        except httpx.HTTPError as exc:
            self.logger.warning(
                "Weather request failed (%s)",
                type(exc).__name__,
                extra={"url": url, "error_type": type(exc).__name__},
            )
            raise WeatherFetchError(
                f"Weather request failed at {url}: {sanitize_text(str(exc))}"
            ) from exc

        if not response.is_success:
            body = response.text
            self.logger.warning(
                "Weather request returned HTTP %d",
                response.status_code,
                extra={"url": url, "status_code": response.status_code},
            )
            raise WeatherFetchError(
                f"Weather fetch failed with status {response.status_code}: "
                f"{sanitize_text(body[:300])}",
                body=body,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise WeatherFetchError(
                f"Weather API returned non-JSON response at {url}.",
                body=response.text,
                status_code=response.status_code,
            ) from exc

    @staticmethod
    def _verify_document(payload: Any, url: str) -> None:
        if not isinstance(payload, dict):
            raise WeatherFetchError(
                f"Weather API returned unexpected payload type "
                f"{type(payload).__name__} at {url}."
            )
        try:
            WeatherDocument.model_validate(payload)
        except ValidationError as exc:
            raise WeatherFetchError(
                f"Weather API payload at {url} is not a usable document: "
                f"{exc.error_count()} validation error(s)."
            ) from exc

    # -- whole document and series -----------------------------------------

    def clear_weather_data(self) -> None:
        """Reset to an empty document."""
        self._weather_data = {}

    def get_weather_data(self, elements: str | Iterable[str] | None = None) -> Record:
        """Return a copy of the document, optionally projected to top-level keys.

        ``elements`` may be a comma-separated string or a sequence of keys.
        """
        return _project(self._weather_data, elements)

    def set_weather_data(self, data: Mapping[str, Any]) -> None:
        """Replace the whole document with a copy of ``data``."""
        _require_record(data)
        self._weather_data = copy.deepcopy(dict(data))

    def get_weather_daily_data(
        self, elements: str | Iterable[str] | None = None
    ) -> list[Record]:
        """Return copies of all days in order, optionally projected."""
        keys = _element_keys(elements)
        return [_project(day, keys) for day in self._day_records()]

    def set_weather_daily_data(self, days: Sequence[Mapping[str, Any]]) -> None:
        """Replace the ``days`` sequence."""
        self._weather_data["days"] = _require_record_list(days, "Daily data")

    def get_weather_hourly_data(
        self, elements: str | Iterable[str] | None = None
    ) -> list[Record]:
        """Return copies of every hour of every day, in day-then-hour order."""
        keys = _element_keys(elements)
        return [
            _project(hour, keys)
            for day in self._day_records()
            for hour in self._hour_records(day)
        ]

    def get_daily_datetimes(self) -> list[datetime]:
        """Parse each day's ``datetime`` into a ``datetime`` at midnight.

        Values are aware at the document's ``tzoffset`` when it has one.
        Days without a string ``datetime`` are skipped; an unparseable one
        raises ``InvalidValueError``.
        """
        tz = self._document_tz()
        return [
            _parse_timestamp(day["datetime"], tz)
            for day in self._day_records()
            if isinstance(day.get("datetime"), str)
        ]

    def get_hourly_datetimes(self) -> list[datetime]:
        """Combine each day's date with each of its hours' times.

        Days and hours without a string ``datetime`` are skipped.
        """
        tz = self._document_tz()
        stamps: list[datetime] = []
        for day in self._day_records():
            date = day.get("datetime")
            if not isinstance(date, str):
                continue
            for hour in self._hour_records(day):
                time = hour.get("datetime")
                if isinstance(time, str):
                    stamps.append(_parse_timestamp(f"{date}T{time}", tz))
        return stamps

    # -- day addressing ------------------------------------------------------

    def get_data_on_day(
        self, day: Any, elements: str | Iterable[str] | None = None
    ) -> Record | None:
        """Return a copy of the selected day, or ``None``."""
        record = resolve_item(self._days(), day)
        if record is None:
            return None
        return _project(record, elements)

    def set_data_on_day(self, day: Any, data: Mapping[str, Any]) -> None:
        """Replace the selected day, keeping its ``datetime``."""
        _require_record(data)
        replace_item(self._days(), day, copy.deepcopy(data))

    def update_data_on_day(self, day: Any, data: Mapping[str, Any]) -> None:
        """Merge ``data`` into the selected day, keeping its ``datetime``."""
        _require_record(data)
        merge_item(self._days(), day, copy.deepcopy(data))

    def get_hourly_data_on_day(
        self, day: Any, elements: str | Iterable[str] | None = None
    ) -> list[Record]:
        """Return copies of the selected day's hours; empty when the day is absent."""
        record = resolve_item(self._days(), day)
        if record is None:
            return []
        keys = _element_keys(elements)
        return [_project(hour, keys) for hour in self._hour_records(record)]

    def set_hourly_data_on_day(self, day: Any, hours: Sequence[Mapping[str, Any]]) -> None:
        """Replace the selected day's ``hours``."""
        new_hours = _require_record_list(hours, "Hourly data")
        record = resolve_item(self._days(), day)
        if record is not None:
            record["hours"] = new_hours

    def get_field_on_day(self, day: Any, field: str) -> Any:
        """Return ``field`` of the selected day; ``None`` on a miss."""
        _require_field_name(field)
        record = resolve_item(self._days(), day)
        if record is None:
            return None
        return copy.deepcopy(record.get(field))

    def set_field_on_day(self, day: Any, field: str, value: Any) -> None:
        """Set ``field`` of the selected day; silently does nothing on a miss."""
        _require_field_name(field)
        record = resolve_item(self._days(), day)
        if record is not None:
            record[field] = copy.deepcopy(value)

    # -- datetime addressing -------------------------------------------------

    def _resolve_day_for_hour(self, day: Any, time: Any) -> Record | None:
        # Both identifiers are type-checked before anything is resolved.
        to_identifier(day)
        to_identifier(time)
        return resolve_item(self._days(), day)

    def _resolve_hour(self, day: Any, time: Any) -> Record | None:
        day_record = self._resolve_day_for_hour(day, time)
        if day_record is None:
            return None
        return resolve_item(self._hours_of(day_record), time)

    def get_data_at_datetime(
        self, day: Any, time: Any, elements: str | Iterable[str] | None = None
    ) -> Record | None:
        """Return a copy of the selected hour, or ``None``."""
        record = self._resolve_hour(day, time)
        if record is None:
            return None
        return _project(record, elements)

    def set_data_at_datetime(self, day: Any, time: Any, data: Mapping[str, Any]) -> None:
        """Replace the selected hour, keeping its ``datetime``."""
        _require_record(data)
        day_record = self._resolve_day_for_hour(day, time)
        if day_record is not None:
            replace_item(self._hours_of(day_record), time, copy.deepcopy(data))

    def update_data_at_datetime(self, day: Any, time: Any, data: Mapping[str, Any]) -> None:
        """Merge ``data`` into the selected hour, keeping its ``datetime``."""
        _require_record(data)
        day_record = self._resolve_day_for_hour(day, time)
        if day_record is not None:
            merge_item(self._hours_of(day_record), time, copy.deepcopy(data))

    def get_field_at_datetime(self, day: Any, time: Any, field: str) -> Any:
        """Return ``field`` of the selected hour; ``None`` on a miss."""
        _require_field_name(field)
        record = self._resolve_hour(day, time)
        if record is None:
            return None
        return copy.deepcopy(record.get(field))

    def set_field_at_datetime(self, day: Any, time: Any, field: str, value: Any) -> None:
        """Set ``field`` of the selected hour; silently does nothing on a miss."""
        _require_field_name(field)
        record = self._resolve_hour(day, time)
        if record is not None:
            record[field] = copy.deepcopy(value)

    # -- document-level fields ----------------------------------------------

    def _get_document_field(self, field: DocumentField) -> Any:
        if field.name not in self._weather_data:
            return copy.deepcopy(field.default)
        return copy.deepcopy(self._weather_data[field.name])

    def _set_document_field(self, field: DocumentField, value: Any) -> None:
        if field.bounds is not None:
            low, high = field.bounds
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise InvalidParameterTypeError(
                    f"Invalid {field.name} type '{type(value).__name__}'."
                )
            if not low <= value <= high:
                raise InvalidValueError(
                    f"Invalid {field.name} value {value}; expected between {low:g} and {high:g}."
                )
        self._weather_data[field.name] = copy.deepcopy(value)

    # -- internals -----------------------------------------------------------

    def _days(self) -> list[Any] | None:
        days = self._weather_data.get("days")
        return days if isinstance(days, list) else None

    def _day_records(self) -> list[Record]:
        return [day for day in self._days() or () if isinstance(day, dict)]

    @staticmethod
    def _hours_of(day_record: Mapping[str, Any]) -> list[Any] | None:
        hours = day_record.get("hours")
        return hours if isinstance(hours, list) else None

    def _hour_records(self, day_record: Mapping[str, Any]) -> list[Record]:
        return [hour for hour in self._hours_of(day_record) or () if isinstance(hour, dict)]

    def _document_tz(self) -> timezone | None:
        offset = self._weather_data.get("tzoffset")
        if isinstance(offset, (int, float)) and not isinstance(offset, bool):
            try:
                return timezone(timedelta(hours=offset))
            except (ValueError, OverflowError) as exc:
                raise InvalidValueError(
                    f"Invalid tzoffset {offset!r}; expected hours strictly between -24 and 24."
                ) from exc
        return None
