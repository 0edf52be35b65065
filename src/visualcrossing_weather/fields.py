"""Field catalog and generated per-field accessors.

The Timeline API exposes the same weather vocabulary on days and hours. Each
catalog entry names one JSON key and the granularities it exists at;
``with_field_accessors`` turns the catalog into ``get_<field>_on_day`` /
``set_<field>_on_day`` and ``get_<field>_at_datetime`` /
``set_<field>_at_datetime`` methods that delegate to the generic accessors
of the decorated class. Document-level keys (location and request
metadata) get plain ``get_<field>`` / ``set_<field>`` pairs.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal, TypeVar

FieldGroup = Literal["core", "astronomy", "description", "datetime", "location", "request"]

_CAMEL_BOUNDARY_RE = re.compile(r"(?<!^)(?=[A-Z])")


def snake_case(name: str) -> str:
    """``sunriseEpoch`` -> ``sunrise_epoch``."""
    return _CAMEL_BOUNDARY_RE.sub("_", name).lower()


@dataclass(frozen=True)
class WeatherField:
    """One weather element and the granularities it is addressable at."""

    name: str
    group: FieldGroup
    on_day: bool = True
    at_datetime: bool = True

    @property
    def attr(self) -> str:
        return snake_case(self.name)


@dataclass(frozen=True)
class DocumentField:
    """One top-level key of the weather document."""

    name: str
    group: FieldGroup
    default: Any = None
    bounds: tuple[float, float] | None = None

    @property
    def attr(self) -> str:
        return snake_case(self.name)


def _core(name: str, *, hourly: bool = True) -> WeatherField:
    return WeatherField(name, "core", on_day=True, at_datetime=hourly)


WEATHER_FIELDS: tuple[WeatherField, ...] = (
    _core("temp"),
    _core("tempmax", hourly=False),
    _core("tempmin", hourly=False),
    _core("feelslike"),
    _core("feelslikemax", hourly=False),
    _core("feelslikemin", hourly=False),
    _core("dew"),
    _core("humidity"),
    _core("precip"),
    _core("precipprob"),
    _core("precipcover", hourly=False),
    _core("preciptype"),
    _core("snow"),
    _core("snowdepth"),
    _core("windgust"),
    _core("windspeed"),
    _core("winddir"),
    _core("pressure"),
    _core("cloudcover"),
    _core("visibility"),
    _core("solarradiation"),
    _core("solarenergy"),
    _core("uvindex"),
    _core("severerisk"),
    _core("stations"),
    WeatherField("sunrise", "astronomy", at_datetime=False),
    WeatherField("sunriseEpoch", "astronomy", at_datetime=False),
    WeatherField("sunset", "astronomy", at_datetime=False),
    WeatherField("sunsetEpoch", "astronomy", at_datetime=False),
    WeatherField("moonphase", "astronomy", at_datetime=False),
    WeatherField("conditions", "description"),
    WeatherField("description", "description", at_datetime=False),
    WeatherField("icon", "description"),
    WeatherField("source", "datetime", on_day=False),
    WeatherField("datetimeEpoch", "datetime", on_day=False),
)

DOCUMENT_FIELDS: tuple[DocumentField, ...] = (
    DocumentField("latitude", "location", bounds=(-90.0, 90.0)),
    DocumentField("longitude", "location", bounds=(-180.0, 180.0)),
    DocumentField("resolvedAddress", "location"),
    DocumentField("address", "location"),
    DocumentField("timezone", "location"),
    DocumentField("tzoffset", "location"),
    DocumentField("queryCost", "request"),
    DocumentField("stations", "request", default=[]),
)

DAY_FIELDS: frozenset[str] = frozenset(f.name for f in WEATHER_FIELDS if f.on_day)
DATETIME_FIELDS: frozenset[str] = frozenset(f.name for f in WEATHER_FIELDS if f.at_datetime)

_C = TypeVar("_C", bound=type)


def _named(func: Callable[..., Any], name: str, owner: type, doc: str) -> Callable[..., Any]:
    func.__name__ = name
    func.__qualname__ = f"{owner.__name__}.{name}"
    func.__doc__ = doc
    return func


def _day_pair(field: WeatherField, owner: type) -> dict[str, Callable[..., Any]]:
    key = field.name

    def getter(self: Any, day: Any) -> Any:
        return self.get_field_on_day(day, key)

    def setter(self: Any, day: Any, value: Any) -> None:
        self.set_field_on_day(day, key, value)

    get_name = f"get_{field.attr}_on_day"
    set_name = f"set_{field.attr}_on_day"
    return {
        get_name: _named(
            getter, get_name, owner, f"Return ``{key}`` of the selected day, or ``None``."
        ),
        set_name: _named(
            setter, set_name, owner, f"Set ``{key}`` of the selected day; no-op on a miss."
        ),
    }


def _datetime_pair(field: WeatherField, owner: type) -> dict[str, Callable[..., Any]]:
    key = field.name

    def getter(self: Any, day: Any, time: Any) -> Any:
        return self.get_field_at_datetime(day, time, key)

    def setter(self: Any, day: Any, time: Any, value: Any) -> None:
        self.set_field_at_datetime(day, time, key, value)

    get_name = f"get_{field.attr}_at_datetime"
    set_name = f"set_{field.attr}_at_datetime"
    return {
        get_name: _named(
            getter, get_name, owner, f"Return ``{key}`` of the selected hour, or ``None``."
        ),
        set_name: _named(
            setter, set_name, owner, f"Set ``{key}`` of the selected hour; no-op on a miss."
        ),
    }


def _document_pair(field: DocumentField, owner: type) -> dict[str, Callable[..., Any]]:
    def getter(self: Any) -> Any:
        return self._get_document_field(field)

    def setter(self: Any, value: Any) -> None:
        self._set_document_field(field, value)

    get_name = f"get_{field.attr}"
    set_name = f"set_{field.attr}"
    return {
        get_name: _named(getter, get_name, owner, f"Return the document ``{field.name}``."),
        set_name: _named(setter, set_name, owner, f"Set the document ``{field.name}``."),
    }


def with_field_accessors(cls: _C) -> _C:
    """Class decorator installing the catalog accessors on ``cls``.

    Methods the class already defines explicitly are left alone.
    """
    generated: dict[str, Callable[..., Any]] = {}
    for field in WEATHER_FIELDS:
        if field.on_day:
            generated.update(_day_pair(field, cls))
        if field.at_datetime:
            generated.update(_datetime_pair(field, cls))
    for doc_field in DOCUMENT_FIELDS:
        generated.update(_document_pair(doc_field, cls))

    for name, method in generated.items():
        if name not in cls.__dict__:
            setattr(cls, name, method)
    return cls
