"""Data-access wrapper around the Visual Crossing Timeline Weather API."""

from .addressing import ByIndex, ByKey, merge_item, replace_item, resolve_item, to_identifier
from .exceptions import (
    ConfigError,
    InvalidFormatError,
    InvalidIdentifierTypeError,
    InvalidParameterTypeError,
    InvalidValueError,
    WeatherFetchError,
    WeatherRequestError,
)
from .params import validate_date, validate_elements, validate_include, validate_unit_group
from .store import WeatherStore

__all__ = [
    "ByIndex",
    "ByKey",
    "ConfigError",
    "InvalidFormatError",
    "InvalidIdentifierTypeError",
    "InvalidParameterTypeError",
    "InvalidValueError",
    "WeatherFetchError",
    "WeatherRequestError",
    "WeatherStore",
    "merge_item",
    "replace_item",
    "resolve_item",
    "to_identifier",
    "validate_date",
    "validate_elements",
    "validate_include",
    "validate_unit_group",
]
