"""Application exception classes."""

from __future__ import annotations

from typing import Any


class InvalidIdentifierTypeError(TypeError):
    """Raised when a day or time identifier is neither a string nor a number."""

    def __init__(self, message: str, *, value: Any = None) -> None:
        super().__init__(message)
        self.value = value


class InvalidParameterTypeError(TypeError):
    """Raised when a request parameter or record argument has the wrong type."""


class InvalidFormatError(ValueError):
    """Raised when a date expression matches none of the accepted forms."""


class InvalidValueError(ValueError):
    """Raised when a parameter is outside its fixed vocabulary or range."""


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class WeatherRequestError(Exception):
    """Raised when a fetch is attempted without the required request inputs."""


class WeatherFetchError(Exception):
    """Raised when the weather API call fails or returns an unusable payload."""

    def __init__(
        self,
        message: str,
        *,
        body: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.body = body
        self.status_code = status_code
