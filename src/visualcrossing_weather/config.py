"""Typed settings loader for the Visual Crossing weather client."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError
from .params import UNIT_GROUPS

DEFAULT_BASE_URL = (
    "https://weather.visualcrossing.com/VisualCrossingWebServices/rest/services/timeline"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    visualcrossing_api_key: str | None = Field(
        default=None, alias="VISUALCROSSING_API_KEY", repr=False
    )
    visualcrossing_api_key_file: Path | None = Field(
        default=None, alias="VISUALCROSSING_API_KEY_FILE", repr=False
    )
    visualcrossing_base_url: str = Field(
        default=DEFAULT_BASE_URL,
        alias="VISUALCROSSING_BASE_URL",
    )
    weather_timeout_seconds: float = Field(default=15.0, alias="WEATHER_TIMEOUT_SECONDS")
    weather_unit_group: str = Field(default="metric", alias="WEATHER_UNIT_GROUP")
    weather_default_location: str | None = Field(
        default=None, alias="WEATHER_DEFAULT_LOCATION"
    )
    weather_max_print: int = Field(default=7, alias="WEATHER_MAX_PRINT")

    @field_validator(
        "visualcrossing_api_key",
        "visualcrossing_api_key_file",
        "weather_default_location",
        mode="before",
    )
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat empty env-string values as unset."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @model_validator(mode="after")
    def validate_settings(self) -> Settings:
        """Resolve the key file and check value ranges."""
        # An inline key wins over the key file.
        if not self.visualcrossing_api_key and self.visualcrossing_api_key_file is not None:
            key_path = self.visualcrossing_api_key_file
            if not key_path.exists():
                raise ValueError(f"VISUALCROSSING_API_KEY_FILE does not exist: {key_path}")
            try:
                self.visualcrossing_api_key = key_path.read_text(encoding="utf-8").strip()
            except OSError as exc:
                raise ValueError(
                    f"Failed reading VISUALCROSSING_API_KEY_FILE ({key_path}): {exc}"
                ) from exc

        if not self.visualcrossing_base_url.startswith(("https://", "http://")):
            raise ValueError("VISUALCROSSING_BASE_URL must be an http(s) URL.")
        self.visualcrossing_base_url = self.visualcrossing_base_url.rstrip("/")
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if self.weather_unit_group not in UNIT_GROUPS:
            raise ValueError(
                f"WEATHER_UNIT_GROUP must be one of {sorted(UNIT_GROUPS)}."
            )
        if self.weather_max_print <= 0:
            raise ValueError("WEATHER_MAX_PRINT must be > 0.")
        return self

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for logging (no credentials)."""
        return {
            "base_url": self.visualcrossing_base_url,
            "api_key_configured": bool(self.visualcrossing_api_key),
            "timeout_seconds": self.weather_timeout_seconds,
            "unit_group": self.weather_unit_group,
            "default_location": self.weather_default_location,
            "max_print": self.weather_max_print,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
