"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Reverse geocoding: Nominatim (OpenStreetMap)
    nominatim_reverse_url: str = Field(
        default="https://nominatim.openstreetmap.org/reverse",
        description="Nominatim reverse geocoding endpoint (self-hostable)",
    )
    geocoder_user_agent: str = Field(
        default="CommunityWasteReportingApp/1.0",
        min_length=1,
        description="User-Agent sent with every request (required by the Nominatim usage policy)",
    )
    geocoder_accept_language: str = Field(
        default="en",
        min_length=1,
        description="Accept-Language header; pinned so normalization sees a stable locale",
    )
    geocoder_zoom: int = Field(
        default=18,
        ge=0,
        le=18,
        description="Nominatim zoom level (18 = building/street granularity)",
    )
    geocoder_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Reverse geocoding request timeout in seconds",
    )
    geocoder_email: str = Field(
        default="",
        description="Email for Nominatim usage policy compliance",
    )

    @field_validator("nominatim_reverse_url")
    @classmethod
    def validate_nominatim_reverse_url(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            msg = "nominatim_reverse_url must be an http(s) URL"
            raise ValueError(msg)
        return v

    # Coordinate acquisition
    location_timeout_ms: int = Field(
        default=10_000,
        gt=0,
        description="Maximum time to wait for a position fix, in milliseconds",
    )
    location_high_accuracy: bool = Field(
        default=True,
        description="Request a high-accuracy fix from the location provider",
    )
    location_maximum_age_ms: int = Field(
        default=0,
        ge=0,
        description="Maximum age of a cached fix the provider may return (0 = always fresh)",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
