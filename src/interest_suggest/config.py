"""Configuration management for interest suggestions."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="SUGGEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote autocomplete endpoint
    api_base_url: str = "https://be-v2.convose.com"
    autocomplete_path: str = "/autocomplete/interests"
    # Sent verbatim in the Authorization header (no "Bearer" scheme)
    api_key: str | None = None
    page_size: int = Field(default=20, ge=1)
    request_timeout: float = 10.0
    # Name of the list field in the response body
    response_field: str = "autocomplete"

    # Debounce intervals (milliseconds)
    # short: queries of at most one character
    # extend: queries that extend the last valid query
    # default: anything else
    debounce_short_ms: int = 100
    debounce_extend_ms: int = 800
    debounce_default_ms: int = 300

    # How many characters past an empty cached prefix are still suppressed
    suppression_lookahead: int = 3

    # Warm start
    preload_letters: list[str] = ["a", "b", "c", "d", "e", "g", "m", "s", "t"]
    preload_on_start: bool = True

    # API configuration
    host: str = "0.0.0.0"
    port: int = 8080


# Global settings instance
settings = Settings()
