"""Configuration loaded from environment variables (prefix ``MAL_``).

For local development, put overrides in a .env file in the project root.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class ScheduleConfig(BaseSettings):
    """Upstream page, URL normalization, HTTP server and logging settings."""

    # Upstream page
    schedule_url: str = Field(
        default="https://myanimelist.net/anime/season/schedule",
        description="Seasonal schedule page to scrape",
    )
    origin: str = Field(
        default="https://myanimelist.net",
        description="Origin prepended to root-relative image URLs",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header sent with the schedule request",
    )
    request_timeout: float | None = Field(
        default=30.0,
        description="Seconds to wait for the upstream page (None waits forever)",
    )

    # Normalization
    image_format: str = Field(
        default="webp",
        description="Extension that jpg/jpeg/png/gif image URLs are rewritten to",
    )

    # HTTP server
    host: str = Field(default="127.0.0.1", description="Interface the API server binds to")
    port: int = Field(
        default=3000,
        validation_alias=AliasChoices("MAL_PORT", "PORT"),
        description="Port the API server listens on",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "MAL_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }


_config: ScheduleConfig | None = None


def get_config() -> ScheduleConfig:
    """Get the configuration singleton."""
    global _config
    if _config is None:
        _config = ScheduleConfig()
    return _config
