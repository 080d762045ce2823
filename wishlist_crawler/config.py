"""Application configuration using Pydantic BaseSettings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from wishlist_crawler.constants import (
    BROWSER_WINDOW_HEIGHT,
    BROWSER_WINDOW_WIDTH,
    DEFAULT_PORTAL_URL,
    DEFAULT_SPAM_KEYWORDS,
    MAX_LISTING_PAGES,
    MAX_NAVIGATION_TIMEOUT_SECONDS,
    MIN_NAVIGATION_TIMEOUT_SECONDS,
    MIN_REQUEST_DELAY_SECONDS,
    NAVIGATION_TIMEOUT_SECONDS,
    PUBLISH_TIMEOUT_SECONDS,
    RECENT_SORT_QUERY,
    REQUEST_DELAY_SECONDS,
)
from wishlist_crawler.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        # .env.local overrides .env
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Destination
    push_url: str = Field(
        ..., description="Webhook URL that receives the crawl result (PUSH_URL)"
    )

    # Portal
    portal_url: str = Field(
        default=DEFAULT_PORTAL_URL, description="Wishlist portal start page"
    )
    recent_sort_query: str = Field(
        default=RECENT_SORT_QUERY,
        description="Query appended to the portal URL for the recency-sorted view",
    )

    # ==========================================================================
    # Pacing and Timeouts
    # ==========================================================================

    request_delay_seconds: float = Field(
        default=REQUEST_DELAY_SECONDS,
        ge=MIN_REQUEST_DELAY_SECONDS,
        description="Delay between consecutive requests to the portal (seconds)",
    )
    navigation_timeout_seconds: float = Field(
        default=NAVIGATION_TIMEOUT_SECONDS,
        ge=MIN_NAVIGATION_TIMEOUT_SECONDS,
        le=MAX_NAVIGATION_TIMEOUT_SECONDS,
        description="Upper bound for one page navigation (seconds)",
    )
    publish_timeout_seconds: float = Field(
        default=PUBLISH_TIMEOUT_SECONDS,
        description="Timeout for the webhook POST (seconds)",
    )
    max_listing_pages: int = Field(
        default=MAX_LISTING_PAGES,
        ge=1,
        description="Maximum pages followed in one listing before giving up",
    )

    # Pipeline
    enrich_ideas: bool = Field(
        default=True,
        description="Fetch every idea's detail page (False = fast listing-only mode)",
    )
    spam_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SPAM_KEYWORDS),
        min_length=1,
        description="Keywords an idea must contain to be kept (JSON list)",
    )

    # Browser
    headless: bool = Field(default=True, description="Run Chrome headless")
    chrome_version_main: int | None = Field(
        default=None,
        description="Chrome major version for undetected-chromedriver (e.g. 143)",
    )
    window_width: int = Field(default=BROWSER_WINDOW_WIDTH)
    window_height: int = Field(default=BROWSER_WINDOW_HEIGHT)

    # Environment
    env: Literal["local", "ci", "prod"] = Field(
        default="local", description="Current environment"
    )
    log_level: str = Field(default="INFO", description="Python logging level")

    # Observability
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token (optional)"
    )
    sentry_dsn: str | None = Field(
        default=None, description="Sentry DSN for error tracking (optional)"
    )

    @field_validator("push_url")
    @classmethod
    def _push_url_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("PUSH_URL must not be empty")
        return value

    @field_validator("spam_keywords")
    @classmethod
    def _keywords_not_blank(cls, value: list[str]) -> list[str]:
        keywords = [keyword for keyword in value if keyword]
        if not keywords:
            raise ValueError("at least one non-empty spam keyword is required")
        return keywords

    @property
    def recent_url(self) -> str:
        """Recency-sorted variant of the portal URL."""
        return self.portal_url + self.recent_sort_query


def _describe_validation_error(error: ValidationError) -> str:
    problems = []
    for detail in error.errors():
        field = ".".join(str(part) for part in detail["loc"]) or "settings"
        if detail["type"] == "missing":
            problems.append(f"{field.upper()} is required")
        else:
            problems.append(f"{field.upper()}: {detail['msg']}")
    return "; ".join(problems)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Raises:
        ConfigurationError: If a required setting is missing or a value is invalid
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {_describe_validation_error(e)}. "
            "Set it in .env or the environment."
        ) from e
