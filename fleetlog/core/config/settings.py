"""Application settings loaded from the environment."""

from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fleetlog.core.config.enums import DeliveryMode, Environment


class Settings(BaseSettings):
    """Settings for the event log and its analytics backends.

    A backend is only wired when its credentials are present, so an empty
    environment yields an event log that forwards nothing.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    ENVIRONMENT: Environment = Environment.LOCAL
    LOG_LEVEL: str = "INFO"

    ANALYTICS_ENABLED: bool = True
    EVENT_LOG_PREFIX: str = Field("Dashboard", description="System name prefixed to event names")
    EVENT_LOG_DEBUG: bool = False

    # Behavioral analytics (PostHog)
    POSTHOG_API_KEY: Optional[str] = None
    POSTHOG_HOST: str = "https://app.posthog.com"
    POSTHOG_DELIVERY: DeliveryMode = DeliveryMode.QUEUED

    # Web analytics (Measurement Protocol)
    GA_PROPERTY_ID: Optional[str] = None
    GA_SITE: Optional[str] = None
    GA_HOST: str = "https://www.google-analytics.com"
    GA_TIMEOUT_SECONDS: float = 5.0
    GA_MAX_ATTEMPTS: int = Field(3, ge=1)

    @model_validator(mode="after")
    def validate_web_analytics(self) -> "Settings":
        """A web-analytics property is meaningless without the site it tracks."""
        if self.GA_PROPERTY_ID and not self.GA_SITE:
            raise ValueError("GA_SITE must be set when GA_PROPERTY_ID is configured")
        return self

    @property
    def behavioral_analytics_configured(self) -> bool:
        """Whether PostHog credentials are present."""
        return bool(self.POSTHOG_API_KEY)

    @property
    def web_analytics_configured(self) -> bool:
        """Whether a Measurement Protocol property is configured."""
        return bool(self.GA_PROPERTY_ID)
