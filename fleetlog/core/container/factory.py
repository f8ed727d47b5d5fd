"""Event log factory.

All construction logic lives here. The factory reads settings and decides
which analytics adapters the event log gets.

Design principles:
- Single place for all wiring decisions
- Environment-aware: nothing is sent from local unless forced
- Fail fast: broken settings crash at startup, not on the first event
"""

from typing import Optional

from fleetlog.adapters.analytics.posthog import PostHogBehavioralClient
from fleetlog.adapters.analytics.web import MeasurementProtocolClient
from fleetlog.core.config import Environment, Settings
from fleetlog.core.logging import configure_logging, logger
from fleetlog.core.protocols.analytics import BehavioralAnalyticsProtocol, WebAnalyticsProtocol
from fleetlog.domains.event_log.service import EventLog
from fleetlog.domains.event_log.types import AfterCreateHook


def create_event_log(
    settings: Settings,
    after_create: Optional[AfterCreateHook] = None,
    *,
    allow_local: bool = False,
) -> EventLog:
    """Build an event log with environment-appropriate backends.

    Args:
        settings: Application settings (from core/config).
        after_create: Hook passed through to EventLog.
        allow_local: Send analytics even when ENVIRONMENT is local.

    Returns:
        EventLog wired to every configured backend.

    Example:
        from fleetlog.core.config import settings
        from fleetlog.core.container import create_event_log

        event_log = create_event_log(settings)
    """
    configure_logging(settings.LOG_LEVEL)
    enabled = settings.ANALYTICS_ENABLED and (
        allow_local or settings.ENVIRONMENT != Environment.LOCAL
    )
    if not enabled:
        logger.info(
            "Analytics disabled (env=%s); event log has no backends", settings.ENVIRONMENT.value
        )
        return EventLog(settings.EVENT_LOG_PREFIX, after_create=after_create)

    return EventLog(
        settings.EVENT_LOG_PREFIX,
        behavioral=_create_behavioral_analytics(settings),
        web=_create_web_analytics(settings),
        site=settings.GA_SITE,
        after_create=after_create,
    )


def _create_behavioral_analytics(settings: Settings) -> Optional[BehavioralAnalyticsProtocol]:
    """PostHog client, or None without an API key."""
    if not settings.behavioral_analytics_configured:
        logger.info("Behavioral analytics not configured")
        return None
    return PostHogBehavioralClient(
        settings.POSTHOG_API_KEY,
        host=settings.POSTHOG_HOST,
        delivery=settings.POSTHOG_DELIVERY,
        debug=settings.EVENT_LOG_DEBUG,
        base_properties={"environment": settings.ENVIRONMENT.value},
    )


def _create_web_analytics(settings: Settings) -> Optional[WebAnalyticsProtocol]:
    """Measurement Protocol client, or None without a property id."""
    if not settings.web_analytics_configured:
        logger.info("Web analytics not configured")
        return None
    return MeasurementProtocolClient(
        settings.GA_PROPERTY_ID,
        settings.GA_SITE,
        debug=settings.EVENT_LOG_DEBUG,
        host=settings.GA_HOST,
        timeout=settings.GA_TIMEOUT_SECONDS,
        max_attempts=settings.GA_MAX_ATTEMPTS,
    )
