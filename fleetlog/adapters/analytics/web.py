"""Web-analytics adapter speaking the Measurement Protocol.

Implements WebAnalyticsProtocol. A named tracker is created on login and
removed on logout; event hits are sent through it as form-encoded POSTs.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from fleetlog.core.exceptions import TrackerNotCreatedError, WebAnalyticsError

logger = logging.getLogger(__name__)

TRACKER_NAME = "fleetAnalytics"
PROTOCOL_VERSION = "1"
COLLECT_PATH = "/collect"

# Sent instead of a cookie domain in debug mode so hits are not bound to the site
NO_COOKIE_DOMAIN = "none"


@dataclass
class Tracker:
    """Handle for one named tracker instance."""

    name: str
    property_id: str
    user_id: str
    client_id: str
    cookie_domain: str


def should_retry_hit(exception: BaseException) -> bool:
    """Retry timeouts, connection errors, rate limits and collector 5xx."""
    if isinstance(exception, httpx.HTTPStatusError):
        status = exception.response.status_code
        return status == 429 or status >= 500
    return isinstance(exception, (httpx.TimeoutException, httpx.ConnectError))


class MeasurementProtocolClient:
    """Category/action/label event tracking for one site property."""

    def __init__(
        self,
        property_id: str,
        site: str,
        *,
        debug: bool = False,
        host: str = "https://www.google-analytics.com",
        timeout: float = 5.0,
        max_attempts: int = 3,
        backoff: float = 1.0,
    ) -> None:
        """Configure the tracker factory.

        Args:
            property_id: Web property id (``UA-XXXX-Y``).
            site: Site the property tracks; used as cookie domain.
            debug: Skip the cookie domain and log every hit payload.
            host: Collector base URL.
            timeout: Seconds to wait for the collector per attempt.
            max_attempts: Attempts per hit, including the first.
            backoff: Exponential backoff multiplier in seconds.
        """
        self._property_id = property_id
        self._site = site
        self._debug = debug
        self._collect_url = host.rstrip("/") + COLLECT_PATH
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._backoff = backoff
        self._tracker: Optional[Tracker] = None

    @property
    def tracker(self) -> Optional[Tracker]:
        """The live tracker, or None when logged out."""
        return self._tracker

    async def login(self, user_id: str) -> None:
        """Create the named tracker for ``user_id``."""
        self._tracker = Tracker(
            name=TRACKER_NAME,
            property_id=self._property_id,
            user_id=user_id,
            client_id=str(uuid.uuid4()),
            cookie_domain=NO_COOKIE_DOMAIN if self._debug else self._site,
        )
        logger.debug("Created tracker '%s' for property %s", TRACKER_NAME, self._property_id)

    async def logout(self) -> None:
        """Remove the named tracker. Safe to call when none exists."""
        self._tracker = None

    def _build_hit(
        self, tracker: Tracker, category: str, action: str, label: Optional[str]
    ) -> Dict[str, str]:
        hit = {
            "v": PROTOCOL_VERSION,
            "tid": tracker.property_id,
            "cid": tracker.client_id,
            "uid": tracker.user_id,
            "t": "event",
            "ec": category,
            "ea": action,
        }
        if label is not None:
            hit["el"] = label
        if tracker.cookie_domain != NO_COOKIE_DOMAIN:
            hit["dh"] = tracker.cookie_domain
        return hit

    async def _post(self, hit: Dict[str, str]) -> None:
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(self._collect_url, data=hit)
            response.raise_for_status()

    async def track(self, category: str, action: str, label: Optional[str] = None) -> None:
        """Send an event hit and wait for the collector to acknowledge it.

        Raises:
            TrackerNotCreatedError: If login() has not been called.
            WebAnalyticsError: If the hit could not be delivered.
        """
        tracker = self._tracker
        if tracker is None:
            raise TrackerNotCreatedError(TRACKER_NAME)

        hit = self._build_hit(tracker, category, action, label)
        if self._debug:
            logger.debug("Sending hit via '%s.send': %s", tracker.name, hit)

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_attempts),
                retry=retry_if_exception(should_retry_hit),
                wait=wait_exponential(multiplier=self._backoff, max=10),
                reraise=True,
            ):
                with attempt:
                    await self._post(hit)
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise WebAnalyticsError(f"Collector rejected hit with HTTP {status}", status) from exc
        except httpx.TimeoutException as exc:
            raise WebAnalyticsError(
                f"Collector did not respond within {self._timeout} seconds"
            ) from exc
        except httpx.HTTPError as exc:
            raise WebAnalyticsError(f"Failed to send hit: {exc}") from exc
