"""PostHog behavioral-analytics adapter."""

import asyncio
import logging
import uuid
from typing import Any, Callable, Dict, List, Optional

from posthog import Posthog

from fleetlog.core.config.enums import DeliveryMode
from fleetlog.core.exceptions import BehavioralAnalyticsError, NotLoggedInError

logger = logging.getLogger(__name__)


class PostHogBehavioralClient:
    """Wraps the PostHog SDK behind BehavioralAnalyticsProtocol.

    The SDK has two delivery conventions. In ``sync`` mode every call posts
    inline; in ``queued`` mode calls only enqueue and failures surface later
    through the ``on_error`` callback. Public SDK methods never raise unless
    the client is in debug mode: they log the failure and return None instead
    of the event uuid. Both conventions are normalized here: each operation is
    a coroutine that completes once the SDK accepted the message and raises
    BehavioralAnalyticsError if it did not. Late queued failures are logged
    and kept on ``last_delivery_error``.

    The SDK itself is stateless, so identity lives on the adapter: the
    logged-in ``user_id``, or a random ``anonymous_id`` while logged out.
    """

    def __init__(
        self,
        api_key: str,
        *,
        host: Optional[str] = None,
        delivery: DeliveryMode = DeliveryMode.QUEUED,
        debug: bool = False,
        base_properties: Optional[Dict[str, Any]] = None,
        client: Optional[Any] = None,
    ) -> None:
        """Configure the PostHog client.

        Args:
            api_key: Project API key.
            host: PostHog instance URL.
            delivery: Inline (``sync``) or background (``queued``) delivery.
            debug: Enable the SDK's own debug logging.
            base_properties: Merged into every tracked event.
            client: Pre-built SDK client, mostly for tests.
        """
        self._delivery = DeliveryMode(delivery)
        self._base_properties = dict(base_properties or {})
        self._client = client or Posthog(
            api_key,
            host=host,
            debug=debug,
            sync_mode=self._delivery == DeliveryMode.SYNC,
            on_error=self._on_delivery_error,
        )
        self._user_id: Optional[str] = None
        self.anonymous_id = str(uuid.uuid4())
        self.last_delivery_error: Optional[Exception] = None
        logger.info("PostHog behavioral client initialized (delivery=%s)", self._delivery.value)

    @property
    def user_id(self) -> Optional[str]:
        """Identity attached to tracked events, None when logged out."""
        return self._user_id

    def _on_delivery_error(self, error: Exception, batch: List[Dict[str, Any]]) -> None:
        # Called from the SDK consumer thread in queued mode
        self.last_delivery_error = error
        logger.error("PostHog dropped a batch of %d message(s): %s", len(batch or []), error)

    async def _call(self, operation: str, fn: Callable[..., Any], **kwargs: Any) -> str:
        try:
            event_uuid = await asyncio.to_thread(fn, **kwargs)
        except Exception as e:
            raise BehavioralAnalyticsError(f"PostHog {operation} failed: {e}") from e
        # None means the SDK dropped the message and logged why
        if event_uuid is None:
            raise BehavioralAnalyticsError(
                f"PostHog {operation} failed: message was not accepted (see the posthog log)"
            )
        return event_uuid

    def _require_user(self, operation: str) -> str:
        if not self._user_id:
            raise NotLoggedInError(operation)
        return self._user_id

    async def signup(self, uid: str) -> None:
        """Alias the anonymous identity to ``uid`` and log in.

        Logging in only after the alias went through guarantees the identity
        is attached before anything else is tracked.
        """
        await self._call(
            "alias", self._client.alias, previous_id=self.anonymous_id, distinct_id=uid
        )
        await self.login(uid)

    async def login(self, uid: str) -> None:
        """Attach ``uid`` and make sure the person exists in PostHog."""
        self._user_id = uid
        await self._call(
            "set_once", self._client.set_once, distinct_id=uid, properties={"distinct_id": uid}
        )

    async def logout(self) -> None:
        """Forget the user. The SDK keeps no identity state, so nothing is sent."""
        self._user_id = None
        self.anonymous_id = str(uuid.uuid4())

    async def set_user(self, props: Dict[str, Any]) -> None:
        """Set person properties on the logged-in user."""
        uid = self._require_user("set_user")
        await self._call("set", self._client.set, distinct_id=uid, properties=dict(props))

    async def set_user_once(self, props: Dict[str, Any]) -> None:
        """Set person properties only where they are still unset."""
        uid = self._require_user("set_user_once")
        await self._call(
            "set_once", self._client.set_once, distinct_id=uid, properties=dict(props)
        )

    async def track(self, event: str, props: Optional[Dict[str, Any]] = None) -> None:
        """Capture ``event`` for the current identity."""
        properties = {**self._base_properties, **(props or {})}
        await self._call(
            "capture",
            self._client.capture,
            distinct_id=self._user_id or self.anonymous_id,
            event=event,
            properties=properties,
        )

    async def shutdown(self) -> None:
        """Flush queued messages and stop the SDK consumer."""
        await asyncio.to_thread(self._client.shutdown)
