"""Event log facade.

Translates semantic dashboard actions into calls on the configured analytics
backends. Either backend may be absent; with neither, every call still
completes and ``after_create`` still fires.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Dict, List, Optional

from fleetlog.core.exceptions import EventLogError
from fleetlog.core.logging import logger
from fleetlog.core.protocols.analytics import BehavioralAnalyticsProtocol, WebAnalyticsProtocol
from fleetlog.domains.event_log.catalog import EVENT_CATALOG, event_type_for
from fleetlog.domains.event_log.types import AfterCreateHook, EventLogUser


class ResourceActions:
    """Semantic methods for one resource, e.g. ``log.device``.

    Every action in the catalog becomes an async method taking
    ``(json_data=None, application_id=None, device_id=None)``.
    """

    def __init__(self, event_log: "EventLog", resource: str, actions: tuple) -> None:
        """Bind one method per action."""
        self._event_log = event_log
        self.resource = resource
        self.actions = actions
        for action in actions:
            setattr(self, action, self._bind(action))

    def _bind(self, action: str) -> Callable[..., Awaitable[None]]:
        event_type = event_type_for(self.resource, action)

        async def record(
            json_data: Optional[Dict[str, Any]] = None,
            application_id: Optional[str] = None,
            device_id: Optional[str] = None,
        ) -> None:
            await self._event_log.create(event_type, json_data, application_id, device_id)

        record.__name__ = action
        record.__doc__ = f"Record a '{event_type}' event."
        return record

    def __repr__(self) -> str:
        return f"ResourceActions({self.resource!r}, actions={list(self.actions)})"


class EventLog:
    """Fans dashboard events out to behavioral and web analytics.

    Usage:
        log = EventLog("Dashboard", behavioral=posthog_client, web=ga_client, site="example.io")
        await log.start(user)
        await log.device.rename(device_id="abc123")
        await log.end()
    """

    def __init__(
        self,
        prefix: str,
        *,
        behavioral: Optional[BehavioralAnalyticsProtocol] = None,
        web: Optional[WebAnalyticsProtocol] = None,
        site: Optional[str] = None,
        after_create: Optional[AfterCreateHook] = None,
    ) -> None:
        """Wire the facade to its backends.

        Args:
            prefix: System name; prefixes behavioral event names and labels web hits.
            behavioral: Behavioral-analytics adapter, if configured.
            web: Web-analytics adapter, if configured.
            site: Site tracked by the web property; the hit category.
            after_create: Called once per ``create`` with the first backend error.
        """
        if web is not None and not site:
            raise ValueError("site is required when web analytics is configured")

        self.prefix = prefix
        self._behavioral = behavioral
        self._web = web
        self._site = site
        self._after_create = after_create
        self._current_user: Optional[EventLogUser] = None
        self._logger = logger.with_context(event_log=prefix)

        for resource, actions in EVENT_CATALOG.items():
            setattr(self, resource, ResourceActions(self, resource, actions))

    @property
    def is_started(self) -> bool:
        """Whether a session is active."""
        return self._current_user is not None

    @property
    def current_user(self) -> Optional[EventLogUser]:
        """User of the active session."""
        return self._current_user

    def event_name(self, event_type: str) -> str:
        """Behavioral event name for ``event_type``."""
        return f"[{self.prefix}] {event_type}"

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def start(self, user: EventLogUser) -> None:
        """Open a session for ``user`` on every backend.

        Raises:
            EventLogError: If any backend failed. All backends are attempted.
        """
        self._current_user = user
        pending: List[Awaitable[None]] = []
        if self._behavioral is not None:
            pending.append(self._login_behavioral(user))
        if self._web is not None:
            pending.append(self._web.login(user.username))
        await self._run_all("start", pending)
        self._logger.info("Event log session started for '%s'", user.username)

    async def signup(self, user: EventLogUser) -> None:
        """Open a session for a user that was just created.

        The behavioral backend links the anonymous history to the new
        identity before any profile property is set.
        """
        self._current_user = user
        pending: List[Awaitable[None]] = []
        if self._behavioral is not None:
            pending.append(self._signup_behavioral(user))
        if self._web is not None:
            pending.append(self._web.login(user.username))
        await self._run_all("signup", pending)
        self._logger.info("Event log session started for new user '%s'", user.username)

    async def end(self) -> None:
        """Close the session on every backend."""
        self._current_user = None
        pending: List[Awaitable[None]] = []
        if self._behavioral is not None:
            pending.append(self._behavioral.logout())
        if self._web is not None:
            pending.append(self._web.logout())
        await self._run_all("end", pending)

    async def close(self) -> None:
        """Flush buffered behavioral events."""
        if self._behavioral is not None:
            await self._behavioral.shutdown()

    async def _login_behavioral(self, user: EventLogUser) -> None:
        await self._behavioral.login(user.username)
        await self._update_profile(user)

    async def _signup_behavioral(self, user: EventLogUser) -> None:
        await self._behavioral.signup(user.username)
        await self._update_profile(user)

    async def _update_profile(self, user: EventLogUser) -> None:
        await self._behavioral.set_user(user.profile_properties())
        first_seen = user.first_seen_properties()
        if first_seen:
            await self._behavioral.set_user_once(first_seen)

    async def _run_all(self, operation: str, pending: List[Awaitable[None]]) -> None:
        results = await asyncio.gather(*pending, return_exceptions=True)
        errors = [r for r in results if isinstance(r, Exception)]
        for error in errors:
            self._logger.error("Event log %s failed on a backend: %s", operation, error)
        if errors:
            raise EventLogError(
                f"Event log {operation} failed on {len(errors)} backend(s): {errors[0]}"
            ) from errors[0]

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def create(
        self,
        event_type: str,
        json_data: Optional[Dict[str, Any]] = None,
        application_id: Optional[str] = None,
        device_id: Optional[str] = None,
    ) -> None:
        """Record ``event_type`` on every backend.

        Backend failures are logged and handed to ``after_create``; they are
        never raised from here.
        """
        pending: List[Awaitable[None]] = []
        if self._behavioral is not None:
            properties = dict(json_data or {})
            if application_id is not None:
                properties["application_id"] = application_id
            if device_id is not None:
                properties["device_id"] = device_id
            pending.append(self._behavioral.track(self.event_name(event_type), properties))
        if self._web is not None:
            if self.is_started:
                pending.append(self._web.track(self._site, event_type, self.prefix))
            else:
                self._logger.debug("Skipping web hit for '%s': no active session", event_type)

        results = await asyncio.gather(*pending, return_exceptions=True)
        errors = [r for r in results if isinstance(r, Exception)]
        for error in errors:
            self._logger.error("Failed to record event '%s': %s", event_type, error)

        if self._after_create is not None:
            outcome = self._after_create(
                errors[0] if errors else None, event_type, json_data, application_id, device_id
            )
            if inspect.isawaitable(outcome):
                await outcome
