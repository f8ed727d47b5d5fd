"""Protocols for analytics backend adapters.

Adapter boundary between the event log and the analytics providers. Both
protocols are fully asynchronous: every call completes once the backend has
accepted (or rejected) the work, whatever the vendor's native convention.
"""

from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class BehavioralAnalyticsProtocol(Protocol):
    """Per-user event and profile tracking (PostHog today)."""

    @property
    def user_id(self) -> Optional[str]:
        """Identity attached to tracked events, None when logged out."""
        ...

    async def signup(self, uid: str) -> None:
        """Link the anonymous identity to ``uid``, then log in as ``uid``."""
        ...

    async def login(self, uid: str) -> None:
        """Attach ``uid`` to subsequent calls and make sure the person exists."""
        ...

    async def logout(self) -> None:
        """Detach the current identity."""
        ...

    async def set_user(self, props: Dict[str, Any]) -> None:
        """Set person properties on the logged-in user.

        Raises:
            NotLoggedInError: If nobody is logged in.
        """
        ...

    async def set_user_once(self, props: Dict[str, Any]) -> None:
        """Set person properties that are not set yet.

        Raises:
            NotLoggedInError: If nobody is logged in.
        """
        ...

    async def track(self, event: str, props: Optional[Dict[str, Any]] = None) -> None:
        """Record an event for the current identity."""
        ...

    async def shutdown(self) -> None:
        """Flush anything still buffered and release the client."""
        ...


@runtime_checkable
class WebAnalyticsProtocol(Protocol):
    """Category/action/label hit tracking against a site property."""

    async def login(self, user_id: str) -> None:
        """Create the named tracker bound to ``user_id``."""
        ...

    async def logout(self) -> None:
        """Remove the named tracker."""
        ...

    async def track(self, category: str, action: str, label: Optional[str] = None) -> None:
        """Send one event hit through the tracker."""
        ...
