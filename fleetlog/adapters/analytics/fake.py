"""Fake analytics backends for testing."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from fleetlog.core.exceptions import NotLoggedInError, TrackerNotCreatedError


@dataclass
class RecordedCall:
    """Single recorded backend call."""

    method: str
    args: Dict[str, Any] = field(default_factory=dict)


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[RecordedCall] = []
        self.fail_with: Dict[str, Exception] = {}

    def _record(self, method: str, **args: Any) -> None:
        self.calls.append(RecordedCall(method=method, args=args))
        if method in self.fail_with:
            raise self.fail_with[method]

    def methods(self) -> list[str]:
        """Names of the recorded calls, in order."""
        return [c.method for c in self.calls]

    def get(self, method: str) -> RecordedCall:
        """Return the first call to ``method``, or raise AssertionError."""
        for c in self.calls:
            if c.method == method:
                return c
        raise AssertionError(f"No call to '{method}' recorded. Recorded: {self.methods()}")

    def get_all(self, method: str) -> list[RecordedCall]:
        """Return all calls to ``method``."""
        return [c for c in self.calls if c.method == method]

    def clear(self) -> None:
        """Reset recorded calls."""
        self.calls.clear()


class FakeBehavioralAnalytics(_Recorder):
    """In-memory test double for BehavioralAnalyticsProtocol.

    Keeps the same login guard as the real adapter. Set
    ``fail_with["track"] = SomeError()`` to make a method raise.

    Usage:
        behavioral = FakeBehavioralAnalytics()
        log = EventLog("TEST", behavioral=behavioral)
        await log.start(user)
        assert behavioral.get("login").args["uid"] == "fake"
    """

    def __init__(self) -> None:
        """Start logged out with no recorded calls."""
        super().__init__()
        self.user_id: Optional[str] = None

    async def signup(self, uid: str) -> None:
        """Record the alias, then log in."""
        self._record("signup", uid=uid)
        await self.login(uid)

    async def login(self, uid: str) -> None:
        """Record the login and remember the identity."""
        self.user_id = uid
        self._record("login", uid=uid)

    async def logout(self) -> None:
        """Record the logout and forget the identity."""
        self.user_id = None
        self._record("logout")

    async def set_user(self, props: Dict[str, Any]) -> None:
        """Record person properties."""
        if not self.user_id:
            raise NotLoggedInError("set_user")
        self._record("set_user", props=dict(props))

    async def set_user_once(self, props: Dict[str, Any]) -> None:
        """Record set-once person properties."""
        if not self.user_id:
            raise NotLoggedInError("set_user_once")
        self._record("set_user_once", props=dict(props))

    async def track(self, event: str, props: Optional[Dict[str, Any]] = None) -> None:
        """Record a tracked event."""
        self._record("track", event=event, props=dict(props or {}), user_id=self.user_id)

    async def shutdown(self) -> None:
        """Record the shutdown."""
        self._record("shutdown")


class FakeWebAnalytics(_Recorder):
    """In-memory test double for WebAnalyticsProtocol."""

    def __init__(self) -> None:
        """Start with no tracker."""
        super().__init__()
        self.tracker_user_id: Optional[str] = None

    async def login(self, user_id: str) -> None:
        """Record tracker creation."""
        self.tracker_user_id = user_id
        self._record("login", user_id=user_id)

    async def logout(self) -> None:
        """Record tracker removal."""
        self.tracker_user_id = None
        self._record("logout")

    async def track(self, category: str, action: str, label: Optional[str] = None) -> None:
        """Record a hit; fails like the real adapter without a tracker."""
        if self.tracker_user_id is None:
            raise TrackerNotCreatedError("fake")
        self._record("track", category=category, action=action, label=label)
