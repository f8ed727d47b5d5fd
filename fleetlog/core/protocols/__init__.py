"""Core protocols for dependency injection."""

from fleetlog.core.protocols.analytics import BehavioralAnalyticsProtocol, WebAnalyticsProtocol

__all__ = [
    "BehavioralAnalyticsProtocol",
    "WebAnalyticsProtocol",
]
