"""Analytics backend adapters.

Implements the protocols in fleetlog.core.protocols.analytics.
"""

from fleetlog.adapters.analytics.fake import FakeBehavioralAnalytics, FakeWebAnalytics
from fleetlog.adapters.analytics.posthog import PostHogBehavioralClient
from fleetlog.adapters.analytics.web import TRACKER_NAME, MeasurementProtocolClient

__all__ = [
    "FakeBehavioralAnalytics",
    "FakeWebAnalytics",
    "MeasurementProtocolClient",
    "PostHogBehavioralClient",
    "TRACKER_NAME",
]
