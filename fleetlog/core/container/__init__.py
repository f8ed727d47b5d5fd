"""Event log wiring.

Usage:
    from fleetlog.core.config import settings
    from fleetlog.core.container import create_event_log

    event_log = create_event_log(settings)

    # In tests, construct EventLog directly with fakes instead
    from fleetlog.adapters.analytics import FakeBehavioralAnalytics
    event_log = EventLog("TEST", behavioral=FakeBehavioralAnalytics())
"""

from fleetlog.core.container.factory import create_event_log

__all__ = ["create_event_log"]
