"""Analytics event forwarding for the fleet dashboard."""

from fleetlog.domains.event_log import EventLog, EventLogUser
from fleetlog.core.container import create_event_log

__all__ = ["EventLog", "EventLogUser", "create_event_log"]
