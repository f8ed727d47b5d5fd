"""Event log domain - semantic dashboard actions fanned out to analytics."""

from fleetlog.domains.event_log.catalog import EVENT_CATALOG, event_type_for
from fleetlog.domains.event_log.service import EventLog, ResourceActions
from fleetlog.domains.event_log.types import AfterCreateHook, EventLogUser

__all__ = [
    "AfterCreateHook",
    "EVENT_CATALOG",
    "EventLog",
    "EventLogUser",
    "ResourceActions",
    "event_type_for",
]
