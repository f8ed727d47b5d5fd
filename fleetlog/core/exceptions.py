"""Shared exceptions module."""

from typing import Optional


class EventLogError(Exception):
    """Base exception for event log operations."""

    def __init__(self, message: str):
        """Create a new EventLogError instance.

        Args:
        ----
            message (str): The error message.

        """
        self.message = message
        super().__init__(self.message)


class NotLoggedInError(EventLogError):
    """Raised when a profile operation is attempted without a logged-in user."""

    def __init__(self, operation: str):
        """Create a new NotLoggedInError instance.

        Args:
        ----
            operation (str): Name of the operation that needs a user.

        """
        self.operation = operation
        super().__init__(f"Please login() before using {operation}()")


class BehavioralAnalyticsError(EventLogError):
    """Raised when the behavioral-analytics SDK fails to accept a message."""

    pass


class WebAnalyticsError(EventLogError):
    """Raised when a web-analytics hit could not be delivered."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        """Create a new WebAnalyticsError instance.

        Args:
        ----
            message (str): The error message.
            status_code (int, optional): HTTP status returned by the collector.

        """
        self.status_code = status_code
        super().__init__(message)


class TrackerNotCreatedError(WebAnalyticsError):
    """Raised when a hit is sent before a tracker was created by login()."""

    def __init__(self, tracker_name: str):
        """Create a new TrackerNotCreatedError instance."""
        self.tracker_name = tracker_name
        super().__init__(f"Tracker '{tracker_name}' does not exist; call login() first")
