"""Event log domain types."""

from datetime import datetime
from typing import Any, Callable, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict


class EventLogUser(BaseModel):
    """The dashboard user a session is opened for.

    ``username`` is the identity sent to both backends.
    """

    model_config = ConfigDict(frozen=True)

    id: Union[int, str]
    username: str
    email: Optional[str] = None
    created_at: Optional[datetime] = None

    def profile_properties(self) -> Dict[str, Any]:
        """Person properties refreshed on every session start."""
        properties = {"$name": self.username, "user_id": str(self.id)}
        if self.email:
            properties["$email"] = self.email
        return properties

    def first_seen_properties(self) -> Dict[str, Any]:
        """Person properties that must never be overwritten once set."""
        if self.created_at is None:
            return {}
        return {"$created": self.created_at.isoformat()}


# after_create(error, event_type, json_data, application_id, device_id)
# May be a plain function or a coroutine function.
AfterCreateHook = Callable[
    [Optional[Exception], str, Optional[Dict[str, Any]], Optional[str], Optional[str]], Any
]
