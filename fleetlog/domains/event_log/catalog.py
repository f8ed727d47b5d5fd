"""Catalog of semantic actions the dashboard reports.

Each resource becomes a namespace on EventLog and each action a method,
so ``log.device.rename()`` records a "Device Rename" event.
"""

from typing import Dict, Tuple

EVENT_CATALOG: Dict[str, Tuple[str, ...]] = {
    "user": (
        "login",
        "logout",
        "signup",
        "password_create",
        "password_edit",
        "email_edit",
        "delete",
    ),
    "api_key": ("create", "edit", "delete"),
    "public_key": ("create", "delete"),
    "application": (
        "create",
        "open",
        "delete",
        "os_download",
        "restart",
        "purge_data",
        "reboot",
        "shutdown",
        "pin_to_release",
    ),
    "device": (
        "open",
        "rename",
        "terminal_open",
        "terminal_close",
        "delete",
        "restart",
        "purge_data",
        "reboot",
        "shutdown",
        "move",
        "host_os_update",
        "location_view",
    ),
    "application_environment_variable": ("create", "edit", "delete"),
    "device_environment_variable": ("create", "edit", "delete"),
    "application_tag": ("create", "edit", "delete"),
    "device_tag": ("create", "edit", "delete"),
    "release": ("open", "cancel"),
}


def event_type_for(resource: str, action: str) -> str:
    """Title-case a resource/action pair into an event type.

    >>> event_type_for("device_environment_variable", "create")
    'Device Environment Variable Create'
    """
    words = resource.split("_") + action.split("_")
    return " ".join(word.capitalize() for word in words if word)
