"""Configuration enums for type-safe settings.

These enums provide type safety and IDE autocomplete for configuration values.
They inherit from str to maintain JSON serialization compatibility.
"""

from enum import Enum


class Environment(str, Enum):
    """Deployment environments.

    Analytics are never sent from ``local`` unless explicitly forced.
    """

    LOCAL = "local"
    TEST = "test"
    DEV = "dev"
    PRD = "prd"


class DeliveryMode(str, Enum):
    """How the behavioral-analytics SDK delivers messages.

    SYNC posts every message inline and raises on failure. QUEUED hands the
    message to a background consumer which reports failures via callback.
    """

    SYNC = "sync"
    QUEUED = "queued"
