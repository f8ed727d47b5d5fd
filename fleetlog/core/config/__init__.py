"""Configuration module for fleetlog.

Usage:
    from fleetlog.core.config import settings, Environment

    if settings.ENVIRONMENT == Environment.PRD:
        ...
"""

from fleetlog.core.config.enums import DeliveryMode, Environment
from fleetlog.core.config.settings import Settings

__all__ = [
    "DeliveryMode",
    "Environment",
    "Settings",
    "settings",
]

# Singleton settings instance
settings = Settings()
