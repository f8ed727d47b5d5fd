"""Logging setup for fleetlog.

Usage:
    from fleetlog.core.logging import logger

    log = logger.with_context(prefix="Dashboard")
    log.info("Event log started")
"""

import logging
import sys
from typing import Any, MutableMapping, Tuple

from fleetlog.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that carries structured context fields.

    Context is rendered as ``key=value`` pairs after the message and is also
    attached to the record as a ``context`` dict so handlers can pick it up.
    Fields are namespaced there, so names like ``name`` or ``module`` never
    collide with LogRecord attributes.
    """

    def __init__(self, logger: logging.Logger, extra: dict | None = None) -> None:
        """Wrap a standard logger with an optional context dict."""
        super().__init__(logger, extra or {})

    def with_context(self, **fields: Any) -> "ContextualLogger":
        """Return a child logger with ``fields`` merged into the current context."""
        return ContextualLogger(self.logger, {**self.extra, **fields})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        """Append context fields to the message."""
        if not self.extra:
            return msg, kwargs
        extra = kwargs.setdefault("extra", {})
        extra["context"] = {**self.extra, **extra.get("context", {})}
        context = " ".join(f"{k}={v}" for k, v in self.extra.items())
        return f"{msg} [{context}]", kwargs


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    """Attach a stream handler to the package logger once."""
    package_logger = logging.getLogger("fleetlog")
    package_logger.setLevel(level.upper())
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)


logger = ContextualLogger(logging.getLogger("fleetlog"))
