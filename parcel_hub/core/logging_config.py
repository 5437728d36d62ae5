"""
Logging configuration.

Every module logs through `logging.getLogger(__name__)`; this module only
installs the root handler and level once per process.
"""
import logging
import logging.config
from typing import Optional

from parcel_hub.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def setup_logging(level: Optional[str] = None, force: bool = False) -> None:
    """
    Configure root logging.

    Args:
        level: Log level name; defaults to settings.LOG_LEVEL
        force: Reconfigure even if already configured
    """
    global _configured
    if _configured and not force:
        return

    level = (level or settings.LOG_LEVEL).upper()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
        "loggers": {
            # httpx logs every request at INFO
            "httpx": {"level": "WARNING"},
        },
    })

    _configured = True
    logging.getLogger(__name__).debug(f"Logging configured at {level}")
