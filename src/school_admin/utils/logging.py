from __future__ import annotations

import logging
import sys
from typing import Iterable

# Motor/pymongo log heartbeats and topology changes at INFO.
NOISY_LOGGERS = ("pymongo", "pymongo.topology", "pymongo.serverSelection")


def configure_logging(
    level: str = "INFO",
    *,
    service_name: str = "school-admin-service",
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """
    Single stdout handler on the root logger; lines carry the service name so
    gateway and dashboard events can be told apart once aggregated.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(fmt=f"%(asctime)s %(levelname)s {service_name} %(name)s %(message)s")
    )
    # reload-safe: never stack handlers
    root.handlers = [handler]

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)
