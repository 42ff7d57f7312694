from __future__ import annotations

import logging

from school_admin.utils.logging import configure_logging


def setup_logging(level: str | None = None) -> None:
    from school_admin.configs.settings import get_settings

    settings = get_settings()
    configure_logging(level or settings.LOG_LEVEL, service_name=settings.SERVICE_NAME)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
