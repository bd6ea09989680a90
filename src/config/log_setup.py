"""
Table Companion - Logging Setup

Configures the root logger once per process from Settings.
"""

import logging

from src.config.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Configure stdlib logging for the application.

    Args:
        level: Explicit level name; defaults to DEBUG when ``debug`` is set,
            otherwise ``Settings.log_level``.
    """
    global _configured
    if _configured:
        return

    if level is None:
        settings = get_settings()
        level = "DEBUG" if settings.debug else settings.log_level

    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _configured = True
