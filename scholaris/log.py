"""Logging setup for processes hosting the Scholaris services."""

import logging

from scholaris.config import settings


def configure_logging(level: str | None = None) -> int:
    """Configure root logging from settings and return the level used."""
    if level is not None:
        log_level = getattr(logging, level.upper())
    else:
        log_level = logging.DEBUG if settings.is_development else getattr(logging, settings.app_log_level)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,  # Override any existing configuration
    )
    logging.getLogger("scholaris").setLevel(log_level)
    logging.getLogger(__name__).info(f"Logging configured at level: {logging.getLevelName(log_level)}")
    return log_level
