"""Logging setup."""

import logging
from typing import Optional

from lpkit.core.config import Settings


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure the root logger from settings.

    Args:
        settings: Settings instance. If None, reads the environment.
    """
    if settings is None:
        settings = Settings.from_env()

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format=settings.log_format,
        force=True,
    )

    # OR-Tools wrappers are chatty at DEBUG
    logging.getLogger("ortools").setLevel(logging.WARNING)
