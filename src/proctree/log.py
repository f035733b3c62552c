"""Logging setup for proctree.

The package logger carries a NullHandler, so proctree is silent unless the
application opts in. The CLI calls configure_logging() with the ``logging``
section of the config, which writes to a file when enabled.
"""

from __future__ import annotations

import logging
from pathlib import Path

from proctree.config import LoggingConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(config: LoggingConfig) -> logging.Handler | None:
    """Attach a file handler to the proctree logger if logging is enabled.

    Args:
        config: The ``logging`` section of the configuration

    Returns:
        The installed handler, or None when logging is disabled
    """
    logger = logging.getLogger("proctree")
    if not config.enabled:
        return None

    path = Path(config.file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(path)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(config.level)
    return handler
