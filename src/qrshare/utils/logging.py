"""Wires the ``qrshare`` logger tree to stderr and an optional log file."""

from __future__ import annotations

import logging
import sys

from qrshare.config.settings import LoggingConfig


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Install fresh handlers on the ``qrshare`` logger.

    Handlers from an earlier call are closed and replaced.

    Args:
        config: Level, format and log file. Defaults to INFO on stderr.
    """
    if config is None:
        config = LoggingConfig()

    app_logger = logging.getLogger("qrshare")
    app_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    formatter = logging.Formatter(config.format)

    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if config.file:
        file_handler = logging.FileHandler(config.file)
        file_handler.setFormatter(formatter)
        app_logger.addHandler(file_handler)

    app_logger.debug("Logging to %s at %s", config.file or "stderr", config.level.upper())
