"""Centralized logging configuration for the application."""

import logging
import sys

import config

# The openai SDK logs every request through these; only wanted when debugging
NOISY_LOGGERS = ("httpx", "httpcore", "openai")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ],
)


def _quiet_third_party(debug: bool):
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)


def get_logger(name: str | None = None):
    debug = config.DEBUG_MODE
    base_level = logging.DEBUG if debug else logging.INFO
    root_logger = logging.getLogger()
    root_logger.setLevel(base_level)
    _quiet_third_party(debug)
    if name is None:
        return root_logger
    logger = logging.getLogger(name)
    logger.setLevel(base_level)
    return logger
