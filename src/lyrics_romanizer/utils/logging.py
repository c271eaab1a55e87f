"""Logging configuration for Lyrics Romanizer.

The CLI calls :func:`setup_logging` once. ``serve`` hands
:func:`uvicorn_log_config` to uvicorn so server, access and application
records share one format and one stream.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

LOGGER_NAME = "lyrics_romanizer"

PLAIN_FORMAT = "%(levelname)s: %(message)s"
VERBOSE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("urllib3", "httpx", "uvicorn.access")


def _format(verbose: bool) -> str:
    return VERBOSE_FORMAT if verbose else PLAIN_FORMAT


def setup_logging(
    level: str = "INFO", log_file: Optional[Path] = None, verbose: bool = False
) -> logging.Logger:
    """Set up logging configuration."""
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers.clear()

    formatter = logging.Formatter(_format(verbose))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def uvicorn_log_config(
    level: str = "INFO", verbose: bool = False, access_log: bool = False
) -> Dict[str, Any]:
    """``logging.config.dictConfig`` mapping for ``uvicorn.run(log_config=...)``.

    Routes uvicorn's own loggers and the ``lyrics_romanizer`` logger through
    one stdout handler. Access lines are logged only when ``access_log`` is
    set.
    """
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": _format(verbose)}},
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": level, "propagate": False},
            "uvicorn.error": {"level": level},
            "uvicorn.access": {
                "handlers": ["default"],
                "level": "INFO" if access_log else "WARNING",
                "propagate": False,
            },
            LOGGER_NAME: {"handlers": ["default"], "level": level, "propagate": False},
        },
    }


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get logger instance."""
    return logging.getLogger(name)
