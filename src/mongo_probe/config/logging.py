"""Logging setup for the probe and its scripts."""

import logging
from logging.config import dictConfig

FORMATTERS = {
    "json": {
        "()": "pythonjsonlogger.json.JsonFormatter",
        "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
    },
    "console": {
        "format": "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
    },
}


def build_logging_config(level: str = "INFO", formatter: str = "console") -> dict:
    """Return a dictConfig mapping that logs to stderr with the chosen formatter."""
    if formatter not in FORMATTERS:
        raise ValueError(f"Unknown log formatter: {formatter}")

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": FORMATTERS,
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
            },
        },
        "loggers": {
            # pymongo's topology and command loggers are noisy at INFO
            "pymongo": {"level": "WARNING"},
        },
        "root": {
            "handlers": ["default"],
            "level": level,
        },
    }


DEFAULT_LOGGING_CONFIG = build_logging_config()


def configure_logging(config: dict | None = None) -> None:
    """Configure logging for the probe."""
    dictConfig(config or DEFAULT_LOGGING_CONFIG)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
