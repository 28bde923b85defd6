"""
Logging setup - one dictConfig for the app, uvicorn and the ledger invariant channel.
"""

import logging.config
import sys

# Broken ledger invariants go to their own logger (and stderr) so they are never
# mixed up with ordinary validation warnings.
INVARIANT_LOGGER = "swapshop.ledger.invariant"


def setup_logging(log_level: str = "INFO") -> None:
    log_level = log_level.upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "simple": {
                    "format": "%(asctime)s | %(levelname)-8s | %(name)-28s | %(message)s",
                },
                "detailed": {
                    "format": "%(asctime)s | %(levelname)-8s | %(name)s\n%(pathname)s:%(lineno)d\n%(message)s",
                },
            },
            "handlers": {
                "console": {
                    "formatter": "simple",
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                },
                "invariant_console": {
                    "formatter": "detailed",
                    "class": "logging.StreamHandler",
                    "stream": sys.stderr,
                    "level": "ERROR",
                },
            },
            "loggers": {
                "": {
                    "handlers": ["console"],
                    "level": log_level,
                },
                "uvicorn.access": {
                    "handlers": ["console"],
                    "level": log_level,
                    "propagate": False,
                },
                "swapshop": {
                    "level": log_level,
                },
                INVARIANT_LOGGER: {
                    "handlers": ["invariant_console"],
                    "level": "ERROR",
                },
            },
        }
    )
