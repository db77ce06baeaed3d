import logging.config
import os
import sys

LOG_LEVEL_ENV = "LOOPY_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def configure_logging(level=None):
    """
    Configure console logging for the solver packages.

    *level* overrides the ``LOOPY_LOG_LEVEL`` environment variable.
    """
    level = (level or os.getenv(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,

        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            },
        },

        "handlers": {
            "console": {
                "level": level,
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": sys.stdout,
            },
        },

        "loggers": {
            "loopy_solver": {
                "handlers": ["console"],
                "level": level,
                "propagate": False
            },
        }
    }

    logging.config.dictConfig(logging_config)
