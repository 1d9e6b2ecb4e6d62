import logging
import logging.config

from app.core.config import LOG_LEVEL


def get_logging_config(level: str = LOG_LEVEL) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "loggers": {
            "app": {"level": level.upper(), "handlers": ["console"], "propagate": False},
            "main": {"level": level.upper(), "handlers": ["console"], "propagate": False},
            "sqlalchemy.engine": {"level": "WARNING"},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    }


def setup_logging(level: str = LOG_LEVEL) -> None:
    logging.config.dictConfig(get_logging_config(level))
    logging.getLogger(__name__).debug("Logging configured at %s", level.upper())
