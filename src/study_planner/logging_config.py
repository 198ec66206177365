"""Logging setup for the interactive CLI."""
from logging.config import dictConfig

from study_planner.config import LOG_LEVEL

DEFAULT_LOG_FORMAT = "%(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Route log records through a rich handler at the configured level."""
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": DEFAULT_LOG_FORMAT,
                    "datefmt": "[%X]",
                },
            },
            "handlers": {
                "default": {
                    "class": "rich.logging.RichHandler",
                    "formatter": "default",
                    "show_path": False,
                },
            },
            "root": {
                "handlers": ["default"],
                "level": level,
            },
        }
    )
