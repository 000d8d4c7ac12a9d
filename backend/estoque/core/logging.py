import sys
from logging.config import dictConfig

from estoque.core.config import settings


def setup_logging() -> None:
    level = "DEBUG" if settings.env == "dev" else settings.log_level.upper()
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                },
                "access": {
                    "format": (
                        "%(asctime)s | ACCESS | %(client_addr)s | %(method)s | "
                        "%(path)s | %(status_code)s | %(process_time_ms)sms"
                    ),
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "default",
                },
                "access_console": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "access",
                },
            },
            "loggers": {
                # Fed by request_logging_middleware
                "access": {
                    "handlers": ["access_console"],
                    "level": "INFO",
                    "propagate": False,
                },
            },
            "root": {
                "level": level,
                "handlers": ["console"],
            },
        }
    )
