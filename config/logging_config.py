import logging
import logging.config

from config.settings import settings


def setup_logging(level: str = None) -> logging.Logger:
    """Configure logging for the API process. Safe to call more than once."""
    level = level or settings.LOG_LEVEL

    LOGGING_CONFIG = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "": {  # Root logger
                "handlers": ["console"],
                "level": level,
            },
            "uvicorn.access": {
                # request lines come from RequestLoggingMiddleware
                "level": "WARNING",
            },
        },
    }

    logging.config.dictConfig(LOGGING_CONFIG)
    return logging.getLogger(settings.APP_NAME)
