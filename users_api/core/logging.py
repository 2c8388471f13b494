"Handles logging configuration for the users services"
import logging.config
from typing import Dict, Any

LOG_FORMATS = ("default", "json")


def setup_logging(level: str = "INFO", fmt: str = "default") -> None:
    """Initialize logging configuration

    Args:
        level: root log level name, case-insensitive
        fmt: "default" for plain lines, "json" for one JSON object per line
    """
    if fmt not in LOG_FORMATS:
        raise ValueError(f"Unknown log format: {fmt}")
    level = level.upper()

    log_config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": fmt,
            },
        },
        "loggers": {
            # RequestLoggingMiddleware writes the access line, uvicorn's would duplicate it
            "uvicorn.access": {"level": "WARNING"},
            "users_api.access": {"level": "INFO"},
        },
        "root": {"level": level, "handlers": ["console"]},
    }

    #Sets logging configuration across files
    logging.config.dictConfig(log_config)
