# src/billdash/app_logger.py
import logging
import logging.config
import os

LOG_FMT = "%(asctime)s %(levelname)s %(name)s %(message)s %(process)d %(module)s"
_DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def build_logging_config(level: str | None = None) -> dict:
    level = (level or _DEFAULT_LEVEL).upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "fmt": LOG_FMT,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "billdash":       {"handlers": ["console"], "level": level, "propagate": False},
            "uvicorn":        {"handlers": ["console"], "level": "INFO", "propagate": False},
            "uvicorn.error":  {"handlers": ["console"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["console"], "level": "INFO", "propagate": False},
        },
    }


def setup_logging(level: str | None = None) -> logging.Logger:
    logging.config.dictConfig(build_logging_config(level))
    return logging.getLogger("billdash")


def get_logger(name: str | None = None) -> logging.Logger:
    base = logging.getLogger("billdash")
    return base.getChild(name) if name else base
