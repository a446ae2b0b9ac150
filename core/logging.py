# core/logging.py
"""
Logging configuration for the backend
"""
import logging
import sys
from typing import Optional

from .config import get_settings

# Third party loggers and the level they are capped at
QUIET_LOGGERS = {
    "uvicorn": logging.INFO,
    "fastapi": logging.INFO,
    "urllib3": logging.WARNING,
    "httpx": logging.WARNING,
}


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger from settings; `level` overrides LOG_LEVEL"""
    settings = get_settings()
    level_name = (level or settings.log_level.value).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format=settings.log_format,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    # Agent loggers follow the configured level even if the root was set up earlier
    logging.getLogger("agents").setLevel(numeric_level)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
