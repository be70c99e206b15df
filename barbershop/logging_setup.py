# barbershop/logging_setup.py
"""Logging configuration"""
import logging
import sys

from barbershop.config import get_settings


def setup_logging(verbose=True):
    """Configure application logging"""
    settings = get_settings()

    if verbose:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    if not verbose:
        # Silence noisy loggers
        for name in ("sqlalchemy", "sqlalchemy.engine", "uvicorn.access"):
            logging.getLogger(name).setLevel(logging.ERROR)
