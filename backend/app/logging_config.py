"""
Logging setup.

development: DEBUG, human-readable, with source file and line number
production:  INFO, compact single-line records without source location
otherwise:   WARNING, basic format
"""

import logging
from typing import Optional

from app.config import ENV_DEVELOPMENT, ENV_PRODUCTION

DEV_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"
PROD_FORMAT = "%(asctime)s level=%(levelname)s logger=%(name)s msg=%(message)s"
FALLBACK_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(environment: Optional[str]) -> int:
    """
    Configure the root logger for the given environment and return the level.

    Safe to call more than once; later calls replace the handlers.
    """
    if environment == ENV_DEVELOPMENT:
        level, fmt = logging.DEBUG, DEV_FORMAT
    elif environment == ENV_PRODUCTION:
        level, fmt = logging.INFO, PROD_FORMAT
    else:
        level, fmt = logging.WARNING, FALLBACK_FORMAT

    logging.basicConfig(level=level, format=fmt, force=True)
    return level
