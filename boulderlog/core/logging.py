"""
Centralized logging module for the application.

Provides a pre-configured Loguru logger instance for use throughout
the package. The sink configuration lives in logging_config.py so that
importing the logger never drags in services or schemas.
"""

from loguru import logger
from boulderlog.core.logging_config import setup_logging

setup_logging()

# Other modules import the logger from here:
# from boulderlog.core.logging import logger
