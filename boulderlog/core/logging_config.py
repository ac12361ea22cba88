"""
Separate logging configuration to avoid circular dependencies.

This module is responsible for:
- Setting up Loguru's handlers (sinks)
- Configuring the InterceptHandler for standard library logging
- Defining the core logging setup (setup_logging function)

It does NOT provide a logger instance directly (see boulderlog.core.logging).
"""
import logging
import sys
from typing import Any, Dict, Optional
from pathlib import Path

from loguru import logger
from boulderlog.core.config import settings

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message} | {extra}"


class InterceptHandler(logging.Handler):
    """
    Intercept standard logging messages and route them to Loguru.
    """

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(
    log_dir: Optional[Path] = None,
    console_log_level: Optional[str] = None,
    log_to_file: Optional[bool] = None,
) -> None:
    """
    Configure Loguru logging.

    Intercepts standard logging and adds custom sinks:
    - Console output (stdout)
    - File-based logging with rotation, when enabled

    Args:
        log_dir: The directory to store log files.
        console_log_level: The log level for console output.
        log_to_file: Whether to add the rotating file sink.
    """
    # Remove default handler
    logger.remove()

    if console_log_level is None:
        console_log_level = "DEBUG" if settings.ENVIRONMENT == "testing" else settings.LOG_LEVEL

    logger.add(
        sys.stdout,
        format=LOG_FORMAT,
        level=console_log_level,
        colorize=True,
        backtrace=True,
        diagnose=settings.DEBUG,
    )

    if log_to_file is None:
        log_to_file = settings.LOG_TO_FILE

    if log_to_file:
        log_directory = Path(log_dir or settings.LOG_DIR)
        log_directory.mkdir(parents=True, exist_ok=True)

        log_config: Dict[str, Any] = {
            "rotation": "1 day",
            "retention": "7 days",
            "compression": "zip",
            "backtrace": True,
        }

        logger.add(
            log_directory / "boulderlog.log",
            format=LOG_FORMAT,
            level="DEBUG",
            **log_config,
        )

        # Insights computations get their own file for tuning thresholds
        logger.add(
            log_directory / "insights.log",
            format=LOG_FORMAT,
            level="INFO",
            filter=lambda record: record["extra"].get("component") == "insights",
            **log_config,
        )

    # Configure standard library logging interception
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
