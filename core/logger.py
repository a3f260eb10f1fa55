"""
Centralized logging configuration using Loguru.
Follows Single Responsibility Principle - only handles logging setup.

Features:
- Structured logging with Loguru
- Standard library logging interception (uvicorn, starlette go through Loguru)
- Script logging helper for standalone scripts
- JSON logging format option for production
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

from loguru import logger  # type: ignore

LOG_DIR = Path("logs")
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

_configured = False


# =============================================================================
# Standard Library Logging Interception
# =============================================================================


class InterceptHandler(logging.Handler):
    """
    Intercept standard library logging and route to Loguru.

    uvicorn and starlette log through stdlib logging; this keeps their
    output in the same format and sinks as the application logs.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where logging call originated
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def intercept_standard_logging() -> None:
    """Route all stdlib logging through Loguru."""
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


def configure_third_party_loggers() -> None:
    """Set log levels for noisy libraries."""
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)

    # Uvicorn loggers - keep at INFO for server events
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)

    logging.getLogger("fastapi").setLevel(logging.INFO)


def _normalize_level(level: Optional[str], default: str = "INFO") -> str:
    level = (level or default).upper()
    return level if level in VALID_LEVELS else default


# =============================================================================
# Script Logging Helper
# =============================================================================


def configure_script_logging(level: str = "INFO", json_format: bool = False) -> None:
    """
    Configure logging for standalone scripts.

    Console output only (no file logging).

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, output logs in JSON format

    Example:
        from core.logger import logger, configure_script_logging

        configure_script_logging(level="DEBUG")
        logger.info("Script started")
    """
    logger.remove()
    level = _normalize_level(level)

    if json_format:
        logger.add(sys.stdout, format="{message}", level=level, serialize=True)
    else:
        logger.add(
            sys.stdout,
            colorize=True,
            format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
            level=level,
        )

    intercept_standard_logging()
    configure_third_party_loggers()


def format_exception_short(exception: Exception, context: Optional[str] = None) -> str:
    """
    Format exception to be short and readable.

    Example:
        >>> try:
        ...     raise ValueError("Invalid input")
        ... except ValueError as e:
        ...     print(format_exception_short(e, "Evicting"))
        Evicting | ValueError: Invalid input | (eviction.py:42)
    """
    exc_type = type(exception).__name__

    tb = exception.__traceback__
    if tb:
        while tb.tb_next:
            tb = tb.tb_next
        location = f"{Path(tb.tb_frame.f_code.co_filename).name}:{tb.tb_lineno}"
    else:
        location = "unknown"

    parts = []
    if context:
        parts.append(context)
    parts.append(f"{exc_type}: {exception}")
    parts.append(f"({location})")
    return " | ".join(parts)


# =============================================================================
# JSON Logging Format
# =============================================================================


def serialize_log_record(record: dict) -> str:
    """
    Serialize log record to a flat JSON line.

    Extra fields bound via logger.bind() are flattened into the top level.
    """
    log_record = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "module": record["module"],
        "function": record["function"],
        "line": record["line"],
    }

    if record.get("exception"):
        exception = record["exception"]
        log_record["exception"] = {
            "type": exception.type.__name__ if exception.type else "Unknown",
            "message": str(exception.value),
        }

    for key, value in (record.get("extra") or {}).items():
        try:
            json.dumps(value)
            log_record[key] = value
        except (TypeError, OverflowError):
            log_record[key] = str(value)

    # Loguru calls format() on the result: escape braces and color tags
    return (
        json.dumps(log_record).replace("{", "{{").replace("}", "}}").replace("<", "\\<")
        + "\n"
    )


def setup_logger(force: bool = False) -> None:
    """
    Configure logger handlers for the main application.

    Only configures once unless force=True. Supports console (colored) and
    JSON formats based on the LOG_FORMAT setting.
    """
    global _configured
    if _configured and not force:
        return

    from .config import get_settings

    settings = get_settings()
    log_level = _normalize_level(
        settings.log_level, default="DEBUG" if settings.debug else "INFO"
    )
    json_format = settings.log_format.lower() == "json"

    logger.remove()

    if json_format:
        logger.add(sys.stdout, format=serialize_log_record, level=log_level, colorize=False)
    else:

        def filter_reloader_logs(record):
            """Filter out logs from __main__ and __mp_main__ (reloader processes)."""
            return record.get("name", "") not in ("__main__", "__mp_main__")

        logger.add(
            sys.stdout,
            colorize=True,
            format=CONSOLE_FORMAT,
            level=log_level,
            filter=filter_reloader_logs,
        )

    if settings.log_file_enabled:
        LOG_DIR.mkdir(exist_ok=True)
        suffix = ".json.log" if json_format else ".log"
        file_format = serialize_log_record if json_format else FILE_FORMAT

        logger.add(
            LOG_DIR / f"app{suffix}",
            rotation="100 MB",
            retention="30 days",
            compression="zip",
            format=file_format,
            level="DEBUG",
            colorize=False,
        )
        logger.add(
            LOG_DIR / f"error{suffix}",
            rotation="100 MB",
            retention="30 days",
            compression="zip",
            format=file_format,
            level="ERROR",
            colorize=False,
        )

    intercept_standard_logging()
    configure_third_party_loggers()
    _configured = True


# Configure logger on module import
setup_logger()

__all__ = [
    "logger",
    "format_exception_short",
    "configure_script_logging",
    "configure_third_party_loggers",
    "intercept_standard_logging",
    "serialize_log_record",
    "setup_logger",
    "InterceptHandler",
]
