"""
Logging utilities for relayer_api.

The schema layer never installs handlers on import. Applications call
setup_logging() once; library modules use get_logger(__name__) and
log_with_context() so that discriminators and event IDs end up as
structured fields.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

# Fields to extract from LogRecord extras
EXTRA_FIELDS = [
    "discriminator",
    "expected",
    "task_type",
    "event_id",
    "event_type",
    "fee_count",
    "merged_keys",
    "error_category",
    "error_message",
]


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: int,
    msg: str,
    **kwargs: Any,
) -> None:
    """
    Log with structured context fields.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        msg: Log message
        **kwargs: Additional context fields (discriminator, event_id, etc.)

    Example:
        log_with_context(
            logger, logging.DEBUG, "Merged variant",
            discriminator="GATEWAY_TX",
            merged_keys=3,
        )
    """
    logger.log(level, msg, extra=kwargs)


def log_exception(
    logger: logging.Logger,
    exc: Exception,
    msg: str,
    level: int = logging.ERROR,
    include_traceback: bool = True,
    **kwargs: Any,
) -> None:
    """
    Log exception with context and optional traceback.

    Automatically extracts error_category from RelayerApiError subclasses.

    Args:
        logger: Logger instance
        exc: Exception to log
        msg: Context message
        level: Log level (default: ERROR)
        include_traceback: Include full traceback (default: True)
        **kwargs: Additional context fields
    """
    error_category = kwargs.get("error_category")
    if error_category is None and hasattr(exc, "category"):
        cat = exc.category
        error_category = cat.value if hasattr(cat, "value") else str(cat)
        kwargs["error_category"] = error_category

    error_msg = str(exc)
    if len(error_msg) > 500:
        error_msg = error_msg[:500] + "..."
    kwargs["error_message"] = error_msg

    if include_traceback:
        logger.log(level, msg, exc_info=exc, extra=kwargs)
    else:
        logger.log(level, msg, extra=kwargs)


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter.

    Produces one JSON object per line for easy parsing with jq/grep.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3]
            + "Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        # Add source location for DEBUG/ERROR
        if record.levelno in (logging.DEBUG, logging.ERROR, logging.CRITICAL):
            log_entry["file"] = f"{record.filename}:{record.lineno}"

        for field in EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Human-readable console formatter."""

    def format(self, record: logging.LogRecord) -> str:
        prefix = " - ".join(
            [
                datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
                record.levelname,
                record.name,
            ]
        )

        discriminator = getattr(record, "discriminator", None)
        if discriminator:
            return f"{prefix} - [{discriminator}] {record.getMessage()}"

        return f"{prefix} - {record.getMessage()}"


def setup_logging(
    name: str = "relayer_api",
    level: Union[int, str] = logging.INFO,
    json_format: bool = False,
    stream: Optional[Any] = None,
) -> logging.Logger:
    """
    Configure the relayer_api logger with a single stream handler.

    Args:
        name: Logger to configure (default: package root logger)
        level: Log level, as int or name ("DEBUG", "INFO", ...)
        json_format: Emit JSON lines instead of console text
        stream: Target stream (default: sys.stdout)

    Returns:
        Configured logger instance
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level: {level}")
        level = resolved

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if json_format else ConsoleFormatter())

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates on re-init
    logger.handlers.clear()
    logger.addHandler(handler)

    logger.debug(f"Logging initialized: json={json_format}")
    return logger


def setup_logging_from_config(config: Any, stream: Optional[Any] = None) -> logging.Logger:
    """
    Configure logging from a RelayerApiConfig.

    Args:
        config: Object with log_level and log_json attributes
        stream: Target stream (default: sys.stdout)

    Returns:
        Configured logger instance
    """
    return setup_logging(
        level=config.log_level, json_format=config.log_json, stream=stream
    )
