"""Centralized logging configuration."""
import json
import logging
import sys


VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
VALID_FORMATS = {"standard", "json"}

STANDARD_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes every LogRecord carries; anything else came in through extra={}
_RESERVED_ATTRS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "exc_info",
    "exc_text",
    "stack_info",
    "taskName",
}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as a single JSON line.

        Args:
            record: Log record to format

        Returns:
            JSON string representation of log record
        """
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = "INFO", log_format: str = "standard") -> logging.Logger:
    """
    Configure the ``solowork`` logger hierarchy.

    Safe to call more than once; existing handlers are replaced.

    Args:
        log_level: Logging level name
        log_format: 'standard' or 'json'

    Returns:
        The configured package logger

    Raises:
        ValueError: If the level or format is not recognised
    """
    level = log_level.upper()
    if level not in VALID_LEVELS:
        raise ValueError(
            f"Invalid log level: {log_level}. "
            f"Must be one of {', '.join(sorted(VALID_LEVELS))}"
        )
    if log_format not in VALID_FORMATS:
        raise ValueError(
            f"Invalid log format: {log_format}. "
            f"Must be one of {', '.join(sorted(VALID_FORMATS))}"
        )

    logger = logging.getLogger("solowork")
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(STANDARD_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    return logger
