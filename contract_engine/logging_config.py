"""
Structured logging configuration for contract execution.

Provides JSON-formatted logs with trace_id support so every line emitted while
an operation runs can be correlated with that operation's digest.

Environment Variables:
    CONTRACT_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    CONTRACT_LOG_FORMAT: Log format (json, text) - default: json

Usage:
    from contract_engine.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, trace_id=op.digest())
    logger.info("Executing operation", extra={"route": "function"})

Logging is observation only. Nothing a contract does may depend on it.
"""

import logging
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

from .config import Settings


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure root logger with structured logging.

    Reads CONTRACT_LOG_LEVEL and CONTRACT_LOG_FORMAT through Settings unless
    an explicit Settings instance is passed.
    """
    settings = settings or Settings.from_env()
    level = getattr(logging, settings.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(TraceIDFilter())

    if settings.log_format == "json":
        formatter: logging.Formatter = JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [trace_id=%(trace_id)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def get_logger(name: str, trace_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger with optional trace_id for correlation.

    Args:
        name: Logger name (typically __name__)
        trace_id: Trace ID for correlating logs (typically the operation digest)

    Example:
        logger = get_logger(__name__, trace_id="9f2c...")
        logger.info("Declined")
        # Output (JSON): {"timestamp": "...", "level": "INFO", "message": "Declined", "trace_id": "9f2c..."}
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"trace_id": trace_id or "N/A"})


class TraceIDFilter(logging.Filter):
    """
    Logging filter that adds trace_id to all log records.

    Ensures all logs have a trace_id field, even if not set via LoggerAdapter.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"  # type: ignore
        return True
