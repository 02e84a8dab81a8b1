"""Structured logging configuration for idres.

Provides JSON-formatted logs for production and human-readable
logs for development.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .config import get_settings

# Attributes every LogRecord carries; anything else came in through `extra`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra fields
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        if record.funcName:
            log_data["function"] = record.funcName
        if record.lineno:
            log_data["line"] = record.lineno

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable log formatter for development."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Configure logging based on settings.

    Args:
        level: Override for the configured log level
        log_format: Override for the configured format ("json" or "text")
    """
    settings = get_settings()

    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)

    if (log_format or settings.log_format) == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [handler]

    logger = get_logger(__name__)
    logger.debug(
        "Logging initialized",
        extra={
            "environment": settings.environment,
            "log_level": logging.getLevelName(log_level),
            "log_format": log_format or settings.log_format,
        },
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds context to all log messages."""

    def process(
        self, msg: str, kwargs: dict[str, Any]
    ) -> tuple[str, dict[str, Any]]:
        """Process the logging message and add extra context."""
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra", {}))
        kwargs["extra"] = extra
        return msg, kwargs


def get_context_logger(name: str, **context: Any) -> LoggerAdapter:
    """Get a logger with additional context.

    Args:
        name: Logger name
        **context: Context fields to add to all log messages

    Returns:
        Logger adapter with context

    Usage:
        logger = get_context_logger(__name__, feature="reviewer_sourcing")
        logger.info("Resolving candidates")  # Includes feature
    """
    return LoggerAdapter(get_logger(name), context)


# =========================
# Convenience functions
# =========================


def log_resolution_event(
    record_index: int,
    record_name: str,
    matched_entity: int | None,
    confidence: int,
    tier: str,
) -> None:
    """Log the outcome of resolving one record against the pool.

    Args:
        record_index: Position of the record in the input batch
        record_name: Raw name of the record
        matched_entity: Entity ID the record merged into (None if new)
        confidence: Confidence of the winning match (100 for new entities)
        tier: Match tier that fired
    """
    logger = get_logger("idres.resolution")
    logger.debug(
        f"Resolution: {record_name!r} -> {matched_entity if matched_entity is not None else 'new entity'}",
        extra={
            "record_index": record_index,
            "record_name": record_name,
            "matched_entity": matched_entity,
            "confidence": confidence,
            "tier": tier,
            "event": "entity_resolution",
        },
    )


def log_skipped_record(record_index: int, record_name: str | None, reason: str) -> None:
    """Log a record that could not be resolved."""
    logger = get_logger("idres.resolution")
    logger.warning(
        f"Skipped record {record_index}: {reason}",
        extra={
            "record_index": record_index,
            "record_name": record_name,
            "reason": reason,
            "event": "record_skipped",
        },
    )


def log_resolution_complete(
    records_processed: int,
    entities: int,
    merges: int,
    skipped: int,
) -> None:
    """Log the summary of a resolution run."""
    logger = get_logger("idres.resolution")
    logger.info(
        f"Resolved {records_processed} records into {entities} entities",
        extra={
            "records_processed": records_processed,
            "entities": entities,
            "merges": merges,
            "skipped": skipped,
            "event": "resolution_complete",
        },
    )


def log_screening_result(
    search_name: str,
    matches: int,
    best_confidence: int | None,
    is_common_name: bool,
) -> None:
    """Log the result of screening one name against an author list."""
    logger = get_logger("idres.screening")
    logger.debug(
        f"Screening {search_name!r}: {matches} matches",
        extra={
            "search_name": search_name,
            "matches": matches,
            "best_confidence": best_confidence,
            "is_common_name": is_common_name,
            "event": "screening_result",
        },
    )
