"""
Structured logging configuration using structlog.

Provides JSON logging with ISO timestamps and stdlib compatibility.
All log messages are structured and include contextual information.
"""

import logging
import sys
from typing import Any, Dict, Optional

import structlog
from structlog.typing import FilteringBoundLogger

from .settings import settings


def configure_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure structlog with JSON output and stdlib compatibility.

    Args:
        log_level: Override log level from settings
        log_format: Override log format from settings
    """
    config = settings()
    level = log_level or config.log_level
    format_type = log_format or config.log_format

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level),
    )

    def add_service_metadata(_, __, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        return {
            **event_dict,
            "service": config.service_name,
            "environment": config.environment,
        }

    processors = [
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.contextvars.merge_contextvars,
        add_service_metadata,
    ]

    if format_type == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Development-friendly format
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> FilteringBoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (defaults to caller's module)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def log_query(
    logger: FilteringBoundLogger,
    total_items: int,
    filtered_items: int,
    active_filters: int = 0,
    duration_ms: Optional[float] = None,
    **extra_context
) -> None:
    """
    Log a search recomputation with structured information.

    Args:
        logger: Logger instance
        total_items: Size of the source collection
        filtered_items: Size of the result after search and filters
        active_filters: Number of filters with a value
        duration_ms: Recomputation time in milliseconds
        **extra_context: Additional context to include
    """
    context = {
        "total_items": total_items,
        "filtered_items": filtered_items,
        "active_filters": active_filters,
        **extra_context
    }

    if duration_ms is not None:
        context["duration_ms"] = round(duration_ms, 2)

    logger.debug("Query recomputed", **context)


def log_processing_batch(
    logger: FilteringBoundLogger,
    batch_id: str,
    items_processed: int,
    items_failed: int = 0,
    duration_ms: Optional[float] = None,
    **extra_context
) -> None:
    """
    Log batch processing results.

    Args:
        logger: Logger instance
        batch_id: Unique batch identifier
        items_processed: Number of items successfully processed
        items_failed: Number of items that failed processing
        duration_ms: Processing duration in milliseconds
        **extra_context: Additional context to include
    """
    total = items_processed + items_failed
    context = {
        "batch_id": batch_id,
        "items_processed": items_processed,
        "items_failed": items_failed,
        "success_rate": round(items_processed / total * 100, 2) if total > 0 else 0,
        **extra_context
    }

    if duration_ms is not None:
        context["duration_ms"] = round(duration_ms, 2)

    if items_failed > 0:
        logger.warning("Batch processing completed with failures", **context)
    else:
        logger.info("Batch processing completed successfully", **context)


def _initialize_logging():
    """Initialize logging configuration on module import."""
    # Tests configure structlog themselves (or rely on its defaults)
    if "pytest" not in sys.modules:
        configure_logging()


_initialize_logging()
