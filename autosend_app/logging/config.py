"""
Centralized logging configuration for the AutoSend scheduler.

This module provides standardized logging configuration using structlog
for all components. Scheduler transitions, detections and deliveries all
log through this configuration so records share one structured format.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_scheduler_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for scheduler state and timer activity.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for the dispatch scheduler
    """
    return get_logger(name).bind(subsystem="scheduler")


def get_detection_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for detection and alert activity.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for detections
    """
    return get_logger(name).bind(
        subsystem="detection",
        audit_trail=True
    )


def log_state_transition(
    logger: FilteringBoundLogger,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a scheduler state transition with standardized format.

    Args:
        logger: Structlog logger instance
        from_state: State before the transition
        to_state: State after the transition
        trigger: Operation that caused the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("State transition")


def log_detection(
    logger: FilteringBoundLogger,
    kind: str,
    destination: str,
    identifier: Optional[str] = None,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a pattern detection with standardized format.

    Args:
        logger: Structlog logger instance
        kind: Detection kind value
        destination: Destination the triggering event was observed in
        identifier: Identifier extracted from the event, if any
        context: Additional context data
    """
    bound_logger = logger.bind(
        detection_kind=kind,
        destination=destination,
        detected_id=identifier,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.warning("Detection matched")
