"""
Structured Logger Module

Configures structlog for JSON-formatted structured logging with correlation IDs.
All components use this logger so a single coaching request can be traced
from session resolution to the persisted response.

Example Usage:
    from worklife_coach.utils.logger import get_logger

    # Get logger with context
    logger = get_logger(
        correlation_id="a1b2c3d4-e5f6-7890-abcd-ef1234567890",
        session_id="s-42",
        component="coaching_orchestrator"
    )

    # Log with context automatically included
    logger.info("intent_classified", intent="skill_guidance", confidence=0.7)
    logger.warning("profile_missing", user_id="u1")
    logger.error("data_store_failed", error="Timeout after 3 attempts")

Log Levels:
    - DEBUG: Rule matches, timer scheduling, template rendering
    - INFO: Session lifecycle, requests processed, profiles saved
    - WARNING: Missing profiles, retries, fallback responses
    - ERROR: Exhausted retries, integrity failures
    - CRITICAL: Unrecoverable failures requiring operator intervention
"""

import logging
import sys
import uuid
from pathlib import Path
from typing import Optional

import structlog
from structlog.types import BindableLogger, EventDict, WrappedLogger

SENSITIVE_FIELDS = {"password", "api_key", "token", "secret", "credential", "auth"}
USER_CONTENT_FIELDS = {"content", "message", "message_text", "user_message"}


def redact_sensitive(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Processor to keep secrets and user conversation text out of log output.

    Args:
        logger: Logger instance
        method_name: Logging method name
        event_dict: Event dictionary to process

    Returns:
        Event dictionary with sensitive values replaced

    Masks:
        - password, api_key, token, secret, credential, auth fields
          (exact or underscore/hyphen word-boundary match) -> "***MASKED***"
        - content, message, message_text, user_message fields
          -> "<redacted:N chars>"
    """
    for key in list(event_dict.keys()):
        key_lower = key.lower()

        if key_lower in USER_CONTENT_FIELDS:
            value = event_dict[key]
            length = len(value) if isinstance(value, str) else 0
            event_dict[key] = f"<redacted:{length} chars>"
            continue

        for sensitive in SENSITIVE_FIELDS:
            if (
                key_lower == sensitive
                or key_lower.endswith(f"_{sensitive}")
                or key_lower.endswith(f"-{sensitive}")
                or key_lower.startswith(f"{sensitive}_")
                or key_lower.startswith(f"{sensitive}-")
            ):
                event_dict[key] = "***MASKED***"
                break

    return event_dict


def configure_logging(
    log_file: str = "logs/worklife-coach.log", log_level: str = "INFO"
) -> None:
    """
    Configure structlog with JSON output and file logging.

    Args:
        log_file: Path to log file (default: "logs/worklife-coach.log")
        log_level: Logging level (default: "INFO")

    Log Format (JSON):
        {
            "timestamp": "2026-10-06T10:30:45Z",
            "level": "info",
            "correlation_id": "a1b2c3d4-...",
            "session_id": "s-42",
            "component": "session_manager",
            "event": "session_created",
            "user_id": "u1"
        }
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper()),
        handlers=[logging.FileHandler(log_file), logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger().setLevel(getattr(logging, log_level.upper()))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            redact_sensitive,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(
    correlation_id: Optional[str] = None,
    session_id: Optional[str] = None,
    component: Optional[str] = None,
) -> BindableLogger:
    """
    Get structured logger with bound context.

    Args:
        correlation_id: Correlation ID for request tracing (generates UUID if not provided)
        session_id: Coaching session the log lines belong to
        component: Component name (e.g., "session_manager", "coaching_orchestrator")

    Returns:
        BoundLogger with correlation_id, session_id, and component bound to context
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    logger = structlog.get_logger()

    if correlation_id:
        logger = logger.bind(correlation_id=correlation_id)
    if session_id:
        logger = logger.bind(session_id=session_id)
    if component:
        logger = logger.bind(component=component)

    return logger


# Initialize logging on module import with default settings
configure_logging()
