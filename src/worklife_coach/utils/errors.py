"""
Error Handling Module

Error taxonomy for the coaching core, bounded retry for data store calls,
and the canned fallback text shown to users when guidance cannot be produced.

Example Usage:
    from worklife_coach.utils.errors import with_retry, get_fallback_response

    profile = await with_retry(lambda: store.get_user_profile("u1"), retry_config)
"""

import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

import structlog
from pydantic import BaseModel
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..models.config import RetryConfig

logger = structlog.get_logger(__name__)

T = TypeVar("T")

GENERIC_USER_MESSAGE = (
    "Something went wrong on our side, but your conversation is safe. "
    "Please try again in a moment."
)


class CoachError(Exception):
    """Base error for the coaching core.

    Attributes:
        message: Internal description (logged, never shown to users)
        code: Stable machine-readable error code
        recoverable: Whether the caller may retry or continue
        context: Structured details for logging
    """

    code = "COACH_ERROR"
    recoverable = True

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        recoverable: Optional[bool] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if recoverable is not None:
            self.recoverable = recoverable
        self.context = context or {}

    @property
    def user_message(self) -> str:
        """Text safe to show users: no codes, no internals."""
        return GENERIC_USER_MESSAGE


class ValidationError(CoachError):
    """Malformed or out-of-range input for a single field."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str, value: Any = None) -> None:
        super().__init__(message, context={"field": field})
        self.field = field
        self.value = value


class DataIntegrityError(CoachError):
    """Persisted record is structurally corrupt."""

    code = "DATA_INTEGRITY_ERROR"
    recoverable = False


class SessionTimeoutError(CoachError):
    """Operation addressed a session that is no longer live."""

    code = "SESSION_TIMEOUT"

    def __init__(self, session_id: str) -> None:
        super().__init__(
            f"Session {session_id} has timed out", context={"session_id": session_id}
        )
        self.session_id = session_id

    @property
    def user_message(self) -> str:
        return "Your session has timed out. Let's pick up where we left off."


class SessionNotFoundError(CoachError):
    """Operation addressed a session id that was never live."""

    code = "SESSION_NOT_FOUND"

    def __init__(self, session_id: str) -> None:
        super().__init__(
            f"Session {session_id} not found", context={"session_id": session_id}
        )
        self.session_id = session_id


class MissingFieldError(ValidationError):
    """Input lacks one or more required fields; `field` names the first."""

    code = "MISSING_FIELDS"

    def __init__(self, fields: list[str]) -> None:
        super().__init__(f"Missing required fields: {', '.join(fields)}", field=fields[0])
        self.context["fields"] = fields
        self.fields = fields


class DatabaseUnavailableError(CoachError):
    """Transient data store failure."""

    code = "DATABASE_UNAVAILABLE"

    def __init__(self, operation: str, reason: Optional[str] = None) -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(
            f"Database unavailable during {operation}{detail}",
            context={"operation": operation},
        )
        self.operation = operation


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


def is_transient(error: BaseException) -> bool:
    """Decide whether a failed data store call is worth repeating.

    Recoverable coach errors are retried, except validation errors, which
    fail identically on every attempt. Connection-level failures are retried.
    """
    if isinstance(error, ValidationError):
        return False
    if isinstance(error, CoachError):
        return error.recoverable
    return isinstance(error, (ConnectionError, TimeoutError, OSError))


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    config: Optional[RetryConfig] = None,
) -> T:
    """
    Run an async operation with bounded exponential-backoff retry.

    Args:
        operation: Zero-argument callable returning an awaitable
        config: Retry limits (defaults to RetryConfig())

    Returns:
        The operation's result

    Raises:
        The last exception raised by the operation once attempts are exhausted,
        or the first non-transient exception immediately
    """
    config = config or RetryConfig()

    retrying = AsyncRetrying(
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_exponential(
            multiplier=config.initial_delay,
            exp_base=config.backoff_multiplier,
            max=config.max_delay,
        ),
        retry=retry_if_exception(is_transient),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            return await operation()
    raise AssertionError("unreachable: tenacity reraises the last error")


class OperationResult(BaseModel):
    success: bool
    data: Any = None
    error: Optional[str] = None
    error_code: Optional[str] = None


async def with_error_handling(
    operation: Callable[[], Awaitable[Any]], context: str
) -> OperationResult:
    """
    Run an operation and capture any failure as a result object.

    Args:
        operation: Zero-argument callable returning an awaitable
        context: Fallback context key (e.g. "career_path")

    Returns:
        OperationResult with data on success, fallback text on failure
    """
    try:
        return OperationResult(success=True, data=await operation())
    except CoachError as e:
        logger.warning(
            "operation_failed", context=context, error_code=e.code, error=e.message
        )
        return OperationResult(
            success=False, error=get_fallback_response(context), error_code=e.code
        )
    except Exception as e:
        logger.exception("operation_crashed", context=context, error=str(e))
        return OperationResult(success=False, error=get_fallback_response(context))


FALLBACK_RESPONSES = {
    "career_path": (
        "I'm having trouble generating specific career paths right now. "
        "Let's focus on understanding your current situation better. "
        "Can you tell me more about your goals and interests?"
    ),
    "skill_recommendation": (
        "I'm experiencing some difficulty with skill recommendations at the moment. "
        "In the meantime, could you share what skills you're currently working on "
        "or interested in learning?"
    ),
    "action_steps": (
        "I'm having trouble creating specific action steps right now. "
        "Let's start with a simple question: What's one thing you could do today "
        "to move closer to your goals?"
    ),
    "profile_analysis": (
        "I'm having some technical difficulties analyzing your profile. "
        "Let's continue our conversation: what's on your mind about your career?"
    ),
    "default": (
        "I'm experiencing some technical difficulties, but I'm still here to help. "
        "Let's continue our conversation - what would you like to discuss about "
        "your career?"
    ),
}


def get_fallback_response(context: Optional[str] = None) -> str:
    """Return the canned message for a failure context, or the generic default."""
    return FALLBACK_RESPONSES.get(context or "default", FALLBACK_RESPONSES["default"])
