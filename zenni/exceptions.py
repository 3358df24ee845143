"""
Exception hierarchy for zenni rewards
Carries request context, structured logging and user-friendly messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any, List
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)

GENERIC_USER_MESSAGE = "Something went wrong. Please try again."


class ZenniError(Exception):
    """
    Base exception for all zenni reward errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise ZenniError(
            message="Failed to persist progression",
            user_id="user-42",
            operation="submit_session",
            context={"duration_minutes": 10}
        )
    """

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or GENERIC_USER_MESSAGE
        self.timestamp = datetime.now(timezone.utc)

        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,
            "request_id": self.request_id,
            "user_id": self.user_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for API responses"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Invalid Input (caller contract violations)
# ==========================================

class InvalidInputError(ZenniError):
    """
    Raised when an activity, streak or draw request is out of range

    Examples:
    - Unsupported session duration
    - Breath score outside 0-100
    - Drawing from a finished glow card session

    Example:
        raise InvalidInputError(
            message="Duration must be one of 5, 10, 15, 20",
            field="duration_minutes",
            value=7
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        kwargs.setdefault("user_message", f"Invalid {field}: {message}" if field else message)
        super().__init__(
            message=message,
            context={"field": field, "value": value},
            **kwargs
        )


def invalid_input_from_errors(
    errors: List[Dict[str, Any]],
    operation: Optional[str] = None
) -> InvalidInputError:
    """
    Build an InvalidInputError from pydantic validation errors

    Only the first error is reported. Its location becomes the dotted
    field name, without the request part (body, query, path) FastAPI
    puts in front.
    """
    first = errors[0] if errors else {}
    loc = [str(part) for part in first.get("loc", ())]
    if loc and loc[0] in ("body", "query", "path"):
        loc = loc[1:]
    return InvalidInputError(
        message=first.get("msg", "Invalid input"),
        field=".".join(loc) or None,
        value=first.get("input"),
        operation=operation,
    )


# ==========================================
# Store Errors
# ==========================================

class ProgressionNotFoundError(ZenniError):
    """No progression record exists for the user"""

    def __init__(self, user_id: str, message: Optional[str] = None, **kwargs):
        super().__init__(
            message=message or f"No progression record for user {user_id}",
            user_id=user_id,
            user_message="We couldn't find your progress. Please try again.",
            context={"record_type": "progression"},
            **kwargs
        )


class UpstreamFailureError(ZenniError):
    """The progression store (or another collaborator) failed"""

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        **kwargs
    ):
        self.service = service
        super().__init__(
            message=message,
            context={"service": service},
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_store_exception(
    error: Exception,
    operation: str,
    user_id: Optional[str] = None,
    service: str = "progression store"
) -> ZenniError:
    """
    Wrap a store exception into our hierarchy

    Errors that are already ZenniError (ProgressionNotFoundError included)
    are returned unchanged so callers see them unmodified.

    Example:
        try:
            await store.upsert_progression(user_id, state)
        except Exception as e:
            raise wrap_store_exception(e, operation="submit_session", user_id=user_id) from e
    """
    if isinstance(error, ZenniError):
        return error

    return UpstreamFailureError(
        message=f"{operation} failed: {str(error)}",
        service=service,
        user_id=user_id,
        operation=operation,
        cause=error
    )
