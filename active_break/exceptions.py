"""
Exception hierarchy for active-break

Every error logs itself once, with the operation and user it concerns.
"""

from typing import Optional, Dict, Any
import logging

import psycopg

logger = logging.getLogger(__name__)


class ActiveBreakError(Exception):
    """
    Base exception for all active-break errors

    Example:
        raise ActiveBreakError(
            message="Failed to save check-in",
            user_id=42,
            operation="check_in_today",
            context={"checkin_date": "2024-01-03"}
        )
    """

    def __init__(
        self,
        message: str,
        user_id: Optional[int] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.operation = operation
        self.context = context or {}
        self.cause = cause

        logger.error(
            f"{self.__class__.__name__}: {message}",
            extra={
                "user_id": user_id,
                "operation": operation,
                "error_context": self.context,
            },
            exc_info=cause
        )


class ValidationError(ActiveBreakError):
    """User input was rejected (duplicate email, activity ending before it begins, ...)"""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None, **kwargs):
        self.field = field
        self.value = value
        super().__init__(message=message, context={"field": field, "value": value}, **kwargs)


# ==========================================
# Store
# ==========================================

class DatabaseError(ActiveBreakError):
    """Base class for store failures"""


class DatabaseConnectionError(DatabaseError):
    """The store could not be reached"""


class QueryError(DatabaseError):
    """A statement against the store failed"""

    def __init__(self, message: str, query: Optional[str] = None, **kwargs):
        self.query = query
        super().__init__(message=message, context={"query": query}, **kwargs)


class RecordNotFoundError(DatabaseError):
    """Requested record does not exist"""

    def __init__(
        self,
        message: str,
        record_type: Optional[str] = None,
        record_id: Optional[Any] = None,
        **kwargs
    ):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(
            message=message,
            context={"record_type": record_type, "record_id": record_id},
            **kwargs
        )


# ==========================================
# Session, configuration, scheduling
# ==========================================

class AuthenticationError(ActiveBreakError):
    def __init__(self, message: str = "Authentication failed", **kwargs):
        super().__init__(message=message, **kwargs)


class NotLoggedInError(ActiveBreakError):
    def __init__(self, message: str = "No user is logged in", **kwargs):
        super().__init__(message=message, **kwargs)


class ConfigurationError(ActiveBreakError):
    """Startup configuration is invalid"""


class SchedulingError(ActiveBreakError):
    """A reminder check could not run"""


def wrap_external_exception(
    error: Exception,
    operation: str,
    user_id: Optional[int] = None
) -> ActiveBreakError:
    """
    Map a psycopg error onto the store hierarchy

    Connection-level failures become DatabaseConnectionError, other psycopg
    errors QueryError. Anything else is wrapped in the base class.
    """
    if isinstance(error, ActiveBreakError):
        return error

    if isinstance(error, psycopg.OperationalError):
        return DatabaseConnectionError(
            message=f"Database connection failed: {error}",
            user_id=user_id,
            operation=operation,
            cause=error
        )
    if isinstance(error, psycopg.Error):
        return QueryError(
            message=f"Database query failed: {error}",
            user_id=user_id,
            operation=operation,
            cause=error
        )

    return ActiveBreakError(
        message=f"{operation} failed: {error}",
        user_id=user_id,
        operation=operation,
        cause=error
    )
