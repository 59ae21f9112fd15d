"""
Standardized exception hierarchy for the pizza finder backend
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class PizzaAppError(Exception):
    """
    Base exception for all pizza finder errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise PizzaAppError(
            message="Failed to save rating",
            user_id="6f1c...",
            operation="submit_rating",
            context={"pizzeria_id": "abc-123"}
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
        self.user_message = user_message or "An error occurred. Please try again."
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


# ==========================================
# Validation Errors (User Input)
# ==========================================

class ValidationError(PizzaAppError):
    """
    Raised when user input fails validation

    Examples:
    - Rating outside 1-5
    - Latitude outside -90..90
    - Unknown dough style
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
        super().__init__(
            message=message,
            user_message=message,
            context={"field": field, "value": value},
            **kwargs
        )


# ==========================================
# Database Errors
# ==========================================

class DatabaseError(PizzaAppError):
    """
    Base class for database-related errors
    """
    pass


class QueryError(DatabaseError):
    """Database query execution failed"""

    def __init__(
        self,
        message: str,
        query: Optional[str] = None,
        **kwargs
    ):
        self.query = query
        super().__init__(
            message=message,
            user_message="We encountered an issue saving your data. Please try again.",
            context={"query": query},
            **kwargs
        )


# ==========================================
# External API Errors
# ==========================================

class ExternalAPIError(PizzaAppError):
    """
    Base class for external API failures
    """

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs
    ):
        self.service = service
        self.status_code = status_code
        super().__init__(
            message=message,
            user_message=f"We're having trouble connecting to {service or 'an external service'}. Please try again later.",
            context={"service": service, "status_code": status_code},
            **kwargs
        )


class PlaceSearchAPIError(ExternalAPIError):
    """OpenStreetMap Overpass API error"""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message=message,
            service="OpenStreetMap",
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(PizzaAppError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )


def wrap_external_exception(
    error: Exception,
    operation: str,
    user_id: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> PizzaAppError:
    """
    Convert a third-party exception into the matching PizzaAppError

    Example:
        try:
            await cur.execute(query, params)
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="upsert_rating") from e
    """
    import psycopg
    import httpx

    if isinstance(error, PizzaAppError):
        return error

    if isinstance(error, psycopg.Error):
        return QueryError(
            message=f"Database query failed: {str(error)}",
            user_id=user_id,
            operation=operation,
            cause=error
        )

    if isinstance(error, httpx.TimeoutException):
        return PlaceSearchAPIError(
            message=f"API request timed out: {str(error)}",
            user_id=user_id,
            operation=operation,
            cause=error
        )
    if isinstance(error, httpx.HTTPStatusError):
        return PlaceSearchAPIError(
            message=f"API returned error: {error.response.status_code}",
            status_code=error.response.status_code,
            user_id=user_id,
            operation=operation,
            cause=error
        )
    if isinstance(error, httpx.HTTPError):
        return PlaceSearchAPIError(
            message=f"API request failed: {str(error)}",
            user_id=user_id,
            operation=operation,
            cause=error
        )

    return PizzaAppError(
        message=f"{operation} failed: {str(error)}",
        user_id=user_id,
        operation=operation,
        context=context,
        cause=error
    )
