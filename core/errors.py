"""
Error taxonomy and mapping for Ad Exchange Buyer II operations.

Provides typed errors and HTTP status code mapping for all error scenarios.
"""

import json
from enum import Enum
from typing import Optional, Dict, Any
from dataclasses import dataclass

from googleapiclient.errors import HttpError


class ErrorCategory(str, Enum):
    """Error category classification."""

    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RATE_LIMIT = "rate_limit"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"
    EXTERNAL_API = "external_api"
    TIMEOUT = "timeout"


@dataclass
class ErrorDetail:
    """Detailed error information."""

    category: ErrorCategory
    code: str
    message: str
    http_status: int
    retryable: bool
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API response."""
        result = {
            "category": self.category.value,
            "code": self.code,
            "message": self.message,
            "retryable": self.retryable,
        }
        if self.details:
            result["details"] = self.details
        return result


class BuyerAPIError(Exception):
    """Base exception for all buyer API errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        code: str,
        http_status: int = 500,
        retryable: bool = False,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.error_detail = ErrorDetail(
            category=category,
            code=code,
            message=message,
            http_status=http_status,
            retryable=retryable,
            details=details or {}
        )

    @property
    def retryable(self) -> bool:
        return self.error_detail.retryable


class InvalidArgumentError(BuyerAPIError):
    """An input value was missing, malformed or inconsistent."""

    def __init__(self, message: str = "Invalid argument", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            code="INVALID_ARGUMENT",
            http_status=400,
            retryable=False,
            details=details
        )


class AuthenticationError(BuyerAPIError):
    """Authentication failed."""

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.AUTHENTICATION,
            code="AUTH_FAILED",
            http_status=401,
            retryable=False,
            details=details
        )


class AuthorizationError(BuyerAPIError):
    """Authorization/permission denied."""

    def __init__(self, message: str = "Permission denied", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.AUTHORIZATION,
            code="PERMISSION_DENIED",
            http_status=403,
            retryable=False,
            details=details
        )


class RateLimitError(BuyerAPIError):
    """Rate limit exceeded."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if retry_after:
            error_details["retry_after"] = retry_after

        super().__init__(
            message=message,
            category=ErrorCategory.RATE_LIMIT,
            code="RATE_LIMIT_EXCEEDED",
            http_status=429,
            retryable=True,
            details=error_details
        )


class NotFoundError(BuyerAPIError):
    """Resource not found."""

    def __init__(self, message: str = "Resource not found", resource: Optional[str] = None):
        details = {"resource": resource} if resource else None
        super().__init__(
            message=message,
            category=ErrorCategory.NOT_FOUND,
            code="NOT_FOUND",
            http_status=404,
            retryable=False,
            details=details
        )


class ConflictError(BuyerAPIError):
    """Resource conflict (e.g., a filter set name already in use)."""

    def __init__(self, message: str = "Resource conflict", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.CONFLICT,
            code="CONFLICT",
            http_status=409,
            retryable=False,
            details=details
        )


class TimeoutError(BuyerAPIError):
    """Operation timeout."""

    def __init__(self, message: str = "Operation timed out", timeout_seconds: Optional[int] = None):
        details = {"timeout_seconds": timeout_seconds} if timeout_seconds else None
        super().__init__(
            message=message,
            category=ErrorCategory.TIMEOUT,
            code="TIMEOUT",
            http_status=504,
            retryable=True,
            details=details
        )


class ExternalAPIError(BuyerAPIError):
    """Error returned by the Ad Exchange Buyer II API."""

    def __init__(
        self,
        message: str,
        api_status: Optional[int] = None,
        retryable: bool = False,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if api_status:
            error_details["api_status"] = api_status

        super().__init__(
            message=message,
            category=ErrorCategory.EXTERNAL_API,
            code="EXTERNAL_API_ERROR",
            http_status=502,
            retryable=retryable,
            details=error_details
        )


class InternalError(BuyerAPIError):
    """Internal server error."""

    def __init__(self, message: str = "Internal server error", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.INTERNAL,
            code="INTERNAL_ERROR",
            http_status=500,
            retryable=False,
            details=details
        )


def _http_error_message(exception: HttpError) -> str:
    """Pull the API's own message out of an HttpError payload, if any."""
    try:
        payload = json.loads(exception.content.decode("utf-8"))
        return payload["error"]["message"]
    except (ValueError, KeyError, TypeError, AttributeError):
        return exception.reason or str(exception)


def map_api_exception(exception: Exception, resource: Optional[str] = None) -> BuyerAPIError:
    """
    Map a discovery client exception to our typed error.

    Args:
        exception: Exception raised while executing an API request
        resource: Resource name the request targeted, for error details

    Returns:
        Mapped BuyerAPIError instance
    """
    if isinstance(exception, BuyerAPIError):
        return exception

    if not isinstance(exception, HttpError):
        return InternalError(
            message=f"{type(exception).__name__}: {exception}",
            details={"resource": resource} if resource else None,
        )

    status = exception.resp.status
    message = _http_error_message(exception)
    details = {"resource": resource} if resource else None

    if status == 400:
        return InvalidArgumentError(message, details=details)
    if status == 401:
        return AuthenticationError(message, details=details)
    if status == 403:
        return AuthorizationError(message, details=details)
    if status == 404:
        return NotFoundError(message, resource=resource)
    if status == 409:
        return ConflictError(message, details=details)
    if status == 429:
        retry_after = exception.resp.get("retry-after")
        return RateLimitError(
            message,
            retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            details=details,
        )
    if status == 504:
        return TimeoutError(message)

    return ExternalAPIError(
        message=message,
        api_status=status,
        retryable=status >= 500,
        details=details,
    )
