"""
Application exceptions and their HTTP rendering.

Every domain failure derives from AppException so the global handler can
render it in the standard error envelope.
"""

from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse

from app.core.logging import get_logger

logger = get_logger(__name__)


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ValidationError(AppException):
    """Bad or missing input field. The user corrects it and resubmits."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=422,
            details={"field": field},
        )


class InvalidConnectionType(AppException):
    """The tariff calculator was handed a connection type it has no slabs for."""

    def __init__(self, connection_type: Any):
        self.connection_type = connection_type
        super().__init__(
            message=f"No tariff defined for connection type {connection_type!r}",
            error_code="INVALID_CONNECTION_TYPE",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"connection_type": str(connection_type)},
        )


class NotFoundError(AppException):
    """Requested resource does not exist or is not owned by the caller."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code="NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": str(resource_id) if resource_id else None},
        )


class ConflictError(AppException):
    """Request conflicts with the current state of a resource."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="CONFLICT",
            status_code=status.HTTP_409_CONFLICT,
            details={"field": field} if field else None,
        )


class AuthenticationError(AppException):
    """Raised for authentication failures."""

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(
            message=message,
            error_code="AUTHENTICATION_FAILED",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


class StoreUnavailableError(AppException):
    """The bill store could not be reached. Surfaced with a retry affordance."""

    def __init__(self, message: str = "Bill store is temporarily unavailable. Please try again."):
        super().__init__(
            message=message,
            error_code="STORE_UNAVAILABLE",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details={"retryable": True},
        )


class PaymentFailedError(AppException):
    """The payment collaborator reported a failure."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(
            message=f"Payment failed: {reason}",
            error_code="PAYMENT_FAILED",
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            details={"reason": reason, "retryable": True},
        )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render AppException in the standard error envelope."""
    log_extra = {
        "path": request.url.path,
        "error_code": exc.error_code,
        "correlation_id": getattr(request.state, "request_id", None),
    }
    if exc.status_code >= 500:
        logger.error(exc.message, extra=log_extra)
    else:
        logger.info(exc.message, extra=log_extra)

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": {
                "code": exc.error_code,
                "message": exc.message,
                "field": exc.details.get("field"),
                "details": exc.details,
            },
        },
        headers=headers,
    )
