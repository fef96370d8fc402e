"""Global error handling middleware for consistent error responses."""

import logging
import traceback
from typing import Any, Callable

from fastapi import HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from beatstore.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for API errors.

    Use this class to raise application-specific errors that should
    be returned to the client with a specific status code and message.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_type: str = "api_error",
    ) -> None:
        """Initialize API error.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code to return.
            error_type: Error category/type for client handling.
        """
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        super().__init__(message)


class ValidationError(APIError):
    """Client sent something the service cannot act on."""

    def __init__(
        self,
        message: str = "Validation error",
        error_type: str = "validation_error",
        status_code: int = status.HTTP_400_BAD_REQUEST,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            error_type=error_type,
        )


class ProductNotFoundError(ValidationError):
    """Product id is not in the catalog.

    A client error (400) at checkout; when a stored order references a
    product that has since left the catalog it is raised with 404.
    """

    def __init__(
        self,
        product_id: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
    ) -> None:
        self.product_id = product_id
        super().__init__(
            message="Producto no encontrado",
            status_code=status_code,
            error_type="product_not_found",
        )


class NotFoundError(APIError):
    """Resource not found error."""

    def __init__(self, message: str = "Resource not found", error_type: str = "not_found") -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_type=error_type,
        )


class OrderNotFoundError(NotFoundError):
    """No order matches a provider session id."""

    def __init__(self, stripe_session_id: str) -> None:
        self.stripe_session_id = stripe_session_id
        super().__init__(message="Pedido no encontrado", error_type="order_not_found")


class AuthenticationError(APIError):
    """Authentication failure error."""

    def __init__(
        self,
        message: str = "Authentication required",
        status_code: int = status.HTTP_401_UNAUTHORIZED,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            error_type="authentication_error",
        )


class WebhookSignatureError(AuthenticationError):
    """Webhook payload could not be verified against the signing secret."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            message=f"Webhook Error: {reason}",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class AuthorizationError(APIError):
    """Authorization failure error."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_type="authorization_error",
        )


class UpstreamUnavailableError(APIError):
    """A collaborator is unreachable; the caller should retry shortly."""

    def __init__(self, message: str = "Servicio no disponible. Intentá en unos minutos.") -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_type="upstream_unavailable",
        )


class StorageError(APIError):
    """Order store query failed."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_type="storage_error",
        )


def create_error_response(
    error_type: str,
    message: str,
    status_code: int,
    request_id: str | None = None,
) -> JSONResponse:
    """Create a standardized JSON error response.

    Args:
        error_type: Error category for client handling.
        message: Human-readable error description.
        status_code: HTTP status code.
        request_id: Optional request ID for tracing.

    Returns:
        JSONResponse: Formatted error response.
    """
    error_response = ErrorResponse(
        error=error_type,
        message=message,
        request_id=request_id,
    )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json", exclude_none=True),
    )


async def error_handler_middleware(request: Request, call_next: Callable[[Request], Any]) -> Response:
    """Middleware to catch and format all exceptions.

    Logs full stack traces for unexpected errors while returning safe
    messages to clients.

    Args:
        request: The incoming request.
        call_next: Next middleware or route handler.

    Returns:
        Response: Either the successful response or formatted error response.
    """
    request_id = request.headers.get("X-Request-ID")

    try:
        response = await call_next(request)
        return response

    except APIError as e:
        logger.warning(
            "API error: %s - %s",
            e.error_type,
            e.message,
            extra={"request_id": request_id, "status_code": e.status_code},
        )
        return create_error_response(
            error_type=e.error_type,
            message=e.message,
            status_code=e.status_code,
            request_id=request_id,
        )

    except HTTPException as e:
        logger.warning(
            "HTTP exception: %s - %s",
            e.status_code,
            e.detail,
            extra={"request_id": request_id},
        )
        return create_error_response(
            error_type="http_error",
            message=str(e.detail),
            status_code=e.status_code,
            request_id=request_id,
        )

    except Exception as e:
        logger.error(
            "Unhandled exception: %s\n%s",
            str(e),
            traceback.format_exc(),
            extra={"request_id": request_id},
        )
        return create_error_response(
            error_type="internal_error",
            message="Error inesperado. Por favor, intentá de nuevo.",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            request_id=request_id,
        )
