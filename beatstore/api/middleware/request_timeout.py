"""Inbound request timeout middleware."""

import asyncio
import logging
from typing import Callable

from fastapi import Request, Response, status

from beatstore.api.middleware.error_handler import create_error_response
from beatstore.core.config import get_settings

logger = logging.getLogger(__name__)


async def request_timeout_middleware(
    request: Request,
    call_next: Callable[[Request], Response],
) -> Response:
    """Middleware to bound how long a request may run.

    Outbound calls (Stripe, Resend, Supabase) have no timeouts of their
    own; this is the single limit on a request's total duration.

    Args:
        request: The incoming request.
        call_next: Next middleware or route handler.

    Returns:
        Response: Either the handler's response or a 504 error.
    """
    timeout = get_settings().request_timeout_seconds

    try:
        return await asyncio.wait_for(call_next(request), timeout=timeout)
    except asyncio.TimeoutError:
        logger.error(
            "Request timed out after %.1fs: %s %s",
            timeout,
            request.method,
            request.url.path,
        )
        return create_error_response(
            error_type="request_timeout",
            message="La solicitud tardó demasiado. Intentá de nuevo.",
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            request_id=request.headers.get("X-Request-ID"),
        )
