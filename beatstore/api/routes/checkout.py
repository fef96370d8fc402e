"""Checkout API routes for Stripe integration."""

import logging

from fastapi import APIRouter, status

from beatstore.schemas.checkout import (
    CheckoutRequest,
    CheckoutResponse,
    OrderListResponse,
    OrderResponse,
    SessionStatusResponse,
)
from beatstore.services.checkout_service import CheckoutService
from beatstore.services.order_service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["checkout"])


@router.post(
    "/crear-pago",
    response_model=CheckoutResponse,
    status_code=status.HTTP_200_OK,
    summary="Create Stripe Checkout Session",
    description="Creates a Stripe Checkout Session for a catalog product and records a pending order.",
    responses={
        400: {"description": "Unknown product"},
        503: {"description": "Stripe unreachable, retry shortly"},
    },
)
async def create_checkout_session(data: CheckoutRequest) -> CheckoutResponse:
    """Create a Stripe Checkout Session for a digital product.

    The frontend redirects the buyer to Stripe using the returned session ID.

    Args:
        data: Checkout request with the product ID.

    Returns:
        CheckoutResponse: Contains the session ID.
    """
    logger.info("Checkout requested for %s", data.product_id)
    service = CheckoutService()
    result = await service.create_checkout_session(data.product_id)

    return CheckoutResponse(session_id=result["session_id"], url=result["checkout_url"])


@router.get(
    "/verificar-sesion/{session_id}",
    response_model=SessionStatusResponse,
    summary="Get checkout session status",
    description="Returns Stripe's payment status for a Checkout Session.",
    responses={404: {"description": "Session not found"}},
)
async def get_session_status(session_id: str) -> SessionStatusResponse:
    """Poll the payment status of a checkout session.

    Args:
        session_id: Stripe Checkout Session ID.

    Returns:
        SessionStatusResponse: Payment status, buyer email and completion flag.
    """
    service = CheckoutService()
    result = await service.get_session_status(session_id)
    return SessionStatusResponse(**result)


@router.get(
    "/pedidos",
    response_model=OrderListResponse,
    summary="List recent orders",
    description="Returns the most recent orders, newest first.",
)
async def list_orders() -> OrderListResponse:
    """List the most recent orders.

    Returns:
        OrderListResponse: Up to the configured page size of orders.
    """
    service = OrderService()
    orders = await service.list_orders()
    return OrderListResponse(pedidos=[OrderResponse(**order) for order in orders])
