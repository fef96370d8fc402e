"""Webhook API route for Stripe."""

import logging

from fastapi import APIRouter, Request, status

from beatstore.schemas.checkout import WebhookAck
from beatstore.services.webhook_service import WebhookService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


@router.post(
    "/webhook",
    response_model=WebhookAck,
    status_code=status.HTTP_200_OK,
    summary="Handle Stripe webhooks",
    description="Receives Stripe events. Requires a valid Stripe-Signature over the raw body.",
    responses={
        400: {"description": "Missing or invalid signature"},
        404: {"description": "No order for the session, or its product is unknown"},
    },
)
async def stripe_webhook(request: Request) -> WebhookAck:
    """Handle Stripe webhook events.

    Handles checkout.session.completed by completing the matching order and
    sending the fulfillment emails. Every other verified event is
    acknowledged without processing.

    Args:
        request: FastAPI request object for reading raw body and headers.

    Returns:
        WebhookAck: Acknowledgment for Stripe.
    """
    # Signature covers the raw bytes, so the body must not be parsed first
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature")
    logger.debug("Webhook payload size: %d bytes", len(payload))

    service = WebhookService()
    event = service.verify_event(payload, sig_header)
    result = await service.handle_event(event)
    logger.info("Webhook %s handled: %s", event.get("id"), result["outcome"])

    return WebhookAck()
