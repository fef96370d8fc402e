"""Stripe webhook verification and order reconciliation."""

import logging
from typing import Any

import stripe

from beatstore.api.middleware.error_handler import (
    APIError,
    NotFoundError,
    OrderNotFoundError,
    ProductNotFoundError,
    UpstreamUnavailableError,
    WebhookSignatureError,
)
from beatstore.core.config import get_settings
from beatstore.core.stripe import get_stripe
from beatstore.services.catalog_service import CatalogService
from beatstore.services.email_service import EmailService
from beatstore.services.order_service import OrderService

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


class WebhookService:
    """Service that turns verified Stripe events into completed orders.

    Delivery is at-most-once: once a completion has been claimed in the
    database, failures further down (emails, lookups) are logged and the
    event is still acknowledged so Stripe does not redeliver it forever.
    """

    def __init__(self) -> None:
        """Initialize webhook service with clients."""
        self.stripe = get_stripe()
        self.settings = get_settings()
        self.catalog = CatalogService()
        self.orders = OrderService()
        self.email_service = EmailService()

    def verify_event(self, payload: bytes, sig_header: str | None) -> Any:
        """Verify Stripe webhook signature and return event.

        Args:
            payload: Raw webhook payload bytes.
            sig_header: Stripe-Signature header value.

        Returns:
            stripe.Event: Verified Stripe event.

        Raises:
            WebhookSignatureError: If the header is missing or the signature
                or payload is invalid.
            APIError: If the webhook secret is not configured.
        """
        if not sig_header:
            raise WebhookSignatureError("Missing Stripe-Signature header")

        if not self.settings.stripe_webhook_secret:
            raise APIError(
                "Stripe webhook secret is not configured. Please set STRIPE_WEBHOOK_SECRET environment variable.",
                error_type="configuration_error",
            )

        try:
            return self.stripe.Webhook.construct_event(
                payload, sig_header, self.settings.stripe_webhook_secret
            )
        except stripe.SignatureVerificationError as e:
            logger.warning("Invalid webhook signature: %s", str(e))
            raise WebhookSignatureError(str(e)) from e
        except ValueError as e:
            logger.warning("Invalid webhook payload: %s", str(e))
            raise WebhookSignatureError(str(e)) from e

    async def handle_event(self, event: Any) -> dict[str, Any]:
        """Dispatch a verified event.

        Args:
            event: Verified Stripe event.

        Returns:
            dict: Outcome of processing.
        """
        event_type = event.get("type", "")
        logger.info("Processing Stripe webhook event: %s", event_type)

        if event_type == CHECKOUT_COMPLETED:
            return await self.handle_checkout_completed(event)

        logger.debug("Unhandled webhook event type: %s", event_type)
        return {"outcome": "ignored"}

    async def handle_checkout_completed(self, event: Any) -> dict[str, Any]:
        """Process checkout.session.completed webhook event.

        Args:
            event: Stripe webhook event data.

        Returns:
            dict: outcome ("completed", "already_processed" or "error") and
                the order and email results when available.

        Raises:
            OrderNotFoundError: If no order matches the session.
            UpstreamUnavailableError: If no order matches and unmatched
                events are configured to be retried.
            ProductNotFoundError: If the order's product left the catalog.
        """
        session = event["data"]["object"]
        session_id = session.get("id")
        customer_details = session.get("customer_details") or {}
        customer_email = customer_details.get("email")

        logger.info("Payment completed for session %s (email: %s)", session_id, customer_email)

        try:
            order = await self.orders.get_by_session_id(session_id)
            if order is None:
                logger.warning("No order found for session %s", session_id)
                if self.settings.webhook_retry_unmatched:
                    raise UpstreamUnavailableError("Pedido todavía no registrado; reintentar más tarde")
                raise OrderNotFoundError(session_id)

            completed = await self.orders.complete_order(session_id, customer_email)
            if completed is None:
                logger.info("Session %s already fulfilled; skipping emails", session_id)
                return {"outcome": "already_processed", "order": order}

            product_id = completed.get("product_id") or order.get("product_id")
            product = self.catalog.get_product(product_id)
            if product is None:
                logger.error("Order %s references unknown product %s", session_id, product_id)
                raise ProductNotFoundError(product_id, status_code=404)

            emails = await self.email_service.send_order_notifications(completed, product, customer_email)
            logger.info("Fulfillment emails processed for session %s", session_id)
            return {"outcome": "completed", "order": completed, "emails": emails}

        except (NotFoundError, ProductNotFoundError, UpstreamUnavailableError):
            raise
        except Exception as e:
            logger.error("Error processing order for session %s: %s", session_id, str(e))
            return {"outcome": "error", "error": str(e)}
