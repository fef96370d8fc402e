"""Checkout business logic service."""

import logging
import time
from typing import Any

import stripe

from beatstore.api.middleware.error_handler import (
    APIError,
    NotFoundError,
    ProductNotFoundError,
    StorageError,
    UpstreamUnavailableError,
)
from beatstore.core.config import get_settings
from beatstore.core.stripe import get_stripe
from beatstore.services.catalog_service import CatalogService
from beatstore.services.order_service import OrderService

logger = logging.getLogger(__name__)


class CheckoutService:
    """Service for Stripe Checkout sessions."""

    def __init__(self) -> None:
        """Initialize checkout service with clients."""
        self.stripe = get_stripe()
        self.settings = get_settings()
        self.catalog = CatalogService()
        self.orders = OrderService()

    async def create_checkout_session(self, product_id: str) -> dict[str, Any]:
        """Create a Stripe Checkout Session and a pending order.

        The order insert is best-effort: once Stripe has created the session
        the buyer can pay, so a database failure is logged and the session
        is still returned.

        Args:
            product_id: Catalog product identifier.

        Returns:
            dict: Contains session_id and checkout_url.

        Raises:
            ProductNotFoundError: If the product is not in the catalog.
            UpstreamUnavailableError: If Stripe cannot be reached.
            APIError: If Stripe rejects the request.
        """
        product = self.catalog.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        frontend_url = self.settings.frontend_url.rstrip("/")
        checkout_params: dict[str, Any] = {
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": self.settings.currency,
                        "product_data": {
                            "name": product.name,
                            "description": f"Producto digital - {self.settings.store_name}",
                        },
                        "unit_amount": product.price_cents,
                    },
                    "quantity": 1,
                }
            ],
            "mode": "payment",
            "success_url": f"{frontend_url}/success.html?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{frontend_url}/?canceled=true",
            "metadata": {"product_id": product.product_id},
            "expires_at": int(time.time()) + self.settings.checkout_session_ttl_seconds,
        }

        try:
            stripe_session = self.stripe.checkout.Session.create(**checkout_params)
        except stripe.APIConnectionError as e:
            logger.error("Stripe unreachable creating checkout session: %s", str(e))
            raise UpstreamUnavailableError("Stripe no responde. Intentá en unos minutos.") from e
        except stripe.StripeError as e:
            logger.error("Stripe error creating checkout session: %s", str(e))
            raise APIError(
                message="No se pudo iniciar el pago. Por favor, intentá de nuevo.",
                error_type="payment_provider_error",
            ) from e

        try:
            await self.orders.create_pending_order(product, stripe_session.id)
            logger.info("Pending order saved for session %s", stripe_session.id)
        except StorageError as e:
            logger.warning("Order NOT saved for session %s: %s", stripe_session.id, e.message)

        logger.info("Stripe checkout session created: %s (%s)", stripe_session.id, product.product_id)

        return {
            "session_id": stripe_session.id,
            "checkout_url": getattr(stripe_session, "url", None),
        }

    async def get_session_status(self, session_id: str) -> dict[str, Any]:
        """Look up the payment status of a Checkout Session.

        Args:
            session_id: Stripe Checkout Session ID.

        Returns:
            dict: status, email and completed flag.

        Raises:
            NotFoundError: If Stripe cannot return the session.
        """
        try:
            session = self.stripe.checkout.Session.retrieve(session_id)
        except stripe.StripeError as e:
            logger.info("Checkout session %s not retrievable: %s", session_id, str(e))
            raise NotFoundError("Sesión no encontrada", error_type="session_not_found") from e

        customer_details = getattr(session, "customer_details", None)
        return {
            "status": session.payment_status,
            "email": getattr(customer_details, "email", None) if customer_details else None,
            "completed": session.payment_status == "paid",
        }
