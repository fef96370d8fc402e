"""Email service using Resend for fulfillment emails."""

import logging
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

import resend

from beatstore.core.config import get_settings
from beatstore.models.product import CatalogEntry

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending purchase emails via Resend.

    Sends never raise: each method returns a result dict and logs failures,
    because payment acknowledgement must not depend on email delivery.
    """

    def __init__(self) -> None:
        """Initialize email service with Resend API key."""
        self.settings = get_settings()
        resend.api_key = self.settings.resend_api_key
        self.from_email = self.settings.email_from_address
        self.store_name = self.settings.store_name

    def _purchase_date(self) -> str:
        now = datetime.now(ZoneInfo(self.settings.business_timezone))
        return now.strftime("%d/%m/%Y")

    def _send(self, to_email: str, subject: str, html_content: str, kind: str) -> dict[str, Any]:
        try:
            response = resend.Emails.send({
                "from": self.from_email,
                "to": [to_email],
                "subject": subject,
                "html": html_content,
            })

            logger.info("%s email sent to %s, id: %s", kind, to_email, response.get("id"))
            return {"success": True, "email_id": response.get("id")}

        except Exception as e:
            logger.error("Failed to send %s email to %s: %s", kind, to_email, str(e))
            return {"success": False, "error": str(e)}

    async def send_purchase_confirmation(
        self,
        to_email: str,
        product: CatalogEntry,
        price_paid: Any,
    ) -> dict[str, Any]:
        """Send the buyer their receipt and download link.

        Args:
            to_email: Buyer email address.
            product: Purchased catalog entry.
            price_paid: Amount stored on the order, in major units.

        Returns:
            dict: Resend result with email ID, or the error.
        """
        html_content = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h1 style="color: #635bff;">¡Gracias por tu compra!</h1>
    <div style="background: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0;">
        <h2>📦 Detalles de tu compra:</h2>
        <p><strong>Producto:</strong> {product.name}</p>
        <p><strong>Precio:</strong> ${price_paid} USD</p>
        <p><strong>Fecha:</strong> {self._purchase_date()}</p>
    </div>
    <div style="background: #e7f3ff; padding: 20px; border-radius: 8px; margin: 20px 0;">
        <h2>⬇️ Descarga tu producto:</h2>
        <a href="{product.download_url}"
           style="background: #635bff; color: white; padding: 12px 24px; text-decoration: none; border-radius: 4px; display: inline-block; margin: 10px 0;"
           target="_blank">
           DESCARGAR AHORA - {product.name}
        </a>
        <p style="color: #666; font-size: 14px; margin-top: 10px;">
            El enlace es válido por 30 días. Si tenés problemas, contactame.
        </p>
    </div>
    <div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #ddd;">
        <p>¿Necesitás ayuda? Contactame:</p>
        <p>📧 Email: {self.settings.support_email}</p>
        <p>📱 WhatsApp: {self.settings.support_whatsapp}</p>
    </div>
</div>
"""

        return self._send(
            to_email,
            f"✅ Tu compra en {self.store_name} - {product.name}",
            html_content,
            "Purchase confirmation",
        )

    async def send_sale_alert(
        self,
        customer_email: str | None,
        product: CatalogEntry,
        price_paid: Any,
    ) -> dict[str, Any]:
        """Notify the operator about a new sale.

        Args:
            customer_email: Buyer email address, if Stripe reported one.
            product: Purchased catalog entry.
            price_paid: Amount stored on the order, in major units.

        Returns:
            dict: Resend result with email ID, or the error.
        """
        html_content = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>🛒 NUEVA VENTA - {product.name}</h2>
    <div style="background: #f8f9fa; padding: 15px; border-radius: 6px; margin: 15px 0;">
        <p><strong>Producto:</strong> {product.name}</p>
        <p><strong>Precio:</strong> ${price_paid} USD</p>
        <p><strong>Cliente:</strong> {customer_email or "desconocido"}</p>
        <p><strong>Fecha:</strong> {self._purchase_date()}</p>
    </div>
</div>
"""

        return self._send(
            self.settings.operator_email,
            f"🛒 NUEVA VENTA - {product.name}",
            html_content,
            "Sale alert",
        )

    async def send_order_notifications(
        self,
        order: dict[str, Any],
        product: CatalogEntry,
        customer_email: str | None,
    ) -> dict[str, Any]:
        """Send both fulfillment emails for a completed order.

        Args:
            order: The completed order row.
            product: Catalog entry for the order's product.
            customer_email: Buyer email address.

        Returns:
            dict: Results keyed by "buyer" and "operator".
        """
        price_paid = order.get("price_paid", product.price_display)

        if customer_email:
            buyer = await self.send_purchase_confirmation(customer_email, product, price_paid)
        else:
            logger.warning("Order %s has no buyer email; skipping confirmation", order.get("stripe_session_id"))
            buyer = {"success": False, "error": "missing customer email"}

        operator = await self.send_sale_alert(customer_email, product, price_paid)
        return {"buyer": buyer, "operator": operator}
