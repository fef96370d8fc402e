"""Order persistence on top of the Supabase orders table."""

import logging
from datetime import datetime, timezone
from typing import Any

from beatstore.api.middleware.error_handler import StorageError
from beatstore.core.config import get_settings
from beatstore.core.supabase import get_supabase_client
from beatstore.models.order import OrderCreate, OrderStatus, OrderUpdate
from beatstore.models.product import CatalogEntry

logger = logging.getLogger(__name__)


class OrderService:
    """Service for reading and writing order records.

    Every database failure is re-raised as StorageError so callers can
    decide whether persistence is best-effort or required.
    """

    def __init__(self) -> None:
        """Initialize order service with the shared Supabase client."""
        self.client = get_supabase_client()
        self.settings = get_settings()
        self.table_name = self.settings.orders_table

    def _table(self) -> Any:
        return self.client.table(self.table_name)

    async def create_pending_order(
        self, product: CatalogEntry, stripe_session_id: str
    ) -> dict[str, Any]:
        """Insert a pending order for a freshly created checkout session.

        Args:
            product: Catalog entry being purchased.
            stripe_session_id: Checkout Session ID returned by Stripe.

        Returns:
            dict: The inserted row.

        Raises:
            StorageError: If the insert fails.
        """
        order_data: OrderCreate = {
            "product_id": product.product_id,
            "product_name": product.name,
            "price_paid": product.price_cents / 100,
            "stripe_session_id": stripe_session_id,
            "status": "pending",
            "customer_email": None,
            "download_sent": False,
        }

        try:
            response = self._table().insert(order_data).execute()
        except Exception as e:
            raise StorageError(f"Could not save order for session {stripe_session_id}: {e}") from e

        return response.data[0] if response.data else dict(order_data)

    async def get_by_session_id(self, stripe_session_id: str) -> dict[str, Any] | None:
        """Get the order created for a Stripe Checkout Session.

        Args:
            stripe_session_id: Checkout Session ID.

        Returns:
            dict | None: The first matching order, or None.
        """
        try:
            response = (
                self._table()
                .select("*")
                .eq("stripe_session_id", stripe_session_id)
                .limit(2)
                .execute()
            )
        except Exception as e:
            raise StorageError(f"Could not look up session {stripe_session_id}: {e}") from e

        rows = response.data or []
        if len(rows) > 1:
            logger.warning("Multiple orders share session %s; using the first", stripe_session_id)
        return rows[0] if rows else None

    async def complete_order(
        self, stripe_session_id: str, customer_email: str | None
    ) -> dict[str, Any] | None:
        """Atomically mark an order completed and claim its fulfillment.

        The update only matches rows whose download has not been sent yet,
        so of several concurrent or replayed deliveries exactly one gets
        the row back.

        Args:
            stripe_session_id: Checkout Session ID.
            customer_email: Buyer email from the Stripe session.

        Returns:
            dict | None: The updated order, or None if it was already claimed.
        """
        update_data: OrderUpdate = {
            "status": "completed",
            "download_sent": True,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        if customer_email:
            update_data["customer_email"] = customer_email

        try:
            response = (
                self._table()
                .update(update_data)
                .eq("stripe_session_id", stripe_session_id)
                .eq("download_sent", False)
                .execute()
            )
        except Exception as e:
            raise StorageError(f"Could not complete order for session {stripe_session_id}: {e}") from e

        if response.data:
            logger.info("Order for session %s marked as completed", stripe_session_id)
            return response.data[0]
        return None

    async def list_orders(
        self,
        limit: int | None = None,
        status: OrderStatus | None = None,
    ) -> list[dict[str, Any]]:
        """List orders, most recent first.

        Args:
            limit: Max rows to return. Defaults to the configured page size.
            status: Optional status filter.

        Returns:
            list[dict]: Orders ordered by created_at descending.
        """
        query = self._table().select("*")
        if status:
            query = query.eq("status", status)

        try:
            response = (
                query.order("created_at", desc=True)
                .limit(limit or self.settings.orders_page_size)
                .execute()
            )
        except Exception as e:
            raise StorageError(f"Could not list orders: {e}") from e

        return response.data or []

    async def ping(self) -> None:
        """Run a trivial round-trip query to keep the database awake."""
        try:
            self._table().select("id").limit(1).execute()
        except Exception as e:
            raise StorageError(f"Database ping failed: {e}") from e
