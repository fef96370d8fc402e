"""Sales dashboard aggregation."""

import logging
from collections import defaultdict
from typing import Any

from beatstore.services.order_service import OrderService

logger = logging.getLogger(__name__)

# Orders sampled for the dashboard
SUMMARY_SAMPLE_SIZE = 500
RECENT_SALES_COUNT = 10


class SalesService:
    """Aggregates recent orders into sales figures."""

    def __init__(self) -> None:
        self.orders = OrderService()

    async def get_summary(self, sample_size: int = SUMMARY_SAMPLE_SIZE) -> dict[str, Any]:
        """Summarize the most recent orders.

        Args:
            sample_size: Number of recent orders to aggregate.

        Returns:
            dict: Counts, revenue, per-product breakdown and recent sales.
        """
        orders = await self.orders.list_orders(limit=sample_size)
        completed = [o for o in orders if o.get("status") == "completed"]

        by_product: dict[str, dict[str, Any]] = defaultdict(
            lambda: {"product_name": "", "units": 0, "revenue": 0.0}
        )
        for order in completed:
            entry = by_product[order["product_id"]]
            entry["product_name"] = order.get("product_name") or order["product_id"]
            entry["units"] += 1
            entry["revenue"] += float(order.get("price_paid") or 0)

        revenue = round(sum(e["revenue"] for e in by_product.values()), 2)
        logger.debug("Sales summary over %d orders: %d completed", len(orders), len(completed))

        return {
            "completed_orders": len(completed),
            "pending_orders": len(orders) - len(completed),
            "revenue": revenue,
            "conversion_rate": round(len(completed) / len(orders), 4) if orders else 0.0,
            "by_product": sorted(
                (
                    {"product_id": pid, **{**e, "revenue": round(e["revenue"], 2)}}
                    for pid, e in by_product.items()
                ),
                key=lambda e: e["revenue"],
                reverse=True,
            ),
            "recent_sales": completed[:RECENT_SALES_COUNT],
        }
