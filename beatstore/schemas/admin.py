"""Admin schemas: identity, keep-alive status and sales summary."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from beatstore.schemas.checkout import OrderResponse


class AdminContext(BaseModel):
    """Identity extracted from a verified admin token."""

    model_config = ConfigDict(from_attributes=True)

    subject: str = Field(description="Token subject")
    role: str | None = Field(default=None, description="Role claim")


class KeepAliveStatusResponse(BaseModel):
    """Keep-alive scheduler counters and controls state."""

    model_config = ConfigDict(from_attributes=True)

    running: bool = Field(description="Whether the background task is running")
    active: bool = Field(description="Whether ticks currently ping the database")
    paused_reason: str | None = Field(default=None, description="manual or budget when inactive")
    budget_override: bool = Field(description="Resumed manually past the ping limit")
    period: str = Field(description="Budget period (YYYY-MM, UTC)")
    total_pings: int = Field(description="Pings attempted this period")
    failed_pings: int = Field(description="Pings that raised an error this period")
    ping_limit: int = Field(description="Pings allowed before auto-pause")
    remaining: int = Field(description="Pings left before auto-pause")
    monthly_budget: int = Field(description="Configured monthly budget")
    interval_seconds: float = Field(description="Seconds between pings")
    last_ping_at: datetime | None = Field(default=None, description="Time of the last ping")
    last_error: str | None = Field(default=None, description="Error from the last ping")
    next_reset_at: datetime = Field(description="When the counters reset")


class ProductSales(BaseModel):
    """Sales for one product."""

    product_id: str = Field(description="Catalog product identifier")
    product_name: str = Field(description="Product name")
    units: int = Field(description="Completed orders")
    revenue: float = Field(description="Revenue in major currency units")


class SalesSummaryResponse(BaseModel):
    """Sales dashboard data."""

    completed_orders: int = Field(description="Completed orders in the sample")
    pending_orders: int = Field(description="Pending orders in the sample")
    revenue: float = Field(description="Revenue from completed orders")
    conversion_rate: float = Field(description="Completed / all orders in the sample")
    by_product: list[ProductSales] = Field(description="Revenue per product, highest first")
    recent_sales: list[OrderResponse] = Field(description="Latest completed orders")
