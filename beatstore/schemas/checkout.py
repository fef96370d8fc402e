"""Checkout and order Pydantic schemas for API request/response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from beatstore.models.order import OrderStatus


class CheckoutRequest(BaseModel):
    """Schema for starting a checkout via POST /api/crear-pago."""

    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(default="", alias="productId", description="Catalog product identifier")


class CheckoutResponse(BaseModel):
    """Schema for checkout session creation response."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(default=True, description="Always true on success")
    session_id: str = Field(alias="sessionId", description="Stripe Checkout Session ID")
    url: str | None = Field(default=None, description="Hosted checkout URL")
    message: str = Field(default="Redirigiendo a Stripe...", description="Message for the buyer")


class SessionStatusResponse(BaseModel):
    """Schema for GET /api/verificar-sesion/{session_id}."""

    status: str | None = Field(description="Stripe payment_status (paid, unpaid, no_payment_required)")
    email: str | None = Field(default=None, description="Buyer email if Stripe collected it")
    completed: bool = Field(description="True once the session is paid")


class OrderResponse(BaseModel):
    """Schema for order API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int | str | None = Field(default=None, description="Order identifier")
    product_id: str = Field(description="Catalog product identifier")
    product_name: str = Field(description="Product name at purchase time")
    price_paid: float = Field(description="Amount charged in major currency units")
    stripe_session_id: str = Field(description="Stripe Checkout Session ID")
    status: OrderStatus = Field(description="Order status")
    customer_email: str | None = Field(default=None, description="Buyer email")
    download_sent: bool = Field(default=False, description="Whether fulfillment was dispatched")
    created_at: datetime | None = Field(default=None, description="Creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")


class OrderListResponse(BaseModel):
    """Schema for GET /api/pedidos."""

    success: bool = Field(default=True, description="Always true on success")
    pedidos: list[OrderResponse] = Field(description="Most recent orders first")


class WebhookAck(BaseModel):
    """Acknowledgement returned to Stripe."""

    received: bool = Field(default=True, description="Event was received")
