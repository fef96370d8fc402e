"""Order model type definitions for database operations."""

from datetime import datetime
from typing import Literal, TypedDict


# Order status values; the only transition is pending -> completed
OrderStatus = Literal["pending", "completed"]


class Order(TypedDict):
    """Order table row representation.

    Represents an order stored in the orders table.
    Product name and price are snapshots taken at checkout time so later
    catalog edits never rewrite historical orders.
    """

    id: int
    product_id: str
    product_name: str
    price_paid: float
    stripe_session_id: str
    status: OrderStatus
    customer_email: str | None
    download_sent: bool
    created_at: datetime
    updated_at: datetime


class OrderCreate(TypedDict):
    """Data required to create a new pending order."""

    product_id: str
    product_name: str
    price_paid: float
    stripe_session_id: str
    status: OrderStatus
    customer_email: str | None
    download_sent: bool


class OrderUpdate(TypedDict, total=False):
    """Data written when a verified webhook completes an order."""

    status: OrderStatus
    customer_email: str
    download_sent: bool
    updated_at: str
