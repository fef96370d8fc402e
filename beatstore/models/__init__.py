"""Database model type definitions."""

from beatstore.models.order import Order, OrderCreate, OrderStatus, OrderUpdate
from beatstore.models.product import CatalogEntry

__all__ = [
    "CatalogEntry",
    "Order",
    "OrderCreate",
    "OrderStatus",
    "OrderUpdate",
]
