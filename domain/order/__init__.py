from .entity import Order, OrderStatus
from .repository import OrderRepository

__all__ = ["Order", "OrderStatus", "OrderRepository"]
