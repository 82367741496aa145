"""
进程内订单仓储 - 用于测试与本地演示（重启即丢失）
"""
from __future__ import annotations

from dataclasses import replace
from itertools import count
from typing import Optional, List

from domain.common.exceptions import OrderAlreadyExistsException
from domain.order.entity import Order, OrderStatus
from domain.order.repository import OrderRepository


class InMemoryOrderRepository(OrderRepository):
    """以 dict 保存订单；读写均返回副本，行为与数据库实现一致（最后写入者生效）"""

    def __init__(self) -> None:
        self._orders: dict[int, Order] = {}
        self._ids = count(1)

    async def create(self, order: Order) -> Order:
        if any(o.external_order_id == order.external_order_id for o in self._orders.values()):
            raise OrderAlreadyExistsException(order.external_order_id)
        stored = replace(order, id=next(self._ids))
        self._orders[stored.id] = stored
        return replace(stored)

    async def get_by_id(self, order_id: int) -> Optional[Order]:
        order = self._orders.get(order_id)
        return replace(order) if order else None

    async def get_by_external_order_id(self, external_order_id: str) -> Optional[Order]:
        for order in self._orders.values():
            if order.external_order_id == external_order_id:
                return replace(order)
        return None

    async def update(self, order: Order) -> Order:
        current = self._orders.get(order.id) if order.id is not None else None
        if current is None:
            raise ValueError(f"Order with id {order.id} not found")
        stored = replace(current, status=order.status, updated_at=order.updated_at)
        self._orders[stored.id] = stored
        return replace(stored)

    async def list_orders(
        self,
        skip: int = 0,
        limit: int = 100,
        status: Optional[OrderStatus] = None
    ) -> List[Order]:
        orders = [o for o in self._orders.values() if status is None or o.status == status]
        orders.sort(key=lambda o: (o.created_at, o.id), reverse=True)
        return [replace(o) for o in orders[skip:skip + limit]]
