"""
订单仓储接口 - 定义订单数据访问的抽象接口
"""
from abc import ABC, abstractmethod
from typing import Optional, List

from .entity import Order, OrderStatus


class OrderRepository(ABC):
    """订单仓储抽象接口 - 只定义能做什么，不管怎么做"""

    @abstractmethod
    async def create(self, order: Order) -> Order:
        """创建订单，分配内部ID；external_order_id 重复时抛出 OrderAlreadyExistsException"""
        pass

    @abstractmethod
    async def get_by_id(self, order_id: int) -> Optional[Order]:
        """根据内部ID获取订单"""
        pass

    @abstractmethod
    async def get_by_external_order_id(self, external_order_id: str) -> Optional[Order]:
        """根据网关订单ID获取订单"""
        pass

    @abstractmethod
    async def update(self, order: Order) -> Order:
        """更新订单（整体覆盖，最后写入者生效）"""
        pass

    @abstractmethod
    async def list_orders(
        self,
        skip: int = 0,
        limit: int = 100,
        status: Optional[OrderStatus] = None
    ) -> List[Order]:
        """按创建时间倒序列出订单"""
        pass
