"""
订单仓储实现 - 使用SQLAlchemy实现数据访问

每个方法在独立的会话/事务中执行并立即提交：编排层的“先读后写”
不会被包进同一个事务，因此并发扣款同一订单时以最后一次写入为准。
"""
from typing import Callable, Optional, List
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from domain.common.exceptions import OrderAlreadyExistsException
from domain.order.entity import Order, OrderStatus
from domain.order.repository import OrderRepository
from infrastructure.models.order import OrderModel
from core.logging_config import get_logger


logger = get_logger(__name__)


class SQLAlchemyOrderRepository(OrderRepository):
    """订单仓储的SQLAlchemy实现"""

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory

    def _to_entity(self, model: OrderModel) -> Order:
        """将数据库模型转换为领域实体"""
        return Order(
            id=model.id,
            external_order_id=model.external_order_id,
            product_name=model.product_name,
            amount=Decimal(str(model.amount)),
            currency_code=model.currency_code,
            status=OrderStatus(model.status),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Order) -> OrderModel:
        """将领域实体转换为数据库模型"""
        return OrderModel(
            id=entity.id,
            external_order_id=entity.external_order_id,
            product_name=entity.product_name,
            amount=entity.amount,
            currency_code=entity.currency_code,
            status=entity.status.value,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    async def create(self, order: Order) -> Order:
        """创建订单记录"""
        async with self.session_factory() as session:
            db_order = self._to_model(order)
            session.add(db_order)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                if "external_order_id" in str(e).lower():
                    logger.warning(
                        "order_create_conflict",
                        external_order_id=order.external_order_id
                    )
                    raise OrderAlreadyExistsException(order.external_order_id)
                raise
            await session.refresh(db_order)
            logger.info(
                "order_created",
                order_id=db_order.id,
                external_order_id=db_order.external_order_id,
                status=db_order.status
            )
            return self._to_entity(db_order)

    async def get_by_id(self, order_id: int) -> Optional[Order]:
        """根据ID获取订单"""
        async with self.session_factory() as session:
            result = await session.execute(
                select(OrderModel).where(OrderModel.id == order_id)
            )
            db_order = result.scalar_one_or_none()
            return self._to_entity(db_order) if db_order else None

    async def get_by_external_order_id(self, external_order_id: str) -> Optional[Order]:
        """根据网关订单ID获取订单"""
        async with self.session_factory() as session:
            result = await session.execute(
                select(OrderModel).where(OrderModel.external_order_id == external_order_id)
            )
            db_order = result.scalar_one_or_none()
            return self._to_entity(db_order) if db_order else None

    async def update(self, order: Order) -> Order:
        """更新订单记录"""
        async with self.session_factory() as session:
            result = await session.execute(
                select(OrderModel).where(OrderModel.id == order.id)
            )
            db_order = result.scalar_one_or_none()

            if not db_order:
                raise ValueError(f"Order with id {order.id} not found")

            # 仅状态与更新时间可变；金额、商品名为创建时快照
            db_order.status = order.status.value
            db_order.updated_at = order.updated_at

            await session.commit()
            await session.refresh(db_order)

            logger.info(
                "order_updated",
                order_id=db_order.id,
                external_order_id=db_order.external_order_id,
                status=db_order.status
            )
            return self._to_entity(db_order)

    async def list_orders(
        self,
        skip: int = 0,
        limit: int = 100,
        status: Optional[OrderStatus] = None
    ) -> List[Order]:
        """按创建时间倒序列出订单"""
        query = select(OrderModel)
        if status:
            query = query.where(OrderModel.status == status.value)
        query = query.order_by(OrderModel.created_at.desc(), OrderModel.id.desc()).offset(skip).limit(limit)

        async with self.session_factory() as session:
            result = await session.execute(query)
            return [self._to_entity(o) for o in result.scalars().all()]
