"""
API依赖项 - 组合根：配置、目录、仓储与网关适配器的装配
"""
from functools import lru_cache
from typing import AsyncIterator

from fastapi import Depends

from application.dtos.checkout import CheckoutConfig, GatewayTimeouts
from application.ports.product_catalog import ProductCatalog
from application.services.order_lifecycle import OrderLifecycleManager
from core.config import settings
from core.settings import payment_settings
from domain.order.repository import OrderRepository
from infrastructure.catalog import StaticProductCatalog
from infrastructure.database import AsyncSessionLocal
from infrastructure.external.payments import get_payment_gateway
from infrastructure.repositories.memory_order_repository import InMemoryOrderRepository
from infrastructure.repositories.order_repository import SQLAlchemyOrderRepository


_catalog = StaticProductCatalog()
_memory_orders = InMemoryOrderRepository()


def build_checkout_config() -> CheckoutConfig:
    """从 PaymentSettings 构造不可变的 CheckoutConfig（仅在装配时调用一次）"""
    cfg = payment_settings.paypal
    if not (cfg.client_id and cfg.client_secret and cfg.client_secret.get_secret_value()):
        raise RuntimeError("PAYPAL configuration incomplete")
    return CheckoutConfig(
        client_id=cfg.client_id,
        client_secret=cfg.client_secret,
        base_url=cfg.base_url,
        currency_code=cfg.currency_code,
        return_url=cfg.return_url,
        cancel_url=cfg.cancel_url,
        timeouts=GatewayTimeouts(**payment_settings.timeouts.model_dump()),
    )


@lru_cache
def get_checkout_config() -> CheckoutConfig:
    return build_checkout_config()


def get_product_catalog() -> ProductCatalog:
    return _catalog


def get_order_repository() -> OrderRepository:
    if settings.ORDER_STORE.lower() == "memory":
        return _memory_orders
    return SQLAlchemyOrderRepository(AsyncSessionLocal)


async def get_order_lifecycle_manager(
    config: CheckoutConfig = Depends(get_checkout_config),
    catalog: ProductCatalog = Depends(get_product_catalog),
    orders: OrderRepository = Depends(get_order_repository),
) -> AsyncIterator[OrderLifecycleManager]:
    token_provider, gateway = get_payment_gateway(config, payment_settings.default_provider)
    # 请求结束后关闭两个适配器的 HTTP 客户端
    async with token_provider, gateway:
        yield OrderLifecycleManager(
            config=config,
            catalog=catalog,
            token_provider=token_provider,
            gateway=gateway,
            orders=orders,
        )
