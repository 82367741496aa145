from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.pool import StaticPool

from domain.common.exceptions import DomainValidationException, OrderAlreadyExistsException
from domain.order.entity import Order, OrderStatus
from infrastructure.database import build_engine, build_session_factory, create_tables
from infrastructure.repositories.memory_order_repository import InMemoryOrderRepository
from infrastructure.repositories.order_repository import SQLAlchemyOrderRepository


@pytest_asyncio.fixture
async def sql_orders():
    # 内存 SQLite 只在单个连接内可见
    engine = build_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(bind=engine)
    yield SQLAlchemyOrderRepository(build_session_factory(engine))
    await engine.dispose()


@pytest.fixture(params=["sqlalchemy", "memory"])
def repo(request, sql_orders):
    if request.param == "memory":
        return InMemoryOrderRepository()
    return sql_orders


def _order(external_order_id="ORDER-1", amount="19.99"):
    return Order.pending(external_order_id, "Mock T-Shirt", Decimal(amount), "usd")


@pytest.mark.asyncio
async def test_create_and_read_back(repo):
    created = await repo.create(_order())

    assert created.id is not None
    loaded = await repo.get_by_external_order_id("ORDER-1")
    assert loaded.id == created.id
    assert loaded.amount == Decimal("19.99")
    assert loaded.currency_code == "USD"
    assert loaded.status is OrderStatus.PENDING
    assert loaded.created_at.tzinfo is not None
    assert (await repo.get_by_id(created.id)).external_order_id == "ORDER-1"


@pytest.mark.asyncio
async def test_unknown_ids_return_none(repo):
    assert await repo.get_by_external_order_id("missing") is None
    assert await repo.get_by_id(12345) is None


@pytest.mark.asyncio
async def test_external_order_id_is_unique(repo):
    await repo.create(_order())
    with pytest.raises(OrderAlreadyExistsException):
        await repo.create(_order(amount="1.00"))
    assert len(await repo.list_orders()) == 1


@pytest.mark.asyncio
async def test_update_overwrites_status_only(repo):
    created = await repo.create(_order())
    created.apply_gateway_status("COMPLETED")
    created.product_name = "changed"

    updated = await repo.update(created)

    assert updated.status is OrderStatus.COMPLETED
    assert updated.product_name == "Mock T-Shirt"
    assert updated.updated_at >= updated.created_at

    updated.mark_failed()
    await repo.update(updated)
    updated.apply_gateway_status("completed")
    await repo.update(updated)
    assert (await repo.get_by_external_order_id("ORDER-1")).status is OrderStatus.COMPLETED


@pytest.mark.asyncio
async def test_returned_orders_are_detached_copies(repo):
    created = await repo.create(_order())
    created.mark_failed()
    assert (await repo.get_by_id(created.id)).status is OrderStatus.PENDING


@pytest.mark.asyncio
async def test_list_orders_newest_first_with_status_filter(repo):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for i in range(3):
        order = _order(f"ORDER-{i}")
        order.created_at = base + timedelta(minutes=i)
        if i == 1:
            order.status = OrderStatus.COMPLETED
        await repo.create(order)

    listed = await repo.list_orders()
    assert [o.external_order_id for o in listed] == ["ORDER-2", "ORDER-1", "ORDER-0"]
    assert [o.external_order_id for o in await repo.list_orders(skip=1, limit=1)] == ["ORDER-1"]
    completed = await repo.list_orders(status=OrderStatus.COMPLETED)
    assert [o.external_order_id for o in completed] == ["ORDER-1"]


def test_order_rejects_invalid_fields():
    with pytest.raises(DomainValidationException):
        Order.pending(" ", "x", Decimal("1"), "USD")
    with pytest.raises(DomainValidationException):
        Order.pending("O", "x", Decimal("-1"), "USD")
    with pytest.raises(DomainValidationException):
        Order.pending("O", "x", Decimal("1"), "US")


def test_gateway_status_mapping():
    order = _order()
    assert order.apply_gateway_status("completed") is OrderStatus.COMPLETED
    assert order.apply_gateway_status("VOIDED") is OrderStatus.FAILED
    assert order.apply_gateway_status("") is OrderStatus.FAILED
    assert order.is_terminal()
