"""
Checkout API routes.

Keep this thin: validation of the product id / order id, gateway calls and
state transitions all live in OrderLifecycleManager.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from api.dependencies import (
    get_order_lifecycle_manager,
    get_order_repository,
    get_product_catalog,
)
from application.dtos.checkout import CreateOrderRequest, OrderDTO, ProductDTO
from application.ports.product_catalog import ProductCatalog
from application.services.order_lifecycle import OrderLifecycleManager
from core.response import success_response
from domain.common.exceptions import OrderNotFoundException
from domain.order.repository import OrderRepository


router = APIRouter(tags=["Checkout"])


@router.get("/products", summary="List products")
async def list_products(catalog: ProductCatalog = Depends(get_product_catalog)):
    items = [ProductDTO(id=p.id, name=p.name, price=p.price) for p in catalog.list_products()]
    return success_response(data=items)


@router.post("/paypal/create-order", summary="Create gateway order")
async def create_order(
    payload: CreateOrderRequest,
    manager: OrderLifecycleManager = Depends(get_order_lifecycle_manager),
):
    result = await manager.create_order(payload.product_id)
    return success_response(data=result, message="Order created")


@router.post("/paypal/capture-order", summary="Capture gateway order")
async def capture_order(
    order_id: str = Query(default="", alias="orderId"),
    manager: OrderLifecycleManager = Depends(get_order_lifecycle_manager),
):
    result = await manager.capture_order(order_id)
    return success_response(data=result, message="Order captured")


@router.get("/orders/{external_order_id}", summary="Get local order")
async def get_order(
    external_order_id: str,
    orders: OrderRepository = Depends(get_order_repository),
):
    order = await orders.get_by_external_order_id(external_order_id)
    if order is None:
        raise OrderNotFoundException(external_order_id)
    dto = OrderDTO(
        id=order.id,
        external_order_id=order.external_order_id,
        product_name=order.product_name,
        amount=order.amount,
        currency_code=order.currency_code,
        status=order.status.value,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )
    return success_response(data=dto)
