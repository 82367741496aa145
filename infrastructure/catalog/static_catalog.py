"""
In-memory product catalog with a small fixed set of products.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from domain.product.entity import Product


DEFAULT_PRODUCTS = (
    Product(id=1, name="Mock T-Shirt", price=Decimal("19.99")),
    Product(id=2, name="Mock Hoodie", price=Decimal("39.99")),
    Product(id=3, name="Mock Sneakers", price=Decimal("59.99")),
)


class StaticProductCatalog:
    def __init__(self, products: Iterable[Product] = DEFAULT_PRODUCTS) -> None:
        self._products = {p.id: p for p in products}

    def get_by_id(self, product_id: int) -> Optional[Product]:
        return self._products.get(product_id)

    def list_products(self) -> list[Product]:
        return list(self._products.values())
