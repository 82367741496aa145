"""
Product catalog port. The catalog is an external, read-only collaborator.
"""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from domain.product.entity import Product


@runtime_checkable
class ProductCatalog(Protocol):
    def get_by_id(self, product_id: int) -> Optional[Product]: ...

    def list_products(self) -> list[Product]: ...
