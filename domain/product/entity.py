"""
商品实体 - 由外部目录提供，核心流程只读
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from domain.common.exceptions import DomainValidationException


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    price: Decimal

    def __post_init__(self):
        if self.price < 0:
            raise DomainValidationException(
                f"商品价格不能为负数: {self.price}",
                field="price"
            )
