"""
订单领域实体 - 订单聚合根
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from domain.common.exceptions import DomainValidationException
from shared.codes.payment_codes import GATEWAY_COMPLETED_STATUS


class OrderStatus(str, Enum):
    """订单状态枚举"""
    PENDING = "PENDING"        # 已在网关创建，等待买家授权
    COMPLETED = "COMPLETED"    # 扣款完成
    FAILED = "FAILED"          # 扣款失败


def _ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """确保时间为 UTC 时区"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Order:
    """
    订单聚合根 - 记录一次购买尝试及其结果

    业务规则：
    1. external_order_id 创建后不可变，且全局唯一（由仓储保证）
    2. amount / currency_code 记录创建时的值，扣款金额不一致只告警不修正
    3. 状态写入是覆盖而非受保护的迁移：FAILED 的订单重试扣款成功后会变为 COMPLETED
    """

    id: Optional[int]
    external_order_id: str
    product_name: str
    amount: Decimal
    currency_code: str
    status: OrderStatus = OrderStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """初始化后验证"""
        self._validate_external_order_id()
        self._validate_amount()
        self._validate_currency()
        self.created_at = _ensure_utc(self.created_at)
        self.updated_at = _ensure_utc(self.updated_at)

    def _validate_external_order_id(self) -> None:
        if not self.external_order_id or not self.external_order_id.strip():
            raise DomainValidationException(
                "网关订单ID不能为空",
                field="external_order_id"
            )

    def _validate_amount(self) -> None:
        """业务规则：金额不能为负数"""
        if self.amount < 0:
            raise DomainValidationException(
                f"订单金额不能为负数: {self.amount}",
                field="amount"
            )

    def _validate_currency(self) -> None:
        """业务规则：货币代码必须是3位字母"""
        if not self.currency_code or len(self.currency_code) != 3 or not self.currency_code.isalpha():
            raise DomainValidationException(
                f"无效的货币代码: {self.currency_code}",
                field="currency_code"
            )

    @classmethod
    def pending(
        cls,
        external_order_id: str,
        product_name: str,
        amount: Decimal,
        currency_code: str,
    ) -> "Order":
        """网关下单成功后创建的本地订单"""
        now = _now()
        return cls(
            id=None,
            external_order_id=external_order_id,
            product_name=product_name,
            amount=amount,
            currency_code=currency_code.upper(),
            status=OrderStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def from_capture(
        cls,
        external_order_id: str,
        product_name: str,
        amount: Decimal,
        currency_code: str,
    ) -> "Order":
        """本地无记录时，依据网关扣款数据补建订单"""
        return cls.pending(external_order_id, product_name, amount, currency_code)

    def amount_matches(self, amount: Decimal) -> bool:
        # Decimal 比较忽略精度差异：19.9 == 19.90
        return self.amount == amount

    def apply_gateway_status(self, gateway_status: str) -> OrderStatus:
        """按网关状态覆盖本地状态（不校验当前状态）"""
        if (gateway_status or "").upper() == GATEWAY_COMPLETED_STATUS:
            self.status = OrderStatus.COMPLETED
        else:
            self.status = OrderStatus.FAILED
        self.updated_at = _now()
        return self.status

    def mark_failed(self) -> None:
        self.status = OrderStatus.FAILED
        self.updated_at = _now()

    def is_terminal(self) -> bool:
        """检查是否为终态"""
        return self.status in (OrderStatus.COMPLETED, OrderStatus.FAILED)
