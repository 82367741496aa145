"""领域层业务异常定义，供领域、应用与基础设施使用。

核心（core）层仅负责全局映射与异常处理，尽量避免领域层反向依赖核心层。
"""
from __future__ import annotations

from typing import Optional
from shared.codes import BusinessCode
from shared.codes.payment_codes import PaymentCode


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


class DomainValidationException(BusinessException):
    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(
            code=BusinessCode.PARAM_VALIDATION_ERROR,
            message=message,
            error_type="DomainValidationError",
            details=details,
            field=field,
        )


class ProductNotFoundException(DomainValidationException):
    def __init__(self, product_id: Optional[int] = None):
        details = {"product_id": product_id} if product_id is not None else None
        super().__init__("Invalid product id", field="product_id", details=details)


class BlankOrderIdException(DomainValidationException):
    def __init__(self):
        super().__init__("Gateway order ID is required", field="order_id")


class OrderNotFoundException(BusinessException):
    def __init__(self, external_order_id: str):
        super().__init__(
            code=BusinessCode.NOT_FOUND,
            message="Order not found",
            error_type="OrderNotFound",
            details={"external_order_id": external_order_id},
        )


class OrderAlreadyExistsException(BusinessException):
    """external_order_id 必须全局唯一"""

    def __init__(self, external_order_id: str):
        super().__init__(
            code=BusinessCode.ORDER_ALREADY_EXISTS,
            message=f"Order {external_order_id} already exists",
            error_type="OrderAlreadyExists",
            details={"external_order_id": external_order_id},
        )


class GatewayUnavailableException(BusinessException):
    """Token exchange with the gateway failed."""

    def __init__(self, message: str = "Unable to obtain gateway access token", *, details: Optional[dict] = None):
        super().__init__(
            code=PaymentCode.GATEWAY_UNAVAILABLE,
            message=message,
            error_type="GatewayUnavailable",
            details=details,
        )


class GatewayException(BusinessException):
    """Gateway operation failed; message is already short and user-safe."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        code: int = PaymentCode.GATEWAY_ERROR,
    ):
        self.status_code = status_code
        super().__init__(
            code=code,
            message=message,
            error_type="GatewayError",
            details={"status_code": status_code} if status_code is not None else None,
        )
