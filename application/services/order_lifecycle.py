"""
Application service orchestrating the checkout order lifecycle.

create_order: product -> gateway order -> local PENDING order.
capture_order: gateway capture -> reconcile local order -> COMPLETED/FAILED.

The service depends only on application ports and the domain repository.
Adapters are injected from the composition root (API/tests). Every call
fetches a fresh access token; nothing is cached between calls. Store reads
and writes are independent, so concurrent captures of the same order are
not serialized here: the last write wins.
"""
from __future__ import annotations

from typing import Optional

from application.dtos.checkout import (
    AlreadyCaptured,
    CaptureOrderResult,
    CaptureResult,
    CheckoutConfig,
    CreateOrderResult,
)
from application.ports.gateway_errors import GatewayCallError, GatewayResponseError
from application.ports.payment_gateway import AccessTokenProvider, PaymentGateway
from application.ports.product_catalog import ProductCatalog
from application.services.error_translator import ErrorTranslator
from core.logging_config import get_logger
from domain.common.exceptions import (
    BlankOrderIdException,
    GatewayException,
    OrderAlreadyExistsException,
    ProductNotFoundException,
)
from domain.order.entity import Order
from domain.order.repository import OrderRepository
from shared.codes.payment_codes import PaymentCode


logger = get_logger(__name__)


class OrderLifecycleManager:
    def __init__(
        self,
        config: CheckoutConfig,
        catalog: ProductCatalog,
        token_provider: AccessTokenProvider,
        gateway: PaymentGateway,
        orders: OrderRepository,
        translator: Optional[ErrorTranslator] = None,
    ) -> None:
        self.config = config
        self.catalog = catalog
        self.token_provider = token_provider
        self.gateway = gateway
        self.orders = orders
        self.translator = translator or ErrorTranslator()

    async def create_order(self, product_id: int) -> CreateOrderResult:
        product = self.catalog.get_by_id(product_id)
        if product is None:
            logger.warning("checkout_unknown_product", product_id=product_id)
            raise ProductNotFoundException(product_id)

        access_token = await self.token_provider.obtain_access_token()
        try:
            created = await self.gateway.create_order(
                access_token,
                amount=product.price,
                currency_code=self.config.currency_code,
                description=product.name,
                return_url=self.config.return_url,
                cancel_url=self.config.cancel_url,
            )
        except GatewayCallError as exc:
            message = self._translate(exc, operation="Create order")
            logger.error(
                "checkout_create_failed",
                product_id=product_id,
                status_code=exc.status_code,
                error=message,
            )
            raise self._failure(exc, message) from exc

        order = Order.pending(
            external_order_id=created.gateway_order_id,
            product_name=product.name,
            amount=product.price,
            currency_code=self.config.currency_code,
        )
        await self.orders.create(order)
        logger.info(
            "checkout_order_created",
            external_order_id=created.gateway_order_id,
            product=product.name,
            amount=str(product.price),
        )
        return CreateOrderResult(
            gateway_order_id=created.gateway_order_id,
            approval_url=created.approval_url,
        )

    async def capture_order(self, external_order_id: str) -> CaptureOrderResult:
        if not external_order_id or not external_order_id.strip():
            raise BlankOrderIdException()

        access_token = await self.token_provider.obtain_access_token()
        try:
            outcome = await self.gateway.capture_order(access_token, external_order_id)
            if isinstance(outcome, AlreadyCaptured):
                outcome = await self._fetch_captured(access_token, outcome)
        except GatewayCallError as exc:
            await self._mark_failed_if_present(external_order_id)
            message = self._translate(exc, operation="Capture")
            logger.error(
                "checkout_capture_failed",
                external_order_id=external_order_id,
                status_code=exc.status_code,
                error=message,
            )
            raise self._failure(exc, message) from exc

        return await self._reconcile(external_order_id, outcome)

    async def _fetch_captured(self, access_token: str, already: AlreadyCaptured) -> CaptureResult:
        """Resolve a duplicate capture by reading the order's current snapshot."""
        logger.info("checkout_order_already_captured", external_order_id=already.gateway_order_id)
        try:
            return await self.gateway.get_order(access_token, already.gateway_order_id)
        except GatewayCallError as exc:
            logger.warning(
                "checkout_order_fetch_failed",
                external_order_id=already.gateway_order_id,
                error=str(exc),
            )
            # Report the original capture rejection, not the fetch error.
            raise GatewayCallError(
                "Capture",
                status_code=already.status_code,
                body=already.body,
            ) from exc

    async def _reconcile(self, external_order_id: str, result: CaptureResult) -> CaptureOrderResult:
        try:
            order = await self._record_capture(external_order_id, result)
        except Exception as exc:
            logger.error("order_persist_failed", external_order_id=external_order_id, error=str(exc))
            raise GatewayException("Unable to record capture result") from exc

        logger.info(
            "checkout_capture_succeeded",
            external_order_id=external_order_id,
            gateway_status=result.status,
            order_status=order.status.value,
            amount=str(result.amount),
            currency=result.currency_code,
        )
        return CaptureOrderResult(
            status=result.status,
            product_name=order.product_name,
            amount=result.amount,
            currency_code=result.currency_code,
        )

    async def _record_capture(self, external_order_id: str, result: CaptureResult) -> Order:
        order = await self.orders.get_by_external_order_id(external_order_id)
        if order is None:
            recovered = Order.from_capture(
                external_order_id=external_order_id,
                product_name=result.product_name,
                amount=result.amount,
                currency_code=result.currency_code,
            )
            recovered.apply_gateway_status(result.status)
            try:
                created = await self.orders.create(recovered)
            except OrderAlreadyExistsException:
                # A concurrent capture inserted it first; fall through to update.
                order = await self.orders.get_by_external_order_id(external_order_id)
                if order is None:
                    raise
            else:
                logger.info(
                    "order_recovered_from_gateway",
                    external_order_id=external_order_id,
                    amount=str(result.amount),
                )
                return created

        if not order.amount_matches(result.amount):
            logger.warning(
                "order_amount_mismatch",
                external_order_id=external_order_id,
                expected=str(order.amount),
                captured=str(result.amount),
            )
        order.apply_gateway_status(result.status)
        return await self.orders.update(order)

    async def _mark_failed_if_present(self, external_order_id: str) -> None:
        try:
            order = await self.orders.get_by_external_order_id(external_order_id)
            if order is None:
                return
            order.mark_failed()
            await self.orders.update(order)
            logger.info("order_marked_failed", external_order_id=external_order_id)
        except Exception as exc:
            # Never mask the gateway error that brought us here.
            logger.error("order_mark_failed_error", external_order_id=external_order_id, error=str(exc))

    @staticmethod
    def _failure(exc: GatewayCallError, message: str) -> GatewayException:
        code = PaymentCode.GATEWAY_BAD_RESPONSE if isinstance(exc, GatewayResponseError) else PaymentCode.GATEWAY_ERROR
        return GatewayException(message, status_code=exc.status_code, code=code)

    def _translate(self, exc: GatewayCallError, *, operation: str) -> str:
        if isinstance(exc, GatewayResponseError):
            return exc.message
        return self.translator.translate(exc.body, exc.status_code, operation=operation)
