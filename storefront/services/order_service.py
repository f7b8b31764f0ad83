# storefront/services/order_service.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List

from redis.exceptions import RedisError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel, OrderItemModel
from storefront.domain.errors import (
    CheckoutError,
    EmptyCart,
    IdempotencyUnavailable,
    PaymentNotConfirmed,
    TransactionFailed,
)
from storefront.domain.pricing import OrderTotals, compute_totals
from storefront.domain.schemas import (
    CartLine,
    CheckoutContext,
    DiscountQuote,
    PaymentMethod,
    ShippingInfo,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.cart_service import CartService
from storefront.services.customer_service import CustomerService
from storefront.services.discount_service import DiscountService
from storefront.services.idempotency_service import IdempotencyGuard
from storefront.services.inventory_service import InventoryService
from storefront.services.notification_service import NotificationService
from storefront.services.payment_service import PaymentService
from storefront.utils.settings import DEFAULT_SHIPPING_AMOUNT, TAX_RATE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

INITIAL_STATUS = "Processing"


@dataclass(frozen=True)
class PlacementResult:
    order_id: int
    replayed: bool = False


class OrderService:
    """
    Order placement transaction and order queries.

    place_order() is all-or-nothing: stock decrements, the order, its lines
    and the deletion of the consumed cart rows commit together or not at all.
    Work after the commit (stock cache, discount usage, idempotency record,
    notification) is best-effort and never changes the outcome.
    """

    def __init__(
        self,
        db: Session,
        idempotency_guard: IdempotencyGuard | None = None,
        tax_rate: Decimal = TAX_RATE,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.inventory = InventoryService(db)
        self.cart_service = CartService(db, inventory=self.inventory)
        self.discounts = DiscountService(db)
        self.payments = PaymentService(db)
        self.customers = CustomerService(db)
        self.idempotency = idempotency_guard
        self.notification_service = NotificationService()
        self.tax_rate = tax_rate

    # =====================================================
    # COMMANDS
    # =====================================================
    def place_order(
        self,
        context: CheckoutContext,
        shipping: ShippingInfo,
        payment_method: PaymentMethod | str,
        shipping_amount: Decimal = DEFAULT_SHIPPING_AMOUNT,
        row_ids: Iterable[int] | None = None,
        discount_code: str | None = None,
        idempotency_token: str | None = None,
        external_payment_id: str | None = None,
    ) -> PlacementResult:
        payment_method = PaymentMethod(payment_method)
        self.customers.ensure_can_order(context.customer_id)

        token = idempotency_token or None
        if token:
            if self.idempotency is None:
                raise RuntimeError("Idempotency key given but no idempotency store configured")

            try:
                existing_order_id = self.idempotency.begin(context.idempotency_scope, token)
            except RedisError as e:
                logger.error(f"Idempotency store unavailable for customer {context.customer_id}: {e}")
                raise IdempotencyUnavailable() from e

            if existing_order_id is not None:
                logger.info(
                    f"Idempotency key replay for customer {context.customer_id}, "
                    f"returning order {existing_order_id}"
                )
                return PlacementResult(order_id=existing_order_id, replayed=True)

        try:
            order_id, lines, quote = self._place(
                context,
                shipping,
                payment_method,
                shipping_amount,
                row_ids,
                discount_code,
                external_payment_id,
            )
        except Exception as e:
            if token:
                self._release_token(context, token)
            self._notify_failed(context.customer_id, e)
            raise

        self._after_commit(context, token, order_id, lines, quote)
        return PlacementResult(order_id=order_id, replayed=False)

    def _place(
        self,
        context: CheckoutContext,
        shipping: ShippingInfo,
        payment_method: PaymentMethod,
        shipping_amount: Decimal,
        row_ids: Iterable[int] | None,
        discount_code: str | None,
        external_payment_id: str | None,
    ):
        customer_id = context.customer_id

        try:
            if payment_method.is_external:
                if not self.payments.is_confirmed(external_payment_id):
                    raise PaymentNotConfirmed(external_payment_id)
            else:
                external_payment_id = None

            lines = self.cart_service.load(customer_id, row_ids)
            if not lines:
                raise EmptyCart()

            # strict: a code that fails now rejects the whole order
            quote = self.discounts.validate(discount_code, lines) if discount_code else None

            totals = compute_totals(
                lines,
                quote.amount if quote else 0,
                shipping_amount,
                self.tax_rate,
            )

            order = self.repo.add_order(
                self._build_order(customer_id, shipping, payment_method, external_payment_id, quote, totals)
            )
            order_id = order.id

            resolved = [
                (line, self.inventory.resolve(line.product_id, line.color, line.size, line.quantity))
                for line in lines
            ]
            # fixed lock order across concurrent placements
            resolved.sort(key=lambda pair: (pair[0].product_id, pair[1].color, pair[1].size))

            items = []
            for line, variant in resolved:
                self.inventory.reserve(line.product_id, variant.color, variant.size, line.quantity)
                items.append(
                    OrderItemModel(
                        order_id=order_id,
                        product_id=line.product_id,
                        product_name=line.product_name,
                        color=variant.color,
                        size=variant.size,
                        quantity=line.quantity,
                        price=line.unit_price,
                        image_url=line.image_url,
                    )
                )
            self.repo.add_items(items)

            # only the rows that were part of this placement
            deleted = self.cart_repo.delete_lines(customer_id, [line.cart_row_id for line in lines])
            if deleted != len(lines):
                raise TransactionFailed("Cart changed while the order was being placed")

            self.repo.commit()

        except CheckoutError as e:
            self.repo.rollback()
            logger.warning(f"Order placement for customer {customer_id} rejected: {e.code} {e.message}")
            raise
        except IntegrityError as e:
            self.repo.rollback()
            logger.warning(f"Order placement for customer {customer_id} hit a constraint: {e}")
            if external_payment_id:
                raise TransactionFailed("This payment is already attached to an order") from e
            raise TransactionFailed() from e
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.exception(f"Order placement for customer {customer_id} failed")
            raise TransactionFailed() from e
        except Exception:
            self.repo.rollback()
            raise

        logger.info(
            f"Order {order_id} placed for customer {customer_id}: "
            f"{len(lines)} lines, total {totals.total} ({payment_method.value})"
        )
        return order_id, lines, quote

    @staticmethod
    def _build_order(
        customer_id: int,
        shipping: ShippingInfo,
        payment_method: PaymentMethod,
        external_payment_id: str | None,
        quote: DiscountQuote | None,
        totals: OrderTotals,
    ) -> OrderModel:
        return OrderModel(
            customer_id=customer_id,
            first_name=shipping.first_name,
            last_name=shipping.last_name,
            address=shipping.address,
            city=shipping.city,
            province=shipping.province,
            zipcode=shipping.zipcode,
            phone=shipping.phone,
            email=shipping.email,
            payment_method=payment_method.value,
            paypal_order_id=external_payment_id,
            payment_completed=payment_method.is_external,
            discount_code=quote.code if quote else None,
            subtotal=totals.subtotal,
            discount_amount=totals.discount_amount,
            tax=totals.tax,
            shipping_amount=totals.shipping_amount,
            total=totals.total,
            status=INITIAL_STATUS,
        )

    def _after_commit(
        self,
        context: CheckoutContext,
        token: str | None,
        order_id: int,
        lines: List[CartLine],
        quote: DiscountQuote | None,
    ):
        # the order is placed, nothing below may fail it
        self.inventory.sync_product_stock(line.product_id for line in lines)

        if quote:
            self.discounts.redeem(quote.discount_id)

        if token:
            try:
                self.idempotency.resolve(context.idempotency_scope, token, order_id)
            except RedisError as e:
                logger.warning(f"Failed to record idempotency key for order {order_id}: {e}")

        try:
            self.notification_service.send_order_notification(context.customer_id, order_id)
        except Exception as e:
            logger.warning(f"Failed to queue notification for order {order_id}: {e}")

    def _release_token(self, context: CheckoutContext, token: str):
        try:
            self.idempotency.release(context.idempotency_scope, token)
        except RedisError as e:
            logger.warning(f"Failed to release idempotency key {token}: {e}")

    def _notify_failed(self, customer_id: int, error: Exception):
        reason = error.code if isinstance(error, CheckoutError) else type(error).__name__
        try:
            self.notification_service.send_order_failed_notification(customer_id, reason)
        except Exception as e:
            logger.warning(f"Failed to queue failure notification for customer {customer_id}: {e}")

    # =====================================================
    # QUERY
    # =====================================================
    def get_order(self, order_id: int, customer_id: int) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)

        if not order:
            raise ValueError("Order does not exist")

        if order.customer_id != customer_id:
            raise PermissionError("No access to this order")

        return {
            "id": order.id,
            "customer_id": order.customer_id,
            "payment_method": order.payment_method,
            "paypal_order_id": order.paypal_order_id,
            "payment_completed": order.payment_completed,
            "discount_code": order.discount_code,
            "subtotal": order.subtotal,
            "discount_amount": order.discount_amount,
            "tax": order.tax,
            "shipping_amount": order.shipping_amount,
            "total": order.total,
            "status": order.status,
            "created_at": order.created_at,
            "items": [
                {
                    "product_id": i.product_id,
                    "product_name": i.product_name,
                    "color": i.color,
                    "size": i.size,
                    "quantity": i.quantity,
                    "price": i.price,
                    "image_url": i.image_url,
                }
                for i in order.items
            ],
        }
