# storefront/domain/errors.py
from decimal import Decimal
from enum import Enum


class CheckoutError(Exception):
    """
    Base for every typed checkout failure. Routers turn it into
    HTTPException(status_code, detail=to_dict()).
    """

    code = "CheckoutError"
    status_code = 400

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message, **self.details}


class InsufficientStock(CheckoutError):
    code = "InsufficientStock"
    status_code = 409

    def __init__(self, product_id: int, color: str | None, size: str | None, available: int):
        super().__init__(
            f"Not enough stock for product {product_id} ({color or '-'} / {size or '-'}), "
            f"available: {available}",
            product_id=product_id,
            variant={"color": color, "size": size},
            available=available,
        )
        self.product_id = product_id
        self.color = color
        self.size = size
        self.available = available


class VariantAmbiguous(CheckoutError):
    code = "VariantAmbiguous"

    def __init__(self, product_id: int, missing: str):
        super().__init__(
            f"Product {product_id} needs a {missing} to be selected",
            product_id=product_id,
            missing=missing,
        )
        self.product_id = product_id
        self.missing = missing


class VariantNotFound(CheckoutError):
    code = "VariantNotFound"
    status_code = 404

    def __init__(self, product_id: int, color: str | None, size: str | None):
        super().__init__(
            f"Product {product_id} has no variant {color or '-'} / {size or '-'}",
            product_id=product_id,
            variant={"color": color, "size": size},
        )
        self.product_id = product_id


class DiscountReason(str, Enum):
    NOT_FOUND = "NotFound"
    INACTIVE = "Inactive"
    NOT_STARTED = "NotStarted"
    EXPIRED = "Expired"
    MAX_USES_REACHED = "MaxUsesReached"
    MIN_ORDER_NOT_MET = "MinOrderNotMet"
    NO_ELIGIBLE_ITEMS = "NoEligibleItems"


_DISCOUNT_MESSAGES = {
    DiscountReason.NOT_FOUND: "Discount code not found",
    DiscountReason.INACTIVE: "Discount code is not active",
    DiscountReason.NOT_STARTED: "Discount code is not valid yet",
    DiscountReason.EXPIRED: "Discount code has expired",
    DiscountReason.MAX_USES_REACHED: "Discount code usage limit reached",
    DiscountReason.MIN_ORDER_NOT_MET: "Order does not reach the minimum amount for this code",
    DiscountReason.NO_ELIGIBLE_ITEMS: "No items in the cart are eligible for this code",
}


class DiscountInvalid(CheckoutError):
    code = "DiscountInvalid"

    def __init__(self, reason: DiscountReason, threshold: Decimal | None = None):
        details = {"reason": reason.value}
        if threshold is not None:
            details["threshold"] = str(threshold)
        super().__init__(_DISCOUNT_MESSAGES[reason], **details)
        self.reason = reason
        self.threshold = threshold


class PaymentNotConfirmed(CheckoutError):
    code = "PaymentNotConfirmed"
    status_code = 402

    def __init__(self, external_payment_id: str | None):
        super().__init__(
            "External payment is missing or not captured yet",
            external_payment_id=external_payment_id,
        )
        self.external_payment_id = external_payment_id


class EmptyCart(CheckoutError):
    code = "EmptyCart"

    def __init__(self):
        super().__init__("Cart is empty")


class AlreadyProcessing(CheckoutError):
    code = "AlreadyProcessing"
    status_code = 409

    def __init__(self, token: str):
        super().__init__("An order with this idempotency key is already being processed")
        self.token = token


class TransactionFailed(CheckoutError):
    code = "TransactionFailed"
    status_code = 500

    def __init__(self, message: str = "Server error while placing order"):
        super().__init__(message)


class IdempotencyUnavailable(CheckoutError):
    code = "IdempotencyUnavailable"
    status_code = 503

    def __init__(self):
        super().__init__("Order submission is temporarily unavailable, retry with the same key")
