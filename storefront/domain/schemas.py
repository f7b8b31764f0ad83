# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from decimal import Decimal
from datetime import datetime
from enum import Enum

from storefront.utils.settings import DEFAULT_SHIPPING_AMOUNT


class PaymentMethod(str, Enum):
    COD = "COD"
    CARD = "Card"
    PAYPAL = "PayPal"

    @property
    def is_external(self) -> bool:
        return self is PaymentMethod.PAYPAL


class CheckoutContext(BaseModel):
    """Per-request identity passed into the checkout services."""

    customer_id: int
    session_id: str

    @property
    def idempotency_scope(self) -> str:
        # a client supplied session id is only unique within its customer
        return f"{self.customer_id}:{self.session_id}"


class CustomerCreate(BaseModel):
    id: int = Field(..., gt=0)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field("", max_length=100)
    email: Optional[str] = None


class CustomerRead(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    is_banned: bool = False

    model_config = ConfigDict(from_attributes=True)


class CartLineIn(BaseModel):
    """Adding a product to the cart. Color/size may be left out."""

    product_id: int = Field(..., gt=0)
    color: Optional[str] = Field(None, max_length=50)
    size: Optional[str] = Field(None, max_length=20)
    quantity: int = Field(1, gt=0)


class CartLine(BaseModel):
    """Priced cart row, unit_price already includes the product promo."""

    cart_row_id: int
    customer_id: int
    product_id: int
    product_name: str
    image_url: Optional[str] = None
    color: Optional[str] = None
    size: Optional[str] = None
    quantity: int
    unit_price: Decimal
    original_unit_price: Decimal
    promo_active: bool = False
    promo_percent: Decimal = Decimal("0")

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class CartOut(BaseModel):
    customer_id: int
    items: List[CartLine]
    subtotal: Decimal


class ShippingInfo(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    province: Optional[str] = Field(None, max_length=100)
    zipcode: Optional[str] = Field(None, max_length=20)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=255)


class OrderCreate(BaseModel):
    customer_id: int = Field(..., gt=0)
    shipping: ShippingInfo
    payment_method: PaymentMethod
    shipping_amount: Decimal = Field(DEFAULT_SHIPPING_AMOUNT, ge=0)
    selected_items: Optional[List[int]] = Field(
        None, description="Cart row ids for a partial checkout"
    )
    discount_code: Optional[str] = Field(None, max_length=64)
    paypal_order_id: Optional[str] = Field(None, max_length=64)
    idempotency_key: Optional[str] = Field(
        None, max_length=128, description="Used when the Idempotency-Key header is absent"
    )


class OrderItemOut(BaseModel):
    product_id: Optional[int] = None
    product_name: str
    color: Optional[str] = None
    size: Optional[str] = None
    quantity: int
    price: Decimal
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    customer_id: int
    payment_method: str
    paypal_order_id: Optional[str] = None
    payment_completed: bool
    discount_code: Optional[str] = None
    subtotal: Decimal
    discount_amount: Decimal
    tax: Decimal
    shipping_amount: Decimal
    total: Decimal
    status: str
    created_at: datetime
    items: List[OrderItemOut] = []

    model_config = ConfigDict(from_attributes=True)


class PlacementOut(BaseModel):
    success: bool = True
    order_id: int
    replayed: bool = False
    order: OrderOut


class DiscountPreviewIn(BaseModel):
    customer_id: int = Field(..., gt=0)
    code: str = Field(..., min_length=1, max_length=64)
    selected_items: Optional[List[int]] = None
    shipping_amount: Decimal = Field(DEFAULT_SHIPPING_AMOUNT, ge=0)


class DiscountQuote(BaseModel):
    discount_id: int
    code: str
    kind: str
    amount: Decimal
    eligible_subtotal: Decimal


class DiscountPreviewOut(BaseModel):
    code: str
    kind: str
    amount: Decimal
    eligible_subtotal: Decimal
    subtotal: Decimal
    tax: Decimal
    shipping_amount: Decimal
    total: Decimal


class PaymentCaptureIn(BaseModel):
    status: str = Field(..., description="Capture status reported by the provider")


class PaymentStatusOut(BaseModel):
    external_payment_id: str
    paid: bool
