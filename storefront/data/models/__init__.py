#import all models so SQLAlchemy registers them in Base.metadata

from storefront.data.models.customer import CustomerModel
from storefront.data.models.product import ProductModel, ProductVariantModel
from storefront.data.models.cart_item import CartLineModel
from storefront.data.models.discount import DiscountCodeModel, DiscountCodeProductModel
from storefront.data.models.order import OrderModel, OrderItemModel
from storefront.data.models.payment import PaymentConfirmationModel

__all__ = [
    "CustomerModel",
    "ProductModel",
    "ProductVariantModel",
    "CartLineModel",
    "DiscountCodeModel",
    "DiscountCodeProductModel",
    "OrderModel",
    "OrderItemModel",
    "PaymentConfirmationModel",
]
