# storefront/services/cart_service.py
from decimal import Decimal
from typing import Any, Dict, Iterable, List

from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartLineModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import InsufficientStock
from storefront.domain.pricing import money, promo_unit_price, subtotal_of
from storefront.domain.schemas import CartLine
from storefront.repos.cart_repo import CartRepo
from storefront.services.inventory_service import InventoryService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart snapshot (query) and the cart line commands feeding it.
    load() is read only, prices are derived from the product row each time.
    """

    def __init__(self, db: Session, inventory: InventoryService | None = None):
        self.db = db
        self.repo = CartRepo(db)
        self.inventory = inventory or InventoryService(db)

    #query
    def load(self, customer_id: int, row_ids: Iterable[int] | None = None) -> List[CartLine]:
        if row_ids is not None:
            row_ids = list(row_ids)
            if not row_ids:
                return []

        rows = self.repo.get_lines(customer_id, row_ids)

        return [
            CartLine(
                cart_row_id=line.id,
                customer_id=line.customer_id,
                product_id=product.id,
                product_name=product.name,
                image_url=product.image_url,
                color=line.color,
                size=line.size,
                quantity=line.quantity,
                unit_price=promo_unit_price(product.price, product.promo_active, product.promo_percent),
                original_unit_price=money(product.price),
                promo_active=bool(product.promo_active),
                promo_percent=Decimal(str(product.promo_percent or 0)),
            )
            for line, product in rows
        ]

    def get_cart(self, customer_id: int) -> Dict[str, Any]:
        lines = self.load(customer_id)
        return {
            "customer_id": customer_id,
            "items": lines,
            "subtotal": subtotal_of(lines),
        }

    #commands
    def add_line(
        self,
        customer_id: int,
        product_id: int,
        color: str | None,
        size: str | None,
        quantity: int,
    ) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        if not self.db.get(ProductModel, product_id):
            raise ValueError("Product does not exist")

        variant = self.inventory.resolve(product_id, color, size, quantity)

        existing = self.repo.find_variant_line(customer_id, product_id, variant.color, variant.size)
        existing_qty = existing.quantity if existing else 0
        stock = self.inventory.available(product_id, variant.color, variant.size)

        # stock is only checked here, reservation happens at order placement
        if existing_qty + quantity > stock:
            raise InsufficientStock(product_id, variant.color, variant.size, max(0, stock - existing_qty))

        if existing:
            logger.info(
                f"Product {product_id} ({variant.color}/{variant.size}) already in cart of "
                f"customer {customer_id}, quantity {existing_qty} -> {existing_qty + quantity}"
            )
            existing.quantity = existing_qty + quantity
        else:
            logger.info(f"Adding product {product_id} ({variant.color}/{variant.size}) to cart of customer {customer_id}")
            self.repo.add_line(
                CartLineModel(
                    customer_id=customer_id,
                    product_id=product_id,
                    color=variant.color,
                    size=variant.size,
                    quantity=quantity,
                )
            )

        self.repo.commit()
        return self.get_cart(customer_id)

    def remove_line(self, customer_id: int, row_id: int) -> Dict[str, Any]:
        deleted = self.repo.delete_lines(customer_id, [row_id])
        if deleted == 0:
            self.repo.rollback()
            raise ValueError("Cart item does not exist")

        self.repo.commit()
        logger.info(f"Removed cart row {row_id} of customer {customer_id}")
        return self.get_cart(customer_id)
