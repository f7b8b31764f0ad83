# storefront/services/inventory_service.py
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.domain.errors import InsufficientStock, VariantAmbiguous, VariantNotFound
from storefront.domain.variants import (
    Ambiguous,
    Resolved,
    VariantStock,
    normalize_color,
    normalize_size,
    resolve_variant,
)
from storefront.repos.inventory_repo import InventoryRepo
from storefront.utils.settings import ONE_SIZE_LABELS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class InventoryService:
    """
    Per-variant stock ledger.
    -resolving a (color, size) for incomplete cart lines
    -conditional decrement, never below zero
    -best-effort sync of the cached products.stock column
    reserve() does not commit, the caller owns the transaction.
    """

    def __init__(self, db: Session, one_size_labels: Iterable[str] = ONE_SIZE_LABELS):
        self.repo = InventoryRepo(db)
        self.one_size_labels = tuple(one_size_labels)

    def resolve(self, product_id: int, color: str | None, size: str | None, quantity: int) -> Resolved:
        variants = [
            VariantStock(v.color, v.size, v.stock)
            for v in self.repo.get_variants(product_id)
        ]
        result = resolve_variant(variants, color, size, quantity, self.one_size_labels)

        if isinstance(result, Resolved):
            return result
        if isinstance(result, Ambiguous):
            raise VariantAmbiguous(product_id, result.missing)
        raise VariantNotFound(product_id, normalize_color(color), normalize_size(size))

    def available(self, product_id: int, color: str, size: str) -> int:
        stock = self.repo.get_variant_stock(product_id, normalize_color(color), normalize_size(size))
        return stock or 0

    def reserve(self, product_id: int, color: str | None, size: str | None, quantity: int) -> Resolved:
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        variant = self.resolve(product_id, color, size, quantity)

        rowcount = self.repo.decrement_stock(product_id, variant.color, variant.size, quantity)

        #0 rows = stock < quantity at the moment of the update
        if rowcount == 0:
            available = self.repo.get_variant_stock(product_id, variant.color, variant.size) or 0
            logger.warning(
                f"Insufficient stock for product {product_id} "
                f"({variant.color}/{variant.size}): requested {quantity}, available {available}"
            )
            raise InsufficientStock(product_id, variant.color, variant.size, available)

        logger.info(
            f"Reserved {quantity} x product {product_id} ({variant.color}/{variant.size})"
        )
        return variant

    def sync_product_stock(self, product_ids: Iterable[int] | None = None) -> bool:
        """
        Recomputes products.stock as SUM(variant stock). Runs in its own commit
        and never raises.
        """
        ids = None if product_ids is None else sorted(set(product_ids))
        try:
            updated = self.repo.sync_product_stock(ids)
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.warning(f"Stock aggregate sync failed for products {ids}: {e}")
            return False

        logger.info(f"Stock aggregate synced for {updated} products")
        return True
