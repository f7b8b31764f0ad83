# storefront/repos/inventory_repo.py
from typing import Iterable, List

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel, ProductVariantModel


class InventoryRepo:
    """color and size arguments are expected normalized (lower / upper case)."""

    def __init__(self, db: Session):
        self.db = db

    def get_variants(self, product_id: int) -> List[ProductVariantModel]:
        return list(
            self.db.execute(
                select(ProductVariantModel)
                .where(ProductVariantModel.product_id == product_id)
                .order_by(ProductVariantModel.id)
            ).scalars()
        )

    def get_variant_stock(self, product_id: int, color: str, size: str) -> int | None:
        return self.db.execute(
            select(ProductVariantModel.stock).where(
                ProductVariantModel.product_id == product_id,
                func.lower(ProductVariantModel.color) == color,
                func.upper(ProductVariantModel.size) == size,
            )
        ).scalar_one_or_none()

    def decrement_stock(self, product_id: int, color: str, size: str, quantity: int) -> int:
        """
        Conditional decrement, the WHERE re-checks stock so the row lock taken
        by the UPDATE is the only serialization point.
        """
        result = self.db.execute(
            update(ProductVariantModel)
            .where(
                ProductVariantModel.product_id == product_id,
                func.lower(ProductVariantModel.color) == color,
                func.upper(ProductVariantModel.size) == size,
                ProductVariantModel.stock >= quantity,
            )
            .values(stock=ProductVariantModel.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def sync_product_stock(self, product_ids: Iterable[int] | None = None) -> int:
        total = (
            select(func.coalesce(func.sum(ProductVariantModel.stock), 0))
            .where(ProductVariantModel.product_id == ProductModel.id)
            .scalar_subquery()
        )
        stmt = update(ProductModel).values(stock=total)
        if product_ids is not None:
            stmt = stmt.where(ProductModel.id.in_(list(product_ids)))

        result = self.db.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
