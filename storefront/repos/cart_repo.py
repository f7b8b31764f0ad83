# storefront/repos/cart_repo.py
from typing import Iterable, List, Tuple

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartLineModel
from storefront.data.models.product import ProductModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_lines(
        self,
        customer_id: int,
        row_ids: Iterable[int] | None = None,
    ) -> List[Tuple[CartLineModel, ProductModel]]:
        stmt = (
            select(CartLineModel, ProductModel)
            .join(ProductModel, CartLineModel.product_id == ProductModel.id)
            .where(CartLineModel.customer_id == customer_id)
            .order_by(CartLineModel.id.desc())
        )
        if row_ids is not None:
            stmt = stmt.where(CartLineModel.id.in_(list(row_ids)))

        return [(line, product) for line, product in self.db.execute(stmt).all()]

    def find_variant_line(
        self,
        customer_id: int,
        product_id: int,
        color: str | None,
        size: str | None,
    ) -> CartLineModel | None:
        return self.db.execute(
            select(CartLineModel).where(
                CartLineModel.customer_id == customer_id,
                CartLineModel.product_id == product_id,
                CartLineModel.color == color,
                CartLineModel.size == size,
            )
        ).scalar_one_or_none()

    def add_line(self, line: CartLineModel) -> CartLineModel:
        self.db.add(line)
        self.db.flush()
        return line

    def delete_lines(self, customer_id: int, row_ids: Iterable[int]) -> int:
        # scoped to the customer, foreign rows are never touched
        result = self.db.execute(
            delete(CartLineModel)
            .where(
                CartLineModel.customer_id == customer_id,
                CartLineModel.id.in_(list(row_ids)),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
