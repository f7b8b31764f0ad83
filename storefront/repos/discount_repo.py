# storefront/repos/discount_repo.py
from typing import Set

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from storefront.data.models.discount import DiscountCodeModel, DiscountCodeProductModel


class DiscountRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_code(self, code: str) -> DiscountCodeModel | None:
        return self.db.execute(
            select(DiscountCodeModel).where(
                func.upper(DiscountCodeModel.code) == code.strip().upper()
            )
        ).scalar_one_or_none()

    def get_scope(self, discount_id: int) -> Set[int]:
        return set(
            self.db.execute(
                select(DiscountCodeProductModel.product_id).where(
                    DiscountCodeProductModel.discount_code_id == discount_id
                )
            ).scalars()
        )

    def increment_uses(self, discount_id: int) -> int:
        #never goes past max_uses
        result = self.db.execute(
            update(DiscountCodeModel)
            .where(
                DiscountCodeModel.id == discount_id,
                or_(
                    DiscountCodeModel.max_uses.is_(None),
                    DiscountCodeModel.uses_so_far < DiscountCodeModel.max_uses,
                ),
            )
            .values(uses_so_far=DiscountCodeModel.uses_so_far + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
