# storefront/services/discount_service.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.domain.errors import DiscountInvalid, DiscountReason
from storefront.domain.pricing import ZERO, money, subtotal_of
from storefront.domain.schemas import CartLine, DiscountQuote
from storefront.repos.discount_repo import DiscountRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def discount_amount(kind: str, value, eligible_subtotal: Decimal) -> Decimal:
    if kind == "percent":
        amount = money(eligible_subtotal * Decimal(str(value)) / 100)
    else:
        amount = money(value)
    return min(max(amount, ZERO), eligible_subtotal)


def _as_utc(value: datetime | None) -> datetime | None:
    # sqlite gives naive datetimes back
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class DiscountService:
    def __init__(self, db: Session):
        self.repo = DiscountRepo(db)

    def validate(
        self,
        code: str,
        lines: Sequence[CartLine],
        now: datetime | None = None,
    ) -> DiscountQuote:
        """
        Checks a code against the given cart lines, read only.

        Order of checks: exists, active, date window, usage cap, scope,
        minimum order. The first failing check raises DiscountInvalid.
        """
        now = _as_utc(now) or datetime.now(timezone.utc)

        discount = self.repo.get_by_code(code) if code and code.strip() else None
        if not discount:
            raise DiscountInvalid(DiscountReason.NOT_FOUND)

        if not discount.active:
            raise DiscountInvalid(DiscountReason.INACTIVE)

        start = _as_utc(discount.start_date)
        end = _as_utc(discount.end_date)
        if start and now < start:
            raise DiscountInvalid(DiscountReason.NOT_STARTED)
        if end and now > end:
            raise DiscountInvalid(DiscountReason.EXPIRED)

        if discount.max_uses is not None and discount.uses_so_far >= discount.max_uses:
            raise DiscountInvalid(DiscountReason.MAX_USES_REACHED)

        scope = self.repo.get_scope(discount.id)
        eligible = [line for line in lines if not scope or line.product_id in scope]
        if scope and not eligible:
            raise DiscountInvalid(DiscountReason.NO_ELIGIBLE_ITEMS)

        eligible_subtotal = subtotal_of(eligible)
        threshold = money(discount.min_order_amount or 0)
        if eligible_subtotal < threshold:
            raise DiscountInvalid(DiscountReason.MIN_ORDER_NOT_MET, threshold=threshold)

        amount = discount_amount(discount.kind, discount.value, eligible_subtotal)

        logger.info(
            f"Discount {discount.code} valid: {amount} off eligible subtotal {eligible_subtotal}"
        )

        return DiscountQuote(
            discount_id=discount.id,
            code=discount.code,
            kind=discount.kind,
            amount=amount,
            eligible_subtotal=eligible_subtotal,
        )

    def redeem(self, discount_id: int) -> bool:
        """Counts one use. Only called after the order has committed, never raises."""
        try:
            rowcount = self.repo.increment_uses(discount_id)
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.warning(f"Failed to record usage of discount {discount_id}: {e}")
            return False

        if rowcount == 0:
            logger.warning(f"Discount {discount_id} already at max uses, usage not recorded")
            return False
        return True
