# storefront/api/routers/checkout.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import CheckoutError, EmptyCart
from storefront.domain.pricing import compute_totals
from storefront.domain.schemas import DiscountPreviewIn, DiscountPreviewOut
from storefront.services.cart_service import CartService
from storefront.services.discount_service import DiscountService
from storefront.utils.settings import TAX_RATE

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post("/discount/preview", response_model=DiscountPreviewOut)
def preview_discount(payload: DiscountPreviewIn, db: Session = Depends(get_db)):
    """
    Totals the order would have with this code. Does not count a usage.
    """
    try:
        lines = CartService(db).load(payload.customer_id, payload.selected_items)
        if not lines:
            raise EmptyCart()

        quote = DiscountService(db).validate(payload.code, lines)
    except CheckoutError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())

    totals = compute_totals(lines, quote.amount, payload.shipping_amount, TAX_RATE)

    return {
        "code": quote.code,
        "kind": quote.kind,
        "amount": totals.discount_amount,
        "eligible_subtotal": quote.eligible_subtotal,
        "subtotal": totals.subtotal,
        "tax": totals.tax,
        "shipping_amount": totals.shipping_amount,
        "total": totals.total,
    }
