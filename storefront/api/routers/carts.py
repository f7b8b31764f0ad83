# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import CheckoutError
from storefront.domain.schemas import CartLineIn, CartOut
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/carts", tags=["carts"])


def get_service(db: Session):
    return CartService(db=db)


@router.get("/{customer_id}", response_model=CartOut)
def get_cart(customer_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    return svc.get_cart(customer_id)


@router.post("/{customer_id}/items", response_model=CartOut)
def add_item(
    customer_id: int,
    payload: CartLineIn,
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add_line(
            customer_id=customer_id,
            product_id=payload.product_id,
            color=payload.color,
            size=payload.size,
            quantity=payload.quantity,
        )
    except CheckoutError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{customer_id}/items/{row_id}", response_model=CartOut)
def remove_item(
    customer_id: int,
    row_id: int,
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.remove_line(customer_id, row_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
