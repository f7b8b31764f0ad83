# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response
from sqlalchemy.orm import Session

from storefront.api.deps import get_idempotency_guard, session_scope
from storefront.data.database import get_db
from storefront.domain.errors import CheckoutError
from storefront.domain.schemas import CheckoutContext, OrderCreate, OrderOut, PlacementOut
from storefront.services.idempotency_service import IdempotencyGuard
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session, guard: IdempotencyGuard):
    return OrderService(db, idempotency_guard=guard)


@router.post("/", response_model=PlacementOut, status_code=201)
def create_order(
    payload: OrderCreate,
    response: Response,
    db: Session = Depends(get_db),
    guard: IdempotencyGuard = Depends(get_idempotency_guard),
    x_session_id: str | None = Header(None),
    idempotency_key: str | None = Header(None),
):
    """
    Places an order from the customer's cart (or the selected rows of it).
    A retry with the same Idempotency-Key returns the first order with 200.
    """
    svc = get_service(db, guard)
    context = CheckoutContext(
        customer_id=payload.customer_id,
        session_id=session_scope(payload.customer_id, x_session_id),
    )
    try:
        result = svc.place_order(
            context,
            shipping=payload.shipping,
            payment_method=payload.payment_method,
            shipping_amount=payload.shipping_amount,
            row_ids=payload.selected_items,
            discount_code=payload.discount_code,
            idempotency_token=idempotency_key or payload.idempotency_key,
            external_payment_id=payload.paypal_order_id,
        )
        order = svc.get_order(result.order_id, payload.customer_id)
    except CheckoutError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if result.replayed:
        response.status_code = 200

    return {
        "order_id": result.order_id,
        "replayed": result.replayed,
        "order": order,
    }


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    customer_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = OrderService(db)
    try:
        return svc.get_order(order_id, customer_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
