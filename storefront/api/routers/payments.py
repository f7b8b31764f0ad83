# storefront/api/routers/payments.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import PaymentCaptureIn, PaymentStatusOut
from storefront.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/{external_payment_id}/capture", response_model=PaymentStatusOut)
def capture(external_payment_id: str, payload: PaymentCaptureIn, db: Session = Depends(get_db)):
    """
    Capture callback, called once the provider reports the capture outcome.
    """
    paid = PaymentService(db).record_capture(external_payment_id, payload.status)
    return {"external_payment_id": external_payment_id, "paid": paid}


@router.get("/{external_payment_id}/status", response_model=PaymentStatusOut)
def status(external_payment_id: str, db: Session = Depends(get_db)):
    paid = PaymentService(db).is_confirmed(external_payment_id)
    return {"external_payment_id": external_payment_id, "paid": paid}
