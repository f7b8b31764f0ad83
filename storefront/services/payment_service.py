# storefront/services/payment_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.payment import PaymentConfirmationModel
from storefront.repos.payment_repo import PaymentRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CAPTURE_COMPLETED = "COMPLETED"


class PaymentService:
    """
    Confirmed/unconfirmed state of external payments (PayPal).
    A payment id goes unconfirmed -> confirmed once and stays there.
    """

    def __init__(self, db: Session):
        self.repo = PaymentRepo(db)

    def is_confirmed(self, external_payment_id: str | None) -> bool:
        if not external_payment_id:
            return False
        return self.repo.get_confirmation(external_payment_id) is not None

    def confirm(self, external_payment_id: str, provider: str = "PayPal") -> bool:
        """Returns True only for the call that actually confirmed the payment."""
        if self.is_confirmed(external_payment_id):
            return False

        try:
            self.repo.add_confirmation(
                PaymentConfirmationModel(
                    external_payment_id=external_payment_id,
                    provider=provider,
                )
            )
        except IntegrityError:
            # concurrent capture callback won
            self.repo.rollback()
            return False

        logger.info(f"Payment {external_payment_id} ({provider}) confirmed")
        return True

    def record_capture(self, external_payment_id: str, status: str, provider: str = "PayPal") -> bool:
        if (status or "").upper() == CAPTURE_COMPLETED:
            self.confirm(external_payment_id, provider)
        else:
            logger.warning(f"Payment {external_payment_id} capture reported status {status}")
        return self.is_confirmed(external_payment_id)
