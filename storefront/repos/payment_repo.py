from sqlalchemy.orm import Session
from storefront.data.models.payment import PaymentConfirmationModel


class PaymentRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_confirmation(self, external_payment_id: str) -> PaymentConfirmationModel | None:
        return self.db.get(PaymentConfirmationModel, external_payment_id)

    def add_confirmation(self, confirmation: PaymentConfirmationModel) -> PaymentConfirmationModel:
        self.db.add(confirmation)
        self.db.commit()
        return confirmation

    def rollback(self):
        self.db.rollback()
