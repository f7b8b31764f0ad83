from sqlalchemy import Column, DateTime, String
from datetime import datetime, timezone

from storefront.data.database import Base


class PaymentConfirmationModel(Base):
    """
    One row per captured external payment. Inserted once by the capture
    callback, never updated or deleted.
    """
    __tablename__ = "payment_confirmations"

    external_payment_id = Column(String(64), primary_key=True)
    provider = Column(String(30), nullable=False, default="PayPal")
    confirmed_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
