#storefront/data/models/discount.py
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class DiscountCodeModel(Base):
    __tablename__ = "discount_codes"

    id = Column(Integer, primary_key=True)
    code = Column(String(64), nullable=False, unique=True, index=True)

    kind = Column(String(16), nullable=False, default="percent")  # percent, fixed
    value = Column(Numeric(10, 2), nullable=False)

    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    active = Column(Boolean, nullable=False, default=True)

    min_order_amount = Column(Numeric(10, 2), nullable=False, default=0)
    max_uses = Column(Integer, nullable=True)
    uses_so_far = Column(Integer, nullable=False, default=0)

    # no rows = applies to every product
    products = relationship(
        "DiscountCodeProductModel",
        back_populates="discount_code",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("kind IN ('percent', 'fixed')", name="ck_discount_kind"),
        CheckConstraint("kind <> 'percent' OR value <= 100", name="ck_discount_percent_max"),
        CheckConstraint("value >= 0", name="ck_discount_value_non_negative"),
        CheckConstraint("max_uses IS NULL OR uses_so_far <= max_uses", name="ck_discount_uses"),
    )


class DiscountCodeProductModel(Base):
    __tablename__ = "discount_code_products"

    id = Column(Integer, primary_key=True)
    discount_code_id = Column(Integer, ForeignKey("discount_codes.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)

    discount_code = relationship("DiscountCodeModel", back_populates="products")

    __table_args__ = (UniqueConstraint("discount_code_id", "product_id", name="u_discount_product"),)
