#storefront/data/models/product.py
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String(500), nullable=True)

    promo_active = Column(Boolean, nullable=False, default=False)
    promo_percent = Column(Numeric(5, 2), nullable=False, default=0)

    # cached SUM(product_variants.stock), never authoritative
    stock = Column(Integer, nullable=False, default=0)

    variants = relationship(
        "ProductVariantModel",
        back_populates="product",
        cascade="all, delete-orphan",
    )


class ProductVariantModel(Base):
    __tablename__ = "product_variants"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)

    # color lower-case, size upper-case
    color = Column(String(50), nullable=False)
    size = Column(String(20), nullable=False)
    stock = Column(Integer, nullable=False, default=0)

    product = relationship("ProductModel", back_populates="variants")

    __table_args__ = (
        UniqueConstraint("product_id", "color", "size", name="u_variant"),
        CheckConstraint("stock >= 0", name="ck_variant_stock_non_negative"),
    )
