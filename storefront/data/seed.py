# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models import (
    CustomerModel,
    DiscountCodeModel,
    ProductModel,
    ProductVariantModel,
)
from storefront.services.inventory_service import InventoryService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def seed():
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return

        db.add(CustomerModel(id=1, first_name="Demo", last_name="Customer", email="demo@example.com"))

        tee = ProductModel(name="Trail Tee", price=Decimal("20.00"), image_url="/img/trail-tee.jpg")
        tee.variants = [
            ProductVariantModel(color="black", size="S", stock=10),
            ProductVariantModel(color="black", size="M", stock=10),
            ProductVariantModel(color="white", size="M", stock=5),
        ]
        cap = ProductModel(
            name="Summit Cap",
            price=Decimal("15.00"),
            image_url="/img/summit-cap.jpg",
            promo_active=True,
            promo_percent=Decimal("20"),
        )
        cap.variants = [ProductVariantModel(color="navy", size="ONESIZE", stock=25)]
        db.add_all([tee, cap])

        db.add(
            DiscountCodeModel(
                code="SAVE10",
                kind="percent",
                value=Decimal("10"),
                min_order_amount=Decimal("30.00"),
            )
        )
        db.commit()

        InventoryService(db).sync_product_stock()
        logger.info("Demo catalog seeded")
    finally:
        db.close()
