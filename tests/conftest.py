"""Shared fixtures: in-memory SQLite database, fake redis, eager celery."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from decimal import Decimal

import fakeredis
import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.celery_worker import celery_app
from storefront.data.database import Base
from storefront.data.models import (
    CartLineModel,
    CustomerModel,
    DiscountCodeModel,
    DiscountCodeProductModel,
    ProductModel,
    ProductVariantModel,
)
from storefront.domain.schemas import CheckoutContext, ShippingInfo
from storefront.services.idempotency_service import IdempotencyGuard

celery_app.conf.task_always_eager = True


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def guard(redis_client):
    return IdempotencyGuard(client=redis_client)


@pytest.fixture
def customer(db):
    c = CustomerModel(id=1, first_name="Ana", last_name="Reyes", email="ana@example.com")
    db.add(c)
    db.commit()
    return c


@pytest.fixture
def context(customer):
    return CheckoutContext(customer_id=customer.id, session_id="sess-1")


@pytest.fixture
def shipping():
    return ShippingInfo(
        first_name="Ana",
        last_name="Reyes",
        address="12 Rizal St",
        city="Manila",
        province="Metro Manila",
        zipcode="1000",
        phone="0917000000",
        email="ana@example.com",
    )


def make_product(db, product_id, price="20.00", variants=(), name=None, promo_percent=None):
    product = ProductModel(
        id=product_id,
        name=name or f"Product {product_id}",
        price=Decimal(price),
        image_url=f"/img/{product_id}.jpg",
        promo_active=promo_percent is not None,
        promo_percent=Decimal(str(promo_percent or 0)),
    )
    product.variants = [
        ProductVariantModel(color=color, size=size, stock=stock)
        for color, size, stock in variants
    ]
    db.add(product)
    db.commit()
    return product


def add_cart_line(db, customer_id, product_id, color="black", size="M", quantity=1):
    line = CartLineModel(
        customer_id=customer_id,
        product_id=product_id,
        color=color,
        size=size,
        quantity=quantity,
    )
    db.add(line)
    db.commit()
    return line.id


def make_discount(db, code="SAVE10", kind="percent", value="10", min_order="0", scope=(), **kwargs):
    discount = DiscountCodeModel(
        code=code,
        kind=kind,
        value=Decimal(value),
        min_order_amount=Decimal(min_order),
        **kwargs,
    )
    discount.products = [DiscountCodeProductModel(product_id=pid) for pid in scope]
    db.add(discount)
    db.commit()
    return discount


def stock_of(db, product_id, color, size):
    return db.execute(
        select(ProductVariantModel.stock).where(
            ProductVariantModel.product_id == product_id,
            ProductVariantModel.color == color,
            ProductVariantModel.size == size,
        )
    ).scalar_one()


def uses_of(db, code):
    return db.execute(
        select(DiscountCodeModel.uses_so_far).where(DiscountCodeModel.code == code)
    ).scalar_one()
