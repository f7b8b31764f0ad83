"""Inventory ledger: conditional decrement and stock aggregate sync."""
import pytest
from sqlalchemy import select

from storefront.data.models import ProductModel
from storefront.domain.errors import InsufficientStock, VariantAmbiguous, VariantNotFound
from storefront.services.inventory_service import InventoryService

from conftest import make_product, stock_of


@pytest.fixture
def inventory(db):
    make_product(db, 7, variants=[("black", "M", 5), ("black", "L", 2), ("white", "M", 0)])
    return InventoryService(db)


def test_reserve_decrements(db, inventory):
    variant = inventory.reserve(7, "Black", "m", 2)
    db.commit()

    assert (variant.color, variant.size) == ("black", "M")
    assert stock_of(db, 7, "black", "M") == 3


def test_reserve_exact_stock_reaches_zero(db, inventory):
    inventory.reserve(7, "black", "L", 2)
    db.commit()
    assert stock_of(db, 7, "black", "L") == 0


def test_reserve_insufficient_reports_available(db, inventory):
    with pytest.raises(InsufficientStock) as exc:
        inventory.reserve(7, "black", "L", 3)

    assert exc.value.product_id == 7
    assert exc.value.available == 2
    assert exc.value.to_dict()["variant"] == {"color": "black", "size": "L"}
    assert stock_of(db, 7, "black", "L") == 2


def test_repeated_reserves_never_go_negative(db, inventory):
    inventory.reserve(7, "black", "M", 3)
    with pytest.raises(InsufficientStock):
        inventory.reserve(7, "black", "M", 3)
    inventory.reserve(7, "black", "M", 2)
    db.commit()

    assert stock_of(db, 7, "black", "M") == 0


def test_reserve_resolves_missing_size(db, inventory):
    # black M is the only black size with 4 in stock
    variant = inventory.reserve(7, "black", None, 4)
    assert (variant.color, variant.size) == ("black", "M")


def test_reserve_ambiguous_variant(inventory):
    with pytest.raises(VariantAmbiguous) as exc:
        inventory.reserve(7, "black", None, 1)
    assert exc.value.missing == "size"


def test_reserve_unknown_variant(inventory):
    with pytest.raises(VariantNotFound):
        inventory.reserve(7, "red", "M", 1)


def test_reserve_rejects_non_positive_quantity(inventory):
    with pytest.raises(ValueError):
        inventory.reserve(7, "black", "M", 0)


def test_sync_product_stock(db, inventory):
    make_product(db, 8, variants=[("navy", "ONESIZE", 4)])
    inventory.reserve(7, "black", "M", 1)
    db.commit()

    assert inventory.sync_product_stock([7]) is True

    stocks = dict(db.execute(select(ProductModel.id, ProductModel.stock)).all())
    assert stocks[7] == 6
    # not part of the sync
    assert stocks[8] == 0

    assert inventory.sync_product_stock() is True
    stocks = dict(db.execute(select(ProductModel.id, ProductModel.stock)).all())
    assert stocks[8] == 4
