# storefront/domain/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from pydantic import BaseModel

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def money(value) -> Decimal:
    """Quantizes to cents, half-up."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def promo_unit_price(price, promo_active: bool, promo_percent) -> Decimal:
    price = Decimal(str(price))
    percent = Decimal(str(promo_percent or 0))
    if promo_active and percent > 0:
        return money(price * (1 - percent / 100))
    return money(price)


class OrderTotals(BaseModel):
    subtotal: Decimal
    discount_amount: Decimal
    tax: Decimal
    shipping_amount: Decimal
    total: Decimal


def subtotal_of(lines: Iterable) -> Decimal:
    return money(sum((line.unit_price * line.quantity for line in lines), ZERO))


def compute_totals(lines, discount_amount, shipping_amount, tax_rate) -> OrderTotals:
    subtotal = subtotal_of(lines)
    # discount is a flat reduction on the whole order, never below zero
    discount = min(max(money(discount_amount or 0), ZERO), subtotal)
    taxable = subtotal - discount
    tax = money(taxable * Decimal(str(tax_rate)))
    shipping = money(shipping_amount or 0)

    return OrderTotals(
        subtotal=subtotal,
        discount_amount=discount,
        tax=tax,
        shipping_amount=shipping,
        total=taxable + tax + shipping,
    )
