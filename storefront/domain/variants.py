# storefront/domain/variants.py
"""
Variant resolution for cart lines that do not name both a color and a size.

Pure functions only: the caller loads the product's variant rows and decides
what to do with the result.
"""
from dataclasses import dataclass
from typing import Iterable, Sequence, Union


@dataclass(frozen=True)
class VariantStock:
    color: str
    size: str
    stock: int


@dataclass(frozen=True)
class Resolved:
    color: str
    size: str


@dataclass(frozen=True)
class Ambiguous:
    missing: str  # "size", "color" or "color and size"


@dataclass(frozen=True)
class NotFound:
    pass


VariantResolution = Union[Resolved, Ambiguous, NotFound]


def normalize_color(color: str | None) -> str | None:
    if color is None:
        return None
    color = str(color).strip().lower()
    return color or None


def normalize_size(size: str | None) -> str | None:
    if size is None:
        return None
    size = str(size).strip().upper()
    return size or None


def _single(rows: Sequence[VariantStock]) -> VariantStock | None:
    return rows[0] if len(rows) == 1 else None


def resolve_variant(
    variants: Iterable[VariantStock],
    color: str | None,
    size: str | None,
    quantity: int,
    one_size_labels: Iterable[str] = (),
) -> VariantResolution:
    """
    Picks the (color, size) a cart line refers to.

    - both given: the pair has to exist
    - one given: a single sibling with enough stock, else the only sibling
    - none given: a single variant with enough stock, else the only variant,
      else a single "one size" variant with enough stock
    """
    color = normalize_color(color)
    size = normalize_size(size)
    rows = [
        VariantStock(normalize_color(v.color), normalize_size(v.size), int(v.stock or 0))
        for v in variants
    ]

    if color and size:
        for r in rows:
            if r.color == color and r.size == size:
                return Resolved(r.color, r.size)
        return NotFound()

    if color or size:
        if color:
            candidates = [r for r in rows if r.color == color]
            missing = "size"
        else:
            candidates = [r for r in rows if r.size == size]
            missing = "color"

        if not candidates:
            return NotFound()

        pick = _single([r for r in candidates if r.stock >= quantity]) or _single(candidates)
        if pick:
            return Resolved(pick.color, pick.size)
        return Ambiguous(missing)

    if not rows:
        return NotFound()

    sufficient = [r for r in rows if r.stock >= quantity]
    pick = _single(sufficient) or _single(rows)
    if pick:
        return Resolved(pick.color, pick.size)

    labels = {normalize_size(label) for label in one_size_labels}
    pick = _single([r for r in sufficient if r.size in labels])
    if pick:
        return Resolved(pick.color, pick.size)

    return Ambiguous("color and size")
