"""Variant resolution for cart lines missing a color and/or size."""
from storefront.domain.variants import (
    Ambiguous,
    NotFound,
    Resolved,
    VariantStock,
    resolve_variant,
)

LABELS = ("ONE", "ONESIZE", "OS", "FREE", "UNIV")


def v(color, size, stock):
    return VariantStock(color, size, stock)


def test_both_given_exact_match_is_normalized():
    rows = [v("black", "M", 3)]
    assert resolve_variant(rows, " Black ", "m", 1) == Resolved("black", "M")


def test_both_given_unknown_pair():
    rows = [v("black", "M", 3)]
    assert resolve_variant(rows, "white", "M", 1) == NotFound()


def test_both_given_resolves_even_without_stock():
    # the decrement decides about stock, not the resolver
    rows = [v("black", "M", 0)]
    assert resolve_variant(rows, "black", "M", 5) == Resolved("black", "M")


def test_color_only_single_size_with_enough_stock():
    rows = [v("black", "S", 0), v("black", "M", 4), v("white", "L", 9)]
    assert resolve_variant(rows, "black", None, 2) == Resolved("black", "M")


def test_color_only_single_size_even_without_stock():
    rows = [v("black", "S", 0), v("white", "L", 9)]
    assert resolve_variant(rows, "black", None, 2) == Resolved("black", "S")


def test_color_only_ambiguous():
    rows = [v("black", "S", 5), v("black", "M", 5)]
    assert resolve_variant(rows, "black", None, 1) == Ambiguous("size")


def test_color_only_unknown_color():
    rows = [v("black", "S", 5)]
    assert resolve_variant(rows, "red", None, 1) == NotFound()


def test_size_only_is_symmetric():
    rows = [v("black", "M", 0), v("white", "M", 3), v("white", "L", 3)]
    assert resolve_variant(rows, None, "m", 1) == Resolved("white", "M")

    rows = [v("black", "M", 3), v("white", "M", 3)]
    assert resolve_variant(rows, None, "M", 1) == Ambiguous("color")


def test_nothing_given_single_sufficient_variant():
    rows = [v("black", "S", 0), v("black", "M", 1), v("white", "M", 5)]
    assert resolve_variant(rows, None, None, 3) == Resolved("white", "M")


def test_nothing_given_single_variant_total():
    rows = [v("navy", "ONESIZE", 0)]
    assert resolve_variant(rows, None, None, 2) == Resolved("navy", "ONESIZE")


def test_nothing_given_prefers_one_size_label():
    rows = [v("navy", "OS", 5), v("navy", "XL", 5)]
    assert resolve_variant(rows, None, None, 1, LABELS) == Resolved("navy", "OS")


def test_nothing_given_one_size_label_needs_stock():
    rows = [v("navy", "OS", 0), v("navy", "XL", 5), v("red", "XL", 5)]
    assert resolve_variant(rows, None, None, 1, LABELS) == Ambiguous("color and size")


def test_nothing_given_without_variants():
    assert resolve_variant([], None, None, 1, LABELS) == NotFound()


def test_blank_strings_count_as_missing():
    rows = [v("black", "M", 2)]
    assert resolve_variant(rows, "", "  ", 1) == Resolved("black", "M")
