import random
from types import SimpleNamespace

import pytest

from storefront.services.variant_ordering import (
    parse_numeric_value,
    parse_weight_in_grams,
    resolve_active_variant,
    sort_variants,
)


def make_variants(values, variant_type="pcs", prices=None):
    prices = prices or [0] * len(values)
    return [
        SimpleNamespace(id=f"v{i}", variant_type=variant_type, variant_value=value, price=price)
        for i, (value, price) in enumerate(zip(values, prices))
    ]


def values_of(variants):
    return [v.variant_value for v in variants]


def test_weights_sorted_by_grams():
    variants = make_variants(["1kg", "500g", "250g"], variant_type="weight")

    assert values_of(sort_variants(variants)) == ["250g", "500g", "1kg"]


def test_pounds_compared_against_grams():
    """2lb is about 907g, lighter than 1000g"""
    variants = make_variants(["1000g", "2lb"], variant_type="weight")

    assert values_of(sort_variants(variants)) == ["2lb", "1000g"]


def test_small_units_and_decimals():
    variants = make_variants(["1.5kg", "8oz", "500mg", "1200g"], variant_type="weight")

    assert values_of(sort_variants(variants)) == ["500mg", "8oz", "1200g", "1.5kg"]


def test_milligrams_are_thousandths_of_a_gram():
    # "mg" is matched before the bare gram case, so 500mg is 0.5g, not 500g
    assert parse_weight_in_grams("500mg") == pytest.approx(0.5)
    variants = make_variants(["100g", "500mg"], variant_type="weight")

    assert values_of(sort_variants(variants)) == ["500mg", "100g"]


def test_piece_counts_sorted_numerically():
    variants = make_variants(["12pcs", "6pcs"])

    assert values_of(sort_variants(variants)) == ["6pcs", "12pcs"]


def test_unparseable_values_with_equal_price_sort_alphabetically():
    variants = make_variants(["Small", "Large"], variant_type="size", prices=[100, 100])

    assert values_of(sort_variants(variants)) == ["Large", "Small"]


def test_unparseable_values_sort_by_price_first():
    variants = make_variants(["Large", "Small"], variant_type="size", prices=[500, 300])

    assert values_of(sort_variants(variants)) == ["Small", "Large"]


def test_alphabetical_fallback_ignores_case():
    variants = make_variants(["banana", "Cherry", "apple"], variant_type="flavor")

    assert values_of(sort_variants(variants)) == ["apple", "banana", "Cherry"]


def test_parsed_values_come_before_unparsed():
    variants = make_variants(["Family pack", "6pcs", "default"], prices=[0, 900, 0])

    assert values_of(sort_variants(variants)) == ["6pcs", "default", "Family pack"]


def test_any_weight_variant_switches_whole_set_to_grams():
    variants = make_variants(["1kg", "500"], variant_type="weight")
    variants[1].variant_type = "pcs"

    # 500 has no unit, so it counts as 500 grams
    assert values_of(sort_variants(variants)) == ["500", "1kg"]


def test_sorting_is_deterministic_and_does_not_mutate_input():
    variants = make_variants(["2kg", "250g", "Sample", "750g", "1lb"], variant_type="weight")
    original = list(variants)

    first = sort_variants(variants)
    second = sort_variants(variants)

    assert [v.id for v in first] == [v.id for v in second]
    assert variants == original

    shuffled = list(variants)
    random.Random(7).shuffle(shuffled)
    assert [v.id for v in sort_variants(shuffled)] == [v.id for v in first]


@pytest.mark.parametrize(
    "value, expected",
    [
        ("250g", 250.0),
        ("1KG", 1000.0),
        ("2 pounds", 2 * 453.592),
        ("3 ounces", 3 * 28.3495),
        ("750mg", 0.75),
        ("42", 42.0),
        ("Sample", None),
        ("", None),
    ],
)
def test_parse_weight_in_grams(value, expected):
    result = parse_weight_in_grams(value)
    if expected is None:
        assert result is None
    else:
        assert result == pytest.approx(expected)


def test_parse_numeric_value():
    assert parse_numeric_value("12pcs") == 12.0
    assert parse_numeric_value("size 10.5") == 10.5
    assert parse_numeric_value("Small Pack") is None


def test_active_variant_defaults_to_first():
    ordered = sort_variants(make_variants(["12pcs", "6pcs"]))

    assert resolve_active_variant(ordered).variant_value == "6pcs"


def test_active_variant_keeps_existing_selection():
    ordered = sort_variants(make_variants(["12pcs", "6pcs"]))
    selected = next(v for v in ordered if v.variant_value == "12pcs")

    assert resolve_active_variant(ordered, selected.id) is selected


def test_active_variant_resets_when_selection_is_gone():
    ordered = sort_variants(make_variants(["12pcs", "6pcs"]))

    assert resolve_active_variant(ordered, "deleted-variant").variant_value == "6pcs"


def test_active_variant_of_empty_list():
    assert resolve_active_variant([]) is None
