"""Display ordering and default selection for a product's variants.

Every view that lists products (public catalog, admin table, product detail)
goes through :func:`sort_variants` and :func:`resolve_active_variant`, so the
order and the default variant are the same everywhere. Nothing here touches
the database.
"""
import re
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

from storefront.core.types import VariantType

_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")

GRAMS_PER_KG = 1000.0
GRAMS_PER_MG = 1 / 1000.0
GRAMS_PER_POUND = 453.592
GRAMS_PER_OUNCE = 28.3495


class SortableVariant(Protocol):
    id: str
    variant_type: str
    variant_value: str
    price: int


def parse_numeric_value(value: Optional[str]) -> Optional[float]:
    """Leading magnitude of a value such as '12pcs' -> 12.0, or None."""
    if not value:
        return None
    match = _NUMBER_RE.search(value)
    if not match:
        return None
    return float(match.group(0))


def parse_weight_in_grams(value: Optional[str]) -> Optional[float]:
    """Normalize a weight such as '1kg', '2 lb' or '8oz' to grams.

    A value with a number but no recognised unit is taken as grams already.
    """
    if not value:
        return None
    lower_value = value.lower()
    match = _NUMBER_RE.search(lower_value)
    if not match:
        return None
    number = float(match.group(0))

    if "kg" in lower_value:
        return number * GRAMS_PER_KG
    if "mg" in lower_value:
        return number * GRAMS_PER_MG
    if "lb" in lower_value or "pound" in lower_value:
        return number * GRAMS_PER_POUND
    if "oz" in lower_value or "ounce" in lower_value:
        return number * GRAMS_PER_OUNCE
    return number


def _type_value(variant: SortableVariant) -> str:
    variant_type = variant.variant_type
    return variant_type.value if isinstance(variant_type, VariantType) else str(variant_type)


def uses_weight_ordering(variants: Iterable[SortableVariant]) -> bool:
    return any(_type_value(v) == VariantType.WEIGHT.value for v in variants)


def variant_sort_key(variant: SortableVariant, weight_based: bool = False) -> Tuple:
    """Key equivalent to the pairwise display comparison.

    Variants with a parsed magnitude come first, ascending. The rest are
    ordered by price. Ties fall back to the value, ignoring case.
    """
    parse = parse_weight_in_grams if weight_based else parse_numeric_value
    magnitude = parse(variant.variant_value)
    text = (variant.variant_value or "").casefold()
    if magnitude is not None:
        return (0, magnitude, 0, text)
    return (1, 0.0, variant.price or 0, text)


def sort_variants(variants: Iterable[SortableVariant]) -> List[SortableVariant]:
    """Return a new list of variants in display order.

    If any variant is a weight, all values are compared as grams; otherwise by
    their leading number. The sort is stable, so variants whose values differ
    only by case keep their input order.
    """
    items = list(variants)
    weight_based = uses_weight_ordering(items)
    return sorted(items, key=lambda v: variant_sort_key(v, weight_based))


def resolve_active_variant(
    sorted_variants: Sequence[SortableVariant],
    selected_variant_id: Optional[str] = None,
) -> Optional[SortableVariant]:
    """Pick the variant to show: the caller's selection if it still exists, else the first."""
    if not sorted_variants:
        return None
    if selected_variant_id is not None:
        for variant in sorted_variants:
            if str(variant.id) == str(selected_variant_id):
                return variant
    return sorted_variants[0]
