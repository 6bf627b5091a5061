"""
Special pricing for satisfied minimum-quantity promotions.

Pricing types:
- fixed_total: the whole group costs ``value``
- extra_discount: ``value`` percent off the group total
- fixed_per_item: every item in the group costs ``value``
"""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from ..models import CamelModel, CartLine, MinimumQuantityRule, Promotion
from .evaluator import CENTS, total_quantity, total_value


class SpecialPricingResult(CamelModel):
    """Group totals after special pricing."""

    current_total: Decimal
    new_total: Decimal
    discount: Decimal
    per_item_price: Decimal | None = None


def _cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_special_pricing(
    promotion: Promotion, lines: Sequence[CartLine]
) -> SpecialPricingResult | None:
    """
    Price a promotion group under its rule's special pricing.

    Args:
        promotion: Promotion whose group is being priced
        lines: Cart lines tagged with the promotion

    Returns:
        Pricing result, or None when the promotion has no special pricing or
        its minimum quantity is not met
    """
    rule = promotion.rules
    if not isinstance(rule, MinimumQuantityRule) or rule.special_pricing is None:
        return None

    quantity = total_quantity(lines)
    if quantity < rule.effective_minimum_quantity:
        return None

    pricing = rule.special_pricing
    current_total = total_value(lines)

    if pricing.type == "fixed_total":
        new_total = pricing.value
        per_item_price = None
    elif pricing.type == "extra_discount":
        new_total = current_total - current_total * pricing.value / 100
        per_item_price = None
    else:
        new_total = pricing.value * quantity
        per_item_price = pricing.value

    return SpecialPricingResult(
        current_total=_cents(current_total),
        new_total=_cents(new_total),
        discount=_cents(current_total - new_total),
        per_item_price=None if per_item_price is None else _cents(per_item_price),
    )
