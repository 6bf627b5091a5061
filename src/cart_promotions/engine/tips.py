"""Marketing tips for active promotions."""

from collections.abc import Iterable, Mapping
from typing import Any

from ..config.models import DEFAULT_SETTINGS, EngineSettings
from ..models import (
    BuyXGetYRule,
    CartLine,
    MinimumOrderValueRule,
    MinimumQuantityRule,
    Promotion,
    coerce_promotions,
)
from .evaluator import format_amount


def generate_tips(
    promotions: Iterable[Promotion | Mapping[str, Any]],
    cart_lines: Iterable[CartLine | Mapping[str, Any]] | None = None,
    settings: EngineSettings | None = None,
) -> list[str]:
    """
    Build one encouragement line per active promotion with a threshold rule.

    Tips are promotion-level copy; ``cart_lines`` is accepted for callers that
    render tips beside the cart but does not change the output.
    """
    settings = settings or DEFAULT_SETTINGS
    prefix = settings.tip_prefix
    tips = []

    for promotion in coerce_promotions(promotions):
        if not promotion.is_active:
            continue

        name = promotion.promotion_name
        match promotion.rules:
            case MinimumQuantityRule() as rule:
                tips.append(
                    f"{prefix}Add {rule.effective_minimum_quantity} items from "
                    f'"{name}" to get the special pricing!'
                )
            case BuyXGetYRule() as rule:
                tips.append(
                    f"{prefix}Buy {rule.effective_buy_quantity} items and get "
                    f'{rule.effective_get_quantity} free in "{name}"!'
                )
            case MinimumOrderValueRule() as rule:
                tips.append(
                    f"{prefix}Spend {settings.currency_symbol}"
                    f"{format_amount(rule.effective_minimum_value)} or more to "
                    f'qualify for "{name}"!'
                )
            case _:
                continue

    return tips
