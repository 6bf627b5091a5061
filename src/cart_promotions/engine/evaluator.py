"""
Rule evaluation for a single promotion group.

Each rule type has one evaluation policy:

- minimum_quantity_same_promotion: hard blocker below the threshold
- minimum_order_value: soft blocker, checkout proceeds without the discount
- buy_x_get_y: hard blocker until one complete set is in the cart
- category_mix: informational only, categories are not cross-checked
- none: always satisfied, no output
"""

import logging
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import assert_never

from ..config.models import DEFAULT_SETTINGS, EngineSettings
from ..models import (
    BuyXGetYRule,
    CartLine,
    CategoryMixRule,
    Message,
    MessageType,
    MinimumOrderValueRule,
    MinimumQuantityRule,
    NoRule,
    Promotion,
    Suggestion,
    SuggestionType,
    ValidationResult,
)
from ..shared.metrics import record_rule_evaluation

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def format_amount(value: Decimal) -> str:
    """Format a money amount with two decimals, rounding half up."""
    return f"{value.quantize(CENTS, rounding=ROUND_HALF_UP):.2f}"


def _plural(count: int) -> str:
    return "s" if count > 1 else ""


def total_quantity(lines: Sequence[CartLine]) -> int:
    return sum(line.quantity for line in lines)


def total_value(lines: Sequence[CartLine]) -> Decimal:
    return sum((line.line_total for line in lines), Decimal("0"))


def count_free_items(quantity: int, buy_quantity: int, get_quantity: int) -> int:
    """
    Count free items earned by complete buy-X-get-Y sets.

    Only whole sets count; a partial set beyond the last complete one earns
    nothing.
    """
    set_size = buy_quantity + get_quantity
    if set_size <= 0 or quantity < set_size:
        return 0
    return (quantity // set_size) * get_quantity


def _message(promotion: Promotion, message_type: MessageType, text: str) -> Message:
    return Message(
        type=message_type,
        message=text,
        promotion_name=promotion.promotion_name,
        promotion_id=promotion.id,
    )


def _evaluate_minimum_quantity(
    promotion: Promotion, rule: MinimumQuantityRule, lines: Sequence[CartLine]
) -> ValidationResult:
    min_quantity = rule.effective_minimum_quantity
    quantity = total_quantity(lines)
    name = promotion.promotion_name

    if quantity < min_quantity:
        needed = min_quantity - quantity
        return ValidationResult(
            is_valid=False,
            can_proceed_to_checkout=False,
            messages=[
                _message(
                    promotion,
                    MessageType.WARNING,
                    f'Add {needed} more item{_plural(needed)} to qualify for "{name}"',
                )
            ],
            suggestions=[
                Suggestion(
                    type=SuggestionType.ADD_MORE,
                    message=(
                        f"You need {min_quantity} items total for this promotion "
                        f"(currently have {quantity})"
                    ),
                    action_text=f"Add {needed} More Item{_plural(needed)}",
                    data={
                        "promotionId": promotion.id,
                        "needed": needed,
                        "minQuantity": min_quantity,
                    },
                )
            ],
        )

    return ValidationResult(
        messages=[
            _message(
                promotion,
                MessageType.SUCCESS,
                f'"{name}" promotion applied! {quantity} items qualify.',
            )
        ]
    )


def _evaluate_minimum_order_value(
    promotion: Promotion,
    rule: MinimumOrderValueRule,
    lines: Sequence[CartLine],
    currency: str,
) -> ValidationResult:
    min_value = rule.effective_minimum_value
    value = total_value(lines)
    name = promotion.promotion_name

    if value < min_value:
        needed = format_amount(min_value - value)
        return ValidationResult(
            is_valid=False,
            # Short of the threshold only forfeits the discount
            can_proceed_to_checkout=True,
            messages=[
                _message(
                    promotion,
                    MessageType.WARNING,
                    f'Spend {currency}{needed} more to qualify for "{name}"',
                )
            ],
            suggestions=[
                Suggestion(
                    type=SuggestionType.ADD_MORE,
                    message=(
                        f"Minimum order value {currency}{format_amount(min_value)} "
                        f"required (currently {currency}{format_amount(value)})"
                    ),
                    action_text=f"Add {currency}{needed} More",
                    data={
                        "promotionId": promotion.id,
                        "needed": needed,
                        "minValue": format_amount(min_value),
                    },
                )
            ],
        )

    return ValidationResult(
        messages=[
            _message(
                promotion,
                MessageType.SUCCESS,
                f'"{name}" promotion applied! Order value: '
                f"{currency}{format_amount(value)}",
            )
        ]
    )


def _evaluate_buy_x_get_y(
    promotion: Promotion, rule: BuyXGetYRule, lines: Sequence[CartLine]
) -> ValidationResult:
    buy_quantity = rule.effective_buy_quantity
    get_quantity = rule.effective_get_quantity
    total_required = buy_quantity + get_quantity
    quantity = total_quantity(lines)
    name = promotion.promotion_name

    if quantity < total_required:
        needed = total_required - quantity
        return ValidationResult(
            is_valid=False,
            can_proceed_to_checkout=False,
            messages=[
                _message(
                    promotion,
                    MessageType.WARNING,
                    f"Add {needed} more item{_plural(needed)} to qualify for "
                    f'"Buy {buy_quantity} Get {get_quantity}" promotion',
                )
            ],
            suggestions=[
                Suggestion(
                    type=SuggestionType.ADD_MORE,
                    message=(
                        f"You need {total_required} items total for Buy "
                        f"{buy_quantity} Get {get_quantity} (currently have {quantity})"
                    ),
                    action_text=f"Add {needed} More Item{_plural(needed)}",
                    data={
                        "promotionId": promotion.id,
                        "needed": needed,
                        "totalRequired": total_required,
                        "buyQuantity": buy_quantity,
                        "getQuantity": get_quantity,
                    },
                )
            ],
        )

    free_items = count_free_items(quantity, buy_quantity, get_quantity)
    return ValidationResult(
        messages=[
            _message(
                promotion,
                MessageType.SUCCESS,
                f'"{name}" applied! You get {free_items} free item{_plural(free_items)}',
            )
        ]
    )


def _evaluate_category_mix(
    promotion: Promotion, rule: CategoryMixRule
) -> ValidationResult:
    # TODO: check line categories against required_categories once cart lines
    # carry category membership from the catalog service.
    logger.debug(
        f"Category mix for promotion {promotion.id} not enforced: "
        f"{rule.effective_minimum_from_each} from each of "
        f"{list(rule.effective_required_categories)}, "
        f"{rule.effective_total_minimum} total"
    )
    return ValidationResult(
        messages=[
            _message(
                promotion,
                MessageType.INFO,
                f'"{promotion.promotion_name}" requires items from multiple categories',
            )
        ]
    )


def evaluate_group(
    promotion: Promotion,
    lines: Sequence[CartLine],
    settings: EngineSettings | None = None,
) -> ValidationResult:
    """
    Evaluate one promotion group against the promotion's rule.

    Args:
        promotion: The promotion the lines are tagged with
        lines: Cart lines in the group
        settings: Engine settings (currency symbol); defaults when omitted

    Returns:
        Partial result for this group only
    """
    settings = settings or DEFAULT_SETTINGS
    rule = promotion.rules

    match rule:
        case None | NoRule():
            return ValidationResult.identity()
        case MinimumQuantityRule():
            result = _evaluate_minimum_quantity(promotion, rule, lines)
        case MinimumOrderValueRule():
            result = _evaluate_minimum_order_value(
                promotion, rule, lines, settings.currency_symbol
            )
        case BuyXGetYRule():
            result = _evaluate_buy_x_get_y(promotion, rule, lines)
        case CategoryMixRule():
            result = _evaluate_category_mix(promotion, rule)
        case _:
            assert_never(rule)

    record_rule_evaluation(rule.type, result.is_valid, result.can_proceed_to_checkout)
    return result
