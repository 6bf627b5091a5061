"""
Cart-level validation.

Folds the partial result of every promotion group into one verdict for the
cart and checkout screens.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..config.models import EngineSettings
from ..models import (
    CartLine,
    MessageType,
    Promotion,
    PromotionId,
    ValidationResult,
    coerce_cart_lines,
    coerce_promotions,
)
from ..shared.logging_utils import get_structured_logger
from ..shared.metrics import record_validation
from .evaluator import evaluate_group
from .grouping import group_by_promotion

logger = logging.getLogger(__name__)
structured_logger = get_structured_logger(__name__)


def _index_promotions(promotions: list[Promotion]) -> dict[PromotionId, Promotion]:
    index: dict[PromotionId, Promotion] = {}
    for promotion in promotions:
        # First record wins when the service repeats an id
        index.setdefault(promotion.id, promotion)
    return index


def validate_cart(
    cart_lines: Iterable[CartLine | Mapping[str, Any]],
    active_promotions: Iterable[Promotion | Mapping[str, Any]],
    settings: EngineSettings | None = None,
) -> ValidationResult:
    """
    Validate a cart against the active promotions.

    Lines tagged with a promotion that is unknown, or that has no rules, are
    skipped without comment. ``is_valid`` reflects error messages only;
    ``can_proceed_to_checkout`` is cleared by the first group that blocks
    checkout and never set again.

    Args:
        cart_lines: Cart lines as models or camelCase mappings
        active_promotions: Promotions as models or camelCase mappings
        settings: Engine settings; defaults when omitted

    Returns:
        ValidationResult for the whole cart
    """
    lines = coerce_cart_lines(cart_lines)
    promotions = _index_promotions(coerce_promotions(active_promotions))

    messages = []
    suggestions = []
    can_proceed_to_checkout = True
    blocking_promotions = 0

    for promotion_id, group in group_by_promotion(lines).items():
        promotion = promotions.get(promotion_id)
        if promotion is None or promotion.rules is None:
            logger.debug(f"No rules to evaluate for promotion {promotion_id}")
            continue

        partial = evaluate_group(promotion, group, settings)
        messages.extend(partial.messages)
        suggestions.extend(partial.suggestions)

        if not partial.is_valid and not partial.can_proceed_to_checkout:
            can_proceed_to_checkout = False
            blocking_promotions += 1

    result = ValidationResult(
        is_valid=all(message.type != MessageType.ERROR for message in messages),
        can_proceed_to_checkout=can_proceed_to_checkout,
        messages=messages,
        suggestions=suggestions,
    )

    record_validation(can_proceed_to_checkout)
    structured_logger.info(
        "Cart validation completed",
        is_valid=result.is_valid,
        can_proceed_to_checkout=result.can_proceed_to_checkout,
        message_count=len(messages),
        suggestion_count=len(suggestions),
        blocking_promotions=blocking_promotions,
    )
    return result


def summarize_violations(result: ValidationResult) -> str:
    """
    One-line summary of the requirements the shopper still has to meet.

    Returns an empty string when nothing is outstanding.
    """
    outstanding = [
        message
        for message in result.messages
        if message.type in (MessageType.WARNING, MessageType.ERROR)
    ]
    if not outstanding:
        return ""
    if len(outstanding) == 1:
        return outstanding[0].message or "Please check your cart items"
    return (
        f"You have {len(outstanding)} promotion requirements to meet. "
        "Check individual promotions for details."
    )
