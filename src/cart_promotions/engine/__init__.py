"""
Promotion validation engine.

Pure functions over cart lines and promotions: group lines by promotion,
evaluate each group against its rule, and fold the results into one verdict.
"""

from .aggregator import summarize_violations, validate_cart
from .evaluator import count_free_items, evaluate_group
from .grouping import group_by_promotion, resolve_promotion_id
from .pricing import SpecialPricingResult, calculate_special_pricing
from .schedule import filter_live_promotions, is_promotion_live
from .tips import generate_tips

__all__ = [
    "SpecialPricingResult",
    "calculate_special_pricing",
    "count_free_items",
    "evaluate_group",
    "filter_live_promotions",
    "generate_tips",
    "group_by_promotion",
    "is_promotion_live",
    "resolve_promotion_id",
    "summarize_violations",
    "validate_cart",
]
